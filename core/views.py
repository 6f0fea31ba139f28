from django.contrib import messages
from django.core.exceptions import ValidationError
from django.http import Http404
from django.shortcuts import redirect, render
from django.urls import reverse
from django.views.decorators.http import require_POST

from .cart import Cart
from .conf import shop_setting
from .exceptions import CartError, LedgerError, RecordNotFound
from .forms import (
    CartCustomerForm, CartQuantityForm, CheckoutForm, CustomerForm,
    PaymentForm, ProductForm, RestockForm, SearchForm, SupplierForm,
)
from .ledger import Ledger
from . import reports


def _record_or_404(ledger, table, record_id):
    try:
        return ledger.state.get(table, record_id)
    except RecordNotFound:
        raise Http404(f"No such record in {table}")


def _attempt(request, failure_message, operation, *args):
    """Run a ledger operation, turning its failures into user messages.

    Returns ``(succeeded, result)``.
    """
    try:
        return True, operation(*args)
    except ValidationError as exc:
        messages.error(request, ' '.join(exc.messages))
    except LedgerError:
        messages.error(request, failure_message)
    return False, None


def _render_form(request, form, title, submit_label, cancel_url):
    context = {
        'form': form,
        'title': title,
        'submit_label': submit_label,
        'cancel_url': cancel_url,
    }
    return render(request, 'core/form.html', context)


def _confirm_delete(request, record, kind, cancel_url):
    context = {
        'record': record,
        'kind': kind,
        'cancel_url': cancel_url,
    }
    return render(request, 'core/confirm_delete.html', context)


# Dashboard

def dashboard_view(request):
    """Dashboard with stock value, sales, udhaar, payables and monthly performance"""
    ledger = Ledger.load()
    context = {
        'stats': reports.dashboard_stats(ledger.state),
        'monthly': reports.monthly_performance(ledger.state.sales.values()),
        'months': shop_setting('DASHBOARD_MONTHS'),
        'low_stock_products': reports.low_stock(ledger.state.products.values()),
    }
    return render(request, 'core/dashboard.html', context)


# Point of sale

def pos_view(request):
    """Point of sale: product grid, cart and checkout buttons"""
    ledger = Ledger.load()
    cart = Cart(request.session)
    search_form = SearchForm(request.GET)
    state = ledger.state

    cart_rows = []
    for product_id, quantity in cart.quantities.items():
        product = state.products.get(product_id)
        if product is not None:
            cart_rows.append({
                'product': product,
                'quantity': quantity,
                'line_total': product.selling_price * quantity,
            })

    context = {
        'search_form': search_form,
        'products': reports.sellable_products(state.products.values(), search_form.term()),
        'cart_rows': cart_rows,
        'cart_total': cart.total(state),
        'customer_form': CartCustomerForm(
            customers=state.customers.values(),
            initial={'customer': cart.customer_id or ''},
        ),
        'has_customer': cart.customer_id in state.customers,
    }
    return render(request, 'core/pos.html', context)


@require_POST
def cart_add(request, product_id):
    """Add one unit of a product to the cart"""
    ledger = Ledger.load()
    product = _record_or_404(ledger, 'products', product_id)
    try:
        Cart(request.session).add(product)
    except CartError as exc:
        messages.error(request, str(exc))
    return redirect('core:pos')


@require_POST
def cart_update(request, product_id):
    """Set a cart line quantity, capped at available stock"""
    ledger = Ledger.load()
    product = _record_or_404(ledger, 'products', product_id)
    form = CartQuantityForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Enter a whole number quantity.')
        return redirect('core:pos')

    requested = form.cleaned_data['quantity']
    kept = Cart(request.session).set_quantity(product, requested)
    if requested > 0 and kept < requested:
        messages.warning(request, 'Cannot set quantity more than available stock.')
    return redirect('core:pos')


@require_POST
def cart_remove(request, product_id):
    """Remove a product from the cart"""
    Cart(request.session).remove(product_id)
    return redirect('core:pos')


@require_POST
def cart_customer(request):
    """Choose the customer for the sale, or walk-in"""
    ledger = Ledger.load()
    form = CartCustomerForm(request.POST, customers=ledger.state.customers.values())
    if form.is_valid():
        Cart(request.session).select_customer(form.cleaned_data['customer'])
    else:
        messages.error(request, 'Select a customer from the list.')
    return redirect('core:pos')


@require_POST
def checkout(request):
    """Complete the sale in the cart as paid or udhaar"""
    ledger = Ledger.load()
    cart = Cart(request.session)
    form = CheckoutForm(request.POST)
    if not form.is_valid():
        messages.error(request, 'Choose whether the sale is paid or udhaar.')
        return redirect('core:pos')

    payment_status = form.cleaned_data['payment_status']
    try:
        sale = ledger.checkout(cart.checkout_input(ledger.state, payment_status))
    except CartError as exc:
        messages.error(request, str(exc))
    except ValidationError as exc:
        messages.error(request, ' '.join(exc.messages))
    except LedgerError:
        messages.error(
            request,
            'The sale could not be completed due to a database error. Please try again.',
        )
    else:
        cart.clear()
        messages.success(request, f'Sale completed as {sale.payment_status}!')
    return redirect('core:pos')


# Stock

def product_list(request):
    """Stock list with search and low-stock highlighting"""
    ledger = Ledger.load()
    search_form = SearchForm(request.GET)
    context = {
        'search_form': search_form,
        'products': reports.search(ledger.state.products.values(), search_form.term()),
        'suppliers': ledger.state.suppliers,
        'low_stock_threshold': shop_setting('LOW_STOCK_THRESHOLD'),
    }
    return render(request, 'core/product_list.html', context)


def create_product(request):
    """Add a product, optionally on supplier credit"""
    ledger = Ledger.load()
    suppliers = ledger.state.suppliers.values()
    form = ProductForm(request.POST or None, suppliers=suppliers)
    if request.method == 'POST' and form.is_valid():
        ok, product = _attempt(
            request, 'Error: Could not save product data.',
            ledger.create_product, form.to_input(), form.cleaned_data['credit_purchase'],
        )
        if ok:
            messages.success(request, f'Product "{product.name}" added.')
            return redirect('core:product_list')
    return _render_form(request, form, 'Add New Product', 'Add Product', reverse('core:product_list'))


def edit_product(request, product_id):
    """Edit product details - stock changes only through restock and sales"""
    ledger = Ledger.load()
    product = _record_or_404(ledger, 'products', product_id)
    form = ProductForm.for_product(product, ledger.state.suppliers.values(), request.POST or None)
    if request.method == 'POST' and form.is_valid():
        ok, updated = _attempt(
            request, 'Error: Could not save product data.',
            ledger.update_product, product.pk, form.to_input(),
        )
        if ok:
            messages.success(request, f'Product "{updated.name}" updated.')
            return redirect('core:product_list')
    return _render_form(request, form, f'Edit {product.name}', 'Update Product', reverse('core:product_list'))


def restock_product(request, product_id):
    """Add stock at a new purchase price"""
    ledger = Ledger.load()
    product = _record_or_404(ledger, 'products', product_id)
    form = RestockForm(request.POST or None, initial={'purchase_price': product.purchase_price})
    if request.method == 'POST' and form.is_valid():
        ok, restocked = _attempt(
            request, 'Error: Could not restock product.',
            ledger.restock_product, product.pk, form.to_input(),
        )
        if ok:
            messages.success(request, f'{restocked.name} restocked. New stock: {restocked.stock}')
            return redirect('core:product_list')
    return _render_form(request, form, f'Restock {product.name}', 'Restock Product', reverse('core:product_list'))


def delete_product(request, product_id):
    """Confirm and delete a product"""
    ledger = Ledger.load()
    product = _record_or_404(ledger, 'products', product_id)
    if request.method == 'POST':
        ok, _ = _attempt(request, 'Error: Could not delete product.', ledger.delete_product, product.pk)
        if ok:
            messages.success(request, f'Product "{product.name}" deleted.')
        return redirect('core:product_list')
    return _confirm_delete(request, product, 'product', reverse('core:product_list'))


# Customers

def customer_list(request):
    """Customers with their udhaar balances"""
    ledger = Ledger.load()
    search_form = SearchForm(request.GET)
    context = {
        'search_form': search_form,
        'customers': reports.search(ledger.state.customers.values(), search_form.term()),
        'total_receivables': reports.dashboard_stats(ledger.state)['total_receivables'],
    }
    return render(request, 'core/customer_list.html', context)


def create_customer(request):
    """Add a new customer"""
    ledger = Ledger.load()
    form = CustomerForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        ok, customer = _attempt(
            request, 'Error: Could not save customer data.',
            ledger.create_customer, form.to_input(),
        )
        if ok:
            messages.success(request, f'Customer "{customer.name}" created successfully!')
            return redirect('core:customer_list')
    return _render_form(request, form, 'Add New Customer', 'Add Customer', reverse('core:customer_list'))


def edit_customer(request, customer_id):
    """Edit customer contact details"""
    ledger = Ledger.load()
    customer = _record_or_404(ledger, 'customers', customer_id)
    form = CustomerForm(request.POST or None, initial={
        'name': customer.name,
        'phone': customer.phone,
        'address': customer.address,
    })
    if request.method == 'POST' and form.is_valid():
        ok, updated = _attempt(
            request, 'Error: Could not save customer data.',
            ledger.update_customer, customer.pk, form.to_input(),
        )
        if ok:
            messages.success(request, f'Customer "{updated.name}" updated successfully!')
            return redirect('core:customer_detail', customer_id=updated.pk)
    return _render_form(
        request, form, f'Edit {customer.name}', 'Update Customer',
        reverse('core:customer_detail', args=[customer.pk]),
    )


def customer_detail(request, customer_id, payment_form=None):
    """Customer sales history and payment form"""
    ledger = Ledger.load()
    customer = _record_or_404(ledger, 'customers', customer_id)
    context = {
        'customer': customer,
        'sales': reports.customer_sales(ledger.state, customer.pk),
        'payment_form': payment_form or PaymentForm(),
    }
    return render(request, 'core/customer_detail.html', context)


@require_POST
def receive_customer_payment(request, customer_id):
    """Record a payment received from a customer"""
    ledger = Ledger.load()
    customer = _record_or_404(ledger, 'customers', customer_id)
    form = PaymentForm(request.POST)
    if not form.is_valid():
        return customer_detail(request, customer.pk, payment_form=form)
    ok, paid = _attempt(
        request, 'Error: Could not process payment.',
        ledger.receive_payment, form.to_input('customer', customer.pk),
    )
    if ok:
        messages.success(request, f'Payment recorded. Udhaar is now {paid.balance}')
    return redirect('core:customer_detail', customer_id=customer_id)


def delete_customer(request, customer_id):
    """Confirm and delete a customer - their sales are kept"""
    ledger = Ledger.load()
    customer = _record_or_404(ledger, 'customers', customer_id)
    if request.method == 'POST':
        ok, _ = _attempt(request, 'Error: Could not delete customer.', ledger.delete_customer, customer.pk)
        if ok:
            messages.success(request, f'Customer "{customer.name}" deleted.')
        return redirect('core:customer_list')
    return _confirm_delete(request, customer, 'customer', reverse('core:customer_detail', args=[customer.pk]))


# Suppliers

def supplier_list(request):
    """Suppliers with the amounts owed to them"""
    ledger = Ledger.load()
    search_form = SearchForm(request.GET)
    context = {
        'search_form': search_form,
        'suppliers': reports.search(ledger.state.suppliers.values(), search_form.term()),
        'total_payables': reports.dashboard_stats(ledger.state)['total_payables'],
    }
    return render(request, 'core/supplier_list.html', context)


def create_supplier(request):
    """Add a new supplier"""
    ledger = Ledger.load()
    form = SupplierForm(request.POST or None)
    if request.method == 'POST' and form.is_valid():
        ok, supplier = _attempt(
            request, 'Error: Could not save supplier data.',
            ledger.create_supplier, form.to_input(),
        )
        if ok:
            messages.success(request, f'Supplier "{supplier.name}" created successfully!')
            return redirect('core:supplier_list')
    return _render_form(request, form, 'Add New Supplier', 'Add Supplier', reverse('core:supplier_list'))


def edit_supplier(request, supplier_id):
    """Edit supplier contact details"""
    ledger = Ledger.load()
    supplier = _record_or_404(ledger, 'suppliers', supplier_id)
    form = SupplierForm(request.POST or None, initial={
        'name': supplier.name,
        'contact_person': supplier.contact_person,
        'phone': supplier.phone,
    })
    if request.method == 'POST' and form.is_valid():
        ok, updated = _attempt(
            request, 'Error: Could not save supplier data.',
            ledger.update_supplier, supplier.pk, form.to_input(),
        )
        if ok:
            messages.success(request, f'Supplier "{updated.name}" updated successfully!')
            return redirect('core:supplier_detail', supplier_id=updated.pk)
    return _render_form(
        request, form, f'Edit {supplier.name}', 'Update Supplier',
        reverse('core:supplier_detail', args=[supplier.pk]),
    )


def supplier_detail(request, supplier_id, payment_form=None):
    """Supplier products and payment form"""
    ledger = Ledger.load()
    supplier = _record_or_404(ledger, 'suppliers', supplier_id)
    context = {
        'supplier': supplier,
        'products': [p for p in ledger.state.products.values() if p.supplier_id == supplier.pk],
        'payment_form': payment_form or PaymentForm(),
    }
    return render(request, 'core/supplier_detail.html', context)


@require_POST
def make_supplier_payment(request, supplier_id):
    """Record a payment made to a supplier"""
    ledger = Ledger.load()
    supplier = _record_or_404(ledger, 'suppliers', supplier_id)
    form = PaymentForm(request.POST)
    if not form.is_valid():
        return supplier_detail(request, supplier.pk, payment_form=form)
    ok, paid = _attempt(
        request, 'Error: Could not process payment.',
        ledger.receive_payment, form.to_input('supplier', supplier.pk),
    )
    if ok:
        messages.success(request, f'Payment recorded. Payable is now {paid.balance}')
    return redirect('core:supplier_detail', supplier_id=supplier_id)


def delete_supplier(request, supplier_id):
    """Confirm and delete a supplier - their products are kept"""
    ledger = Ledger.load()
    supplier = _record_or_404(ledger, 'suppliers', supplier_id)
    if request.method == 'POST':
        ok, _ = _attempt(request, 'Error: Could not delete supplier.', ledger.delete_supplier, supplier.pk)
        if ok:
            messages.success(request, f'Supplier "{supplier.name}" deleted.')
        return redirect('core:supplier_list')
    return _confirm_delete(request, supplier, 'supplier', reverse('core:supplier_detail', args=[supplier.pk]))


# Reports

def report_list(request):
    """All sales, newest first"""
    ledger = Ledger.load()
    return render(request, 'core/report_list.html', {'rows': reports.sales_report(ledger.state)})


def sale_detail(request, sale_id):
    """Line items of a single sale"""
    ledger = Ledger.load()
    sale = _record_or_404(ledger, 'sales', sale_id)
    context = {
        'sale': sale,
        'customer_name': reports.customer_name(ledger.state, sale),
        'items': sale.items.all(),
    }
    return render(request, 'core/sale_detail.html', context)
