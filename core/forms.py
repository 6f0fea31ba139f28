from decimal import Decimal

from django import forms
from django.core.exceptions import ValidationError

from .inputs import (
    PAID, UNPAID, CustomerInput, PaymentInput, ProductDetailsInput,
    ProductInput, RestockInput, SupplierInput,
)


def _price_field(label):
    return forms.DecimalField(
        label=label,
        min_value=Decimal('0'),
        max_digits=14,
        decimal_places=2,
        widget=forms.NumberInput(attrs={'step': '0.01', 'min': '0'}),
    )


class ProductForm(forms.Form):
    """Add or edit a product. Opening stock and credit purchase only apply when adding"""
    name = forms.CharField(max_length=200, widget=forms.TextInput(attrs={'placeholder': 'Product Name'}))
    category = forms.CharField(max_length=100, widget=forms.TextInput(attrs={'placeholder': 'Category'}))
    supplier = forms.ChoiceField(required=False)
    stock = forms.IntegerField(
        label="Initial Stock Quantity",
        min_value=0,
        widget=forms.NumberInput(attrs={'min': '0'}),
    )
    purchase_price = _price_field("Purchase Price")
    selling_price = _price_field("Selling Price")
    credit_purchase = forms.BooleanField(
        required=False,
        label="Add this initial stock to supplier's credit balance",
    )

    def __init__(self, *args, **kwargs):
        suppliers = kwargs.pop('suppliers', ())
        self.editing = kwargs.pop('editing', False)
        super().__init__(*args, **kwargs)
        self.fields['supplier'].choices = [('', 'Select Supplier')] + [
            (supplier.pk, supplier.name) for supplier in suppliers
        ]
        if self.editing:
            del self.fields['stock']
            del self.fields['credit_purchase']

    @classmethod
    def for_product(cls, product, suppliers, data=None):
        return cls(
            data,
            suppliers=suppliers,
            editing=True,
            initial={
                'name': product.name,
                'category': product.category,
                'supplier': product.supplier_id or '',
                'purchase_price': product.purchase_price,
                'selling_price': product.selling_price,
            },
        )

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if not name:
            raise ValidationError("Product name is required.")
        return name

    def clean_category(self):
        category = self.cleaned_data.get('category', '').strip()
        if not category:
            raise ValidationError("Category is required.")
        return category

    def clean(self):
        cleaned_data = super().clean()
        if cleaned_data.get('credit_purchase') and not cleaned_data.get('supplier'):
            self.add_error('supplier', "Select the supplier to credit for this stock.")
        return cleaned_data

    def to_input(self):
        data = self.cleaned_data
        details = {
            'name': data['name'],
            'category': data['category'],
            'supplier_id': data['supplier'] or None,
            'purchase_price': data['purchase_price'],
            'selling_price': data['selling_price'],
        }
        if self.editing:
            return ProductDetailsInput(**details)
        return ProductInput(stock=data['stock'], **details)


class RestockForm(forms.Form):
    quantity = forms.IntegerField(
        label="Quantity to Add",
        min_value=1,
        widget=forms.NumberInput(attrs={'min': '1'}),
    )
    purchase_price = _price_field("Purchase Price (per item)")
    on_credit = forms.BooleanField(
        required=False,
        label="This is a credit purchase (update supplier balance)",
    )

    def to_input(self):
        return RestockInput(
            quantity=self.cleaned_data['quantity'],
            purchase_price=self.cleaned_data['purchase_price'],
            on_credit=self.cleaned_data['on_credit'],
        )


class CustomerForm(forms.Form):
    name = forms.CharField(max_length=200, widget=forms.TextInput(attrs={'placeholder': 'Customer Name'}))
    phone = forms.CharField(max_length=30, required=False, widget=forms.TextInput(attrs={'placeholder': 'Phone Number'}))
    address = forms.CharField(max_length=255, required=False, widget=forms.TextInput(attrs={'placeholder': 'Address'}))

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if not name:
            raise ValidationError("Customer name is required.")
        return name

    def to_input(self):
        return CustomerInput(**self.cleaned_data)


class SupplierForm(forms.Form):
    name = forms.CharField(max_length=200, widget=forms.TextInput(attrs={'placeholder': 'Supplier Name'}))
    contact_person = forms.CharField(max_length=200, required=False, widget=forms.TextInput(attrs={'placeholder': 'Contact Person'}))
    phone = forms.CharField(max_length=30, required=False, widget=forms.TextInput(attrs={'placeholder': 'Phone Number'}))

    def clean_name(self):
        name = self.cleaned_data.get('name', '').strip()
        if not name:
            raise ValidationError("Supplier name is required.")
        return name

    def to_input(self):
        return SupplierInput(**self.cleaned_data)


class PaymentForm(forms.Form):
    """Payment received from a customer or made to a supplier"""
    amount = forms.DecimalField(
        max_digits=14,
        decimal_places=2,
        widget=forms.NumberInput(attrs={'step': '0.01', 'min': '0.01', 'placeholder': 'Enter amount'}),
    )

    def clean_amount(self):
        amount = self.cleaned_data.get('amount')
        if amount is None or amount <= 0:
            raise ValidationError("Payment amount must be greater than 0.")
        return amount

    def to_input(self, party_type, party_id):
        return PaymentInput(party_type=party_type, party_id=party_id, amount=self.cleaned_data['amount'])


class SearchForm(forms.Form):
    search = forms.CharField(
        max_length=100,
        required=False,
        widget=forms.TextInput(attrs={'placeholder': 'Search by name...', 'class': 'form-control'}),
    )

    def term(self):
        if self.is_valid():
            return self.cleaned_data['search']
        return ''


class CartQuantityForm(forms.Form):
    quantity = forms.IntegerField()


class CartCustomerForm(forms.Form):
    customer = forms.ChoiceField(required=False)

    def __init__(self, *args, **kwargs):
        customers = kwargs.pop('customers', ())
        super().__init__(*args, **kwargs)
        self.fields['customer'].choices = [('', 'Walk-in Customer')] + [
            (customer.pk, customer.name) for customer in customers
        ]


class CheckoutForm(forms.Form):
    payment_status = forms.ChoiceField(choices=[(PAID, 'Paid'), (UNPAID, 'Udhaar')])
