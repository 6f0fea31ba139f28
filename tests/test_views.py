from decimal import Decimal

from django.test import TestCase
from django.urls import reverse

from core.cart import CART_SESSION_KEY
from core.inputs import CustomerInput, ProductInput, SupplierInput
from core.ledger import Ledger
from core.models import Customer, Product, Sale, Supplier


class ShopViewsTest(TestCase):
    def setUp(self):
        ledger = Ledger.load()
        self.supplier = ledger.create_supplier(SupplierInput(name="Karachi Wholesale"))
        self.customer = ledger.create_customer(CustomerInput(name="Ahmed"))
        self.product = ledger.create_product(ProductInput(
            name="Rice 5kg", category="Grocery", supplier_id=self.supplier.pk,
            stock=10, purchase_price="50", selling_price="80",
        ))

    def messages_of(self, response):
        return [str(message) for message in response.context['messages']]

    def test_pages_render(self):
        urls = [
            reverse('core:dashboard'),
            reverse('core:pos'),
            reverse('core:product_list'),
            reverse('core:create_product'),
            reverse('core:edit_product', args=[self.product.pk]),
            reverse('core:restock_product', args=[self.product.pk]),
            reverse('core:delete_product', args=[self.product.pk]),
            reverse('core:customer_list'),
            reverse('core:customer_detail', args=[self.customer.pk]),
            reverse('core:supplier_list'),
            reverse('core:supplier_detail', args=[self.supplier.pk]),
            reverse('core:report_list'),
        ]
        for url in urls:
            with self.subTest(url=url):
                self.assertEqual(self.client.get(url).status_code, 200)

    def test_unknown_record_is_404(self):
        response = self.client.get(reverse('core:customer_detail', args=['missing']))
        self.assertEqual(response.status_code, 404)

    def test_paid_checkout_flow(self):
        self.client.post(reverse('core:cart_add', args=[self.product.pk]))
        self.client.post(reverse('core:cart_update', args=[self.product.pk]), {'quantity': '3'})
        response = self.client.post(reverse('core:checkout'), {'payment_status': 'paid'}, follow=True)

        self.assertIn('Sale completed as paid!', self.messages_of(response))
        sale = Sale.objects.get()
        self.assertEqual(sale.total_amount, Decimal('240.00'))
        self.assertEqual(Product.objects.get(pk=self.product.pk).stock, 7)
        self.assertFalse(self.client.session[CART_SESSION_KEY]['items'])

        detail = self.client.get(reverse('core:sale_detail', args=[sale.pk]))
        self.assertContains(detail, 'Rice 5kg')
        self.assertContains(detail, 'Walk-in')

    def test_udhaar_needs_a_customer(self):
        self.client.post(reverse('core:cart_add', args=[self.product.pk]))
        response = self.client.post(reverse('core:checkout'), {'payment_status': 'unpaid'}, follow=True)
        self.assertIn('Please select a customer for a credit (Udhaar) sale.', self.messages_of(response))
        self.assertFalse(Sale.objects.exists())
        self.assertEqual(len(self.client.session[CART_SESSION_KEY]['items']), 1)

    def test_udhaar_checkout_and_payment(self):
        self.client.post(reverse('core:cart_add', args=[self.product.pk]))
        self.client.post(reverse('core:cart_customer'), {'customer': self.customer.pk})
        self.client.post(reverse('core:checkout'), {'payment_status': 'unpaid'})
        self.assertEqual(Customer.objects.get(pk=self.customer.pk).balance, Decimal('80.00'))

        self.client.post(reverse('core:customer_payment', args=[self.customer.pk]), {'amount': '30'})
        self.assertEqual(Customer.objects.get(pk=self.customer.pk).balance, Decimal('50.00'))

    def test_cart_add_over_stock(self):
        ledger = Ledger.load()
        scarce = ledger.create_product(ProductInput(
            name="Saffron", category="Spices", stock=1, purchase_price="100", selling_price="150",
        ))
        self.client.post(reverse('core:cart_add', args=[scarce.pk]))
        response = self.client.post(reverse('core:cart_add', args=[scarce.pk]), follow=True)
        self.assertIn('Cannot add more than available stock.', self.messages_of(response))

    def test_invalid_payment_shows_form_error(self):
        response = self.client.post(reverse('core:customer_payment', args=[self.customer.pk]), {'amount': '0'})
        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'Payment amount must be greater than 0.')
        self.assertEqual(Customer.objects.get(pk=self.customer.pk).balance, Decimal('0'))

    def test_create_product_on_credit(self):
        response = self.client.post(reverse('core:create_product'), {
            'name': 'Sugar 1kg',
            'category': 'Grocery',
            'supplier': self.supplier.pk,
            'stock': '20',
            'purchase_price': '10',
            'selling_price': '14',
            'credit_purchase': 'on',
        })
        self.assertRedirects(response, reverse('core:product_list'))
        self.assertTrue(Product.objects.filter(name='Sugar 1kg', stock=20).exists())
        self.assertEqual(Supplier.objects.get(pk=self.supplier.pk).balance, Decimal('200.00'))

    def test_restock_on_credit(self):
        response = self.client.post(reverse('core:restock_product', args=[self.product.pk]), {
            'quantity': '5',
            'purchase_price': '60',
            'on_credit': 'on',
        })
        self.assertRedirects(response, reverse('core:product_list'))
        product = Product.objects.get(pk=self.product.pk)
        self.assertEqual(product.stock, 15)
        self.assertEqual(product.purchase_price, Decimal('60.00'))
        self.assertEqual(Supplier.objects.get(pk=self.supplier.pk).balance, Decimal('300.00'))

    def test_edit_customer(self):
        response = self.client.post(reverse('core:edit_customer', args=[self.customer.pk]), {
            'name': 'Ahmed Khan',
            'phone': '0300',
            'address': '',
        })
        self.assertRedirects(response, reverse('core:customer_detail', args=[self.customer.pk]))
        self.assertEqual(Customer.objects.get(pk=self.customer.pk).name, 'Ahmed Khan')

    def test_delete_supplier_after_confirmation(self):
        response = self.client.post(reverse('core:delete_supplier', args=[self.supplier.pk]))
        self.assertRedirects(response, reverse('core:supplier_list'))
        self.assertFalse(Supplier.objects.exists())
        self.assertIsNone(Product.objects.get(pk=self.product.pk).supplier_id)

    def test_search_filters_products(self):
        Ledger.load().create_product(ProductInput(
            name="Tea", category="Beverages", purchase_price="5", selling_price="7",
        ))
        response = self.client.get(reverse('core:product_list'), {'search': 'rice'})
        self.assertEqual([p.name for p in response.context['products']], ['Rice 5kg'])

    def test_credit_too_large_to_record_is_refused(self):
        response = self.client.post(reverse('core:create_product'), {
            'name': 'Gold',
            'category': 'Jewellery',
            'supplier': self.supplier.pk,
            'stock': '1000',
            'purchase_price': '999999999999.99',
            'selling_price': '999999999999.99',
            'credit_purchase': 'on',
        })
        self.assertEqual(response.status_code, 200)
        self.assertTrue(any('largest amount' in message for message in self.messages_of(response)))
        self.assertFalse(Product.objects.filter(name='Gold').exists())
        self.assertEqual(self.client.get(reverse('core:supplier_list')).status_code, 200)
