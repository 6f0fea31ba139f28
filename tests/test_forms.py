from decimal import Decimal

from django.test import SimpleTestCase

from core.forms import PaymentForm, ProductForm, RestockForm
from core.inputs import ProductDetailsInput, ProductInput
from core.models import Product, Supplier


class ProductFormTest(SimpleTestCase):
    def setUp(self):
        self.supplier = Supplier(id='sup-1', name="Karachi Wholesale")

    def data(self, **overrides):
        data = {
            'name': ' Rice ',
            'category': 'Grocery',
            'supplier': self.supplier.pk,
            'stock': '10',
            'purchase_price': '50',
            'selling_price': '80',
        }
        data.update(overrides)
        return data

    def test_builds_product_input(self):
        form = ProductForm(self.data(), suppliers=[self.supplier])
        self.assertTrue(form.is_valid(), form.errors)
        product_input = form.to_input()
        self.assertIsInstance(product_input, ProductInput)
        self.assertEqual(product_input.name, 'Rice')
        self.assertEqual(product_input.stock, 10)
        self.assertEqual(product_input.supplier_id, 'sup-1')
        self.assertEqual(product_input.purchase_price, Decimal('50.00'))

    def test_credit_purchase_needs_supplier(self):
        form = ProductForm(self.data(supplier='', credit_purchase='on'), suppliers=[self.supplier])
        self.assertFalse(form.is_valid())
        self.assertIn('supplier', form.errors)

    def test_negative_price_is_invalid(self):
        form = ProductForm(self.data(selling_price='-1'), suppliers=[self.supplier])
        self.assertFalse(form.is_valid())
        self.assertIn('selling_price', form.errors)

    def test_edit_form_has_no_stock(self):
        product = Product(id='p-1', name="Rice", category="Grocery",
                          purchase_price=Decimal('50'), selling_price=Decimal('80'))
        form = ProductForm.for_product(product, [self.supplier], self.data(supplier=''))
        self.assertNotIn('stock', form.fields)
        self.assertNotIn('credit_purchase', form.fields)
        self.assertTrue(form.is_valid(), form.errors)
        details = form.to_input()
        self.assertIs(type(details), ProductDetailsInput)
        self.assertIsNone(details.supplier_id)


class RestockFormTest(SimpleTestCase):
    def test_quantity_must_be_positive(self):
        form = RestockForm({'quantity': '0', 'purchase_price': '5'})
        self.assertFalse(form.is_valid())
        self.assertIn('quantity', form.errors)

    def test_on_credit_defaults_off(self):
        form = RestockForm({'quantity': '3', 'purchase_price': '5'})
        self.assertTrue(form.is_valid(), form.errors)
        self.assertFalse(form.to_input().on_credit)


class PaymentFormTest(SimpleTestCase):
    def test_rejects_zero(self):
        form = PaymentForm({'amount': '0'})
        self.assertFalse(form.is_valid())
        self.assertEqual(form.errors['amount'], ["Payment amount must be greater than 0."])

    def test_builds_payment_input(self):
        form = PaymentForm({'amount': '120.5'})
        self.assertTrue(form.is_valid(), form.errors)
        payment = form.to_input('customer', 'c-1')
        self.assertEqual(payment.table, 'customers')
        self.assertEqual(payment.amount, Decimal('120.50'))
