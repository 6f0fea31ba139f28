from django.contrib.sessions.backends.db import SessionStore
from django.test import TestCase

from core.cart import CART_SESSION_KEY, Cart
from core.exceptions import CartError
from core.inputs import CustomerInput, ProductInput
from core.ledger import Ledger


class CartTest(TestCase):
    def setUp(self):
        self.session = SessionStore()
        self.ledger = Ledger.load()
        self.customer = self.ledger.create_customer(CustomerInput(name="Sara"))
        self.oil = self.ledger.create_product(ProductInput(
            name="Oil", category="Grocery", stock=2, purchase_price="10", selling_price="15",
        ))
        self.tea = self.ledger.create_product(ProductInput(
            name="Tea", category="Beverages", stock=5, purchase_price="4", selling_price="6",
        ))

    def test_add_stops_at_stock(self):
        cart = Cart(self.session)
        cart.add(self.oil)
        cart.add(self.oil)
        with self.assertRaisesMessage(CartError, 'Cannot add more than available stock.'):
            cart.add(self.oil)
        self.assertEqual(cart.quantity_of(self.oil.pk), 2)

    def test_cart_lives_in_the_session(self):
        Cart(self.session).add(self.tea)
        self.assertEqual(self.session[CART_SESSION_KEY]['items'], {self.tea.pk: 1})
        self.assertEqual(Cart(self.session).quantity_of(self.tea.pk), 1)

    def test_set_quantity_clamps_and_removes(self):
        cart = Cart(self.session)
        self.assertEqual(cart.set_quantity(self.tea, 9), 5)
        self.assertEqual(cart.quantity_of(self.tea.pk), 5)
        self.assertEqual(cart.set_quantity(self.tea, 0), 0)
        self.assertEqual(len(cart), 0)

    def test_lines_snapshot_current_prices(self):
        cart = Cart(self.session)
        cart.set_quantity(self.tea, 3)
        cart.add(self.oil)
        lines = cart.lines(self.ledger.state)
        self.assertEqual([line.product_id for line in lines], [self.tea.pk, self.oil.pk])
        self.assertEqual(lines[0].selling_price, self.tea.selling_price)
        self.assertEqual(cart.total(self.ledger.state), 3 * self.tea.selling_price + self.oil.selling_price)

    def test_deleted_products_drop_out(self):
        cart = Cart(self.session)
        cart.add(self.oil)
        cart.add(self.tea)
        self.ledger.delete_product(self.oil.pk)
        lines = cart.lines(self.ledger.state)
        self.assertEqual([line.product_id for line in lines], [self.tea.pk])
        self.assertEqual(Cart(self.session).quantity_of(self.oil.pk), 0)

    def test_lines_refuse_more_than_stock(self):
        cart = Cart(self.session)
        cart.set_quantity(self.tea, 4)
        self.tea.stock = 3
        with self.assertRaisesMessage(CartError, "Not enough stock for Tea. Available: 3, Requested: 4"):
            cart.lines(self.ledger.state)

    def test_checkout_input_drops_missing_customer(self):
        cart = Cart(self.session)
        cart.add(self.tea)
        cart.select_customer(self.customer.pk)
        self.assertEqual(cart.checkout_input(self.ledger.state, 'unpaid').customer_id, self.customer.pk)
        cart.select_customer('gone')
        self.assertIsNone(cart.checkout_input(self.ledger.state, 'paid').customer_id)

    def test_clear(self):
        cart = Cart(self.session)
        cart.add(self.tea)
        cart.select_customer(self.customer.pk)
        cart.clear()
        cart = Cart(self.session)
        self.assertEqual(len(cart), 0)
        self.assertIsNone(cart.customer_id)
