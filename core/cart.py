from .exceptions import CartError
from .inputs import ZERO, CartLine, CheckoutInput

CART_SESSION_KEY = 'dukaan_cart'


class Cart:
    """Point-of-sale cart kept in the session.

    Only product ids, quantities and the chosen customer are stored; names
    and prices are read from the products when the cart is turned into
    checkout lines.
    """

    def __init__(self, session):
        self.session = session
        data = session.get(CART_SESSION_KEY) or {}
        self.quantities = dict(data.get('items') or {})
        self.customer_id = data.get('customer_id') or None

    def __len__(self):
        return len(self.quantities)

    def save(self):
        self.session[CART_SESSION_KEY] = {
            'items': self.quantities,
            'customer_id': self.customer_id,
        }
        self.session.modified = True

    def quantity_of(self, product_id):
        return self.quantities.get(product_id, 0)

    def add(self, product):
        current = self.quantity_of(product.pk)
        if current >= product.stock:
            raise CartError('Cannot add more than available stock.')
        self.quantities[product.pk] = current + 1
        self.save()

    def set_quantity(self, product, quantity):
        """Set a line's quantity, capped at stock. Returns the quantity actually kept."""
        quantity = min(quantity, product.stock)
        if quantity <= 0:
            self.quantities.pop(product.pk, None)
            quantity = 0
        else:
            self.quantities[product.pk] = quantity
        self.save()
        return quantity

    def remove(self, product_id):
        self.quantities.pop(product_id, None)
        self.save()

    def select_customer(self, customer_id):
        self.customer_id = customer_id or None
        self.save()

    def clear(self):
        self.quantities = {}
        self.customer_id = None
        self.save()

    def lines(self, state):
        """Build checkout lines from current product data.

        Products deleted since they were added are dropped from the cart.
        """
        lines = []
        stale = [pid for pid in self.quantities if pid not in state.products]
        if stale:
            for product_id in stale:
                self.quantities.pop(product_id)
            self.save()
        for product_id, quantity in self.quantities.items():
            product = state.products[product_id]
            if quantity > product.stock:
                raise CartError(
                    f"Not enough stock for {product.name}. "
                    f"Available: {product.stock}, Requested: {quantity}"
                )
            lines.append(CartLine(
                product_id=product.pk,
                product_name=product.name,
                quantity=quantity,
                purchase_price=product.purchase_price,
                selling_price=product.selling_price,
            ))
        return lines

    def total(self, state):
        total = ZERO
        for product_id, quantity in self.quantities.items():
            product = state.products.get(product_id)
            if product is not None:
                total += product.selling_price * quantity
        return total

    def checkout_input(self, state, payment_status):
        customer_id = self.customer_id if self.customer_id in state.customers else None
        return CheckoutInput(
            lines=self.lines(state),
            payment_status=payment_status,
            customer_id=customer_id,
        )
