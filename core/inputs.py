"""Validated input for each shop operation.

Forms and other callers build one of these structs and the ledger checks it
again with ``validate()`` before writing anything. Money is kept as two-place
``Decimal`` so the values held in memory are the values the database stores.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django.core.exceptions import ValidationError

from .models import MONEY_DECIMAL_PLACES, MONEY_MAX_DIGITS

CENT = Decimal('0.01')
ZERO = Decimal('0.00')

PAID = 'paid'
UNPAID = 'unpaid'
PAYMENT_STATUSES = (PAID, UNPAID)

PARTY_TABLES = {
    'customer': 'customers',
    'supplier': 'suppliers',
}

# Money columns hold magnitudes below this; quantities share the 32-bit integer column range.
MONEY_LIMIT = Decimal(10) ** (MONEY_MAX_DIGITS - MONEY_DECIMAL_PLACES)
MAX_QUANTITY = 2147483647


def fits_money(amount):
    return abs(amount) < MONEY_LIMIT


def to_money(value, field_name='amount'):
    """Parse ``value`` into a Decimal rounded to cents."""
    if isinstance(value, bool):
        raise ValidationError({field_name: 'Enter a number.'})
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError({field_name: 'Enter a number.'})
    if not amount.is_finite():
        raise ValidationError({field_name: 'Enter a number.'})
    if fits_money(amount):
        amount = amount.quantize(CENT, rounding=ROUND_HALF_UP)
    if not fits_money(amount):
        raise ValidationError({field_name: 'Amount is too large.'})
    return amount


def to_quantity(value, field_name='quantity'):
    """Parse ``value`` into a whole number of units."""
    if isinstance(value, bool):
        raise ValidationError({field_name: 'Enter a whole number.'})
    if isinstance(value, int):
        number = value
    else:
        try:
            number = Decimal(str(value).strip())
        except (InvalidOperation, TypeError, ValueError):
            raise ValidationError({field_name: 'Enter a whole number.'})
        if not number.is_finite() or number != number.to_integral_value():
            raise ValidationError({field_name: 'Enter a whole number.'})
    if abs(number) > MAX_QUANTITY:
        raise ValidationError({field_name: 'Enter a smaller number.'})
    return int(number)


def _text(value):
    return (value or '').strip()


def _raise_if_any(errors):
    if errors:
        raise ValidationError(errors)


@dataclass
class ProductDetailsInput:
    """Editable product fields. Stock is never part of an edit."""
    name: str
    category: str
    purchase_price: Decimal
    selling_price: Decimal
    supplier_id: str = None

    def __post_init__(self):
        self.name = _text(self.name)
        self.category = _text(self.category)
        self.supplier_id = _text(self.supplier_id) or None
        self.purchase_price = to_money(self.purchase_price, 'purchase_price')
        self.selling_price = to_money(self.selling_price, 'selling_price')

    def errors(self):
        errors = {}
        if not self.name:
            errors['name'] = 'Product name is required.'
        if not self.category:
            errors['category'] = 'Category is required.'
        if self.purchase_price < 0:
            errors['purchase_price'] = 'Purchase price cannot be negative.'
        if self.selling_price < 0:
            errors['selling_price'] = 'Selling price cannot be negative.'
        return errors

    def validate(self):
        _raise_if_any(self.errors())
        return self


@dataclass
class ProductInput(ProductDetailsInput):
    """A new product together with its opening stock."""
    stock: int = 0

    def __post_init__(self):
        super().__post_init__()
        self.stock = to_quantity(self.stock, 'stock')

    def errors(self):
        errors = super().errors()
        if self.stock < 0:
            errors['stock'] = 'Stock cannot be negative.'
        return errors

    @property
    def opening_cost(self):
        return self.stock * self.purchase_price


@dataclass
class RestockInput:
    quantity: int
    purchase_price: Decimal
    on_credit: bool = False

    def __post_init__(self):
        self.quantity = to_quantity(self.quantity)
        self.purchase_price = to_money(self.purchase_price, 'purchase_price')
        self.on_credit = bool(self.on_credit)

    def validate(self):
        errors = {}
        if self.quantity <= 0:
            errors['quantity'] = 'Quantity must be greater than 0.'
        if self.purchase_price < 0:
            errors['purchase_price'] = 'Purchase price cannot be negative.'
        _raise_if_any(errors)
        return self

    @property
    def cost(self):
        return self.quantity * self.purchase_price


@dataclass
class CartLine:
    product_id: str
    product_name: str
    quantity: int
    purchase_price: Decimal
    selling_price: Decimal

    def __post_init__(self):
        self.quantity = to_quantity(self.quantity)
        self.purchase_price = to_money(self.purchase_price, 'purchase_price')
        self.selling_price = to_money(self.selling_price, 'selling_price')

    @property
    def line_total(self):
        return self.selling_price * self.quantity

    @property
    def line_cost(self):
        return self.purchase_price * self.quantity


@dataclass
class CheckoutInput:
    lines: list = field(default_factory=list)
    payment_status: str = PAID
    customer_id: str = None

    def __post_init__(self):
        self.lines = list(self.lines)
        self.customer_id = _text(self.customer_id) or None

    def validate(self):
        errors = {}
        if not self.lines:
            errors['lines'] = 'Cart is empty.'
        elif any(line.quantity <= 0 for line in self.lines):
            errors['lines'] = 'Every cart line needs a quantity greater than 0.'
        # The session cart keeps one line per product. Repeated lines would
        # still be stocked out correctly, one adjust each, but are refused so
        # every sale item names a different product.
        elif len({line.product_id for line in self.lines}) != len(self.lines):
            errors['lines'] = 'A product can only appear once in the cart.'
        elif any(line.purchase_price < 0 or line.selling_price < 0 for line in self.lines):
            errors['lines'] = 'Cart prices cannot be negative.'
        elif not all(fits_money(total) for total in self.totals()):
            errors['lines'] = 'Cart total is too large to record.'
        if self.payment_status not in PAYMENT_STATUSES:
            errors['payment_status'] = f'Unknown payment status: {self.payment_status}'
        elif self.payment_status == UNPAID and not self.customer_id:
            errors['customer_id'] = 'Please select a customer for a credit (Udhaar) sale.'
        _raise_if_any(errors)
        return self

    def totals(self):
        """Return ``(total_amount, total_cost, profit)`` for the cart."""
        total_amount = sum((line.line_total for line in self.lines), ZERO)
        total_cost = sum((line.line_cost for line in self.lines), ZERO)
        return total_amount, total_cost, total_amount - total_cost


@dataclass
class PaymentInput:
    party_type: str
    party_id: str
    amount: Decimal

    def __post_init__(self):
        self.amount = to_money(self.amount)

    @property
    def table(self):
        return PARTY_TABLES[self.party_type]

    def validate(self):
        errors = {}
        if self.party_type not in PARTY_TABLES:
            errors['party_type'] = f'Unknown party type: {self.party_type}'
        if not self.party_id:
            errors['party_id'] = 'A customer or supplier is required.'
        if self.amount <= 0:
            errors['amount'] = 'Payment amount must be greater than 0.'
        _raise_if_any(errors)
        return self


@dataclass
class CustomerInput:
    name: str
    phone: str = ''
    address: str = ''

    def __post_init__(self):
        self.name = _text(self.name)
        self.phone = _text(self.phone)
        self.address = _text(self.address)

    def validate(self):
        if not self.name:
            raise ValidationError({'name': 'Customer name is required.'})
        return self


@dataclass
class SupplierInput:
    name: str
    contact_person: str = ''
    phone: str = ''

    def __post_init__(self):
        self.name = _text(self.name)
        self.contact_person = _text(self.contact_person)
        self.phone = _text(self.phone)

    def validate(self):
        if not self.name:
            raise ValidationError({'name': 'Supplier name is required.'})
        return self
