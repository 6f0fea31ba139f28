import random
import string
import time
from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone

from .conf import shop_setting

ID_ALPHABET = string.digits + string.ascii_lowercase


def _base36(number):
    digits = []
    while True:
        number, remainder = divmod(number, 36)
        digits.append(ID_ALPHABET[remainder])
        if not number:
            break
    return ''.join(reversed(digits))


def generate_id():
    """Opaque record id: base-36 millisecond timestamp plus a random suffix."""
    stamp = _base36(int(time.time() * 1000))
    suffix = ''.join(random.choices(ID_ALPHABET, k=7))
    return f"{stamp}-{suffix}"


MONEY_MAX_DIGITS = 14
MONEY_DECIMAL_PLACES = 2


def money_field(**kwargs):
    kwargs.setdefault('max_digits', MONEY_MAX_DIGITS)
    kwargs.setdefault('decimal_places', MONEY_DECIMAL_PLACES)
    kwargs.setdefault('default', Decimal('0.00'))
    return models.DecimalField(**kwargs)


class RecordMixin:
    """Plain-dict view of a row, used to compare in-memory state with the store."""

    RECORD_FIELDS = ()

    def as_record(self):
        return {name: getattr(self, name) for name in self.RECORD_FIELDS}


class Supplier(RecordMixin, models.Model):
    """Supplier with a payable balance (positive = shop owes supplier)"""
    id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
    name = models.CharField(max_length=200)
    contact_person = models.CharField(max_length=200, blank=True)
    phone = models.CharField(max_length=30, blank=True)
    balance = money_field(help_text="Amount the shop owes this supplier")
    created_at = models.DateTimeField(default=timezone.now)

    RECORD_FIELDS = ('id', 'name', 'contact_person', 'phone', 'balance', 'created_at')

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Supplier"
        verbose_name_plural = "Suppliers"

    def __str__(self):
        return self.name


class Product(RecordMixin, models.Model):
    """Inventory item; stock and purchase price are only changed through the ledger"""
    id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
    name = models.CharField(max_length=200)
    category = models.CharField(max_length=100)
    supplier = models.ForeignKey(
        Supplier,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='products',
    )
    stock = models.IntegerField(default=0, validators=[MinValueValidator(0)])
    purchase_price = money_field(validators=[MinValueValidator(Decimal('0'))])
    selling_price = money_field(validators=[MinValueValidator(Decimal('0'))])
    created_at = models.DateTimeField(default=timezone.now)

    RECORD_FIELDS = (
        'id', 'name', 'category', 'supplier_id', 'stock',
        'purchase_price', 'selling_price', 'created_at',
    )

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Product"
        verbose_name_plural = "Products"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(stock__gte=0),
                name='product_stock_non_negative',
            ),
        ]

    def __str__(self):
        return self.name

    @property
    def stock_value(self):
        return self.stock * self.purchase_price

    @property
    def profit_margin(self):
        return self.selling_price - self.purchase_price

    @property
    def is_low_stock(self):
        return self.stock < shop_setting('LOW_STOCK_THRESHOLD')


class Customer(RecordMixin, models.Model):
    """Customer with an udhaar balance (positive = customer owes shop)"""
    id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
    name = models.CharField(max_length=200)
    phone = models.CharField(max_length=30, blank=True)
    address = models.CharField(max_length=255, blank=True)
    balance = money_field(help_text="Udhaar the customer owes the shop")
    created_at = models.DateTimeField(default=timezone.now)

    RECORD_FIELDS = ('id', 'name', 'phone', 'address', 'balance', 'created_at')

    class Meta:
        ordering = ['-created_at']
        verbose_name = "Customer"
        verbose_name_plural = "Customers"

    def __str__(self):
        return f"{self.name} ({self.phone})" if self.phone else self.name


class Sale(RecordMixin, models.Model):
    """Completed checkout. Written once by the ledger and never changed afterwards"""
    PAID = 'paid'
    UNPAID = 'unpaid'
    PAYMENT_STATUS_CHOICES = [
        (PAID, 'Paid'),
        (UNPAID, 'Unpaid (Udhaar)'),
    ]

    id = models.CharField(primary_key=True, max_length=32, default=generate_id, editable=False)
    # Deleting a customer leaves their sales as they were.
    customer = models.ForeignKey(
        Customer,
        on_delete=models.DO_NOTHING,
        db_constraint=False,
        null=True,
        blank=True,
        related_name='sales',
        help_text="Empty for walk-in sales",
    )
    total_amount = money_field()
    total_cost = money_field()
    profit = money_field()
    date = models.DateTimeField(default=timezone.now)
    payment_status = models.CharField(max_length=6, choices=PAYMENT_STATUS_CHOICES, default=PAID)

    RECORD_FIELDS = (
        'id', 'customer_id', 'total_amount', 'total_cost', 'profit',
        'date', 'payment_status',
    )

    class Meta:
        ordering = ['-date']
        verbose_name = "Sale"
        verbose_name_plural = "Sales"
        constraints = [
            models.CheckConstraint(
                condition=models.Q(payment_status='paid') | models.Q(customer__isnull=False),
                name='sale_unpaid_has_customer',
            ),
        ]

    def __str__(self):
        return f"Sale {self.id} ({self.payment_status})"

    @property
    def is_unpaid(self):
        return self.payment_status == self.UNPAID

    def as_record(self):
        record = super().as_record()
        record['items'] = [item.as_record() for item in self.items.all()]
        return record


class SaleItem(RecordMixin, models.Model):
    """Snapshot of one cart line, priced as it was at the time of sale"""
    sale = models.ForeignKey(Sale, on_delete=models.CASCADE, related_name='items')
    position = models.PositiveIntegerField()
    product_id = models.CharField(max_length=32)
    product_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField()
    purchase_price = money_field()
    selling_price = money_field()

    RECORD_FIELDS = ('product_id', 'product_name', 'quantity', 'purchase_price', 'selling_price')

    class Meta:
        ordering = ['position']
        verbose_name = "Sale Item"
        verbose_name_plural = "Sale Items"
        constraints = [
            models.UniqueConstraint(fields=['sale', 'position'], name='sale_item_position_unique'),
        ]

    def __str__(self):
        return f"{self.product_name} x {self.quantity}"

    @property
    def line_total(self):
        return self.selling_price * self.quantity

    @property
    def line_cost(self):
        return self.purchase_price * self.quantity
