"""Ledger transaction core.

``Ledger`` owns the in-memory ``ShopState`` and is the only code that changes
product stock and customer/supplier balances once a record exists. Each
operation validates its input, writes every affected table inside one
``store.atomic()`` block, and only after that block commits applies the same
change to the state it holds. A failed operation raises and leaves both the
database and the state as they were.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field

from django.core.exceptions import ValidationError
from django.utils import timezone

from .exceptions import PersistenceError, RecordNotFound
from .inputs import MAX_QUANTITY, UNPAID, ZERO, fits_money
from .models import generate_id
from .store import TABLES, RecordStore

logger = logging.getLogger(__name__)


@dataclass
class ShopState:
    """All four tables held in memory, each an id -> record dict, newest first."""
    products: dict = field(default_factory=dict)
    customers: dict = field(default_factory=dict)
    suppliers: dict = field(default_factory=dict)
    sales: dict = field(default_factory=dict)

    def table(self, name):
        if name not in TABLES:
            raise ValueError(f"Unknown table: {name}")
        return getattr(self, name)

    def get(self, name, record_id):
        try:
            return self.table(name)[record_id]
        except KeyError:
            raise RecordNotFound(name, record_id)

    def prepend(self, name, record):
        setattr(self, name, {record.pk: record, **self.table(name)})

    def discard(self, name, record_id):
        self.table(name).pop(record_id, None)

    def snapshot(self):
        """Plain-dict copy of every table, keyed by record id."""
        return {
            name: {pk: record.as_record() for pk, record in self.table(name).items()}
            for name in TABLES
        }


class Ledger:

    def __init__(self, state=None, store=None):
        self.store = store or RecordStore()
        self.state = state if state is not None else ShopState()

    @classmethod
    def load(cls, store=None):
        """Read every table from the store into a fresh ledger."""
        store = store or RecordStore()
        state = ShopState(**{
            name: {record.pk: record for record in store.read_all(name)}
            for name in TABLES
        })
        return cls(state=state, store=store)

    @contextmanager
    def _transaction(self, operation):
        try:
            with self.store.atomic():
                yield
        except PersistenceError:
            logger.exception("%s failed, no changes were applied", operation)
            raise

    def _validated(self, data, operation):
        try:
            return data.validate()
        except ValidationError as exc:
            logger.info("%s rejected: %s", operation, exc.messages)
            raise

    def _check_balance(self, party, delta, operation):
        """Refuse a change that would leave ``party.balance`` too large to store."""
        balance = party.balance + delta
        if not fits_money(balance):
            logger.info("%s rejected: balance of %s would be %s", operation, party.pk, balance)
            raise ValidationError({
                'amount': f"This would take {party.name}'s balance beyond the largest amount that can be recorded."
            })

    # Ledger operations

    def create_product(self, data, credit_purchase=False):
        """Add a product; optionally book its opening stock to the supplier's credit."""
        self._validated(data, 'CreateProduct')
        supplier = self.state.get('suppliers', data.supplier_id) if data.supplier_id else None
        credit = ZERO
        if credit_purchase and supplier and data.stock > 0:
            credit = data.opening_cost
        if credit:
            self._check_balance(supplier, credit, 'CreateProduct')

        with self._transaction('CreateProduct'):
            product = self.store.insert(
                'products',
                id=generate_id(),
                name=data.name,
                category=data.category,
                supplier_id=supplier.pk if supplier else None,
                stock=data.stock,
                purchase_price=data.purchase_price,
                selling_price=data.selling_price,
                created_at=timezone.now(),
            )
            if credit:
                self.store.adjust('suppliers', supplier.pk, 'balance', credit)

        self.state.prepend('products', product)
        if credit:
            supplier.balance += credit
        logger.info(
            "Created product %s (%s) with stock %s; supplier credit %s",
            product.pk, product.name, product.stock, credit,
        )
        return product

    def restock_product(self, product_id, data):
        """Add stock at a new purchase price (last price wins, no averaging)."""
        self._validated(data, 'RestockProduct')
        product = self.state.get('products', product_id)
        supplier = None
        if data.on_credit and product.supplier_id:
            supplier = self.state.get('suppliers', product.supplier_id)
            self._check_balance(supplier, data.cost, 'RestockProduct')
        if product.stock + data.quantity > MAX_QUANTITY:
            logger.info("RestockProduct rejected: stock of %s would exceed %s", product.pk, MAX_QUANTITY)
            raise ValidationError({
                'quantity': 'This would take stock beyond the largest quantity that can be recorded.'
            })

        with self._transaction('RestockProduct'):
            self.store.adjust('products', product.pk, 'stock', data.quantity)
            self.store.update('products', product.pk, purchase_price=data.purchase_price)
            if supplier:
                self.store.adjust('suppliers', supplier.pk, 'balance', data.cost)

        product.stock += data.quantity
        product.purchase_price = data.purchase_price
        if supplier:
            supplier.balance += data.cost
        logger.info(
            "Restocked product %s by %s at %s; supplier credit %s",
            product.pk, data.quantity, data.purchase_price,
            data.cost if supplier else ZERO,
        )
        return product

    def checkout(self, data):
        """Record a sale, take its lines out of stock and book udhaar if unpaid.

        Quantities are checked against stock by the cart before this is
        called; a line that would still drive stock below zero is refused by
        the database and the whole checkout rolls back.
        """
        self._validated(data, 'Checkout')
        customer = self.state.get('customers', data.customer_id) if data.customer_id else None
        products = [self.state.get('products', line.product_id) for line in data.lines]
        total_amount, total_cost, profit = data.totals()
        unpaid = data.payment_status == UNPAID
        if unpaid:
            self._check_balance(customer, total_amount, 'Checkout')

        with self._transaction('Checkout'):
            sale = self.store.insert(
                'sales',
                id=generate_id(),
                customer_id=customer.pk if customer else None,
                total_amount=total_amount,
                total_cost=total_cost,
                profit=profit,
                date=timezone.now(),
                payment_status=data.payment_status,
                items=[
                    {
                        'product_id': line.product_id,
                        'product_name': line.product_name,
                        'quantity': line.quantity,
                        'purchase_price': line.purchase_price,
                        'selling_price': line.selling_price,
                    }
                    for line in data.lines
                ],
            )
            for line in data.lines:
                self.store.adjust('products', line.product_id, 'stock', -line.quantity)
            if unpaid:
                self.store.adjust('customers', customer.pk, 'balance', total_amount)

        self.state.prepend('sales', sale)
        for product, line in zip(products, data.lines):
            product.stock -= line.quantity
        if unpaid:
            customer.balance += total_amount
        logger.info(
            "Checkout %s: %s line(s), total %s, cost %s, profit %s, %s",
            sale.pk, len(data.lines), total_amount, total_cost, profit, data.payment_status,
        )
        return sale

    def receive_payment(self, data):
        """Reduce a customer's or supplier's balance. Overpayment may take it below zero."""
        self._validated(data, 'ReceivePayment')
        party = self.state.get(data.table, data.party_id)
        self._check_balance(party, -data.amount, 'ReceivePayment')

        with self._transaction('ReceivePayment'):
            self.store.adjust(data.table, party.pk, 'balance', -data.amount)

        party.balance -= data.amount
        logger.info(
            "Payment of %s recorded for %s %s; balance now %s",
            data.amount, data.party_type, party.pk, party.balance,
        )
        return party

    # Plain record maintenance, no ledger effect

    def create_customer(self, data):
        self._validated(data, 'CreateCustomer')
        with self._transaction('CreateCustomer'):
            customer = self.store.insert(
                'customers',
                id=generate_id(),
                name=data.name,
                phone=data.phone,
                address=data.address,
                balance=ZERO,
                created_at=timezone.now(),
            )
        self.state.prepend('customers', customer)
        logger.info("Created customer %s (%s)", customer.pk, customer.name)
        return customer

    def create_supplier(self, data):
        self._validated(data, 'CreateSupplier')
        with self._transaction('CreateSupplier'):
            supplier = self.store.insert(
                'suppliers',
                id=generate_id(),
                name=data.name,
                contact_person=data.contact_person,
                phone=data.phone,
                balance=ZERO,
                created_at=timezone.now(),
            )
        self.state.prepend('suppliers', supplier)
        logger.info("Created supplier %s (%s)", supplier.pk, supplier.name)
        return supplier

    def update_product(self, product_id, data):
        """Edit a product's details. Stock only changes through restock and checkout."""
        self._validated(data, 'UpdateProduct')
        product = self.state.get('products', product_id)
        if data.supplier_id:
            self.state.get('suppliers', data.supplier_id)
        changes = {
            'name': data.name,
            'category': data.category,
            'supplier_id': data.supplier_id,
            'purchase_price': data.purchase_price,
            'selling_price': data.selling_price,
        }
        with self._transaction('UpdateProduct'):
            self.store.update('products', product.pk, **changes)
        for name, value in changes.items():
            setattr(product, name, value)
        logger.info("Updated product %s", product.pk)
        return product

    def update_customer(self, customer_id, data):
        return self._update_contact('customers', customer_id, data, ('name', 'phone', 'address'))

    def update_supplier(self, supplier_id, data):
        return self._update_contact('suppliers', supplier_id, data, ('name', 'contact_person', 'phone'))

    def _update_contact(self, table, record_id, data, fields):
        self._validated(data, f'Update {table}')
        record = self.state.get(table, record_id)
        changes = {name: getattr(data, name) for name in fields}
        with self._transaction(f'Update {table}'):
            self.store.update(table, record.pk, **changes)
        for name, value in changes.items():
            setattr(record, name, value)
        logger.info("Updated %s record %s", table, record.pk)
        return record

    def delete_product(self, product_id):
        self._delete('products', product_id)

    def delete_customer(self, customer_id):
        # Their sales, paid or not, stay as they are.
        self._delete('customers', customer_id)

    def delete_supplier(self, supplier_id):
        self._delete('suppliers', supplier_id)
        for product in self.state.products.values():
            if product.supplier_id == supplier_id:
                product.supplier_id = None

    def _delete(self, table, record_id):
        record = self.state.get(table, record_id)
        with self._transaction(f'Delete from {table}'):
            self.store.delete(table, record.pk)
        self.state.discard(table, record.pk)
        logger.info("Deleted %s record %s", table, record.pk)
