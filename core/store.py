"""Record store over the Django ORM.

Four tables addressed by string id: ``products``, ``customers``,
``suppliers`` and ``sales``. Every primitive runs inside ``atomic()``, so a
caller that groups several of them in its own ``atomic()`` block gets an
all-or-nothing write across tables.
"""

from contextlib import contextmanager

from django.db import DatabaseError, transaction
from django.db.models import F, prefetch_related_objects

from .exceptions import PersistenceError, RecordNotFound
from .models import Customer, Product, Sale, SaleItem, Supplier

TABLES = {
    'products': Product,
    'customers': Customer,
    'suppliers': Supplier,
    'sales': Sale,
}


class RecordStore:

    def model_for(self, table):
        try:
            return TABLES[table]
        except KeyError:
            raise ValueError(f"Unknown table: {table}")

    @contextmanager
    def atomic(self):
        """Commit every write in the block, or none of them."""
        try:
            with transaction.atomic():
                yield
        except DatabaseError as exc:
            raise PersistenceError(f"Transaction rolled back: {exc}") from exc

    def read_all(self, table):
        queryset = self.model_for(table).objects.all()
        if table == 'sales':
            queryset = queryset.prefetch_related('items')
        return list(queryset)

    def insert(self, table, items=None, **fields):
        """Insert a row and return it.

        ``items`` is only accepted for ``sales``: the sale's ordered line
        snapshots, given as dicts of ``SaleItem`` fields.
        """
        model = self.model_for(table)
        if items is not None and model is not Sale:
            raise ValueError("Only sales carry line items")
        with self.atomic():
            record = model.objects.create(**fields)
            if model is Sale:
                SaleItem.objects.bulk_create([
                    SaleItem(sale=record, position=position, **item)
                    for position, item in enumerate(items or [])
                ])
                prefetch_related_objects([record], 'items')
        return record

    def update(self, table, record_id, **fields):
        with self.atomic():
            updated = self.model_for(table).objects.filter(pk=record_id).update(**fields)
        if not updated:
            raise RecordNotFound(table, record_id)

    def adjust(self, table, record_id, field_name, delta):
        """Add ``delta`` to a numeric column in the database, not from a stale read."""
        with self.atomic():
            updated = self.model_for(table).objects.filter(pk=record_id).update(
                **{field_name: F(field_name) + delta}
            )
        if not updated:
            raise RecordNotFound(table, record_id)

    def delete(self, table, record_id):
        with self.atomic():
            deleted, _ = self.model_for(table).objects.filter(pk=record_id).delete()
        if not deleted:
            raise RecordNotFound(table, record_id)
