from django.core.management.base import BaseCommand, CommandError

from core.exceptions import LedgerError
from core.inputs import CustomerInput, ProductInput, SupplierInput
from core.ledger import Ledger
from core.models import Customer, Product, Sale, Supplier

SUPPLIERS = [
    {'name': 'Karachi Wholesale', 'contact_person': 'Imran', 'phone': '0300-1234567'},
    {'name': 'Lahore Traders', 'contact_person': 'Bilal', 'phone': '0321-7654321'},
]

CUSTOMERS = [
    {'name': 'Ahmed Khan', 'phone': '0333-1112223', 'address': 'Block 5, Gulshan'},
    {'name': 'Sara Ali', 'phone': '0345-9998887', 'address': 'Model Town'},
]

PRODUCTS = [
    {'name': 'Basmati Rice 5kg', 'category': 'Grocery', 'supplier': 0,
     'stock': 20, 'purchase_price': '1200', 'selling_price': '1450'},
    {'name': 'Cooking Oil 1L', 'category': 'Grocery', 'supplier': 0,
     'stock': 30, 'purchase_price': '480', 'selling_price': '540'},
    {'name': 'Tea 450g', 'category': 'Beverages', 'supplier': 1,
     'stock': 15, 'purchase_price': '650', 'selling_price': '760'},
    {'name': 'Washing Powder 1kg', 'category': 'Household', 'supplier': 1,
     'stock': 4, 'purchase_price': '350', 'selling_price': '420'},
    {'name': 'Biscuits Family Pack', 'category': 'Snacks', 'supplier': None,
     'stock': 40, 'purchase_price': '90', 'selling_price': '120'},
]


class Command(BaseCommand):
    help = 'Load demo suppliers, customers and products through the ledger'

    def add_arguments(self, parser):
        parser.add_argument(
            '--force',
            action='store_true',
            help='Seed even when the shop already has data',
        )
        parser.add_argument(
            '--credit',
            action='store_true',
            help="Book each product's opening stock to its supplier's balance",
        )

    def handle(self, *args, **options):
        has_data = any(model.objects.exists() for model in (Product, Customer, Supplier, Sale))
        if has_data and not options['force']:
            self.stdout.write('Shop already has data, nothing to seed (use --force to add anyway)')
            return

        self.stdout.write('Setting up demo data...')
        ledger = Ledger.load()
        try:
            suppliers = [ledger.create_supplier(SupplierInput(**data)) for data in SUPPLIERS]
            for supplier in suppliers:
                self.stdout.write(f'Supplier created: {supplier.name}')

            for data in CUSTOMERS:
                customer = ledger.create_customer(CustomerInput(**data))
                self.stdout.write(f'Customer created: {customer.name}')

            for data in PRODUCTS:
                data = dict(data)
                index = data.pop('supplier')
                supplier_id = suppliers[index].pk if index is not None else None
                product = ledger.create_product(
                    ProductInput(supplier_id=supplier_id, **data),
                    credit_purchase=options['credit'],
                )
                self.stdout.write(f'Product created: {product.name} ({product.stock} in stock)')
        except LedgerError as exc:
            raise CommandError(f'Seeding failed: {exc}')

        self.stdout.write(self.style.SUCCESS('Demo data setup completed successfully!'))
