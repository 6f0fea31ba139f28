from django.core.management.base import BaseCommand, CommandError

from core.ledger import Ledger
from core.models import Customer, Product, Sale, Supplier
from core.reports import dashboard_stats


class Command(BaseCommand):
    help = 'Verify stock, sale totals and balances in the stored tables'

    def add_arguments(self, parser):
        parser.add_argument(
            '--summary',
            action='store_true',
            help='Also print stock value, receivables and payables',
        )

    def handle(self, *args, **options):
        self.stdout.write(self.style.SUCCESS('Starting ledger verification...'))
        issues = self.verify_products() + self.verify_sales()

        if options['summary']:
            self.print_summary()

        if issues:
            for issue in issues:
                self.stdout.write(self.style.ERROR(f'  - {issue}'))
            raise CommandError(f'{len(issues)} ledger issue(s) found')
        self.stdout.write(self.style.SUCCESS('Ledger is consistent'))

    def verify_products(self):
        self.stdout.write('\n=== STOCK VERIFICATION ===')
        self.stdout.write(f'Total products: {Product.objects.count()}')
        issues = []
        for product in Product.objects.filter(stock__lt=0):
            issues.append(f'Product {product.name} ({product.pk}) has negative stock: {product.stock}')
        return issues

    def verify_sales(self):
        self.stdout.write('\n=== SALES VERIFICATION ===')
        sales = Sale.objects.prefetch_related('items')
        self.stdout.write(f'Total sales: {sales.count()}')
        issues = []
        for sale in sales:
            items = list(sale.items.all())
            if not items:
                issues.append(f'Sale {sale.pk} has no items')
            if sale.profit != sale.total_amount - sale.total_cost:
                issues.append(
                    f'Sale {sale.pk}: profit {sale.profit} != '
                    f'{sale.total_amount} - {sale.total_cost}'
                )
            amount = sum(item.line_total for item in items)
            cost = sum(item.line_cost for item in items)
            if amount != sale.total_amount or cost != sale.total_cost:
                issues.append(
                    f'Sale {sale.pk}: items add up to {amount}/{cost}, '
                    f'sale records {sale.total_amount}/{sale.total_cost}'
                )
            if sale.is_unpaid and not sale.customer_id:
                issues.append(f'Unpaid sale {sale.pk} has no customer')
        return issues

    def print_summary(self):
        self.stdout.write('\n=== SUMMARY ===')
        stats = dashboard_stats(Ledger.load().state)
        self.stdout.write(f"Stock value: {stats['total_stock_value']}")
        self.stdout.write(f"Total sales: {stats['total_sales']}")
        self.stdout.write(f"Total profit: {stats['total_profit']}")
        self.stdout.write(f"Receivables: {stats['total_receivables']} across {Customer.objects.count()} customers")
        self.stdout.write(f"Payables: {stats['total_payables']} across {Supplier.objects.count()} suppliers")
