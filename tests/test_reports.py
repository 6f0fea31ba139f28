from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

from django.test import SimpleTestCase, TestCase, override_settings

from core import reports
from core.inputs import CartLine, CheckoutInput, CustomerInput, ProductInput, SupplierInput
from core.ledger import Ledger
from core.models import Product, Sale


def sale_on(year, month, amount, profit):
    return Sale(
        date=datetime(year, month, 15, 12, tzinfo=dt_timezone.utc),
        total_amount=Decimal(amount),
        total_cost=Decimal(amount) - Decimal(profit),
        profit=Decimal(profit),
    )


class MonthlyPerformanceTest(SimpleTestCase):
    def test_groups_by_month_in_order(self):
        rows = reports.monthly_performance([
            sale_on(2026, 9, '100', '20'),
            sale_on(2026, 8, '300', '60'),
            sale_on(2026, 9, '100', '20'),
        ], months=6)
        self.assertEqual([row['label'] for row in rows], ['Aug 26', 'Sep 26'])
        self.assertEqual(rows[1]['sales'], Decimal('200'))
        self.assertEqual(rows[0]['sales_pct'], 100.0)
        self.assertEqual(rows[0]['profit_pct'], 20.0)

    def test_keeps_latest_months_only(self):
        sales = [sale_on(2026, month, '10', '1') for month in range(1, 10)]
        rows = reports.monthly_performance(sales, months=3)
        self.assertEqual([row['label'] for row in rows], ['Jul 26', 'Aug 26', 'Sep 26'])

    def test_loss_making_month_has_no_negative_bar(self):
        rows = reports.monthly_performance([sale_on(2026, 5, '0.50', '-0.20')], months=6)
        self.assertEqual(rows[0]['profit_pct'], 0.0)
        self.assertEqual(rows[0]['sales_pct'], 50.0)

    def test_no_sales(self):
        self.assertEqual(reports.monthly_performance([], months=6), [])


class SearchTest(SimpleTestCase):
    def setUp(self):
        self.products = [
            Product(name="Green Tea", stock=0),
            Product(name="Black Tea", stock=4),
            Product(name="Rice", stock=9),
        ]

    def test_case_insensitive(self):
        self.assertEqual([p.name for p in reports.search(self.products, 'TEA')], ["Green Tea", "Black Tea"])

    def test_empty_term_matches_all(self):
        self.assertEqual(len(reports.search(self.products, '  ')), 3)

    def test_sellable_excludes_out_of_stock(self):
        self.assertEqual([p.name for p in reports.sellable_products(self.products, 'tea')], ["Black Tea"])

    @override_settings(DUKAAN={'LOW_STOCK_THRESHOLD': 5})
    def test_low_stock(self):
        self.assertEqual([p.name for p in reports.low_stock(self.products)], ["Green Tea", "Black Tea"])


class DashboardStatsTest(TestCase):
    def setUp(self):
        self.ledger = Ledger.load()
        supplier = self.ledger.create_supplier(SupplierInput(name="Lahore Traders"))
        self.customer = self.ledger.create_customer(CustomerInput(name="Ahmed"))
        self.product = self.ledger.create_product(
            ProductInput(name="Rice", category="Grocery", supplier_id=supplier.pk,
                         stock=10, purchase_price="50", selling_price="80"),
            credit_purchase=True,
        )
        self.sale = self.ledger.checkout(CheckoutInput(
            lines=[CartLine(self.product.pk, self.product.name, 2, "50", "80")],
            payment_status='unpaid',
            customer_id=self.customer.pk,
        ))

    def test_totals(self):
        stats = reports.dashboard_stats(self.ledger.state)
        self.assertEqual(stats['total_stock_value'], Decimal('400.00'))
        self.assertEqual(stats['total_sales'], Decimal('160.00'))
        self.assertEqual(stats['total_profit'], Decimal('60.00'))
        self.assertEqual(stats['total_receivables'], Decimal('160.00'))
        self.assertEqual(stats['total_payables'], Decimal('500.00'))
        self.assertEqual(stats['product_count'], 1)
        self.assertEqual(stats['sale_count'], 1)

    def test_customer_name_falls_back_to_walk_in(self):
        self.assertEqual(reports.customer_name(self.ledger.state, self.sale), "Ahmed")
        self.ledger.delete_customer(self.customer.pk)
        self.assertEqual(reports.customer_name(self.ledger.state, self.sale), reports.WALK_IN)
        self.assertEqual(reports.sales_report(self.ledger.state)[0]['customer_name'], reports.WALK_IN)

    def test_customer_sales(self):
        self.assertEqual(reports.customer_sales(self.ledger.state, self.customer.pk), [self.sale])
        self.assertEqual(reports.customer_sales(self.ledger.state, 'other'), [])
