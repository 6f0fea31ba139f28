from io import StringIO

from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import TestCase

from core.models import Customer, Product, Sale, Supplier


class SeedShopTest(TestCase):
    def test_seeds_empty_shop(self):
        out = StringIO()
        call_command('seed_shop', '--credit', stdout=out)
        self.assertEqual(Supplier.objects.count(), 2)
        self.assertEqual(Customer.objects.count(), 2)
        self.assertEqual(Product.objects.count(), 5)
        self.assertTrue(all(s.balance > 0 for s in Supplier.objects.all()))
        self.assertIn('Demo data setup completed successfully!', out.getvalue())

    def test_skips_when_data_exists(self):
        call_command('seed_shop', stdout=StringIO())
        out = StringIO()
        call_command('seed_shop', stdout=out)
        self.assertEqual(Product.objects.count(), 5)
        self.assertIn('nothing to seed', out.getvalue())


class CheckLedgerTest(TestCase):
    def test_consistent_ledger(self):
        call_command('seed_shop', stdout=StringIO())
        out = StringIO()
        call_command('check_ledger', '--summary', stdout=out)
        self.assertIn('Ledger is consistent', out.getvalue())
        self.assertIn('Stock value:', out.getvalue())

    def test_reports_broken_sale(self):
        Sale.objects.create(id='broken', total_amount=10, total_cost=4, profit=5)
        with self.assertRaises(CommandError):
            call_command('check_ledger', stdout=StringIO())
