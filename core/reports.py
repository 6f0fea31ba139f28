"""Figures derived from a ShopState for the dashboard, stock and sales pages."""

from django.utils import timezone

from .conf import shop_setting
from .inputs import ZERO

WALK_IN = 'Walk-in'


def dashboard_stats(state):
    products = state.products.values()
    sales = state.sales.values()
    return {
        'total_stock_value': sum((p.stock_value for p in products), ZERO),
        'total_profit': sum((s.profit for s in sales), ZERO),
        'total_sales': sum((s.total_amount for s in sales), ZERO),
        'total_receivables': sum((c.balance for c in state.customers.values()), ZERO),
        'total_payables': sum((s.balance for s in state.suppliers.values()), ZERO),
        'product_count': len(state.products),
        'sale_count': len(state.sales),
    }


def monthly_performance(sales, months=None):
    """Sales and profit per calendar month for the latest ``months`` months that had sales.

    Each row also carries bar heights as a percentage of the largest value
    in the window.
    """
    if months is None:
        months = shop_setting('DASHBOARD_MONTHS')
    buckets = {}
    for sale in sales:
        sold_at = timezone.localtime(sale.date)
        key = (sold_at.year, sold_at.month)
        bucket = buckets.setdefault(key, {
            'label': sold_at.strftime('%b %y'),
            'sales': ZERO,
            'profit': ZERO,
        })
        bucket['sales'] += sale.total_amount
        bucket['profit'] += sale.profit

    rows = [buckets[key] for key in sorted(buckets)][-months:] if months > 0 else []
    peak = max([1] + [row['sales'] for row in rows] + [row['profit'] for row in rows])
    for row in rows:
        row['sales_pct'] = max(0.0, float(row['sales'] / peak * 100))
        row['profit_pct'] = max(0.0, float(row['profit'] / peak * 100))
    return rows


def low_stock(products, threshold=None):
    if threshold is None:
        threshold = shop_setting('LOW_STOCK_THRESHOLD')
    return [product for product in products if product.stock < threshold]


def search(records, term):
    """Case-insensitive name match; an empty term matches everything."""
    term = (term or '').strip().lower()
    return [record for record in records if term in record.name.lower()]


def sellable_products(products, term=''):
    return [product for product in search(products, term) if product.stock > 0]


def customer_sales(state, customer_id):
    sales = [sale for sale in state.sales.values() if sale.customer_id == customer_id]
    return sorted(sales, key=lambda sale: sale.date, reverse=True)


def customer_name(state, sale):
    customer = state.customers.get(sale.customer_id) if sale.customer_id else None
    return customer.name if customer else WALK_IN


def sales_report(state):
    """Sales newest first, each paired with the name shown for its customer."""
    sales = sorted(state.sales.values(), key=lambda sale: sale.date, reverse=True)
    return [
        {'sale': sale, 'customer_name': customer_name(state, sale)}
        for sale in sales
    ]
