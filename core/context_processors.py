from .conf import shop_setting

NAV_ITEMS = [
    ('core:dashboard', 'Dashboard'),
    ('core:pos', 'Sales'),
    ('core:product_list', 'Stock'),
    ('core:customer_list', 'Customers'),
    ('core:supplier_list', 'Suppliers'),
    ('core:report_list', 'Reports'),
]


def shop(request):
    return {
        'nav_items': NAV_ITEMS,
        'currency_symbol': shop_setting('CURRENCY_SYMBOL'),
    }
