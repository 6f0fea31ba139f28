from django.conf import settings

DEFAULTS = {
    'CURRENCY_SYMBOL': 'Rs.',
    'LOW_STOCK_THRESHOLD': 5,
    'DASHBOARD_MONTHS': 6,
}


def shop_setting(name):
    """Look up a shop setting from ``settings.DUKAAN``, falling back to the default."""
    overrides = getattr(settings, 'DUKAAN', {}) or {}
    if name in overrides:
        return overrides[name]
    return DEFAULTS[name]
