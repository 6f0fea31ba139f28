from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from django import template
from django.contrib.humanize.templatetags.humanize import intcomma

from core.conf import shop_setting

register = template.Library()


@register.filter
def currency(amount):
    """Whole-rupee display, e.g. ``Rs. 1,250``."""
    try:
        rounded = Decimal(str(amount)).quantize(Decimal('1'), rounding=ROUND_HALF_UP)
    except (InvalidOperation, TypeError, ValueError):
        return amount
    return f"{shop_setting('CURRENCY_SYMBOL')} {intcomma(int(rounded))}"

