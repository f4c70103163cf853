from decimal import Decimal, InvalidOperation

from django import template

register = template.Library()

CURRENCY_SIGN = "₦"


@register.filter
def format_date(value):
    """2025-03-01 -> "Mar 1, 2025"."""
    if not value:
        return ""
    return f"{value:%b} {value.day}, {value.year}"


@register.filter
def price(value):
    """Цена с разделителями тысяч и знаком найры, пустая цена -> ₦0."""
    if value is None or value == "":
        return f"{CURRENCY_SIGN}0"

    try:
        amount = Decimal(value).quantize(Decimal("0.001"))
    except (InvalidOperation, TypeError, ValueError):
        # цена пришла не числом ("45,000"), показываем как есть
        return f"{CURRENCY_SIGN}{value}"
    if amount == amount.to_integral_value():
        text = f"{int(amount):,}"
    else:
        text = f"{amount:,f}".rstrip("0")
    return f"{CURRENCY_SIGN}{text}"


@register.filter
def or_na(value):
    return value or "N/A"
