from core import settings


def money(amount) -> str:
    """
    Whole-currency display, sign kept.
    Example:
      -2000 → "₹ -2,000"
    """
    return f"{settings.CURRENCY_SYMBOL} {amount:,.0f}"
