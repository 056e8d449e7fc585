from datetime import date, datetime


def month_key(value: date) -> str:
    """
    Calendar month bucket of a date/datetime.
    Example:
      2024-03-15 14:02 → "2024-03"
    """
    return f"{value.year:04d}-{value.month:02d}"


def month_key_to_label(key: str) -> str:
    return datetime.strptime(key, "%Y-%m").strftime("%B %Y")


def parse_timestamp(value) -> datetime:
    """
    Accepts a datetime, a date or an ISO 8601 string ("Z" suffix allowed).
    Always returns a timezone-naive datetime.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        parsed = datetime.fromisoformat(text)

    return parsed.replace(tzinfo=None)
