"""Display helpers shared by the CLI and the dashboard server."""

from datetime import datetime, timedelta, timezone
from typing import Optional, Union

DateLike = Union[str, datetime]

STATUS_DISPLAY_NAMES = {
    "in_stock": "In Stock",
    "moved": "Moved to Store",
    "discarded": "Discarded",
    "active": "Active",
    "expired": "Expired",
    "removed": "Removed",
}


def parse_datetime(value: DateLike) -> datetime:
    """Parse an ISO-8601 string (``Z`` suffix allowed) or pass a datetime through."""
    if isinstance(value, datetime):
        return value
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return datetime.fromisoformat(text)


def _now_like(moment: datetime) -> datetime:
    """Current time, aware or naive to match ``moment``."""
    if moment.tzinfo is not None:
        return datetime.now(timezone.utc)
    return datetime.now()


def format_date(value: DateLike) -> str:
    return parse_datetime(value).strftime("%b %d, %Y")


def format_datetime(value: DateLike) -> str:
    return parse_datetime(value).strftime("%b %d, %Y %H:%M")


def format_currency(amount: float) -> str:
    """Format ``amount`` as US dollars, e.g. ``$1,234.50``."""
    sign = "-" if amount < 0 else ""
    return f"{sign}${abs(amount):,.2f}"


def is_expired(value: DateLike, now: Optional[datetime] = None) -> bool:
    moment = parse_datetime(value)
    now = now or _now_like(moment)
    return moment < now


def is_expiring_soon(value: DateLike, now: Optional[datetime] = None, days: int = 7) -> bool:
    """True when ``value`` falls strictly between now and ``days`` from now."""
    moment = parse_datetime(value)
    now = now or _now_like(moment)
    return now < moment < now + timedelta(days=days)


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def calculate_discount_price(original_price: float, discount_percentage: float) -> float:
    """Display-only price after a percentage discount; the backend stays authoritative."""
    return original_price * (1 - discount_percentage / 100)


def status_display_name(status: str) -> str:
    return STATUS_DISPLAY_NAMES.get(status.lower(), status)


def get_initials(email: str) -> str:
    """
    Avatar initials from an e-mail address.

    ``john.doe@x.com`` -> ``JD`` (first letter of each ``.``/``_`` part),
    ``johndoe@x.com`` -> ``JO`` (first two letters).
    """
    if not email:
        return ""

    name_part = email.split("@")[0]

    if "." in name_part or "_" in name_part:
        separator = "." if "." in name_part else "_"
        return "".join(part[:1].upper() for part in name_part.split(separator))

    return name_part[:2].upper()
