from typing import Any, Dict, Iterable, Optional
from datetime import timezone
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from urllib.parse import urlparse
import math
import re

import dateutil.parser

# Symbols used by en-US currency formatting for the codes the job APIs return
CURRENCY_SYMBOLS = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "CAD": "CA$",
    "AUD": "A$",
    "NZD": "NZ$",
    "INR": "₹",
    "JPY": "¥",
    "CNY": "CN¥",
    "BRL": "R$",
    "MXN": "MX$",
}

# Rate interval keywords, checked in order; first match wins
SALARY_UNITS = [
    ("year", "yr"),
    ("hour", "hr"),
    ("week", "wk"),
    ("month", "mo"),
    ("day", "day"),
]

def clean_text(text: str) -> str:
    """
    Clean text by removing extra whitespace and newlines

    Args:
        text: The text to clean

    Returns:
        Cleaned text
    """
    if not text:
        return ""

    # Remove extra whitespace
    text = re.sub(r'\s+', ' ', str(text))
    return text.strip()

def normalize_key(text: str) -> str:
    """
    Normalize text for use inside a dedupe key

    Lowercases, collapses whitespace runs, then drops every character
    that is not an ASCII letter, digit or whitespace.
    """
    text = (text or "").lower()
    text = re.sub(r'\s+', ' ', text)
    text = re.sub(r'[^a-z0-9\s]', '', text)
    return text.strip()

def host_from_url(url: str) -> str:
    """
    Return the hostname of an absolute URL without a leading "www."

    Returns an empty string when the value is not an absolute URL.
    """
    if not url:
        return ""

    try:
        parsed = urlparse(str(url).strip())
        hostname = parsed.hostname
    except ValueError:
        return ""

    if not parsed.scheme or not hostname:
        return ""

    return re.sub(r'^www\.', '', hostname)

def first_value(record: Dict[str, Any], *keys: str) -> Any:
    """Return the first truthy value found under the given keys"""
    for key in keys:
        value = record.get(key)
        if value:
            return value
    return None

def to_number(value: Any) -> Optional[float]:
    """
    Convert an upstream value to a finite float

    Missing values, booleans, blank strings and anything that does not
    parse as a finite number give None.
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        if not value.strip():
            return None
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None

    return number if math.isfinite(number) else None

def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up, like currency displays do"""
    return int(Decimal(str(value)).quantize(Decimal(1), rounding=ROUND_HALF_UP))

def format_currency(amount: float, currency: str = "USD") -> str:
    """
    Format an amount as a whole-unit currency string with grouped thousands

    Falls back to a "$"-prefixed grouped integer when the currency code
    cannot be used.
    """
    try:
        code = str(currency or "USD").strip().upper()
        if not re.fullmatch(r'[A-Z]{3}', code):
            raise ValueError(f"Invalid currency code: {currency!r}")

        rounded = round_half_up(amount)
        sign = "-" if rounded < 0 else ""
        grouped = f"{abs(rounded):,}"

        symbol = CURRENCY_SYMBOLS.get(code)
        if symbol:
            return f"{sign}{symbol}{grouped}"
        return f"{sign}{code} {grouped}"
    except (ValueError, TypeError, InvalidOperation):
        return f"${round_half_up(amount):,}"

def format_salary_range(min_value: Any, max_value: Any, currency: str = "USD", unit: str = "") -> str:
    """
    Build a human-readable salary string from numeric bounds

    Args:
        min_value: Lower bound, may be missing or non-numeric
        max_value: Upper bound, may be missing or non-numeric
        currency: ISO currency code
        unit: Optional pay unit such as "yr" or "hr"

    Returns:
        "$50,000", "$50,000–$70,000", "$25/hr", or "" when no bound is usable
    """
    low = to_number(min_value)
    high = to_number(max_value)
    suffix = f"/{unit}" if unit else ""

    if low is None and high is None:
        return ""

    if low is not None and high is not None:
        if round_half_up(low) == round_half_up(high):
            return f"{format_currency(low, currency)}{suffix}"
        return f"{format_currency(low, currency)}–{format_currency(high, currency)}{suffix}"

    value = low if low is not None else high
    return f"{format_currency(value, currency)}{suffix}"

def salary_unit_from_interval(*codes: str) -> str:
    """
    Derive a pay unit suffix from rate interval codes or descriptions

    Each candidate is checked in turn; within a candidate the first
    matching keyword wins.
    """
    for code in codes:
        text = str(code or "").lower()
        for keyword, unit in SALARY_UNITS:
            if keyword in text:
                return unit
    return ""

def _parse_datetime(value: Any):
    if value is None:
        return None

    text = str(value).strip()
    if not text:
        return None

    try:
        parsed = dateutil.parser.parse(text)
    except (ValueError, OverflowError, TypeError):
        return None

    if not parsed.tzinfo:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed

def parse_posted_timestamp(value: Any) -> float:
    """Epoch seconds for a posting date; 0 when missing or unparsable so it sorts last"""
    parsed = _parse_datetime(value)
    if parsed is None:
        return 0.0
    try:
        return parsed.timestamp()
    except (OverflowError, OSError, ValueError):
        return 0.0

def posted_iso(value: Any) -> str:
    """ISO-8601 rendering of a posting date, or "" when it cannot be parsed"""
    parsed = _parse_datetime(value)
    return parsed.isoformat() if parsed else ""

def truncate(text: str, limit: int) -> str:
    """Cut text down to at most `limit` characters"""
    return (text or "")[:limit]

def unique_preserving_order(items: Iterable[str]) -> list:
    """Drop repeated strings while keeping first-seen order"""
    seen = set()
    out = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        out.append(item)
    return out
