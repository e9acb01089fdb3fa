"""
Address, Contact, Currency and Date Formatting
Turns structured records (or their absence) into canonical display strings.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional

import config
from .models import ADDRESS_PENDING


# Historical address rows use either short or long key names
_LINE1_KEYS = ('line1', 'address_line_1')
_LINE2_KEYS = ('line2', 'address_line_2')
_POSTAL_KEYS = ('postal_code', 'postalCode', 'pincode')


def _first(record: Dict[str, Any], keys) -> str:
    for key in keys:
        value = record.get(key)
        if value is not None and str(value).strip():
            return str(value).strip()
    return ''


def _text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


def format_address(record: Optional[Dict[str, Any]]) -> str:
    """
    Format an address record as a multi-line block.

    Args:
        record: Mapping with line1, line2, city, state, postal_code, country
                (long-form address_line_1/address_line_2 keys also accepted),
                or None when the address satellite row does not exist.

    Returns:
        Newline-joined non-empty parts in the order
        [line1, line2, "city, state postal_code", country],
        or "Address pending" when there is nothing to show.
    """
    if not record:
        return ADDRESS_PENDING

    city = _text(record.get('city'))
    state = _text(record.get('state'))
    postal = _first(record, _POSTAL_KEYS)

    region = ' '.join(part for part in (state, postal) if part)
    city_line = ', '.join(part for part in (city, region) if part)

    parts = [
        _first(record, _LINE1_KEYS),
        _first(record, _LINE2_KEYS),
        city_line,
        _text(record.get('country')),
    ]
    lines = [part for part in parts if part]
    if not lines:
        return ADDRESS_PENDING
    return '\n'.join(lines)


def format_contact(email: str = '', phone: str = '') -> str:
    """Newline-joined non-empty contact values."""
    return '\n'.join(value for value in (_text(email), _text(phone)) if value)


# ═══════════════════════════════════════════════════════
# CURRENCY
# ═══════════════════════════════════════════════════════

def to_decimal(value: Any, default: Decimal = Decimal('0')) -> Decimal:
    """Convert a loosely-typed numeric value to Decimal, returning default on failure."""
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value if value.is_finite() else default
    if isinstance(value, int):
        return Decimal(value)
    if isinstance(value, float):
        # repr keeps the shortest exact decimal form (0.1 -> "0.1")
        value = repr(value)
    text = str(value).replace(',', '').replace('₹', '').strip()
    if not text:
        return default
    try:
        result = Decimal(text)
    except (InvalidOperation, ValueError):
        return default
    return result if result.is_finite() else default


def _group_digits(digits: str, grouping: str) -> str:
    if grouping == 'en_IN' and len(digits) > 3:
        # Indian grouping: last three digits, then pairs (12,34,567)
        head, tail = digits[:-3], digits[-3:]
        pairs = []
        while len(head) > 2:
            pairs.insert(0, head[-2:])
            head = head[:-2]
        if head:
            pairs.insert(0, head)
        return ','.join(pairs + [tail])
    return f"{int(digits):,}"


def format_amount(amount: Any, grouping: Optional[str] = None) -> str:
    """
    Format a number with locale digit grouping.

    Fractional digits are kept exactly as stored (trailing zeros dropped);
    no rounding is applied.
    """
    grouping = grouping or config.CURRENCY_GROUPING
    value = to_decimal(amount)
    sign = '-' if value < 0 else ''
    text = format(abs(value), 'f')
    if '.' in text:
        whole, fraction = text.split('.', 1)
        fraction = fraction.rstrip('0')
    else:
        whole, fraction = text, ''
    grouped = _group_digits(whole or '0', grouping)
    return f"{sign}{grouped}.{fraction}" if fraction else f"{sign}{grouped}"


def format_currency(amount: Any, symbol: Optional[str] = None, grouping: Optional[str] = None) -> str:
    """Prefix a grouped amount with the literal currency glyph (e.g. ₹1,23,456)."""
    if symbol is None:
        symbol = config.CURRENCY_SYMBOL
    return f"{symbol}{format_amount(amount, grouping)}"


# ═══════════════════════════════════════════════════════
# DATES
# ═══════════════════════════════════════════════════════

def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp (or pass a datetime through); None if unparseable."""
    if isinstance(value, datetime):
        return value
    if not value:
        return None
    text = str(value).strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    for fmt in ('%Y-%m-%d %H:%M:%S', '%Y-%m-%d', '%d/%m/%Y'):
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def format_invoice_date(value: Optional[datetime]) -> str:
    """Invoice header date, e.g. '05 Mar, 2026'."""
    return value.strftime('%d %b, %Y') if value else ''


def format_label_date(value: Optional[datetime]) -> str:
    """Shipping label date, e.g. '5 MAR 2026'."""
    if not value:
        return ''
    return f"{value.day} {value.strftime('%b %Y')}".upper()


def format_quotation_date(value: Optional[datetime]) -> str:
    """Quotation date, e.g. '05/03/2026'."""
    return value.strftime('%d/%m/%Y') if value else ''
