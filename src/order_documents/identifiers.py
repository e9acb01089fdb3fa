"""
Order Identifier Encoder

One resolved identifier is printed on the invoice header and the shipping
label, and encoded into both the Code 128 barcode and the QR payload, so
every scan path resolves to the same order.
"""
from typing import Optional

import config


def resolve_order_identifier(
    order_number: Optional[str],
    record_id: Optional[str],
    prefix: Optional[str] = None,
) -> str:
    """
    Resolve the human-facing and machine-scannable order identifier.

    Args:
        order_number: Human-assigned order number (may be empty)
        record_id: Internal record identifier (usually a UUID)
        prefix: Canonical organization prefix (defaults to config.ORDER_ID_PREFIX)

    Returns:
        The order number verbatim when it carries the canonical prefix
        (compared case-insensitively, so AiRS- and AIRS- both match),
        otherwise "ORD-" + the first 8 characters of the record id, uppercased.

    Example:
        >>> resolve_order_identifier(None, "a1b2c3d4-0000-4000-8000-000000000000")
        'ORD-A1B2C3D4'
    """
    prefix = config.ORDER_ID_PREFIX if prefix is None else prefix
    number = (order_number or '').strip()
    if number and prefix and number.upper().startswith(prefix.upper()):
        return number

    source = (record_id or '').strip() or number
    head = source[:config.SYNTHETIC_ORDER_ID_LENGTH].upper()
    return f"{config.SYNTHETIC_ORDER_ID_PREFIX}{head}"


def print_target_name(kind: str, identifier: str) -> str:
    """Print/export target name, e.g. 'Invoice-ORD-A1B2C3D4'."""
    return f"{kind}-{identifier}"


def quotation_filename(quotation_number: str) -> str:
    """Download filename for a FaaS quotation document."""
    return f"{config.QUOTATION_FILENAME_PREFIX}{quotation_number}.pdf"
