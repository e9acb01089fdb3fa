"""
Order Normalizer
Merges an order row, its optional satellite records and its line-item payload
into one canonical OrderDocument.
"""
from __future__ import annotations

import json
from decimal import Decimal
from typing import Any, Dict, List, Optional

from utils.logger import get_logger
from .formatting import format_address, parse_timestamp, to_decimal
from .identifiers import resolve_order_identifier
from .models import (
    ADDRESS_PENDING,
    CUSTOMER_PLACEHOLDER,
    OrderBundle,
    OrderDocument,
    OrderLineItem,
    OrderStatus,
)
from .pricing import PricingResolver


def _text(value: Any) -> str:
    if value is None:
        return ''
    return str(value).strip()


def _pick(*values: Any) -> str:
    """First non-blank value in precedence order, else empty string."""
    for value in values:
        text = _text(value)
        if text:
            return text
    return ''


def _parse_quantity(value: Any) -> int:
    """Quantity as a non-negative int; absent or unparseable defaults to 1."""
    if value is None or isinstance(value, bool):
        return 1
    quantity = to_decimal(value, default=None)
    if quantity is None or quantity < 0:
        return 1
    return int(quantity)


class OrderNormalizer:
    """Normalizes fragmented order records into the canonical document"""

    # Legacy payloads store the display name under either key
    NAME_KEYS = ('title', 'name')
    LINE_TOTAL_KEYS = ('total', 'line_total')

    def __init__(self, pricing_resolver: PricingResolver = None, order_id_prefix: str = None):
        """
        Args:
            pricing_resolver: Decides the priced / custom-quote branch
            order_id_prefix: Canonical prefix for human order numbers
        """
        self.pricing_resolver = pricing_resolver or PricingResolver()
        self.order_id_prefix = order_id_prefix

    def normalize_line_item(self, raw_item: Dict[str, Any]) -> OrderLineItem:
        """
        Normalize a single line item from either historical payload shape.

        Args:
            raw_item: Raw line item
            {
                'id': str,
                'title' | 'name': str,
                'quantity': int,
                'price': number,
                'total' | 'line_total': number (optional),
                'selected_options': dict (optional),
                'customization': str (optional),
                'sku': str (optional)
            }

        Returns:
            OrderLineItem with defaults applied to every missing field
        """
        name = _pick(*(raw_item.get(key) for key in self.NAME_KEYS)) or 'Product'
        quantity = _parse_quantity(raw_item.get('quantity'))
        unit_price = to_decimal(raw_item.get('price', raw_item.get('unit_price')))

        stored_total = None
        for key in self.LINE_TOTAL_KEYS:
            if raw_item.get(key) is not None:
                stored_total = to_decimal(raw_item.get(key), default=None)
                if stored_total is not None:
                    break
        line_total = stored_total if stored_total is not None else unit_price * quantity

        return OrderLineItem(
            id=_text(raw_item.get('id')) or 'sku',
            name=name,
            quantity=quantity,
            unit_price=unit_price,
            line_total=line_total,
            customization_note=self._customization_note(raw_item),
            sku=_text(raw_item.get('sku')) or None,
        )

    @staticmethod
    def _customization_note(raw_item: Dict[str, Any]) -> Optional[str]:
        note = _text(raw_item.get('customization'))
        if note:
            return note
        options = raw_item.get('selected_options')
        if not options:
            return None
        if isinstance(options, str):
            return options.strip() or None
        try:
            # sort_keys keeps the note identical across re-normalizations
            return json.dumps(options, sort_keys=True, ensure_ascii=False, default=str)
        except (TypeError, ValueError):
            return str(options)

    def normalize_line_items(self, payload: Any, order_id: str = '') -> List[OrderLineItem]:
        """
        Normalize the embedded line-item payload.

        Args:
            payload: List of raw items (or a JSON string of one)
            order_id: Used for log context only

        Returns:
            Normalized items; entries that are not objects are skipped
        """
        if isinstance(payload, str):
            try:
                payload = json.loads(payload)
            except ValueError:
                get_logger().warning(f"Order {order_id} - products payload is not valid JSON", component="Normalizer")
                return []
        if not isinstance(payload, list):
            return []

        items = []
        for index, raw_item in enumerate(payload):
            if not isinstance(raw_item, dict):
                get_logger().warning(
                    f"Order {order_id} - skipping line item {index}: expected object, got {type(raw_item).__name__}",
                    component="Normalizer"
                )
                continue
            items.append(self.normalize_line_item(raw_item))
        return items

    def normalize(
        self,
        order: Dict[str, Any],
        shipping_address: Optional[Dict[str, Any]] = None,
        billing_address: Optional[Dict[str, Any]] = None,
        customer_details: Optional[Dict[str, Any]] = None,
        payment_details: Optional[Dict[str, Any]] = None,
    ) -> OrderDocument:
        """
        Build the canonical OrderDocument.

        Pure: the same inputs always produce an equal document. Every missing
        optional input degrades to its documented default.
        """
        order = order or {}
        customer = customer_details or {}
        payment = payment_details or {}

        record_id = _text(order.get('id'))
        order_number = _text(order.get('order_number'))
        identifier = resolve_order_identifier(order_number, record_id, prefix=self.order_id_prefix)

        billing = format_address(billing_address)
        shipping = format_address(shipping_address)
        if shipping == ADDRESS_PENDING:
            shipping = billing

        items = self.normalize_line_items(order.get('products'), order_id=identifier)
        # Stored order totals are not authoritative yet; always recompute
        total = self.pricing_resolver.sum_line_totals(items)
        order_type = _text(order.get('order_type'))

        return OrderDocument(
            id=identifier,
            record_id=record_id,
            order_number=order_number,
            created_at=parse_timestamp(order.get('created_at')),
            customer_name=_pick(customer.get('name'), order.get('customer_name')) or CUSTOMER_PLACEHOLDER,
            email=_pick(customer.get('email'), order.get('email')),
            phone=_pick(customer.get('phone'), order.get('phone')),
            company=_pick(customer.get('company')),
            gst_number=_pick(customer.get('gst_number')),
            billing_address=billing,
            shipping_address=shipping,
            status=OrderStatus.parse(order.get('status') or OrderStatus.NEW.value),
            payment_status=_pick(payment.get('payment_status')) or 'pending',
            payment_method=_pick(payment.get('payment_method')),
            order_type=order_type,
            items=items,
            subtotal=total,
            total=total,
            discount=Decimal('0'),
            is_custom_quote=self.pricing_resolver.is_custom_quote(order_type, total),
            internal_notes=_text(order.get('internal_notes')),
        )

    def normalize_bundle(self, bundle: OrderBundle) -> OrderDocument:
        """Normalize an OrderBundle produced by the satellite lookups."""
        return self.normalize(
            bundle.order,
            shipping_address=bundle.shipping_address,
            billing_address=bundle.billing_address,
            customer_details=bundle.customer_details,
            payment_details=bundle.payment_details,
        )
