"""
Pricing Resolver
Decides priced vs custom-quote mode and derives order totals from line items.
"""
from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

import config
from .models import CUSTOM_QUOTE_NOTICE, OrderLineItem, PricingMode


@dataclass(frozen=True)
class PricingSummary:
    """Totals for one order. Custom quotes carry the contract notice instead."""
    mode: PricingMode
    subtotal: Decimal = Decimal("0")
    total: Decimal = Decimal("0")
    discount: Decimal = Decimal("0")  # reserved, not wired into totals

    @property
    def shows_prices(self) -> bool:
        return self.mode is PricingMode.PRICED

    @property
    def notice(self) -> Optional[str]:
        return None if self.shows_prices else CUSTOM_QUOTE_NOTICE


class PricingResolver:
    """Arithmetic order pricing (no tax, no discount)."""

    def __init__(self, rental_order_type: str = None, zero_total_is_quote: bool = None):
        """
        Args:
            rental_order_type: Order category always priced by contract
            zero_total_is_quote: Treat a zero total as a custom quote
        """
        self.rental_order_type = (rental_order_type or config.RENTAL_ORDER_TYPE).lower()
        if zero_total_is_quote is None:
            zero_total_is_quote = config.ZERO_TOTAL_IS_CUSTOM_QUOTE
        self.zero_total_is_quote = zero_total_is_quote

    @staticmethod
    def sum_line_totals(items: Iterable[OrderLineItem]) -> Decimal:
        return sum((item.line_total for item in items), Decimal("0"))

    def is_custom_quote(self, order_type: Optional[str], total: Decimal) -> bool:
        """
        Rental orders are always custom quotes. A zero total is also treated
        as a custom quote when zero_total_is_quote is on, which makes a
        zero-priced catalog order indistinguishable from a genuine quote.
        """
        if (order_type or '').strip().lower() == self.rental_order_type:
            return True
        return self.zero_total_is_quote and total == 0

    def resolve(self, items: Iterable[OrderLineItem], is_custom_quote: bool) -> PricingSummary:
        """Build the pricing summary for an already-decided pricing branch."""
        if is_custom_quote:
            return PricingSummary(mode=PricingMode.CUSTOM_QUOTE)
        subtotal = self.sum_line_totals(items)
        return PricingSummary(mode=PricingMode.PRICED, subtotal=subtotal, total=subtotal)
