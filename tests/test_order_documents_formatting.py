"""
Order Documents - Formatting, Identifier and Pricing Tests
==========================================================

Verifies:
- Address blocks keep the [line1, line2, city line, country] order and fall
  back to "Address pending".
- Currency amounts use Indian digit grouping without rounding.
- The resolved identifier is the prefixed order number or ORD-<record id>.
- The custom-quote rule (rental OR zero total) and its config switch.
"""
import sys
import unittest
from datetime import datetime
from decimal import Decimal
from pathlib import Path

# Ensure src/ is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))

from order_documents.formatting import (  # noqa: E402
    format_address,
    format_amount,
    format_contact,
    format_currency,
    format_invoice_date,
    format_label_date,
    format_quotation_date,
    parse_timestamp,
    to_decimal,
)
from order_documents.identifiers import (  # noqa: E402
    print_target_name,
    quotation_filename,
    resolve_order_identifier,
)
from order_documents.models import ADDRESS_PENDING, OrderLineItem, PricingMode  # noqa: E402
from order_documents.pricing import PricingResolver  # noqa: E402


class TestFormatAddress(unittest.TestCase):

    def test_full_address_order(self):
        text = format_address({
            "line1": "12 Main St", "line2": "Near Park", "city": "Pune",
            "state": "MH", "postal_code": "411001", "country": "India",
        })
        self.assertEqual(text, "12 Main St\nNear Park\nPune, MH 411001\nIndia")

    def test_long_form_keys(self):
        text = format_address({"address_line_1": "Plot 7", "city": "Pune", "pincode": "411026"})
        self.assertEqual(text, "Plot 7\nPune, 411026")

    def test_empty_parts_are_skipped(self):
        text = format_address({"line1": "12 Main St", "line2": "", "city": None, "country": "India"})
        self.assertEqual(text, "12 Main St\nIndia")

    def test_missing_record_is_pending(self):
        self.assertEqual(format_address(None), ADDRESS_PENDING)
        self.assertEqual(format_address({}), ADDRESS_PENDING)
        self.assertEqual(format_address({"line1": "  ", "city": ""}), ADDRESS_PENDING)

    def test_contact_lines(self):
        self.assertEqual(format_contact("a@b.com", "99"), "a@b.com\n99")
        self.assertEqual(format_contact("", "99"), "99")
        self.assertEqual(format_contact(), "")


class TestCurrency(unittest.TestCase):

    def test_indian_grouping(self):
        self.assertEqual(format_amount(123456, "en_IN"), "1,23,456")
        self.assertEqual(format_amount(12345678, "en_IN"), "1,23,45,678")
        self.assertEqual(format_amount(999, "en_IN"), "999")

    def test_western_grouping(self):
        self.assertEqual(format_amount(12345678, "en_US"), "12,345,678")

    def test_fraction_kept_without_rounding(self):
        self.assertEqual(format_amount(Decimal("18999.50"), "en_IN"), "18,999.5")
        self.assertEqual(format_amount(Decimal("0.125"), "en_IN"), "0.125")

    def test_currency_symbol_prefix(self):
        self.assertEqual(format_currency(123456, symbol="₹", grouping="en_IN"), "₹1,23,456")

    def test_to_decimal_loose_inputs(self):
        self.assertEqual(to_decimal("1,200"), Decimal("1200"))
        self.assertEqual(to_decimal("₹ 50"), Decimal("50"))
        self.assertEqual(to_decimal(0.1), Decimal("0.1"))
        self.assertEqual(to_decimal("abc"), Decimal("0"))
        self.assertEqual(to_decimal(None), Decimal("0"))
        self.assertEqual(to_decimal(True), Decimal("0"))
        self.assertEqual(to_decimal("NaN"), Decimal("0"))


class TestDates(unittest.TestCase):

    def test_parse_iso_with_zulu(self):
        value = parse_timestamp("2026-03-05T10:15:00Z")
        self.assertEqual((value.year, value.month, value.day), (2026, 3, 5))

    def test_parse_invalid(self):
        self.assertIsNone(parse_timestamp("not a date"))
        self.assertIsNone(parse_timestamp(None))

    def test_formats(self):
        value = datetime(2026, 3, 5)
        self.assertEqual(format_invoice_date(value), "05 Mar, 2026")
        self.assertEqual(format_label_date(value), "5 MAR 2026")
        self.assertEqual(format_quotation_date(value), "05/03/2026")
        self.assertEqual(format_label_date(None), "")


class TestIdentifiers(unittest.TestCase):

    def test_synthetic_identifier_from_record_id(self):
        ident = resolve_order_identifier(None, "a1b2c3d4-5e6f-4a7b-8c9d-0e1f2a3b4c5d", prefix="AIRS-")
        self.assertEqual(ident, "ORD-A1B2C3D4")

    def test_prefixed_order_number_used_verbatim(self):
        ident = resolve_order_identifier("AIRS-2026-0007", "ffee0011-0000", prefix="AIRS-")
        self.assertEqual(ident, "AIRS-2026-0007")

    def test_prefix_match_ignores_case(self):
        ident = resolve_order_identifier("AiRS-2026-0007", "ffee0011-0000", prefix="AIRS-")
        self.assertEqual(ident, "AiRS-2026-0007")
        ident = resolve_order_identifier("airs-2026-0008", "ffee0011-0000", prefix="AiRS-")
        self.assertEqual(ident, "airs-2026-0008")

    def test_unprefixed_order_number_is_ignored(self):
        ident = resolve_order_identifier("12345", "deadbeef-0000", prefix="AIRS-")
        self.assertEqual(ident, "ORD-DEADBEEF")

    def test_print_target_names(self):
        self.assertEqual(print_target_name("Invoice", "ORD-A1B2C3D4"), "Invoice-ORD-A1B2C3D4")
        self.assertEqual(print_target_name("Label", "ORD-A1B2C3D4"), "Label-ORD-A1B2C3D4")
        self.assertTrue(quotation_filename("FQ-1").endswith("FQ-1.pdf"))


class TestPricingResolver(unittest.TestCase):

    def setUp(self):
        self.resolver = PricingResolver(rental_order_type="rental", zero_total_is_quote=True)

    def test_rental_is_custom_quote(self):
        self.assertTrue(self.resolver.is_custom_quote("rental", Decimal("5000")))
        self.assertTrue(self.resolver.is_custom_quote("Rental", Decimal("5000")))

    def test_zero_total_is_custom_quote(self):
        self.assertTrue(self.resolver.is_custom_quote("standard", Decimal("0")))

    def test_priced_order(self):
        self.assertFalse(self.resolver.is_custom_quote("standard", Decimal("10")))

    def test_zero_total_switch_off(self):
        resolver = PricingResolver(rental_order_type="rental", zero_total_is_quote=False)
        self.assertFalse(resolver.is_custom_quote("standard", Decimal("0")))
        self.assertTrue(resolver.is_custom_quote("rental", Decimal("0")))

    def test_resolve_priced(self):
        items = [
            OrderLineItem(line_total=Decimal("9000")),
            OrderLineItem(line_total=Decimal("18999.5")),
        ]
        summary = self.resolver.resolve(items, is_custom_quote=False)
        self.assertEqual(summary.mode, PricingMode.PRICED)
        self.assertTrue(summary.shows_prices)
        self.assertEqual(summary.subtotal, Decimal("27999.5"))
        self.assertEqual(summary.total, summary.subtotal)
        self.assertIsNone(summary.notice)

    def test_resolve_custom_quote_hides_prices(self):
        summary = self.resolver.resolve([OrderLineItem(line_total=Decimal("10"))], is_custom_quote=True)
        self.assertEqual(summary.mode, PricingMode.CUSTOM_QUOTE)
        self.assertFalse(summary.shows_prices)
        self.assertIsNotNone(summary.notice)


if __name__ == '__main__':
    unittest.main()
