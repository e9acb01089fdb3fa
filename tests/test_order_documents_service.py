"""
Order Documents - Store, Lookup and Service Tests
================================================

Verifies:
- In-memory and Google Sheets stores return None for missing rows.
- The satellite fan-out tolerates failing and slow lookups independently.
- A missing order row raises OrderNotFoundError; an unreadable one raises
  RecordLookupError.
- Exports are written to per-request files and carry their print-target
  name as the download filename.
- Site settings failures fall back to configured defaults; labels fall back
  to the dispatch unit sender.
"""
import asyncio
import os
import shutil
import sys
import tempfile
import time
import unittest
from pathlib import Path
from unittest.mock import MagicMock, patch

# Ensure src/ is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))
sys.path.insert(0, str(Path(__file__).parent))

import config  # noqa: E402
from order_documents.errors import OrderNotFoundError, QuotationNotFoundError, RecordLookupError  # noqa: E402
from order_documents.lookup import fetch_order_bundle  # noqa: E402
from order_documents.models import ADDRESS_PENDING, OrganizationSettings  # noqa: E402
from order_documents.service import OrderDocumentService, remove_exported_file  # noqa: E402
from order_documents.store import InMemoryOrderStore, SheetsOrderStore, create_store  # noqa: E402
from order_fixtures import (  # noqa: E402
    ORDER_ID,
    QUOTATION_ID,
    RENTAL_ORDER_ID,
    billing_address,
    customer_details,
    full_store,
    order_row,
    payment_details,
    quotation_row,
    shipping_address,
)


class TestInMemoryStore(unittest.TestCase):

    def setUp(self):
        self.store = full_store()

    def test_rows_found(self):
        self.assertEqual(self.store.get_order(ORDER_ID)["id"], ORDER_ID)
        self.assertEqual(self.store.get_order_address(ORDER_ID, "shipping")["address_type"], "shipping")
        self.assertEqual(self.store.get_order_address(ORDER_ID, "billing")["line1"], "12 Main St")
        self.assertEqual(self.store.get_customer_details(ORDER_ID)["name"], "Asha Kulkarni")

    def test_missing_rows_are_none(self):
        self.assertIsNone(self.store.get_order("nope"))
        self.assertIsNone(self.store.get_order_address(RENTAL_ORDER_ID, "shipping"))
        self.assertIsNone(self.store.get_customer_details(RENTAL_ORDER_ID))
        self.assertIsNone(self.store.get_payment_details(RENTAL_ORDER_ID))
        self.assertIsNone(self.store.get_site_settings())

    def test_quotation_by_id_or_number(self):
        self.assertEqual(self.store.get_quotation(QUOTATION_ID)["quotation_number"], "FQ-2026-0042")
        self.assertEqual(self.store.get_quotation("FQ-2026-0042")["id"], QUOTATION_ID)
        self.assertIsNone(self.store.get_quotation("FQ-missing"))

    def test_returned_rows_are_copies(self):
        row = self.store.get_order(ORDER_ID)
        row["customer_name"] = "changed"
        self.assertEqual(self.store.get_order(ORDER_ID)["customer_name"], "Row Name")

    def test_create_store(self):
        self.assertIsInstance(create_store("memory"), InMemoryOrderStore)
        with self.assertRaises(ValueError):
            create_store("postgres")


class TestSheetsStore(unittest.TestCase):
    """SheetsOrderStore against a mocked gspread client."""

    def setUp(self):
        tabs = {
            "orders": [order_row(products="[]")],
            "order_addresses": [billing_address()],
            "order_customer_details": [],
            "order_payment_details": [dict(payment_details(), payment_method="")],
            "faas_quotations": [quotation_row()],
            "site_settings": [{"site_name": "AiRS Pune", "email": ""}],
        }
        spreadsheet = MagicMock()
        spreadsheet.worksheet.side_effect = lambda name: MagicMock(
            get_all_records=MagicMock(return_value=tabs[name])
        )
        client = MagicMock()
        client.open_by_key.return_value = spreadsheet
        self.store = SheetsOrderStore(sheet_id="sheet-123", client=client)
        self.client = client

    def test_opens_sheet_by_key(self):
        self.client.open_by_key.assert_called_once_with("sheet-123")

    def test_lookups(self):
        self.assertEqual(self.store.get_order(ORDER_ID)["id"], ORDER_ID)
        self.assertEqual(self.store.get_order_address(ORDER_ID, "billing")["city"], "Pune")
        self.assertIsNone(self.store.get_order_address(ORDER_ID, "shipping"))
        self.assertIsNone(self.store.get_customer_details(ORDER_ID))
        self.assertEqual(self.store.get_quotation("FQ-2026-0042")["id"], QUOTATION_ID)

    def test_blank_cells_become_none(self):
        self.assertIsNone(self.store.get_payment_details(ORDER_ID)["payment_method"])
        self.assertIsNone(self.store.get_site_settings()["email"])


class TestFetchOrderBundle(unittest.TestCase):

    def test_complete_bundle(self):
        bundle = asyncio.run(fetch_order_bundle(full_store(), ORDER_ID, timeout=2))
        self.assertEqual(bundle.order["id"], ORDER_ID)
        self.assertEqual(bundle.shipping_address, shipping_address())
        self.assertEqual(bundle.billing_address, billing_address())
        self.assertEqual(bundle.customer_details, customer_details())
        self.assertEqual(bundle.degraded, [])

    def test_missing_satellites_are_none(self):
        bundle = asyncio.run(fetch_order_bundle(full_store(), RENTAL_ORDER_ID, timeout=2))
        self.assertIsNone(bundle.shipping_address)
        self.assertIsNotNone(bundle.billing_address)
        self.assertEqual(bundle.degraded, ["shipping_address", "customer_details", "payment_details"])

    def test_missing_order_raises(self):
        with self.assertRaises(OrderNotFoundError):
            asyncio.run(fetch_order_bundle(full_store(), "missing-order", timeout=2))

    def test_failing_lookup_does_not_abort_others(self):
        store = full_store()
        with patch.object(store, "get_customer_details", side_effect=ConnectionError("sheet offline")):
            bundle = asyncio.run(fetch_order_bundle(store, ORDER_ID, timeout=2))
        self.assertIsNone(bundle.customer_details)
        self.assertEqual(bundle.payment_details, payment_details())
        self.assertIn("customer_details", bundle.degraded)

    def test_slow_lookup_times_out(self):
        store = full_store()

        def slow_payment(order_id):
            time.sleep(0.5)
            return payment_details()

        with patch.object(store, "get_payment_details", side_effect=slow_payment):
            bundle = asyncio.run(fetch_order_bundle(store, ORDER_ID, timeout=0.1))
        self.assertIsNone(bundle.payment_details)
        self.assertEqual(bundle.degraded, ["payment_details"])

    def test_order_row_store_failure_raises_lookup_error(self):
        store = full_store()
        with patch.object(store, "get_order", side_effect=ConnectionError("sheet offline")):
            with self.assertRaises(RecordLookupError) as ctx:
                asyncio.run(fetch_order_bundle(store, ORDER_ID, timeout=2))
        self.assertEqual(ctx.exception.kind, "Order")
        self.assertEqual(ctx.exception.identifier, ORDER_ID)
        self.assertIn("ConnectionError", ctx.exception.reason)

    def test_slow_order_row_raises_lookup_error(self):
        store = full_store()

        def slow_order(order_id):
            time.sleep(0.5)
            return order_row()

        with patch.object(store, "get_order", side_effect=slow_order):
            with self.assertRaises(RecordLookupError) as ctx:
                asyncio.run(fetch_order_bundle(store, ORDER_ID, timeout=0.1))
        self.assertIn("timed out", ctx.exception.reason)
        self.assertNotIsInstance(ctx.exception, OrderNotFoundError)


class TestOrderDocumentService(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp(prefix="order_docs_service_")
        self.service = OrderDocumentService(store=full_store(), output_folder=self.temp_dir, lookup_timeout=2)

    def tearDown(self):
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_build_order_document(self):
        document = asyncio.run(self.service.build_order_document(ORDER_ID))
        self.assertEqual(document.id, "ORD-A1B2C3D4")
        self.assertEqual(document.customer_name, "Asha Kulkarni")

    def test_degraded_order_still_builds(self):
        document = asyncio.run(self.service.build_order_document(RENTAL_ORDER_ID))
        self.assertEqual(document.id, "AIRS-2026-0007")
        self.assertEqual(document.shipping_address, document.billing_address)
        self.assertNotEqual(document.billing_address, ADDRESS_PENDING)
        self.assertTrue(document.is_custom_quote)

    def test_export_invoice(self):
        exported = asyncio.run(self.service.export_invoice(ORDER_ID))
        self.assertEqual(exported.filename, "Invoice-ORD-A1B2C3D4.pdf")
        self.assertEqual(os.path.dirname(exported.path), self.temp_dir)
        self.assertTrue(os.path.basename(exported.path).startswith("Invoice-ORD-A1B2C3D4_"))
        self.assertTrue(os.path.exists(exported.path))

    def test_export_label(self):
        exported = asyncio.run(self.service.export_label(RENTAL_ORDER_ID))
        self.assertEqual(exported.filename, "Label-AIRS-2026-0007.pdf")
        self.assertTrue(os.path.exists(exported.path))

    def test_concurrent_exports_use_separate_files(self):
        async def export_twice():
            return await asyncio.gather(
                self.service.export_invoice(ORDER_ID),
                self.service.export_invoice(ORDER_ID),
            )

        first, second = asyncio.run(export_twice())
        self.assertEqual(first.filename, second.filename)
        self.assertNotEqual(first.path, second.path)
        self.assertTrue(os.path.exists(first.path))
        self.assertTrue(os.path.exists(second.path))

    def test_remove_exported_file(self):
        exported = asyncio.run(self.service.export_label(ORDER_ID))
        remove_exported_file(exported.path)
        self.assertFalse(os.path.exists(exported.path))
        # Already gone is not an error
        remove_exported_file(exported.path)

    def test_export_unknown_order(self):
        with self.assertRaises(OrderNotFoundError):
            asyncio.run(self.service.export_invoice("missing-order"))

    def test_export_quotation(self):
        exported = asyncio.run(self.service.export_quotation(QUOTATION_ID))
        self.assertEqual(exported.filename, "AiRS-FaaS-Quotation-FQ-2026-0042.pdf")
        self.assertTrue(os.path.exists(exported.path))

    def test_export_unknown_quotation(self):
        with self.assertRaises(QuotationNotFoundError):
            asyncio.run(self.service.export_quotation("nope"))

    def test_quotation_store_failure(self):
        with patch.object(self.service.store, "get_quotation", side_effect=ConnectionError("sheet offline")):
            with self.assertRaises(RecordLookupError) as ctx:
                asyncio.run(self.service.export_quotation(QUOTATION_ID))
        self.assertEqual(ctx.exception.kind, "Quotation")
        self.assertIn("sheet offline", str(ctx.exception))

    def test_settings_from_store(self):
        service = OrderDocumentService(store=full_store({"site_name": "AiRS Pune"}), output_folder=self.temp_dir)
        settings = asyncio.run(service.load_settings())
        self.assertEqual(settings.name, "AiRS Pune")

    def test_settings_failure_uses_defaults(self):
        with patch.object(self.service.store, "get_site_settings", side_effect=RuntimeError("boom")):
            settings = asyncio.run(self.service.load_settings())
        self.assertEqual(settings, OrganizationSettings.defaults())

    def test_label_uses_dispatch_sender_without_site_settings(self):
        render = MagicMock(side_effect=lambda document, settings, path: path)
        with patch.object(self.service.label_renderer, "render", render):
            asyncio.run(self.service.export_label(ORDER_ID))
        settings = render.call_args[0][1]
        self.assertEqual(settings.name, config.LABEL_SENDER_NAME)
        self.assertEqual(settings.address, config.LABEL_SENDER_ADDRESS)

    def test_label_site_settings_override_dispatch_sender(self):
        service = OrderDocumentService(
            store=full_store({"site_name": "AiRS Pune", "address": "Plot 9, Chakan"}),
            output_folder=self.temp_dir,
        )
        render = MagicMock(side_effect=lambda document, settings, path: path)
        with patch.object(service.label_renderer, "render", render):
            asyncio.run(service.export_label(ORDER_ID))
        settings = render.call_args[0][1]
        self.assertEqual(settings.name, "AiRS Pune")
        self.assertEqual(settings.address, "Plot 9, Chakan")

    def test_invoice_keeps_head_office_sender(self):
        render = MagicMock(side_effect=lambda document, settings, path: path)
        with patch.object(self.service.invoice_renderer, "render", render):
            asyncio.run(self.service.export_invoice(ORDER_ID))
        self.assertEqual(render.call_args[0][1], OrganizationSettings.defaults())


if __name__ == '__main__':
    unittest.main()
