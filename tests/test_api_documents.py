"""
Standalone tests for the FastAPI document endpoints.
Uses an in-memory store and a temp output directory, cleaned up after.
Downloaded PDFs are removed by the response background task.
"""
import os
import shutil
import sys
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

# Ensure src/ is on path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT / 'src'))
sys.path.insert(0, str(Path(__file__).parent))

from order_fixtures import ORDER_ID, QUOTATION_ID, RENTAL_ORDER_ID, full_store  # noqa: E402


class TestDocumentEndpoints(unittest.TestCase):
    """Test order and quotation endpoints using TestClient."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp(prefix="order_docs_api_")

        from order_documents.service import OrderDocumentService, set_service
        set_service(OrderDocumentService(store=full_store(), output_folder=self.temp_dir, lookup_timeout=2))

        # Import after the service is wired
        from api.main import create_app
        from fastapi.testclient import TestClient
        self.app = create_app()
        self.client = TestClient(self.app)

    def tearDown(self):
        from order_documents.service import set_service
        set_service(None)
        shutil.rmtree(self.temp_dir, ignore_errors=True)

    def test_root(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["service"], "AiRS Order Documents API")

    def test_health(self):
        res = self.client.get("/health")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.json()["status"], "healthy")

    def test_order_document(self):
        res = self.client.get(f"/orders/{ORDER_ID}/document")
        self.assertEqual(res.status_code, 200)
        data = res.json()
        self.assertEqual(data["id"], "ORD-A1B2C3D4")
        self.assertEqual(data["pricing_mode"], "priced")
        self.assertEqual(data["total"], "27999.5")
        self.assertEqual(len(data["items"]), 2)

    def test_rental_document_is_custom_quote(self):
        data = self.client.get(f"/orders/{RENTAL_ORDER_ID}/document").json()
        self.assertTrue(data["is_custom_quote"])
        self.assertEqual(data["shipping_address"], data["billing_address"])

    def test_unknown_order_404(self):
        for suffix in ("document", "invoice", "label"):
            res = self.client.get(f"/orders/missing-order/{suffix}")
            self.assertEqual(res.status_code, 404, suffix)

    def test_invoice_download(self):
        res = self.client.get(f"/orders/{ORDER_ID}/invoice")
        self.assertEqual(res.status_code, 200)
        self.assertEqual(res.headers["content-type"], "application/pdf")
        self.assertIn("Invoice-ORD-A1B2C3D4.pdf", res.headers["content-disposition"])
        self.assertTrue(res.content.startswith(b"%PDF-"))

    def test_label_download(self):
        res = self.client.get(f"/orders/{ORDER_ID}/label")
        self.assertEqual(res.status_code, 200)
        self.assertIn("Label-ORD-A1B2C3D4.pdf", res.headers["content-disposition"])

    def test_quotation_download(self):
        res = self.client.get(f"/quotations/{QUOTATION_ID}/download")
        self.assertEqual(res.status_code, 200)
        self.assertIn("AiRS-FaaS-Quotation-FQ-2026-0042.pdf", res.headers["content-disposition"])

    def test_unknown_quotation_404(self):
        res = self.client.get("/quotations/nope/download")
        self.assertEqual(res.status_code, 404)

    def test_export_failure_500(self):
        with patch("order_documents.invoice_renderer.SimpleDocTemplate.build",
                   side_effect=RuntimeError("disk full")):
            res = self.client.get(f"/orders/{ORDER_ID}/invoice")
        self.assertEqual(res.status_code, 500)
        self.assertIn("disk full", res.json()["detail"])

    def test_downloads_leave_no_files_behind(self):
        for url in (f"/orders/{ORDER_ID}/invoice", f"/orders/{ORDER_ID}/label",
                    f"/quotations/{QUOTATION_ID}/download"):
            res = self.client.get(url)
            self.assertEqual(res.status_code, 200, url)
        self.assertEqual(os.listdir(self.temp_dir), [])

    def test_order_store_failure_503(self):
        from order_documents.service import get_service
        store = get_service().store
        with patch.object(store, "get_order", side_effect=ConnectionError("sheet offline")):
            for suffix in ("document", "invoice", "label"):
                res = self.client.get(f"/orders/{ORDER_ID}/{suffix}")
                self.assertEqual(res.status_code, 503, suffix)
                self.assertIn(f"Order {ORDER_ID} could not be read", res.json()["detail"])

    def test_quotation_store_failure_503(self):
        from order_documents.service import get_service
        store = get_service().store
        with patch.object(store, "get_quotation", side_effect=ConnectionError("sheet offline")):
            res = self.client.get(f"/quotations/{QUOTATION_ID}/download")
        self.assertEqual(res.status_code, 503)
        self.assertIn("sheet offline", res.json()["detail"])


if __name__ == '__main__':
    unittest.main()
