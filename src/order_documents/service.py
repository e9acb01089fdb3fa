"""
Order Document Service
Wires the store, the satellite lookups, the normalizer and the three
renderers together.

Every export is written to its own file under DOCUMENT_OUTPUT_FOLDER
(print-target name + timestamp + random suffix), so concurrent exports of the
same order never share a file. The print-target name (Invoice-<id>.pdf,
Label-<id>.pdf) is returned separately as the download filename; callers
own the written file and remove it once it has been delivered.
"""
from __future__ import annotations

import asyncio
import os
import time
import uuid
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import config
from utils.logger import get_logger
from .errors import QuotationNotFoundError, RecordLookupError
from .identifiers import print_target_name, quotation_filename
from .invoice_renderer import InvoiceRenderer
from .label_renderer import ShippingLabelRenderer
from .lookup import fetch_order_bundle
from .models import OrderDocument, OrganizationSettings
from .normalizer import OrderNormalizer
from .quotation import QuotationDocumentGenerator, build_quotation_document
from .store import OrderRecordStore, create_store


@dataclass(frozen=True)
class ExportedDocument:
    """A rendered PDF on disk and the name it should be downloaded as."""
    path: str
    filename: str


class OrderDocumentService:
    """Builds canonical order documents and exports them as PDFs"""

    def __init__(
        self,
        store: OrderRecordStore = None,
        output_folder: str = None,
        normalizer: OrderNormalizer = None,
        lookup_timeout: float = None,
    ):
        self.store = store or create_store()
        self.output_folder = output_folder or config.DOCUMENT_OUTPUT_FOLDER
        self.normalizer = normalizer or OrderNormalizer()
        self.lookup_timeout = config.LOOKUP_TIMEOUT_SECONDS if lookup_timeout is None else lookup_timeout
        self.invoice_renderer = InvoiceRenderer(self.normalizer.pricing_resolver)
        self.label_renderer = ShippingLabelRenderer()
        self.quotation_generator = QuotationDocumentGenerator()
        self.logger = get_logger()

    async def build_order_document(self, order_id: str) -> OrderDocument:
        """
        Fetch and normalize one order.

        Raises:
            OrderNotFoundError: the order row does not exist
            RecordLookupError: the order row could not be read
        """
        bundle = await fetch_order_bundle(self.store, order_id, timeout=self.lookup_timeout)
        document = self.normalizer.normalize_bundle(bundle)
        if bundle.degraded:
            self.logger.info(
                f"Order {document.id} - built with fallbacks for: {', '.join(bundle.degraded)}",
                component="Service"
            )
        return document

    async def load_settings(self, fallback: Optional[OrganizationSettings] = None) -> OrganizationSettings:
        """
        Organization settings from the store.

        Blank fields, a missing row or an unavailable store fall back to
        fallback (the configured organization defaults when None).
        """
        fallback = fallback or OrganizationSettings.defaults()
        try:
            record = await asyncio.wait_for(
                asyncio.to_thread(self.store.get_site_settings),
                timeout=self.lookup_timeout,
            )
        except Exception as e:
            self.logger.warning(f"Site settings unavailable ({type(e).__name__}: {e}); using defaults",
                                component="Service")
            return fallback
        return OrganizationSettings.from_record(record, fallback=fallback)

    def _unique_path(self, filename: str) -> str:
        stem, ext = os.path.splitext(filename)
        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
        return os.path.join(self.output_folder, f"{stem}_{timestamp}_{uuid.uuid4().hex[:8]}{ext}")

    async def export_invoice(self, order_id: str) -> ExportedDocument:
        """Render the invoice PDF for order_id."""
        document = await self.build_order_document(order_id)
        settings = await self.load_settings()
        filename = f"{print_target_name('Invoice', document.id)}.pdf"

        start = time.time()
        self.logger.log_export_start("Invoice", document.id)
        path = await asyncio.to_thread(
            self.invoice_renderer.render, document, settings, self._unique_path(filename)
        )
        self.logger.log_export_complete("Invoice", document.id, path, time.time() - start)
        return ExportedDocument(path=path, filename=filename)

    async def export_label(self, order_id: str) -> ExportedDocument:
        """Render the 4x6 shipping label PDF for order_id."""
        document = await self.build_order_document(order_id)
        # Labels ship from the dispatch unit unless site settings say otherwise
        settings = await self.load_settings(OrganizationSettings.label_defaults())
        filename = f"{print_target_name('Label', document.id)}.pdf"

        start = time.time()
        self.logger.log_export_start("Label", document.id)
        path = await asyncio.to_thread(
            self.label_renderer.render, document, settings, self._unique_path(filename)
        )
        self.logger.log_export_complete("Label", document.id, path, time.time() - start)
        return ExportedDocument(path=path, filename=filename)

    async def export_quotation(self, quotation_id: str) -> ExportedDocument:
        """
        Render a FaaS quotation PDF.

        Raises:
            QuotationNotFoundError: no quotation with that id or number
            RecordLookupError: the quotation row could not be read
        """
        try:
            record = await asyncio.wait_for(
                asyncio.to_thread(self.store.get_quotation, quotation_id),
                timeout=self.lookup_timeout,
            )
        except asyncio.TimeoutError:
            reason = f"timed out after {self.lookup_timeout:.1f}s"
            self.logger.error(f"Quotation {quotation_id} - lookup failed ({reason})", component="Service")
            raise RecordLookupError("Quotation", quotation_id, reason)
        except Exception as e:
            reason = f"{type(e).__name__}: {e}"
            self.logger.error(f"Quotation {quotation_id} - lookup failed ({reason})", component="Service")
            raise RecordLookupError("Quotation", quotation_id, reason) from e
        if not record:
            raise QuotationNotFoundError(quotation_id)

        quotation = build_quotation_document(record)
        settings = await self.load_settings()
        number = quotation.quotation_number or str(quotation_id)
        filename = quotation_filename(number)

        start = time.time()
        self.logger.log_export_start("Quotation", number)
        path = await asyncio.to_thread(
            self.quotation_generator.render, quotation, self._unique_path(filename), settings
        )
        self.logger.log_export_complete("Quotation", number, path, time.time() - start)
        return ExportedDocument(path=path, filename=filename)


def remove_exported_file(path: str) -> None:
    """Delete a delivered export; a file that is already gone is fine."""
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as e:
        get_logger().warning(f"Could not remove exported file {path}: {e}", component="Service")


_service: Optional[OrderDocumentService] = None


def get_service() -> OrderDocumentService:
    """Process-wide service built from configuration."""
    global _service
    if _service is None:
        _service = OrderDocumentService()
    return _service


def set_service(service: Optional[OrderDocumentService]) -> None:
    """Replace the process-wide service (tests, alternate stores)."""
    global _service
    _service = service
