"""
Order Documents Module
Turns fragmented order records into one canonical document and renders it as
an invoice, a 4x6 shipping label, or (for rental quotations) a FaaS quotation.
"""
from .errors import (
    DocumentExportError,
    OrderDocumentError,
    OrderNotFoundError,
    QuotationNotFoundError,
    RecordLookupError,
)
from .models import (
    OrderBundle,
    OrderDocument,
    OrderLineItem,
    OrderStatus,
    OrganizationSettings,
    PricingMode,
    QuotationDocument,
)
from .normalizer import OrderNormalizer
from .pricing import PricingResolver, PricingSummary
from .identifiers import resolve_order_identifier, print_target_name
from .invoice_renderer import InvoiceRenderer, build_invoice_layout
from .label_renderer import ShippingLabelRenderer, build_label_layout
from .quotation import QuotationDocumentGenerator, build_quotation_document
from .store import InMemoryOrderStore, OrderRecordStore, SheetsOrderStore, create_store
from .lookup import fetch_order_bundle
from .service import ExportedDocument, OrderDocumentService

__all__ = [
    'DocumentExportError',
    'OrderDocumentError',
    'OrderNotFoundError',
    'QuotationNotFoundError',
    'RecordLookupError',
    'OrderBundle',
    'OrderDocument',
    'OrderLineItem',
    'OrderStatus',
    'OrganizationSettings',
    'PricingMode',
    'QuotationDocument',
    'OrderNormalizer',
    'PricingResolver',
    'PricingSummary',
    'resolve_order_identifier',
    'print_target_name',
    'InvoiceRenderer',
    'build_invoice_layout',
    'ShippingLabelRenderer',
    'build_label_layout',
    'QuotationDocumentGenerator',
    'build_quotation_document',
    'InMemoryOrderStore',
    'OrderRecordStore',
    'SheetsOrderStore',
    'create_store',
    'fetch_order_bundle',
    'ExportedDocument',
    'OrderDocumentService',
]
