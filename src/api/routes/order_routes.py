"""
Order routes - canonical document JSON, invoice PDF and shipping label PDF.
All three views are derived from the same normalized OrderDocument.
"""
from typing import List, Dict, Any, Optional

from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse
from pydantic import BaseModel
from starlette.background import BackgroundTask

from order_documents.errors import DocumentExportError, OrderNotFoundError, RecordLookupError
from order_documents.service import ExportedDocument, get_service, remove_exported_file

router = APIRouter()

# ── Pydantic models ──────────────────────────────────────────────

class LineItemResponse(BaseModel):
    """One normalized line item."""
    id: str
    name: str
    quantity: int
    unit_price: str
    line_total: str
    customization_note: Optional[str] = None
    sku: Optional[str] = None


class OrderDocumentResponse(BaseModel):
    """Canonical order document as consumed by the renderers."""
    id: str
    record_id: str
    order_number: str
    created_at: Optional[str] = None
    customer_name: str
    email: str
    phone: str
    company: str
    gst_number: str
    billing_address: str
    shipping_address: str
    status: str
    payment_status: str
    payment_method: str
    order_type: str
    items: List[LineItemResponse] = []
    subtotal: str
    total: str
    is_custom_quote: bool
    pricing_mode: str


def _not_found(e: OrderNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))


def _export_failed(e: DocumentExportError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=f"{e.kind} could not be generated: {e.reason}",
    )


def _lookup_failed(e: RecordLookupError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))


def _pdf_response(exported: ExportedDocument) -> FileResponse:
    """Stream the PDF and delete it once sent."""
    return FileResponse(
        path=exported.path,
        media_type="application/pdf",
        filename=exported.filename,
        background=BackgroundTask(remove_exported_file, exported.path),
    )


# ── Routes ────────────────────────────────────────────────────────

@router.get(
    "/{order_id}/document",
    response_model=OrderDocumentResponse,
    summary="Get the normalized order document",
)
async def get_order_document(order_id: str) -> Dict[str, Any]:
    """
    Return the canonical document for an order.

    Missing addresses, customer details or payment details never fail the
    request; they show up as their documented placeholders.
    """
    try:
        document = await get_service().build_order_document(order_id)
    except OrderNotFoundError as e:
        raise _not_found(e)
    except RecordLookupError as e:
        raise _lookup_failed(e)
    return document.to_dict()


@router.get(
    "/{order_id}/invoice",
    summary="Download the invoice PDF",
)
async def download_invoice(order_id: str):
    """Render and download the A4 invoice for an order."""
    try:
        exported = await get_service().export_invoice(order_id)
    except OrderNotFoundError as e:
        raise _not_found(e)
    except RecordLookupError as e:
        raise _lookup_failed(e)
    except DocumentExportError as e:
        raise _export_failed(e)
    return _pdf_response(exported)


@router.get(
    "/{order_id}/label",
    summary="Download the 4x6 shipping label PDF",
)
async def download_label(order_id: str):
    """Render and download the shipping label for an order."""
    try:
        exported = await get_service().export_label(order_id)
    except OrderNotFoundError as e:
        raise _not_found(e)
    except RecordLookupError as e:
        raise _lookup_failed(e)
    except DocumentExportError as e:
        raise _export_failed(e)
    return _pdf_response(exported)
