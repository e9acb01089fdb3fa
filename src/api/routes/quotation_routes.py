"""
Quotation routes - FaaS rental quotation PDF download.
"""
from fastapi import APIRouter, HTTPException, status
from fastapi.responses import FileResponse
from starlette.background import BackgroundTask

from order_documents.errors import DocumentExportError, QuotationNotFoundError, RecordLookupError
from order_documents.service import get_service, remove_exported_file

router = APIRouter()


@router.get(
    "/{quotation_id}/download",
    summary="Download a FaaS quotation PDF",
)
async def download_quotation(quotation_id: str):
    """
    Render and download a rental quotation.

    The quotation can be addressed by its record id or its quotation number.
    The generated file is deleted once the response has been sent.
    """
    try:
        exported = await get_service().export_quotation(quotation_id)
    except QuotationNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    except RecordLookupError as e:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(e))
    except DocumentExportError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Quotation could not be generated: {e.reason}",
        )
    return FileResponse(
        path=exported.path,
        media_type="application/pdf",
        filename=exported.filename,
        background=BackgroundTask(remove_exported_file, exported.path),
    )
