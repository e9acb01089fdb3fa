"""
Health check route - public, no authentication required.
"""
from fastapi import APIRouter

router = APIRouter()


@router.get(
    "",
    summary="System health check",
)
async def health_check():
    """
    Check system health status.

    Reports whether configuration loads, which store backend is selected and
    whether the PDF toolkit is importable.
    """
    health = {
        "status": "healthy",
        "service": "AiRS Order Documents API",
        "version": "1.0.0",
        "components": {}
    }

    try:
        import config
        health["components"]["config"] = "ok"
        health["components"]["store"] = config.ORDER_STORE_BACKEND
    except Exception as e:
        health["components"]["config"] = f"error: {str(e)}"
        health["status"] = "degraded"

    try:
        import reportlab
        health["components"]["pdf"] = f"reportlab {reportlab.Version}"
    except ImportError:
        health["components"]["pdf"] = "unavailable"
        health["status"] = "degraded"

    return health
