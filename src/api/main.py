"""
FastAPI application factory.
Creates the app with CORS and router registration.
Swagger UI available at /docs, ReDoc at /redoc.
"""
import sys
from pathlib import Path
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Ensure src/ is on the path
_src_dir = str(Path(__file__).parent.parent)
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown logic for the FastAPI app."""
    import config
    from utils.logger import get_logger

    logger = get_logger()
    logger.info(f"Initializing Order Documents API on port {config.API_PORT}", component="API")
    logger.info(f"Store backend: {config.ORDER_STORE_BACKEND}", component="API")
    logger.info(f"Documents folder: {config.DOCUMENT_OUTPUT_FOLDER}", component="API")

    yield

    logger.info("Shutting down API server", component="API")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    import config

    app = FastAPI(
        title="AiRS Order Documents API",
        description=(
            "Printable documents for orders and FaaS rental quotations.\n\n"
            "Each order is normalized once into a canonical document; the "
            "invoice, the 4x6 shipping label and the JSON view are all "
            "derived from it."
        ),
        version="1.0.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.API_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition"],
    )

    # Register routers
    from api.routes.order_routes import router as order_router
    from api.routes.quotation_routes import router as quotation_router
    from api.routes.health_routes import router as health_router

    app.include_router(order_router, prefix="/orders", tags=["Orders"])
    app.include_router(quotation_router, prefix="/quotations", tags=["Quotations"])
    app.include_router(health_router, prefix="/health", tags=["Health"])

    @app.get("/", tags=["Root"])
    async def root():
        """API root - redirect to docs."""
        return {
            "service": "AiRS Order Documents API",
            "version": "1.0.0",
            "docs": "/docs",
            "redoc": "/redoc",
            "health": "/health",
        }

    return app
