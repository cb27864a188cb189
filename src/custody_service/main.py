"""
Malkhana Custody Service - Main Application

FastAPI application for police evidence custody: incidents, evidence items,
chain-of-custody transfers and case closure.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from custody_service.api.dependencies import get_services
from custody_service.api.errors import register_exception_handlers
from custody_service.api.routes.closures import router as closures_router
from custody_service.api.routes.evidence import router as evidence_router
from custody_service.api.routes.incidents import router as incidents_router
from custody_service.api.routes.reports import router as reports_router
from custody_service.api.routes.staff import router as staff_router
from custody_service.api.routes.transfers import router as transfers_router
from custody_service.config.settings import Settings, settings
from custody_service.core.services import ServiceContainer
from custody_service.infrastructure.database import DatabaseClient
from custody_service.infrastructure.storage import StorageProvider, create_storage_provider
from custody_service.models import HealthResponse

VERSION = "0.1.0"

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def create_app(app_settings: Settings, storage: Optional[StorageProvider] = None) -> FastAPI:
    """Build the application around one settings object

    Args:
        app_settings: Service configuration
        storage: Blob storage to use instead of the one described by the environment
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan manager"""
        # Startup
        logger.info(f"Starting {app_settings.service_name} ({app_settings.environment})")
        logger.info(f"Database: {app_settings.database_url}")

        db_client = DatabaseClient(app_settings.database_url)
        await db_client.initialize()

        app.state.db_client = db_client
        app.state.settings = app_settings
        app.state.services = ServiceContainer(app_settings, storage or create_storage_provider())

        yield

        # Shutdown
        logger.info("Shutting down Custody Service")
        await db_client.close()

    app = FastAPI(
        title="Malkhana Custody Service",
        description="Evidence chain-of-custody tracking: incidents, seized items, custody transfers and case closure",
        version=VERSION,
        lifespan=lifespan
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app, app_settings)

    # Include routers
    app.include_router(staff_router)
    app.include_router(incidents_router)
    app.include_router(evidence_router)
    app.include_router(transfers_router)
    app.include_router(closures_router)
    app.include_router(reports_router)

    # Root endpoint
    @app.get(
        "/",
        summary="Service Information",
        description="""
Returns basic information about the Custody Service.

**Response Example**:
```json
{
  "service": "malkhana-custody-service",
  "version": "0.1.0",
  "status": "running",
  "environment": "production"
}
```

**Authorization**: None required (public endpoint)
        """,
        responses={
            200: {"description": "Service information returned successfully"}
        }
    )
    async def root():
        """Root endpoint"""
        return {
            "service": app_settings.service_name,
            "version": VERSION,
            "status": "running",
            "environment": app_settings.environment
        }

    # Health endpoint (simple version at root level)
    @app.get(
        "/health",
        summary="Health Check",
        description="""
Lightweight liveness check; does not touch the database or storage.

**Note**: For storage and database status, use `/api/v1/health`.
        """,
        responses={
            200: {"description": "Service is healthy and operational"}
        }
    )
    async def health():
        """Simple health check"""
        return {"status": "healthy", "service": app_settings.service_name}

    @app.get(
        "/api/v1/health",
        response_model=HealthResponse,
        tags=["health"],
        summary="Detailed Health Check",
        description="""
Health check including storage backend and database connectivity.

**Health Status Values**:
- healthy: storage and database accessible
- degraded: one or both checks failed

**Authorization**: None required (public endpoint)
        """
    )
    async def detailed_health(
        request: Request,
        services: ServiceContainer = Depends(get_services)
    ) -> HealthResponse:
        storage_ok = await services.storage.health_check()
        db_ok = await request.app.state.db_client.health_check()

        return HealthResponse(
            status="healthy" if (storage_ok and db_ok) else "degraded",
            service=app_settings.service_name,
            storage_available=storage_ok,
            database_available=db_ok
        )

    return app


app = create_app(settings)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "custody_service.main:app",
        host=settings.host,
        port=settings.port,
        reload=True if settings.environment == "development" else False
    )
