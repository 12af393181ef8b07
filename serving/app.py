"""
Application factory.

Wires settings, the forwarding client, the local user-record database, the
session store and the workflow controller onto ``app.state`` and mounts the
proxy and workflow routers.

Run with:
    uvicorn --factory serving.app:create_app --port 8080
or, using API_HOST and API_PORT:
    python -m serving.app
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config.logging_config import setup_logging
from config.settings import Settings, get_settings
from core.exceptions import InvalidTransitionError
from data.database import DatabaseManager
from services.account_service import AccountService
from services.backend_client import BackendClient
from services.credentials import CredentialProvider, create_credential_provider
from services.ocr_service import OCRService
from services.session_store import SessionStore
from services.workflow_service import WorkflowController
from .middleware import AccessLogMiddleware
from .proxy_api import router as proxy_router
from .workflow_api import router as workflow_router

logger = logging.getLogger("smartlens.app")


def create_app(
    settings: Optional[Settings] = None,
    credentials: Optional[CredentialProvider] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings override (default: environment)
        credentials: Credential provider override (default: BACKEND_AUTH_MODE)
        transport: httpx transport for the backend client (tests)

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()
    setup_logging(settings.log_level)

    backend = BackendClient(
        settings.backend_url,
        credentials=credentials or create_credential_provider(settings),
        timeout=settings.backend_timeout,
        transport=transport
    )
    db = DatabaseManager(settings.database_url)
    store = SessionStore(db)
    controller = WorkflowController(
        ocr=OCRService(backend),
        accounts=AccountService(backend),
        store=store,
        extraction_cost=settings.extraction_cost
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.create_tables()
        logger.info("SmartLens API initialized (backend=%s)", settings.backend_url)
        yield
        await backend.aclose()
        db.dispose()

    app = FastAPI(
        title="SmartLens OCR Workflow API",
        description="Region detection, ordering and credit-gated text extraction",
        version="1.0.0",
        lifespan=lifespan
    )
    app.state.settings = settings
    app.state.backend = backend
    app.state.db = db
    app.state.store = store
    app.state.controller = controller

    app.add_middleware(AccessLogMiddleware)
    origins = settings.get_cors_origins()
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "OPTIONS"],
            allow_headers=["*"],
        )

    @app.exception_handler(InvalidTransitionError)
    async def invalid_transition_handler(request: Request, exc: InvalidTransitionError):
        return JSONResponse(status_code=409, content={"detail": str(exc)})

    @app.get("/health", tags=["meta"])
    async def health() -> dict:
        return {"status": "ok"}

    @app.get("/", tags=["meta"])
    async def root():
        """API root endpoint."""
        return {
            "name": "SmartLens OCR Workflow API",
            "version": "1.0.0",
            "endpoints": {
                "login": "POST /auth/login",
                "upload": "POST /workflow/upload",
                "move": "POST /workflow/regions/{region_id}/move",
                "toggle": "POST /workflow/regions/{region_id}/toggle",
                "extract": "POST /workflow/extract",
                "reset": "POST /workflow/reset",
                "detect_regions_proxy": "POST /api/detect-regions",
                "extract_text_proxy": "POST /api/extract-text"
            }
        }

    app.include_router(proxy_router)
    app.include_router(workflow_router)
    return app


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    print(f"Starting SmartLens API on {settings.api_host}:{settings.api_port}")
    uvicorn.run(create_app(settings), host=settings.api_host, port=settings.api_port)
