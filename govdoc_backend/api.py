"""
FastAPI backend for the administrative document explainer
"""
import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from govdoc_backend import __version__
from govdoc_backend.config import Settings, load_settings
from govdoc_backend.errors import DocumentAnalysisError
from govdoc_backend.extraction.normalizer import FormatNormalizer
from govdoc_backend.routes import analysis, chat
from govdoc_backend.services.analysis_service import FILES_REQUIRED_MESSAGE
from govdoc_backend.services.gemini_client import initialize_gemini

logger = logging.getLogger(__name__)

SERVICE_NAME = "GovDoc Analyzer API"
INTERNAL_ERROR_MESSAGE = "서버 내부 오류가 발생했습니다"


def register_error_handlers(app: FastAPI) -> None:
    """Render every surfaced failure as {"error": message}"""

    @app.exception_handler(DocumentAnalysisError)
    async def handle_analysis_error(request: Request, exc: DocumentAnalysisError):
        logger.error(f"[ERROR] {request.url.path}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(request: Request, exc: RequestValidationError):
        logger.warning(f"[WARN] Invalid request body for {request.url.path}: {exc.errors()}")
        if request.url.path == "/api/analyze":
            message = FILES_REQUIRED_MESSAGE
        else:
            message = "Invalid request body"
        return JSONResponse(status_code=400, content={"error": message})

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"[ERROR] Unhandled error on {request.url.path}: {exc}")
        return JSONResponse(status_code=500, content={"error": f"{INTERNAL_ERROR_MESSAGE}: {exc}"})


def register_frontend(app: FastAPI, static_dir: str) -> None:
    """
    Serve the built single-page app: real files when they exist,
    index.html for every other GET route
    """
    root = Path(static_dir).resolve()
    index_file = root / "index.html"
    if not index_file.exists():
        logger.info(f"[INFO] No frontend build at {root}, static fallback disabled")
        return

    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_app(full_path: str):
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and root in candidate.parents:
            return FileResponse(candidate)
        return FileResponse(index_file)


def create_app(backend=None, settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application

    Args:
        backend: Generative backend; a GeminiBackend is built from settings when omitted
        settings: Runtime settings; loaded from the environment when omitted

    Returns:
        Configured FastAPI app
    """
    settings = settings or load_settings()

    if backend is None:
        try:
            backend = initialize_gemini(settings)
        except ValueError as e:
            logger.error(f"[ERROR] Gemini backend unavailable: {e}")

    app = FastAPI(
        title=SERVICE_NAME,
        description="Plain-language breakdowns of tax notices, fines, legal notices and benefit announcements",
        version=__version__,
    )
    app.state.settings = settings
    app.state.backend = backend
    app.state.normalizer = FormatNormalizer(
        hwp_command=settings.hwp5txt_command,
        temp_dir=settings.temp_dir,
    )

    # CORS middleware - allow all origins
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)

    app.include_router(analysis.router, tags=["Analysis"])
    app.include_router(chat.router, tags=["Chat"])

    @app.get("/api/health", tags=["Health"])
    async def health():
        """Health check endpoint"""
        return {
            "status": "ok",
            "service": SERVICE_NAME,
            "version": __version__,
            "model": settings.gemini_model,
            "backend_configured": app.state.backend is not None,
        }

    # Must come last: catches every remaining GET route
    register_frontend(app, settings.static_dir)

    return app
