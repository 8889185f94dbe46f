# ============================================================================
# api/main.py
# ============================================================================
"""
FastAPI Backend for the Insurance Card Pre-Check

Runs on port 3000 by default (PORT env var).
Serves the chat UI from the static directory and accepts card submissions.
"""

import json
import logging
import os
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse, PlainTextResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from insurance_precheck.config import (
    base_settings,
    ocr_settings,
    logging_settings,
    BaseSettingsConfig,
    OCRSettings,
)
from insurance_precheck.constants.messages import (
    BAD_REQUEST_MESSAGE,
    SERVER_ERROR_MESSAGE,
    UI_NOT_FOUND_MESSAGE,
)
from insurance_precheck.core.orchestrator import SubmissionOrchestrator, SubmissionRequest
from insurance_precheck.extractors.ocr_extractor import OCREngine, create_ocr_engine
from insurance_precheck.utils.exceptions import (
    OCRError,
    PayloadTooLargeError,
    SubmissionError,
)
from insurance_precheck.utils.logging import setup_logging


# ============================================================================
# Models
# ============================================================================

class SubmitPayload(BaseModel):
    front: Optional[str] = None  # base64, optionally a data: URL
    back: Optional[str] = None
    planType: Optional[str] = None  # client-declared, informational only


# ============================================================================
# Helpers
# ============================================================================

def error_response(status_code: int, message: str, headers: Optional[dict] = None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message},
        headers=headers,
    )


async def read_body_limited(request: Request, limit: int) -> bytes:
    """
    Read the request body, refusing as soon as it grows past `limit`.

    A declared Content-Length over the limit is refused before any bytes
    are read.
    """
    declared = request.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLargeError(size=int(declared), limit=limit)

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise PayloadTooLargeError(size=len(body), limit=limit)
    return bytes(body)


def resolve_static_path(static_root: Path, url_path: str) -> Optional[Path]:
    """
    Map a request path onto a file under static_root.

    Returns None when the resolved path escapes the root.
    """
    root = static_root.resolve()
    candidate = (root / url_path.lstrip("/")).resolve()
    if candidate != root and not candidate.is_relative_to(root):
        return None
    return candidate


def static_file_response(path: Path) -> Optional[FileResponse]:
    if not path.is_file() or not os.access(path, os.R_OK):
        return None
    return FileResponse(path, headers={"Cache-Control": "no-store"})


# ============================================================================
# Application
# ============================================================================

def create_app(
    settings: Optional[BaseSettingsConfig] = None,
    ocr_engine: Optional[OCREngine] = None,
    ocr_config: Optional[OCRSettings] = None,
) -> FastAPI:
    """
    Build the API.

    The OCR engine is created (or taken from the caller) once in the lifespan
    and shared by every submission.
    """
    settings = settings or base_settings
    ocr_config = ocr_config or ocr_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Bring the OCR engine up at startup so first request is fast."""
        engine = ocr_engine or create_ocr_engine(ocr_config)
        logger.info("Pre-loading OCR engine...")
        try:
            await engine.warm_up()
            logger.info("OCR engine ready")
        except OCRError as e:
            logger.warning(f"OCR pre-load failed (will retry on first use): {e}")

        app.state.ocr_engine = engine
        app.state.orchestrator = SubmissionOrchestrator.from_settings(
            engine, settings=settings, ocr=ocr_config
        )
        yield
        await engine.close()

    app = FastAPI(
        title="Insurance Card Pre-Check API",
        description="Reads insurance card photos and decides booking vs self-pay",
        version="1.0.0",
        lifespan=lifespan,
    )

    if settings.CORS_ALLOW_ORIGINS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ALLOW_ORIGINS,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    @app.exception_handler(StarletteHTTPException)
    async def not_found_handler(request: Request, exc: StarletteHTTPException):
        # Unknown paths and wrong methods both answer 404
        if exc.status_code in (404, 405):
            return PlainTextResponse("Not found", status_code=404)
        return await http_exception_handler(request, exc)

    # ------------------------------------------------------------------------
    # Endpoints
    # ------------------------------------------------------------------------

    @app.get("/api/health")
    async def health():
        """Health check for monitoring."""
        return {"status": "healthy"}

    @app.post("/submit")
    @app.post("/api/submit")
    async def submit(request: Request):
        """
        Check a card.

        Body: {"front": <base64>, "back": <base64>, "planType": <optional>}
        """
        try:
            body = await read_body_limited(request, settings.MAX_PAYLOAD_BYTES)
            payload = SubmitPayload.model_validate(json.loads(body))
            response = await request.app.state.orchestrator.submit(
                SubmissionRequest(
                    front=payload.front,
                    back=payload.back,
                    declared_plan_type=payload.planType,
                )
            )
        except PayloadTooLargeError as e:
            logger.warning(f"Upload refused: {e.size} bytes > {e.limit}")
            return error_response(e.status_code, e.message, headers={"Connection": "close"})
        except SubmissionError as e:
            return error_response(e.status_code, e.message)
        except Exception:
            logger.exception("Submission failed")
            return error_response(500, SERVER_ERROR_MESSAGE)

        return JSONResponse(content=response.to_dict())

    @app.get("/")
    @app.get("/index.html")
    async def index():
        """Chat UI."""
        response = static_file_response(settings.get_index_path())
        if response is None:
            return error_response(404, UI_NOT_FOUND_MESSAGE)
        return response

    @app.get("/{asset_path:path}")
    async def static_asset(asset_path: str):
        """Static assets, confined to the static directory."""
        path = resolve_static_path(settings.STATIC_DIR, asset_path)
        if path is None:
            return error_response(400, BAD_REQUEST_MESSAGE)

        response = static_file_response(path)
        if response is None:
            return PlainTextResponse("Not found", status_code=404)
        return response

    return app


app = create_app()


def main():
    import uvicorn

    setup_logging(
        level=logging_settings.LOG_LEVEL,
        log_file=logging_settings.LOG_FILE,
        format_json=logging_settings.LOG_JSON,
    )
    logger.info(f"Server listening on port {base_settings.PORT}")
    uvicorn.run(app, host=base_settings.HOST, port=base_settings.PORT, log_config=None)


if __name__ == "__main__":
    main()
