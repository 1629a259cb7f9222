import json
import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool

from .adapter import EngineFactory, render_bibliography
from .config import Settings, get_settings
from .csl_engine import CiteprocEngine
from .engine import LoggingSanitizationObserver, SanitizationObserver, normalize_items
from .errors import BadInput, EngineFailure, FormatterError, PayloadTooLarge
from .locales import EnglishLocaleSource
from .schemas import ErrorResponse, FormatRequest, FormatResponse, HealthResponse

_logger = logging.getLogger(__name__)


async def _read_body(req: Request, limit: int) -> FormatRequest:
    declared = req.headers.get("content-length")
    if declared and declared.isdigit() and int(declared) > limit:
        raise PayloadTooLarge(f"Request body exceeds {limit} bytes")
    raw = await req.body()
    if len(raw) > limit:
        raise PayloadTooLarge(f"Request body exceeds {limit} bytes")
    try:
        body = json.loads(raw or b"null")
    except ValueError as e:
        raise BadInput(f"Invalid JSON body: {e}")
    if not isinstance(body, dict):
        raise BadInput("Request body must be a JSON object")
    try:
        return FormatRequest(**body)
    except ValidationError as e:
        raise BadInput(f"Invalid request body: {e}")


def create_app(
    settings: Optional[Settings] = None,
    engine_factory: EngineFactory = CiteprocEngine,
    observer: Optional[SanitizationObserver] = None,
    locale_source: Optional[EnglishLocaleSource] = None,
) -> FastAPI:
    settings = settings or get_settings()
    observer = observer or LoggingSanitizationObserver()
    locale_source = locale_source or EnglishLocaleSource(path=settings.english_locale_path)
    # filled before serving; request threads only read it
    locale_source.load()

    app = FastAPI(title="Citation Formatter", version="1.0.0")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.state.settings = settings

    @app.exception_handler(FormatterError)
    async def formatter_error_handler(_req: Request, exc: FormatterError):
        return JSONResponse(status_code=exc.status_code, content=exc.to_payload())

    # Health check endpoint: fixed payload, no logic
    @app.get("/health", response_model=HealthResponse)
    async def health():
        _logger.info("Health check requested")
        return {"ok": True}

    # Normalize items and render them with the submitted CSL style
    @app.post(
        "/format",
        response_model=FormatResponse,
        responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse},
                   422: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    )
    async def format_bibliography(req: Request):
        _logger.info("Received POST /format")
        payload = await _read_body(req, settings.max_body_bytes)
        locale = payload.locale or settings.default_locale
        _logger.info(f"Request locale: {locale}")
        if payload.items is None or not payload.style:
            _logger.warning("Request missing items or style")
            raise BadInput("Missing items or style")

        items = normalize_items(payload.items, observer=observer)
        try:
            html = await run_in_threadpool(
                render_bibliography,
                items,
                payload.style,
                locale,
                locale_source,
                engine_factory,
                settings.suppress_engine_warnings,
            )
        except FormatterError as e:
            _logger.error(f"Error in /format handler: {e.code}: {e.message}")
            raise
        except Exception as e:
            _logger.exception("Error in /format handler")
            raise EngineFailure(str(e)) from e
        _logger.info("Bibliography formatted successfully.")
        return {"html": html}

    return app


logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

app = create_app()
