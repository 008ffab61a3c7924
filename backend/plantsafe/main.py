import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from plantsafe.api.v1.identify import IDENTIFY_PATH
from plantsafe.api.v1.identify import router as identify_router
from plantsafe.core.config import get_settings
from plantsafe.schemas.identify import (
    ERROR_IDENTIFICATION_FAILED,
    ERROR_IMAGE_TOO_LARGE,
    ERROR_INTERNAL,
    ERROR_LENGTH_REQUIRED,
    ERROR_METHOD_NOT_ALLOWED,
    ERROR_NO_IMAGE_DATA,
)
from plantsafe.services.ai.common.providers import ProviderConfigError

settings = get_settings()

logger = logging.getLogger(__name__)

API_PREFIXES = ("/api", "/api/v1")

app = FastAPI(
    title="PlantSafe API",
    version="1.0.0",
    docs_url="/docs" if settings.docs_enabled else None,
    openapi_url="/openapi.json" if settings.openapi_enabled else None,
)


@app.on_event("startup")
async def _startup_checks():
    current = get_settings()
    errors = current.validate_required_config()
    if not errors:
        logger.info("Configuration OK (ai_provider=%s)", current.ai_provider)
        return

    for error in errors:
        logger.warning("Configuration problem: %s", error)
    if current.is_production:
        raise RuntimeError("Configuration validation failed in production environment: " + "; ".join(errors))


if settings.cors_allow_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=False,
        allow_methods=settings.cors_allow_methods,
        allow_headers=settings.cors_allow_headers,
    )

for _prefix in API_PREFIXES:
    app.include_router(identify_router, prefix=_prefix, tags=["identify"])


def _is_identify_path(path: str) -> bool:
    return any(path == f"{prefix}{IDENTIFY_PATH}" for prefix in API_PREFIXES)


@app.exception_handler(StarletteHTTPException)
async def _http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 405:
        return JSONResponse(
            status_code=405,
            content={"error": ERROR_METHOD_NOT_ALLOWED},
            headers=getattr(exc, "headers", None),
        )
    # Hide internal details for 5xx in production unless explicitly enabled.
    if exc.status_code >= 500 and not get_settings().expose_error_details:
        return JSONResponse(status_code=exc.status_code, content={"error": ERROR_INTERNAL})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.exception_handler(RequestValidationError)
async def _validation_exception_handler(request: Request, exc: RequestValidationError):
    if _is_identify_path(request.url.path):
        return JSONResponse(status_code=400, content={"error": ERROR_NO_IMAGE_DATA})
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


@app.exception_handler(ProviderConfigError)
async def _provider_config_exception_handler(request: Request, exc: ProviderConfigError):
    logger.error("AI provider misconfigured: %s", exc)
    return JSONResponse(status_code=500, content={"error": ERROR_IDENTIFICATION_FAILED})


@app.exception_handler(Exception)
async def _unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    if get_settings().expose_error_details:
        return JSONResponse(status_code=500, content={"error": str(exc)})
    return JSONResponse(status_code=500, content={"error": ERROR_INTERNAL})


@app.middleware("http")
async def body_size_limit_middleware(request: Request, call_next):
    if request.method != "POST" or not _is_identify_path(request.url.path):
        return await call_next(request)

    content_length = request.headers.get("content-length")
    if content_length is None:
        # Chunked bodies cannot be bounded before they are buffered.
        logger.info("Identify request rejected: no Content-Length")
        return JSONResponse(status_code=411, content={"error": ERROR_LENGTH_REQUIRED})
    try:
        length = int(content_length)
    except ValueError:
        return JSONResponse(status_code=400, content={"error": "Invalid Content-Length"})

    limit = get_settings().max_request_bytes
    if length > limit:
        logger.info("Identify request rejected: body of %s bytes exceeds %s", length, limit)
        return JSONResponse(status_code=413, content={"error": ERROR_IMAGE_TOO_LARGE})

    return await call_next(request)


@app.middleware("http")
async def security_headers_middleware(request: Request, call_next):
    response = await call_next(request)
    if not get_settings().security_headers_enabled:
        return response

    headers = response.headers
    if "X-Content-Type-Options" not in headers:
        headers["X-Content-Type-Options"] = "nosniff"
    if "X-Frame-Options" not in headers:
        headers["X-Frame-Options"] = "DENY"
    if "Referrer-Policy" not in headers:
        headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
    if "Permissions-Policy" not in headers:
        headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=(self)"
    if "Cache-Control" not in headers:
        headers["Cache-Control"] = "no-store"

    return response


@app.get("/health")
async def health_check():
    return {"status": "ok"}
