"""FastAPI application exposing the payslip extraction endpoint."""

import asyncio
import os
import time
from contextlib import asynccontextmanager
from uuid import uuid4

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .extraction import (
    DEFAULT_REGIONS,
    ExtractRequest,
    InvalidInput,
    PayloadTooLarge,
    RegionExtractor,
    build_server_error,
    dump_report,
    extract_from_bytes,
    get_region_extractor,
    resolve_pdf_bytes,
)
from .logger import clear_context, logger, set_context

EXTRACT_PATH = "/api/extract-nomina"

# Maximum request body size (10MB)
MAX_REQUEST_BODY_SIZE = int(os.getenv("MAX_REQUEST_BODY_SIZE", str(10 * 1024 * 1024)))

# Timeout for downloading pdfUrl
FETCH_TIMEOUT_SECONDS = float(os.getenv("FETCH_TIMEOUT_SECONDS", "30"))

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class HealthResponse(BaseModel):
    status: str


class ErrorResponse(BaseModel):
    error: str


# --- App State ---

_http_client: httpx.AsyncClient | None = None
_extractor: RegionExtractor | None = None


def get_http_client() -> httpx.AsyncClient:
    """Lazy initialization of the client used to download pdfUrl."""
    global _http_client
    if _http_client is None:
        _http_client = httpx.AsyncClient(
            timeout=httpx.Timeout(FETCH_TIMEOUT_SECONDS),
            follow_redirects=True,
        )
    return _http_client


def get_extractor() -> RegionExtractor:
    """Lazy initialization of the region extractor (REGION_EXTRACTOR env var)."""
    global _extractor
    if _extractor is None:
        _extractor = get_region_extractor()
    return _extractor


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle."""
    global _http_client

    logger.info("starting server", max_request_body_size=MAX_REQUEST_BODY_SIZE)

    yield

    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
    logger.info("server shutdown")


app = FastAPI(
    title="Nómina Extractor API",
    description="Extracts worker name and pay period from every page of a payslip PDF",
    version="0.1.0",
    lifespan=lifespan,
)


# --- Middleware ---


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag logs with a request id, log access and add CORS headers."""
    set_context(request_id=request.headers.get("x-request-id") or uuid4().hex[:12])
    start = time.perf_counter()
    try:
        logger.info(
            "request started",
            method=request.method,
            path=request.url.path,
            content_length=request.headers.get("content-length"),
        )
        response = await call_next(request)
        response.headers.update(CORS_HEADERS)
        logger.info(
            "request finished",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=int((time.perf_counter() - start) * 1000),
        )
        return response
    finally:
        clear_context()


# --- Exception Handlers ---


@app.exception_handler(InvalidInput)
async def invalid_input_handler(request, exc: InvalidInput):
    logger.warn("invalid input", error=str(exc))
    return JSONResponse(
        status_code=400,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_with_method_error(request, exc: StarletteHTTPException):
    """Answer any method other than POST/OPTIONS on the endpoint with its own 405 body."""
    if exc.status_code == 405 and request.url.path == EXTRACT_PATH:
        return JSONResponse(
            status_code=405,
            content=ErrorResponse(error="Método no permitido. Usa POST.").model_dump(),
            headers=exc.headers,
        )
    return await http_exception_handler(request, exc)


@app.exception_handler(PayloadTooLarge)
async def payload_too_large_handler(request, exc: PayloadTooLarge):
    logger.warn("payload too large", error=str(exc))
    return JSONResponse(
        status_code=413,
        content=ErrorResponse(error=str(exc)).model_dump(),
    )


# --- Health Endpoints ---


@app.get("/health", response_model=HealthResponse)
async def health():
    """Liveness check."""
    return HealthResponse(status="healthy")


# --- Extraction Endpoint ---


async def _read_request(request: Request) -> ExtractRequest:
    """Read and validate the JSON body, enforcing the size limit."""
    too_large = PayloadTooLarge(
        f"El cuerpo de la petición supera el máximo de "
        f"{MAX_REQUEST_BODY_SIZE // (1024 * 1024)}MB"
    )
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > MAX_REQUEST_BODY_SIZE:
        raise too_large

    # Chunked bodies carry no Content-Length; count while reading
    chunks: list[bytes] = []
    received = 0
    async for chunk in request.stream():
        received += len(chunk)
        if received > MAX_REQUEST_BODY_SIZE:
            raise too_large
        chunks.append(chunk)

    body = b"".join(chunks)
    if not body.strip():
        return ExtractRequest()

    try:
        return ExtractRequest.model_validate_json(body)
    except ValidationError as e:
        raise InvalidInput(
            "El cuerpo debe ser un objeto JSON con pdfData (base64) o pdfUrl"
        ) from e


@app.options(EXTRACT_PATH)
async def extract_nomina_preflight():
    """CORS pre-flight."""
    return Response(status_code=200)


@app.post(EXTRACT_PATH)
async def extract_nomina(request: Request):
    """Extract worker name and pay period from every page of a PDF."""
    payload = await _read_request(request)

    try:
        pdf_bytes = await resolve_pdf_bytes(payload, get_http_client())
        # Document load and the page loop are blocking; keep them off the event loop
        report = await asyncio.to_thread(
            extract_from_bytes, pdf_bytes, DEFAULT_REGIONS, get_extractor()
        )
    except InvalidInput:
        raise
    except Exception as e:
        logger.error(
            "extraction request failed",
            error=str(e),
            error_type=type(e).__name__,
        )
        return JSONResponse(
            status_code=500,
            content=build_server_error(e).model_dump(mode="json"),
        )

    return JSONResponse(status_code=200, content=dump_report(report))
