"""Resolve the PDF bytes referenced by an extraction request."""

import base64
import binascii
import os
import re

import httpx

from ..logger import logger
from .errors import DocumentLoadFailed, FetchFailed, InvalidInput
from .models import ExtractRequest

# Largest PDF accepted from pdfUrl (10MB)
MAX_PDF_SIZE = int(os.getenv("MAX_PDF_SIZE", str(10 * 1024 * 1024)))

_DATA_URI_PREFIX_RE = re.compile(r"^data:application/pdf;base64,")


def strip_data_uri(pdf_data: str) -> str:
    """Remove a leading ``data:application/pdf;base64,`` marker if present."""
    return _DATA_URI_PREFIX_RE.sub("", pdf_data, count=1)


def decode_pdf_data(pdf_data: str) -> bytes:
    """Decode an inline base64 PDF payload.

    Decoding is lenient: characters outside the base64 alphabet are dropped,
    so garbage usually decodes to bytes that later fail to open as a PDF.

    Raises:
        DocumentLoadFailed: If the payload cannot be decoded at all.
    """
    try:
        return base64.b64decode(strip_data_uri(pdf_data))
    except (binascii.Error, ValueError) as e:
        raise DocumentLoadFailed(f"pdfData no es base64 válido: {e}") from e


async def fetch_pdf(
    url: str,
    client: httpx.AsyncClient,
    max_size: int = MAX_PDF_SIZE,
) -> bytes:
    """Download a PDF.

    Args:
        url: Address of the PDF.
        client: HTTP client; its timeout bounds the download.
        max_size: Largest accepted body in bytes.

    Returns:
        The response body.

    Raises:
        FetchFailed: On transport errors, non-2xx responses or oversized bodies.
    """
    logger.info("fetching pdf", url=url)
    try:
        response = await client.get(url)
    except (httpx.HTTPError, httpx.InvalidURL) as e:
        logger.error("pdf fetch failed", url=url, error=str(e))
        raise FetchFailed(f"Error al descargar PDF: {e}") from e

    if not response.is_success:
        logger.error("pdf fetch failed", url=url, status_code=response.status_code)
        raise FetchFailed(
            f"Error al descargar PDF: {response.status_code}",
            status_code=response.status_code,
        )

    content = response.content
    if len(content) > max_size:
        raise FetchFailed(
            f"PDF demasiado grande: {len(content)} bytes "
            f"(máximo {max_size // (1024 * 1024)}MB)",
            status_code=response.status_code,
        )

    logger.info("pdf fetched", url=url, size=len(content))
    return content


async def resolve_pdf_bytes(
    request: ExtractRequest,
    client: httpx.AsyncClient,
    max_size: int = MAX_PDF_SIZE,
) -> bytes:
    """Produce the raw PDF bytes for a request.

    ``pdfUrl`` wins when both fields are supplied.

    Raises:
        InvalidInput: If neither pdfUrl nor pdfData is given.
        FetchFailed: If the download fails.
        DocumentLoadFailed: If pdfData cannot be decoded.
    """
    if not request.pdfData and not request.pdfUrl:
        raise InvalidInput("Se requiere pdfData (base64) o pdfUrl")

    if request.pdfUrl:
        return await fetch_pdf(request.pdfUrl, client, max_size=max_size)

    data = decode_pdf_data(request.pdfData)
    logger.info("decoded inline pdf", size=len(data))
    return data
