"""Per-page extraction of the payslip fields."""

import time

import fitz  # PyMuPDF

from ..logger import logger
from .errors import DocumentLoadFailed, PageExtractionFailed
from .models import DEFAULT_REGIONS, ExtractionReport, PageResult, RegionSet
from .normalizer import normalize_text
from .region_extractor import PyMuPDFRegionExtractor, RegionExtractor
from .report import build_report


def load_document(data: bytes) -> fitz.Document:
    """Open PDF bytes.

    Args:
        data: Raw PDF content.

    Returns:
        The opened document. The caller closes it.

    Raises:
        DocumentLoadFailed: If the bytes are empty, not a PDF, unparsable
            or password protected.
    """
    if not data:
        raise DocumentLoadFailed("El PDF está vacío")
    # The header may follow a few bytes of junk within the first 1KB
    if b"%PDF-" not in data[:1024]:
        raise DocumentLoadFailed("El contenido no es un PDF válido (falta la cabecera %PDF-)")

    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except Exception as e:
        raise DocumentLoadFailed(f"No se pudo abrir el PDF: {e}") from e

    if doc.needs_pass:
        doc.close()
        raise DocumentLoadFailed("El PDF está protegido con contraseña")

    return doc


def process_page(
    page: fitz.Page,
    page_number: int,
    regions: RegionSet,
    extractor: RegionExtractor,
) -> PageResult:
    """Extract and normalize both fields of one page.

    Raises:
        PageExtractionFailed: If the extractor fails on either region.
    """
    page_height = page.rect.height
    try:
        trabajador = extractor.extract(page, regions.trabajador, page_height)
        periodo = extractor.extract(page, regions.periodo, page_height)
    except Exception as e:
        raise PageExtractionFailed(page_number, str(e)) from e

    logger.debug(
        "page extracted",
        page_number=page_number,
        worker_found=trabajador is not None,
        period_found=periodo is not None,
    )
    return PageResult(
        pagina=page_number,
        trabajador=normalize_text(trabajador),
        periodo=normalize_text(periodo),
        coordenadas_usadas=regions,
    )


def process_document(
    doc: fitz.Document,
    regions: RegionSet,
    extractor: RegionExtractor,
) -> list[PageResult]:
    """Extract every page in order, containing failures to their page.

    Returns:
        One PageResult per page, in page order. Failed pages carry ``error``
        and null fields.
    """
    results: list[PageResult] = []

    for page_index in range(doc.page_count):
        page_number = page_index + 1
        try:
            try:
                page = doc.load_page(page_index)
            except Exception as e:
                raise PageExtractionFailed(page_number, str(e)) from e
            results.append(process_page(page, page_number, regions, extractor))
        except PageExtractionFailed as e:
            logger.error(
                "page extraction failed",
                page_number=page_number,
                error=str(e.__cause__ or e),
            )
            results.append(
                PageResult(
                    pagina=page_number,
                    coordenadas_usadas=regions,
                    error=str(e),
                )
            )

    return results


def extract_from_bytes(
    data: bytes,
    regions: RegionSet = DEFAULT_REGIONS,
    extractor: RegionExtractor | None = None,
) -> ExtractionReport:
    """Run the whole extraction over a PDF held in memory.

    Args:
        data: Raw PDF content.
        regions: Regions to read on every page.
        extractor: Extraction backend. Defaults to PyMuPDF.

    Returns:
        The success report, with per-page errors inline.

    Raises:
        DocumentLoadFailed: If the document cannot be opened.
    """
    if extractor is None:
        extractor = PyMuPDFRegionExtractor()

    start = time.perf_counter()
    doc = load_document(data)
    try:
        logger.info(
            "processing document",
            total_pages=doc.page_count,
            extractor=extractor.name,
        )
        results = process_document(doc, regions, extractor)
    finally:
        doc.close()

    report = build_report(results)
    logger.info(
        "document processed",
        total_pages=report.total_paginas,
        failed_pages=report.paginas_con_error,
        duration_ms=round((time.perf_counter() - start) * 1000, 1),
    )
    return report
