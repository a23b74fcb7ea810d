from .errors import (
    DocumentLoadFailed,
    ExtractionError,
    FetchFailed,
    InvalidInput,
    PageExtractionFailed,
    PayloadTooLarge,
)
from .models import (
    DEFAULT_REGIONS,
    ExtractionReport,
    ExtractRequest,
    PageResult,
    Region,
    RegionSet,
    ServerErrorResponse,
)
from .normalizer import normalize_text
from .region_extractor import (
    PyMuPDFRegionExtractor,
    RegionExtractor,
    TesseractRegionExtractor,
    get_region_extractor,
)
from .input_resolver import decode_pdf_data, fetch_pdf, resolve_pdf_bytes
from .page_processor import (
    extract_from_bytes,
    load_document,
    process_document,
    process_page,
)
from .report import build_report, build_server_error, dump_report

__all__ = [
    # Errors
    "ExtractionError",
    "InvalidInput",
    "PayloadTooLarge",
    "FetchFailed",
    "DocumentLoadFailed",
    "PageExtractionFailed",
    # Models
    "Region",
    "RegionSet",
    "DEFAULT_REGIONS",
    "PageResult",
    "ExtractionReport",
    "ExtractRequest",
    "ServerErrorResponse",
    # Normalizer
    "normalize_text",
    # Region extractors
    "RegionExtractor",
    "PyMuPDFRegionExtractor",
    "TesseractRegionExtractor",
    "get_region_extractor",
    # Input
    "resolve_pdf_bytes",
    "fetch_pdf",
    "decode_pdf_data",
    # Page processing
    "load_document",
    "process_page",
    "process_document",
    "extract_from_bytes",
    # Report
    "build_report",
    "build_server_error",
    "dump_report",
]
