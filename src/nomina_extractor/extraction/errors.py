"""Error types raised while turning a request into an extraction report."""


class ExtractionError(Exception):
    """Base class for failures of a single extraction request."""


class InvalidInput(ExtractionError):
    """The request body does not carry a usable PDF reference."""


class PayloadTooLarge(ExtractionError):
    """The request body exceeds the configured size limit."""


class FetchFailed(ExtractionError):
    """Downloading the PDF from ``pdfUrl`` failed.

    ``status_code`` is the upstream HTTP status, or None when the request
    never produced a response (timeout, DNS failure, refused connection).
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DocumentLoadFailed(ExtractionError):
    """The resolved bytes could not be decoded or opened as a PDF."""


class PageExtractionFailed(ExtractionError):
    """Extraction failed on one page. Contained by the page loop."""

    def __init__(self, page_number: int, message: str):
        super().__init__(f"Error en página: {message}")
        self.page_number = page_number
