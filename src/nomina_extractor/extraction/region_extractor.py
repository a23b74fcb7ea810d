"""Backends that read the text inside a rectangular region of a PDF page."""

import os
from abc import ABC, abstractmethod

import fitz  # PyMuPDF

from ..logger import logger
from .models import Region

# Render resolution for the OCR backend
OCR_DPI = int(os.getenv("OCR_DPI", "300"))


def region_clip(page: fitz.Page, region: Region, page_height: float) -> fitz.Rect:
    """Translate a top-left-relative region into a PyMuPDF clip rectangle.

    The region is first flipped into PDF space (origin bottom-left) and then
    mapped through the page's transformation matrix, which accounts for
    mediabox offsets and rotation.

    Args:
        page: The page the region belongs to.
        region: Region measured from the top-left corner of the page.
        page_height: Height of the page in points.

    Returns:
        The clip rectangle in PyMuPDF page coordinates.
    """
    x1, y1, x2, y2 = region.to_pdf_space(page_height)
    return fitz.Rect(x1, y1, x2, y2) * page.transformation_matrix


class RegionExtractor(ABC):
    """Abstract base class for region text extraction."""

    name: str = "base"

    @abstractmethod
    def extract(
        self,
        page: fitz.Page,
        region: Region,
        page_height: float,
    ) -> str | None:
        """Return the text inside a region of a page.

        Args:
            page: The page to read.
            region: Region measured from the top-left corner of the page.
            page_height: Height of the page in points.

        Returns:
            The text found, or None when the region holds no text.
        """


class PyMuPDFRegionExtractor(RegionExtractor):
    """Reads the embedded text layer with PyMuPDF."""

    name = "pymupdf"

    def extract(
        self,
        page: fitz.Page,
        region: Region,
        page_height: float,
    ) -> str | None:
        clip = region_clip(page, region, page_height)
        if clip.is_empty:
            return None

        # (x0, y0, x1, y1, word, block_no, line_no, word_no)
        words = page.get_text("words", clip=clip, sort=True)
        text = " ".join(w[4] for w in words if w[4].strip())
        return text or None


class TesseractRegionExtractor(RegionExtractor):
    """Renders the region to an image and runs Tesseract OCR on it.

    For scanned payslips without a text layer. Requires pytesseract and
    Pillow: pip install "nomina-extractor[ocr]"
    """

    name = "tesseract"

    def __init__(self, dpi: int | None = None, lang: str = "spa"):
        try:
            import pytesseract
            from PIL import Image
        except ImportError as e:
            raise ImportError(
                "OCR requires pytesseract and Pillow. "
                'Install with: pip install "nomina-extractor[ocr]"'
            ) from e

        self._pytesseract = pytesseract
        self._image_cls = Image
        self._dpi = dpi or OCR_DPI
        self._lang = lang

    def extract(
        self,
        page: fitz.Page,
        region: Region,
        page_height: float,
    ) -> str | None:
        clip = region_clip(page, region, page_height)
        if clip.is_empty:
            return None

        zoom = self._dpi / 72
        pix = page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), clip=clip)
        if pix.width == 0 or pix.height == 0:
            return None

        img = self._image_cls.frombytes("RGB", [pix.width, pix.height], pix.samples)
        text = self._pytesseract.image_to_string(img, lang=self._lang)
        return text.strip() or None


def get_region_extractor(name: str | None = None) -> RegionExtractor:
    """Build the extractor backend selected by name or REGION_EXTRACTOR.

    Args:
        name: "pymupdf" or "tesseract". Defaults to the REGION_EXTRACTOR env
            var, then "pymupdf".

    Returns:
        A ready-to-use RegionExtractor.

    Raises:
        ValueError: If the backend name is unknown.
    """
    name = (name or os.getenv("REGION_EXTRACTOR") or "pymupdf").lower()
    if name == PyMuPDFRegionExtractor.name:
        extractor: RegionExtractor = PyMuPDFRegionExtractor()
    elif name == TesseractRegionExtractor.name:
        extractor = TesseractRegionExtractor()
    else:
        raise ValueError(f"Unknown region extractor: {name!r}")

    logger.info("region extractor ready", extractor=extractor.name)
    return extractor
