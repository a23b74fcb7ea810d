"""Tests for region text extraction backends."""

import os
import sys
from unittest.mock import patch

import fitz  # PyMuPDF
import pytest

from nomina_extractor.extraction import (
    PyMuPDFRegionExtractor,
    Region,
    TesseractRegionExtractor,
    get_region_extractor,
)
from nomina_extractor.extraction.region_extractor import region_clip


class TestRegionClip:
    """Tests for the top-left to PyMuPDF coordinate mapping."""

    def test_standard_page_maps_back_to_top_left(self, payslip_doc):
        """Test that flip plus transformation matrix lands on the same box."""
        page = payslip_doc[0]
        clip = region_clip(page, Region(x1=60, y1=80, x2=400, y2=110), page.rect.height)
        assert tuple(clip) == pytest.approx((60, 80, 400, 110))

    def test_clip_is_normalized(self, payslip_doc):
        page = payslip_doc[0]
        clip = region_clip(page, Region(x1=29, y1=650, x2=154, y2=658), page.rect.height)
        assert clip.y0 < clip.y1
        assert not clip.is_empty


class TestPyMuPDFRegionExtractor:
    """Tests for PyMuPDFRegionExtractor."""

    def test_extracts_worker_name(self, payslip_doc, test_regions):
        page = payslip_doc[0]
        text = PyMuPDFRegionExtractor().extract(page, test_regions.trabajador, page.rect.height)
        assert text == "Sanchez Caballero, Antonio!!"

    def test_extracts_period(self, payslip_doc, test_regions):
        page = payslip_doc[0]
        text = PyMuPDFRegionExtractor().extract(page, test_regions.periodo, page.rect.height)
        assert text == "Del 01-04-2025 al 30-04-2025"

    def test_ignores_text_outside_region(self, payslip_doc, test_regions):
        page = payslip_doc[0]
        text = PyMuPDFRegionExtractor().extract(page, test_regions.trabajador, page.rect.height)
        assert "devengado" not in text
        assert "2025" not in text

    def test_empty_region_returns_none(self, payslip_doc):
        """Test the not-found sentinel for a region without text."""
        page = payslip_doc[0]
        region = Region(x1=300, y1=300, x2=500, y2=400)
        assert PyMuPDFRegionExtractor().extract(page, region, page.rect.height) is None

    def test_region_outside_page_returns_none(self, payslip_doc):
        page = payslip_doc[0]
        region = Region(x1=10, y1=900, x2=100, y2=950)
        assert PyMuPDFRegionExtractor().extract(page, region, page.rect.height) is None

    def test_each_page_read_independently(self, payslip_doc, test_regions):
        extractor = PyMuPDFRegionExtractor()
        names = [
            extractor.extract(page, test_regions.trabajador, page.rect.height)
            for page in payslip_doc
        ]
        assert names[1] == "Lopez Garcia, Maria"
        assert names[2] == "Perez Ruiz, Juan"


class TestTesseractRegionExtractor:
    """Tests for TesseractRegionExtractor.

    OCR tests are skipped if pytesseract or the tesseract binary is missing.
    """

    @pytest.fixture
    def check_tesseract(self):
        """Skip tests if tesseract is not available."""
        try:
            import pytesseract
            from PIL import Image  # noqa: F401

            pytesseract.get_tesseract_version()
        except (ImportError, Exception):
            pytest.skip("pytesseract or tesseract not available")

    def test_missing_dependencies_raise_import_error(self):
        with patch.dict(sys.modules, {"pytesseract": None}):
            with pytest.raises(ImportError, match="OCR requires pytesseract"):
                TesseractRegionExtractor()

    def test_reads_rendered_text(self, check_tesseract):
        doc = fitz.open()
        page = doc.new_page(width=595, height=842)
        page.insert_text((72, 120), "ANTONIO", fontsize=36, fontname="helv")
        try:
            extractor = TesseractRegionExtractor(dpi=200, lang="eng")
            text = extractor.extract(page, Region(x1=50, y1=70, x2=400, y2=140), page.rect.height)
        finally:
            doc.close()
        assert text is not None
        assert "ANTONIO" in text.upper()


class TestGetRegionExtractor:
    def test_default_is_pymupdf(self):
        with patch.dict(os.environ, {}, clear=True):
            assert isinstance(get_region_extractor(), PyMuPDFRegionExtractor)

    def test_from_env(self):
        with patch.dict(os.environ, {"REGION_EXTRACTOR": "PyMuPDF"}):
            assert isinstance(get_region_extractor(), PyMuPDFRegionExtractor)

    def test_explicit_name_wins(self):
        with patch.dict(os.environ, {"REGION_EXTRACTOR": "tesseract"}):
            assert isinstance(get_region_extractor("pymupdf"), PyMuPDFRegionExtractor)

    def test_unknown_name_raises(self):
        with pytest.raises(ValueError, match="Unknown region extractor"):
            get_region_extractor("layoutlm")
