"""Shared fixtures: payslip PDFs generated with PyMuPDF."""

import fitz  # PyMuPDF
import pytest

from nomina_extractor.extraction import Region, RegionSet

A4_WIDTH = 595
A4_HEIGHT = 842

WORKERS = [
    ("Sanchez Caballero, Antonio!!", "Del 01-04-2025 al 30-04-2025"),
    ("Lopez   Garcia, Maria", "Del 01-05-2025 al 31-05-2025"),
    ("Perez Ruiz, Juan", "Del 01-06-2025 al 30-06-2025"),
]


def build_payslip_pdf(workers: list[tuple[str, str]]) -> bytes:
    """Build one A4 page per worker, name near the top and period below it."""
    doc = fitz.open()
    for name, period in workers:
        page = doc.new_page(width=A4_WIDTH, height=A4_HEIGHT)
        page.insert_text((72, 100), name, fontsize=11, fontname="helv")
        page.insert_text((72, 200), period, fontsize=11, fontname="helv")
        # Unrelated text outside both regions
        page.insert_text((72, 500), "Total devengado 1.234,56", fontsize=11, fontname="helv")
    data = doc.tobytes()
    doc.close()
    return data


@pytest.fixture
def test_regions() -> RegionSet:
    """Regions covering the text placed by build_payslip_pdf."""
    return RegionSet(
        trabajador=Region(x1=60, y1=70, x2=450, y2=115),
        periodo=Region(x1=60, y1=170, x2=450, y2=215),
    )


@pytest.fixture(scope="session")
def payslip_pdf_bytes() -> bytes:
    """A three-page payslip PDF."""
    return build_payslip_pdf(WORKERS)


@pytest.fixture
def payslip_doc(payslip_pdf_bytes):
    """The three-page payslip PDF opened with PyMuPDF."""
    doc = fitz.open(stream=payslip_pdf_bytes, filetype="pdf")
    yield doc
    doc.close()
