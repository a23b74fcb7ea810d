#!/usr/bin/env python3
"""Verification script for payslip region extraction.

Usage:
    python scripts/verify_extraction.py <pdf_path> [--pages N] [--words]
        [--extractor pymupdf|tesseract]

Prints the extracted fields per page. With --words, also lists every word
with its box in top-left-relative points, which is what the regions are
calibrated against.
"""

import argparse
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import fitz  # PyMuPDF

from nomina_extractor.extraction import (
    DEFAULT_REGIONS,
    ExtractionError,
    extract_from_bytes,
    get_region_extractor,
)


def _print_words(pdf_path: Path, pages: int) -> None:
    doc = fitz.open(pdf_path)
    try:
        for page in list(doc)[:pages]:
            print(f"\n--- Words on page {page.number + 1} ({page.rect.width:.0f}x{page.rect.height:.0f}pt) ---")
            for x0, y0, x1, y1, word, *_ in page.get_text("words", sort=True):
                print(f"  x1={x0:7.1f} y1={y0:7.1f} x2={x1:7.1f} y2={y1:7.1f}  {word}")
    finally:
        doc.close()


def main():
    parser = argparse.ArgumentParser(description="Verify payslip region extraction")
    parser.add_argument("pdf_path", help="Path to PDF file")
    parser.add_argument(
        "--pages", type=int, default=5, help="Number of pages to display (default: 5)"
    )
    parser.add_argument(
        "--words", action="store_true", help="List word boxes for region calibration"
    )
    parser.add_argument(
        "--extractor",
        choices=["pymupdf", "tesseract"],
        default=None,
        help="Region extractor backend (default: REGION_EXTRACTOR or pymupdf)",
    )
    args = parser.parse_args()

    pdf_path = Path(args.pdf_path)
    if not pdf_path.exists():
        print(f"Error: File not found: {pdf_path}")
        sys.exit(1)

    print(f"Extracting: {pdf_path}")
    print(f"TRABAJADOR region: {DEFAULT_REGIONS.trabajador.model_dump()}")
    print(f"PERIODO region:    {DEFAULT_REGIONS.periodo.model_dump()}")
    print("=" * 80)

    try:
        report = extract_from_bytes(
            pdf_path.read_bytes(),
            DEFAULT_REGIONS,
            get_region_extractor(args.extractor),
        )
    except ExtractionError as e:
        print(f"Error: {e}")
        sys.exit(1)

    print(f"Total pages: {report.total_paginas} (failed: {report.paginas_con_error})")
    print(f"Showing first {min(args.pages, report.total_paginas)} pages")

    for result in report.datos[: args.pages]:
        print(f"\n--- Page {result.pagina} ---")
        if result.error:
            print(f"  [ERROR] {result.error}")
            continue
        print(f"  TRABAJADOR: {result.trabajador or '(not found)'}")
        print(f"  PERIODO:    {result.periodo or '(not found)'}")

    if args.words:
        _print_words(pdf_path, args.pages)

    print("\n" + "=" * 80)
    print("Extraction complete.")


if __name__ == "__main__":
    main()
