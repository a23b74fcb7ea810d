"""Entry point for the payslip extraction server."""

import argparse
import os

import uvicorn


def main():
    parser = argparse.ArgumentParser(description="Payslip (nómina) extraction server")
    parser.add_argument(
        "--extractor",
        choices=["pymupdf", "tesseract"],
        default=None,
        help="Region extractor backend (default: pymupdf). Overrides REGION_EXTRACTOR env var.",
    )
    parser.add_argument("--host", default="0.0.0.0", help="Bind host (default: 0.0.0.0)")
    parser.add_argument("--port", type=int, default=8000, help="Bind port (default: 8000)")
    args = parser.parse_args()

    if args.extractor:
        os.environ["REGION_EXTRACTOR"] = args.extractor

    from nomina_extractor.server import app

    uvicorn.run(app, host=args.host, port=args.port)


if __name__ == "__main__":
    main()
