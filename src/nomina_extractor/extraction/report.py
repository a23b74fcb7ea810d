"""Response envelopes for the extraction endpoint."""

from typing import Any

from .models import ExtractionReport, PageResult, ServerErrorResponse

SUCCESS_MESSAGE = "Extracción completada exitosamente"
SERVER_ERROR_MESSAGE = "Error procesando el PDF"


def build_report(results: list[PageResult]) -> ExtractionReport:
    """Aggregate per-page results into the success envelope.

    Pages that failed stay inline with their ``error``; they never turn the
    request into a failure.
    """
    return ExtractionReport(
        success=True,
        total_paginas=len(results),
        nominas_procesadas=len(results),
        paginas_con_error=sum(1 for r in results if r.error is not None),
        datos=results,
        mensaje=SUCCESS_MESSAGE,
    )


def dump_page(result: PageResult) -> dict[str, Any]:
    """JSON-ready dict for one page, omitting ``error`` on success."""
    exclude = {"error"} if result.error is None else None
    return result.model_dump(mode="json", by_alias=True, exclude=exclude)


def dump_report(report: ExtractionReport) -> dict[str, Any]:
    """JSON-ready dict for the success envelope."""
    data = report.model_dump(mode="json", exclude={"datos"})
    data["datos"] = [dump_page(r) for r in report.datos]
    return data


def build_server_error(exc: BaseException) -> ServerErrorResponse:
    """Request-level failure envelope carrying the exception message."""
    return ServerErrorResponse(
        error=SERVER_ERROR_MESSAGE,
        detalles=str(exc) or type(exc).__name__,
    )
