"""Request, region and report models for payroll field extraction."""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, model_validator


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Region(BaseModel):
    """A rectangle on a page, in points, measured from the top-left corner."""

    x1: float = Field(..., ge=0)
    y1: float = Field(..., ge=0)
    x2: float = Field(..., ge=0)
    y2: float = Field(..., ge=0)

    @model_validator(mode="after")
    def validate_bounds(self) -> "Region":
        if self.x2 <= self.x1 or self.y2 <= self.y1:
            raise ValueError("region must satisfy x1 < x2 and y1 < y2")
        return self

    def to_pdf_space(self, page_height: float) -> tuple[float, float, float, float]:
        """Flip the vertical bounds into PDF space (origin bottom-left).

        Args:
            page_height: Height of the page in points.

        Returns:
            Tuple of (x1, y1, x2, y2) with y measured from the bottom edge.
        """
        return (self.x1, page_height - self.y2, self.x2, page_height - self.y1)


class RegionSet(BaseModel):
    """The two regions read from every payslip page."""

    model_config = ConfigDict(populate_by_name=True)

    trabajador: Region = Field(..., alias="TRABAJADOR")
    periodo: Region = Field(..., alias="PERIODO")


# Placeholder coordinates; calibrate against the real payslip layout with
# scripts/verify_extraction.py.
DEFAULT_REGIONS = RegionSet(
    trabajador=Region(x1=29, y1=650, x2=154, y2=658),
    periodo=Region(x1=50, y1=100, x2=400, y2=115),
)


class PageResult(BaseModel):
    """Outcome of extracting one page, either the fields or an error."""

    pagina: int = Field(..., ge=1)
    trabajador: str | None = None
    periodo: str | None = None
    coordenadas_usadas: RegionSet
    fecha_extraccion: datetime = Field(default_factory=_utcnow)
    error: str | None = None

    @model_validator(mode="after")
    def validate_error_fields(self) -> "PageResult":
        if self.error is not None and (
            self.trabajador is not None or self.periodo is not None
        ):
            raise ValueError("a failed page cannot carry extracted fields")
        return self


class ExtractionReport(BaseModel):
    success: bool = True
    total_paginas: int
    nominas_procesadas: int
    paginas_con_error: int = 0
    datos: list[PageResult]
    mensaje: str


class ExtractRequest(BaseModel):
    """Body of POST /api/extract-nomina. Unknown keys are ignored."""

    pdfData: str | None = None
    pdfUrl: str | None = None


class ServerErrorResponse(BaseModel):
    success: bool = False
    error: str
    detalles: str
    timestamp: datetime = Field(default_factory=_utcnow)
