"""Report export downloads (xlsx and PDF).

The whole router sits behind ``require_export_token``, which runs before
the session dependency, so a rejected request never reaches the database.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from motoshop.api.errors import failure_boundary
from motoshop.core.auth import require_export_token
from motoshop.db.dependencies import get_db_session
from motoshop.services.export_service import EXPORT_FORMATS, REPORT_EXPORTS, ExportFilePayload, WorkshopExportService
from motoshop.services.periods import parse_month_period, parse_year_period

router = APIRouter(
    prefix="/reportes/export",
    tags=["exports"],
    dependencies=[Depends(require_export_token)],
)

EXPORT_FAILURE_MESSAGES = {
    "excel": "Error al exportar Excel",
    "pdf": "Error al exportar PDF",
}


def attachment(exported: ExportFilePayload) -> Response:
    return Response(
        content=exported.content,
        media_type=exported.media_type,
        headers={"Content-Disposition": f'attachment; filename="{exported.filename}"'},
    )


@router.get("/{export_name}")
def export_report(
    export_name: str,
    mes: str | None = None,
    anio: str | None = None,
    db: Session = Depends(get_db_session),
) -> Response:
    """Serve ``<report>-<format>``, e.g. ``clientes-excel`` or ``actividad-empleados-pdf``."""

    report_key, _, format_name = export_name.rpartition("-")
    definition = REPORT_EXPORTS.get(report_key)
    if definition is None or format_name not in EXPORT_FORMATS:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exportación no encontrada")

    period = parse_month_period(mes, anio) if definition.monthly else parse_year_period(anio)
    with failure_boundary(EXPORT_FAILURE_MESSAGES[format_name]):
        exported = WorkshopExportService(db).export_report(
            report_key=report_key,
            format_name=format_name,
            period=period,
        )
    return attachment(exported)
