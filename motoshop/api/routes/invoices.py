"""Invoice document download."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.orm import Session

from motoshop.api.errors import failure_boundary
from motoshop.api.routes.exports import attachment
from motoshop.core.auth import require_export_token
from motoshop.db.dependencies import get_db_session
from motoshop.services.export_service import WorkshopExportService

router = APIRouter(prefix="/facturas", tags=["facturas"], dependencies=[Depends(require_export_token)])


@router.get("/{nro}/pdf")
def export_invoice_pdf(nro: int, db: Session = Depends(get_db_session)) -> Response:
    with failure_boundary("Error al exportar PDF"):
        exported = WorkshopExportService(db).export_invoice_pdf(nro)
    return attachment(exported)
