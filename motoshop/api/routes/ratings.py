"""Customer rating statistics."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from motoshop.api.errors import failure_boundary
from motoshop.core.auth import get_current_user_context
from motoshop.db.dependencies import get_db_session
from motoshop.services.numbers import to_wire
from motoshop.services.reporting_service import WorkshopReportingService

router = APIRouter(
    prefix="/valoraciones",
    tags=["valoraciones"],
    dependencies=[Depends(get_current_user_context)],
)


@router.get("/estadisticas")
def rating_statistics(db: Session = Depends(get_db_session)) -> dict[str, object]:
    with failure_boundary("Error al obtener estadísticas"):
        return to_wire(WorkshopReportingService(db).rating_statistics())
