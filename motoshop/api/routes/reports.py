"""Management report endpoints (JSON)."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from motoshop.api.errors import failure_boundary
from motoshop.core.auth import RequestUserContext, get_current_user_context
from motoshop.db.dependencies import get_db_session
from motoshop.services.numbers import to_wire
from motoshop.services.periods import parse_month_period, parse_year_period
from motoshop.services.reporting_service import WorkshopReportingService

router = APIRouter(prefix="/reportes", tags=["reportes"])


def _service(db: Session) -> WorkshopReportingService:
    return WorkshopReportingService(db)


@router.get("/clientes-frecuentes")
def report_frequent_clients(
    mes: str | None = None,
    anio: str | None = None,
    _context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    period = parse_month_period(mes, anio)
    with failure_boundary("Error al generar reporte de clientes"):
        return to_wire(_service(db).frequent_clients(period))


@router.get("/servicios-solicitados")
def report_requested_services(
    mes: str | None = None,
    anio: str | None = None,
    _context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    period = parse_month_period(mes, anio)
    with failure_boundary("Error al generar reporte de servicios"):
        return to_wire(_service(db).requested_services(period))


@router.get("/ingresos-mensuales")
def report_monthly_income(
    anio: str | None = None,
    _context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    period = parse_year_period(anio)
    with failure_boundary("Error al generar reporte de ingresos"):
        return to_wire(_service(db).monthly_income(period))


@router.get("/empleados-productividad")
def report_employee_productivity(
    mes: str | None = None,
    anio: str | None = None,
    _context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    period = parse_month_period(mes, anio)
    with failure_boundary("Error al generar reporte de empleados"):
        return to_wire(_service(db).employee_productivity(period))


@router.get("/marcas-motos")
def report_motorcycle_brands(
    mes: str | None = None,
    anio: str | None = None,
    _context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    period = parse_month_period(mes, anio)
    with failure_boundary("Error al generar reporte de marcas"):
        return to_wire(_service(db).motorcycle_brands(period))


@router.get("/actividad-empleados")
def report_employee_activity(
    mes: str | None = None,
    anio: str | None = None,
    _context: RequestUserContext = Depends(get_current_user_context),
    db: Session = Depends(get_db_session),
) -> dict[str, object]:
    period = parse_month_period(mes, anio)
    with failure_boundary("Error al generar reporte de empleados"):
        return to_wire(_service(db).activity_by_employee(period))
