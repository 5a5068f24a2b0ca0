"""Management report service layer.

Each report fetches its records for the requested period through
``WorkshopRepository``, folds them with the reducers in
``motoshop.services.aggregation`` and returns a payload whose monetary
values are still ``Decimal``. Routes convert payloads with ``to_wire``.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from motoshop.repositories.workshop_repository import WorkshopRepository
from motoshop.services.aggregation import (
    CLIENT_FREQUENCY_LIMIT,
    BrandAttendance,
    ClientVisits,
    EmployeeActivity,
    MonthRevenue,
    ServiceDemand,
    annual_total,
    brand_attendance,
    client_frequency,
    employee_activity,
    monthly_revenue,
    rank_by_activities,
    rank_by_orders,
    rating_summary,
    service_demand,
)
from motoshop.services.periods import ReportPeriod

logger = logging.getLogger(__name__)

RATING_DISTRIBUTION_KEYS = {5: "cinco", 4: "cuatro", 3: "tres", 2: "dos", 1: "uno"}


class WorkshopReportingService:
    def __init__(self, db: Session) -> None:
        self.db = db
        self.repo = WorkshopRepository(db)

    # ---------- Buckets ----------
    def client_buckets(self, period: ReportPeriod, *, limit: int | None) -> list[ClientVisits]:
        proformas = self.repo.list_proformas_with_clients(start=period.start, end=period.end)
        return client_frequency(proformas, limit=limit)

    def service_buckets(self, period: ReportPeriod) -> list[ServiceDemand]:
        return service_demand(self.repo.list_service_lines(start=period.start, end=period.end))

    def revenue_buckets(self, period: ReportPeriod) -> list[MonthRevenue]:
        year = ReportPeriod(year=period.year)
        return monthly_revenue(self.repo.list_finished_work_orders(start=year.start, end=year.end))

    def employee_buckets(self, period: ReportPeriod) -> list[EmployeeActivity]:
        return employee_activity(
            self.repo.list_employees(),
            self.repo.list_work_orders_started(start=period.start, end=period.end),
            self.repo.list_diagnostics(start=period.start, end=period.end),
        )

    def brand_buckets(self, period: ReportPeriod) -> list[BrandAttendance]:
        return brand_attendance(self.repo.list_diagnostics(start=period.start, end=period.end))

    # ---------- Payloads ----------
    @staticmethod
    def _period_header(period: ReportPeriod) -> dict[str, object]:
        return {"mes": period.month, "anio": period.year, "mesNombre": period.month_name}

    def frequent_clients(self, period: ReportPeriod) -> dict[str, object]:
        """Top clients by proforma count within the month."""

        buckets = self.client_buckets(period, limit=CLIENT_FREQUENCY_LIMIT)
        logger.debug("Client frequency for %s: %d clients", period.label, len(buckets))
        return {
            **self._period_header(period),
            "totalClientes": len(buckets),
            "clientes": [
                {
                    "cliente": bucket.client,
                    "telefono": bucket.phone,
                    "ci": bucket.ci,
                    "totalVisitas": bucket.visits,
                    "totalGastado": bucket.spent,
                }
                for bucket in buckets
            ],
        }

    def requested_services(self, period: ReportPeriod) -> dict[str, object]:
        buckets = self.service_buckets(period)
        return {
            **self._period_header(period),
            "totalServicios": len(buckets),
            "servicios": [
                {
                    "servicio": bucket.service,
                    "categoria": bucket.category,
                    "vecessolicitado": bucket.requests,
                    "cantidadTotal": bucket.quantity,
                    "ingresoTotal": bucket.revenue,
                }
                for bucket in buckets
            ],
        }

    def monthly_income(self, period: ReportPeriod) -> dict[str, object]:
        """Twelve month rows for the year; ``totalAnual`` sums the rounded monthly totals."""

        months = self.revenue_buckets(period)
        return {
            "anio": period.year,
            "totalAnual": annual_total(months),
            "ingresos": [
                {
                    "mes": month.month_name,
                    "mesNumero": month.month,
                    "totalOrdenes": month.orders,
                    "ingresoTotal": month.revenue,
                }
                for month in months
            ],
        }

    def employee_productivity(self, period: ReportPeriod) -> dict[str, object]:
        buckets = rank_by_orders(self.employee_buckets(period))
        return {
            **self._period_header(period),
            "totalEmpleados": len(buckets),
            "empleados": [
                {
                    "empleado": bucket.employee,
                    "ci": bucket.ci,
                    "telefono": bucket.phone,
                    "totalOrdenes": bucket.total_orders,
                    "totalDiagnosticos": bucket.diagnostics,
                    "finalizadas": bucket.finished,
                    "enProceso": bucket.in_progress,
                    "abiertas": bucket.open_orders,
                    "porcentajeCompletado": bucket.efficiency,
                }
                for bucket in buckets
            ],
        }

    def motorcycle_brands(self, period: ReportPeriod) -> dict[str, object]:
        buckets = self.brand_buckets(period)
        return {
            **self._period_header(period),
            "totalMarcas": len(buckets),
            "marcas": [
                {
                    "marca": bucket.brand,
                    "totalDiagnosticos": bucket.diagnostics,
                    "modelosAtendidos": bucket.models_attended,
                }
                for bucket in buckets
            ],
        }

    def activity_by_employee(self, period: ReportPeriod) -> dict[str, object]:
        """Orders plus diagnostics per employee, busiest first."""

        buckets = rank_by_activities(self.employee_buckets(period))
        return {
            **self._period_header(period),
            "totalEmpleados": len(buckets),
            "empleados": [
                {
                    "empleado": bucket.employee,
                    "ci": bucket.ci,
                    "telefono": bucket.phone,
                    "totalOrdenes": bucket.total_orders,
                    "totalDiagnosticos": bucket.diagnostics,
                    "totalActividades": bucket.total_activities,
                    "finalizadas": bucket.finished,
                    "enProceso": bucket.in_progress,
                    "abiertas": bucket.open_orders,
                    "eficiencia": bucket.efficiency,
                }
                for bucket in buckets
            ],
        }

    def rating_statistics(self) -> dict[str, object]:
        summary = rating_summary(self.repo.list_ratings())
        return {
            "totalValoraciones": summary.total,
            "promedioCalificacion": summary.average,
            "distribucion": {
                RATING_DISTRIBUTION_KEYS[score]: count for score, count in summary.distribution.items()
            },
        }
