"""Read-only query gateway over the workshop tables."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import select
from sqlalchemy.orm import Session, joinedload, selectinload

from motoshop.models.entities import (
    Diagnostic,
    Employee,
    Invoice,
    Motorcycle,
    Proforma,
    ProformaLine,
    Rating,
    Service,
    WorkOrder,
    WorkOrderStatus,
)


class WorkshopRepository:
    """Fetch operations used by the reporting and export services.

    Every ``list_*`` method takes an inclusive ``[start, end]`` datetime range
    and returns a fully materialized list with the relations the reports
    read already loaded.
    """

    def __init__(self, db: Session) -> None:
        self.db = db

    # ---------- Proformas ----------
    def list_proformas_with_clients(self, *, start: datetime, end: datetime) -> list[Proforma]:
        return self.db.scalars(
            select(Proforma)
            .options(joinedload(Proforma.client))
            .where(Proforma.date >= start, Proforma.date <= end)
            .order_by(Proforma.date.asc(), Proforma.id.asc())
        ).all()

    def list_service_lines(self, *, start: datetime, end: datetime) -> list[ProformaLine]:
        return self.db.scalars(
            select(ProformaLine)
            .join(Proforma, ProformaLine.proforma_id == Proforma.id)
            .options(joinedload(ProformaLine.service).joinedload(Service.category))
            .where(
                Proforma.date >= start,
                Proforma.date <= end,
                ProformaLine.service_id.is_not(None),
            )
            .order_by(Proforma.date.asc(), ProformaLine.id.asc())
        ).all()

    # ---------- Work orders ----------
    def list_finished_work_orders(self, *, start: datetime, end: datetime) -> list[WorkOrder]:
        return self.db.scalars(
            select(WorkOrder)
            .options(joinedload(WorkOrder.proforma))
            .where(
                WorkOrder.status == WorkOrderStatus.FINISHED,
                WorkOrder.end_date >= start,
                WorkOrder.end_date <= end,
            )
            .order_by(WorkOrder.end_date.asc(), WorkOrder.id.asc())
        ).all()

    def list_work_orders_started(self, *, start: datetime, end: datetime) -> list[WorkOrder]:
        return self.db.scalars(
            select(WorkOrder)
            .where(WorkOrder.start_date >= start, WorkOrder.start_date <= end)
            .order_by(WorkOrder.start_date.asc(), WorkOrder.id.asc())
        ).all()

    # ---------- Employees and diagnostics ----------
    def list_employees(self) -> list[Employee]:
        return self.db.scalars(select(Employee).order_by(Employee.ci.asc())).all()

    def list_diagnostics(self, *, start: datetime, end: datetime) -> list[Diagnostic]:
        return self.db.scalars(
            select(Diagnostic)
            .options(joinedload(Diagnostic.motorcycle).joinedload(Motorcycle.brand))
            .where(Diagnostic.date >= start, Diagnostic.date <= end)
            .order_by(Diagnostic.date.asc(), Diagnostic.nro.asc())
        ).all()

    # ---------- Invoices and ratings ----------
    def get_invoice_for_export(self, nro: int) -> Invoice | None:
        return self.db.scalar(
            select(Invoice)
            .options(
                joinedload(Invoice.client),
                joinedload(Invoice.proforma)
                .selectinload(Proforma.lines)
                .joinedload(ProformaLine.service),
                joinedload(Invoice.proforma)
                .joinedload(Proforma.diagnostic)
                .joinedload(Diagnostic.motorcycle)
                .joinedload(Motorcycle.brand),
            )
            .where(Invoice.nro == nro)
        )

    def list_ratings(self) -> list[Rating]:
        return self.db.scalars(select(Rating).order_by(Rating.created_at.desc())).all()
