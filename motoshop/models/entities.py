"""ORM entities for the workshop schema.

The tables are owned by the workshop management application; this service
only reads them.
"""

from __future__ import annotations

import enum
from datetime import datetime
from decimal import Decimal

from sqlalchemy import BigInteger, CheckConstraint, DateTime, ForeignKey, Index, Integer, Numeric, String
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from motoshop.db.base import Base

# BIGINT keys do not autoincrement on SQLite.
BigIntKey = BigInteger().with_variant(Integer, "sqlite")


class WorkOrderStatus(str, enum.Enum):
    OPEN = "ABIERTA"
    IN_PROGRESS = "EN_PROCESO"
    FINISHED = "FINALIZADA"


class ProformaStatus(str, enum.Enum):
    PENDING = "PENDIENTE"
    APPROVED = "APROBADA"
    REJECTED = "RECHAZADA"
    COMPLETED = "COMPLETADA"


class InvoiceStatus(str, enum.Enum):
    ISSUED = "EMITIDA"
    VOIDED = "ANULADA"


def _enum_column(enum_cls: type[enum.Enum], name: str) -> SQLEnum:
    return SQLEnum(
        enum_cls,
        name=name,
        values_callable=lambda members: [member.value for member in members],
    )


class Client(Base):
    __tablename__ = "clients"

    ci: Mapped[int] = mapped_column(BigIntKey, primary_key=True, autoincrement=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class ServiceCategory(Base):
    __tablename__ = "service_categories"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)


class Service(Base):
    __tablename__ = "services"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    description: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[int] = mapped_column(ForeignKey("service_categories.id"), nullable=False)

    category: Mapped[ServiceCategory] = relationship()


class Brand(Base):
    __tablename__ = "brands"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)


class Motorcycle(Base):
    __tablename__ = "motorcycles"

    plate: Mapped[str] = mapped_column(String(20), primary_key=True)
    model: Mapped[str] = mapped_column(String(100), nullable=False)
    brand_id: Mapped[int] = mapped_column(ForeignKey("brands.id"), nullable=False)
    client_ci: Mapped[int | None] = mapped_column(ForeignKey("clients.ci"), nullable=True)

    brand: Mapped[Brand] = relationship()


class Employee(Base):
    __tablename__ = "employees"

    ci: Mapped[int] = mapped_column(BigIntKey, primary_key=True, autoincrement=False)
    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(30), nullable=True)

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Diagnostic(Base):
    __tablename__ = "diagnostics"
    __table_args__ = (Index("ix_diagnostics_date", "date"),)

    nro: Mapped[int] = mapped_column(BigIntKey, primary_key=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    motorcycle_plate: Mapped[str] = mapped_column(ForeignKey("motorcycles.plate"), nullable=False)
    employee_ci: Mapped[int | None] = mapped_column(ForeignKey("employees.ci"), nullable=True)

    motorcycle: Mapped[Motorcycle] = relationship()


class Proforma(Base):
    __tablename__ = "proformas"
    __table_args__ = (Index("ix_proformas_date", "date"),)

    id: Mapped[int] = mapped_column(BigIntKey, primary_key=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    total: Mapped[Decimal | None] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[ProformaStatus] = mapped_column(
        _enum_column(ProformaStatus, "proforma_status"),
        nullable=False,
        default=ProformaStatus.PENDING,
    )
    client_ci: Mapped[int] = mapped_column(ForeignKey("clients.ci"), nullable=False)
    diagnostic_nro: Mapped[int | None] = mapped_column(ForeignKey("diagnostics.nro"), nullable=True)

    client: Mapped[Client] = relationship()
    diagnostic: Mapped[Diagnostic | None] = relationship()
    lines: Mapped[list[ProformaLine]] = relationship(back_populates="proforma", order_by="ProformaLine.id")


class ProformaLine(Base):
    __tablename__ = "proforma_lines"
    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_proforma_lines_quantity_non_negative"),
        Index("ix_proforma_lines_proforma_id", "proforma_id"),
    )

    id: Mapped[int] = mapped_column(BigIntKey, primary_key=True)
    proforma_id: Mapped[int] = mapped_column(ForeignKey("proformas.id"), nullable=False)
    service_id: Mapped[int | None] = mapped_column(ForeignKey("services.id"), nullable=True)
    quantity: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False, default=Decimal("1.00"))
    unit_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))

    proforma: Mapped[Proforma] = relationship(back_populates="lines")
    service: Mapped[Service | None] = relationship()


class WorkOrder(Base):
    __tablename__ = "work_orders"
    __table_args__ = (
        Index("ix_work_orders_start_date", "start_date"),
        Index("ix_work_orders_end_date", "end_date"),
    )

    id: Mapped[int] = mapped_column(BigIntKey, primary_key=True)
    start_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    end_date: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    status: Mapped[WorkOrderStatus] = mapped_column(
        _enum_column(WorkOrderStatus, "work_order_status"),
        nullable=False,
        default=WorkOrderStatus.OPEN,
    )
    employee_ci: Mapped[int | None] = mapped_column(ForeignKey("employees.ci"), nullable=True)
    proforma_id: Mapped[int | None] = mapped_column(ForeignKey("proformas.id"), nullable=True)

    proforma: Mapped[Proforma | None] = relationship()


class Invoice(Base):
    __tablename__ = "invoices"

    nro: Mapped[int] = mapped_column(BigIntKey, primary_key=True)
    date: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
    total: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    status: Mapped[InvoiceStatus] = mapped_column(
        _enum_column(InvoiceStatus, "invoice_status"),
        nullable=False,
        default=InvoiceStatus.ISSUED,
    )
    client_ci: Mapped[int] = mapped_column(ForeignKey("clients.ci"), nullable=False)
    proforma_id: Mapped[int | None] = mapped_column(ForeignKey("proformas.id"), nullable=True)

    client: Mapped[Client] = relationship()
    proforma: Mapped[Proforma | None] = relationship()


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (CheckConstraint("score BETWEEN 1 AND 5", name="ck_ratings_score_range"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False, default="Anónimo")
    email: Mapped[str | None] = mapped_column(String(320), nullable=True)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    comment: Mapped[str | None] = mapped_column(String(2000), nullable=True)
    client_ip: Mapped[str | None] = mapped_column(String(64), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
