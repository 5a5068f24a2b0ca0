"""In-memory grouping and reduction for the management reports.

Everything here is pure: records in, finalized buckets out. Records are the
ORM rows returned by ``WorkshopRepository`` (or any object exposing the
same attributes), and they are never mutated.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, TypeVar

from motoshop.models.entities import ProformaStatus, WorkOrderStatus
from motoshop.services.numbers import ZERO, parse_decimal, q2, safe_percentage

K = TypeVar("K", bound=Hashable)
B = TypeVar("B")

MONTH_NAMES = (
    "enero",
    "febrero",
    "marzo",
    "abril",
    "mayo",
    "junio",
    "julio",
    "agosto",
    "septiembre",
    "octubre",
    "noviembre",
    "diciembre",
)

# Proformas whose total counts as realized revenue.
REVENUE_PROFORMA_STATUSES = (ProformaStatus.APPROVED, ProformaStatus.COMPLETED)

CLIENT_FREQUENCY_LIMIT = 10


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]


# ---------- Generic fold ----------
def fold_into(
    buckets: dict[K, B],
    records: Iterable[Any],
    key_fn: Callable[[Any], K],
    init_fn: Callable[[Any], B] | None,
    reduce_fn: Callable[[B, Any], None],
) -> dict[K, B]:
    """Fold ``records`` into ``buckets`` left to right.

    A missing bucket is created from the first record carrying its key. With
    ``init_fn=None`` only pre-seeded keys are accepted and records for other
    keys are skipped.
    """

    for record in records:
        key = key_fn(record)
        bucket = buckets.get(key)
        if bucket is None:
            if init_fn is None:
                continue
            bucket = init_fn(record)
            buckets[key] = bucket
        reduce_fn(bucket, record)
    return buckets


def fold(
    records: Iterable[Any],
    key_fn: Callable[[Any], K],
    init_fn: Callable[[Any], B],
    reduce_fn: Callable[[B, Any], None],
) -> list[B]:
    """Group records by key; buckets come back in first-seen key order."""

    return list(fold_into({}, records, key_fn, init_fn, reduce_fn).values())


def rank(buckets: Iterable[B], key: Callable[[B], Any], limit: int | None = None) -> list[B]:
    """Sort descending by ``key``; ties keep their fold order."""

    ranked = sorted(buckets, key=key, reverse=True)
    if limit is not None:
        return ranked[:limit]
    return ranked


# ---------- Buckets ----------
@dataclass(slots=True)
class ClientVisits:
    ci: int
    client: str
    phone: str | None
    visits: int = 0
    spent: Decimal = ZERO


@dataclass(slots=True)
class ServiceDemand:
    service_id: int
    service: str
    category: str
    requests: int = 0
    quantity: Decimal = ZERO
    revenue: Decimal = ZERO


@dataclass(slots=True)
class MonthRevenue:
    month: int
    month_name: str
    orders: int = 0
    revenue: Decimal = ZERO


@dataclass(slots=True)
class EmployeeActivity:
    ci: int
    employee: str
    phone: str | None
    total_orders: int = 0
    finished: int = 0
    in_progress: int = 0
    open_orders: int = 0
    diagnostics: int = 0
    efficiency: Decimal | int = 0

    @property
    def total_activities(self) -> int:
        return self.total_orders + self.diagnostics

    def finalize(self) -> EmployeeActivity:
        self.efficiency = safe_percentage(self.finished, self.total_orders)
        return self


@dataclass(slots=True)
class BrandAttendance:
    brand: str
    diagnostics: int = 0
    models: set[str] = field(default_factory=set)

    @property
    def models_attended(self) -> int:
        return len(self.models)


@dataclass(slots=True)
class RatingSummary:
    total: int
    average: Decimal
    distribution: dict[int, int]


# ---------- Client frequency ----------
def _new_client_visits(proforma: Any) -> ClientVisits:
    client = proforma.client
    return ClientVisits(ci=client.ci, client=f"{client.first_name} {client.last_name}", phone=client.phone)


def _add_visit(bucket: ClientVisits, proforma: Any) -> None:
    bucket.visits += 1
    bucket.spent += parse_decimal(proforma.total)


def client_frequency(proformas: Iterable[Any], *, limit: int | None = CLIENT_FREQUENCY_LIMIT) -> list[ClientVisits]:
    buckets = fold(proformas, lambda row: row.client.ci, _new_client_visits, _add_visit)
    return rank(buckets, key=lambda bucket: bucket.visits, limit=limit)


# ---------- Service demand ----------
def _new_service_demand(line: Any) -> ServiceDemand:
    return ServiceDemand(
        service_id=line.service_id,
        service=line.service.description,
        category=line.service.category.name,
    )


def _add_request(bucket: ServiceDemand, line: Any) -> None:
    quantity = parse_decimal(line.quantity)
    bucket.requests += 1
    bucket.quantity += quantity
    bucket.revenue += quantity * parse_decimal(line.unit_price)


def service_demand(lines: Iterable[Any]) -> list[ServiceDemand]:
    buckets = fold(lines, lambda row: row.service_id, _new_service_demand, _add_request)
    return rank(buckets, key=lambda bucket: bucket.requests)


# ---------- Monthly revenue ----------
def monthly_revenue(finished_orders: Iterable[Any]) -> list[MonthRevenue]:
    """One bucket per calendar month, zero-filled, from a year of finished orders."""

    orders = [order for order in finished_orders if order.end_date is not None]
    months: list[MonthRevenue] = []
    for month in range(1, 13):
        bucket = MonthRevenue(month=month, month_name=month_name(month))
        for order in orders:
            if order.end_date.month != month:
                continue
            bucket.orders += 1
            proforma = order.proforma
            if proforma is not None and proforma.status in REVENUE_PROFORMA_STATUSES:
                bucket.revenue += parse_decimal(proforma.total)
        months.append(bucket)
    return months


def annual_total(months: Sequence[MonthRevenue]) -> Decimal:
    return sum((q2(month.revenue) for month in months), ZERO)


# ---------- Employees ----------
def _count_order(bucket: EmployeeActivity, order: Any) -> None:
    bucket.total_orders += 1
    if order.status == WorkOrderStatus.FINISHED:
        bucket.finished += 1
    elif order.status == WorkOrderStatus.IN_PROGRESS:
        bucket.in_progress += 1
    elif order.status == WorkOrderStatus.OPEN:
        bucket.open_orders += 1


def _count_diagnostic(bucket: EmployeeActivity, _diagnostic: Any) -> None:
    bucket.diagnostics += 1


def employee_activity(
    employees: Iterable[Any],
    work_orders: Iterable[Any],
    diagnostics: Iterable[Any],
) -> list[EmployeeActivity]:
    """Per-employee order and diagnostic counters, unranked.

    Every employee gets a bucket, including those without activity. Orders
    and diagnostics not attributed to a listed employee are ignored.
    """

    buckets: dict[int, EmployeeActivity] = {
        employee.ci: EmployeeActivity(
            ci=employee.ci,
            employee=f"{employee.first_name} {employee.last_name}",
            phone=employee.phone,
        )
        for employee in employees
    }
    fold_into(buckets, work_orders, lambda row: row.employee_ci, None, _count_order)
    fold_into(buckets, diagnostics, lambda row: row.employee_ci, None, _count_diagnostic)
    return [bucket.finalize() for bucket in buckets.values()]


def rank_by_orders(buckets: Iterable[EmployeeActivity]) -> list[EmployeeActivity]:
    return rank(buckets, key=lambda bucket: bucket.total_orders)


def rank_by_activities(buckets: Iterable[EmployeeActivity]) -> list[EmployeeActivity]:
    return rank(buckets, key=lambda bucket: bucket.total_activities)


# ---------- Brand attendance ----------
def _new_brand(diagnostic: Any) -> BrandAttendance:
    return BrandAttendance(brand=diagnostic.motorcycle.brand.name)


def _add_diagnostic(bucket: BrandAttendance, diagnostic: Any) -> None:
    bucket.diagnostics += 1
    bucket.models.add(diagnostic.motorcycle.model)


def brand_attendance(diagnostics: Iterable[Any]) -> list[BrandAttendance]:
    buckets = fold(diagnostics, lambda row: row.motorcycle.brand.name, _new_brand, _add_diagnostic)
    return rank(buckets, key=lambda bucket: bucket.diagnostics)


# ---------- Ratings ----------
def rating_summary(ratings: Iterable[Any]) -> RatingSummary:
    scores = [rating.score for rating in ratings]
    distribution = {score: 0 for score in range(5, 0, -1)}
    for score in scores:
        if score in distribution:
            distribution[score] += 1
    average = q2(Decimal(sum(scores)) / len(scores)) if scores else ZERO
    return RatingSummary(total=len(scores), average=average, distribution=distribution)
