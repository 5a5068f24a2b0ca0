"""Report period parsing and date-range bounds."""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import datetime

from fastapi import HTTPException, status

from motoshop.services.aggregation import month_name

MONTH_AND_YEAR_REQUIRED = "Debe proporcionar mes y año"
YEAR_REQUIRED = "Debe proporcionar el año"


@dataclass(frozen=True, slots=True)
class ReportPeriod:
    """A calendar month, or a whole year when ``month`` is None."""

    year: int
    month: int | None = None

    @property
    def start(self) -> datetime:
        return datetime(self.year, self.month or 1, 1)

    @property
    def end(self) -> datetime:
        month = self.month or 12
        last_day = calendar.monthrange(self.year, month)[1]
        return datetime(self.year, month, last_day, 23, 59, 59)

    @property
    def month_name(self) -> str:
        return month_name(self.month) if self.month else ""

    @property
    def label(self) -> str:
        if self.month is None:
            return str(self.year)
        return f"{self.month_name} {self.year}"


def _parse_int(value: str | None) -> int | None:
    if value is None or not value.strip():
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def _bad_request(message: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)


def parse_month_period(month: str | None, year: str | None) -> ReportPeriod:
    """Validate ``mes``/``anio`` query values into a monthly period or raise 400."""

    parsed_month = _parse_int(month)
    parsed_year = _parse_int(year)
    if parsed_month is None or parsed_year is None:
        raise _bad_request(MONTH_AND_YEAR_REQUIRED)
    if not 1 <= parsed_month <= 12 or not 1 <= parsed_year <= 9999:
        raise _bad_request(MONTH_AND_YEAR_REQUIRED)
    return ReportPeriod(year=parsed_year, month=parsed_month)


def parse_year_period(year: str | None) -> ReportPeriod:
    parsed_year = _parse_int(year)
    if parsed_year is None or not 1 <= parsed_year <= 9999:
        raise _bad_request(YEAR_REQUIRED)
    return ReportPeriod(year=parsed_year)
