from __future__ import annotations

from datetime import datetime

import pytest
from fastapi import HTTPException

from motoshop.services.periods import ReportPeriod, parse_month_period, parse_year_period


def test_month_period_bounds_cover_the_whole_month() -> None:
    period = parse_month_period("2", "2024")

    assert period.start == datetime(2024, 2, 1, 0, 0, 0)
    assert period.end == datetime(2024, 2, 29, 23, 59, 59)
    assert period.month_name == "febrero"
    assert period.label == "febrero 2024"


def test_year_period_bounds() -> None:
    period = parse_year_period(" 2023 ")

    assert period == ReportPeriod(year=2023)
    assert period.start == datetime(2023, 1, 1)
    assert period.end == datetime(2023, 12, 31, 23, 59, 59)
    assert period.label == "2023"


@pytest.mark.parametrize(("month", "year"), [(None, "2024"), ("3", None), ("x", "2024"), ("12", "0"), ("", "")])
def test_invalid_month_period(month: str | None, year: str | None) -> None:
    with pytest.raises(HTTPException) as exc_info:
        parse_month_period(month, year)

    assert exc_info.value.status_code == 400
    assert exc_info.value.detail == "Debe proporcionar mes y año"


def test_invalid_year_period() -> None:
    with pytest.raises(HTTPException) as exc_info:
        parse_year_period("dos mil")

    assert exc_info.value.detail == "Debe proporcionar el año"
