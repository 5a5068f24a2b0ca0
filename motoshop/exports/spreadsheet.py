"""Spreadsheet (xlsx) rendering of report rows."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side
from openpyxl.utils import get_column_letter

from motoshop.services.numbers import q2

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_THIN = Side(style="thin")
CELL_BORDER = Border(top=_THIN, left=_THIN, bottom=_THIN, right=_THIN)
HEADER_FONT = Font(bold=True, color="FFFFFFFF")
HEADER_ALIGNMENT = Alignment(vertical="center", horizontal="center")


@dataclass(frozen=True, slots=True)
class ColumnSpec:
    header: str
    key: str
    width: float


def cell_value(value: object) -> object:
    """Money and quantities go in as two-decimal text; counters stay integers."""

    if isinstance(value, Decimal):
        return str(q2(value))
    if isinstance(value, float):
        return f"{value:.2f}"
    return value


def build_workbook(
    *,
    sheet_title: str,
    columns: Sequence[ColumnSpec],
    rows: Iterable[Mapping[str, object]],
    header_fill: str,
) -> Workbook:
    workbook = Workbook()
    sheet = workbook.active
    # Excel caps sheet titles at 31 characters.
    sheet.title = sheet_title[:31]

    sheet.append([column.header for column in columns])
    fill = PatternFill(fill_type="solid", fgColor=header_fill)
    for cell in sheet[1]:
        cell.font = HEADER_FONT
        cell.fill = fill
        cell.alignment = HEADER_ALIGNMENT

    for index, column in enumerate(columns, start=1):
        sheet.column_dimensions[get_column_letter(index)].width = column.width

    for row in rows:
        sheet.append([cell_value(row.get(column.key)) for column in columns])

    for sheet_row in sheet.iter_rows(min_row=1, max_row=sheet.max_row, max_col=len(columns)):
        for cell in sheet_row:
            cell.border = CELL_BORDER

    return workbook


def workbook_bytes(workbook: Workbook) -> bytes:
    output = BytesIO()
    workbook.save(output)
    return output.getvalue()
