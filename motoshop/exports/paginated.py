"""Paginated PDF rendering.

Documents are laid out as a flat list of drawing instructions on a page
flow with a top-down vertical cursor, then replayed onto a reportlab canvas.
Keeping the layout separate from the canvas lets page-break decisions be
inspected without parsing PDF output.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from decimal import Decimal
from io import BytesIO

from reportlab.lib.pagesizes import letter
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

from motoshop.services.numbers import parse_decimal, q2

PDF_MEDIA_TYPE = "application/pdf"

PAGE_WIDTH, PAGE_HEIGHT = letter
TOP_MARGIN = 50.0
LEFT_MARGIN = 50.0
RIGHT_EDGE = 550.0
REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


@dataclass(frozen=True, slots=True)
class TextOp:
    x: float
    y: float
    text: str
    font: str
    size: float
    align: str = "left"


@dataclass(frozen=True, slots=True)
class RuleOp:
    x1: float
    x2: float
    y: float


@dataclass(frozen=True, slots=True)
class PageBreakOp:
    pass


DrawOp = TextOp | RuleOp | PageBreakOp


def line_height(size: float) -> float:
    return size * 1.2


def clip_text(text: str, width: float | None, font: str, size: float) -> str:
    """Trim ``text`` until it fits in ``width`` points."""

    if width is None:
        return text
    clipped = text
    while clipped and stringWidth(clipped, font, size) > width:
        clipped = clipped[:-1]
    return clipped


class PageFlow:
    """Cursor-driven page printer that records drawing instructions.

    ``page_break_at`` is the cursor position past which the next row starts
    a new page; ``None`` disables breaking for documents known to fit.
    """

    def __init__(self, *, page_break_at: float | None = None, top_margin: float = TOP_MARGIN) -> None:
        self.ops: list[DrawOp] = []
        self.page_break_at = page_break_at
        self.top_margin = top_margin
        self.y = top_margin
        self.pages = 1

    def text(
        self,
        x: float,
        text: str,
        *,
        size: float,
        bold: bool = False,
        width: float | None = None,
    ) -> None:
        font = BOLD_FONT if bold else REGULAR_FONT
        self.ops.append(
            TextOp(
                x=x,
                y=self.y,
                text=clip_text(text, width, font, size),
                font=font,
                size=size,
            )
        )

    def centered(self, text: str, *, size: float, bold: bool = False) -> None:
        """Draw a centred line and move the cursor below it."""

        font = BOLD_FONT if bold else REGULAR_FONT
        self.ops.append(TextOp(x=PAGE_WIDTH / 2, y=self.y, text=text, font=font, size=size, align="center"))
        self.advance(line_height(size))

    def rule(self, x1: float = LEFT_MARGIN, x2: float = RIGHT_EDGE, *, y: float | None = None) -> None:
        self.ops.append(RuleOp(x1=x1, x2=x2, y=self.y if y is None else y))

    def advance(self, dy: float) -> None:
        self.y += dy

    def break_if_needed(self) -> bool:
        if self.page_break_at is None or self.y <= self.page_break_at:
            return False
        self.ops.append(PageBreakOp())
        self.y = self.top_margin
        self.pages += 1
        return True


# ---------- Tabular report layout ----------
@dataclass(frozen=True, slots=True)
class PdfColumn:
    label: str
    key: str
    x: float
    width: float | None = None
    kind: str = "text"


@dataclass(frozen=True, slots=True)
class FooterLine:
    label: str
    value: str | None = None
    value_x: float | None = None
    size: float = 8
    bold: bool = False


@dataclass(frozen=True, slots=True)
class TableReportLayout:
    title: str
    columns: tuple[PdfColumn, ...]
    row_height: float
    page_break_at: float | None
    header_size: float = 10
    body_size: float = 9
    rule_start: float = LEFT_MARGIN
    rule_end: float = RIGHT_EDGE
    separator_after_title: bool = False
    subtitle_size: float = 12


def format_cell(value: object, kind: str, *, currency: str) -> str:
    if kind == "money":
        return f"{currency} {q2(parse_decimal(value))}"
    if kind == "percent":
        shown = q2(value) if isinstance(value, Decimal) else value
        return f"{shown}%"
    if value is None:
        return ""
    if isinstance(value, Decimal):
        return str(q2(value))
    return str(value)


def layout_table_report(
    layout: TableReportLayout,
    *,
    subtitle_lines: Sequence[str],
    rows: Iterable[Mapping[str, object]],
    footer: Sequence[FooterLine] = (),
    currency: str,
) -> PageFlow:
    """Lay out title block, column headers, one line per row, and a footer."""

    flow = PageFlow(page_break_at=layout.page_break_at)

    flow.centered(layout.title, size=20, bold=True)
    flow.advance(line_height(20) / 2)
    for line in subtitle_lines:
        flow.centered(line, size=layout.subtitle_size)
        flow.advance(line_height(layout.subtitle_size) / 2)
    flow.advance(line_height(layout.subtitle_size))

    if layout.separator_after_title:
        flow.rule(layout.rule_start, layout.rule_end)
        flow.advance(line_height(layout.subtitle_size))

    header_y = flow.y
    for column in layout.columns:
        flow.text(column.x, column.label, size=layout.header_size, bold=True, width=column.width)
    flow.rule(layout.rule_start, layout.rule_end, y=header_y + 15)
    flow.advance(25)

    for row in rows:
        flow.break_if_needed()
        for column in layout.columns:
            flow.text(
                column.x,
                format_cell(row.get(column.key), column.kind, currency=currency),
                size=layout.body_size,
                width=column.width,
            )
        flow.advance(layout.row_height)

    if footer:
        flow.break_if_needed()
        flow.advance(10)
        flow.rule(layout.rule_start, layout.rule_end)
        flow.advance(10)
        for line in footer:
            flow.text(layout.rule_start, line.label, size=line.size, bold=line.bold)
            if line.value is not None:
                flow.text(
                    layout.rule_start if line.value_x is None else line.value_x,
                    line.value,
                    size=line.size,
                    bold=line.bold,
                )
            flow.advance(line_height(line.size))

    return flow


# ---------- Canvas output ----------
def render_pdf(ops: Sequence[DrawOp], *, title: str | None = None) -> bytes:
    """Replay drawing instructions onto a letter-size canvas and return the PDF bytes."""

    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    if title:
        pdf.setTitle(title)

    for op in ops:
        if isinstance(op, PageBreakOp):
            pdf.showPage()
        elif isinstance(op, RuleOp):
            pdf.setLineWidth(1)
            pdf.line(op.x1, PAGE_HEIGHT - op.y, op.x2, PAGE_HEIGHT - op.y)
        else:
            pdf.setFont(op.font, op.size)
            baseline = PAGE_HEIGHT - op.y - op.size
            if op.align == "center":
                pdf.drawCentredString(op.x, baseline, op.text)
            else:
                pdf.drawString(op.x, baseline, op.text)

    pdf.showPage()
    pdf.save()
    return buffer.getvalue()
