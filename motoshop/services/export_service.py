"""Spreadsheet and PDF exports of the management reports and invoices."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from datetime import datetime

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from motoshop.core.config import get_settings
from motoshop.exports.invoice import layout_invoice
from motoshop.exports.paginated import (
    PDF_MEDIA_TYPE,
    FooterLine,
    PageFlow,
    PdfColumn,
    TableReportLayout,
    format_cell,
    layout_table_report,
    render_pdf,
)
from motoshop.exports.spreadsheet import XLSX_MEDIA_TYPE, ColumnSpec, build_workbook, workbook_bytes
from motoshop.repositories.workshop_repository import WorkshopRepository
from motoshop.services.aggregation import rank_by_orders
from motoshop.services.numbers import ZERO, parse_decimal, q2
from motoshop.services.periods import ReportPeriod
from motoshop.services.reporting_service import WorkshopReportingService

logger = logging.getLogger(__name__)

INVOICE_NOT_FOUND = "Factura no encontrada"

Row = Mapping[str, object]


@dataclass(slots=True)
class ExportFilePayload:
    media_type: str
    filename: str
    content: bytes


@dataclass(frozen=True, slots=True)
class ReportExportDefinition:
    """How one report is fetched, named, tabulated, and laid out on paper."""

    filename_prefix: str
    monthly: bool
    sheet_title: str
    header_fill: str
    columns: tuple[ColumnSpec, ...]
    pdf_layout: TableReportLayout


CLIENTS_EXPORT = ReportExportDefinition(
    filename_prefix="clientes-frecuentes",
    monthly=True,
    sheet_title="Clientes Frecuentes",
    header_fill="FF4472C4",
    columns=(
        ColumnSpec("#", "numero", 5),
        ColumnSpec("CI", "ci", 12),
        ColumnSpec("Cliente", "cliente", 35),
        ColumnSpec("Teléfono", "telefono", 15),
        ColumnSpec("Total Visitas", "totalVisitas", 15),
        ColumnSpec("Total Gastado (Bs)", "totalGastado", 20),
    ),
    pdf_layout=TableReportLayout(
        title="Reporte de Clientes Frecuentes",
        columns=(
            PdfColumn("#", "numero", 50, 30),
            PdfColumn("CI", "ci", 80, 70),
            PdfColumn("Cliente", "cliente", 150, 150),
            PdfColumn("Teléfono", "telefono", 300, 80),
            PdfColumn("Visitas", "totalVisitas", 380, 80),
            PdfColumn("Total Gastado", "totalGastado", 460, 90, kind="money"),
        ),
        row_height=18,
        page_break_at=700,
        separator_after_title=True,
    ),
)

SERVICES_EXPORT = ReportExportDefinition(
    filename_prefix="servicios-solicitados",
    monthly=True,
    sheet_title="Servicios Solicitados",
    header_fill="FF9933FF",
    columns=(
        ColumnSpec("#", "numero", 5),
        ColumnSpec("Servicio", "servicio", 40),
        ColumnSpec("Categoría", "categoria", 20),
        ColumnSpec("Veces Solicitado", "vecessolicitado", 18),
        ColumnSpec("Cantidad Total", "cantidadTotal", 15),
        ColumnSpec("Ingreso Total (Bs)", "ingresoTotal", 20),
    ),
    pdf_layout=TableReportLayout(
        title="Reporte de Servicios Solicitados",
        columns=(
            PdfColumn("#", "numero", 50, 30),
            PdfColumn("Servicio", "servicio", 80, 190),
            PdfColumn("Categoría", "categoria", 280, 95),
            PdfColumn("Veces", "vecessolicitado", 380, 65),
            PdfColumn("Ingreso", "ingresoTotal", 450, 100, kind="money"),
        ),
        row_height=20,
        page_break_at=700,
    ),
)

REVENUE_EXPORT = ReportExportDefinition(
    filename_prefix="ingresos-mensuales",
    monthly=False,
    sheet_title="Ingresos Mensuales",
    header_fill="FF22AA22",
    columns=(
        ColumnSpec("Mes", "mes", 15),
        ColumnSpec("Total Órdenes", "totalOrdenes", 15),
        ColumnSpec("Ingreso Total (Bs)", "ingresoTotal", 20),
    ),
    # Always twelve rows, so the table never breaks.
    pdf_layout=TableReportLayout(
        title="Reporte de Ingresos Mensuales",
        columns=(
            PdfColumn("Mes", "mes", 100, 140),
            PdfColumn("Órdenes", "totalOrdenes", 250, 95),
            PdfColumn("Ingreso Total", "ingresoTotal", 350, 150, kind="money"),
        ),
        row_height=20,
        page_break_at=None,
        body_size=10,
        rule_start=100,
        rule_end=500,
    ),
)

EMPLOYEE_ACTIVITY_EXPORT = ReportExportDefinition(
    filename_prefix="actividad-empleados",
    monthly=True,
    sheet_title="Actividad Empleados",
    header_fill="FFFF6600",
    columns=(
        ColumnSpec("#", "numero", 5),
        ColumnSpec("CI", "ci", 12),
        ColumnSpec("Empleado", "empleado", 35),
        ColumnSpec("Total Órdenes", "totalOrdenes", 15),
        ColumnSpec("Diagnósticos", "diagnosticos", 15),
        ColumnSpec("Finalizadas", "finalizadas", 15),
        ColumnSpec("En Proceso", "enProceso", 15),
        ColumnSpec("Abiertas", "abiertas", 15),
        ColumnSpec("Eficiencia %", "eficiencia", 15),
    ),
    pdf_layout=TableReportLayout(
        title="Reporte de Actividad de Empleados",
        columns=(
            PdfColumn("#", "numero", 50, 30),
            PdfColumn("Empleado", "empleado", 80, 180),
            PdfColumn("Órdenes", "totalOrdenes", 270, 65),
            PdfColumn("Diagnósticos", "diagnosticos", 340, 85),
            PdfColumn("Finalizadas", "finalizadas", 430, 65),
            PdfColumn("Eficiencia", "eficiencia", 500, 50, kind="percent"),
        ),
        row_height=18,
        page_break_at=720,
        header_size=9,
        body_size=8,
    ),
)

REPORT_EXPORTS: dict[str, ReportExportDefinition] = {
    "clientes": CLIENTS_EXPORT,
    "servicios": SERVICES_EXPORT,
    "ingresos": REVENUE_EXPORT,
    "actividad-empleados": EMPLOYEE_ACTIVITY_EXPORT,
}

EXPORT_FORMATS = {"excel": ".xlsx", "pdf": ".pdf"}


def export_filename(definition: ReportExportDefinition, period: ReportPeriod, extension: str) -> str:
    if definition.monthly:
        return f"{definition.filename_prefix}-{period.month}-{period.year}{extension}"
    return f"{definition.filename_prefix}-{period.year}{extension}"


class WorkshopExportService:
    """Builds complete export documents; nothing is streamed before it is rendered."""

    def __init__(self, db: Session, *, clock: Callable[[], datetime] = datetime.now) -> None:
        self.db = db
        self.repo = WorkshopRepository(db)
        self.reports = WorkshopReportingService(db)
        self.clock = clock
        self.currency = get_settings().currency_label

    # ---------- Rows ----------
    def _client_rows(self, period: ReportPeriod) -> list[Row]:
        # Exports list every client of the month, not only the top ones.
        buckets = self.reports.client_buckets(period, limit=None)
        return [
            {
                "numero": index,
                "ci": bucket.ci,
                "cliente": bucket.client,
                "telefono": bucket.phone,
                "totalVisitas": bucket.visits,
                "totalGastado": bucket.spent,
            }
            for index, bucket in enumerate(buckets, start=1)
        ]

    def _service_rows(self, period: ReportPeriod) -> list[Row]:
        return [
            {
                "numero": index,
                "servicio": bucket.service,
                "categoria": bucket.category,
                "vecessolicitado": bucket.requests,
                "cantidadTotal": bucket.quantity,
                "ingresoTotal": bucket.revenue,
            }
            for index, bucket in enumerate(self.reports.service_buckets(period), start=1)
        ]

    def _revenue_rows(self, period: ReportPeriod) -> list[Row]:
        return [
            {
                "mes": month.month_name,
                "mesNumero": month.month,
                "totalOrdenes": month.orders,
                "ingresoTotal": month.revenue,
            }
            for month in self.reports.revenue_buckets(period)
        ]

    def _employee_activity_rows(self, period: ReportPeriod) -> list[Row]:
        buckets = rank_by_orders(self.reports.employee_buckets(period))
        return [
            {
                "numero": index,
                "ci": bucket.ci,
                "empleado": bucket.employee,
                "totalOrdenes": bucket.total_orders,
                "diagnosticos": bucket.diagnostics,
                "finalizadas": bucket.finished,
                "enProceso": bucket.in_progress,
                "abiertas": bucket.open_orders,
                "eficiencia": bucket.efficiency,
            }
            for index, bucket in enumerate(buckets, start=1)
        ]

    def _rows(self, report_key: str, period: ReportPeriod) -> list[Row]:
        row_builders = {
            "clientes": self._client_rows,
            "servicios": self._service_rows,
            "ingresos": self._revenue_rows,
            "actividad-empleados": self._employee_activity_rows,
        }
        return row_builders[report_key](period)

    # ---------- PDF text blocks ----------
    def _subtitle_lines(self, report_key: str, period: ReportPeriod) -> list[str]:
        if report_key == "ingresos":
            return [f"Año: {period.year}"]
        lines = [f"Período: {period.label}"]
        if report_key == "clientes":
            lines.append(f"Fecha de generación: {self.clock().strftime('%d/%m/%Y')}")
        return lines

    def _footer(self, report_key: str, rows: Sequence[Row]) -> list[FooterLine]:
        if report_key == "clientes":
            return [FooterLine(f"Total de clientes: {len(rows)}")]
        if report_key == "ingresos":
            total = sum((q2(parse_decimal(row["ingresoTotal"])) for row in rows), ZERO)
            return [
                FooterLine(
                    "Total Anual:",
                    value=format_cell(total, "money", currency=self.currency),
                    value_x=350,
                    size=10,
                    bold=True,
                )
            ]
        return []

    # ---------- Exports ----------
    def export_report(self, *, report_key: str, format_name: str, period: ReportPeriod) -> ExportFilePayload:
        normalized_key = report_key.strip().lower()
        normalized_format = format_name.strip().lower()
        definition = REPORT_EXPORTS.get(normalized_key)
        if definition is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Reporte desconocido")
        extension = EXPORT_FORMATS.get(normalized_format)
        if extension is None:
            raise HTTPException(
                status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
                detail="El formato debe ser excel o pdf",
            )

        rows = self._rows(normalized_key, period)
        filename = export_filename(definition, period, extension)
        logger.info("Exporting %s (%d rows) as %s", filename, len(rows), normalized_format)

        if normalized_format == "excel":
            workbook = build_workbook(
                sheet_title=definition.sheet_title,
                columns=definition.columns,
                rows=rows,
                header_fill=definition.header_fill,
            )
            return ExportFilePayload(media_type=XLSX_MEDIA_TYPE, filename=filename, content=workbook_bytes(workbook))

        flow = self.layout_report_pdf(normalized_key, period, rows)
        return ExportFilePayload(
            media_type=PDF_MEDIA_TYPE,
            filename=filename,
            content=render_pdf(flow.ops, title=definition.pdf_layout.title),
        )

    def layout_report_pdf(self, report_key: str, period: ReportPeriod, rows: Sequence[Row]) -> PageFlow:
        definition = REPORT_EXPORTS[report_key]
        return layout_table_report(
            definition.pdf_layout,
            subtitle_lines=self._subtitle_lines(report_key, period),
            rows=rows,
            footer=self._footer(report_key, rows),
            currency=self.currency,
        )

    def export_invoice_pdf(self, nro: int) -> ExportFilePayload:
        invoice = self.repo.get_invoice_for_export(nro)
        if invoice is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=INVOICE_NOT_FOUND)

        flow = layout_invoice(invoice, currency=self.currency, generated_at=self.clock())
        return ExportFilePayload(
            media_type=PDF_MEDIA_TYPE,
            filename=f"factura-{nro}.pdf",
            content=render_pdf(flow.ops, title=f"Factura {nro}"),
        )
