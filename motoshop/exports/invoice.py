"""Invoice document layout."""

from __future__ import annotations

from datetime import datetime

from motoshop.exports.paginated import LEFT_MARGIN, PageFlow, line_height
from motoshop.models.entities import Invoice
from motoshop.services.numbers import parse_decimal, q2

INVOICE_PAGE_BREAK_AT = 700.0
VALUE_X = 150.0


def _field(flow: PageFlow, label: str, value: str, *, size: float) -> None:
    flow.text(LEFT_MARGIN, label, size=size, bold=True)
    flow.text(VALUE_X, value, size=size, width=400)
    flow.advance(line_height(size) * 1.8)


def layout_invoice(invoice: Invoice, *, currency: str, generated_at: datetime) -> PageFlow:
    flow = PageFlow(page_break_at=INVOICE_PAGE_BREAK_AT)

    flow.centered("FACTURA", size=24, bold=True)
    flow.advance(line_height(24) * 0.3)
    flow.centered(f"Nro. {invoice.nro}", size=14)
    flow.advance(line_height(14) * 0.5)
    flow.rule()
    flow.advance(line_height(12))

    _field(flow, "Fecha:", invoice.date.strftime("%d/%m/%Y"), size=12)
    status = getattr(invoice.status, "value", invoice.status)
    _field(flow, "Estado:", str(status), size=12)
    flow.advance(line_height(12) * 0.7)

    client = invoice.client
    flow.text(LEFT_MARGIN, "DATOS DEL CLIENTE", size=14, bold=True)
    flow.advance(line_height(14) * 1.5)
    _field(flow, "CI:", str(client.ci), size=11)
    _field(flow, "Nombre:", client.full_name, size=11)
    _field(flow, "Teléfono:", client.phone or "", size=11)
    flow.advance(line_height(11) * 0.7)

    proforma = invoice.proforma
    if proforma is not None:
        flow.text(LEFT_MARGIN, "DETALLE DE SERVICIOS", size=14, bold=True)
        flow.advance(line_height(14) * 1.5)

        motorcycle = proforma.diagnostic.motorcycle if proforma.diagnostic is not None else None
        if motorcycle is not None:
            brand = motorcycle.brand.name if motorcycle.brand is not None else ""
            _field(flow, "Moto:", f"{brand} - {motorcycle.model} ({motorcycle.plate})", size=11)

        if proforma.lines:
            header_y = flow.y
            flow.text(LEFT_MARGIN, "Servicio", size=10, bold=True, width=300)
            flow.text(350, "Cantidad", size=10, bold=True, width=80)
            flow.text(430, "Precio", size=10, bold=True, width=120)
            flow.rule(y=header_y + 15)
            flow.advance(25)

            for line in proforma.lines:
                flow.break_if_needed()
                service_name = line.service.description if line.service is not None else "Servicio"
                flow.text(LEFT_MARGIN, service_name, size=10, width=300)
                flow.text(350, str(q2(parse_decimal(line.quantity))), size=10, width=80)
                flow.text(430, f"{currency} {q2(parse_decimal(line.unit_price))}", size=10, width=120)
                flow.advance(line_height(10) * 1.6)

            flow.advance(line_height(10) * 0.5)
            flow.rule()
            flow.advance(line_height(10))

    flow.break_if_needed()
    flow.text(350, "TOTAL:", size=16, bold=True, width=100)
    flow.text(450, f"{currency} {q2(parse_decimal(invoice.total))}", size=18, bold=True, width=120)
    flow.advance(line_height(18) * 3)

    flow.rule()
    flow.advance(line_height(8))
    flow.centered(f"Generado el {generated_at.strftime('%d/%m/%Y %H:%M:%S')}", size=8)
    return flow
