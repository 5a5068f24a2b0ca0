from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from types import SimpleNamespace

from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from motoshop.exports.invoice import INVOICE_PAGE_BREAK_AT, layout_invoice
from motoshop.exports.paginated import PageBreakOp, TextOp
from motoshop.models.entities import InvoiceStatus


def _invoice(line_count: int) -> SimpleNamespace:
    service = SimpleNamespace(description="Cambio de aceite")
    lines = [SimpleNamespace(service=service, quantity=Decimal("1"), unit_price=Decimal("15")) for _ in range(line_count)]
    motorcycle = SimpleNamespace(plate="1234ABC", model="CB190", brand=SimpleNamespace(name="Honda"))
    proforma = SimpleNamespace(lines=lines, diagnostic=SimpleNamespace(motorcycle=motorcycle))
    return SimpleNamespace(
        nro=77,
        date=datetime(2024, 3, 26),
        status=InvoiceStatus.ISSUED,
        total=Decimal("15") * line_count,
        client=SimpleNamespace(ci=111, full_name="Ana Rojas", phone=None),
        proforma=proforma,
    )


def _texts(ops: list[object]) -> list[str]:
    return [op.text for op in ops if isinstance(op, TextOp)]


def test_invoice_layout_contents() -> None:
    flow = layout_invoice(_invoice(2), currency="Bs", generated_at=datetime(2024, 3, 27, 9, 15, 0))
    texts = _texts(flow.ops)

    assert texts[:2] == ["FACTURA", "Nro. 77"]
    assert "26/03/2024" in texts
    assert "EMITIDA" in texts
    assert "Honda - CB190 (1234ABC)" in texts
    assert texts.count("Bs 15.00") == 2
    assert "Bs 30.00" in texts
    assert texts[-1] == "Generado el 27/03/2024 09:15:00"
    assert flow.pages == 1


def test_long_invoice_breaks_between_lines() -> None:
    flow = layout_invoice(_invoice(60), currency="Bs", generated_at=datetime(2024, 3, 27))

    line_ys = [op.y for op in flow.ops if isinstance(op, TextOp) and op.text == "Cambio de aceite"]
    assert len(line_ys) == 60
    assert all(y <= INVOICE_PAGE_BREAK_AT for y in line_ys)
    assert any(isinstance(op, PageBreakOp) for op in flow.ops)
    assert flow.pages >= 2


def test_invoice_pdf_download(client: TestClient, workshop: Session, export_token: str) -> None:
    response = client.get(f"/api/facturas/1001/pdf?token={export_token}")

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    assert "factura-1001.pdf" in response.headers["content-disposition"]
    assert response.content.startswith(b"%PDF")


def test_invoice_pdf_not_found(client: TestClient, workshop: Session, auth_headers: dict[str, str]) -> None:
    response = client.get("/api/facturas/999/pdf", headers=auth_headers)

    assert response.status_code == 404
    assert response.json() == {"error": "Factura no encontrada"}


def test_invoice_pdf_requires_token(client: TestClient, workshop: Session) -> None:
    response = client.get("/api/facturas/1001/pdf")

    assert response.status_code == 401
    assert response.json() == {"error": "Token no proporcionado"}
