from __future__ import annotations

from collections.abc import Generator
from datetime import datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from motoshop.core.security import create_access_token
from motoshop.db.base import Base
from motoshop.db.dependencies import get_db_session
import motoshop.models.entities  # noqa: F401
from motoshop.main import create_app
from motoshop.models.entities import (
    Brand,
    Client,
    Diagnostic,
    Employee,
    Invoice,
    InvoiceStatus,
    Motorcycle,
    Proforma,
    ProformaLine,
    ProformaStatus,
    Rating,
    Service,
    ServiceCategory,
    WorkOrder,
    WorkOrderStatus,
)


@pytest.fixture()
def db_session() -> Generator[Session, None, None]:
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def client(db_session: Session) -> Generator[TestClient, None, None]:
    app = create_app()

    def override_db() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[get_db_session] = override_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def export_token() -> str:
    return create_access_token({"id": 7, "email": "caja@motoshop.test", "rol": "ADMIN"})


@pytest.fixture()
def auth_headers(export_token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {export_token}"}


@pytest.fixture()
def workshop(db_session: Session) -> Session:
    """March 2024 workshop activity, with a few records outside the month.

    - client 111: three proformas in March (10.00 + 20.00 + 5.00)
    - employee 901: four orders started in March, one finished; two diagnostics
    - employee 903: no activity at all
    - finished orders close in January, March and April 2024
    """

    db = db_session
    db.add_all(
        [
            Client(ci=111, first_name="Ana", last_name="Rojas", phone="70000001"),
            Client(ci=222, first_name="Luis", last_name="Vargas", phone="70000002"),
            Client(ci=333, first_name="Eva", last_name="Choque", phone=None),
            ServiceCategory(id=1, name="Mantenimiento"),
            Service(id=1, description="Cambio de aceite", category_id=1),
            Service(id=2, description="Ajuste de frenos", category_id=1),
            Brand(id=1, name="Honda"),
            Brand(id=2, name="Yamaha"),
            Motorcycle(plate="1234ABC", model="CB190", brand_id=1, client_ci=111),
            Motorcycle(plate="5678DEF", model="XR150", brand_id=1, client_ci=222),
            Motorcycle(plate="9012GHI", model="FZ", brand_id=2, client_ci=333),
            Employee(ci=901, first_name="Juan", last_name="Perez", phone="71111111"),
            Employee(ci=902, first_name="Maria", last_name="Lopez", phone="72222222"),
            Employee(ci=903, first_name="Carlos", last_name="Mamani", phone=None),
        ]
    )
    db.add_all(
        [
            Diagnostic(nro=1, date=datetime(2024, 3, 2, 9, 0), motorcycle_plate="1234ABC", employee_ci=901),
            Diagnostic(nro=2, date=datetime(2024, 3, 5, 9, 0), motorcycle_plate="5678DEF", employee_ci=901),
            Diagnostic(nro=3, date=datetime(2024, 3, 10, 9, 0), motorcycle_plate="9012GHI", employee_ci=902),
            Diagnostic(nro=4, date=datetime(2024, 2, 20, 9, 0), motorcycle_plate="1234ABC", employee_ci=902),
        ]
    )
    db.add_all(
        [
            Proforma(
                id=1,
                date=datetime(2024, 3, 3, 10, 0),
                total=Decimal("10.00"),
                status=ProformaStatus.APPROVED,
                client_ci=111,
                diagnostic_nro=1,
            ),
            Proforma(
                id=2,
                date=datetime(2024, 3, 12, 10, 0),
                total=Decimal("20.00"),
                status=ProformaStatus.COMPLETED,
                client_ci=111,
            ),
            Proforma(
                id=3,
                date=datetime(2024, 3, 20, 10, 0),
                total=Decimal("5.00"),
                status=ProformaStatus.PENDING,
                client_ci=111,
            ),
            Proforma(
                id=4,
                date=datetime(2024, 3, 15, 10, 0),
                total=Decimal("50.00"),
                status=ProformaStatus.APPROVED,
                client_ci=222,
                diagnostic_nro=2,
            ),
            Proforma(
                id=5,
                date=datetime(2024, 4, 1, 10, 0),
                total=Decimal("99.00"),
                status=ProformaStatus.APPROVED,
                client_ci=333,
            ),
            Proforma(
                id=6,
                date=datetime(2024, 3, 25, 10, 0),
                total=None,
                status=ProformaStatus.REJECTED,
                client_ci=333,
            ),
        ]
    )
    db.add_all(
        [
            ProformaLine(id=1, proforma_id=1, service_id=1, quantity=Decimal("1.00"), unit_price=Decimal("10.00")),
            ProformaLine(id=2, proforma_id=2, service_id=2, quantity=Decimal("1.00"), unit_price=Decimal("20.00")),
            ProformaLine(id=3, proforma_id=3, service_id=None, quantity=Decimal("1.00"), unit_price=Decimal("5.00")),
            ProformaLine(id=4, proforma_id=4, service_id=1, quantity=Decimal("2.00"), unit_price=Decimal("15.00")),
        ]
    )
    db.add_all(
        [
            WorkOrder(
                id=1,
                start_date=datetime(2024, 3, 4, 8, 0),
                end_date=datetime(2024, 3, 10, 17, 0),
                status=WorkOrderStatus.FINISHED,
                employee_ci=901,
                proforma_id=1,
            ),
            WorkOrder(
                id=2,
                start_date=datetime(2024, 3, 13, 8, 0),
                status=WorkOrderStatus.IN_PROGRESS,
                employee_ci=901,
                proforma_id=2,
            ),
            WorkOrder(
                id=3,
                start_date=datetime(2024, 3, 16, 8, 0),
                status=WorkOrderStatus.OPEN,
                employee_ci=901,
                proforma_id=4,
            ),
            WorkOrder(
                id=4,
                start_date=datetime(2024, 3, 21, 8, 0),
                status=WorkOrderStatus.OPEN,
                employee_ci=901,
                proforma_id=3,
            ),
            WorkOrder(
                id=5,
                start_date=datetime(2024, 3, 22, 8, 0),
                end_date=datetime(2024, 4, 2, 17, 0),
                status=WorkOrderStatus.FINISHED,
                employee_ci=902,
                proforma_id=2,
            ),
            WorkOrder(
                id=6,
                start_date=datetime(2024, 1, 5, 8, 0),
                end_date=datetime(2024, 1, 20, 17, 0),
                status=WorkOrderStatus.FINISHED,
                employee_ci=902,
                proforma_id=6,
            ),
        ]
    )
    db.add_all(
        [
            Invoice(
                nro=1001,
                date=datetime(2024, 3, 26, 11, 30),
                total=Decimal("50.00"),
                status=InvoiceStatus.ISSUED,
                client_ci=222,
                proforma_id=4,
            ),
            Rating(id=1, name="Ana", score=5, created_at=datetime(2024, 3, 1, 12, 0)),
            Rating(id=2, name="Luis", score=4, created_at=datetime(2024, 3, 2, 12, 0)),
            Rating(id=3, score=4, created_at=datetime(2024, 3, 3, 12, 0)),
        ]
    )
    db.commit()
    return db
