"""ORM model package."""

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

__all__ = [
    "Brand",
    "Client",
    "Diagnostic",
    "Employee",
    "Invoice",
    "InvoiceStatus",
    "Motorcycle",
    "Proforma",
    "ProformaLine",
    "ProformaStatus",
    "Rating",
    "Service",
    "ServiceCategory",
    "WorkOrder",
    "WorkOrderStatus",
]
