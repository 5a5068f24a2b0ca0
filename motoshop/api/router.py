"""Top-level API router."""

from fastapi import APIRouter

from motoshop.api.routes.exports import router as exports_router
from motoshop.api.routes.health import router as health_router
from motoshop.api.routes.invoices import router as invoices_router
from motoshop.api.routes.ratings import router as ratings_router
from motoshop.api.routes.reports import router as reports_router

api_router = APIRouter()
api_router.include_router(health_router, tags=["health"])
api_router.include_router(reports_router)
api_router.include_router(exports_router)
api_router.include_router(invoices_router)
api_router.include_router(ratings_router)
