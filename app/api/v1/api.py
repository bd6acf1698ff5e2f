# app/api/v1/api.py

from fastapi import APIRouter
from app.api.v1.endpoints import health, internals, supplier_enquiries

# This is the main router for the v1 API.
api_router = APIRouter()

api_router.include_router(supplier_enquiries.router)
api_router.include_router(internals.router)
api_router.include_router(health.router)
