# app/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.v1.api import api_router
from app.core.config import settings
from app.db.redis import redis_client
from app.services.enquiry_events import EnquiryEventPublisher
from app.services.enquiry_lifecycle import (
    EnquiryReconciler,
    EnquiryService,
    ReplacementOrchestrator,
)
from app.utils.replacement_notifications import ReplacementNotifier

# Configure logging
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    app.state.enquiry_service = EnquiryService(
        reconciler=EnquiryReconciler(query_timeout_ms=settings.HYDRATION_QUERY_TIMEOUT_MS),
        orchestrator=ReplacementOrchestrator(ReplacementNotifier.from_settings()),
        publisher=EnquiryEventPublisher(redis_client),
    )
    yield
    logger.info("Application shutting down...")


app = FastAPI(
    title="PartySnap Enquiry-Lifecycle Microservice",
    version="1.0.0",
    description="""
        **PartySnap Enquiry & Booking Lifecycle Service**

        Tracks supplier enquiries from first contact to a confirmed or
        declined booking.

        ## Features

        * **Supplier inbox**: Paid enquiries with party and customer attached
        * **Respond**: Accept (with a final price) or decline an enquiry
        * **Replacement workflow**: Declined paid bookings alert the ops team
        * **Dashboard stats**: Enquiry counts per status
        * **Change events**: Redis pub/sub per supplier for live dashboards

        ## Authentication

        Supplier endpoints require JWT authentication via the `Authorization: Bearer <token>` header.
        Internal endpoints require the `X-Internal-Api-Key` header.
        """,
    lifespan=lifespan,
)

origins = [
    settings.FRONTEND_URL,
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(api_router, prefix="/api/v1")


@app.get("/")
def read_root():
    return {"status": "Enquiry Lifecycle Service is running"}
