# app/api/v1/endpoints/internals.py
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.schemas.enquiry import ExpireEnquiriesRequest, ExpireEnquiriesResult
from app.services.enquiry_lifecycle import EnquiryService

router = APIRouter(tags=["Internal"])


@router.post("/internal/enquiries/expire", response_model=ExpireEnquiriesResult)
def expire_stale_enquiries(
    body: ExpireEnquiriesRequest,
    db: Session = Depends(get_db),
    api_key: str = Depends(deps.get_internal_api_key),
    service: EnquiryService = Depends(deps.get_enquiry_service),
):
    """
    Called by the platform scheduler. Moves pending and viewed enquiries
    older than `older_than_hours` to expired.
    """
    cutoff = datetime.now(timezone.utc) - timedelta(hours=body.older_than_hours)
    expired = service.mark_expired(db, cutoff)
    return ExpireEnquiriesResult(expired=expired, cutoff=cutoff)
