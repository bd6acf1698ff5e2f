# app/api/v1/endpoints/supplier_enquiries.py
"""Supplier dashboard enquiry endpoints: inbox, stats, detail, respond."""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api import deps
from app.db.session import get_db
from app.schemas.enquiry import (
    EnquiryRead,
    EnquiryRespond,
    EnquiryStats,
    EnquiryStatus,
    HydratedEnquiry,
)
from app.schemas.token import TokenPayload
from app.services.enquiry_lifecycle import EnquiryService
from app.services.enquiry_lifecycle.errors import (
    ConcurrentUpdateError,
    EnquiryLifecycleError,
    EnquiryNotFoundError,
    InvalidDecisionError,
    InvalidTransitionError,
    SupplierAccessDeniedError,
    SupplierProfileNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/supplier/enquiries", tags=["Supplier Enquiries"])

_STATUS_CODES = {
    EnquiryNotFoundError: status.HTTP_404_NOT_FOUND,
    SupplierProfileNotFoundError: status.HTTP_404_NOT_FOUND,
    SupplierAccessDeniedError: status.HTTP_403_FORBIDDEN,
    InvalidDecisionError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    InvalidTransitionError: status.HTTP_409_CONFLICT,
    ConcurrentUpdateError: status.HTTP_409_CONFLICT,
}


def _to_http(e: Exception) -> HTTPException:
    if isinstance(e, EnquiryLifecycleError):
        code = _STATUS_CODES.get(type(e), status.HTTP_400_BAD_REQUEST)
        return HTTPException(status_code=code, detail=str(e))
    logger.error(f"Database error serving enquiry request: {e}", exc_info=True)
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail="Enquiries are temporarily unavailable. Please try again.",
    )


@router.get("", response_model=List[HydratedEnquiry])
def list_supplier_enquiries(
    status_filter: Optional[EnquiryStatus] = Query(default=None, alias="status"),
    business_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: EnquiryService = Depends(deps.get_enquiry_service),
):
    """Paid enquiries for the caller's businesses, newest first."""
    try:
        supplier_ids = service.resolve_supplier_ids(db, current_user.sub, business_id)
        return service.list_enquiries(
            db, supplier_ids, status_filter.value if status_filter else None
        )
    except (EnquiryLifecycleError, SQLAlchemyError) as e:
        raise _to_http(e)


@router.get("/stats", response_model=EnquiryStats)
def supplier_enquiry_stats(
    business_id: Optional[str] = Query(default=None),
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: EnquiryService = Depends(deps.get_enquiry_service),
):
    try:
        supplier_ids = service.resolve_supplier_ids(db, current_user.sub, business_id)
        return service.get_stats(db, supplier_ids)
    except (EnquiryLifecycleError, SQLAlchemyError) as e:
        raise _to_http(e)


@router.get("/{enquiryId}", response_model=HydratedEnquiry)
def get_supplier_enquiry(
    enquiryId: str,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: EnquiryService = Depends(deps.get_enquiry_service),
):
    """Enquiry detail. Opening a pending enquiry marks it viewed."""
    try:
        supplier_ids = service.resolve_supplier_ids(db, current_user.sub)
        return service.get_enquiry_detail(db, enquiryId, supplier_ids)
    except (EnquiryLifecycleError, SQLAlchemyError) as e:
        raise _to_http(e)


@router.post("/{enquiryId}/respond", response_model=EnquiryRead)
def respond_to_supplier_enquiry(
    enquiryId: str,
    body: EnquiryRespond,
    db: Session = Depends(get_db),
    current_user: TokenPayload = Depends(deps.get_current_user),
    service: EnquiryService = Depends(deps.get_enquiry_service),
):
    """Accept or decline an enquiry."""
    try:
        supplier_ids = service.resolve_supplier_ids(db, current_user.sub)
        enquiry = service.respond_to_enquiry(
            db,
            enquiryId,
            body.decision,
            final_price=body.final_price,
            message=body.message,
            supplier_ids=supplier_ids,
        )
    except (EnquiryLifecycleError, SQLAlchemyError) as e:
        raise _to_http(e)

    return EnquiryRead.model_validate(enquiry)
