# app/schemas/enquiry.py
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime, date
from decimal import Decimal
from enum import Enum


# --- Enums (wire contract shared with the dashboards) ---

class EnquiryStatus(str, Enum):
    PENDING = "pending"
    VIEWED = "viewed"
    ACCEPTED = "accepted"
    DECLINED = "declined"
    EXPIRED = "expired"


class PaymentStatus(str, Enum):
    UNPAID = "unpaid"
    PAID = "paid"


class ResponseDecision(str, Enum):
    ACCEPTED = "accepted"
    DECLINED = "declined"


# --- Related records ---

class UserRead(BaseModel):
    id: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None

    model_config = {"from_attributes": True}


class PartyRead(BaseModel):
    id: str
    user_id: Optional[str] = None
    child_name: Optional[str] = None
    theme: Optional[str] = None
    party_date: Optional[date] = None
    guest_count: Optional[int] = None
    location: Optional[str] = None
    user: Optional[UserRead] = None

    model_config = {"from_attributes": True}


class AddonDetail(BaseModel):
    name: str
    price: float = 0
    description: Optional[str] = None


# --- Enquiries ---

class EnquiryRead(BaseModel):
    id: str
    supplier_id: str
    party_id: str
    supplier_category: Optional[str] = None
    status: EnquiryStatus
    payment_status: PaymentStatus
    auto_accepted: bool = False
    final_price: Optional[Decimal] = None
    supplier_response: Optional[str] = None
    supplier_response_date: Optional[datetime] = None
    replacement_requested: bool = False
    replacement_requested_at: Optional[datetime] = None
    addon_details: List[AddonDetail] = []
    version: int = 1
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class HydratedEnquiry(EnquiryRead):
    """An enquiry with its party (and the party's user) attached, or None."""
    party: Optional[PartyRead] = None


class EnquiryRespond(BaseModel):
    decision: ResponseDecision
    final_price: Optional[Decimal] = Field(None, ge=0)
    message: Optional[str] = Field(None, max_length=5000)


class EnquiryStats(BaseModel):
    pending: int = 0
    viewed: int = 0
    accepted: int = 0
    declined: int = 0
    expired: int = 0
    total: int = 0


class ExpireEnquiriesRequest(BaseModel):
    older_than_hours: int = Field(..., ge=1)


class ExpireEnquiriesResult(BaseModel):
    expired: int
    cutoff: datetime
