# app/crud/crud_supplier_response.py
from typing import Optional
from decimal import Decimal
from sqlalchemy.orm import Session

from app.models.supplier_response import SupplierResponse


def create(
    db: Session,
    *,
    enquiry_id: str,
    party_id: str,
    supplier_id: str,
    customer_id: Optional[str],
    response_type: str,
    response_message: str,
    final_price: Optional[Decimal] = None,
) -> SupplierResponse:
    """Record the reply a supplier sent to a customer."""
    entry = SupplierResponse(
        enquiry_id=enquiry_id,
        party_id=party_id,
        supplier_id=supplier_id,
        customer_id=customer_id,
        response_type=response_type,
        response_message=response_message,
        final_price=final_price,
    )
    db.add(entry)
    db.commit()
    db.refresh(entry)
    return entry
