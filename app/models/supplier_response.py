# app/models/supplier_response.py
import uuid
from sqlalchemy import Column, DateTime, Numeric, String, Text
from sqlalchemy.sql import func
from app.db.base_class import Base


class SupplierResponse(Base):
    """Append-only log of the replies suppliers sent to customers."""
    __tablename__ = "supplier_responses"

    id = Column(
        String, primary_key=True, default=lambda: f"spr_{uuid.uuid4().hex[:12]}"
    )
    enquiry_id = Column(String, nullable=False, index=True)
    party_id = Column(String, nullable=False)
    supplier_id = Column(String, nullable=False, index=True)
    customer_id = Column(String, nullable=True)
    response_type = Column(String(20), nullable=False)  # accepted, declined
    response_message = Column(Text, nullable=False)
    final_price = Column(Numeric(10, 2), nullable=True)

    sent_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
