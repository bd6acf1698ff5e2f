# app/models/enquiry.py
import uuid
from sqlalchemy import (
    Boolean, Column, DateTime, Index, Integer, Numeric, String, Text, text
)
from sqlalchemy.sql import func
from app.db.base_class import Base, JSONType


class Enquiry(Base):
    """
    One customer request to one supplier for one service.

    Parties and users are hydrated separately by the enquiry reconciler;
    no relationships are declared here.
    """
    __tablename__ = "enquiries"

    id = Column(
        String, primary_key=True, default=lambda: f"enq_{uuid.uuid4().hex[:12]}"
    )
    supplier_id = Column(String, nullable=False, index=True)
    party_id = Column(String, nullable=False, index=True)
    supplier_category = Column(String, nullable=True)  # venue, entertainment, catering...

    # pending, viewed, accepted, declined, expired
    status = Column(String(20), nullable=False, server_default=text("'pending'"))
    # unpaid, paid
    payment_status = Column(String(20), nullable=False, server_default=text("'unpaid'"))
    auto_accepted = Column(Boolean, nullable=False, default=False, server_default=text("false"))

    final_price = Column(Numeric(10, 2), nullable=True)
    supplier_response = Column(Text, nullable=True)
    supplier_response_date = Column(DateTime(timezone=True), nullable=True)

    replacement_requested = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    replacement_requested_at = Column(DateTime(timezone=True), nullable=True)

    # [{name, price, description}]
    addon_details = Column(JSONType, nullable=False, default=list)

    # Optimistic concurrency counter, bumped on every write
    version = Column(Integer, nullable=False, default=1, server_default=text("1"))

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    __table_args__ = (
        Index("idx_enquiries_supplier_payment_created", "supplier_id", "payment_status", "created_at"),
    )
