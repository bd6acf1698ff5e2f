# app/models/urgent_alert.py
"""
Durable record of a critical operational event.
Append-only: rows are inserted by the replacement orchestrator and never updated.
"""
import uuid
from sqlalchemy import Column, DateTime, Index, String, Text, UniqueConstraint, text
from sqlalchemy.sql import func
from app.db.base_class import Base, JSONType


class UrgentAlert(Base):
    __tablename__ = "urgent_alerts"

    id = Column(
        String, primary_key=True, default=lambda: f"alt_{uuid.uuid4().hex[:12]}"
    )
    type = Column(String(50), nullable=False)  # supplier_decline
    party_id = Column(String, nullable=False, index=True)
    enquiry_id = Column(String, nullable=False, index=True)
    severity = Column(String(20), nullable=False, server_default=text("'critical'"))
    message = Column(Text, nullable=False)
    data = Column(JSONType, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    __table_args__ = (
        # One alert per enquiry per alert type
        UniqueConstraint("enquiry_id", "type", name="uq_urgent_alert_enquiry_type"),
        Index("idx_urgent_alerts_severity_created", "severity", "created_at"),
    )
