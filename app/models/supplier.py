# app/models/supplier.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, String, text
from sqlalchemy.sql import func
from app.db.base_class import Base, JSONType


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(
        String, primary_key=True, default=lambda: f"sup_{uuid.uuid4().hex[:12]}"
    )
    # One auth identity can own several businesses
    auth_user_id = Column(String, nullable=False, index=True)
    business_name = Column(String, nullable=True)
    category = Column(String, nullable=True)
    is_primary = Column(Boolean, nullable=False, default=False, server_default=text("false"))
    data = Column(JSONType, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
