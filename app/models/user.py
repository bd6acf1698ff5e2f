# app/models/user.py
import uuid
from sqlalchemy import Column, DateTime, String
from sqlalchemy.sql import func
from app.db.base_class import Base


class User(Base):
    """Customer identity. Read-only from the enquiry lifecycle's point of view."""
    __tablename__ = "users"

    id = Column(
        String, primary_key=True, default=lambda: f"usr_{uuid.uuid4().hex[:12]}"
    )
    first_name = Column(String, nullable=True)
    last_name = Column(String, nullable=True)
    email = Column(String, nullable=True, index=True)
    phone = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
