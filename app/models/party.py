# app/models/party.py
import uuid
from sqlalchemy import Column, Date, DateTime, Integer, String
from sqlalchemy.sql import func
from app.db.base_class import Base


class Party(Base):
    __tablename__ = "parties"

    id = Column(
        String, primary_key=True, default=lambda: f"pty_{uuid.uuid4().hex[:12]}"
    )
    # Nullable: the owning account may have been deleted
    user_id = Column(String, nullable=True, index=True)

    child_name = Column(String, nullable=True)
    theme = Column(String, nullable=True)
    party_date = Column(Date, nullable=True)
    guest_count = Column(Integer, nullable=True)
    location = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
