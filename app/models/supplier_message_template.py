# app/models/supplier_message_template.py
import uuid
from sqlalchemy import Boolean, Column, DateTime, String, Text, text
from sqlalchemy.sql import func
from app.db.base_class import Base


class SupplierMessageTemplate(Base):
    __tablename__ = "supplier_message_templates"

    id = Column(
        String, primary_key=True, default=lambda: f"smt_{uuid.uuid4().hex[:12]}"
    )
    # NULL for system templates
    supplier_id = Column(String, nullable=True, index=True)
    supplier_category = Column(String, nullable=False)
    template_type = Column(String(20), nullable=False)  # acceptance, decline
    message_template = Column(Text, nullable=False)
    is_system_template = Column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    created_at = Column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
