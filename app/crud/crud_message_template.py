# app/crud/crud_message_template.py
from typing import Optional
from sqlalchemy.orm import Session

from app.models.supplier_message_template import SupplierMessageTemplate


def get_custom(
    db: Session, supplier_id: str, supplier_category: str, template_type: str
) -> Optional[SupplierMessageTemplate]:
    return (
        db.query(SupplierMessageTemplate)
        .filter(
            SupplierMessageTemplate.supplier_id == supplier_id,
            SupplierMessageTemplate.supplier_category == supplier_category,
            SupplierMessageTemplate.template_type == template_type,
        )
        .first()
    )


def get_system(
    db: Session, supplier_category: str, template_type: str
) -> Optional[SupplierMessageTemplate]:
    return (
        db.query(SupplierMessageTemplate)
        .filter(
            SupplierMessageTemplate.supplier_category == supplier_category,
            SupplierMessageTemplate.template_type == template_type,
            SupplierMessageTemplate.is_system_template.is_(True),
        )
        .first()
    )
