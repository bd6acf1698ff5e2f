# app/crud/crud_supplier.py
from typing import List, Optional
from sqlalchemy.orm import Session

from app.models.supplier import Supplier


def get(db: Session, supplier_id: str) -> Optional[Supplier]:
    return db.query(Supplier).filter(Supplier.id == supplier_id).first()


def get_by_auth_user(db: Session, auth_user_id: str) -> List[Supplier]:
    """All businesses owned by one login, primary business first."""
    return (
        db.query(Supplier)
        .filter(Supplier.auth_user_id == auth_user_id)
        .order_by(Supplier.is_primary.desc(), Supplier.created_at)
        .all()
    )
