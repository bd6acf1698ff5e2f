# app/crud/crud_enquiry.py
import logging
from typing import Any, Dict, List, Optional, Sequence
from datetime import datetime
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.models.enquiry import Enquiry
from app.schemas.enquiry import PaymentStatus

logger = logging.getLogger(__name__)


def get(db: Session, enquiry_id: str) -> Optional[Enquiry]:
    return db.query(Enquiry).filter(Enquiry.id == enquiry_id).first()


def read_enquiries(
    db: Session,
    supplier_ids: Sequence[str],
    status_filter: Optional[str] = None,
    *,
    paid_only: bool = True,
) -> List[Enquiry]:
    """
    Enquiries for a set of suppliers, newest first.
    Suppliers only ever see paid enquiries through this path.
    """
    query = db.query(Enquiry).filter(Enquiry.supplier_id.in_(list(supplier_ids)))

    if paid_only:
        query = query.filter(Enquiry.payment_status == PaymentStatus.PAID.value)

    if status_filter:
        query = query.filter(Enquiry.status == status_filter)

    return query.order_by(Enquiry.created_at.desc()).all()


def update_enquiry(
    db: Session,
    enquiry_id: str,
    *,
    expected_version: int,
    patch: Dict[str, Any],
) -> Optional[Enquiry]:
    """
    Compare-and-swap update: applies `patch` only if the row is still at
    `expected_version`, and bumps the version. Returns None if another writer
    got there first. Does not commit.
    """
    values = dict(patch)
    values["version"] = Enquiry.version + 1

    count = (
        db.query(Enquiry)
        .filter(Enquiry.id == enquiry_id, Enquiry.version == expected_version)
        .update(values, synchronize_session=False)
    )
    if count == 0:
        return None

    return db.get(Enquiry, enquiry_id, populate_existing=True)


def expire_before(
    db: Session, *, cutoff: datetime, now: datetime, statuses: Sequence[str]
) -> List[Enquiry]:
    """Bulk move stale open enquiries to 'expired'. Returns the expired rows."""
    stale = (
        Enquiry.status.in_(list(statuses)),
        Enquiry.created_at < cutoff,
    )
    ids = [row.id for row in db.query(Enquiry.id).filter(*stale).all()]
    if not ids:
        return []

    # Re-check the status so a row answered since the select is left alone.
    db.query(Enquiry).filter(Enquiry.id.in_(ids), *stale).update(
        {
            "status": "expired",
            "updated_at": now,
            "version": Enquiry.version + 1,
        },
        synchronize_session=False,
    )
    db.commit()
    return (
        db.query(Enquiry)
        .filter(Enquiry.id.in_(ids), Enquiry.status == "expired")
        .populate_existing()
        .all()
    )


def count_by_status(db: Session, supplier_ids: Sequence[str]) -> Dict[str, int]:
    """Per-status counts over all enquiries (paid or not) for the suppliers."""
    rows = (
        db.query(Enquiry.status, func.count(Enquiry.id))
        .filter(Enquiry.supplier_id.in_(list(supplier_ids)))
        .group_by(Enquiry.status)
        .all()
    )
    return {status: count for status, count in rows}
