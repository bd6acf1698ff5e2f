# app/crud/crud_urgent_alert.py
"""
Append-only store for urgent operational alerts.
"""
from typing import Any, Dict, Optional
from sqlalchemy.orm import Session

from app.models.urgent_alert import UrgentAlert


def insert_alert(
    db: Session,
    *,
    type: str,
    party_id: str,
    enquiry_id: str,
    severity: str,
    message: str,
    data: Optional[Dict[str, Any]] = None,
) -> UrgentAlert:
    """Stage an alert in the current transaction. The caller commits."""
    alert = UrgentAlert(
        type=type,
        party_id=party_id,
        enquiry_id=enquiry_id,
        severity=severity,
        message=message,
        data=data,
    )
    db.add(alert)
    db.flush()
    return alert


def get_for_enquiry(db: Session, enquiry_id: str, type: str) -> Optional[UrgentAlert]:
    return (
        db.query(UrgentAlert)
        .filter(UrgentAlert.enquiry_id == enquiry_id, UrgentAlert.type == type)
        .first()
    )
