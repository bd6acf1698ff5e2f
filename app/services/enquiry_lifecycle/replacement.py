# app/services/enquiry_lifecycle/replacement.py
"""
Replacement workflow for paid bookings a supplier has declined.

The UrgentAlert row is the durable source of truth: it is written in the
same transaction as the decline. Chat and email fan-out happen afterwards and
are best-effort; one failing channel never affects another or the alert.
"""
import logging
from dataclasses import asdict, dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional

from sqlalchemy.orm import Session

from app.crud import crud_urgent_alert
from app.models.urgent_alert import UrgentAlert
from app.schemas.enquiry import HydratedEnquiry

logger = logging.getLogger(__name__)

ALERT_TYPE_SUPPLIER_DECLINE = "supplier_decline"
SEVERITY_CRITICAL = "critical"


@dataclass(frozen=True)
class ReplacementContext:
    """Everything an operator needs to find a replacement without re-querying."""
    enquiry_id: str
    party_id: str
    supplier_id: str
    supplier_category: Optional[str]
    supplier_name: Optional[str]
    supplier_response: Optional[str]
    party_name: str
    party_date: Optional[date]
    customer_name: Optional[str]
    customer_email: Optional[str]
    requested_at: datetime

    @classmethod
    def from_enquiry(cls, enquiry: HydratedEnquiry, supplier=None) -> "ReplacementContext":
        party = enquiry.party
        user = party.user if party is not None else None

        if party is not None and party.child_name:
            party_name = f"{party.child_name}'s party"
        else:
            party_name = f"party {enquiry.party_id}"

        customer_name = None
        if user is not None:
            customer_name = " ".join(n for n in (user.first_name, user.last_name) if n) or None

        return cls(
            enquiry_id=enquiry.id,
            party_id=enquiry.party_id,
            supplier_id=enquiry.supplier_id,
            supplier_category=enquiry.supplier_category or getattr(supplier, "category", None),
            supplier_name=getattr(supplier, "business_name", None),
            supplier_response=enquiry.supplier_response,
            party_name=party_name,
            party_date=party.party_date if party is not None else None,
            customer_name=customer_name,
            customer_email=user.email if user is not None else None,
            requested_at=enquiry.replacement_requested_at or enquiry.updated_at,
        )

    @property
    def message(self) -> str:
        return (
            f"🚨 URGENT: {self.supplier_category or 'Unknown'} supplier declined deposit-paid "
            f"booking for {self.party_name} on {self.party_date or 'an unknown date'}"
        )

    def to_payload(self) -> Dict[str, Any]:
        payload = asdict(self)
        payload["party_date"] = self.party_date.isoformat() if self.party_date else None
        payload["requested_at"] = self.requested_at.isoformat() if self.requested_at else None
        return payload


class ReplacementOrchestrator:
    def __init__(self, notifier):
        self.notifier = notifier

    def record_alert(self, db: Session, context: ReplacementContext) -> UrgentAlert:
        """
        Stage the critical alert in the caller's transaction.
        An existing alert for the enquiry is returned instead of a duplicate.
        """
        existing = crud_urgent_alert.get_for_enquiry(
            db, context.enquiry_id, ALERT_TYPE_SUPPLIER_DECLINE
        )
        if existing:
            logger.warning(
                f"Replacement alert already exists for enquiry {context.enquiry_id}: {existing.id}"
            )
            return existing

        alert = crud_urgent_alert.insert_alert(
            db,
            type=ALERT_TYPE_SUPPLIER_DECLINE,
            party_id=context.party_id,
            enquiry_id=context.enquiry_id,
            severity=SEVERITY_CRITICAL,
            message=context.message,
            data=context.to_payload(),
        )
        logger.info(f"Recorded critical replacement alert {alert.id} for enquiry {context.enquiry_id}")
        return alert

    def notify(self, context: ReplacementContext) -> Dict[str, bool]:
        """Fan out to every channel. Never raises."""
        payload = context.to_payload()
        results = {}
        channels = (
            ("chat", self.notifier.send_chat_alert),
            ("email", self.notifier.send_email_alert),
        )
        for name, send in channels:
            try:
                results[name] = bool(send(payload))
            except Exception as e:
                logger.error(
                    f"Replacement {name} notification failed for enquiry {context.enquiry_id}: {e}",
                    exc_info=True,
                )
                results[name] = False
        return results

    def raise_replacement_alert(self, db: Session, context: ReplacementContext) -> str:
        """Persist the alert (committed before returning), then notify. Returns the alert id."""
        alert_id = self.record_alert(db, context).id
        db.commit()
        self.notify(context)
        return alert_id
