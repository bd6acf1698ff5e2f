from datetime import date, datetime, timezone
from unittest.mock import MagicMock

from app.models.urgent_alert import UrgentAlert
from app.schemas.enquiry import HydratedEnquiry, PartyRead, UserRead
from app.services.enquiry_lifecycle.replacement import (
    ReplacementContext,
    ReplacementOrchestrator,
)

REQUESTED_AT = datetime(2026, 10, 19, 9, 30, tzinfo=timezone.utc)


def _context(enquiry_id="enq_abc123"):
    enquiry = HydratedEnquiry(
        id=enquiry_id,
        supplier_id="sup_1",
        party_id="pty_1",
        supplier_category="venue",
        status="declined",
        payment_status="paid",
        supplier_response="Double booked, sorry",
        replacement_requested=True,
        replacement_requested_at=REQUESTED_AT,
        party=PartyRead(
            id="pty_1",
            user_id="usr_1",
            child_name="Oliver",
            party_date=date(2026, 11, 14),
            user=UserRead(id="usr_1", first_name="Amy", last_name="Khan", email="amy@example.com"),
        ),
    )
    supplier = MagicMock(business_name="Hall of Fun", category="venue")
    return ReplacementContext.from_enquiry(enquiry, supplier)


def test_context_carries_everything_ops_needs():
    ctx = _context()

    assert ctx.party_name == "Oliver's party"
    assert ctx.customer_name == "Amy Khan"
    assert ctx.supplier_name == "Hall of Fun"
    assert ctx.message == (
        "🚨 URGENT: venue supplier declined deposit-paid booking for Oliver's party on 2026-11-14"
    )
    payload = ctx.to_payload()
    assert payload["party_date"] == "2026-11-14"
    assert payload["requested_at"] == REQUESTED_AT.isoformat()


def test_context_without_party():
    enquiry = HydratedEnquiry(
        id="enq_x",
        supplier_id="sup_1",
        party_id="pty_gone",
        status="declined",
        payment_status="paid",
        replacement_requested_at=REQUESTED_AT,
    )

    ctx = ReplacementContext.from_enquiry(enquiry)

    assert ctx.party_name == "party pty_gone"
    assert ctx.customer_email is None
    assert "an unknown date" in ctx.message


def test_failing_chat_channel_does_not_block_email():
    notifier = MagicMock()
    notifier.send_chat_alert.side_effect = RuntimeError("webhook 500")
    notifier.send_email_alert.return_value = True

    results = ReplacementOrchestrator(notifier).notify(_context())

    assert results == {"chat": False, "email": True}
    notifier.send_email_alert.assert_called_once()


def test_failing_email_channel_does_not_block_chat():
    notifier = MagicMock()
    notifier.send_chat_alert.return_value = True
    notifier.send_email_alert.side_effect = RuntimeError("resend 429")

    results = ReplacementOrchestrator(notifier).notify(_context())

    assert results == {"chat": True, "email": False}


def test_record_alert_is_idempotent(db):
    orchestrator = ReplacementOrchestrator(MagicMock())
    ctx = _context()

    first = orchestrator.record_alert(db, ctx)
    db.commit()
    second = orchestrator.record_alert(db, ctx)

    assert first.id == second.id
    assert db.query(UrgentAlert).count() == 1


def test_raise_replacement_alert_commits_before_notifying(db):
    notifier = MagicMock()
    committed = []
    notifier.send_chat_alert.side_effect = lambda payload: committed.append(
        db.query(UrgentAlert).count()
    )

    alert_id = ReplacementOrchestrator(notifier).raise_replacement_alert(db, _context())

    assert committed == [1]
    alert = db.get(UrgentAlert, alert_id)
    assert alert.severity == "critical"
    assert alert.data["enquiry_id"] == "enq_abc123"
