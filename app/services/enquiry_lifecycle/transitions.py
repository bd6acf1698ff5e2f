# app/services/enquiry_lifecycle/transitions.py
"""
Pure state machine for enquiries.

Every function here takes a snapshot of the prior state and returns what
should change (a patch plus the side effects to run). Nothing in this module
touches the database or the network; `EnquiryService` executes the plans.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional, Set, Tuple

from app.schemas.enquiry import EnquiryStatus, PaymentStatus, ResponseDecision
from app.services.enquiry_lifecycle.errors import (
    InvalidDecisionError,
    InvalidTransitionError,
)

logger = logging.getLogger(__name__)

# Valid state transitions for Enquiry
VALID_ENQUIRY_TRANSITIONS: Dict[EnquiryStatus, Set[EnquiryStatus]] = {
    EnquiryStatus.PENDING: {
        EnquiryStatus.VIEWED,
        EnquiryStatus.ACCEPTED,
        EnquiryStatus.DECLINED,
        EnquiryStatus.EXPIRED,
    },
    EnquiryStatus.VIEWED: {
        EnquiryStatus.ACCEPTED,
        EnquiryStatus.DECLINED,
        EnquiryStatus.EXPIRED,
    },
    EnquiryStatus.ACCEPTED: set(),  # Terminal once the supplier has confirmed
    EnquiryStatus.DECLINED: set(),  # Terminal
    EnquiryStatus.EXPIRED: set(),  # Terminal
}

# A paid booking the system accepted at deposit time still awaits the supplier.
PROVISIONAL_TRANSITIONS = {EnquiryStatus.ACCEPTED, EnquiryStatus.DECLINED}

EXPIRABLE_STATUSES = tuple(
    s.value for s, targets in VALID_ENQUIRY_TRANSITIONS.items()
    if EnquiryStatus.EXPIRED in targets
)

DEFAULT_RESPONSES = {
    ResponseDecision.ACCEPTED: "Thank you for your enquiry! I can provide this service for your party.",
    ResponseDecision.DECLINED: "Thank you for your enquiry. Unfortunately, I am not available for this date.",
}


class EffectType(str, Enum):
    RAISE_REPLACEMENT_ALERT = "raise_replacement_alert"
    RECORD_SUPPLIER_RESPONSE = "record_supplier_response"
    PUBLISH_CHANGE = "publish_change"


def parse_status(value) -> EnquiryStatus:
    try:
        return EnquiryStatus(value)
    except ValueError:
        raise ValueError(f"Unknown enquiry status: {value!r}")


def parse_payment_status(value) -> PaymentStatus:
    try:
        return PaymentStatus(value)
    except ValueError:
        raise ValueError(f"Unknown payment status: {value!r}")


def parse_decision(value) -> ResponseDecision:
    """Reject anything that is not exactly 'accepted' or 'declined'."""
    if isinstance(value, ResponseDecision):
        return value
    try:
        return ResponseDecision(value)
    except ValueError:
        raise InvalidDecisionError(value)


@dataclass(frozen=True)
class EnquirySnapshot:
    """The fields of an enquiry the state machine decides on, read once."""
    id: str
    status: EnquiryStatus
    payment_status: PaymentStatus
    auto_accepted: bool
    replacement_requested: bool
    version: int

    @classmethod
    def from_record(cls, enquiry) -> "EnquirySnapshot":
        return cls(
            id=enquiry.id,
            status=parse_status(enquiry.status),
            payment_status=parse_payment_status(enquiry.payment_status),
            auto_accepted=bool(enquiry.auto_accepted),
            replacement_requested=bool(enquiry.replacement_requested),
            version=enquiry.version,
        )

    @property
    def is_provisional(self) -> bool:
        """Paid and auto-accepted: the customer already believes it's booked."""
        return self.payment_status is PaymentStatus.PAID and self.auto_accepted


@dataclass(frozen=True)
class TransitionPlan:
    patch: Dict[str, Any] = field(default_factory=dict)
    effects: Tuple[EffectType, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.patch)

    def has_effect(self, effect: EffectType) -> bool:
        return effect in self.effects


def allowed_targets(prior: EnquirySnapshot) -> Set[EnquiryStatus]:
    targets = set(VALID_ENQUIRY_TRANSITIONS[prior.status])
    if prior.status is EnquiryStatus.ACCEPTED and prior.is_provisional:
        targets |= PROVISIONAL_TRANSITIONS
    return targets


def validate_transition(prior: EnquirySnapshot, new_status: EnquiryStatus) -> bool:
    """
    Validate that a status transition is allowed.
    Returns True if valid, False otherwise.
    """
    if new_status not in allowed_targets(prior):
        logger.warning(
            f"Invalid transition for enquiry {prior.id}: {prior.status.value} → {new_status.value}"
        )
        return False
    return True


def plan_view(prior: EnquirySnapshot, now: datetime) -> TransitionPlan:
    """Opening an enquiry marks it viewed, but only from 'pending'."""
    if prior.status is not EnquiryStatus.PENDING:
        return TransitionPlan()
    return TransitionPlan(
        patch={"status": EnquiryStatus.VIEWED.value, "updated_at": now},
        effects=(EffectType.PUBLISH_CHANGE,),
    )


def plan_response(
    prior: EnquirySnapshot,
    decision,
    *,
    now: datetime,
    final_price: Optional[Decimal] = None,
    message: Optional[str] = None,
    default_message: Optional[str] = None,
) -> TransitionPlan:
    """
    Work out the update for a supplier accepting or declining an enquiry.

    Repeating the decision the enquiry already holds returns an empty plan,
    so a second decline can never raise a second replacement alert. The one
    exception is a provisional (paid + auto-accepted) acceptance, which the
    supplier confirms by accepting again.
    """
    decision = parse_decision(decision)
    target = EnquiryStatus(decision.value)

    if prior.status is target and not (
        target is EnquiryStatus.ACCEPTED and prior.is_provisional
    ):
        logger.info(f"Enquiry {prior.id} already {target.value}; nothing to do")
        return TransitionPlan()

    if not validate_transition(prior, target):
        raise InvalidTransitionError(prior.id, prior.status.value, target.value)

    text = message.strip() if message and message.strip() else None
    patch: Dict[str, Any] = {
        "status": target.value,
        "supplier_response": text or default_message or DEFAULT_RESPONSES[decision],
        "supplier_response_date": now,
        "updated_at": now,
    }
    effects = [EffectType.RECORD_SUPPLIER_RESPONSE, EffectType.PUBLISH_CHANGE]

    if decision is ResponseDecision.ACCEPTED and final_price is not None:
        patch["final_price"] = final_price

    if prior.is_provisional:
        if decision is ResponseDecision.ACCEPTED:
            # Supplier has now confirmed what the system accepted at deposit time
            patch["auto_accepted"] = False
        elif decision is ResponseDecision.DECLINED and not prior.replacement_requested:
            patch["replacement_requested"] = True
            patch["replacement_requested_at"] = now
            effects.insert(0, EffectType.RAISE_REPLACEMENT_ALERT)

    return TransitionPlan(patch=patch, effects=tuple(effects))
