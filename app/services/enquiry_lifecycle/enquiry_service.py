# app/services/enquiry_lifecycle/enquiry_service.py
"""
Enquiry Lifecycle Service

Handles business logic for:
- Listing a supplier's paid enquiries with party and customer attached
- Enquiry detail (first open marks it viewed)
- Supplier accept/decline, including the paid-booking replacement workflow
- Dashboard status counts
- Expiring stale enquiries (driven by an external scheduler)

State decisions come from `transitions`; this class applies them.
"""

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, List, Optional, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud import crud_enquiry, crud_supplier, crud_supplier_response
from app.models.enquiry import Enquiry
from app.schemas.enquiry import EnquiryStats, HydratedEnquiry, ResponseDecision
from app.services.enquiry_events import ENQUIRY_UPDATED, ENQUIRY_VIEWED, EnquiryEventPublisher
from app.services.enquiry_lifecycle import response_templates, stats
from app.services.enquiry_lifecycle.errors import (
    ConcurrentUpdateError,
    EnquiryNotFoundError,
    SupplierAccessDeniedError,
    SupplierProfileNotFoundError,
)
from app.services.enquiry_lifecycle.reconciler import EnquiryReconciler
from app.services.enquiry_lifecycle.replacement import (
    ReplacementContext,
    ReplacementOrchestrator,
)
from app.services.enquiry_lifecycle.transitions import (
    EXPIRABLE_STATUSES,
    EffectType,
    EnquirySnapshot,
    parse_decision,
    parse_status,
    plan_response,
    plan_view,
)

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EnquiryService:
    """Supplier-facing enquiry operations."""

    def __init__(
        self,
        *,
        reconciler: EnquiryReconciler,
        orchestrator: ReplacementOrchestrator,
        publisher: Optional[EnquiryEventPublisher] = None,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.reconciler = reconciler
        self.orchestrator = orchestrator
        self.publisher = publisher
        self.clock = clock

    # ========================================
    # Supplier resolution
    # ========================================

    def resolve_supplier_ids(
        self,
        db: Session,
        auth_user_id: str,
        business_id: Optional[str] = None,
    ) -> List[str]:
        """The caller's businesses, or just `business_id` if it is one of them."""
        suppliers = crud_supplier.get_by_auth_user(db, auth_user_id)
        if not suppliers:
            raise SupplierProfileNotFoundError(auth_user_id)

        supplier_ids = [s.id for s in suppliers]
        if business_id:
            if business_id not in supplier_ids:
                raise SupplierAccessDeniedError(business_id)
            return [business_id]
        return supplier_ids

    # ========================================
    # Reads
    # ========================================

    def list_enquiries(
        self,
        db: Session,
        supplier_ids: Sequence[str],
        status_filter: Optional[str] = None,
    ) -> List[HydratedEnquiry]:
        """Paid enquiries only, newest first, hydrated."""
        status = parse_status(status_filter).value if status_filter else None
        return self.reconciler.list_for_suppliers(db, supplier_ids, status)

    def get_enquiry_detail(
        self,
        db: Session,
        enquiry_id: str,
        supplier_ids: Optional[Sequence[str]] = None,
    ) -> HydratedEnquiry:
        """Hydrated enquiry. Side effect: pending → viewed."""
        enquiry = self._get_owned(db, enquiry_id, supplier_ids)
        enquiry = self._mark_viewed(db, enquiry)
        return self.reconciler.hydrate(db, [enquiry])[0]

    def get_stats(self, db: Session, supplier_ids: Sequence[str]) -> EnquiryStats:
        return stats.get_stats(db, supplier_ids)

    # ========================================
    # Transitions
    # ========================================

    def mark_viewed(self, db: Session, enquiry_id: str) -> Enquiry:
        enquiry = self._get_owned(db, enquiry_id, None)
        return self._mark_viewed(db, enquiry)

    def respond_to_enquiry(
        self,
        db: Session,
        enquiry_id: str,
        decision,
        final_price: Optional[Decimal] = None,
        message: Optional[str] = None,
        supplier_ids: Optional[Sequence[str]] = None,
    ) -> Enquiry:
        """
        Accept or decline an enquiry.

        Declining a paid, auto-accepted booking flags it for replacement and
        records a critical alert in the same transaction. Notifications,
        the supplier-response log and the change event follow the commit and
        never fail the call.
        """
        decision = parse_decision(decision)
        enquiry = self._get_owned(db, enquiry_id, supplier_ids)
        prior = EnquirySnapshot.from_record(enquiry)

        hydrated = self.reconciler.hydrate(db, [enquiry])[0]
        supplier = crud_supplier.get(db, enquiry.supplier_id)

        default_message = None
        if not (message and message.strip()):
            default_message = response_templates.resolve_default_message(
                db,
                supplier_id=enquiry.supplier_id,
                supplier_category=enquiry.supplier_category or getattr(supplier, "category", None),
                decision=decision,
                context=response_templates.build_context(hydrated, final_price),
            )

        plan = plan_response(
            prior,
            decision,
            now=self.clock(),
            final_price=final_price,
            message=message,
            default_message=default_message,
        )
        if not plan.changed:
            return enquiry

        replacement = None
        try:
            updated = crud_enquiry.update_enquiry(
                db, enquiry.id, expected_version=prior.version, patch=plan.patch
            )
            if updated is None:
                db.rollback()
                raise ConcurrentUpdateError(enquiry.id, prior.version)

            if plan.has_effect(EffectType.RAISE_REPLACEMENT_ALERT):
                replacement = ReplacementContext.from_enquiry(
                    hydrated.model_copy(update=plan.patch), supplier
                )
                self.orchestrator.record_alert(db, replacement)

            db.commit()
        except SQLAlchemyError:
            db.rollback()
            raise

        logger.info(
            f"Enquiry {enquiry.id} {prior.status.value} → {decision.value}"
            + (" (replacement requested)" if replacement else "")
        )

        if replacement is not None:
            self.orchestrator.notify(replacement)
        if plan.has_effect(EffectType.RECORD_SUPPLIER_RESPONSE):
            self._record_supplier_response(db, updated, hydrated, decision)
        if plan.has_effect(EffectType.PUBLISH_CHANGE):
            self._publish(ENQUIRY_UPDATED, updated)

        return updated

    def mark_expired(self, db: Session, cutoff: datetime) -> int:
        """Expire open enquiries created before `cutoff` and publish each change. Returns count."""
        expired = crud_enquiry.expire_before(
            db, cutoff=cutoff, now=self.clock(), statuses=EXPIRABLE_STATUSES
        )
        logger.info(f"Expired {len(expired)} enquiries created before {cutoff.isoformat()}")
        for enquiry in expired:
            self._publish(ENQUIRY_UPDATED, enquiry)
        return len(expired)

    # ========================================
    # Helpers
    # ========================================

    def _get_owned(
        self,
        db: Session,
        enquiry_id: str,
        supplier_ids: Optional[Sequence[str]],
    ) -> Enquiry:
        enquiry = crud_enquiry.get(db, enquiry_id)
        if enquiry is None:
            raise EnquiryNotFoundError(enquiry_id)
        if supplier_ids is not None and enquiry.supplier_id not in supplier_ids:
            # Other suppliers' enquiries are indistinguishable from missing ones
            raise EnquiryNotFoundError(enquiry_id)
        return enquiry

    def _mark_viewed(self, db: Session, enquiry: Enquiry) -> Enquiry:
        plan = plan_view(EnquirySnapshot.from_record(enquiry), self.clock())
        if not plan.changed:
            return enquiry

        updated = crud_enquiry.update_enquiry(
            db, enquiry.id, expected_version=enquiry.version, patch=plan.patch
        )
        if updated is None:
            # Another request moved it on first; show the current row
            db.rollback()
            logger.info(f"Enquiry {enquiry.id} changed while marking viewed; reloading")
            return crud_enquiry.get(db, enquiry.id)

        db.commit()
        logger.info(f"Enquiry {enquiry.id} marked viewed")
        self._publish(ENQUIRY_VIEWED, updated)
        return updated

    def _record_supplier_response(
        self,
        db: Session,
        enquiry: Enquiry,
        hydrated: HydratedEnquiry,
        decision: ResponseDecision,
    ) -> None:
        try:
            crud_supplier_response.create(
                db,
                enquiry_id=enquiry.id,
                party_id=enquiry.party_id,
                supplier_id=enquiry.supplier_id,
                customer_id=hydrated.party.user_id if hydrated.party else None,
                response_type=decision.value,
                response_message=enquiry.supplier_response,
                final_price=enquiry.final_price if decision is ResponseDecision.ACCEPTED else None,
            )
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"Failed to record supplier response for enquiry {enquiry.id}: {e}")

    def _publish(self, event_type: str, enquiry: Enquiry) -> None:
        if self.publisher is not None:
            self.publisher.publish(event_type, enquiry)
