# app/services/enquiry_lifecycle/reconciler.py
"""
Attaches parties, and the users who own them, to enquiries without a
database join.

A hydration costs at most three reads whatever the batch size: the enquiries,
one batch of parties, one batch of users. Related rows that are missing or
could not be fetched in time come back as None. Only the primary enquiry read
is allowed to fail the call. Reads here never write, so re-running them on
every change notification is safe.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Sequence, Set

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.crud import crud_enquiry, crud_party, crud_user
from app.schemas.enquiry import HydratedEnquiry, PartyRead, UserRead

logger = logging.getLogger(__name__)


@dataclass
class HydrationResult:
    enquiries: List[HydratedEnquiry] = field(default_factory=list)
    unresolved_party_ids: Set[str] = field(default_factory=set)
    unresolved_user_ids: Set[str] = field(default_factory=set)

    @property
    def complete(self) -> bool:
        return not self.unresolved_party_ids and not self.unresolved_user_ids


def _distinct(values: Iterable[Optional[str]]) -> List[str]:
    """Non-null values, first occurrence order."""
    return list(dict.fromkeys(v for v in values if v))


class EnquiryReconciler:
    """Batch hydration of enquiries with their party and customer."""

    def __init__(self, query_timeout_ms: Optional[int] = None):
        self.query_timeout_ms = query_timeout_ms

    def list_for_suppliers(
        self,
        db: Session,
        supplier_ids: Sequence[str],
        status_filter: Optional[str] = None,
    ) -> List[HydratedEnquiry]:
        """Paid enquiries for the given suppliers, newest first, hydrated."""
        if not supplier_ids:
            return []

        # Failure here is the one hard error of a hydrated read
        enquiries = crud_enquiry.read_enquiries(db, supplier_ids, status_filter)
        return self.hydrate(db, enquiries)

    def hydrate(self, db: Session, enquiries: Sequence) -> List[HydratedEnquiry]:
        return self.hydrate_with_report(db, enquiries).enquiries

    def hydrate_with_report(self, db: Session, enquiries: Sequence) -> HydrationResult:
        result = HydrationResult()
        if not enquiries:
            return result

        party_ids = _distinct(e.party_id for e in enquiries)
        parties = self._fetch(db, crud_party.read_parties, party_ids, "parties")
        parties_map = {p.id: p for p in parties}

        user_ids = _distinct(p.user_id for p in parties)
        users = self._fetch(db, crud_user.read_users, user_ids, "users")
        users_map = {u.id: u for u in users}

        result.unresolved_party_ids = set(party_ids) - set(parties_map)
        result.unresolved_user_ids = set(user_ids) - set(users_map)
        if result.unresolved_party_ids:
            logger.warning(
                f"Hydration left {len(result.unresolved_party_ids)} parties unresolved: "
                f"{sorted(result.unresolved_party_ids)}"
            )
        if result.unresolved_user_ids:
            logger.warning(
                f"Hydration left {len(result.unresolved_user_ids)} users unresolved: "
                f"{sorted(result.unresolved_user_ids)}"
            )

        for enquiry in enquiries:
            hydrated = HydratedEnquiry.model_validate(enquiry)
            party = parties_map.get(enquiry.party_id)
            if party is not None:
                party_out = PartyRead.model_validate(party)
                user = users_map.get(party.user_id)
                party_out.user = UserRead.model_validate(user) if user else None
                hydrated.party = party_out
            result.enquiries.append(hydrated)

        return result

    def _fetch(
        self,
        db: Session,
        reader: Callable[..., list],
        ids: List[str],
        label: str,
    ) -> list:
        """Run one batch read; a failure or timeout yields an empty batch."""
        if not ids:
            return []
        try:
            return reader(db, ids, timeout_ms=self.query_timeout_ms)
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch {len(ids)} {label} for hydration: {e}")
            return []
