# app/crud/crud_party.py
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from app.db.session import statement_timeout
from app.models.party import Party


def read_parties(
    db: Session, party_ids: Iterable[str], *, timeout_ms: Optional[int] = None
) -> List[Party]:
    """Batch fetch parties by id in a single query."""
    ids = list(party_ids)
    if not ids:
        return []
    with statement_timeout(db, timeout_ms):
        return db.query(Party).filter(Party.id.in_(ids)).all()
