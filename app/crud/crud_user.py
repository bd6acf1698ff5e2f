# app/crud/crud_user.py
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from app.db.session import statement_timeout
from app.models.user import User


def read_users(
    db: Session, user_ids: Iterable[str], *, timeout_ms: Optional[int] = None
) -> List[User]:
    """Batch fetch users by id in a single query."""
    ids = list(user_ids)
    if not ids:
        return []
    with statement_timeout(db, timeout_ms):
        return db.query(User).filter(User.id.in_(ids)).all()
