# app/services/enquiry_lifecycle/stats.py
"""Per-status enquiry counts for the supplier dashboard badges."""
import logging
from typing import Sequence

from sqlalchemy.orm import Session

from app.crud import crud_enquiry
from app.schemas.enquiry import EnquiryStats, EnquiryStatus

logger = logging.getLogger(__name__)


def get_stats(db: Session, supplier_ids: Sequence[str]) -> EnquiryStats:
    """
    Count every enquiry (paid or not) for the suppliers, straight from the
    database on each call. No suppliers or no enquiries gives all zeros.
    """
    if not supplier_ids:
        return EnquiryStats()

    counts = crud_enquiry.count_by_status(db, supplier_ids)

    stats = EnquiryStats(total=sum(counts.values()))
    for status in EnquiryStatus:
        setattr(stats, status.value, counts.get(status.value, 0))

    unknown = set(counts) - {s.value for s in EnquiryStatus}
    if unknown:
        logger.warning(f"Enquiries with unknown statuses counted in total only: {sorted(unknown)}")

    return stats
