# app/services/enquiry_events.py
"""
Change events for enquiries, published on Redis pub/sub.

Dashboards subscribe to `enquiries:{supplier_id}` and re-run the hydrated
list when something arrives. The publisher is created once at application
startup and handed to the services that need it.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from redis.exceptions import RedisError

logger = logging.getLogger(__name__)

ENQUIRY_UPDATED = "enquiry.updated"
ENQUIRY_VIEWED = "enquiry.viewed"


def channel_for_supplier(supplier_id: str) -> str:
    return f"enquiries:{supplier_id}"


class EnquiryEventPublisher:
    def __init__(self, redis_client):
        self.redis_client = redis_client

    def publish(
        self,
        event_type: str,
        enquiry,
        extra: Optional[Dict[str, Any]] = None,
    ) -> bool:
        """Best-effort publish; returns False if Redis is unavailable."""
        payload = {
            "type": event_type,
            "enquiry_id": enquiry.id,
            "supplier_id": enquiry.supplier_id,
            "party_id": enquiry.party_id,
            "status": enquiry.status,
            "payment_status": enquiry.payment_status,
            "auto_accepted": enquiry.auto_accepted,
            "replacement_requested": enquiry.replacement_requested,
            "published_at": datetime.now(timezone.utc).isoformat(),
        }
        if extra:
            payload.update(extra)

        try:
            self.redis_client.publish(
                channel_for_supplier(enquiry.supplier_id), json.dumps(payload, default=str)
            )
            return True
        except RedisError as e:
            logger.error(f"Failed to publish {event_type} for enquiry {enquiry.id}: {e}", exc_info=True)
            return False
