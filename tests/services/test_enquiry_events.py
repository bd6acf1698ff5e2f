import json
from unittest.mock import MagicMock

from redis.exceptions import ConnectionError as RedisConnectionError

from app.services.enquiry_events import (
    ENQUIRY_UPDATED,
    EnquiryEventPublisher,
    channel_for_supplier,
)


def _enquiry():
    return MagicMock(
        id="enq_1",
        supplier_id="sup_9",
        party_id="pty_1",
        status="declined",
        payment_status="paid",
        auto_accepted=False,
        replacement_requested=True,
    )


def test_publishes_on_supplier_channel():
    redis_client = MagicMock()

    assert EnquiryEventPublisher(redis_client).publish(ENQUIRY_UPDATED, _enquiry()) is True

    channel, raw = redis_client.publish.call_args[0]
    assert channel == channel_for_supplier("sup_9") == "enquiries:sup_9"
    payload = json.loads(raw)
    assert payload["type"] == "enquiry.updated"
    assert payload["status"] == "declined"
    assert payload["replacement_requested"] is True


def test_redis_outage_is_swallowed():
    redis_client = MagicMock()
    redis_client.publish.side_effect = RedisConnectionError("connection refused")

    assert EnquiryEventPublisher(redis_client).publish(ENQUIRY_UPDATED, _enquiry()) is False
