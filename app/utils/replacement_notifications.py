# app/utils/replacement_notifications.py
"""
Ops notifications for the supplier-replacement workflow.

Two channels: Slack (incoming webhook, via httpx) and email (Resend).
A channel without configuration is skipped. Delivery errors are raised to
the caller, which isolates each channel.
"""
import logging
from typing import Any, Dict, Optional

import httpx
import resend

from app.core.config import settings

logger = logging.getLogger(__name__)


def build_slack_message(payload: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "text": "🚨 CRITICAL: Supplier Declined Deposit-Paid Booking",
        "blocks": [
            {
                "type": "section",
                "text": {
                    "type": "mrkdwn",
                    "text": (
                        "*URGENT REPLACEMENT NEEDED*\n\n"
                        f"*Party:* {payload.get('party_name')}\n"
                        f"*Date:* {payload.get('party_date') or 'unknown'}\n"
                        f"*Category:* {payload.get('supplier_category') or 'unknown'}\n"
                        f"*Supplier:* {payload.get('supplier_name') or payload.get('supplier_id')}\n"
                        f"*Customer:* {payload.get('customer_name') or 'unknown'} "
                        f"({payload.get('customer_email') or 'no email'})\n\n"
                        f"*Supplier said:* \"{payload.get('supplier_response')}\"\n\n"
                        "*Action needed:* Find replacement supplier ASAP!"
                    ),
                },
            }
        ],
    }


def build_email(payload: Dict[str, Any], frontend_url: str) -> Dict[str, str]:
    subject = (
        f"URGENT: {payload.get('supplier_category') or 'Supplier'} declined paid booking "
        f"for {payload.get('party_name')}"
    )
    lines = [
        f"Party: {payload.get('party_name')}",
        f"Date: {payload.get('party_date') or 'unknown'}",
        f"Category: {payload.get('supplier_category') or 'unknown'}",
        f"Supplier: {payload.get('supplier_name') or payload.get('supplier_id')}",
        f"Customer: {payload.get('customer_name') or 'unknown'} ({payload.get('customer_email') or 'no email'})",
        f"Supplier said: {payload.get('supplier_response')}",
        f"Enquiry: {frontend_url}/admin/enquiries/{payload.get('enquiry_id')}",
    ]
    text = "\n".join(lines)
    html = "<h2>Urgent replacement needed</h2>" + "".join(f"<p>{line}</p>" for line in lines)
    return {"subject": subject, "text": text, "html": html}


class ReplacementNotifier:
    """Sends the replacement alert to the ops chat channel and mailbox."""

    def __init__(
        self,
        *,
        slack_webhook_url: Optional[str] = None,
        resend_api_key: Optional[str] = None,
        from_domain: str = "partysnap.co.uk",
        ops_email: Optional[str] = None,
        timeout: float = 5.0,
        frontend_url: str = "http://localhost:3000",
    ):
        self.slack_webhook_url = slack_webhook_url
        self.resend_api_key = resend_api_key
        self.from_domain = from_domain
        self.ops_email = ops_email
        self.timeout = timeout
        self.frontend_url = frontend_url

    @classmethod
    def from_settings(cls) -> "ReplacementNotifier":
        return cls(
            slack_webhook_url=settings.SLACK_WEBHOOK_URL,
            resend_api_key=settings.RESEND_API_KEY,
            from_domain=settings.RESEND_FROM_DOMAIN,
            ops_email=settings.OPS_ALERT_EMAIL,
            timeout=settings.NOTIFICATION_TIMEOUT_SECONDS,
            frontend_url=settings.FRONTEND_URL,
        )

    def send_chat_alert(self, payload: Dict[str, Any]) -> bool:
        if not self.slack_webhook_url:
            logger.debug("Skipping Slack alert: SLACK_WEBHOOK_URL not configured")
            return False

        with httpx.Client(timeout=self.timeout) as client:
            response = client.post(self.slack_webhook_url, json=build_slack_message(payload))
            response.raise_for_status()

        logger.info(f"Sent Slack replacement alert for enquiry {payload.get('enquiry_id')}")
        return True

    def send_email_alert(self, payload: Dict[str, Any]) -> bool:
        if not self.resend_api_key or not self.ops_email:
            logger.debug("Skipping email alert: RESEND_API_KEY or OPS_ALERT_EMAIL not configured")
            return False

        resend.api_key = self.resend_api_key
        email = build_email(payload, self.frontend_url)
        resend.Emails.send({
            "from": f"PartySnap Alerts <alerts@{self.from_domain}>",
            "to": [self.ops_email],
            "subject": email["subject"],
            "html": email["html"],
            "text": email["text"],
        })
        logger.info(f"Sent email replacement alert to {self.ops_email}: {email['subject']}")
        return True
