"""Resend email adapter for production dispatch."""

import resend

from checkout.notifier.email_port import EmailPort
from checkout.utils.logging import get_logger

logger = get_logger(__name__)


class ResendEmailAdapter(EmailPort):
    def __init__(self, api_key: str, sender: str = "ShopCore <noreply@shopcore.local>"):
        self.api_key = api_key
        self.sender = sender

    def _payload(self, to, subject, body, html_body) -> dict:
        payload = {
            "from": self.sender,
            "to": [to],
            "subject": subject,
            "text": body,
        }
        if html_body:
            payload["html"] = html_body
        return payload

    def send(
        self,
        to: str,
        subject: str,
        body: str,
        html_body: str | None = None,
    ) -> dict:
        resend.api_key = self.api_key
        try:
            response = resend.Emails.send(self._payload(to, subject, body, html_body))
        except Exception as exc:
            logger.error("resend_send_failed", to=to, error=str(exc))
            return {"message_id": None, "status": "failed", "error": str(exc)}

        message_id = response.get("id") if isinstance(response, dict) else None
        if not message_id:
            logger.error("resend_send_rejected", to=to, response=str(response))
            return {"message_id": None, "status": "failed", "error": str(response)}

        return {"message_id": message_id, "status": "sent"}
