"""Invitation email notification.

The invitation record is created upstream before this service runs, so a
failed delivery downgrades the result instead of failing the invitation.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import BaseModel

from services.email_relay import send_template_email
from settings import EmailJSConfig

logger = logging.getLogger(__name__)


class InvitationEmailRequest(BaseModel):
    """Template fields, forwarded as received; fields the caller omits stay omitted."""

    to_email: Any = None
    to_name: Any = None
    workspace_name: Any = None
    role: Any = None
    inviter_name: Any = None
    accept_url: Any = None
    expires_in: Any = None


class InvitationDelivery(str, enum.Enum):
    CREATED = "created"
    CREATED_BUT_NOT_NOTIFIED = "created_but_not_notified"


@dataclass(frozen=True)
class InvitationResult:
    delivery: InvitationDelivery
    invitation_link: Optional[str]
    error: Optional[str] = None

    @property
    def email_sent(self) -> bool:
        return self.delivery is InvitationDelivery.CREATED

    def to_payload(self) -> Dict[str, Any]:
        if self.email_sent:
            return {
                "success": True,
                "emailSent": True,
                "message": "Invitation email sent successfully",
                "invitationLink": self.invitation_link,
            }
        return {
            "success": True,
            "emailSent": False,
            "message": "Invitation created but email sending failed",
            "invitationLink": self.invitation_link,
            "error": self.error,
        }


async def notify_invitee(config: EmailJSConfig, invitation: InvitationEmailRequest) -> InvitationResult:
    """Relay the invitation fields to the email template."""

    logger.info("Sending invitation email to %s", invitation.to_email)
    delivery = await send_template_email(config, invitation.model_dump(exclude_unset=True))

    if delivery.delivered:
        logger.info("Invitation email sent to %s", invitation.to_email)
        return InvitationResult(InvitationDelivery.CREATED, invitation.accept_url)

    logger.warning(
        "Invitation for %s created but email was not delivered: %s",
        invitation.to_email,
        delivery.error,
    )
    return InvitationResult(
        InvitationDelivery.CREATED_BUT_NOT_NOTIFIED,
        invitation.accept_url,
        error=delivery.error,
    )
