"""FastAPI router for invitation email delivery."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, status

from core.responses import cors_json, cors_preflight
from identity import AuthenticationError, resolve_principal
from services.invitations import InvitationEmailRequest, notify_invitee
from settings import Settings, get_settings

router = APIRouter()
logger = logging.getLogger(__name__)


@router.options("/send-invitation-email")
async def send_invitation_email_preflight(settings: Settings = Depends(get_settings)):
    return cors_preflight(settings.cors)


@router.post("/send-invitation-email")
async def send_invitation_email(request: Request, settings: Settings = Depends(get_settings)):
    try:
        principal = resolve_principal(settings, request.headers.get("authorization"))
        invitation = InvitationEmailRequest.model_validate(await request.json())
        result = await notify_invitee(settings.emailjs, invitation)
    except AuthenticationError as exc:
        return cors_json(settings.cors, {"error": str(exc)}, status.HTTP_401_UNAUTHORIZED)
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        logger.exception("Error sending invitation email")
        return cors_json(
            settings.cors,
            {
                "success": False,
                "emailSent": False,
                "error": str(exc) or "Unknown error",
                "message": "Failed to send invitation email",
            },
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(
        "Invitation relay by user=%s finished with %s",
        principal.user_id,
        result.delivery.value,
    )
    return cors_json(settings.cors, result.to_payload())
