from unittest.mock import AsyncMock, patch

import pytest

from services.email_relay import EmailDelivery
from services.invitations import InvitationDelivery, InvitationEmailRequest, notify_invitee
from settings import EmailJSConfig

INVITATION = {
    "to_email": "new.member@example.com",
    "to_name": "New Member",
    "workspace_name": "Acme Launch",
    "role": "member",
    "inviter_name": "Owner",
    "accept_url": "https://app.ganty.io/invite/tok_123",
    "expires_in": "7 days",
}


@pytest.fixture
def relay():
    with patch("services.invitations.send_template_email", new_callable=AsyncMock) as send:
        send.return_value = EmailDelivery(delivered=True)
        yield send


def test_invitation_email_delivered(client, supabase_client, auth_headers, relay):
    response = client.post("/send-invitation-email", json=INVITATION, headers=auth_headers)

    assert response.status_code == 200
    assert response.json() == {
        "success": True,
        "emailSent": True,
        "message": "Invitation email sent successfully",
        "invitationLink": INVITATION["accept_url"],
    }
    config, params = relay.await_args.args
    assert config.service_id == "service_1"
    assert params == INVITATION


def test_failed_delivery_still_succeeds(client, supabase_client, auth_headers, relay):
    relay.return_value = EmailDelivery(delivered=False, error="The Public Key is invalid")

    response = client.post("/send-invitation-email", json=INVITATION, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["emailSent"] is False
    assert body["invitationLink"] == INVITATION["accept_url"]
    assert body["error"] == "The Public Key is invalid"


def test_non_text_fields_are_forwarded_as_received(client, supabase_client, auth_headers, relay):
    invitation = {**INVITATION, "expires_in": 7.5, "role": ["member"]}

    response = client.post("/send-invitation-email", json=invitation, headers=auth_headers)

    assert response.status_code == 200
    _, params = relay.await_args.args
    assert params["expires_in"] == 7.5
    assert params["role"] == ["member"]


def test_omitted_fields_are_not_forwarded(client, supabase_client, auth_headers, relay):
    invitation = {"to_email": "new.member@example.com", "accept_url": "https://app.ganty.io/invite/tok_9"}

    response = client.post("/send-invitation-email", json=invitation, headers=auth_headers)

    assert response.status_code == 200
    assert response.json()["invitationLink"] == "https://app.ganty.io/invite/tok_9"
    _, params = relay.await_args.args
    assert params == invitation


def test_missing_authorization_header(client, supabase_client, relay):
    response = client.post("/send-invitation-email", json=INVITATION)

    assert response.status_code == 401
    assert response.json() == {"error": "Missing Authorization header"}
    supabase_client.factory.assert_not_called()
    relay.assert_not_awaited()


def test_handler_failure_is_a_server_error(client, supabase_client, auth_headers, relay):
    response = client.post(
        "/send-invitation-email",
        content=b"not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )

    assert response.status_code == 500
    body = response.json()
    assert body["success"] is False
    assert body["emailSent"] is False
    assert body["message"] == "Failed to send invitation email"
    assert body["error"]
    relay.assert_not_awaited()


def test_preflight(client):
    response = client.options("/send-invitation-email")

    assert response.status_code == 200
    assert response.content == b""
    assert response.headers["access-control-allow-methods"] == "POST, OPTIONS"


class TestNotifyInvitee:
    @pytest.mark.asyncio
    async def test_unconfigured_relay_is_created_but_not_notified(self):
        with patch("services.email_relay.aiohttp.ClientSession") as session_factory:
            result = await notify_invitee(EmailJSConfig(), InvitationEmailRequest(**INVITATION))

        session_factory.assert_not_called()
        assert result.delivery is InvitationDelivery.CREATED_BUT_NOT_NOTIFIED
        assert result.invitation_link == INVITATION["accept_url"]
        assert result.to_payload()["emailSent"] is False

    @pytest.mark.asyncio
    async def test_delivered_is_created(self, relay):
        result = await notify_invitee(EmailJSConfig(), InvitationEmailRequest(**INVITATION))

        assert result.delivery is InvitationDelivery.CREATED
        assert result.email_sent
        assert "error" not in result.to_payload()
