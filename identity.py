"""
Supabase Auth gateway.

Wraps Supabase Auth so request handlers never call it directly: resolving the
caller behind an ``Authorization`` header, password sign-in and sign-up, and
the Google OAuth redirect.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from supabase import AuthError, Client, ClientOptions, create_client

from settings import Settings

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """Raised when a request carries no usable credential."""


@dataclass(frozen=True)
class Principal:
    user_id: str
    email: str


def _bearer_token(authorization: str) -> str:
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() == "bearer" and token.strip():
        return token.strip()
    return authorization.strip()


def get_supabase_client(settings: Settings, authorization: Optional[str] = None) -> Client:
    """
    Return a Supabase client authenticated with the anon key.

    When ``authorization`` is given it is forwarded on every request so that
    row level security evaluates as the caller. Never cached: auth state is
    per request and must not bleed between callers.
    """
    extra = {"headers": {"Authorization": authorization}} if authorization else {}
    options = ClientOptions(persist_session=False, auto_refresh_token=False, **extra)
    return create_client(
        settings.require("supabase_url"),
        settings.require("supabase_anon_key"),
        options=options,
    )


def get_supabase_admin(settings: Settings) -> Client:
    """
    Return a Supabase client authenticated with the service-role key.

    Bypasses row level security. Used only by maintenance commands, never by
    a request handler.
    """
    options = ClientOptions(persist_session=False, auto_refresh_token=False)
    return create_client(
        settings.require("supabase_url"),
        settings.require("supabase_service_role_key"),
        options=options,
    )


def resolve_principal(settings: Settings, authorization: Optional[str]) -> Principal:
    """
    Resolve the caller behind an ``Authorization`` header.

    Raises AuthenticationError when the header is missing, when Supabase
    rejects the token, or when the user has no email. Anything else the
    identity service raises (network failures, missing configuration)
    propagates unchanged.
    """
    if not authorization or not authorization.strip():
        raise AuthenticationError("Missing Authorization header")

    client = get_supabase_client(settings, authorization)
    try:
        response = client.auth.get_user(_bearer_token(authorization))
    except AuthError as exc:
        logger.info("Supabase rejected caller token: %s", exc)
        raise AuthenticationError("User not authenticated") from exc

    user = getattr(response, "user", None)
    if user is None or not getattr(user, "email", None):
        raise AuthenticationError("User not authenticated")

    return Principal(user_id=str(user.id), email=user.email)


# ─── Auth form operations ────────────────────────────────────────────────────

def _serialize_auth_response(response: Any) -> Dict[str, Any]:
    user = getattr(response, "user", None)
    session = getattr(response, "session", None)
    return {
        "user": {"id": str(user.id), "email": user.email} if user is not None else None,
        "session": (
            {
                "access_token": session.access_token,
                "refresh_token": session.refresh_token,
                "expires_at": session.expires_at,
            }
            if session is not None
            else None
        ),
    }


def sign_in_with_password(settings: Settings, *, email: str, password: str) -> Dict[str, Any]:
    """Password sign-in. AuthError from Supabase propagates to the caller."""
    client = get_supabase_client(settings)
    response = client.auth.sign_in_with_password({"email": email, "password": password})
    return _serialize_auth_response(response)


def sign_up(
    settings: Settings,
    *,
    email: str,
    password: str,
    full_name: Optional[str] = None,
) -> Dict[str, Any]:
    """
    Register a new account.

    ``full_name`` is stored in the user's metadata. The returned session is
    None while Supabase waits for e-mail confirmation.
    """
    client = get_supabase_client(settings)
    credentials: Dict[str, Any] = {"email": email, "password": password}
    if full_name:
        credentials["options"] = {"data": {"full_name": full_name}}
    response = client.auth.sign_up(credentials)
    return _serialize_auth_response(response)


def google_sign_in_url(settings: Settings, *, redirect_to: str) -> str:
    """Return the Supabase-hosted Google OAuth URL."""
    client = get_supabase_client(settings)
    response = client.auth.sign_in_with_oauth(
        {"provider": "google", "options": {"redirect_to": redirect_to}}
    )
    return response.url
