"""FastAPI router for the sign-in / sign-up form and Google sign-in."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from pydantic import BaseModel, ValidationError
from supabase import AuthError

from core.responses import cors_json, cors_preflight
from identity import google_sign_in_url, sign_in_with_password, sign_up
from settings import Settings, get_settings, resolve_redirect_origin

router = APIRouter(prefix="/auth")
logger = logging.getLogger(__name__)


class Credentials(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None
    full_name: Optional[str] = None


async def _read_credentials(request: Request) -> Optional[Credentials]:
    try:
        payload = await request.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    try:
        credentials = Credentials.model_validate(payload)
    except ValidationError:
        return None
    if not (credentials.email or "").strip() or not credentials.password:
        return None
    return credentials


def _server_error(settings: Settings, exc: Exception):
    return cors_json(
        settings.cors,
        {"error": str(exc) or "Unknown error"},
        status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


@router.options("/sign-in")
@router.options("/sign-up")
async def auth_preflight(settings: Settings = Depends(get_settings)):
    return cors_preflight(settings.cors)


@router.post("/sign-in")
async def sign_in(request: Request, settings: Settings = Depends(get_settings)):
    credentials = await _read_credentials(request)
    if credentials is None:
        return cors_json(
            settings.cors,
            {"error": "Email and password are required"},
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        payload = sign_in_with_password(
            settings,
            email=credentials.email.strip(),
            password=credentials.password,
        )
    except AuthError as exc:
        logger.info("Sign-in rejected for %s: %s", credentials.email, exc)
        return cors_json(settings.cors, {"error": exc.message}, status.HTTP_400_BAD_REQUEST)
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        logger.exception("Error signing in %s", credentials.email)
        return _server_error(settings, exc)

    return cors_json(settings.cors, payload)


@router.post("/sign-up")
async def register(request: Request, settings: Settings = Depends(get_settings)):
    credentials = await _read_credentials(request)
    if credentials is None:
        return cors_json(
            settings.cors,
            {"error": "Email and password are required"},
            status.HTTP_400_BAD_REQUEST,
        )

    try:
        payload = sign_up(
            settings,
            email=credentials.email.strip(),
            password=credentials.password,
            full_name=credentials.full_name,
        )
    except AuthError as exc:
        logger.info("Sign-up rejected for %s: %s", credentials.email, exc)
        return cors_json(settings.cors, {"error": exc.message}, status.HTTP_400_BAD_REQUEST)
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        logger.exception("Error signing up %s", credentials.email)
        return _server_error(settings, exc)

    return cors_json(settings.cors, payload)


@router.get("/google")
async def google_login(
    request: Request,
    redirect_to: Optional[str] = None,
    settings: Settings = Depends(get_settings),
):
    if not redirect_to:
        origin = resolve_redirect_origin(request.headers.get("origin"), settings)
        redirect_to = f"{origin}/dashboard"

    try:
        url = google_sign_in_url(settings, redirect_to=redirect_to)
    except AuthError as exc:
        logger.warning("Google sign-in could not be started: %s", exc)
        return cors_json(settings.cors, {"error": exc.message}, status.HTTP_400_BAD_REQUEST)
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        logger.exception("Error starting Google sign-in")
        return _server_error(settings, exc)

    return RedirectResponse(url=url, status_code=status.HTTP_303_SEE_OTHER)
