"""FastAPI router for Stripe checkout and billing-portal endpoints."""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, Request, status
from pydantic import BaseModel, Field

from billing import (
    create_billing_portal_session,
    create_subscription_checkout_session,
    find_customer_id,
    get_plan,
)
from core.responses import cors_json, cors_preflight
from identity import AuthenticationError, resolve_principal
from settings import Settings, get_settings, resolve_redirect_origin

router = APIRouter()
logger = logging.getLogger(__name__)


class CheckoutRequest(BaseModel):
    plan: Any = None
    workspace_id: Any = Field(default=None, alias="workspaceId")

    @property
    def workspace_reference(self) -> Optional[str]:
        return None if self.workspace_id is None else str(self.workspace_id)


@router.options("/create-checkout")
async def create_checkout_preflight(settings: Settings = Depends(get_settings)):
    return cors_preflight(settings.cors)


@router.post("/create-checkout")
async def create_checkout(request: Request, settings: Settings = Depends(get_settings)):
    try:
        principal = resolve_principal(settings, request.headers.get("authorization"))

        body = await request.json()
        # a body that is not an object carries no plan
        payload = CheckoutRequest.model_validate(body if isinstance(body, dict) else {})
        logger.info(
            "Creating checkout session: plan=%s workspace=%s user=%s",
            payload.plan,
            payload.workspace_id,
            principal.user_id,
        )

        plan = get_plan(payload.plan, settings.plans)
        if plan is None:
            return cors_json(
                settings.cors,
                {"error": "Invalid plan selected"},
                status.HTTP_400_BAD_REQUEST,
            )

        customer_id = find_customer_id(settings, email=principal.email)
        origin = resolve_redirect_origin(request.headers.get("origin"), settings)

        session_obj = create_subscription_checkout_session(
            settings,
            plan=plan,
            origin=origin,
            customer=customer_id,
            customer_email=None if customer_id else principal.email,
            metadata={
                "workspace_id": payload.workspace_reference,
                "plan": plan.slug,
                "user_id": principal.user_id,
            },
        )
    except AuthenticationError as exc:
        return cors_json(settings.cors, {"error": str(exc)}, status.HTTP_401_UNAUTHORIZED)
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        logger.exception("Error creating checkout session")
        return cors_json(
            settings.cors,
            {"error": str(exc) or "Unknown error"},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info("Checkout session created: %s", session_obj.id)
    return cors_json(settings.cors, {"url": session_obj.url, "sessionId": session_obj.id})


@router.options("/create-portal-session")
async def create_portal_session_preflight(settings: Settings = Depends(get_settings)):
    return cors_preflight(settings.cors)


@router.post("/create-portal-session")
async def create_portal_session(request: Request, settings: Settings = Depends(get_settings)):
    try:
        principal = resolve_principal(settings, request.headers.get("authorization"))

        customer_id = find_customer_id(settings, email=principal.email)
        if customer_id is None:
            return cors_json(
                settings.cors,
                {"error": "No billing account found for this user"},
                status.HTTP_404_NOT_FOUND,
            )

        origin = resolve_redirect_origin(request.headers.get("origin"), settings)
        portal = create_billing_portal_session(
            settings,
            customer=customer_id,
            return_url=f"{origin}/dashboard",
        )
    except AuthenticationError as exc:
        return cors_json(settings.cors, {"error": str(exc)}, status.HTTP_401_UNAUTHORIZED)
    except Exception as exc:  # noqa: BLE001 - every failure is reported to the caller
        logger.exception("Error creating billing portal session")
        return cors_json(
            settings.cors,
            {"error": str(exc) or "Unknown error"},
            status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    return cors_json(settings.cors, {"url": portal.url})


@router.get("/plans")
async def list_plans(settings: Settings = Depends(get_settings)):
    return cors_json(
        settings.cors,
        {
            "plans": [plan.to_payload() for plan in settings.plans.values()],
            "currency": "usd",
        },
    )
