"""Stripe integration helpers for subscription billing."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

import stripe

from billing.plans import PlanDefinition

if TYPE_CHECKING:  # settings imports the plan catalogue from this package
    from settings import Settings

logger = logging.getLogger(__name__)


def _request_options(settings: Settings) -> Dict[str, Any]:
    options: Dict[str, Any] = {"api_key": settings.require("stripe_secret_key")}
    if settings.stripe_api_version:
        options["stripe_version"] = settings.stripe_api_version
    return options


def find_customer_id(settings: Settings, *, email: str) -> Optional[str]:
    """Return the id of the first Stripe customer registered under ``email``.

    Stripe does not enforce unique emails. Only the first result of the
    list-by-email query is considered; further matches are ignored.
    """

    customers = stripe.Customer.list(email=email, limit=1, **_request_options(settings))
    if customers.data:
        return customers.data[0].id
    return None


def build_checkout_params(
    *,
    plan: PlanDefinition,
    origin: str,
    metadata: Dict[str, Any],
    product_name: str,
    customer: Optional[str] = None,
    customer_email: Optional[str] = None,
) -> Dict[str, Any]:
    """Assemble the parameters for a subscription-mode Checkout session."""

    if not customer and not customer_email:
        raise ValueError("Either customer or customer_email must be provided.")

    params: Dict[str, Any] = {
        "mode": "subscription",
        "line_items": [
            {
                "price_data": {
                    "currency": plan.currency,
                    "product_data": {
                        "name": plan.name,
                        "description": f"{plan.name} - Monthly subscription for {product_name} project management",
                    },
                    "unit_amount": plan.monthly_price_cents,
                    "recurring": {"interval": plan.interval},
                },
                "quantity": 1,
            }
        ],
        "success_url": f"{origin}/dashboard?subscription=success&plan={plan.slug}",
        "cancel_url": f"{origin}/dashboard?subscription=cancelled",
        "metadata": metadata,
        "billing_address_collection": "required",
        "payment_method_types": ["card"],
        "allow_promotion_codes": True,
    }

    if customer:
        params["customer"] = customer
    else:
        params["customer_email"] = customer_email

    return params


def create_subscription_checkout_session(
    settings: Settings,
    *,
    plan: PlanDefinition,
    origin: str,
    metadata: Dict[str, Any],
    customer: Optional[str] = None,
    customer_email: Optional[str] = None,
) -> stripe.checkout.Session:
    """Create a Stripe Checkout session for a subscription plan."""

    params = build_checkout_params(
        plan=plan,
        origin=origin,
        metadata=metadata,
        product_name=settings.app_name,
        customer=customer,
        customer_email=customer_email,
    )
    return stripe.checkout.Session.create(**params, **_request_options(settings))


def create_billing_portal_session(
    settings: Settings,
    *,
    customer: str,
    return_url: str,
) -> stripe.billing_portal.Session:
    """Create a Stripe customer-portal session for an existing customer."""

    return stripe.billing_portal.Session.create(
        customer=customer,
        return_url=return_url,
        **_request_options(settings),
    )
