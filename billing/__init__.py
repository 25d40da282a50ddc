"""Billing utilities for subscription plans and Stripe sessions."""

from .plans import PLAN_CATALOG, PLAN_DEFINITIONS, PlanDefinition, get_plan, get_plan_definitions
from .stripe_client import (
    build_checkout_params,
    create_billing_portal_session,
    create_subscription_checkout_session,
    find_customer_id,
)

__all__ = [
    "PLAN_CATALOG",
    "PLAN_DEFINITIONS",
    "PlanDefinition",
    "get_plan",
    "get_plan_definitions",
    "build_checkout_params",
    "create_billing_portal_session",
    "create_subscription_checkout_session",
    "find_customer_id",
]
