"""Static subscription plan catalogue."""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional


@dataclass(frozen=True)
class PlanDefinition:
    slug: str
    name: str
    monthly_price_cents: int
    currency: str = "usd"
    interval: str = "month"

    def to_payload(self) -> dict:
        return {
            "id": self.slug,
            "name": self.name,
            "amount": self.monthly_price_cents,
            "currency": self.currency,
            "interval": self.interval,
        }


PLAN_DEFINITIONS = (
    PlanDefinition(slug="starter", name="Starter Plan", monthly_price_cents=1000),
    PlanDefinition(slug="pro", name="Pro Plan", monthly_price_cents=2900),
    PlanDefinition(slug="enterprise", name="Enterprise Plan", monthly_price_cents=9900),
)

PLAN_CATALOG: Mapping[str, PlanDefinition] = MappingProxyType(
    {definition.slug: definition for definition in PLAN_DEFINITIONS}
)


def get_plan_definitions() -> Iterable[PlanDefinition]:
    """Return the immutable list of supported plan definitions."""

    return tuple(PLAN_DEFINITIONS)


def get_plan(plan_id: Optional[str], catalog: Mapping[str, PlanDefinition] = PLAN_CATALOG) -> Optional[PlanDefinition]:
    """Look up a plan by identifier; unknown or non-string ids yield ``None``."""

    if not isinstance(plan_id, str):
        return None
    return catalog.get(plan_id)
