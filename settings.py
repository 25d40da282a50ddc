"""Process-wide configuration, read once from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, Mapping, Optional, Tuple

from dotenv import load_dotenv

from billing.plans import PLAN_CATALOG, PlanDefinition

DEFAULT_SITE_URL = "http://localhost:5173"
DEFAULT_EMAILJS_API_URL = "https://api.emailjs.com/api/v1.0/email/send"


class ConfigurationError(RuntimeError):
    """Raised when a required environment value is missing."""


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _float_or_none(value: Optional[str]) -> Optional[float]:
    value = _clean(value)
    if value is None:
        return None
    try:
        return float(value)
    except ValueError as exc:
        raise ConfigurationError(f"Expected a number, got {value!r}.") from exc


@dataclass(frozen=True)
class CorsPolicy:
    allow_origin: str = "*"
    allow_methods: Tuple[str, ...] = ("POST", "OPTIONS")
    allow_headers: Tuple[str, ...] = ("authorization", "x-client-info", "apikey", "content-type")

    def headers(self) -> Dict[str, str]:
        return {
            "Access-Control-Allow-Origin": self.allow_origin,
            "Access-Control-Allow-Headers": ", ".join(self.allow_headers),
            "Access-Control-Allow-Methods": ", ".join(self.allow_methods),
        }


@dataclass(frozen=True)
class EmailJSConfig:
    service_id: Optional[str] = None
    template_id: Optional[str] = None
    public_key: Optional[str] = None
    private_key: Optional[str] = None
    api_url: str = DEFAULT_EMAILJS_API_URL
    timeout_seconds: Optional[float] = None

    @property
    def is_configured(self) -> bool:
        return bool(self.service_id and self.template_id and self.public_key and self.private_key)


@dataclass(frozen=True)
class Settings:
    """Immutable settings handed to every request handler.

    Collaborator credentials are optional at construction time; handlers call
    :meth:`require` at the point of use so a missing Stripe key only breaks
    billing and not the whole service.
    """

    supabase_url: Optional[str] = None
    supabase_anon_key: Optional[str] = None
    supabase_service_role_key: Optional[str] = None
    stripe_secret_key: Optional[str] = None
    stripe_api_version: Optional[str] = None
    site_url: Optional[str] = None
    app_name: str = "Ganty"
    emailjs: EmailJSConfig = field(default_factory=EmailJSConfig)
    cors: CorsPolicy = field(default_factory=CorsPolicy)
    plans: Mapping[str, PlanDefinition] = field(default_factory=lambda: PLAN_CATALOG)

    def require(self, name: str) -> str:
        value = getattr(self, name)
        if not value:
            raise ConfigurationError(f"Environment variable {name.upper()} is required.")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        return cls(
            supabase_url=_clean(env.get("SUPABASE_URL")),
            supabase_anon_key=_clean(env.get("SUPABASE_ANON_KEY")),
            supabase_service_role_key=_clean(env.get("SUPABASE_SERVICE_ROLE_KEY")),
            stripe_secret_key=_clean(env.get("STRIPE_SECRET_KEY")),
            stripe_api_version=_clean(env.get("STRIPE_API_VERSION")),
            site_url=_clean(env.get("SITE_URL")),
            app_name=_clean(env.get("APP_NAME")) or "Ganty",
            emailjs=EmailJSConfig(
                service_id=_clean(env.get("EMAILJS_SERVICE_ID")),
                template_id=_clean(env.get("EMAILJS_TEMPLATE_ID")),
                public_key=_clean(env.get("EMAILJS_PUBLIC_KEY")),
                private_key=_clean(env.get("EMAILJS_PRIVATE_KEY")),
                api_url=_clean(env.get("EMAILJS_API_URL")) or DEFAULT_EMAILJS_API_URL,
                timeout_seconds=_float_or_none(env.get("EMAILJS_TIMEOUT_SECONDS")),
            ),
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """FastAPI dependency returning the settings built at first use."""

    load_dotenv()
    return Settings.from_env()


def resolve_redirect_origin(request_origin: Optional[str], settings: Settings) -> str:
    """Pick the redirect origin: request ``Origin`` header, then ``SITE_URL``, then local dev."""

    return _clean(request_origin) or settings.site_url or DEFAULT_SITE_URL
