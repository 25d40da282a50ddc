import dataclasses

import pytest

from billing import PLAN_CATALOG, get_plan
from settings import (
    DEFAULT_EMAILJS_API_URL,
    ConfigurationError,
    Settings,
    resolve_redirect_origin,
)


def test_from_env_reads_collaborator_settings():
    settings = Settings.from_env(
        {
            "SUPABASE_URL": "https://project.supabase.co",
            "SUPABASE_ANON_KEY": "anon",
            "STRIPE_SECRET_KEY": "sk_test_1",
            "SITE_URL": "https://ganty.io",
            "EMAILJS_SERVICE_ID": "svc",
            "EMAILJS_TEMPLATE_ID": "tpl",
            "EMAILJS_PUBLIC_KEY": "pub",
            "EMAILJS_PRIVATE_KEY": "priv",
            "EMAILJS_TIMEOUT_SECONDS": "10",
        }
    )

    assert settings.stripe_secret_key == "sk_test_1"
    assert settings.site_url == "https://ganty.io"
    assert settings.emailjs.is_configured
    assert settings.emailjs.api_url == DEFAULT_EMAILJS_API_URL
    assert settings.emailjs.timeout_seconds == 10.0


def test_emailjs_has_no_builtin_credentials():
    settings = Settings.from_env({})

    assert not settings.emailjs.is_configured
    assert settings.emailjs.service_id is None
    assert settings.emailjs.private_key is None


def test_blank_values_count_as_missing():
    settings = Settings.from_env({"STRIPE_SECRET_KEY": "   "})

    with pytest.raises(ConfigurationError, match="STRIPE_SECRET_KEY"):
        settings.require("stripe_secret_key")


def test_settings_are_immutable():
    settings = Settings.from_env({})

    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.site_url = "https://elsewhere.example"
    with pytest.raises(TypeError):
        settings.plans["free"] = PLAN_CATALOG["starter"]


@pytest.mark.parametrize(
    "origin, site_url, expected",
    [
        ("https://app.ganty.io", "https://ganty.io", "https://app.ganty.io"),
        (None, "https://ganty.io", "https://ganty.io"),
        ("", "https://ganty.io", "https://ganty.io"),
        (None, None, "http://localhost:5173"),
    ],
)
def test_redirect_origin_priority(origin, site_url, expected):
    assert resolve_redirect_origin(origin, Settings(site_url=site_url)) == expected


def test_plan_catalog():
    assert set(PLAN_CATALOG) == {"starter", "pro", "enterprise"}
    pro = get_plan("pro")
    assert (pro.name, pro.monthly_price_cents, pro.interval) == ("Pro Plan", 2900, "month")
    assert get_plan("free") is None
    assert get_plan(None) is None


def test_default_settings_share_the_read_only_catalog():
    settings = Settings()

    assert settings.plans is PLAN_CATALOG
    assert Settings(site_url="https://ganty.io").plans is PLAN_CATALOG
    with pytest.raises(TypeError):
        settings.plans["pro"] = PLAN_CATALOG["starter"]
