from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app import app
from settings import EmailJSConfig, Settings, get_settings

USER_ID = "4f1c2a9e-0000-4000-8000-000000000001"
USER_EMAIL = "owner@example.com"


@pytest.fixture
def settings():
    return Settings(
        supabase_url="https://project.supabase.co",
        supabase_anon_key="anon-key",
        supabase_service_role_key="service-key",
        stripe_secret_key="sk_test_123",
        site_url=None,
        emailjs=EmailJSConfig(
            service_id="service_1",
            template_id="template_1",
            public_key="public_1",
            private_key="private_1",
        ),
    )


@pytest.fixture
def client(settings):
    app.dependency_overrides[get_settings] = lambda: settings
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def supabase_client():
    """Patch Supabase client creation; the fake resolves a user with an email."""

    fake = MagicMock()
    fake.auth.get_user.return_value = SimpleNamespace(
        user=SimpleNamespace(id=USER_ID, email=USER_EMAIL)
    )
    with patch("identity.create_client", return_value=fake) as factory:
        fake.factory = factory
        yield fake


@pytest.fixture
def auth_headers():
    return {"Authorization": "Bearer user-jwt"}
