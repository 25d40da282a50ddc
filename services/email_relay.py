"""EmailJS relay for transactional template emails."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import aiohttp

from settings import EmailJSConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EmailDelivery:
    delivered: bool
    error: Optional[str] = None


async def send_template_email(config: EmailJSConfig, template_params: Mapping[str, Any]) -> EmailDelivery:
    """Send one EmailJS template email.

    Never raises for a failed delivery: missing configuration, transport
    errors and non-2xx answers all come back as ``delivered=False`` with the
    reason attached.
    """

    if not config.is_configured:
        logger.warning("EmailJS credentials not configured; skipping send")
        return EmailDelivery(delivered=False, error="Email service is not configured.")

    payload: Dict[str, Any] = {
        "service_id": config.service_id,
        "template_id": config.template_id,
        "user_id": config.public_key,
        "accessToken": config.private_key,
        "template_params": dict(template_params),
    }

    session_kwargs: Dict[str, Any] = {}
    if config.timeout_seconds is not None:
        session_kwargs["timeout"] = aiohttp.ClientTimeout(total=config.timeout_seconds)

    try:
        async with aiohttp.ClientSession(**session_kwargs) as session:
            response = await session.post(
                config.api_url,
                json=payload,
                headers={"Content-Type": "application/json"},
            )
            if 200 <= response.status < 300:
                return EmailDelivery(delivered=True)

            body = await response.text()
            logger.warning("EmailJS API error (%s): %s", response.status, body)
            return EmailDelivery(delivered=False, error=body or f"HTTP {response.status}")
    except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
        logger.warning("EmailJS request failed: %s", exc)
        return EmailDelivery(delivered=False, error=str(exc) or exc.__class__.__name__)
