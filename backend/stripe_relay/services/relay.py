"""Verify-then-forward handler for Stripe webhooks.

One inbound request produces at most one outbound POST. Nothing is retried,
queued or deduplicated: a redelivered event is forwarded again, and a failed
forward is only reported back to Stripe, whose own redelivery is the retry.
"""
import enum
import logging
from dataclasses import dataclass

import httpx
import stripe

from stripe_relay.core.config import Settings
from stripe_relay.services.forwarder import ForwardError, forward_event
from stripe_relay.services.stripe_verify import InvalidEventError, construct_event

logger = logging.getLogger(__name__)


class RelayState(str, enum.Enum):
    RESPONDED = "responded"
    REJECTED_CONFIG = "rejected_config"
    REJECTED_SIGNATURE = "rejected_signature"
    REJECTED_FORWARD = "rejected_forward"


@dataclass(frozen=True)
class RelayResult:
    status_code: int
    body: str
    state: RelayState


async def handle(
    raw_body: bytes,
    signature_header: str | None,
    settings: Settings,
    client: httpx.AsyncClient,
) -> RelayResult:
    missing = settings.missing()
    if missing:
        logger.error(f"Missing env vars: {', '.join(missing)}")
        return RelayResult(500, "missing_env_vars", RelayState.REJECTED_CONFIG)

    if not signature_header:
        logger.warning("Rejected webhook without Stripe-Signature header")
        return RelayResult(
            400, "missing_stripe_signature", RelayState.REJECTED_SIGNATURE
        )

    try:
        event = construct_event(
            raw_body,
            signature_header,
            settings.stripe_webhook_secret,
            tolerance=settings.signature_tolerance,
        )
    except stripe.SignatureVerificationError as e:
        logger.error(f"Signature verification failed: {e}")
        return RelayResult(400, f"Webhook Error: {e}", RelayState.REJECTED_SIGNATURE)
    except InvalidEventError as e:
        logger.error(f"Signed body is not a Stripe event: {e}")
        return RelayResult(400, f"Webhook Error: {e}", RelayState.REJECTED_SIGNATURE)

    logger.info(f"Event: {event.type} id={event.id} livemode={event.livemode}")
    if event.api_version and event.api_version != settings.stripe_api_version:
        logger.warning(
            f"Event {event.id} has api_version {event.api_version}, "
            f"expected {settings.stripe_api_version}"
        )

    try:
        result = await forward_event(client, event, settings)
    except ForwardError as e:
        logger.error(f"Forward error for event {event.id}: {e}")
        return RelayResult(500, "forward_error", RelayState.REJECTED_FORWARD)

    if result.ok:
        return RelayResult(200, "ok", RelayState.RESPONDED)

    logger.error(f"Forward target rejected event {event.id}: {result.status_code}")
    return RelayResult(
        500, f"forward_failed_{result.status_code}", RelayState.REJECTED_FORWARD
    )
