import hashlib
import hmac
import logging
import time

import stripe
from pydantic import ValidationError

from stripe_relay.schemas.event import VerifiedEvent

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = stripe.Webhook.DEFAULT_TOLERANCE


class InvalidEventError(ValueError):
    """Signature was valid but the body is not a Stripe event envelope."""


def construct_event(
    raw_body: bytes, header: str, secret: str, tolerance: int = DEFAULT_TOLERANCE
) -> VerifiedEvent:
    """
    Verify ``header`` against ``raw_body`` and parse the event.

    Raises stripe.SignatureVerificationError for a malformed header, an
    expired timestamp or a digest mismatch, and InvalidEventError when the
    verified body cannot be read as an event.
    """
    try:
        payload = raw_body.decode("utf-8")
    except UnicodeDecodeError as e:
        raise InvalidEventError("Body is not valid UTF-8") from e

    stripe.WebhookSignature.verify_header(payload, header, secret, tolerance)
    logger.debug("Stripe signature verified")

    try:
        return VerifiedEvent.model_validate_json(raw_body)
    except ValidationError as ve:
        fields = ", ".join(
            ".".join(str(loc) for loc in err["loc"]) or err["type"]
            for err in ve.errors()
        )
        raise InvalidEventError(f"Invalid event payload ({fields})") from ve


def sign_header(payload: bytes | str, secret: str, timestamp: int | None = None) -> str:
    """Build a Stripe-Signature header value for ``payload``."""
    if timestamp is None:
        timestamp = int(time.time())
    if isinstance(payload, bytes):
        payload = payload.decode("utf-8")
    signed_payload = f"{timestamp}.{payload}".encode("utf-8")
    sig = hmac.new(secret.encode("utf-8"), signed_payload, hashlib.sha256).hexdigest()
    return f"t={timestamp},v1={sig}"
