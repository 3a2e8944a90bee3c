from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class VerifiedEvent(BaseModel):
    """Stripe event envelope, only ever built from a verified body.

    Unknown top-level fields are kept so the forwarded JSON carries the
    whole event.
    """

    model_config = ConfigDict(extra="allow")

    id: str = Field(..., description="Stripe event ID")
    type: str = Field(..., description="Event type, e.g. payment_intent.succeeded")
    livemode: bool
    api_version: str | None = None
    created: int | None = None
    data: dict[str, Any] | None = None
