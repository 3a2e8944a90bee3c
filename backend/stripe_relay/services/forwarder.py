import logging
from dataclasses import dataclass

import httpx

from stripe_relay.core.config import Settings
from stripe_relay.schemas.event import VerifiedEvent

logger = logging.getLogger(__name__)

# How much of the downstream response body goes into the log line
RESPONSE_LOG_CHARS = 300


class ForwardError(Exception):
    """The forward request never produced an HTTP response."""


@dataclass(frozen=True)
class ForwardResult:
    status_code: int
    text: str

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_request_kwargs(event: VerifiedEvent, settings: Settings) -> dict:
    url = httpx.URL(settings.apps_script_url)
    headers = {
        "Content-Type": "application/json",
        "User-Agent": settings.user_agent,
    }
    if settings.proxy_secret_placement == "header":
        headers[settings.proxy_secret_header] = settings.proxy_secret
    else:
        # Merge into the target URL; the request-level params argument
        # would replace an existing query string
        url = url.copy_merge_params(
            {settings.proxy_secret_param: settings.proxy_secret}
        )

    return {
        "url": url,
        "headers": headers,
        # Only fields present in the verified body, no added nulls
        "content": event.model_dump_json(exclude_unset=True).encode("utf-8"),
    }


async def forward_event(
    client: httpx.AsyncClient, event: VerifiedEvent, settings: Settings
) -> ForwardResult:
    """POST the event to the configured target, once."""
    kwargs = build_request_kwargs(event, settings)
    try:
        r = await client.post(**kwargs)
    except httpx.HTTPError as exc:
        raise ForwardError(f"{type(exc).__name__}: {exc}") from exc

    result = ForwardResult(status_code=r.status_code, text=r.text)
    logger.info(
        f"Forwarded event {event.id}: {result.status_code} "
        f"{result.text[:RESPONSE_LOG_CHARS]}"
    )
    return result
