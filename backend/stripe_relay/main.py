import logging

import httpx
import stripe
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from stripe_relay.core.config import Settings, get_settings
from stripe_relay.core.logging import configure_logging
from stripe_relay.middleware.body_size import BodySizeLimitMiddleware
from stripe_relay.services import relay

app = FastAPI(
    title="Stripe Webhook Relay",
    description="Verifies Stripe webhooks and forwards them to an automation endpoint",
    version="1.0.0",
)

settings = get_settings()

app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)

logger = logging.getLogger(__name__)


@app.on_event("startup")
async def startup():
    """Apply logging and the Stripe API-version pin once per process."""
    configure_logging(settings.log_level)
    stripe.api_version = settings.stripe_api_version

    missing = settings.missing()
    if missing:
        # Not fatal: each webhook will answer 500 until this is fixed
        logger.error(f"Missing env vars: {', '.join(missing)}")
    logger.info(
        f"Relay ready: api_version={settings.stripe_api_version} "
        f"proxy_secret_placement={settings.proxy_secret_placement}"
    )


# ---------- dependencies ----------
async def get_http_client(settings: Settings = Depends(get_settings)):
    # Apps Script answers POSTs with a redirect to the result page
    async with httpx.AsyncClient(
        timeout=settings.forward_timeout, follow_redirects=True
    ) as client:
        yield client


async def _relay(request: Request, settings: Settings, client: httpx.AsyncClient):
    # Raw bytes: any re-serialization before verification breaks the signature
    raw = await request.body()
    result = await relay.handle(
        raw, request.headers.get("stripe-signature"), settings, client
    )
    return PlainTextResponse(result.body, status_code=result.status_code)


# ---------- health ----------
@app.get("/", response_class=PlainTextResponse)
async def liveness():
    return "ok"


@app.get("/health", include_in_schema=False)
async def health(settings: Settings = Depends(get_settings)):
    missing = settings.missing()
    return {"status": "ok", "configured": not missing, "missing": missing}


# ---------- webhook ----------
@app.post("/webhook", response_class=PlainTextResponse)
async def stripe_webhook(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await _relay(request, settings, client)


@app.post("/", response_class=PlainTextResponse, include_in_schema=False)
async def stripe_webhook_root(
    request: Request,
    settings: Settings = Depends(get_settings),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    if not settings.accept_root_post:
        return PlainTextResponse(
            "method_not_allowed",
            status_code=status.HTTP_405_METHOD_NOT_ALLOWED,
            headers={"Allow": "GET"},
        )
    return await _relay(request, settings, client)
