from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp


class BodySizeLimitMiddleware(BaseHTTPMiddleware):
    """Reject requests whose declared body exceeds ``max_body_size`` bytes."""

    def __init__(self, app: ASGIApp, max_body_size: int = 1_048_576) -> None:
        super().__init__(app)
        self.max_body_size = max_body_size

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("content-length")
        if content_length:
            try:
                too_large = int(content_length) > self.max_body_size
            except ValueError:
                return PlainTextResponse("invalid_content_length", status_code=400)
            if too_large:
                return PlainTextResponse("payload_too_large", status_code=413)
        return await call_next(request)
