"""Request logging middleware for the questionnaire API."""

import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger("questionnaire.requests")


async def _read_body(response: Response) -> bytes:
    """Drain a streaming response body."""
    body = b""
    async for chunk in response.body_iterator:
        body += chunk.encode("utf-8") if isinstance(chunk, str) else chunk
    return body


def _trim(detail: str, limit: int) -> str:
    if len(detail) > limit:
        return detail[:limit] + "..."
    return detail


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log every request with method, path, status and duration.

    Parse requests carry whole documents, so request bodies are never
    logged. For 4xx/5xx responses the response body is logged instead, so
    validation errors (FastAPI's "detail" field) show up in the terminal.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        start = time.monotonic()
        response = await call_next(request)
        duration_ms = (time.monotonic() - start) * 1000

        status = response.status_code
        method = request.method
        path = request.url.path
        if request.url.query:
            path = f"{path}?{request.url.query}"

        if status >= 400 and hasattr(response, "body_iterator"):
            body = await _read_body(response)
            detail = _trim(body.decode("utf-8", errors="replace"), settings.log_detail_max_length)

            log = logger.warning if status < 500 else logger.error
            log("%s %s → %d (%.0fms): %s", method, path, status, duration_ms, detail)

            # The body iterator is consumed; hand the client a rebuilt response
            return Response(
                content=body,
                status_code=status,
                headers=dict(response.headers),
                media_type=response.media_type,
            )

        logger.info("%s %s → %d (%.0fms)", method, path, status, duration_ms)
        return response
