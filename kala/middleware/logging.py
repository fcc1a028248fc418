import os
import json
import time
import uuid
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """One JSON access line per request when LOGGING_ENABLED=true.

    The caller's request id is echoed back (or a new one minted) so engine
    warnings can be matched to the request that triggered them.
    """

    async def dispatch(self, request: Request, call_next):
        if os.getenv("LOGGING_ENABLED", "false").lower() != "true":
            return await call_next(request)

        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        started = time.perf_counter()
        status = 500
        try:
            response = await call_next(request)
            status = response.status_code
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            print(
                json.dumps(
                    {
                        "ts": time.time(),
                        "request_id": request_id,
                        "ip": request.client.host if request.client else None,
                        "method": request.method,
                        "endpoint": request.url.path,
                        "status": status,
                        "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                    }
                )
            )
