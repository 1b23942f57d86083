import logging
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

logger = logging.getLogger("pcoin")

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로그

    요청마다 request id를 부여하고(클라이언트가 보낸 값이 있으면 재사용) 응답 헤더로 돌려준다.
    4xx는 WARNING, 5xx는 ERROR로 남긴다.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]
        client = request.client.host if request.client else "-"
        line = f"[{request_id}] {request.method} {request.url.path} from {client}"

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"{line} -> unhandled error")
            raise

        elapsed_ms = (time.perf_counter() - started) * 1000
        summary = f"{line} -> {response.status_code} ({elapsed_ms:.1f}ms)"
        if response.status_code >= 500:
            logger.error(summary)
        elif response.status_code >= 400:
            logger.warning(summary)
        else:
            logger.info(summary)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
