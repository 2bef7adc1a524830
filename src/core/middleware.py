import time
import uuid

from fastapi import Request, Response
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

SLOW_THRESHOLD_MS = 500
REQUEST_ID_HEADER = "X-Request-ID"


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 HTTP 요청을 로깅하는 미들웨어.

    기록 항목: 메서드, 경로, 클라이언트 IP, 상태코드, 처리시간(ms)
    처리시간이 500ms를 초과하면 WARNING 레벨로 기록.
    요청마다 request_id를 붙여 로그와 응답 헤더(X-Request-ID)로 내보낸다.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        start = time.perf_counter()

        with logger.contextualize(request_id=request_id):
            response = await call_next(request)

            elapsed_ms = (time.perf_counter() - start) * 1000
            client_ip = request.client.host if request.client else "unknown"
            line = (
                f"{request.method} {request.url.path} | {client_ip} | "
                f"{response.status_code} | {elapsed_ms:.0f}ms"
            )
            if elapsed_ms > SLOW_THRESHOLD_MS:
                logger.warning(f"{line} (slow)")
            else:
                logger.info(line)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
