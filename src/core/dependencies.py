from fastapi import Request, Security
from fastapi.security import APIKeyHeader

from core.security import verify_worker_token
from service.object_store import S3ObjectStore

# APIKeyHeader:
# - 요청 헤더 "X-Worker-Token"을 추출
# - Swagger UI에 "Authorize" 버튼(apiKey 스킴)을 자동 생성
# - auto_error=False → 헤더가 없으면 None. 판정은 verify_worker_token이 한다
worker_token_header = APIKeyHeader(name="X-Worker-Token", auto_error=False)


def get_object_store(request: Request) -> S3ObjectStore:
    """lifespan에서 만든 S3 클라이언트를 꺼낸다.

    테스트에서는 app.dependency_overrides로 가짜 저장소를 주입한다.
    """
    return request.app.state.object_store


def require_worker(token: str | None = Security(worker_token_header)) -> None:
    """워커 공유 토큰을 검증한다. 실패 시 401/403."""
    verify_worker_token(token)
