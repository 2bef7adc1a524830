import hmac

from core.config import settings
from core.exceptions import InvalidWorkerToken, WorkerApiDisabled


def verify_worker_token(token: str | None) -> None:
    """외부 워커의 공유 토큰을 검증한다.

    - WORKER_API_TOKEN이 비어 있으면 라우트 자체를 막는다 (403)
    - 토큰 비교는 hmac.compare_digest로 (타이밍 공격 방지)
    """
    expected = settings.WORKER_API_TOKEN
    if not expected:
        raise WorkerApiDisabled
    if not token or not hmac.compare_digest(token.encode(), expected.encode()):
        raise InvalidWorkerToken
