from collections.abc import Iterator

from sqlalchemy.engine import URL
from sqlmodel import Session, SQLModel, create_engine

from core.config import settings


def _pool_options(url: URL) -> dict:
    """커넥션 풀 옵션.

    - pool_size 고정, max_overflow=0 → 동시 커넥션 상한
    - 풀이 가득 차면 pool_timeout 초까지 대기 후 실패
    - SQLite는 QueuePool이 아니므로 옵션을 넘기지 않는다
    """
    if url.get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_size": settings.DB_POOL_SIZE,
        "max_overflow": 0,
        "pool_timeout": settings.DB_POOL_TIMEOUT_SECONDS,
        "pool_pre_ping": True,
    }


engine = create_engine(settings.database_url, **_pool_options(settings.database_url))


def create_db_and_tables() -> None:
    """개발용. 운영 스키마는 외부에서 관리한다."""
    SQLModel.metadata.create_all(engine)


def get_session() -> Iterator[Session]:
    with Session(engine) as session:
        yield session
