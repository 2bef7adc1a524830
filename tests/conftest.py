"""pytest 공용 fixture.

모든 API 테스트는 in-memory SQLite DB와 가짜 객체 저장소를 사용하여 격리된다.
- session: 테스트마다 새 DB 세션
- store: S3 대신 dict에 저장하는 FakeObjectStore
- client: get_session / get_object_store를 오버라이드한 TestClient
- worker_headers: 워커 토큰 헤더
"""

import os
import sys
import uuid
from pathlib import Path
from urllib.parse import parse_qs, urlparse

# 설정은 import 시점에 읽히므로 앱 import 전에 환경변수를 지정한다
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["WORKER_API_TOKEN"] = "test-worker-token"
os.environ["AWS_S3_BUCKET_NAME"] = "test-bucket"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

# src/ 디렉토리를 import path에 추가
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "src"))

from core.dependencies import get_object_store
from core.exceptions import StorageError
from main import app
from model.database import get_session

WORKER_TOKEN = "test-worker-token"


class FakeObjectStore:
    """S3ObjectStore와 같은 인터페이스의 메모리 저장소.

    fail_put / fail_delete로 저장소 장애를 흉내 낸다.
    """

    def __init__(self, bucket: str = "test-bucket"):
        self.bucket = bucket
        self.objects: dict[str, dict] = {}
        self.deleted: list[str] = []
        self.fail_put = False
        self.fail_delete = False

    def put(self, key, data, content_type, metadata=None):
        if self.fail_put:
            raise StorageError
        self.objects[key] = {
            "body": data,
            "content_type": content_type,
            "metadata": metadata or {},
        }

    def signed_get_url(self, key, ttl_seconds):
        # 호출마다 서명이 달라지는 실제 presigned URL과 같은 성질
        return (
            f"https://fake-s3.local/{self.bucket}/{key}"
            f"?expires={ttl_seconds}&signature={uuid.uuid4().hex}"
        )

    def delete(self, key):
        if self.fail_delete:
            raise StorageError
        self.objects.pop(key, None)
        self.deleted.append(key)

    @staticmethod
    def resolve(url: str) -> tuple[str, int]:
        """서명 URL → (객체 키, TTL 초)."""
        parsed = urlparse(url)
        _, _, key = parsed.path.lstrip("/").partition("/")
        ttl = int(parse_qs(parsed.query)["expires"][0])
        return key, ttl


@pytest.fixture()
def session():
    """테스트마다 새 in-memory SQLite DB를 생성한다.

    StaticPool을 사용해야 모든 커넥션이 같은 in-memory DB를 공유한다.
    (기본값은 커넥션마다 별도 DB가 생성되어 테이블이 안 보임)
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as s:
        yield s


@pytest.fixture()
def store():
    return FakeObjectStore()


@pytest.fixture()
def client(session, store):
    """get_session / get_object_store를 테스트용으로 오버라이드한 TestClient."""

    def _override_session():
        yield session

    app.dependency_overrides[get_session] = _override_session
    app.dependency_overrides[get_object_store] = lambda: store
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture()
def worker_headers():
    return {"X-Worker-Token": WORKER_TOKEN}
