import os
import re
import uuid
from urllib.parse import quote

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session, select

from core.config import settings
from core.exceptions import (
    DatabaseError,
    InvalidStatusTransition,
    JobNotFound,
    JobResultUnavailable,
    MissingResultKey,
    StorageError,
)
from model.job import ALLOWED_TRANSITIONS, Job, JobStatus
from service.object_store import S3ObjectStore

UPLOAD_PREFIX = "uploads/"
MAX_FILENAME_LENGTH = 128
MAX_METADATA_LENGTH = 1024
DEFAULT_CONTENT_TYPE = "application/octet-stream"

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


def sanitize_filename(filename: str | None) -> str:
    """업로드 파일명을 S3 키에 안전한 형태로 바꾼다.

    - 경로 구분자(/, \\) 앞부분은 버리고 basename만 사용
    - 허용 문자 외에는 "_"로 치환, 선행 "." 제거
    - 남는 게 없으면 "image"
    """
    name = (filename or "").replace("\\", "/")
    name = os.path.basename(name)
    name = _UNSAFE_CHARS.sub("_", name).lstrip(".")
    name = name[:MAX_FILENAME_LENGTH]
    return name or "image"


def build_upload_key(job_id: str, filename: str | None) -> str:
    return f"{UPLOAD_PREFIX}{job_id}-{sanitize_filename(filename)}"


# --- DB 접근 ---


def insert_job(
    session: Session, job_id: str, status: JobStatus, original_image_key: str
) -> Job:
    job = Job(id=job_id, status=status, original_image_key=original_image_key)
    try:
        session.add(job)
        session.commit()
        session.refresh(job)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Job insert failed: {job_id}")
        raise DatabaseError from e
    return job


def get_job_by_id(session: Session, job_id: str) -> Job | None:
    try:
        return session.get(Job, job_id)
    except SQLAlchemyError as e:
        logger.exception(f"Job lookup failed: {job_id}")
        raise DatabaseError from e


def select_job_for_update(job_id: str):
    """행 잠금(SELECT ... FOR UPDATE) 조회문. SQLite에서는 FOR UPDATE가 생략된다.

    populate_existing: 세션에 이미 있는 객체도 DB 값으로 덮어쓴다.
    """
    return (
        select(Job)
        .where(Job.id == job_id)
        .with_for_update()
        .execution_options(populate_existing=True)
    )


def _lock_job(session: Session, job_id: str) -> Job | None:
    try:
        return session.exec(select_job_for_update(job_id)).first()
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Job lock failed: {job_id}")
        raise DatabaseError from e


def update_job_status(
    session: Session,
    job_id: str,
    status: JobStatus,
    result_file_key: str | None = None,
) -> Job:
    """외부 워커가 호출하는 상태 전이.

    행을 잠근 상태에서 현재 상태를 다시 읽고 검사하므로
    동시에 들어온 두 전이 중 늦은 쪽은 갱신된 상태 기준으로 판정된다.
    ALLOWED_TRANSITIONS에 없는 전이는 InvalidStatusTransition.
    COMPLETED로 갈 때는 result_file_key가 반드시 있어야 한다.
    """
    job = _lock_job(session, job_id)
    if not job:
        session.rollback()
        raise JobNotFound

    if status not in ALLOWED_TRANSITIONS[job.status]:
        current = job.status
        session.rollback()
        raise InvalidStatusTransition(
            f"Invalid status transition: {current.value} -> {status.value}"
        )
    if status == JobStatus.COMPLETED and not result_file_key:
        session.rollback()
        raise MissingResultKey

    job.status = status
    if result_file_key:
        job.result_file_key = result_file_key
    try:
        session.add(job)
        session.commit()
        session.refresh(job)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception(f"Job update failed: {job_id}")
        raise DatabaseError from e

    logger.info(f"Job {job_id} -> {status.value}")
    return job


# --- 요청 단위 흐름 ---


def create_upload_job(
    session: Session,
    store: S3ObjectStore,
    filename: str | None,
    data: bytes,
    content_type: str | None,
) -> Job:
    """업로드 → 작업 등록 (2단계 saga).

    1. S3에 원본 저장 (실패하면 INSERT는 시도하지 않음)
    2. Jobs 테이블에 QUEUED 행 INSERT
    3. 2가 실패하면 ORPHAN_CLEANUP 설정에 따라 1의 객체를 삭제
    """
    job_id = str(uuid.uuid4())
    key = build_upload_key(job_id, filename)

    store.put(
        key,
        data,
        content_type or DEFAULT_CONTENT_TYPE,
        metadata={
            "original-filename": quote(filename or "", safe="")[:MAX_METADATA_LENGTH]
        },
    )

    try:
        job = insert_job(session, job_id, JobStatus.QUEUED, key)
    except DatabaseError:
        _discard_orphan(store, key)
        raise

    logger.info(f"Job {job_id} queued ({key})")
    return job


def _discard_orphan(store: S3ObjectStore, key: str) -> None:
    if not settings.ORPHAN_CLEANUP:
        logger.warning(f"Orphaned upload left in storage: {key}")
        return
    try:
        store.delete(key)
    except StorageError:
        logger.error(f"Orphan cleanup failed, reconcile manually: {key}")
        return
    logger.warning(f"Orphaned upload removed: {key}")


def get_job_status(session: Session, store: S3ObjectStore, job_id: str) -> dict:
    """폴링 응답을 만든다. COMPLETED일 때만 매번 새 다운로드 URL을 발급한다."""
    job = get_job_by_id(session, job_id)
    if not job:
        raise JobNotFound

    if job.status != JobStatus.COMPLETED:
        return {"status": job.status}

    if not job.result_file_key:
        logger.error(f"Job {job_id} is COMPLETED without result_file_key")
        raise JobResultUnavailable

    url = store.signed_get_url(job.result_file_key, settings.DOWNLOAD_URL_TTL_SECONDS)
    return {"status": job.status, "downloadUrl": url}
