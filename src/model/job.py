from enum import Enum

from sqlalchemy import Column
from sqlalchemy import Enum as SAEnum
from sqlmodel import Field, SQLModel


class JobStatus(str, Enum):
    QUEUED = "QUEUED"
    PROCESSING = "PROCESSING"
    FAILED = "FAILED"
    COMPLETED = "COMPLETED"


# 허용되는 상태 전이. COMPLETED / FAILED는 종료 상태.
ALLOWED_TRANSITIONS: dict[JobStatus, frozenset[JobStatus]] = {
    JobStatus.QUEUED: frozenset(
        {JobStatus.PROCESSING, JobStatus.COMPLETED, JobStatus.FAILED}
    ),
    JobStatus.PROCESSING: frozenset({JobStatus.COMPLETED, JobStatus.FAILED}),
    JobStatus.COMPLETED: frozenset(),
    JobStatus.FAILED: frozenset(),
}


class Job(SQLModel, table=True):
    # 스키마는 외부에서 관리된다 (테이블명 Jobs, 컬럼 4개)
    __tablename__ = "Jobs"  # type: ignore[assignment]

    id: str = Field(primary_key=True, max_length=36)
    status: JobStatus = Field(
        default=JobStatus.QUEUED,
        sa_column=Column(
            SAEnum(JobStatus, native_enum=False, length=20), nullable=False
        ),
    )
    original_image_key: str = Field(max_length=1024)
    result_file_key: str | None = Field(default=None, max_length=1024)
