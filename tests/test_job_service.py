"""job_service 단위 테스트 (키 생성, 상태 전이)."""

import pytest
from sqlalchemy.dialects import mysql
from sqlmodel import Session

from core.exceptions import InvalidStatusTransition, JobNotFound, MissingResultKey
from model.job import Job, JobStatus
from service.job_service import (
    build_upload_key,
    sanitize_filename,
    select_job_for_update,
    update_job_status,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("cat.png", "cat.png"),
        ("my photo (1).jpg", "my_photo__1_.jpg"),
        ("../../secret.png", "secret.png"),
        ("C:\\Users\\me\\pic.gif", "pic.gif"),
        (".hidden", "hidden"),
        ("..", "image"),
        ("", "image"),
        (None, "image"),
        ("고양이.png", "___.png"),
    ],
)
def test_sanitize_filename(raw, expected):
    assert sanitize_filename(raw) == expected


def test_sanitize_filename_truncates():
    assert len(sanitize_filename("a" * 500 + ".png")) == 128


def test_build_upload_key():
    assert build_upload_key("abc", "x/y.png") == "uploads/abc-y.png"


def _add_job(session, status: JobStatus = JobStatus.QUEUED) -> Job:
    job = Job(id="job-1", status=status, original_image_key="uploads/job-1-a.png")
    session.add(job)
    session.commit()
    return job


class TestUpdateJobStatus:
    def test_full_lifecycle(self, session):
        _add_job(session)
        job = update_job_status(session, "job-1", JobStatus.PROCESSING)
        assert job.status == JobStatus.PROCESSING

        job = update_job_status(session, "job-1", JobStatus.COMPLETED, "results/job-1.png")
        assert job.status == JobStatus.COMPLETED
        assert job.result_file_key == "results/job-1.png"

    def test_queued_can_fail_directly(self, session):
        _add_job(session)
        job = update_job_status(session, "job-1", JobStatus.FAILED)
        assert job.status == JobStatus.FAILED
        assert job.result_file_key is None

    def test_completed_requires_result_key(self, session):
        _add_job(session, JobStatus.PROCESSING)
        with pytest.raises(MissingResultKey):
            update_job_status(session, "job-1", JobStatus.COMPLETED)
        assert session.get(Job, "job-1").status == JobStatus.PROCESSING

    @pytest.mark.parametrize(
        ("current", "target"),
        [
            (JobStatus.COMPLETED, JobStatus.PROCESSING),
            (JobStatus.COMPLETED, JobStatus.FAILED),
            (JobStatus.FAILED, JobStatus.COMPLETED),
            (JobStatus.PROCESSING, JobStatus.QUEUED),
            (JobStatus.QUEUED, JobStatus.QUEUED),
        ],
    )
    def test_rejected_transitions(self, session, current, target):
        _add_job(session, current)
        with pytest.raises(InvalidStatusTransition) as exc_info:
            update_job_status(session, "job-1", target, "results/x.png")
        assert exc_info.value.message == (
            f"Invalid status transition: {current.value} -> {target.value}"
        )

    def test_unknown_job(self, session):
        with pytest.raises(JobNotFound):
            update_job_status(session, "nope", JobStatus.PROCESSING)


class TestTransitionLocking:
    def test_row_is_locked_on_mysql(self):
        """MySQL에서는 SELECT ... FOR UPDATE로 행을 잠근다."""
        sql = str(select_job_for_update("job-1").compile(dialect=mysql.dialect()))
        assert "FOR UPDATE" in sql

    def test_transition_checks_latest_status(self, session):
        """다른 세션이 먼저 COMPLETED로 바꿨다면, 캐시된 QUEUED가 아니라
        최신 상태 기준으로 판정해서 FAILED 덮어쓰기를 거부한다."""
        _add_job(session)
        cached = session.get(Job, "job-1")
        assert cached.status == JobStatus.QUEUED

        with Session(session.get_bind()) as other:
            update_job_status(other, "job-1", JobStatus.COMPLETED, "results/job-1.png")

        with pytest.raises(InvalidStatusTransition) as exc_info:
            update_job_status(session, "job-1", JobStatus.FAILED)
        assert exc_info.value.message == "Invalid status transition: COMPLETED -> FAILED"
        assert session.get(Job, "job-1").status == JobStatus.COMPLETED
