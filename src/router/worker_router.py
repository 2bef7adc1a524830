from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlmodel import Session

from core.dependencies import require_worker
from model.database import get_session
from model.job import JobStatus
from service import job_service

# 이미지 변환 워커 전용. 일반 클라이언트용 라우트가 아니다.
router = APIRouter(
    prefix="/internal/jobs",
    tags=["worker"],
    dependencies=[Depends(require_worker)],
)


class StatusUpdateRequest(BaseModel):
    status: JobStatus
    resultFileKey: str | None = None


class JobRecordResponse(BaseModel):
    id: str
    status: JobStatus
    originalImageKey: str
    resultFileKey: str | None = None


@router.patch("/{job_id}", response_model=JobRecordResponse)
def update_job_status(
    job_id: str,
    req: StatusUpdateRequest,
    session: Session = Depends(get_session),
):
    """워커가 처리 진행/완료/실패를 기록한다.

    QUEUED → PROCESSING → COMPLETED | FAILED 순으로만 이동 가능.
    """
    job = job_service.update_job_status(session, job_id, req.status, req.resultFileKey)
    return JobRecordResponse(
        id=job.id,
        status=job.status,
        originalImageKey=job.original_image_key,
        resultFileKey=job.result_file_key,
    )
