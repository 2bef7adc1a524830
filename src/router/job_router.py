from fastapi import APIRouter, Depends, File, UploadFile, status
from pydantic import BaseModel
from sqlmodel import Session

from core.dependencies import get_object_store
from core.exceptions import NoImageUploaded
from model.database import get_session
from model.job import JobStatus
from service import job_service
from service.object_store import S3ObjectStore

router = APIRouter(tags=["jobs"])


# --- 응답 스키마 ---

class UploadResponse(BaseModel):
    message: str
    jobId: str
    status: JobStatus


class StatusResponse(BaseModel):
    status: JobStatus
    downloadUrl: str | None = None


# --- 엔드포인트 ---

@router.post("/upload", response_model=UploadResponse, status_code=status.HTTP_202_ACCEPTED)
def upload_image(
    image: UploadFile | str | None = File(default=None),
    session: Session = Depends(get_session),
    store: S3ObjectStore = Depends(get_object_store),
):
    """이미지 업로드: S3 저장 → QUEUED 작업 등록 → 202."""
    # 파일이 아닌 텍스트 필드로 온 image도 "업로드 없음"으로 취급
    if not isinstance(image, UploadFile) or not image.filename:
        raise NoImageUploaded

    job = job_service.create_upload_job(
        session, store, image.filename, image.file.read(), image.content_type
    )
    return UploadResponse(
        message="Image uploaded successfully and job queued.",
        jobId=job.id,
        status=job.status,
    )


@router.get("/status/{job_id}", response_model=StatusResponse, response_model_exclude_none=True)
def get_status(
    job_id: str,
    session: Session = Depends(get_session),
    store: S3ObjectStore = Depends(get_object_store),
):
    """작업 상태 조회. COMPLETED면 1시간짜리 다운로드 URL을 함께 반환."""
    return job_service.get_job_status(session, store, job_id)
