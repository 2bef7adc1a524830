"""앱 전역 커스텀 예외 클래스.

AppException을 상속하면 전역 핸들러(error_handlers.py)가 자동으로
{"error": "..."} 형식의 JSON 응답을 생성한다.
"""


class AppException(Exception):
    """앱 전역 베이스 예외.

    서브클래스에서 status_code, message를 클래스 변수로 정의하면
    전역 핸들러가 해당 값을 읽어 HTTP 응답을 생성한다.
    """

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        if message:
            self.message = message
        super().__init__(self.message)


# --- 업로드 / 조회 ---


class NoImageUploaded(AppException):
    status_code = 400
    message = "No image uploaded"


class JobNotFound(AppException):
    status_code = 404
    message = "Job not found"


class JobResultUnavailable(AppException):
    """COMPLETED인데 result_file_key가 없는 행. 워커 쪽 불변식 위반."""

    status_code = 500
    message = "Job result unavailable"


# --- 인프라 (원인은 서버 로그에만 남기고 응답은 일반 메시지) ---


class StorageError(AppException):
    status_code = 500
    message = "Internal server error"


class DatabaseError(AppException):
    status_code = 500
    message = "Internal server error"


# --- 워커 상태 전이 ---


class InvalidStatusTransition(AppException):
    status_code = 409
    message = "Invalid status transition"


class MissingResultKey(AppException):
    status_code = 400
    message = "resultFileKey is required for COMPLETED"


class InvalidWorkerToken(AppException):
    status_code = 401
    message = "Invalid worker token"


class WorkerApiDisabled(AppException):
    status_code = 403
    message = "Worker API is disabled"
