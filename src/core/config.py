from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url


class Settings(BaseSettings):
    # 앱 설정
    APP_NAME: str = "asyncart-api"
    APP_VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # 서버 설정
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # S3 설정 (자격증명이 비어 있으면 boto3 기본 체인 사용)
    AWS_REGION: str = "us-east-1"
    AWS_ACCESS_KEY_ID: str | None = None
    AWS_SECRET_ACCESS_KEY: str | None = None
    AWS_S3_BUCKET_NAME: str = "asyncart-uploads"
    AWS_S3_ENDPOINT_URL: str | None = None
    DOWNLOAD_URL_TTL_SECONDS: int = 3600

    # DB 설정 (DATABASE_URL이 있으면 DB_* 값보다 우선)
    DATABASE_URL: str | None = None
    DB_HOST: str = "localhost"
    DB_PORT: int = 3306
    DB_USER: str = "root"
    DB_PASSWORD: str = ""
    DB_NAME: str = "asyncart"
    DB_POOL_SIZE: int = 10
    DB_POOL_TIMEOUT_SECONDS: float = 30.0
    AUTO_CREATE_TABLES: bool = False

    # 업로드 후 INSERT 실패 시 S3 고아 객체 삭제 여부
    ORPHAN_CLEANUP: bool = True

    # 외부 워커용 공유 토큰. 비어 있으면 /internal 라우트 비활성화
    WORKER_API_TOKEN: str = ""

    @property
    def database_url(self) -> URL:
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            "mysql+pymysql",
            username=self.DB_USER,
            password=self.DB_PASSWORD,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()
