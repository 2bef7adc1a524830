"""S3 객체 저장소 래퍼.

boto3 클라이언트 하나를 앱 전체에서 공유한다 (스레드 안전).
botocore 예외는 모두 StorageError로 바꿔서 올려보낸다. 재시도는 하지 않는다.
"""

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError
from loguru import logger

from core.config import Settings
from core.exceptions import StorageError


class S3ObjectStore:
    def __init__(self, client, bucket: str):
        self.client = client
        self.bucket = bucket

    @classmethod
    def from_settings(cls, settings: Settings) -> "S3ObjectStore":
        client = boto3.client(
            "s3",
            region_name=settings.AWS_REGION,
            endpoint_url=settings.AWS_S3_ENDPOINT_URL,
            aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
            aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
            config=Config(signature_version="s3v4"),
        )
        return cls(client, settings.AWS_S3_BUCKET_NAME)

    def put(
        self,
        key: str,
        data: bytes,
        content_type: str,
        metadata: dict[str, str] | None = None,
    ) -> None:
        params = {
            "Bucket": self.bucket,
            "Key": key,
            "Body": data,
            "ContentType": content_type,
        }
        if metadata:
            params["Metadata"] = metadata
        try:
            self.client.put_object(**params)
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"S3 put failed: s3://{self.bucket}/{key}")
            raise StorageError from e
        logger.debug(f"S3 put s3://{self.bucket}/{key} ({len(data)} bytes)")

    def signed_get_url(self, key: str, ttl_seconds: int) -> str:
        """GetObject presigned URL. 객체 존재 여부는 확인하지 않는다."""
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={"Bucket": self.bucket, "Key": key},
                ExpiresIn=ttl_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"S3 presign failed: s3://{self.bucket}/{key}")
            raise StorageError from e

    def delete(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError) as e:
            logger.exception(f"S3 delete failed: s3://{self.bucket}/{key}")
            raise StorageError from e
