"""Клиент S3.

Обертка над сессией aioboto3: отдельный клиент на каждый вызов, содержимое
целиком в памяти. Ошибки botocore пробрасываются как подклассы ObjectStoreError
с исходным сообщением.
"""
import logging
import re
import secrets
import time
from typing import Optional

import aioboto3
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    EndpointConnectionError,
    NoCredentialsError,
    PartialCredentialsError,
)

from docstore.core.config import Settings
from docstore.core.exceptions import (
    BackendUnavailableError,
    ObjectNotFoundError,
    TransportError,
)

logger = logging.getLogger(__name__)

KEY_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9.\-]")
MISSING_OBJECT_CODES = {"NoSuchKey", "404", "NotFound"}
UNAVAILABLE_ERRORS = (EndpointConnectionError, NoCredentialsError, PartialCredentialsError)


class ObjectStoreClient:
    """put / get / delete для одного bucket S3"""

    def __init__(
        self,
        bucket: str,
        region: str = "us-east-1",
        access_key: Optional[str] = None,
        secret_key: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        key_prefix: str = "documents",
        session: Optional[aioboto3.Session] = None,
    ):
        self.bucket = bucket
        self.region = region
        self.access_key = access_key
        self.secret_key = secret_key
        self.endpoint_url = endpoint_url
        self.key_prefix = key_prefix.strip("/")
        self._session = session or aioboto3.Session()

    @classmethod
    def from_settings(cls, settings: Settings) -> "ObjectStoreClient":
        return cls(
            bucket=settings.s3_bucket_name,
            region=settings.aws_region,
            access_key=settings.aws_access_key_id,
            secret_key=settings.aws_secret_access_key,
            endpoint_url=settings.s3_endpoint_url,
            key_prefix=settings.s3_key_prefix,
        )

    def _client(self):
        return self._session.client(
            "s3",
            region_name=self.region,
            aws_access_key_id=self.access_key,
            aws_secret_access_key=self.secret_key,
            endpoint_url=self.endpoint_url,
        )

    async def put(self, key: str, data: bytes, content_type: Optional[str] = None) -> str:
        """Загрузка данных под ключом, возвращает ключ"""
        params = {"Bucket": self.bucket, "Key": key, "Body": data}
        if content_type:
            params["ContentType"] = content_type

        try:
            async with self._client() as s3:
                await s3.put_object(**params)
        except UNAVAILABLE_ERRORS as e:
            logger.error(f"S3 unavailable while uploading {key}: {e}")
            raise BackendUnavailableError(f"Failed to upload file to S3: {e}") from e
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 upload of {key} failed: {e}")
            raise TransportError(f"Failed to upload file to S3: {e}") from e

        logger.info(f"File uploaded to S3: {key}")
        return key

    async def get(self, key: str) -> bytes:
        """Скачивание объекта целиком"""
        try:
            async with self._client() as s3:
                response = await s3.get_object(Bucket=self.bucket, Key=key)
                body = response.get("Body")
                if body is None:
                    raise ObjectNotFoundError(f"No content in S3 response for {key}")
                async with body as stream:
                    return await stream.read()
        except ClientError as e:
            code = e.response.get("Error", {}).get("Code", "")
            if code in MISSING_OBJECT_CODES:
                raise ObjectNotFoundError(f"Object not found in S3: {key}") from e
            logger.error(f"S3 download of {key} failed: {e}")
            raise TransportError(f"Failed to download file from S3: {e}") from e
        except UNAVAILABLE_ERRORS as e:
            logger.error(f"S3 unavailable while downloading {key}: {e}")
            raise BackendUnavailableError(f"Failed to download file from S3: {e}") from e
        except BotoCoreError as e:
            logger.error(f"S3 download of {key} failed: {e}")
            raise TransportError(f"Failed to download file from S3: {e}") from e

    async def delete(self, key: str) -> None:
        try:
            async with self._client() as s3:
                await s3.delete_object(Bucket=self.bucket, Key=key)
        except (ClientError, BotoCoreError) as e:
            logger.error(f"S3 delete of {key} failed: {e}")
            raise TransportError(f"Failed to delete file from S3: {e}") from e

        logger.info(f"File deleted from S3: {key}")

    def generate_key(self, original_name: str) -> str:
        """Уникальный ключ: <prefix>/<millis>-<random hex>-<очищенное имя>"""
        timestamp = int(time.time() * 1000)
        random_part = secrets.token_hex(8)
        sanitized = KEY_UNSAFE_CHARS.sub("_", original_name)
        return f"{self.key_prefix}/{timestamp}-{random_part}-{sanitized}"
