import logging
import os
import re
import uuid
from typing import Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from devexchange.core.config import settings
from devexchange.core.errors import StorageError

logger = logging.getLogger(__name__)

CONTENT_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".bmp": "image/bmp",
    ".webp": "image/webp",
}

MISSING_OBJECT_CODES = {"404", "NoSuchKey", "NotFound"}


def folder_for(category_name: str) -> str:
    return re.sub(r"[\\/ ]", "-", category_name.strip().lower())


def content_type_for(file_name: str) -> str:
    return CONTENT_TYPES.get(os.path.splitext(file_name)[1].lower(), "application/octet-stream")


class S3StorageService:
    """Image objects in one S3 bucket, keyed ``<folder>/<filename>``."""

    def __init__(self):
        self._s3_client = None

    def _ensure_initialized(self):
        """Lazy initialization of the S3 client"""
        if self._s3_client is not None:
            return
        if not settings.S3_BUCKET_NAME:
            raise StorageError("Image storage is not configured")

        options = {"region_name": settings.AWS_REGION}
        if settings.AWS_ACCESS_KEY_ID and settings.AWS_SECRET_ACCESS_KEY:
            options["aws_access_key_id"] = settings.AWS_ACCESS_KEY_ID
            options["aws_secret_access_key"] = settings.AWS_SECRET_ACCESS_KEY
        if settings.S3_ENDPOINT_URL:
            options["endpoint_url"] = settings.S3_ENDPOINT_URL
        self._s3_client = boto3.client("s3", **options)

    @property
    def s3_client(self):
        self._ensure_initialized()
        return self._s3_client

    @property
    def bucket_name(self) -> str:
        return settings.S3_BUCKET_NAME

    @property
    def public_base_url(self) -> str:
        if settings.S3_PUBLIC_BASE_URL:
            return settings.S3_PUBLIC_BASE_URL.rstrip("/")
        return f"https://{settings.S3_BUCKET_NAME}.s3.{settings.AWS_REGION}.amazonaws.com"

    @staticmethod
    def object_key(folder: str, filename: str) -> str:
        return f"{folder.strip().strip('/')}/{filename.strip()}"

    @staticmethod
    def new_file_name(original_name: str) -> str:
        return f"{uuid.uuid4()}{os.path.splitext(original_name or '')[1].lower()}"

    def public_url(self, key: str) -> str:
        return f"{self.public_base_url}/{key}"

    def key_for_url(self, url: str) -> Optional[str]:
        """Object key behind a URL returned by ``upload_file``, or None for foreign URLs."""
        prefix = f"{self.public_base_url}/"
        if not url or not url.startswith(prefix):
            return None
        return url[len(prefix):] or None

    def upload_file(self, file_data: bytes, content_type: str, folder: str, filename: Optional[str] = None) -> str:
        """Upload ``file_data`` and return its public URL."""
        key = self.object_key(folder, filename or str(uuid.uuid4()))
        extra = {"ACL": settings.S3_OBJECT_ACL} if settings.S3_OBJECT_ACL else {}
        try:
            self.s3_client.put_object(
                Bucket=self.bucket_name,
                Key=key,
                Body=file_data,
                ContentType=content_type,
                **extra,
            )
        except (BotoCoreError, ClientError) as e:
            logger.error("Upload of %s failed: %s", key, e)
            raise StorageError("Failed to upload image") from e
        logger.info("Stored %s (%d bytes)", key, len(file_data))
        return self.public_url(key)

    def exists(self, key: str) -> bool:
        try:
            self.s3_client.head_object(Bucket=self.bucket_name, Key=key)
        except ClientError as e:
            if e.response.get("Error", {}).get("Code") in MISSING_OBJECT_CODES:
                return False
            raise StorageError("Failed to read image") from e
        return True

    def delete_file(self, key: str) -> bool:
        """Remove ``key``; False when there was nothing to remove."""
        if not self.exists(key):
            return False
        try:
            self.s3_client.delete_object(Bucket=self.bucket_name, Key=key)
        except (BotoCoreError, ClientError) as e:
            raise StorageError("Failed to delete image") from e
        logger.info("Deleted %s", key)
        return True


storage = S3StorageService()
