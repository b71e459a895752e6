"""
S3-compatible object storage for employee files.

Objects are addressed by a key stored on the owning row (e.g.
``Employee.picture``); clients never receive the key itself, only a
time-limited presigned URL.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from app.config import get_settings

logger = logging.getLogger(__name__)


class ObjectStorage:
    def __init__(self, client: Any, bucket: str, url_expires: int = 3600):
        self.client = client
        self.bucket = bucket
        self.url_expires = url_expires

    def upload_file(self, key: str, data: bytes, content_type: str | None = None) -> str:
        extra: dict[str, Any] = {}
        if content_type:
            extra["ContentType"] = content_type
        try:
            self.client.put_object(Bucket=self.bucket, Key=key, Body=data, **extra)
        except (BotoCoreError, ClientError):
            logger.exception("Upload failed for key '%s'", key)
            raise
        return key

    def get_file_url(self, key: str) -> str:
        """Return a presigned GET URL rendered inline by browsers."""
        try:
            return self.client.generate_presigned_url(
                "get_object",
                Params={
                    "Bucket": self.bucket,
                    "Key": key,
                    "ResponseContentDisposition": "inline",
                },
                ExpiresIn=self.url_expires,
            )
        except (BotoCoreError, ClientError):
            logger.exception("Could not sign URL for key '%s'", key)
            raise

    def delete_file(self, key: str) -> None:
        try:
            self.client.delete_object(Bucket=self.bucket, Key=key)
        except (BotoCoreError, ClientError):
            logger.exception("Delete failed for key '%s'", key)
            raise


@lru_cache
def _default_storage() -> ObjectStorage:
    settings = get_settings()
    client = boto3.client(
        "s3",
        region_name=settings.AWS_REGION,
        endpoint_url=settings.AWS_ENDPOINT,
        aws_access_key_id=settings.AWS_ACCESS_KEY_ID,
        aws_secret_access_key=settings.AWS_SECRET_ACCESS_KEY,
        config=Config(s3={"addressing_style": "path"}, signature_version="s3v4"),
    )
    return ObjectStorage(client, settings.AWS_BUCKET, settings.SIGNED_URL_EXPIRES)


def get_storage() -> ObjectStorage:
    """FastAPI dependency returning the shared storage client."""
    return _default_storage()
