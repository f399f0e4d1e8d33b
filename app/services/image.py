"""Presigned S3 upload URLs for post images."""

import logging

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.config import Settings
from app.core.errors import ImageStorageError, ImageStorageNotConfiguredError

logger = logging.getLogger(__name__)


class ImageService:
    def __init__(self, settings: Settings):
        self.settings = settings

    def _client(self):
        return boto3.client(
            "s3",
            aws_access_key_id=self.settings.aws_access_key or None,
            aws_secret_access_key=self.settings.aws_secret_key or None,
            region_name=self.settings.aws_region,
        )

    def create_presigned_url(self, object_name: str, content_type: str) -> str:
        """Return a URL the browser can PUT the image to directly"""
        bucket = self.settings.aws_s3_bucket_name
        if not bucket:
            raise ImageStorageNotConfiguredError("create presigned url")
        try:
            url = self._client().generate_presigned_url(
                "put_object",
                Params={
                    "Bucket": bucket,
                    "Key": object_name,
                    "ACL": "public-read",
                    "ContentType": content_type,
                },
                ExpiresIn=self.settings.presigned_url_expire_seconds,
            )
        except (BotoCoreError, ClientError) as e:
            raise ImageStorageError(f"create presigned url key={object_name}") from e
        logger.debug("presigned url issued for %s (%s)", object_name, content_type)
        return url
