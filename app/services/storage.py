"""Object storage for property photos."""

import time
import uuid
from dataclasses import dataclass
from typing import BinaryIO
from urllib.parse import quote

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from app.core.exceptions import UploadFailedError
from app.core.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class StoredPhoto:
    """Location of an uploaded object."""

    key: str
    url: str


class PhotoStorage:
    """Uploads photos to an S3 bucket and hands back their public URLs."""

    def __init__(self, bucket: str, region: str, client=None) -> None:
        self.bucket = bucket
        self.region = region
        self.client = client if client is not None else boto3.client("s3", region_name=region)

    @staticmethod
    def build_key(filename: str) -> str:
        """Timestamped key under properties/, unique even for repeated filenames."""
        stamp = int(time.time() * 1000)
        return f"properties/{stamp}-{uuid.uuid4().hex[:8]}-{filename}"

    def url_for(self, key: str) -> str:
        return f"https://{self.bucket}.s3.{self.region}.amazonaws.com/{quote(key)}"

    def upload(self, fileobj: BinaryIO, filename: str, content_type: str | None) -> StoredPhoto:
        """
        Upload one file.

        Raises:
            UploadFailedError: If the storage service rejects the upload

        """
        key = self.build_key(filename)
        extra_args = {"ContentType": content_type} if content_type else {}
        try:
            self.client.upload_fileobj(fileobj, self.bucket, key, ExtraArgs=extra_args)
        except (BotoCoreError, ClientError) as exc:
            logger.error("Upload of %s to bucket %s failed: %s", filename, self.bucket, exc)
            raise UploadFailedError(f"Failed to upload {filename}") from exc
        return StoredPhoto(key=key, url=self.url_for(key))

    def delete(self, keys: list[str]) -> None:
        """Remove previously uploaded objects."""
        if not keys:
            return
        self.client.delete_objects(
            Bucket=self.bucket,
            Delete={"Objects": [{"Key": key} for key in keys], "Quiet": True},
        )

    def close(self) -> None:
        self.client.close()
