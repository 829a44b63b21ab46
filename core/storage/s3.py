"""S3 storage utilities for file operations."""

import aioboto3
from os import environ
from typing import Optional
from urllib.parse import unquote, urlparse
import logging

from core.exceptions import StorageFailure
from core.storage import build_object_name

logger = logging.getLogger(__name__)

KEY_PREFIX = "ats"


def _get_credentials(
    access_key_id: Optional[str] = None,
    secret_access_key: Optional[str] = None,
    region: Optional[str] = None,
) -> dict:
    """Lazily load AWS credentials to avoid import-time failures."""
    access_key = access_key_id or environ.get("AWS_ACCESS_KEY_ID")
    secret_key = secret_access_key or environ.get("AWS_SECRET_ACCESS_KEY")
    region = region or environ.get("AWS_REGION")

    assert access_key, "AWS_ACCESS_KEY_ID not set in environment"
    assert secret_key, "AWS_SECRET_ACCESS_KEY not set in environment"
    assert region, "AWS_REGION not set in environment"

    return {
        "aws_access_key_id": access_key,
        "aws_secret_access_key": secret_key,
        "region_name": region,
    }


class S3Storage:
    """S3 storage handler for async operations."""

    def __init__(
        self,
        bucket_name: Optional[str] = None,
        region: Optional[str] = None,
        access_key_id: Optional[str] = None,
        secret_access_key: Optional[str] = None,
    ):
        """
        Initialize S3 storage.

        Args:
            bucket_name: S3 bucket name (uses env var if not provided)
            region: AWS region (uses env var if not provided)
            access_key_id: AWS access key (uses env var if not provided)
            secret_access_key: AWS secret key (uses env var if not provided)
        """
        self.bucket_name = bucket_name or environ.get("AWS_S3_BUCKET")
        if not self.bucket_name:
            raise ValueError("S3 bucket name not provided and AWS_S3_BUCKET not set")

        self.credentials = _get_credentials(access_key_id, secret_access_key, region)
        self.region = self.credentials["region_name"]

    def url_for(self, key: str) -> str:
        """Public URL of an object key."""
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com/{key}"

    def key_for(self, url: str) -> Optional[str]:
        """Object key of a URL produced by ``url_for``, or None for foreign URLs."""
        parsed = urlparse(url)
        if parsed.netloc != f"{self.bucket_name}.s3.{self.region}.amazonaws.com":
            return None
        key = unquote(parsed.path.lstrip("/"))
        return key or None

    async def store(
        self,
        file_data: bytes,
        filename_hint: str,
        category: str,
        original_filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Upload a document to S3.

        Args:
            file_data: File contents
            filename_hint: Readable stem for the object name
            category: Key folder, e.g. ``cvs`` or ``recordings``
            original_filename: Uploaded filename, used for the extension
            content_type: MIME type of the file

        Returns:
            Public URL of the uploaded object
        """
        key = f"{KEY_PREFIX}/{category}/{build_object_name(filename_hint, original_filename)}"
        upload_args = {
            "Bucket": self.bucket_name,
            "Key": key,
            "Body": file_data,
        }
        if content_type:
            upload_args["ContentType"] = content_type

        try:
            session = aioboto3.Session(**self.credentials)
            async with session.client("s3") as client:
                await client.put_object(**upload_args)
        except Exception as exc:
            raise StorageFailure(f"Failed to upload document: {exc}") from exc

        logger.info(f"Uploaded file to S3: {self.bucket_name}/{key}")
        return self.url_for(key)

    async def delete(self, url: str) -> bool:
        """
        Delete a document from S3 by URL. Never raises.

        Args:
            url: URL previously returned by ``store``

        Returns:
            True if deleted successfully
        """
        key = self.key_for(url)
        if key is None:
            logger.warning(f"Refusing to delete object outside bucket: {url}")
            return False

        try:
            session = aioboto3.Session(**self.credentials)
            async with session.client("s3") as client:
                await client.delete_object(Bucket=self.bucket_name, Key=key)
        except Exception as exc:
            logger.error(f"Failed to delete S3 object {key}: {exc}")
            return False

        logger.info(f"Deleted file from S3: {self.bucket_name}/{key}")
        return True
