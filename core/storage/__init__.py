"""Document storage backends."""

import re
import time
import uuid
from pathlib import PurePosixPath
from typing import Optional, Protocol

from core.config import Settings


class DocumentStore(Protocol):
    """Durable blob storage returning stable retrieval URLs."""

    async def store(
        self,
        file_data: bytes,
        filename_hint: str,
        category: str,
        original_filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str: ...

    async def delete(self, url: str) -> bool: ...


def build_object_name(filename_hint: str, original_filename: Optional[str] = None) -> str:
    """Create a collision-free, filesystem-safe object name.

    Args:
        filename_hint: Human readable stem, e.g. the candidate's name
        original_filename: Uploaded filename, used for the extension

    Returns:
        Name like ``alice_smith_1718000000000_1a2b3c4d.pdf``
    """
    safe = re.sub(r"[^a-z0-9]", "_", (filename_hint or "").lower()).strip("_") or "document"
    suffix = PurePosixPath(original_filename).suffix.lower() if original_filename else ""
    if not re.fullmatch(r"\.[a-z0-9]{1,8}", suffix or ""):
        suffix = ""
    timestamp = int(time.time() * 1000)
    return f"{safe[:64]}_{timestamp}_{uuid.uuid4().hex[:8]}{suffix}"


def get_document_store(settings: Settings) -> DocumentStore:
    """Build the configured document store."""
    if settings.storage_backend == "s3":
        from core.storage.s3 import S3Storage

        return S3Storage(
            bucket_name=settings.aws_s3_bucket,
            region=settings.aws_region,
            access_key_id=settings.aws_access_key_id,
            secret_access_key=settings.aws_secret_access_key,
        )

    from core.storage.local import LocalStorage

    return LocalStorage(
        base_path=settings.local_storage_path,
        base_url=settings.local_storage_base_url,
    )


__all__ = ["DocumentStore", "build_object_name", "get_document_store"]
