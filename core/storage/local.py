"""Local file storage utilities."""

import asyncio
from pathlib import Path
from typing import Optional
import logging

from core.exceptions import StorageFailure
from core.storage import build_object_name

logger = logging.getLogger(__name__)


class LocalStorage:
    """Local file storage handler."""

    def __init__(self, base_path: str = "./storage", base_url: str = "http://localhost:8000/files"):
        """
        Initialize local storage.

        Args:
            base_path: Base directory for file storage
            base_url: Public URL prefix the base directory is served under
        """
        self.base_path = Path(base_path)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.base_url = base_url.rstrip("/")

    async def store(
        self,
        file_data: bytes,
        filename_hint: str,
        category: str,
        original_filename: Optional[str] = None,
        content_type: Optional[str] = None,
    ) -> str:
        """
        Save a document and return its retrieval URL.

        Args:
            file_data: File contents
            filename_hint: Readable stem for the stored name
            category: Subfolder, e.g. ``cvs`` or ``recordings``
            original_filename: Uploaded filename, used for the extension
            content_type: MIME type (unused for local files)

        Returns:
            URL of the stored file
        """
        filename = build_object_name(filename_hint, original_filename)
        try:
            await asyncio.to_thread(self._save, file_data, filename, category)
        except OSError as exc:
            raise StorageFailure(f"Failed to store document: {exc}") from exc
        return f"{self.base_url}/{category}/{filename}"

    async def delete(self, url: str) -> bool:
        """
        Delete a stored document by URL. Never raises.

        Args:
            url: URL previously returned by ``store``

        Returns:
            True if deleted successfully
        """
        relative = self._relative_path(url)
        if relative is None:
            logger.warning(f"Refusing to delete file outside storage: {url}")
            return False
        try:
            return await asyncio.to_thread(self._delete, relative)
        except OSError as exc:
            logger.error(f"Failed to delete file {url}: {exc}")
            return False

    def _save(self, file_data: bytes, filename: str, subfolder: str) -> Path:
        save_path = self.base_path / subfolder
        save_path.mkdir(parents=True, exist_ok=True)

        file_path = save_path / filename
        file_path.write_bytes(file_data)

        logger.info(f"Saved file to {file_path}")
        return file_path

    def _delete(self, relative: Path) -> bool:
        file_path = self.base_path / relative
        if not file_path.exists():
            return False

        file_path.unlink()
        logger.info(f"Deleted file: {file_path}")
        return True

    def _relative_path(self, url: str) -> Optional[Path]:
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        relative = Path(url[len(prefix):])
        if relative.is_absolute() or ".." in relative.parts:
            return None
        return relative
