"""Stored document files under UPLOAD_DIR.

Documents keep only a relative filename. Anything that resolves outside the
upload directory is treated exactly like a missing file.
"""

import asyncio
from pathlib import Path


class FileStore:
    def __init__(self, upload_dir: str | Path) -> None:
        self._base = Path(upload_dir).resolve()

    def resolve(self, file_ref: str) -> Path | None:
        """Absolute path for ``file_ref``, or None if it escapes the upload dir."""
        candidate = (self._base / file_ref).resolve()
        if candidate == self._base or not candidate.is_relative_to(self._base):
            return None
        return candidate

    def is_safe(self, file_ref: str) -> bool:
        return self.resolve(file_ref) is not None

    async def locate(self, file_ref: str | None) -> Path | None:
        """Existing file for ``file_ref``, or None."""
        if not file_ref:
            return None
        path = self.resolve(file_ref)
        if path is None:
            return None
        exists = await asyncio.to_thread(path.is_file)
        return path if exists else None
