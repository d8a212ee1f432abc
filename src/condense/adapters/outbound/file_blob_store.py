"""File-based Blob Store implementation.

This adapter implements the BlobStore protocol with one file per table.

Writes go to a temporary file in the same directory which is then
renamed over the target. A reader therefore sees the previous contents
or the new contents, never a half-written file. A crash mid-write can
leave a stray ``*.tmp`` file next to the table; it is never read.

Rewrites keep the permission bits of the existing file. A table file
created by this adapter starts as owner read/write only (0600).

Thread Safety:
    None. Two processes writing the same table race and the last rename
    wins, silently discarding the other's update.
"""

from __future__ import annotations

import os
import stat
import tempfile
from pathlib import Path

TEMP_SUFFIX = ".tmp"


class FileBlobStore:
    """File-backed implementation of the BlobStore protocol.

    Attributes:
        path: Path of the table file.
    """

    def __init__(self, path: str | Path, fsync: bool = True) -> None:
        """Initialize the blob store.

        Args:
            path: Path of the table file. It does not need to exist yet.
            fsync: If True, flush file contents to stable storage before
                the rename.
        """
        self._path = Path(path)
        self._fsync = fsync

    @classmethod
    def for_table(
        cls,
        name: str,
        directory: str | Path,
        suffix: str = ".dat",
        fsync: bool = True,
    ) -> FileBlobStore:
        """Locate the file of table ``name`` inside ``directory``.

        ``directory`` may carry a trailing separator or not.
        """
        return cls(Path(directory) / f"{name}{suffix}", fsync=fsync)

    @property
    def path(self) -> Path:
        """Path of the table file."""
        return self._path

    @property
    def location(self) -> str:
        return str(self._path)

    def exists(self) -> bool:
        return self._path.is_file()

    def read(self) -> bytes | None:
        """Read the whole file, or None if it does not exist."""
        try:
            return self._path.read_bytes()
        except FileNotFoundError:
            return None

    def write(self, data: bytes) -> None:
        """Replace the file contents via a temporary file and rename."""
        self._path.parent.mkdir(parents=True, exist_ok=True)

        fd, temp_name = tempfile.mkstemp(
            dir=self._path.parent,
            prefix=f"{self._path.name}.",
            suffix=TEMP_SUFFIX,
        )
        try:
            with os.fdopen(fd, "wb") as temp_file:
                temp_file.write(data)
                temp_file.flush()
                if self._fsync:
                    os.fsync(temp_file.fileno())
            self._copy_mode(temp_name)
            os.replace(temp_name, self._path)
        except BaseException:
            if os.path.exists(temp_name):
                os.remove(temp_name)
            raise

    def _copy_mode(self, temp_name: str) -> None:
        # New table files keep the owner-only mode mkstemp creates them with.
        try:
            mode = stat.S_IMODE(self._path.stat().st_mode)
        except FileNotFoundError:
            return
        os.chmod(temp_name, mode)

    def delete(self) -> bool:
        try:
            self._path.unlink()
        except FileNotFoundError:
            return False
        return True

    def __repr__(self) -> str:
        return f"FileBlobStore({str(self._path)!r})"
