"""Filesystem primitives used by the generator.

The generator only touches disk through a FileSystem so tests can count or
fail individual operations. LocalFileSystem runs the blocking calls in worker
threads, letting a pass issue many writes concurrently.
"""

import asyncio
from pathlib import Path
from typing import Protocol

from dotpkg.errors import MkdirError, WriteFileError


class FileSystem(Protocol):
    """Operations the generator needs from the output filesystem."""

    async def ensure_directory(self, path: Path) -> None:
        """Create path and its parents. An existing directory is not an error."""
        ...

    async def write_file(self, path: Path, content: str) -> None:
        """Write content to path as UTF-8, replacing any existing file."""
        ...

    async def remove_file(self, path: Path) -> None:
        """Delete the file at path. A missing file is not an error."""
        ...


def _mkdir(path: Path) -> None:
    try:
        path.mkdir(parents=True, exist_ok=True)
    except FileExistsError:
        # A regular file sits where the directory should be
        if not path.is_dir():
            raise


class LocalFileSystem:
    """FileSystem backed by the local disk."""

    async def ensure_directory(self, path: Path) -> None:
        try:
            await asyncio.to_thread(_mkdir, Path(path))
        except OSError as e:
            raise MkdirError(f"Failed to create directory {path}: {e}", path, e) from e

    async def write_file(self, path: Path, content: str) -> None:
        try:
            await asyncio.to_thread(Path(path).write_text, content, encoding="utf-8")
        except OSError as e:
            raise WriteFileError(f"Failed to write {path}: {e}", path, e) from e

    async def remove_file(self, path: Path) -> None:
        try:
            await asyncio.to_thread(Path(path).unlink, missing_ok=True)
        except OSError as e:
            raise WriteFileError(f"Failed to remove {path}: {e}", path, e) from e
