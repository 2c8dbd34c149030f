"""Selective writing of planned artifacts.

Files that carry a document hash are skipped when the WrittenFilesCache says
the same hash was already written to the same path. Everything else is
rewritten on every pass.
"""

import asyncio
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from dotpkg.errors import GenerationError, WriteFileError
from dotpkg.generation.cache import WrittenFilesCache
from dotpkg.generation.filesystem import FileSystem
from dotpkg.generation.planner import Artifact

logger = logging.getLogger(__name__)


@dataclass
class WriteReport:
    """Summary of one selective write stage.

    Attributes:
        written: Absolute paths that were written, sorted.
        skipped: Number of artifacts skipped because they were up to date.
    """

    written: list[Path] = field(default_factory=list)
    skipped: int = 0

    @property
    def written_count(self) -> int:
        return len(self.written)


async def write_file_if_changed(
    file_path: Path,
    content: str,
    document_hash: str | None = None,
    *,
    cache: WrittenFilesCache,
    filesystem: FileSystem,
) -> bool:
    """Write a file unless the cache shows its document is already on disk.

    Without a document hash the file is always written and the cache is left
    alone. With one, the hash is recorded only after the write succeeded, so a
    failed write is simply retried on the next pass.

    Args:
        file_path: Absolute output path.
        content: File content.
        document_hash: Fingerprint of the document the file was rendered from.
        cache: Write cache owned by the caller.
        filesystem: Filesystem to write through.

    Returns:
        True if the file was written, False if it was skipped.
    """
    if cache.is_up_to_date(file_path, document_hash):
        return False

    await filesystem.write_file(file_path, content)
    if document_hash is not None:
        cache.record(file_path, document_hash)
    return True


async def write_artifacts(
    artifacts: Iterable[Artifact],
    *,
    target_path: Path,
    cache: WrittenFilesCache,
    filesystem: FileSystem,
) -> WriteReport:
    """Write all artifacts concurrently, skipping up-to-date document files.

    All writes run to completion even if some fail. Files already written stay
    on disk; rewriting them on the next pass is harmless.

    Args:
        artifacts: Planned artifacts with paths relative to target_path.
        target_path: Artifacts directory.
        cache: Write cache owned by the caller.
        filesystem: Filesystem to write through.

    Returns:
        WriteReport of written and skipped files.

    Raises:
        WriteFileError: If any write failed (the first failure in plan order).
    """
    artifacts = list(artifacts)
    paths = [target_path / artifact.file_path for artifact in artifacts]

    results = await asyncio.gather(
        *(
            write_file_if_changed(
                path,
                artifact.content,
                artifact.document_hash,
                cache=cache,
                filesystem=filesystem,
            )
            for path, artifact in zip(paths, artifacts)
        ),
        return_exceptions=True,
    )

    report = WriteReport()
    failures: list[GenerationError] = []
    for path, result in zip(paths, results):
        if isinstance(result, GenerationError):
            failures.append(result)
        elif isinstance(result, Exception):
            failures.append(WriteFileError(f"Failed to write {path}: {result}", path, result))
        elif isinstance(result, BaseException):
            raise result
        elif result:
            report.written.append(path)
        else:
            report.skipped += 1

    report.written.sort()

    if failures:
        for failure in failures:
            logger.error(f"Write failed: {failure}")
        raise failures[0]

    logger.debug(f"Wrote {report.written_count} files, {report.skipped} unchanged")
    return report
