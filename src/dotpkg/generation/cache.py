"""Process-lifetime record of which files have been written.

The cache maps absolute output paths to the document hash last written there.
It is never persisted: a fresh process starts empty and rewrites everything
once, after which unchanged documents are skipped.
"""

from collections.abc import Iterable, Iterator
from pathlib import Path


class WrittenFilesCache:
    """Remembers the document hash last written to each output path."""

    def __init__(self) -> None:
        self._entries: dict[Path, str] = {}

    def is_up_to_date(self, file_path: Path, document_hash: str | None) -> bool:
        """Return True when the file at file_path already holds document_hash.

        Files written without a document hash are never up to date.
        """
        if document_hash is None:
            return False
        return self._entries.get(Path(file_path)) == document_hash

    def record(self, file_path: Path, document_hash: str) -> None:
        self._entries[Path(file_path)] = document_hash

    def get(self, file_path: Path) -> str | None:
        return self._entries.get(Path(file_path))

    def prune(self, paths_to_keep: Iterable[Path]) -> list[Path]:
        """Drop entries whose path is not in paths_to_keep.

        Returns:
            The removed paths, sorted.
        """
        keep = {Path(p) for p in paths_to_keep}
        removed = sorted(path for path in self._entries if path not in keep)
        for path in removed:
            del self._entries[path]
        return removed

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, file_path: object) -> bool:
        return isinstance(file_path, (str, Path)) and Path(file_path) in self._entries

    def __iter__(self) -> Iterator[Path]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
