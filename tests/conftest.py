"""Shared pytest fixtures for all tests."""

from pathlib import Path

import pytest

from dotpkg.config import Config, PathsConfig, load_settings
from dotpkg.errors import WriteFileError
from dotpkg.generation.filesystem import LocalFileSystem
from dotpkg.schema import CacheItem, DataCache, DocumentTypeDef, PluginOptions, SchemaDef


class RecordingFileSystem(LocalFileSystem):
    """LocalFileSystem that records every call and can fail chosen writes."""

    def __init__(self):
        self.writes: list[Path] = []
        self.directories: list[Path] = []
        self.removed: list[Path] = []
        self.fail_writes: set[Path] = set()

    async def ensure_directory(self, path: Path) -> None:
        self.directories.append(Path(path))
        await super().ensure_directory(path)

    async def write_file(self, path: Path, content: str) -> None:
        if Path(path) in self.fail_writes:
            raise WriteFileError(f"Simulated failure writing {path}", path)
        self.writes.append(Path(path))
        await super().write_file(path, content)

    async def remove_file(self, path: Path) -> None:
        self.removed.append(Path(path))
        await super().remove_file(path)

    def reset(self) -> None:
        self.writes.clear()
        self.directories.clear()
        self.removed.clear()


class StaticSource:
    """Source plugin serving a fixed schema and list of snapshots."""

    type = "static"

    def __init__(self, schema_def, snapshots, options: PluginOptions | None = None):
        self.schema_def = schema_def
        self.snapshots = list(snapshots)
        self.options = options or PluginOptions()
        self.fetch_calls = 0

    async def provide_schema(self) -> SchemaDef:
        if isinstance(self.schema_def, Exception):
            raise self.schema_def
        return self.schema_def

    async def fetch_data(self, schema_def, *, verbose=False, cwd=None):
        self.fetch_calls += 1
        for snapshot in self.snapshots:
            yield snapshot


def build_schema(**types: bool) -> SchemaDef:
    """Build a schema from type name -> is_singleton keyword arguments."""
    return SchemaDef(
        document_type_def_map={
            name: DocumentTypeDef(name=name, is_singleton=is_singleton)
            for name, is_singleton in types.items()
        }
    )


def build_cache(*documents: tuple[str, str, str], type_field: str = "type") -> DataCache:
    """Build a snapshot from (document_id, type_name, document_hash) tuples."""
    return DataCache(
        cache_items_map={
            document_id: CacheItem(
                document={"_id": document_id, type_field: type_name, "title": document_id},
                document_hash=document_hash,
            )
            for document_id, type_name, document_hash in documents
        }
    )


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Clear the load_settings cache around each test."""
    load_settings.cache_clear()
    yield
    load_settings.cache_clear()


@pytest.fixture
def make_schema():
    return build_schema


@pytest.fixture
def make_cache():
    return build_cache


@pytest.fixture
def settings(tmp_path: Path) -> Config:
    """Settings writing the package to tmp_path/out."""
    return Config(cwd=tmp_path, paths=PathsConfig(artifacts_dir="out"))


@pytest.fixture
def filesystem() -> RecordingFileSystem:
    return RecordingFileSystem()


@pytest.fixture
def static_source():
    """Factory for StaticSource plugins."""
    return StaticSource
