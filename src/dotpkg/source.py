"""Source plugin interface and a JSON-file backed implementation.

A source plugin supplies the schema once and then a sequence of document
store snapshots: a single one for a build, one per change in watch mode.
Fetch failures are yielded as SourceFetchDataError values so a watch loop can
report them and carry on with the next snapshot.
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from dotpkg.errors import SourceFetchDataError, SourceProvideSchemaError
from dotpkg.schema import DataCache, PluginOptions, SchemaDef

logger = logging.getLogger(__name__)


class SourcePlugin(Protocol):
    """What the generator needs from a content source."""

    type: str
    options: PluginOptions

    async def provide_schema(self) -> SchemaDef:
        """Return the schema. Raises SourceProvideSchemaError on failure."""
        ...

    def fetch_data(
        self, schema_def: SchemaDef, *, verbose: bool, cwd: Path
    ) -> AsyncIterator[DataCache | SourceFetchDataError]:
        """Yield document store snapshots (or fetch errors) for schema_def."""
        ...


class JsonSnapshotSource:
    """Source plugin reading a schema and one snapshot from JSON files.

    The files use the layout of the debug dump (`cache/schema.json` and
    `cache/data-cache.json`), so a dumped pass can be replayed.

    Attributes:
        schema_path: Path to the schema JSON file.
        data_path: Path to the data cache JSON file.
        options: Plugin options, including the discriminant field name.
    """

    type = "json"

    def __init__(
        self,
        schema_path: Path,
        data_path: Path,
        options: PluginOptions | None = None,
    ):
        self.schema_path = Path(schema_path)
        self.data_path = Path(data_path)
        self.options = options or PluginOptions()

    async def provide_schema(self) -> SchemaDef:
        try:
            text = await asyncio.to_thread(self.schema_path.read_text, encoding="utf-8")
            return SchemaDef.model_validate_json(text)
        except (OSError, ValidationError) as e:
            raise SourceProvideSchemaError(
                f"Failed to load schema from {self.schema_path}: {e}", e
            ) from e

    async def fetch_data(
        self, schema_def: SchemaDef, *, verbose: bool = False, cwd: Path | None = None
    ) -> AsyncIterator[DataCache | SourceFetchDataError]:
        try:
            text = await asyncio.to_thread(self.data_path.read_text, encoding="utf-8")
            cache = DataCache.model_validate_json(text)
        except (OSError, ValidationError) as e:
            yield SourceFetchDataError(f"Failed to load documents from {self.data_path}: {e}", e)
            return

        if verbose:
            logger.info(f"Loaded {cache.document_count} documents from {self.data_path}")
        yield cache
