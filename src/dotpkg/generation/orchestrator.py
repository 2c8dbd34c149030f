"""Generation orchestrator for the dotpkg pipeline.

This module provides the GenerationOrchestrator class that runs generation
passes, one per document store snapshot:

1. Resolving inputs - Obtain the schema while creating the artifacts directory
2. Planning - Compute every artifact of the package from the snapshot
3. Ensuring directories - Create the per-type data directories
4. Writing - Write artifacts, skipping document files that are unchanged
5. Done - Report the document count

The orchestrator owns the WrittenFilesCache, so unchanged documents are only
skipped across passes of the same orchestrator (a dev/watch session).
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import aclosing
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Coroutine

from dotpkg.config import Config, load_settings
from dotpkg.constants import DEBUG_DATA_CACHE_FILE, DEBUG_SCHEMA_FILE
from dotpkg.errors import (
    GenerationError,
    MkdirError,
    SourceFetchDataError,
    SourceProvideSchemaError,
)
from dotpkg.generation.cache import WrittenFilesCache
from dotpkg.generation.cleanup import CleanupResult, cleanup_stale_files
from dotpkg.generation.filesystem import FileSystem, LocalFileSystem
from dotpkg.generation.planner import ArtifactPlan, PlanOptions, plan_artifacts
from dotpkg.generation.writer import WriteReport, write_artifacts
from dotpkg.schema import DataCache, SchemaDef
from dotpkg.source import SourcePlugin

logger = logging.getLogger(__name__)


class GenerationPhase(Enum):
    """Phases of one generation pass."""

    IDLE = "idle"
    RESOLVING_INPUTS = "resolving_inputs"
    PLANNING = "planning"
    ENSURING_DIRECTORIES = "ensuring_directories"
    WRITING = "writing"
    DONE = "done"
    FAILED = "failed"


@dataclass
class GenerationProgress:
    """Progress update during generation.

    Attributes:
        phase: Phase the pass just entered.
        message: Human-readable progress message.
        timestamp: Time of progress update.
    """

    phase: GenerationPhase
    message: str = ""
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class GenerateInfo:
    """Summary of a successful pass."""

    document_count: int


@dataclass(frozen=True)
class GenerationOutcome:
    """Outcome of one pass: either info or error is set."""

    info: GenerateInfo | None = None
    error: GenerationError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# Type alias for progress callback
ProgressCallback = Callable[[GenerationProgress], Coroutine[Any, Any, None]]


def log_generate_info(info: GenerateInfo, target_path: Path) -> None:
    logger.info(f"Generated {info.document_count} documents in {target_path}")


class GenerationOrchestrator:
    """Runs generation passes for one source into one artifacts directory.

    Passes are serialized; running two at once on the same orchestrator
    waits for the first to finish.

    Attributes:
        source: Source plugin providing schema and snapshots.
        cwd: Project directory.
        settings: Loaded configuration.
        filesystem: Filesystem used for all output.
        written_files_cache: Document hashes written so far by this orchestrator.
        phase: Phase of the current (or last) pass.
        last_write_report: WriteReport of the last successful pass.
        last_cleanup: CleanupResult of the last successful pass, if cleanup ran.
    """

    def __init__(
        self,
        source: SourcePlugin,
        cwd: Path,
        *,
        settings: Config | None = None,
        filesystem: FileSystem | None = None,
        verbose: bool = False,
        progress_callback: ProgressCallback | None = None,
    ):
        """Initialize the orchestrator.

        Args:
            source: Source plugin providing schema and snapshots.
            cwd: Project directory. Relative artifact paths resolve against it.
            settings: Configuration. Loaded from cwd when omitted.
            filesystem: Filesystem for output. Defaults to LocalFileSystem.
            verbose: Passed on to the source plugin.
            progress_callback: Optional async callback for phase changes.
        """
        self.source = source
        self.cwd = Path(cwd)
        self.settings = settings or load_settings(self.cwd)
        self.filesystem = filesystem or LocalFileSystem()
        self.verbose = verbose
        self.progress_callback = progress_callback

        self.written_files_cache = WrittenFilesCache()
        self.phase = GenerationPhase.IDLE
        self.last_write_report: WriteReport | None = None
        self.last_cleanup: CleanupResult | None = None
        self._pass_lock = asyncio.Lock()

    @property
    def target_path(self) -> Path:
        """Absolute path of the artifacts directory."""
        return self.settings.artifacts_path

    async def run(self) -> GenerateInfo:
        """Run a single pass on the source's first snapshot.

        Returns:
            GenerateInfo of the pass.

        Raises:
            GenerationError: If the pass failed. The subclass tells input,
                filesystem and invariant failures apart.
        """
        async with aclosing(self.stream()) as outcomes:
            async for outcome in outcomes:
                if outcome.error is not None:
                    raise outcome.error
                assert outcome.info is not None
                return outcome.info

        raise SourceFetchDataError("Source plugin did not provide any document snapshot")

    async def stream(self) -> AsyncIterator[GenerationOutcome]:
        """Run one pass per snapshot the source provides.

        Failures of a pass are yielded, not raised, so a watch loop keeps
        going. Failing to resolve the schema or the artifacts directory ends
        the stream after yielding the failure.

        Yields:
            GenerationOutcome per snapshot.
        """
        await self._set_phase(GenerationPhase.RESOLVING_INPUTS, "Resolving schema...")
        try:
            schema_def = await self.resolve_inputs()
        except GenerationError as e:
            yield await self._fail(e)
            return

        snapshots = aiter(
            self.source.fetch_data(schema_def, verbose=self.verbose, cwd=self.cwd)
        )
        while True:
            try:
                snapshot = await anext(snapshots)
            except StopAsyncIteration:
                return
            except GenerationError as e:
                yield await self._fail(e)
                return
            except Exception as e:
                error = SourceFetchDataError(f"Source plugin failed to fetch data: {e}", e)
                yield await self._fail(error)
                return

            if isinstance(snapshot, BaseException):
                error = (
                    snapshot
                    if isinstance(snapshot, GenerationError)
                    else SourceFetchDataError(str(snapshot), snapshot)
                )
                yield await self._fail(error)
                continue

            try:
                info = await self.generate_for_cache(schema_def, snapshot)
            except GenerationError as e:
                yield GenerationOutcome(error=e)
                continue
            yield GenerationOutcome(info=info)

    async def resolve_inputs(self) -> SchemaDef:
        """Obtain the schema and create the artifacts directory concurrently.

        Raises:
            SourceProvideSchemaError: If the schema cannot be obtained.
            MkdirError: If the artifacts directory cannot be created.
        """
        schema_result, mkdir_result = await asyncio.gather(
            self._provide_schema(),
            self._ensure_directory(self.target_path),
            return_exceptions=True,
        )
        for result in (schema_result, mkdir_result):
            if isinstance(result, BaseException):
                raise result
        return schema_result

    async def generate_for_cache(self, schema_def: SchemaDef, cache: DataCache) -> GenerateInfo:
        """Run one pass for an already-fetched snapshot.

        Args:
            schema_def: Schema the snapshot conforms to.
            cache: Document store snapshot.

        Returns:
            GenerateInfo with the snapshot's document count.

        Raises:
            GenerationError: If planning, directory creation or writing failed.
        """
        async with self._pass_lock:
            try:
                return await self._generate(schema_def, cache)
            except GenerationError as e:
                await self._fail(e)
                raise
            except Exception as e:
                error = GenerationError(f"Unexpected failure during generation: {e!r}", e)
                await self._fail(error)
                raise error from e

    async def _generate(self, schema_def: SchemaDef, cache: DataCache) -> GenerateInfo:
        target_path = self.target_path

        await self._set_phase(
            GenerationPhase.PLANNING, f"Planning artifacts for {cache.document_count} documents..."
        )
        if self.settings.debug:
            await self._write_debug_dump(schema_def, cache)

        options = PlanOptions.from_settings(self.settings, self.source.options)
        plan = plan_artifacts(schema_def, cache, options)

        await self._set_phase(
            GenerationPhase.ENSURING_DIRECTORIES,
            f"Creating {len(plan.directories)} directories...",
        )
        await asyncio.gather(*(self._ensure_directory(target_path / d) for d in plan.directories))

        await self._set_phase(
            GenerationPhase.WRITING, f"Writing {len(plan.artifacts)} artifacts..."
        )
        report = await write_artifacts(
            plan.artifacts,
            target_path=target_path,
            cache=self.written_files_cache,
            filesystem=self.filesystem,
        )
        self.last_write_report = report
        logger.info(
            f"Wrote {report.written_count} files ({report.skipped} unchanged documents skipped)"
        )

        self.last_cleanup = await self._cleanup(plan)

        info = GenerateInfo(document_count=plan.document_count)
        await self._set_phase(GenerationPhase.DONE, f"Generated {info.document_count} documents")
        log_generate_info(info, target_path)
        return info

    async def _cleanup(self, plan: ArtifactPlan) -> CleanupResult | None:
        if not self.settings.generation.remove_stale_files:
            return None
        result = await cleanup_stale_files(
            self.target_path,
            plan,
            cache=self.written_files_cache,
            filesystem=self.filesystem,
        )
        if result.data_files_deleted or result.barrels_deleted:
            logger.info(
                f"Removed {result.data_files_deleted} stale data files and "
                f"{result.barrels_deleted} stale barrels"
            )
        return result

    async def _provide_schema(self) -> SchemaDef:
        try:
            return await self.source.provide_schema()
        except GenerationError:
            raise
        except Exception as e:
            raise SourceProvideSchemaError(f"Source plugin failed to provide schema: {e}", e) from e

    async def _ensure_directory(self, path: Path) -> None:
        try:
            await self.filesystem.ensure_directory(path)
        except GenerationError:
            raise
        except Exception as e:
            raise MkdirError(f"Failed to create directory {path}: {e}", path, e) from e

    async def _write_debug_dump(self, schema_def: SchemaDef, cache: DataCache) -> None:
        """Dump the pass inputs next to the package for inspection."""
        cache_path = self.settings.cache_path
        await self._ensure_directory(cache_path)
        await asyncio.gather(
            self.filesystem.write_file(
                cache_path / DEBUG_SCHEMA_FILE,
                schema_def.model_dump_json(by_alias=True, indent=2),
            ),
            self.filesystem.write_file(
                cache_path / DEBUG_DATA_CACHE_FILE,
                cache.model_dump_json(by_alias=True, indent=2),
            ),
        )
        logger.debug(f"Wrote debug dump to {cache_path}")

    async def _set_phase(self, phase: GenerationPhase, message: str = "") -> None:
        self.phase = phase
        if self.progress_callback:
            await self.progress_callback(GenerationProgress(phase=phase, message=message))

    async def _fail(self, error: GenerationError) -> GenerationOutcome:
        logger.error(f"Generation failed ({error.kind}): {error}")
        await self._set_phase(GenerationPhase.FAILED, str(error))
        return GenerationOutcome(error=error)


async def generate_dotpkg(
    source: SourcePlugin,
    *,
    cwd: Path,
    verbose: bool = False,
    settings: Config | None = None,
) -> GenerateInfo:
    """Generate the package once from the source's first snapshot.

    Raises:
        GenerationError: If the pass failed.
    """
    orchestrator = GenerationOrchestrator(source, cwd, settings=settings, verbose=verbose)
    return await orchestrator.run()


def generate_dotpkg_stream(
    source: SourcePlugin,
    *,
    cwd: Path,
    verbose: bool = False,
    settings: Config | None = None,
) -> AsyncIterator[GenerationOutcome]:
    """Generate the package once per snapshot the source provides (watch mode)."""
    orchestrator = GenerationOrchestrator(source, cwd, settings=settings, verbose=verbose)
    return orchestrator.stream()
