"""Cleanup of stale generated files.

When documents are deleted or renamed, or a type leaves the schema, their
previously generated files would otherwise linger in the package:
- Data files: JSON files under data/<type>/ that the current plan does not write
- Barrels: data/<variable>.mjs modules of types no longer in the schema
- Write cache: entries for paths that are no longer planned
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path

from dotpkg.constants import DATA_DIR, INDEX_MODULE
from dotpkg.generation.cache import WrittenFilesCache
from dotpkg.generation.filesystem import FileSystem
from dotpkg.generation.planner import ArtifactPlan

logger = logging.getLogger(__name__)


@dataclass
class CleanupResult:
    """Summary of cleanup operations performed."""

    data_files_deleted: int = field(default=0)
    barrels_deleted: int = field(default=0)
    cache_entries_pruned: int = field(default=0)


def find_stale_data_files(data_path: Path, planned: set[Path]) -> list[Path]:
    """List JSON files in the per-type data directories that are not planned.

    Args:
        data_path: The package's data directory.
        planned: Absolute paths of every planned artifact.

    Returns:
        Sorted list of stale files.
    """
    if not data_path.is_dir():
        return []

    stale = []
    for type_dir in data_path.iterdir():
        if not type_dir.is_dir():
            continue
        for json_file in type_dir.glob("*.json"):
            if json_file not in planned:
                stale.append(json_file)
    return sorted(stale)


def find_stale_barrels(data_path: Path, planned: set[Path]) -> list[Path]:
    """List barrel modules in the data directory that are not planned."""
    if not data_path.is_dir():
        return []

    return sorted(
        module
        for module in data_path.glob("*.mjs")
        if module.name != INDEX_MODULE and module not in planned
    )


async def cleanup_stale_files(
    target_path: Path,
    plan: ArtifactPlan,
    *,
    cache: WrittenFilesCache,
    filesystem: FileSystem,
) -> CleanupResult:
    """Remove generated files and cache entries the current plan no longer has.

    Should run only after the plan was written successfully, so that a failed
    pass never deletes anything.

    Args:
        target_path: Artifacts directory.
        plan: The plan that was just written.
        cache: Write cache owned by the caller.
        filesystem: Filesystem to delete through.

    Returns:
        CleanupResult with counts of deleted items.
    """
    result = CleanupResult()
    planned = {target_path / artifact.file_path for artifact in plan.artifacts}
    data_path = target_path / DATA_DIR

    for stale_file in find_stale_data_files(data_path, planned):
        logger.info(f"Deleting stale data file: {stale_file.relative_to(target_path)}")
        await filesystem.remove_file(stale_file)
        result.data_files_deleted += 1

    for stale_barrel in find_stale_barrels(data_path, planned):
        logger.info(f"Deleting stale barrel: {stale_barrel.relative_to(target_path)}")
        await filesystem.remove_file(stale_barrel)
        result.barrels_deleted += 1

    result.cache_entries_pruned = len(cache.prune(planned))

    return result
