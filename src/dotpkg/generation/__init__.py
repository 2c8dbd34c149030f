"""Package generation pipeline module."""

from dotpkg.generation.cache import WrittenFilesCache
from dotpkg.generation.cleanup import CleanupResult, cleanup_stale_files
from dotpkg.generation.filesystem import FileSystem, LocalFileSystem
from dotpkg.generation.naming import (
    document_variable_name,
    get_data_variable_name,
    id_to_file_name,
)
from dotpkg.generation.orchestrator import (
    GenerateInfo,
    GenerationOrchestrator,
    GenerationOutcome,
    GenerationPhase,
    GenerationProgress,
    generate_dotpkg,
    generate_dotpkg_stream,
    log_generate_info,
)
from dotpkg.generation.planner import Artifact, ArtifactPlan, PlanOptions, plan_artifacts
from dotpkg.generation.writer import WriteReport, write_artifacts, write_file_if_changed

__all__ = [
    # Write cache
    "WrittenFilesCache",
    # Cleanup
    "CleanupResult",
    "cleanup_stale_files",
    # Filesystem
    "FileSystem",
    "LocalFileSystem",
    # Naming
    "document_variable_name",
    "get_data_variable_name",
    "id_to_file_name",
    # Orchestrator
    "GenerateInfo",
    "GenerationOrchestrator",
    "GenerationOutcome",
    "GenerationPhase",
    "GenerationProgress",
    "generate_dotpkg",
    "generate_dotpkg_stream",
    "log_generate_info",
    # Planner
    "Artifact",
    "ArtifactPlan",
    "PlanOptions",
    "plan_artifacts",
    # Writer
    "WriteReport",
    "write_artifacts",
    "write_file_if_changed",
]
