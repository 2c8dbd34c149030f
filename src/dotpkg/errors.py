"""Errors raised while generating the package.

Every failure of a generation pass is a GenerationError. The `kind` attribute
tells callers whether the inputs could not be obtained ("input"), the output
tree could not be written ("filesystem") or the schema and documents do not
fit together ("invariant").
"""

from pathlib import Path
from typing import Optional


class GenerationError(Exception):
    """Base exception for a failed generation pass."""

    kind = "generation"

    def __init__(self, message: str, original_error: Optional[BaseException] = None):
        self.message = message
        self.original_error = original_error
        super().__init__(message)


class SourceProvideSchemaError(GenerationError):
    """Raised when the source plugin cannot provide the schema."""

    kind = "input"


class SourceFetchDataError(GenerationError):
    """Raised when the source plugin cannot provide a document snapshot."""

    kind = "input"


class FileSystemError(GenerationError):
    """Base exception for failures touching the output tree."""

    kind = "filesystem"

    def __init__(
        self,
        message: str,
        path: Path | str,
        original_error: Optional[BaseException] = None,
    ):
        self.path = Path(path)
        super().__init__(message, original_error)


class MkdirError(FileSystemError):
    """Raised when a directory cannot be created (other than it already existing)."""

    pass


class WriteFileError(FileSystemError):
    """Raised when an artifact cannot be written."""

    pass


class InvariantViolation(GenerationError):
    """Raised when the schema and documents cannot produce a consistent package.

    These are not transient: re-running the pass on the same inputs fails the
    same way.
    """

    kind = "invariant"


class NamingCollisionError(InvariantViolation):
    """Raised when two distinct names map to the same generated name."""

    def __init__(self, generated_name: str, sources: list[str]):
        self.generated_name = generated_name
        self.sources = sorted(sources)
        joined = ", ".join(repr(s) for s in self.sources)
        super().__init__(f"{joined} all map to the generated name {generated_name!r}")


class MissingSingletonDocumentError(InvariantViolation):
    """Raised when a singleton document type has no document."""

    def __init__(self, type_name: str):
        self.type_name = type_name
        super().__init__(f"Singleton document type {type_name!r} has no document")


class UnknownDocumentTypeError(InvariantViolation):
    """Raised when a document names a type that is not in the schema."""

    def __init__(self, document_id: str, type_name: object):
        self.document_id = document_id
        self.type_name = type_name
        super().__init__(
            f"Document {document_id!r} has type {type_name!r} which is not defined in the schema"
        )


class InvalidGeneratedNameError(InvariantViolation):
    """Raised when a name cannot be used as an identifier in generated code."""

    def __init__(self, generated_name: str, source: str):
        self.generated_name = generated_name
        self.source = source
        super().__init__(
            f"{source!r} maps to {generated_name!r}, which is not a valid identifier"
        )


class DocumentIdError(InvariantViolation):
    """Raised when documents of a snapshot lack a usable or unique identifier."""

    def __init__(self, message: str, keys: list[str]):
        self.keys = sorted(keys)
        super().__init__(message)
