"""Artifact planning: schema + document snapshot -> files to write.

Planning is pure. It reads no files and writes none, and its result depends
only on the logical content of its inputs: types are ordered by name and
documents by identifier, so mapping iteration order never reaches the output.
"""

from collections import defaultdict
from dataclasses import dataclass
from typing import TYPE_CHECKING

from dotpkg.constants import (
    DATA_DIR,
    DEFAULT_TYPE_FIELD_NAME,
    ID_FIELD,
    INDEX_DECLARATIONS,
    INDEX_MODULE,
    MANIFEST_FILE,
    TYPES_DIR,
)
from dotpkg.errors import (
    DocumentIdError,
    MissingSingletonDocumentError,
    UnknownDocumentTypeError,
)
from dotpkg.generation.naming import (
    check_unique_names,
    check_valid_identifiers,
    document_variable_name,
    get_data_variable_name,
    id_to_file_name,
)
from dotpkg.generation.render import (
    DataBarrel,
    DocumentImport,
    render_data_barrel,
    render_document_json,
    render_helper_module,
    render_index_declarations,
    render_index_module,
    render_package_json,
    render_type_declarations,
)
from dotpkg.schema import CacheItem, DataCache, PluginOptions, SchemaDef

if TYPE_CHECKING:
    from dotpkg.config import Config


@dataclass(frozen=True)
class Artifact:
    """One generated file.

    Attributes:
        file_path: POSIX path relative to the artifacts directory.
        content: Full file content.
        document_hash: Fingerprint of the source document. Only per-document
            data files carry one; artifacts without it are always written.
    """

    file_path: str
    content: str
    document_hash: str | None = None


@dataclass(frozen=True)
class PlanOptions:
    """Settings that shape the generated content."""

    type_field_name: str = DEFAULT_TYPE_FIELD_NAME
    package_name: str = "dot-dotpkg"
    package_description: str = "This package is auto-generated by dotpkg"
    package_version: str = "0.0.0"
    runtime_module: str = "dotpkg/client"
    json_indent: int = 2

    @classmethod
    def from_settings(
        cls, settings: "Config", plugin_options: PluginOptions | None = None
    ) -> "PlanOptions":
        plugin_options = plugin_options or PluginOptions()
        return cls(
            type_field_name=plugin_options.field_options.type_field_name,
            package_name=settings.package.name,
            package_description=settings.package.description,
            package_version=settings.package.version,
            runtime_module=settings.package.runtime_module,
            json_indent=settings.generation.json_indent,
        )


@dataclass(frozen=True)
class ArtifactPlan:
    """Everything one generation pass writes.

    Attributes:
        artifacts: Files to write, in a stable order.
        directories: Directories (relative to the artifacts directory) that
            must exist before writing.
        document_count: Number of documents in the snapshot.
    """

    artifacts: tuple[Artifact, ...]
    directories: tuple[str, ...]
    document_count: int

    @property
    def file_paths(self) -> list[str]:
        return [artifact.file_path for artifact in self.artifacts]

    @property
    def document_artifacts(self) -> list[Artifact]:
        return [a for a in self.artifacts if a.document_hash is not None]


def _document_file_path(type_name: str, document_id: str) -> str:
    return f"{DATA_DIR}/{type_name}/{id_to_file_name(document_id)}.json"


def _check_document_ids(cache: DataCache) -> None:
    """Every document needs a non-empty string identifier used by no other document."""
    missing = [
        key
        for key, item in cache.cache_items_map.items()
        if not isinstance(item.document.get(ID_FIELD), str) or not item.document[ID_FIELD]
    ]
    if missing:
        raise DocumentIdError(
            f"Documents without a string {ID_FIELD!r} field: {', '.join(sorted(missing))}",
            missing,
        )

    keys_by_id: dict[str, list[str]] = defaultdict(list)
    for key, item in cache.cache_items_map.items():
        keys_by_id[item.document_id].append(key)
    for document_id in sorted(keys_by_id):
        keys = keys_by_id[document_id]
        if len(keys) > 1:
            raise DocumentIdError(
                f"Document id {document_id!r} is used by {len(keys)} documents: "
                f"{', '.join(sorted(keys))}",
                keys,
            )


def _group_documents(
    schema_def: SchemaDef, cache: DataCache, type_field_name: str
) -> dict[str, list[CacheItem]]:
    """Group cache items by document type, each group sorted by identifier."""
    grouped: dict[str, list[CacheItem]] = defaultdict(list)
    known_types = {d.name for d in schema_def.document_type_def_map.values()}

    for item in sorted(cache.cache_items_map.values(), key=lambda i: i.document_id):
        type_name = item.document.get(type_field_name)
        if not isinstance(type_name, str) or type_name not in known_types:
            raise UnknownDocumentTypeError(item.document_id, type_name)
        grouped[type_name].append(item)

    return grouped


def _build_barrels(
    schema_def: SchemaDef, grouped: dict[str, list[CacheItem]]
) -> list[DataBarrel]:
    barrels = []
    for doc_def in schema_def.document_type_defs():
        items = grouped.get(doc_def.name, [])
        if doc_def.is_singleton:
            if not items:
                raise MissingSingletonDocumentError(doc_def.name)
            # Extra singleton documents are ignored, the first id wins
            items = items[:1]
        else:
            imports = [
                (item.document_id, document_variable_name(item.document_id)) for item in items
            ]
            check_valid_identifiers(imports)
            # The barrel export shares the module scope with the imports
            check_unique_names(
                [(f"type {doc_def.name}", get_data_variable_name(doc_def))] + imports
            )

        barrels.append(
            DataBarrel(
                type_name=doc_def.name,
                variable_name=get_data_variable_name(doc_def),
                is_singleton=doc_def.is_singleton,
                documents=tuple(
                    DocumentImport(
                        variable_name=document_variable_name(item.document_id),
                        file_name=id_to_file_name(item.document_id),
                    )
                    for item in items
                ),
            )
        )
    return barrels


def plan_artifacts(
    schema_def: SchemaDef,
    cache: DataCache,
    options: PlanOptions | None = None,
) -> ArtifactPlan:
    """Compute the complete artifact set for one snapshot.

    Args:
        schema_def: Document type definitions.
        cache: Snapshot of the document store.
        options: Content settings. Defaults to PlanOptions().

    Returns:
        ArtifactPlan with every file of the generated package.

    Raises:
        NamingCollisionError: If two types share a variable name, two document
            ids escape to the same file name, or two documents of one
            collection share an import name.
        MissingSingletonDocumentError: If a singleton type has no document.
        UnknownDocumentTypeError: If a document's type is not in the schema.
        InvalidGeneratedNameError: If a type name, a data variable name or a
            document import name is not a usable identifier.
        DocumentIdError: If a document has no identifier or shares it with
            another document.
    """
    options = options or PlanOptions()
    doc_defs = schema_def.document_type_defs()

    check_unique_names((key, d.name) for key, d in schema_def.document_type_def_map.items())
    check_valid_identifiers((d.name, d.name) for d in doc_defs)
    check_valid_identifiers((d.name, get_data_variable_name(d)) for d in doc_defs)
    check_unique_names((d.name, get_data_variable_name(d)) for d in doc_defs)
    _check_document_ids(cache)
    check_unique_names(
        (item.document_id, id_to_file_name(item.document_id))
        for item in cache.cache_items_map.values()
    )

    grouped = _group_documents(schema_def, cache, options.type_field_name)
    barrels = _build_barrels(schema_def, grouped)
    type_names = [d.name for d in doc_defs]

    artifacts = [
        Artifact(
            MANIFEST_FILE,
            render_package_json(
                options.package_name, options.package_description, options.package_version
            ),
        ),
        Artifact(
            f"{TYPES_DIR}/{INDEX_DECLARATIONS}",
            render_type_declarations(
                type_names, options.type_field_name, options.runtime_module
            ),
        ),
        Artifact(f"{TYPES_DIR}/{INDEX_MODULE}", render_helper_module(options.runtime_module)),
        Artifact(f"{DATA_DIR}/{INDEX_DECLARATIONS}", render_index_declarations(barrels)),
        Artifact(f"{DATA_DIR}/{INDEX_MODULE}", render_index_module(barrels, options.runtime_module)),
    ]
    artifacts.extend(
        Artifact(f"{DATA_DIR}/{barrel.module_file_name}", render_data_barrel(barrel))
        for barrel in barrels
    )
    for type_name in type_names:
        for item in grouped.get(type_name, []):
            artifacts.append(
                Artifact(
                    _document_file_path(type_name, item.document_id),
                    render_document_json(item.document, options.json_indent),
                    document_hash=item.document_hash,
                )
            )

    directories = (TYPES_DIR, DATA_DIR, *(f"{DATA_DIR}/{name}" for name in type_names))

    return ArtifactPlan(
        artifacts=tuple(artifacts),
        directories=directories,
        document_count=cache.document_count,
    )
