"""Renderers for the generated package artifacts.

Each function takes already-resolved names and returns file content. Nothing
here decides names, orders documents or touches the filesystem; the planner
does that and hands over structured values.
"""

import json
from dataclasses import dataclass
from typing import Any

from dotpkg.constants import AUTOGENERATED_NOTE, DATA_DIR, ID_FIELD, INDEX_MODULE, TYPES_DIR


@dataclass(frozen=True)
class DocumentImport:
    """One document imported by a collection barrel."""

    variable_name: str
    file_name: str


@dataclass(frozen=True)
class DataBarrel:
    """Resolved names of one document type's barrel module.

    Attributes:
        type_name: Name of the document type (also its data subdirectory).
        variable_name: Exported variable name.
        is_singleton: Whether the type exports a single document.
        documents: Imported documents in sorted identifier order.
    """

    type_name: str
    variable_name: str
    is_singleton: bool
    documents: tuple[DocumentImport, ...]

    @property
    def module_file_name(self) -> str:
        return f"{self.variable_name}.mjs"


def _header() -> str:
    return f"// {AUTOGENERATED_NOTE}\n"


def _ts_property(name: str) -> str:
    return name if name.isidentifier() else json.dumps(name)


def render_document_json(document: dict[str, Any], indent: int = 2) -> str:
    """Serialize a document the way it is stored in its data file."""
    return json.dumps(document, indent=indent or None, ensure_ascii=False)


def render_data_barrel(barrel: DataBarrel) -> str:
    """Render `data/<variable>.mjs` for one document type."""
    if barrel.is_singleton:
        document = barrel.documents[0]
        return (
            _header()
            + f"export {{ default as {barrel.variable_name} }} "
            + f"from './{barrel.type_name}/{document.file_name}.json'\n"
        )

    imports = "\n".join(
        f"import {doc.variable_name} from './{barrel.type_name}/{doc.file_name}.json'"
        for doc in barrel.documents
    )
    members = ", ".join(doc.variable_name for doc in barrel.documents)
    return (
        _header()
        + "\n"
        + f"{imports}\n"
        + "\n"
        + f"export const {barrel.variable_name} = [{members}]\n"
    )


def render_index_module(barrels: list[DataBarrel], runtime_module: str) -> str:
    """Render `data/index.mjs`, the aggregate of every barrel."""
    reexports = "\n".join(f"export * from './{b.module_file_name}'" for b in barrels)
    imports = "\n".join(
        f"import {{ {b.variable_name} }} from './{b.module_file_name}'" for b in barrels
    )
    all_documents = ", ".join(
        b.variable_name if b.is_singleton else f"...{b.variable_name}" for b in barrels
    )
    return (
        _header()
        + "\n"
        + f"export {{ isType }} from '{runtime_module}'\n"
        + "\n"
        + f"{reexports}\n"
        + f"{imports}\n"
        + "\n"
        + f"export const allDocuments = [{all_documents}]\n"
    )


def render_index_declarations(barrels: list[DataBarrel]) -> str:
    """Render `data/index.d.ts`, typing every exported data constant."""
    type_names = [b.type_name for b in barrels] + ["DocumentTypes"]
    constants = "\n".join(
        f"export declare const {b.variable_name}: {b.type_name}{'' if b.is_singleton else '[]'}"
        for b in barrels
    )
    return (
        _header()
        + "\n"
        + f"import {{ {', '.join(type_names)} }} from '../{TYPES_DIR}'\n"
        + "\n"
        + (f"{constants}\n" if constants else "")
        + "\n"
        + "export declare const allDocuments: DocumentTypes[]\n"
        + "\n"
    )


def render_type_declarations(
    type_names: list[str], type_field_name: str, runtime_module: str
) -> str:
    """Render `types/index.d.ts` with one type per document type and their union."""
    field = _ts_property(type_field_name)
    blocks = [
        f"export type {name} = {{\n"
        f"  {field}: {json.dumps(name)}\n"
        f"  {ID_FIELD}: string\n"
        f"  [field: string]: unknown\n"
        f"}}\n"
        for name in type_names
    ]
    union = " | ".join(type_names) or "never"
    name_union = " | ".join(json.dumps(name) for name in type_names) or "never"
    type_map = "".join(f"  {name}: {name}\n" for name in type_names)
    return (
        _header()
        + "\n"
        + f"export {{ isType }} from '{runtime_module}'\n"
        + "\n"
        + "".join(block + "\n" for block in blocks)
        + f"export type DocumentTypes = {union}\n"
        + f"export type DocumentTypeNames = {name_union}\n"
        + "\n"
        + "export type DocumentTypeMap = {\n"
        + type_map
        + "}\n"
    )


def render_helper_module(runtime_module: str) -> str:
    """Render `types/index.mjs`, which only re-exports the runtime helper."""
    return _header() + "\n" + f"export {{ isType }} from '{runtime_module}'\n"


def render_package_json(name: str, description: str, version: str) -> str:
    """Render the manifest of the generated package.

    The version is static; it does not follow the content.
    """
    package_json = {
        "name": name,
        "description": description,
        "version": version,
        "exports": {
            f"./{DATA_DIR}": {"import": f"./{DATA_DIR}/{INDEX_MODULE}"},
            f"./{TYPES_DIR}": {"import": f"./{TYPES_DIR}/{INDEX_MODULE}"},
        },
        "typesVersions": {
            "*": {
                DATA_DIR: [f"./{DATA_DIR}"],
                TYPES_DIR: [f"./{TYPES_DIR}"],
            },
        },
    }
    return json.dumps(package_json, indent=2)
