"""Layout and naming constants of the generated package.

The generated package is imported by downstream applications through its
`data` and `types` subpath exports, so these names form part of its public
surface and are not configurable.
"""

# =============================================================================
# Package Layout
# =============================================================================
# DATA_DIR holds per-document JSON files (one subdirectory per document type),
# per-type barrels and the aggregate index. TYPES_DIR holds the type
# declarations. CACHE_DIR only receives the debug dump.

DATA_DIR = "data"
TYPES_DIR = "types"
CACHE_DIR = "cache"

MANIFEST_FILE = "package.json"
INDEX_MODULE = "index.mjs"
INDEX_DECLARATIONS = "index.d.ts"

DEBUG_SCHEMA_FILE = "schema.json"
DEBUG_DATA_CACHE_FILE = "data-cache.json"

# =============================================================================
# Document Fields
# =============================================================================
# Every document carries its identifier in ID_FIELD. The discriminant field
# naming the document type defaults to DEFAULT_TYPE_FIELD_NAME and can be
# changed by the source plugin.

ID_FIELD = "_id"
DEFAULT_TYPE_FIELD_NAME = "type"

# =============================================================================
# Generated Text
# =============================================================================

AUTOGENERATED_NOTE = "NOTE This file is auto-generated by dotpkg"

__all__ = [
    "AUTOGENERATED_NOTE",
    "CACHE_DIR",
    "DATA_DIR",
    "DEBUG_DATA_CACHE_FILE",
    "DEBUG_SCHEMA_FILE",
    "DEFAULT_TYPE_FIELD_NAME",
    "ID_FIELD",
    "INDEX_DECLARATIONS",
    "INDEX_MODULE",
    "MANIFEST_FILE",
    "TYPES_DIR",
]
