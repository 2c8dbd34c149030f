"""Schema and document-store models handed over by a source plugin."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dotpkg.constants import DEFAULT_TYPE_FIELD_NAME, ID_FIELD

# Field aliases follow the JSON layout of the debug dump so a dump can be
# loaded back through JsonSnapshotSource.
_MODEL_CONFIG = ConfigDict(populate_by_name=True, frozen=True)


class DocumentTypeDef(BaseModel):
    """Definition of one document type."""

    model_config = _MODEL_CONFIG

    name: str = Field(..., min_length=1, description="Type name, unique within a schema")
    is_singleton: bool = Field(
        False,
        alias="isSingleton",
        description="Exactly one document of this type is expected",
    )
    description: str | None = Field(None, description="Optional human description")


class SchemaDef(BaseModel):
    """All document types governing a generation pass."""

    model_config = _MODEL_CONFIG

    document_type_def_map: dict[str, DocumentTypeDef] = Field(
        default_factory=dict,
        alias="documentTypeDefMap",
    )

    def document_type_defs(self) -> list[DocumentTypeDef]:
        """Return the type definitions ordered by type name."""
        return sorted(self.document_type_def_map.values(), key=lambda d: d.name)


class CacheItem(BaseModel):
    """One realized document paired with its content fingerprint."""

    model_config = _MODEL_CONFIG

    document: dict[str, Any]
    document_hash: str = Field(..., alias="documentHash")

    @property
    def document_id(self) -> str:
        return str(self.document[ID_FIELD])


class DataCache(BaseModel):
    """Snapshot of the document store at one point in time."""

    model_config = _MODEL_CONFIG

    cache_items_map: dict[str, CacheItem] = Field(
        default_factory=dict,
        alias="cacheItemsMap",
    )

    @property
    def document_count(self) -> int:
        return len(self.cache_items_map)


class FieldOptions(BaseModel):
    """Field naming options shared by every document."""

    model_config = _MODEL_CONFIG

    type_field_name: str = Field(DEFAULT_TYPE_FIELD_NAME, alias="typeFieldName")


class PluginOptions(BaseModel):
    """Options a source plugin was configured with."""

    model_config = _MODEL_CONFIG

    field_options: FieldOptions = Field(default_factory=FieldOptions, alias="fieldOptions")
