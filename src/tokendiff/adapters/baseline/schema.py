"""Pydantic models describing the serialized baseline payload."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime  # noqa: TC003

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, JsonValue, field_validator


def _blank_to_none(value: object) -> object:
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return value


class BaselineBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EntryPayload(BaselineBaseModel):
    stable_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("variableId", "stableId", "stable_id"),
        serialization_alias="variableId",
    )
    collection_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("collectionId", "collectionStableId", "collection_id"),
        serialization_alias="collectionId",
    )
    mode_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("modeId", "modeStableId", "mode_id"),
        serialization_alias="modeId",
    )
    collection: str = "default"
    mode: str = "default"
    path: str = Field(min_length=1)
    value: JsonValue
    value_type: str | None = Field(default=None, alias="type")
    description: str | None = None
    scopes: list[str] = Field(default_factory=list)
    code_syntax: dict[str, str] = Field(
        default_factory=dict,
        validation_alias=AliasChoices("codeSyntax", "code_syntax"),
        serialization_alias="codeSyntax",
    )

    _normalize_ids = field_validator("stable_id", "collection_id", "mode_id", mode="before")(
        _blank_to_none
    )
    _normalize_description = field_validator("description", mode="before")(_blank_to_none)

    @field_validator("collection", "mode", mode="before")
    @classmethod
    def _default_blank_name(cls, value: object) -> object:
        if value is None:
            return "default"
        if isinstance(value, str) and not value.strip():
            return "default"
        return value


class MetadataPayload(BaselineBaseModel):
    synced_at: datetime | None = Field(default=None, alias="syncedAt")
    source: str | None = None

    _normalize_source = field_validator("source", mode="before")(_blank_to_none)


class BaselinePayload(BaselineBaseModel):
    """Outer baseline document; entries stay raw so each is validated on its own."""

    baseline: dict[str, object]
    metadata: MetadataPayload = Field(default_factory=MetadataPayload)

    @field_validator("metadata", mode="before")
    @classmethod
    def _missing_metadata(cls, value: object) -> object:
        if value is None or not isinstance(value, Mapping):
            return {}
        return value
