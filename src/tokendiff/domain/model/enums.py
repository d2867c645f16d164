"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class ValueType(StrEnum):
    """Closed set of token value types.

    Upstream sources spell these differently (``COLOR``, ``FLOAT``, ``color``);
    ``parse`` folds the known spellings and maps everything else to ``OTHER``.
    """

    COLOR = "color"
    DIMENSION = "dimension"
    NUMBER = "number"
    STRING = "string"
    BOOLEAN = "boolean"
    FONT_FAMILY = "fontFamily"
    FONT_WEIGHT = "fontWeight"
    DURATION = "duration"
    SHADOW = "shadow"
    TYPOGRAPHY = "typography"
    BORDER = "border"
    GRADIENT = "gradient"
    OTHER = "other"

    @classmethod
    def parse(cls, raw: str | None) -> ValueType:
        if raw is None:
            return cls.OTHER
        folded = raw.strip().replace("_", "").replace("-", "").lower()
        return _VALUE_TYPE_SPELLINGS.get(folded, cls.OTHER)


_VALUE_TYPE_SPELLINGS: dict[str, ValueType] = {
    member.value.lower(): member for member in ValueType
} | {
    "float": ValueType.NUMBER,
    "integer": ValueType.NUMBER,
    "bool": ValueType.BOOLEAN,
    "text": ValueType.STRING,
    "size": ValueType.DIMENSION,
    "spacing": ValueType.DIMENSION,
}


class Severity(StrEnum):
    """How a change affects consumers of the registry."""

    BREAKING = "breaking"
    ADDITION = "addition"
    PATCH = "patch"

    @property
    def rank(self) -> int:
        return _SEVERITY_RANK[self]


_SEVERITY_RANK: dict[Severity, int] = {
    Severity.BREAKING: 0,
    Severity.ADDITION: 1,
    Severity.PATCH: 2,
}


class ChangeCategory(StrEnum):
    RENAMED = "renamed"
    TYPE_CHANGED = "type-changed"
    VALUE_CHANGED = "value-changed"
    ALIAS_CHANGED = "alias-changed"
    DESCRIPTION_CHANGED = "description-changed"
    DELETED = "deleted"
    ADDED = "added"

    COLLECTION_RENAMED = "collection-renamed"
    COLLECTION_ADDED = "collection-added"
    COLLECTION_DELETED = "collection-deleted"
    MODE_RENAMED = "mode-renamed"
    MODE_ADDED = "mode-added"
    MODE_DELETED = "mode-deleted"


class BumpType(StrEnum):
    """Semantic-version component selected by the dominant change severity."""

    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"


class StructureKind(StrEnum):
    COLLECTION = "collection"
    MODE = "mode"


class MatchStrategy(StrEnum):
    """Which pairing strategy produced a match result."""

    ID = "id"
    HEURISTIC = "heuristic"
    MIXED = "mixed"
