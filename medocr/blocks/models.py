from dataclasses import dataclass, field
from enum import Enum


class BlockType(str, Enum):
    """Kinds of annotated OCR blocks the pipeline understands."""

    PAGE = "PAGE"
    LINE = "LINE"
    WORD = "WORD"
    KEY_VALUE_SET = "KEY_VALUE_SET"
    TABLE = "TABLE"
    CELL = "CELL"
    SELECTION_ELEMENT = "SELECTION_ELEMENT"
    QUERY = "QUERY"
    QUERY_RESULT = "QUERY_RESULT"


class RelationshipType(str, Enum):
    CHILD = "CHILD"
    VALUE = "VALUE"
    ANSWER = "ANSWER"


class EntityType(str, Enum):
    KEY = "KEY"
    VALUE = "VALUE"


@dataclass(frozen=True)
class Geometry:
    """Bounding box and polygon, passed through from the backend untouched."""

    bounding_box: dict[str, float] | None = None
    polygon: list[dict[str, float]] = field(default_factory=list)


@dataclass(frozen=True)
class Relationship:
    """Directed, typed edge from one block to an ordered list of block ids."""

    type: str
    ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class Block:
    """One annotated unit of OCR output.

    Confidence is always on the [0, 1] scale; adapters declare their wire
    scale and the normalizer converts once.
    """

    id: str
    block_type: BlockType
    confidence: float = 0.0
    text: str | None = None
    page: int = 1
    geometry: Geometry | None = None
    entity_types: tuple[str, ...] = ()
    relationships: tuple[Relationship, ...] = ()
    row_index: int | None = None
    column_index: int | None = None
    row_span: int | None = None
    column_span: int | None = None
    selection_status: str | None = None
    query_text: str | None = None
    query_alias: str | None = None

    @property
    def bounding_box(self) -> dict[str, float] | None:
        return self.geometry.bounding_box if self.geometry else None

    def has_entity_type(self, entity_type: str) -> bool:
        return entity_type in self.entity_types

    def related_ids(self, relationship_type: str) -> list[str]:
        """Ids across every relationship of the given type, in declared order."""
        ids: list[str] = []
        for relationship in self.relationships:
            if relationship.type == relationship_type:
                ids.extend(relationship.ids)
        return ids
