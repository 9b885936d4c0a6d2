"""Maps the OCR backend's raw block wire shape onto Block.

The mapping is a rename/flatten. The only value change is the confidence,
which is divided by the adapter's declared scale so that every downstream
computation works on [0, 1].
"""

from collections.abc import Iterable, Mapping
from typing import Any

from medocr.blocks.exceptions import MalformedBlockError
from medocr.blocks.models import Block, BlockType, Geometry, Relationship

_KNOWN_BLOCK_TYPES = frozenset(item.value for item in BlockType)


def normalize_block(raw: Any, confidence_scale: float = 100.0) -> Block:
    """Build a Block from one raw backend block.

    Raises:
        MalformedBlockError: if the payload is not a mapping, lacks an id or
            a block type, names a block type the pipeline does not know, or
            carries a field value of the wrong shape.
    """
    if not isinstance(raw, Mapping):
        raise MalformedBlockError(f"Raw block must be an object, got {type(raw).__name__}")
    block_id = raw.get("Id")
    block_type = raw.get("BlockType")
    if not block_id and not block_type:
        raise MalformedBlockError("Raw block is missing both 'Id' and 'BlockType'")
    if not block_id:
        raise MalformedBlockError(f"Raw {block_type} block is missing 'Id'")
    if not block_type:
        raise MalformedBlockError(f"Raw block {block_id} is missing 'BlockType'")
    if not isinstance(block_type, str) or block_type not in _KNOWN_BLOCK_TYPES:
        raise MalformedBlockError(f"Raw block {block_id} has unsupported type {block_type!r}")

    try:
        return _build_block(raw, str(block_id), BlockType(block_type), confidence_scale)
    except (TypeError, ValueError, AttributeError) as exc:
        raise MalformedBlockError(f"Raw block {block_id} has an invalid field: {exc}") from exc


def normalize_blocks(
    raws: Iterable[Any],
    confidence_scale: float = 100.0,
) -> tuple[list[Block], list[str]]:
    """Normalize every raw block, dropping the malformed ones.

    Returns:
        The surviving blocks in input order and one message per dropped block.
    """
    blocks: list[Block] = []
    rejected: list[str] = []
    for index, raw in enumerate(raws):
        try:
            blocks.append(normalize_block(raw, confidence_scale))
        except MalformedBlockError as exc:
            rejected.append(f"block at index {index}: {exc}")
    return blocks, rejected


def _build_block(
    raw: Mapping[str, Any],
    block_id: str,
    block_type: BlockType,
    confidence_scale: float,
) -> Block:
    query = raw.get("Query") or {}
    return Block(
        id=block_id,
        block_type=block_type,
        confidence=_scale_confidence(raw.get("Confidence"), confidence_scale),
        text=raw.get("Text"),
        page=int(raw.get("Page") or 1),
        geometry=_build_geometry(raw.get("Geometry")),
        entity_types=tuple(raw.get("EntityTypes") or ()),
        relationships=_build_relationships(raw.get("Relationships")),
        row_index=_optional_int(raw.get("RowIndex")),
        column_index=_optional_int(raw.get("ColumnIndex")),
        row_span=_optional_int(raw.get("RowSpan")),
        column_span=_optional_int(raw.get("ColumnSpan")),
        selection_status=raw.get("SelectionStatus"),
        query_text=query.get("Text"),
        query_alias=query.get("Alias"),
    )


def _optional_int(raw: Any) -> int | None:
    if raw is None:
        return None
    return int(raw)


def _scale_confidence(raw: Any, confidence_scale: float) -> float:
    if not raw:
        return 0.0
    return float(raw) / confidence_scale


def _build_geometry(raw: Any) -> Geometry | None:
    if not raw:
        return None
    return Geometry(
        bounding_box=raw.get("BoundingBox"),
        polygon=list(raw.get("Polygon") or []),
    )


def _build_relationships(raw: Any) -> tuple[Relationship, ...]:
    if not raw:
        return ()
    return tuple(
        Relationship(type=str(item.get("Type")), ids=tuple(item.get("Ids") or ()))
        for item in raw
    )
