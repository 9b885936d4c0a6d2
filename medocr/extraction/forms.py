from collections.abc import Sequence

from medocr.blocks.index import BlockIndex
from medocr.blocks.models import Block, BlockType, EntityType, RelationshipType
from medocr.extraction.models import FormField, FormFieldSide


def extract_forms(blocks: Sequence[Block], index: BlockIndex | None = None) -> list[FormField]:
    """Pair every KEY block with the block its first VALUE edge points at.

    Keys without a resolvable value are skipped; no partial field is emitted.
    """
    index = index if index is not None else BlockIndex(blocks)
    fields: list[FormField] = []
    for key_block in blocks:
        if key_block.block_type != BlockType.KEY_VALUE_SET:
            continue
        if not key_block.has_entity_type(EntityType.KEY):
            continue
        value_ids = key_block.related_ids(RelationshipType.VALUE)
        if not value_ids:
            continue
        # Several VALUE edges: only the first one is used.
        value_block = index.get(value_ids[0])
        if value_block is None:
            continue
        fields.append(
            FormField(
                key=_side(key_block, index),
                value=_side(value_block, index),
            )
        )
    return fields


def _side(block: Block, index: BlockIndex) -> FormFieldSide:
    return FormFieldSide(
        text=index.child_text(block),
        confidence=block.confidence,
        bounding_box=block.bounding_box,
    )
