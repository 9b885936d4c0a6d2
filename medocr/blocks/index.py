from collections.abc import Iterable

from medocr.blocks.models import Block, BlockType, RelationshipType


class BlockIndex:
    """Id -> block lookup built once per run.

    Relationship targets that are absent from the index (pruned cross-page
    fragments) are skipped silently.
    """

    def __init__(self, blocks: Iterable[Block]) -> None:
        self._blocks: dict[str, Block] = {block.id: block for block in blocks}

    def __len__(self) -> int:
        return len(self._blocks)

    def get(self, block_id: str) -> Block | None:
        return self._blocks.get(block_id)

    def related(self, block: Block, relationship_type: str) -> list[Block]:
        """Blocks reachable over one edge type, in relationship order."""
        found = (self._blocks.get(block_id) for block_id in block.related_ids(relationship_type))
        return [related for related in found if related is not None]

    def child_text(self, block: Block) -> str:
        """Space-joined WORD text under a block, descending through containers."""
        return " ".join(self._collect_words(block, seen=set()))

    def _collect_words(self, block: Block, seen: set[str]) -> list[str]:
        words: list[str] = []
        for child in self.related(block, RelationshipType.CHILD):
            if child.id in seen:
                continue
            seen.add(child.id)
            if child.block_type == BlockType.WORD:
                if child.text:
                    words.append(child.text)
            else:
                words.extend(self._collect_words(child, seen))
        return words
