from collections.abc import Sequence

from medocr.blocks.index import BlockIndex
from medocr.blocks.models import Block, BlockType, RelationshipType
from medocr.extraction.models import QueryAnswer


def extract_query_answers(
    blocks: Sequence[Block],
    index: BlockIndex | None = None,
) -> list[QueryAnswer]:
    """One answer per QUERY block, taken from its first ANSWER edge."""
    index = index if index is not None else BlockIndex(blocks)
    answers: list[QueryAnswer] = []
    for query_block in blocks:
        if query_block.block_type != BlockType.QUERY:
            continue
        results = [
            result
            for result in index.related(query_block, RelationshipType.ANSWER)
            if result.block_type == BlockType.QUERY_RESULT
        ]
        first = results[0] if results else None
        answers.append(
            QueryAnswer(
                query=query_block.query_text or "",
                alias=query_block.query_alias,
                answer=(first.text or "") if first else "",
                confidence=first.confidence if first else 0.0,
                page=first.page if first else query_block.page,
            )
        )
    return answers
