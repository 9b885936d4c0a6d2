from collections.abc import Sequence

from medocr.blocks.models import Block, BlockType


def extract_text(blocks: Sequence[Block]) -> str:
    """Plain text from LINE blocks in backend order, pages split by a blank line."""
    pages: dict[int, list[str]] = {}
    for block in blocks:
        if block.block_type == BlockType.LINE and block.text:
            pages.setdefault(block.page, []).append(block.text)
    return "\n\n".join("\n".join(pages[page]) for page in sorted(pages))
