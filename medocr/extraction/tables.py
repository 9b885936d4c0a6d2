from collections.abc import Sequence

from medocr.blocks.index import BlockIndex
from medocr.blocks.models import Block, BlockType, RelationshipType
from medocr.extraction.models import Table


def extract_tables(blocks: Sequence[Block], index: BlockIndex | None = None) -> list[Table]:
    """Rebuild a dense grid for every TABLE block from its CELL children.

    Grid size is the maximum row/column index observed. Missing cells are
    empty strings. When two cells share a position the later one wins.
    """
    index = index if index is not None else BlockIndex(blocks)
    return [
        _build_table(table_block, index)
        for table_block in blocks
        if table_block.block_type == BlockType.TABLE
    ]


def _build_table(table_block: Block, index: BlockIndex) -> Table:
    cells: dict[tuple[int, int], str] = {}
    max_row = 0
    max_col = 0
    for cell in index.related(table_block, RelationshipType.CHILD):
        if cell.block_type != BlockType.CELL:
            continue
        row = cell.row_index or 1
        col = cell.column_index or 1
        cells[(row, col)] = index.child_text(cell)
        max_row = max(max_row, row)
        max_col = max(max_col, col)

    grid = [
        [cells.get((row, col), "") for col in range(1, max_col + 1)]
        for row in range(1, max_row + 1)
    ]
    return Table(
        id=table_block.id,
        headers=grid[0] if grid else [],
        rows=grid[1:],
        confidence=table_block.confidence,
        page=table_block.page,
        bounding_box=table_block.bounding_box,
    )
