from medocr.blocks.index import BlockIndex
from medocr.blocks.models import Block, BlockType, Relationship, RelationshipType


def _word(block_id: str, text: str | None) -> Block:
    return Block(id=block_id, block_type=BlockType.WORD, text=text)


def _container(block_id: str, block_type: BlockType, child_ids: tuple[str, ...]) -> Block:
    return Block(
        id=block_id,
        block_type=block_type,
        relationships=(Relationship(type=RelationshipType.CHILD, ids=child_ids),),
    )


class TestBlockIndex:
    def test_get_by_id(self) -> None:
        word = _word("w-1", "Doe")
        index = BlockIndex([word])
        assert index.get("w-1") is word
        assert index.get("missing") is None
        assert len(index) == 1

    def test_related_skips_missing_targets(self) -> None:
        line = _container("l-1", BlockType.LINE, ("w-1", "gone", "w-2"))
        index = BlockIndex([line, _word("w-1", "Jane"), _word("w-2", "Doe")])
        assert [block.id for block in index.related(line, RelationshipType.CHILD)] == [
            "w-1",
            "w-2",
        ]

    def test_child_text_joins_words(self) -> None:
        line = _container("l-1", BlockType.LINE, ("w-1", "w-2"))
        index = BlockIndex([line, _word("w-1", "Jane"), _word("w-2", "Doe")])
        assert index.child_text(line) == "Jane Doe"

    def test_child_text_descends_through_containers(self) -> None:
        cell = _container("c-1", BlockType.CELL, ("l-1",))
        line = _container("l-1", BlockType.LINE, ("w-1",))
        index = BlockIndex([cell, line, _word("w-1", "6.2")])
        assert index.child_text(cell) == "6.2"

    def test_child_text_ignores_words_without_text(self) -> None:
        line = _container("l-1", BlockType.LINE, ("w-1", "w-2"))
        index = BlockIndex([line, _word("w-1", None), _word("w-2", "Doe")])
        assert index.child_text(line) == "Doe"

    def test_child_text_survives_cycles(self) -> None:
        first = _container("a", BlockType.LINE, ("b", "w-1"))
        second = _container("b", BlockType.LINE, ("a",))
        index = BlockIndex([first, second, _word("w-1", "loop")])
        assert index.child_text(first) == "loop"

    def test_child_text_empty_without_children(self) -> None:
        assert BlockIndex([]).child_text(_word("w-1", "x")) == ""
