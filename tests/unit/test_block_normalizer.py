import pytest

from medocr.blocks.exceptions import MalformedBlockError
from medocr.blocks.models import BlockType, RelationshipType
from medocr.blocks.normalizer import normalize_block, normalize_blocks
from tests.block_builders import raw_word


class TestNormalizeBlock:
    def test_maps_basic_fields(self) -> None:
        block = normalize_block(raw_word("w-1", "Glucose", confidence=87.5, page=2))
        assert block.id == "w-1"
        assert block.block_type == BlockType.WORD
        assert block.text == "Glucose"
        assert block.page == 2

    def test_scales_confidence_to_unit_interval(self) -> None:
        block = normalize_block(raw_word("w-1", "x", confidence=87.5))
        assert block.confidence == pytest.approx(0.875)

    def test_custom_confidence_scale(self) -> None:
        block = normalize_block(raw_word("w-1", "x", confidence=0.4), confidence_scale=1.0)
        assert block.confidence == pytest.approx(0.4)

    def test_missing_confidence_is_zero(self) -> None:
        block = normalize_block({"Id": "p-1", "BlockType": "PAGE"})
        assert block.confidence == 0.0

    def test_missing_page_defaults_to_one(self) -> None:
        block = normalize_block({"Id": "p-1", "BlockType": "PAGE"})
        assert block.page == 1

    def test_maps_geometry(self) -> None:
        box = {"Left": 0.1, "Top": 0.2, "Width": 0.3, "Height": 0.4}
        block = normalize_block(
            {
                "Id": "l-1",
                "BlockType": "LINE",
                "Geometry": {"BoundingBox": box, "Polygon": [{"X": 0.1, "Y": 0.2}]},
            }
        )
        assert block.bounding_box == box
        assert block.geometry is not None
        assert block.geometry.polygon == [{"X": 0.1, "Y": 0.2}]

    def test_no_geometry_gives_no_bounding_box(self) -> None:
        block = normalize_block({"Id": "l-1", "BlockType": "LINE"})
        assert block.geometry is None
        assert block.bounding_box is None

    def test_maps_relationships_in_order(self) -> None:
        block = normalize_block(
            {
                "Id": "k-1",
                "BlockType": "KEY_VALUE_SET",
                "EntityTypes": ["KEY"],
                "Relationships": [
                    {"Type": "VALUE", "Ids": ["v-1"]},
                    {"Type": "CHILD", "Ids": ["w-1", "w-2"]},
                ],
            }
        )
        assert block.related_ids(RelationshipType.CHILD) == ["w-1", "w-2"]
        assert block.related_ids(RelationshipType.VALUE) == ["v-1"]
        assert block.has_entity_type("KEY")

    def test_maps_cell_indices(self) -> None:
        block = normalize_block(
            {"Id": "c-1", "BlockType": "CELL", "RowIndex": 2, "ColumnIndex": 3,
             "RowSpan": 1, "ColumnSpan": 2}
        )
        assert (block.row_index, block.column_index) == (2, 3)
        assert (block.row_span, block.column_span) == (1, 2)

    def test_maps_query_text_and_alias(self) -> None:
        block = normalize_block(
            {"Id": "q-1", "BlockType": "QUERY",
             "Query": {"Text": "What is the patient name?", "Alias": "NAME"}}
        )
        assert block.query_text == "What is the patient name?"
        assert block.query_alias == "NAME"

    def test_missing_id_raises(self) -> None:
        with pytest.raises(MalformedBlockError, match="missing 'Id'"):
            normalize_block({"BlockType": "WORD", "Text": "x"})

    def test_missing_block_type_raises(self) -> None:
        with pytest.raises(MalformedBlockError, match="missing 'BlockType'"):
            normalize_block({"Id": "w-1"})

    def test_missing_both_raises(self) -> None:
        with pytest.raises(MalformedBlockError, match="both"):
            normalize_block({"Text": "orphan"})

    def test_unknown_block_type_raises(self) -> None:
        with pytest.raises(MalformedBlockError, match="SIGNATURE"):
            normalize_block({"Id": "s-1", "BlockType": "SIGNATURE"})

    def test_non_mapping_raises(self) -> None:
        with pytest.raises(MalformedBlockError, match="object"):
            normalize_block(["Id", "w-1"])

    def test_numeric_string_cell_indices_are_coerced(self) -> None:
        block = normalize_block(
            {"Id": "c-1", "BlockType": "CELL", "RowIndex": "2", "ColumnIndex": "3"}
        )
        assert (block.row_index, block.column_index) == (2, 3)

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("Page", "first"),
            ("Confidence", "high"),
            ("Relationships", ["w-1"]),
            ("Relationships", 7),
            ("Geometry", "box"),
            ("RowIndex", "two"),
            ("ColumnSpan", [1]),
            ("Query", "patient name"),
        ],
    )
    def test_invalid_field_value_raises(self, field: str, value: object) -> None:
        raw = {**raw_word("w-1", "x"), field: value}
        with pytest.raises(MalformedBlockError, match="w-1 has an invalid field"):
            normalize_block(raw)

    def test_unhashable_block_type_raises(self) -> None:
        with pytest.raises(MalformedBlockError, match="unsupported type"):
            normalize_block({"Id": "w-1", "BlockType": ["WORD"]})


class TestNormalizeBlocks:
    def test_drops_malformed_and_keeps_order(self) -> None:
        raws = [
            raw_word("w-1", "a"),
            {"BlockType": "WORD"},
            raw_word("w-2", "b"),
        ]
        blocks, rejected = normalize_blocks(raws)
        assert [block.id for block in blocks] == ["w-1", "w-2"]
        assert len(rejected) == 1
        assert rejected[0].startswith("block at index 1:")

    def test_empty_input(self) -> None:
        assert normalize_blocks([]) == ([], [])

    def test_bad_field_value_drops_only_that_block(self) -> None:
        raws = [
            raw_word("w-1", "a"),
            {**raw_word("w-bad", "b"), "Page": "first"},
            raw_word("w-2", "c"),
        ]
        blocks, rejected = normalize_blocks(raws)
        assert [block.id for block in blocks] == ["w-1", "w-2"]
        assert len(rejected) == 1
        assert "w-bad" in rejected[0]
