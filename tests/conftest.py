import io
from typing import Any

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from tests.block_builders import raw_cell, raw_line, raw_word


@pytest.fixture()
def sample_pdf_bytes() -> bytes:
    """Generate a minimal single-page PDF with known text content."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    c.drawString(72, 720, "Patient: Jane Doe")
    c.save()
    return buf.getvalue()


@pytest.fixture()
def multi_page_pdf_bytes() -> bytes:
    """Generate a three-page PDF with known text on each page."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for number in range(1, 4):
        c.drawString(72, 720, f"Lab report page {number}")
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.fixture()
def line_blocks() -> list[dict[str, Any]]:
    """One page with a single line of two words."""
    return [
        {"Id": "page-1", "BlockType": "PAGE", "Confidence": 99.0, "Page": 1,
         "Relationships": [{"Type": "CHILD", "Ids": ["line-1"]}]},
        raw_line("line-1", "Jane Doe", ["w-1", "w-2"]),
        raw_word("w-1", "Jane"),
        raw_word("w-2", "Doe"),
    ]


@pytest.fixture()
def form_blocks() -> list[dict[str, Any]]:
    """A 'Patient Name: Jane Doe' key/value pair."""
    return [
        {"Id": "key-1", "BlockType": "KEY_VALUE_SET", "EntityTypes": ["KEY"],
         "Confidence": 92.0, "Page": 1,
         "Geometry": {"BoundingBox": {"Left": 0.1, "Top": 0.1, "Width": 0.2, "Height": 0.05}},
         "Relationships": [
             {"Type": "CHILD", "Ids": ["kw-1", "kw-2"]},
             {"Type": "VALUE", "Ids": ["val-1"]},
         ]},
        {"Id": "val-1", "BlockType": "KEY_VALUE_SET", "EntityTypes": ["VALUE"],
         "Confidence": 88.0, "Page": 1,
         "Relationships": [{"Type": "CHILD", "Ids": ["vw-1", "vw-2"]}]},
        raw_word("kw-1", "Patient"),
        raw_word("kw-2", "Name:"),
        raw_word("vw-1", "Jane"),
        raw_word("vw-2", "Doe"),
    ]


@pytest.fixture()
def table_blocks() -> list[dict[str, Any]]:
    """A 2x2 table: header row 'Test | Result', body row 'HbA1c | 6.2'."""
    return [
        {"Id": "table-1", "BlockType": "TABLE", "Confidence": 97.0, "Page": 1,
         "Relationships": [{"Type": "CHILD", "Ids": ["c-11", "c-12", "c-21", "c-22"]}]},
        raw_cell("c-11", 1, 1, ["tw-1"]),
        raw_cell("c-12", 1, 2, ["tw-2"]),
        raw_cell("c-21", 2, 1, ["tw-3"]),
        raw_cell("c-22", 2, 2, ["tw-4"]),
        raw_word("tw-1", "Test"),
        raw_word("tw-2", "Result"),
        raw_word("tw-3", "HbA1c"),
        raw_word("tw-4", "6.2"),
    ]
