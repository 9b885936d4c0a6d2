from medocr.extraction.forms import extract_forms
from medocr.extraction.queries import extract_query_answers
from medocr.extraction.tables import extract_tables
from medocr.extraction.text import extract_text

__all__ = ["extract_forms", "extract_query_answers", "extract_tables", "extract_text"]
