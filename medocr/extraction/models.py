from dataclasses import dataclass, field


@dataclass(frozen=True)
class FormFieldSide:
    """Text of one side of a key/value pair with its source block's metadata."""

    text: str
    confidence: float
    bounding_box: dict[str, float] | None = None


@dataclass(frozen=True)
class FormField:
    key: FormFieldSide
    value: FormFieldSide


@dataclass(frozen=True)
class Table:
    """Dense table grid; `headers` is row 1, `rows` hold rows 2..N."""

    id: str
    headers: list[str] = field(default_factory=list)
    rows: list[list[str]] = field(default_factory=list)
    confidence: float = 0.0
    page: int = 1
    bounding_box: dict[str, float] | None = None

    @property
    def row_count(self) -> int:
        return len(self.rows) + (1 if self.headers else 0)

    @property
    def column_count(self) -> int:
        return len(self.headers)


@dataclass(frozen=True)
class QueryAnswer:
    """Answer to a custom query; an unanswered query has an empty answer."""

    query: str
    alias: str | None = None
    answer: str = ""
    confidence: float = 0.0
    page: int = 1
