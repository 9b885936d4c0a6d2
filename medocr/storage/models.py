from dataclasses import dataclass


@dataclass(frozen=True)
class ObjectMetadata:
    """What the pipeline needs to know about a stored document."""

    size_bytes: int
    page_count_hint: int | None = None
    content_type: str | None = None
