"""Aggregate confidence and composite quality score for one OCR run.

All confidences are on the [0, 1] scale.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from medocr.blocks.models import Block, BlockType


@dataclass(frozen=True)
class QualityWeights:
    """Blend of average WORD confidence and text coverage."""

    confidence: float = 0.7
    coverage: float = 0.3


def overall_confidence(blocks: Sequence[Block]) -> float:
    """Mean confidence over blocks that report one; 0.0 when none do."""
    scores = [block.confidence for block in blocks if block.confidence > 0]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def quality_score(blocks: Sequence[Block], weights: QualityWeights | None = None) -> float:
    """Weighted WORD confidence plus text coverage, clamped to [0, 1].

    Returns 0.0 when there is no WORD block with text.
    """
    weights = weights or QualityWeights()
    words = [block for block in blocks if block.block_type == BlockType.WORD and block.text]
    if not words:
        return 0.0
    avg_confidence = sum(block.confidence for block in words) / len(words)
    text_coverage = len(words) / len(blocks)
    score = weights.confidence * avg_confidence + weights.coverage * text_coverage
    return min(max(score, 0.0), 1.0)


def count_pages(blocks: Sequence[Block]) -> int:
    return len({block.page for block in blocks})
