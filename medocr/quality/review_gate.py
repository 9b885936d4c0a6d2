from medocr.processor.models import ProcessingOptions

QUALITY_SCORE_FLOOR = 0.7


def requires_human_review(
    confidence: float,
    quality_score: float,
    options: ProcessingOptions,
) -> bool:
    """Decide whether an extraction must go to a human reviewer.

    An operator override always wins. Otherwise low confidence (against the
    configurable threshold) or a quality score under the fixed floor routes
    the document to review.
    """
    if options.require_human_review:
        return True
    return confidence < options.confidence_threshold or quality_score < QUALITY_SCORE_FLOOR
