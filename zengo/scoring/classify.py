"""Result classification for a finished round."""

from typing import NamedTuple, Optional

from .models import ResultType


class Classification(NamedTuple):
    """Outcome of a finished round."""
    result_type: ResultType
    completed_successfully: bool


def stone_allowance(total_words: int) -> int:
    """Maximum stones an EXCELLENT round may use."""
    return total_words + (1 if total_words <= 3 else 2)


def classify_result(
    revealed_count: int,
    total_words: int,
    used_stones_count: int,
    order_correct: Optional[bool],
) -> Classification:
    """
    Classify a finished round as EXCELLENT, SUCCESS or FAIL.

    Decision table:
    - Not every word revealed -> FAIL
    - Order correct and stones within allowance -> EXCELLENT
    - Otherwise -> SUCCESS

    Args:
        revealed_count: Number of distinct words revealed
        total_words: Number of words on the board
        used_stones_count: Stones consumed during the round
        order_correct: Order verifier result (None when indeterminate)

    Returns:
        Classification with the result type and completion flag
    """
    if revealed_count < total_words:
        return Classification("FAIL", False)

    if order_correct is True and used_stones_count <= stone_allowance(total_words):
        return Classification("EXCELLENT", True)

    return Classification("SUCCESS", True)
