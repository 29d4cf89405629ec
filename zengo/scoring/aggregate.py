"""Session score: accuracy, speed and order folded into one 0-100 value."""

from .difficulty import clamp, round_half_up

# Seconds budgeted per word before the time score starts dropping faster
SECONDS_PER_WORD = 5
ORDER_BONUS = 15


def time_score(time_ratio: float) -> float:
    """Piecewise time score for a ratio of elapsed to budgeted time, clamped to [10, 100]."""
    if time_ratio <= 1:
        score = 100 - 40 * time_ratio
    elif time_ratio <= 2:
        score = 60 - 30 * (time_ratio - 1)
    else:
        score = 30 - 10 * (time_ratio - 2)
    return clamp(score, 10, 100)


def session_score(
    correct_placements: int,
    total_words: int,
    time_taken_ms: float,
    order_correct: bool,
) -> int:
    """
    Combine accuracy, elapsed time and order into the session score.

    Args:
        correct_placements: Number of correctly placed stones
        total_words: Number of words on the board
        time_taken_ms: Playing-phase duration in milliseconds
        order_correct: Whether the replay followed the sentence order

    Returns:
        Integer score in [0, 100]
    """
    words = max(1, total_words)
    accuracy_score = correct_placements / words * 100
    time_ratio = (time_taken_ms / 1000) / (words * SECONDS_PER_WORD)

    base_score = 0.7 * accuracy_score + 0.3 * time_score(time_ratio)
    if order_correct and correct_placements == total_words:
        base_score += ORDER_BONUS

    return round_half_up(clamp(base_score, 0, 100))
