"""
Cognitive metrics engine.

Each ability is a fixed weighted sum of the shared signals, rounded, then
scaled by the board-size difficulty multiplier and clamped to [0, 100].
"""

import logging
import math
from typing import Callable, Dict, Optional, Tuple, Union

from .difficulty import FALLBACK_BOARD_SIZE, DifficultyLevel, apply_difficulty_bonus, get_difficulty, round_half_up
from .models import BasicSession, CognitiveMetricsResult, DetailedSession
from .signals import Signals, compute_signals, signal_source_for

logger = logging.getLogger("zengo.scoring")

Term = Callable[[Signals], float]
WeightTable = Dict[str, Tuple[Tuple[float, Term], ...]]


def _recall_quality(s: Signals) -> float:
    if s.completed:
        return min(100.0, 100 * math.exp(-s.error_rate / 25))
    return 50.0


BASELINE_WEIGHTS: WeightTable = {
    "hippocampus_activation": (
        (0.4, lambda s: s.log_accuracy * 0.6 + s.order_correct * 40),
        (0.3, _recall_quality),
        (0.3, lambda s: s.d_prime_score),
    ),
    "working_memory": (
        (0.3, lambda s: s.ies_score),
        (0.25, lambda s: s.order_correct * 60 + s.accuracy * 0.4),
        (0.25, lambda s: s.efficiency_score),
        (0.2, lambda s: s.load_score),
    ),
    "processing_speed": (
        (0.4, lambda s: s.ies_score),
        (0.3, lambda s: s.time_decay),
        (0.3, lambda s: s.efficiency_score),
    ),
    "attention": (
        (0.35, lambda s: s.d_prime_score),
        (0.25, lambda s: s.accuracy),
        (0.2, lambda s: s.load_score),
        (0.2, lambda s: s.time_decay),
    ),
    "pattern_recognition": (
        (0.5, lambda s: s.order_correct * 60 + s.accuracy * 0.4),
        (0.3, lambda s: s.d_prime_score),
        (0.2, lambda s: s.log_accuracy),
    ),
    "cognitive_flexibility": (
        (0.3, lambda s: s.completed * 50 + s.accuracy * 0.5),
        (0.3, lambda s: s.load_score),
        (0.2, lambda s: s.ies_score),
        (0.2, lambda s: s.time_decay),
    ),
    "visuospatial_precision": (
        (0.4, lambda s: s.accuracy),
        (0.3, lambda s: s.d_prime_score),
        (0.3, lambda s: s.load_score),
    ),
    "executive_function": (
        (0.3, lambda s: s.ies_score),
        (0.25, lambda s: s.d_prime_score),
        (0.25, lambda s: s.order_correct * 50 + s.completed * 50),
        (0.2, lambda s: s.load_score),
    ),
}

EXTENDED_WEIGHTS: WeightTable = {
    "spatial_memory_accuracy": (
        (0.6, lambda s: s.log_accuracy),
        (0.4, lambda s: s.d_prime_score),
    ),
    "response_consistency": (
        (0.5, lambda s: s.ies_score),
        (0.5, lambda s: s.time_decay),
    ),
    "learning_adaptability": (
        (0.4, lambda s: 70.0 if s.completed else 40.0),
        (0.3, lambda s: s.efficiency_score),
        (0.3, lambda s: s.load_score),
    ),
    "focus_endurance": (
        (0.5, lambda s: s.accuracy),
        (0.3, lambda s: s.time_decay),
        (0.2, lambda s: s.load_score),
    ),
    "sequential_processing": (
        (0.6, lambda s: 80.0 if s.order_correct else 50.0),
        (0.4, lambda s: s.log_accuracy),
    ),
}


def weighted_score(signals: Signals, terms: Tuple[Tuple[float, Term], ...]) -> int:
    """Evaluate one ability's weighted terms and round to the nearest integer."""
    return round_half_up(sum(weight * term(signals) for weight, term in terms))


def raw_abilities(signals: Signals) -> Dict[str, int]:
    """All thirteen abilities before the difficulty step."""
    scores = {name: weighted_score(signals, terms) for name, terms in BASELINE_WEIGHTS.items()}
    scores.update({name: weighted_score(signals, terms) for name, terms in EXTENDED_WEIGHTS.items()})
    return scores


def compute_cognitive_metrics(
    session: Union[BasicSession, DetailedSession],
    board_size: int = 5,
    difficulty: Optional[Dict[int, DifficultyLevel]] = None,
    fallback_size: int = FALLBACK_BOARD_SIZE,
) -> CognitiveMetricsResult:
    """
    Compute difficulty-adjusted ability scores for a session.

    Args:
        session: Narrowed session record (see narrow_session)
        board_size: Board edge length, selects the difficulty multiplier
        difficulty: Optional override of the difficulty table
        fallback_size: Board size whose multiplier applies to unknown sizes

    Returns:
        CognitiveMetricsResult with every ability in [0, 100]
    """
    source = signal_source_for(session)
    signals = compute_signals(source)
    multiplier = get_difficulty(board_size, difficulty, fallback_size).multiplier

    logger.debug(
        "Computing %s metrics: accuracy=%.1f dPrime=%.2f boardSize=%d multiplier=%.2f",
        session.kind, signals.accuracy, signals.d_prime, board_size, multiplier,
    )

    final = {
        name: apply_difficulty_bonus(score, multiplier)
        for name, score in raw_abilities(signals).items()
    }
    return CognitiveMetricsResult(**final)
