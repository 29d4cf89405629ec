"""Session scoring and cognitive metrics for Zengo rounds."""

from .models import (
    ResultType,
    SessionTelemetry,
    SessionCounters,
    BasicSession,
    DetailedSession,
    SessionRecord,
    SessionPayloadError,
    CognitiveMetricsResult,
    RoundResult,
    narrow_session,
)
from .difficulty import (
    DifficultyLevel,
    DIFFICULTY_CONFIG,
    apply_difficulty_bonus,
    get_difficulty,
    round_half_up,
)
from .order import expected_order, actual_order, verify_order, placement_order
from .classify import Classification, classify_result, stone_allowance
from .signals import (
    Signals,
    SignalSource,
    BasicSignalSource,
    DetailedSignalSource,
    compute_signals,
    inv_norm_cdf,
)
from .metrics import compute_cognitive_metrics
from .aggregate import session_score

__all__ = [
    # Models
    "ResultType",
    "SessionTelemetry",
    "SessionCounters",
    "BasicSession",
    "DetailedSession",
    "SessionRecord",
    "SessionPayloadError",
    "CognitiveMetricsResult",
    "RoundResult",
    "narrow_session",
    # Difficulty
    "DifficultyLevel",
    "DIFFICULTY_CONFIG",
    "apply_difficulty_bonus",
    "get_difficulty",
    "round_half_up",
    # Order verification
    "expected_order",
    "actual_order",
    "verify_order",
    "placement_order",
    # Classification
    "Classification",
    "classify_result",
    "stone_allowance",
    # Signals and metrics
    "Signals",
    "SignalSource",
    "BasicSignalSource",
    "DetailedSignalSource",
    "compute_signals",
    "inv_norm_cdf",
    "compute_cognitive_metrics",
    # Score
    "session_score",
]
