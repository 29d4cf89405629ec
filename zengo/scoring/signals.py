"""
Intermediate signals for the metrics engine.

Both session kinds feed the same formulas through a SignalSource. The detailed
source additionally exposes telemetry summaries; no formula reads them yet.
"""

import math
from typing import NamedTuple, Optional, Protocol, Union

from .difficulty import clamp
from .models import BasicSession, DetailedSession, SessionTelemetry

EPSILON = 0.01

# Beasley-Springer-Moro coefficients
_BSM_A = (2.50662823884, -18.61500062529, 41.39119773534, -25.44106049637)
_BSM_B = (-8.47351093090, 23.08336743743, -21.06224101826, 3.13082909833)
_BSM_C = (
    0.3374754822726147, 0.9761690190917186, 0.1607979714918209,
    0.0276438810333863, 0.0038405729373609, 0.0003951896511919,
    0.0000321767881768, 0.0000002888167364, 0.0000003960315187,
)


def inv_norm_cdf(p: float) -> float:
    """
    Inverse of the standard normal CDF (Beasley-Springer-Moro approximation).

    Args:
        p: Probability in the open interval (0, 1)

    Returns:
        z such that Phi(z) is approximately p
    """
    if not 0 < p < 1:
        raise ValueError(f"Probability must be in (0, 1), got {p}")

    y = p - 0.5
    if abs(y) < 0.42:
        r = y * y
        a0, a1, a2, a3 = _BSM_A
        b0, b1, b2, b3 = _BSM_B
        numerator = y * (((a3 * r + a2) * r + a1) * r + a0)
        denominator = (((b3 * r + b2) * r + b1) * r + b0) * r + 1
        return numerator / denominator

    r = p if y <= 0 else 1 - p
    r = math.log(-math.log(r))
    x = 0.0
    for coefficient in reversed(_BSM_C):
        x = x * r + coefficient
    return -x if y < 0 else x


class SignalSource(Protocol):
    """Anything that can supply the counters the formulas are built on."""

    @property
    def correct(self) -> int: ...

    @property
    def incorrect(self) -> int: ...

    @property
    def time_taken_ms(self) -> float: ...

    @property
    def completed(self) -> bool: ...

    @property
    def order_correct(self) -> bool: ...


class BasicSignalSource:
    """Signal source backed only by the session counters."""

    def __init__(self, session: Union[BasicSession, DetailedSession]):
        self._session = session

    @property
    def correct(self) -> int:
        return self._session.correct_placements

    @property
    def incorrect(self) -> int:
        return self._session.incorrect_placements

    @property
    def time_taken_ms(self) -> float:
        return self._session.time_taken_ms

    @property
    def completed(self) -> bool:
        return self._session.completed_successfully

    @property
    def order_correct(self) -> bool:
        return self._session.order_correct


class DetailedSignalSource(BasicSignalSource):
    """Signal source for v2.0 sessions; adds telemetry summaries."""

    def __init__(self, session: DetailedSession):
        super().__init__(session)
        self.telemetry: SessionTelemetry = session.telemetry

    @property
    def first_click_latency(self) -> Optional[float]:
        return self.telemetry.first_click_latency

    @property
    def mean_inter_click_interval(self) -> Optional[float]:
        intervals = self.telemetry.inter_click_intervals
        return sum(intervals) / len(intervals) if intervals else None

    @property
    def mean_spatial_error(self) -> Optional[float]:
        errors = self.telemetry.spatial_errors
        return sum(errors) / len(errors) if errors else None

    @property
    def total_hesitation_ms(self) -> float:
        return float(sum(self.telemetry.hesitation_periods))


def signal_source_for(session: Union[BasicSession, DetailedSession]) -> BasicSignalSource:
    """Pick the signal source matching the session kind."""
    if isinstance(session, DetailedSession):
        return DetailedSignalSource(session)
    return BasicSignalSource(session)


class Signals(NamedTuple):
    """Derived signals shared by every ability formula."""
    accuracy: float
    error_rate: float
    log_accuracy: float
    mean_rt: float
    ies: float
    ies_score: float
    d_prime: float
    d_prime_score: float
    time_decay: float
    efficiency_score: float
    load_score: float
    completed: float
    order_correct: float


def compute_signals(source: SignalSource) -> Signals:
    """Derive every intermediate signal from a signal source."""
    correct = source.correct
    incorrect = source.incorrect
    time_taken_ms = source.time_taken_ms
    attempts = correct + incorrect

    accuracy = correct / attempts * 100 if attempts > 0 else 0.0
    error_rate = 100 - accuracy

    log_accuracy = math.log10(max(1.0, accuracy)) / math.log10(100) * 100

    mean_rt = time_taken_ms / max(1, attempts)
    ies = mean_rt / max(EPSILON, accuracy / 100)
    ies_score = clamp(100 - ies / 1000 * 100, 0, 100)

    hit_rate = clamp(accuracy / 100, EPSILON, 1 - EPSILON)
    false_alarm_rate = clamp(error_rate / 100, EPSILON, 1 - EPSILON)
    d_prime = inv_norm_cdf(hit_rate) - inv_norm_cdf(false_alarm_rate)
    d_prime_score = clamp((d_prime + 2) / 4 * 100, 0, 100)

    time_decay = math.exp(-time_taken_ms / 45000) * 100
    efficiency_score = min(100.0, correct * 60000 / max(1.0, time_taken_ms))
    load_score = 100 - min(100.0, (incorrect / max(1, correct)) * 50)

    return Signals(
        accuracy=accuracy,
        error_rate=error_rate,
        log_accuracy=log_accuracy,
        mean_rt=mean_rt,
        ies=ies,
        ies_score=ies_score,
        d_prime=d_prime,
        d_prime_score=d_prime_score,
        time_decay=time_decay,
        efficiency_score=efficiency_score,
        load_score=load_score,
        completed=1.0 if source.completed else 0.0,
        order_correct=1.0 if source.order_correct else 0.0,
    )
