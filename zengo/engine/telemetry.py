"""
Click telemetry collection for the detailed metrics path.

Collects timing (first-click latency, inter-click intervals, hesitations),
spatial error (distance to the nearest word cell) and replay order while a
round is being played.
"""

import logging
import math
from typing import List, Optional, Sequence, Tuple

from ..scoring.models import DETAILED_TELEMETRY_VERSION, SessionTelemetry

logger = logging.getLogger("zengo.engine")

DEFAULT_HESITATION_THRESHOLD_MS = 1000.0


class TelemetryCollector:
    """
    Accumulates telemetry for one playing phase.

    Attributes:
        hesitation_threshold_ms: Pointer idle time counted as a hesitation
    """

    def __init__(self, hesitation_threshold_ms: float = DEFAULT_HESITATION_THRESHOLD_MS):
        self.hesitation_threshold_ms = hesitation_threshold_ms
        self._reset([], [], 0.0)

    def _reset(self, positions: List[Tuple[int, int]], sequence: List[int], at_ms: float) -> None:
        self.expected_positions = positions
        self.expected_sequence = sequence
        self.user_sequence: List[int] = []
        self.started_at_ms = at_ms
        self.last_click_ms: Optional[float] = None
        self.last_pointer_ms = at_ms
        self.first_click_latency: Optional[float] = None
        self.inter_click_intervals: List[float] = []
        self.hesitation_periods: List[float] = []
        self.spatial_errors: List[float] = []

    def start_session(
        self,
        correct_positions: Sequence[Tuple[int, int]],
        expected_sequence: Optional[Sequence[int]] = None,
        at_ms: float = 0.0,
    ) -> None:
        """
        Begin collecting for a new playing phase.

        Args:
            correct_positions: Word cells in content order
            expected_sequence: Mapping indices in the order they should be replayed
            at_ms: Time the words were hidden
        """
        self._reset(list(correct_positions), list(expected_sequence or []), at_ms)

    def track_pointer(self, at_ms: float) -> None:
        """Record pointer activity; a long idle gap before it counts as hesitation."""
        idle = at_ms - self.last_pointer_ms
        if idle > self.hesitation_threshold_ms:
            self.hesitation_periods.append(idle)
        self.last_pointer_ms = at_ms

    def record_click(self, x: int, y: int, at_ms: float) -> None:
        """Record a click on cell (x, y)."""
        if self.first_click_latency is None:
            self.first_click_latency = at_ms - self.started_at_ms
        elif self.last_click_ms is not None:
            self.inter_click_intervals.append(at_ms - self.last_click_ms)

        if (x, y) in self.expected_positions:
            self.user_sequence.append(self.expected_positions.index((x, y)))

        if self.expected_positions:
            self.spatial_errors.append(min(math.dist((x, y), p) for p in self.expected_positions))

        self.last_click_ms = at_ms

    def sequential_accuracy(self) -> float:
        """Share of expected positions matched at the same step of the replay."""
        if not self.expected_sequence or not self.user_sequence:
            return 0.0
        matches = sum(1 for want, got in zip(self.expected_sequence, self.user_sequence) if want == got)
        return matches / len(self.expected_sequence)

    def temporal_order_violations(self) -> int:
        """Number of clicks on a word with a lower position index than the previous hit."""
        seq = self.user_sequence
        return sum(1 for i in range(1, len(seq)) if seq[i] < seq[i - 1])

    def finish_session(self) -> SessionTelemetry:
        """Return the collected telemetry."""
        telemetry = SessionTelemetry(
            first_click_latency=self.first_click_latency,
            inter_click_intervals=list(self.inter_click_intervals),
            hesitation_periods=list(self.hesitation_periods),
            spatial_errors=list(self.spatial_errors),
            sequential_accuracy=self.sequential_accuracy(),
            temporal_order_violations=self.temporal_order_violations(),
            version=DETAILED_TELEMETRY_VERSION,
        )
        logger.debug(
            "Telemetry: %d intervals, %d hesitations, sequential accuracy %.2f",
            len(telemetry.inter_click_intervals), len(telemetry.hesitation_periods),
            telemetry.sequential_accuracy,
        )
        return telemetry
