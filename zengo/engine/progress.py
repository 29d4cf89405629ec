"""Recent-results log and level progression nudges."""

from typing import Callable, List, Optional, Sequence
from pydantic import BaseModel, Field

from ..scoring.models import ResultType

MAX_ENTRIES = 50


class ProgressEntry(BaseModel):
    """One finished round as seen by the progression rules."""
    ts: float
    level: str  # e.g. "3x3-easy", "5x5-medium", "7x7-hard"
    result_type: ResultType
    score: Optional[int] = None


class Nudges(BaseModel):
    """Level progression suggestions."""
    ready_for_5x5: bool = False
    suggest_7x7: bool = False


class ProgressLog(BaseModel):
    """Most-recent-first log of finished rounds, capped at max_entries."""
    entries: List[ProgressEntry] = Field(default_factory=list)
    max_entries: int = Field(default=MAX_ENTRIES, ge=1)

    def add(self, entry: ProgressEntry) -> None:
        self.entries.insert(0, entry)
        del self.entries[self.max_entries:]

    def recent(self, limit: int = 20) -> List[ProgressEntry]:
        return self.entries[:limit]

    def nudges(self) -> Nudges:
        return compute_nudges(self.entries)


def _count(entries: Sequence[ProgressEntry], pred: Callable[[ProgressEntry], bool]) -> int:
    return sum(1 for e in entries if pred(e))


def _average_score(entries: Sequence[ProgressEntry]) -> float:
    if not entries:
        return 0.0
    return sum(e.score or 0 for e in entries) / len(entries)


def compute_nudges(recent: Sequence[ProgressEntry]) -> Nudges:
    """
    Suggest moving to a larger board based on recent results.

    - Ready for 5x5: among the last 5 rounds, the 3x3 ones include two
      EXCELLENT results or average at least 80 points.
    - Suggest 7x7: among the last 10 rounds, the 5x5 ones include four
      non-FAIL results or one EXCELLENT.

    Args:
        recent: Entries, most recent first

    Returns:
        Nudges
    """
    last_3x3 = [e for e in recent[:5] if e.level.startswith("3x3")]
    ready_for_5x5 = (
        _count(last_3x3, lambda e: e.result_type == "EXCELLENT") >= 2
        or _average_score(last_3x3) >= 80
    )

    last_5x5 = [e for e in recent[:10] if e.level.startswith("5x5")]
    suggest_7x7 = (
        _count(last_5x5, lambda e: e.result_type != "FAIL") >= 4
        or _count(last_5x5, lambda e: e.result_type == "EXCELLENT") >= 1
    )

    return Nudges(ready_for_5x5=ready_for_5x5, suggest_7x7=suggest_7x7)
