"""
Round orchestration.

RoundEngine applies events through the reducer in transitions.py, owns the
hide-words timer, and hands results to the content and result collaborators.
"""

import logging
import time
import uuid
from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol
from pydantic import BaseModel, ConfigDict, Field

from ..config import EngineConfig
from ..scoring.metrics import compute_cognitive_metrics
from ..scoring.models import CognitiveMetricsResult, RoundResult
from ..scoring.order import placement_order, text_positions
from .content import ContentIssue, parse_content
from .models import (
    ChooseSettings,
    ClearFeedback,
    ContentFailed,
    ContentLoaded,
    EndCondition,
    Evaluate,
    HideWords,
    PlaceStone,
    PrepareNextRound,
    RequestContent,
    Reset,
    RoundEvent,
    RoundState,
    StartRound,
    SubmitAcknowledged,
    SubmitFailed,
    SubmitStarted,
)
from .placement import check_end_condition
from .scheduler import AsyncioScheduler, Scheduler, TimerHandle
from .telemetry import TelemetryCollector
from .transitions import reduce

logger = logging.getLogger("zengo.engine")


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class ContentSource(Protocol):
    """Content service collaborator."""

    def fetch(
        self,
        level: str,
        language: str,
        content_id: Optional[str] = None,
        reshuffle: bool = False,
    ) -> Mapping[str, Any]: ...


class ResultSink(Protocol):
    """Persistence/analytics collaborator receiving result payloads."""

    def submit(self, payload: Dict[str, Any]) -> Mapping[str, Any]: ...


class SubmissionReport(BaseModel):
    """Outcome of handing a result payload to the result sink."""
    ok: bool
    payload: Dict[str, Any] = Field(default_factory=dict)
    ack: Optional[Dict[str, Any]] = None
    error: Optional[str] = None


class RoundEngine(BaseModel):
    """
    Single owner of a Zengo round.

    Applies events through the pure reducer, owns the hide-words timer, and
    connects the round to its collaborators (content source, result sink,
    telemetry collector).

    Attributes:
        state: Current round state
        scheduler: Creates the cancellable hide-words timer
        clock: Millisecond clock used for timing events
        config: Engine configuration
        telemetry: Optional collector for the detailed metrics path
        content_issues: Diagnostics from the most recent content load
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: RoundState = Field(default_factory=RoundState)
    scheduler: Any = Field(default_factory=AsyncioScheduler)
    clock: Callable[[], float] = _monotonic_ms
    config: EngineConfig = Field(default_factory=EngineConfig)
    telemetry: Optional[TelemetryCollector] = None
    content_issues: List[ContentIssue] = Field(default_factory=list)
    _hide_timer: Optional[TimerHandle] = None

    @classmethod
    def create(
        cls,
        scheduler: Optional[Scheduler] = None,
        clock: Optional[Callable[[], float]] = None,
        config: Optional[EngineConfig] = None,
        collect_telemetry: bool = False,
    ) -> "RoundEngine":
        """
        Factory method to create an engine with its collaborators wired.

        Args:
            scheduler: Timer scheduler (defaults to the running asyncio loop)
            clock: Millisecond clock (defaults to time.monotonic)
            config: Engine configuration
            collect_telemetry: Attach a TelemetryCollector for detailed metrics

        Returns:
            A RoundEngine in the idle state
        """
        config = config or EngineConfig()
        telemetry = TelemetryCollector(config.hesitation_threshold_ms) if collect_telemetry else None
        return cls(
            scheduler=scheduler or AsyncioScheduler(),
            clock=clock or _monotonic_ms,
            config=config,
            telemetry=telemetry,
        )

    def dispatch(self, event: RoundEvent) -> RoundState:
        """Apply an event to the current state and return the new state."""
        self.state = reduce(self.state, event)
        return self.state

    @property
    def has_pending_timer(self) -> bool:
        return self._hide_timer is not None

    def _cancel_hide_timer(self) -> None:
        if self._hide_timer is not None:
            self._hide_timer.cancel()
            self._hide_timer = None

    # === Settings and content ===

    def choose_settings(self, level: str, language: str) -> RoundState:
        self._cancel_hide_timer()
        return self.dispatch(ChooseSettings(level=level, language=language))

    def load_content(
        self,
        source: ContentSource,
        level: Optional[str] = None,
        language: Optional[str] = None,
        content_id: Optional[str] = None,
        reshuffle: bool = False,
    ) -> RoundState:
        """
        Fetch and attach content for the next round.

        Fetch or parse failures leave the engine idle with `state.error` set.

        Args:
            source: Content service collaborator
            level: Level to request (defaults to the chosen settings)
            language: Language to request (defaults to the chosen settings)
            content_id: Request a specific content item
            reshuffle: Ask the service for new word positions

        Returns:
            The new round state
        """
        self._cancel_hide_timer()
        level = level or self.state.selected_level or ""
        language = language or self.state.selected_language or ""

        if self.state.game_state not in ("idle", "setting"):
            self.dispatch(Reset(only_round_state=True, preserve_flags=True))
        self.dispatch(RequestContent())

        try:
            raw = source.fetch(level, language, content_id=content_id, reshuffle=reshuffle)
            content, issues = parse_content(raw)
        except Exception as e:
            logger.error("Content load failed for level=%s language=%s: %s", level, language, e)
            self.content_issues = []
            return self.dispatch(ContentFailed(error=str(e)))

        self.content_issues = issues
        logger.info("Loaded content %s (%d words, %d stones)",
                    content.id, content.total_words, content.total_allowed_stones)
        return self.dispatch(ContentLoaded(content=content))

    def reload_content(self, source: ContentSource, reshuffle: bool = False) -> RoundState:
        """Fetch the current content item again, optionally with new positions."""
        if self.state.content is None:
            raise ValueError("No content to reload")
        content = self.state.content
        return self.load_content(
            source,
            level=content.level,
            language=content.language,
            content_id=content.id,
            reshuffle=reshuffle,
        )

    # === Round flow ===

    def start(self) -> RoundState:
        """
        Show the words and schedule the hide-words timer.

        Returns:
            The new round state (unchanged if no content is attached)

        Raises:
            RuntimeError: If the scheduler cannot create the timer (e.g. the
                asyncio scheduler outside a running loop); the round is
                reset to idle with its content kept
        """
        self._cancel_hide_timer()
        round_id = uuid.uuid4().hex
        state = self.dispatch(StartRound(round_id=round_id))

        if state.game_state != "showing" or state.round_id != round_id:
            return state

        delay_ms = state.content.initial_display_time_ms
        try:
            self._hide_timer = self.scheduler.call_later(delay_ms, lambda: self._on_hide_timer(round_id))
        except Exception as e:
            logger.error("Could not schedule hide timer for round %s: %s", round_id, e)
            self.dispatch(Reset(only_round_state=True, preserve_flags=True))
            raise
        logger.debug("Round %s showing words for %d ms", round_id, delay_ms)
        return state

    def _on_hide_timer(self, round_id: str) -> None:
        if self.state.round_id == round_id:
            self._hide_timer = None
        now = self.clock()
        state = self.dispatch(HideWords(round_id=round_id, at_ms=now))

        if state.game_state == "playing" and state.round_id == round_id and self.telemetry is not None:
            content = state.content
            positions = [(m.coords.x, m.coords.y) for m in content.word_mappings]
            text_index = text_positions(content.text, content.word_mappings)
            sequence = sorted(range(len(positions)), key=lambda i: text_index[i])
            self.telemetry.start_session(positions, sequence, at_ms=now)

    def track_pointer(self) -> None:
        """Forward pointer activity to the telemetry collector while playing."""
        if self.telemetry is not None and self.state.game_state == "playing":
            self.telemetry.track_pointer(self.clock())

    def place_stone(self, x: int, y: int, auto_evaluate: bool = True) -> RoundState:
        """
        Place a stone and, if the round has ended, evaluate it.

        Args:
            x: Column of the clicked cell
            y: Row of the clicked cell
            auto_evaluate: Evaluate as soon as an end condition holds

        Returns:
            The new round state
        """
        before = self.state
        state = self.dispatch(PlaceStone(x=x, y=y))

        if state is not before and self.telemetry is not None:
            self.telemetry.record_click(x, y, self.clock())

        if auto_evaluate and self.end_condition() is not None:
            return self.evaluate()
        return state

    def end_condition(self) -> Optional[EndCondition]:
        return check_end_condition(self.state)

    def evaluate(self) -> RoundState:
        """Classify and score the round."""
        return self.dispatch(Evaluate(at_ms=self.clock()))

    def clear_feedback(self, x: int, y: int) -> RoundState:
        return self.dispatch(ClearFeedback(x=x, y=y))

    # === Results ===

    def result(self) -> RoundResult:
        """
        Build the result payload for the finished round.

        Raises:
            ValueError: If the round has not been evaluated
        """
        state = self.state
        if state.result_type is None or state.content is None:
            raise ValueError("Round has not been evaluated")

        detailed = self.telemetry.finish_session() if self.telemetry is not None else None

        return RoundResult(
            content_id=state.content.id,
            level=state.content.level,
            language=state.content.language,
            time_taken_ms=state.time_taken_ms or 0.0,
            correct_placements=state.correct_placements,
            incorrect_placements=state.incorrect_placements,
            used_stones_count=state.used_stones_count,
            completed_successfully=state.result_type != "FAIL",
            order_correct=state.order_correct is True,
            result_type=state.result_type,
            score=state.score or 0,
            placement_order=placement_order(state.content.word_mappings, state.placed_stones),
            detailed_metrics=detailed,
        )

    def cognitive_metrics(self, result: Optional[RoundResult] = None) -> CognitiveMetricsResult:
        """Difficulty-adjusted ability scores for the finished round."""
        result = result or self.result()
        return compute_cognitive_metrics(
            result.to_session(),
            board_size=self.state.content.board_size,
            difficulty=self.config.difficulty,
            fallback_size=self.config.fallback_board_size,
        )

    def submit(self, sink: ResultSink) -> SubmissionReport:
        """
        Hand the result payload to the result sink.

        A failed submission is reported and recorded in `state.error`; the
        round outcome is left as decided.

        Args:
            sink: Persistence/analytics collaborator

        Returns:
            SubmissionReport describing the attempt
        """
        payload = self.result().model_dump(by_alias=True, exclude_none=True)
        self.dispatch(SubmitStarted())

        try:
            ack = dict(sink.submit(payload) or {})
        except Exception as e:
            logger.error("Result submission failed for content %s: %s", payload.get("contentId"), e)
            self.dispatch(SubmitFailed(error=str(e)))
            return SubmissionReport(ok=False, payload=payload, error=str(e))

        self.dispatch(SubmitAcknowledged(ack=ack))
        return SubmissionReport(ok=True, payload=payload, ack=ack)

    # === Next round ===

    def prepare_next_round(
        self,
        keep_content: Optional[bool] = None,
        keep_positions: Optional[bool] = None,
    ) -> RoundState:
        self._cancel_hide_timer()
        return self.dispatch(PrepareNextRound(keep_content=keep_content, keep_positions=keep_positions))

    def reset(self, only_round_state: bool = False, preserve_flags: bool = False) -> RoundState:
        self._cancel_hide_timer()
        return self.dispatch(Reset(only_round_state=only_round_state, preserve_flags=preserve_flags))

    def get_state(self) -> Dict:
        """
        Get a summary of the engine state as a dictionary.

        Useful for serialization and logging.
        """
        state = self.state
        return {
            "game_state": state.game_state,
            "round_id": state.round_id,
            "content_id": state.content.id if state.content else None,
            "used_stones_count": state.used_stones_count,
            "revealed_words": sorted(state.revealed_words),
            "result_type": state.result_type,
            "score": state.score,
            "has_pending_timer": self.has_pending_timer,
            "error": state.error,
        }
