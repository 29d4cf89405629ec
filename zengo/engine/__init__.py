"""Zengo round engine: content, placements, state machine and orchestration."""

from .models import (
    GameState,
    Coords,
    WordMapping,
    BoardContent,
    PlacedStone,
    RoundState,
    RoundEvent,
    ChooseSettings,
    RequestContent,
    ContentLoaded,
    ContentFailed,
    StartRound,
    HideWords,
    PlaceStone,
    ClearFeedback,
    Evaluate,
    SubmitStarted,
    SubmitAcknowledged,
    SubmitFailed,
    PrepareNextRound,
    Reset,
)
from .content import ContentError, ContentIssue, parse_content
from .placement import place_stone, check_end_condition
from .transitions import reduce, NEXT_ROUND_POLICY
from .scheduler import Scheduler, TimerHandle, ManualScheduler, AsyncioScheduler
from .telemetry import TelemetryCollector
from .progress import ProgressEntry, ProgressLog, Nudges, compute_nudges
from .round import RoundEngine, ContentSource, ResultSink, SubmissionReport

__all__ = [
    # Models
    "GameState",
    "Coords",
    "WordMapping",
    "BoardContent",
    "PlacedStone",
    "RoundState",
    # Events
    "RoundEvent",
    "ChooseSettings",
    "RequestContent",
    "ContentLoaded",
    "ContentFailed",
    "StartRound",
    "HideWords",
    "PlaceStone",
    "ClearFeedback",
    "Evaluate",
    "SubmitStarted",
    "SubmitAcknowledged",
    "SubmitFailed",
    "PrepareNextRound",
    "Reset",
    # Content
    "ContentError",
    "ContentIssue",
    "parse_content",
    # State machine
    "place_stone",
    "check_end_condition",
    "reduce",
    "NEXT_ROUND_POLICY",
    # Timers
    "Scheduler",
    "TimerHandle",
    "ManualScheduler",
    "AsyncioScheduler",
    # Telemetry and progress
    "TelemetryCollector",
    "ProgressEntry",
    "ProgressLog",
    "Nudges",
    "compute_nudges",
    # Orchestration
    "RoundEngine",
    "ContentSource",
    "ResultSink",
    "SubmissionReport",
]
