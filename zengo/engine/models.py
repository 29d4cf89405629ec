"""
Pydantic models for the round engine.

Content, stones and the round state are frozen: the reducer in
transitions.py produces a new RoundState for every event instead of
mutating the old one.
"""

from typing import Any, Dict, FrozenSet, Literal, Optional, Tuple, Union
from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from ..scoring.models import ResultType


GameState = Literal[
    "idle",
    "setting",
    "loading",
    "showing",
    "playing",
    "submitting",
    "finished_success",
    "finished_fail",
]
BoardSize = Literal[3, 5, 7]
Feedback = Literal["correct", "incorrect"]
EndCondition = Literal["success", "fail"]

FINISHED_STATES: Tuple[str, ...] = ("finished_success", "finished_fail")


class FrozenModel(BaseModel):
    """Immutable model reading and writing camelCase keys."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class Coords(FrozenModel):
    """A board cell."""
    x: int = Field(..., ge=0)
    y: int = Field(..., ge=0)


class WordMapping(FrozenModel):
    """A word and the cell where it must be replayed."""
    word: str = Field(..., min_length=1)
    coords: Coords


class BoardContent(FrozenModel):
    """
    Board and word layout for one round, supplied by the content service.

    Attributes:
        id: Content identifier (also read from `_id`)
        board_size: Board edge length
        text: Source sentence the words were taken from (also `proverbText`)
        word_mappings: Words and their coordinates
        total_words: Number of words to find
        total_allowed_stones: Stone budget for the round
        initial_display_time_ms: How long the words stay visible
    """
    id: str = Field(..., validation_alias=AliasChoices("id", "_id"))
    level: str = ""
    language: str = ""
    board_size: BoardSize
    text: str = Field("", validation_alias=AliasChoices("text", "proverbText"))
    word_mappings: Tuple[WordMapping, ...]
    total_words: int = Field(..., ge=0)
    total_allowed_stones: int = Field(..., ge=0)
    initial_display_time_ms: int = Field(..., ge=0)
    target_time_ms: Optional[int] = Field(None, ge=0)

    @model_validator(mode="after")
    def _check_invariants(self) -> "BoardContent":
        if self.total_words != len(self.word_mappings):
            raise ValueError(
                f"totalWords ({self.total_words}) does not match "
                f"wordMappings length ({len(self.word_mappings)})"
            )
        if self.total_allowed_stones < self.total_words:
            raise ValueError(
                f"totalAllowedStones ({self.total_allowed_stones}) "
                f"is less than totalWords ({self.total_words})"
            )
        for mapping in self.word_mappings:
            if mapping.coords.x >= self.board_size or mapping.coords.y >= self.board_size:
                raise ValueError(
                    f"Coordinates ({mapping.coords.x}, {mapping.coords.y}) of '{mapping.word}' "
                    f"outside {self.board_size}x{self.board_size} board"
                )
        return self

    @property
    def words(self) -> FrozenSet[str]:
        """Distinct words on the board."""
        return frozenset(m.word for m in self.word_mappings)

    def mapping_at(self, x: int, y: int) -> Optional[WordMapping]:
        """The word mapping at (x, y), if any."""
        for mapping in self.word_mappings:
            if mapping.coords.x == x and mapping.coords.y == y:
                return mapping
        return None


class PlacedStone(FrozenModel):
    """One placement attempt, in insertion order."""
    x: int
    y: int
    correct: Optional[bool] = None
    placement_index: int = Field(..., ge=0)
    feedback: Optional[Feedback] = None


class RoundState(FrozenModel):
    """
    Complete state of one round.

    Only the reducer produces new values; every field is replaced, never
    mutated in place.
    """
    game_state: GameState = "idle"
    content: Optional[BoardContent] = None
    round_id: Optional[str] = None
    placed_stones: Tuple[PlacedStone, ...] = ()
    revealed_words: FrozenSet[str] = frozenset()
    used_stones_count: int = 0
    start_time_ms: Optional[float] = None
    time_taken_ms: Optional[float] = None
    result_type: Optional[ResultType] = None
    order_correct: Optional[bool] = None
    score: Optional[int] = None
    selected_level: Optional[str] = None
    selected_language: Optional[str] = None
    keep_content: bool = False
    keep_positions: bool = False
    error: Optional[str] = None
    last_ack: Optional[Dict[str, Any]] = None

    @property
    def correct_placements(self) -> int:
        return sum(1 for s in self.placed_stones if s.correct is True)

    @property
    def incorrect_placements(self) -> int:
        return sum(1 for s in self.placed_stones if s.correct is not True)

    @property
    def completed_successfully(self) -> bool:
        """Whether every word has been revealed."""
        if self.content is None:
            return False
        return len(self.revealed_words) == self.content.total_words

    @property
    def is_finished(self) -> bool:
        return self.game_state in FINISHED_STATES

    def with_round_cleared(self, **update: Any) -> "RoundState":
        """Copy with placements, timing and result fields reset."""
        cleared: Dict[str, Any] = {
            "placed_stones": (),
            "revealed_words": frozenset(),
            "used_stones_count": 0,
            "start_time_ms": None,
            "time_taken_ms": None,
            "result_type": None,
            "order_correct": None,
            "score": None,
            "last_ack": None,
        }
        cleared.update(update)
        return self.model_copy(update=cleared)


# === Events ===

class ChooseSettings(FrozenModel):
    type: Literal["choose_settings"] = "choose_settings"
    level: str
    language: str


class RequestContent(FrozenModel):
    type: Literal["request_content"] = "request_content"


class ContentLoaded(FrozenModel):
    type: Literal["content_loaded"] = "content_loaded"
    content: BoardContent


class ContentFailed(FrozenModel):
    type: Literal["content_failed"] = "content_failed"
    error: str


class StartRound(FrozenModel):
    type: Literal["start_round"] = "start_round"
    round_id: str


class HideWords(FrozenModel):
    type: Literal["hide_words"] = "hide_words"
    round_id: str
    at_ms: float


class PlaceStone(FrozenModel):
    type: Literal["place_stone"] = "place_stone"
    x: int
    y: int


class ClearFeedback(FrozenModel):
    type: Literal["clear_feedback"] = "clear_feedback"
    x: int
    y: int


class Evaluate(FrozenModel):
    type: Literal["evaluate"] = "evaluate"
    at_ms: float


class SubmitStarted(FrozenModel):
    type: Literal["submit_started"] = "submit_started"


class SubmitAcknowledged(FrozenModel):
    type: Literal["submit_acknowledged"] = "submit_acknowledged"
    ack: Dict[str, Any] = Field(default_factory=dict)


class SubmitFailed(FrozenModel):
    type: Literal["submit_failed"] = "submit_failed"
    error: str


class PrepareNextRound(FrozenModel):
    type: Literal["prepare_next_round"] = "prepare_next_round"
    keep_content: Optional[bool] = None
    keep_positions: Optional[bool] = None


class Reset(FrozenModel):
    type: Literal["reset"] = "reset"
    only_round_state: bool = False
    preserve_flags: bool = False


RoundEvent = Union[
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
]
