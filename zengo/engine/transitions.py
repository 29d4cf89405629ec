"""
Round state machine as a pure reducer.

`reduce(state, event)` returns the next RoundState. Events that are not valid
in the current state are logged and leave the state unchanged.
"""

import logging
from typing import Callable, Dict, Tuple, Type

from ..scoring.aggregate import session_score
from ..scoring.classify import classify_result
from ..scoring.order import verify_order
from .models import (
    ChooseSettings,
    ClearFeedback,
    ContentFailed,
    ContentLoaded,
    Evaluate,
    FINISHED_STATES,
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
from .placement import place_stone

logger = logging.getLogger("zengo.engine")

# Result type -> (keep content, keep positions) for the next round
NEXT_ROUND_POLICY: Dict[str, Tuple[bool, bool]] = {
    "EXCELLENT": (False, False),
    "SUCCESS": (True, False),
    "FAIL": (True, True),
}


def _ignored(state: RoundState, event: RoundEvent) -> RoundState:
    logger.debug("Ignoring %s in state %s", event.type, state.game_state)
    return state


def _choose_settings(state: RoundState, event: ChooseSettings) -> RoundState:
    return state.with_round_cleared(
        game_state="setting",
        selected_level=event.level,
        selected_language=event.language,
        content=None,
        round_id=None,
        error=None,
    )


def _request_content(state: RoundState, event: RequestContent) -> RoundState:
    if state.game_state not in ("idle", "setting"):
        return _ignored(state, event)
    return state.model_copy(update={"game_state": "loading", "content": None, "error": None})


def _content_loaded(state: RoundState, event: ContentLoaded) -> RoundState:
    if state.game_state != "loading":
        return _ignored(state, event)
    return state.with_round_cleared(game_state="idle", content=event.content, round_id=None, error=None)


def _content_failed(state: RoundState, event: ContentFailed) -> RoundState:
    if state.game_state != "loading":
        return _ignored(state, event)
    return state.model_copy(update={"game_state": "idle", "error": event.error})


def _start_round(state: RoundState, event: StartRound) -> RoundState:
    if state.game_state != "idle" or state.content is None:
        logger.warning("Cannot start round: state is %s, content loaded: %s",
                       state.game_state, state.content is not None)
        return state
    return state.with_round_cleared(game_state="showing", round_id=event.round_id, error=None)


def _hide_words(state: RoundState, event: HideWords) -> RoundState:
    if state.game_state != "showing" or event.round_id != state.round_id:
        logger.debug("Stale hide timer for round %s (current %s, state %s)",
                     event.round_id, state.round_id, state.game_state)
        return state
    return state.model_copy(update={"game_state": "playing", "start_time_ms": event.at_ms})


def _place_stone(state: RoundState, event: PlaceStone) -> RoundState:
    return place_stone(state, event.x, event.y)


def _clear_feedback(state: RoundState, event: ClearFeedback) -> RoundState:
    stones = tuple(
        s.model_copy(update={"feedback": None}) if s.x == event.x and s.y == event.y else s
        for s in state.placed_stones
    )
    return state.model_copy(update={"placed_stones": stones})


def _evaluate(state: RoundState, event: Evaluate) -> RoundState:
    content = state.content
    if state.game_state != "playing" or content is None:
        return _ignored(state, event)

    order_correct = verify_order(content.text, content.word_mappings, state.placed_stones)
    classification = classify_result(
        revealed_count=len(state.revealed_words),
        total_words=content.total_words,
        used_stones_count=state.used_stones_count,
        order_correct=order_correct,
    )

    start = state.start_time_ms if state.start_time_ms is not None else event.at_ms
    time_taken_ms = max(0.0, event.at_ms - start)
    score = session_score(
        correct_placements=state.correct_placements,
        total_words=content.total_words,
        time_taken_ms=time_taken_ms,
        order_correct=bool(order_correct),
    )

    logger.info(
        "Round %s evaluated: %s (order %s, %d/%d stones, score %d)",
        state.round_id, classification.result_type, order_correct,
        state.used_stones_count, content.total_allowed_stones, score,
    )

    return state.model_copy(update={
        "game_state": "finished_success" if classification.completed_successfully else "finished_fail",
        "result_type": classification.result_type,
        "order_correct": order_correct,
        "time_taken_ms": time_taken_ms,
        "score": score,
    })


def _finished_state(state: RoundState) -> str:
    return "finished_fail" if state.result_type == "FAIL" else "finished_success"


def _submit_started(state: RoundState, event: SubmitStarted) -> RoundState:
    if state.game_state not in FINISHED_STATES:
        return _ignored(state, event)
    return state.model_copy(update={"game_state": "submitting", "error": None})


def _submit_acknowledged(state: RoundState, event: SubmitAcknowledged) -> RoundState:
    if state.game_state != "submitting":
        return _ignored(state, event)
    return state.model_copy(update={"game_state": _finished_state(state), "last_ack": dict(event.ack)})


def _submit_failed(state: RoundState, event: SubmitFailed) -> RoundState:
    if state.game_state != "submitting":
        return _ignored(state, event)
    # The decided outcome stays as it is
    return state.model_copy(update={"game_state": _finished_state(state), "error": event.error})


def _prepare_next_round(state: RoundState, event: PrepareNextRound) -> RoundState:
    default_content, default_positions = NEXT_ROUND_POLICY.get(state.result_type or "", (False, False))
    keep_content = event.keep_content if event.keep_content is not None else default_content
    keep_positions = event.keep_positions if event.keep_positions is not None else default_positions

    logger.debug("Next round: keep content=%s, keep positions=%s", keep_content, keep_positions)

    return state.with_round_cleared(
        game_state="idle",
        round_id=None,
        keep_content=keep_content,
        keep_positions=keep_positions,
    )


def _reset(state: RoundState, event: Reset) -> RoundState:
    update = {"game_state": "idle", "round_id": None, "error": None}
    if not event.only_round_state and not event.preserve_flags:
        update["content"] = None
    if not event.preserve_flags:
        update["keep_content"] = False
        update["keep_positions"] = False
    return state.with_round_cleared(**update)


_HANDLERS: Dict[Type, Callable[[RoundState, RoundEvent], RoundState]] = {
    ChooseSettings: _choose_settings,
    RequestContent: _request_content,
    ContentLoaded: _content_loaded,
    ContentFailed: _content_failed,
    StartRound: _start_round,
    HideWords: _hide_words,
    PlaceStone: _place_stone,
    ClearFeedback: _clear_feedback,
    Evaluate: _evaluate,
    SubmitStarted: _submit_started,
    SubmitAcknowledged: _submit_acknowledged,
    SubmitFailed: _submit_failed,
    PrepareNextRound: _prepare_next_round,
    Reset: _reset,
}


def reduce(state: RoundState, event: RoundEvent) -> RoundState:
    """
    Apply one event to a round state.

    Args:
        state: Current round state
        event: Event to apply

    Returns:
        The next round state

    Raises:
        TypeError: If the event type is unknown
    """
    handler = _HANDLERS.get(type(event))
    if handler is None:
        raise TypeError(f"Unknown round event: {type(event).__name__}")
    return handler(state, event)
