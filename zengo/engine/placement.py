"""Placement validation for the playing phase."""

import logging
from typing import Optional

from .models import EndCondition, PlacedStone, RoundState

logger = logging.getLogger("zengo.engine")


def place_stone(state: RoundState, x: int, y: int) -> RoundState:
    """
    Apply one click to the board.

    Clicks outside the playing phase or off the board, clicks on an occupied
    cell, and clicks beyond the stone budget leave the state unchanged. A valid click consumes one stone
    and is correct only if it hits a word that has not been revealed yet.

    Args:
        state: Current round state
        x: Column of the clicked cell
        y: Row of the clicked cell

    Returns:
        The new round state (or the same state for an ignored click)
    """
    content = state.content
    if state.game_state != "playing" or content is None:
        logger.debug("Ignoring click at (%d, %d) in state %s", x, y, state.game_state)
        return state

    if not (0 <= x < content.board_size and 0 <= y < content.board_size):
        logger.debug("Ignoring click at (%d, %d) outside the %dx%d board", x, y,
                     content.board_size, content.board_size)
        return state

    if any(s.x == x and s.y == y for s in state.placed_stones):
        logger.debug("Ignoring click on occupied cell (%d, %d)", x, y)
        return state

    if state.used_stones_count >= content.total_allowed_stones:
        logger.debug("Ignoring click at (%d, %d): stone budget exhausted", x, y)
        return state

    revealed = state.revealed_words
    mapping = content.mapping_at(x, y)
    correct = mapping is not None and mapping.word not in revealed
    if correct:
        revealed = revealed | {mapping.word}

    stone = PlacedStone(
        x=x,
        y=y,
        correct=correct,
        feedback="correct" if correct else "incorrect",
        placement_index=len(state.placed_stones),
    )

    return state.model_copy(update={
        "placed_stones": state.placed_stones + (stone,),
        "revealed_words": revealed,
        "used_stones_count": state.used_stones_count + 1,
    })


def check_end_condition(state: RoundState) -> Optional[EndCondition]:
    """
    Decide whether the round should end after the latest placement.

    Returns:
        "success" when every word is revealed, "fail" when the stone budget
        is spent without that, otherwise None
    """
    content = state.content
    if state.game_state != "playing" or content is None:
        return None

    if len(state.revealed_words) == content.total_words:
        return "success"
    if state.used_stones_count == content.total_allowed_stones:
        return "fail"
    return None
