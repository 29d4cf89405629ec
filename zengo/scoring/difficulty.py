"""Board-size difficulty table and the final clamp-and-scale step."""

import math
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DifficultyLevel(BaseModel):
    """Difficulty coefficients for one board size."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    multiplier: float = Field(..., gt=0)
    memory_load: int = Field(..., ge=1)
    spatial_complexity: float = Field(..., gt=0)


# Board size -> coefficients
DIFFICULTY_CONFIG: Dict[int, DifficultyLevel] = {
    3: DifficultyLevel(multiplier=1.0, memory_load=9, spatial_complexity=1.0),
    5: DifficultyLevel(multiplier=1.3, memory_load=25, spatial_complexity=1.6),
    7: DifficultyLevel(multiplier=1.7, memory_load=49, spatial_complexity=2.3),
}

FALLBACK_BOARD_SIZE = 5


def clamp(value: float, low: float, high: float) -> float:
    """Clamp value into [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with .5 always rounding up."""
    return math.floor(value + 0.5)


def get_difficulty(
    board_size: int,
    table: Optional[Dict[int, DifficultyLevel]] = None,
    fallback_size: int = FALLBACK_BOARD_SIZE,
) -> DifficultyLevel:
    """
    Look up the difficulty coefficients for a board size.

    Args:
        board_size: Board edge length (3, 5 or 7)
        table: Optional override of DIFFICULTY_CONFIG
        fallback_size: Size to use when board_size is not in the table

    Returns:
        The matching DifficultyLevel
    """
    table = table if table is not None else DIFFICULTY_CONFIG
    if board_size in table:
        return table[board_size]
    return table.get(fallback_size, DIFFICULTY_CONFIG[FALLBACK_BOARD_SIZE])


def apply_difficulty_bonus(value: float, multiplier: float) -> int:
    """Scale a score by the difficulty multiplier, clamp to [0, 100] and round."""
    return round_half_up(clamp(value * multiplier, 0, 100))
