"""Order verification: does the replay sequence follow the sentence's word order?"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from zengo.engine.models import PlacedStone, WordMapping

logger = logging.getLogger("zengo.scoring")

Point = Tuple[int, int]


def text_positions(text: str, word_mappings: Sequence[WordMapping]) -> List[int]:
    """
    Locate each mapping's word inside the source text.

    A repeated word string claims its occurrences in mapping order: each
    mapping takes the first occurrence at or after the previous claim of the
    same word. A word that does not occur in the text gets -1.

    Args:
        text: The sentence the words were taken from
        word_mappings: Word mappings in content order

    Returns:
        One text index per mapping, aligned with word_mappings
    """
    cursors: Dict[str, int] = {}
    positions: List[int] = []

    for mapping in word_mappings:
        start = cursors.get(mapping.word, 0)
        index = text.find(mapping.word, start)
        if index == -1 and start > 0:
            # No occurrence left for this repeat
            logger.debug("Word %r has no remaining occurrence after index %d", mapping.word, start)
        if index != -1:
            cursors[mapping.word] = index + 1
        positions.append(index)

    return positions


def expected_order(text: str, word_mappings: Sequence[WordMapping]) -> List[Point]:
    """Coordinates of the word mappings sorted by where each word appears in the text."""
    positions = text_positions(text, word_mappings)
    ranked = sorted(range(len(word_mappings)), key=lambda i: positions[i])
    return [(word_mappings[i].coords.x, word_mappings[i].coords.y) for i in ranked]


def correct_stones_in_order(stones: Sequence[PlacedStone]) -> List[PlacedStone]:
    """Correct placements sorted by placement index."""
    return sorted((s for s in stones if s.correct is True), key=lambda s: s.placement_index)


def actual_order(stones: Sequence[PlacedStone]) -> List[Point]:
    """Coordinates of the correct placements in the order they were made."""
    return [(s.x, s.y) for s in correct_stones_in_order(stones)]


def verify_order(
    text: str,
    word_mappings: Sequence[WordMapping],
    stones: Sequence[PlacedStone],
) -> Optional[bool]:
    """
    Compare the expected word order with the actual replay order.

    Returns:
        None while not every word has been found, otherwise True only if
        every position in the two sequences matches
    """
    expected = expected_order(text, word_mappings)
    actual = actual_order(stones)

    if len(expected) != len(actual):
        return None

    for want, got in zip(expected, actual):
        if want != got:
            return False
    return True


def placement_order(word_mappings: Sequence[WordMapping], stones: Sequence[PlacedStone]) -> List[int]:
    """
    Project the correct placements onto indices of the original mappings.

    Returns:
        For each correct stone by placement index, the index of the mapping
        at its coordinates (-1 if none matches)
    """
    index_by_point: Dict[Point, int] = {}
    for i, mapping in enumerate(word_mappings):
        index_by_point.setdefault((mapping.coords.x, mapping.coords.y), i)

    return [index_by_point.get((s.x, s.y), -1) for s in correct_stones_in_order(stones)]
