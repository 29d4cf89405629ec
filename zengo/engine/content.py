"""Content descriptor parsing: raw content payloads into BoardContent."""

import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Tuple

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from .models import BoardContent

logger = logging.getLogger("zengo.content")


class ContentError(ValueError):
    """Raised when a content payload cannot form a playable board."""


class ContentIssue(BaseModel):
    """A word mapping that was skipped while parsing content."""
    code: str
    message: str
    index: Optional[int] = None
    word: Optional[str] = None


def _as_coordinate(value: Any) -> Optional[int]:
    """Accept ints and integral floats; everything else is non-numeric."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def clean_word_mappings(
    raw_mappings: Any,
    board_size: Optional[int],
) -> Tuple[List[Dict[str, Any]], List[ContentIssue]]:
    """
    Keep the well-formed word mappings and describe the rest.

    Args:
        raw_mappings: The `wordMappings` value from the payload
        board_size: Board edge length used for bounds checks (skipped if unknown)

    Returns:
        Tuple of (valid mappings, issues for skipped entries)
    """
    valid: List[Dict[str, Any]] = []
    issues: List[ContentIssue] = []
    seen: Set[Tuple[int, int]] = set()

    if not isinstance(raw_mappings, (list, tuple)):
        issues.append(ContentIssue(
            code="MAPPINGS_NOT_A_LIST",
            message=f"wordMappings must be a list, got {type(raw_mappings).__name__}",
        ))
        return valid, issues

    for i, entry in enumerate(raw_mappings):
        if not isinstance(entry, Mapping):
            issues.append(ContentIssue(code="INVALID_ENTRY", message=f"Entry {i} is not an object", index=i))
            continue

        word = entry.get("word")
        if not isinstance(word, str) or not word.strip():
            issues.append(ContentIssue(code="MISSING_WORD", message=f"Entry {i} has no word", index=i))
            continue

        coords = entry.get("coords")
        if not isinstance(coords, Mapping):
            issues.append(ContentIssue(
                code="MISSING_COORDS",
                message=f"'{word}' has no coordinates",
                index=i,
                word=word,
            ))
            continue

        x, y = _as_coordinate(coords.get("x")), _as_coordinate(coords.get("y"))
        if x is None or y is None:
            issues.append(ContentIssue(
                code="NON_NUMERIC_COORDS",
                message=f"'{word}' has non-numeric coordinates: {dict(coords)}",
                index=i,
                word=word,
            ))
            continue

        if x < 0 or y < 0 or (board_size is not None and (x >= board_size or y >= board_size)):
            issues.append(ContentIssue(
                code="COORDS_OUT_OF_BOUNDS",
                message=f"'{word}' at ({x}, {y}) is outside the {board_size}x{board_size} board",
                index=i,
                word=word,
            ))
            continue

        if (x, y) in seen:
            issues.append(ContentIssue(
                code="DUPLICATE_COORDS",
                message=f"'{word}' reuses cell ({x}, {y})",
                index=i,
                word=word,
            ))
            continue

        seen.add((x, y))
        valid.append({"word": word, "coords": {"x": x, "y": y}})

    return valid, issues


def parse_content(raw: Mapping[str, Any]) -> Tuple[BoardContent, List[ContentIssue]]:
    """
    Parse a content payload, skipping malformed word mappings.

    Skipped mappings are logged and returned as issues; the word and stone
    counters are recomputed from the mappings that remain.

    Args:
        raw: Content payload from the content service

    Returns:
        Tuple of (BoardContent, issues)

    Raises:
        ContentError: If the payload cannot form a board at all
    """
    if not isinstance(raw, Mapping):
        raise ContentError(f"Content payload must be an object, got {type(raw).__name__}")

    data = dict(raw)
    board_size = data.get("boardSize", data.get("board_size"))
    board_size = board_size if isinstance(board_size, int) and not isinstance(board_size, bool) else None

    mappings, issues = clean_word_mappings(
        data.pop("wordMappings", data.pop("word_mappings", None)),
        board_size,
    )
    for issue in issues:
        logger.warning("Skipping word mapping: %s", issue.message)

    declared_words = data.pop("totalWords", data.pop("total_words", None))
    declared_stones = data.pop("totalAllowedStones", data.pop("total_allowed_stones", None))
    if declared_words is not None and declared_words != len(mappings):
        logger.warning(
            "totalWords %s does not match %d usable mappings; using %d",
            declared_words, len(mappings), len(mappings),
        )

    stones = declared_stones if isinstance(declared_stones, int) else len(mappings)
    if stones < len(mappings):
        logger.warning("totalAllowedStones %d raised to %d", stones, len(mappings))
        stones = len(mappings)

    data["wordMappings"] = mappings
    data["totalWords"] = len(mappings)
    data["totalAllowedStones"] = stones

    try:
        content = BoardContent.model_validate(data)
    except PydanticValidationError as e:
        raise ContentError(f"Invalid content payload: {e}") from e

    if not content.word_mappings:
        raise ContentError(f"Content {content.id} has no usable word mappings")

    return content, issues
