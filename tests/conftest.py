"""Shared fixtures: a 3x3 board with words A(0,0) B(1,1) C(2,2)."""

import copy
from typing import Any, Dict, List

import pytest

from zengo.engine import ManualScheduler, RoundEngine, RoundState, parse_content


CONTENT_PAYLOAD: Dict[str, Any] = {
    "_id": "content-abc",
    "level": "3x3-easy",
    "language": "en",
    "boardSize": 3,
    "proverbText": "A B C",
    "wordMappings": [
        {"word": "A", "coords": {"x": 0, "y": 0}},
        {"word": "B", "coords": {"x": 1, "y": 1}},
        {"word": "C", "coords": {"x": 2, "y": 2}},
    ],
    "totalWords": 3,
    "totalAllowedStones": 5,
    "initialDisplayTimeMs": 3000,
}


class FakeContentSource:
    """Content service returning a fixed payload and recording requests."""

    def __init__(self, payload: Dict[str, Any]):
        self.payload = payload
        self.calls: List[Dict[str, Any]] = []

    def fetch(self, level, language, content_id=None, reshuffle=False):
        self.calls.append({
            "level": level,
            "language": language,
            "content_id": content_id,
            "reshuffle": reshuffle,
        })
        return copy.deepcopy(self.payload)


@pytest.fixture
def content_payload() -> Dict[str, Any]:
    return copy.deepcopy(CONTENT_PAYLOAD)


@pytest.fixture
def content(content_payload):
    board, issues = parse_content(content_payload)
    assert issues == []
    return board


@pytest.fixture
def playing_state(content) -> RoundState:
    return RoundState(game_state="playing", content=content, round_id="r1", start_time_ms=0.0)


@pytest.fixture
def content_source(content_payload) -> FakeContentSource:
    return FakeContentSource(content_payload)


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def engine(scheduler) -> RoundEngine:
    return RoundEngine.create(scheduler=scheduler, clock=scheduler.now)


@pytest.fixture
def playing_engine(engine, scheduler, content_source) -> RoundEngine:
    """Engine whose words have just been hidden (virtual time 3000 ms)."""
    engine.choose_settings("3x3-easy", "en")
    engine.load_content(content_source)
    engine.start()
    scheduler.advance(3000)
    assert engine.state.game_state == "playing"
    return engine
