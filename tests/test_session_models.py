"""Test narrowing of externally received session payloads."""

import pytest

from zengo.scoring import (
    BasicSession,
    DetailedSession,
    RoundResult,
    SessionPayloadError,
    SessionTelemetry,
    narrow_session,
)


BASE_PAYLOAD = {
    "correctPlacements": 3,
    "incorrectPlacements": 1,
    "timeTakenMs": 8000,
    "completedSuccessfully": True,
    "orderCorrect": False,
}


class TestNarrowSession:
    """Test cases for narrow_session."""

    def test_basic_payload(self):
        """A payload without telemetry narrows to BasicSession."""
        session = narrow_session(BASE_PAYLOAD)
        assert isinstance(session, BasicSession)
        assert session.kind == "basic"
        assert session.correct_placements == 3
        assert session.time_taken_ms == 8000

    def test_detailed_payload(self):
        """v2.0 telemetry narrows to DetailedSession."""
        payload = dict(BASE_PAYLOAD, detailedMetrics={
            "firstClickLatency": 650,
            "interClickIntervals": [300, 420],
            "spatialErrors": [0, 1.41],
            "version": "v2.0",
        })
        session = narrow_session(payload)
        assert isinstance(session, DetailedSession)
        assert session.telemetry.first_click_latency == 650
        assert session.telemetry.inter_click_intervals == [300, 420]

    def test_legacy_version_key(self):
        """The version may also arrive as detailedDataVersion."""
        payload = dict(BASE_PAYLOAD, detailedMetrics={"detailedDataVersion": "v2.0"})
        assert isinstance(narrow_session(payload), DetailedSession)

    def test_other_version_falls_back_to_basic(self):
        """Telemetry with any other version is ignored."""
        payload = dict(BASE_PAYLOAD, detailedMetrics={"version": "v1.0", "firstClickLatency": 650})
        assert isinstance(narrow_session(payload), BasicSession)

    def test_snake_case_telemetry_key(self):
        """Telemetry under detailed_metrics selects the detailed path."""
        payload = dict(BASE_PAYLOAD, detailed_metrics={"version": "v2.0", "first_click_latency": 420})
        session = narrow_session(payload)
        assert isinstance(session, DetailedSession)
        assert session.telemetry.first_click_latency == 420

    def test_snake_case_keys(self):
        """Field names are accepted as well as camelCase aliases."""
        session = narrow_session({
            "correct_placements": 1,
            "incorrect_placements": 0,
            "time_taken_ms": 100,
            "completed_successfully": False,
        })
        assert session.order_correct is False

    def test_missing_counter_is_rejected(self):
        """A payload missing a required counter is rejected."""
        payload = dict(BASE_PAYLOAD)
        del payload["correctPlacements"]
        with pytest.raises(SessionPayloadError):
            narrow_session(payload)

    def test_negative_counter_is_rejected(self):
        """Negative counters are rejected."""
        with pytest.raises(SessionPayloadError):
            narrow_session(dict(BASE_PAYLOAD, incorrectPlacements=-1))

    def test_malformed_telemetry_is_rejected(self):
        """Invalid v2.0 telemetry is rejected rather than silently dropped."""
        payload = dict(BASE_PAYLOAD, detailedMetrics={"version": "v2.0", "sequentialAccuracy": 3})
        with pytest.raises(SessionPayloadError):
            narrow_session(payload)

    def test_non_mapping_is_rejected(self):
        """Only mappings are accepted."""
        with pytest.raises(SessionPayloadError):
            narrow_session([1, 2, 3])

    def test_payload_error_is_value_error(self):
        """SessionPayloadError can be caught as ValueError."""
        with pytest.raises(ValueError):
            narrow_session({})


class TestRoundResult:
    """Test cases for RoundResult."""

    def make_result(self, **kwargs):
        data = {
            "content_id": "content-abc",
            "time_taken_ms": 6000,
            "correct_placements": 3,
            "incorrect_placements": 0,
            "used_stones_count": 3,
            "completed_successfully": True,
            "order_correct": True,
            "result_type": "EXCELLENT",
            "score": 100,
        }
        data.update(kwargs)
        return RoundResult(**data)

    def test_camel_case_payload(self):
        """The payload dumps with camelCase keys."""
        data = self.make_result().model_dump(by_alias=True, exclude_none=True)
        assert data["contentId"] == "content-abc"
        assert data["resultType"] == "EXCELLENT"
        assert "detailedMetrics" not in data

    def test_to_session_basic(self):
        """Without telemetry the result narrows to a basic session."""
        assert isinstance(self.make_result().to_session(), BasicSession)

    def test_to_session_detailed(self):
        """With telemetry the result narrows to a detailed session."""
        result = self.make_result(detailed_metrics=SessionTelemetry(first_click_latency=500))
        session = result.to_session()
        assert isinstance(session, DetailedSession)
        assert session.telemetry.first_click_latency == 500
