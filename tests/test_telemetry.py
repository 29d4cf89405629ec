"""Test click telemetry collection."""

import pytest

from zengo.engine import TelemetryCollector


POSITIONS = [(0, 0), (1, 1), (2, 2)]


@pytest.fixture
def collector():
    collector = TelemetryCollector(hesitation_threshold_ms=1000)
    collector.start_session(POSITIONS, [0, 1, 2], at_ms=1000)
    return collector


class TestClickTiming:
    """Test cases for latency and interval tracking."""

    def test_first_click_latency(self, collector):
        """Latency is measured from the start of the session."""
        collector.record_click(0, 0, 1500)
        assert collector.first_click_latency == 500
        assert collector.inter_click_intervals == []

    def test_inter_click_intervals(self, collector):
        """Subsequent clicks record the gap since the previous click."""
        for x, y, at in ((0, 0, 1500), (1, 1, 2000), (2, 2, 2600)):
            collector.record_click(x, y, at)
        assert collector.inter_click_intervals == [500, 600]

    def test_hesitation(self, collector):
        """Only idle gaps over the threshold count."""
        collector.track_pointer(2500)
        collector.track_pointer(3000)
        collector.track_pointer(4200)
        assert collector.hesitation_periods == [1500, 1200]


class TestSpatialAndOrder:
    """Test cases for spatial error and replay order."""

    def test_spatial_error_is_distance_to_nearest_word(self, collector):
        """Hits have zero error; misses the distance to the nearest word cell."""
        collector.record_click(0, 0, 1100)
        collector.record_click(0, 1, 1200)
        collector.record_click(2, 0, 1300)
        assert collector.spatial_errors[0] == 0
        assert collector.spatial_errors[1] == 1
        assert collector.spatial_errors[2] == pytest.approx(2 ** 0.5)

    def test_out_of_order_replay(self, collector):
        """Replay order is compared step by step with the expected order."""
        for x, y, at in ((0, 0, 1100), (2, 2, 1200), (1, 1, 1300)):
            collector.record_click(x, y, at)
        assert collector.sequential_accuracy() == pytest.approx(1 / 3)
        assert collector.temporal_order_violations() == 1

    def test_violations_compare_position_indices(self):
        """Going back is judged on position indices, independent of the expected order."""
        collector = TelemetryCollector()
        collector.start_session(POSITIONS, [2, 0, 1], at_ms=0)
        for x, y, at in ((2, 2, 100), (0, 0, 200), (1, 1, 300)):
            collector.record_click(x, y, at)
        assert collector.user_sequence == [2, 0, 1]
        assert collector.sequential_accuracy() == 1.0
        assert collector.temporal_order_violations() == 1

    def test_no_clicks(self, collector):
        """An empty session reports no accuracy and no latency."""
        telemetry = collector.finish_session()
        assert telemetry.first_click_latency is None
        assert telemetry.sequential_accuracy == 0.0
        assert telemetry.temporal_order_violations == 0
        assert telemetry.version == "v2.0"


class TestSessionLifecycle:
    """Test cases for starting and finishing sessions."""

    def test_start_session_clears_previous_data(self, collector):
        """A new session starts from scratch."""
        collector.record_click(0, 0, 1500)
        collector.start_session(POSITIONS, [0, 1, 2], at_ms=5000)
        collector.record_click(1, 1, 5200)
        telemetry = collector.finish_session()
        assert telemetry.first_click_latency == 200
        assert telemetry.spatial_errors == [0]

    def test_finish_returns_copies(self, collector):
        """The returned telemetry does not change with later clicks."""
        collector.record_click(0, 0, 1500)
        collector.record_click(1, 1, 1600)
        telemetry = collector.finish_session()
        collector.record_click(2, 2, 1700)
        assert telemetry.inter_click_intervals == [100]
