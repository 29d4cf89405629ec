"""Test the recent-results log and level nudges."""

from zengo.engine import ProgressEntry, ProgressLog, compute_nudges


def entry(level, result_type, score=None, ts=0.0):
    return ProgressEntry(ts=ts, level=level, result_type=result_type, score=score)


class TestProgressLog:
    """Test cases for ProgressLog."""

    def test_most_recent_first(self):
        """New entries are prepended."""
        log = ProgressLog()
        log.add(entry("3x3-easy", "FAIL", ts=1))
        log.add(entry("3x3-easy", "SUCCESS", ts=2))
        assert [e.ts for e in log.entries] == [2, 1]

    def test_capped(self):
        """The log keeps at most max_entries."""
        log = ProgressLog(max_entries=3)
        for ts in range(5):
            log.add(entry("3x3-easy", "SUCCESS", ts=ts))
        assert [e.ts for e in log.entries] == [4, 3, 2]

    def test_recent(self):
        """recent() returns the newest entries up to the limit."""
        log = ProgressLog()
        for ts in range(30):
            log.add(entry("3x3-easy", "SUCCESS", ts=ts))
        assert len(log.recent()) == 20
        assert log.recent(2)[0].ts == 29


class TestNudges:
    """Test cases for compute_nudges."""

    def test_no_history(self):
        """No rounds, no nudges."""
        nudges = compute_nudges([])
        assert nudges.ready_for_5x5 is False
        assert nudges.suggest_7x7 is False

    def test_two_excellent_3x3(self):
        """Two recent EXCELLENT 3x3 rounds suggest 5x5."""
        recent = [entry("3x3-easy", "EXCELLENT", 60), entry("3x3-easy", "EXCELLENT", 60)]
        assert compute_nudges(recent).ready_for_5x5 is True

    def test_high_3x3_average(self):
        """A recent 3x3 average of 80 suggests 5x5."""
        recent = [entry("3x3-easy", "SUCCESS", 85), entry("3x3-easy", "SUCCESS", 75)]
        assert compute_nudges(recent).ready_for_5x5 is True

    def test_only_last_five_rounds_count(self):
        """Older 3x3 successes outside the window are ignored."""
        recent = [entry("5x5-medium", "FAIL", 10)] * 5 + [entry("3x3-easy", "EXCELLENT", 100)] * 3
        assert compute_nudges(recent).ready_for_5x5 is False

    def test_four_5x5_passes(self):
        """Four non-FAIL 5x5 rounds in the last ten suggest 7x7."""
        recent = [entry("5x5-medium", "SUCCESS", 70)] * 4
        assert compute_nudges(recent).suggest_7x7 is True

    def test_one_excellent_5x5(self):
        """One EXCELLENT 5x5 round suggests 7x7."""
        recent = [entry("5x5-medium", "FAIL", 20)] * 3 + [entry("5x5-medium", "EXCELLENT", 95)]
        assert compute_nudges(recent).suggest_7x7 is True

    def test_three_5x5_passes_not_enough(self):
        """Three passes without an EXCELLENT do not suggest 7x7."""
        recent = [entry("5x5-medium", "SUCCESS", 70)] * 3 + [entry("5x5-medium", "FAIL", 20)] * 3
        assert compute_nudges(recent).suggest_7x7 is False

    def test_log_nudges(self):
        """ProgressLog exposes nudges over its entries."""
        log = ProgressLog()
        log.add(entry("3x3-easy", "EXCELLENT", 90))
        log.add(entry("3x3-easy", "EXCELLENT", 95))
        assert log.nudges().ready_for_5x5 is True
