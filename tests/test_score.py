"""Test the session score and result classification."""

import pytest

from zengo.scoring import classify_result, session_score, stone_allowance
from zengo.scoring.aggregate import time_score


class TestTimeScore:
    """Test cases for the piecewise time score."""

    def test_instant_round_scores_full(self):
        """A ratio of zero scores 100."""
        assert time_score(0) == 100

    def test_segment_boundaries(self):
        """The segments meet at ratio 1 and 2."""
        assert time_score(1) == 60
        assert time_score(2) == 30

    def test_floor_of_ten(self):
        """Very slow rounds never drop below 10."""
        assert time_score(4) == 10
        assert time_score(50) == 10


class TestSessionScore:
    """Test cases for session_score."""

    def test_full_accuracy_without_order(self):
        """Three of three words in 10 s without order bonus."""
        assert session_score(3, 3, 10000, False) == 92

    def test_order_bonus_capped_at_100(self):
        """The order bonus pushes the score up but never past 100."""
        assert session_score(3, 3, 10000, True) == 100

    def test_order_bonus_requires_all_words(self):
        """The bonus is not granted when some words were missed."""
        assert session_score(2, 3, 10000, True) == session_score(2, 3, 10000, False)

    def test_zero_words_does_not_divide_by_zero(self):
        """A board with no words still produces a valid score."""
        score = session_score(0, 0, 0, False)
        assert 0 <= score <= 100

    @pytest.mark.parametrize("correct", [0, 1, 2, 3])
    def test_score_in_range(self, correct):
        """Scores stay within [0, 100]."""
        for time_ms in (0, 5000, 60000, 600000):
            assert 0 <= session_score(correct, 3, time_ms, correct == 3) <= 100


class TestClassifyResult:
    """Test cases for classify_result."""

    def test_stone_allowance(self):
        """Small boards allow one extra stone, larger ones two."""
        assert stone_allowance(3) == 4
        assert stone_allowance(4) == 6
        assert stone_allowance(1) == 2

    def test_excellent(self):
        """All words, correct order and stones within allowance."""
        result = classify_result(3, 3, 4, True)
        assert result.result_type == "EXCELLENT"
        assert result.completed_successfully is True

    def test_too_many_stones_is_success(self):
        """Correct order but over the allowance downgrades to SUCCESS."""
        assert classify_result(3, 3, 5, True).result_type == "SUCCESS"

    def test_wrong_order_is_success(self):
        """All words found out of order is SUCCESS."""
        assert classify_result(3, 3, 3, False).result_type == "SUCCESS"

    def test_indeterminate_order_is_not_excellent(self):
        """An indeterminate order never counts as correct."""
        assert classify_result(3, 3, 3, None).result_type == "SUCCESS"

    def test_missing_words_is_fail(self):
        """Any unrevealed word fails the round."""
        result = classify_result(2, 3, 5, None)
        assert result.result_type == "FAIL"
        assert result.completed_successfully is False
