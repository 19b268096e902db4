"""
Tests for name similarity scoring.
"""

import pytest

from docket_agent.utils.similarity import similarity


class TestSimilarity:

    def test_identical_strings_score_one(self):
        assert similarity("Arun Mehta", "Arun Mehta") == 1.0

    def test_case_and_whitespace_are_ignored(self):
        assert similarity("  ARUN mehta ", "arun Mehta") == 1.0

    def test_filler_words_are_stripped(self):
        assert similarity("The Sharma Case", "sharma") == 0.95
        assert similarity("Kapoor vs State", "kapoor state") == 0.95

    def test_containment_scores_085(self):
        assert similarity("arun mehta", "arun mehta contract breach") == 0.85
        assert similarity("arun mehta contract breach", "arun mehta") == 0.85

    def test_partial_word_overlap_averages_ratios(self):
        assert similarity("Amit Kumar", "Amit Singh") == pytest.approx(0.5)

    def test_full_word_coverage_gets_capped_bonus(self):
        assert similarity("kumar amit", "amit kumar property") == pytest.approx(0.9)

    def test_score_is_asymmetric(self):
        forward = similarity("kumar amit", "amit kumar property")
        backward = similarity("amit kumar property", "kumar amit")
        assert forward == pytest.approx(0.9)
        assert backward == pytest.approx(5 / 6)
        assert forward != backward

    def test_empty_input_scores_zero(self):
        assert similarity("", "Arun Mehta") == 0.0
        assert similarity("Arun Mehta", None) == 0.0

    def test_single_letters_are_not_words(self):
        assert similarity("a", "b") == 0.0

    def test_unrelated_names_score_zero(self):
        assert similarity("Priya Sharma", "Vikram Malhotra") == 0.0
