"""
Tests for resolving lookup keys to cases.
"""

import asyncio

import pytest

from docket_agent.core.matcher import CaseMatcher, score_candidate
from docket_agent.models import CaseRecord
from docket_agent.utils.errors import AmbiguousCaseError, CaseNotFoundError


class StaticStore:
    """Store returning a fixed candidate list for any query."""

    def __init__(self, *cases):
        self.cases = list(cases)
        self.queries = []

    async def search(self, query):
        self.queries.append(query)
        return list(self.cases)


def case(case_id, case_name, client_name=None, case_number=None):
    return CaseRecord(id=case_id, case_name=case_name, client_name=client_name, case_number=case_number)


def find(store, key):
    return asyncio.run(CaseMatcher(store).find_case(key))


class TestSingleCandidate:

    def test_no_candidates_is_not_found(self):
        with pytest.raises(CaseNotFoundError) as exc_info:
            find(StaticStore(), "Vikram Malhotra")
        assert exc_info.value.identifier == "Vikram Malhotra"

    def test_case_number_in_key_always_matches(self):
        gupta = case("c1", "Gupta Land Dispute", "Rakesh Gupta", "CASE-2025-AB12C")
        assert find(StaticStore(gupta), "Sharma Patel case-2025-ab12c") is gupta

    def test_short_case_number_is_not_trusted(self):
        gupta = case("c1", "Gupta Land Dispute", "Rakesh Gupta", "C-1")
        with pytest.raises(CaseNotFoundError):
            find(StaticStore(gupta), "Sharma Patel C-1")

    def test_strict_subset_of_words_is_not_found(self):
        patel = case("c1", "Priya Patel Divorce", "Priya Patel")
        with pytest.raises(CaseNotFoundError):
            find(StaticStore(patel), "Priya Sharma")

    def test_all_words_matching_is_accepted(self):
        sharma = case("c1", "Rohan Sharma Bail Matter", "Rohan Sharma")
        assert find(StaticStore(sharma), "Rohan Sharma") is sharma

    def test_single_word_lookup_is_accepted(self):
        sharma = case("c1", "Rohan Sharma Bail Matter", "Rohan Sharma")
        assert find(StaticStore(sharma), "Sharma") is sharma

    def test_duplicate_search_hits_collapse_to_one(self):
        sharma = case("c1", "Rohan Sharma Bail Matter", "Rohan Sharma")
        assert find(StaticStore(sharma, sharma), "Sharma") is sharma


class TestMultipleCandidates:

    def test_case_number_wins(self):
        first = case("c1", "Arun Mehta Contract Breach", "Arun Mehta", "CASE-2025-AAAAA")
        second = case("c2", "Arun Mehta Property Case", "Arun Mehta", "CASE-2025-BBBBB")
        assert find(StaticStore(first, second), "CASE-2025-BBBBB") is second

    def test_full_word_match_beats_partial(self):
        first = case("c1", "Arun Mehta Contract Breach", "Arun Mehta")
        second = case("c2", "Arun Mehta Property Case", "Arun Mehta")
        assert find(StaticStore(first, second), "Arun Mehta Contract") is first

    def test_leading_partial_match_with_gap(self):
        mehta = case("c1", "Mehta Land")
        kapoor = case("c2", "Kapoor Will")
        assert find(StaticStore(mehta, kapoor), "Mehta") is mehta

    def test_tie_requires_clarification(self):
        first = case("c1", "Arun Mehta Contract Breach", "Arun Mehta", "CASE-2025-AAAAA")
        second = case("c2", "Arun Mehta Property Case", "Arun Mehta", "CASE-2025-BBBBB")

        with pytest.raises(AmbiguousCaseError) as exc_info:
            find(StaticStore(first, second), "Arun Mehta")

        assert exc_info.value.matches == [
            {"id": "c1", "case_name": "Arun Mehta Contract Breach", "case_number": "CASE-2025-AAAAA"},
            {"id": "c2", "case_name": "Arun Mehta Property Case", "case_number": "CASE-2025-BBBBB"},
        ]

    def test_weak_matches_require_clarification(self):
        first = case("c1", "Priya Sharma Property", "Priya Sharma")
        second = case("c2", "Priya Patel Divorce", "Priya Patel")
        with pytest.raises(AmbiguousCaseError):
            find(StaticStore(first, second), "Priya Kapoor")


class TestScoreCandidate:

    def test_scores(self):
        mehta = case("c1", "Arun Mehta Contract Breach", "Arun Mehta", "CASE-2025-AAAAA")
        assert score_candidate("CASE-2025-AAAAA", mehta) == 1.0
        assert score_candidate("Arun Mehta", mehta) == 0.95
        assert score_candidate("Arun Kapoor", mehta) == pytest.approx(0.35)
        assert score_candidate("Mehta", mehta) == pytest.approx(0.7)

    def test_missing_client_name_does_not_match_everything(self):
        unnamed = case("c1", "Land Dispute")
        assert score_candidate("Arun Mehta", unnamed) == 0.0


class TestStoreSearchSemantics:

    def test_keyword_fallback_finds_first_name_references(self, store):
        meera = store.add_case(case_name="Meera Reddy Custody", client_name="Meera Reddy")
        assert find(store, "Meera custody") is meera
