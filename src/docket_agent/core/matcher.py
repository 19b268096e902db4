"""
Case matcher resolving a spoken case reference to a single case record.
"""

import logging
from typing import List, Tuple

from ..models import CaseRecord
from ..utils.errors import AmbiguousCaseError, CaseNotFoundError

logger = logging.getLogger(__name__)

CASE_NUMBER_MIN_LENGTH = 5
FULL_MATCH_SCORE = 0.95
PARTIAL_MATCH_WEIGHT = 0.7
CONFIDENT_SCORE = 0.9
LEADING_SCORE = 0.7
LEADING_GAP = 0.2


def significant_words(text: str) -> List[str]:
    """Lower-cased words longer than one character"""
    return [word for word in (text or "").lower().split() if len(word) > 1]


def matches_case_number(lookup_key: str, case: CaseRecord) -> bool:
    case_number = (case.case_number or "").upper()
    return len(case_number) > CASE_NUMBER_MIN_LENGTH and case_number in lookup_key.upper()


def matching_words(search_words: List[str], case: CaseRecord) -> List[str]:
    """Search words that appear in, or contain, a word of the case or client name"""
    target_words = (case.case_name or "").lower().split() + (case.client_name or "").lower().split()
    return [
        search_word for search_word in search_words
        if any(target in search_word or search_word in target for target in target_words)
    ]


def score_candidate(lookup_key: str, case: CaseRecord) -> float:
    """
    Score one candidate for a lookup key.

    Returns:
        1.0 for a case-number hit, 0.95 when every word (two or more) matches,
        otherwise the share of matching words weighted by 0.7
    """
    if matches_case_number(lookup_key, case):
        return 1.0

    search_words = significant_words(lookup_key)
    matched = matching_words(search_words, case)
    if search_words and len(matched) == len(search_words) and len(search_words) >= 2:
        return FULL_MATCH_SCORE

    ratio = len(matched) / len(search_words) if search_words else 0.0
    return ratio * PARTIAL_MATCH_WEIGHT


class CaseMatcher:
    """Resolve lookup keys against the case store."""

    def __init__(self, store):
        self.store = store

    async def search_candidates(self, lookup_key: str) -> List[CaseRecord]:
        results = await self.store.search(lookup_key)
        unique = {}
        for case in results:
            unique.setdefault(case.id, case)
        return list(unique.values())

    async def find_case(self, lookup_key: str) -> CaseRecord:
        """
        Resolve a lookup key to exactly one case.

        Args:
            lookup_key: Case number or client name

        Returns:
            The matching case record

        Raises:
            CaseNotFoundError: No candidate, or a lone candidate that only partly matches
            AmbiguousCaseError: Several candidates and none clearly ahead
        """
        candidates = await self.search_candidates(lookup_key)

        if not candidates:
            logger.info(f"🔍 No cases found for '{lookup_key}'")
            raise CaseNotFoundError(lookup_key)

        if len(candidates) == 1:
            return self._verify_single(lookup_key, candidates[0])

        return self._disambiguate(lookup_key, candidates)

    def _verify_single(self, lookup_key: str, case: CaseRecord) -> CaseRecord:
        if matches_case_number(lookup_key, case):
            return case

        search_words = significant_words(lookup_key)
        matched = matching_words(search_words, case)
        if len(search_words) >= 2 and len(matched) < len(search_words):
            # e.g. "Priya Sharma" finding "Priya Patel" on the first name alone
            logger.info(
                f"🔍 Single result '{case.case_name}' only matches {len(matched)}/{len(search_words)} words of '{lookup_key}'"
            )
            raise CaseNotFoundError(lookup_key)

        return case

    def _disambiguate(self, lookup_key: str, candidates: List[CaseRecord]) -> CaseRecord:
        scored: List[Tuple[float, CaseRecord]] = [
            (score_candidate(lookup_key, case), case) for case in candidates
        ]
        scored.sort(key=lambda item: item[0], reverse=True)

        best_score, best = scored[0]
        second_score, second = scored[1]
        gap = best_score - second_score

        logger.info(
            f"🔍 Disambiguating '{lookup_key}': best '{best.case_name}' ({best_score:.2f}), "
            f"second '{second.case_name}' ({second_score:.2f})"
        )

        # A tie at the top is ambiguous however high the score
        if gap > 0 and (best_score >= CONFIDENT_SCORE or (best_score >= LEADING_SCORE and gap >= LEADING_GAP)):
            logger.info(f"✅ Auto-selected '{best.case_name}' for '{lookup_key}'")
            return best

        raise AmbiguousCaseError([
            {"id": case.id, "case_name": case.case_name, "case_number": case.case_number}
            for case in candidates
        ])
