"""
Name similarity scoring used for case matching and duplicate detection.
"""

import re

_FILLER_WORDS = re.compile(r"\b(case|matter|vs|v\.?|the)\b", re.IGNORECASE)


def _normalize(value: str) -> str:
    collapsed = re.sub(r"\s+", " ", value)
    return re.sub(r"\s+", " ", _FILLER_WORDS.sub("", collapsed)).strip()


def similarity(first: str, second: str) -> float:
    """
    Score how alike two name-like strings are.

    The score is not symmetric: when every word of ``first`` appears in
    ``second`` the result gets a bonus, so a short search term scores
    higher against a longer case name than the other way round.

    Args:
        first: Search term (for example a client name)
        second: Candidate text (for example a stored case name)

    Returns:
        Score between 0.0 and 1.0
    """
    if not first or not second:
        return 0.0

    a = first.lower().strip()
    b = second.lower().strip()
    if a == b:
        return 1.0

    norm_a = _normalize(a)
    norm_b = _normalize(b)
    if norm_a == norm_b:
        return 0.95

    if norm_a in norm_b or norm_b in norm_a:
        return 0.85

    words_a = [word for word in norm_a.split() if len(word) > 1]
    words_b = [word for word in norm_b.split() if len(word) > 1]
    if not words_a or not words_b:
        return 0.0

    common = [word for word in words_a if word in words_b]
    ratio_a = len(common) / len(words_a)
    ratio_b = len(common) / len(words_b)
    average = (ratio_a + ratio_b) / 2

    if ratio_a == 1.0 and len(words_a) >= 2:
        return min(0.9, average + 0.2)

    return average
