"""String similarity metrics used by the text field matchers.

Two measures:

- ``edit_distance``: Levenshtein distance (insert/delete/substitute, unit
  cost) via rapidfuzz.
- ``similarity``: Jaro similarity with a short-prefix bonus. Unlike the
  classic Jaro-Winkler formula, the bonus is always applied (there is no
  0.7 boost threshold), which rewards names and references that share their
  first characters even when the tails are badly mangled.

Jaro uses a matching window of ``floor(max_len / 2) - 1`` positions. The
transposition term is ``t / 2`` with true division, where ``t`` counts the
matched characters that appear in a different order; rapidfuzz halves ``t``
with integer division, so the Jaro part is computed here.
"""

from rapidfuzz.distance import Levenshtein

PREFIX_SCALE = 0.1
MAX_PREFIX_LENGTH = 4


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings.

    Distance to or from an empty string equals the other string's length.

    Example:
        >>> edit_distance("kitten", "sitting")
        3
    """
    return int(Levenshtein.distance(a or "", b or ""))


def jaro_similarity(s1: str, s2: str) -> float:
    """Jaro similarity of two already-normalized strings.

    Example:
        >>> round(jaro_similarity("caba", "bbcabc"), 4)
        0.5833
    """
    if not s1 or not s2:
        return 0.0

    window = max(len(s1), len(s2)) // 2 - 1
    s2_used = [False] * len(s2)
    s1_matched: list[str] = []

    for i, ch in enumerate(s1):
        for j in range(max(0, i - window), min(len(s2), i + window + 1)):
            if not s2_used[j] and s2[j] == ch:
                s2_used[j] = True
                s1_matched.append(ch)
                break

    matches = len(s1_matched)
    if matches == 0:
        return 0.0

    s2_matched = [ch for ch, used in zip(s2, s2_used) if used]
    transpositions = sum(a != b for a, b in zip(s1_matched, s2_matched))

    return (
        matches / len(s1) + matches / len(s2) + (matches - transpositions / 2) / matches
    ) / 3


def common_prefix_length(a: str, b: str, limit: int = MAX_PREFIX_LENGTH) -> int:
    """Length of the shared prefix of ``a`` and ``b``, capped at ``limit``."""
    length = 0
    for ch_a, ch_b in zip(a[:limit], b[:limit]):
        if ch_a != ch_b:
            break
        length += 1
    return length


def similarity(a: str | None, b: str | None) -> float:
    """Phonetic-tolerant similarity between two strings (0.0-1.0).

    Comparison is case-insensitive and ignores surrounding whitespace.
    Identical strings after normalization score 1.0; an empty input scores
    0.0.

    Example:
        >>> round(similarity("Martha", "marhta"), 4)
        0.9611
    """
    if not a or not b:
        return 0.0

    s1 = a.strip().lower()
    s2 = b.strip().lower()
    if s1 == s2:
        return 1.0

    if max(len(s1), len(s2)) == 0:
        return 1.0

    jaro = jaro_similarity(s1, s2)
    prefix = common_prefix_length(s1, s2)
    return min(1.0, jaro + prefix * PREFIX_SCALE * (1.0 - jaro))
