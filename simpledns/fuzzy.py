"""Subsequence fuzzy matching used by the global domain search."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

SEPARATORS = ".-_"


@dataclass(frozen=True)
class SearchMatch:
    index: int      # position of the candidate in the searched list
    score: int


def fuzzy_score(query: str, candidate: str) -> Optional[int]:
    """Score *candidate* against *query*, or ``None`` if it does not match.

    Every query character must appear in the candidate, in order,
    case-insensitively.  Scoring (higher is better):

      - +10 per matched character
      - +12 when a match lands on the first character, otherwise +8 when
        the preceding character is one of ``. - _``
      - +10 for a match directly after the previous one, otherwise minus
        the gap (at most 6)
      - minus ``len(candidate) // 8`` (at most 6) so shorter labels win ties

    An empty query matches everything with score 0.
    """
    q = query.strip().lower()
    if not q:
        return 0
    target = candidate.lower()

    score = 0
    pos = 0
    prev = -1
    for ch in q:
        found = target.find(ch, pos)
        if found == -1:
            return None
        score += 10
        if found == 0:
            score += 12
        elif target[found - 1] in SEPARATORS:
            score += 8
        if prev >= 0:
            gap = found - prev - 1
            if gap == 0:
                score += 10
            else:
                score -= min(gap, 6)
        prev = found
        pos = found + 1

    score -= min(len(target) // 8, 6)
    return score


def rank_matches(query: str, labels: Sequence[str]) -> list[SearchMatch]:
    """Filter and rank *labels*: best score first, then alphabetical."""
    matches = []
    for i, label in enumerate(labels):
        score = fuzzy_score(query, label)
        if score is not None:
            matches.append(SearchMatch(index=i, score=score))
    matches.sort(key=lambda m: (-m.score, labels[m.index].lower()))
    return matches
