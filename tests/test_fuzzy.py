"""Tests for the fuzzy domain matcher."""

import pytest

from simpledns.demo_backend import DEMO_DOMAINS
from simpledns.fuzzy import SearchMatch, fuzzy_score, rank_matches


def is_subsequence(query, candidate):
    it = iter(candidate.lower())
    return all(ch in it for ch in query.strip().lower())


class TestFuzzyScore:

    def test_empty_query_matches_with_zero(self):
        assert fuzzy_score("", "acme.dev") == 0
        assert fuzzy_score("   ", "anything") == 0

    def test_non_subsequence_is_rejected(self):
        assert fuzzy_score("xyz", "acme.dev") is None
        assert fuzzy_score("deva", "acme.dev") is None

    def test_prefix_and_adjacency_bonuses(self):
        # a@0: 10+12, c@1: 10+10 adjacent, minus len 8 // 8
        assert fuzzy_score("ac", "acme.dev") == 41

    def test_separator_bonus(self):
        # d follows ".", so it scores more than a mid-word match
        assert fuzzy_score("d", "acme.dev") > fuzzy_score("m", "acme.dev")

    def test_case_insensitive(self):
        assert fuzzy_score("ACME", "acme.dev") == fuzzy_score("acme", "ACME.DEV")

    def test_gap_penalty_is_capped(self):
        near = fuzzy_score("ab", "a-b" + "x" * 5)
        far = fuzzy_score("ab", "a" + "x" * 20 + "b")
        assert near > far

    @pytest.mark.parametrize("query", ["a", "ac", "dev", "io", "lab", "zz", "q.o", "tide"])
    def test_matches_exactly_the_subsequence_candidates(self, query):
        for name in DEMO_DOMAINS:
            matched = fuzzy_score(query, name) is not None
            assert matched == is_subsequence(query, name), name


class TestRankMatches:

    def test_ties_break_alphabetically(self):
        labels = ["beta-labs.io", "acme.dev"]
        # "e" scores 9 against both labels
        assert fuzzy_score("e", labels[0]) == fuzzy_score("e", labels[1])
        ranked = rank_matches("e", labels)
        assert [labels[m.index] for m in ranked] == ["acme.dev", "beta-labs.io"]

    def test_empty_query_returns_everything_sorted(self):
        labels = ["Zeta.com", "beta-labs.io", "acme.dev"]
        ranked = rank_matches("", labels)
        assert [labels[m.index] for m in ranked] == ["acme.dev", "beta-labs.io", "Zeta.com"]
        assert all(m.score == 0 for m in ranked)

    def test_best_score_first(self):
        ranked = rank_matches("acme", DEMO_DOMAINS)
        assert DEMO_DOMAINS[ranked[0].index] == "acme.dev"
        scores = [m.score for m in ranked]
        assert scores == sorted(scores, reverse=True)

    def test_indexes_point_into_the_input(self):
        ranked = rank_matches("dev", DEMO_DOMAINS)
        assert ranked
        for match in ranked:
            assert isinstance(match, SearchMatch)
            assert "d" in DEMO_DOMAINS[match.index]

    def test_deterministic(self):
        assert rank_matches("o", DEMO_DOMAINS) == rank_matches("o", DEMO_DOMAINS)
