"""
Unit tests for unleash tag parsing.

Tests default values, ordering, case-insensitivity and tolerance of
malformed or missing note text.
"""

import pytest

from unleash.game.unleash import UnleashCandidate, parse_unleash_tags


class TestParseBasics:
    """Test the three declaration forms."""

    def test_id_only_uses_defaults(self):
        """A tag with only a skill id gets 50% chance and no difficulty."""
        assert parse_unleash_tags("<unleash: 15>") == [UnleashCandidate(15, 0.5, 0)]

    def test_id_and_chance(self):
        assert parse_unleash_tags("<unleash: 15, 30>") == [UnleashCandidate(15, 0.3, 0)]

    def test_id_chance_and_difficulty(self):
        assert parse_unleash_tags("<unleash: 15, 30, 12>") == [UnleashCandidate(15, 0.3, 12)]

    def test_default_tag_equals_explicit_fifty_zero(self):
        """A bare tag behaves exactly like chance 50, difficulty 0."""
        assert parse_unleash_tags("<unleash: 7>") == parse_unleash_tags("<unleash: 7, 50, 0>")

    @pytest.mark.parametrize("text", [
        "<unleash:15,30,12>",
        "<unleash:   15 ,  30 ,  12  >",
        "<UNLEASH: 15, 30, 12>",
        "<Unleash: 15, 30, 12>",
    ])
    def test_whitespace_and_case_tolerated(self, text):
        assert parse_unleash_tags(text) == [UnleashCandidate(15, 0.3, 12)]

    def test_chance_edges(self):
        candidates = parse_unleash_tags("<unleash: 1, 0><unleash: 2, 100>")
        assert [c.base_chance for c in candidates] == [0.0, 1.0]


class TestParseOrdering:
    """Test that every tag is found in textual order."""

    def test_multiple_tags_in_order(self):
        text = "<unleash: 3, 10>\nSome flavour text.\n<unleash: 1, 20>\n<unleash: 2>"
        assert [c.skill_id for c in parse_unleash_tags(text)] == [3, 1, 2]

    def test_adjacent_tags(self):
        text = "<unleash: 4><unleash: 5, 60>"
        assert parse_unleash_tags(text) == [UnleashCandidate(4, 0.5, 0), UnleashCandidate(5, 0.6, 0)]

    def test_repeated_ids_are_kept(self):
        """Duplicate skill ids are evaluated independently, not merged."""
        candidates = parse_unleash_tags("<unleash: 9, 10><unleash: 9, 40>")
        assert candidates == [UnleashCandidate(9, 0.1, 0), UnleashCandidate(9, 0.4, 0)]


class TestParseDegenerateInput:
    """Test that bad input never raises."""

    @pytest.mark.parametrize("text", [None, "", "   ", "no tags here"])
    def test_empty_or_missing(self, text):
        assert parse_unleash_tags(text) == []

    def test_non_string_input(self):
        assert parse_unleash_tags(42) == []  # type: ignore[arg-type]

    @pytest.mark.parametrize("text", [
        "<unleash:>",
        "<unleash: abc>",
        "<unleash: -5, 20>",
        "<unleash: 5, 20, 10, 3>",
        "<unleash 5>",
        "<unleash: 5, 20",
    ])
    def test_malformed_tags_skipped(self, text):
        assert parse_unleash_tags(text) == []

    def test_malformed_tags_do_not_hide_valid_ones(self):
        text = "<unleash: x><unleash: 8, 25><unleash: 5, 20"
        assert parse_unleash_tags(text) == [UnleashCandidate(8, 0.25, 0)]

    def test_zero_id_is_parsed_but_invalid(self):
        candidates = parse_unleash_tags("<unleash: 0, 100>")
        assert len(candidates) == 1
        assert not candidates[0].is_valid

    def test_oversized_numbers_skipped(self):
        text = "<unleash: 8, 100><unleash: " + "1" * 5000 + ">"
        assert parse_unleash_tags(text) == [UnleashCandidate(8, 1.0, 0)]

    def test_non_ascii_digits_skipped(self):
        # Arabic-Indic and fullwidth digits
        assert parse_unleash_tags("<unleash: ٥٠><unleash: ８>") == []
