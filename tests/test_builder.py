"""
Unit tests for bracket skeleton generation.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.builder import build_skeleton, count_rounds, get_round_label, validate_bracket_size
from bracket.errors import InvalidBracketSize
from bracket.models import PENDING


class TestRoundLabels:
    """Tests for round naming."""

    def test_final_label(self):
        assert get_round_label(1) == "FINAL"

    def test_semifinal_label(self):
        assert get_round_label(2) == "SEMIFINALS"

    def test_quarterfinal_label(self):
        """Four matches are the quarterfinals, named 1/8."""
        assert get_round_label(4) == "1/8"

    def test_large_round_label(self):
        assert get_round_label(32) == "1/64"


class TestBracketSize:
    """Tests for bracket size validation."""

    @pytest.mark.parametrize('size', [2, 4, 8, 16, 32, 64])
    def test_valid_sizes(self, size):
        assert validate_bracket_size(size) == size

    @pytest.mark.parametrize('size', [0, 1, 3, 6, 12, 128, -8])
    def test_invalid_sizes(self, size):
        with pytest.raises(InvalidBracketSize):
            validate_bracket_size(size)

    @pytest.mark.parametrize('size', ['8', 8.0, None, True])
    def test_non_integer_sizes(self, size):
        """Strings, floats, None and booleans are rejected."""
        with pytest.raises(InvalidBracketSize):
            build_skeleton(size)

    def test_count_rounds(self):
        assert count_rounds(2) == 1
        assert count_rounds(8) == 3
        assert count_rounds(64) == 6


class TestBuildSkeleton:
    """Tests for the empty round/match tree."""

    @pytest.mark.parametrize('size', [2, 4, 8, 16, 32, 64])
    def test_round_and_match_counts(self, size):
        """log2(size) rounds, halving each round down to one final match."""
        rounds = build_skeleton(size)
        assert 2 ** len(rounds) == size
        for k, rnd in enumerate(rounds):
            assert len(rnd.matches) == size // 2 ** (k + 1)
        assert len(rounds[-1].matches) == 1

    def test_eight_bracket_labels(self):
        rounds = build_skeleton(8)
        assert [r.label for r in rounds] == ["1/8", "SEMIFINALS", "FINAL"]

    def test_two_bracket_is_just_a_final(self):
        rounds = build_skeleton(2)
        assert len(rounds) == 1
        assert rounds[0].label == "FINAL"

    def test_match_ids_unique(self):
        rounds = build_skeleton(64)
        ids = [m.id for r in rounds for m in r.matches]
        assert len(ids) == len(set(ids)) == 63

    def test_matches_start_empty_and_pending(self):
        for rnd in build_skeleton(16):
            for index, match in enumerate(rnd.matches):
                assert match.slot_index == index
                assert match.entrant_a is None and match.entrant_b is None
                assert match.winner_id is None
                assert match.status == PENDING

    def test_pure(self):
        """Two calls produce equal but independent skeletons."""
        first = build_skeleton(4)
        second = build_skeleton(4)
        assert [r.to_dict() for r in first] == [r.to_dict() for r in second]
        assert first[0].matches[0] is not second[0].matches[0]
