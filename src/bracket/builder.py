"""
Single elimination bracket skeleton generation.
"""
import math
from typing import List

from .errors import InvalidBracketSize
from .models import BRACKET_SIZES, Match, Round


def validate_bracket_size(bracket_size) -> int:
    """Return the size unchanged, or raise InvalidBracketSize."""
    if isinstance(bracket_size, bool) or not isinstance(bracket_size, int):
        raise InvalidBracketSize(f'Bracket size must be an integer, got {bracket_size!r}.')
    if bracket_size not in BRACKET_SIZES:
        raise InvalidBracketSize(f'Bracket size {bracket_size} is not one of {", ".join(map(str, BRACKET_SIZES))}.')
    return bracket_size


def count_rounds(bracket_size: int) -> int:
    """Number of rounds needed to reduce the bracket to one champion."""
    return int(math.log2(validate_bracket_size(bracket_size)))


def get_round_label(matches_in_round: int) -> str:
    """Get the name of a round based on how many matches it holds."""
    if matches_in_round == 1:
        return "FINAL"
    elif matches_in_round == 2:
        return "SEMIFINALS"
    else:
        return f"1/{matches_in_round * 2}"


def match_id(round_index: int, match_index: int) -> str:
    return f"m-{round_index}-{match_index}"


def build_skeleton(bracket_size: int) -> List[Round]:
    """
    Build the empty round/match tree for a bracket.

    Rounds run from the first round to the final. Round k holds
    bracket_size / 2**(k+1) matches, so an 8 bracket gives 4, 2, 1.
    Every match starts pending with both slots empty.
    """
    total_rounds = count_rounds(bracket_size)
    rounds = []
    matches_count = bracket_size // 2

    for round_index in range(total_rounds):
        matches = [Match(match_id(round_index, i), i) for i in range(matches_count)]
        rounds.append(Round(get_round_label(matches_count), matches))
        matches_count //= 2

    return rounds
