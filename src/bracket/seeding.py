"""
First-round seeding: random draws and manual slot placement.

These functions work on the first round alone and never touch the input
round; the tournament-level status guard lives in engine.py.
"""
import random
from typing import Callable, Iterable, List, Optional

from .entrants import build_entrants, validate_entrant
from .errors import DuplicateEntrant, InvalidSide, MatchNotFound, SlotOccupied, TooManyEntrants
from .models import Entrant, Round, SIDES, SIDE_A, SIDE_B


def default_permute(items: List) -> List:
    """Uniform random permutation of items."""
    return random.sample(items, len(items))


def validate_side(side) -> str:
    if isinstance(side, str) and side.upper() in SIDES:
        return side.upper()
    raise InvalidSide(f'Side must be "A" or "B", got {side!r}.')


def _locate(round0: Round, match_id: str) -> int:
    index = round0.find(match_id)
    if index == -1:
        raise MatchNotFound(f'Match {match_id} is not in the first round.')
    return index


def seed_random(round0: Round, names: Iterable,
                permute: Optional[Callable[[List], List]] = None,
                id_factory: Optional[Callable[[], str]] = None) -> Round:
    """
    Draw entrants into the first round.

    The round is cleared, the entrants are shuffled with permute and dealt
    out in match order: first entrant to side A of match 0, second to side B,
    third to side A of match 1 and so on. Leftover slots stay empty.
    """
    entrants = build_entrants(names, id_factory)
    capacity = 2 * len(round0.matches)
    if len(entrants) > capacity:
        raise TooManyEntrants(f'{len(entrants)} entrants do not fit into {capacity} slots.')

    shuffled = (permute or default_permute)(list(entrants))
    if sorted(e.id for e in shuffled) != sorted(e.id for e in entrants):
        raise ValueError('permute must return a rearrangement of its input')

    seeded = round0.copy()
    for match in seeded.matches:
        match.entrant_a = None
        match.entrant_b = None

    for idx, entrant in enumerate(shuffled):
        match = seeded.matches[idx // 2]
        match.set_side(SIDE_A if idx % 2 == 0 else SIDE_B, entrant)

    return seeded


def seed_manual(round0: Round, match_id: str, side: str, entrant: Entrant) -> Round:
    """Place one entrant into an explicit first-round slot."""
    entrant = validate_entrant(entrant)
    side = validate_side(side)
    index = _locate(round0, match_id)
    if round0.matches[index].get_side(side) is not None:
        raise SlotOccupied(f'Side {side} of match {match_id} is already taken.')
    if entrant.id in round0.entrant_ids():
        raise DuplicateEntrant(f'{entrant.display_name} is already in the first round.')

    seeded = round0.copy()
    seeded.matches[index].set_side(side, entrant)
    return seeded


def clear_slot(round0: Round, match_id: str, side: str) -> Round:
    """Empty one first-round slot so it can be seeded again."""
    side = validate_side(side)
    index = _locate(round0, match_id)
    seeded = round0.copy()
    seeded.matches[index].set_side(side, None)
    return seeded
