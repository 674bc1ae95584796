"""
Tournament lifecycle: draft -> live -> finished.

While a tournament is a draft only seeding may change it. start() freezes
the first round and makes it live, after which only the resolver changes
rounds. Recording the final moves it to finished, and from then on nothing
changes it again.
"""
import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional

from .builder import build_skeleton
from .errors import InvalidTournament, NotDraft, TournamentFinished, UnfilledBracket
from .events import TournamentStarted, publish_safely
from .models import DRAFT, FINISHED, LIVE, Entrant, Tournament
from .resolver import find_match, record_result, record_walkover  # noqa: F401
from . import seeding

logger = logging.getLogger(__name__)


def default_tournament_id() -> str:
    return uuid.uuid4().hex[:12]


def _require_draft(tournament: Tournament):
    if tournament.status == FINISHED:
        raise TournamentFinished(f'{tournament.name} is already finished.')
    if tournament.status != DRAFT:
        raise NotDraft(f'{tournament.name} has already started; the draw is frozen.')


def create(name: str, bracket_size: int, metadata: Optional[Dict] = None,
           id_factory: Optional[Callable[[], str]] = None) -> Tournament:
    """Create a draft tournament with an empty bracket."""
    if not isinstance(name, str) or not name.strip():
        raise InvalidTournament()
    rounds = build_skeleton(bracket_size)
    tournament_id = (id_factory or default_tournament_id)()
    tournament = Tournament(tournament_id, name.strip(), bracket_size, DRAFT, rounds, dict(metadata or {}))
    logger.info(f'Created tournament {tournament.name} ({tournament.id}) with {bracket_size} slots')
    return tournament


def _with_first_round(tournament: Tournament, round0) -> Tournament:
    updated = tournament.copy()
    updated.rounds[0] = round0
    return updated


def seed_random(tournament: Tournament, names: Iterable,
                permute: Optional[Callable[[List], List]] = None,
                id_factory: Optional[Callable[[], str]] = None) -> Tournament:
    """Replace the whole first round with a random draw of names."""
    _require_draft(tournament)
    round0 = seeding.seed_random(tournament.rounds[0], names, permute, id_factory)
    return _with_first_round(tournament, round0)


def seed_manual(tournament: Tournament, match_id: str, side: str, entrant: Entrant) -> Tournament:
    _require_draft(tournament)
    round0 = seeding.seed_manual(tournament.rounds[0], match_id, side, entrant)
    return _with_first_round(tournament, round0)


def clear_slot(tournament: Tournament, match_id: str, side: str) -> Tournament:
    _require_draft(tournament)
    round0 = seeding.clear_slot(tournament.rounds[0], match_id, side)
    return _with_first_round(tournament, round0)


def entrants(tournament: Tournament) -> List[Entrant]:
    """Everyone seeded into the first round, in slot order."""
    return [e for match in tournament.rounds[0].matches for e in match.entrants]


def start(tournament: Tournament, publisher: Optional[object] = None) -> Tournament:
    """
    Freeze the draw and make the tournament live.

    A first-round match without any entrant could never feed the next
    round, so such a draw is refused. Matches with a single entrant are
    byes and are closed later with record_walkover().
    """
    _require_draft(tournament)
    if len(entrants(tournament)) < 2:
        raise UnfilledBracket('At least two entrants are needed to start.')
    empty = [m.id for m in tournament.rounds[0].matches if not m.entrants]
    if empty:
        raise UnfilledBracket(f'First-round matches without entrants: {", ".join(empty)}.')

    updated = tournament.copy()
    updated.status = LIVE
    logger.info(f'Started tournament {updated.name} ({updated.id}) with {len(entrants(updated))} entrants')
    publish_safely(publisher, TournamentStarted(updated.id, updated.group_ref, updated.name, updated.metadata))
    return updated


def champion(tournament: Tournament) -> Optional[Entrant]:
    return tournament.champion


def is_finished(tournament: Tournament) -> bool:
    return tournament.status == FINISHED
