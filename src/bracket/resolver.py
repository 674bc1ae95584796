"""
Match resolution: record results and advance winners through the bracket.

Winners move up the tree by position. Match m of round r feeds match m // 2
of round r + 1, on side A when m is even and side B when m is odd, so
matches 0 and 1 meet in match 0 of the next round, 2 and 3 in match 1, etc.
"""
import logging
from typing import Optional, Tuple

from .errors import (
    AlreadyDecided,
    IncompleteMatch,
    InvalidScore,
    InvalidWinner,
    MatchNotFound,
    NotABye,
    NotLive,
    TournamentFinished,
)
from .events import MatchCompleted, TournamentCompleted, publish_safely
from .models import FINISHED, LIVE, Match, SIDE_A, SIDE_B, Tournament

logger = logging.getLogger(__name__)

WALKOVER_SCORE = 'W/O'


def find_match(tournament: Tournament, match_id: str) -> Tuple[int, int]:
    """Return (round_index, match_index) of a match, or raise MatchNotFound."""
    for round_index, rnd in enumerate(tournament.rounds):
        match_index = rnd.find(match_id)
        if match_index != -1:
            return round_index, match_index
    raise MatchNotFound(f'Match {match_id} is not part of {tournament.name}.')


def next_slot(match_index: int) -> Tuple[int, str]:
    """Where the winner of a match lands in the next round: (match_index, side)."""
    return match_index // 2, SIDE_A if match_index % 2 == 0 else SIDE_B


def _require_live(tournament: Tournament):
    if tournament.status == FINISHED:
        raise TournamentFinished(f'{tournament.name} is already finished.')
    if tournament.status != LIVE:
        raise NotLive(f'{tournament.name} has not started yet.')


def _advance(tournament: Tournament, round_index: int, match_index: int,
             publisher: Optional[object]) -> Tournament:
    """Propagate the winner of a freshly decided match and emit events."""
    match = tournament.rounds[round_index].matches[match_index]
    winner = match.winner
    loser = match.loser
    is_final = round_index == len(tournament.rounds) - 1

    if not is_final:
        target_index, side = next_slot(match_index)
        carried = winner.copy()
        carried.last_match_score = match.score
        tournament.rounds[round_index + 1].matches[target_index].set_side(side, carried)
    else:
        tournament.status = FINISHED
        tournament.champion = winner.copy()
        logger.info(f'{tournament.name} ({tournament.id}) finished, champion {winner.display_name}')

    publish_safely(publisher, MatchCompleted(
        tournament.id, tournament.group_ref, tournament.name,
        winner.display_name,
        loser.display_name if loser else None,
        match.score,
    ))
    if is_final:
        publish_safely(publisher, TournamentCompleted(
            tournament.id, tournament.group_ref, tournament.name,
            winner.display_name, winner.avatar_ref,
        ))
    return tournament


def _decide(match: Match, winner_id: str, score: Optional[str], walkover: bool = False):
    match.winner_id = winner_id
    match.score = score
    match.status = FINISHED
    match.walkover = walkover


def record_result(tournament: Tournament, match_id: str, winner_id: str, score_text: Optional[str] = None,
                  publisher: Optional[object] = None) -> Tournament:
    """
    Record the result of a match and return the successor snapshot.

    Preconditions are checked in a fixed order, and each has its own error:
    the tournament must be live, the match must exist, both sides must be
    filled, the winner must be one of them and the match must not be decided.
    The input snapshot is never modified.
    """
    _require_live(tournament)
    round_index, match_index = find_match(tournament, match_id)
    match = tournament.rounds[round_index].matches[match_index]

    if not match.is_full:
        raise IncompleteMatch(f'Match {match_id} is still waiting for entrants.')
    if winner_id not in (match.entrant_a.id, match.entrant_b.id):
        raise InvalidWinner(f'{winner_id!r} is not playing in match {match_id}.')
    if match.winner_id is not None:
        raise AlreadyDecided(f'Match {match_id} was already won by {match.winner.display_name}.')
    if score_text is not None and not isinstance(score_text, str):
        raise InvalidScore(f'Score must be text, got {score_text!r}.')

    score = (score_text or '').strip() or None

    updated = tournament.copy()
    _decide(updated.rounds[round_index].matches[match_index], winner_id, score)
    logger.info(f'{updated.name}: {match_id} won by {winner_id} ({score or "no score"})')
    return _advance(updated, round_index, match_index, publisher)


def record_walkover(tournament: Tournament, match_id: str, publisher: Optional[object] = None) -> Tournament:
    """
    Advance the only entrant of a first-round match that has no opponent.

    Byes are never resolved automatically; the organizer closes each one
    through this call.
    """
    _require_live(tournament)
    round_index, match_index = find_match(tournament, match_id)
    match = tournament.rounds[round_index].matches[match_index]

    if match.winner_id is not None:
        raise AlreadyDecided(f'Match {match_id} was already won by {match.winner.display_name}.')
    if round_index != 0:
        raise NotABye(f'Match {match_id} is not a first-round match.')
    if not match.entrants:
        raise IncompleteMatch(f'Match {match_id} has no entrant to advance.')
    if match.is_full:
        raise NotABye(f'Match {match_id} has two entrants and must be played.')

    updated = tournament.copy()
    _decide(updated.rounds[round_index].matches[match_index], match.entrants[0].id, WALKOVER_SCORE, walkover=True)
    logger.info(f'{updated.name}: {match_id} walkover for {match.entrants[0].display_name}')
    return _advance(updated, round_index, match_index, publisher)
