"""
Bracket data formatted for UI display.
"""
from typing import Dict, Optional

from .models import FINISHED, LIVE, Entrant, Tournament


def _entrant_view(entrant: Optional[Entrant]) -> Optional[Dict]:
    if entrant is None:
        return None
    return {
        'id': entrant.id,
        'name': entrant.display_name,
        'avatar': entrant.avatar_ref,
        'last_match_score': entrant.last_match_score,
    }


def get_bracket_display(tournament: Tournament) -> Dict:
    """
    Flatten a tournament into what the bracket view renders.

    Returns dict with:
    - rounds: list of {label, matches}, each match carrying its entrants,
      winner name and whether it can be scored right now
    - total_entrants, byes, matches_played, matches_per_round
    - champion: display dict of the champion, or None
    """
    rounds = []
    matches_per_round = {}
    matches_played = 0
    is_live = tournament.status == LIVE

    for round_index, rnd in enumerate(tournament.rounds):
        round_matches = []
        for match in rnd.matches:
            winner = match.winner
            is_bye = round_index == 0 and len(match.entrants) == 1
            round_matches.append({
                'id': match.id,
                'match_number': match.slot_index + 1,
                'entrant_a': _entrant_view(match.entrant_a),
                'entrant_b': _entrant_view(match.entrant_b),
                'score': match.score,
                'winner_id': match.winner_id,
                'winner_name': winner.display_name if winner else None,
                'status': match.status,
                'walkover': match.walkover,
                'is_bye': is_bye,
                'is_playable': is_live and match.is_full and match.winner_id is None,
                'needs_walkover': is_live and is_bye and match.winner_id is None,
            })
            if match.status == FINISHED and not match.walkover:
                matches_played += 1
        matches_per_round[rnd.label] = len(rnd.matches)
        rounds.append({'label': rnd.label, 'matches': round_matches})

    first_round = tournament.rounds[0].matches if tournament.rounds else []
    return {
        'id': tournament.id,
        'name': tournament.name,
        'status': tournament.status,
        'bracket_size': tournament.bracket_size,
        'total_rounds': len(tournament.rounds),
        'rounds': rounds,
        'total_entrants': sum(len(m.entrants) for m in first_round),
        'byes': sum(1 for m in first_round if len(m.entrants) == 1),
        'matches_played': matches_played,
        'matches_per_round': matches_per_round,
        'champion': _entrant_view(tournament.champion),
        'metadata': dict(tournament.metadata),
        'version': tournament.version,
    }
