"""
Snapshot records for a single-elimination tournament.

A Tournament and everything it contains is a plain value: engine functions
copy it, change the copy and hand the copy back. to_dict()/from_dict()
convert to and from the YAML-friendly form the store writes.
"""
import copy
import math
from typing import List, Dict, Optional

from .errors import CorruptedSnapshot

BRACKET_SIZES = (2, 4, 8, 16, 32, 64)

DRAFT = 'draft'
LIVE = 'live'
FINISHED = 'finished'
TOURNAMENT_STATUSES = (DRAFT, LIVE, FINISHED)

PENDING = 'pending'
MATCH_STATUSES = (PENDING, FINISHED)

SIDE_A = 'A'
SIDE_B = 'B'
SIDES = (SIDE_A, SIDE_B)


class Entrant:
    def __init__(self, id, display_name, avatar_ref=None, last_match_score=None):
        self.id = id
        self.display_name = display_name
        self.avatar_ref = avatar_ref
        self.last_match_score = last_match_score  # score of the match that carried the entrant here

    def copy(self) -> 'Entrant':
        return Entrant(self.id, self.display_name, self.avatar_ref, self.last_match_score)

    def to_dict(self) -> Dict:
        data = {
            'id': self.id,
            'display_name': self.display_name,
            'avatar_ref': self.avatar_ref,
        }
        if self.last_match_score is not None:
            data['last_match_score'] = self.last_match_score
        return data

    @classmethod
    def from_dict(cls, data) -> 'Entrant':
        if not isinstance(data, dict):
            raise CorruptedSnapshot(f'Entrant must be a mapping, got {type(data).__name__}')
        entrant_id = data.get('id')
        name = data.get('display_name')
        if not isinstance(entrant_id, str) or not entrant_id:
            raise CorruptedSnapshot('Entrant is missing an id')
        if not isinstance(name, str):
            raise CorruptedSnapshot(f'Entrant {entrant_id} is missing a display name')
        return cls(entrant_id, name, data.get('avatar_ref'), data.get('last_match_score'))

    def __eq__(self, other):
        if not isinstance(other, Entrant):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"Entrant(id={self.id}, display_name={self.display_name})"


class Match:
    def __init__(self, id, slot_index, entrant_a=None, entrant_b=None, score=None,
                 winner_id=None, status=PENDING, walkover=False):
        self.id = id
        self.slot_index = slot_index
        self.entrant_a = entrant_a
        self.entrant_b = entrant_b
        self.score = score
        self.winner_id = winner_id
        self.status = status
        self.walkover = walkover

    def get_side(self, side: str) -> Optional[Entrant]:
        return self.entrant_a if side == SIDE_A else self.entrant_b

    def set_side(self, side: str, entrant: Optional[Entrant]):
        if side == SIDE_A:
            self.entrant_a = entrant
        else:
            self.entrant_b = entrant

    @property
    def entrants(self) -> List[Entrant]:
        """Entrants currently placed, A side first."""
        return [e for e in (self.entrant_a, self.entrant_b) if e is not None]

    @property
    def is_full(self) -> bool:
        return self.entrant_a is not None and self.entrant_b is not None

    @property
    def winner(self) -> Optional[Entrant]:
        for entrant in self.entrants:
            if entrant.id == self.winner_id:
                return entrant
        return None

    @property
    def loser(self) -> Optional[Entrant]:
        if self.winner_id is None:
            return None
        for entrant in self.entrants:
            if entrant.id != self.winner_id:
                return entrant
        return None

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'slot_index': self.slot_index,
            'entrant_a': self.entrant_a.to_dict() if self.entrant_a else None,
            'entrant_b': self.entrant_b.to_dict() if self.entrant_b else None,
            'score': self.score,
            'winner_id': self.winner_id,
            'status': self.status,
            'walkover': self.walkover,
        }

    @classmethod
    def from_dict(cls, data) -> 'Match':
        if not isinstance(data, dict):
            raise CorruptedSnapshot(f'Match must be a mapping, got {type(data).__name__}')
        match_id = data.get('id')
        if not isinstance(match_id, str) or not match_id:
            raise CorruptedSnapshot('Match is missing an id')
        slot_index = data.get('slot_index')
        if not isinstance(slot_index, int) or isinstance(slot_index, bool):
            raise CorruptedSnapshot(f'Match {match_id} has no slot index')
        status = data.get('status', PENDING)
        if status not in MATCH_STATUSES:
            raise CorruptedSnapshot(f'Match {match_id} has unknown status {status!r}')

        entrant_a = Entrant.from_dict(data['entrant_a']) if data.get('entrant_a') else None
        entrant_b = Entrant.from_dict(data['entrant_b']) if data.get('entrant_b') else None
        match = cls(match_id, slot_index, entrant_a, entrant_b,
                    score=data.get('score'),
                    winner_id=data.get('winner_id'),
                    status=status,
                    walkover=bool(data.get('walkover', False)))

        if match.winner_id is not None:
            if match.winner is None:
                raise CorruptedSnapshot(f'Match {match_id} winner is not one of its entrants')
            if match.status != FINISHED:
                raise CorruptedSnapshot(f'Match {match_id} has a winner but is not finished')
        elif match.status == FINISHED:
            raise CorruptedSnapshot(f'Match {match_id} is finished without a winner')
        if entrant_a and entrant_b and entrant_a.id == entrant_b.id:
            raise CorruptedSnapshot(f'Match {match_id} has the same entrant on both sides')
        return match

    def __repr__(self):
        return (f"Match(id={self.id}, entrants=({self.entrant_a and self.entrant_a.display_name}, "
                f"{self.entrant_b and self.entrant_b.display_name}), winner_id={self.winner_id})")


class Round:
    def __init__(self, label, matches=None):
        self.label = label
        self.matches = matches if matches else []

    def find(self, match_id: str) -> int:
        """Index of the match with this id, or -1."""
        for index, match in enumerate(self.matches):
            if match.id == match_id:
                return index
        return -1

    def entrant_ids(self) -> List[str]:
        return [e.id for match in self.matches for e in match.entrants]

    def copy(self) -> 'Round':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict:
        return {'label': self.label, 'matches': [m.to_dict() for m in self.matches]}

    @classmethod
    def from_dict(cls, data) -> 'Round':
        if not isinstance(data, dict):
            raise CorruptedSnapshot(f'Round must be a mapping, got {type(data).__name__}')
        matches = data.get('matches')
        if not isinstance(matches, list):
            raise CorruptedSnapshot('Round matches must be a list')
        return cls(str(data.get('label', '')), [Match.from_dict(m) for m in matches])

    def __repr__(self):
        return f"Round(label={self.label}, matches={len(self.matches)})"


class Tournament:
    def __init__(self, id, name, bracket_size, status=DRAFT, rounds=None, metadata=None,
                 champion=None, version=0):
        self.id = id
        self.name = name
        self.bracket_size = bracket_size
        self.status = status
        self.rounds = rounds if rounds else []
        self.metadata = metadata if metadata else {}
        self.champion = champion
        self.version = version

    @property
    def group_ref(self):
        return self.metadata.get('group_ref')

    @property
    def final(self) -> Optional[Match]:
        if not self.rounds or not self.rounds[-1].matches:
            return None
        return self.rounds[-1].matches[0]

    def copy(self) -> 'Tournament':
        return copy.deepcopy(self)

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'name': self.name,
            'bracket_size': self.bracket_size,
            'status': self.status,
            'rounds': [r.to_dict() for r in self.rounds],
            'metadata': copy.deepcopy(self.metadata),
            'champion': self.champion.to_dict() if self.champion else None,
            'version': self.version,
        }

    @classmethod
    def from_dict(cls, data) -> 'Tournament':
        """Rebuild a snapshot, rejecting anything that breaks the bracket shape."""
        if not isinstance(data, dict):
            raise CorruptedSnapshot(f'Tournament must be a mapping, got {type(data).__name__}')
        bracket_size = data.get('bracket_size')
        if bracket_size not in BRACKET_SIZES or isinstance(bracket_size, bool):
            raise CorruptedSnapshot(f'Unsupported bracket size {bracket_size!r}')
        status = data.get('status')
        if status not in TOURNAMENT_STATUSES:
            raise CorruptedSnapshot(f'Unknown tournament status {status!r}')
        rounds_data = data.get('rounds')
        if not isinstance(rounds_data, list):
            raise CorruptedSnapshot('Tournament rounds must be a list')
        metadata = data.get('metadata') or {}
        if not isinstance(metadata, dict):
            raise CorruptedSnapshot('Tournament metadata must be a mapping')
        version = data.get('version', 0)
        if not isinstance(version, int) or isinstance(version, bool) or version < 0:
            raise CorruptedSnapshot(f'Invalid version stamp {version!r}')

        rounds = [Round.from_dict(r) for r in rounds_data]
        expected_rounds = int(math.log2(bracket_size))
        if len(rounds) != expected_rounds:
            raise CorruptedSnapshot(f'Expected {expected_rounds} rounds, found {len(rounds)}')
        seen_ids = set()
        for k, rnd in enumerate(rounds):
            expected_matches = bracket_size // 2 ** (k + 1)
            if len(rnd.matches) != expected_matches:
                raise CorruptedSnapshot(
                    f'Round {k} should have {expected_matches} matches, found {len(rnd.matches)}')
            ids = rnd.entrant_ids()
            if len(ids) != len(set(ids)):
                raise CorruptedSnapshot(f'Round {k} places the same entrant twice')
            for match in rnd.matches:
                if match.id in seen_ids:
                    raise CorruptedSnapshot(f'Duplicate match id {match.id}')
                seen_ids.add(match.id)

        champion = Entrant.from_dict(data['champion']) if data.get('champion') else None
        tournament = cls(data.get('id'), str(data.get('name', '')), bracket_size, status,
                         rounds, metadata, champion, version)
        final_decided = tournament.final.winner_id is not None
        if final_decided != (status == FINISHED):
            raise CorruptedSnapshot('Tournament status does not match its final')
        if status == FINISHED:
            if champion is None or champion.id != tournament.final.winner_id:
                raise CorruptedSnapshot('Champion does not match the winner of the final')
        elif champion is not None:
            raise CorruptedSnapshot('Only a finished tournament can have a champion')
        return tournament

    def __repr__(self):
        return (f"Tournament(id={self.id}, name={self.name}, bracket_size={self.bracket_size}, "
                f"status={self.status})")
