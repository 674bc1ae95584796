"""
Events the engine hands to a notification publisher.

A publisher is any object with a publish(event) method. Publishing is best
effort: publish_safely() logs a failing publisher and carries on, so a
broken feed never undoes a recorded result.
"""
import copy
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Event:
    kind = 'event'

    def __init__(self, tournament_id, group_ref, tournament_name):
        self.tournament_id = tournament_id
        self.group_ref = group_ref
        self.tournament_name = tournament_name

    def payload(self) -> Dict:
        return {}

    def to_dict(self) -> Dict:
        data = {
            'kind': self.kind,
            'tournament_id': self.tournament_id,
            'group_ref': self.group_ref,
            'tournament_name': self.tournament_name,
        }
        data.update(self.payload())
        return data

    def __eq__(self, other):
        if not isinstance(other, Event):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __repr__(self):
        return f"{type(self).__name__}({self.to_dict()})"


class TournamentStarted(Event):
    kind = 'tournament_started'

    def __init__(self, tournament_id, group_ref, tournament_name, metadata=None):
        super().__init__(tournament_id, group_ref, tournament_name)
        self.metadata = copy.deepcopy(metadata) if metadata else {}

    def payload(self) -> Dict:
        return {'metadata': copy.deepcopy(self.metadata)}


class MatchCompleted(Event):
    kind = 'match_completed'

    def __init__(self, tournament_id, group_ref, tournament_name, winner_name, loser_name, score):
        super().__init__(tournament_id, group_ref, tournament_name)
        self.winner_name = winner_name
        self.loser_name = loser_name  # None for a walkover
        self.score = score

    def payload(self) -> Dict:
        return {'winner_name': self.winner_name, 'loser_name': self.loser_name, 'score': self.score}


class TournamentCompleted(Event):
    kind = 'tournament_completed'

    def __init__(self, tournament_id, group_ref, tournament_name, champion_name, champion_avatar_ref):
        super().__init__(tournament_id, group_ref, tournament_name)
        self.champion_name = champion_name
        self.champion_avatar_ref = champion_avatar_ref

    def payload(self) -> Dict:
        return {'champion_name': self.champion_name, 'champion_avatar_ref': self.champion_avatar_ref}


def publish_safely(publisher: Optional[object], event: Event) -> bool:
    """Hand event to publisher. Returns False if there is none or it failed."""
    if publisher is None:
        return False
    try:
        publisher.publish(event)
    except Exception as e:
        logger.warning(f'Failed to publish {event.kind} for tournament {event.tournament_id}: {e}')
        return False
    return True


class EventBuffer:
    """Publisher that holds events until the snapshot they describe is saved."""

    def __init__(self):
        self.events = []

    def publish(self, event: Event):
        self.events.append(event)

    def flush(self, publisher: Optional[object]) -> int:
        """Forward held events in order; returns how many were delivered."""
        delivered = sum(1 for event in self.events if publish_safely(publisher, event))
        self.events = []
        return delivered
