"""
Shared pytest fixtures for bracket engine tests.

Running tests:
    pytest tests/
"""
import itertools
import pytest
import sys
import os

# Add src directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket import engine


class RecordingPublisher:
    """Publisher that keeps every event it receives."""

    def __init__(self):
        self.events = []

    def publish(self, event):
        self.events.append(event)

    def kinds(self):
        return [e.kind for e in self.events]


class FailingPublisher:
    """Publisher whose delivery always blows up."""

    def __init__(self):
        self.attempts = 0

    def publish(self, event):
        self.attempts += 1
        raise ConnectionError('feed is down')


def keep_order(items):
    """Deterministic 'permutation' that leaves entrants in input order."""
    return list(items)


@pytest.fixture
def counting_ids():
    """Entrant id factory producing p-1, p-2, ..."""
    counter = itertools.count(1)
    return lambda: f'p-{next(counter)}'


@pytest.fixture
def recorder():
    return RecordingPublisher()


@pytest.fixture
def failing_publisher():
    return FailingPublisher()


@pytest.fixture
def cup_metadata():
    return {
        'group_ref': 'group-42',
        'group_name': 'Saturday Juniors',
        'date': '2026-05-16',
        'prize_pool': '50 000',
    }


@pytest.fixture
def eight_names():
    return ['Anna', 'Boris', 'Clara', 'Dmitri', 'Elena', 'Fyodor', 'Galina', 'Ivan']


@pytest.fixture
def draft_cup(cup_metadata, eight_names, counting_ids):
    """8-slot draft seeded in name order: match 0 is Anna v Boris, match 1 Clara v Dmitri, ..."""
    tournament = engine.create('Cup', 8, cup_metadata, id_factory=lambda: 'cup1')
    return engine.seed_random(tournament, eight_names, permute=keep_order, id_factory=counting_ids)


@pytest.fixture
def live_cup(draft_cup):
    return engine.start(draft_cup)


def play_round(tournament, round_index, publisher=None, pick_side='A'):
    """Decide every match of a round, the entrant on pick_side winning each."""
    for match in tournament.rounds[round_index].matches:
        winner = match.get_side(pick_side)
        tournament = engine.record_result(tournament, match.id, winner.id, '6-4 6-4', publisher=publisher)
    return tournament
