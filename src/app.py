"""
Flask JSON API for club bracket tournaments.
"""
import os
import logging
from flask import Flask, request, jsonify
from bracket import engine
from bracket.display import get_bracket_display
from bracket.entrants import make_entrant, parse_names
from bracket.errors import BracketError, InvalidTournament, VersionConflict
from bracket.events import EventBuffer
from bracket.feed import FeedPublisher, load_feed
from bracket.store import TournamentStore, DEFAULT_LOCK_TIMEOUT

app = Flask(__name__)

BASE_DIR = os.path.dirname(os.path.dirname(__file__))
DATA_DIR = os.environ.get('TOURNAMENT_DATA_DIR', os.path.join(BASE_DIR, 'data'))
FEED_FILE = os.environ.get('BRACKET_FEED_FILE', os.path.join(DATA_DIR, 'feed.yaml'))
LOCK_TIMEOUT = float(os.environ.get('BRACKET_LOCK_TIMEOUT', DEFAULT_LOCK_TIMEOUT))
FEED_AUTHOR = os.environ.get('BRACKET_FEED_AUTHOR')

if not app.debug:
    app.logger.setLevel(logging.INFO)

METADATA_FIELDS = ('group_ref', 'group_name', 'date', 'prize_pool')


def get_store() -> TournamentStore:
    return TournamentStore(DATA_DIR, lock_timeout=LOCK_TIMEOUT)


def get_publisher() -> FeedPublisher:
    return FeedPublisher(FEED_FILE, author=FEED_AUTHOR, lock_timeout=LOCK_TIMEOUT)


def _json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _snapshot_response(tournament, status=200):
    return jsonify({
        'success': True,
        'tournament': tournament.to_dict(),
        'display': get_bracket_display(tournament),
    }), status


def _load_checked(store: TournamentStore, tournament_id: str, data: dict):
    """Load a tournament, refusing if the caller edited an older version."""
    tournament = store.load(tournament_id)
    expected = data.get('version')
    if expected is not None and expected != tournament.version:
        raise VersionConflict()
    return tournament


@app.errorhandler(BracketError)
def handle_bracket_error(e):
    app.logger.warning(f'{request.method} {request.path} rejected: {e.code}: {e}')
    return jsonify({'success': False, 'error': e.message, 'code': e.code}), e.status


@app.route('/api/tournaments', methods=['GET'])
def api_list_tournaments():
    """List stored tournaments."""
    tournaments = get_store().load_all()
    return jsonify({
        'success': True,
        'tournaments': [
            {'id': t.id, 'name': t.name, 'status': t.status, 'bracket_size': t.bracket_size,
             'champion': t.champion.display_name if t.champion else None, 'metadata': t.metadata}
            for t in tournaments
        ]
    })


@app.route('/api/tournaments', methods=['POST'])
def api_create_tournament():
    """Create a draft tournament with an empty bracket."""
    data = _json_body()
    metadata = data.get('metadata') or {}
    if not isinstance(metadata, dict):
        raise InvalidTournament('metadata must be an object.')
    metadata = dict(metadata)
    metadata.update({field: data[field] for field in METADATA_FIELDS if data.get(field) is not None})
    tournament = engine.create(data.get('name', ''), data.get('bracket_size'), metadata)
    saved = get_store().save(tournament)
    app.logger.info(f'Tournament {saved.id} created: {saved.name}')
    return _snapshot_response(saved, 201)


@app.route('/api/tournaments/<tournament_id>', methods=['GET'])
def api_get_tournament(tournament_id):
    return _snapshot_response(get_store().load(tournament_id))


@app.route('/api/tournaments/<tournament_id>', methods=['DELETE'])
def api_delete_tournament(tournament_id):
    get_store().delete(tournament_id)
    return jsonify({'success': True})


@app.route('/api/tournaments/<tournament_id>/seed/random', methods=['POST'])
def api_seed_random(tournament_id):
    """Randomly draw names into the first round.

    Accepts either a 'names' list or a 'bulk' string separated by commas or
    newlines.
    """
    data = _json_body()
    names = data.get('names')
    if not isinstance(names, list):
        names = parse_names(data.get('bulk', ''))
    store = get_store()
    tournament = _load_checked(store, tournament_id, data)
    seeded = engine.seed_random(tournament, names)
    return _snapshot_response(store.save(seeded))


@app.route('/api/tournaments/<tournament_id>/seed/manual', methods=['POST'])
def api_seed_manual(tournament_id):
    """Place a single named entrant into a first-round slot."""
    data = _json_body()
    store = get_store()
    tournament = _load_checked(store, tournament_id, data)
    entrant = make_entrant(data.get('name', ''), avatar_ref=data.get('avatar'))
    seeded = engine.seed_manual(tournament, data.get('match_id'), data.get('side'), entrant)
    return _snapshot_response(store.save(seeded))


@app.route('/api/tournaments/<tournament_id>/slots/clear', methods=['POST'])
def api_clear_slot(tournament_id):
    data = _json_body()
    store = get_store()
    tournament = _load_checked(store, tournament_id, data)
    cleared = engine.clear_slot(tournament, data.get('match_id'), data.get('side'))
    return _snapshot_response(store.save(cleared))


@app.route('/api/tournaments/<tournament_id>/start', methods=['POST'])
def api_start_tournament(tournament_id):
    data = _json_body()
    store = get_store()
    tournament = _load_checked(store, tournament_id, data)
    events = EventBuffer()
    started = engine.start(tournament, publisher=events)
    saved = store.save(started)
    # Announce only once the live snapshot is durable
    events.flush(get_publisher())
    return _snapshot_response(saved)


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/result', methods=['POST'])
def api_record_result(tournament_id, match_id):
    """Record a match result and advance the winner."""
    data = _json_body()
    store = get_store()
    tournament = _load_checked(store, tournament_id, data)
    events = EventBuffer()
    updated = engine.record_result(tournament, match_id, data.get('winner_id'), data.get('score'),
                                   publisher=events)
    saved = store.save(updated)
    events.flush(get_publisher())
    return _snapshot_response(saved)


@app.route('/api/tournaments/<tournament_id>/matches/<match_id>/walkover', methods=['POST'])
def api_record_walkover(tournament_id, match_id):
    data = _json_body()
    store = get_store()
    tournament = _load_checked(store, tournament_id, data)
    events = EventBuffer()
    updated = engine.record_walkover(tournament, match_id, publisher=events)
    saved = store.save(updated)
    events.flush(get_publisher())
    return _snapshot_response(saved)


@app.route('/api/feed', methods=['GET'])
def api_feed():
    """Community feed posts, newest first."""
    group = request.args.get('group')
    posts = load_feed(FEED_FILE)
    if group:
        posts = [p for p in posts if str(p.get('group_id')) == group]
    return jsonify({'success': True, 'posts': list(reversed(posts))})


if __name__ == '__main__':
    app.run(debug=True)
