#!/usr/bin/env python3
"""
Tournament Snapshot Repair Tool

Scans the tournament store for snapshots that no longer load and, with
--fix, rebuilds the bracket of each broken one as an empty draft so the
organizer can seed it again. Name, id and metadata are kept when readable.

Usage:
    python scripts/repair_snapshots.py --data-dir /home/data
    python scripts/repair_snapshots.py --data-dir /home/data --fix

Exit codes:
    0: All snapshots valid (or all corrupted ones repaired)
    1: Corrupted snapshots found and --fix not given
    2: Data directory missing or a repair failed
"""
import argparse
import logging
import os
import sys

SRC_DIR = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', 'src'))
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)

from bracket.builder import build_skeleton
from bracket.errors import BracketError, CorruptedSnapshot
from bracket.models import BRACKET_SIZES, DRAFT, Tournament
from bracket.store import TournamentStore

logger = logging.getLogger('repair_snapshots')

FALLBACK_BRACKET_SIZE = 16


def find_corrupted(store: TournamentStore) -> dict:
    """Return {tournament_id: reason} for every snapshot that fails to load."""
    corrupted = {}
    for tournament_id in store.list_ids():
        try:
            store.load(tournament_id)
        except CorruptedSnapshot as e:
            corrupted[tournament_id] = str(e)
    return corrupted


def rebuild_snapshot(tournament_id: str, raw) -> Tournament:
    """Salvage what can be read from raw data and attach a fresh skeleton."""
    data = raw if isinstance(raw, dict) else {}
    bracket_size = data.get('bracket_size')
    if bracket_size not in BRACKET_SIZES or isinstance(bracket_size, bool):
        bracket_size = FALLBACK_BRACKET_SIZE
    metadata = data.get('metadata') if isinstance(data.get('metadata'), dict) else {}
    version = data.get('version', 0)
    if not isinstance(version, int) or isinstance(version, bool) or version < 0:
        version = 0
    name = data.get('name') if isinstance(data.get('name'), str) and data.get('name') else tournament_id
    return Tournament(tournament_id, name, bracket_size, DRAFT, build_skeleton(bracket_size), metadata,
                      version=version + 1)


def repair(store: TournamentStore, tournament_id: str) -> bool:
    try:
        raw = store.load_raw(tournament_id)
    except CorruptedSnapshot:
        raw = None
    try:
        rebuilt = rebuild_snapshot(tournament_id, raw)
        store.overwrite_raw(tournament_id, rebuilt.to_dict())
        store.load(tournament_id)
    except (BracketError, OSError) as e:
        print(f"  Failed to repair {tournament_id}: {e}", file=sys.stderr)
        return False
    print(f"  Rebuilt {tournament_id} as an empty {rebuilt.bracket_size}-slot draft")
    return True


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        description='Find and repair corrupted tournament snapshots.',
    )
    parser.add_argument('--data-dir', default=os.environ.get('TOURNAMENT_DATA_DIR'),
                        help='Store root (defaults to $TOURNAMENT_DATA_DIR)')
    parser.add_argument('--fix', action='store_true',
                        help='Rebuild corrupted snapshots as empty drafts')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format='%(levelname)s %(name)s: %(message)s')

    if not args.data_dir or not os.path.isdir(args.data_dir):
        print(f"Error: data directory not found: {args.data_dir}", file=sys.stderr)
        return 2

    store = TournamentStore(args.data_dir)
    print(f"Checking {len(store.list_ids())} tournament(s) in {store.tournaments_dir}")
    corrupted = find_corrupted(store)

    if not corrupted:
        print("All tournaments are valid.")
        return 0

    for tournament_id, reason in corrupted.items():
        print(f"- Corrupted: {tournament_id}: {reason}")

    if not args.fix:
        print(f"\nFound {len(corrupted)} corrupted tournament(s). Re-run with --fix to rebuild them.")
        return 1

    failures = [tid for tid in corrupted if not repair(store, tid)]
    if failures:
        print(f"\nCould not repair: {', '.join(failures)}", file=sys.stderr)
        return 2
    print(f"\nRepaired {len(corrupted)} tournament(s).")
    return 0


if __name__ == '__main__':
    sys.exit(main())
