"""
YAML file store for tournament snapshots.

One file per tournament under <data_dir>/tournaments/. Writes go through a
directory-wide FileLock and a version check, so of two organizers saving
the same version only the first succeeds.
"""
import logging
import os
import re
import uuid
from typing import Dict, List

import yaml
from filelock import FileLock

from .errors import CorruptedSnapshot, TournamentNotFound, VersionConflict
from .models import Tournament

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 10
_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')


class TournamentStore:
    def __init__(self, data_dir: str, lock_timeout: float = DEFAULT_LOCK_TIMEOUT):
        self.data_dir = data_dir
        self.tournaments_dir = os.path.join(data_dir, 'tournaments')
        os.makedirs(self.tournaments_dir, exist_ok=True)
        self._lock = FileLock(os.path.join(self.tournaments_dir, '.lock'), timeout=lock_timeout)

    def _path(self, tournament_id: str) -> str:
        if not isinstance(tournament_id, str) or not _ID_PATTERN.match(tournament_id):
            raise TournamentNotFound(f'Invalid tournament id {tournament_id!r}.')
        return os.path.join(self.tournaments_dir, f'{tournament_id}.yaml')

    def _read(self, path: str, tournament_id: str):
        if not os.path.exists(path):
            raise TournamentNotFound(f'Tournament {tournament_id} not found.')
        with open(path, 'r', encoding='utf-8') as f:
            try:
                return yaml.safe_load(f)
            except yaml.YAMLError as e:
                logger.error(f'Failed to parse {path}: {e}')
                raise CorruptedSnapshot(f'Tournament {tournament_id} could not be parsed.') from e

    def _write(self, path: str, data: Dict):
        tmp_path = f'{path}.tmp'
        with open(tmp_path, 'w', encoding='utf-8') as f:
            yaml.safe_dump(data, f, default_flow_style=False, allow_unicode=True, sort_keys=False)
        os.replace(tmp_path, path)

    def load_raw(self, tournament_id: str):
        """Raw YAML content of a snapshot, without validation."""
        return self._read(self._path(tournament_id), tournament_id)

    def load(self, tournament_id: str) -> Tournament:
        data = self.load_raw(tournament_id)
        try:
            tournament = Tournament.from_dict(data)
        except CorruptedSnapshot as e:
            logger.error(f'Tournament {tournament_id} is corrupted: {e}')
            raise
        if tournament.id != tournament_id:
            raise CorruptedSnapshot(f'File for {tournament_id} holds tournament {tournament.id}.')
        return tournament

    def save(self, tournament: Tournament) -> Tournament:
        """
        Write a snapshot if nobody else wrote since it was loaded.

        The stored version must equal tournament.version (0 for a new
        tournament). Returns a copy carrying the bumped version.
        """
        saved = tournament.copy()
        if not saved.id:
            saved.id = uuid.uuid4().hex[:12]
        path = self._path(saved.id)

        with self._lock:
            current_version = 0
            if os.path.exists(path):
                current = self._read(path, saved.id)
                current_version = current.get('version', 0) if isinstance(current, dict) else 0
            if current_version != tournament.version:
                logger.warning(f'Version conflict on {saved.id}: stored {current_version}, '
                               f'got {tournament.version}')
                raise VersionConflict()
            saved.version = current_version + 1
            self._write(path, saved.to_dict())

        logger.debug(f'Saved tournament {saved.id} at version {saved.version}')
        return saved

    def overwrite_raw(self, tournament_id: str, data: Dict):
        """Replace a snapshot file wholesale. Used by the repair tool only."""
        path = self._path(tournament_id)
        with self._lock:
            self._write(path, data)

    def list_ids(self) -> List[str]:
        ids = []
        for filename in sorted(os.listdir(self.tournaments_dir)):
            if filename.endswith('.yaml'):
                ids.append(filename[:-len('.yaml')])
        return ids

    def load_all(self) -> List[Tournament]:
        """Every readable snapshot; corrupted ones are logged and skipped."""
        tournaments = []
        for tournament_id in self.list_ids():
            try:
                tournaments.append(self.load(tournament_id))
            except CorruptedSnapshot:
                continue
        return tournaments

    def delete(self, tournament_id: str):
        path = self._path(tournament_id)
        with self._lock:
            if not os.path.exists(path):
                raise TournamentNotFound(f'Tournament {tournament_id} not found.')
            os.remove(path)
        logger.info(f'Deleted tournament {tournament_id}')
