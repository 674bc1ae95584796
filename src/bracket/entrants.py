"""
Entrant registry: turns organizer input into validated Entrant records.
"""
import re
import uuid
from typing import Callable, Iterable, List, Optional
from urllib.parse import quote_plus

from .errors import DuplicateEntrant, InvalidEntrant
from .models import Entrant

AVATAR_URL = 'https://ui-avatars.com/api/?name={name}&background=random&color=fff'


def default_id_factory() -> str:
    return f'p-{uuid.uuid4().hex[:12]}'


def parse_names(text: str) -> List[str]:
    """Split bulk input (comma or newline separated) into trimmed names."""
    if not text:
        return []
    return [name.strip() for name in re.split(r'[,\n]+', text) if name.strip()]


def avatar_url(name: str) -> str:
    return AVATAR_URL.format(name=quote_plus(name.strip()))


def make_entrant(name, id_factory: Optional[Callable[[], str]] = None,
                 avatar_ref: Optional[str] = None) -> Entrant:
    if not isinstance(name, str) or not name.strip():
        raise InvalidEntrant()
    name = name.strip()
    new_id = (id_factory or default_id_factory)()
    return Entrant(new_id, name, avatar_ref or avatar_url(name))


def validate_entrant(entrant) -> Entrant:
    """Check a ready-made entrant and return a copy of it."""
    if not isinstance(entrant, Entrant):
        raise InvalidEntrant(f'Expected an Entrant, got {type(entrant).__name__}.')
    if not isinstance(entrant.id, str) or not entrant.id.strip():
        raise InvalidEntrant('Entrant id must not be blank.')
    if not isinstance(entrant.display_name, str) or not entrant.display_name.strip():
        raise InvalidEntrant()
    return entrant.copy()


def build_entrants(names: Iterable, id_factory: Optional[Callable[[], str]] = None) -> List[Entrant]:
    """
    Build the entrant pool for seeding.

    Items may be names or ready-made Entrant objects. Two players can share a
    display name; ids are what must be unique, so a repeated id is rejected.
    """
    if isinstance(names, (str, bytes)):
        raise InvalidEntrant('Names must be given as a list, not a single string.')
    entrants = []
    seen_ids = set()
    for item in names:
        if isinstance(item, Entrant):
            entrant = validate_entrant(item)
        else:
            entrant = make_entrant(item, id_factory)
        if entrant.id in seen_ids:
            raise DuplicateEntrant(f'Entrant id {entrant.id} is used twice.')
        seen_ids.add(entrant.id)
        entrants.append(entrant)
    return entrants
