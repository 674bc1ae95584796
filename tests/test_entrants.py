"""
Unit tests for the entrant registry.
"""
import pytest
import sys
import os

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from bracket.entrants import avatar_url, build_entrants, make_entrant, parse_names, validate_entrant
from bracket.errors import InvalidEntrant
from bracket.models import Entrant


class TestParseNames:
    """Tests for bulk name input."""

    def test_commas_and_newlines(self):
        assert parse_names("Anna, Boris\nClara,,\n  Dmitri  ") == ['Anna', 'Boris', 'Clara', 'Dmitri']

    def test_empty(self):
        assert parse_names('') == []
        assert parse_names(None) == []
        assert parse_names(' ,\n, ') == []


class TestMakeEntrant:
    """Tests for building a single entrant."""

    def test_generated_avatar(self):
        entrant = make_entrant('Anna Ivanova', id_factory=lambda: 'p-1')
        assert entrant.id == 'p-1'
        assert entrant.display_name == 'Anna Ivanova'
        assert entrant.avatar_ref == avatar_url('Anna Ivanova')
        assert 'name=Anna+Ivanova' in entrant.avatar_ref

    def test_explicit_avatar(self):
        entrant = make_entrant('Anna', avatar_ref='https://example.org/a.png')
        assert entrant.avatar_ref == 'https://example.org/a.png'

    def test_name_trimmed(self):
        assert make_entrant('  Boris ').display_name == 'Boris'

    def test_default_ids_unique(self):
        assert make_entrant('A').id != make_entrant('A').id

    @pytest.mark.parametrize('name', ['', '   ', None, 42])
    def test_invalid_name(self, name):
        with pytest.raises(InvalidEntrant):
            make_entrant(name)


class TestBuildEntrants:
    """Tests for validating a whole entrant pool."""

    def test_blank_name_rejected(self):
        with pytest.raises(InvalidEntrant):
            build_entrants(['Anna', ' '])

    def test_ids_from_factory(self, counting_ids):
        entrants = build_entrants(['Anna', 'Boris'], counting_ids)
        assert [e.id for e in entrants] == ['p-1', 'p-2']

    def test_single_string_rejected(self):
        """A bare string is not a list of one-letter names."""
        with pytest.raises(InvalidEntrant):
            build_entrants('Anna')

    def test_blank_entrant_object_rejected(self):
        with pytest.raises(InvalidEntrant):
            build_entrants([Entrant('p-1', '  ')])


class TestValidateEntrant:
    """Tests for checking ready-made entrants."""

    def test_returns_copy(self):
        entrant = Entrant('p-1', 'Anna')
        checked = validate_entrant(entrant)
        assert checked == entrant
        assert checked is not entrant

    @pytest.mark.parametrize('entrant', [
        'Anna',
        None,
        Entrant('p-1', ''),
        Entrant('', 'Anna'),
        Entrant(None, 'Anna'),
    ])
    def test_rejected(self, entrant):
        with pytest.raises(InvalidEntrant):
            validate_entrant(entrant)
