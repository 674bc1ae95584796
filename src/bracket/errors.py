"""
Named failures raised by the bracket engine and its store.

Every error is raised before any snapshot is touched, so a caller that
catches one still holds the untouched input snapshot.
"""


class BracketError(RuntimeError):
    """Base class for every engine failure."""
    status = 400
    default_message = 'Bracket operation failed.'

    def __init__(self, message: str = None):
        super().__init__(message or self.default_message)

    @property
    def code(self) -> str:
        return type(self).__name__

    @property
    def message(self) -> str:
        return str(self)


# Seeding-time

class InvalidBracketSize(BracketError):
    default_message = 'Bracket size must be one of 2, 4, 8, 16, 32 or 64.'


class DuplicateEntrant(BracketError):
    default_message = 'This entrant is already placed in the first round.'


class SlotOccupied(BracketError):
    status = 409
    default_message = 'This slot is already taken.'


class TooManyEntrants(BracketError):
    default_message = 'More entrants than first-round slots.'


class InvalidSide(BracketError):
    default_message = 'Side must be "A" or "B".'


class InvalidEntrant(BracketError):
    default_message = 'Entrant name must not be empty.'


class InvalidTournament(BracketError):
    default_message = 'Tournament name must not be empty.'


# Sequencing

class NotDraft(BracketError):
    status = 409
    default_message = 'Tournament has already started.'


class NotLive(BracketError):
    status = 409
    default_message = 'Tournament is not live.'


class TournamentFinished(BracketError):
    status = 409
    default_message = 'Tournament is finished and can no longer change.'


class UnfilledBracket(BracketError):
    status = 409
    default_message = 'Every first-round match needs at least one entrant.'


# Resolution-time

class MatchNotFound(BracketError):
    status = 404
    default_message = 'Match not found.'


class IncompleteMatch(BracketError):
    status = 409
    default_message = 'Match is still waiting for entrants.'


class InvalidWinner(BracketError):
    default_message = 'Winner must be one of the two entrants of the match.'


class InvalidScore(BracketError):
    default_message = 'Score must be text, for example "6-4 6-3".'


class AlreadyDecided(BracketError):
    status = 409
    default_message = 'Match already has a winner.'


class NotABye(BracketError):
    status = 409
    default_message = 'Walkovers are only allowed for first-round matches with a single entrant.'


# Persistence

class TournamentNotFound(BracketError):
    status = 404
    default_message = 'Tournament not found.'


class VersionConflict(BracketError):
    status = 409
    default_message = 'Tournament was changed by someone else. Reload and try again.'


class CorruptedSnapshot(BracketError):
    status = 500
    default_message = 'Stored tournament data is corrupted.'
