"""
Crossword Exceptions

Exception hierarchy for the crossword game core.

GameError subclasses describe invalid client commands. The Game service
catches them and reports them as failed results. ListenerNotFound and
InvalidPuzzle mean the server itself is broken and are never caught by the core.
"""


class CrosswordError(Exception):
    """Base exception for the crossword server."""

    message = "Crossword error"

    def __init__(self, message=None):
        super().__init__(message or self.message)

    @property
    def code(self) -> str:
        return type(self).__name__


class GameError(CrosswordError):
    """A command that is invalid for the current game state."""

    message = "Invalid command"


class InvalidPlayerId(GameError):
    message = "Player ID must be a non-empty alphanumeric string"


class AlreadyLoggedIn(GameError):
    message = "Player is already logged in"


class NotLoggedIn(GameError):
    message = "Player is not logged in"


class AlreadyInMatch(GameError):
    message = "Player is already in a match"


class NotInMatch(GameError):
    message = "Player is not in a match"


class InvalidMatchId(GameError):
    message = "Match ID must be a non-empty alphanumeric string"


class MatchAlreadyExists(GameError):
    message = "A match with this ID already exists"


class MatchNotFound(GameError):
    message = "Match not found"


class PuzzleNotFound(GameError):
    message = "Puzzle not found"


class MatchNotWaiting(GameError):
    message = "Match is not waiting for a player"


class MatchNotOngoing(GameError):
    message = "Match is not in progress"


class EntryNotFound(GameError):
    message = "Puzzle has no entry with this ID"


class EntryAlreadyConfirmed(GameError):
    message = "Entry has already been confirmed"


class NotOpponentsEntry(GameError):
    message = "Only the opponent's words can be challenged"


class ListenerNotFound(CrosswordError):
    """Raised when removing a listener that was never registered."""

    message = "Listener is not registered"


class InvalidPuzzle(CrosswordError):
    """Raised when a puzzle definition is inconsistent."""

    message = "Puzzle is inconsistent"
