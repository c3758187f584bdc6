"""
Data Models Package

Contains the puzzle, match and listener models used by the game service.
"""

from .puzzle import Orientation, Puzzle, PuzzleEntry
from .playable_puzzle import Guess, PlayablePuzzle
from .match import ChallengeOutcome, Match, MatchStatus
from .listener import Listener, ListenerKind

__all__ = [
    'Orientation', 'Puzzle', 'PuzzleEntry',
    'Guess', 'PlayablePuzzle',
    'ChallengeOutcome', 'Match', 'MatchStatus',
    'Listener', 'ListenerKind'
]
