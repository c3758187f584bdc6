"""
Match Model

State machine for one crossword game between two players.
"""

from enum import Enum
from typing import Dict, List, Optional, Set

from ..config.game_settings import CORRECT_WORD_AWARD, CHALLENGE_AWARD, CHALLENGE_PENALTY
from ..exceptions import (
    AlreadyInMatch, EntryAlreadyConfirmed, EntryNotFound, MatchNotOngoing,
    MatchNotWaiting, NotInMatch, NotOpponentsEntry
)
from .playable_puzzle import PlayablePuzzle
from .puzzle import Puzzle


class MatchStatus(Enum):
    """Lifecycle state of a match."""
    WAITING = "WAITING"
    ONGOING = "ONGOING"
    DONE = "DONE"


class ChallengeOutcome(Enum):
    """How a challenge was resolved."""
    CHALLENGER_CORRECT = "CHALLENGER_CORRECT"
    ORIGINAL_CORRECT = "ORIGINAL_CORRECT"
    BOTH_WRONG = "BOTH_WRONG"


class Match:
    """
    A match between two players sharing one puzzle.

    WAITING holds one seated player. join() seats the second and starts play.
    Play ends when every entry is confirmed or a player forfeits. A finished
    match stays around until both players have left it.

    Match does no locking of its own; the Game service serializes every call.
    """

    def __init__(self, match_id: str, description: str, puzzle: Puzzle, player_one: str):
        self.match_id = match_id
        self.description = description
        self.puzzle = puzzle
        self.player_one = player_one
        self.player_two: Optional[str] = None
        self.playable = PlayablePuzzle(puzzle)
        self.scores: Dict[str, int] = {player_one: 0}
        self.status = MatchStatus.WAITING
        self.winner: Optional[str] = None
        self.forfeited_by: Optional[str] = None
        self.version = 0
        self._challenged: Set[int] = set()
        self._left: Set[str] = set()

    # State predicates

    def is_waiting(self) -> bool:
        return self.status == MatchStatus.WAITING

    def is_ongoing(self) -> bool:
        return self.status == MatchStatus.ONGOING

    def is_done(self) -> bool:
        return self.status == MatchStatus.DONE

    @property
    def players(self) -> List[str]:
        return [p for p in (self.player_one, self.player_two) if p is not None]

    def has_player(self, player: str) -> bool:
        return player in self.players

    def opponent_of(self, player: str) -> Optional[str]:
        if player == self.player_one:
            return self.player_two
        if player == self.player_two:
            return self.player_one
        return None

    # Transitions

    def join(self, player: str) -> None:
        """Seat the second player and start the match."""
        if self.has_player(player):
            raise AlreadyInMatch()
        if not self.is_waiting():
            raise MatchNotWaiting()
        self.player_two = player
        self.scores[player] = 0
        self.status = MatchStatus.ONGOING

    def _check_play(self, player: str) -> None:
        if not self.is_ongoing():
            raise MatchNotOngoing()
        if not self.has_player(player):
            raise NotInMatch("Player is not seated in this match")

    def try_word(self, player: str, entry_id: int, text: str) -> bool:
        """
        Write a guess into an entry.

        Args:
            player: Player making the guess
            entry_id: Entry being guessed
            text: The guessed word

        Returns:
            bool: True if the guess matched the answer and was confirmed

        Raises:
            MatchNotOngoing, NotInMatch, EntryNotFound, EntryAlreadyConfirmed
        """
        self._check_play(player)
        self.playable.record_attempt(entry_id, player, text)
        correct = self.puzzle.get_entry(entry_id).matches(text)
        if correct:
            self.playable.confirm(entry_id, text)
            self.scores[player] += CORRECT_WORD_AWARD
        self._after_play()
        return correct

    def challenge_word(self, player: str, entry_id: int, text: str) -> ChallengeOutcome:
        """
        Challenge the opponent's word in an entry.

        The challenger is only right when the original word is wrong and the
        challenge matches the answer. An entry whose challenge left it
        confirmed cannot be challenged again.

        Raises:
            MatchNotOngoing, NotInMatch, EntryNotFound, NotOpponentsEntry,
            EntryAlreadyConfirmed
        """
        self._check_play(player)
        if not self.puzzle.has_entry(entry_id):
            raise EntryNotFound()
        entry = self.puzzle.get_entry(entry_id)
        guess = self.playable.get_guess(entry_id)
        if guess is None or guess.player == player:
            raise NotOpponentsEntry()
        if entry_id in self._challenged:
            raise EntryAlreadyConfirmed("Entry has already been resolved by a challenge")
        challenge_text = text.upper()

        original_correct = entry.matches(guess.text)
        challenger_correct = entry.matches(challenge_text)

        if original_correct:
            outcome = ChallengeOutcome.ORIGINAL_CORRECT
            if not self.playable.is_confirmed(entry_id):
                self.playable.confirm(entry_id, guess.text)
            self.scores[player] -= CHALLENGE_PENALTY
            self._challenged.add(entry_id)
        elif challenger_correct:
            outcome = ChallengeOutcome.CHALLENGER_CORRECT
            self.playable.clear(entry_id)
            self.playable.confirm(entry_id, challenge_text, player=player)
            self.scores[player] += CHALLENGE_AWARD
            self.scores[guess.player] -= CHALLENGE_PENALTY
            self._challenged.add(entry_id)
        else:
            outcome = ChallengeOutcome.BOTH_WRONG
            self.playable.clear(entry_id)
        self._after_play()
        return outcome

    def forfeit(self, player: str) -> None:
        """End the match; the opponent wins."""
        self._check_play(player)
        self.forfeited_by = player
        self.winner = self.opponent_of(player)
        self.status = MatchStatus.DONE
        self.version += 1

    def _after_play(self) -> None:
        self.version += 1
        if self.playable.is_complete():
            self._finish()

    def _finish(self) -> None:
        self.status = MatchStatus.DONE
        one = self.scores[self.player_one]
        two = self.scores[self.player_two]
        if one > two:
            self.winner = self.player_one
        elif two > one:
            self.winner = self.player_two
        else:
            self.winner = None

    # Leaving a finished match

    def leave(self, player: str) -> None:
        """Record that a player has seen the result and left."""
        if not self.is_done():
            raise MatchNotOngoing("Only a finished match can be left")
        if not self.has_player(player):
            raise NotInMatch()
        self._left.add(player)

    def has_left(self, player: str) -> bool:
        return player in self._left

    def all_left(self) -> bool:
        return all(p in self._left for p in self.players)

    # Views

    def summary(self) -> Dict:
        """Short description used in match listings."""
        return {
            'match_id': self.match_id,
            'description': self.description,
            'puzzle': self.puzzle.name,
            'status': self.status.value,
            'players': self.players,
        }

    def show_score(self) -> Dict:
        return {
            'match_id': self.match_id,
            'status': self.status.value,
            'scores': dict(self.scores),
            'winner': self.winner,
            'forfeited_by': self.forfeited_by,
        }

    def state_for_response(self) -> Dict:
        """Full play state: guesses, scores and lifecycle."""
        state = self.show_score()
        state.update({
            'description': self.description,
            'puzzle': self.puzzle.name,
            'players': self.players,
            'version': self.version,
            'guesses': self.playable.guesses_for_response(),
        })
        return state
