"""
Playable Puzzle Model

Per-match guess bookkeeping layered over an immutable Puzzle.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional

from ..exceptions import EntryAlreadyConfirmed, EntryNotFound
from .puzzle import Puzzle


@dataclass(frozen=True)
class Guess:
    """A word written into an entry and the player it is attributed to."""
    player: str
    text: str


class PlayablePuzzle:
    """
    Mutable guess state for one match.

    attempts holds unconfirmed guesses, confirmed holds verified ones. An entry
    id is never in both. Scoring is left to the Match; accessors hand out
    copies so callers formatting responses never see live state.
    """

    def __init__(self, puzzle: Puzzle):
        self.puzzle = puzzle
        self._attempts: Dict[int, Guess] = {}
        self._confirmed: Dict[int, Guess] = {}

    def _check_entry(self, entry_id: int) -> None:
        if not self.puzzle.has_entry(entry_id):
            raise EntryNotFound(f"Puzzle '{self.puzzle.name}' has no entry {entry_id}")

    def record_attempt(self, entry_id: int, player: str, text: str) -> None:
        """Store an unconfirmed guess, replacing any earlier one."""
        self._check_entry(entry_id)
        if entry_id in self._confirmed:
            raise EntryAlreadyConfirmed()
        self._attempts[entry_id] = Guess(player, text.upper())

    def confirm(self, entry_id: int, text: str, player: Optional[str] = None) -> None:
        """
        Move an entry to confirmed.

        Args:
            entry_id: Entry to confirm
            text: The verified word
            player: Player credited with the word; defaults to the author of
                the current attempt

        Raises:
            EntryAlreadyConfirmed: If the entry is already confirmed
            ValueError: If no player is given and there is no attempt
        """
        self._check_entry(entry_id)
        if entry_id in self._confirmed:
            raise EntryAlreadyConfirmed()
        if player is None:
            if entry_id not in self._attempts:
                raise ValueError(f"No attempt to confirm for entry {entry_id}")
            player = self._attempts[entry_id].player
        self._attempts.pop(entry_id, None)
        self._confirmed[entry_id] = Guess(player, text.upper())

    def clear(self, entry_id: int) -> None:
        """Return an entry to unguessed."""
        self._attempts.pop(entry_id, None)
        self._confirmed.pop(entry_id, None)

    def get_attempts(self) -> Dict[int, Guess]:
        return dict(self._attempts)

    def get_confirmed(self) -> Dict[int, Guess]:
        return dict(self._confirmed)

    def get_guess(self, entry_id: int) -> Optional[Guess]:
        """The confirmed or attempted guess for an entry, if any."""
        return self._confirmed.get(entry_id) or self._attempts.get(entry_id)

    def is_confirmed(self, entry_id: int) -> bool:
        return entry_id in self._confirmed

    def is_complete(self) -> bool:
        return len(self._confirmed) == len(self.puzzle.entry_ids)

    def guesses_for_response(self) -> List[Dict]:
        """Every guessed entry with its position, sorted by entry id."""
        guesses = []
        for entry_id in self.puzzle.entry_ids:
            guess = self.get_guess(entry_id)
            if guess is None:
                continue
            entry = self.puzzle.get_entry(entry_id)
            guesses.append({
                'id': entry_id,
                'player': guess.player,
                'word': guess.text,
                'confirmed': entry_id in self._confirmed,
                'orientation': entry.orientation.value,
                'row': entry.row,
                'col': entry.col,
            })
        return guesses
