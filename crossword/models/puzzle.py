"""
Puzzle Data Models

Contains the immutable ground-truth crossword structures.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, List, Mapping, Tuple

from ..exceptions import InvalidPuzzle


class Orientation(Enum):
    """Direction a word is written in the grid."""
    ACROSS = "ACROSS"
    DOWN = "DOWN"


@dataclass(frozen=True)
class PuzzleEntry:
    """One numbered word slot with its answer."""
    answer: str
    clue: str
    orientation: Orientation
    row: int
    col: int

    @property
    def length(self) -> int:
        return len(self.answer)

    def cells(self) -> List[Tuple[int, int]]:
        """Grid cells covered by this entry, in reading order."""
        if self.orientation == Orientation.ACROSS:
            return [(self.row, self.col + i) for i in range(self.length)]
        return [(self.row + i, self.col) for i in range(self.length)]

    def matches(self, text: str) -> bool:
        """Case-insensitive comparison against the answer."""
        return text.upper() == self.answer


class Puzzle:
    """
    Immutable crossword puzzle.

    Entries map a unique integer id to a PuzzleEntry. Construction checks
    that every cell shared by two entries carries the same letter and raises
    InvalidPuzzle otherwise, so an inconsistent puzzle never exists.
    """

    def __init__(self, name: str, description: str, entries: Mapping[int, PuzzleEntry]):
        self._name = name
        self._description = description
        normalized = {}
        for entry_id, entry in entries.items():
            answer = entry.answer.strip().upper()
            if not answer or not answer.isalpha():
                raise InvalidPuzzle(f"Entry {entry_id} of '{name}' has an invalid answer: {entry.answer!r}")
            if entry.row < 0 or entry.col < 0:
                raise InvalidPuzzle(f"Entry {entry_id} of '{name}' starts outside the grid")
            normalized[int(entry_id)] = PuzzleEntry(answer, entry.clue, entry.orientation, entry.row, entry.col)
        if not normalized:
            raise InvalidPuzzle(f"Puzzle '{name}' has no entries")
        self._entries = MappingProxyType(normalized)
        self._cells = self._build_cells()

    def _build_cells(self) -> Dict[Tuple[int, int], str]:
        cells: Dict[Tuple[int, int], str] = {}
        for entry_id, entry in self._entries.items():
            for position, letter in zip(entry.cells(), entry.answer):
                existing = cells.get(position)
                if existing is not None and existing != letter:
                    raise InvalidPuzzle(
                        f"Puzzle '{self._name}' has conflicting letters at {position}: "
                        f"'{existing}' and '{letter}' (entry {entry_id})"
                    )
                cells[position] = letter
        return cells

    @property
    def name(self) -> str:
        return self._name

    @property
    def description(self) -> str:
        return self._description

    @property
    def entries(self) -> Dict[int, PuzzleEntry]:
        return dict(self._entries)

    @property
    def entry_ids(self) -> List[int]:
        return sorted(self._entries)

    def has_entry(self, entry_id: int) -> bool:
        return entry_id in self._entries

    def get_entry(self, entry_id: int) -> PuzzleEntry:
        return self._entries[entry_id]

    def cells(self) -> Dict[Tuple[int, int], str]:
        """Mapping of (row, col) to the letter in that cell."""
        return dict(self._cells)

    def layout(self) -> List[Dict]:
        """Entries without answers, sorted by id, for sending to players."""
        return [
            {
                'id': entry_id,
                'length': entry.length,
                'clue': entry.clue,
                'orientation': entry.orientation.value,
                'row': entry.row,
                'col': entry.col,
            }
            for entry_id, entry in sorted(self._entries.items())
        ]

    def __repr__(self) -> str:
        return f"Puzzle(name={self._name!r}, entries={len(self._entries)})"
