"""
Puzzle Loader

Reads puzzle definitions from JSON files and builds validated Puzzle objects.
"""

import json
import os
from typing import Dict, List

from ..exceptions import InvalidPuzzle
from ..models.puzzle import Orientation, Puzzle, PuzzleEntry
from ..utils.game_logger import game_logger


def parse_puzzle(data: Dict, default_name: str = "") -> Puzzle:
    """
    Build a Puzzle from its JSON representation.

    Args:
        data: Mapping with 'name', 'description' and a list of 'entries'
        default_name: Name used when the definition has none

    Returns:
        Puzzle: The validated puzzle

    Raises:
        ValueError: If the definition is malformed
        InvalidPuzzle: If the entries contradict each other
    """
    if not isinstance(data, dict):
        raise ValueError("Puzzle definition must be a JSON object")

    raw_entries = data.get('entries')
    if not isinstance(raw_entries, list):
        raise ValueError("Puzzle definition must contain a list of entries")

    entries = {}
    for position, raw in enumerate(raw_entries, start=1):
        try:
            entry_id = int(raw.get('id', position))
            entry = PuzzleEntry(
                answer=str(raw['answer']),
                clue=str(raw.get('clue', '')),
                orientation=Orientation(str(raw['orientation']).upper()),
                row=int(raw['row']),
                col=int(raw['col'])
            )
        except (KeyError, TypeError, AttributeError, ValueError) as e:
            raise ValueError(f"Entry {position} is malformed: {e}") from e
        if entry_id in entries:
            raise ValueError(f"Duplicate entry id {entry_id}")
        entries[entry_id] = entry

    name = str(data.get('name') or '').strip() or default_name
    return Puzzle(name, str(data.get('description', '')), entries)


def _unique_name(name: str, taken: Dict[str, Puzzle]) -> str:
    if name not in taken:
        return name
    suffix = 1
    while f"{name}{suffix}" in taken:
        suffix += 1
    return f"{name}{suffix}"


def load_puzzles(directory: str) -> Dict[str, Puzzle]:
    """
    Load every *.json puzzle in a directory.

    Files are read in sorted order. Unreadable or malformed files are logged
    and skipped; inconsistent puzzles are logged as warnings and discarded.
    Duplicate names get a numeric suffix.

    Returns:
        Dict[str, Puzzle]: Unique puzzle name -> puzzle
    """
    puzzles: Dict[str, Puzzle] = {}
    if not os.path.isdir(directory):
        game_logger.logger.warning(f"Puzzle directory not found: {directory}")
        return puzzles

    for file_name in sorted(os.listdir(directory)):
        if not file_name.endswith('.json'):
            continue
        path = os.path.join(directory, file_name)
        stem = os.path.splitext(file_name)[0]
        try:
            with open(path, 'r', encoding='utf-8') as f:
                puzzle = parse_puzzle(json.load(f), default_name=stem)
        except InvalidPuzzle as e:
            game_logger.logger.warning(f"Rejected inconsistent puzzle {path}: {e}")
            continue
        except (OSError, ValueError) as e:
            game_logger.logger.error(f"Could not load puzzle {path}: {e}")
            continue

        name = _unique_name(puzzle.name, puzzles)
        if name != puzzle.name:
            puzzle = Puzzle(name, puzzle.description, puzzle.entries)
        puzzles[name] = puzzle
        game_logger.logger.info(f"Loaded puzzle '{name}' from {path} ({len(puzzle.entry_ids)} entries)")

    return puzzles


def get_puzzle_statistics(puzzles: Dict[str, Puzzle]) -> List[Dict]:
    """Per-puzzle entry counts for startup reporting."""
    return [
        {'name': name, 'entries': len(puzzle.entry_ids), 'cells': len(puzzle.cells())}
        for name, puzzle in sorted(puzzles.items())
    ]
