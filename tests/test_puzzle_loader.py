import json
import logging
import os

import pytest

from crossword.services.puzzle_loader import get_puzzle_statistics, load_puzzles, parse_puzzle

PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))


def write_puzzle(directory, file_name, data):
    path = directory / file_name
    path.write_text(json.dumps(data) if not isinstance(data, str) else data, encoding='utf-8')
    return path


def cat_entries():
    return [
        {"id": 1, "answer": "cat", "clue": "pet", "orientation": "across", "row": 0, "col": 0},
        {"id": 2, "answer": "car", "clue": "ride", "orientation": "DOWN", "row": 0, "col": 0},
    ]


def test_parse_puzzle_defaults():
    puzzle = parse_puzzle({"entries": [
        {"answer": "go", "orientation": "ACROSS", "row": 0, "col": 0}
    ]}, default_name='fallback')
    assert puzzle.name == 'fallback'
    assert puzzle.entry_ids == [1]
    assert puzzle.get_entry(1).answer == 'GO'


@pytest.mark.parametrize('data', [
    [],
    {"name": "x"},
    {"entries": [{"answer": "go", "orientation": "SIDEWAYS", "row": 0, "col": 0}]},
    {"entries": [{"answer": "go", "orientation": "ACROSS", "row": "top", "col": 0}]},
    {"entries": [{"id": 1, "answer": "go", "orientation": "ACROSS", "row": 0, "col": 0},
                 {"id": 1, "answer": "on", "orientation": "DOWN", "row": 0, "col": 1}]},
])
def test_parse_puzzle_rejects_malformed_definitions(data):
    with pytest.raises(ValueError):
        parse_puzzle(data)


def test_load_puzzles_skips_bad_files(tmp_path, caplog):
    write_puzzle(tmp_path, 'a.json', {"name": "Cats", "entries": cat_entries()})
    write_puzzle(tmp_path, 'b.json', "{not json")
    write_puzzle(tmp_path, 'c.json', {"name": "Clash", "entries": [
        {"answer": "cat", "orientation": "ACROSS", "row": 0, "col": 0},
        {"answer": "dog", "orientation": "DOWN", "row": 0, "col": 0},
    ]})
    write_puzzle(tmp_path, 'notes.txt', "ignored")

    with caplog.at_level(logging.WARNING, logger='crossword_game'):
        puzzles = load_puzzles(str(tmp_path))

    assert list(puzzles) == ['Cats']
    assert 'b.json' in caplog.text
    assert 'c.json' in caplog.text


def test_duplicate_names_get_suffix(tmp_path):
    for file_name in ('a.json', 'b.json', 'c.json'):
        write_puzzle(tmp_path, file_name, {"name": "Cats", "entries": cat_entries()})
    write_puzzle(tmp_path, 'unnamed.json', {"entries": cat_entries()})
    puzzles = load_puzzles(str(tmp_path))
    assert sorted(puzzles) == ['Cats', 'Cats1', 'Cats2', 'unnamed']
    assert all(puzzle.name == name for name, puzzle in puzzles.items())


def test_renamed_duplicate_is_listed_under_its_own_name(tmp_path):
    from crossword.services.game_service import GameService

    write_puzzle(tmp_path, 'a.json', {"name": "Cats", "entries": cat_entries()})
    write_puzzle(tmp_path, 'b.json', {"name": "Cats", "entries": cat_entries()[:1]})
    game = GameService(load_puzzles(str(tmp_path)))
    game.login('alice')
    assert game.create_match('alice', 'M1', 'Cats1', '')['match']['puzzle'] == 'Cats1'
    assert game.get_available_matches()[0]['puzzle'] == 'Cats1'
    assert len(game.get_puzzle_layout('Cats1')) == 1


def test_missing_directory_yields_no_puzzles(tmp_path):
    assert load_puzzles(str(tmp_path / 'missing')) == {}


def test_bundled_puzzles_are_consistent():
    puzzles = load_puzzles(os.path.join(PROJECT_ROOT, 'puzzles'))
    assert sorted(puzzles) == ['Simple', 'Stars']
    stats = get_puzzle_statistics(puzzles)
    assert stats[0] == {'name': 'Simple', 'entries': 3, 'cells': 7}
