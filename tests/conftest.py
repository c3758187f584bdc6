import os
import sys
import tempfile

import pytest

# Ensure the project root (containing the `crossword` package) is on sys.path
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, '..'))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

# Keep test logs out of the working tree
os.environ.setdefault('LOG_DIR', os.path.join(tempfile.gettempdir(), 'crossword-test-logs'))

from crossword import create_app
from crossword.config import TestingConfig
from crossword.models import Orientation, Puzzle, PuzzleEntry
from crossword.services.game_service import GameService, initialize_game_service


def make_puzzle(name, *entries, description=''):
    """Build a puzzle from (id, answer, orientation, row, col) tuples."""
    return Puzzle(name, description, {
        entry_id: PuzzleEntry(answer, f"clue {entry_id}", Orientation(orientation), row, col)
        for entry_id, answer, orientation, row, col in entries
    })


@pytest.fixture()
def p1():
    # 1 CAT across and 2 CAR down share the C in the corner
    return make_puzzle('P1', (1, 'CAT', 'ACROSS', 0, 0), (2, 'CAR', 'DOWN', 0, 0),
                       description='Cats and cars')


@pytest.fixture()
def puzzles(p1):
    tiny = make_puzzle('Tiny', (1, 'GO', 'ACROSS', 0, 0))
    return {'P1': p1, 'Tiny': tiny}


@pytest.fixture()
def game(puzzles):
    return GameService(puzzles)


@pytest.fixture()
def ongoing(game):
    """alice and bob playing match M1 on P1."""
    game.login('alice')
    game.login('bob')
    assert game.create_match('alice', 'M1', 'P1', 'first match')['success']
    assert game.join_match('bob', 'M1')['success']
    return game


@pytest.fixture()
def flask_app(puzzles):
    initialize_game_service(puzzles)
    application, _ = create_app(TestingConfig)
    yield application


@pytest.fixture()
def socketio(flask_app):
    return flask_app.socketio


@pytest.fixture()
def client(flask_app):
    return flask_app.test_client()


@pytest.fixture()
def sio_client(flask_app, socketio):
    test_client = socketio.test_client(flask_app, flask_test_client=flask_app.test_client())
    yield test_client
    try:
        test_client.disconnect()
    except Exception:
        pass
