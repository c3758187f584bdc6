import pytest

from crossword.exceptions import EntryAlreadyConfirmed, EntryNotFound
from crossword.models import Guess, PlayablePuzzle


@pytest.fixture()
def playable(p1):
    return PlayablePuzzle(p1)


def test_attempt_is_recorded_uppercased(playable):
    playable.record_attempt(1, 'alice', 'dog')
    assert playable.get_attempts() == {1: Guess('alice', 'DOG')}
    assert not playable.is_confirmed(1)


def test_newer_attempt_overwrites_older_one(playable):
    playable.record_attempt(1, 'alice', 'DOG')
    playable.record_attempt(1, 'bob', 'COT')
    assert playable.get_guess(1) == Guess('bob', 'COT')


def test_confirm_moves_entry_out_of_attempts(playable):
    playable.record_attempt(1, 'alice', 'cat')
    playable.confirm(1, 'cat')
    assert playable.get_attempts() == {}
    assert playable.get_confirmed() == {1: Guess('alice', 'CAT')}


def test_confirmed_entry_rejects_attempts(playable):
    playable.record_attempt(1, 'alice', 'CAT')
    playable.confirm(1, 'CAT')
    with pytest.raises(EntryAlreadyConfirmed):
        playable.record_attempt(1, 'bob', 'DOG')
    with pytest.raises(EntryAlreadyConfirmed):
        playable.confirm(1, 'CAT', player='bob')


def test_unknown_entry_is_rejected(playable):
    with pytest.raises(EntryNotFound):
        playable.record_attempt(9, 'alice', 'CAT')


def test_confirm_without_attempt_needs_a_player(playable):
    with pytest.raises(ValueError):
        playable.confirm(1, 'CAT')
    playable.confirm(1, 'CAT', player='bob')
    assert playable.get_guess(1).player == 'bob'


def test_clear_and_completion(playable):
    playable.confirm(1, 'CAT', player='alice')
    playable.record_attempt(2, 'bob', 'COW')
    assert not playable.is_complete()
    playable.clear(2)
    assert playable.get_guess(2) is None
    playable.confirm(2, 'CAR', player='bob')
    assert playable.is_complete()


def test_guesses_for_response_lists_positions(playable):
    playable.record_attempt(2, 'bob', 'cow')
    playable.confirm(1, 'CAT', player='alice')
    assert playable.guesses_for_response() == [
        {'id': 1, 'player': 'alice', 'word': 'CAT', 'confirmed': True,
         'orientation': 'ACROSS', 'row': 0, 'col': 0},
        {'id': 2, 'player': 'bob', 'word': 'COW', 'confirmed': False,
         'orientation': 'DOWN', 'row': 0, 'col': 0},
    ]
