import threading

import pytest

from crossword.config.game_settings import CHALLENGE_PENALTY, CORRECT_WORD_AWARD


class TestLogin:
    def test_login_returns_puzzles_and_matches(self, game):
        result = game.login('alice')
        assert result['success']
        assert result['puzzles'] == ['P1', 'Tiny']
        assert result['matches'] == []
        assert game.is_logged_in('alice')

    @pytest.mark.parametrize('player_id', ['', 'al ice', 'bob!', None])
    def test_invalid_player_ids(self, game, player_id):
        result = game.login(player_id)
        assert result == {'success': False, 'error': result['error'], 'code': 'InvalidPlayerId'}

    def test_duplicate_login_fails(self, game):
        game.login('alice')
        assert game.login('alice')['code'] == 'AlreadyLoggedIn'
        # ids are case-sensitive
        assert game.login('Alice')['success']

    def test_logout_blocked_while_in_unfinished_match(self, ongoing):
        assert ongoing.logout('alice')['code'] == 'AlreadyInMatch'
        ongoing.exit_play('bob')
        assert ongoing.logout('alice')['success']
        assert not ongoing.is_logged_in('alice')

    def test_logout_requires_login(self, game):
        assert game.logout('ghost')['code'] == 'NotLoggedIn'


class TestMatchLifecycle:
    def test_create_match_is_listed(self, game):
        game.login('alice')
        result = game.create_match('alice', 'M1', 'P1', 'first match')
        assert result['success']
        assert result['match']['status'] == 'WAITING'
        assert game.get_available_matches() == [
            {'match_id': 'M1', 'description': 'first match', 'puzzle': 'P1'}
        ]
        assert game.get_match_id('alice') == 'M1'

    def test_create_match_errors(self, game):
        game.login('alice')
        game.login('bob')
        assert game.create_match('carol', 'M1', 'P1', '')['code'] == 'NotLoggedIn'
        assert game.create_match('alice', 'M 1', 'P1', '')['code'] == 'InvalidMatchId'
        assert game.create_match('alice', 'M1', 'Nope', '')['code'] == 'PuzzleNotFound'
        assert game.create_match('alice', 'M1', 'P1', '')['success']
        assert game.create_match('alice', 'M2', 'P1', '')['code'] == 'AlreadyInMatch'
        assert game.create_match('bob', 'M1', 'P1', '')['code'] == 'MatchAlreadyExists'

    def test_join_match(self, game):
        game.login('alice')
        game.login('bob')
        game.create_match('alice', 'M1', 'P1', '')
        assert game.join_match('bob', 'M9')['code'] == 'MatchNotFound'
        result = game.join_match('bob', 'M1')
        assert result['success']
        assert result['match']['players'] == ['alice', 'bob']
        assert [entry['id'] for entry in result['puzzle']] == [1, 2]
        assert game.get_available_matches() == []

    def test_join_started_match_fails(self, ongoing):
        ongoing.login('carol')
        assert ongoing.join_match('carol', 'M1')['code'] == 'MatchNotWaiting'

    def test_exit_wait_removes_match(self, game):
        game.login('alice')
        game.create_match('alice', 'M1', 'P1', '')
        assert game.exit_wait('alice')['success']
        assert game.get_available_matches() == []
        assert game.get_match_id('alice') is None
        assert game.exit_wait('alice')['code'] == 'NotInMatch'

    def test_exit_wait_on_started_match_fails(self, ongoing):
        assert ongoing.exit_wait('alice')['code'] == 'MatchNotWaiting'

    def test_exit_play_forfeits_then_match_is_removed(self, ongoing):
        result = ongoing.exit_play('bob')
        assert result['success']
        assert result['score']['winner'] == 'alice'
        assert result['score']['forfeited_by'] == 'bob'
        assert ongoing.get_match_id('bob') is None
        # alice can still read the result until she leaves too
        assert ongoing.show_score('alice')['score']['status'] == 'DONE'
        assert ongoing.exit_play('alice')['success']
        assert 'M1' not in ongoing.matches

    def test_exit_play_while_waiting_fails(self, game):
        game.login('alice')
        game.create_match('alice', 'M1', 'P1', '')
        assert game.exit_play('alice')['code'] == 'MatchNotOngoing'


class TestPlay:
    def test_scenario_try_then_challenge(self, ongoing):
        result = ongoing.try_word('alice', 1, 'CAT')
        assert result['success'] and result['correct']
        assert ongoing.try_word('bob', 1, 'DOG')['code'] == 'EntryAlreadyConfirmed'

        result = ongoing.challenge_word('bob', 1, 'CAT')
        assert result['outcome'] == 'ORIGINAL_CORRECT'
        assert result['state']['scores'] == {
            'alice': CORRECT_WORD_AWARD, 'bob': -CHALLENGE_PENALTY
        }
        assert result['state']['guesses'][0]['word'] == 'CAT'

    def test_wrong_try_succeeds_without_score(self, ongoing):
        result = ongoing.try_word('bob', 2, 'cow')
        assert result['success']
        assert result['correct'] is False
        assert result['state']['scores']['bob'] == 0

    def test_play_errors(self, ongoing):
        assert ongoing.try_word('alice', 5, 'CAT')['code'] == 'EntryNotFound'
        assert ongoing.challenge_word('alice', 1, 'CAT')['code'] == 'NotOpponentsEntry'
        ongoing.login('carol')
        assert ongoing.try_word('carol', 1, 'CAT')['code'] == 'NotInMatch'

    def test_completion_finishes_match(self, ongoing):
        ongoing.try_word('alice', 1, 'CAT')
        result = ongoing.try_word('bob', 2, 'CAR')
        assert result['state']['status'] == 'DONE'
        assert result['state']['winner'] is None
        assert ongoing.try_word('alice', 2, 'CAR')['code'] == 'MatchNotOngoing'

    def test_concurrent_tries_are_serialized(self, ongoing):
        barrier = threading.Barrier(2)
        results = {}

        def attempt(player):
            barrier.wait()
            results[player] = ongoing.try_word(player, 1, 'CAT')

        threads = [threading.Thread(target=attempt, args=(p,)) for p in ('alice', 'bob')]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        winners = [p for p, r in results.items() if r['success']]
        losers = [r for r in results.values() if not r['success']]
        assert len(winners) == 1
        assert losers[0]['code'] == 'EntryAlreadyConfirmed'
        state = ongoing.get_play_state('alice')['state']
        assert state['scores'][winners[0]] == CORRECT_WORD_AWARD
        assert state['guesses'][0]['player'] == winners[0]

    def test_concurrent_wrong_tries_never_merge(self, ongoing):
        barrier = threading.Barrier(2)

        def attempt(player, word):
            barrier.wait()
            ongoing.try_word(player, 1, word)

        threads = [
            threading.Thread(target=attempt, args=('alice', 'COT')),
            threading.Thread(target=attempt, args=('bob', 'COW')),
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join(5)

        guess = ongoing.get_play_state('alice')['state']['guesses'][0]
        assert (guess['player'], guess['word']) in {('alice', 'COT'), ('bob', 'COW')}
        assert ongoing.matches['M1'].version == 2


def test_queries(ongoing):
    assert ongoing.get_puzzle_names() == ['P1', 'Tiny']
    assert ongoing.get_puzzle_layout('Nope') is None
    assert ongoing.get_puzzle_layout('Tiny')[0]['length'] == 2
    assert ongoing.get_match_puzzle('alice')['match']['match_id'] == 'M1'
    assert ongoing.show_score('carol')['code'] == 'NotInMatch'
    assert ongoing.watch_snapshot() == {'matches': [], 'version': ongoing.watch_version}
