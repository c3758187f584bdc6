"""
Game Service

Process-wide registry of players, puzzles and matches, and the hub that wakes
long-poll connections when something they wait for changes.
"""

import threading
from typing import Callable, Dict, List, Mapping, Optional

from ..config.game_settings import get_scoring_rules
from ..exceptions import (
    AlreadyInMatch, AlreadyLoggedIn, GameError, InvalidMatchId, InvalidPlayerId,
    ListenerNotFound, MatchAlreadyExists, MatchNotFound, MatchNotOngoing,
    MatchNotWaiting, NotInMatch, NotLoggedIn, PuzzleNotFound
)
from ..models.listener import Listener, ListenerKind
from ..models.match import Match
from ..models.puzzle import Puzzle
from ..utils.game_logger import game_logger
from ..utils.helpers import is_valid_token


def _failure(error: GameError) -> Dict:
    return {'success': False, 'error': str(error), 'code': error.code}


class GameService:
    """
    Core game service for crossword matches.

    This class handles:
    - Player login and logout
    - Creating, joining and leaving matches
    - Delegating tries and challenges to the player's match
    - Single-shot watch, wait and play listeners

    Every public method runs under one re-entrant lock. Listener callbacks run
    under that lock too, so they must not block or call back into the service.
    Invalid commands never raise: they come back as
    {'success': False, 'error': ..., 'code': ...}.
    """

    def __init__(self, puzzles: Mapping[str, Puzzle]):
        self._lock = threading.RLock()
        self.puzzles: Mapping[str, Puzzle] = dict(puzzles)
        self.players: set = set()
        self.matches: Dict[str, Match] = {}
        self.player_to_match: Dict[str, str] = {}
        self.watch_version = 0
        self._watch_listeners: List[Listener] = []
        self._wait_listeners: Dict[str, Listener] = {}
        self._play_listeners: Dict[str, Listener] = {}

    # Helpers (callers hold the lock)

    def _require_logged_in(self, player_id: str) -> None:
        if player_id not in self.players:
            raise NotLoggedIn()

    def _require_not_in_match(self, player_id: str) -> None:
        if player_id in self.player_to_match:
            raise AlreadyInMatch()

    def _match_of(self, player_id: str) -> Match:
        match_id = self.player_to_match.get(player_id)
        if match_id is None or match_id not in self.matches:
            raise NotInMatch()
        return self.matches[match_id]

    def _leave_finished_match(self, player_id: str, match: Match) -> None:
        match.leave(player_id)
        self._drop_player_listeners(player_id)
        del self.player_to_match[player_id]
        if match.all_left():
            del self.matches[match.match_id]
            game_logger.log_game_event(match.match_id, 'match_removed')

    def _drop_player_listeners(self, player_id: str) -> None:
        # A finished match sends no more events, so pending waiters are released
        for registry in (self._wait_listeners, self._play_listeners):
            listener = registry.pop(player_id, None)
            if listener is not None:
                listener.cancel()

    # Player registry

    def login(self, player_id: str) -> Dict:
        """
        Log a player in.

        Args:
            player_id: Non-empty alphanumeric player name, case-sensitive

        Returns:
            Dict with success flag, the puzzle names, the available matches
            and the scoring rules
        """
        with self._lock:
            try:
                if not is_valid_token(player_id):
                    raise InvalidPlayerId()
                if player_id in self.players:
                    raise AlreadyLoggedIn()
            except GameError as e:
                return _failure(e)
            self.players.add(player_id)
            game_logger.log_game_event(None, 'player_logged_in', player_id)
            return {
                'success': True,
                'puzzles': self.get_puzzle_names(),
                'matches': self.get_available_matches(),
                'rules': get_scoring_rules()
            }

    def logout(self, player_id: str) -> Dict:
        """Log a player out. A player in an unfinished match must exit it first."""
        with self._lock:
            try:
                self._require_logged_in(player_id)
                if player_id in self.player_to_match:
                    match = self._match_of(player_id)
                    if not match.is_done():
                        raise AlreadyInMatch("Exit the current match before logging out")
                    self._leave_finished_match(player_id, match)
            except GameError as e:
                return _failure(e)
            self.players.discard(player_id)
            game_logger.log_game_event(None, 'player_logged_out', player_id)
            return {'success': True}

    def is_logged_in(self, player_id: str) -> bool:
        with self._lock:
            return player_id in self.players

    def get_match_id(self, player_id: str) -> Optional[str]:
        with self._lock:
            return self.player_to_match.get(player_id)

    # Match lifecycle

    def create_match(self, player_id: str, match_id: str, puzzle_name: str, description: str) -> Dict:
        """Create a match on a puzzle with the creator seated and waiting."""
        with self._lock:
            try:
                self._require_logged_in(player_id)
                self._require_not_in_match(player_id)
                if not is_valid_token(match_id):
                    raise InvalidMatchId()
                if match_id in self.matches:
                    raise MatchAlreadyExists()
                if puzzle_name not in self.puzzles:
                    raise PuzzleNotFound(f"No puzzle named '{puzzle_name}'")
            except GameError as e:
                return _failure(e)

            match = Match(match_id, description, self.puzzles[puzzle_name], player_id)
            self.matches[match_id] = match
            self.player_to_match[player_id] = match_id
            game_logger.log_game_event(match_id, 'match_created', player_id, puzzle=puzzle_name)
            self._fire_watch_listeners()
            return {'success': True, 'match': match.summary()}

    def join_match(self, player_id: str, match_id: str) -> Dict:
        """Join a waiting match, which starts it."""
        with self._lock:
            try:
                self._require_logged_in(player_id)
                self._require_not_in_match(player_id)
                match = self.matches.get(match_id)
                if match is None:
                    raise MatchNotFound()
                match.join(player_id)
            except GameError as e:
                return _failure(e)

            self.player_to_match[player_id] = match_id
            game_logger.log_game_event(match_id, 'match_started', player_id, players=match.players)
            self._fire_watch_listeners()
            for player in match.players:
                self._fire_wait_listener(player)
            return {'success': True, 'match': match.summary(), 'puzzle': match.puzzle.layout()}

    def exit_wait(self, player_id: str) -> Dict:
        """Abandon a match that is still waiting for an opponent."""
        with self._lock:
            try:
                match = self._match_of(player_id)
                if not match.is_waiting():
                    raise MatchNotWaiting()
            except GameError as e:
                return _failure(e)

            del self.matches[match.match_id]
            del self.player_to_match[player_id]
            game_logger.log_game_event(match.match_id, 'match_abandoned', player_id)
            self._fire_watch_listeners()
            self._fire_wait_listener(player_id)
            return {'success': True}

    def exit_play(self, player_id: str) -> Dict:
        """
        Leave a match that has started.

        Leaving an ongoing match forfeits it. Leaving a finished match
        acknowledges the result. The match is dropped once both players
        have left.

        Returns:
            Dict with success flag and the final score
        """
        with self._lock:
            try:
                match = self._match_of(player_id)
                if match.is_waiting():
                    raise MatchNotOngoing("Match has not started; use exit_wait")
                if match.is_ongoing():
                    match.forfeit(player_id)
                    game_logger.log_game_event(
                        match.match_id, 'match_forfeited', player_id, winner=match.winner
                    )
                    for player in match.players:
                        self._fire_play_listener(player)
                score = match.show_score()
                self._leave_finished_match(player_id, match)
            except GameError as e:
                return _failure(e)
            return {'success': True, 'score': score}

    # Play

    def try_word(self, player_id: str, entry_id: int, word: str) -> Dict:
        """
        Guess a word for an entry of the player's match.

        Returns:
            Dict with success flag and whether the word was correct
        """
        with self._lock:
            try:
                match = self._match_of(player_id)
                correct = match.try_word(player_id, entry_id, word)
            except GameError as e:
                return _failure(e)

            game_logger.log_game_event(
                match.match_id, 'word_tried', player_id, entry_id=entry_id, correct=correct
            )
            self._after_play_event(match)
            return {'success': True, 'correct': correct, 'state': match.state_for_response()}

    def challenge_word(self, player_id: str, entry_id: int, word: str) -> Dict:
        """Challenge the opponent's word for an entry."""
        with self._lock:
            try:
                match = self._match_of(player_id)
                outcome = match.challenge_word(player_id, entry_id, word)
            except GameError as e:
                return _failure(e)

            game_logger.log_game_event(
                match.match_id, 'word_challenged', player_id, entry_id=entry_id, outcome=outcome.value
            )
            self._after_play_event(match)
            return {'success': True, 'outcome': outcome.value, 'state': match.state_for_response()}

    def _after_play_event(self, match: Match) -> None:
        if match.is_done():
            game_logger.log_game_event(
                match.match_id, 'match_finished', winner=match.winner, scores=match.scores
            )
        for player in match.players:
            self._fire_play_listener(player)

    # Queries

    def get_puzzle_names(self) -> List[str]:
        with self._lock:
            return sorted(self.puzzles)

    def get_puzzle_layout(self, puzzle_name: str) -> Optional[List[Dict]]:
        """Entries of a puzzle without answers, or None if there is no such puzzle."""
        with self._lock:
            puzzle = self.puzzles.get(puzzle_name)
            return puzzle.layout() if puzzle is not None else None

    def get_available_matches(self) -> List[Dict]:
        """Matches that are waiting for a second player."""
        with self._lock:
            return [
                {'match_id': m.match_id, 'description': m.description, 'puzzle': m.puzzle.name}
                for m in self.matches.values() if m.is_waiting()
            ]

    def watch_snapshot(self) -> Dict:
        """Waiting matches together with the watch_version they belong to."""
        with self._lock:
            return {'matches': self.get_available_matches(), 'version': self.watch_version}

    def get_match_puzzle(self, player_id: str) -> Dict:
        with self._lock:
            try:
                match = self._match_of(player_id)
            except GameError as e:
                return _failure(e)
            return {'success': True, 'match': match.summary(), 'puzzle': match.puzzle.layout()}

    def get_play_state(self, player_id: str) -> Dict:
        """Current guesses and scores of the player's match."""
        with self._lock:
            try:
                match = self._match_of(player_id)
            except GameError as e:
                return _failure(e)
            return {'success': True, 'state': match.state_for_response()}

    def show_score(self, player_id: str) -> Dict:
        with self._lock:
            try:
                match = self._match_of(player_id)
            except GameError as e:
                return _failure(e)
            return {'success': True, 'score': match.show_score()}

    def get_listener_stats(self) -> Dict[str, int]:
        with self._lock:
            return {
                'watch': len(self._watch_listeners),
                'wait': len(self._wait_listeners),
                'play': len(self._play_listeners)
            }

    # Listener registration

    def add_watch_listener(self, callback: Optional[Callable[[], None]] = None,
                           since: Optional[int] = None) -> Dict:
        """
        Wait for the next change to the list of waiting matches.

        Args:
            callback: Called under the service lock when the listener fires
            since: watch_version the caller last saw; if the list has changed
                since then the listener fires immediately

        Returns:
            Dict with success flag and the Listener to wait on
        """
        with self._lock:
            listener = Listener(ListenerKind.WATCH, callback=callback)
            if since is not None and since != self.watch_version:
                listener.fire()
            else:
                self._watch_listeners.append(listener)
            return {'success': True, 'listener': listener, 'version': self.watch_version}

    def add_wait_listener(self, player_id: str, callback: Optional[Callable[[], None]] = None) -> Dict:
        """Wait for the player's match to start. Fires at once if it already has."""
        with self._lock:
            try:
                match = self._match_of(player_id)
            except GameError as e:
                return _failure(e)
            listener = Listener(ListenerKind.WAIT, player_id, callback)
            if match.is_waiting():
                self._replace_listener(self._wait_listeners, player_id, listener)
            else:
                listener.fire()
            return {'success': True, 'listener': listener}

    def add_play_listener(self, player_id: str, callback: Optional[Callable[[], None]] = None,
                          since: Optional[int] = None) -> Dict:
        """
        Wait for the next change to the player's match.

        Args:
            player_id: Player in an ongoing or finished match
            callback: Called under the service lock when the listener fires
            since: Match version the caller last saw; if the match has moved
                on since then the listener fires immediately
        """
        with self._lock:
            try:
                match = self._match_of(player_id)
                if match.is_waiting():
                    raise MatchNotOngoing()
            except GameError as e:
                return _failure(e)
            listener = Listener(ListenerKind.PLAY, player_id, callback)
            if since is not None and since != match.version:
                listener.fire()
            else:
                self._replace_listener(self._play_listeners, player_id, listener)
            return {'success': True, 'listener': listener, 'version': match.version}

    @staticmethod
    def _replace_listener(registry: Dict[str, Listener], player_id: str, listener: Listener) -> None:
        previous = registry.get(player_id)
        if previous is not None:
            previous.cancel()
        registry[player_id] = listener

    # Listener removal (connection closed)

    def remove_watch_listener(self, listener: Listener) -> bool:
        """
        Drop a watch registration.

        Returns:
            bool: True if it was pending, False if it had already fired

        Raises:
            ListenerNotFound: If the listener was never registered
        """
        with self._lock:
            if listener in self._watch_listeners:
                self._watch_listeners.remove(listener)
                listener.cancel()
                return True
            if listener.done:
                return False
            raise ListenerNotFound("Watch listener is not registered")

    def remove_wait_listener(self, player_id: str, listener: Optional[Listener] = None) -> bool:
        with self._lock:
            return self._remove_keyed(self._wait_listeners, player_id, listener, 'Wait')

    def remove_play_listener(self, player_id: str, listener: Optional[Listener] = None) -> bool:
        with self._lock:
            return self._remove_keyed(self._play_listeners, player_id, listener, 'Play')

    @staticmethod
    def _remove_keyed(registry: Dict[str, Listener], player_id: str,
                      listener: Optional[Listener], label: str) -> bool:
        current = registry.get(player_id)
        if current is not None and (listener is None or listener is current):
            del registry[player_id]
            current.cancel()
            return True
        if listener is not None and listener.done:
            return False
        raise ListenerNotFound(f"{label} listener is not registered for player {player_id}")

    # Listener firing (callers hold the lock)

    def _fire_watch_listeners(self) -> None:
        self.watch_version += 1
        listeners, self._watch_listeners = self._watch_listeners, []
        for listener in listeners:
            listener.fire()

    def _fire_wait_listener(self, player_id: str) -> None:
        listener = self._wait_listeners.pop(player_id, None)
        if listener is not None:
            listener.fire()

    def _fire_play_listener(self, player_id: str) -> None:
        listener = self._play_listeners.pop(player_id, None)
        if listener is not None:
            listener.fire()


# Global service instance
_game_service = None


def get_game_service() -> Optional[GameService]:
    """Get the global game service instance."""
    return _game_service


def initialize_game_service(puzzles: Mapping[str, Puzzle]) -> GameService:
    """Initialize the global game service instance."""
    global _game_service
    _game_service = GameService(puzzles)
    return _game_service
