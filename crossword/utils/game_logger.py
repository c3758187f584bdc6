"""
Game Logger Module for the Crossword Server

Structured JSON logging for player requests, the replies sent back, and
match lifecycle events. Every record is one JSON object per line in a daily
log file; warnings and errors are echoed to the console.
"""

import logging
import json
from datetime import datetime
from typing import Dict, Any, Optional
from pathlib import Path

from ..config.app_config import Config

LOGGER_NAME = 'crossword_game'


class GameLogger:
    """
    Centralized logging system for the crossword server.

    Features:
    - Player request tracking with IP and player id
    - Reply logging, with large board states summarized
    - Match lifecycle event logging
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, level.upper(), logging.INFO)
        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Attach a daily file handler and a console handler for warnings."""
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(self.level)

        # Re-creating the logger must not double every line
        if logger.handlers:
            logger.handlers.clear()

        log_file = self.log_dir / f"crossword_{datetime.now().strftime('%Y-%m-%d')}.log"

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(self.level)
        file_handler.setFormatter(logging.Formatter(
            '%(asctime)s | %(levelname)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        ))

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.WARNING)
        console_handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))

        logger.addHandler(file_handler)
        logger.addHandler(console_handler)
        return logger

    @staticmethod
    def _identity(request) -> Dict[str, Optional[str]]:
        from .helpers import get_user_identity
        return get_user_identity(request)

    def _write(self, level: int, event_type: str, action: str,
               user_info: Dict[str, Optional[str]], details: Dict[str, Any]) -> None:
        record = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'user': user_info,
            'details': details
        }
        self.logger.log(level, json.dumps(record, ensure_ascii=False, default=str))

    def log_user_action(self, request, action: str, match_id: Optional[str] = None, **kwargs):
        """
        Log an incoming player command.

        Args:
            request: Flask request object
            action: Command name (e.g., 'login', 'try_word', 'watch')
            match_id: Match the command targets, if known
            **kwargs: Command arguments worth keeping
        """
        details = {
            'match_id': match_id,
            'endpoint': request.endpoint,
            'method': request.method,
            'url': request.url,
        }
        details.update(kwargs)
        self._write(logging.INFO, 'USER_ACTION', action, self._identity(request), details)

    def log_server_response(self, request, action: str, success: bool,
                            response_data: Dict[str, Any], match_id: Optional[str] = None, **kwargs):
        """Log the reply to a command. Failed commands are logged as warnings."""
        details = {
            'match_id': match_id,
            'success': success,
            'response_data': self._sanitize_response_data(response_data),
        }
        details.update(kwargs)
        if success:
            self._write(logging.INFO, 'SERVER_RESPONSE_SUCCESS', action, self._identity(request), details)
        else:
            self._write(logging.WARNING, 'SERVER_RESPONSE_ERROR', action, self._identity(request), details)

    def log_game_event(self, match_id: Optional[str], event: str, player: Optional[str] = None, **kwargs):
        """
        Log a state change made by the game service.

        Args:
            match_id: Match the event belongs to, None for player registry events
            event: Event name (e.g., 'match_created', 'word_tried')
            player: Player who caused the event
            **kwargs: Event details
        """
        details = {'match_id': match_id}
        details.update(kwargs)
        self._write(logging.INFO, 'GAME_EVENT', event, {'user_ip': 'system', 'player_id': player}, details)

    def log_error(self, request, error: Exception, action: str, match_id: Optional[str] = None):
        """Log an unexpected exception raised while handling a command."""
        details = {
            'match_id': match_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self._write(logging.ERROR, 'ERROR', action, self._identity(request), details)

    def _sanitize_response_data(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """Summarize board states and puzzle layouts instead of logging them whole."""
        if not isinstance(data, dict):
            return {'data_type': type(data).__name__}

        sanitized = data.copy()
        state = sanitized.get('state')
        if isinstance(state, dict):
            sanitized['state'] = {
                'match_id': state.get('match_id'),
                'status': state.get('status'),
                'scores': state.get('scores'),
                'version': state.get('version'),
                'guesses_count': len(state.get('guesses', []))
            }
        if isinstance(sanitized.get('puzzle'), list):
            sanitized['puzzle'] = {'entries': len(sanitized['puzzle'])}
        return sanitized


# Global logger instance
game_logger = GameLogger(Config.LOG_DIR, Config.LOG_LEVEL)
