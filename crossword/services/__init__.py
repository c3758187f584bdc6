"""
Services Package

Contains all business logic and service classes.
"""

from .game_service import GameService, get_game_service, initialize_game_service
from .puzzle_loader import load_puzzles, parse_puzzle, get_puzzle_statistics

__all__ = [
    'GameService', 'get_game_service', 'initialize_game_service',
    'load_puzzles', 'parse_puzzle', 'get_puzzle_statistics'
]
