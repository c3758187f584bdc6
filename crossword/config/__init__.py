"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask application configuration (environment-based)
- game_settings.py: Scoring rules (business logic)
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    CORRECT_WORD_AWARD, CHALLENGE_AWARD, CHALLENGE_PENALTY,
    validate_scoring_settings, get_scoring_rules
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'CORRECT_WORD_AWARD', 'CHALLENGE_AWARD', 'CHALLENGE_PENALTY',
    'validate_scoring_settings', 'get_scoring_rules'
]
