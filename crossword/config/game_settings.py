"""
Game Configuration Constants Module

Scoring rules for crossword matches. All point values are centralized here
so the balance between trying and challenging can be tuned in one place.
"""

from typing import Dict, Final

CORRECT_WORD_AWARD: Final[int] = 1
"""
Points a player earns when a try matches the answer.
Type: Final[int] - Immutable to prevent accidental modification
"""

CHALLENGE_AWARD: Final[int] = 2
"""Points a challenger earns for replacing a wrong word with the right one."""

CHALLENGE_PENALTY: Final[int] = 1
"""
Points lost by a challenger who challenges a correct word, and by a
player whose wrong word is successfully challenged.
"""


def validate_scoring_settings() -> bool:
    """
    Validates the scoring constants.

    Returns:
        bool: True if all checks pass

    Raises:
        ValueError: If any constant is out of range
    """
    if CORRECT_WORD_AWARD <= 0:
        raise ValueError("CORRECT_WORD_AWARD must be positive")
    if CHALLENGE_AWARD <= 0:
        raise ValueError("CHALLENGE_AWARD must be positive")
    if CHALLENGE_PENALTY < 0:
        raise ValueError("CHALLENGE_PENALTY cannot be negative")
    return True


def get_scoring_rules() -> Dict[str, int]:
    """Scoring rules in a form suitable for sending to clients."""
    return {
        'correct_word_award': CORRECT_WORD_AWARD,
        'challenge_award': CHALLENGE_AWARD,
        'challenge_penalty': CHALLENGE_PENALTY,
    }


if __name__ == "__main__":

    try:
        validate_scoring_settings()
        print(f" Scoring rules: {get_scoring_rules()}")
    except ValueError as config_error:
        print(f" Configuration validation failed: {config_error}")
        exit(1)
