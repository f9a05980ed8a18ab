"""
Model enums.
"""
from enum import Enum


class PracticeDirection(str, Enum):
    """Which face of a flashcard is shown first during practice."""
    FRONT_TO_BACK = "front_to_back"
    BACK_TO_FRONT = "back_to_front"
