from .common import (
    get_start_keyboard,
    get_language_keyboard,
    get_language_switch_keyboard,
)
from .survey import (
    get_question_keyboard,
    get_navigation_keyboard,
    get_follow_up_keyboard,
    get_sections_keyboard,
)

__all__ = [
    "get_start_keyboard",
    "get_language_keyboard",
    "get_language_switch_keyboard",
    "get_question_keyboard",
    "get_navigation_keyboard",
    "get_follow_up_keyboard",
    "get_sections_keyboard",
]
