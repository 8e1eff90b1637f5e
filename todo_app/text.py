"""String helpers for task titles."""

from dataclasses import dataclass
from typing import Optional

from todo_app.config import MAX_TITLE_LENGTH, TITLE_WARNING_THRESHOLD


def is_blank(text: Optional[str]) -> bool:
    """Return True for None, empty, or whitespace-only strings."""
    return not text or not text.strip()


def truncate(text: str, max_length: int, suffix: str = "...") -> str:
    """Shorten *text* so the result, suffix included, fits in *max_length*.

    When *max_length* is not larger than the suffix, the suffix itself is cut.
    """
    if max_length <= 0:
        return ""
    if len(text) <= max_length:
        return text
    if max_length <= len(suffix):
        return suffix[:max_length]
    return text[: max_length - len(suffix)] + suffix


@dataclass(frozen=True)
class CharacterLimit:
    character_count: int
    remaining_chars: int
    is_over_limit: bool
    is_near_limit: bool
    warning_message: Optional[str]


def character_limit(
    value: str,
    max_length: int = MAX_TITLE_LENGTH,
    warning_threshold: int = TITLE_WARNING_THRESHOLD,
) -> CharacterLimit:
    """Describe how close *value* is to the title length limit."""
    count = len(value)
    remaining = max_length - count
    over = count > max_length
    near = warning_threshold <= count <= max_length

    message = None
    if over:
        message = f"{abs(remaining)} characters over limit"
    elif near:
        message = f"{remaining} characters remaining"

    return CharacterLimit(
        character_count=count,
        remaining_chars=remaining,
        is_over_limit=over,
        is_near_limit=near,
        warning_message=message,
    )
