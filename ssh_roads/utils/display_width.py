"""Terminal display width helpers for aligned columns."""

import unicodedata

_ZERO_WIDTH_CATEGORIES = {"Mn", "Me", "Cf", "Cc"}


def char_width(char: str) -> int:
    """Number of terminal columns a single character occupies."""
    if unicodedata.category(char) in _ZERO_WIDTH_CATEGORIES:
        return 0
    if unicodedata.east_asian_width(char) in ("W", "F"):
        return 2
    return 1


def display_width(text: str) -> int:
    """Display width of a string, counting wide and full-width characters as two columns."""
    return sum(char_width(char) for char in text)


def pad_str(text: str, width: int) -> str:
    """Right-pad text with spaces to the given display width.

    Text that is already at least `width` columns wide is returned unchanged.
    """
    current = display_width(text)
    if current >= width:
        return text
    return text + " " * (width - current)
