"""Color and format alphabet for chat markup."""

from __future__ import annotations

from enum import Enum
from typing import Dict, Optional

SECTION_SIGN = "§"

_FORMAT_FIELDS: Dict[str, str] = {
    "k": "obfuscated",
    "l": "bold",
    "m": "strikethrough",
    "n": "underlined",
    "o": "italic",
}


class ChatColor(Enum):
    """One entry of the fixed code alphabet: a color, a format toggle or reset."""

    BLACK = "0"
    DARK_BLUE = "1"
    DARK_GREEN = "2"
    DARK_AQUA = "3"
    DARK_RED = "4"
    DARK_PURPLE = "5"
    GOLD = "6"
    GRAY = "7"
    DARK_GRAY = "8"
    BLUE = "9"
    GREEN = "a"
    AQUA = "b"
    RED = "c"
    LIGHT_PURPLE = "d"
    YELLOW = "e"
    WHITE = "f"
    MAGIC = "k"  # Obfuscated
    BOLD = "l"
    STRIKETHROUGH = "m"
    UNDERLINE = "n"
    ITALIC = "o"
    RESET = "r"

    @property
    def is_format(self) -> bool:
        return self.value in _FORMAT_FIELDS

    @property
    def is_color(self) -> bool:
        return not self.is_format and self is not ChatColor.RESET

    @property
    def format_field(self) -> Optional[str]:
        """Name of the StyleRun flag toggled by this code, if it is a format."""
        return _FORMAT_FIELDS.get(self.value)

    @classmethod
    def get_by_char(cls, code: str) -> Optional["ChatColor"]:
        if len(code) != 1:
            return None
        return _BY_CHAR.get(code.lower())


_BY_CHAR: Dict[str, ChatColor] = {member.value: member for member in ChatColor}


def translate_alternate_color_codes(alt_char: str, text: str) -> str:
    """
    Rewrite ``alt_char`` to the section sign wherever it precedes a valid code.

    Args:
        alt_char: The alternate trigger authors type, usually ``&``
        text: Text to translate

    Returns:
        The translated text; lone or invalid triggers are left untouched
    """
    if len(alt_char) != 1:
        raise ValueError(f"Alternate color char must be one character, got {alt_char!r}")
    chars = list(text)
    for i in range(len(chars) - 1):
        if chars[i] == alt_char and chars[i + 1].lower() in _BY_CHAR:
            chars[i] = SECTION_SIGN
            chars[i + 1] = chars[i + 1].lower()
    return "".join(chars)


def strip_color(text: str, color_char: str = SECTION_SIGN) -> str:
    """Remove every valid ``color_char`` + code pair from text."""
    out = []
    i = 0
    while i < len(text):
        if text[i] == color_char and i + 1 < len(text) and text[i + 1].lower() in _BY_CHAR:
            i += 2
            continue
        out.append(text[i])
        i += 1
    return "".join(out)
