"""Parser options and their process-wide defaults."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

logger = logging.getLogger(__name__)

# Characters with a fixed meaning in the grammar; none may be the color trigger.
RESERVED_CHARS = frozenset('\\[]()"')


def _read_int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not an integer", name, raw)
        return default
    if value < 0:
        logger.warning("Ignoring %s=%r: must not be negative", name, raw)
        return default
    return value


def _read_char_env(name: str, default: str) -> str:
    raw = os.getenv(name, "").strip()
    if not raw:
        return default
    if len(raw) != 1 or raw in RESERVED_CHARS:
        logger.warning("Ignoring %s=%r: expected one non-reserved character", name, raw)
        return default
    return raw


DEFAULT_COLOR_CHAR = _read_char_env("CHATMARKUP_COLOR_CHAR", "&")
DEFAULT_PLACEHOLDER_OFFSET = _read_int_env("CHATMARKUP_PLACEHOLDER_OFFSET", 1)


@dataclass(frozen=True)
class ParserOptions:
    """
    Options shared by every ``parse`` call of one parser.

    Attributes:
        color_char: Trigger character introducing a color/format code
        placeholder_offset: First index used when replacements are given as a sequence
        color_only: Only interpret escapes and color codes, never event groups
    """

    color_char: str = DEFAULT_COLOR_CHAR
    placeholder_offset: int = DEFAULT_PLACEHOLDER_OFFSET
    color_only: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.color_char, str) or len(self.color_char) != 1:
            raise ValueError(f"color_char must be a single character, got {self.color_char!r}")
        if self.color_char in RESERVED_CHARS:
            raise ValueError(f"color_char {self.color_char!r} is reserved by the markup grammar")
        if isinstance(self.placeholder_offset, bool) or not isinstance(self.placeholder_offset, int):
            raise TypeError("placeholder_offset must be an int")
        if self.placeholder_offset < 0:
            raise ValueError(f"placeholder_offset must be >= 0, got {self.placeholder_offset}")
