"""
ChatMarkup - colored, clickable chat text from a one-line markup
"""

from .components import ClickAction, ClickEvent, HoverAction, HoverEvent, StyleRun, to_plain_text
from .config import ParserOptions
from .formatting import ChatColor, strip_color, translate_alternate_color_codes
from .parser import Parser
from .placeholders import ProtectedRange, ResolvedText, index_replacements, resolve_placeholders
from .serializers import JsonDumpsSerializer, JsonSerializer, SerializerRegistry

__version__ = "0.1.0"
__all__ = [
    "parse",
    "Parser",
    "ParserOptions",
    "StyleRun",
    "ClickAction",
    "ClickEvent",
    "HoverAction",
    "HoverEvent",
    "ChatColor",
    "JsonSerializer",
    "JsonDumpsSerializer",
    "SerializerRegistry",
    "ProtectedRange",
    "ResolvedText",
    "index_replacements",
    "resolve_placeholders",
    "strip_color",
    "translate_alternate_color_codes",
    "to_plain_text",
]

# Global instance
_default_parser = Parser()


def parse(raw: str, replacements=None):
    """
    Parse markup with the default parser.

    Args:
        raw: The markup (e.g., '[Click](!"/say hi")')
        replacements: Placeholder mapping or ordered values for {1}, {2}, ...

    Returns:
        List of StyleRun
    """
    return _default_parser.parse(raw, replacements)
