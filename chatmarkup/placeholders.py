"""
Placeholder substitution that records where replacement text landed.

Replacement text is reported as protected ranges so the scanner never reads
it as markup.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Sequence, Tuple

from .serializers import SerializerRegistry


class ProtectedRange(NamedTuple):
    """Half-open ``[start, end)`` interval over the resolved string."""

    start: int
    end: int


@dataclass(frozen=True)
class ResolvedText:
    text: str
    protected: Tuple[ProtectedRange, ...] = ()


def index_replacements(values: Sequence[Any], offset: int = 1) -> Dict[str, Any]:
    """Key an ordered sequence of values as ``{offset}``, ``{offset+1}``, ..."""
    return {"{%d}" % (offset + i): value for i, value in enumerate(values)}


def _find_occurrences(raw: str, keys: Sequence[str]) -> List[Tuple[int, str]]:
    found: List[Tuple[int, str]] = []
    for key in keys:
        if not key:
            continue
        start = raw.find(key)
        while start != -1:
            found.append((start, key))
            start = raw.find(key, start + len(key))
    # Leftmost first; the longer key wins a tie.
    found.sort(key=lambda item: (item[0], -len(item[1])))
    return found


def resolve_placeholders(
    raw: str,
    replacements: Optional[Mapping[str, Any]],
    registry: Optional[SerializerRegistry] = None,
) -> ResolvedText:
    """
    Replace every placeholder key in ``raw`` with its value's text.

    Only the original string is searched, so text inserted by one
    replacement is never matched against another key. Occurrences that
    overlap an earlier one are skipped.

    Args:
        raw: Markup containing placeholders
        replacements: Placeholder key -> value, ``None`` for no substitution
        registry: Serializers for non-string values

    Returns:
        The resolved text and the protected ranges of all replacement text
    """
    if not replacements:
        return ResolvedText(raw)
    registry = registry or SerializerRegistry()

    pieces: List[str] = []
    protected: List[ProtectedRange] = []
    cursor = 0
    shift = 0
    rendered: Dict[str, str] = {}
    for start, key in _find_occurrences(raw, list(replacements)):
        if start < cursor:
            continue
        if key not in rendered:
            rendered[key] = registry.to_text(replacements[key])
        text = rendered[key]
        pieces.append(raw[cursor:start])
        new_start = start + shift
        if text:
            protected.append(ProtectedRange(new_start, new_start + len(text)))
        pieces.append(text)
        shift += len(text) - len(key)
        cursor = start + len(key)
    pieces.append(raw[cursor:])
    return ResolvedText("".join(pieces), tuple(protected))
