"""
Markup scanner for chat markup.

Turns a placeholder-resolved string into a list of StyleRuns in a single
left-to-right pass. The scanner never fails: malformed markup degrades to
literal text, and unknown color codes are dropped.

Grammar:
    \\x                         literal x
    &c                         color, format or reset code c
    [text](!"cmd" "hover")     event group; click trigger then hover clause
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from .components import ClickAction, ClickEvent, HoverAction, HoverEvent, StyleRun
from .config import ParserOptions
from .formatting import ChatColor
from .placeholders import ProtectedRange, ResolvedText, index_replacements, resolve_placeholders
from .serializers import JsonSerializer, SerializerRegistry

logger = logging.getLogger(__name__)

ESCAPE = "\\"
QUOTE = '"'

Trigger = Union[ClickAction, HoverAction]
Replacements = Union[Mapping[str, Any], Sequence[Any], None]


class _Mode(Enum):
    TEXT = "text"  # Outside any event group
    GROUP_TEXT = "group_text"  # Between [ and ]
    GROUP_GAP = "group_gap"  # Between ] and (
    GROUP_BODY = "group_body"  # Between ( and ), outside quotes
    GROUP_QUOTE = "group_quote"  # Inside a quoted payload


@dataclass
class _RunBuilder:
    text: str = ""
    color: Optional[ChatColor] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underlined: Optional[bool] = None
    strikethrough: Optional[bool] = None
    obfuscated: Optional[bool] = None
    click: Optional[ClickEvent] = None
    hover: Optional[HoverEvent] = None

    def carry(self) -> "_RunBuilder":
        """Empty run with this run's color and formats."""
        return _RunBuilder(
            color=self.color,
            bold=self.bold,
            italic=self.italic,
            underlined=self.underlined,
            strikethrough=self.strikethrough,
            obfuscated=self.obfuscated,
        )

    def build(self) -> StyleRun:
        return StyleRun(
            text=self.text,
            color=self.color,
            bold=self.bold,
            italic=self.italic,
            underlined=self.underlined,
            strikethrough=self.strikethrough,
            obfuscated=self.obfuscated,
            click=self.click,
            hover=self.hover,
        )


@dataclass
class _Payload:
    """Quoted payload text; protected spans stay literal in the hover re-parse."""

    chars: List[str] = field(default_factory=list)
    protected: List[ProtectedRange] = field(default_factory=list)

    def append(self, text: str, protected: bool = False) -> None:
        start = len(self.chars)
        self.chars.extend(text)
        if not protected or not text:
            return
        if self.protected and self.protected[-1].end == start:
            self.protected[-1] = ProtectedRange(self.protected[-1].start, len(self.chars))
        else:
            self.protected.append(ProtectedRange(start, len(self.chars)))

    def resolved(self) -> ResolvedText:
        return ResolvedText("".join(self.chars), tuple(self.protected))


@dataclass
class _GroupTables:
    """
    Group lookahead answers for every position, built right to left in one pass.

    ``close_at[p]`` is the first structural ``]`` reached by reading display
    text from ``p``, or ``len(text)`` if there is none. ``body_closes[p]`` is
    set when a group body read from ``p`` reaches an unquoted ``)``.
    """

    close_at: List[int]
    body_closes: bytearray

    @classmethod
    def build(cls, text: str, mask: bytearray, color_char: str) -> "_GroupTables":
        n = len(text)
        close_at = [n] * (n + 2)
        closes_outside = bytearray(n + 2)
        closes_inside = bytearray(n + 2)
        for p in range(n - 1, -1, -1):
            char = "" if mask[p] else text[p]
            if char == ESCAPE:
                close_at[p] = close_at[p + 2]
                closes_outside[p] = closes_outside[p + 2]
                closes_inside[p] = closes_inside[p + 2]
                continue

            if char == "]":
                close_at[p] = p
            elif char == color_char:
                close_at[p] = close_at[p + 1] if p + 1 < n and mask[p + 1] else close_at[p + 2]
            else:
                close_at[p] = close_at[p + 1]

            if char == QUOTE:
                closes_outside[p] = closes_inside[p + 1]
                closes_inside[p] = closes_outside[p + 1]
            else:
                closes_outside[p] = 1 if char == ")" else closes_outside[p + 1]
                closes_inside[p] = closes_inside[p + 1]
        return cls(close_at=close_at, body_closes=closes_outside)


@dataclass
class _ScanContext:
    """Per-call scanner state. Never shared between calls."""

    text: str
    protected_ends: Dict[int, int]
    protected_mask: bytearray
    runs: List[StyleRun] = field(default_factory=list)
    current: _RunBuilder = field(default_factory=_RunBuilder)
    pending: List[str] = field(default_factory=list)
    mode: _Mode = _Mode.TEXT
    escaped: bool = False
    in_color_code: bool = False
    trigger: Optional[Trigger] = None
    payload: _Payload = field(default_factory=_Payload)
    group_start: int = 0
    click: Optional[ClickEvent] = None
    hover: Optional[HoverEvent] = None
    group_tables: Optional[_GroupTables] = None

    @classmethod
    def for_text(cls, resolved: ResolvedText) -> "_ScanContext":
        mask = bytearray(len(resolved.text))
        ends: Dict[int, int] = {}
        for start, end in resolved.protected:
            if end <= start:
                continue
            ends[start] = end
            mask[start:end] = b"\x01" * (end - start)
        return cls(text=resolved.text, protected_ends=ends, protected_mask=mask)


class _Scanner:
    """Stateless transition logic; all mutable state lives in _ScanContext."""

    def __init__(self, options: ParserOptions) -> None:
        self._options = options
        self._color_char = options.color_char
        self._hover_scanner = self if options.color_only else _Scanner(replace(options, color_only=True))

    def scan(self, resolved: ResolvedText) -> List[StyleRun]:
        ctx = _ScanContext.for_text(resolved)
        text = ctx.text
        i = 0
        while i < len(text):
            end = ctx.protected_ends.get(i)
            if end is not None:
                self._take_protected(ctx, text[i:end])
                i = end
                continue
            self._step(ctx, text[i], i)
            i += 1
        self._finish(ctx)
        return ctx.runs

    # Run boundaries

    def _flush_pending(self, ctx: _ScanContext) -> None:
        if ctx.pending:
            ctx.current.text += "".join(ctx.pending)
            ctx.pending.clear()

    def _advance(self, ctx: _ScanContext, reset: bool) -> None:
        self._flush_pending(ctx)
        if ctx.current.text:
            ctx.runs.append(ctx.current.build())
        ctx.current = _RunBuilder() if reset else ctx.current.carry()

    def _finish(self, ctx: _ScanContext) -> None:
        # Groups only open when the lookahead saw their closing ), so input always ends in TEXT.
        self._advance(ctx, reset=True)

    # Literal text

    def _take_protected(self, ctx: _ScanContext, chunk: str) -> None:
        if ctx.in_color_code:
            logger.debug("Dropping color trigger followed by replacement text")
        if ctx.escaped and self._keeps_escapes(ctx):
            ctx.payload.append(ESCAPE)
        ctx.escaped = False
        ctx.in_color_code = False
        self._take_literal(ctx, chunk)

    def _take_escaped(self, ctx: _ScanContext, char: str) -> None:
        # Literal payloads only unescape quotes; paths and URLs keep their backslashes.
        if char != QUOTE and self._keeps_escapes(ctx):
            ctx.payload.append(ESCAPE)
        self._take_literal(ctx, char)

    def _take_literal(self, ctx: _ScanContext, chunk: str) -> None:
        if ctx.mode is _Mode.GROUP_QUOTE:
            ctx.payload.append(chunk, protected=True)
        elif ctx.mode is _Mode.GROUP_BODY:
            logger.debug("Discarding literal %r between event group parentheses", chunk)
        else:
            ctx.pending.extend(chunk)

    @staticmethod
    def _keeps_escapes(ctx: _ScanContext) -> bool:
        """True inside a payload used verbatim (clicks and non-text hovers)."""
        return ctx.mode is _Mode.GROUP_QUOTE and ctx.trigger is not HoverAction.SHOW_TEXT

    # Transitions

    def _step(self, ctx: _ScanContext, char: str, index: int) -> None:
        if ctx.escaped:
            ctx.escaped = False
            self._take_escaped(ctx, char)
            return
        if ctx.in_color_code:
            ctx.in_color_code = False
            self._apply_code(ctx, char)
            return

        mode = ctx.mode
        if mode is _Mode.TEXT:
            self._step_text(ctx, char, index)
        elif mode is _Mode.GROUP_TEXT:
            self._step_group_text(ctx, char)
        elif mode is _Mode.GROUP_GAP:
            self._step_group_gap(ctx, char)
        elif mode is _Mode.GROUP_BODY:
            self._step_group_body(ctx, char)
        else:
            self._step_group_quote(ctx, char)

    def _step_text(self, ctx: _ScanContext, char: str, index: int) -> None:
        if char == ESCAPE:
            ctx.escaped = True
        elif char == self._color_char:
            ctx.in_color_code = True
        elif char == "[" and not self._options.color_only and self._group_ahead(ctx, index):
            self._advance(ctx, reset=False)
            ctx.group_start = len(ctx.runs)
            ctx.mode = _Mode.GROUP_TEXT
        else:
            ctx.pending.append(char)

    def _step_group_text(self, ctx: _ScanContext, char: str) -> None:
        if char == ESCAPE:
            ctx.escaped = True
        elif char == self._color_char:
            ctx.in_color_code = True
        elif char == "]":
            ctx.mode = _Mode.GROUP_GAP
        else:
            ctx.pending.append(char)

    def _step_group_gap(self, ctx: _ScanContext, char: str) -> None:
        # The lookahead checked that ( directly follows the ]. The display
        # text is set now and emitted when the group closes.
        self._flush_pending(ctx)
        ctx.trigger = None
        ctx.click = None
        ctx.hover = None
        ctx.mode = _Mode.GROUP_BODY

    def _step_group_body(self, ctx: _ScanContext, char: str) -> None:
        if char == ESCAPE:
            ctx.escaped = True
        elif char == QUOTE:
            if ctx.trigger is None:
                ctx.trigger = HoverAction.SHOW_TEXT
            ctx.payload = _Payload()
            ctx.mode = _Mode.GROUP_QUOTE
        elif char == ")":
            self._close_group(ctx)
        else:
            trigger = ClickAction.from_trigger(char) or HoverAction.from_trigger(char)
            if trigger is None:
                if not char.isspace():
                    logger.debug("Discarding %r between event group parentheses", char)
            elif ctx.trigger is None:
                ctx.trigger = trigger
            else:
                logger.debug("Ignoring trigger %r: %s already selected", char, ctx.trigger.value)

    def _step_group_quote(self, ctx: _ScanContext, char: str) -> None:
        if char == ESCAPE:
            ctx.escaped = True
        elif char == QUOTE:
            self._close_quote(ctx)
        else:
            ctx.payload.append(char)

    # Codes and groups

    def _apply_code(self, ctx: _ScanContext, char: str) -> None:
        code = ChatColor.get_by_char(char)
        if code is None:
            logger.debug("Dropping unknown color code %r", self._color_char + char)
            return
        format_field = code.format_field
        if format_field is not None:
            if ctx.pending:
                self._advance(ctx, reset=False)
            setattr(ctx.current, format_field, True)
            return
        self._advance(ctx, reset=True)
        if code.is_color:
            ctx.current.color = code

    def _close_quote(self, ctx: _ScanContext) -> None:
        trigger = ctx.trigger or HoverAction.SHOW_TEXT
        payload = ctx.payload.resolved()
        value = payload.text
        if isinstance(trigger, ClickAction):
            ctx.click = ClickEvent(trigger, value)
        elif not value:
            logger.debug("Empty %s payload, no hover attached", trigger.value)
        elif trigger is HoverAction.SHOW_TEXT:
            ctx.hover = HoverEvent(trigger, tuple(self._hover_scanner.scan(payload)))
        else:
            ctx.hover = HoverEvent(trigger, (StyleRun(value),))
        ctx.trigger = None
        ctx.payload = _Payload()
        ctx.mode = _Mode.GROUP_BODY

    def _close_group(self, ctx: _ScanContext) -> None:
        if ctx.click is not None or ctx.hover is not None:
            for i in range(ctx.group_start, len(ctx.runs)):
                ctx.runs[i] = replace(ctx.runs[i], click=ctx.click, hover=ctx.hover)
            ctx.current.click = ctx.click
            ctx.current.hover = ctx.hover
        self._advance(ctx, reset=True)
        ctx.trigger = None
        ctx.click = None
        ctx.hover = None
        ctx.mode = _Mode.TEXT

    def _group_ahead(self, ctx: _ScanContext, index: int) -> bool:
        """
        Check that the ``[`` at ``index`` opens a complete event group.

        Mirrors the transitions above: escapes and color codes consume the
        following character, protected text is never structural, display
        text must be non-empty, ``](`` must be adjacent and the body must
        reach an unquoted ``)``. The tables are built on the first ``[`` so
        each check is constant time.
        """
        tables = ctx.group_tables
        if tables is None:
            tables = _GroupTables.build(ctx.text, ctx.protected_mask, self._color_char)
            ctx.group_tables = tables
        n = len(ctx.text)
        close = tables.close_at[index + 1]
        if close >= n or close == index + 1:
            return False
        opener = close + 1
        if opener >= n or ctx.protected_mask[opener] or ctx.text[opener] != "(":
            return False
        return bool(tables.body_closes[opener + 1])


class Parser:
    """
    Chat markup parser.

    Holds only read-only state (serializer registry and options), so one
    instance may serve concurrent ``parse`` calls.

    Example:
        >>> parser = Parser()
        >>> [run.text for run in parser.parse("&aHello {1}!", ["world"])]
        ['Hello world!']
    """

    def __init__(self, *serializers: JsonSerializer, options: Optional[ParserOptions] = None) -> None:
        self._registry = SerializerRegistry(serializers)
        self._options = options if options is not None else ParserOptions()
        if not isinstance(self._options, ParserOptions):
            raise TypeError("options must be a ParserOptions instance")
        self._scanner = _Scanner(self._options)

    @property
    def options(self) -> ParserOptions:
        return self._options

    @property
    def registry(self) -> SerializerRegistry:
        return self._registry

    def parse(self, raw: str, replacements: Replacements = None) -> List[StyleRun]:
        """
        Parse markup into styled runs.

        Args:
            raw: The markup string
            replacements: Placeholder key -> value mapping, or an ordered
                sequence keyed ``{offset}``, ``{offset+1}``, ...

        Returns:
            The runs in display order; empty for empty input
        """
        if not isinstance(raw, str):
            raise TypeError(f"raw markup must be str, got {type(raw).__name__}")
        resolved = resolve_placeholders(raw, self._replacement_map(replacements), self._registry)
        return self._scanner.scan(resolved)

    def _replacement_map(self, replacements: Replacements) -> Optional[Mapping[str, Any]]:
        if replacements is None or isinstance(replacements, Mapping):
            return replacements
        if isinstance(replacements, (str, bytes)):
            raise TypeError("replacements must be a mapping or a sequence of values, not a string")
        return index_replacements(list(replacements), self._options.placeholder_offset)
