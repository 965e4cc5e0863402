"""Styled text runs and the interactive actions attached to them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from .formatting import ChatColor

FORMAT_FIELDS: Tuple[str, ...] = ("bold", "italic", "underlined", "strikethrough", "obfuscated")


class ClickAction(Enum):
    """Click kinds and the trigger character selecting each one."""

    RUN_COMMAND = "run_command"
    SUGGEST_COMMAND = "suggest_command"
    OPEN_URL = "open_url"
    OPEN_FILE = "open_file"
    CHANGE_PAGE = "change_page"

    @classmethod
    def from_trigger(cls, char: str) -> Optional["ClickAction"]:
        return CLICK_TRIGGERS.get(char)


class HoverAction(Enum):
    """Hover kinds and the trigger character selecting each one."""

    SHOW_TEXT = "show_text"
    SHOW_ACHIEVEMENT = "show_achievement"
    SHOW_ITEM = "show_item"
    SHOW_ENTITY = "show_entity"

    @classmethod
    def from_trigger(cls, char: str) -> Optional["HoverAction"]:
        return HOVER_TRIGGERS.get(char)


CLICK_TRIGGERS: Dict[str, ClickAction] = {
    "!": ClickAction.RUN_COMMAND,
    "?": ClickAction.SUGGEST_COMMAND,
    ">": ClickAction.OPEN_URL,
    "/": ClickAction.OPEN_FILE,
    "#": ClickAction.CHANGE_PAGE,
}

HOVER_TRIGGERS: Dict[str, HoverAction] = {
    "T": HoverAction.SHOW_TEXT,
    "A": HoverAction.SHOW_ACHIEVEMENT,
    "I": HoverAction.SHOW_ITEM,
    "E": HoverAction.SHOW_ENTITY,
}


@dataclass(frozen=True)
class ClickEvent:
    action: ClickAction
    value: str

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action.value, "value": self.value}


@dataclass(frozen=True)
class HoverEvent:
    action: HoverAction
    value: Tuple["StyleRun", ...]

    def to_dict(self) -> Dict[str, Any]:
        return {"action": self.action.value, "value": [run.to_dict() for run in self.value]}


@dataclass(frozen=True)
class StyleRun:
    """
    A contiguous span of text sharing one color, format and action state.

    Format flags are tri-state: ``None`` inherits from the renderer's
    context, ``True``/``False`` are explicit.
    """

    text: str
    color: Optional[ChatColor] = None
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underlined: Optional[bool] = None
    strikethrough: Optional[bool] = None
    obfuscated: Optional[bool] = None
    click: Optional[ClickEvent] = None
    hover: Optional[HoverEvent] = None

    def has_formatting(self) -> bool:
        return any(getattr(self, name) is not None for name in FORMAT_FIELDS)

    def to_dict(self) -> Dict[str, Any]:
        """Chat-component style dictionary holding only the fields that are set."""
        data: Dict[str, Any] = {"text": self.text}
        if self.color is not None:
            data["color"] = self.color.name.lower()
        for name in FORMAT_FIELDS:
            value = getattr(self, name)
            if value is not None:
                data[name] = value
        if self.click is not None:
            data["clickEvent"] = self.click.to_dict()
        if self.hover is not None:
            data["hoverEvent"] = self.hover.to_dict()
        return data


def to_plain_text(runs: Iterable[StyleRun]) -> str:
    return "".join(run.text for run in runs)
