"""Prompt text: a double-struck k, with a centred dot for continuation lines."""

from __future__ import annotations

from enum import Enum


class EditMode(Enum):
    """Line-editing mode shown by the prompt indicator."""

    DEFAULT = "default"
    EMACS = "emacs"
    VI_NORMAL = "vi_normal"
    VI_INSERT = "vi_insert"
    CUSTOM = "custom"


class Prompt:
    """Renders the pieces of the input prompt."""

    color = "cyan"
    multiline_color = "dark_gray"
    indicator_color = "cyan"
    right_color = "dark_gray"

    def render_left(self) -> str:
        return "\U0001D55C "

    def render_right(self) -> str:
        return ""

    def render_indicator(self, mode: EditMode, custom: str | None = None) -> str:
        """Indicator for ``mode``; ``custom`` names a custom mode."""
        if mode in (EditMode.DEFAULT, EditMode.EMACS):
            return ""
        if mode is EditMode.VI_NORMAL:
            return "[N] "
        if mode is EditMode.VI_INSERT:
            return "[I] "
        if custom is None:
            raise ValueError("a custom edit mode needs a name")
        return f"({custom}) "

    def render_multiline_indicator(self) -> str:
        return "\u00b7 "

    def render_history_search_indicator(self, term: str, failing: bool = False) -> str:
        tag = "(failing) " if failing else ""
        return f"({tag}reverse-i-search: {term}) "