"""Syntax colouring of an input line: verbs, atoms, names and strings."""

from __future__ import annotations

import re

from keyten.cli.names import Names

_PLAIN: tuple[str, ...] = ()
_STRING = ("32",)
_SYMBOL = ("36",)
_NULL = ("3", "90")
_NUMBER = ("97",)
_BOUND = ("1", "93")
_UNBOUND = ("37",)
_VERB = ("1", "36")
_ADVERB = ("1", "35")
_PUNCT = ("90",)
_PAREN = ("37",)

_LEXEME = re.compile(
    r'(?P<space>[ \t])'
    r'|(?P<string>"(?:\\.|\\\Z|[^"\\])*"?)'
    r'|(?P<sym>`[A-Za-z0-9_]*)'
    r'|(?P<null>0[NnWw])'
    r'|(?P<number>[0-9]+(?:\.[0-9]*)?(?:[eE][+-]?[0-9]*)?)'
    r'|(?P<name>[A-Za-z_][A-Za-z0-9_]*)'
    r'|(?P<other>.)',
    re.DOTALL,
)

_OTHER_STYLES = {
    **dict.fromkeys("+-*%", _VERB),
    **dict.fromkeys("/\\", _ADVERB),
    **dict.fromkeys(":;", _PUNCT),
    **dict.fromkeys("()", _PAREN),
}

_FIXED_STYLES = {
    "space": _PLAIN,
    "string": _STRING,
    "sym": _SYMBOL,
    "null": _NULL,
    "number": _NUMBER,
}


class Highlighter:
    """Splits a line into styled segments; bound names stand out."""

    def __init__(self, names: Names) -> None:
        self._names = names

    def highlight(self, line: str) -> list[tuple[tuple[str, ...], str]]:
        """Return ``(sgr_codes, text)`` segments that together spell ``line``."""
        segments = []
        for m in _LEXEME.finditer(line):
            group = m.lastgroup
            text = m.group()
            if group == "name":
                style = _BOUND if text in self._names else _UNBOUND
            elif group == "other":
                style = _OTHER_STYLES.get(text, _PLAIN)
            else:
                style = _FIXED_STYLES[group]
            segments.append((style, text))
        return segments

    def render(self, line: str) -> str:
        """Return ``line`` with ANSI colour escapes applied."""
        return "".join(
            f"\x1b[{';'.join(style)}m{text}\x1b[0m" if style else text
            for style, text in self.highlight(line)
        )