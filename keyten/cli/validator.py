"""Input completeness check: a line is complete when brackets balance."""

from __future__ import annotations


def brackets_balanced(s: str) -> bool:
    """True when parentheses balance and no string literal is left open."""
    depth = 0
    in_str = False
    prev = "\0"
    for c in s:
        if in_str:
            if c == '"' and prev != "\\":
                in_str = False
        elif c == "(":
            depth += 1
        elif c == ")":
            depth -= 1
        elif c == '"':
            in_str = True
        prev = c
        if depth < 0:
            return False
    return depth == 0 and not in_str