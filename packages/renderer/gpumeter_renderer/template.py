"""Chart text formatter: expands GPU/VRAM variables and copies style escapes through.

The output is drawn by a chart text routine that understands its own escape
vocabulary (``\\D0``/``\\D1`` data colors, ``\\f`` format prefix, ``\\a``
attributes, ``\\s`` small font, ``\\w`` width). This module only recognises
the shape of those tokens so they reach the chart intact; it resolves
``\\.``, ``\\n`` and ``\\r`` locally and substitutes ``$`` variables.
"""

from __future__ import annotations

import string

from .models import EscapeKind, EscapeRule, MetricsSnapshot, VariableRule

MAX_OUTPUT = 500
ESCAPE_MARKER = "\\"
VARIABLE_MARKER = "$"
SELECTOR_DIGITS = "01"

ESCAPE_RULES: dict[str, EscapeRule] = {
    "D": EscapeRule(EscapeKind.SELECTOR),
    "d": EscapeRule(EscapeKind.SELECTOR),
    "f": EscapeRule(EscapeKind.PASS),
    "a": EscapeRule(EscapeKind.ATTRIBUTE),
    "s": EscapeRule(EscapeKind.PASS),
    ".": EscapeRule(EscapeKind.LITERAL, "."),
    "n": EscapeRule(EscapeKind.LITERAL, "\n"),
    "r": EscapeRule(EscapeKind.LITERAL, "\r"),
    "w": EscapeRule(EscapeKind.WIDTH),
}

VARIABLE_RULES: dict[str, VariableRule] = {
    "g": VariableRule(metric="primary_percent"),
    "v": VariableRule(metric="secondary_percent"),
    "G": VariableRule(metric="primary_percent", label="GPU"),
    "V": VariableRule(metric="secondary_percent", label="VRAM"),
}


class _Output:
    """Output accumulator bounded at ``limit`` characters."""

    def __init__(self, limit: int) -> None:
        self.limit = limit
        self._parts: list[str] = []
        self._size = 0
        self._closed = False

    @property
    def full(self) -> bool:
        return self._closed or self._size >= self.limit

    def text(self, value: str) -> None:
        chunk = value[: max(self.limit - self._size, 0)]
        self._parts.append(chunk)
        self._size += len(chunk)

    def token(self, value: str) -> None:
        # Style tokens are all-or-nothing; a half token would confuse the chart.
        if self._size + len(value) > self.limit:
            self._closed = True
            return
        self._parts.append(value)
        self._size += len(value)

    def value(self) -> str:
        return "".join(self._parts)


def render(template: str | None, metrics: MetricsSnapshot, max_output: int = MAX_OUTPUT) -> str:
    """Render ``template`` against ``metrics``.

    Never raises for any template content. Unknown codes fall back to their
    literal characters, a trailing ``\\`` is dropped and output stops at
    ``max_output`` characters.
    """
    if not template:
        return ""

    out = _Output(max_output)
    end = len(template)
    pos = 0
    while pos < end and not out.full:
        ch = template[pos]
        if ch == ESCAPE_MARKER:
            if pos + 1 >= end:
                break
            pos = _render_escape(template, pos + 1, out)
        elif ch == VARIABLE_MARKER:
            pos = _render_variable(template, pos + 1, metrics, out)
        else:
            out.text(ch)
            pos += 1
    return out.value()


def _render_escape(template: str, pos: int, out: _Output) -> int:
    code = template[pos]
    pos += 1
    token = ESCAPE_MARKER + code
    rule = ESCAPE_RULES.get(code)

    if rule is None:
        out.token(token)
        return pos
    if rule.kind is EscapeKind.LITERAL:
        out.text(rule.literal)
        return pos

    if rule.kind is EscapeKind.SELECTOR:
        if pos < len(template) and template[pos] in SELECTOR_DIGITS:
            token += template[pos]
            pos += 1
    elif rule.kind is EscapeKind.ATTRIBUTE:
        if pos < len(template):
            token += template[pos]
            pos += 1
    elif rule.kind is EscapeKind.WIDTH:
        stop = pos
        while stop < len(template) and template[stop] in string.digits:
            stop += 1
        token += template[pos:stop]
        pos = stop

    out.token(token)
    return pos


def _render_variable(template: str, pos: int, metrics: MetricsSnapshot, out: _Output) -> int:
    if pos >= len(template):
        out.text(VARIABLE_MARKER)
        return pos

    code = template[pos]
    rule = VARIABLE_RULES.get(code)
    if rule is None:
        out.text(VARIABLE_MARKER + code)
    else:
        out.text(_substitute(rule, metrics))
    return pos + 1


def _substitute(rule: VariableRule, metrics: MetricsSnapshot) -> str:
    value = int(getattr(metrics, rule.metric))
    if rule.label is None:
        return str(value)
    return f"{rule.label} {value}%"
