"""Typed renderer models and rule tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class MetricsSnapshot:
    primary_percent: int
    secondary_percent: int

    @classmethod
    def clamped(cls, primary: float, secondary: float) -> MetricsSnapshot:
        return cls(
            primary_percent=max(0, min(100, int(primary))),
            secondary_percent=max(0, min(100, int(secondary))),
        )


class EscapeKind(str, Enum):
    SELECTOR = "selector"
    PASS = "pass"
    ATTRIBUTE = "attribute"
    WIDTH = "width"
    LITERAL = "literal"


@dataclass(frozen=True)
class EscapeRule:
    """How an escape code renders; ``literal`` is the replacement text for LITERAL codes."""

    kind: EscapeKind
    literal: str = ""


@dataclass(frozen=True)
class VariableRule:
    """A $ variable: ``metric`` names the MetricsSnapshot field, ``label`` prefixes "<label> <n>%"."""

    metric: str
    label: str | None = None
