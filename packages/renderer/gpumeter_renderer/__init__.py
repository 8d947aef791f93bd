"""Renderer package for GPU chart text formatting."""

from .models import EscapeKind, EscapeRule, MetricsSnapshot, VariableRule
from .presets import DEFAULT_PRESET_NAME, DEFAULT_TEXT_FORMAT, FORMAT_CODES_HELP, get_preset, list_presets
from .template import ESCAPE_RULES, MAX_OUTPUT, VARIABLE_RULES, render

__all__ = [
    "DEFAULT_PRESET_NAME",
    "DEFAULT_TEXT_FORMAT",
    "ESCAPE_RULES",
    "EscapeKind",
    "EscapeRule",
    "FORMAT_CODES_HELP",
    "MAX_OUTPUT",
    "MetricsSnapshot",
    "VARIABLE_RULES",
    "VariableRule",
    "get_preset",
    "list_presets",
    "render",
]
