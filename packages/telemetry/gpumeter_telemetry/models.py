"""Typed telemetry models."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime


@dataclass(frozen=True)
class GpuReading:
    gpu_percent: int
    vram_percent: int
    name: str
    available: bool
    timestamp: datetime


def clamp_percent(value: float | None) -> int:
    if value is None:
        return 0
    return max(0, min(100, int(value)))
