"""GPU telemetry providers for GPU Meter."""

from .models import GpuReading, clamp_percent
from .provider import GpuTelemetryProvider

__all__ = [
    "GpuReading",
    "GpuTelemetryProvider",
    "clamp_percent",
]
