"""NVML telemetry provider with a graceful no-GPU fallback."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any

from .models import GpuReading, clamp_percent

_log = logging.getLogger("gpumeter.telemetry")

DEFAULT_GPU_NAME = "NVIDIA GPU"


class _GpuAdapter:
    name = "No GPU"
    available = False

    def poll(self) -> tuple[int, int]:
        return 0, 0

    def close(self) -> None:
        return None


class _NvmlGpuAdapter(_GpuAdapter):
    available = True

    def __init__(self, device_index: int = 0, nvml: Any = None) -> None:
        if nvml is None:
            import pynvml  # type: ignore

            nvml = pynvml
        self._nvml = nvml
        nvml.nvmlInit()
        try:
            count = nvml.nvmlDeviceGetCount()
            if count < 1:
                raise RuntimeError("No NVIDIA GPUs found")
            if device_index >= count:
                raise RuntimeError(f"GPU index {device_index} out of range, {count} device(s) present")
            self._handle = nvml.nvmlDeviceGetHandleByIndex(device_index)
        except Exception:
            nvml.nvmlShutdown()
            raise
        self.name = self._read_name()

    def _read_name(self) -> str:
        try:
            name = self._nvml.nvmlDeviceGetName(self._handle)
        except Exception:
            return DEFAULT_GPU_NAME
        if isinstance(name, bytes):
            name = name.decode("utf-8", errors="replace")
        return name or DEFAULT_GPU_NAME

    def poll(self) -> tuple[int, int]:
        nvml = self._nvml
        gpu_percent = 0
        vram_percent = 0

        try:
            gpu_percent = int(nvml.nvmlDeviceGetUtilizationRates(self._handle).gpu)
        except Exception as exc:
            _log.debug("utilization query failed: %s", exc)

        try:
            memory = nvml.nvmlDeviceGetMemoryInfo(self._handle)
            if memory.total > 0:
                vram_percent = int(memory.used * 100 // memory.total)
        except Exception as exc:
            _log.debug("memory query failed: %s", exc)

        return clamp_percent(gpu_percent), clamp_percent(vram_percent)

    def close(self) -> None:
        try:
            self._nvml.nvmlShutdown()
        except Exception as exc:
            _log.debug("nvml shutdown failed: %s", exc)


def _build_gpu_adapter(device_index: int, nvml: Any = None) -> _GpuAdapter:
    try:
        return _NvmlGpuAdapter(device_index=device_index, nvml=nvml)
    except Exception as exc:
        _log.warning("NVML unavailable, reporting zero usage: %s", exc, extra={"event": "nvml_unavailable"})
        return _GpuAdapter()


class GpuTelemetryProvider:
    """Polls GPU utilization and VRAM usage of one device as 0-100 percentages."""

    def __init__(self, device_index: int = 0, nvml: Any = None) -> None:
        self.device_index = device_index
        self._gpu = _build_gpu_adapter(device_index, nvml)

    @property
    def name(self) -> str:
        return self._gpu.name

    @property
    def available(self) -> bool:
        return self._gpu.available

    def poll(self) -> GpuReading:
        gpu_percent, vram_percent = self._gpu.poll()
        return GpuReading(
            gpu_percent=gpu_percent,
            vram_percent=vram_percent,
            name=self._gpu.name,
            available=self._gpu.available,
            timestamp=datetime.now(timezone.utc),
        )

    def close(self) -> None:
        self._gpu.close()
