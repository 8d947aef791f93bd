"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import logging
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

from gpumeter_renderer.presets import DEFAULT_TEXT_FORMAT


CONFIG_VERSION = 2
TEXT_FORMAT_MAX_LEN = 256

_log = logging.getLogger("gpumeter.config")


@dataclass
class ChartTextConfig:
    text_format: str = DEFAULT_TEXT_FORMAT
    text_format_enable: bool = True


@dataclass
class TelemetryConfig:
    poll_ms: int = 1000
    device_index: int = 0


@dataclass
class LoggingConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    chart_text: ChartTextConfig = field(default_factory=ChartTextConfig)
    telemetry: TelemetryConfig = field(default_factory=TelemetryConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "GPUMeter"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "GPUMeter"
    return Path.home() / ".config" / "gpumeter"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _normalize_chart_text(cfg: AppConfig) -> None:
    if not isinstance(cfg.chart_text.text_format, str):
        cfg.chart_text.text_format = DEFAULT_TEXT_FORMAT
    cfg.chart_text.text_format = cfg.chart_text.text_format[:TEXT_FORMAT_MAX_LEN]
    cfg.chart_text.text_format_enable = bool(cfg.chart_text.text_format_enable)


def _normalize_telemetry(cfg: AppConfig) -> None:
    cfg.telemetry.poll_ms = max(200, min(10000, int(cfg.telemetry.poll_ms)))
    cfg.telemetry.device_index = max(0, int(cfg.telemetry.device_index))


def _normalize_logging(cfg: AppConfig) -> None:
    cfg.logging.keep_log_files = max(2, int(cfg.logging.keep_log_files))


def _migrate(raw: dict[str, Any]) -> dict[str, Any]:
    version = int(raw.get("config_version", 1))
    data = dict(raw)

    if version < 2:
        # v1 stored the chart text settings as flat top-level keys.
        chart_text = dict(data.get("chart_text", {}) or {})
        if "text_format" in data:
            chart_text.setdefault("text_format", data.pop("text_format"))
        if "text_format_enable" in data:
            chart_text.setdefault("text_format_enable", bool(int(data.pop("text_format_enable"))))
        data["chart_text"] = chart_text
        data.setdefault("telemetry", {})
        data.setdefault("logging", {})
        data["config_version"] = 2

    return data


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
        data = _migrate(raw)
        cfg = AppConfig(
            config_version=int(data.get("config_version", CONFIG_VERSION)),
            chart_text=_merge(ChartTextConfig, data.get("chart_text", {})),
            telemetry=_merge(TelemetryConfig, data.get("telemetry", {})),
            logging=_merge(LoggingConfig, data.get("logging", {})),
        )
        _normalize_chart_text(cfg)
        _normalize_telemetry(cfg)
        _normalize_logging(cfg)
    except (OSError, ValueError, TypeError, AttributeError) as exc:
        _log.warning("unreadable config %s, using defaults: %s", path, exc, extra={"event": "config_unreadable"})
        return AppConfig()
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    _normalize_chart_text(cfg)
    _normalize_telemetry(cfg)
    _normalize_logging(cfg)
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path


def toggle_text(cfg: AppConfig) -> bool:
    cfg.chart_text.text_format_enable = not cfg.chart_text.text_format_enable
    return cfg.chart_text.text_format_enable
