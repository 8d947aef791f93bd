"""CLI entrypoints for GPU Meter chart text rendering, settings, and live watching."""

from __future__ import annotations

import argparse
import json
import time
from dataclasses import asdict
from pathlib import Path

from gpumeter_core import AppConfig, config_path, load_config, save_config, toggle_text
from gpumeter_core.logging_setup import configure_logging, get_logger, install_crash_hooks
from gpumeter_renderer import (
    DEFAULT_PRESET_NAME,
    DEFAULT_TEXT_FORMAT,
    FORMAT_CODES_HELP,
    MetricsSnapshot,
    get_preset,
    list_presets,
    render,
)
from gpumeter_telemetry import GpuReading, GpuTelemetryProvider


def _print_json(data: object) -> None:
    print(json.dumps(data, indent=2, sort_keys=True, default=str))


def _percent(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if not 0 <= number <= 100:
        raise argparse.ArgumentTypeError(f"percentage out of range 0-100: {number}")
    return number


def _interval_ms(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"interval must be at least 1 ms: {number}")
    return number


def _config_file(args: argparse.Namespace) -> Path | None:
    return Path(args.config).expanduser() if args.config else None


def _snapshot_from_reading(reading: GpuReading) -> MetricsSnapshot:
    return MetricsSnapshot.clamped(reading.gpu_percent, reading.vram_percent)


def format_chart_text(cfg: AppConfig, metrics: MetricsSnapshot) -> str | None:
    """Return the chart label for ``metrics``, or None while chart text is switched off."""
    if not cfg.chart_text.text_format_enable:
        return None
    return render(cfg.chart_text.text_format, metrics)


def cmd_render(args: argparse.Namespace) -> int:
    if args.live:
        cfg = load_config(_config_file(args))
        provider = GpuTelemetryProvider(device_index=cfg.telemetry.device_index)
        try:
            metrics = _snapshot_from_reading(provider.poll())
        finally:
            provider.close()
    else:
        metrics = MetricsSnapshot(primary_percent=args.gpu, secondary_percent=args.vram)

    output = render(args.template, metrics)
    if args.raw:
        print(output)
        return 0

    _print_json(
        {
            "template": args.template,
            "output": output,
            "length": len(output),
            "metrics": asdict(metrics),
        }
    )
    return 0


def cmd_presets(_args: argparse.Namespace) -> int:
    _print_json(
        {
            "default": DEFAULT_PRESET_NAME,
            "presets": [{"name": name, "text_format": fmt} for name, fmt in list_presets()],
            "codes": FORMAT_CODES_HELP.splitlines(),
        }
    )
    return 0


def cmd_config_show(args: argparse.Namespace) -> int:
    path = _config_file(args) or config_path()
    cfg = load_config(path)
    payload = asdict(cfg)
    payload["path"] = str(path)
    _print_json(payload)
    return 0


def cmd_config_set(args: argparse.Namespace) -> int:
    path = _config_file(args)
    cfg = load_config(path)

    if args.preset:
        cfg.chart_text.text_format = get_preset(args.preset)
    elif args.text_format is not None:
        cfg.chart_text.text_format = args.text_format
    if args.enable:
        cfg.chart_text.text_format_enable = True
    elif args.disable:
        cfg.chart_text.text_format_enable = False
    if args.poll_ms is not None:
        cfg.telemetry.poll_ms = args.poll_ms

    saved = save_config(cfg, path)
    get_logger().info("config saved", extra={"event": "config_saved"})
    payload = asdict(cfg)
    payload["path"] = str(saved)
    _print_json(payload)
    return 0


def cmd_config_toggle(args: argparse.Namespace) -> int:
    path = _config_file(args)
    cfg = load_config(path)
    enabled = toggle_text(cfg)
    save_config(cfg, path)
    _print_json({"text_format_enable": enabled})
    return 0


def cmd_watch(args: argparse.Namespace) -> int:
    path = _config_file(args)
    cfg = load_config(path)
    logger = get_logger()
    install_crash_hooks()

    provider = GpuTelemetryProvider(device_index=cfg.telemetry.device_index)
    logger.info(f"watching {provider.name}", extra={"event": "watch_start"})
    ticks = 0
    try:
        while args.count is None or ticks < args.count:
            if ticks:
                interval_ms = args.interval_ms if args.interval_ms is not None else cfg.telemetry.poll_ms
                time.sleep(interval_ms / 1000.0)
            # Settings may change between ticks; each render sees one fixed copy.
            cfg = load_config(path)
            reading = provider.poll()
            text = format_chart_text(cfg, _snapshot_from_reading(reading))
            print(
                json.dumps(
                    {
                        "ts_utc": reading.timestamp.isoformat(),
                        "gpu": reading.name,
                        "available": reading.available,
                        "gpu_percent": reading.gpu_percent,
                        "vram_percent": reading.vram_percent,
                        "text": text,
                    },
                    sort_keys=True,
                ),
                flush=True,
            )
            ticks += 1
    except KeyboardInterrupt:
        logger.info("watch interrupted", extra={"event": "watch_interrupted"})
    finally:
        provider.close()
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="gpumeter", description="GPU chart label formatter and live monitor")
    parser.add_argument("--config", default=None, help="Optional settings file path")
    sub = parser.add_subparsers(dest="command", required=True)

    render_cmd = sub.add_parser("render", help="Render a chart text format once")
    render_cmd.add_argument("template", help=f"Format string, e.g. {DEFAULT_TEXT_FORMAT!r}")
    render_cmd.add_argument("--gpu", type=_percent, default=0, help="GPU usage percentage")
    render_cmd.add_argument("--vram", type=_percent, default=0, help="VRAM usage percentage")
    render_cmd.add_argument("--live", action="store_true", help="Read percentages from the GPU instead")
    render_cmd.add_argument("--raw", action="store_true", help="Print only the rendered text")
    render_cmd.set_defaults(func=cmd_render)

    presets_cmd = sub.add_parser("presets", help="List built-in formats and format codes")
    presets_cmd.set_defaults(func=cmd_presets)

    config_cmd = sub.add_parser("config", help="Show or change settings")
    config_sub = config_cmd.add_subparsers(dest="config_cmd", required=True)
    show_cmd = config_sub.add_parser("show", help="Print current settings")
    show_cmd.set_defaults(func=cmd_config_show)

    set_cmd = config_sub.add_parser("set", help="Change chart text settings")
    fmt_group = set_cmd.add_mutually_exclusive_group()
    fmt_group.add_argument("--text-format", default=None)
    fmt_group.add_argument("--preset", choices=[name for name, _fmt in list_presets()], default=None)
    enable_group = set_cmd.add_mutually_exclusive_group()
    enable_group.add_argument("--enable", action="store_true")
    enable_group.add_argument("--disable", action="store_true")
    set_cmd.add_argument("--poll-ms", type=int, default=None)
    set_cmd.set_defaults(func=cmd_config_set)

    toggle_cmd = config_sub.add_parser("toggle", help="Switch chart text on or off")
    toggle_cmd.set_defaults(func=cmd_config_toggle)

    watch_cmd = sub.add_parser("watch", help="Poll the GPU and print the chart text each tick")
    watch_cmd.add_argument("--count", type=int, default=None, help="Stop after this many ticks")
    watch_cmd.add_argument("--interval-ms", type=_interval_ms, default=None, help="Override the configured poll interval")
    watch_cmd.set_defaults(func=cmd_watch)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    cfg = load_config(_config_file(args))
    configure_logging(keep_files=cfg.logging.keep_log_files, console=False)
    return int(args.func(args))


if __name__ == "__main__":
    raise SystemExit(main())
