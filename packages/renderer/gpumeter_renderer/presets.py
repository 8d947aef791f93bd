"""Built-in chart text formats."""

from __future__ import annotations

DEFAULT_PRESET_NAME = "Default"
DEFAULT_TEXT_FORMAT = "\\D2$V\\D0\\t\\f$G"

PRESETS: dict[str, str] = {
    DEFAULT_PRESET_NAME: DEFAULT_TEXT_FORMAT,
    "Compact": "\\d0\\f$g%\\d1\\f$v%",
    "Attributes": "\\D0\\f\\ag\\.$g%\\D1\\f\\av\\.$v%",
    "Labels": "\\D0\\f$G\\D1\\f$V",
    "Spelled": "\\D0\\fGPU $g%\\D1\\fVRAM $v%",
    "Wide": "\\ww\\D0\\f$g\\D1\\f$v",
}

FORMAT_CODES_HELP = (
    "$g - GPU usage percentage\n"
    "$v - VRAM usage percentage\n"
    "$G - GPU usage with label\n"
    "$V - VRAM usage with label\n"
    "\\D0 - Use GPU color (blue)\n"
    "\\D1 - Use VRAM color (red)\n"
    "\\f - Format prefix\n"
    "\\a - Attribute prefix\n"
    "\\s - Small font\n"
    "\\w - Width, followed by digits\n"
    "\\. - Literal dot\n"
    "\\n - New line\n"
)


def list_presets() -> list[tuple[str, str]]:
    return list(PRESETS.items())


def get_preset(name: str | None) -> str:
    if not name:
        return DEFAULT_TEXT_FORMAT
    return PRESETS.get(name, DEFAULT_TEXT_FORMAT)
