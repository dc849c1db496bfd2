"""Disc presets: spiral geometry parameters for known CD and DVD media."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class DiscPreset:
    """Geometry parameters describing how a particular disc lays out its spiral."""

    name: str
    disc_type: str
    tr0: float
    dtr: float
    r0: float


_PRESETS: dict[str, DiscPreset] = {
    "verbatim-cd-rw-1": DiscPreset(
        name="Verbatim CD-RW Hi-Speed 8x-10x 700 MB SERL 1",
        disc_type="cd",
        tr0=22951.52,
        dtr=1.3865961,
        r0=24.5,
    ),
    "verbatim-cd-rw-2": DiscPreset(
        name="Verbatim CD-RW Hi-Speed 8x-10x 700 MB SERL 2",
        disc_type="cd",
        tr0=22951.07,
        dtr=1.3865958,
        r0=24.5,
    ),
    "eperformance-cd-rw": DiscPreset(
        name="eProformance CD-RW 4x-10x 700 MB Prodisk Technology Inc",
        disc_type="cd",
        tr0=22936.085,
        dtr=1.38314,
        r0=24.5,
    ),
    "tdk-cd-rw": DiscPreset(
        name="TDK CD-RW 4x-12x HIGH SPEED 700MB 80MIN",
        disc_type="cd",
        tr0=23000.145,
        dtr=1.38659775,
        r0=24.5,
    ),
    # DVD values are estimates: larger data area and tighter track spacing.
    "generic-dvd-r": DiscPreset(
        name="Generic DVD-R 4.7GB",
        disc_type="dvd",
        tr0=48000.0,
        dtr=0.74,
        r0=24.0,
    ),
    "generic-dvd-rw": DiscPreset(
        name="Generic DVD-RW 4.7GB",
        disc_type="dvd",
        tr0=48050.0,
        dtr=0.741,
        r0=24.0,
    ),
    "verbatim-dvd-r": DiscPreset(
        name="Verbatim DVD-R 16x 4.7GB",
        disc_type="dvd",
        tr0=47980.0,
        dtr=0.739,
        r0=24.0,
    ),
    "sony-dvd-rw": DiscPreset(
        name="Sony DVD-RW 4x 4.7GB",
        disc_type="dvd",
        tr0=48100.0,
        dtr=0.742,
        r0=24.0,
    ),
}


def get_presets() -> dict[str, DiscPreset]:
    """Return a fresh mapping of preset key to preset."""
    return dict(_PRESETS)


def get_preset_by_name(name: str) -> Optional[DiscPreset]:
    """Return the preset with the given key, or None if there is none."""
    return _PRESETS.get(name)


def get_default_preset(disc_type: str) -> DiscPreset:
    """Return the default preset for a disc type; anything but DVD means CD."""
    if disc_type.lower() == "dvd":
        return _PRESETS["generic-dvd-r"]
    return _PRESETS["verbatim-cd-rw-1"]


def _preset_line(key: str, preset: DiscPreset) -> str:
    return (
        f"  {key:<20} - {preset.name} "
        f"(tr0={preset.tr0:.2f}, dtr={preset.dtr:.6f}, r0={preset.r0:.1f})"
    )


def format_presets() -> str:
    """Return the human-readable listing of all presets, grouped by disc type."""
    lines = ["Available disc presets:", ""]
    for disc_type, title in (("cd", "CD Presets:"), ("dvd", "DVD Presets:")):
        group = [(key, p) for key, p in _PRESETS.items() if p.disc_type == disc_type]
        if not group:
            continue
        lines.append(title)
        lines.extend(_preset_line(key, preset) for key, preset in group)
        lines.append("")
    lines.append("Usage: discpic burn -i image.jpg -p preset-name")
    return "\n".join(lines)


def list_presets() -> None:
    """Print the preset listing to standard output."""
    print(format_presets())