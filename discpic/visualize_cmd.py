"""The visualize command: preview a raw track as a disc picture."""

from __future__ import annotations

from decimal import Decimal
from typing import NamedTuple, Optional

from discpic.presets import get_default_preset, get_preset_by_name
from discpic.visualizer import TrackVisualizer


class VisualizeParameters(NamedTuple):
    """Resolved spiral parameters and a note on where they came from."""

    disc_type: str
    tr0: float
    dtr: float
    r0: float
    note: Optional[str]


def resolve_visualize_parameters(
    disc_type: str, tr0: float, dtr: float, r0: float, preset: str = ""
) -> VisualizeParameters:
    """Fill unset (zero) parameters from a preset or the disc type's default."""
    disc_type = disc_type.lower()
    if disc_type not in ("cd", "dvd"):
        raise ValueError("disc type must be 'cd' or 'dvd'")

    note = None
    if preset:
        chosen = get_preset_by_name(preset)
        if chosen is None:
            raise ValueError(
                f"preset '{preset}' not found. Use 'list-presets' to see available presets"
            )
        tr0 = tr0 or chosen.tr0
        dtr = dtr or chosen.dtr
        note = f"Using preset: {preset} ({chosen.name})"
    elif tr0 == 0 or dtr == 0:
        default_key = "verbatim-cd-rw-1" if disc_type == "cd" else "generic-dvd-r"
        default = get_default_preset(disc_type)
        tr0 = tr0 or default.tr0
        dtr = dtr or default.dtr
        note = f"Using default {disc_type.upper()} preset: {default_key}"

    if tr0 <= 0 or dtr <= 0 or r0 <= 0:
        raise ValueError(
            f"invalid parameters: tr0={tr0:.2f}, dtr={dtr:.6f}, r0={r0:.1f} "
            "(all must be > 0)"
        )
    return VisualizeParameters(disc_type, float(tr0), float(dtr), float(r0), note)


def format_float(value: float) -> str:
    """Format a number with precision suited to its size."""
    if value > 1000:
        return f"{value:.0f}"
    if value > 10:
        return f"{value:.2f}"
    return format(Decimal(repr(float(value))).normalize(), "f")


def visualize_track(
    track_file,
    output_image="disc_preview.png",
    disc_type: str = "cd",
    tr0: float = 0.0,
    dtr: float = 0.0,
    r0: float = 24.5,
    preset: str = "",
) -> None:
    """Render the track file to a PNG picture of the disc."""
    if not track_file:
        raise ValueError("track file is required")

    params = resolve_visualize_parameters(disc_type, tr0, dtr, r0, preset)
    if params.note:
        print(params.note)

    print("Visualization parameters:")
    print(f"  Track file: {track_file}")
    print(f"  Output image: {output_image}")
    print(f"  Disc type: {params.disc_type.upper()}")
    print(f"  TR0: {format_float(params.tr0)}")
    print(f"  DTR: {format_float(params.dtr)}")
    print(f"  R0: {format_float(params.r0)}")
    print()

    visualizer = TrackVisualizer(params.tr0, params.dtr, params.r0, params.disc_type)
    print("Reading track data and creating visualization...")
    print("This may take a few minutes for large tracks...")
    visualizer.visualize_track(track_file, output_image)

    print("\n✓ Visualization completed successfully!")
    print(f"✓ Open {output_image} to see how your track will look on the disc")