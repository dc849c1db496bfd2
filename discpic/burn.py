"""The burn command: turn an image into a raw audio track ready for burning."""

from __future__ import annotations

import signal
import threading
import time
from contextlib import contextmanager
from datetime import timedelta
from pathlib import Path
from typing import Iterator, NamedTuple, Optional

from tqdm import tqdm

from discpic.converter import ConversionCancelled, Converter
from discpic.converter_mt import MultiThreadedConverter
from discpic.images import create_disc_image, load_image
from discpic.presets import DiscPreset, get_default_preset, get_preset_by_name

_DISC_TYPES = ("cd", "dvd")


class BurnParameters(NamedTuple):
    """Spiral parameters chosen for a conversion, with the preset they came from."""

    disc_type: str
    tr0: float
    dtr: float
    r0: float
    preset: Optional[DiscPreset]
    default: bool


def _normalise_disc_type(disc_type: str) -> str:
    disc_type = disc_type.lower()
    if disc_type not in _DISC_TYPES:
        raise ValueError(f"invalid disc type: {disc_type} (must be 'cd' or 'dvd')")
    return disc_type


def resolve_burn_parameters(
    disc_type: str, tr0: float, dtr: float, r0: float, preset: str = ""
) -> BurnParameters:
    """Pick the spiral parameters: a named preset, the default preset, or the given values."""
    disc_type = _normalise_disc_type(disc_type)

    if preset:
        chosen = get_preset_by_name(preset)
        if chosen is None:
            raise ValueError(
                f"preset '{preset}' not found "
                "(use 'discpic list-presets' to see available presets)"
            )
        if chosen.disc_type != disc_type:
            raise ValueError(
                f"preset '{preset}' is for {chosen.disc_type}, but disc type is {disc_type}"
            )
        return BurnParameters(disc_type, chosen.tr0, chosen.dtr, chosen.r0, chosen, False)

    if tr0 == 0 or dtr == 0:
        default = get_default_preset(disc_type)
        return BurnParameters(disc_type, default.tr0, default.dtr, default.r0, default, True)

    return BurnParameters(disc_type, float(tr0), float(dtr), float(r0), None, False)


@contextmanager
def _interrupt_flag() -> Iterator[threading.Event]:
    """Yield an event that is set when SIGINT or SIGTERM arrives."""
    flag = threading.Event()
    if threading.current_thread() is not threading.main_thread():
        yield flag
        return

    def handler(signum, frame):
        print("\nReceived interrupt signal, cancelling...")
        flag.set()

    previous = {sig: signal.signal(sig, handler) for sig in (signal.SIGINT, signal.SIGTERM)}
    try:
        yield flag
    finally:
        for sig, old in previous.items():
            signal.signal(sig, old)


def _print_burn_hint(disc_type: str, output_file) -> None:
    print(f"\nTo burn the track to a {disc_type.upper()}:")
    if disc_type == "cd":
        print(f"  cdrecord -audio dev=/dev/sr0 {output_file}")
        print("  OR")
        print(f"  wodim -audio dev=/dev/sr0 {output_file}")
    else:
        print(f"  growisofs -audio -Z /dev/sr0={output_file}")
        print("  OR")
        print(f"  cdrecord -audio dev=/dev/sr0 {output_file}")
    print("\nNote: Replace /dev/sr0 with your actual optical drive device.")
    print("Use 'cdrecord -scanbus' or 'wodim -scanbus' to find your drive.")


def burn_image(
    input_file,
    output_file="track.raw",
    disc_type: str = "cd",
    tr0: float = 0.0,
    dtr: float = 0.0,
    r0: float = 24.5,
    mix_colors: bool = False,
    preset: str = "",
    use_multithread: bool = True,
) -> None:
    """Convert an image file into a raw audio track written to output_file."""
    disc_type = _normalise_disc_type(disc_type)

    print(f"Loading image: {input_file}")
    img = load_image(input_file)
    processed = create_disc_image(img, disc_type)

    params = resolve_burn_parameters(disc_type, tr0, dtr, r0, preset)
    if params.preset is not None:
        if params.default:
            print(f"Using default preset for {disc_type.upper()}: {params.preset.name}")
        print(f"Using preset: {params.preset.name}")

    print(f"Parameters - tr0: {params.tr0:.2f}, dtr: {params.dtr:.6f}, r0: {params.r0:.1f}")
    print(f"Mix colors: {str(mix_colors).lower()}")
    print(f"Multi-threading: {str(use_multithread).lower()}")

    print(f"Converting image to {disc_type.upper()} audio track...")
    print(f"Output file: {output_file}")

    started = time.monotonic()
    cancelled = False
    with _interrupt_flag() as interrupted:
        bar = tqdm(total=100, desc="Converting", ncols=80, mininterval=0.1, leave=False)

        def on_progress(progress: int) -> None:
            if progress > bar.n:
                bar.update(progress - bar.n)

        options = dict(
            mix_colors=mix_colors,
            disc_type=disc_type,
            progress_callback=on_progress,
            cancel_callback=interrupted.is_set,
        )
        try:
            if use_multithread:
                MultiThreadedConverter(
                    params.tr0, params.dtr, params.r0, **options
                ).convert_parallel(processed, output_file)
            else:
                Converter(params.tr0, params.dtr, params.r0, **options).convert(
                    processed, output_file
                )
        except ConversionCancelled:
            cancelled = True
        finally:
            bar.update(100 - bar.n)
            bar.close()
        cancelled = cancelled or interrupted.is_set()
    print()

    if cancelled:
        print("Conversion cancelled.")
        return

    duration = timedelta(seconds=int(time.monotonic() - started))
    size_mb = Path(output_file).stat().st_size / (1024 * 1024)
    print("\nConversion completed successfully!")
    print(f"Duration: {duration}")
    print(f"Output file size: {size_mb:.1f} MB")
    _print_burn_hint(disc_type, output_file)