"""Convert a disc image into a raw audio track that draws it on the disc surface."""

from __future__ import annotations

import math
import random
from pathlib import Path
from typing import Callable, Optional

from PIL import Image

D = 4
SECTOR_SIZE = 2352
CD_TOTAL_SIZE = 800 * 1024 * 1024
DVD_TOTAL_SIZE = 4700 * 1024 * 1024

FRAME_SIZE = 24
FRAMES = 28 * D

DELAYS = (
    -24 * 3, -24 * (1 * D + 2) + 1, 8 - 24 * (2 * D + 3), 8 - 24 * (3 * D + 2) + 1,
    16 - 24 * (4 * D + 3), 16 - 24 * (5 * D + 2) + 1, 2 - 24 * (6 * D + 3), 2 - 24 * (7 * D + 2) + 1,
    10 - 24 * (8 * D + 3), 10 - 24 * (9 * D + 2) + 1, 18 - 24 * (10 * D + 3), 18 - 24 * (11 * D + 2) + 1,
    4 - 24 * (16 * D + 1), 4 - 24 * (17 * D) + 1, 12 - 24 * (18 * D + 1), 12 - 24 * (19 * D) + 1,
    20 - 24 * (20 * D + 1), 20 - 24 * (21 * D) + 1, 6 - 24 * (22 * D + 1), 6 - 24 * (23 * D) + 1,
    14 - 24 * (24 * D + 1), 14 - 24 * (25 * D) + 1, 22 - 24 * (26 * D + 1), 22 - 24 * (27 * D) + 1,
)

PALETTE = bytes((0x10, 0x21, 0x28, 0xAA))

IMAGE_RADIUS = 1500.0
CD_RADIUS = 57.5


class ConversionCancelled(Exception):
    """Raised when the cancel callback asks a conversion to stop."""


class Interleaver:
    """Delay-line interleaver that turns a byte stream into audio sectors.

    Each pushed byte is scattered through a circular frame buffer so that,
    after the drive's own de-interleaving, the bytes land in drawing order.
    """

    def __init__(self):
        self._sequence = bytearray(FRAME_SIZE * FRAMES)
        self._frame = FRAMES - 1
        self._position = 0
        self._buffer = bytearray()

    def _slot(self, offset: int) -> int:
        return (self._frame * FRAME_SIZE + offset) % len(self._sequence)

    def push(self, value: int) -> bytes:
        """Add one byte; return a completed sector, or b"" if none is ready."""
        self._sequence[self._slot(DELAYS[self._position])] = value
        self._position += 1
        if self._position < FRAME_SIZE:
            return b""

        self._position = 0
        self._frame = (self._frame + 1) % FRAMES
        start = self._frame * FRAME_SIZE
        self._buffer += self._sequence[start:start + FRAME_SIZE]
        if len(self._buffer) >= SECTOR_SIZE:
            sector = bytes(self._buffer)
            self._buffer.clear()
            return sector
        return b""

    def flush(self) -> bytes:
        """Return the bytes of the incomplete sector and empty the buffer."""
        rest = bytes(self._buffer)
        self._buffer.clear()
        return rest


def rgb_to_gray(red: int, green: int, blue: int) -> int:
    """Luminance of an 8-bit colour, truncated to an integer."""
    return int(red * 0.299 + green * 0.587 + blue * 0.114)


def choose_palette_byte(gray: int, mix_colors: bool, zs: int, zf: int) -> int:
    """Pick the palette byte for a gray level, dithering between two neighbours."""
    low = gray // 85
    high = min(low + 1, 3)
    remainder = gray % 85
    if mix_colors:
        use_high = random.randrange(85) < remainder or remainder == 84
    else:
        use_high = remainder > zs * 5 + zf or remainder == 84
    return PALETTE[high if use_high else low]


def _premultiply(value: int, alpha: int) -> int:
    if alpha == 255:
        return value
    return (value * 0x101 * (alpha * 0x101) // 0xFFFF) >> 8


class Converter:
    """Single-threaded image to audio track converter."""

    def __init__(
        self,
        tr0: float,
        dtr: float,
        r0: float,
        mix_colors: bool = False,
        disc_type: str = "cd",
        total_size: Optional[int] = None,
        progress_callback: Optional[Callable[[int], None]] = None,
        cancel_callback: Optional[Callable[[], bool]] = None,
    ):
        if tr0 <= 0:
            raise ValueError(f"tr0 must be positive, got {tr0}")
        self.tr0 = float(tr0)
        self.dtr = float(dtr)
        self.r0 = float(r0)
        self.mix_colors = mix_colors
        self.disc_type = disc_type.lower()
        if total_size is None:
            total_size = DVD_TOTAL_SIZE if self.disc_type == "dvd" else CD_TOTAL_SIZE
        self.total_size = total_size
        self.progress_callback = progress_callback
        self.cancel_callback = cancel_callback
        self._source: Optional[Image.Image] = None
        self._pixels = None
        self._size = (0, 0)

    def _pixel_access(self, img: Image.Image):
        if img is not self._source:
            rgba = img.convert("RGBA")
            self._pixels = rgba.load()
            self._size = rgba.size
            self._source = img
        return self._pixels, self._size

    def sample_gray(self, img: Image.Image, x: int, y: int) -> int:
        """Gray level of the pixel at (x, y), clamped to the image edges."""
        pixels, (width, height) = self._pixel_access(img)
        if width == 0 or height == 0:
            raise ValueError("image has no pixels")
        x = min(max(x, 0), width - 1)
        y = min(max(y, 0), height - 1)
        red, green, blue, alpha = pixels[x, y]
        return rgb_to_gray(
            _premultiply(red, alpha),
            _premultiply(green, alpha),
            _premultiply(blue, alpha),
        )

    def _cancelled(self) -> bool:
        return self.cancel_callback is not None and bool(self.cancel_callback())

    def _write_track(self, img: Image.Image, out) -> None:
        width, height = self._pixel_access(img)[1]
        if width == 0 or height == 0:
            raise ValueError("image has no pixels")

        interleaver = Interleaver()
        total = float(self.total_size)
        tr = self.tr0
        r = self.r0
        dr = self.dtr * self.r0 / self.tr0
        c = 0.0
        cx = width / 2
        cy = height / 2
        zs = 0
        zf = 0

        while c < total - tr:
            if self._cancelled():
                raise ConversionCancelled("conversion cancelled")
            if self.progress_callback is not None:
                self.progress_callback(int(100 * c / total))

            samples = int(tr)
            radius = IMAGE_RADIUS * r / CD_RADIUS
            for i in range(samples):
                alpha = 2 * math.pi * i / samples
                gray = self.sample_gray(
                    img, int(cx + radius * math.cos(alpha)), int(cy + radius * math.sin(alpha))
                )
                sector = interleaver.push(choose_palette_byte(gray, self.mix_colors, zs, zf))
                if sector:
                    out.write(sector)
                zf = (zf + 1) % 5

            c += tr
            tr += self.dtr
            r += dr
            zs = (zs + 1) % 17

        out.write(interleaver.flush())

    def convert(self, img: Image.Image, filename) -> None:
        """Write the audio track for img to filename; a cancelled run leaves no file."""
        path = Path(filename)
        try:
            with path.open("wb") as out:
                self._write_track(img, out)
        except ConversionCancelled:
            path.unlink(missing_ok=True)
            raise