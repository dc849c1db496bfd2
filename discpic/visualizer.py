"""Render a raw audio track as the picture it would leave on a disc surface."""

from __future__ import annotations

import math
import struct
from dataclasses import dataclass, field
from pathlib import Path
from typing import Sequence

from PIL import Image

from discpic.converter import CD_RADIUS, IMAGE_RADIUS

DISC_SIZE = 1500
EDGE_RADIUS_MM = 58.0
SAMPLE_STRIDE = 5
SILENCE_THRESHOLD = 0.01
BLEND_ALPHA = 0.3

BACKGROUND = (20, 20, 20, 255)
QUIET = (15, 15, 20, 255)
HOLE = (0, 0, 0, 255)
OUTSIDE = (10, 10, 10, 255)

Color = tuple[int, int, int, int]


def blend_colors(c1: Sequence[int], c2: Sequence[int], alpha: float) -> Color:
    """Mix two colours, weighting the second by alpha; the result is opaque."""
    red, green, blue = (
        int(a * (1 - alpha) + b * alpha) for a, b in zip(c1[:3], c2[:3])
    )
    return (red, green, blue, 255)


def _sample_color(sample: int) -> Color:
    intensity = abs(sample) / 32768.0
    if intensity <= SILENCE_THRESHOLD:
        return QUIET
    brightness = int(min(intensity * 4.0, 1.0) * 255)
    return (brightness, brightness, min(int(brightness * 1.2), 255), 255)


@dataclass
class _Mapping:
    pixels: list[tuple[int, int, Color]] = field(default_factory=list)
    iterations: int = 0
    max_r: float = 0.0
    final_tr: float = 0.0
    final_c: float = 0.0


class TrackVisualizer:
    """Maps the samples of a raw track back onto the disc spiral."""

    def __init__(self, tr0: float, dtr: float, r0: float, disc_type: str = "cd"):
        if tr0 <= 0 or dtr <= 0 or r0 <= 0:
            raise ValueError(
                f"invalid parameters: tr0={tr0}, dtr={dtr}, r0={r0} (all must be > 0)"
            )
        self.tr0 = float(tr0)
        self.dtr = float(dtr)
        self.r0 = float(r0)
        self.disc_type = disc_type.lower()

    @property
    def _centre(self) -> float:
        return DISC_SIZE / 2

    @property
    def _outer_radius(self) -> float:
        return self._centre * 0.9

    @property
    def _inner_radius(self) -> float:
        return self._centre * 0.08

    def _map_samples(self, track_data: bytes) -> _Mapping:
        total = len(track_data) // 4
        centre = self._centre
        inner = self._inner_radius
        outer = self._outer_radius

        mapping = _Mapping()
        tr = self.tr0
        r = self.r0
        dr = self.dtr * self.r0 / self.tr0
        c = 0.0
        index = 0

        while r < EDGE_RADIUS_MM:
            mapping.max_r = max(mapping.max_r, r)
            mapping.iterations += 1
            samples = int(tr)
            normalized = (IMAGE_RADIUS * r / CD_RADIUS) / IMAGE_RADIUS
            vis_r = inner + normalized * (outer - inner)

            available = max(min(samples, total - index), 0)
            for i in range(0, available, SAMPLE_STRIDE):
                left, right = struct.unpack_from("<hh", track_data, (index + i) * 4)
                sample = right if abs(right) > abs(left) else left
                angle = 2.0 * math.pi * i / samples
                x = centre + vis_r * math.cos(angle)
                y = centre + vis_r * math.sin(angle)
                if 0 <= x < DISC_SIZE and 0 <= y < DISC_SIZE:
                    mapping.pixels.append((int(x), int(y), _sample_color(sample)))
            index += available

            c += tr
            tr += self.dtr
            r += dr

        mapping.final_tr = tr
        mapping.final_c = c
        return mapping

    def _frame_disc(self, img: Image.Image) -> None:
        """Blacken the centre hole and darken everything beyond the outer edge."""
        access = img.load()
        centre = self._centre
        inner = self._inner_radius
        outer = self._outer_radius

        def distance(x: int, dy: float) -> float:
            dx = x - centre
            return math.sqrt(dx * dx + dy * dy)

        for y in range(DISC_SIZE):
            dy = y - centre

            if abs(dy) < inner:
                half = math.sqrt(inner * inner - dy * dy)
                start = max(0, int(centre - half) - 1)
                stop = min(DISC_SIZE, int(centre + half) + 2)
                for x in range(start, stop):
                    if distance(x, dy) < inner:
                        access[x, y] = HOLE

            if abs(dy) > outer:
                img.paste(OUTSIDE, (0, y, DISC_SIZE, y + 1))
                continue
            half = math.sqrt(outer * outer - dy * dy)
            lo = max(0, int(centre - half) - 1)
            while lo < DISC_SIZE and distance(lo, dy) > outer:
                lo += 1
            hi = min(DISC_SIZE - 1, int(centre + half) + 1)
            while hi >= lo and distance(hi, dy) > outer:
                hi -= 1
            if lo > hi:
                img.paste(OUTSIDE, (0, y, DISC_SIZE, y + 1))
                continue
            if lo > 0:
                img.paste(OUTSIDE, (0, y, lo, y + 1))
            if hi + 1 < DISC_SIZE:
                img.paste(OUTSIDE, (hi + 1, y, DISC_SIZE, y + 1))

    def _draw(self, mapping: _Mapping) -> Image.Image:
        img = Image.new("RGBA", (DISC_SIZE, DISC_SIZE), BACKGROUND)
        access = img.load()
        for x, y, color in mapping.pixels:
            access[x, y] = color
            for dx in (-1, 0, 1):
                for dy in (-1, 0, 1):
                    px, py = x + dx, y + dy
                    if 0 <= px < DISC_SIZE and 0 <= py < DISC_SIZE:
                        access[px, py] = blend_colors(access[px, py], color, BLEND_ALPHA)
        self._frame_disc(img)
        return img

    def render(self, track_data: bytes) -> Image.Image:
        """Return the disc picture that track_data would produce."""
        return self._draw(self._map_samples(track_data))

    def visualize_track(self, track_file, output_image) -> None:
        """Read a raw track file and save its disc picture as a PNG."""
        track_data = Path(track_file).read_bytes()
        print(f"Track file size: {len(track_data) / (1024 * 1024):.1f} MB")
        print(f"Total samples to process: {len(track_data) // 4}")

        mapping = self._map_samples(track_data)
        print(f"Mapped {len(mapping.pixels)} pixels total")
        print(
            f"Debug: iterations={mapping.iterations}, maxR={mapping.max_r:.2f}mm, "
            f"finalTr={mapping.final_tr:.0f}, finalC={mapping.final_c:.0f}"
        )

        print("Rendering pixels to disc image...")
        img = self._draw(mapping)

        print("Saving visualization...")
        img.save(output_image, format="PNG")
        print(f"Disc visualization saved to: {output_image}")