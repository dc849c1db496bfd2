"""Parallel image to audio track conversion, one worker job per spiral track."""

from __future__ import annotations

import math
import os
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Deque, Iterator, Optional

from PIL import Image

from discpic.converter import (
    CD_RADIUS,
    IMAGE_RADIUS,
    Converter,
    choose_palette_byte,
)

DEFAULT_MAX_WORKERS = 8
MAX_WORKERS = 16


@dataclass(frozen=True)
class TrackJob:
    """One revolution of the spiral, ready to be sampled from the image."""

    track_index: int
    tr: float
    r: float
    samples: int
    zs: int
    zf: int
    cx: float
    cy: float


class MultiThreadedConverter(Converter):
    """Converter that samples tracks on a pool of worker threads.

    Track bytes are written in spiral order exactly as the palette selects
    them; unlike the single-threaded converter, no interleaving or padding
    is applied.
    """

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
        num_workers: Optional[int] = None,
    ):
        super().__init__(
            tr0,
            dtr,
            r0,
            mix_colors=mix_colors,
            disc_type=disc_type,
            total_size=total_size,
            progress_callback=progress_callback,
            cancel_callback=cancel_callback,
        )
        if num_workers is None:
            num_workers = min(os.cpu_count() or 1, DEFAULT_MAX_WORKERS)
        elif not 1 <= num_workers <= MAX_WORKERS:
            raise ValueError(
                f"num_workers must be between 1 and {MAX_WORKERS}, got {num_workers}"
            )
        self.num_workers = num_workers

    def _jobs(self, width: int, height: int) -> Iterator[TrackJob]:
        total = float(self.total_size)
        tr = self.tr0
        r = self.r0
        dr = self.dtr * self.r0 / self.tr0
        c = 0.0
        zs = 0
        index = 0
        while c < total - tr:
            if self._cancelled():
                return
            if self.progress_callback is not None:
                self.progress_callback(int(100 * c / total))
            yield TrackJob(
                track_index=index,
                tr=tr,
                r=r,
                samples=int(tr),
                zs=zs,
                zf=0,
                cx=width / 2,
                cy=height / 2,
            )
            c += tr
            tr += self.dtr
            r += dr
            index += 1
            zs = (zs + 1) % 17

    def process_track(self, img: Image.Image, job: TrackJob) -> bytes:
        """Sample one track of the image and return its palette bytes."""
        radius = IMAGE_RADIUS * job.r / CD_RADIUS
        data = bytearray()
        zf = job.zf
        for i in range(job.samples):
            alpha = 2 * math.pi * i / job.samples
            gray = self.sample_gray(
                img,
                int(job.cx + radius * math.cos(alpha)),
                int(job.cy + radius * math.sin(alpha)),
            )
            data.append(choose_palette_byte(gray, self.mix_colors, job.zs, zf))
            zf = (zf + 1) % 5
        return bytes(data)

    def convert_parallel(self, img: Image.Image, filename) -> int:
        """Write the track for img to filename; return the number of tracks written.

        A cancelled run stops quietly and keeps the tracks written so far.
        """
        _, (width, height) = self._pixel_access(img)
        if width == 0 or height == 0:
            raise ValueError("image has no pixels")

        window = self.num_workers * 2
        written = 0
        with open(filename, "wb") as out, ThreadPoolExecutor(
            max_workers=self.num_workers
        ) as pool:
            pending: Deque[Future] = deque()
            for job in self._jobs(width, height):
                pending.append(pool.submit(self.process_track, img, job))
                if len(pending) >= window:
                    out.write(pending.popleft().result())
                    written += 1
            while pending:
                out.write(pending.popleft().result())
                written += 1
        return written