"""Loading images and laying them out on a virtual 3000x3000 disc."""

from __future__ import annotations

from PIL import Image

DISC_SIZE = 3000
_WHITE = (255, 255, 255, 255)


class ImageLoadError(Exception):
    """Raised when an image file cannot be opened or decoded."""


def load_image(filename) -> Image.Image:
    """Open and fully decode an image file."""
    try:
        with Image.open(filename) as img:
            img.load()
            return img.copy()
    except OSError as exc:
        raise ImageLoadError(f"failed to load image {filename}: {exc}") from exc


def _grayscale(img: Image.Image) -> Image.Image:
    """Grayscale an RGBA image, keeping its alpha channel."""
    luminance = img.convert("L")
    alpha = img.getchannel("A")
    return Image.merge("RGBA", (luminance, luminance, luminance, alpha))


def _place_on_disc(img: Image.Image, max_dimension: int) -> Image.Image:
    """Scale the longer side of img to max_dimension, grayscale it and centre it on white."""
    width, height = img.size
    if width == 0 or height == 0:
        raise ValueError("image has no pixels")

    scale = max_dimension / max(width, height)
    new_width = int(width * scale)
    new_height = int(height * scale)

    resized = img.convert("RGBA").resize(
        (max(1, new_width), max(1, new_height)), Image.Resampling.LANCZOS
    )
    gray = _grayscale(resized)

    disc = Image.new("RGBA", (DISC_SIZE, DISC_SIZE), _WHITE)
    centre = DISC_SIZE // 2
    disc.paste(gray, (centre - new_width // 2, centre - new_height // 2))
    return disc


def process_image_for_disc(img: Image.Image, disc_type: str) -> Image.Image:
    """Fit the image into the disc data area between the centre hole and outer edge."""
    data_area_radius = 1350.0 if disc_type == "dvd" else 1250.0
    centre_hole_radius = 375.0
    max_size = int(2 * (data_area_radius - centre_hole_radius))
    return _place_on_disc(img, max_size)


def create_disc_image(img: Image.Image, disc_type: str) -> Image.Image:
    """Fit the image into the usable disc radius, as the converter expects."""
    max_radius = 1300.0 if disc_type == "dvd" else 1200.0
    return _place_on_disc(img, int(2 * max_radius))