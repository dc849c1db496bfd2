import struct

import pytest
from PIL import Image

from discpic.visualizer import (
    BACKGROUND,
    DISC_SIZE,
    HOLE,
    OUTSIDE,
    TrackVisualizer,
    blend_colors,
)


def _samples(left, right, count):
    return struct.pack("<hh", left, right) * count


@pytest.fixture
def visualizer():
    return TrackVisualizer(1000.0, 100.0, 24.5, "cd")


def test_blend_alpha_zero_keeps_first_colour():
    assert blend_colors((12, 34, 56, 7), (200, 100, 50, 255), 0.0) == (12, 34, 56, 255)


def test_blend_alpha_one_gives_second_colour():
    assert blend_colors((12, 34, 56, 255), (200, 100, 50, 9), 1.0) == (200, 100, 50, 255)


def test_blend_stays_between_inputs():
    result = blend_colors((0, 0, 0, 255), (200, 200, 200, 255), 0.3)
    assert all(0 <= channel <= 200 for channel in result[:3])
    assert result[3] == 255


@pytest.mark.parametrize(
    "tr0, dtr, r0",
    [(0, 1.0, 24.5), (1000.0, 0, 24.5), (1000.0, 1.0, 0), (-5.0, 1.0, 24.5)],
)
def test_invalid_parameters_rejected(tr0, dtr, r0):
    with pytest.raises(ValueError):
        TrackVisualizer(tr0, dtr, r0, "cd")


def test_empty_track_shows_frame_only(visualizer):
    img = visualizer.render(b"")
    assert img.size == (DISC_SIZE, DISC_SIZE)
    assert img.getpixel((750, 750)) == HOLE
    assert img.getpixel((0, 0)) == OUTSIDE
    assert img.getpixel((DISC_SIZE - 1, DISC_SIZE - 1)) == OUTSIDE
    assert img.getpixel((1050, 750)) == BACKGROUND


def test_silence_draws_only_dark_pixels(visualizer):
    img = visualizer.render(bytes(4 * 4000))
    assert img.getextrema()[0] == (0, 20)


def test_loud_track_draws_bright_pixels(visualizer):
    img = visualizer.render(_samples(32767, 32767, 4000))
    assert img.getextrema()[0] == (0, 255)
    assert img.getextrema()[2] == (0, 255)


def test_stronger_right_channel_is_used(visualizer):
    img = visualizer.render(_samples(0, -32768, 4000))
    assert img.getextrema()[0][1] == 255


def test_only_every_fifth_sample_is_drawn(visualizer):
    data = b"".join(
        struct.pack("<hh", 0, 0) if i % 5 == 0 else struct.pack("<hh", 32767, 32767)
        for i in range(1000)
    )
    img = visualizer.render(data)
    assert img.getextrema()[0] == (0, 20)


def test_render_is_deterministic(visualizer):
    data = _samples(20000, -100, 3000)
    first = visualizer.render(data)
    second = visualizer.render(data)
    assert first.size == (DISC_SIZE, DISC_SIZE)
    assert first.getextrema()[0] == (0, 255)
    assert first.tobytes() == second.tobytes()


def test_start_beyond_edge_draws_nothing():
    vis = TrackVisualizer(1000.0, 100.0, 60.0, "cd")
    img = vis.render(_samples(32767, 32767, 4000))
    assert img.getextrema()[0] == (0, 20)


def test_visualize_track_writes_png(tmp_path, visualizer, capsys):
    data = _samples(32767, 0, 4000)
    track = tmp_path / "track.raw"
    track.write_bytes(data)
    output = tmp_path / "disc.png"

    visualizer.visualize_track(track, output)

    with Image.open(output) as saved:
        assert saved.format == "PNG"
        assert saved.size == (DISC_SIZE, DISC_SIZE)
        assert saved.convert("RGBA").tobytes() == visualizer.render(data).tobytes()
    assert "Disc visualization saved to" in capsys.readouterr().out


def test_visualize_missing_track_raises(tmp_path, visualizer):
    with pytest.raises(FileNotFoundError):
        visualizer.visualize_track(tmp_path / "missing.raw", tmp_path / "out.png")
    assert not (tmp_path / "out.png").exists()