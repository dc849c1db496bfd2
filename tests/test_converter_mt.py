import pytest
from PIL import Image

from discpic.converter import PALETTE, choose_palette_byte
from discpic.converter_mt import MultiThreadedConverter, TrackJob


def _job(samples, zs=0, zf=0, size=64):
    return TrackJob(
        track_index=0,
        tr=float(samples),
        r=24.5,
        samples=samples,
        zs=zs,
        zf=zf,
        cx=size / 2,
        cy=size / 2,
    )


def _small(**kwargs):
    return MultiThreadedConverter(10.0, 1.0, 24.5, total_size=100, **kwargs)


def _gradient():
    return Image.linear_gradient("L").convert("RGB")


def test_process_track_white_uses_brightest_palette_entry():
    conv = _small()
    img = Image.new("RGB", (64, 64), "white")
    assert conv.process_track(img, _job(7)) == b"\xaa" * 7


def test_process_track_black_uses_darkest_palette_entry():
    conv = _small()
    img = Image.new("RGB", (64, 64), "black")
    assert conv.process_track(img, _job(5)) == bytes([PALETTE[0]]) * 5


def test_process_track_dithers_with_zs_and_running_zf():
    conv = _small()
    img = Image.new("RGB", (64, 64), (40, 40, 40))
    gray = conv.sample_gray(img, 0, 0)
    data = conv.process_track(img, _job(12, zs=3, zf=2))
    expected = [choose_palette_byte(gray, False, 3, (2 + i) % 5) for i in range(12)]
    assert list(data) == expected


def test_convert_parallel_writes_all_tracks(tmp_path):
    out = tmp_path / "track.raw"
    conv = _small(num_workers=2)
    count = conv.convert_parallel(Image.new("RGB", (64, 64), "white"), out)
    data = out.read_bytes()
    assert count == 7
    assert len(data) == 91
    assert set(data) == {0xAA}


def test_worker_count_does_not_change_output(tmp_path):
    img = _gradient()
    one = tmp_path / "one.raw"
    many = tmp_path / "many.raw"
    _small(num_workers=1).convert_parallel(img, one)
    _small(num_workers=4).convert_parallel(img, many)
    assert one.read_bytes() == many.read_bytes()


def test_progress_reported_per_track(tmp_path):
    seen = []
    conv = _small(num_workers=2, progress_callback=seen.append)
    count = conv.convert_parallel(_gradient(), tmp_path / "t.raw")
    assert len(seen) == count
    assert seen[0] == 0
    assert seen == sorted(seen)
    assert all(0 <= p < 100 for p in seen)


def test_immediate_cancel_leaves_empty_file(tmp_path):
    out = tmp_path / "t.raw"
    conv = _small(cancel_callback=lambda: True)
    assert conv.convert_parallel(_gradient(), out) == 0
    assert out.read_bytes() == b""


def test_cancel_keeps_prefix_of_full_output(tmp_path):
    calls = []

    def cancel():
        calls.append(1)
        return len(calls) > 2

    img = _gradient()
    partial = tmp_path / "partial.raw"
    full = tmp_path / "full.raw"
    written = _small(num_workers=2, cancel_callback=cancel).convert_parallel(img, partial)
    _small(num_workers=2).convert_parallel(img, full)
    assert written == 2
    partial_bytes = partial.read_bytes()
    assert len(partial_bytes) > 0
    assert full.read_bytes().startswith(partial_bytes)
    assert len(partial_bytes) < len(full.read_bytes())


@pytest.mark.parametrize("workers", [0, 17, -1])
def test_invalid_worker_count_rejected(workers):
    with pytest.raises(ValueError):
        _small(num_workers=workers)


def test_default_worker_count_is_capped():
    conv = _small()
    assert 1 <= conv.num_workers <= 8


def test_non_positive_tr0_rejected():
    with pytest.raises(ValueError):
        MultiThreadedConverter(0, 1.0, 24.5)