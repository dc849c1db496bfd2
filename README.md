# discpic

discpic turns a picture into a raw audio track. When that track is burned
onto a CD-RW or DVD, the pattern of written data makes the picture visible
on the disc surface. It can also render a raw track back into a PNG that
shows roughly how the burned disc will look.

## Installation

```
pip install .
```

For testing, install the `test` extra (`pip install .[test]`) and run `pytest`.

## Command line

The `discpic` command has three subcommands.

### list-presets

```
discpic list-presets
```

Prints the built-in disc presets (spiral geometry for specific disc
brands), grouped into CD and DVD presets, with their `tr0`, `dtr` and `r0`
values.

### burn

```
discpic burn -i image.jpg -p verbatim-cd-rw-1 -o track.raw
discpic burn -i image.png -t dvd -p generic-dvd-r
```

Options:

- `-i/--input` — input image file (required)
- `-o/--output` — output track file (default `track.raw`)
- `-t/--type` — `cd` or `dvd` (default `cd`)
- `-p/--preset` — preset key; it must be for the chosen disc type
- `--tr0`, `--dtr`, `--r0` — explicit spiral geometry (`r0` defaults to 24.5)
- `--mix-colors` — random dithering between shades instead of the fixed pattern
- `-j/--parallel`, `--no-parallel` — multi-threaded conversion, on by default

Without `--preset`, if `--tr0` or `--dtr` is left at zero, the default
preset for the disc type is used (`verbatim-cd-rw-1` for CD,
`generic-dvd-r` for DVD). The image is grayscaled and centred on a virtual
3000×3000 disc before conversion. Ctrl+C cancels a running conversion.

Note that the two conversion modes do not write the same bytes: the
single-threaded converter (`--no-parallel`) passes every byte through the
sector interleaver and pads partial samples, while the multi-threaded one
writes the palette bytes of each track directly in spiral order.

After a successful run the command prints suggested `cdrecord`, `wodim`
or `growisofs` command lines for burning the track.

### visualize

```
discpic visualize -t track.raw -o disc_preview.png -p verbatim-cd-rw-1
```

Options: `-t/--track` (required), `-o/--output` (default
`disc_preview.png`), `-d/--type` (`cd` or `dvd`), `-p/--preset`, `--tr0`,
`--dtr`, `--r0`. Zero `tr0`/`dtr` values are filled from the preset or
from the disc type's default preset.

## Library use

```python
from discpic.presets import get_preset_by_name
from discpic.images import load_image, create_disc_image
from discpic.converter import Converter

preset = get_preset_by_name("verbatim-cd-rw-1")
img = create_disc_image(load_image("image.jpg"), "cd")
Converter(preset.tr0, preset.dtr, preset.r0, False, "cd").convert(img, "track.raw")
```

Other entry points:

- `discpic.presets` — `DiscPreset`, `get_presets()`, `get_preset_by_name()`,
  `get_default_preset()`, `format_presets()`, `list_presets()`
- `discpic.images` — `load_image()`, `create_disc_image()`,
  `process_image_for_disc()`, `ImageLoadError`
- `discpic.converter` — `Converter`, `Interleaver`, `rgb_to_gray()`,
  `choose_palette_byte()`, `ConversionCancelled`
- `discpic.converter_mt` — `MultiThreadedConverter` with `convert_parallel()`
- `discpic.visualizer` — `TrackVisualizer` with `render()` and
  `visualize_track()`
- `discpic.burning` — `detect_optical_drives()`, `check_disc_in_drive()`,
  `get_burning_command()` and `burn_audio_track()`, which run the system's
  `lsblk`, `blkid`, `dd`, `cdrecord`, `wodim` or `growisofs`

## What it does not do

- There is no graphical interface; everything goes through the command
  line or the library.
- The `discpic` command does not burn discs itself. Burning from Python is
  possible through `discpic.burning`, which needs one of `cdrecord`,
  `wodim` or `growisofs` installed; drive detection reads
  `/proc/sys/dev/cdrom/info` and uses `lsblk` and the tools' `-scanbus`
  output where available.