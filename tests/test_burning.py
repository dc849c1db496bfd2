import subprocess
from unittest import mock

import pytest

from discpic.burning import (
    BurningError,
    OpticalDrive,
    apply_scanbus_output,
    burn_audio_track,
    check_disc_in_drive,
    get_burning_command,
    parse_lsblk_output,
    parse_proc_cdrom_info,
)

PROC_TEXT = """CD-ROM information, Id: cdrom.c 3.20 2003/12/17

drive name:\t\tsr1\tsr0
drive speed:\t\t24\t24
Can write CD-R:\t\t1\t0
Can write DVD-R:\t0\t1
"""

LSBLK_TEXT = """sda  disk ATA      Samsung SSD
sr0  rom  HL-DT-ST DVDRAM GH24NSD1
sr1  rom
"""

SCANBUS_TEXT = """scsibus1:
\t1,0,0\t100) 'HL-DT-ST' 'DVDRAM GH24NSD1 ' 'RS00' Removable CD-ROM
\t1,1,0\t101) *
"""

DRIVE = OpticalDrive(device="/dev/sr0", name="sr0", is_ready=True)


def _which_only(*available):
    return lambda name: f"/usr/bin/{name}" if name in available else None


def test_parse_proc_cdrom_info():
    drives = parse_proc_cdrom_info(PROC_TEXT)
    assert [d.device for d in drives] == ["/dev/sr1", "/dev/sr0"]
    assert [d.name for d in drives] == ["sr1", "sr0"]
    assert [d.can_burn_cd for d in drives] == [True, False]
    assert [d.can_burn_dvd for d in drives] == [False, True]
    assert all(d.is_ready for d in drives)


def test_parse_proc_without_capability_lines():
    drives = parse_proc_cdrom_info("drive name:\tsr0\n")
    assert drives == [OpticalDrive(device="/dev/sr0", name="sr0", is_ready=True)]


def test_parse_lsblk_keeps_only_rom_devices():
    drives = parse_lsblk_output(LSBLK_TEXT)
    assert [d.device for d in drives] == ["/dev/sr0", "/dev/sr1"]
    assert drives[0].vendor == "HL-DT-ST"
    assert drives[0].model == "DVDRAM GH24NSD1"
    assert drives[1].vendor == ""
    assert drives[1].model == ""


def test_apply_scanbus_output_updates_drives_in_order():
    drives = [DRIVE, OpticalDrive(device="/dev/sr1", name="sr1")]
    updated = apply_scanbus_output(drives, SCANBUS_TEXT)
    assert updated[0].vendor == "HL-DT-ST"
    assert updated[0].model == "DVDRAM GH24NSD1"
    assert updated[0].can_burn_cd and updated[0].can_burn_dvd
    assert updated[1] == drives[1]
    assert drives[0].vendor == ""


def test_apply_scanbus_ignores_extra_entries():
    assert apply_scanbus_output([], SCANBUS_TEXT) == []


def test_get_burning_command_prefers_cdrecord():
    with mock.patch("shutil.which", side_effect=_which_only("cdrecord", "wodim")):
        command = get_burning_command(DRIVE, "track.raw", "cd")
    assert command == "cdrecord -audio dev=/dev/sr0 track.raw"


def test_get_burning_command_falls_back_to_wodim():
    with mock.patch("shutil.which", side_effect=_which_only("wodim")):
        command = get_burning_command(DRIVE, "track.raw", "cd")
    assert command == "wodim -audio dev=/dev/sr0 track.raw"


def test_growisofs_only_for_dvd():
    with mock.patch("shutil.which", side_effect=_which_only("growisofs")):
        assert get_burning_command(DRIVE, "track.raw", "dvd") == "growisofs -audio -Z /dev/sr0=track.raw"
        assert get_burning_command(DRIVE, "track.raw", "cd") == "No burning tool available"


def test_burn_without_tool_raises():
    with mock.patch("shutil.which", return_value=None):
        with pytest.raises(BurningError):
            burn_audio_track(DRIVE, "track.raw", "cd")


def test_burn_runs_tool():
    with mock.patch("shutil.which", side_effect=_which_only("cdrecord")), mock.patch(
        "subprocess.run"
    ) as run:
        burn_audio_track(DRIVE, "track.raw", "cd")
        expected = get_burning_command(DRIVE, "track.raw", "cd")
    args = run.call_args.args[0]
    assert args == ["cdrecord", "-audio", "dev=/dev/sr0", "track.raw"]
    assert " ".join(args) == expected
    assert run.call_count == 1


def test_burn_failure_raises():
    error = subprocess.CalledProcessError(1, ["cdrecord"])
    with mock.patch("shutil.which", side_effect=_which_only("cdrecord")), mock.patch(
        "subprocess.run", side_effect=error
    ):
        with pytest.raises(BurningError):
            burn_audio_track(DRIVE, "track.raw", "cd")


def _fake_run(blkid_output=None, dd_fails=False):
    def run(args, **kwargs):
        if args[0] == "blkid":
            if blkid_output is None:
                raise subprocess.CalledProcessError(2, args)
            return subprocess.CompletedProcess(args, 0, stdout=blkid_output, stderr="")
        if dd_fails:
            raise subprocess.CalledProcessError(1, args)
        return subprocess.CompletedProcess(args, 0)

    return run


def test_check_disc_none():
    with mock.patch("subprocess.run", side_effect=_fake_run()):
        assert check_disc_in_drive(DRIVE) == (False, "No disc detected")


def test_check_disc_data_disc():
    with mock.patch("subprocess.run", side_effect=_fake_run('TYPE="iso9660"')):
        assert check_disc_in_drive(DRIVE) == (False, "Data disc detected (not blank)")


def test_check_disc_blank():
    with mock.patch("subprocess.run", side_effect=_fake_run("", dd_fails=True)):
        assert check_disc_in_drive(DRIVE) == (True, "Blank disc ready")


def test_check_disc_readable_not_blank():
    with mock.patch("subprocess.run", side_effect=_fake_run("")):
        assert check_disc_in_drive(DRIVE) == (False, "Disc present but not blank")