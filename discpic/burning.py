"""Optical drive discovery and burning through external command-line tools."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

PROC_CDROM_INFO = Path("/proc/sys/dev/cdrom/info")

_COMMON_DEVICES = (
    "/dev/sr0", "/dev/sr1", "/dev/sr2", "/dev/sr3",
    "/dev/cdrom", "/dev/dvd", "/dev/cdrw", "/dev/dvdrw",
)

_SCANBUS_LINE = re.compile(r"(\d+,\d+,\d+)\s+\d+\)\s+'([^']+)'\s+'([^']+)'")

NO_TOOL_MESSAGE = "No burning tool available"


class BurningError(Exception):
    """Raised when a track cannot be burned."""


@dataclass
class OpticalDrive:
    """An optical drive that may be able to burn discs."""

    device: str
    name: str = ""
    vendor: str = ""
    model: str = ""
    can_burn_cd: bool = False
    can_burn_dvd: bool = False
    is_ready: bool = False


def parse_proc_cdrom_info(text: str) -> list[OpticalDrive]:
    """Parse the kernel's cdrom info table into drives."""
    names: list[str] = []
    write_cd: list[bool] = []
    write_dvd: list[bool] = []
    for raw in text.splitlines():
        line = raw.strip()
        if line.startswith("drive name:"):
            names.extend("/dev/" + name for name in line.split()[2:])
        elif line.startswith("Can write CD-R:"):
            write_cd.extend(value == "1" for value in line.split()[3:])
        elif line.startswith("Can write DVD-R:"):
            write_dvd.extend(value == "1" for value in line.split()[3:])

    drives = []
    for index, device in enumerate(names):
        drives.append(
            OpticalDrive(
                device=device,
                name=Path(device).name,
                can_burn_cd=write_cd[index] if index < len(write_cd) else False,
                can_burn_dvd=write_dvd[index] if index < len(write_dvd) else False,
                is_ready=True,
            )
        )
    return drives


def parse_lsblk_output(text: str) -> list[OpticalDrive]:
    """Parse `lsblk -d -n -o NAME,TYPE,VENDOR,MODEL` output, keeping rom devices."""
    drives = []
    for line in text.splitlines():
        fields = line.split()
        if len(fields) >= 2 and fields[1] == "rom":
            drives.append(
                OpticalDrive(
                    device="/dev/" + fields[0],
                    name=fields[0],
                    vendor=fields[2] if len(fields) > 2 else "",
                    model=" ".join(fields[3:]),
                    is_ready=True,
                )
            )
    return drives


def apply_scanbus_output(drives: list[OpticalDrive], text: str) -> list[OpticalDrive]:
    """Return drives updated, in order, with vendor and model from a -scanbus listing."""
    result = list(drives)
    index = 0
    for line in text.splitlines():
        match = _SCANBUS_LINE.search(line)
        if match is None or index >= len(result):
            continue
        result[index] = replace(
            result[index],
            vendor=match.group(2).strip(),
            model=match.group(3).strip(),
            can_burn_cd=True,
            can_burn_dvd=True,
        )
        index += 1
    return result


def _run_output(args: list[str]) -> Optional[str]:
    try:
        completed = subprocess.run(args, check=True, capture_output=True, text=True)
    except (OSError, subprocess.CalledProcessError):
        return None
    return completed.stdout


def _detect_from_proc() -> list[OpticalDrive]:
    try:
        text = PROC_CDROM_INFO.read_text()
    except OSError:
        return []
    return parse_proc_cdrom_info(text)


def _detect_from_lsblk() -> Optional[list[OpticalDrive]]:
    columns = ["lsblk", "-d", "-n", "-o", "NAME,TYPE,VENDOR,MODEL"]
    output = _run_output(columns + ["/dev/sr*"])
    if output is None:
        output = _run_output(columns)
    if output is None:
        return None
    return parse_lsblk_output(output)


def _detect_from_devices() -> list[OpticalDrive]:
    return [
        OpticalDrive(device=device, name=Path(device).name, is_ready=True)
        for device in _COMMON_DEVICES
        if Path(device).exists()
    ]


def detect_optical_drives() -> list[OpticalDrive]:
    """Find optical drives via /proc, lsblk and common device paths."""
    drives = _detect_from_proc()

    lsblk_drives = _detect_from_lsblk()
    if lsblk_drives is not None:
        if not drives:
            drives = lsblk_drives
        else:
            by_device = {d.device: d for d in lsblk_drives}
            drives = [
                replace(d, name=by_device[d.device].name)
                if not d.name and d.device in by_device
                else d
                for d in drives
            ]

    if not drives:
        drives = _detect_from_devices()

    for tool in ("cdrecord", "wodim"):
        output = _run_output([tool, "-scanbus"])
        if output is not None:
            drives = apply_scanbus_output(drives, output)
            break

    return drives


def _burn_command(drive: OpticalDrive, track_file: str, disc_type: str) -> Optional[list[str]]:
    if shutil.which("cdrecord"):
        return ["cdrecord", "-audio", f"dev={drive.device}", str(track_file)]
    if shutil.which("wodim"):
        return ["wodim", "-audio", f"dev={drive.device}", str(track_file)]
    if shutil.which("growisofs") and disc_type == "dvd":
        return ["growisofs", "-audio", f"-Z {drive.device}={track_file}"]
    return None


def burn_audio_track(drive: OpticalDrive, track_file, disc_type: str) -> None:
    """Burn the track to the drive, showing the tool's output."""
    command = _burn_command(drive, track_file, disc_type)
    if command is None:
        raise BurningError("no suitable burning tool found (cdrecord, wodim, or growisofs)")
    try:
        subprocess.run(command, check=True)
    except (OSError, subprocess.CalledProcessError) as exc:
        raise BurningError(f"burning failed: {exc}") from exc


def check_disc_in_drive(drive: OpticalDrive) -> tuple[bool, str]:
    """Return whether a blank disc is ready, with a status message."""
    try:
        probe = subprocess.run(
            ["blkid", "-p", drive.device], check=True, capture_output=True, text=True
        )
    except (OSError, subprocess.CalledProcessError):
        return False, "No disc detected"

    if "iso9660" in probe.stdout:
        return False, "Data disc detected (not blank)"

    try:
        subprocess.run(
            ["dd", f"if={drive.device}", "bs=1", "count=1"],
            check=True,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
    except (OSError, subprocess.CalledProcessError):
        return True, "Blank disc ready"
    return False, "Disc present but not blank"


def get_burning_command(drive: OpticalDrive, track_file, disc_type: str) -> str:
    """Return the command line that burning would run, or a notice that none is available."""
    command = _burn_command(drive, track_file, disc_type)
    if command is None:
        return NO_TOOL_MESSAGE
    return " ".join(command)