"""Backlight module reading the backlight class of sysfs."""

from __future__ import annotations

import dataclasses
import math
import os
import re
from dataclasses import dataclass
from typing import Iterable

from waybar.module import Label

DEFAULT_ROOT = "/sys/class/backlight"

_LEADING_INT = re.compile(r"\s*([+-]?\d+)")


@dataclass
class BacklightDevice:
    """Brightness readings of one backlight device."""

    name: str
    actual: int
    max: int


def best_device(
    devices: Iterable[BacklightDevice], preferred_device: str = ""
) -> BacklightDevice | None:
    """Return the preferred device, else the one with the highest maximum."""
    devices = list(devices)
    for device in devices:
        if device.name == preferred_device:
            return device
    if not devices:
        return None
    return max(devices, key=lambda device: device.max)


def upsert_device(
    devices: list[BacklightDevice], name: str, actual: int, max: int
) -> BacklightDevice:
    """Update the device called ``name`` in ``devices``, or append it."""
    for device in devices:
        if device.name == name:
            device.actual = actual
            device.max = max
            return device
    device = BacklightDevice(name, actual, max)
    devices.append(device)
    return device


def _read_attr(path: str, attr: str) -> int:
    try:
        with open(os.path.join(path, attr), encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise RuntimeError(f"Can't read {attr} of {path}") from exc
    match = _LEADING_INT.match(text)
    if match is None:
        raise ValueError(f"Invalid value in {attr} of {path}: {text!r}")
    return int(match.group(1))


def read_device(path: str) -> BacklightDevice:
    """Read the current and maximum brightness of the device at ``path``."""
    name = os.path.basename(os.path.normpath(path))
    if not name:
        raise RuntimeError("ptr was null")
    actual_attr = "brightness" if name.startswith("amdgpu_bl") else "actual_brightness"
    actual = _read_attr(path, actual_attr)
    maximum = _read_attr(path, "max_brightness")
    return BacklightDevice(name, actual, maximum)


def enumerate_devices(
    devices: list[BacklightDevice], root: str = DEFAULT_ROOT
) -> list[BacklightDevice]:
    """Read every device under ``root`` into ``devices`` and return the list."""
    try:
        entries = sorted(os.scandir(root), key=lambda entry: entry.name)
    except OSError:
        return devices
    for entry in entries:
        if not os.path.isdir(entry.path):
            continue
        found = read_device(entry.path)
        upsert_device(devices, found.name, found.actual, found.max)
    return devices


class Backlight(Label):
    """Shows the brightness of the best backlight device in percent."""

    def __init__(self, id: str, config: dict | None, root: str = DEFAULT_ROOT) -> None:
        super().__init__(config, "backlight", id, "{percent}%", 2)
        device = self.config.get("device")
        self.preferred_device = device if isinstance(device, str) else ""
        self.root = root
        self.devices: list[BacklightDevice] = []
        self.previous_best: BacklightDevice | None = None
        self.previous_format = ""
        enumerate_devices(self.devices, self.root)
        if not self.devices:
            raise RuntimeError("No backlight found")
        self._emit()

    def update(self) -> None:
        enumerate_devices(self.devices, self.root)
        best = best_device(self.devices, self.preferred_device)
        if best is not None:
            if (
                self.previous_best is not None
                and self.previous_best == best
                and self.previous_format
                and self.previous_format == self.format
            ):
                return
            if best.max == 0:
                percent = 100
            else:
                percent = int(math.floor(best.actual * 100.0 / best.max + 0.5))
            self.markup = self.format.format(
                percent=str(percent), icon=self.get_icon(percent)
            )
            self.get_state(percent)
        else:
            if self.previous_best is None:
                return
            self.markup = ""
        self.previous_best = None if best is None else dataclasses.replace(best)
        self.previous_format = self.format
        super().update()