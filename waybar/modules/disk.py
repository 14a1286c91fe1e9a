"""Disk usage module."""

from __future__ import annotations

import os

from waybar.module import Label

_BINARY_PREFIXES = ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei")


def format_size(value: int, unit: str) -> str:
    """Format an amount with a binary prefix, e.g. ``1.5GiB``."""
    amount = float(value)
    index = 0
    while amount >= 1024 and index < len(_BINARY_PREFIXES) - 1:
        amount /= 1024
        index += 1
    if index == 0:
        return f"{int(value)}{unit}"
    return f"{amount:.1f}{_BINARY_PREFIXES[index]}{unit}"


class Disk(Label):
    """Shows the space used and free on a file system."""

    def __init__(self, id: str, config: dict | None) -> None:
        super().__init__(config, "disk", id, "{}%", 30)
        path = self.config.get("path")
        self.path = path if isinstance(path, str) else "/"

    def update(self) -> None:
        try:
            stats = os.statvfs(self.path)
        except OSError:
            self.visible = False
            return

        blocks = stats.f_blocks
        used_blocks = blocks - stats.f_bfree
        free = format_size(stats.f_bavail * stats.f_frsize, "B")
        used = format_size(used_blocks * stats.f_frsize, "B")
        total = format_size(blocks * stats.f_frsize, "B")
        percentage_used = used_blocks * 100 // blocks if blocks else 0
        percentage_free = stats.f_bavail * 100 // blocks if blocks else 0

        values = {
            "free": free,
            "percentage_free": percentage_free,
            "used": used,
            "percentage_used": percentage_used,
            "total": total,
            "path": self.path,
        }

        fmt = self.format
        state = self.get_state(percentage_used)
        state_format = self.config.get(f"format-{state}") if state else None
        if isinstance(state_format, str):
            fmt = state_format

        if not fmt:
            self.visible = False
        else:
            self.visible = True
            self.markup = fmt.format(percentage_free, **values)

        if self.tooltip_enabled():
            tooltip_format = self.config.get("tooltip-format")
            if not isinstance(tooltip_format, str):
                tooltip_format = "{used} used out of {total} on {path} ({percentage_used}%)"
            self.tooltip = tooltip_format.format(percentage_free, **values)
        super().update()