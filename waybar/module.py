"""Base modules of the bar: plain modules, labels and groups."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Sequence

logger = logging.getLogger(__name__)

ONCE_INTERVAL = 100_000_000

_CLICK_KEYS = {
    1: "on-click",
    2: "on-click-middle",
    3: "on-click-right",
    8: "on-click-backward",
    9: "on-click-forward",
}


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_int(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer() and -(2**31) <= value < 2**31


def _is_uint(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer() and 0 <= value < 2**32


class ScrollDirection(enum.Enum):
    NONE = "none"
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


@dataclass
class ScrollEvent:
    """A scroll event; ``direction`` of None means smooth scrolling by deltas."""

    direction: ScrollDirection | None = None
    delta_x: float = 0.0
    delta_y: float = 0.0


class Module:
    """A bar module reacting to clicks and scrolls with configured commands.

    Commands requested by user interaction are collected in ``commands`` for
    the host to run; ``listeners`` are called whenever the module asks for an
    update.
    """

    def __init__(
        self,
        config: dict | None,
        name: str,
        id: str = "",
        enable_click: bool = False,
        enable_scroll: bool = False,
    ) -> None:
        self.config: dict = config if isinstance(config, dict) else {}
        self.name = name
        self.id = id
        self.commands: list[str] = []
        self.listeners: list[Callable[[], None]] = []
        self.visible = True
        self.distance_scrolled_x = 0.0
        self.distance_scrolled_y = 0.0
        self.click_enabled = enable_click or any(
            isinstance(self.config.get(key), str) for key in _CLICK_KEYS.values()
        )
        self.scroll_enabled = enable_scroll or any(
            isinstance(self.config.get(key), str) for key in ("on-scroll-up", "on-scroll-down")
        )

    def _emit(self) -> None:
        for listener in list(self.listeners):
            listener()

    def _run(self, command: str) -> None:
        self.commands.append(command)

    def update(self) -> None:
        """Request the user-provided update handler if one is configured."""
        handler = self.config.get("on-update")
        if isinstance(handler, str):
            self._run(handler)

    def handle_toggle(self, button: int) -> bool:
        """Handle a button press."""
        key = _CLICK_KEYS.get(button)
        command = self.config.get(key) if key else None
        if isinstance(command, str) and command:
            self._run(command)
        self._emit()
        return True

    def get_scroll_dir(self, event: ScrollEvent) -> ScrollDirection:
        """Return the direction of a scroll, accumulating smooth scrolling."""
        if event.direction is not None:
            return event.direction
        self.distance_scrolled_y += event.delta_y
        self.distance_scrolled_x += event.delta_x
        threshold = self.config.get("smooth-scrolling-threshold")
        threshold = float(threshold) if _is_number(threshold) else 0.0

        direction = ScrollDirection.NONE
        if self.distance_scrolled_y < -threshold:
            direction = ScrollDirection.UP
        elif self.distance_scrolled_y > threshold:
            direction = ScrollDirection.DOWN
        elif self.distance_scrolled_x > threshold:
            direction = ScrollDirection.RIGHT
        elif self.distance_scrolled_x < -threshold:
            direction = ScrollDirection.LEFT

        if direction in (ScrollDirection.UP, ScrollDirection.DOWN):
            self.distance_scrolled_y = 0.0
        elif direction in (ScrollDirection.LEFT, ScrollDirection.RIGHT):
            self.distance_scrolled_x = 0.0
        return direction

    def handle_scroll(self, event: ScrollEvent) -> bool:
        """Handle a scroll event."""
        direction = self.get_scroll_dir(event)
        up = self.config.get("on-scroll-up")
        down = self.config.get("on-scroll-down")
        if direction is ScrollDirection.UP and isinstance(up, str):
            self._run(up)
        elif direction is ScrollDirection.DOWN and isinstance(down, str):
            self._run(down)
        self._emit()
        return True

    def tooltip_enabled(self) -> bool:
        value = self.config.get("tooltip")
        return value if isinstance(value, bool) else True


class Label(Module):
    """A module that shows formatted text."""

    def __init__(
        self,
        config: dict | None,
        name: str,
        id: str = "",
        format: str = "",
        interval: int = 0,
        ellipsize: bool = False,
        enable_click: bool = False,
        enable_scroll: bool = False,
    ) -> None:
        cfg = config if isinstance(config, dict) else {}
        super().__init__(
            cfg, name, id, isinstance(cfg.get("format-alt"), str) or enable_click, enable_scroll
        )
        configured_format = self.config.get("format")
        self.format = configured_format if isinstance(configured_format, str) else format
        configured_interval = self.config.get("interval")
        if configured_interval == "once":
            self.interval = ONCE_INTERVAL
        elif _is_uint(configured_interval):
            self.interval = int(configured_interval)
        else:
            self.interval = interval
        self.default_format = self.format
        self.alt_toggled = False

        self.label_name = name
        self.classes: set[str] = set()
        if id:
            self.classes.add(id)
        self.markup = ""
        self.tooltip: str | None = None

        self.max_width_chars = -1
        self.ellipsize = False
        self.single_line = False
        self.width_chars = -1
        self.angle = 0
        self.xalign = 0.5
        self.yalign = 0.5

        max_length = self.config.get("max-length")
        if _is_uint(max_length):
            self.max_width_chars = int(max_length)
            self.ellipsize = True
            self.single_line = True
        elif ellipsize and self.max_width_chars == -1:
            self.ellipsize = True
            self.single_line = True

        min_length = self.config.get("min-length")
        if _is_uint(min_length):
            self.width_chars = int(min_length)

        rotate = self.config.get("rotate")
        if _is_uint(rotate):
            self.angle = int(rotate)

        align = self.config.get("align")
        if _is_number(align):
            if self.angle in (90, 270):
                self.yalign = float(align)
            else:
                self.xalign = float(align)

    def get_icon(
        self, percentage: int, alt: str | Sequence[str] = "", max: int = 0
    ) -> str:
        """Pick an icon from ``format-icons`` by alternative and percentage."""
        icons = self.config.get("format-icons")
        if isinstance(icons, dict):
            alts = [alt] if isinstance(alt, str) else list(alt)
            chosen = next(
                (a for a in alts if a and isinstance(icons.get(a), (str, list))), "default"
            )
            icons = icons.get(chosen)
        if isinstance(icons, list) and icons:
            size = len(icons)
            step = (max or 100) // size
            index = size - 1 if step == 0 else min(max_(percentage, 0) // step, size - 1)
            icons = icons[index]
        return icons if isinstance(icons, str) else ""

    def get_state(self, value: int, lesser: bool = False) -> str:
        """Return the state matching ``value`` and update the style classes."""
        states = self.config.get("states")
        if not isinstance(states, dict):
            return ""
        candidates = sorted(
            ((key, int(level)) for key, level in states.items() if _is_uint(level)),
            key=lambda item: item[0],
        )
        candidates.sort(key=lambda item: item[1], reverse=not lesser)
        valid = ""
        for state, level in candidates:
            matches = value <= level if lesser else value >= level
            if matches and not valid:
                self.classes.add(state)
                valid = state
            else:
                self.classes.discard(state)
        return valid

    def handle_toggle(self, button: int) -> bool:
        click = self.config.get("format-alt-click")
        if _is_uint(click) and button == click:
            self.alt_toggled = not self.alt_toggled
            alt_format = self.config.get("format-alt")
            if self.alt_toggled and isinstance(alt_format, str):
                self.format = alt_format
            else:
                self.format = self.default_format
        return super().handle_toggle(button)


def max_(a: int, b: int) -> int:
    return a if a > b else b


class Group(Module):
    """A container module holding other modules."""

    def __init__(self, name: str, vertical: bool, config: dict | None) -> None:
        super().__init__(config, name, "", False, False)
        self.orientation = "horizontal" if vertical else "vertical"
        self.modules: list[Module] = []

    def update(self) -> None:
        """Groups have nothing to refresh."""