"""User-defined module showing the output of a command."""

from __future__ import annotations

import json
import signal
from typing import Any

from waybar.module import Label

_SIGRTMIN = getattr(signal, "SIGRTMIN", 34)

_MARKUP_ESCAPES = {
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "'": "&#39;",
    '"': "&quot;",
}


def _escape_markup(text: str) -> str:
    return "".join(_MARKUP_ESCAPES.get(char, char) for char in text)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_uint(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer() and 0 <= value < 2**32


def _is_int(value: Any) -> bool:
    return _is_number(value) and float(value).is_integer() and -(2**31) <= value < 2**31


def _as_string(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if _is_number(value):
        return str(value)
    raise ValueError("Type is not convertible to string")


def _lines(text: str) -> list[str]:
    lines = text.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


class Custom(Label):
    """Shows the output of a user command, as raw lines or as JSON.

    The host runs the configured command and hands its result to
    ``set_output``; ``wakeups`` counts the requests to run it again early.
    """

    def __init__(self, name: str, id: str, config: dict | None) -> None:
        super().__init__(config, "custom-" + name, id, "{}")
        self.custom_name = name
        self.exit_code = 0
        self.out = ""
        self.text = ""
        self.alt = ""
        self.tooltip_text = ""
        self.output_classes: list[str] = []
        self.percentage = 0
        self.wakeups = 0
        self.continuous = self.interval == 0 and isinstance(self.config.get("exec"), str)
        self._emit()

    def set_output(self, exit_code: int, out: str) -> None:
        """Record the result of a run of the command and request an update."""
        self.exit_code = exit_code
        self.out = out
        self._emit()

    def refresh(self, sig: int) -> bool:
        """Wake the command if ``sig`` is the configured real-time signal."""
        offset = self.config.get("signal")
        offset = int(offset) if _is_int(offset) else 0
        if sig == _SIGRTMIN + offset:
            self.wakeups += 1
            return True
        return False

    def handle_event(self) -> bool:
        """Wake the command after user interaction unless disabled."""
        exec_on_event = self.config.get("exec-on-event")
        if not isinstance(exec_on_event, bool) or exec_on_event:
            self.wakeups += 1
            return True
        return False

    def handle_scroll(self, event) -> bool:
        result = super().handle_scroll(event)
        self.handle_event()
        return result

    def handle_toggle(self, button: int) -> bool:
        result = super().handle_toggle(button)
        self.handle_event()
        return result

    def _escape(self, text: str) -> str:
        return _escape_markup(text) if self.config.get("escape") is True else text

    def parse_output_raw(self) -> None:
        """Read text, tooltip and class from the first three output lines."""
        for index, line in enumerate(_lines(self.out)[:3]):
            if index == 0:
                self.text = self._escape(line)
                self.tooltip_text = line
                self.output_classes = []
            elif index == 1:
                self.tooltip_text = line
            else:
                self.output_classes.append(line)

    def parse_output_json(self) -> None:
        """Read text, alt, tooltip, class and percentage from the first JSON line."""
        self.output_classes = []
        lines = _lines(self.out)
        if not lines:
            return
        parsed = json.loads(lines[0])
        if parsed is None:
            parsed = {}
        if not isinstance(parsed, dict):
            raise ValueError("Custom module output is not a JSON object")

        self.text = self._escape(_as_string(parsed.get("text")))
        self.alt = self._escape(_as_string(parsed.get("alt")))
        self.tooltip_text = _as_string(parsed.get("tooltip"))
        classes = parsed.get("class")
        if isinstance(classes, str):
            self.output_classes.append(classes)
        elif isinstance(classes, list):
            self.output_classes.extend(_as_string(item) for item in classes)
        percentage = parsed.get("percentage")
        if _is_uint(percentage) and _as_string(percentage):
            self.percentage = int(percentage)
        else:
            self.percentage = 0

    def update(self) -> None:
        has_command = isinstance(self.config.get("exec"), str) or isinstance(
            self.config.get("exec-if"), str
        )
        if has_command and (not self.out or self.exit_code != 0):
            self.visible = False
        else:
            if self.config.get("return-type") == "json":
                self.parse_output_json()
            else:
                self.parse_output_raw()
            text = self.format.format(
                self.text,
                alt=self.alt,
                icon=self.get_icon(self.percentage, self.alt),
                percentage=self.percentage,
            )
            if not text:
                self.visible = False
            else:
                self.markup = text
                if self.tooltip_enabled():
                    self.tooltip = text if self.text == self.tooltip_text else self.tooltip_text
                self.classes = set(self.output_classes)
                self.visible = True
        super().update()