"""Clock module with time zones and a month calendar tooltip."""

from __future__ import annotations

import calendar
import contextlib
import datetime as dt
import locale
import logging
import unicodedata
from typing import Iterator
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from waybar.module import Label, ScrollDirection, ScrollEvent

logger = logging.getLogger(__name__)

CALENDAR_PLACEHOLDER = "calendar"

_REFERENCE_MONDAY = dt.date(2024, 1, 1)


@contextlib.contextmanager
def _time_locale(name: str) -> Iterator[None]:
    saved = locale.setlocale(locale.LC_TIME)
    try:
        locale.setlocale(locale.LC_TIME, name)
        yield
    finally:
        locale.setlocale(locale.LC_TIME, saved)


def _column_width(text: str) -> int:
    return sum(2 if unicodedata.east_asian_width(char) in ("W", "F") else 1 for char in text)


def _locate_zone(name: str) -> ZoneInfo:
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone: {name}") from exc


class Clock(Label):
    """Shows the time in one of several time zones."""

    def __init__(self, id: str, config: dict | None) -> None:
        super().__init__(config, "clock", id, "{:%H:%M}", 60, False, False, True)
        self.time_zones: list[ZoneInfo | None] = []
        self.current_time_zone_idx = 0

        zones = self.config.get("timezones")
        zone = self.config.get("timezone")
        if isinstance(zones, list) and zones:
            for name in zones:
                self.time_zones.append(
                    _locate_zone(name) if isinstance(name, str) and name else None
                )
        elif isinstance(zone, str) and zone:
            self.time_zones.append(_locate_zone(zone))
        if not self.time_zones:
            self.time_zones.append(None)

        if not self.is_timezone_fixed():
            logger.debug("No time zone configured, showing local time")

        tooltip_format = self.config.get("tooltip-format")
        self.is_calendar_in_tooltip = isinstance(tooltip_format, str) and (
            "{" + CALENDAR_PLACEHOLDER + "}" in "".join(tooltip_format.split())
        )

        configured_locale = self.config.get("locale")
        self.locale = configured_locale if isinstance(configured_locale, str) else ""
        try:
            with _time_locale(self.locale):
                pass
        except locale.Error as exc:
            raise ValueError(f"Unknown locale: {self.locale}") from exc

        self.cached_calendar_day: dt.date | None = None
        self.cached_calendar_text = ""

    def current_timezone(self) -> dt.tzinfo:
        """Return the selected time zone, or the local one."""
        zone = self.time_zones[self.current_time_zone_idx]
        if zone is not None:
            return zone
        local = dt.datetime.now().astimezone().tzinfo
        assert local is not None
        return local

    def is_timezone_fixed(self) -> bool:
        return self.time_zones[self.current_time_zone_idx] is not None

    def update(self, now: dt.datetime | None = None) -> None:
        """Render the time ``now`` (the current time by default)."""
        if now is None:
            now = dt.datetime.now(dt.timezone.utc)
        elif now.tzinfo is None:
            now = now.astimezone()
        now = now.replace(microsecond=0)
        zone = self.time_zones[self.current_time_zone_idx]
        zoned = now.astimezone(zone) if zone is not None else now.astimezone()

        with _time_locale(self.locale):
            text = self.format.format(zoned)
            self.markup = text
            tooltip_format = self.config.get("tooltip-format")
            if self.tooltip_enabled() and isinstance(tooltip_format, str):
                lines = self.calendar_text(zoned.date()) if self.is_calendar_in_tooltip else ""
                text = tooltip_format.format(zoned, **{CALENDAR_PLACEHOLDER: lines})
        self.tooltip = text
        super().update()

    def handle_scroll(self, event: ScrollEvent) -> bool:
        """Switch between the configured time zones."""
        if isinstance(self.config.get("on-scroll-up"), str) or isinstance(
            self.config.get("on-scroll-down"), str
        ):
            return super().handle_scroll(event)

        direction = self.get_scroll_dir(event)
        if direction not in (ScrollDirection.UP, ScrollDirection.DOWN):
            return True
        count = len(self.time_zones)
        if count == 1:
            return True
        step = 1 if direction is ScrollDirection.UP else -1
        self.current_time_zone_idx = (self.current_time_zone_idx + step) % count
        self.update()
        return True

    def calendar_text(self, day: dt.date) -> str:
        """Render the month of ``day`` as a calendar, highlighting ``day``."""
        if isinstance(day, dt.datetime):
            day = day.date()
        if self.cached_calendar_day == day:
            return self.cached_calendar_text

        first_dow = self.first_day_of_week()
        parts = [self.weekdays_header(first_dow)]
        weekday = day.replace(day=1).weekday()
        empty_days = (weekday - first_dow) % 7
        if empty_days:
            parts.append(" " * (empty_days * 3 - 1))

        last_day = calendar.monthrange(day.year, day.month)[1]
        today_format = self.config.get("today-format")
        for number in range(1, last_day + 1):
            if weekday != first_dow:
                parts.append(" ")
            elif number != 1:
                parts.append("\n")
            text = f"{number:2d}"
            if number == day.day:
                if isinstance(today_format, str):
                    text = today_format.format(text)
                else:
                    text = f"<b><u>{text}</u></b>"
            parts.append(text)
            weekday = (weekday + 1) % 7

        result = "".join(parts)
        self.cached_calendar_day = day
        self.cached_calendar_text = result
        return result

    def weekdays_header(self, first_dow: int) -> str:
        """Return the abbreviated weekday names, two columns each, and a newline."""
        names: list[str] = []
        with _time_locale(self.locale):
            for offset in range(7):
                weekday = (first_dow + offset) % 7
                name = (_REFERENCE_MONDAY + dt.timedelta(days=weekday)).strftime("%a")
                while _column_width(name) > 2:
                    name = name[:-1]
                names.append(" " * (2 - _column_width(name)) + name)
        return " ".join(names) + "\n"

    def first_day_of_week(self) -> int:
        """Return the first day of the week (Monday is 0); weeks start on Sunday."""
        return calendar.SUNDAY