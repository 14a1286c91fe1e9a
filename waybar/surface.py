"""Geometry of the layer surface that holds a bar."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

BAR_SIZE_MSG = "Bar configured (width: %s, height: %s) for output: %s"


class Layer(enum.Enum):
    BOTTOM = "bottom"
    TOP = "top"
    OVERLAY = "overlay"


class Anchor(enum.IntFlag):
    TOP = 1
    BOTTOM = 2
    LEFT = 4
    RIGHT = 8


VERTICAL_ANCHOR = Anchor.TOP | Anchor.BOTTOM
HORIZONTAL_ANCHOR = Anchor.LEFT | Anchor.RIGHT


@dataclass
class Margins:
    top: int = 0
    right: int = 0
    bottom: int = 0
    left: int = 0


class Surface:
    """Anchoring, size and exclusive zone of a bar on one output."""

    def __init__(self, output_name: str = "") -> None:
        self.output_name = output_name
        self.configured_width = 0
        self.configured_height = 0
        self.width = 0
        self.height = 0
        self.anchor = HORIZONTAL_ANCHOR | Anchor.TOP
        self.exclusive = True
        self.passthrough = False
        self.layer = Layer.BOTTOM
        self.margins = Margins()

    @property
    def vertical(self) -> bool:
        return (self.anchor & VERTICAL_ANCHOR) == VERTICAL_ANCHOR

    def set_position(self, position: str) -> None:
        """Anchor the surface to the edge named by ``position``."""
        if position == "bottom":
            self.anchor = HORIZONTAL_ANCHOR | Anchor.BOTTOM
        elif position == "left":
            self.anchor = VERTICAL_ANCHOR | Anchor.LEFT
        elif position == "right":
            self.anchor = VERTICAL_ANCHOR | Anchor.RIGHT
        else:
            self.anchor = HORIZONTAL_ANCHOR | Anchor.TOP

    def set_margins(self, margins: Margins) -> None:
        self.margins = margins

    def set_size(self, width: int, height: int) -> None:
        """Set the size requested by the configuration."""
        self.configured_width = self.width = width
        self.configured_height = self.height = height

    def exclusive_zone(self) -> int:
        """Return the exclusive zone to reserve, 0 when not exclusive.

        The zone already includes the margin of the anchored edge, so only
        the opposite margin is added.
        """
        if not self.exclusive:
            return 0
        if self.vertical:
            extra = self.margins.right if self.anchor & Anchor.LEFT else self.margins.left
            zone = self.width + extra
        else:
            extra = self.margins.bottom if self.anchor & Anchor.TOP else self.margins.top
            zone = self.height + extra
        logger.debug("Set exclusive zone %s for output %s", zone, self.output_name)
        return zone

    def surface_size(self, width: int, height: int) -> tuple[int, int]:
        """Return the size to request from the compositor for a bar size.

        The anchored axis includes the margins; an unset size on the other
        axis becomes 1 so the compositor does not pick one.
        """
        if self.vertical:
            width = width if width > 0 else 1
            if height > 1:
                height += self.margins.top + self.margins.bottom
        else:
            height = height if height > 0 else 1
            if width > 1:
                width += self.margins.right + self.margins.left
        logger.debug("Set surface size %sx%s for output %s", width, height, self.output_name)
        return width, height

    def configure(self, width: int, height: int) -> bool:
        """Apply a size sent by the compositor; tell whether it changed."""
        if width == self.width and height == self.height:
            return False
        self.width = width
        self.height = height
        logger.info(
            BAR_SIZE_MSG,
            "auto" if width == 1 else str(width),
            "auto" if height == 1 else str(height),
            self.output_name,
        )
        return True