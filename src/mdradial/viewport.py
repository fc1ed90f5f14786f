"""Zoom/pan camera over laid-out nodes."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from .config import ViewportConfig
from .layout import LayoutNode

logger = logging.getLogger(__name__)


class ViewportMode(str, Enum):
    IDLE = "idle"
    PANNING = "panning"


@dataclass(frozen=True)
class ViewportState:
    scale: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"scale": self.scale, "panX": self.pan_x, "panY": self.pan_y}


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> Tuple[float, float]:
        return (self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2

    def expanded(self, dx: float, dy: float) -> "Bounds":
        return Bounds(self.min_x - dx, self.min_y - dy, self.max_x + dx, self.max_y + dy)

    def to_dict(self) -> Dict[str, float]:
        return {"minX": self.min_x, "minY": self.min_y, "maxX": self.max_x, "maxY": self.max_y}


def content_bounds(nodes: Iterable[LayoutNode]) -> Optional[Bounds]:
    """Union of the node rectangles, or None when there are no nodes."""
    bounds: Optional[Bounds] = None
    for node in nodes:
        left, top, right, bottom = node.rect
        if bounds is None:
            bounds = Bounds(left, top, right, bottom)
        else:
            bounds = Bounds(
                min(bounds.min_x, left),
                min(bounds.min_y, top),
                max(bounds.max_x, right),
                max(bounds.max_y, bottom),
            )
    return bounds


class ViewportController:
    """Scale and pan for a renderer applying ``translate(pan) scale(scale)``.

    Pointer drags go through ``begin_pan``/``move_pointer``/``end_pan``; every
    scale change is clamped to ``[min_scale, max_scale]`` and out-of-range
    requests never raise.
    """

    def __init__(self, config: Optional[ViewportConfig] = None) -> None:
        self.config = config or ViewportConfig()
        self.scale = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0
        self.mode = ViewportMode.IDLE
        self._last_pointer: Optional[Tuple[float, float]] = None

    @property
    def state(self) -> ViewportState:
        return ViewportState(scale=self.scale, pan_x=self.pan_x, pan_y=self.pan_y)

    def clamp(self, scale: float) -> float:
        return max(self.config.min_scale, min(self.config.max_scale, scale))

    def zoom_in(self) -> float:
        self.scale = self.clamp(self.scale * self.config.zoom_factor)
        return self.scale

    def zoom_out(self) -> float:
        self.scale = self.clamp(self.scale / self.config.zoom_factor)
        return self.scale

    def wheel(self, delta_y: float) -> float:
        if delta_y > 0:
            self.scale = self.clamp(self.scale * self.config.wheel_out_factor)
        elif delta_y < 0:
            self.scale = self.clamp(self.scale * self.config.wheel_in_factor)
        return self.scale

    def begin_pan(self, x: float, y: float) -> None:
        self.mode = ViewportMode.PANNING
        self._last_pointer = (x, y)

    def move_pointer(self, x: float, y: float) -> bool:
        if self.mode is not ViewportMode.PANNING or self._last_pointer is None:
            return False
        last_x, last_y = self._last_pointer
        self._last_pointer = (x, y)
        return self.pan_by(x - last_x, y - last_y)

    def end_pan(self) -> None:
        self.mode = ViewportMode.IDLE
        self._last_pointer = None

    def pan_by(self, dx_screen: float, dy_screen: float) -> bool:
        # Screen deltas are divided by scale so the drag speed in world units
        # does not depend on the zoom level.
        if self.mode is not ViewportMode.PANNING:
            return False
        self.pan_x += dx_screen / self.scale
        self.pan_y += dy_screen / self.scale
        return True

    def fit_to_content(
        self, nodes: Iterable[LayoutNode], container_size: Tuple[float, float]
    ) -> bool:
        container_w, container_h = container_size
        bounds = content_bounds(nodes)
        if bounds is None or container_w <= 0 or container_h <= 0:
            return False
        box = bounds.expanded(
            self.config.nominal_node_width * self.config.margin_ratio,
            self.config.nominal_node_height * self.config.margin_ratio,
        )
        fitted = min(container_w / box.width, container_h / box.height, self.config.max_scale)
        self.scale = self.clamp(fitted * self.config.fit_padding)
        center_x, center_y = box.center
        self.pan_x = container_w / 2 - center_x * self.scale
        self.pan_y = container_h / 2 - center_y * self.scale
        logger.debug("fit %s into %sx%s -> %s", bounds, container_w, container_h, self.state)
        return True

    def reset_view(self) -> None:
        self.scale = 1.0
        self.pan_x = 0.0
        self.pan_y = 0.0

    def world_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return self.pan_x + x * self.scale, self.pan_y + y * self.scale

    def screen_to_world(self, x: float, y: float) -> Tuple[float, float]:
        return (x - self.pan_x) / self.scale, (y - self.pan_y) / self.scale

    def transform(self) -> str:
        return f"translate({_fmt(self.pan_x)}, {_fmt(self.pan_y)}) scale({_fmt(self.scale)})"


def _fmt(value: float) -> str:
    if math.isclose(value, round(value)):
        return str(int(round(value)))
    return f"{value:.3f}".rstrip("0").rstrip(".")


__all__ = [
    "Bounds",
    "ViewportController",
    "ViewportMode",
    "ViewportState",
    "content_bounds",
]
