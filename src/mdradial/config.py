"""Layout and viewport configuration."""
from __future__ import annotations

import json
import math
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, model_validator

DEFAULT_CONTAINER_WIDTH = 1200.0
DEFAULT_CONTAINER_HEIGHT = 800.0

_SETTINGS = ConfigDict(frozen=True, extra="forbid", strict=True, allow_inf_nan=False)


class ConfigError(ValueError):
    """Raised for unknown keys or out-of-range values in a configuration mapping."""


def _config_error(source: str, exc: ValidationError) -> ConfigError:
    problems = []
    for error in exc.errors():
        location = ".".join(str(part) for part in error["loc"]) or "value"
        problems.append(f"{location}: {error['msg']}")
    return ConfigError(f"{source}: " + "; ".join(problems))


class LayoutConfig(BaseModel):
    model_config = _SETTINGS

    width: float = Field(DEFAULT_CONTAINER_WIDTH, gt=0)
    height: float = Field(DEFAULT_CONTAINER_HEIGHT, gt=0)
    center_x: Optional[float] = None
    center_y: Optional[float] = None

    node_width: float = Field(180.0, gt=0)
    node_height: float = Field(60.0, gt=0)
    min_node_width: float = Field(80.0, ge=0)
    min_node_height: float = Field(40.0, ge=0)
    max_growth: float = Field(1.5, ge=1)
    text_padding_x: float = Field(12.0, ge=0)
    text_padding_y: float = Field(10.0, ge=0)
    font_family: str = "sans-serif"
    font_path: Optional[str] = None

    level_spacing: float = Field(280.0, gt=0)
    radial_factor: float = Field(2.8, gt=0)
    min_angle: float = Field(0.5, ge=0)
    fan_span: float = Field(math.pi * 1.4, ge=0)
    vertical_spacing: float = Field(120.0, ge=0)
    horizontal_offset: float = Field(500.0, ge=0)
    bullet_threshold: int = Field(2, ge=1)

    subsection_arc: float = Field(math.pi * 0.8, ge=0)
    subsection_radius_factor: float = Field(1.2, gt=0)
    subitem_arc: float = Field(math.pi * 0.6, ge=0)
    subitem_radius_factor: float = Field(0.8, gt=0)

    @property
    def center(self) -> Tuple[float, float]:
        cx = self.center_x if self.center_x is not None else self.width / 2
        cy = self.center_y if self.center_y is not None else self.height / 2
        return cx, cy

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "LayoutConfig":
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise _config_error("layout", exc) from exc

    def with_container(self, width: Optional[float], height: Optional[float]) -> "LayoutConfig":
        values = self.model_dump()
        if width is not None:
            values["width"] = float(width)
        if height is not None:
            values["height"] = float(height)
        return type(self).from_mapping(values)


class ViewportConfig(BaseModel):
    model_config = _SETTINGS

    min_scale: float = Field(0.1, gt=0)
    max_scale: float = Field(3.0, gt=0)
    zoom_factor: float = Field(1.2, gt=1)
    wheel_in_factor: float = Field(1.1, gt=1)
    wheel_out_factor: float = Field(0.9, gt=0, lt=1)
    fit_padding: float = Field(0.95, gt=0)
    margin_ratio: float = Field(0.8, ge=0)
    nominal_node_width: float = Field(180.0, gt=0)
    nominal_node_height: float = Field(60.0, gt=0)

    @model_validator(mode="after")
    def _check_scale_range(self) -> "ViewportConfig":
        if self.max_scale < self.min_scale:
            raise ValueError("max_scale must be >= min_scale")
        return self

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "ViewportConfig":
        try:
            return cls.model_validate(values)
        except ValidationError as exc:
            raise _config_error("viewport", exc) from exc


class ConfigFile(BaseModel):
    """Top level of a ``--config`` JSON file; sections stay raw until validated."""

    model_config = _SETTINGS

    layout: Dict[str, Any] = Field(default_factory=dict)
    viewport: Dict[str, Any] = Field(default_factory=dict)


def load_config_file(path: Path) -> Tuple[LayoutConfig, ViewportConfig]:
    """Read ``{"layout": {...}, "viewport": {...}}`` from a JSON file.

    ``OSError`` and ``UnicodeDecodeError`` from reading the file propagate.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"invalid JSON in {path}: {exc}") from exc
    try:
        sections = ConfigFile.model_validate(payload)
    except ValidationError as exc:
        raise _config_error(str(path), exc) from exc
    return LayoutConfig.from_mapping(sections.layout), ViewportConfig.from_mapping(sections.viewport)


__all__ = [
    "ConfigError",
    "ConfigFile",
    "DEFAULT_CONTAINER_HEIGHT",
    "DEFAULT_CONTAINER_WIDTH",
    "LayoutConfig",
    "ViewportConfig",
    "load_config_file",
]
