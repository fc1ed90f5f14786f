"""Label wrapping, Pillow text measurement and node box sizing."""
from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from PIL import ImageFont

from .config import LayoutConfig

GENERIC_FONT_FALLBACKS = {
    "sans-serif": ["Helvetica", "Arial", "Liberation Sans", "DejaVu Sans"],
    "serif": ["Times New Roman", "Times", "Liberation Serif", "DejaVu Serif"],
    "monospace": ["Courier New", "Courier", "Liberation Mono", "DejaVu Sans Mono"],
}

LINE_HEIGHT_EM = 1.2


class NodeRole(str, Enum):
    TITLE = "title"
    SECTION = "section"
    SUBSECTION = "subsection"
    ITEM = "item"
    SUBITEM = "subitem"


@dataclass(frozen=True)
class RoleStyle:
    width_factor: float
    height_factor: float
    max_chars: int
    font_size: float


ROLE_STYLES: Dict[NodeRole, RoleStyle] = {
    NodeRole.TITLE: RoleStyle(1.2, 1.2, 20, 16.0),
    NodeRole.SECTION: RoleStyle(1.0, 1.0, 15, 14.0),
    NodeRole.SUBSECTION: RoleStyle(0.9, 0.9, 12, 13.0),
    NodeRole.ITEM: RoleStyle(0.8, 0.8, 12, 12.0),
    NodeRole.SUBITEM: RoleStyle(0.7, 0.7, 12, 11.0),
}


@dataclass(frozen=True)
class BoxSize:
    width: float
    height: float
    lines: Tuple[str, ...]
    font_size: float


class TextMeasurer:
    """Caches Pillow fonts and exposes line width helpers."""

    FONT_DIRS = [
        Path("/System/Library/Fonts"),
        Path("/System/Library/Fonts/Supplemental"),
        Path("/Library/Fonts"),
        Path("~/Library/Fonts").expanduser(),
        Path("/usr/share/fonts"),
        Path("/usr/local/share/fonts"),
        Path("C:/Windows/Fonts"),
    ]

    def __init__(self) -> None:
        self._font_cache: Dict[Tuple[str, int], ImageFont.ImageFont] = {}
        self._font_paths: Dict[str, Optional[str]] = {}

    def font(self, size: float, family: str, explicit_path: Optional[str] = None):
        key_size = max(1, int(round(size)))
        cache_key = ((explicit_path or family).lower(), key_size)
        if cache_key in self._font_cache:
            return self._font_cache[cache_key]

        candidates: List[str] = []
        if explicit_path:
            candidates.append(explicit_path)
        for fam in GENERIC_FONT_FALLBACKS.get(family.lower(), [family]):
            resolved = self._locate_font(fam)
            if resolved:
                candidates.append(resolved)
        candidates.append("DejaVuSans.ttf")

        font = None
        for candidate in candidates:
            try:
                font = ImageFont.truetype(candidate, key_size)
                break
            except OSError:
                continue
        if font is None:
            font = ImageFont.load_default(size=key_size)

        self._font_cache[cache_key] = font
        return font

    def measure(self, text: str, size: float, family: str, explicit_path: Optional[str] = None) -> float:
        return float(self.font(size, family, explicit_path).getlength(text))

    def _locate_font(self, family: str) -> Optional[str]:
        key = family.lower()
        if key in self._font_paths:
            return self._font_paths[key]
        normalized = re.sub(r"[^a-z0-9]+", "", key)
        best_match: Optional[Tuple[int, str]] = None
        for directory in self.FONT_DIRS:
            if not directory.exists():
                continue
            try:
                for path in directory.rglob("*.ttf"):
                    stem = re.sub(r"[^a-z0-9]+", "", path.stem.lower())
                    if stem == normalized:
                        score = 0
                    elif stem.startswith(normalized):
                        score = 1
                    else:
                        continue
                    if best_match is None or score < best_match[0]:
                        best_match = (score, str(path))
            except OSError:
                continue
        resolved = best_match[1] if best_match else None
        self._font_paths[key] = resolved
        return resolved


_TEXT_MEASURER = TextMeasurer()


def wrap_label(text: str, max_chars: int) -> List[str]:
    """Greedy word wrap at ``max_chars``; words longer than the budget are split."""
    lines: List[str] = []
    current = ""
    for word in text.split():
        while len(word) > max_chars:
            if current:
                lines.append(current)
                current = ""
            lines.append(word[:max_chars])
            word = word[max_chars:]
        if not word:
            continue
        candidate = f"{current} {word}" if current else word
        if len(candidate) > max_chars and current:
            lines.append(current)
            current = word
        else:
            current = candidate
    if current:
        lines.append(current)
    return lines or [""]


def size_box(
    text: str,
    role: NodeRole,
    config: LayoutConfig,
    measurer: Optional[TextMeasurer] = None,
) -> BoxSize:
    """Box for a node label: role base size, grown to fit wrapped text, floored."""
    style = ROLE_STYLES[role]
    measurer = measurer or _TEXT_MEASURER
    lines = wrap_label(text, style.max_chars)

    base_width = config.node_width * style.width_factor
    base_height = config.node_height * style.height_factor

    text_width = max(
        measurer.measure(line, style.font_size, config.font_family, config.font_path)
        for line in lines
    )
    text_height = len(lines) * style.font_size * LINE_HEIGHT_EM

    width = max(base_width, min(text_width + 2 * config.text_padding_x, base_width * config.max_growth))
    height = max(base_height, text_height + 2 * config.text_padding_y)
    return BoxSize(
        width=max(width, config.min_node_width),
        height=max(height, config.min_node_height),
        lines=tuple(lines),
        font_size=style.font_size,
    )


__all__ = [
    "BoxSize",
    "NodeRole",
    "ROLE_STYLES",
    "TextMeasurer",
    "size_box",
    "wrap_label",
]
