"""Radial layout of a document tree.

The Title sits at the container center and Sections are spread evenly on a
ring around it. Each Section then lays out its own children with the
placement functions chosen from ``STRATEGIES``: subsections go on an arc
facing away from the Title, direct items either fan out on a wide arc or,
once there are enough of them to crowd an arc, stack vertically beside the
Section.
"""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from .config import LayoutConfig
from .measure import NodeRole, TextMeasurer, size_box
from .model import DocumentNode, DocumentTree, NodeKind

logger = logging.getLogger(__name__)

TWO_PI = 2 * math.pi


@dataclass
class LayoutNode:
    id: str
    text: str
    kind: NodeKind
    role: NodeRole
    source_offset: int
    parent_id: Optional[str]
    x: float
    y: float
    width: float
    height: float
    placement: str
    angle: Optional[float] = None
    lines: Tuple[str, ...] = field(default_factory=tuple)
    font_size: float = 12.0

    @property
    def rect(self) -> Tuple[float, float, float, float]:
        half_w = self.width / 2
        half_h = self.height / 2
        return self.x - half_w, self.y - half_h, self.x + half_w, self.y + half_h

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "kind": self.kind.value,
            "role": self.role.value,
            "sourceOffset": self.source_offset,
            "parentId": self.parent_id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "angle": self.angle,
            "placement": self.placement,
            "lines": list(self.lines),
            "fontSize": self.font_size,
        }


class _LayoutContext:
    def __init__(self, config: LayoutConfig, measurer: Optional[TextMeasurer]) -> None:
        self.config = config
        self.measurer = measurer
        self.nodes: List[LayoutNode] = []

    def place(
        self,
        node: DocumentNode,
        *,
        role: NodeRole,
        parent: Optional[LayoutNode],
        x: float,
        y: float,
        placement: str,
        angle: Optional[float] = None,
    ) -> LayoutNode:
        box = size_box(node.text, role, self.config, self.measurer)
        placed = LayoutNode(
            id=node.id,
            text=node.text,
            kind=node.kind,
            role=role,
            source_offset=node.source_offset,
            parent_id=parent.id if parent is not None else None,
            x=x,
            y=y,
            width=box.width,
            height=box.height,
            placement=placement,
            angle=angle,
            lines=box.lines,
            font_size=box.font_size,
        )
        self.nodes.append(placed)
        return placed


Placement = Callable[[DocumentNode, LayoutNode, _LayoutContext], None]


def polar(cx: float, cy: float, radius: float, angle: float) -> Tuple[float, float]:
    return cx + math.cos(angle) * radius, cy + math.sin(angle) * radius


def arc_angles(center_angle: float, span: float, count: int) -> List[float]:
    """``count`` angles evenly covering ``span`` and centered on ``center_angle``."""
    if count <= 0:
        return []
    if count == 1:
        return [center_angle]
    step = span / (count - 1)
    start = center_angle - span / 2
    return [start + index * step for index in range(count)]


def fan_angles(center_angle: float, count: int, span: float, min_step: float) -> List[float]:
    """Arc angles whose step never drops below ``min_step``."""
    if count <= 0:
        return []
    step = max(span / count, min_step)
    actual_span = min(span, step * (count - 1))
    base = center_angle - actual_span / 2
    return [base + index * step for index in range(count)]


def place_subsections(section: DocumentNode, anchor: LayoutNode, ctx: _LayoutContext) -> None:
    config = ctx.config
    subsections = section.subsections()
    radius = config.level_spacing * config.subsection_radius_factor
    item_radius = config.level_spacing * config.subitem_radius_factor
    angles = arc_angles(anchor.angle or 0.0, config.subsection_arc, len(subsections))
    for subsection, angle in zip(subsections, angles):
        x, y = polar(anchor.x, anchor.y, radius, angle)
        placed = ctx.place(
            subsection,
            role=NodeRole.SUBSECTION,
            parent=anchor,
            x=x,
            y=y,
            placement="arc",
            angle=angle,
        )
        items = subsection.items()
        for item, item_angle in zip(items, arc_angles(angle, config.subitem_arc, len(items))):
            ix, iy = polar(placed.x, placed.y, item_radius, item_angle)
            ctx.place(
                item,
                role=NodeRole.SUBITEM,
                parent=placed,
                x=ix,
                y=iy,
                placement="arc",
                angle=item_angle,
            )


def place_items_stacked(section: DocumentNode, anchor: LayoutNode, ctx: _LayoutContext) -> None:
    config = ctx.config
    items = section.items()
    side = -1 if (anchor.angle or 0.0) > math.pi else 1
    x = anchor.x + config.horizontal_offset * side
    start_y = anchor.y - (len(items) - 1) * config.vertical_spacing / 2
    for index, item in enumerate(items):
        ctx.place(
            item,
            role=NodeRole.ITEM,
            parent=anchor,
            x=x,
            y=start_y + index * config.vertical_spacing,
            placement="stack",
        )


def place_items_fanned(section: DocumentNode, anchor: LayoutNode, ctx: _LayoutContext) -> None:
    config = ctx.config
    items = section.items()
    radius = config.level_spacing * config.radial_factor
    angles = fan_angles(anchor.angle or 0.0, len(items), config.fan_span, config.min_angle)
    for item, angle in zip(items, angles):
        x, y = polar(anchor.x, anchor.y, radius, angle)
        ctx.place(
            item,
            role=NodeRole.ITEM,
            parent=anchor,
            x=x,
            y=y,
            placement="fan",
            angle=angle,
        )


# (has_subsections, direct item count >= bullet_threshold) -> placements
STRATEGIES: Dict[Tuple[bool, bool], Tuple[Placement, ...]] = {
    (False, False): (place_items_fanned,),
    (False, True): (place_items_stacked,),
    (True, False): (place_subsections, place_items_fanned),
    (True, True): (place_subsections, place_items_stacked),
}


def select_strategies(subsection_count: int, item_count: int, threshold: int) -> Tuple[Placement, ...]:
    return STRATEGIES[(subsection_count > 0, item_count >= threshold)]


def layout(
    tree: DocumentTree,
    config: Optional[LayoutConfig] = None,
    measurer: Optional[TextMeasurer] = None,
) -> List[LayoutNode]:
    """Assign a position and box to every node of ``tree``.

    Deterministic for a given tree and config. An empty tree lays out to [].
    """
    if tree.title is None:
        return []
    config = config or LayoutConfig()
    ctx = _LayoutContext(config, measurer)

    cx, cy = config.center
    title = ctx.place(tree.title, role=NodeRole.TITLE, parent=None, x=cx, y=cy, placement="center")

    sections = tree.title.sections()
    ring_radius = config.level_spacing * 2
    step = TWO_PI / len(sections) if sections else 0.0
    for index, section in enumerate(sections):
        angle = index * step
        x, y = polar(cx, cy, ring_radius, angle)
        anchor = ctx.place(
            section,
            role=NodeRole.SECTION,
            parent=title,
            x=x,
            y=y,
            placement="ring",
            angle=angle,
        )
        subsection_count = len(section.subsections())
        item_count = len(section.items())
        placements = select_strategies(subsection_count, item_count, config.bullet_threshold)
        logger.debug(
            "%s: %d subsections, %d items -> %s",
            section.id,
            subsection_count,
            item_count,
            ", ".join(placement.__name__ for placement in placements),
        )
        for placement in placements:
            placement(section, anchor, ctx)

    _place_orphans(tree.title, title, ctx)
    return ctx.nodes


def _place_orphans(root: DocumentNode, anchor: LayoutNode, ctx: _LayoutContext) -> None:
    # Items above the first section orbit the Title inside the section ring.
    items = root.items()
    if not items:
        return
    step = TWO_PI / len(items)
    for index, item in enumerate(items):
        angle = (index + 0.5) * step
        x, y = polar(anchor.x, anchor.y, ctx.config.level_spacing, angle)
        ctx.place(
            item,
            role=NodeRole.ITEM,
            parent=anchor,
            x=x,
            y=y,
            placement="orbit",
            angle=angle,
        )


__all__ = [
    "LayoutNode",
    "STRATEGIES",
    "arc_angles",
    "fan_angles",
    "layout",
    "place_items_fanned",
    "place_items_stacked",
    "place_subsections",
    "polar",
    "select_strategies",
]
