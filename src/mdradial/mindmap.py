"""Markdown to laid-out mind map, plus an interactive session over the result."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from .config import LayoutConfig, ViewportConfig
from .connections import Connection, build_connections
from .layout import LayoutNode, layout
from .measure import TextMeasurer
from .model import DocumentTree
from .parser import parse
from .viewport import Bounds, ViewportController, content_bounds

logger = logging.getLogger(__name__)

NodeSelectCallback = Callable[[str], None]
NodeHoverCallback = Callable[[str, bool], None]


@dataclass
class MindMapResult:
    tree: DocumentTree
    nodes: List[LayoutNode] = field(default_factory=list)
    connections: List[Connection] = field(default_factory=list)
    bounds: Optional[Bounds] = None
    center: Tuple[float, float] = (0.0, 0.0)

    @property
    def error(self) -> Optional[str]:
        return self.tree.error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes],
            "connections": [connection.to_dict() for connection in self.connections],
            "bounds": self.bounds.to_dict() if self.bounds is not None else None,
            "center": {"x": self.center[0], "y": self.center[1]},
            "error": self.error,
        }


def generate_mindmap(
    markdown: Any,
    config: Optional[LayoutConfig] = None,
    *,
    measurer: Optional[TextMeasurer] = None,
) -> MindMapResult:
    """Run parse, layout and connection building from scratch."""
    config = config or LayoutConfig()
    tree = parse(markdown)
    nodes = layout(tree, config, measurer)
    connections = build_connections(tree, nodes)
    bounds = content_bounds(nodes) or Bounds(0.0, 0.0, config.width, config.height)
    if tree.error:
        logger.info("mind map input rejected: %s", tree.error)
    return MindMapResult(
        tree=tree,
        nodes=nodes,
        connections=connections,
        bounds=bounds,
        center=config.center,
    )


class MindMap:
    """Holds the current diagram, its viewport and node selection/hover state.

    Selection and hover are reported to advisory callbacks by node id; ids
    that are not part of the current diagram are ignored. A pointer-down over
    a node selects it, anywhere else it starts a pan.
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        viewport_config: Optional[ViewportConfig] = None,
        *,
        container_size: Optional[Tuple[float, float]] = None,
        on_node_select: Optional[NodeSelectCallback] = None,
        on_node_hover: Optional[NodeHoverCallback] = None,
        auto_fit: bool = True,
        measurer: Optional[TextMeasurer] = None,
    ) -> None:
        self.config = config or LayoutConfig()
        self.viewport = ViewportController(viewport_config)
        self.container_size = container_size or (self.config.width, self.config.height)
        self.on_node_select = on_node_select
        self.on_node_hover = on_node_hover
        self.auto_fit = auto_fit
        self._measurer = measurer
        self.result: Optional[MindMapResult] = None
        self._nodes: Dict[str, LayoutNode] = {}
        self._selected_id: Optional[str] = None
        self._hovered: Set[str] = set()

    @property
    def nodes(self) -> List[LayoutNode]:
        return list(self._nodes.values())

    @property
    def connections(self) -> List[Connection]:
        return list(self.result.connections) if self.result is not None else []

    @property
    def error(self) -> Optional[str]:
        return self.result.error if self.result is not None else None

    @property
    def selected_node(self) -> Optional[LayoutNode]:
        if self._selected_id is None:
            return None
        return self._nodes.get(self._selected_id)

    @property
    def hovered_node_ids(self) -> Set[str]:
        return set(self._hovered)

    def node(self, node_id: str) -> Optional[LayoutNode]:
        return self._nodes.get(node_id)

    def set_markdown(self, markdown: Any) -> MindMapResult:
        self.clear()
        self.result = generate_mindmap(markdown, self.config, measurer=self._measurer)
        self._nodes = {node.id: node for node in self.result.nodes}
        if self.auto_fit and self._nodes:
            self.viewport.fit_to_content(self._nodes.values(), self.container_size)
        else:
            self.viewport.reset_view()
        return self.result

    def resize(self, width: float, height: float) -> None:
        self.container_size = (width, height)

    def fit_to_content(self) -> bool:
        return self.viewport.fit_to_content(self._nodes.values(), self.container_size)

    def select_node(self, node_id: str) -> Optional[LayoutNode]:
        node = self._nodes.get(node_id)
        if node is None:
            return None
        self._selected_id = node_id
        if self.on_node_select is not None:
            self.on_node_select(node_id)
        return node

    def hover_node(self, node_id: str, entering: bool) -> None:
        node = self._nodes.get(node_id)
        if node is None:
            return
        if entering:
            self._hovered.add(node_id)
        else:
            self._hovered.discard(node_id)
        if self.on_node_hover is not None:
            self.on_node_hover(node_id, entering)

    def node_at(self, screen_x: float, screen_y: float) -> Optional[LayoutNode]:
        """Topmost node whose box contains the screen point, if any."""
        x, y = self.viewport.screen_to_world(screen_x, screen_y)
        # Later nodes are drawn over earlier ones.
        for node in reversed(self.nodes):
            left, top, right, bottom = node.rect
            if left <= x <= right and top <= y <= bottom:
                return node
        return None

    def pointer_down(self, screen_x: float, screen_y: float) -> Optional[LayoutNode]:
        node = self.node_at(screen_x, screen_y)
        if node is not None:
            return self.select_node(node.id)
        self.viewport.begin_pan(screen_x, screen_y)
        return None

    def pointer_move(self, screen_x: float, screen_y: float) -> bool:
        return self.viewport.move_pointer(screen_x, screen_y)

    def pointer_up(self) -> None:
        self.viewport.end_pan()

    def clear(self) -> None:
        self.result = None
        self._nodes = {}
        self._selected_id = None
        self._hovered = set()

    def to_dict(self) -> Dict[str, Any]:
        payload = self.result.to_dict() if self.result is not None else {
            "nodes": [],
            "connections": [],
            "bounds": None,
            "center": None,
            "error": None,
        }
        payload["viewport"] = self.viewport.state.to_dict()
        payload["transform"] = self.viewport.transform()
        payload["selected"] = self._selected_id
        return payload


__all__ = ["MindMap", "MindMapResult", "generate_mindmap"]
