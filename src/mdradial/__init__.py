"""Public API for mdradial."""
from .config import ConfigError, LayoutConfig, ViewportConfig
from .connections import Connection, Tier, build_connections
from .layout import LayoutNode, layout
from .mindmap import MindMap, MindMapResult, generate_mindmap
from .model import DocumentNode, DocumentTree, NodeKind
from .parser import parse
from .viewport import Bounds, ViewportController, ViewportMode, ViewportState

__all__ = [
    "Bounds",
    "ConfigError",
    "Connection",
    "DocumentNode",
    "DocumentTree",
    "LayoutConfig",
    "LayoutNode",
    "MindMap",
    "MindMapResult",
    "NodeKind",
    "Tier",
    "ViewportConfig",
    "ViewportController",
    "ViewportMode",
    "ViewportState",
    "build_connections",
    "generate_mindmap",
    "layout",
    "parse",
]
