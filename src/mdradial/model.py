"""Document tree types shared by the parser, resolver and layout engine."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Tuple


class NodeKind(str, Enum):
    TITLE = "title"
    SECTION = "section"
    SUBSECTION = "subsection"
    ITEM = "item"


@dataclass
class DocumentNode:
    id: str
    text: str
    kind: NodeKind
    source_offset: int
    children: List["DocumentNode"] = field(default_factory=list)

    def sections(self) -> List["DocumentNode"]:
        return [child for child in self.children if child.kind is NodeKind.SECTION]

    def subsections(self) -> List["DocumentNode"]:
        return [child for child in self.children if child.kind is NodeKind.SUBSECTION]

    def items(self) -> List["DocumentNode"]:
        return [child for child in self.children if child.kind is NodeKind.ITEM]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "kind": self.kind.value,
            "sourceOffset": self.source_offset,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class DocumentTree:
    """Parse result; ``title`` is None for an empty tree."""

    title: Optional[DocumentNode]
    error: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.title is None

    @property
    def sections(self) -> List[DocumentNode]:
        return self.title.sections() if self.title is not None else []

    def walk(self) -> Iterator[Tuple[Optional[DocumentNode], DocumentNode]]:
        """Yield ``(parent, node)`` pairs depth first, Title first with parent None."""
        if self.title is None:
            return
        stack: List[Tuple[Optional[DocumentNode], DocumentNode]] = [(None, self.title)]
        while stack:
            parent, node = stack.pop()
            yield parent, node
            for child in reversed(node.children):
                stack.append((node, child))

    def node_count(self) -> int:
        return sum(1 for _ in self.walk())

    def find(self, node_id: str) -> Optional[DocumentNode]:
        for _, node in self.walk():
            if node.id == node_id:
                return node
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "title": self.title.to_dict() if self.title is not None else None,
            "error": self.error,
        }


def empty_tree(error: Optional[str] = None) -> DocumentTree:
    return DocumentTree(title=None, error=error)


__all__ = ["DocumentNode", "DocumentTree", "NodeKind", "empty_tree"]
