"""Parent to child edges of the document tree."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from .layout import LayoutNode
from .model import DocumentTree, NodeKind


class Tier(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"
    TERTIARY = "tertiary"


TIER_BY_PARENT_KIND: Dict[NodeKind, Tier] = {
    NodeKind.TITLE: Tier.PRIMARY,
    NodeKind.SECTION: Tier.SECONDARY,
    NodeKind.SUBSECTION: Tier.TERTIARY,
}


@dataclass(frozen=True)
class Connection:
    from_id: str
    to_id: str
    tier: Tier

    @property
    def id(self) -> str:
        return f"connection-{self.from_id}-{self.to_id}"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "from": self.from_id, "to": self.to_id, "tier": self.tier.value}


def build_connections(
    tree: DocumentTree, nodes: Optional[Iterable[LayoutNode]] = None
) -> List[Connection]:
    """One connection per parent/child pair, tiered by the parent's kind.

    When ``nodes`` is given, pairs with an endpoint missing from it are
    skipped.
    """
    known = {node.id for node in nodes} if nodes is not None else None
    connections: List[Connection] = []
    for parent, child in tree.walk():
        if parent is None:
            continue
        tier = TIER_BY_PARENT_KIND.get(parent.kind)
        if tier is None:
            continue
        if known is not None and (parent.id not in known or child.id not in known):
            continue
        connections.append(Connection(from_id=parent.id, to_id=child.id, tier=tier))
    return connections


__all__ = ["Connection", "TIER_BY_PARENT_KIND", "Tier", "build_connections"]
