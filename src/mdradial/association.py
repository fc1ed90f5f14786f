"""Attach list items to the section or subsection whose header precedes them."""
from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List, Optional, Tuple

from .model import DocumentNode, NodeKind

if TYPE_CHECKING:  # pragma: no cover
    from .parser import ListToken


def associate(items: Iterable["ListToken"], title: DocumentNode) -> None:
    """Append an Item node for every list token under ``title`` in place.

    There is no nesting in the source text, so the owner of a bullet is the
    last header that textually precedes it: the latest Section starting at or
    before the item, then the latest Subsection of that Section. Items before
    any Section fall back to the Title. Header offsets are never modified.
    """
    sections = title.sections()
    for item in sorted(items, key=lambda token: token.offset):
        section, subsection = resolve_owner(item.offset, sections)
        owner = subsection or section or title
        owner.children.append(
            DocumentNode(id="", text=item.text, kind=NodeKind.ITEM, source_offset=item.offset)
        )


def resolve_owner(
    offset: int, sections: List[DocumentNode]
) -> Tuple[Optional[DocumentNode], Optional[DocumentNode]]:
    """Return ``(section, subsection)`` owning a list line at ``offset``."""
    target: Optional[DocumentNode] = None
    target_index = -1
    for index, section in enumerate(sections):
        if section.source_offset > offset:
            break
        target = section
        target_index = index
    if target is None:
        return None, None

    next_start: Optional[int] = None
    if target_index + 1 < len(sections):
        next_start = sections[target_index + 1].source_offset

    chosen: Optional[DocumentNode] = None
    for subsection in target.subsections():
        if subsection.source_offset > offset:
            break
        if next_start is None or offset < next_start:
            chosen = subsection
    return target, chosen


__all__ = ["associate", "resolve_owner"]
