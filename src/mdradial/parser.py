"""Markdown headers and list lines to a Title/Section/Subsection/Item tree."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Any, List, Optional

from .association import associate
from .model import DocumentNode, DocumentTree, NodeKind, empty_tree

logger = logging.getLogger(__name__)

HEADER_RE = re.compile(r"^(#{1,6})[ \t]+(.+)$", re.MULTILINE)
UNORDERED_RE = re.compile(r"^[-*+]\s+(.+)$")
ORDERED_RE = re.compile(r"^\d+\.\s+(.+)$")

NO_HEADERS_ERROR = "No headers found in markdown"
NO_TITLE_ERROR = "No level-1 header found in markdown"


@dataclass
class HeaderToken:
    level: int
    text: str
    offset: int
    raw: str


@dataclass
class ListToken:
    text: str
    ordered: bool
    indent: int
    offset: int


def parse_headers(text: Any) -> List[HeaderToken]:
    if not text or not isinstance(text, str):
        return []
    return [
        HeaderToken(
            level=len(match.group(1)),
            text=match.group(2).strip(),
            offset=match.start(),
            raw=match.group(0),
        )
        for match in HEADER_RE.finditer(text)
    ]


def parse_list(text: Any) -> List[ListToken]:
    if not text or not isinstance(text, str):
        return []
    items: List[ListToken] = []
    offset = 0
    for line in text.split("\n"):
        stripped = line.strip()
        match = UNORDERED_RE.match(stripped)
        ordered = False
        if match is None:
            match = ORDERED_RE.match(stripped)
            ordered = match is not None
        if match is not None:
            items.append(
                ListToken(
                    text=match.group(1).strip(),
                    ordered=ordered,
                    indent=len(line) - len(line.lstrip()),
                    offset=offset,
                )
            )
        # +1 for the newline consumed by split
        offset += len(line) + 1
    return items


def parse(markdown: Any) -> DocumentTree:
    """Build the document tree for ``markdown``.

    Never raises on bad input: empty or non-string input yields an empty tree
    with no error, a document without a level-1 header yields an empty tree
    with an explanatory ``error``.
    """
    if not markdown or not isinstance(markdown, str):
        return empty_tree()

    headers = parse_headers(markdown)
    if not headers:
        logger.debug("no headers in %d chars of markdown", len(markdown))
        return empty_tree(NO_HEADERS_ERROR)
    if not any(header.level == 1 for header in headers):
        logger.debug("no level-1 header among %d headers", len(headers))
        return empty_tree(NO_TITLE_ERROR)

    title = _build_outline(headers)
    associate(parse_list(markdown), title)
    assign_ids(title)
    tree = DocumentTree(title=title)
    logger.debug("parsed %d sections, %d nodes", len(title.sections()), tree.node_count())
    return tree


def _build_outline(headers: List[HeaderToken]) -> DocumentNode:
    first = headers[0]
    title = DocumentNode(
        id="root", text=first.text, kind=NodeKind.TITLE, source_offset=first.offset
    )
    current_section: Optional[DocumentNode] = None
    for header in headers[1:]:
        if header.level == 2:
            current_section = DocumentNode(
                id="", text=header.text, kind=NodeKind.SECTION, source_offset=header.offset
            )
            title.children.append(current_section)
        elif header.level == 3:
            if current_section is None:
                logger.warning(
                    "dropping level-3 header %r at offset %d: no enclosing section",
                    header.text,
                    header.offset,
                )
                continue
            current_section.children.append(
                DocumentNode(
                    id="",
                    text=header.text,
                    kind=NodeKind.SUBSECTION,
                    source_offset=header.offset,
                )
            )
    return title


def assign_ids(title: DocumentNode) -> None:
    """Give every node its positional id (``section-0``, ``subitem-0-1-2``, ...)."""
    title.id = "root"
    section_index = 0
    root_item_index = 0
    for child in title.children:
        if child.kind is NodeKind.SECTION:
            _assign_section_ids(child, section_index)
            section_index += 1
        elif child.kind is NodeKind.ITEM:
            child.id = f"root-item-{root_item_index}"
            root_item_index += 1


def _assign_section_ids(section: DocumentNode, index: int) -> None:
    section.id = f"section-{index}"
    for item_index, item in enumerate(section.items()):
        item.id = f"item-{index}-{item_index}"
    for sub_index, subsection in enumerate(section.subsections()):
        subsection.id = f"subsection-{index}-{sub_index}"
        for item_index, item in enumerate(subsection.items()):
            item.id = f"subitem-{index}-{sub_index}-{item_index}"


__all__ = [
    "HeaderToken",
    "ListToken",
    "NO_HEADERS_ERROR",
    "NO_TITLE_ERROR",
    "assign_ids",
    "parse",
    "parse_headers",
    "parse_list",
]
