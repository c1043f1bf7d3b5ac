"""
Line classification for the restricted markdown used in changelogs.

Changelog bodies only use a small subset of markdown: two heading levels, a
``Tags:`` line, bullet lists and plain paragraphs. Model output may also use
bold lines as headings. Each line is classified on its own and consecutive
list items are grouped into blocks by a small state machine.
"""

import enum
import re
from dataclasses import dataclass, field
from typing import List, Tuple

BOLD_HEADING_RE = re.compile(r"^\*\*(?P<text>[^*]+?)\*\*:?$")
TAGS_RE = re.compile(r"^tags:\s*(?P<text>.*)$", re.I)


class LineKind(enum.Enum):
    BLANK = "blank"
    HEADING = "heading"
    SUBHEADING = "subheading"
    BOLD_HEADING = "bold_heading"
    TAGS = "tags"
    LIST_ITEM = "list_item"
    PARAGRAPH = "paragraph"


def classify_line(line: str) -> Tuple[LineKind, str]:
    """
    Classify one line.

    Returns:
        (kind, text) where text is the line content without its marker
    """
    stripped = line.strip()
    if not stripped:
        return LineKind.BLANK, ""
    if stripped.startswith("### "):
        return LineKind.SUBHEADING, stripped[4:].strip()
    if stripped.startswith("## "):
        return LineKind.HEADING, stripped[3:].strip()
    m = BOLD_HEADING_RE.match(stripped)
    if m:
        return LineKind.BOLD_HEADING, m.group("text").strip()
    if stripped.startswith(("- ", "* ")):
        return LineKind.LIST_ITEM, stripped[2:].strip()
    m = TAGS_RE.match(stripped)
    if m:
        return LineKind.TAGS, m.group("text").strip()
    return LineKind.PARAGRAPH, stripped


@dataclass
class Block:
    """A rendered unit: a heading, a tags line, a paragraph or a whole list."""
    kind: LineKind
    text: str = ""
    items: List[str] = field(default_factory=list)

    @property
    def tags(self) -> List[str]:
        return [t.strip() for t in self.text.split(",") if t.strip()]


def parse_blocks(content: str) -> List[Block]:
    """
    Group the lines of ``content`` into blocks.

    A list stays open across list items and is closed by a blank line or any
    other kind of line. Bold headings are treated as level two headings.
    """
    blocks: List[Block] = []
    current_list: List[str] = []

    def close_list() -> None:
        if current_list:
            blocks.append(Block(LineKind.LIST_ITEM, items=list(current_list)))
            current_list.clear()

    for line in content.splitlines():
        kind, text = classify_line(line)
        if kind is LineKind.LIST_ITEM:
            current_list.append(text)
            continue
        close_list()
        if kind is LineKind.BLANK:
            continue
        if kind is LineKind.BOLD_HEADING:
            kind = LineKind.HEADING
        blocks.append(Block(kind, text=text))

    close_list()
    return blocks
