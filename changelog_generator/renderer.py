"""
Render the changelog directory to a single static HTML page.

Every ``*.md`` file is read, its YAML frontmatter split off, and the body
converted from the restricted changelog markdown (headings, a ``Tags:``
line, bullet lists, paragraphs) to escaped HTML. Newest entries come first.
"""

import html
import logging
from pathlib import Path
from typing import Any, Dict, List, Sequence, Tuple

import yaml

from .markdown import Block, LineKind, parse_blocks
from .models import ChangelogEntry

logger = logging.getLogger("changelog-generator.renderer")

FRONTMATTER_DELIMITER = "---"

PAGE_TITLE = "Product Updates"
PAGE_SUBTITLE = "A timeline of the latest features, improvements, and fixes."

CSS = """
:root { --brand-green: #1f7a4d; --foreground: #1d232a; --card-background: #ffffff; --card-border: #dde3ea; }
* { box-sizing: border-box; }
body { margin: 0; font-family: system-ui, -apple-system, Segoe UI, Roboto, sans-serif; background: #f5f7f9; color: var(--foreground); line-height: 1.55; }
.container { max-width: 860px; margin: 0 auto; padding: 64px 20px; }
header { text-align: center; margin-bottom: 48px; }
header h1 { font-size: 2.6rem; margin: 0 0 8px; color: var(--brand-green); }
header p { font-size: 1.1rem; margin: 0; }
article, .empty { background: var(--card-background); border: 1px solid var(--card-border); padding: 32px 36px; margin-bottom: 32px; }
article .title { border-bottom: 1px solid var(--card-border); padding-bottom: 12px; margin-bottom: 20px; }
article .title h2 { font-size: 1.6rem; margin: 0; color: var(--brand-green); }
article .title time { font-size: .9rem; color: #66707a; }
h3.section { font-size: 1.15rem; text-transform: uppercase; letter-spacing: .02em; color: var(--brand-green); margin: 24px 0 12px; }
h4.subsection { font-size: 1rem; margin: 18px 0 8px; }
ul { padding-left: 24px; margin: 0 0 16px; }
li { margin-bottom: 6px; }
p { margin: 0 0 16px; }
.tags { margin: 0 0 16px; }
.tag { display: inline-block; font-size: .8rem; padding: 2px 10px; margin-right: 6px; border-radius: 999px; background: #e6f3ec; color: var(--brand-green); }
.empty { text-align: center; padding: 64px 20px; }
.empty h2 { font-size: 1.8rem; color: var(--brand-green); margin: 0; }
"""


def split_frontmatter(text: str) -> Tuple[Dict[str, Any], str]:
    """
    Separate a leading ``---`` delimited YAML block from the markdown body.

    Returns:
        (frontmatter, body); frontmatter is empty if the text has none or it
        cannot be parsed
    """
    lines = text.splitlines(keepends=True)
    if not lines or lines[0].strip() != FRONTMATTER_DELIMITER:
        return {}, text
    for i in range(1, len(lines)):
        if lines[i].strip() == FRONTMATTER_DELIMITER:
            raw = "".join(lines[1:i])
            body = "".join(lines[i + 1:])
            try:
                data = yaml.safe_load(raw) or {}
            except yaml.YAMLError as e:
                logger.warning("Invalid frontmatter: %s", e)
                return {}, body
            if not isinstance(data, dict):
                return {}, body
            return data, body
    return {}, text


def load_changelogs(directory: str) -> List[ChangelogEntry]:
    """
    Read every changelog in ``directory``, newest date first.

    A missing directory yields an empty list; files that are not valid
    UTF-8 are skipped with a warning.
    """
    root = Path(directory)
    if not root.is_dir():
        logger.info("Changelog directory %s does not exist", directory)
        return []

    entries: List[ChangelogEntry] = []
    for path in sorted(root.glob("*.md")):
        try:
            text = path.read_text(encoding="utf-8")
        except UnicodeDecodeError as e:
            logger.warning("Skipping %s: not valid UTF-8 (%s)", path.name, e)
            continue
        frontmatter, content = split_frontmatter(text)
        entries.append(ChangelogEntry(slug=path.stem, content=content, frontmatter=frontmatter))

    entries.sort(key=lambda e: (e.date, e.slug), reverse=True)
    logger.info("Loaded %d changelogs from %s", len(entries), directory)
    return entries


def _render_block(block: Block) -> str:
    if block.kind is LineKind.HEADING:
        return f'<h3 class="section">{html.escape(block.text)}</h3>'
    if block.kind is LineKind.SUBHEADING:
        return f'<h4 class="subsection">{html.escape(block.text)}</h4>'
    if block.kind is LineKind.TAGS:
        tags = "".join(f'<span class="tag">{html.escape(t)}</span>' for t in block.tags)
        return f'<div class="tags">{tags}</div>'
    if block.kind is LineKind.LIST_ITEM:
        items = "".join(f"<li>{html.escape(item)}</li>" for item in block.items)
        return f"<ul>{items}</ul>"
    return f"<p>{html.escape(block.text)}</p>"


def render_markdown(content: str) -> str:
    """Convert a changelog body to HTML."""
    return "\n".join(_render_block(b) for b in parse_blocks(content))


def render_entry(entry: ChangelogEntry) -> str:
    date = html.escape(entry.date)
    time_tag = f'<time datetime="{date}">{date}</time>' if date else ""
    return (
        f'<article id="{html.escape(entry.slug)}">\n'
        f'<div class="title"><h2>{html.escape(entry.title)}</h2>{time_tag}</div>\n'
        f"{render_markdown(entry.content)}\n"
        f"</article>"
    )


def render_page(entries: Sequence[ChangelogEntry]) -> str:
    """
    Build the full HTML page.

    Args:
        entries: Changelogs in display order

    Returns:
        A standalone HTML document; shows an empty-state message when there
        are no entries
    """
    if entries:
        body = "\n".join(render_entry(e) for e in entries)
    else:
        body = (
            '<div class="empty"><h2>No changelogs yet!</h2>'
            "<p>Run the generator to see your first product update here.</p></div>"
        )

    return f"""<!doctype html>
<html lang="en">
<head>
<meta charset="utf-8">
<meta name="viewport" content="width=device-width, initial-scale=1">
<title>{html.escape(PAGE_TITLE)}</title>
<style>{CSS}</style>
</head>
<body>
<div class="container">
<header>
<h1>{html.escape(PAGE_TITLE)}</h1>
<p>{html.escape(PAGE_SUBTITLE)}</p>
</header>
<main>
{body}
</main>
</div>
</body>
</html>
"""


def write_page(input_dir: str, output: str) -> Path:
    """Render ``input_dir`` and write the page to ``output``."""
    page = render_page(load_changelogs(input_dir))
    out_path = Path(output)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(page, encoding="utf-8")
    logger.info("Wrote %s", out_path)
    return out_path
