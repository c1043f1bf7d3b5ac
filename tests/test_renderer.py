"""Tests for the HTML renderer."""

from changelog_generator.generator import ChangelogWriter
from changelog_generator.models import ChangelogEntry
from changelog_generator.renderer import (
    load_changelogs,
    render_markdown,
    render_page,
    split_frontmatter,
    write_page,
)


def test_split_frontmatter():
    text = ChangelogWriter.compose("2024-01-01", "## Fixes\n- Crash")

    frontmatter, body = split_frontmatter(text)

    assert frontmatter["title"] == "Update for 2024-01-01"
    assert str(frontmatter["date"]) == "2024-01-01"
    assert body == "\n## Fixes\n- Crash\n"


def test_split_frontmatter_without_block():
    assert split_frontmatter("## Only body\n") == ({}, "## Only body\n")
    assert split_frontmatter("---\nunterminated: yes\n") == ({}, "---\nunterminated: yes\n")


def test_load_changelogs_sorted_newest_first(tmp_path):
    writer = ChangelogWriter(str(tmp_path))
    writer.write("2024-01-01", "- old")
    writer.write("2024-03-05", "- newest")
    writer.write("2024-02-10", "- middle")
    (tmp_path / "notes.txt").write_text("ignored")

    entries = load_changelogs(str(tmp_path))

    assert [e.date for e in entries] == ["2024-03-05", "2024-02-10", "2024-01-01"]
    assert entries[0].title == "Update for 2024-03-05"
    assert entries[0].slug == "2024-03-05"


def test_load_changelogs_missing_directory(tmp_path):
    assert load_changelogs(str(tmp_path / "nope")) == []


def test_load_changelogs_skips_invalid_utf8(tmp_path, caplog):
    ChangelogWriter(str(tmp_path)).write("2024-01-01", "- good")
    (tmp_path / "2024-01-02.md").write_bytes(b"---\ntitle: caf\xe9\n---\n- broken\n")

    with caplog.at_level("WARNING", logger="changelog-generator.renderer"):
        entries = load_changelogs(str(tmp_path))

    assert [e.slug for e in entries] == ["2024-01-01"]
    assert "2024-01-02.md" in caplog.text


def test_render_markdown_subset():
    content = "\n".join([
        "Tags: Features, Fixes",
        "## New Features",
        "- Added <login>",
        "- Added dark mode",
        "",
        "### Details",
        "Plain paragraph & more.",
    ])

    rendered = render_markdown(content)

    assert rendered.splitlines() == [
        '<div class="tags"><span class="tag">Features</span><span class="tag">Fixes</span></div>',
        '<h3 class="section">New Features</h3>',
        "<ul><li>Added &lt;login&gt;</li><li>Added dark mode</li></ul>",
        '<h4 class="subsection">Details</h4>',
        "<p>Plain paragraph &amp; more.</p>",
    ]


def test_render_page_entries():
    entries = [ChangelogEntry(slug="2024-01-01", content="- Fix",
                              frontmatter={"title": "Update for 2024-01-01", "date": "2024-01-01"})]

    page = render_page(entries)

    assert page.startswith("<!doctype html>")
    assert "<h2>Update for 2024-01-01</h2>" in page
    assert '<time datetime="2024-01-01">2024-01-01</time>' in page
    assert "<li>Fix</li>" in page
    assert "No changelogs yet!" not in page


def test_render_page_empty_state():
    assert "No changelogs yet!" in render_page([])


def test_write_page(tmp_path):
    ChangelogWriter(str(tmp_path / "changelogs")).write("2024-01-01", "## Fixes\n- Crash")

    out = write_page(str(tmp_path / "changelogs"), str(tmp_path / "site" / "index.html"))

    html_text = out.read_text(encoding="utf-8")
    assert '<h3 class="section">Fixes</h3>' in html_text
    assert "<li>Crash</li>" in html_text
