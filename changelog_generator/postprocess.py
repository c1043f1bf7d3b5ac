"""
Post-processing of generated changelog text.

All functions here are pure string transforms: heading normalization for
model markdown, repetition cleanup for summarization output, and the bullet
formatting used when a generated summary is rejected.
"""

import re

from .markdown import LineKind, classify_line
from .parser import CommitParser

REPEATED_WORD_RE = re.compile(r"\b(\w+)(?:\s+\1\b)+", re.I)
REPEATED_PHRASE_RE = re.compile(r"\b(\w+(?:\s+\w+)+?)(?:[\s,;.]+\1\b)+", re.I)
SPACE_BEFORE_PUNCT_RE = re.compile(r"\s+([.,!?;:])")
TERMINAL_PUNCTUATION = ".!?"


def fix_markdown_headings(markdown: str) -> str:
    """
    Turn lines that consist only of bold text into level two headings.

    ``**New Features**`` becomes ``## New Features``. Applying it twice gives
    the same result as applying it once.
    """
    lines = []
    for line in markdown.split("\n"):
        kind, text = classify_line(line)
        lines.append(f"## {text}" if kind is LineKind.BOLD_HEADING else line)
    return "\n".join(lines)


def strip_bold_headings(markdown: str) -> str:
    """Replace bold-only lines with their plain text."""
    lines = []
    for line in markdown.split("\n"):
        kind, text = classify_line(line)
        lines.append(text if kind is LineKind.BOLD_HEADING else line)
    return "\n".join(lines)


def collapse_repeated_words(text: str) -> str:
    """Collapse runs of the same word: ``"the the login"`` -> ``"the login"``."""
    return REPEATED_WORD_RE.sub(r"\1", text)


def collapse_repeated_phrases(text: str) -> str:
    """Collapse a phrase of two or more words repeated back to back."""
    return REPEATED_PHRASE_RE.sub(r"\1", text)


def normalize_whitespace(text: str) -> str:
    lines = [re.sub(r"[ \t]+", " ", line).strip() for line in text.strip().splitlines()]
    collapsed = re.sub(r"\n{3,}", "\n\n", "\n".join(lines))
    return SPACE_BEFORE_PUNCT_RE.sub(r"\1", collapsed)


def ensure_terminal_punctuation(text: str) -> str:
    text = text.rstrip().rstrip(",;:").rstrip()
    if text and text[-1] not in TERMINAL_PUNCTUATION:
        text += "."
    return text


def clean_summary(text: str) -> str:
    """Normalize raw summarization output into a single tidy paragraph."""
    text = " ".join(text.split())
    text = collapse_repeated_words(text)
    text = collapse_repeated_phrases(text)
    text = normalize_whitespace(text)
    return ensure_terminal_punctuation(text)


def format_commit_bullet(subject: str) -> str:
    """
    Reformat one commit subject as a changelog bullet.

    ``"feat(auth): add login"`` becomes ``"- Add login"``.
    """
    desc = " ".join(CommitParser.describe(subject).split()).rstrip(".")
    if not desc:
        desc = subject.strip()
    return f"- {desc[:1].upper()}{desc[1:]}"
