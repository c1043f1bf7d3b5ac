"""
Data models for the changelog generator.

This module contains the shared data structures used across all modules.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class CommitInfo:
    """Represents a single commit subject with its optional metadata."""
    subject: str
    date: Optional[str] = None
    sha: Optional[str] = None


@dataclass
class ChangelogEntry:
    """A changelog document read back from disk for rendering."""
    slug: str
    content: str
    frontmatter: Dict[str, Any] = field(default_factory=dict)

    @property
    def title(self) -> str:
        return str(self.frontmatter.get("title") or self.slug)

    @property
    def date(self) -> str:
        value = self.frontmatter.get("date")
        return str(value) if value is not None else ""
