"""
Commit parsing and categorization module.

This module handles parsing commit subjects using Conventional Commits format
and bucketing them into fixed changelog categories before summarization.
"""

import re
from typing import Dict, List, Optional, Sequence, Tuple

OTHER = "Other"

# Evaluated top to bottom; the first matching rule wins.
CATEGORY_RULES: Tuple[Tuple[str, "re.Pattern[str]"], ...] = (
    ("Features", re.compile(r"^(feat|feature|features|add|adds|added|new|introduce|implement)\b", re.I)),
    ("Fixes", re.compile(r"^(fix|fixes|fixed|bug|bugfix|hotfix|patch|resolve|revert)\b", re.I)),
    ("Improvements", re.compile(r"^(perf|refactor|improve|improves|improved|update|updates|updated|enhance|optimi[sz]e)\b", re.I)),
    ("Documentation", re.compile(r"^(docs?|readme)\b", re.I)),
    ("Tests", re.compile(r"^(test|tests)\b", re.I)),
    ("Chores", re.compile(r"^(chore|build|ci|style|deps|bump|release|merge)\b", re.I)),
)

CATEGORIES: Tuple[str, ...] = tuple(name for name, _ in CATEGORY_RULES) + (OTHER,)


class CommitParser:
    """
    Parse commit subjects into (type, scope, description) using Conventional Commits style.
    Subjects that do not follow the convention parse with a None type.
    """

    CONVENTIONAL_RE = re.compile(
        r"^(?P<type>[a-z]+)(\((?P<scope>[^)]+)\))?(?P<breaking>!)?:\s*(?P<desc>.+)", re.I
    )

    @staticmethod
    def parse(subject: str) -> Tuple[Optional[str], Optional[str], str]:
        """
        Parse a commit subject.

        Returns:
            (type, scope, description)
        """
        first = subject.strip().splitlines()[0] if subject.strip() else ""
        m = CommitParser.CONVENTIONAL_RE.match(first)
        if m:
            return m.group("type").lower(), m.group("scope"), m.group("desc").strip()
        return None, None, first

    @staticmethod
    def describe(subject: str) -> str:
        """Return the subject without its conventional ``type(scope):`` prefix."""
        return CommitParser.parse(subject)[2]


class CommitCategorizer:
    """
    Bucket commit subjects into the fixed changelog categories.

    Rules are fixed at import time and matched against the start of each
    subject in priority order: features, fixes, improvements, documentation,
    tests, chores, and finally ``Other``.
    """

    @staticmethod
    def category_of(subject: str) -> str:
        text = subject.strip()
        for name, pattern in CATEGORY_RULES:
            if pattern.match(text):
                return name
        return OTHER

    def categorize(self, subjects: Sequence[str]) -> Dict[str, List[str]]:
        """
        Group commit subjects by category.

        Args:
            subjects: Commit subjects; duplicates are dropped, first occurrence kept

        Returns:
            Ordered dictionary of category -> subjects, in category priority
            order, without empty categories
        """
        buckets: Dict[str, List[str]] = {name: [] for name in CATEGORIES}
        for subject in dict.fromkeys(s for s in subjects if s and s.strip()):
            buckets[self.category_of(subject)].append(subject)
        return {name: items for name, items in buckets.items() if items}
