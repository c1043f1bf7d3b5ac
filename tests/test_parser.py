"""Tests for CommitParser and CommitCategorizer."""

import pytest

from changelog_generator.parser import CATEGORIES, OTHER, CommitCategorizer, CommitParser


def test_parse_conventional_subject():
    assert CommitParser.parse("feat(auth): add login") == ("feat", "auth", "add login")
    assert CommitParser.parse("fix!: drop legacy flag") == ("fix", None, "drop legacy flag")


def test_parse_free_form_subject():
    assert CommitParser.parse("Bump version") == (None, None, "Bump version")
    assert CommitParser.describe("docs: update readme") == "update readme"


@pytest.mark.parametrize("subject, category", [
    ("feat: add login", "Features"),
    ("Add dark mode", "Features"),
    ("fix: crash on startup", "Fixes"),
    ("Hotfix for payments", "Fixes"),
    ("refactor(core): split module", "Improvements"),
    ("perf: faster query", "Improvements"),
    ("docs: describe setup", "Documentation"),
    ("test: cover parser", "Tests"),
    ("chore: bump deps", "Chores"),
    ("ci: cache pip", "Chores"),
    ("Rework everything", OTHER),
    ("addendum to notes", OTHER),
])
def test_category_of(subject, category):
    assert CommitCategorizer.category_of(subject) == category


def test_features_win_over_later_rules():
    # "add" matches the features rule before the fixes rule is considered
    assert CommitCategorizer.category_of("add fix for login") == "Features"


def test_categorize_partitions_input():
    subjects = [
        "feat: add login",
        "fix: crash on startup",
        "chore: bump deps",
        "Rework everything",
        "feat: add login",
        "docs: describe setup",
    ]

    buckets = CommitCategorizer().categorize(subjects)

    flattened = [s for items in buckets.values() for s in items]
    assert sorted(flattened) == sorted(set(subjects))
    assert len(flattened) == len(set(flattened))


def test_categorize_drops_empty_and_keeps_priority_order():
    buckets = CommitCategorizer().categorize(["Rework", "chore: x", "fix: y", "feat: z"])

    assert list(buckets) == ["Features", "Fixes", "Chores", OTHER]
    assert all(buckets.values())
    assert list(buckets) == [c for c in CATEGORIES if c in buckets]


def test_categorize_is_deterministic():
    subjects = ["fix: a", "feat: b", "misc c", "test: d"]
    categorizer = CommitCategorizer()

    assert categorizer.categorize(subjects) == categorizer.categorize(list(subjects))


def test_categorize_empty():
    assert CommitCategorizer().categorize([]) == {}
