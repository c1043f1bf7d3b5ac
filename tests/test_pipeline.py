"""End-to-end tests for ChangelogPipeline with a fake summarizer."""

import datetime
import logging

import pytest

from changelog_generator.checkpoint import CheckpointStore
from changelog_generator.errors import NoCommitsFound
from changelog_generator.fetcher import GitCommitFetcher
from changelog_generator.generator import ChangelogWriter
from changelog_generator.pipeline import ChangelogPipeline
from tests.conftest import FakeSummarizer, make_commit


def build(repo, summarizer, template="{date}.md"):
    fetcher = GitCommitFetcher(str(repo))
    writer = ChangelogWriter(str(repo / "changelogs"), template)
    checkpoint = CheckpointStore(str(repo / ".last-commit"), fetcher)
    return ChangelogPipeline(fetcher, summarizer, writer, checkpoint)


def days_ago(n):
    return (datetime.date.today() - datetime.timedelta(days=n)).isoformat()


def test_checkpoint_run_writes_once(git_repo, fake_summarizer, caplog):
    make_commit(git_repo, "Initial commit")
    make_commit(git_repo, "feat: add login")
    head = make_commit(git_repo, "fix: crash on startup")
    pipeline = build(git_repo, fake_summarizer)

    written = pipeline.run_since_checkpoint("2024-01-01")

    path = git_repo / "changelogs" / "2024-01-01.md"
    assert written == [path]
    text = path.read_text(encoding="utf-8")
    assert "title: Update for 2024-01-01" in text
    assert "feat: add login" in text
    assert "fix: crash on startup" in text
    assert (git_repo / ".last-commit").read_text() == head

    with caplog.at_level(logging.INFO, logger="changelog-generator"):
        assert pipeline.run_since_checkpoint("2024-01-01") == []
    assert "Skipping" in caplog.text
    assert len(fake_summarizer.calls) == 1
    assert list((git_repo / "changelogs").iterdir()) == [path]


def test_checkpoint_run_only_new_commits(git_repo, fake_summarizer):
    make_commit(git_repo, "Initial commit")
    make_commit(git_repo, "feat: add login")
    pipeline = build(git_repo, fake_summarizer)
    pipeline.run_since_checkpoint("2024-01-01")

    make_commit(git_repo, "fix: crash on startup")
    pipeline.run_since_checkpoint("2024-01-02")

    assert fake_summarizer.calls[1] == (["fix: crash on startup"], "2024-01-02")


def test_checkpoint_run_falls_back_to_head(git_repo, fake_summarizer):
    head = make_commit(git_repo, "Initial commit")
    (git_repo / ".last-commit").write_text(head)
    pipeline = build(git_repo, fake_summarizer)

    written = pipeline.run_since_checkpoint("2024-01-03")

    assert len(written) == 1
    assert fake_summarizer.calls == [(["Initial commit"], "2024-01-03")]


def test_checkpoint_not_advanced_without_write(git_repo):
    make_commit(git_repo, "Initial commit")
    make_commit(git_repo, "feat: add login")

    class Failing(FakeSummarizer):
        def summarize(self, subjects, date=None):
            raise RuntimeError("model crashed")

    pipeline = build(git_repo, Failing())
    with pytest.raises(RuntimeError):
        pipeline.run_since_checkpoint("2024-01-01")
    assert not (git_repo / ".last-commit").exists()
    assert not (git_repo / "changelogs" / "2024-01-01.md").exists()


def test_empty_history_writes_nothing(git_repo, fake_summarizer):
    pipeline = build(git_repo, fake_summarizer)

    with pytest.raises(NoCommitsFound):
        pipeline.run_since_checkpoint("2024-01-01")
    with pytest.raises(NoCommitsFound):
        pipeline.run_all("2024-01-01")

    assert fake_summarizer.calls == []
    assert not (git_repo / "changelogs").exists() or not any((git_repo / "changelogs").iterdir())


def test_run_all(git_repo, fake_summarizer):
    make_commit(git_repo, "feat: add login")
    make_commit(git_repo, "fix: crash on startup")
    pipeline = build(git_repo, fake_summarizer)

    written = pipeline.run_all("2024-01-01")

    assert [p.name for p in written] == ["2024-01-01.md"]
    assert fake_summarizer.calls == [(["fix: crash on startup", "feat: add login"], "2024-01-01")]
    assert pipeline.run_all("2024-01-01") == []


def test_run_recent_one_file_per_date(git_repo, fake_summarizer):
    make_commit(git_repo, "feat: add login", date=days_ago(2))
    make_commit(git_repo, "fix: crash on startup", date=days_ago(1))
    make_commit(git_repo, "docs: readme", date=days_ago(1))
    pipeline = build(git_repo, fake_summarizer, "{date}-changelog.md")

    written = pipeline.run_recent(7)

    assert [p.name for p in written] == [
        f"{days_ago(2)}-changelog.md",
        f"{days_ago(1)}-changelog.md",
    ]
    assert fake_summarizer.calls == [
        (["feat: add login"], days_ago(2)),
        (["docs: readme", "fix: crash on startup"], days_ago(1)),
    ]

    assert pipeline.run_recent(7) == []
    assert len(fake_summarizer.calls) == 2


def test_run_recent_continues_after_failed_date(git_repo, caplog):
    make_commit(git_repo, "feat: add login", date=days_ago(2))
    make_commit(git_repo, "fix: crash on startup", date=days_ago(1))
    summarizer = FakeSummarizer(fail_dates={days_ago(2)})
    pipeline = build(git_repo, summarizer)

    with caplog.at_level(logging.ERROR, logger="changelog-generator.pipeline"):
        written = pipeline.run_recent(7)

    assert [p.name for p in written] == [f"{days_ago(1)}.md"]
    assert "upstream exploded" in caplog.text


def test_stale_checkpoint_regenerates_from_root(git_repo, fake_summarizer):
    make_commit(git_repo, "Initial commit")
    make_commit(git_repo, "feat: add login")
    head = make_commit(git_repo, "fix: crash on startup")
    (git_repo / ".last-commit").write_text("deadbee")
    pipeline = build(git_repo, fake_summarizer)

    written = pipeline.run_since_checkpoint("2024-01-04")

    assert written == [git_repo / "changelogs" / "2024-01-04.md"]
    assert fake_summarizer.calls == [(["fix: crash on startup", "feat: add login"], "2024-01-04")]
    assert (git_repo / ".last-commit").read_text() == head
