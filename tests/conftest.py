"""Shared fixtures: throwaway git repositories and a fake summarizer."""

import os
import subprocess
from pathlib import Path

import pytest

from changelog_generator.errors import UpstreamError


def git(repo: Path, *args: str, env=None) -> str:
    full_env = dict(os.environ)
    if env:
        full_env.update(env)
    proc = subprocess.run(
        ["git", *args], cwd=repo, check=True, capture_output=True, text=True, env=full_env
    )
    return proc.stdout.strip()


def make_commit(repo: Path, subject: str, date: str = None) -> str:
    """Create an empty commit, optionally dated ``YYYY-MM-DD`` at noon."""
    env = None
    if date:
        stamp = f"{date}T12:00:00"
        env = {"GIT_AUTHOR_DATE": stamp, "GIT_COMMITTER_DATE": stamp}
    git(repo, "commit", "--allow-empty", "-q", "-m", subject, env=env)
    return git(repo, "rev-parse", "HEAD")


@pytest.fixture
def git_repo(tmp_path):
    """Create an empty git repository with a committer identity."""
    repo = tmp_path / "repo"
    repo.mkdir()
    git(repo, "init", "-q")
    git(repo, "config", "user.email", "dev@example.com")
    git(repo, "config", "user.name", "Dev")
    git(repo, "config", "commit.gpgsign", "false")
    return repo


class FakeSummarizer:
    """Summarizer stand-in that lists subjects and records every call."""

    def __init__(self, fail_dates=()):
        self.calls = []
        self.fail_dates = set(fail_dates)

    def summarize(self, subjects, date=None):
        self.calls.append((list(subjects), date))
        if date in self.fail_dates:
            raise UpstreamError("upstream exploded", status_code=502)
        return "## Changes\n\n" + "\n".join(f"- {s}" for s in subjects)


@pytest.fixture
def fake_summarizer():
    return FakeSummarizer()
