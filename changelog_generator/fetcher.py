"""
Git commit fetching module.

This module handles all interactions with the local ``git`` executable for
listing commit subjects, either all of them, those since a checkpoint, or
those from the last few days paired with their commit dates.
"""

import collections
import logging
import os
import subprocess
from typing import Dict, List, Optional, Sequence

from .errors import NoCommitsFound, NotAGitRepository, UnknownRevision
from .models import CommitInfo

# Set up logging
logger = logging.getLogger("changelog-generator.fetcher")

SUBJECT_FORMAT = "--pretty=format:%s"
DATED_FORMAT = "--pretty=format:%ad%x09%s"


class GitCommitFetcher:
    """
    Fetch commit subjects from a local git repository.

    Empty history is detected by asking git whether HEAD resolves, never by
    reading its (translated) error messages.

    Args:
        repo_dir: Directory inside the repository. Defaults to the current
                  working directory.
    """

    def __init__(self, repo_dir: str = ".") -> None:
        self.repo_dir = repo_dir

    def _run(self, args: Sequence[str], check: bool) -> subprocess.CompletedProcess:
        cmd = ["git", *args]
        logger.debug("Running %s in %s", " ".join(cmd), self.repo_dir)
        try:
            return subprocess.run(
                cmd,
                cwd=self.repo_dir,
                check=check,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
                env={**os.environ, "LC_ALL": "C", "LANGUAGE": "C"},
            )
        except FileNotFoundError as e:
            raise NotAGitRepository("git executable not found") from e

    def _git(self, *args: str) -> str:
        """Run a git command and return its stripped stdout."""
        try:
            proc = self._run(args, check=True)
        except subprocess.CalledProcessError as e:
            stderr = (e.stderr or "").strip()
            raise NotAGitRepository(
                f"git {' '.join(args)} failed in {self.repo_dir}: {stderr or e}"
            ) from e
        return proc.stdout.strip()

    def _succeeds(self, *args: str) -> bool:
        """Run a git query and report whether it exited with status 0."""
        return self._run(args, check=False).returncode == 0

    @staticmethod
    def _lines(output: str) -> List[str]:
        return [line.strip() for line in output.splitlines() if line.strip()]

    def has_commits(self) -> bool:
        return self._succeeds("rev-parse", "--verify", "--quiet", "HEAD")

    def is_commit(self, sha: str) -> bool:
        """Return True if ``sha`` names a commit in this repository."""
        return bool(sha) and self._succeeds(
            "rev-parse", "--verify", "--quiet", f"{sha}^{{commit}}"
        )

    def _require_history(self) -> None:
        if not self.has_commits():
            raise NoCommitsFound(f"No commits found in {self.repo_dir}")

    def ensure_repository(self) -> None:
        """
        Check that ``repo_dir`` is inside a git work tree.

        Raises:
            NotAGitRepository: If git is missing or the directory is not a repository
        """
        if self._git("rev-parse", "--is-inside-work-tree") != "true":
            raise NotAGitRepository(f"{self.repo_dir} is not inside a git work tree")

    def head(self) -> str:
        """Return the full hash of HEAD."""
        self._require_history()
        return self._git("rev-parse", "HEAD")

    def root_commit(self) -> str:
        """Return the hash of the repository's root commit (the first one listed)."""
        self._require_history()
        roots = self._lines(self._git("rev-list", "--max-parents=0", "HEAD"))
        if not roots:
            raise NoCommitsFound(f"No root commit found in {self.repo_dir}")
        return roots[0]

    def latest(self) -> CommitInfo:
        """Return the HEAD commit subject."""
        self._require_history()
        subject = self._git("log", "-1", SUBJECT_FORMAT)
        if not subject:
            raise NoCommitsFound(f"No commits found in {self.repo_dir}")
        return CommitInfo(subject=subject)

    def fetch_all(self) -> List[CommitInfo]:
        """
        Fetch every commit subject, most recent first.

        Raises:
            NoCommitsFound: If the history is empty
        """
        self._require_history()
        subjects = self._lines(self._git("log", SUBJECT_FORMAT))
        if not subjects:
            raise NoCommitsFound(f"No commits found in {self.repo_dir}")
        logger.info("Fetched %d commits", len(subjects))
        return [CommitInfo(subject=s) for s in subjects]

    def fetch_since(self, sha: str) -> List[CommitInfo]:
        """
        Fetch commit subjects reachable from HEAD but not from ``sha``.

        Returns an empty list when ``sha`` is HEAD itself; the caller decides
        what an empty delta means.

        Raises:
            NoCommitsFound: If the history is empty
            UnknownRevision: If ``sha`` is not a commit of this repository
        """
        head = self.head()
        if not self.is_commit(sha):
            raise UnknownRevision(f"{sha!r} is not a commit in {self.repo_dir}")
        if self._git("rev-parse", f"{sha}^{{commit}}") == head:
            logger.info("No new commits since %s", sha[:7])
            return []
        subjects = self._lines(self._git("log", f"{sha}..HEAD", SUBJECT_FORMAT))
        logger.info("Fetched %d commits since %s", len(subjects), sha[:7])
        return [CommitInfo(subject=s) for s in subjects]

    def fetch_recent(self, days: int) -> List[CommitInfo]:
        """
        Fetch commits from the last ``days`` days together with their dates.

        Raises:
            NoCommitsFound: If no commit falls inside the window
        """
        self._require_history()
        output = self._git(
            "log", f"--since={days} days ago", "--date=short", DATED_FORMAT
        )
        commits: List[CommitInfo] = []
        for line in self._lines(output):
            date, _, subject = line.partition("\t")
            if subject.strip():
                commits.append(CommitInfo(subject=subject.strip(), date=date.strip()))
        if not commits:
            raise NoCommitsFound(f"No commits found in the last {days} days")
        logger.info("Fetched %d commits from the last %d days", len(commits), days)
        return commits

    @staticmethod
    def group_by_date(commits: Sequence[CommitInfo]) -> Dict[str, List[CommitInfo]]:
        """
        Group dated commits by calendar date.

        Args:
            commits: Commits carrying a ``date``; undated commits are ignored

        Returns:
            Mapping of date -> commits, oldest date first. Identical subjects
            within one date are kept once.
        """
        groups: Dict[str, List[CommitInfo]] = collections.defaultdict(list)
        seen: Dict[str, set] = collections.defaultdict(set)
        for commit in commits:
            if not commit.date:
                continue
            if commit.subject in seen[commit.date]:
                continue
            seen[commit.date].add(commit.subject)
            groups[commit.date].append(commit)
        return {date: groups[date] for date in sorted(groups)}


def subjects_of(commits: Optional[Sequence[CommitInfo]]) -> List[str]:
    """Return the plain subjects of ``commits``."""
    return [c.subject for c in commits or ()]
