"""
Changelog generation pipeline.

Each run mode is the same linear sequence: fetch commits, summarize them,
write a dated changelog. Modes differ only in which commits they fetch and
how many files they produce.
"""

import datetime
import logging
from pathlib import Path
from typing import List, Optional

from .checkpoint import CheckpointStore
from .errors import EmptyResponse, UpstreamError
from .fetcher import GitCommitFetcher, subjects_of
from .generator import ChangelogWriter

logger = logging.getLogger("changelog-generator.pipeline")


def today_iso() -> str:
    """Today's local date as ``YYYY-MM-DD``."""
    return datetime.date.today().isoformat()


class ChangelogPipeline:
    """
    Coordinate fetcher, summarizer and writer for one run.

    Args:
        fetcher: Commit source
        summarizer: Any object with ``summarize(subjects, date=None) -> str``
        writer: Changelog writer
        checkpoint: Checkpoint store, required only by ``run_since_checkpoint``
    """

    def __init__(
        self,
        fetcher: GitCommitFetcher,
        summarizer,
        writer: ChangelogWriter,
        checkpoint: Optional[CheckpointStore] = None,
    ) -> None:
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.writer = writer
        self.checkpoint = checkpoint

    def _write(self, date: str, subjects: List[str]) -> Optional[Path]:
        logger.info("Commits for %s:\n%s", date, "\n".join(subjects))
        body = self.summarizer.summarize(subjects, date)
        logger.debug("Generated changelog for %s:\n%s", date, body)
        return self.writer.write(date, body)

    def run_since_checkpoint(self, today: Optional[str] = None) -> List[Path]:
        """
        Summarize commits made since the checkpoint into today's changelog.

        When there are no new commits and today has no changelog yet, the
        HEAD commit is used so that the day still gets one. The checkpoint
        moves to HEAD only after a file has been written.
        """
        if self.checkpoint is None:
            raise ValueError("run_since_checkpoint requires a CheckpointStore")
        today = today or today_iso()

        if self.writer.exists(today):
            logger.info("Changelog for %s already exists. Skipping generation.", today)
            return []

        commits = self.fetcher.fetch_since(self.checkpoint.read())
        if not commits:
            logger.info("No new commits, but no changelog exists yet; creating one from HEAD.")
            commits = [self.fetcher.latest()]

        head = self.fetcher.head()
        path = self._write(today, subjects_of(commits))
        if path is not None:
            self.checkpoint.write(head)
            return [path]
        return []

    def run_all(self, today: Optional[str] = None) -> List[Path]:
        """Summarize the whole history into today's changelog."""
        today = today or today_iso()
        if self.writer.exists(today):
            logger.info("Changelog for %s already exists. Skipping generation.", today)
            return []
        commits = self.fetcher.fetch_all()
        path = self._write(today, list(dict.fromkeys(subjects_of(commits))))
        return [path] if path is not None else []

    def run_recent(self, days: int) -> List[Path]:
        """
        Write one changelog per date for the commits of the last ``days`` days.

        Dates that already have a changelog are skipped without calling the
        summarizer. A failed summary for one date is logged and the remaining
        dates are still processed.
        """
        groups = self.fetcher.group_by_date(self.fetcher.fetch_recent(days))
        written: List[Path] = []
        for date, commits in groups.items():
            if self.writer.exists(date):
                logger.info("Changelog for %s already exists. Skipping.", date)
                continue
            try:
                path = self._write(date, subjects_of(commits))
            except (UpstreamError, EmptyResponse) as e:
                logger.error("Failed to generate changelog for %s: %s", date, e)
                continue
            if path is not None:
                written.append(path)
        logger.info("Wrote %d of %d changelogs", len(written), len(groups))
        return written
