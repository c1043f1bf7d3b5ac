"""
Checkpoint storage for incremental changelog runs.

The checkpoint is a single commit hash in a plain text file. It is only
advanced after a changelog has been summarized and written.
"""

import logging
import os

from .fetcher import GitCommitFetcher

logger = logging.getLogger("changelog-generator.checkpoint")


class CheckpointStore:
    """
    Read and write the last processed commit hash.

    No locking is done; a single run at a time is assumed.

    Args:
        path: Location of the checkpoint file
        fetcher: Used to find the root commit when no checkpoint exists yet
    """

    def __init__(self, path: str, fetcher: GitCommitFetcher) -> None:
        self.path = path
        self.fetcher = fetcher

    def exists(self) -> bool:
        return os.path.isfile(self.path)

    def read(self) -> str:
        """
        Return the recorded hash, or the repository's root commit if the
        checkpoint file is absent, empty, or names a commit this repository
        does not have (e.g. after a history rewrite).
        """
        if self.exists():
            with open(self.path, "r", encoding="utf-8") as f:
                sha = f.read().strip()
            if not sha:
                logger.warning("Checkpoint file %s is empty, using root commit", self.path)
            elif self.fetcher.is_commit(sha):
                return sha
            else:
                logger.warning("Checkpoint %s in %s is not a known commit, using root commit",
                               sha[:7], self.path)
        return self.fetcher.root_commit()

    def write(self, sha: str) -> None:
        """Overwrite the checkpoint with ``sha``."""
        with open(self.path, "w", encoding="utf-8") as f:
            f.write(sha)
        logger.info("Checkpoint updated to %s", sha[:7])
