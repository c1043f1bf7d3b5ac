"""
Error taxonomy for the changelog generator.

Setup failures (no repository, no credential) abort a run; per-unit failures
(one date, one category) are caught and logged by the caller.
"""

from typing import Optional


class ChangelogError(RuntimeError):
    """Base class for all changelog generator failures."""


class NotAGitRepository(ChangelogError):
    """The git command failed or the working directory is not a repository."""


class NoCommitsFound(ChangelogError):
    """The commit query returned nothing."""


class MissingCredential(ChangelogError):
    """No API key configured for the remote summarizer."""


class UpstreamError(ChangelogError):
    """The summarization API answered with a non-success status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class EmptyResponse(ChangelogError):
    """The summarization API answered without usable content."""


class SummarizerNotLoaded(ChangelogError):
    """The local model was used before load() was called."""


class UnknownRevision(ChangelogError):
    """A commit hash does not name a commit in the repository."""
