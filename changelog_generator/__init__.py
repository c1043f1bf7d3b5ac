"""
Changelog Generator - A modular tool for turning git commit history into dated changelogs.
"""

from .models import ChangelogEntry, CommitInfo
from .errors import (
    ChangelogError,
    EmptyResponse,
    MissingCredential,
    NoCommitsFound,
    NotAGitRepository,
    SummarizerNotLoaded,
    UpstreamError,
)
from .fetcher import GitCommitFetcher
from .checkpoint import CheckpointStore
from .parser import CommitParser, CommitCategorizer
from .summarizer import LocalSummarizer, RemoteSummarizer, is_quality_summary
from .generator import ChangelogWriter
from .pipeline import ChangelogPipeline
from .renderer import load_changelogs, render_page
from .main import main

__all__ = [
    'ChangelogEntry',
    'CommitInfo',
    'ChangelogError',
    'EmptyResponse',
    'MissingCredential',
    'NoCommitsFound',
    'NotAGitRepository',
    'SummarizerNotLoaded',
    'UpstreamError',
    'GitCommitFetcher',
    'CheckpointStore',
    'CommitParser',
    'CommitCategorizer',
    'LocalSummarizer',
    'RemoteSummarizer',
    'is_quality_summary',
    'ChangelogWriter',
    'ChangelogPipeline',
    'load_changelogs',
    'render_page',
    'main'
]
