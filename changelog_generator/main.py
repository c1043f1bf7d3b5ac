#!/usr/bin/env python3
"""
Main driver script for the changelog generator.

This script provides the command-line interface and coordinates all modules
to generate dated changelogs from git commit history and render them to HTML.

Usage (example):
    changelog-generator generate                  # commits since the last run
    changelog-generator generate --days 7         # one changelog per day
    changelog-generator generate --all --backend local
    changelog-generator render --output changelog.html --open
"""

import argparse
import logging
import os
import sys
import webbrowser
from typing import List, Optional

from .checkpoint import CheckpointStore
from .config import Settings, load_settings
from .errors import ChangelogError, MissingCredential, NoCommitsFound, NotAGitRepository
from .fetcher import GitCommitFetcher
from .generator import ChangelogWriter
from .pipeline import ChangelogPipeline
from .renderer import write_page
from .summarizer import LocalSummarizer, RemoteSummarizer

logger = logging.getLogger("changelog-generator")


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="changelog-generator",
        description="Generate dated changelogs from git commit history.",
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    gen = sub.add_parser("generate", help="Summarize commits into changelog files")
    gen.add_argument("--repo", default=".", help="Path inside the git repository")
    gen.add_argument("--output-dir", "-o", default=None,
                     help=f"Changelog directory (default: <repo>/{settings.changelog_dir})")
    gen.add_argument("--checkpoint-file", default=None,
                     help=f"Checkpoint file (default: <repo>/{settings.checkpoint_file})")
    gen.add_argument("--filename-template", default=settings.filename_template,
                     help="Changelog file name pattern containing {date}")
    source = gen.add_mutually_exclusive_group()
    source.add_argument("--all", action="store_true", help="Summarize the whole history into today's changelog")
    source.add_argument("--days", type=int, help="Write one changelog per day for the last N days")
    gen.add_argument("--backend", choices=("remote", "local"), default="remote",
                     help="Summarize with the hosted API or a local model")
    gen.add_argument("--model", default=settings.model, help="Remote model identifier")
    gen.add_argument("--temperature", type=float, default=settings.temperature, help="Remote sampling temperature")
    gen.add_argument("--local-model", default=settings.local_model, help="Local summarization model")
    gen.add_argument("--quality-threshold", type=float, default=settings.quality_threshold,
                     help="Reject local summaries whose unique-word ratio is at or below this")

    ren = sub.add_parser("render", help="Render changelog files to an HTML page")
    ren.add_argument("--input-dir", "-i", default=settings.changelog_dir, help="Changelog directory")
    ren.add_argument("--output", "-o", default="changelog.html", help="HTML output file")
    ren.add_argument("--open", action="store_true", help="Open the page in a web browser")
    return parser


def _generate(args: argparse.Namespace, settings: Settings) -> int:
    fetcher = GitCommitFetcher(args.repo)
    fetcher.ensure_repository()

    writer = ChangelogWriter(
        args.output_dir or os.path.join(args.repo, settings.changelog_dir),
        args.filename_template,
    )
    checkpoint = CheckpointStore(
        args.checkpoint_file or os.path.join(args.repo, settings.checkpoint_file),
        fetcher,
    )

    if args.backend == "remote":
        summarizer = RemoteSummarizer(
            settings.api_key,
            model=args.model,
            temperature=args.temperature,
            url=settings.api_url,
            timeout=settings.timeout,
        )
        summarizer.ensure_credentials()
    else:
        summarizer = LocalSummarizer(args.local_model, quality_threshold=args.quality_threshold)
        summarizer.load()

    try:
        pipeline = ChangelogPipeline(fetcher, summarizer, writer, checkpoint)
        if args.days is not None:
            written = pipeline.run_recent(args.days)
        elif args.all:
            written = pipeline.run_all()
        else:
            written = pipeline.run_since_checkpoint()
    finally:
        summarizer.close()

    if written:
        print(f"✓ Wrote {len(written)} changelog(s):")
        for path in written:
            print(f"  {path}")
    else:
        print("No new changelog written.")
    return 0


def _render(args: argparse.Namespace) -> int:
    path = write_page(args.input_dir, args.output)
    print(f"✓ Changelog page written: {path}")
    if args.open:
        webbrowser.open(path.resolve().as_uri())
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the changelog generator.

    Parses command line arguments, runs the requested command and maps
    failures to an exit status.

    Returns:
        Process exit code
    """
    settings = load_settings()
    args = build_parser(settings).parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        if args.command == "render":
            return _render(args)
        return _generate(args, settings)

    except NoCommitsFound as e:
        logger.warning("%s", e)
        print(f"Warning: {e}")
        return 0
    except (NotAGitRepository, MissingCredential) as e:
        logger.error("%s", e)
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        logger.info("Changelog generation interrupted by user")
        print("\nOperation cancelled by user")
        return 1
    except (ChangelogError, OSError, ImportError) as e:
        logger.error("Changelog generation failed: %s", e)
        print(f"Error: changelog generation failed - {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
