"""
Changelog writing module.

This module contains the ChangelogWriter class responsible for composing
dated changelog documents (frontmatter plus markdown body) and writing them
to the changelog directory, one file per calendar date.
"""

import logging
import os
from pathlib import Path
from typing import Optional

from .config import DEFAULT_CHANGELOG_DIR, DEFAULT_FILENAME_TEMPLATE

logger = logging.getLogger("changelog-generator.generator")


class ChangelogWriter:
    """
    Write one changelog file per date, never overwriting an existing one.

    The existence check before writing is what makes re-running a no-op
    when nothing new has happened.
    """

    def __init__(
        self,
        directory: str = DEFAULT_CHANGELOG_DIR,
        filename_template: str = DEFAULT_FILENAME_TEMPLATE,
    ) -> None:
        """
        Initialize the writer.

        Args:
            directory: Changelog directory, created on first write
            filename_template: File name pattern with a ``{date}`` field,
                               e.g. ``{date}.md`` or ``{date}-changelog.md``
        """
        if "{date}" not in filename_template:
            raise ValueError(f"filename template {filename_template!r} must contain {{date}}")
        self.directory = Path(directory)
        self.filename_template = filename_template

    def path_for(self, date: str) -> Path:
        return self.directory / self.filename_template.format(date=date)

    def exists(self, date: str) -> bool:
        return self.path_for(date).exists()

    @staticmethod
    def compose(date: str, body: str) -> str:
        """
        Build the full document text.

        Args:
            date: Calendar date, ``YYYY-MM-DD``
            body: Markdown body

        Returns:
            Frontmatter block, a blank line and the body
        """
        frontmatter = f"---\ntitle: Update for {date}\ndate: {date}\n---\n\n"
        return frontmatter + body.strip("\n") + "\n"

    def write(self, date: str, body: str) -> Optional[Path]:
        """
        Write the changelog for ``date`` unless one already exists.

        Returns:
            The path written, or None if the file already existed
        """
        path = self.path_for(date)
        os.makedirs(self.directory, exist_ok=True)

        if path.exists():
            logger.info("Changelog for %s already exists. Skipping.", date)
            return None

        with open(path, "w", encoding="utf-8") as f:
            f.write(self.compose(date, body))
        logger.info("Changelog written to %s", path)
        return path
