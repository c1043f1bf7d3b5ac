"""
Configuration for the changelog generator.

Settings come from the environment (optionally seeded from a local
``.env.local`` file) and are then overridden by command line flags.
"""

import logging
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

logger = logging.getLogger("changelog-generator.config")

OPENROUTER_URL = "https://openrouter.ai/api/v1/chat/completions"
OPENROUTER_REFERER = "http://localhost:3000/"
DEFAULT_MODEL = "openai/gpt-3.5-turbo"
DEFAULT_TEMPERATURE = 0.7
DEFAULT_LOCAL_MODEL = "facebook/bart-large-cnn"
DEFAULT_QUALITY_THRESHOLD = 0.6

DEFAULT_ENV_FILE = ".env.local"
DEFAULT_CHANGELOG_DIR = "changelogs"
DEFAULT_CHECKPOINT_FILE = ".last-commit"
DEFAULT_FILENAME_TEMPLATE = "{date}.md"


@dataclass
class Settings:
    """Resolved runtime settings."""
    api_key: Optional[str] = None
    model: str = DEFAULT_MODEL
    temperature: float = DEFAULT_TEMPERATURE
    api_url: str = OPENROUTER_URL
    local_model: str = DEFAULT_LOCAL_MODEL
    quality_threshold: float = DEFAULT_QUALITY_THRESHOLD
    changelog_dir: str = DEFAULT_CHANGELOG_DIR
    checkpoint_file: str = DEFAULT_CHECKPOINT_FILE
    filename_template: str = DEFAULT_FILENAME_TEMPLATE
    timeout: Optional[float] = None


def load_settings(env_file: Optional[str] = DEFAULT_ENV_FILE) -> Settings:
    """
    Build settings from the process environment.

    Args:
        env_file: Path of a dotenv file to load first. Values already present
                  in the environment win over the file. None skips the file.

    Returns:
        Settings populated from ``OPENROUTER_API_KEY``, ``OPENROUTER_MODEL``
        and ``CHANGELOG_QUALITY_THRESHOLD``.
    """
    if env_file and os.path.exists(env_file):
        load_dotenv(env_file)
        logger.debug("Loaded environment from %s", env_file)

    settings = Settings(api_key=os.environ.get("OPENROUTER_API_KEY") or None)

    model = os.environ.get("OPENROUTER_MODEL")
    if model:
        settings.model = model

    threshold = os.environ.get("CHANGELOG_QUALITY_THRESHOLD")
    if threshold:
        try:
            settings.quality_threshold = float(threshold)
        except ValueError:
            logger.warning("Ignoring invalid CHANGELOG_QUALITY_THRESHOLD=%r", threshold)

    return settings
