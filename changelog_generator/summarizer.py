"""
Commit summarization module for the changelog generator.

Two strategies turn a list of commit subjects into changelog markdown:

 - RemoteSummarizer sends a prompt to a hosted chat-completions endpoint
   (OpenRouter) and returns the model's markdown.
 - LocalSummarizer runs a pretrained summarization model through a
   ``transformers`` pipeline, one category of commits at a time, and falls
   back to plain bullets whenever the generated text looks unreliable.
"""

import json
import logging
import re
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests
from nltk.tokenize import RegexpTokenizer
from nltk.tokenize.punkt import PunktSentenceTokenizer

from .config import (
    DEFAULT_LOCAL_MODEL,
    DEFAULT_MODEL,
    DEFAULT_QUALITY_THRESHOLD,
    DEFAULT_TEMPERATURE,
    OPENROUTER_REFERER,
    OPENROUTER_URL,
)
from .errors import EmptyResponse, MissingCredential, SummarizerNotLoaded, UpstreamError
from .parser import CommitCategorizer, CommitParser
from .postprocess import (
    REPEATED_PHRASE_RE,
    clean_summary,
    collapse_repeated_phrases,
    collapse_repeated_words,
    fix_markdown_headings,
    format_commit_bullet,
)

# logging
logger = logging.getLogger("changelog-generator.summarizer")

PROMPT_TEMPLATE = """\
You're writing a changelog for a developer-facing product like Stripe or Twilio.
{date_line}
Commit messages:
{commits}

Instructions:
- Group entries into sections like "New Features", "Improvements", "Fixes", etc.
- Start each section with a bold title (e.g. **New Features**)
- Use bullet points to describe each change clearly and concisely
- Focus on what changed and why it matters to the end-user developer
- Respond in markdown only
- Do not return an empty response
"""

_WORDS = RegexpTokenizer(r"\w+")
_SENTENCES = PunktSentenceTokenizer()

REPEATED_RUN_RE = re.compile(r"\b(\w+)(?:\s+\1\b){2,}", re.I)
TRUNCATION_SUFFIXES = ("...", "…", ",", ";", ":", "-")
DANGLING_WORDS = {"and", "or", "but", "the", "an", "of", "with"}


def build_prompt(subjects: Sequence[str], date: Optional[str] = None) -> str:
    """Fill the changelog prompt with one bullet per commit subject."""
    date_line = f"These changes were made on {date}.\n" if date else ""
    commits = "\n".join(f"- {s}" for s in subjects)
    return PROMPT_TEMPLATE.format(date_line=date_line, commits=commits)


def split_sentences(text: str) -> List[str]:
    return [s.strip() for s in _SENTENCES.tokenize(text) if s.strip()]


def is_quality_summary(text: Optional[str], threshold: float = DEFAULT_QUALITY_THRESHOLD) -> bool:
    """
    Decide whether generated summary text is usable.

    Rejected when the text is 10 characters or shorter, when the share of
    distinct words is at or below ``threshold``, when a word repeats three or
    more times in a row or a phrase repeats back to back, or when the text
    looks cut off (trailing ellipsis or comma, or a dangling connective
    such as "and" or "the").

    Args:
        text: Generated summary
        threshold: Minimum unique-word ratio, exclusive

    Returns:
        True if the summary can be used as is
    """
    if not text:
        return False
    stripped = text.strip()
    if len(stripped) <= 10:
        return False

    words = [w.lower() for w in _WORDS.tokenize(stripped)]
    if not words:
        return False
    if len(set(words)) / len(words) <= threshold:
        return False

    if REPEATED_RUN_RE.search(stripped) or REPEATED_PHRASE_RE.search(stripped):
        return False

    if stripped.endswith(TRUNCATION_SUFFIXES):
        return False
    if stripped[-1] not in ".!?" and words[-1] in DANGLING_WORDS:
        return False
    return True


def _extract_content(data: Any) -> Optional[str]:
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if isinstance(content, str) and content.strip():
        return content
    return None


class RemoteSummarizer:
    """
    Summarize commits through an OpenAI-compatible chat completions API.

    Args:
        api_key: Bearer token for the API. A missing key fails every call
                 with MissingCredential before any request is made.
        model: Model identifier sent with each request
        temperature: Sampling temperature sent with each request
        url: Chat completions endpoint
        timeout: Seconds to wait for the API, or None to wait indefinitely
        session: requests session to use; a new one is created if omitted
    """

    def __init__(
        self,
        api_key: Optional[str],
        model: str = DEFAULT_MODEL,
        temperature: float = DEFAULT_TEMPERATURE,
        url: str = OPENROUTER_URL,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_key = api_key
        self.model = model
        self.temperature = temperature
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def ensure_credentials(self) -> None:
        """
        Raises:
            MissingCredential: If no API key is configured
        """
        if not self.api_key:
            raise MissingCredential("Missing OPENROUTER_API_KEY (set it in the environment or .env.local)")

    def summarize(self, subjects: Sequence[str], date: Optional[str] = None) -> str:
        """
        Ask the API for changelog markdown describing ``subjects``.

        Args:
            subjects: Commit subjects to describe
            date: Calendar date the commits belong to, if grouped by date

        Returns:
            Markdown with bold section titles turned into ``##`` headings

        Raises:
            MissingCredential: If no API key is configured
            UpstreamError: If the request fails or the status is not 2xx
            EmptyResponse: If the response has no message content
        """
        self.ensure_credentials()

        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": build_prompt(subjects, date)}],
            "temperature": self.temperature,
        }
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": OPENROUTER_REFERER,
        }

        logger.info("Requesting summary of %d commits from %s", len(subjects), self.model)
        try:
            response = self.session.post(self.url, headers=headers, json=payload, timeout=self.timeout)
        except requests.RequestException as e:
            raise UpstreamError(f"Request to {self.url} failed: {e}") from e

        if not response.ok:
            raise UpstreamError(
                f"Summarization API returned HTTP {response.status_code}: {response.text[:200]}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise EmptyResponse("Summarization API returned a non-JSON body") from e

        content = _extract_content(data)
        if content is None:
            logger.error("No summary returned from API: %s", json.dumps(data, indent=2)[:1000])
            raise EmptyResponse("No summary returned from the summarization API.")

        return fix_markdown_headings(content.strip())

    def close(self) -> None:
        self.session.close()


class LocalSummarizer:
    """
    Summarize commits with a locally loaded summarization model.

    The model is an explicitly owned resource: call ``load()`` once (or use
    the instance as a context manager), pass the instance to whatever needs
    it, and ``close()`` it when the run is over.

    Args:
        model_name: Pretrained summarization model to load
        max_length: Upper bound on generated summary length, in tokens
        min_length: Lower bound on generated summary length, in tokens
        quality_threshold: Unique-word ratio used by ``is_quality_summary``
        pipeline_factory: Callable building the pipeline, called as
                          ``factory("summarization", model=model_name)``.
                          Defaults to ``transformers.pipeline``.
    """

    def __init__(
        self,
        model_name: str = DEFAULT_LOCAL_MODEL,
        max_length: int = 130,
        min_length: int = 30,
        quality_threshold: float = DEFAULT_QUALITY_THRESHOLD,
        pipeline_factory: Optional[Callable[..., Any]] = None,
    ) -> None:
        self.model_name = model_name
        self.max_length = max_length
        self.min_length = min_length
        self.quality_threshold = quality_threshold
        self.categorizer = CommitCategorizer()
        self._pipeline_factory = pipeline_factory
        self._pipeline: Optional[Callable[..., Any]] = None

    @property
    def loaded(self) -> bool:
        return self._pipeline is not None

    def load(self) -> "LocalSummarizer":
        """Build the summarization pipeline. Calling it again is a no-op."""
        if self._pipeline is not None:
            return self
        factory = self._pipeline_factory
        if factory is None:
            # transformers is heavy and only needed for the local backend
            from transformers import pipeline as factory
        logger.info("Loading summarization model %s", self.model_name)
        self._pipeline = factory("summarization", model=self.model_name)
        return self

    def close(self) -> None:
        if self._pipeline is not None:
            logger.debug("Releasing summarization model %s", self.model_name)
        self._pipeline = None

    def __enter__(self) -> "LocalSummarizer":
        return self.load()

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _length_bounds(self, text: str) -> Dict[str, int]:
        words = len(text.split())
        max_length = max(8, min(self.max_length, words * 2))
        min_length = min(self.min_length, max(1, max_length // 2))
        return {"max_length": max_length, "min_length": min_length}

    def summarize_category(self, category: str, subjects: Sequence[str]) -> List[str]:
        """
        Summarize one category of commits into bullet lines.

        Falls back to one reformatted bullet per commit if the model raises
        or produces text that fails ``is_quality_summary``.
        """
        if self._pipeline is None:
            raise SummarizerNotLoaded("LocalSummarizer.load() must be called before summarizing")

        fallback = [format_commit_bullet(s) for s in subjects]
        text = " ".join(
            f"{CommitParser.describe(s).rstrip('.')}." for s in subjects
        )
        try:
            result = self._pipeline(text, do_sample=False, **self._length_bounds(text))
            raw = str(result[0]["summary_text"])
        except Exception as e:
            logger.warning("Summarization failed for %s, listing commits instead: %s", category, e)
            return fallback

        # judge the ending before clean_summary adds a full stop
        candidate = collapse_repeated_phrases(collapse_repeated_words(" ".join(raw.split())))
        if not is_quality_summary(candidate, self.quality_threshold):
            logger.info("Low quality summary for %s, listing commits instead", category)
            logger.debug("Rejected summary: %r", raw)
            return fallback

        return [f"- {sentence}" for sentence in split_sentences(clean_summary(candidate))]

    def summarize(self, subjects: Sequence[str], date: Optional[str] = None) -> str:
        """
        Categorize ``subjects`` and summarize each category.

        Returns:
            Markdown starting with a ``Tags:`` line followed by one ``##``
            section per non-empty category
        """
        if self._pipeline is None:
            raise SummarizerNotLoaded("LocalSummarizer.load() must be called before summarizing")

        buckets = self.categorizer.categorize(subjects)
        lines = [f"Tags: {', '.join(buckets)}", ""]
        for category, items in buckets.items():
            logger.info("Summarizing %d %s commits%s", len(items), category.lower(),
                        f" for {date}" if date else "")
            lines.append(f"## {category}")
            lines.append("")
            lines.extend(self.summarize_category(category, items))
            lines.append("")
        return "\n".join(lines).rstrip("\n")
