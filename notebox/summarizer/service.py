"""Extractive note summarizer.

Picks sentences verbatim: the first, the middle one and, for longer texts,
the last. Sentence splitting is deliberately naive (any run of ``.``, ``!``
or ``?`` ends a sentence), so abbreviations and decimals split too.

Picked sentences are trimmed before joining: ``"Hello world. Foo bar. Baz."``
gives ``"Hello world. Foo bar."``. Earlier releases joined the untrimmed
fragments (``"Hello world.  Foo bar."``), so summaries stored by them are not
byte-identical to what this module produces for the same content.
"""
import asyncio
import logging
import re
from typing import Protocol, runtime_checkable

from notebox.shared.config import settings

logger = logging.getLogger("notebox.summarizer")

_SENTENCE_END = re.compile(r"[.!?]+")


class SummarizeError(Exception):
    pass


@runtime_checkable
class Summarizer(Protocol):
    async def __call__(self, text: str) -> str:
        ...


def split_sentences(text: str) -> list[str]:
    return [s.strip() for s in _SENTENCE_END.split(text) if s.strip()]


def extract_summary(text: str) -> str:
    sentences = split_sentences(text)
    n = len(sentences)
    # short (or sentence-less) input comes back exactly as given
    if n <= 2:
        return text

    summary = f"{sentences[0]}. {sentences[n // 2]}."
    if n > 4:
        summary += f" {sentences[-1]}."
    return summary


async def summarize(text: str, delay: float | None = None) -> str:
    """Summarize `text` after a simulated round trip of `delay` seconds."""
    try:
        await asyncio.sleep(settings.SUMMARY_DELAY_SECONDS if delay is None else delay)
        return extract_summary(text)
    except Exception as e:
        logger.exception("summarize_failed")
        raise SummarizeError("Failed to summarize text") from e


class DelayedSummarizer:
    """`Summarizer` bound to a fixed delay; the store's default collaborator."""

    def __init__(self, delay: float | None = None):
        self.delay = delay

    async def __call__(self, text: str) -> str:
        return await summarize(text, delay=self.delay)
