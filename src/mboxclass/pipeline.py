"""Classification pipeline tying together mail parsing, statistics and scoring."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path

from .config import DEFAULT_ENCODING, ConfigurationError
from .mailbox import check_source, open_mailbox
from .scorer import Candidate, NaiveBayesScorer
from .statistics import CollectionStatistics, SyntheticCollection
from .types import STDIN_MARKER, Classification, MailSource
from .vocabulary import FeatureVocabulary

LOGGER = logging.getLogger(__name__)

MIN_SOURCES = 3
MIN_SOURCES_WITH_SYNTHETIC = 2


def parse_source(value: str) -> MailSource:
    """Turn a command-line argument into a :class:`MailSource`."""

    if value == STDIN_MARKER:
        return MailSource(path=None)
    if not value or not value.strip():
        raise ConfigurationError("Mail source path cannot be empty.")
    return MailSource(path=Path(value).expanduser())


def read_vocabulary(source: MailSource, *, encoding: str = DEFAULT_ENCODING) -> FeatureVocabulary:
    """Build the vocabulary from the first email of ``source``."""

    with open_mailbox(source, encoding=encoding) as reader:
        email = reader.read_email()
    vocabulary = FeatureVocabulary.from_email(email or "")
    LOGGER.debug("Vocabulary of %s holds %s word(s)", source.label, len(vocabulary))
    return vocabulary


def gather_statistics(
    source: MailSource,
    vocabulary: FeatureVocabulary,
    *,
    encoding: str = DEFAULT_ENCODING,
) -> CollectionStatistics:
    """Drain ``source`` and count document frequencies for ``vocabulary``."""

    with open_mailbox(source, encoding=encoding) as reader:
        return CollectionStatistics.gather(source.label, reader, vocabulary)


def classify_sources(
    sources: Sequence[MailSource],
    *,
    synthetic: SyntheticCollection | None = None,
    encoding: str = DEFAULT_ENCODING,
) -> Classification:
    """Classify the last source's email against the preceding collections.

    Collections are read strictly in the given order, one stream at a time;
    the synthetic collection, when present, is scored last.
    """

    minimum = MIN_SOURCES if synthetic is None else MIN_SOURCES_WITH_SYNTHETIC
    if len(sources) < minimum:
        raise ConfigurationError(
            f"At least {minimum} mail sources are required "
            f"(collections followed by the email to classify), got {len(sources)}."
        )
    if sum(1 for source in sources if source.is_stdin) > 1:
        raise ConfigurationError("Standard input can only be used once.")
    for source in sources:
        check_source(source)

    *collections, target = sources
    vocabulary = read_vocabulary(target, encoding=encoding)

    candidates: list[Candidate] = [
        gather_statistics(source, vocabulary, encoding=encoding) for source in collections
    ]
    if synthetic is not None:
        candidates.append(synthetic)

    return NaiveBayesScorer(vocabulary).score(candidates)


__all__ = [
    "MIN_SOURCES",
    "MIN_SOURCES_WITH_SYNTHETIC",
    "classify_sources",
    "gather_statistics",
    "parse_source",
    "read_vocabulary",
]
