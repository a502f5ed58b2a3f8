"""Per-collection training statistics, measured or declared."""

from __future__ import annotations

import logging
import re
from collections import Counter
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from fractions import Fraction

from .config import DEFAULT_SPAM_LABEL, ConfigurationError, parse_email_count, parse_matches
from .vocabulary import FeatureVocabulary

LOGGER = logging.getLogger(__name__)

DESCRIPTOR_PATTERN = re.compile(r"^\s*(?P<emails>[^:]+):(?P<matches>[^:]+)\s*$")


@dataclass(frozen=True)
class CollectionStatistics:
    """Document frequencies of vocabulary words within one real collection."""

    label: str
    email_count: int
    document_frequency: Mapping[str, int] = field(default_factory=dict)

    def count(self, word: str) -> int:
        """Return how many emails of this collection contain ``word``."""

        return self.document_frequency.get(word, 0)

    @classmethod
    def gather(
        cls,
        label: str,
        emails: Iterable[str],
        vocabulary: FeatureVocabulary,
    ) -> CollectionStatistics:
        """Count emails and per-word document frequencies for ``emails``.

        Blank or whitespace-only emails are skipped entirely. Each email
        contributes at most one to any word's count.
        """

        email_count = 0
        frequency: Counter[str] = Counter()
        for email in emails:
            if not email.strip():
                continue
            email_count += 1
            frequency.update(vocabulary.present_in(email))

        if email_count == 0:
            LOGGER.warning("Collection %s contains no usable emails", label)
        else:
            LOGGER.debug(
                "Collection %s: %s email(s), %s of %s vocabulary word(s) seen",
                label,
                email_count,
                len(frequency),
                len(vocabulary),
            )
        return cls(label=label, email_count=email_count, document_frequency=dict(frequency))


@dataclass(frozen=True)
class SyntheticCollection:
    """Declared collection with no backing mail.

    ``matches`` is the geometric mean, over vocabulary words, of how many of
    the ``email_count`` declared emails contain each word.
    """

    email_count: int
    matches: Fraction
    label: str = DEFAULT_SPAM_LABEL

    def __post_init__(self) -> None:
        if isinstance(self.email_count, bool) or not isinstance(self.email_count, int):
            raise ConfigurationError("Synthetic email count must be an integer.")
        if self.email_count < 0:
            raise ConfigurationError("Synthetic email count cannot be negative.")
        matches = Fraction(self.matches)
        if matches < 0:
            raise ConfigurationError("Synthetic match count cannot be negative.")
        if matches > self.email_count:
            raise ConfigurationError(
                f"Synthetic match count {matches} exceeds email count {self.email_count}."
            )
        object.__setattr__(self, "matches", matches)

    @classmethod
    def parse(cls, descriptor: str, *, label: str = DEFAULT_SPAM_LABEL) -> SyntheticCollection:
        """Build from an ``EMAILS:MATCHES`` descriptor such as ``10:9`` or ``10:9/2``."""

        match = DESCRIPTOR_PATTERN.match(descriptor or "")
        if match is None:
            raise ConfigurationError(
                f"Synthetic descriptor must look like EMAILS:MATCHES, got {descriptor!r}."
            )
        emails = parse_email_count(match.group("emails"), "synthetic email count")
        matches = parse_matches(match.group("matches"), "synthetic match count")
        return cls(email_count=emails, matches=matches, label=label)

    def word_factor(self, vocabulary_size: int, class_count: int) -> Fraction:
        """Return ``((M + 1) / (E + class_count)) ** vocabulary_size``."""

        return ((self.matches + 1) / (self.email_count + class_count)) ** vocabulary_size


__all__ = ["CollectionStatistics", "SyntheticCollection"]
