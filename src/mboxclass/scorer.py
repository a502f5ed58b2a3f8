"""Multinomial naive Bayes scoring with exact rational arithmetic."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from fractions import Fraction

from .statistics import CollectionStatistics, SyntheticCollection
from .types import Classification, ScoreRecord
from .vocabulary import FeatureVocabulary

LOGGER = logging.getLogger(__name__)

Candidate = CollectionStatistics | SyntheticCollection


class NaiveBayesScorer:
    """Ranks candidate collections by Laplace-smoothed likelihood.

    For a collection with ``n`` emails among ``k`` candidates the relative
    probability is ``(n + 1) * prod((count(w) + 1) / (n + k))`` over the
    vocabulary. A synthetic collection replaces the product with its closed
    form. Every value is a :class:`fractions.Fraction`, so ranking is exact.
    """

    def __init__(self, vocabulary: FeatureVocabulary) -> None:
        self._vocabulary = vocabulary

    def relative_probability(self, candidate: Candidate, class_count: int) -> Fraction:
        """Return the unnormalised score of ``candidate``."""

        prior = candidate.email_count + 1
        if isinstance(candidate, SyntheticCollection):
            return prior * candidate.word_factor(len(self._vocabulary), class_count)

        numerator = prior
        for word in self._vocabulary:
            numerator *= candidate.count(word) + 1
        denominator = (candidate.email_count + class_count) ** len(self._vocabulary)
        return Fraction(numerator, denominator)

    def score(self, candidates: Sequence[Candidate]) -> Classification:
        """Score every candidate in order and pick the most probable one.

        On an exact tie the earliest candidate wins.
        """

        if not candidates:
            raise ValueError("At least one candidate collection is required.")

        class_count = len(candidates)
        total_emails = sum(candidate.email_count for candidate in candidates)
        normaliser = total_emails + class_count

        records: list[ScoreRecord] = []
        for candidate in candidates:
            relative = self.relative_probability(candidate, class_count)
            records.append(
                ScoreRecord(
                    label=candidate.label,
                    relative=relative,
                    probability=relative / normaliser,
                )
            )

        best = records[0]
        for record in records[1:]:
            if record.relative > best.relative:
                best = record

        LOGGER.info(
            "Classified against %s collection(s) with %s word(s): %s",
            class_count,
            len(self._vocabulary),
            best.label,
        )
        return Classification(
            label=best.label,
            scores=tuple(records),
            total_emails=total_emails,
            class_count=class_count,
            vocabulary_size=len(self._vocabulary),
        )


__all__ = ["NaiveBayesScorer"]
