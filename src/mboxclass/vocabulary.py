"""Bag-of-words features extracted from the email being classified."""

from __future__ import annotations

from collections.abc import Iterable, Iterator


class EmptyVocabularyError(ValueError):
    """Raised when the target email contains no whitespace-delimited words."""


def tokenize(text: str) -> list[str]:
    """Split ``text`` on runs of whitespace."""

    return text.split()


class FeatureVocabulary:
    """Frozen set of distinct words taken from a single email."""

    def __init__(self, words: Iterable[str]) -> None:
        self._words = frozenset(words)
        if not self._words:
            raise EmptyVocabularyError("Email to classify contains no words.")

    @classmethod
    def from_email(cls, text: str) -> FeatureVocabulary:
        return cls(tokenize(text))

    @property
    def words(self) -> frozenset[str]:
        return self._words

    def present_in(self, text: str) -> frozenset[str]:
        """Return the vocabulary words occurring as tokens in ``text``."""

        return self._words.intersection(tokenize(text))

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __contains__(self, word: object) -> bool:
        return word in self._words

    def __repr__(self) -> str:
        return f"FeatureVocabulary({len(self._words)} words)"


__all__ = ["EmptyVocabularyError", "FeatureVocabulary", "tokenize"]
