from __future__ import annotations

from fractions import Fraction

import pytest

from mboxclass.scorer import NaiveBayesScorer
from mboxclass.statistics import CollectionStatistics, SyntheticCollection
from mboxclass.vocabulary import FeatureVocabulary


def _stats(label: str, emails: int, **counts: int) -> CollectionStatistics:
    return CollectionStatistics(label=label, email_count=emails, document_frequency=counts)


def test_real_collection_score_matches_closed_form() -> None:
    vocabulary = FeatureVocabulary.from_email("hello foo")
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score([_stats("a", 2, hello=2), _stats("b", 1, foo=1)])

    assert [record.label for record in result.scores] == ["a", "b"]
    assert result.scores[0].relative == Fraction(3 * 3 * 1, 4**2)
    assert result.scores[1].relative == Fraction(2 * 1 * 2, 3**2)
    assert result.label == "a"
    assert result.winner.label == "a"
    assert result.total_emails == 3
    assert result.class_count == 2
    assert result.vocabulary_size == 2


def test_probabilities_use_global_normaliser() -> None:
    vocabulary = FeatureVocabulary.from_email("hello foo")
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score([_stats("a", 2, hello=2), _stats("b", 1, foo=1)])

    assert result.scores[0].probability == Fraction(9, 16) / 5
    assert result.scores[1].probability == Fraction(4, 9) / 5


def test_synthetic_collection_uses_closed_form_factor() -> None:
    vocabulary = FeatureVocabulary.from_email("alpha beta")
    synthetic = SyntheticCollection(email_count=10, matches=Fraction(9))
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score([_stats("a", 3, alpha=3, beta=3), synthetic])

    assert result.scores[0].relative == Fraction(4 * 4 * 4, 5**2)
    assert result.scores[1].relative == 11 * Fraction(10, 12) ** 2
    assert result.label == "spam"
    assert result.total_emails == 13


def test_tie_keeps_first_collection() -> None:
    vocabulary = FeatureVocabulary.from_email("hello")
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score([_stats("first", 2, hello=1), _stats("second", 2, hello=1)])

    assert result.scores[0].relative == result.scores[1].relative
    assert result.label == "first"


def test_empty_collection_keeps_smoothed_score() -> None:
    vocabulary = FeatureVocabulary.from_email("hello foo")
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score([_stats("empty", 0), _stats("b", 1, hello=1)])

    assert result.scores[0].relative == Fraction(1, 2**2)
    assert result.label == "b"


@pytest.mark.parametrize("extra", [1, 2, 5])
def test_raising_a_word_count_never_lowers_the_score(extra: int) -> None:
    vocabulary = FeatureVocabulary.from_email("hello foo bar")
    scorer = NaiveBayesScorer(vocabulary)
    base = _stats("a", 6, hello=1, foo=2)
    boosted = _stats("a", 6, hello=1 + extra, foo=2)

    assert scorer.relative_probability(boosted, 3) >= scorer.relative_probability(base, 3)


def test_scoring_is_deterministic() -> None:
    vocabulary = FeatureVocabulary.from_email(" ".join(f"w{index}" for index in range(200)))
    scorer = NaiveBayesScorer(vocabulary)
    candidates = [
        _stats("a", 50, **{f"w{index}": index % 7 for index in range(200)}),
        _stats("b", 40, **{f"w{index}": index % 5 for index in range(200)}),
        SyntheticCollection(email_count=45, matches=Fraction(3, 2)),
    ]

    first = scorer.score(candidates)
    second = scorer.score(candidates)

    assert first == second
    assert all(record.relative > 0 for record in first.scores)


def test_large_vocabulary_does_not_underflow() -> None:
    vocabulary = FeatureVocabulary.from_email(" ".join(f"w{index}" for index in range(2000)))
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score([_stats("a", 1000), _stats("b", 1000, w0=1)])

    assert float(result.scores[0].relative) == 0.0
    assert result.scores[0].relative > 0
    assert result.label == "b"


def test_score_requires_candidates() -> None:
    scorer = NaiveBayesScorer(FeatureVocabulary.from_email("hello"))

    with pytest.raises(ValueError):
        scorer.score([])


def test_later_collection_wins_only_when_strictly_better() -> None:
    vocabulary = FeatureVocabulary.from_email("hello")
    scorer = NaiveBayesScorer(vocabulary)

    result = scorer.score(
        [_stats("low", 2), _stats("mid", 2, hello=1), _stats("high", 2, hello=2)]
    )

    assert result.label == "high"
    assert result.winner is result.scores[2]
