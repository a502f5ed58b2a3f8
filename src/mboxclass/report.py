"""Rendering of classification results for the terminal."""

from __future__ import annotations

from decimal import Decimal, localcontext
from fractions import Fraction

from .config import DEFAULT_PRECISION
from .types import Classification


def format_probability(value: Fraction, precision: int = DEFAULT_PRECISION) -> str:
    """Render an exact probability with ``precision`` significant digits.

    Decimal keeps arbitrarily small values representable where a float would
    underflow to zero.
    """

    if value == 0:
        return "0"
    with localcontext() as context:
        context.prec = precision
        decimal = Decimal(value.numerator) / Decimal(value.denominator)
        return f"{decimal:.{precision}g}"


def score_lines(classification: Classification, precision: int = DEFAULT_PRECISION) -> list[str]:
    """Return one ``label: probability`` line per scored collection."""

    return [
        f"{record.label}: {format_probability(record.probability, precision)}"
        for record in classification.scores
    ]


__all__ = ["format_probability", "score_lines"]
