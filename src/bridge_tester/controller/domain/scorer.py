"""Similarity scoring of a transcript against the expected phrase."""

import re
from collections import Counter
from collections.abc import Callable

from .locales import LocaleRegistry

SimilarityFunction = Callable[[str, str], float]

_NON_WORD = re.compile(r"[^\w]+")


def _normalize(text: str) -> str:
    return _NON_WORD.sub("", text.lower())


def _bigrams(text: str) -> Counter:
    return Counter(text[i : i + 2] for i in range(len(text) - 1))


def dice_coefficient(first: str, second: str) -> float:
    """Sorensen-Dice coefficient over character bigrams, ignoring case and punctuation."""
    a = _normalize(first)
    b = _normalize(second)
    if a == b:
        return 1.0
    if len(a) < 2 or len(b) < 2:
        return 0.0
    overlap = sum((_bigrams(a) & _bigrams(b)).values())
    return 2.0 * overlap / (len(a) + len(b) - 2)


class Scorer:
    """Scores transcripts against each locale's reference phrase."""

    def __init__(
        self,
        registry: LocaleRegistry,
        similarity: SimilarityFunction = dice_coefficient,
    ):
        self._registry = registry
        self._similarity = similarity

    def score(self, expected: str, actual: str) -> float:
        return min(1.0, max(0.0, self._similarity(expected, actual)))

    def score_for_locale(self, locale: str, actual: str) -> float:
        """
        Scores ``actual`` against the reference phrase of ``locale``.

        Raises:
            UnsupportedLocale: If the locale has no reference phrase.
        """
        return self.score(self._registry.reference_phrase(locale), actual)
