import pytest

from bridge_tester.controller.domain import LocaleRegistry, Scorer, dice_coefficient
from bridge_tester.controller.exceptions import UnsupportedLocale


def test_identical_text_scores_one():
    assert dice_coefficient("connecting to the conference", "connecting to the conference") == 1.0


def test_case_and_punctuation_are_ignored():
    assert dice_coefficient("Hello, World!", "hello world") == 1.0


def test_disjoint_text_scores_zero():
    assert dice_coefficient("abc", "xyz") == 0.0


def test_known_bigram_overlap():
    # ni ig gh ht / na ac ch ht share one bigram
    assert dice_coefficient("night", "nacht") == pytest.approx(0.25)


def test_is_symmetric():
    a = "welcome to the conference"
    b = "welcome to circuit"
    assert dice_coefficient(a, b) == dice_coefficient(b, a)


def test_short_text_scores_zero_against_longer_text():
    assert dice_coefficient("a", "conference") == 0.0
    assert dice_coefficient("", "") == 1.0


def test_transcript_score_for_known_locale_is_bounded_and_deterministic(scorer):
    text = "welcome to the conference please enter your pin"

    first = scorer.score_for_locale("en-US", text)
    second = scorer.score_for_locale("en-US", text)

    assert 0.0 < first < 1.0
    assert first == second


def test_reference_phrase_scores_one(scorer, registry):
    phrase = registry.reference_phrase("en-US")
    assert scorer.score_for_locale("en-US", phrase) == 1.0


def test_locale_without_reference_phrase_raises(scorer):
    with pytest.raises(UnsupportedLocale) as excinfo:
        scorer.score_for_locale("de-DE", "willkommen")
    assert excinfo.value.locale == "de-DE"


def test_pluggable_similarity_is_clamped():
    scorer = Scorer(LocaleRegistry(), similarity=lambda expected, actual: 1.7)
    assert scorer.score("a", "b") == 1.0
