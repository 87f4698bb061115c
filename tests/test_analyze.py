"""Tests for oralcheck.analyze transcript metrics and feedback."""

from __future__ import annotations

import pytest

from oralcheck.analyze.feedback import build_feedback, generate_narrative, rate_metrics, rate_value
from oralcheck.analyze.transcript import (
    SessionContext,
    TranscriptMetrics,
    VocabularySet,
    analyze_transcript,
    bare_word,
    count_fillers,
    count_syllables,
    reading_ease,
    split_sentences,
)
from oralcheck.config import OralCheckConfig


def make_metrics(**overrides) -> TranscriptMetrics:
    values = {
        "word_count": 100,
        "filler_count": 5,
        "filler_rate": 0.05,
        "academic_matches": 5,
        "academic_words": [],
        "type_token_ratio": 0.6,
        "avg_sentence_length": 15.0,
        "readability": 60,
        "pitch_mean": 180,
        "volume_mean": 0.05,
        "words_per_minute": 150,
    }
    values.update(overrides)
    return TranscriptMetrics(**values)


class TestAnalyzeTranscript:
    def test_sample_transcript(self, sample_text: str, context: SessionContext) -> None:
        metrics = analyze_transcript(sample_text, context)

        assert metrics is not None
        assert metrics.word_count == 17
        assert metrics.filler_count == 2
        assert metrics.filler_rate == pytest.approx(2 / 17)
        assert {"data", "method", "variables"} <= set(metrics.academic_words)
        assert metrics.academic_matches == 8
        assert metrics.type_token_ratio == pytest.approx(16 / 17)
        assert metrics.avg_sentence_length == pytest.approx(8.5)
        assert metrics.readability == 49
        assert metrics.words_per_minute == 17

    @pytest.mark.parametrize("text", ["", "   ", "\n\t \n", None])
    def test_empty_transcript_returns_none(self, text, context: SessionContext) -> None:
        assert analyze_transcript(text, context) is None

    def test_newlines_are_spaces(self, context: SessionContext) -> None:
        metrics = analyze_transcript("one\ntwo\nthree", context)
        assert metrics.word_count == 3

    def test_type_token_ratio_is_case_insensitive(self, context: SessionContext) -> None:
        metrics = analyze_transcript("Hello hello HELLO", context)
        assert metrics.type_token_ratio == pytest.approx(1 / 3)

    def test_type_token_ratio_in_unit_interval(self, context: SessionContext) -> None:
        for text in ["a", "a a a a", "Every word here differs entirely."]:
            metrics = analyze_transcript(text, context)
            assert 0 < metrics.type_token_ratio <= 1

    def test_no_sentence_punctuation(self, context: SessionContext) -> None:
        metrics = analyze_transcript("just some words without an ending", context)
        assert metrics.avg_sentence_length == 6.0

    def test_punctuation_only_has_no_sentences(self, context: SessionContext) -> None:
        metrics = analyze_transcript("?!", context)
        assert metrics.word_count == 1
        assert metrics.avg_sentence_length == 0.0

    def test_readability_clamped_at_zero(self, context: SessionContext) -> None:
        text = " ".join(["antidisestablishmentarianism"] * 5)
        metrics = analyze_transcript(text, context)
        assert metrics.readability == 0

    def test_speaking_rate(self, sample_text: str, context: SessionContext) -> None:
        assert analyze_transcript(sample_text, context, elapsed_seconds=120).words_per_minute == 9
        assert analyze_transcript(sample_text, context, elapsed_seconds=30).words_per_minute == 17

    def test_pitch_and_volume_means(self, context: SessionContext) -> None:
        metrics = analyze_transcript(
            "Testing one two.",
            context,
            pitch_series=[200.0, 201.0],
            loudness_series=[0.1, 0.1234],
        )
        assert metrics.pitch_mean == 201
        assert metrics.volume_mean == pytest.approx(0.112)

    def test_non_finite_series_values_are_skipped(self, context: SessionContext) -> None:
        metrics = analyze_transcript(
            "Testing one two.",
            context,
            pitch_series=[float("nan"), 200.0, float("inf")],
            loudness_series=[float("-inf")],
        )
        assert metrics.pitch_mean == 200
        assert metrics.volume_mean == 0.0

    def test_overflowing_series_mean_is_zero(self, context: SessionContext) -> None:
        metrics = analyze_transcript("Testing.", context, loudness_series=[1e308, 1e308])
        assert metrics.volume_mean == 0.0

    def test_empty_series_default_to_zero(self, context: SessionContext) -> None:
        metrics = analyze_transcript("Testing one two.", context)
        assert metrics.pitch_mean == 0
        assert metrics.volume_mean == 0.0

    def test_to_dict(self, sample_text: str, context: SessionContext) -> None:
        data = analyze_transcript(sample_text, context).to_dict()
        assert data["word_count"] == 17
        assert isinstance(data["academic_words"], list)


class TestFillers:
    def test_single_words_ignore_punctuation(self) -> None:
        tokens = ["Um,", "so", "WELL."]
        assert count_fillers("Um, so WELL.", tokens, ["um", "so", "well"]) == 3

    def test_multi_word_phrase(self) -> None:
        text = "You know, I mean, you know it"
        assert count_fillers(text, text.split(), ["you know", "i mean"]) == 3

    def test_overlapping_phrases_double_count(self) -> None:
        context = SessionContext(filler_words=("you know", "know"))
        metrics = analyze_transcript("You know, I know.", context)
        assert metrics.filler_count == 3

    def test_filler_rate_bounded_for_default_list(self, context: SessionContext) -> None:
        metrics = analyze_transcript("um uh like so right well", context)
        assert metrics.filler_count == 6
        assert metrics.filler_rate == 1.0


class TestVocabulary:
    def test_learns_long_words(self) -> None:
        vocabulary = VocabularySet(seed=[])
        added = vocabulary.learn(["Photosynthesis,", "cell", "well-known", "abc123defg"])

        assert "photosynthesis" in vocabulary
        assert "well-known" in vocabulary
        assert "cell" not in vocabulary
        assert "abcdefg" in vocabulary
        assert added == 3

    def test_rejects_words_over_thirty_letters(self) -> None:
        vocabulary = VocabularySet(seed=[])
        vocabulary.learn(["a" * 31])
        assert len(vocabulary) == 0

    def test_growth_persists_across_calls(self, context: SessionContext) -> None:
        first = analyze_transcript("The photosynthesis process.", context)
        size_after_first = len(context.vocabulary)

        second = analyze_transcript("Photosynthesis again", context)

        assert "photosynthesis" in first.academic_words
        assert "photosynthesis" in second.academic_words
        assert len(context.vocabulary) >= size_after_first

    def test_separate_contexts_do_not_share_words(self) -> None:
        first = SessionContext()
        analyze_transcript("Photosynthesis matters.", first)
        assert "photosynthesis" not in SessionContext().vocabulary

    def test_cap_stops_growth_without_eviction(self) -> None:
        vocabulary = VocabularySet(seed=["metaphor"], max_size=2)
        vocabulary.learn(["zeitgeist", "paradigm"])

        assert len(vocabulary) == 2
        assert "metaphor" in vocabulary
        assert "zeitgeist" in vocabulary
        assert "paradigm" not in vocabulary

    def test_context_from_config(self) -> None:
        config = OralCheckConfig(vocabulary_cap=100, filler_words=["Um", "you know"])
        context = SessionContext.from_config(config)
        assert context.vocabulary.max_size == 100
        assert context.filler_words == ("um", "you know")


class TestTextHelpers:
    @pytest.mark.parametrize(
        ("word", "expected"),
        [("the", 1), ("make", 1), ("data", 2), ("beautiful", 3), ("rhythm", 1), ("123", 1)],
    )
    def test_count_syllables(self, word: str, expected: int) -> None:
        assert count_syllables(word) == expected

    def test_split_sentences(self) -> None:
        assert split_sentences("One. Two!! Three?  ") == ["One", "Two", "Three"]

    def test_bare_word(self) -> None:
        assert bare_word('"Like,') == "like"
        assert bare_word("it's") == "it's"

    def test_reading_ease_guards_zero_denominators(self) -> None:
        assert reading_ease(0, 0, 0) == 207


class TestFeedback:
    @pytest.mark.parametrize(
        ("value", "expected"),
        [(140, "good"), (100, "fair"), (170, "fair"), (181, "poor")],
    )
    def test_rate_value(self, value: float, expected: str) -> None:
        assert rate_value(value, 130, 165, 180) == expected

    def test_rate_metrics(self) -> None:
        ratings = rate_metrics(make_metrics(filler_rate=0.2, readability=75))
        assert ratings["filler_rate"] == "poor"
        assert ratings["readability"] == "fair"
        assert ratings["words_per_minute"] == "good"

    def test_narrative_good_speech(self) -> None:
        narrative = generate_narrative(make_metrics())
        assert narrative[0].startswith("Your speech demonstrates excellent control")
        assert "natural and appropriate" in narrative[1]

    def test_narrative_heavy_fillers_and_jargon(self) -> None:
        narrative = generate_narrative(make_metrics(filler_rate=0.3, academic_matches=30))
        assert "Filler use is high" in narrative[0]
        assert "rely heavily" in narrative[1]

    def test_build_feedback(self) -> None:
        feedback = build_feedback(make_metrics(filler_rate=0.1, academic_matches=12))
        assert feedback["ratings"]["filler_rate"] == "fair"
        assert "occasionally" in feedback["narrative"][0]
        assert "adequate" in feedback["narrative"][1]
