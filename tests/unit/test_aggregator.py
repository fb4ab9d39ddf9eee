"""Unit tests for text aggregation."""

import pytest

from circuit_core.emotion.aggregator import TextAggregator, amplification_for
from circuit_core.emotion.base import (
    EmotionalProfile,
    ProcessingMethod,
    Provenance,
    SentimentPolarity,
    WordAnalysis,
    dominant_category,
)


def found(word, profile):
    return WordAnalysis(token=word, normalized=word, profile=profile, provenance=Provenance.STORE)


def missing(word):
    return WordAnalysis(token=word, normalized=word)


class TestAmplification:
    """Tests for confidence-tiered amplification."""

    @pytest.mark.parametrize("confidence,factor", [
        (0.9, 3.0),
        (0.5, 3.0),
        (0.49, 2.5),
        (0.3, 2.5),
        (0.29, 2.0),
        (0.26, 2.0),
    ])
    def test_tiers(self, confidence, factor):
        """Test tier boundaries are inclusive."""
        assert amplification_for(confidence) == factor


class TestNeutralFallback:
    """Tests for texts without confident words."""

    def test_no_words_found(self):
        """Test a text with only unknown words is neutral."""
        result = TextAggregator().aggregate([missing("zorp"), missing("blarg")])

        assert result.overall_emotion == "neutral"
        assert result.confidence == 0.125
        assert set(result.emotions.values()) == {0.125}
        assert result.coverage == 0.0
        assert result.analyzed_words == 0
        assert result.word_count == 2
        assert result.vad.valence == 0.5
        assert result.sentiment.polarity is SentimentPolarity.NEUTRAL
        assert result.processing_method is ProcessingMethod.NEUTRAL_FALLBACK

    def test_threshold_is_strict(self, make_profile):
        """Test a word exactly at the threshold does not qualify."""
        result = TextAggregator().aggregate([found("meh", make_profile("joy", 0.25))])

        assert result.processing_method is ProcessingMethod.NEUTRAL_FALLBACK

    def test_empty_input(self):
        """Test an empty analysis list is neutral with zero words."""
        result = TextAggregator().aggregate([])

        assert result.word_count == 0
        assert result.overall_emotion == "neutral"


class TestWeightedAggregation:
    """Tests for the weighted sum."""

    def test_wonderful_and_amazing(self, make_profile):
        """Test two confident joy words dominate a sentence."""
        joy = make_profile("joy", 0.6, "positive", valence=0.9, arousal=0.7)
        analyses = [
            missing("i"),
            missing("feel"),
            found("wonderful", joy),
            missing("and"),
            found("amazing", joy),
            missing("today"),
        ]

        result = TextAggregator().aggregate(analyses)

        assert result.overall_emotion == "joy"
        assert result.confidence > 0.5
        assert result.sentiment.polarity is SentimentPolarity.POSITIVE
        assert result.analyzed_words == 2
        assert result.word_count == 6
        assert result.coverage == pytest.approx(2 / 6)
        assert result.vad.valence == pytest.approx(0.9)
        assert result.vad.dominance == 0.5

    def test_dominant_only_amplified(self):
        """Test only the dominant category is multiplied."""
        profile = EmotionalProfile(emotions={
            "joy": 0.4, "trust": 0.3, "anticipation": 0.05, "surprise": 0.05,
            "anger": 0.05, "fear": 0.05, "sadness": 0.05, "disgust": 0.05,
        })

        result = TextAggregator().aggregate([found("nice", profile)])

        # joy 0.4 * 2.5 = 1.0, trust 0.3, the rest 0.3; total 1.6
        assert result.emotions["joy"] == pytest.approx(1.0 / 1.6)
        assert result.emotions["trust"] == pytest.approx(0.3 / 1.6)
        assert sum(result.emotions.values()) == pytest.approx(1.0)

    def test_tie_goes_to_first_category(self, make_profile):
        """Test equal totals resolve in declaration order."""
        analyses = [
            found("trusty", make_profile("trust", 0.6)),
            found("happy", make_profile("joy", 0.6)),
        ]

        result = TextAggregator().aggregate(analyses)

        assert result.emotions["joy"] == pytest.approx(result.emotions["trust"])
        assert result.overall_emotion == "joy"

    def test_dominant_is_argmax(self, make_profile):
        """Test the reported emotion is the arg-max of the distribution."""
        analyses = [
            found("furious", make_profile("anger", 0.7, "negative")),
            found("scared", make_profile("fear", 0.4, "negative")),
            found("glad", make_profile("joy", 0.35, "positive")),
        ]

        result = TextAggregator().aggregate(analyses)

        assert (result.overall_emotion, result.confidence) == dominant_category(result.emotions)
        assert result.overall_emotion == "anger"


class TestSentimentVote:
    """Tests for majority-vote sentiment."""

    def test_tie_is_neutral(self, make_profile):
        """Test a polarity tie yields neutral."""
        analyses = [
            found("good", make_profile("joy", 0.5, "positive")),
            found("bad", make_profile("sadness", 0.5, "negative")),
        ]

        result = TextAggregator().aggregate(analyses)

        assert result.sentiment.polarity is SentimentPolarity.NEUTRAL
        assert result.sentiment.strength == 0.5

    def test_majority_strength(self, make_profile):
        """Test strength averages the winning voters."""
        analyses = [
            found("awful", make_profile("disgust", 0.5, "negative", strength=0.9)),
            found("grim", make_profile("sadness", 0.5, "negative", strength=0.5)),
            found("nice", make_profile("joy", 0.5, "positive", strength=0.2)),
        ]

        result = TextAggregator().aggregate(analyses)

        assert result.sentiment.polarity is SentimentPolarity.NEGATIVE
        assert result.sentiment.strength == pytest.approx(0.7)


class TestContextHook:
    """Tests for the pre-aggregation hook."""

    def test_hook_applied_before_filtering(self, make_profile):
        """Test the hook can drop words before they are counted."""
        analyses = [
            found("not", make_profile("anger", 0.6, "negative")),
            found("happy", make_profile("joy", 0.6, "positive")),
        ]

        def drop_negators(items):
            return [a for a in items if a.normalized != "not"]

        result = TextAggregator(context_hook=drop_negators).aggregate(analyses)

        assert result.overall_emotion == "joy"
        assert result.word_count == 1
