"""Unit tests for emotion engine data types."""

import pytest

from circuit_core.emotion.base import (
    CATEGORY_ORDER,
    NEUTRAL_LABEL,
    VAD,
    EmotionalProfile,
    ProfileValidationError,
    Provenance,
    Sentiment,
    SentimentPolarity,
    WordAnalysis,
    dominant_category,
    mean,
    uniform_distribution,
)


class TestEmotionalProfile:
    """Tests for EmotionalProfile validation."""

    def test_valid_profile(self, make_profile):
        """Test a well-formed profile exposes dominant emotion and confidence."""
        profile = make_profile("fear", 0.7)

        assert profile.dominant_emotion == "fear"
        assert profile.confidence == pytest.approx(0.7)
        assert list(profile.emotions) == list(CATEGORY_ORDER)

    def test_missing_categories_are_zero(self):
        """Test categories absent from the mapping count as zero."""
        profile = EmotionalProfile(emotions={"anger": 1.0})

        assert profile.emotions["joy"] == 0.0
        assert profile.dominant_emotion == "anger"

    def test_sum_must_be_one(self):
        """Test distributions off by more than the tolerance are rejected."""
        with pytest.raises(ProfileValidationError):
            EmotionalProfile(emotions={"joy": 0.5, "trust": 0.4})

    def test_sum_within_tolerance(self):
        """Test small rounding error is accepted."""
        profile = EmotionalProfile(emotions={"joy": 0.5, "trust": 0.4995})

        assert profile.dominant_emotion == "joy"

    def test_unknown_category_rejected(self):
        """Test unknown category names are rejected."""
        with pytest.raises(ProfileValidationError):
            EmotionalProfile(emotions={"joy": 0.5, "boredom": 0.5})

    def test_out_of_range_rejected(self):
        """Test negative probabilities are rejected."""
        with pytest.raises(ProfileValidationError):
            EmotionalProfile(emotions={"joy": 1.2, "trust": -0.2})

    def test_vad_and_strength_clamped(self):
        """Test VAD and sentiment strength are clamped to [0, 1]."""
        vad = VAD(valence=1.4, arousal=-0.3, dominance=0.5)
        sentiment = Sentiment(polarity="negative", strength=3.0)

        assert vad.valence == 1.0
        assert vad.arousal == 0.0
        assert sentiment.strength == 1.0
        assert sentiment.polarity is SentimentPolarity.NEGATIVE

    def test_to_dict_wire_shape(self, make_profile):
        """Test serialization uses the inference/seed wire shape."""
        data = make_profile("joy", 0.6).to_dict()

        assert set(data) == {"emotion_probs", "vad", "sentiment"}
        assert data["sentiment"]["polarity"] == "positive"
        assert sum(data["emotion_probs"].values()) == pytest.approx(1.0)

    def test_read_only_and_hashable(self, make_profile):
        """Test mappings reject writes and equal profiles hash alike."""
        profile = make_profile("joy", 0.6)

        with pytest.raises(TypeError):
            profile.emotions["joy"] = 0.9
        with pytest.raises(TypeError):
            profile.metadata["pos"] = ["noun"]

        assert hash(profile) == hash(make_profile("joy", 0.6))
        assert len({profile, make_profile("joy", 0.6), make_profile("fear", 0.6)}) == 2


class TestDominantCategory:
    """Tests for arg-max with fixed tie-break order."""

    def test_first_max_wins(self):
        """Test ties go to the category declared first."""
        category, score = dominant_category({"sadness": 0.5, "trust": 0.5})

        assert category == "trust"
        assert score == 0.5

    def test_uniform_picks_joy(self):
        """Test the uniform distribution resolves to the first category."""
        assert dominant_category(uniform_distribution()) == ("joy", 0.125)

    def test_mean_default(self):
        """Test mean of nothing falls back to the default."""
        assert mean([]) == 0.5
        assert mean([0.2, 0.4]) == pytest.approx(0.3)


class TestWordAnalysis:
    """Tests for WordAnalysis."""

    def test_not_found(self):
        """Test an unresolved token reports no emotion and zero confidence."""
        analysis = WordAnalysis(token="Zorp!", normalized="zorp")

        assert analysis.found is False
        assert analysis.provenance is Provenance.NOT_FOUND
        assert analysis.confidence == 0.0
        assert analysis.dominant_emotion is None

        data = analysis.to_dict()
        assert data["emotion"] == NEUTRAL_LABEL
        assert data["source"] == "not-found"
        assert "emotion_probs" not in data

    def test_found(self, make_profile):
        """Test a resolved token carries its profile's values."""
        analysis = WordAnalysis(
            token="Happy,",
            normalized="happy",
            profile=make_profile("joy", 0.6, valence=0.8),
            provenance=Provenance.STORE,
        )

        data = analysis.to_dict()
        assert data["found"] is True
        assert data["emotion"] == "joy"
        assert data["valence"] == 0.8
        assert data["source"] == "store"
