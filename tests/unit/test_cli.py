"""Tests for the Circuit Emotion CLI."""

import json

import pytest
import yaml
from click.testing import CliRunner

from circuit_core.cli import cli


SEED = {
    "words": [
        {
            "word": "wonderful",
            "stats": {
                "emotion_probs": {
                    "joy": 0.6, "trust": 0.1, "anticipation": 0.1, "surprise": 0.05,
                    "anger": 0.03, "fear": 0.04, "sadness": 0.04, "disgust": 0.04,
                },
                "vad": {"valence": 0.9, "arousal": 0.7, "dominance": 0.6},
                "sentiment": {"polarity": "positive", "strength": 0.8},
            },
        },
        {
            "word": "amazing",
            "stats": {
                "emotion_probs": {
                    "joy": 0.6, "trust": 0.05, "anticipation": 0.1, "surprise": 0.15,
                    "anger": 0.02, "fear": 0.03, "sadness": 0.02, "disgust": 0.03,
                },
                "vad": {"valence": 0.85, "arousal": 0.8, "dominance": 0.6},
                "sentiment": {"polarity": "positive", "strength": 0.8},
            },
        },
    ],
}


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def base_args(database_url):
    return ["--database-url", database_url, "--no-inference"]


@pytest.fixture
def seeded(runner, base_args, tmp_path):
    seed_file = tmp_path / "words.json"
    seed_file.write_text(json.dumps(SEED), encoding="utf-8")
    result = runner.invoke(cli, base_args + ["seed", str(seed_file)])
    assert result.exit_code == 0, result.output
    return seed_file


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_version(self, runner):
        """Test version command."""
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "2.1.0" in result.output

    def test_help(self, runner):
        """Test help command."""
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "analyze" in result.output
        assert "seed" in result.output

    def test_init_db(self, runner, base_args):
        """Test tables are created."""
        result = runner.invoke(cli, base_args + ["init-db"])
        assert result.exit_code == 0
        assert "Database initialized" in result.output


class TestSeedCommand:
    """Tests for the seed command."""

    def test_seed_json_report(self, runner, base_args, tmp_path):
        """Test the seed report in JSON."""
        seed_file = tmp_path / "words.json"
        seed_file.write_text(json.dumps(SEED), encoding="utf-8")

        result = runner.invoke(cli, base_args + ["-o", "json", "seed", str(seed_file)])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["inserted"] == 2
        assert data["total_words"] == 2

    def test_reseed_skips(self, runner, base_args, seeded):
        """Test seeding twice inserts nothing new."""
        result = runner.invoke(cli, base_args + ["-o", "json", "seed", str(seeded)])

        data = json.loads(result.output)
        assert data["inserted"] == 0
        assert data["skipped"] == 2


class TestAnalyzeCommand:
    """Tests for the analyze command."""

    def test_analyze_json(self, runner, base_args, seeded):
        """Test analysis output as JSON."""
        result = runner.invoke(
            cli,
            base_args + ["-o", "json", "analyze", "I feel wonderful and amazing today"],
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["overall_emotion"] == "joy"
        assert data["sentiment"]["polarity"] == "positive"
        assert data["analyzed_words"] == 2

    def test_analyze_yaml(self, runner, base_args, seeded):
        """Test analysis output as YAML."""
        result = runner.invoke(cli, base_args + ["-o", "yaml", "analyze", "wonderful"])

        assert result.exit_code == 0
        assert yaml.safe_load(result.output)["overall_emotion"] == "joy"

    def test_analyze_table(self, runner, base_args, seeded):
        """Test the default table output."""
        result = runner.invoke(cli, base_args + ["analyze", "amazing stuff"])

        assert result.exit_code == 0
        assert "Text Analysis" in result.output
        assert "joy" in result.output

    def test_analyze_empty_text(self, runner, base_args):
        """Test empty text exits with an error."""
        result = runner.invoke(cli, base_args + ["analyze", "   "])

        assert result.exit_code == 1
        assert "Text is required" in result.output


class TestSessionAndStats:
    """Tests for the session and stats commands."""

    def test_session(self, runner, base_args, seeded, tmp_path):
        """Test a file of messages is summarized."""
        transcript = tmp_path / "chat.txt"
        transcript.write_text("hello there\n\nwonderful news\namazing\n", encoding="utf-8")

        result = runner.invoke(cli, base_args + ["-o", "json", "session", str(transcript)])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["message_count"] == 3
        assert data["dominant_mood"] == "joy"
        assert data["trend"] == "stable"

    def test_stats(self, runner, base_args, seeded):
        """Test stats report lexicon size."""
        result = runner.invoke(cli, base_args + ["-o", "json", "stats"])

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["total_words"] == 2
        assert data["inference_available"] is False
