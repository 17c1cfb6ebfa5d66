"""
Unit tests for configuration.
"""

import pytest

from lesson_reconciliation.utils.config import Config


@pytest.fixture
def env(monkeypatch, tmp_path):
    """Point every setting at a valid temporary layout."""
    lessons = tmp_path / "lessons.json"
    lessons.write_text("{}", encoding="utf-8")
    rosters = tmp_path / "rosters"
    rosters.mkdir()

    monkeypatch.setenv("RECON_SCHOOL_ID", "school-1")
    monkeypatch.setenv("RECON_LESSONS_PATH", str(lessons))
    monkeypatch.setenv("RECON_ROSTER_DIR", str(rosters))
    monkeypatch.setenv("RECON_ACTIVE_ONLY", "false")
    monkeypatch.setenv("OUTPUT_DIR", str(tmp_path / "out"))
    monkeypatch.setenv("LOG_LEVEL", "debug")
    return tmp_path


class TestConfig:
    """Test cases for Config."""

    def test_reads_environment(self, env):
        """Test values come from the environment."""
        config = Config()

        assert config.school_id == "school-1"
        assert config.active_only is False
        assert config.log_level == "DEBUG"
        assert config.report_dir == env / "out" / "reconciliation"
        assert config.validate()

    def test_validate_lists_all_problems(self, env, monkeypatch):
        """Test every invalid setting is reported at once."""
        monkeypatch.setenv("RECON_LESSONS_PATH", str(env / "missing.json"))
        monkeypatch.setenv("RECON_ROSTER_DIR", str(env / "nowhere"))
        monkeypatch.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ValueError) as exc_info:
            Config().validate()

        message = str(exc_info.value)
        assert "RECON_LESSONS_PATH" in message
        assert "RECON_ROSTER_DIR" in message
        assert "LOG_LEVEL" in message

    def test_lessons_path_must_be_json(self, env, monkeypatch):
        """Test the lesson store must be a JSON file."""
        other = env / "lessons.csv"
        other.write_text("", encoding="utf-8")
        monkeypatch.setenv("RECON_LESSONS_PATH", str(other))

        with pytest.raises(ValueError, match=".json"):
            Config().validate()

    def test_override(self, env):
        """Test command-line values replace environment values."""
        config = Config().override(school_id="school-2", roster_dir=str(env))

        assert config.school_id == "school-2"
        assert config.roster_dir == env

    def test_override_ignores_empty(self, env):
        """Test unset command-line values keep the environment values."""
        config = Config().override(school_id=None)

        assert config.school_id == "school-1"

    def test_create_output_directories(self, env):
        """Test report and log directories are created."""
        config = Config()
        config.create_output_directories()

        assert config.report_dir.is_dir()
        assert (config.output_dir / "logs").is_dir()
