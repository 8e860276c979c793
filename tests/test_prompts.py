"""Unit tests for instruction loading."""
import pytest

from engenheiro.prompts import clear_cache, get_system_prompt, get_voice_prompt, load_prompt
from engenheiro.report.headings import CANONICAL_HEADINGS, DIMENSIONAL_TABLE_HEADER, SENTINELS


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_cache()
    yield
    clear_cache()


class TestPrompts:
    """Tests for packaged and overridden instructions."""

    def test_system_prompt_carries_markers(self):
        """Test that the report instruction names every marker the parser expects."""
        prompt = get_system_prompt()

        for sentinel in SENTINELS:
            assert sentinel in prompt
        for heading in CANONICAL_HEADINGS:
            assert heading.marker in prompt
        assert DIMENSIONAL_TABLE_HEADER in prompt

    def test_voice_prompt(self):
        assert get_voice_prompt()

    def test_working_directory_override(self, tmp_path, monkeypatch):
        (tmp_path / "prompts").mkdir()
        (tmp_path / "prompts" / "voice.txt").write_text("  Instrução local  \n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)

        assert load_prompt("voice") == "Instrução local"

    def test_missing_prompt(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        with pytest.raises(FileNotFoundError, match="inexistente"):
            load_prompt("inexistente")
