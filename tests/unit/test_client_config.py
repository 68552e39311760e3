from __future__ import annotations

from pathlib import Path

from snapshelf.client.config import ClientConfig, get_config


class TestClientConfig:
    def test_reads_environment(self, monkeypatch, tmp_path) -> None:
        monkeypatch.setenv("SNAPSHELF_API_URL", "https://shelf.example.com")
        monkeypatch.setenv("SNAPSHELF_KIND", "recipe")
        monkeypatch.setenv("SNAPSHELF_SESSION_FILE", str(tmp_path / "me.json"))
        monkeypatch.setenv("SNAPSHELF_ANALYZE_TIMEOUT", "45")

        config = get_config()

        assert config.api_url == "https://shelf.example.com"
        assert config.kind == "recipe"
        assert config.session_file == Path(tmp_path / "me.json")
        assert config.analyze_timeout_seconds == 45.0
        assert config.validate() == []

    def test_validate_reports_problems(self) -> None:
        config = ClientConfig(api_url="", kind="cheese", analyze_timeout_seconds=0)
        errors = config.validate()
        assert len(errors) == 3
        assert "SNAPSHELF_KIND must be 'wine' or 'recipe'" in errors
