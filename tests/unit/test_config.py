"""Unit tests for settings defaults, validation and sources."""

from __future__ import annotations

import pytest

from mdserve.config import DocsSettings, Settings, TocSettings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in ("MDSERVE__SERVER__PORT", "MDSERVE__TOC__POSITION", "MDSERVE__AUTH__USERNAME"):
        monkeypatch.delenv(key, raising=False)


class TestDefaults:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.server.host == "0.0.0.0"
        assert settings.server.port == 8080
        assert settings.docs.extensions == [".md"]
        assert settings.logging.format == "text"
        assert settings.auth.enabled is False


class TestValidation:
    @pytest.mark.parametrize("position", ["left", "right"])
    def test_valid_toc_positions(self, position: str) -> None:
        assert TocSettings(position=position).position == position

    @pytest.mark.parametrize("position", ["top", "", "LEFT"])
    def test_invalid_toc_position_falls_back_to_left(self, position: str) -> None:
        assert TocSettings(position=position).position == "left"

    def test_extensions_are_normalized(self) -> None:
        assert DocsSettings(extensions=["MD", ".Markdown"]).extensions == [".md", ".markdown"]

    def test_auth_requires_both_fields(self) -> None:
        assert Settings(auth={"username": "alice"}).auth.enabled is False
        assert Settings(auth={"username": "alice", "password": "pw"}).auth.enabled is True


class TestSources:
    def test_env_override(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MDSERVE__SERVER__PORT", "9090")
        monkeypatch.setenv("MDSERVE__TOC__POSITION", "right")
        settings = Settings()
        assert settings.server.port == 9090
        assert settings.toc.position == "right"

    def test_constructor_beats_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MDSERVE__SERVER__PORT", "9090")
        assert Settings(server={"port": 7000}).server.port == 7000
