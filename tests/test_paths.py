"""Tests for data path resolution."""

from __future__ import annotations

from pathlib import Path

from serenemind.paths import default_data_path, describe_source, resolve_data_path


def test_default_path_under_config():
    p = default_data_path()
    assert p.parts[-2:] == ("serenemind", "data.json")


def test_profile_path():
    assert default_data_path("dev").name == "dev.json"


def test_explicit_arg_wins(tmp_path, monkeypatch):
    monkeypatch.setenv("SERENEMIND_DATA", str(tmp_path / "env.json"))
    got = resolve_data_path(str(tmp_path / "arg.json"), "dev")
    assert got == (tmp_path / "arg.json").resolve()


def test_env_beats_profile(tmp_path, monkeypatch):
    monkeypatch.setenv("SERENEMIND_DATA", str(tmp_path / "env.json"))
    assert resolve_data_path(None, "dev") == (tmp_path / "env.json").resolve()
    assert "SERENEMIND_DATA" in describe_source(None, "dev")


def test_profile_without_env(monkeypatch):
    monkeypatch.delenv("SERENEMIND_DATA", raising=False)
    got = resolve_data_path(None, "test")
    assert got == (Path.home() / ".config" / "serenemind" / "test.json").resolve()
    assert describe_source(None, "test") == "because you used --profile 'test'"
