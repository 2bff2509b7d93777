"""Tests for the console entry point's argument handling."""

import json

import pytest

import main
from fakes import ScriptedGenerator, build_config


@pytest.fixture
def console_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    """Run from an empty directory with no production markers or API keys."""
    for name in ("PORT", "RAILWAY_ENVIRONMENT", "ENVIRONMENT", "GEMINI_API_KEY", "GROQ_API_KEY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(
        "debate_engine.generator.build_model_generator", lambda _config: ScriptedGenerator()
    )
    return tmp_path


def run_main(monkeypatch: pytest.MonkeyPatch, *args: str) -> None:
    monkeypatch.setattr("sys.argv", ["main.py", *args])
    main.main()


def test_non_numeric_minutes_prints_usage(console_env, monkeypatch, capsys) -> None:
    run_main(monkeypatch, "--topic", "Cats are better than dogs", "--minutes", "soon")

    out = capsys.readouterr().out
    assert "--minutes expects a whole number, got 'soon'" in out
    assert "AI Debate Arena" in out
    assert not (console_env / "debate_config.json").exists()


def test_minutes_outside_choices_prints_usage(console_env, monkeypatch, capsys) -> None:
    run_main(monkeypatch, "--topic", "Cats are better than dogs", "--minutes", "7")

    out = capsys.readouterr().out
    assert "Invalid duration 7 min" in out
    assert "Console debate:" in out


def test_console_flag_runs_debate_on_configured_topic(console_env, monkeypatch, capsys) -> None:
    """Without --topic the console debate uses debate.topic from debate_config.json."""
    config = build_config(
        str(console_env / "transcripts"),
        topic="Board games beat video games",
        warmup_delay=0.0,
        round_delay=0.01,
        tick_interval=0.001,
    )
    (console_env / "debate_config.json").write_text(json.dumps(config.model_dump()))

    run_main(monkeypatch, "--console", "--minutes", "1")

    out = capsys.readouterr().out
    assert "Topic: Board games beat video games (60s)" in out
    assert "[GEMINI (" in out
    assert "Transcript saved with ID 1" in out
