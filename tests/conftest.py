"""Shared fixtures for the arena tests.

The two engine configs differ only in timing: ``manual_config`` parks every
background timer so a test advances the debate itself, ``fast_config`` lets
a debate run unattended in a few milliseconds.
"""

import pytest

from config.settings import AppConfig
from fakes import build_config


@pytest.fixture
def sample_debate_topic() -> str:
    return "Should artificial intelligence be regulated by governments?"


@pytest.fixture
def two_participants() -> list[str]:
    """Debater ids of the default two-model arena."""
    return ["gemini", "groq"]


@pytest.fixture
def manual_config(tmp_path) -> AppConfig:
    # Drive with engine.tick() and engine.run_round().
    return build_config(str(tmp_path / "transcripts"))


@pytest.fixture
def fast_config(tmp_path) -> AppConfig:
    return build_config(
        str(tmp_path / "transcripts"),
        warmup_delay=0.0,
        round_delay=0.0,
        tick_interval=0.005,
    )


def pytest_configure(config: pytest.Config) -> None:
    for marker in (
        "slow: debates that run to completion on real timers",
        "integration: exercises several packages together",
        "unit: isolated component tests",
    ):
        config.addinivalue_line("markers", marker)
