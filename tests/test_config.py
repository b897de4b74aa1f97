import pytest
from pydantic import ValidationError

from gridlogic.config import SolverConfig


def test_defaults():
    config = SolverConfig()
    assert config.max_guesses == 10
    assert config.guess_policy == "first"
    assert config.max_fixpoint_passes is None


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("GRIDLOGIC_MAX_GUESSES", "3")
    monkeypatch.setenv("GRIDLOGIC_GUESS_POLICY", "fewest")
    config = SolverConfig()
    assert config.max_guesses == 3
    assert config.guess_policy == "fewest"


def test_invalid_values_are_rejected(monkeypatch):
    with pytest.raises(ValidationError):
        SolverConfig(foo=1)
    with pytest.raises(ValidationError):
        SolverConfig(max_fixpoint_passes=0)
    with pytest.raises(ValidationError):
        SolverConfig(max_guesses=-1)
    assert SolverConfig(max_fixpoint_passes=1).max_fixpoint_passes == 1

    monkeypatch.setenv("GRIDLOGIC_GUESS_POLICY", "random")
    with pytest.raises(ValidationError):
        SolverConfig()
