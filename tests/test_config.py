# tests/test_config.py

"""
Config Tests - constants, settings and formatting helpers
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest

from modelarena import config
from modelarena.config import (
    METRIC_WEIGHTS, LEADERBOARD_WEIGHTS, format_duration, format_score, format_table,
    get_arbiter_name, get_short_name, get_simulated_delay, set_arbiter_name, set_simulated_delay,
)
from modelarena.models import ALL_MODELS, format_model_name, get_model, roster

REPO_ROOT = Path(__file__).resolve().parent.parent


class TestConstants:

    def test_metric_weights_sum_to_one(self):
        assert sum(METRIC_WEIGHTS.values()) == pytest.approx(1.0)

    def test_leaderboard_weights_sum_to_one(self):
        assert sum(LEADERBOARD_WEIGHTS.values()) == pytest.approx(1.0)

    def test_default_selection_within_limits(self):
        assert config.MIN_MODELS <= len(config.DEFAULT_SELECTION) <= config.MAX_SELECTIONS
        assert all(get_model(m) for m in config.DEFAULT_SELECTION)


class TestSettings:

    def test_simulated_delay(self):
        original = get_simulated_delay()
        try:
            set_simulated_delay(1.5)
            assert get_simulated_delay() == 1.5
        finally:
            set_simulated_delay(original)

    def test_negative_delay_rejected(self):
        with pytest.raises(ValueError):
            set_simulated_delay(-1)

    def test_arbiter_name_blank_falls_back(self):
        original = get_arbiter_name()
        try:
            set_arbiter_name("  ")
            assert get_arbiter_name() == "Gemini-3-Pro"
            set_arbiter_name("Judge X")
            assert get_arbiter_name() == "Judge X"
        finally:
            set_arbiter_name(original)


class TestEnvironmentOverrides:
    """Settings read from the environment when modelarena.config is first imported."""

    @staticmethod
    def load_config(**env_overrides):
        env = {**os.environ, **env_overrides}
        code = (
            "from modelarena import config; "
            "print(config.get_simulated_delay()); "
            "print(config.get_arbiter_name())"
        )
        return subprocess.run(
            [sys.executable, "-c", code],
            cwd=REPO_ROOT, env=env, capture_output=True, text=True, timeout=60,
        )

    def test_valid_values(self):
        proc = self.load_config(ARENA_SIMULATED_DELAY="1.25", ARENA_ARBITER_NAME="Judge Prime")
        assert proc.returncode == 0, proc.stderr
        assert proc.stdout.split("\n")[:2] == ["1.25", "Judge Prime"]

    def test_negative_delay_rejected_at_import(self):
        proc = self.load_config(ARENA_SIMULATED_DELAY="-1")
        assert proc.returncode != 0
        assert "ValueError" in proc.stderr
        assert "Invalid delay" in proc.stderr

    def test_blank_arbiter_name_falls_back(self):
        proc = self.load_config(ARENA_SIMULATED_DELAY="0", ARENA_ARBITER_NAME="   ")
        assert proc.returncode == 0, proc.stderr
        assert proc.stdout.split("\n")[:2] == ["0.0", "Gemini-3-Pro"]


class TestFormatting:

    def test_format_score(self):
        assert format_score(7.44) == "7.4"
        assert format_score(10) == "10.0"
        assert format_score(None) == "-"

    def test_format_duration(self):
        assert format_duration(2.345) == "2.3s"
        assert format_duration(75) == "1m 15.0s"

    def test_format_table(self):
        table = format_table(["Model", "Score"], [["gpt4o", "8.1"], ["idefics3", "7.0"]], ['l', 'r'])
        lines = table.split("\n")
        assert len(lines) == 4
        assert lines[0] == "| Model    | Score |"
        assert lines[1] == "|----------|------:|"

    def test_short_name(self):
        assert get_short_name("claude3-opus") == "opus-3"
        assert get_short_name("unknown-model-name") == "unknown-mode"


class TestCatalog:

    def test_seven_models(self):
        assert len(ALL_MODELS) == 7
        assert len({m["id"] for m in ALL_MODELS}) == 7

    def test_roster_sorted_by_name(self):
        names = [m["name"] for m in roster()]
        assert names == sorted(names, key=str.lower)

    def test_format_model_name(self):
        assert format_model_name("gemini-1.5") == "Gemini 1.5 Pro"
        assert format_model_name("mystery") == "mystery"
        assert get_model("mystery") is None
