# tests/test_runner.py

"""
Runner Tests - roster toggling, validation and full arena runs
"""

import pytest

from modelarena.config import DEFAULT_PROMPT, DEFAULT_SELECTION, MAX_SELECTIONS
from modelarena.runner import (
    ArenaError, build_payload_seed, resolve_models, run_evaluation, toggle_model, validate_run,
)


# TOGGLE / RESOLVE


class TestToggleModel:

    def test_add(self):
        assert toggle_model(["a"], "b") == ["a", "b"]

    def test_remove(self):
        assert toggle_model(["a", "b"], "a") == ["b"]

    def test_quota_reached_is_noop(self):
        full = [f"m{i}" for i in range(MAX_SELECTIONS)]
        assert toggle_model(full, "extra") == full

    def test_remove_allowed_at_quota(self):
        full = [f"m{i}" for i in range(MAX_SELECTIONS)]
        assert toggle_model(full, "m0") == full[1:]

    def test_input_not_mutated(self):
        selected = ["a"]
        toggle_model(selected, "b")
        assert selected == ["a"]


class TestResolveModels:

    def test_roster_order(self):
        models = resolve_models(["llama3-70b", "gpt4o", "claude3-opus", "gemini-1.5"])
        assert [m["id"] for m in models] == ["claude3-opus", "gemini-1.5", "gpt4o", "llama3-70b"]

    def test_unknown_model(self):
        with pytest.raises(ArenaError, match="Unknown model: nope"):
            resolve_models(["gpt4o", "nope"])


# VALIDATION


class TestValidateRun:

    def test_valid(self):
        validate_run(list(DEFAULT_SELECTION), "prompt", "text")

    def test_too_few_models(self):
        with pytest.raises(ArenaError) as exc:
            validate_run(DEFAULT_SELECTION[:3], "prompt", "text")
        assert str(exc.value) == "Select at least 4 models to run a comparison."

    def test_blank_prompt(self):
        with pytest.raises(ArenaError) as exc:
            validate_run(list(DEFAULT_SELECTION), "   \n", "text")
        assert str(exc.value) == "Provide a prompt to evaluate."

    def test_too_many_models(self):
        six = ["gpt4o", "claude3-opus", "gemini-1.5", "llama3-70b", "mistral-large", "qwen2-vl"]
        with pytest.raises(ArenaError, match="at most 5"):
            validate_run(six, "prompt", "text")

    def test_unknown_mode(self):
        with pytest.raises(ArenaError, match="Invalid mode"):
            validate_run(list(DEFAULT_SELECTION), "prompt", "audio")

    def test_arena_error_is_value_error(self):
        assert issubclass(ArenaError, ValueError)


# FULL RUN


class TestRunEvaluation:

    def test_payload_seed(self):
        assert build_payload_seed("p", "image", "farm", 3) == "p|image|farm|3"
        assert build_payload_seed("p", "text", None, 0) == "p|text||0"

    def test_result_shape(self, sample_result):
        assert sample_result["model_ids"] == ["claude3-opus", "gemini-1.5", "gpt4o", "llama3-70b"]
        assert len(sample_result["responses"]) == 4
        assert len(sample_result["cross_evaluations"]) == 16
        assert len(sample_result["leaderboard"]) == 4
        assert sample_result["top_three"] == [e["model_id"] for e in sample_result["leaderboard"][:3]]
        assert len(sample_result["verdict"]["ordered_model_ids"]) == 3
        assert sample_result["payload_seed"].endswith("|multimodal|greenhouse layout|0")

    def test_deterministic(self):
        a = run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "text")
        b = run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "text")
        for key in ("responses", "cross_evaluations", "leaderboard", "top_three", "verdict"):
            assert a[key] == b[key]

    def test_run_counter_changes_reviews_only(self):
        first = run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "text", run_counter=0)
        second = run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "text", run_counter=1)
        assert first["responses"] == second["responses"]
        assert first["cross_evaluations"] != second["cross_evaluations"]

    def test_selection_order_irrelevant(self):
        a = run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "image")
        b = run_evaluation(list(reversed(DEFAULT_SELECTION)), DEFAULT_PROMPT, "image")
        assert a["leaderboard"] == b["leaderboard"]

    def test_invalid_run_raises(self):
        with pytest.raises(ArenaError):
            run_evaluation(["gpt4o"], DEFAULT_PROMPT, "text")

    def test_progress_logged(self, capsys):
        run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "text", run_counter=7)
        out = capsys.readouterr().out
        assert "Run #7: 4 models, mode=text" in out
        assert "16 cross-evaluations" in out
