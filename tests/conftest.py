# tests/conftest.py

"""
Shared fixtures for Model Arena tests
"""

import os

# Must be set before modelarena.config is imported
os.environ["ARENA_SIMULATED_DELAY"] = "0"
os.environ.setdefault("MPLBACKEND", "Agg")

import pytest

from modelarena.config import DEFAULT_PROMPT, DEFAULT_SELECTION
from modelarena.models import get_model
from modelarena.runner import run_evaluation


@pytest.fixture
def default_models():
    """Catalog entries for the default selection."""
    return [get_model(m) for m in DEFAULT_SELECTION]


@pytest.fixture
def vision_model():
    return {"id": "v", "name": "Vision One", "provider": "Test", "tags": ["t"], "modality": ["text", "vision"]}


@pytest.fixture
def text_only_model():
    return {"id": "t", "name": "Text Only", "provider": "Test", "tags": ["t"], "modality": ["text"]}


@pytest.fixture
def sample_result():
    """A full default run with an attached image descriptor."""
    return run_evaluation(list(DEFAULT_SELECTION), DEFAULT_PROMPT, "multimodal", "greenhouse layout", 0)


def make_eval(evaluator: str, target: str, overall: float) -> dict:
    """Minimal cross-evaluation record for hand-built scenarios."""
    return {
        "evaluator_id": evaluator,
        "target_id": target,
        "metrics": {},
        "overall": overall,
        "commentary": "",
    }


def make_response(model_id: str, overall: float) -> dict:
    return {
        "model_id": model_id,
        "content": "",
        "supporting_points": [],
        "modality_notes": "",
        "overall_score": overall,
        "metrics": {},
    }
