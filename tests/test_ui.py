# tests/test_ui.py

"""
UI Tests - Streamlit app smoke tests with AppTest
"""

from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from modelarena.config import DEFAULT_SELECTION

APP_PATH = str(Path(__file__).resolve().parent.parent / "arena_ui.py")


@pytest.fixture
def app():
    at = AppTest.from_file(APP_PATH, default_timeout=60)
    at.run()
    return at


def test_initial_render(app):
    assert not app.exception
    assert app.session_state["result"] is None
    assert app.session_state["selected_ids"] == DEFAULT_SELECTION
    assert len(app.checkbox) == 7


def test_run_full_evaluation(app):
    app.button(key="run").click().run()
    assert not app.exception
    assert not app.error
    result = app.session_state["result"]
    assert len(result["leaderboard"]) == 4
    assert app.session_state["run_counter"] == 1


def test_deselect_blocks_run(app):
    app.checkbox(key="model_gpt4o").uncheck().run()
    assert "gpt4o" not in app.session_state["selected_ids"]
    app.button(key="run").click().run()
    assert app.error[0].value == "Select at least 4 models to run a comparison."
    assert app.session_state["result"] is None


def test_blank_prompt_blocks_run(app):
    app.text_area(key="prompt").input("   ").run()
    app.button(key="run").click().run()
    assert app.error[0].value == "Provide a prompt to evaluate."


def test_user_choice_alignment(app):
    app.button(key="run").click().run()
    winner = app.session_state["result"]["verdict"]["ordered_model_ids"][0]
    app.radio(key="choice_1").set_value(winner).run()
    assert not app.exception
    assert app.session_state["alignment_by_run"][1] == {"alignment": "aligned", "delta": 0}


def test_reset_restores_defaults(app):
    app.checkbox(key="model_mistral-large").check().run()
    app.button(key="run").click().run()
    assert len(app.session_state["selected_ids"]) == 5
    app.button(key="reset").click().run()
    assert app.session_state["result"] is None
    assert app.session_state["selected_ids"] == DEFAULT_SELECTION


def test_text_mode_hides_uploader(app):
    assert len(app.get("file_uploader")) == 1
    app.radio(key="mode").set_value("text").run()
    assert not app.exception
    assert len(app.get("file_uploader")) == 0
    assert app.session_state["attachment"] is None
    app.button(key="run").click().run()
    assert app.session_state["result"]["payload_seed"].endswith("|text||0")
