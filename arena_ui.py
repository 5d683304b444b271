"""
Model Arena UI - Streamlit app for synthetic prompt testing and model ranking
Run with: streamlit run arena_ui.py
"""

import time

import matplotlib.pyplot as plt
import streamlit as st

from modelarena.config import (
    ACCEPTED_IMAGE_TYPES, DEFAULT_MODE, DEFAULT_PROMPT, DEFAULT_SELECTION, MAX_SELECTIONS,
    METRICS, PROMPT_MODES, MODE_VALUES, format_score, get_simulated_delay,
)
from modelarena.figures import plot_cross_eval_heatmap, plot_leaderboard
from modelarena.media import MediaError, attach_image
from modelarena.models import format_model_name, get_model, roster
from modelarena.report import (
    build_markdown_report, cross_matrix_frame, elo_frame, judge_frame,
    leaderboard_frame, metrics_frame, result_to_json,
)
from modelarena.runner import ArenaError, run_evaluation, toggle_model, validate_run
from modelarena.scoring import agreement_rate, summarise_alignment

MODE_INFO = {m["value"]: m for m in PROMPT_MODES}

# Page config
st.set_page_config(
    page_title="Model Arena - AI Prompt Testing & Model Ranking",
    page_icon="🏟️",
    layout="wide"
)

# Session state initialization
if "selected_ids" not in st.session_state:
    st.session_state.selected_ids = list(DEFAULT_SELECTION)
if "prompt" not in st.session_state:
    st.session_state.prompt = DEFAULT_PROMPT
if "mode" not in st.session_state:
    st.session_state.mode = DEFAULT_MODE
if "attachment" not in st.session_state:
    st.session_state.attachment = None
if "upload_nonce" not in st.session_state:
    st.session_state.upload_nonce = 0  # bumped to clear the file uploader
if "result" not in st.session_state:
    st.session_state.result = None
if "result_inputs" not in st.session_state:
    st.session_state.result_inputs = {}  # prompt/mode the current result was built from
if "alignment_by_run" not in st.session_state:
    st.session_state.alignment_by_run = {}  # {run_counter: alignment}
if "run_counter" not in st.session_state:
    st.session_state.run_counter = 0
if "error" not in st.session_state:
    st.session_state.error = None


def on_toggle_model(model_id: str):
    st.session_state.selected_ids = toggle_model(st.session_state.selected_ids, model_id, MAX_SELECTIONS)


def on_reset():
    """Restore the default arena configuration and drop the current result."""
    st.session_state.selected_ids = list(DEFAULT_SELECTION)
    st.session_state.prompt = DEFAULT_PROMPT
    st.session_state.mode = DEFAULT_MODE
    st.session_state.attachment = None
    st.session_state.upload_nonce += 1
    st.session_state.result = None
    st.session_state.result_inputs = {}
    st.session_state.error = None
    for key in [k for k in st.session_state if str(k).startswith("model_")]:
        del st.session_state[key]


def render_leaderboard(result: dict):
    st.markdown("### 🏆 Leaderboard")
    st.caption("Aggregate scoring blends own response quality, peer review, and self reflection "
               "to surface the top trio.")
    st.markdown("**Finalists:** " + " → ".join(format_model_name(m) for m in result["top_three"]))
    table_col, chart_col = st.columns([3, 2])
    with table_col:
        st.dataframe(leaderboard_frame(result), width="stretch", hide_index=True)
    with chart_col:
        fig = plot_leaderboard(result)
        st.pyplot(fig)
        plt.close(fig)


def render_cross_matrix(result: dict):
    st.markdown("### 🔀 Cross-evaluation matrix")
    st.caption("Each model reviews every model's response (itself included) on clarity, relevance, "
               "accuracy, depth, and safety. Rows are evaluators, columns are targets.")
    table_col, chart_col = st.columns([3, 2])
    with table_col:
        st.dataframe(cross_matrix_frame(result).round(1), width="stretch")
        with st.expander("Reviewer commentary"):
            for ev in result["cross_evaluations"]:
                metrics = ", ".join(f"{m.capitalize()} {format_score(ev['metrics'][m])}" for m in METRICS)
                st.markdown(f"**{format_model_name(ev['evaluator_id'])} → {format_model_name(ev['target_id'])}** "
                            f"({format_score(ev['overall'])}): {ev['commentary']}  \n{metrics}")
    with chart_col:
        fig = plot_cross_eval_heatmap(result)
        st.pyplot(fig)
        plt.close(fig)


def render_narratives(result: dict):
    st.markdown("### 📝 Model narratives")
    st.caption("Synthesised response summaries for each model.")
    for response in result["responses"]:
        with st.container(border=True):
            head_col, badge_col = st.columns([4, 1])
            with head_col:
                st.markdown(f"**{format_model_name(response['model_id'])}**")
                st.caption(f"Aggregate score {format_score(response['overall_score'])} / 10 · "
                           f"{response['modality_notes']}")
            with badge_col:
                st.markdown(f":blue-background[{len(response['supporting_points'])} key points]")
            st.markdown(response["content"])
            st.dataframe(metrics_frame(response), width="stretch", hide_index=True)


def render_verdict(result: dict):
    verdict = result["verdict"]
    st.markdown(f"### 🏅 {verdict['arbiter']} final ranking")
    st.caption(f"The top trio is re-scored by a dedicated {verdict['arbiter']} arbiter.")
    for i, model_id in enumerate(verdict["ordered_model_ids"], 1):
        label = "winner" if i == 1 else "candidate"
        line = f"**#{i} {format_model_name(model_id)}** · composite {verdict['scores'][model_id]:.2f} ({label})"
        if i == 1:
            st.success(line, icon="✨")
        else:
            st.write(line)
    st.info(verdict["commentary"])


def render_judges(result: dict):
    cols = st.columns(2)
    with cols[0]:
        st.markdown("### 📈 Elo Rating")
        st.caption("Pairwise comparison ranking from peer reviews (self excluded)")
        st.dataframe(elo_frame(result), width="stretch", hide_index=True)
    with cols[1]:
        st.markdown("### ⚖️ Judge Generosity")
        st.caption("Avg score given by each judge, and how much it flatters itself")
        st.dataframe(judge_frame(result), width="stretch", hide_index=True)


def render_user_choice(result: dict) -> str | None:
    verdict = result["verdict"]
    arbiter_top = verdict["ordered_model_ids"][0] if verdict["ordered_model_ids"] else None
    run_id = st.session_state.run_counter

    st.markdown(f"### 🗳️ Your call vs {verdict['arbiter']}")
    st.caption(f"Select the response you would deploy. Agreement with {verdict['arbiter']} is tracked across runs.")

    def label(model_id):
        model = get_model(model_id)
        text = f"{model['name']} · {model['provider']} · {' / '.join(model['modality'])}"
        return text + f"  ({verdict['arbiter']} pick)" if model_id == arbiter_top else text

    choice = st.radio("Your pick", result["model_ids"], index=None, format_func=label,
                      key=f"choice_{run_id}", label_visibility="collapsed")
    if choice:
        alignment = summarise_alignment(verdict, choice)
        st.session_state.alignment_by_run[run_id] = alignment
        offset = f" (offset {alignment['delta']})" if alignment["delta"] is not None else ""
        st.markdown(f"You voted for **{format_model_name(choice)}**. "
                    f"Alignment status: **{alignment['alignment']}**{offset}")

    rate = agreement_rate(list(st.session_state.alignment_by_run.values()))
    if rate is not None:
        st.caption(f"Agreement with {verdict['arbiter']}: {rate:.0%} over "
                   f"{len(st.session_state.alignment_by_run)} voted run(s)")
    return choice


# UI Layout
header_col, checklist_col = st.columns([3, 1])
with header_col:
    st.caption("MULTIMODAL EVALUATION COCKPIT")
    st.title("AI Prompt Testing & Model Ranking Arena")
    st.markdown("Spin up a head-to-head evaluation between leading multimodal models. We auto-generate "
                "synthetic peer review, shortlist the top three, and let the arbiter publish the decisive "
                "ranking while you compare your own choice.")
with checklist_col:
    with st.container(border=True):
        st.markdown("**Run Checklist**\n\n"
                    f"- Select 4-{MAX_SELECTIONS} models\n"
                    "- Pick prompt modality\n"
                    "- Add prompt & optional media\n"
                    "- Launch arena & review verdict")

# Prompt configuration
with st.container(border=True):
    st.subheader("Prompt Configuration")
    st.caption("Craft a prompt and modality target. Optionally attach a reference image to stress-test "
               "multimodal reasoning.")
    st.radio(
        "Prompt Modality",
        MODE_VALUES,
        key="mode",
        format_func=lambda v: MODE_INFO[v]["label"],
        captions=[MODE_INFO[v]["description"] for v in MODE_VALUES],
        horizontal=True,
    )
    st.text_area(
        "Prompt Body",
        key="prompt",
        height=140,
        placeholder="Describe the scenario or test case you want each model to solve...",
    )

    if st.session_state.mode != "text":
        uploaded = st.file_uploader(
            "Attach Reference Image",
            type=list(ACCEPTED_IMAGE_TYPES),
            key=f"upload_{st.session_state.upload_nonce}",
            help="PNG, JPG, or WebP up to 5MB. The file stays in this session for this comparison only.",
        )
        if uploaded is None:
            st.session_state.attachment = None
        elif (st.session_state.attachment or {}).get("name") != uploaded.name:
            try:
                st.session_state.attachment = attach_image(uploaded.name, uploaded.getvalue())
            except MediaError as e:
                st.session_state.attachment = None
                st.error(str(e))
        if st.session_state.attachment:
            st.image(st.session_state.attachment["data"], caption=st.session_state.attachment["name"], width=360)
    else:
        st.session_state.attachment = None

# Model roster
with st.container(border=True):
    selected_ids = st.session_state.selected_ids
    quota_reached = len(selected_ids) >= MAX_SELECTIONS
    st.subheader("Model Roster")
    badge = f":blue-background[{len(selected_ids)} / {MAX_SELECTIONS} selected]"
    if quota_reached:
        badge += "  :gray-background[Maximum reached. Deselect one to switch.]"
    st.markdown(badge)

    roster_cols = st.columns(2)
    for i, model in enumerate(roster()):
        is_selected = model["id"] in selected_ids
        with roster_cols[i % 2]:
            st.checkbox(
                f"**{model['name']}** · {model['provider']} · {' / '.join(model['modality'])}",
                value=is_selected,
                key=f"model_{model['id']}",
                disabled=quota_reached and not is_selected,
                on_change=on_toggle_model,
                args=(model["id"],),
                help="Tags: " + ", ".join(model["tags"]),
            )

# Execution
with st.container(border=True):
    st.subheader("Execution")
    st.caption("Fan out prompts to each model, trigger synthetic cross-evaluation, and forward the finalists "
               "to the arbiter.")
    run_col, reset_col, _ = st.columns([2, 1, 4])
    with run_col:
        run_button = st.button("✨ Run full evaluation", type="primary", key="run")

    # Process: Run
    if run_button:
        attachment = st.session_state.attachment
        descriptor = attachment["descriptor"] if attachment else None
        try:
            validate_run(st.session_state.selected_ids, st.session_state.prompt, st.session_state.mode)
            with st.spinner("Running..."):
                time.sleep(get_simulated_delay())
                result = run_evaluation(
                    st.session_state.selected_ids, st.session_state.prompt, st.session_state.mode,
                    descriptor, st.session_state.run_counter,
                )
        except ArenaError as e:
            st.session_state.error = str(e)
        else:
            st.session_state.error = None
            st.session_state.result = result
            st.session_state.result_inputs = {"prompt": st.session_state.prompt, "mode": st.session_state.mode}
            st.session_state.run_counter += 1

    with reset_col:
        if st.session_state.result:
            st.button("🔄 Reset", key="reset", on_click=on_reset)

    if st.session_state.error:
        st.error(st.session_state.error)

    if st.session_state.result:
        result = st.session_state.result
        render_leaderboard(result)
        st.divider()
        render_cross_matrix(result)
        st.divider()
        render_narratives(result)
        st.divider()
        render_verdict(result)
        st.divider()
        render_judges(result)
        st.divider()
        choice = render_user_choice(result)
        st.divider()

        inputs = st.session_state.result_inputs
        dl_cols = st.columns(2)
        with dl_cols[0]:
            st.download_button(
                "⬇️ Download report (Markdown)",
                data=build_markdown_report(result, inputs.get("prompt", ""), inputs.get("mode", ""), choice),
                file_name="arena_report.md",
                mime="text/markdown",
            )
        with dl_cols[1]:
            st.download_button(
                "⬇️ Download result (JSON)",
                data=result_to_json(result),
                file_name="arena_result.json",
                mime="application/json",
            )
    else:
        st.info("Configure your arena and launch the run to inspect comparative scoring. "
                "We synthesise structured responses and peer critique locally; no API keys required.")

# Footer
st.caption("Model Arena - synthetic peer evaluation demo")
