"""
runner.py - Run orchestration: validate a configuration, fan the prompt out to
every selected model, cross-evaluate, rank and adjudicate.
"""

import time

from .config import MAX_SELECTIONS, MIN_MODELS, MODE_VALUES, format_duration
from .models import get_model, roster
from .scoring import (
    generate_model_response, build_cross_evaluations, compute_leaderboard,
    top_finalists, synthesise_verdict,
)


class ArenaError(ValueError):
    """Invalid run configuration; the message is shown to the user as-is."""


def toggle_model(selected_ids: list[str], model_id: str, max_selections: int = MAX_SELECTIONS) -> list[str]:
    """Select or deselect a model. Selecting past the quota is a no-op."""
    if model_id in selected_ids:
        return [m for m in selected_ids if m != model_id]
    if len(selected_ids) >= max_selections:
        return list(selected_ids)
    return [*selected_ids, model_id]


def resolve_models(selected_ids: list[str]) -> list[dict]:
    """Selected catalog entries, in roster order."""
    unknown = [m for m in selected_ids if get_model(m) is None]
    if unknown:
        raise ArenaError(f"Unknown model: {', '.join(unknown)}")
    return [m for m in roster() if m["id"] in selected_ids]


def validate_run(selected_ids: list[str], prompt: str, mode: str):
    if len(set(selected_ids)) < MIN_MODELS:
        raise ArenaError(f"Select at least {MIN_MODELS} models to run a comparison.")
    if len(set(selected_ids)) > MAX_SELECTIONS:
        raise ArenaError(f"Select at most {MAX_SELECTIONS} models.")
    if not prompt or not prompt.strip():
        raise ArenaError("Provide a prompt to evaluate.")
    if mode not in MODE_VALUES:
        raise ArenaError(f"Invalid mode: {mode}. Must be one of {', '.join(MODE_VALUES)}")


def build_payload_seed(prompt: str, mode: str, image_descriptor: str | None, run_counter: int) -> str:
    return f"{prompt}|{mode}|{image_descriptor or ''}|{run_counter}"


def run_evaluation(selected_ids: list[str], prompt: str, mode: str,
                   image_descriptor: str | None = None, run_counter: int = 0) -> dict:
    """
    Run one full arena pass.

    Returns:
        Dict with responses, cross_evaluations, leaderboard, top_three,
        verdict, model_ids, payload_seed and duration (seconds).

    Raises:
        ArenaError: if the configuration is not runnable
    """
    start = time.time()
    validate_run(selected_ids, prompt, mode)
    models = resolve_models(selected_ids)
    payload_seed = build_payload_seed(prompt, mode, image_descriptor, run_counter)

    print(f"  Run #{run_counter}: {len(models)} models, mode={mode}"
          f"{', image=' + repr(image_descriptor) if image_descriptor else ''}", flush=True)

    responses = [generate_model_response(m, prompt, mode, image_descriptor) for m in models]
    cross_evaluations = build_cross_evaluations(models, prompt, mode, payload_seed)
    leaderboard = compute_leaderboard(responses, cross_evaluations)
    top_three = top_finalists(leaderboard)
    verdict = synthesise_verdict(models, leaderboard, top_three, cross_evaluations)

    duration = time.time() - start
    print(f"    {len(responses)} responses, {len(cross_evaluations)} cross-evaluations | "
          f"winner: {verdict['ordered_model_ids'][0]} | {format_duration(duration)}", flush=True)

    return {
        "model_ids": [m["id"] for m in models],
        "responses": responses,
        "cross_evaluations": cross_evaluations,
        "leaderboard": leaderboard,
        "top_three": top_three,
        "verdict": verdict,
        "payload_seed": payload_seed,
        "duration": round(duration, 4),
    }
