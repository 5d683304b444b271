"""
report.py - Result tables (pandas) and Markdown/JSON export
"""

import json
from datetime import datetime

import pandas as pd

from .config import METRICS, format_score, format_table, get_short_name
from .models import format_model_name
from .scoring import (
    build_cross_matrix, calculate_elo_ratings, calculate_judge_generosity,
    calculate_self_bias, summarise_alignment,
)


def _responses_by_id(result: dict) -> dict:
    return {r["model_id"]: r for r in result["responses"]}


def _self_check(result: dict, model_id: str) -> float | None:
    for ev in result["cross_evaluations"]:
        if ev["evaluator_id"] == model_id and ev["target_id"] == model_id:
            return ev["overall"]
    return None


def leaderboard_frame(result: dict) -> pd.DataFrame:
    responses = _responses_by_id(result)
    rows = []
    for rank, entry in enumerate(result["leaderboard"], 1):
        response = responses.get(entry["model_id"], {})
        rows.append({
            "Rank": f"#{rank}",
            "Model": format_model_name(entry["model_id"]),
            "Modality": response.get("modality_notes", ""),
            "Own score": format_score(entry["own_score"]),
            "Peer avg": format_score(entry["cross_score"]),
            "Self check": format_score(_self_check(result, entry["model_id"])),
            "Aggregate": entry["aggregate_score"],
        })
    return pd.DataFrame(rows)


def cross_matrix_frame(result: dict) -> pd.DataFrame:
    """Evaluator rows x target columns of overall scores (NaN where missing)."""
    model_ids = result["model_ids"]
    matrix = build_cross_matrix(result["cross_evaluations"], model_ids)
    names = [format_model_name(m) for m in model_ids]
    data = [
        [matrix[row][col]["overall"] if matrix[row].get(col) else float("nan") for col in model_ids]
        for row in model_ids
    ]
    frame = pd.DataFrame(data, index=names, columns=names)
    frame.index.name = "Evaluator → Target"
    return frame


def metrics_frame(response: dict) -> pd.DataFrame:
    return pd.DataFrame([{m.capitalize(): response["metrics"][m] for m in METRICS}])


def elo_frame(result: dict) -> pd.DataFrame:
    elo = calculate_elo_ratings(result["cross_evaluations"], result["model_ids"])
    ordered = sorted(result["model_ids"], key=lambda m: elo["ratings"][m], reverse=True)
    rows = []
    for rank, model_id in enumerate(ordered, 1):
        wins, losses, ties = elo["matches"][model_id]
        rows.append({
            "Rank": rank,
            "Model": format_model_name(model_id),
            "Elo": elo["ratings"][model_id],
            "Win %": f"{elo['win_rates'][model_id]:.1f}",
            "W-L-T": f"{wins}-{losses}-{ties}",
        })
    return pd.DataFrame(rows)


def judge_frame(result: dict) -> pd.DataFrame:
    """Judge generosity (avg given to others) and self bias, most generous first."""
    generosity = calculate_judge_generosity(result["cross_evaluations"])
    self_bias = calculate_self_bias(result["cross_evaluations"])
    rows = []
    for model_id in sorted(generosity, key=generosity.get, reverse=True):
        bias = self_bias.get(model_id)
        rows.append({
            "Judge": format_model_name(model_id),
            "Avg Given": f"{generosity[model_id]:.2f}",
            "Self Bias": f"{bias:+.2f}" if bias is not None else "-",
        })
    return pd.DataFrame(rows)


def build_markdown_report(result: dict, prompt: str, mode: str, user_choice: str | None = None) -> str:
    """Render a full run as a Markdown document."""
    model_ids = result["model_ids"]
    verdict = result["verdict"]
    sections = [
        "# Model Arena Run Report",
        f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}  \n"
        f"Mode: **{mode}**  \nModels: {', '.join(format_model_name(m) for m in model_ids)}",
        "## Prompt\n\n" + "\n".join(f"> {line}" for line in prompt.strip().splitlines()),
    ]

    lb = leaderboard_frame(result)
    sections.append("## Leaderboard\n\n" + format_table(
        list(lb.columns), lb.astype(str).values.tolist(), ['r', 'l', 'l', 'r', 'r', 'r', 'r']))
    sections.append("Finalists: " + " → ".join(format_model_name(m) for m in result["top_three"]))

    matrix = build_cross_matrix(result["cross_evaluations"], model_ids)
    matrix_rows = [
        [get_short_name(row)] + [format_score(matrix[row][col]["overall"]) if matrix[row].get(col) else "-"
                                 for col in model_ids]
        for row in model_ids
    ]
    sections.append("## Cross-Evaluation Matrix\n\nRows evaluate columns; the diagonal is each model's self-review.\n\n"
                    + format_table(["Evaluator"] + [get_short_name(m) for m in model_ids], matrix_rows,
                                   ['l'] + ['r'] * len(model_ids)))

    verdict_rows = [[str(i), format_model_name(m), f"{verdict['scores'][m]:.2f}"]
                    for i, m in enumerate(verdict["ordered_model_ids"], 1)]
    sections.append(f"## {verdict['arbiter']} Final Ranking\n\n"
                    + format_table(["Rank", "Model", "Composite"], verdict_rows, ['r', 'l', 'r'])
                    + f"\n\n{verdict['commentary']}")

    elo = elo_frame(result)
    sections.append("## Elo Ratings\n\n" + format_table(
        list(elo.columns), elo.astype(str).values.tolist(), ['r', 'l', 'r', 'r', 'r']))
    judges = judge_frame(result)
    sections.append("## Judge Generosity\n\n" + format_table(
        list(judges.columns), judges.astype(str).values.tolist(), ['l', 'r', 'r']))

    if user_choice:
        alignment = summarise_alignment(verdict, user_choice)
        offset = f" (offset {alignment['delta']})" if alignment["delta"] is not None else ""
        sections.append(f"## Your Call\n\nYou voted for {format_model_name(user_choice)}. "
                        f"Alignment status: **{alignment['alignment']}**{offset}.")

    return "\n\n".join(sections) + "\n"


def result_to_json(result: dict) -> str:
    return json.dumps(result, indent=2, ensure_ascii=False)
