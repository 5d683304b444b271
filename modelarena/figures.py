"""
figures.py - Charts for the arena results page

Figures are returned to the caller (Streamlit renders them with st.pyplot);
nothing is written to disk.
"""

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns

from .config import SCORE_MAX, get_short_name
from .scoring import build_cross_matrix

# Colorblind-safe palette (Paul Tol)
MODEL_COLORS = {
    "gpt4o": "#0173B2",
    "claude3-opus": "#029E73",
    "gemini-1.5": "#D55E00",
    "llama3-70b": "#999999",
    "mistral-large": "#17BECF",
    "qwen2-vl": "#CC79A7",
    "idefics3": "#E69F00",
}


def get_color(model_id: str) -> str:
    """Get color for a model, with fallback."""
    return MODEL_COLORS.get(model_id, "#666666")


def cross_eval_array(result: dict) -> np.ndarray:
    """Evaluator x target matrix of overall scores, NaN where a review is missing."""
    model_ids = result["model_ids"]
    matrix = build_cross_matrix(result["cross_evaluations"], model_ids)
    data = np.full((len(model_ids), len(model_ids)), np.nan)
    for i, row in enumerate(model_ids):
        for j, col in enumerate(model_ids):
            cell = matrix[row].get(col)
            if cell:
                data[i, j] = cell["overall"]
    return data


def plot_cross_eval_heatmap(result: dict):
    """Heatmap of evaluator x evaluated scores, self-reviews outlined."""
    model_ids = result["model_ids"]
    labels = [get_short_name(m) for m in model_ids]
    data = cross_eval_array(result)

    fig, ax = plt.subplots(figsize=(7, 5.5))
    sns.heatmap(data, annot=True, fmt=".1f", cmap="RdYlGn",
                xticklabels=labels, yticklabels=labels,
                vmin=4, vmax=SCORE_MAX, center=7,
                annot_kws={"fontsize": 10},
                cbar_kws={"label": "Overall", "shrink": 0.8},
                linewidths=0.5, linecolor="white",
                ax=ax)

    for i in range(len(model_ids)):
        ax.add_patch(plt.Rectangle((i, i), 1, 1, fill=False, edgecolor="black", linewidth=2))

    ax.set_xlabel("Evaluated Model", fontweight="bold")
    ax.set_ylabel("Evaluator Model", fontweight="bold")
    ax.set_title("Cross-Evaluation Matrix\n(diagonal = self-reviews)", fontweight="bold", pad=10)
    ax.tick_params(axis="x", rotation=45)
    ax.tick_params(axis="y", rotation=0)
    fig.tight_layout()
    return fig


def plot_leaderboard(result: dict):
    """Horizontal bars of aggregate score; finalists solid, the rest faded."""
    leaderboard = result["leaderboard"]
    finalists = set(result["top_three"])

    fig, ax = plt.subplots(figsize=(7, 0.6 * len(leaderboard) + 1.2))
    y_pos = np.arange(len(leaderboard))
    scores = [e["aggregate_score"] for e in leaderboard]
    colors = [get_color(e["model_id"]) for e in leaderboard]
    alphas = [0.95 if e["model_id"] in finalists else 0.35 for e in leaderboard]

    for y, score, color, alpha in zip(y_pos, scores, colors, alphas):
        ax.barh(y, score, color=color, alpha=alpha, edgecolor="white")
        ax.text(score + 0.1, y, f"{score:.2f}", va="center", fontsize=10)

    ax.set_yticks(y_pos)
    ax.set_yticklabels([get_short_name(e["model_id"]) for e in leaderboard])
    ax.set_xlim(0, SCORE_MAX)
    ax.set_xlabel("Aggregate score")
    ax.invert_yaxis()
    ax.set_title("Leaderboard (finalists highlighted)", fontweight="bold", pad=10)
    fig.tight_layout()
    return fig
