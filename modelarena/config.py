"""
config.py - Configuration constants and utilities for Model Arena
"""

import os

from dotenv import load_dotenv

load_dotenv(override=True)

# Roster limits
MAX_SELECTIONS = 5
MIN_MODELS = 4
DEFAULT_SELECTION = ["gpt4o", "claude3-opus", "gemini-1.5", "llama3-70b"]

DEFAULT_MODE = "multimodal"
DEFAULT_PROMPT = (
    "You are assisting a multidisciplinary innovation team exploring climate-resilient urban farming. "
    "Combine systems-level reasoning with tangible design suggestions. The response should include: "
    "(1) a comparative assessment of three candidate multimodal greenhouse layouts, (2) evaluation of "
    "potential failure modes under extreme weather events, (3) opportunities to incorporate community "
    "participation and sensing infrastructure."
)

PROMPT_MODES = [
    {"value": "text", "label": "Text",
     "description": "Standard prompt focusing on language-only reasoning."},
    {"value": "image", "label": "Image",
     "description": "Single image prompt. Text field can carry instructions."},
    {"value": "multimodal", "label": "Multimodal",
     "description": "Blend text with image context for richer evaluation scenarios."},
]
MODE_VALUES = [m["value"] for m in PROMPT_MODES]

# Scoring
METRICS = ("clarity", "relevance", "accuracy", "depth", "safety")
METRIC_WEIGHTS = {
    "clarity": 0.20,
    "relevance": 0.25,
    "accuracy": 0.25,
    "depth": 0.20,
    "safety": 0.10,
}
SCORE_MIN = 0.0
SCORE_MAX = 10.0

# Leaderboard blend: own response, peer average, self check
LEADERBOARD_WEIGHTS = {"own": 0.5, "cross": 0.4, "self": 0.1}

# How much a model inflates its own review
SELF_PREFERENCE_BONUS = 0.6

# Arbiter re-scoring of the finalists
TOP_N = 3
ARBITER_BLEND = {"aggregate": 0.6, "consensus": 0.4}
ARBITER_JITTER = 0.15
NARROW_MARGIN = 0.25

# Elo (pairwise view of the cross-evaluation matrix)
ELO_INITIAL_RATING = 1500
ELO_K_FACTOR = 32

# Reference image upload
ACCEPTED_IMAGE_TYPES = ("png", "jpg", "jpeg", "webp")
MAX_IMAGE_BYTES = 5 * 1024 * 1024

# UI delay before results are revealed (seconds)
DEFAULT_SIMULATED_DELAY = 0.28
SIMULATED_DELAY = DEFAULT_SIMULATED_DELAY

ARBITER_NAME = os.getenv("ARENA_ARBITER_NAME", "Gemini-3-Pro").strip() or "Gemini-3-Pro"


def get_simulated_delay() -> float:
    """Get UI simulated delay in seconds."""
    return SIMULATED_DELAY


def set_simulated_delay(seconds: float):
    """Set UI simulated delay in seconds."""
    global SIMULATED_DELAY
    if seconds < 0:
        raise ValueError(f"Invalid delay: {seconds}. Must be >= 0")
    SIMULATED_DELAY = float(seconds)


# Env override goes through the setter so negative values are rejected at import
set_simulated_delay(float(os.getenv("ARENA_SIMULATED_DELAY", str(DEFAULT_SIMULATED_DELAY))))


def get_arbiter_name() -> str:
    """Get display name of the arbiter model."""
    return ARBITER_NAME


def set_arbiter_name(name: str):
    """Set display name of the arbiter model."""
    global ARBITER_NAME
    ARBITER_NAME = name.strip() or "Gemini-3-Pro"


# Short names for compact display
MODEL_SHORTCUTS = {
    "gpt4o": "gpt-4.1o", "claude3-opus": "opus-3", "gemini-1.5": "gem-1.5",
    "llama3-70b": "llama-3", "mistral-large": "mistral", "qwen2-vl": "qwen2-vl",
    "idefics3": "idefics3",
}


def get_short_name(model_id: str, max_len: int = 12) -> str:
    """Get short display name for a model."""
    return MODEL_SHORTCUTS.get(model_id, model_id)[:max_len]


def format_score(value: float | None) -> str:
    if value is None:
        return "-"
    return f"{value:.1f}"


def format_duration(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.1f}s"
    return f"{int(seconds // 60)}m {seconds % 60:.1f}s"


def format_table(headers: list[str], rows: list[list[str]], alignments: list[str] | None = None) -> str:
    """Format a markdown table with proper column alignment."""
    alignments = alignments or ['l'] * len(headers)
    widths = [max(len(h), max((len(str(row[i])) for row in rows), default=0)) for i, h in enumerate(headers)]

    def align(text, width, a):
        return text.ljust(width) if a == 'l' else text.rjust(width) if a == 'r' else text.center(width)

    sep = '|'.join(':' + '-' * w + ':' if a == 'c' else '-' * (w + 1) + ':' if a == 'r' else '-' * (w + 2)
                   for w, a in zip(widths, alignments))

    lines = ['| ' + ' | '.join(align(h, widths[i], alignments[i]) for i, h in enumerate(headers)) + ' |',
             '|' + sep + '|']
    lines.extend('| ' + ' | '.join(align(str(c), widths[i], alignments[i]) for i, c in enumerate(row)) + ' |' for row in rows)
    return '\n'.join(lines)
