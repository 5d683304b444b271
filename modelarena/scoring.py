"""
scoring.py - Deterministic synthetic scoring for Model Arena

Every number in a run is derived from seed strings, so the same prompt, mode,
image and run counter always reproduce the same responses, peer reviews,
leaderboard and arbiter verdict.
"""

import hashlib
import random
import re
from statistics import mean

from .config import (
    METRICS, METRIC_WEIGHTS, SCORE_MIN, SCORE_MAX, LEADERBOARD_WEIGHTS,
    SELF_PREFERENCE_BONUS, TOP_N, ARBITER_BLEND, ARBITER_JITTER, NARROW_MARGIN,
    ELO_INITIAL_RATING, ELO_K_FACTOR, format_score, get_arbiter_name,
)
from .models import format_model_name

# Metrics that move with how well a model handles the prompt's modality
MODALITY_METRICS = ("relevance", "accuracy", "depth")

STOPWORDS = {
    "about", "above", "after", "again", "against", "assisting", "being", "below",
    "between", "could", "does", "during", "every", "from", "further", "having",
    "include", "including", "into", "other", "should", "their", "there", "these",
    "those", "three", "through", "under", "until", "using", "where", "which",
    "while", "would", "response", "please", "describe", "provide",
}

POINT_TEMPLATES = [
    "Frames {kw} as a {tag} problem before proposing options.",
    "Contrasts two approaches to {kw} and flags the trade-offs.",
    "Grounds the {kw} discussion in measurable success criteria.",
    "Calls out failure modes around {kw} with concrete mitigations.",
    "Sequences next steps for {kw} into a short rollout plan.",
    "Surfaces open questions about {kw} for stakeholder review.",
]


def hash_seed(text: str) -> int:
    """Stable 32-bit seed for a string (independent of PYTHONHASHSEED)."""
    return int(hashlib.sha256(text.encode("utf-8")).hexdigest()[:8], 16)


def seeded_rng(*parts: str) -> random.Random:
    return random.Random(hash_seed("|".join(parts)))


def clamp_score(value: float) -> float:
    return round(min(SCORE_MAX, max(SCORE_MIN, value)), 1)


def weighted_overall(metrics: dict) -> float:
    return round(sum(metrics[m] * METRIC_WEIGHTS[m] for m in METRICS), 2)


def latent_quality(model_id: str, prompt: str, mode: str) -> float:
    """Underlying quality of a model on a prompt, shared by answers and reviews."""
    return seeded_rng("latent", model_id, prompt, mode).uniform(6.0, 8.6)


def evaluator_strictness(evaluator_id: str) -> float:
    """Per-judge offset: negative judges are harsh, positive ones lenient."""
    return seeded_rng("strictness", evaluator_id).uniform(-0.8, 0.6)


def modality_bonus(model: dict, mode: str) -> float:
    if mode == "text":
        return 0.0
    modality = model.get("modality", [])
    if "vision" not in modality:
        return -1.5
    bonus = 0.3
    if mode == "multimodal":
        bonus += 0.1 * sum(1 for m in ("audio", "video") if m in modality)
    return bonus


def extract_keywords(prompt: str, limit: int = 3) -> list[str]:
    """Most frequent content words (5+ letters), ties broken by first appearance."""
    counts = {}
    first_seen = {}
    for i, word in enumerate(re.findall(r"[a-z]+(?:-[a-z]+)*", prompt.lower())):
        if len(word) < 5 or word in STOPWORDS:
            continue
        counts[word] = counts.get(word, 0) + 1
        first_seen.setdefault(word, i)
    ranked = sorted(counts, key=lambda w: (-counts[w], first_seen[w]))
    return ranked[:limit]


def _modality_notes(model: dict, mode: str, descriptor: str | None) -> str:
    if mode == "text":
        return "Text-only prompt"
    if "vision" not in model.get("modality", []):
        return "No native vision support; image context ignored"
    if mode == "image":
        return f"Vision grounding on '{descriptor}'" if descriptor else "Vision-ready, no image attached"
    fused = "Fuses " + " + ".join(model.get("modality", [])) + " context"
    return f"{fused} with '{descriptor}'" if descriptor else fused


def _supporting_points(model: dict, keywords: list[str], descriptor: str | None, rng: random.Random) -> list[str]:
    count = rng.randint(3, 5)
    templates = rng.sample(POINT_TEMPLATES, count)
    tags = model.get("tags") or ["general"]
    points = []
    for i, template in enumerate(templates):
        kw = keywords[i % len(keywords)] if keywords else "the request"
        points.append(template.format(kw=kw, tag=tags[i % len(tags)]))
    if descriptor and "vision" in model.get("modality", []):
        kw = keywords[0] if keywords else "the request"
        points[-1] = f"References the attached image ('{descriptor}') to anchor the {kw} analysis."
    return points


def generate_model_response(model: dict, prompt: str, mode: str, image_descriptor: str | None = None) -> dict:
    """Synthesise one model's answer with per-metric scores.

    Seeded by model, prompt, mode and image descriptor only, so repeated runs
    of the same configuration give identical responses.
    """
    descriptor = image_descriptor if mode != "text" else None
    rng = seeded_rng("response", model["id"], prompt, mode, descriptor or "")
    base = latent_quality(model["id"], prompt, mode)
    bonus = modality_bonus(model, mode)

    metrics = {}
    for metric in METRICS:
        value = base + rng.uniform(-1.2, 1.2)
        if metric in MODALITY_METRICS:
            value += bonus
        metrics[metric] = clamp_score(value)
    overall = weighted_overall(metrics)

    keywords = extract_keywords(prompt)
    focus = ", ".join(keywords) if keywords else "the core request"
    points = _supporting_points(model, keywords, descriptor, rng)
    content = "\n".join(
        [f"{model['name']} ({model['provider']}) addresses the prompt with a focus on {focus}."]
        + [f"- {p}" for p in points]
        + [f"Self-assessed confidence {format_score(overall)}/10 across {len(METRICS)} rubric metrics."]
    )

    return {
        "model_id": model["id"],
        "content": content,
        "supporting_points": points,
        "modality_notes": _modality_notes(model, mode, descriptor),
        "overall_score": overall,
        "metrics": metrics,
    }


def generate_cross_evaluation(evaluator: dict, target: dict, prompt: str, mode: str, payload_seed: str) -> dict:
    """Synthesise one evaluator's review of a target's response."""
    is_self = evaluator["id"] == target["id"]
    rng = seeded_rng(f"{evaluator['id']}->{target['id']}", payload_seed)
    base = latent_quality(target["id"], prompt, mode) + evaluator_strictness(evaluator["id"])
    if is_self:
        base += SELF_PREFERENCE_BONUS
    bonus = modality_bonus(target, mode)

    metrics = {}
    for metric in METRICS:
        value = base + rng.uniform(-1.0, 1.0)
        if metric in MODALITY_METRICS:
            value += bonus
        metrics[metric] = clamp_score(value)

    strongest = max(METRICS, key=lambda m: metrics[m])
    weakest = min(METRICS, key=lambda m: metrics[m])
    if metrics[strongest] == metrics[weakest]:
        verdict = f"uniform {format_score(metrics[strongest])} across all metrics"
    else:
        verdict = (f"strongest on {strongest} ({format_score(metrics[strongest])}), "
                   f"weakest on {weakest} ({format_score(metrics[weakest])})")
    if is_self:
        commentary = f"Self-review: rates its own response {verdict}."
    else:
        commentary = f"{evaluator['name']} rates {target['name']} {verdict}."

    return {
        "evaluator_id": evaluator["id"],
        "target_id": target["id"],
        "metrics": metrics,
        "overall": weighted_overall(metrics),
        "commentary": commentary,
    }


def build_cross_evaluations(models: list[dict], prompt: str, mode: str, payload_seed: str) -> list[dict]:
    """All ordered (evaluator, target) pairs, self-reviews included, evaluator-major."""
    return [
        generate_cross_evaluation(evaluator, target, prompt, mode, payload_seed)
        for evaluator in models
        for target in models
    ]


def build_cross_matrix(evaluations: list[dict], model_ids: list[str]) -> dict:
    matrix = {row: {col: None for col in model_ids} for row in model_ids}
    for entry in evaluations:
        matrix.setdefault(entry["evaluator_id"], {})[entry["target_id"]] = entry
    return matrix


def compute_leaderboard(responses: list[dict], cross_evaluations: list[dict]) -> list[dict]:
    """
    Blend own response quality, peer average and self check into one ranking.

    Returns entries sorted by aggregate_score (desc), then cross_score (desc),
    then model_id. Peer average falls back to the own score when nobody else
    reviewed the model; a missing self check drops out of the blend.
    """
    received = {r["model_id"]: [] for r in responses}
    self_scores = {}
    for ev in cross_evaluations:
        target = ev["target_id"]
        if target not in received:
            continue
        if ev["evaluator_id"] == target:
            self_scores[target] = ev["overall"]
        else:
            received[target].append(ev["overall"])

    entries = []
    for response in responses:
        model_id = response["model_id"]
        own = response["overall_score"]
        cross = round(mean(received[model_id]), 2) if received[model_id] else own
        self_score = self_scores.get(model_id)

        parts = [("own", own), ("cross", cross)]
        if self_score is not None:
            parts.append(("self", self_score))
        total_weight = sum(LEADERBOARD_WEIGHTS[k] for k, _ in parts)
        aggregate = sum(LEADERBOARD_WEIGHTS[k] * v for k, v in parts) / total_weight

        entries.append({
            "model_id": model_id,
            "own_score": own,
            "cross_score": cross,
            "self_score": self_score,
            "aggregate_score": round(aggregate, 2),
        })

    entries.sort(key=lambda e: (-e["aggregate_score"], -e["cross_score"], e["model_id"]))
    return entries


def top_finalists(leaderboard: list[dict], n: int = TOP_N) -> list[str]:
    return [entry["model_id"] for entry in leaderboard[:n]]


def synthesise_verdict(models: list[dict], leaderboard: list[dict], top_three: list[str],
                       cross_evaluations: list[dict]) -> dict:
    """
    Re-score the finalists the way a dedicated arbiter model would.

    Each finalist's composite blends its leaderboard aggregate with the
    consensus of the other finalists' reviews, plus a small seeded jitter.
    Ties keep leaderboard order.
    """
    arbiter = get_arbiter_name()
    if not top_three:
        return {"arbiter": arbiter, "ordered_model_ids": [], "scores": {},
                "commentary": f"{arbiter} had no finalists to adjudicate."}

    names = {m["id"]: m["name"] for m in models}

    def name(model_id):
        return names.get(model_id) or format_model_name(model_id)

    by_id = {e["model_id"]: e for e in leaderboard}
    position = {model_id: i for i, model_id in enumerate(top_three)}
    finalists = set(top_three)
    signature = ",".join(f"{ev['overall']:.2f}" for ev in cross_evaluations)
    rng = seeded_rng("arbiter", *top_three, signature)

    scores = {}
    for model_id in top_three:
        aggregate = by_id[model_id]["aggregate_score"]
        received = [ev["overall"] for ev in cross_evaluations
                    if ev["target_id"] == model_id and ev["evaluator_id"] in finalists
                    and ev["evaluator_id"] != model_id]
        consensus = mean(received) if received else aggregate
        blended = ARBITER_BLEND["aggregate"] * aggregate + ARBITER_BLEND["consensus"] * consensus
        scores[model_id] = round(blended + rng.uniform(-ARBITER_JITTER, ARBITER_JITTER), 2)

    ordered = sorted(top_three, key=lambda m: (-scores[m], position[m]))
    winner = ordered[0]

    if len(ordered) > 1:
        runner_up = ordered[1]
        margin = scores[winner] - scores[runner_up]
        kind = "narrow" if margin < NARROW_MARGIN else "clear"
        commentary = (f"{arbiter} ranks {name(winner)} first with a composite of {scores[winner]:.2f}, "
                      f"a {kind} {margin:.2f} margin over {name(runner_up)}.")
    else:
        commentary = (f"{arbiter} ranks {name(winner)} first with a composite of {scores[winner]:.2f} "
                      f"as the sole finalist.")

    leader = leaderboard[0]["model_id"] if leaderboard else winner
    if leader == winner:
        commentary += " The verdict confirms the peer leaderboard leader."
    else:
        commentary += f" The verdict overturns the peer leaderboard, which favoured {name(leader)}."

    return {"arbiter": arbiter, "ordered_model_ids": ordered, "scores": scores, "commentary": commentary}


def summarise_alignment(verdict: dict | None, user_choice: str) -> dict:
    """Compare the user's pick with the arbiter ranking.

    delta is the pick's position in the arbiter ranking, or None when the
    pick did not make the shortlist.
    """
    ordered = verdict["ordered_model_ids"] if verdict else []
    if ordered and user_choice == ordered[0]:
        return {"alignment": "aligned", "delta": 0}
    if user_choice in ordered:
        return {"alignment": "partial", "delta": ordered.index(user_choice)}
    return {"alignment": "divergent", "delta": None}


def agreement_rate(history: list[dict]) -> float | None:
    if not history:
        return None
    return sum(1 for h in history if h["alignment"] == "aligned") / len(history)


def calculate_judge_generosity(evaluations: list[dict]) -> dict:
    """Average overall each evaluator gave to other models (self-reviews excluded)."""
    given = {}
    for ev in evaluations:
        if ev["evaluator_id"] == ev["target_id"]:
            continue
        given.setdefault(ev["evaluator_id"], []).append(ev["overall"])
    return {judge: mean(scores) for judge, scores in given.items()}


def calculate_self_bias(evaluations: list[dict]) -> dict:
    """Self-review minus peer average, per model. Positive = model flatters itself."""
    self_scores = {}
    peer_scores = {}
    for ev in evaluations:
        if ev["evaluator_id"] == ev["target_id"]:
            self_scores[ev["target_id"]] = ev["overall"]
        else:
            peer_scores.setdefault(ev["target_id"], []).append(ev["overall"])
    return {
        model_id: self_score - mean(peer_scores[model_id])
        for model_id, self_score in self_scores.items()
        if peer_scores.get(model_id)
    }


def _elo_expected_score(rating_a: float, rating_b: float) -> float:
    """Calculate expected score for player A given ratings."""
    return 1 / (1 + 10 ** ((rating_b - rating_a) / 400))


def _convert_to_pairwise_matches(evaluations: list[dict], model_ids: list[str]) -> list[tuple]:
    """
    Convert each evaluator's reviews into pairwise match results.

    For every evaluator, each pair of reviewed models (self excluded) becomes
    one match: higher overall wins, equal overall is a tie.

    Returns:
        List of (model_a, model_b, outcome_a, outcome_b) tuples
    """
    by_evaluator = {}
    for ev in evaluations:
        if ev["evaluator_id"] == ev["target_id"] or ev["target_id"] not in model_ids:
            continue
        by_evaluator.setdefault(ev["evaluator_id"], {})[ev["target_id"]] = ev["overall"]

    matches = []
    for scores in by_evaluator.values():
        scored_models = [m for m in model_ids if m in scores]
        for i, model_a in enumerate(scored_models):
            for model_b in scored_models[i + 1:]:
                score_a, score_b = scores[model_a], scores[model_b]
                if score_a > score_b:
                    outcome_a, outcome_b = 1.0, 0.0
                elif score_a < score_b:
                    outcome_a, outcome_b = 0.0, 1.0
                else:
                    outcome_a, outcome_b = 0.5, 0.5
                matches.append((model_a, model_b, outcome_a, outcome_b))
    return matches


def calculate_elo_ratings(
    evaluations: list[dict],
    model_ids: list[str],
    initial_rating: int = None,
    k_factor: int = None,
    seed: int = None
) -> dict:
    """
    Calculate Elo ratings from the pairwise view of the cross-evaluations.

    Args:
        evaluations: List of cross-evaluation dicts
        model_ids: Models to rate
        initial_rating: Starting Elo rating (defaults to ELO_INITIAL_RATING)
        k_factor: K-factor for rating updates (defaults to ELO_K_FACTOR)
        seed: Random seed for match processing order (defaults to 42)

    Returns:
        Dict with:
        - 'ratings': {model: final_elo_rating}
        - 'matches': {model: (wins, losses, ties)}
        - 'win_rates': {model: win_percentage}
        - 'total_matches': Total number of pairwise comparisons
    """
    if initial_rating is None:
        initial_rating = ELO_INITIAL_RATING
    if k_factor is None:
        k_factor = ELO_K_FACTOR

    ratings = {m: float(initial_rating) for m in model_ids}
    matches = {m: [0, 0, 0] for m in model_ids}  # [wins, losses, ties]

    pairwise_matches = _convert_to_pairwise_matches(evaluations, model_ids)

    # Shuffle so the result does not depend on evaluator order
    random.Random(seed if seed is not None else 42).shuffle(pairwise_matches)

    for model_a, model_b, outcome_a, outcome_b in pairwise_matches:
        expected_a = _elo_expected_score(ratings[model_a], ratings[model_b])
        expected_b = 1 - expected_a

        ratings[model_a] += k_factor * (outcome_a - expected_a)
        ratings[model_b] += k_factor * (outcome_b - expected_b)

        if outcome_a == 1.0:
            matches[model_a][0] += 1
            matches[model_b][1] += 1
        elif outcome_a == 0.0:
            matches[model_a][1] += 1
            matches[model_b][0] += 1
        else:
            matches[model_a][2] += 1
            matches[model_b][2] += 1

    win_rates = {}
    for m, (wins, losses, ties) in matches.items():
        total = wins + losses + ties
        win_rates[m] = (wins + 0.5 * ties) / total * 100 if total else 0.0

    return {
        "ratings": {m: int(round(r)) for m, r in ratings.items()},
        "matches": {m: tuple(v) for m, v in matches.items()},
        "win_rates": win_rates,
        "total_matches": len(pairwise_matches),
    }
