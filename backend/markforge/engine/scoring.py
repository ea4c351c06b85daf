"""Quality scorer — composite 0-100 score for a rendered design.

Five independent sub-scores, each in [0, 100]:

- path smoothness: curve commands vs straight-line commands
- visual balance: coordinate centroid vs canvas center
- complexity: command and <path> counts against optimal bands
- golden-ratio adherence: taper/scale/tension ratios vs phi
- uniqueness: penalties for default-looking parameters, bonuses for organic ones

The composite is the weighted sum, rounded half-up and clamped.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

import numpy as np

from markforge.engine.config import ScoringConfig
from markforge.engine.constants import MIN_QUALITY_SCORE
from markforge.engine.parameters import DerivedParameters
from markforge.utils.math_helpers import clamp, round_half_up

logger = logging.getLogger(__name__)

_BEZIER_RE = re.compile(r"[CQS]\s*[\d.-]", re.IGNORECASE)
_LINE_RE = re.compile(r"L\s*[\d.-]", re.IGNORECASE)
_COORD_PAIR_RE = re.compile(r"[\d.-]+[\s,]+[\d.-]+")
_COORD_SPLIT_RE = re.compile(r"[\s,]+")
_COMMAND_RE = re.compile(r"[MLCQSAZ]", re.IGNORECASE)
_PATH_TAG_RE = re.compile(r"<path", re.IGNORECASE)
_CURVE_CMD_RE = re.compile(r"[CQS]", re.IGNORECASE)

_DEFAULT_CONFIG = ScoringConfig()


@dataclass(frozen=True)
class QualityMetrics:
    score: int
    path_smoothness: int
    visual_balance: int
    complexity: int
    golden_ratio_adherence: int
    uniqueness: int

    def sub_scores(self) -> dict[str, int]:
        return {
            "path_smoothness": self.path_smoothness,
            "visual_balance": self.visual_balance,
            "complexity": self.complexity,
            "golden_ratio_adherence": self.golden_ratio_adherence,
            "uniqueness": self.uniqueness,
        }


@dataclass(frozen=True)
class RejectionReason:
    reason: str
    value: float
    threshold: float


def path_smoothness(artifact: str, config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    bezier_count = len(_BEZIER_RE.findall(artifact))
    line_count = len(_LINE_RE.findall(artifact))

    if bezier_count + line_count == 0:
        return config.smoothness_empty_score

    score = bezier_count / (bezier_count + line_count) * config.smoothness_ratio_weight

    lo, hi = config.curve_sweet_spot
    if lo <= bezier_count <= hi:
        score += config.curve_sweet_spot_bonus
    elif bezier_count > hi:
        score += config.curve_excess_bonus

    return min(100, round_half_up(score))


def extract_coordinates(artifact: str) -> np.ndarray:
    """All ``x y`` / ``x,y`` number pairs in the artifact as an Nx2 array."""
    coords: list[tuple[float, float]] = []
    for match in _COORD_PAIR_RE.finditer(artifact):
        parts = _COORD_SPLIT_RE.split(match.group(0))
        if len(parts) < 2:
            continue
        try:
            x, y = float(parts[0]), float(parts[1])
        except ValueError:
            continue
        if math.isfinite(x) and math.isfinite(y):
            coords.append((x, y))
    if not coords:
        return np.empty((0, 2))
    return np.array(coords, dtype=np.float64)


def visual_balance(artifact: str, config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    coords = extract_coordinates(artifact)
    if len(coords) < config.balance_min_coords:
        return config.balance_default_score

    cx, cy = float(np.mean(coords[:, 0])), float(np.mean(coords[:, 1]))
    center_x, center_y = config.canvas_center
    dist = math.hypot(cx - center_x, cy - center_y)

    score = max(0.0, 100 - (dist / config.balance_max_distance) * config.balance_distance_penalty)
    return round_half_up(score)


def complexity(artifact: str, config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    commands = len(_COMMAND_RE.findall(artifact))
    paths = len(_PATH_TAG_RE.findall(artifact))

    cmd_min, cmd_max = config.optimal_commands
    command_score = 100.0
    if commands < cmd_min:
        command_score = commands / cmd_min * 80
    elif commands > cmd_max:
        command_score = max(config.command_floor, 100 - (commands - cmd_max) / 50 * 30)

    path_min, path_max = config.optimal_paths
    path_score = 100.0
    if paths < path_min:
        path_score = config.path_floor
    elif paths > path_max:
        path_score = max(config.path_floor, 100 - (paths - path_max) / 10 * 20)

    return round_half_up((command_score + path_score) / 2)


def golden_ratio_adherence(params: DerivedParameters, config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    score = config.golden_base_score
    taper_t, scale_t, tension_t = config.golden_targets
    ratios = (
        params.taper_ratio / taper_t,
        params.scale_factor / scale_t,
        params.curve_tension / tension_t,
    )
    for ratio in ratios:
        deviation = abs(ratio - 1)
        if deviation < config.golden_close:
            score += 10
        elif deviation < config.golden_near:
            score += 5
    return min(100, score)


def uniqueness(params: DerivedParameters, config: ScoringConfig = _DEFAULT_CONFIG) -> int:
    score = config.uniqueness_base_score

    # Default-looking values
    if params.element_count == 8:
        score -= 5
    if abs(params.rotation_offset) < 5 or abs(params.rotation_offset - 360) < 5:
        score -= 5
    if 0.4 < params.curve_tension < 0.6:
        score -= 3

    if params.spiral_amount > 0.2:
        score += 5
    if params.organic_amount > 0.3:
        score += 5

    return int(clamp(score, config.uniqueness_floor, 100))


def score_artifact(
    artifact: str,
    params: DerivedParameters,
    config: ScoringConfig | None = None,
) -> QualityMetrics:
    """Score a rendered artifact against the parameters it was drawn from."""
    cfg = config or _DEFAULT_CONFIG
    w = cfg.weights

    smooth = path_smoothness(artifact, cfg)
    balance = visual_balance(artifact, cfg)
    cplx = complexity(artifact, cfg)
    golden = golden_ratio_adherence(params, cfg)
    unique = uniqueness(params, cfg)

    weighted = (
        smooth * w.path_smoothness
        + balance * w.visual_balance
        + cplx * w.complexity
        + golden * w.golden_ratio_adherence
        + unique * w.uniqueness
    )
    score = int(clamp(round_half_up(weighted), 0, 100))
    logger.debug(
        "Scored artifact: %d (smooth=%d balance=%d complexity=%d golden=%d unique=%d)",
        score, smooth, balance, cplx, golden, unique,
    )

    return QualityMetrics(
        score=score,
        path_smoothness=smooth,
        visual_balance=balance,
        complexity=cplx,
        golden_ratio_adherence=golden,
        uniqueness=unique,
    )


def meets_quality_threshold(metrics: QualityMetrics, min_score: int = MIN_QUALITY_SCORE) -> bool:
    return metrics.score >= min_score


def rejection_reasons(metrics: QualityMetrics, min_score: int = MIN_QUALITY_SCORE) -> list[RejectionReason]:
    """Everything about ``metrics`` that falls short of ``min_score``."""
    reasons: list[RejectionReason] = []
    if metrics.score < min_score:
        reasons.append(RejectionReason("score", metrics.score, min_score))
    for name, value in metrics.sub_scores().items():
        if value < min_score:
            reasons.append(RejectionReason(name, value, min_score))
    return reasons


def complexity_ratio(path_data: str) -> float:
    """Normalized complexity in [0, 1]: command volume plus a capped curve bonus."""
    total = len(_COMMAND_RE.findall(path_data))
    curves = len(_CURVE_CMD_RE.findall(path_data))
    return min(min(total / 50, 1.0) + min(curves / 20, 0.3), 1.0)
