"""Tests for the quality scorer."""

from __future__ import annotations

import dataclasses
import random

import pytest

from markforge.engine.config import ScoringConfig, ScoringWeights
from markforge.engine.parameters import derive_parameters
from markforge.engine.scoring import (
    QualityMetrics,
    complexity,
    complexity_ratio,
    extract_coordinates,
    golden_ratio_adherence,
    meets_quality_threshold,
    path_smoothness,
    rejection_reasons,
    score_artifact,
    uniqueness,
    visual_balance,
)
from markforge.svg.primitives import bezier_circle
from tests.conftest import CIRCLE_PATH_SVG, RING_LOGO_SVG, STRAIGHT_LINES_SVG


# --- Path smoothness ---


def test_smoothness_empty_artifact():
    assert path_smoothness("") == 50
    assert path_smoothness("<svg></svg>") == 50


def test_smoothness_all_curves_in_sweet_spot():
    assert path_smoothness(bezier_circle(50, 50, 30)) == 100


def test_smoothness_all_lines():
    assert path_smoothness(STRAIGHT_LINES_SVG) == 0


def test_smoothness_mixed_below_sweet_spot():
    assert path_smoothness("M 0 0 C 1 1 2 2 3 3 L 4 4 C 5 5 6 6 7 7 L 8 8") == 40


def test_smoothness_excess_curves():
    assert path_smoothness("M 0 0 " + "C 1 1 " * 60) == 90


# --- Visual balance ---


def test_balance_too_few_coordinates():
    assert visual_balance("M 10 10") == 70


def test_balance_centered():
    assert visual_balance(STRAIGHT_LINES_SVG) == 100


def test_balance_at_max_distance():
    assert visual_balance("M 85 50 L 85 50 L 85 50") == 50


def test_balance_far_corner_floors_at_zero():
    assert visual_balance("M 0 0 L 0 0 L 0 0") == 0


def test_balance_circle_pulled_up_by_move_point():
    # 12 symmetric curve points plus the extra M 50 20
    assert visual_balance(CIRCLE_PATH_SVG) == 97


def test_extract_coordinates_accepts_commas_and_spaces():
    coords = extract_coordinates("M 1,2 L 3 4 L -5.5, 6")
    assert coords.shape == (3, 2)
    assert coords.tolist() == [[1.0, 2.0], [3.0, 4.0], [-5.5, 6.0]]
    assert extract_coordinates("no numbers").shape == (0, 2)


def test_extract_coordinates_skips_unparseable_pairs():
    coords = extract_coordinates("M 1 2 L .-. 4 L 5 6")
    assert [5.0, 6.0] in coords.tolist()
    assert all(len(pair) == 2 for pair in coords.tolist())


# --- Complexity ---


def test_complexity_empty():
    assert complexity("") == 30


def test_complexity_optimal():
    artifact = '<path d="M 1 1' + " L 2 2" * 8 + ' Z"/>'
    assert complexity(artifact) == 100


def test_complexity_too_few_commands():
    assert complexity("M 1 1 L 2 2 L 3 3 L 4 4 Z") == 50


def test_complexity_too_many_commands():
    assert complexity("L 1 1 " * 200) == 55


def test_complexity_too_many_paths():
    assert complexity('<path d="M 1 1 Z"/>' * 30) == 90


# --- Parameter-based sub-scores ---


def test_golden_ratio_exact(zero_params):
    golden = dataclasses.replace(zero_params, taper_ratio=0.618, scale_factor=1.618, curve_tension=0.618)
    assert golden_ratio_adherence(golden) == 100


def test_golden_ratio_near_and_far(zero_params):
    assert golden_ratio_adherence(zero_params) == 70
    near = dataclasses.replace(zero_params, taper_ratio=0.7416)
    assert golden_ratio_adherence(near) == 75


def test_golden_ratio_max_params(max_params):
    assert golden_ratio_adherence(max_params) == 80


def test_uniqueness_penalties(zero_params):
    assert uniqueness(zero_params) == 75
    plain = dataclasses.replace(zero_params, element_count=8, rotation_offset=358.0, curve_tension=0.5)
    assert uniqueness(plain) == 67


def test_uniqueness_bonuses(zero_params):
    organic = dataclasses.replace(
        zero_params, rotation_offset=180.0, spiral_amount=0.3, organic_amount=0.5
    )
    assert uniqueness(organic) == 90


def test_uniqueness_floor(zero_params):
    config = ScoringConfig(uniqueness_base_score=40)
    assert uniqueness(zero_params, config) == 60


# --- Composite ---


def test_score_artifact_circle(zero_params):
    metrics = score_artifact(CIRCLE_PATH_SVG, zero_params)
    assert metrics == QualityMetrics(
        score=85,
        path_smoothness=100,
        visual_balance=97,
        complexity=78,
        golden_ratio_adherence=70,
        uniqueness=75,
    )
    assert meets_quality_threshold(metrics)
    assert not meets_quality_threshold(metrics, 86)


def test_score_is_weighted_sum(zero_params):
    weights = ScoringWeights(
        path_smoothness=1.0,
        visual_balance=0.0,
        complexity=0.0,
        golden_ratio_adherence=0.0,
        uniqueness=0.0,
    )
    metrics = score_artifact(STRAIGHT_LINES_SVG, zero_params, ScoringConfig(weights=weights))
    assert metrics.score == metrics.path_smoothness == 0


def test_score_bounded_for_arbitrary_input():
    gen = random.Random(7)
    alphabet = "MLCQSAZmlcqsaz0123456789 ,.-<path>"
    for _ in range(500):
        artifact = "".join(gen.choice(alphabet) for _ in range(gen.randint(0, 400)))
        params = derive_parameters(f"{gen.getrandbits(256):064x}")
        metrics = score_artifact(artifact, params)
        assert isinstance(metrics.score, int)
        assert 0 <= metrics.score <= 100
        for value in metrics.sub_scores().values():
            assert 0 <= value <= 100


def test_score_is_pure(zero_params):
    assert score_artifact(RING_LOGO_SVG, zero_params) == score_artifact(RING_LOGO_SVG, zero_params)


def test_rejection_reasons(zero_params):
    metrics = score_artifact(CIRCLE_PATH_SVG, zero_params)
    reasons = rejection_reasons(metrics, 90)
    assert [r.reason for r in reasons] == ["score", "complexity", "golden_ratio_adherence", "uniqueness"]
    assert reasons[0].value == 85
    assert reasons[0].threshold == 90
    assert rejection_reasons(metrics, 50) == []


def test_complexity_ratio():
    assert complexity_ratio("") == 0.0
    assert complexity_ratio(bezier_circle(50, 50, 30)) == pytest.approx(6 / 50 + 4 / 20)
    assert complexity_ratio("C 1 1 " * 100) == 1.0
