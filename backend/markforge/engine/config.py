"""Scoring configuration — weights and bands for the quality scorer."""

from __future__ import annotations

from dataclasses import dataclass, field

from markforge.engine.constants import CANVAS_SIZE


@dataclass(frozen=True)
class ScoringWeights:
    path_smoothness: float = 0.20
    visual_balance: float = 0.25
    complexity: float = 0.20
    golden_ratio_adherence: float = 0.15
    uniqueness: float = 0.20


@dataclass
class ScoringConfig:
    """Bands and defaults for the five sub-scorers."""

    weights: ScoringWeights = field(default_factory=ScoringWeights)

    # Path smoothness
    smoothness_empty_score: int = 50  # no drawing commands at all
    smoothness_ratio_weight: float = 80.0
    curve_sweet_spot: tuple[int, int] = (4, 50)
    curve_sweet_spot_bonus: float = 20.0
    curve_excess_bonus: float = 10.0

    # Visual balance
    canvas_size: float = CANVAS_SIZE
    balance_min_coords: int = 3
    balance_default_score: int = 70  # too few coordinates to judge
    balance_max_distance: float = 35.0
    balance_distance_penalty: float = 50.0

    # Complexity
    optimal_commands: tuple[int, int] = (10, 100)
    optimal_paths: tuple[int, int] = (1, 20)
    command_floor: float = 50.0
    path_floor: float = 60.0

    # Golden ratio
    golden_base_score: int = 70
    golden_close: float = 0.1
    golden_near: float = 0.3
    # taper, scale, tension; phi and 1/phi to three places
    golden_targets: tuple[float, float, float] = (0.618, 1.618, 0.618)

    # Uniqueness
    uniqueness_base_score: int = 80
    uniqueness_floor: int = 60

    @property
    def canvas_center(self) -> tuple[float, float]:
        return (self.canvas_size / 2, self.canvas_size / 2)
