"""Markforge parametric generation engine."""

from markforge.engine.digest import (
    Digester,
    HashInput,
    digest,
    digest_sync,
    generate_hash_input,
    select_backend,
)
from markforge.engine.rng import create_rng
from markforge.engine.parameters import DerivedParameters, derive_parameters
from markforge.engine.scoring import QualityMetrics, score_artifact
from markforge.engine.selector import Candidate, SelectionResult, select_best
from markforge.engine.registry import DedupRegistry

__all__ = [
    "Digester",
    "HashInput",
    "digest",
    "digest_sync",
    "generate_hash_input",
    "select_backend",
    "create_rng",
    "DerivedParameters",
    "derive_parameters",
    "QualityMetrics",
    "score_artifact",
    "Candidate",
    "SelectionResult",
    "select_best",
    "DedupRegistry",
]
