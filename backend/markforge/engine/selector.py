"""Candidate selector — bounded best-of-N search over generation attempts.

One attempt = fresh HashInput -> digest -> parameters -> render -> score.
``select_best`` folds attempts into an immutable ``SelectionResult``, keeping
the highest score seen and stopping as soon as a candidate reaches the
quality threshold. Attempts run strictly in sequence.

The renderer is supplied by the caller. Its exceptions are not caught here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable

from markforge.engine.config import ScoringConfig
from markforge.engine.constants import CANDIDATES_PER_GENERATION, MIN_QUALITY_SCORE
from markforge.engine.digest import Digester, HashInput, generate_hash_input, now_ms
from markforge.engine.parameters import DerivedParameters, derive_parameters
from markforge.engine.registry import DedupRegistry
from markforge.engine.rng import Rng, create_rng
from markforge.engine.scoring import (
    QualityMetrics,
    meets_quality_threshold,
    rejection_reasons,
    score_artifact,
)
from markforge.models.enums import LogoCategory
from markforge.models.records import HashRecord

logger = logging.getLogger(__name__)

RenderFn = Callable[[DerivedParameters, Rng], str]


@dataclass(frozen=True)
class Candidate:
    """One full generation attempt."""

    hash_input: HashInput
    digest: str
    params: DerivedParameters
    artifact: str
    quality: QualityMetrics

    @property
    def score(self) -> int:
        return self.quality.score


AttemptFn = Callable[[int], Candidate]


@dataclass(frozen=True)
class SelectionResult:
    best: Candidate
    score: int
    attempts_used: int


def _fold(result: SelectionResult, candidate: Candidate, attempts: int) -> SelectionResult:
    score = candidate.quality.score
    if score > result.score:
        return SelectionResult(best=candidate, score=score, attempts_used=attempts)
    return replace(result, attempts_used=attempts)


def select_best(
    attempt_fn: AttemptFn,
    max_attempts: int = CANDIDATES_PER_GENERATION,
    quality_threshold: int = MIN_QUALITY_SCORE,
) -> SelectionResult:
    """Run up to ``max_attempts`` attempts and return the best one.

    Stops early the first time a candidate scores ``>= quality_threshold``.
    Ties keep the earlier candidate, so more attempts never lower the result.
    """
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be >= 1, got {max_attempts}")

    first = attempt_fn(0)
    result = SelectionResult(best=first, score=first.quality.score, attempts_used=1)
    index = 1
    while result.score < quality_threshold and index < max_attempts:
        result = _fold(result, attempt_fn(index), index + 1)
        index += 1

    if result.score >= quality_threshold:
        logger.debug("Attempt %d reached threshold %d", result.attempts_used, quality_threshold)
    logger.info(
        "Selected candidate with score %d after %d/%d attempts",
        result.score,
        result.attempts_used,
        max_attempts,
    )
    return result


def make_attempt_fn(
    name: str,
    category: LogoCategory | str,
    render_fn: RenderFn,
    *,
    digester: Digester | None = None,
    clock: Callable[[], int] | None = None,
    config: ScoringConfig | None = None,
) -> AttemptFn:
    """Build the per-attempt pipeline for one brand.

    Every call draws a fresh salt, so no two attempts share a digest. The
    renderer gets the derived parameters plus a PRNG seeded with the digest.
    """
    digester = digester or Digester()

    def attempt(index: int) -> Candidate:
        hash_input = generate_hash_input(name, category, clock=clock)
        digest = digester.digest_input(hash_input)
        params = derive_parameters(digest)
        artifact = render_fn(params, create_rng(digest))
        quality = score_artifact(artifact, params, config)
        logger.debug("Attempt %d for %r: digest %s score %d", index + 1, hash_input.name, digest[:12], quality.score)
        return Candidate(
            hash_input=hash_input,
            digest=digest,
            params=params,
            artifact=artifact,
            quality=quality,
        )

    return attempt


def record_candidates(
    registry: DedupRegistry,
    candidates: list[Candidate],
    algorithm_id: str,
    *,
    clock: Callable[[], int] | None = None,
) -> None:
    """Record each candidate as a HashRecord; the list index is the variant index."""
    for variant_index, candidate in enumerate(candidates):
        if registry.has(candidate.digest):
            logger.warning("Digest %s already registered; not recording again", candidate.digest[:12])
            continue
        registry.record(
            HashRecord(
                digest=candidate.digest,
                brand_name=candidate.hash_input.name,
                algorithm_id=algorithm_id,
                variant_index=variant_index,
                created_at=(clock or now_ms)(),
                quality_score=candidate.quality.score,
            )
        )


def generate_variations(
    name: str,
    category: LogoCategory | str,
    render_fn: RenderFn,
    algorithm_id: str,
    variations: int | None = None,
    max_attempts: int | None = None,
    quality_threshold: int | None = None,
    registry: DedupRegistry | None = None,
    *,
    digester: Digester | None = None,
    clock: Callable[[], int] | None = None,
    config: ScoringConfig | None = None,
) -> list[Candidate]:
    """One ``select_best`` search per variation, winners recorded in ``registry``.

    Unset counts and the threshold come from ``settings``.
    """
    from markforge.config import settings

    variations = settings.variations if variations is None else variations
    max_attempts = settings.max_attempts if max_attempts is None else max_attempts
    if quality_threshold is None:
        quality_threshold = settings.quality_threshold

    attempt_fn = make_attempt_fn(name, category, render_fn, digester=digester, clock=clock, config=config)

    winners = [select_best(attempt_fn, max_attempts, quality_threshold).best for _ in range(variations)]

    if registry is not None:
        record_candidates(registry, winners, algorithm_id, clock=clock)
    return winners


def select_top(
    attempt_fn: AttemptFn,
    candidates: int,
    quality_threshold: int = MIN_QUALITY_SCORE,
    top_k: int = 5,
) -> list[Candidate]:
    """Generate ``candidates`` attempts and keep the ``top_k`` best.

    Candidates meeting the threshold come first, by descending score. If
    fewer than ``top_k`` pass, the best rejected ones fill the remaining slots.
    """
    passed: list[Candidate] = []
    rejected: list[Candidate] = []

    for index in range(candidates):
        candidate = attempt_fn(index)
        if meets_quality_threshold(candidate.quality, quality_threshold):
            passed.append(candidate)
        else:
            rejected.append(candidate)

    for candidate in rejected:
        reasons = ", ".join(
            f"{r.reason}={r.value:g} (<{r.threshold:g})"
            for r in rejection_reasons(candidate.quality, quality_threshold)
        )
        logger.debug("Rejected %s: %s", candidate.digest[:12], reasons)

    passed.sort(key=lambda c: c.quality.score, reverse=True)
    top = passed[:top_k]

    if len(top) < top_k and rejected:
        rejected.sort(key=lambda c: c.quality.score, reverse=True)
        top.extend(rejected[: top_k - len(top)])
        logger.info("Only %d candidates passed %d; back-filled with rejected ones", len(passed), quality_threshold)

    return top
