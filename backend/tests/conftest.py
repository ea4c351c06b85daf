"""Shared test fixtures."""

from __future__ import annotations

import itertools

import pytest

from markforge.engine.parameters import DerivedParameters, derive_parameters
from markforge.engine.registry import DedupRegistry
from markforge.engine.rng import Rng
from markforge.storage import MemoryKeyValueStore
from markforge.svg.primitives import bezier_circle
from markforge.svg.serializer import serialize_svg

# Known SHA-256 vectors (FIPS 180-2 appendix B)
EMPTY_DIGEST = "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
ABC_DIGEST = "ba7816bf8f01cfea414140de5dae2223b00361a396177a9cb410ff61f20015ad"
TWO_BLOCK_MESSAGE = "abcdbcdecdefdefgefghfghighijhijkijkljklmklmnlmnomnopnopq"
TWO_BLOCK_DIGEST = "248d6a61d20638b8e5c026930c3e6039a33ce45964ff2167f6ecedd419db06c1"

ZERO_DIGEST = "0" * 64
MAX_DIGEST = "f" * 64

# Conformance fixture input
ACME_NAME = "Acme"
ACME_CATEGORY = "technology"
ACME_TIMESTAMP = 1700000000000
ACME_SALT = "abc123"
ACME_MESSAGE = "acme|technology|1700000000000|abc123"
ACME_DIGEST = "8440d84b0bb21c00956bb1b1d9abb315b4572f6849fd831acc510d4d359c1f35"

# A single bezier circle path, centered a little above canvas center
CIRCLE_PATH_SVG = f'<path d="{bezier_circle(50, 50, 30)}"/>'

STRAIGHT_LINES_SVG = '<path d="M 10 10 L 90 10 L 90 90 L 10 90 Z"/>'

RING_LOGO_SVG = serialize_svg(
    [
        {"d": bezier_circle(50, 50, 40), "fill": "none", "stroke": "#111"},
        {"d": bezier_circle(50, 50, 25), "fill": "none", "stroke": "#111"},
        {"d": bezier_circle(50, 50, 10), "fill": "#111"},
    ]
)


def ring_renderer(params: DerivedParameters, rng: Rng) -> str:
    """Concentric rings, one per layer, with seeded radius jitter."""
    elements = []
    for i in range(params.layer_count):
        r = 8 + i * 7 + rng() * 2
        elements.append({"d": bezier_circle(50, 50, round(r, 2)), "fill": "none"})
    return serialize_svg(elements)


@pytest.fixture
def zero_params() -> DerivedParameters:
    return derive_parameters(ZERO_DIGEST)


@pytest.fixture
def max_params() -> DerivedParameters:
    return derive_parameters(MAX_DIGEST)


@pytest.fixture
def memory_store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def registry(memory_store: MemoryKeyValueStore) -> DedupRegistry:
    return DedupRegistry(store=memory_store, capacity=1000)


@pytest.fixture
def fake_clock():
    """Millisecond clock that ticks by one on every call."""
    counter = itertools.count(ACME_TIMESTAMP)
    return lambda: next(counter)
