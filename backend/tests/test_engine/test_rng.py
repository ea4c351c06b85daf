"""Tests for the seeded PRNG and noise helpers."""

from __future__ import annotations

import math

from markforge.engine.rng import (
    SeededRandom,
    _code_units,
    add_noise,
    create_rng,
    fbm,
    jitter_point,
    noise_2d,
    seed_words,
)
from tests.conftest import ABC_DIGEST


def test_same_seed_same_stream():
    a = create_rng(ABC_DIGEST)
    b = create_rng(ABC_DIGEST)
    assert [a() for _ in range(200)] == [b() for _ in range(200)]


def test_different_seeds_diverge():
    a = create_rng("seed-a")
    b = create_rng("seed-b")
    assert [a() for _ in range(20)] != [b() for _ in range(20)]


def test_values_in_unit_interval():
    rng = create_rng("range")
    values = [rng() for _ in range(10_000)]
    assert all(0.0 <= v < 1.0 for v in values)
    # Not degenerate
    assert 0.4 < sum(values) / len(values) < 0.6


def test_uint32_output():
    rng = SeededRandom("words")
    for _ in range(1000):
        v = rng.next_uint32()
        assert 0 <= v <= 0xFFFFFFFF


def test_empty_seed_words():
    """With no input the last two words are only the final xor-shift."""
    _, _, h3, h4 = seed_words("")
    assert h3 == 0xDEAD6042
    assert h4 == 0xCAF8ED4B


def test_seed_reads_utf16_code_units():
    assert _code_units("abc") == [0x61, 0x62, 0x63]
    assert _code_units("🙂") == [0xD83D, 0xDE42]


def test_noise_is_zero_on_grid_points():
    for x, y in [(0, 0), (3, 4), (-2, 7)]:
        assert noise_2d(float(x), float(y), "grid") == 0.0


def test_noise_deterministic_and_bounded():
    for i in range(50):
        x, y = i * 0.37, i * 0.91
        v = noise_2d(x, y, "n")
        assert v == noise_2d(x, y, "n")
        assert abs(v) <= math.sqrt(2)


def test_fbm_bounded():
    for i in range(50):
        v = fbm(i * 0.13, i * 0.29, "f")
        assert abs(v) <= math.sqrt(2)
    assert fbm(1.5, 2.5, "f", octaves=0) == 0.0


def test_add_noise():
    rng = create_rng("noise")
    assert add_noise(10.0, 0, rng) == 10.0
    for _ in range(200):
        v = add_noise(10.0, 0.5, rng, range_=4.0)
        assert 8.0 <= v <= 12.0


def test_jitter_point_within_amount():
    rng = create_rng("jitter")
    for _ in range(200):
        x, y = jitter_point((50.0, 50.0), 3.0, rng)
        assert abs(x - 50.0) <= 3.0
        assert abs(y - 50.0) <= 3.0


def test_empty_seed_stream_is_pinned():
    """First draws for the empty seed, shared with every other implementation."""
    rng = create_rng("")
    assert [rng(), rng(), rng()] == [0.8385355155915022, 0.3088745647110045, 0.6441239162813872]
