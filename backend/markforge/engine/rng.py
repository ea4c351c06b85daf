"""Seeded PRNG — reproducible jitter for shape generators.

The seed string is folded into four 32-bit words, then advanced with a
xoshiro128** step per draw. Arithmetic is modulo 2**32 throughout, and the
seed is read as UTF-16 code units so the same seed string produces the same
stream in every implementation of this engine.
"""

from __future__ import annotations

import math
from typing import Callable

from markforge.utils.math_helpers import MASK32, imul32, lerp, rotl32

Point = tuple[float, float]
Rng = Callable[[], float]

_TWO_32 = 4294967296.0


def _code_units(seed: str) -> list[int]:
    raw = seed.encode("utf-16-le", errors="surrogatepass")
    return [raw[i] | (raw[i + 1] << 8) for i in range(0, len(raw), 2)]


def seed_words(seed: str) -> tuple[int, int, int, int]:
    """Fold ``seed`` into the four initial state words."""
    h1 = 0x811C9DC5
    h2 = 0x01000193
    h3 = 0xDEADBEEF
    h4 = 0xCAFEBABE

    for c in _code_units(seed):
        h1 = imul32(h1 ^ c, 0x01000193)
        h2 = imul32(h2 ^ c, 0x5BD1E995)
        h3 = imul32(h3 ^ c, 0x1B873593)
        h4 = imul32(h4 ^ c, 0xCC9E2D51)

    h1 ^= h1 >> 16
    h1 = imul32(h1, 0x85EBCA6B)
    h2 ^= h2 >> 13
    h2 = imul32(h2, 0xC2B2AE35)
    h3 ^= h3 >> 16
    h4 ^= h4 >> 13

    return h1, h2, h3, h4


class SeededRandom:
    """Callable float stream in [0, 1)."""

    __slots__ = ("_s0", "_s1", "_s2", "_s3")

    def __init__(self, seed: str) -> None:
        self._s0, self._s1, self._s2, self._s3 = seed_words(seed)

    def next_uint32(self) -> int:
        s0, s1, s2, s3 = self._s0, self._s1, self._s2, self._s3
        result = (rotl32(s1 * 5, 7) * 9) & MASK32
        t = (s1 << 9) & MASK32

        s2 ^= s0
        s3 ^= s1
        s1 ^= s2
        s0 ^= s3
        s2 ^= t
        s3 = rotl32(s3, 11)

        self._s0, self._s1, self._s2, self._s3 = s0, s1, s2, s3
        return result

    def __call__(self) -> float:
        return self.next_uint32() / _TWO_32


def create_rng(seed: str) -> Rng:
    """Deterministic ``() -> float`` stream for ``seed``."""
    return SeededRandom(seed)


# --- Noise & variation ---


def _grid_gradient(ix: int, iy: int, x: float, y: float, seed: str) -> float:
    angle = create_rng(f"{seed}-grad-{ix}-{iy}")() * math.pi * 2
    return (x - ix) * math.cos(angle) + (y - iy) * math.sin(angle)


def noise_2d(x: float, y: float, seed: str) -> float:
    """Gradient noise at (x, y), roughly in [-1, 1]."""
    x0 = math.floor(x)
    y0 = math.floor(y)
    fx = x - x0
    fy = y - y0

    sx = fx * fx * (3 - 2 * fx)
    sy = fy * fy * (3 - 2 * fy)

    n00 = _grid_gradient(x0, y0, x, y, seed)
    n10 = _grid_gradient(x0 + 1, y0, x, y, seed)
    n01 = _grid_gradient(x0, y0 + 1, x, y, seed)
    n11 = _grid_gradient(x0 + 1, y0 + 1, x, y, seed)

    return lerp(lerp(n00, n10, sx), lerp(n01, n11, sx), sy)


def fbm(x: float, y: float, seed: str, octaves: int = 4) -> float:
    """Fractal Brownian motion: normalized sum of ``octaves`` noise layers."""
    value = 0.0
    amplitude = 0.5
    frequency = 1.0
    max_value = 0.0

    for i in range(octaves):
        value += amplitude * noise_2d(x * frequency, y * frequency, f"{seed}-oct{i}")
        max_value += amplitude
        amplitude *= 0.5
        frequency *= 2

    if max_value == 0:
        return 0.0
    return value / max_value


def add_noise(value: float, noise_amount: float, rng: Rng, range_: float = 1.0) -> float:
    if noise_amount <= 0:
        return value
    return value + (rng() - 0.5) * 2 * range_ * noise_amount


def jitter_point(point: Point, amount: float, rng: Rng) -> Point:
    x, y = point
    return (
        x + (rng() - 0.5) * 2 * amount,
        y + (rng() - 0.5) * 2 * amount,
    )
