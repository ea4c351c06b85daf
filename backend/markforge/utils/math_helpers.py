"""Math helpers — rounding, interpolation, 32-bit arithmetic. No engine imports."""

from __future__ import annotations

import math

MASK32 = 0xFFFFFFFF


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves toward +inf.

    Python's round() is banker's rounding; 2.5 -> 2. Derived parameters and
    scores must round 2.5 -> 3 to stay reproducible across implementations.
    """
    return int(math.floor(value + 0.5))


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def imul32(a: int, b: int) -> int:
    """32-bit wrapping multiply, result as unsigned."""
    return (a * b) & MASK32


def rotl32(x: int, k: int) -> int:
    x &= MASK32
    return ((x << k) | (x >> (32 - k))) & MASK32
