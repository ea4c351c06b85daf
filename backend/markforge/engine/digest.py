"""Digest function — SHA-256 over ``name|category|timestamp|salt``.

Two interchangeable backends produce byte-identical hex digests:

- ``HashlibBackend`` wraps the platform primitive (``hashlib.sha256``).
- ``PureSha256Backend`` is a pure-Python FIPS 180-4 implementation for hosts
  where the platform primitive is missing or disallowed.

The host picks a backend once (``select_backend``) and hands it to a
``Digester``. Nothing in here inspects the environment at call time.
"""

from __future__ import annotations

import asyncio
import hashlib
import logging
import re
import secrets
import struct
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol

from markforge.models.enums import LogoCategory, category_value
from markforge.utils.math_helpers import MASK32

logger = logging.getLogger(__name__)

DIGEST_HEX_LENGTH = 64
_DIGEST_RE = re.compile(r"[0-9a-f]{64}")

_K = (
    0x428A2F98, 0x71374491, 0xB5C0FBCF, 0xE9B5DBA5, 0x3956C25B, 0x59F111F1, 0x923F82A4, 0xAB1C5ED5,
    0xD807AA98, 0x12835B01, 0x243185BE, 0x550C7DC3, 0x72BE5D74, 0x80DEB1FE, 0x9BDC06A7, 0xC19BF174,
    0xE49B69C1, 0xEFBE4786, 0x0FC19DC6, 0x240CA1CC, 0x2DE92C6F, 0x4A7484AA, 0x5CB0A9DC, 0x76F988DA,
    0x983E5152, 0xA831C66D, 0xB00327C8, 0xBF597FC7, 0xC6E00BF3, 0xD5A79147, 0x06CA6351, 0x14292967,
    0x27B70A85, 0x2E1B2138, 0x4D2C6DFC, 0x53380D13, 0x650A7354, 0x766A0ABB, 0x81C2C92E, 0x92722C85,
    0xA2BFE8A1, 0xA81A664B, 0xC24B8B70, 0xC76C51A3, 0xD192E819, 0xD6990624, 0xF40E3585, 0x106AA070,
    0x19A4C116, 0x1E376C08, 0x2748774C, 0x34B0BCB5, 0x391C0CB3, 0x4ED8AA4A, 0x5B9CCA4F, 0x682E6FF3,
    0x748F82EE, 0x78A5636F, 0x84C87814, 0x8CC70208, 0x90BEFFFA, 0xA4506CEB, 0xBEF9A3F7, 0xC67178F2,
)

_H0 = (0x6A09E667, 0xBB67AE85, 0x3C6EF372, 0xA54FF53A, 0x510E527F, 0x9B05688C, 0x1F83D9AB, 0x5BE0CD19)


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (32 - n))) & MASK32


def _pad(data: bytes) -> bytes:
    bit_len = (len(data) * 8) & 0xFFFFFFFFFFFFFFFF
    padded = data + b"\x80"
    padded += b"\x00" * ((56 - len(padded) % 64) % 64)
    return padded + struct.pack(">Q", bit_len)


def _compress(state: list[int], block: bytes) -> None:
    w = list(struct.unpack(">16I", block)) + [0] * 48
    for j in range(16, 64):
        s0 = _rotr(w[j - 15], 7) ^ _rotr(w[j - 15], 18) ^ (w[j - 15] >> 3)
        s1 = _rotr(w[j - 2], 17) ^ _rotr(w[j - 2], 19) ^ (w[j - 2] >> 10)
        w[j] = (w[j - 16] + s0 + w[j - 7] + s1) & MASK32

    a, b, c, d, e, f, g, h = state
    for j in range(64):
        s1 = _rotr(e, 6) ^ _rotr(e, 11) ^ _rotr(e, 25)
        ch = (e & f) ^ (~e & g)
        t1 = (h + s1 + ch + _K[j] + w[j]) & MASK32
        s0 = _rotr(a, 2) ^ _rotr(a, 13) ^ _rotr(a, 22)
        maj = (a & b) ^ (a & c) ^ (b & c)
        t2 = (s0 + maj) & MASK32
        h, g, f, e = g, f, e, (d + t1) & MASK32
        d, c, b, a = c, b, a, (t1 + t2) & MASK32

    for i, v in enumerate((a, b, c, d, e, f, g, h)):
        state[i] = (state[i] + v) & MASK32


def sha256_pure(data: bytes) -> str:
    """SHA-256 hex digest computed without hashlib."""
    state = list(_H0)
    padded = _pad(data)
    for offset in range(0, len(padded), 64):
        _compress(state, padded[offset:offset + 64])
    return "".join(f"{v:08x}" for v in state)


class DigestBackend(Protocol):
    name: str
    is_platform: bool

    def hexdigest(self, data: bytes) -> str: ...


class HashlibBackend:
    name = "platform"
    is_platform = True

    def hexdigest(self, data: bytes) -> str:
        return hashlib.sha256(data).hexdigest()


class PureSha256Backend:
    name = "pure"
    is_platform = False

    def hexdigest(self, data: bytes) -> str:
        return sha256_pure(data)


def select_backend(prefer_platform: bool = True) -> DigestBackend:
    """Pick the digest backend once, at host setup time."""
    if prefer_platform and "sha256" in hashlib.algorithms_available:
        return HashlibBackend()
    logger.debug("Using pure-Python SHA-256 backend")
    return PureSha256Backend()


class Digester:
    """Digests strings with an explicitly chosen backend."""

    def __init__(self, backend: DigestBackend | None = None) -> None:
        self.backend = backend or select_backend()

    def digest_sync(self, message: str) -> str:
        return self.backend.hexdigest(message.encode("utf-8"))

    async def digest(self, message: str) -> str:
        data = message.encode("utf-8")
        if self.backend.is_platform:
            return await asyncio.to_thread(self.backend.hexdigest, data)
        return self.backend.hexdigest(data)

    def digest_input(self, hash_input: HashInput) -> str:
        return self.digest_sync(hash_input.message)


_PURE = PureSha256Backend()


async def digest(message: str, backend: DigestBackend | None = None) -> str:
    """Asynchronous digest through ``backend`` (platform primitive by default)."""
    return await Digester(backend).digest(message)


def digest_sync(message: str) -> str:
    """Synchronous digest through the pure-Python fallback."""
    return _PURE.hexdigest(message.encode("utf-8"))


def generate_salt() -> str:
    """Fresh 128-bit random salt as 32 lowercase hex chars."""
    return secrets.token_hex(16)


def now_ms() -> int:
    return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class HashInput:
    """Everything that feeds one generation attempt's digest.

    ``name`` is stored lower-cased and trimmed, ``category`` as its plain value.
    """

    name: str
    category: str
    timestamp: int
    salt: str = field(default_factory=generate_salt)

    def __post_init__(self) -> None:
        object.__setattr__(self, "name", self.name.lower().strip())
        object.__setattr__(self, "category", category_value(self.category))

    @property
    def message(self) -> str:
        return f"{self.name}|{self.category}|{self.timestamp}|{self.salt}"


def generate_hash_input(
    name: str,
    category: LogoCategory | str,
    existing_salt: str | None = None,
    *,
    clock: Callable[[], int] | None = None,
) -> HashInput:
    """Build a HashInput for ``name``; reuse ``existing_salt`` to regenerate."""
    timestamp = (clock or now_ms)()
    return HashInput(
        name=name,
        category=category,
        timestamp=int(timestamp),
        salt=existing_salt or generate_salt(),
    )


def hash_input_digest(hash_input: HashInput, backend: DigestBackend | None = None) -> str:
    """Synchronous digest of a HashInput's serialized message."""
    return Digester(backend or _PURE).digest_input(hash_input)


def is_digest(value: str) -> bool:
    return _DIGEST_RE.fullmatch(value) is not None
