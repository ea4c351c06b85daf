"""Parameter derivation — slice a digest's bits into named design knobs.

Each entry in ``FIELD_TABLE`` reads ``ceil(bits/4) + 1`` hex chars starting at
``floor(offset/4)``, keeps the low ``bits`` bits, normalizes to [0, 1] and maps
linearly into its output range. The derivation is a pure function of the
digest: no clock, no randomness, no hidden state.
"""

from __future__ import annotations

import dataclasses
import enum
import math
from dataclasses import dataclass
from typing import Any

from markforge.engine.digest import is_digest
from markforge.engine.rng import Rng
from markforge.models.enums import SymmetryType
from markforge.utils.math_helpers import clamp, round_half_up


class FieldKind(enum.Enum):
    FLOAT = "float"
    INT = "int"  # rounded half-up
    INDEX = "index"  # floored slot number
    ENUM = "enum"  # floored index into SymmetryType


@dataclass(frozen=True)
class FieldSpec:
    name: str
    bit_offset: int
    bit_width: int
    out_min: float
    out_max: float
    kind: FieldKind = FieldKind.FLOAT

    @property
    def bounds(self) -> tuple[float, float]:
        """Range the derived value is guaranteed to land in."""
        if self.kind in (FieldKind.INDEX, FieldKind.ENUM):
            return (math.floor(self.out_min), math.floor(self.out_max))
        if self.kind is FieldKind.INT:
            return (round_half_up(self.out_min), round_half_up(self.out_max))
        return (self.out_min, self.out_max)


# Eight slots, floored from [0, 7.99].
_SLOT_MAX = 7.99

FIELD_TABLE: tuple[FieldSpec, ...] = (
    # Counts
    FieldSpec("element_count", 0, 8, 6, 20, FieldKind.INT),
    FieldSpec("layer_count", 8, 8, 1, 5, FieldKind.INT),
    # Rotation & angles
    FieldSpec("rotation_offset", 16, 8, 0, 360),
    FieldSpec("angle_spread", 24, 8, 0, 90),
    # Curves
    FieldSpec("curve_tension", 32, 8, 0.3, 0.9),
    FieldSpec("curve_amplitude", 40, 8, 0, 50),
    # Taper & stroke
    FieldSpec("taper_ratio", 48, 8, 0.2, 0.8),
    FieldSpec("stroke_width", 56, 8, 1, 12),
    # Spacing & scale
    FieldSpec("spacing_factor", 64, 8, 0.5, 2.0),
    FieldSpec("scale_factor", 72, 8, 0.7, 1.3),
    # Symmetry & style
    FieldSpec("symmetry_type", 80, 8, 0, _SLOT_MAX, FieldKind.ENUM),
    FieldSpec("style_variant", 88, 8, 0, _SLOT_MAX, FieldKind.INDEX),
    # Color
    FieldSpec("color_placement", 96, 8, 0, _SLOT_MAX, FieldKind.INDEX),
    FieldSpec("gradient_angle", 104, 8, 0, 360),
    # Organic variation
    FieldSpec("organic_amount", 112, 8, 0, 1),
    FieldSpec("jitter_amount", 120, 8, 0, 10),
    # Shape-specific
    FieldSpec("arm_width", 128, 8, 2, 15),
    FieldSpec("arm_length", 136, 8, 20, 50),
    FieldSpec("center_radius", 144, 8, 0, 15),
    FieldSpec("spiral_amount", 152, 8, 0, 0.5),
    FieldSpec("bulge_amount", 160, 8, 0, 0.5),
    FieldSpec("corner_radius", 168, 8, 0, 30),
    FieldSpec("depth_offset", 176, 8, 2, 20),
    FieldSpec("perspective_strength", 184, 8, 0, 1),
    FieldSpec("letter_weight", 192, 8, 100, 900, FieldKind.INT),
    FieldSpec("cut_depth", 200, 8, 0, 1),
    FieldSpec("overlap_amount", 208, 8, 0.2, 0.8),
    FieldSpec("ring_thickness", 216, 8, 2, 12),
    FieldSpec("flow_intensity", 224, 8, 0, 1),
    FieldSpec("extrusion_depth", 232, 8, 5, 25),
)


@dataclass(frozen=True)
class DerivedParameters:
    element_count: int
    layer_count: int
    rotation_offset: float
    angle_spread: float
    curve_tension: float
    curve_amplitude: float
    taper_ratio: float
    stroke_width: float
    spacing_factor: float
    scale_factor: float
    symmetry_type: SymmetryType
    style_variant: int
    color_placement: int
    gradient_angle: float
    organic_amount: float
    jitter_amount: float
    arm_width: float
    arm_length: float
    center_radius: float
    spiral_amount: float
    bulge_amount: float
    corner_radius: float
    depth_offset: float
    perspective_strength: float
    letter_weight: int
    cut_depth: float
    overlap_amount: float
    ring_thickness: float
    flow_intensity: float
    extrusion_depth: float

    def to_dict(self) -> dict[str, Any]:
        data = dataclasses.asdict(self)
        data["symmetry_type"] = self.symmetry_type.value
        return data


def extract_from_digest(digest: str, bit_offset: int, bit_width: int, out_min: float, out_max: float) -> float:
    """Read ``bit_width`` bits at ``bit_offset`` and map them to [out_min, out_max]."""
    start = bit_offset // 4
    chars = math.ceil(bit_width / 4) + 1
    hex_slice = digest[start:start + chars]
    value = int(hex_slice, 16) if hex_slice else 0
    max_value = (1 << bit_width) - 1
    normalized = (value % (max_value + 1)) / max_value
    # clamp absorbs float error at normalized == 1.0
    return float(clamp(out_min + normalized * (out_max - out_min), out_min, out_max))


def _derive_field(digest: str, spec: FieldSpec) -> Any:
    raw = extract_from_digest(digest, spec.bit_offset, spec.bit_width, spec.out_min, spec.out_max)
    if spec.kind is FieldKind.INT:
        return round_half_up(raw)
    if spec.kind is FieldKind.INDEX:
        return math.floor(raw)
    if spec.kind is FieldKind.ENUM:
        return SymmetryType.from_index(math.floor(raw))
    return raw


def derive_parameters(digest: str) -> DerivedParameters:
    """Map a 64-char hex digest to the full derived-parameter record."""
    if not is_digest(digest):
        raise ValueError(f"Expected a 64-char lowercase hex digest, got {digest!r}")
    return DerivedParameters(**{spec.name: _derive_field(digest, spec) for spec in FIELD_TABLE})


def parameter_ranges() -> dict[str, tuple[float, float]]:
    return {spec.name: spec.bounds for spec in FIELD_TABLE}


# --- PRNG-drawn base parameters ---


@dataclass(frozen=True)
class BaseParameters:
    """Generator defaults drawn from a seeded stream, before per-shape overrides."""

    stroke_width: float
    stroke_width_variance: float
    base_angle: float
    angle_variance: float
    rotation_offset: float
    curve_tension: float
    curve_amplitude: float
    curve_frequency: float
    segment_count: int
    segment_spacing: float
    segment_length_ratio: float
    horizontal_spacing: float
    vertical_spacing: float
    padding_ratio: float
    scale_x: float
    scale_y: float
    size_variance: float
    corner_radius: float
    corner_radius_variance: float
    base_opacity: float
    opacity_falloff: float
    layer_count: int
    noise_amount: float
    noise_frequency: float
    jitter_amount: float


def generate_base_params(rng: Rng) -> BaseParameters:
    # Field order is the draw order; changing it changes every design.
    return BaseParameters(
        stroke_width=2 + rng() * 4,
        stroke_width_variance=rng() * 0.3,
        base_angle=rng() * 360,
        angle_variance=rng() * 30,
        rotation_offset=rng() * 360,
        curve_tension=0.3 + rng() * 0.5,
        curve_amplitude=5 + rng() * 25,
        curve_frequency=1 + rng() * 4,
        segment_count=3 + math.floor(rng() * 8),
        segment_spacing=5 + rng() * 20,
        segment_length_ratio=0.5 + rng() * 0.5,
        horizontal_spacing=5 + rng() * 20,
        vertical_spacing=5 + rng() * 20,
        padding_ratio=0.1 + rng() * 0.15,
        scale_x=0.8 + rng() * 0.4,
        scale_y=0.8 + rng() * 0.4,
        size_variance=rng() * 0.3,
        corner_radius=rng() * 20,
        corner_radius_variance=rng() * 0.5,
        base_opacity=0.7 + rng() * 0.3,
        opacity_falloff=rng() * 0.5,
        layer_count=1 + math.floor(rng() * 5),
        noise_amount=rng() * 0.3,
        noise_frequency=0.5 + rng() * 2,
        jitter_amount=rng() * 5,
    )


def merge_params(defaults: BaseParameters, overrides: dict[str, Any] | None = None) -> BaseParameters:
    """Replace only the fields named in ``overrides``."""
    if not overrides:
        return defaults
    return dataclasses.replace(defaults, **overrides)
