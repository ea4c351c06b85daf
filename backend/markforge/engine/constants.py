"""Shared constants for derivation, scoring and the registry."""

# Every generator draws into viewBox="0 0 100 100".
CANVAS_SIZE = 100.0

# Cubic bezier handle length for a quarter circle: 4/3 * (sqrt(2) - 1).
BEZIER_CIRCLE_K = 0.5522847498

# Registry defaults.
REGISTRY_KEY = "premium-logo-engine-hashes"
REGISTRY_CAPACITY = 1000

# Selection defaults.
MIN_QUALITY_SCORE = 85
CANDIDATES_PER_GENERATION = 5
