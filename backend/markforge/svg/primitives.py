"""Bezier path primitives shared by shape generators.

Circles, ellipses and rounded rects are emitted as cubic bezier runs rather
than <circle>/<rect> elements, so every mark is a single editable path and
the smoothness scorer sees its curves.
"""

from __future__ import annotations

import re

from markforge.engine.constants import BEZIER_CIRCLE_K as K

Point = tuple[float, float]

_WS_RE = re.compile(r"\s+")


def _n(value: float) -> str:
    """Shortest number form: 50.0 -> '50', 12.5 -> '12.5'."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def _squash(path: str) -> str:
    return _WS_RE.sub(" ", path).strip()


def bezier_circle(cx: float, cy: float, r: float) -> str:
    return bezier_ellipse(cx, cy, r, r)


def bezier_ellipse(cx: float, cy: float, rx: float, ry: float) -> str:
    return _squash(
        f"""
        M {_n(cx)} {_n(cy - ry)}
        C {_n(cx + rx * K)} {_n(cy - ry)}, {_n(cx + rx)} {_n(cy - ry * K)}, {_n(cx + rx)} {_n(cy)}
        C {_n(cx + rx)} {_n(cy + ry * K)}, {_n(cx + rx * K)} {_n(cy + ry)}, {_n(cx)} {_n(cy + ry)}
        C {_n(cx - rx * K)} {_n(cy + ry)}, {_n(cx - rx)} {_n(cy + ry * K)}, {_n(cx - rx)} {_n(cy)}
        C {_n(cx - rx)} {_n(cy - ry * K)}, {_n(cx - rx * K)} {_n(cy - ry)}, {_n(cx)} {_n(cy - ry)}
        Z
        """
    )


def bezier_rounded_rect(x: float, y: float, width: float, height: float, radius: float) -> str:
    """Rounded rectangle; sharp corners still use degenerate cubics."""
    r = min(radius, width / 2, height / 2)
    right = x + width
    bottom = y + height

    if r <= 0:
        return _squash(
            f"""
            M {_n(x)} {_n(y)}
            C {_n(x)} {_n(y)}, {_n(right)} {_n(y)}, {_n(right)} {_n(y)}
            C {_n(right)} {_n(y)}, {_n(right)} {_n(bottom)}, {_n(right)} {_n(bottom)}
            C {_n(right)} {_n(bottom)}, {_n(x)} {_n(bottom)}, {_n(x)} {_n(bottom)}
            C {_n(x)} {_n(bottom)}, {_n(x)} {_n(y)}, {_n(x)} {_n(y)}
            Z
            """
        )

    rk = r * K
    return _squash(
        f"""
        M {_n(x + r)} {_n(y)}
        L {_n(right - r)} {_n(y)}
        C {_n(right - r + rk)} {_n(y)}, {_n(right)} {_n(y + r - rk)}, {_n(right)} {_n(y + r)}
        L {_n(right)} {_n(bottom - r)}
        C {_n(right)} {_n(bottom - r + rk)}, {_n(right - r + rk)} {_n(bottom)}, {_n(right - r)} {_n(bottom)}
        L {_n(x + r)} {_n(bottom)}
        C {_n(x + r - rk)} {_n(bottom)}, {_n(x)} {_n(bottom - r + rk)}, {_n(x)} {_n(bottom - r)}
        L {_n(x)} {_n(y + r)}
        C {_n(x)} {_n(y + r - rk)}, {_n(x + r - rk)} {_n(y)}, {_n(x + r)} {_n(y)}
        Z
        """
    )


def _segment(p0: Point, p1: Point, p2: Point, p3: Point, tension: float) -> str:
    cp1x = p1[0] + (p2[0] - p0[0]) * tension / 3
    cp1y = p1[1] + (p2[1] - p0[1]) * tension / 3
    cp2x = p2[0] - (p3[0] - p1[0]) * tension / 3
    cp2y = p2[1] - (p3[1] - p1[1]) * tension / 3
    return f" C {cp1x:.2f} {cp1y:.2f}, {cp2x:.2f} {cp2y:.2f}, {p2[0]:.2f} {p2[1]:.2f}"


def organic_shape(points: list[Point], tension: float = 0.5, closed: bool = True) -> str:
    """Catmull-Rom style smooth curve through ``points``."""
    n = len(points)
    if n < 2:
        return ""
    if n == 2:
        (x0, y0), (x1, y1) = points
        return f"M {_n(x0)} {_n(y0)} C {_n(x0)} {_n(y0)}, {_n(x1)} {_n(y1)}, {_n(x1)} {_n(y1)}"

    path = f"M {_n(points[0][0])} {_n(points[0][1])}"

    for i in range(n - 1):
        if i == 0:
            p0 = points[n - 1] if closed else points[0]
        else:
            p0 = points[i - 1]
        if i + 2 < n:
            p3 = points[i + 2]
        else:
            p3 = points[(i + 2) % n] if closed else points[n - 1]
        path += _segment(p0, points[i], points[i + 1], p3, tension)

    if closed:
        path += _segment(points[n - 2], points[n - 1], points[0], points[1], tension)
        path += " Z"

    return path
