"""Wrap generated path elements into a standalone SVG document."""

from __future__ import annotations

from typing import Any

from markforge.engine.constants import CANVAS_SIZE


def serialize_svg(
    elements: list[dict[str, Any]],
    size: float = CANVAS_SIZE,
    title: str = "",
) -> str:
    """Generate SVG markup on the square ``0 0 size size`` canvas.

    Each element dict holds attributes; ``tag`` defaults to ``path``.
    """
    lines = [
        f'<svg viewBox="0 0 {size:g} {size:g}" xmlns="http://www.w3.org/2000/svg" role="img">',
    ]

    if title:
        lines.append(f"  <title>{title}</title>")

    for elem in elements:
        tag = elem.get("tag", "path")
        attrs = {k: v for k, v in elem.items() if k != "tag"}
        attr_str = " ".join(f'{k}="{v}"' for k, v in attrs.items())
        lines.append(f"  <{tag} {attr_str} />")

    lines.append("</svg>")
    return "\n".join(lines)
