"""Domain enums shared by the engine and the shape generators."""

from __future__ import annotations

import enum


class LogoCategory(str, enum.Enum):
    TECHNOLOGY = "technology"
    FINANCE = "finance"
    HEALTHCARE = "healthcare"
    CREATIVE = "creative"
    ECOMMERCE = "ecommerce"
    EDUCATION = "education"
    SUSTAINABILITY = "sustainability"
    GENERAL = "general"


class SymmetryType(str, enum.Enum):
    """Symmetry of a design. Member order is the derivation index order."""

    NONE = "none"
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    RADIAL = "radial"
    BILATERAL = "bilateral"
    ROTATIONAL_4 = "rotational-4"
    ROTATIONAL_6 = "rotational-6"
    ROTATIONAL_8 = "rotational-8"

    @classmethod
    def from_index(cls, index: int) -> SymmetryType:
        members = list(cls)
        return members[index % len(members)]


def category_value(category: LogoCategory | str) -> str:
    """Plain string form of a category, as used in digest messages."""
    if isinstance(category, LogoCategory):
        return category.value
    return str(category)
