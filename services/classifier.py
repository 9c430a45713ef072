"""Severity classification for air-quality index values."""

from __future__ import annotations

import math
from typing import Sequence

from models.records import Number, SeverityTier

SEVERITY_TIERS: tuple[SeverityTier, ...] = (
    SeverityTier(
        upper_bound=50,
        label="Good",
        indicator="🟢",
        advisory="Air quality is satisfactory with little or no risk.",
    ),
    SeverityTier(
        upper_bound=100,
        label="Moderate",
        indicator="🟡",
        advisory=(
            "Air quality is acceptable. However, there may be moderate health concern "
            "for very sensitive people."
        ),
    ),
    SeverityTier(
        upper_bound=150,
        label="Unhealthy for Sensitive Groups",
        indicator="🟠",
        advisory=(
            "Members of sensitive groups may experience health effects. "
            "General public is less likely to be affected."
        ),
    ),
    SeverityTier(
        upper_bound=200,
        label="Unhealthy",
        indicator="🔴",
        advisory=(
            "Everyone may begin to experience health effects. Sensitive groups may "
            "experience more serious effects. Consider wearing a mask outdoors."
        ),
    ),
    SeverityTier(
        upper_bound=300,
        label="Very Unhealthy",
        indicator="🟣",
        advisory=(
            "Health alert: everyone may experience more serious health effects. "
            "Avoid outdoor activities."
        ),
    ),
    SeverityTier(
        upper_bound=math.inf,
        label="Hazardous",
        indicator="🟤",
        advisory=(
            "Health warning of emergency conditions. Everyone is more likely to be "
            "affected. Stay indoors."
        ),
    ),
)


def classify(index: Number, tiers: Sequence[SeverityTier] = SEVERITY_TIERS) -> SeverityTier:
    """Return the first tier whose upper bound covers ``index``."""
    for tier in tiers:
        if index <= tier.upper_bound:
            return tier
    return tiers[-1]
