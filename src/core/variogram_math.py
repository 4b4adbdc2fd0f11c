# variogram_math.py

from __future__ import annotations

import math
from dataclasses import dataclass, asdict


class InvalidParameter(ValueError):
    """Raised when a variogram parameter or distance is outside its domain."""


class DivisionUndefined(ZeroDivisionError):
    """Raised when a ratio statistic would divide by a zero sill."""


@dataclass(frozen=True)
class VariogramParameters:
    """
    Spherical model parameters. Requires sill >= nugget >= 0 and range > 0.
    """
    nugget: float
    sill: float
    range: float

    def __post_init__(self):
        for name in ("nugget", "sill", "range"):
            value = getattr(self, name)
            if not math.isfinite(value):
                raise InvalidParameter(f"{name} must be finite, got {value!r}")
        if self.range <= 0:
            raise InvalidParameter(f"range must be > 0, got {self.range}")
        if self.nugget < 0:
            raise InvalidParameter(f"nugget must be >= 0, got {self.nugget}")
        if self.sill < self.nugget:
            raise InvalidParameter(
                f"sill ({self.sill}) must be >= nugget ({self.nugget})"
            )

    @property
    def partial_sill(self):
        return self.sill - self.nugget


@dataclass(frozen=True)
class DerivedStatistics:
    structured_variance: float
    relative_nugget_effect: float
    range_to_distance_ratio: float
    partial_sill: float
    proportion_structured: float

    def as_dict(self):
        return asdict(self)


def evaluate_spherical(distance, params: VariogramParameters) -> float:
    """
    Semivariance of the spherical model at a single lag distance.

    Rises from the nugget at zero distance and reaches the sill exactly
    at the range; beyond the range it stays at the sill.
    """
    if not distance >= 0:
        raise InvalidParameter(f"distance must be >= 0, got {distance}")
    if params.range <= 0:
        raise InvalidParameter(f"range must be > 0, got {params.range}")
    if params.sill < params.nugget:
        raise InvalidParameter(
            f"sill ({params.sill}) must be >= nugget ({params.nugget})"
        )

    if distance >= params.range:
        return float(params.sill)

    h = distance / params.range
    return params.nugget + (params.sill - params.nugget) * (1.5 * h - 0.5 * h ** 3)


def spherical_curve(distances, params: VariogramParameters) -> list[float]:
    """Evaluate the spherical model at each distance, keeping input order."""
    return [evaluate_spherical(float(d), params) for d in distances]


def derived_statistics(params: VariogramParameters, max_distance) -> DerivedStatistics:
    """
    Descriptive statistics of a fitted model over a study area whose largest
    pair distance is ``max_distance``.
    """
    if not max_distance > 0:
        raise InvalidParameter(f"max_distance must be > 0, got {max_distance}")
    if params.sill == 0:
        raise DivisionUndefined("sill is zero; nugget and structure ratios are undefined")

    structured_variance = params.sill - params.nugget
    partial_sill = params.sill - params.nugget

    return DerivedStatistics(
        structured_variance=structured_variance,
        relative_nugget_effect=params.nugget / params.sill,
        range_to_distance_ratio=params.range / max_distance,
        partial_sill=partial_sill,
        proportion_structured=partial_sill / params.sill,
    )


# Nugget/sill thresholds separating strong, moderate and weak dependence
STRONG_DEPENDENCE_RATIO = 0.25
WEAK_DEPENDENCE_RATIO = 0.75


def spatial_dependence(params: VariogramParameters) -> str:
    if params.sill == 0:
        raise DivisionUndefined("sill is zero; nugget/sill ratio is undefined")

    ratio = params.nugget / params.sill
    if ratio < STRONG_DEPENDENCE_RATIO:
        return "strong"
    if ratio <= WEAK_DEPENDENCE_RATIO:
        return "moderate"
    return "weak"
