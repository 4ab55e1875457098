# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: kiln_validation.py — Opt-in pre-flight checks.

The conversion kernels never raise on numeric edge cases; they hand back
inf / NaN or extrapolated values.  The helpers below let a caller reject
such inputs up front instead.  Each ``validate_*`` returns its argument
unchanged so calls can be chained inline:

    xyz = xy_to_xyz(validate_chromaticity(xy))
"""

from __future__ import annotations

import math
from typing import Iterable, Union

from kiln_colortypes import (
    HSV,
    RGB,
    Chromaticity,
    TemperatureTint,
    Tristimulus,
)
from kiln_temperature import temperature_range

__all__ = [
    "validate_rgb",
    "validate_chromaticity",
    "validate_tristimulus",
    "validate_temperature",
    "validate_white_point",
    "is_finite_result",
]

# Below this magnitude a denominator is treated as zero.
_EPSILON: float = 1e-12

ColorValue = Union[RGB, HSV, Chromaticity, Tristimulus, TemperatureTint]


def _require_finite(label: str, values: Iterable[float]) -> None:
    for value in values:
        if not math.isfinite(value):
            raise ValueError(f"{label}: non-finite component {value!r}")


def validate_rgb(rgb: RGB) -> RGB:
    """
    Requires finite channels inside [0, 1].

    Raises:
        ValueError: On NaN / inf or an out-of-range channel.
    """
    _require_finite("RGB", rgb)
    for name, value in zip("rgb", rgb):
        if not 0.0 <= value <= 1.0:
            raise ValueError(f"RGB: channel {name}={value} outside [0, 1]")
    return rgb


def validate_chromaticity(xy: Chromaticity) -> Chromaticity:
    """
    Requires finite coordinates with y != 0 (needed by xy -> XYZ).

    Raises:
        ValueError: On NaN / inf or a (near) zero y.
    """
    _require_finite("Chromaticity", xy)
    if abs(xy.y) < _EPSILON:
        raise ValueError(f"Chromaticity: y={xy.y} is zero; XYZ is undefined")
    return xy


def validate_tristimulus(xyz: Tristimulus) -> Tristimulus:
    """
    Requires finite components with a non-zero sum (needed by XYZ -> xy).

    Raises:
        ValueError: On NaN / inf or X + Y + Z == 0.
    """
    _require_finite("Tristimulus", xyz)
    if abs(xyz.X + xyz.Y + xyz.Z) < _EPSILON:
        raise ValueError("Tristimulus: X + Y + Z is zero; chromaticity is undefined")
    return xyz


def validate_temperature(temperature: float, strict_range: bool = False) -> float:
    """
    Requires a finite, positive temperature in Kelvin.

    Args:
        temperature: Correlated color temperature in Kelvin.
        strict_range: If True, also reject temperatures below the isotherm
                      table (where results would be extrapolated).

    Raises:
        ValueError: On NaN / inf, a non-positive value, or (strict) an
                    out-of-table temperature.
    """
    if not math.isfinite(temperature):
        raise ValueError(f"Temperature: non-finite value {temperature!r}")
    if temperature <= 0.0:
        raise ValueError(f"Temperature: {temperature} K is not positive")
    if strict_range:
        t_min, _ = temperature_range()
        if temperature < t_min:
            raise ValueError(
                f"Temperature: {temperature} K below table minimum {t_min:.1f} K"
            )
    return temperature


def validate_white_point(white: Union[Chromaticity, Tristimulus]) -> Union[Chromaticity, Tristimulus]:
    """
    Requires a physically meaningful reference white.

    Chromaticities must pass ``validate_chromaticity``; tristimulus whites
    must be finite with strictly positive components so that every Bradford
    cone response stays away from zero.

    Raises:
        ValueError: On any of the conditions above.
        TypeError: If *white* is neither ``Chromaticity`` nor ``Tristimulus``.
    """
    if isinstance(white, Chromaticity):
        return validate_chromaticity(white)
    if isinstance(white, Tristimulus):
        _require_finite("White point", white)
        if min(white) <= 0.0:
            raise ValueError(f"White point: components must be positive, got {tuple(white)}")
        return white
    raise TypeError(f"White point must be Chromaticity or Tristimulus, got {type(white).__name__}")


def is_finite_result(value: ColorValue) -> bool:
    """True if every component of a conversion result is finite."""
    return all(math.isfinite(component) for component in value)
