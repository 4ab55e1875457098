# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Correlated Color Temperature Engine
===================================
Bidirectional mapping between CIE 1931 xy chromaticity and
(correlated color temperature, tint) using Robertson's method.

The Planckian locus is sampled by 31 isotherms at fixed reciprocal
temperatures r = 10^6 / T (0 ... 600 mired).  Each row stores the locus
point (u, v) in CIE 1960 UCS and the slope t of the isotherm through it.
Between two rows everything is interpolated linearly.

Tint is the perpendicular offset of the target point from the interpolated
isotherm intersection, scaled by -3000 so that the numbers line up with the
temperature/tint convention used by raw converters (positive = green,
negative = magenta).

Direction asymmetry:
    ``temperature_from_xy`` brackets by the sign change of the perpendicular
    distance to each isotherm, while ``xy_from_temperature`` brackets
    directly on r.  Both searches are kept exactly as is; unifying them
    shifts results for points close to the table rows.

Out-of-table inputs:
    With no bracketing pair, both directions extrapolate along the last
    pair of rows and still return a value.  An ``ExtrapolationWarning`` is
    issued so callers can notice (see ``set_extrapolation_warnings``).

References:
    - Robertson, A. R. (1968). "Computation of Correlated Color Temperature
      and Distribution Temperature". JOSA 58(11), 1528-1535.
    - Wyszecki & Stiles (1982). "Color Science", 2nd ed., Table 1(3.11).
"""

from __future__ import annotations

import math
import warnings
from dataclasses import dataclass
from typing import Final, Tuple

import numpy as np
from numba import njit

from kiln_colortypes import Chromaticity, TemperatureTint

__all__ = [
    # --- Types ---
    "IsothermRow",
    "ExtrapolationWarning",

    # --- Constants ---
    "ISOTHERM_TABLE",
    "TINT_SCALE",

    # --- Configuration ---
    "set_extrapolation_warnings",

    # --- Functions ---
    "xy_to_uv1960",
    "uv1960_to_xy",
    "temperature_from_xy",
    "xy_from_temperature",
    "temperature_range",
]


@dataclass(slots=True, frozen=True)
class IsothermRow:
    """One isotherm: reciprocal temperature, locus point (u, v), slope t."""
    r: float
    u: float
    v: float
    t: float


class ExtrapolationWarning(RuntimeWarning):
    """Input fell outside the isotherm table; the result was extrapolated."""


# --- Robertson isotherm table ---
# Strictly ascending in r; both scans below depend on that ordering.
_ISOTHERM_ROWS: Final[Tuple[Tuple[float, float, float, float], ...]] = (
    #   r        u         v          t
    (  0.0, 0.18006, 0.26352,   -0.24341),
    ( 10.0, 0.18066, 0.26589,   -0.25479),
    ( 20.0, 0.18133, 0.26846,   -0.26876),
    ( 30.0, 0.18208, 0.27119,   -0.28539),
    ( 40.0, 0.18293, 0.27407,   -0.30470),
    ( 50.0, 0.18388, 0.27709,   -0.32675),
    ( 60.0, 0.18494, 0.28021,   -0.35156),
    ( 70.0, 0.18611, 0.28342,   -0.37915),
    ( 80.0, 0.18740, 0.28668,   -0.40955),
    ( 90.0, 0.18880, 0.28997,   -0.44278),
    (100.0, 0.19032, 0.29326,   -0.47888),
    (125.0, 0.19462, 0.30141,   -0.58204),
    (150.0, 0.19962, 0.30921,   -0.70471),
    (175.0, 0.20525, 0.31647,   -0.84901),
    (200.0, 0.21142, 0.32312,   -1.01820),
    (225.0, 0.21807, 0.32909,   -1.21680),
    (250.0, 0.22511, 0.33439,   -1.45120),
    (275.0, 0.23247, 0.33904,   -1.72980),
    (300.0, 0.24010, 0.34308,   -2.06370),
    (325.0, 0.24792, 0.34655,   -2.46810),
    (350.0, 0.25591, 0.34951,   -2.96410),
    (375.0, 0.26400, 0.35200,   -3.58140),
    (400.0, 0.27218, 0.35407,   -4.36330),
    (425.0, 0.28039, 0.35577,   -5.37620),
    (450.0, 0.28863, 0.35714,   -6.72620),
    (475.0, 0.29685, 0.35823,   -8.59550),
    (500.0, 0.30505, 0.35907,  -11.32400),
    (525.0, 0.31320, 0.35968,  -15.62800),
    (550.0, 0.32129, 0.36011,  -23.32500),
    (575.0, 0.32931, 0.36038,  -40.77000),
    (600.0, 0.33724, 0.36051, -116.45000),
)

ISOTHERM_TABLE: Final[Tuple[IsothermRow, ...]] = tuple(
    IsothermRow(*row) for row in _ISOTHERM_ROWS
)

# Kernel view of the table: columns r, u, v, t.
_RUVT: Final[np.ndarray] = np.array(_ISOTHERM_ROWS, dtype=np.float64)
_RUVT.flags.writeable = False
_N_ROWS: Final[int] = len(_ISOTHERM_ROWS)

# Converts a perpendicular uv offset into conventional tint units.
TINT_SCALE: Final[float] = -3000.0


# --- Runtime Configuration ---
# When True, out-of-table inputs raise an ExtrapolationWarning through the
# ``warnings`` machinery.  Filters apply as usual, e.g.
#     warnings.simplefilter("error", ExtrapolationWarning)
# turns them into exceptions for strict callers.
_WARN_ON_EXTRAPOLATION: bool = True

def set_extrapolation_warnings(enabled: bool = True) -> None:
    """
    Toggle ``ExtrapolationWarning`` emission for out-of-table inputs.

    Args:
        enabled: If False, extrapolated results are returned silently.
    """
    global _WARN_ON_EXTRAPOLATION
    _WARN_ON_EXTRAPOLATION = bool(enabled)


# =============================================================================
# 1. LOW-LEVEL KERNELS
# =============================================================================
# fastmath stays off: NaN / inf inputs must propagate to the caller.

@njit(cache=True, error_model="numpy")
def _xy_to_uv1960_kernel(x: float, y: float) -> Tuple[float, float]:
    denom = 1.5 - x + 6.0 * y
    return 2.0 * x / denom, 3.0 * y / denom


@njit(cache=True, error_model="numpy")
def _uv1960_to_xy_kernel(u: float, v: float) -> Tuple[float, float]:
    denom = u - 4.0 * v + 2.0
    return 1.5 * u / denom, v / denom


@njit(cache=True, error_model="numpy")
def _isotherm_direction(index: int) -> Tuple[float, float]:
    """Unit vector (1, t) / |(1, t)| along the isotherm of row *index*."""
    t = _RUVT[index, 3]
    length = math.sqrt(1.0 + t * t)
    return 1.0 / length, t / length


@njit(cache=True, error_model="numpy")
def _temperature_from_uv_kernel(us: float, vs: float) -> Tuple[float, float, bool]:
    """
    Robertson forward search.

    Returns:
        (temperature, tint, in_range).  ``in_range`` is False when the
        result was extrapolated from the last pair of rows or lies beyond
        the r = 0 isotherm.
    """
    di = 0.0
    dj = 0.0
    crossed = False

    index = 0
    while index < _N_ROWS:
        di = (vs - _RUVT[index, 2]) - _RUVT[index, 3] * (us - _RUVT[index, 1])
        if index > 0 and di < 0.0:
            crossed = True
            break
        dj = di
        index += 1

    if not crossed:
        # No sign change: fall back to the last pair of rows.
        index = _N_ROWS - 1
        dj = (vs - _RUVT[index - 1, 2]) - _RUVT[index - 1, 3] * (us - _RUVT[index - 1, 1])

    in_range = crossed and dj >= 0.0

    j = index - 1
    di /= math.sqrt(1.0 + _RUVT[index, 3] * _RUVT[index, 3])
    dj /= math.sqrt(1.0 + _RUVT[j, 3] * _RUVT[j, 3])

    f = dj / (dj - di)

    temperature = 1.0e6 / ((_RUVT[index, 0] - _RUVT[j, 0]) * f + _RUVT[j, 0])

    ud = us - ((_RUVT[index, 1] - _RUVT[j, 1]) * f + _RUVT[j, 1])
    vd = vs - ((_RUVT[index, 2] - _RUVT[j, 2]) * f + _RUVT[j, 2])

    tui, tvi = _isotherm_direction(index)
    tuj, tvj = _isotherm_direction(j)

    tu = (tui - tuj) * f + tuj
    tv = (tvi - tvj) * f + tvj
    tl = math.sqrt(tu * tu + tv * tv)
    tu /= tl
    tv /= tl

    tint = (ud * tu + vd * tv) * TINT_SCALE
    return temperature, tint, in_range


@njit(cache=True, error_model="numpy")
def _uv_from_temperature_kernel(temperature: float, tint: float) -> Tuple[float, float, bool]:
    """
    Robertson inverse: brackets directly on r = 10^6 / T.

    Returns:
        (u, v, in_range) in CIE 1960 UCS.
    """
    r = 1.0e6 / temperature

    found = False
    index = 1
    while index < _N_ROWS:
        if r < _RUVT[index, 0]:
            found = True
            break
        index += 1

    if not found:
        # Past the last row: extrapolate along the last pair.
        index = _N_ROWS - 1

    in_range = (found or r == _RUVT[_N_ROWS - 1, 0]) and r >= _RUVT[0, 0]

    j = index - 1
    f = (_RUVT[index, 0] - r) / (_RUVT[index, 0] - _RUVT[j, 0])

    us = (_RUVT[j, 1] - _RUVT[index, 1]) * f + _RUVT[index, 1]
    vs = (_RUVT[j, 2] - _RUVT[index, 2]) * f + _RUVT[index, 2]

    tui, tvi = _isotherm_direction(index)
    tuj, tvj = _isotherm_direction(j)

    tu = (tuj - tui) * f + tui
    tv = (tvj - tvi) * f + tvi
    tl = math.sqrt(tu * tu + tv * tv)
    tu /= tl
    tv /= tl

    us += tu * tint / TINT_SCALE
    vs += tv * tint / TINT_SCALE
    return us, vs, in_range


# =============================================================================
# 2. PUBLIC API
# =============================================================================

def _warn_extrapolated(what: str) -> None:
    if _WARN_ON_EXTRAPOLATION:
        warnings.warn(
            f"{what} lies outside the isotherm table "
            f"({temperature_range()[0]:.1f} K .. inf); result is extrapolated.",
            ExtrapolationWarning,
            stacklevel=3,
        )


def xy_to_uv1960(xy: Chromaticity) -> Tuple[float, float]:
    """
    Converts CIE 1931 (x, y) to CIE 1960 UCS (u, v).

    Formulas:
        u = 2x / (1.5 - x + 6y)
        v = 3y / (1.5 - x + 6y)
    """
    return _xy_to_uv1960_kernel(float(xy.x), float(xy.y))


def uv1960_to_xy(u: float, v: float) -> Chromaticity:
    """
    Converts CIE 1960 UCS (u, v) back to CIE 1931 (x, y).

    Formulas:
        x = 1.5u / (u - 4v + 2)
        y = v / (u - 4v + 2)
    """
    x, y = _uv1960_to_xy_kernel(float(u), float(v))
    return Chromaticity(x, y)


def temperature_from_xy(xy: Chromaticity) -> TemperatureTint:
    """
    Computes correlated color temperature and tint of a chromaticity.

    Args:
        xy: CIE 1931 chromaticity.

    Returns:
        Temperature in Kelvin and tint in conventional units.  Inputs
        outside the table's range (below ~1667 K, or bluer than the
        infinite-temperature isotherm) yield extrapolated values.
    """
    us, vs = xy_to_uv1960(xy)
    temperature, tint, in_range = _temperature_from_uv_kernel(us, vs)
    if not in_range:
        _warn_extrapolated(f"Chromaticity ({xy.x}, {xy.y})")
    return TemperatureTint(temperature, tint)


def xy_from_temperature(temperature: float, tint: float = 0.0) -> Chromaticity:
    """
    Computes the chromaticity for a color temperature and tint.

    Args:
        temperature: Correlated color temperature in Kelvin.
        tint: Offset from the Planckian locus (positive = green).

    Returns:
        CIE 1931 chromaticity.  Temperatures below ~1667 K extrapolate along
        the last pair of isotherms.
    """
    us, vs, in_range = _uv_from_temperature_kernel(float(temperature), float(tint))
    if not in_range:
        _warn_extrapolated(f"Temperature {temperature} K")
    return uv1960_to_xy(us, vs)


def temperature_range() -> Tuple[float, float]:
    """(min, max) correlated color temperature in Kelvin covered by the table."""
    r_max = _ISOTHERM_ROWS[-1][0]
    r_min = _ISOTHERM_ROWS[0][0]
    t_max = math.inf if r_min == 0.0 else 1.0e6 / r_min
    return 1.0e6 / r_max, t_max
