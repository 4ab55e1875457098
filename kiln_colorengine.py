# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Unified Color Math Kernel
=========================
Stateless, single-value color transforms for white-balance work:

1. RGB <-> HSV (six-sector model).
2. CIE 1931 xy <-> XYZ and vector projections.
3. Correlated color temperature + tint (re-exported from ``kiln_temperature``).
4. Bradford chromatic adaptation between two reference white points.

Every function takes and returns small immutable values (see
``kiln_colortypes``) or float64 3x3 matrices.  Nothing here raises on
degenerate numbers: a zero denominator produces inf / NaN and out-of-table
temperatures are extrapolated.  Use ``kiln_validation`` for loud checks.

Matrix Convention:
    All matrices act on COLUMN vectors, M·v, exactly as they are written
    below (row-major).  There are no pre-transposed row-vector variants;
    single values do not need them.

References:
    - IEC 61966-2-1:1999 (sRGB Standard)
    - ROMM RGB / ProPhoto, ANSI/I3A IT10.7666:2003
    - Lam, K. M. (1985). "Metamerism and Colour Constancy" (Bradford CAT).
    - Lindbloom, B. "Chromatic Adaptation", brucelindbloom.com
"""

from __future__ import annotations

import functools
import math
from typing import Final, Sequence, Tuple, Union

import numpy as np
from numba import njit

from kiln_colortypes import (
    ArrayFloat,
    HSV,
    RGB,
    Chromaticity,
    Tristimulus,
)
from kiln_linalg import diagonal3, freeze, inverse, matrix3, multiply
from kiln_temperature import (
    ISOTHERM_TABLE,
    temperature_from_xy,
    xy_from_temperature,
)

__all__ = [
    # --- Constants ---
    "WHITE_POINT_D50",
    "WHITE_POINT_D65",
    "WHITE_POINT_D50_XYZ",
    "WHITE_POINT_D65_XYZ",

    # --- Matrices ---
    "M_SRGB_TO_XYZ",
    "M_XYZ_TO_SRGB",
    "M_XYZ_TO_SRGB_D50",
    "M_PROPHOTO_TO_XYZ",
    "M_XYZ_TO_PROPHOTO",
    "M_BRADFORD",
    "M_BRADFORD_INV",

    # --- Functions ---
    "rgb_to_hsv",
    "hsv_to_rgb",
    "xy_to_xyz",
    "xyz_to_xy",
    "vector_to_xy",
    "vector_to_xyz",
    "transform",
    "temperature_from_xy",
    "xy_from_temperature",
    "white_point_xyz_convert_matrix",

    # --- Classes ---
    "ChromaticAdaptation",
    "ColorMath",
]

WhitePointLike = Union[Tristimulus, Chromaticity, ArrayFloat, Sequence[float]]


# =============================================================================
# 0. CONSTANTS
# =============================================================================

# Standard illuminants, CIE 1931 2° observer chromaticities.
# D50: Horizon daylight (approx 5000K), ICC profile connection space
WHITE_POINT_D50: Final[Chromaticity] = Chromaticity(0.34567, 0.35850)
# D65: Average daylight (approx 6500K), sRGB reference white
WHITE_POINT_D65: Final[Chromaticity] = Chromaticity(0.31271, 0.32902)

# sRGB primaries, D65 white.
M_SRGB_TO_XYZ: Final[ArrayFloat] = freeze(matrix3([
    0.412424,  0.357579, 0.180464,
    0.212656,  0.715158, 0.0721856,
    0.0193324, 0.119193, 0.950444,
]))

M_XYZ_TO_SRGB: Final[ArrayFloat] = freeze(matrix3([
     3.24071,  -1.53726,  -0.498571,
    -0.969258,  1.87599,   0.0415557,
     0.0556352, -0.203996, 1.05707,
]))

# Bradford-adapted D50 variant of XYZ -> sRGB.  Not used by any function
# here; pick it explicitly when the XYZ data is D50-referenced.
M_XYZ_TO_SRGB_D50: Final[ArrayFloat] = freeze(matrix3([
     3.1338561, -1.6168667, -0.4906146,
    -0.9787684,  1.9161415,  0.0334540,
     0.0719453, -0.2289914,  1.4052427,
]))

# ProPhoto (ROMM) RGB primaries, D50 white.
M_PROPHOTO_TO_XYZ: Final[ArrayFloat] = freeze(matrix3([
    0.797675, 0.135192, 0.0313534,
    0.288040, 0.711874, 0.000086,
    0.0,      0.0,      0.825210,
]))

M_XYZ_TO_PROPHOTO: Final[ArrayFloat] = freeze(matrix3([
     1.34594,  -0.255608, -0.0511118,
    -0.544599,  1.50817,   0.0205351,
     0.0,       0.0,       1.21181,
]))

# Bradford Adaptation
# Transforms XYZ to "sharpened" cone responses (rho, gamma, beta).
M_BRADFORD: Final[ArrayFloat] = freeze(matrix3([
     0.8951,  0.2664, -0.1614,
    -0.7502,  1.7135,  0.0367,
     0.0389, -0.0685,  1.0296,
]))
M_BRADFORD_INV: Final[ArrayFloat] = freeze(inverse(M_BRADFORD))


# =============================================================================
# 1. LOW-LEVEL KERNELS
# =============================================================================
# error_model="numpy": float division by zero yields inf / NaN, never raises.

@njit(cache=True, error_model="numpy")
def _clamp(value: float, lower: float, upper: float) -> float:
    # NaN compares False both ways and passes through unchanged.
    if value < lower:
        return lower
    if value > upper:
        return upper
    return value


@njit(cache=True, error_model="numpy")
def _rgb_to_hsv_kernel(r: float, g: float, b: float) -> Tuple[float, float, float]:
    c_max = max(r, g, b)
    c_min = min(r, g, b)

    if c_max == c_min:
        return 0.0, 0.0, c_max

    chroma = c_max - c_min
    h = 0.0

    if c_max == r:
        h = (g - b) / chroma
    elif c_max == g:
        h = (b - r) / chroma + 2.0
    elif c_max == b:
        h = (r - g) / chroma + 4.0

    h *= 60.0
    # Red sector with b > g lands below zero.
    if h < 0.0:
        h += 360.0

    return h, chroma / c_max, c_max


@njit(cache=True, error_model="numpy")
def _hsv_to_rgb_kernel(h: float, s: float, v: float) -> Tuple[float, float, float]:
    h = _clamp(h, 0.0, 360.0)
    s = _clamp(s, 0.0, 1.0)
    v = _clamp(v, 0.0, 1.0)

    if s == 0.0:
        return v, v, v

    h = (h % 360.0) / 60.0

    # Only reachable for NaN input; keeps int() away from non-finite values.
    if not (h >= 0.0 and h < 6.0):
        return 0.0, 0.0, 0.0

    i = int(math.floor(h))
    f = h - i
    p = v * (1.0 - s)
    q = v * (1.0 - s * f)
    t = v * (1.0 - s * (1.0 - f))

    if i == 0:
        return v, t, p
    if i == 1:
        return q, v, p
    if i == 2:
        return p, v, t
    if i == 3:
        return p, q, v
    if i == 4:
        return t, p, v
    if i == 5:
        return v, p, q
    return 0.0, 0.0, 0.0


@njit(cache=True, error_model="numpy")
def _xy_to_xyz_kernel(x: float, y: float) -> Tuple[float, float, float]:
    return x / y, 1.0, (1.0 - x - y) / y


@njit(cache=True, error_model="numpy")
def _xyz_to_xy_kernel(X: float, Y: float, Z: float) -> Tuple[float, float]:
    s = X + Y + Z
    return X / s, Y / s


# =============================================================================
# 2. RGB <-> HSV
# =============================================================================

def rgb_to_hsv(rgb: RGB) -> HSV:
    """
    Converts RGB to HSV.

    Achromatic input (max == min) maps to hue 0, saturation 0.  Hue is in
    degrees within [0, 360); channels are not clamped.
    """
    h, s, v = _rgb_to_hsv_kernel(float(rgb.r), float(rgb.g), float(rgb.b))
    return HSV(h, s, v)


def hsv_to_rgb(hsv: HSV) -> RGB:
    """
    Converts HSV to RGB.

    Inputs are clamped first: h to [0, 360], s and v to [0, 1].
    """
    r, g, b = _hsv_to_rgb_kernel(float(hsv.h), float(hsv.s), float(hsv.v))
    return RGB(r, g, b)


# =============================================================================
# 3. CHROMATICITY / TRISTIMULUS
# =============================================================================

def xy_to_xyz(xy: Chromaticity) -> Tristimulus:
    """
    Lifts a chromaticity to tristimulus values with Y = 1.

    Formulas:
        X = x / y,  Y = 1,  Z = (1 - x - y) / y

    ``y == 0`` gives inf / NaN.
    """
    X, Y, Z = _xy_to_xyz_kernel(float(xy.x), float(xy.y))
    return Tristimulus(X, Y, Z)


def xyz_to_xy(xyz: Tristimulus) -> Chromaticity:
    """Projects XYZ onto the chromaticity plane: x = X/(X+Y+Z), y = Y/(X+Y+Z)."""
    x, y = _xyz_to_xy_kernel(float(xyz.X), float(xyz.Y), float(xyz.Z))
    return Chromaticity(x, y)


def vector_to_xyz(vector: Union[ArrayFloat, Sequence[float]]) -> Tristimulus:
    """Reads the first three components of *vector* as X, Y, Z."""
    return Tristimulus.from_vector(vector)


def vector_to_xy(vector: Union[ArrayFloat, Sequence[float]]) -> Chromaticity:
    """Chromaticity of the tristimulus stored in the first three components."""
    return xyz_to_xy(Tristimulus.from_vector(vector))


def transform(matrix: ArrayFloat, xyz: Tristimulus) -> Tristimulus:
    """
    Applies a 3x3 matrix to a tristimulus value (M·v).

    Works for any of the module matrices, e.g. ``M_XYZ_TO_SRGB`` or an
    adaptation matrix; the result is wrapped as ``Tristimulus`` regardless
    of which space the matrix maps into.
    """
    return Tristimulus.from_vector(multiply(matrix, xyz.as_vector()))


# Derived reference whites (Y = 1).
WHITE_POINT_D50_XYZ: Final[Tristimulus] = xy_to_xyz(WHITE_POINT_D50)
WHITE_POINT_D65_XYZ: Final[Tristimulus] = xy_to_xyz(WHITE_POINT_D65)


# =============================================================================
# 4. CHROMATIC ADAPTATION
# =============================================================================

def _to_white_tuple(white: WhitePointLike) -> Tuple[float, float, float]:
    """Normalises a white point to a hashable XYZ tuple for caching."""
    if isinstance(white, Chromaticity):
        white = xy_to_xyz(white)
    if isinstance(white, Tristimulus):
        return (float(white.X), float(white.Y), float(white.Z))
    arr = np.asarray(white, dtype=np.float64).ravel()
    if arr.shape != (3,):
        raise ValueError(f"Expected an XYZ white point with 3 components, got shape {arr.shape}")
    return (float(arr[0]), float(arr[1]), float(arr[2]))


@functools.lru_cache(maxsize=16)
def _get_cached_bradford_matrix(
    src_white_tuple: Tuple[float, float, float],
    dst_white_tuple: Tuple[float, float, float],
) -> ArrayFloat:
    """
    Cached worker for the Bradford matrix.

    Derivation:
        rho_src = B·W_src,  rho_dst = B·W_dst
        D       = diag(rho_dst / rho_src)       (von Kries gains)
        M       = B^-1 · D · B

    The returned array is shared between callers and therefore read-only.
    """
    src_lms = multiply(M_BRADFORD, np.array(src_white_tuple, dtype=np.float64))
    dst_lms = multiply(M_BRADFORD, np.array(dst_white_tuple, dtype=np.float64))

    # Zero cone response is left to IEEE 754 (inf / NaN gains).
    with np.errstate(divide="ignore", invalid="ignore"):
        gains = dst_lms / src_lms

    m_gain = diagonal3(gains[0], gains[1], gains[2])
    return freeze(multiply(multiply(M_BRADFORD_INV, m_gain), M_BRADFORD))


def white_point_xyz_convert_matrix(
    source_white: WhitePointLike,
    target_white: WhitePointLike,
) -> ArrayFloat:
    """
    Computes the Bradford adaptation matrix between two white points.

    Args:
        source_white: Source white as XYZ (``Tristimulus`` or 3-vector).
                      A ``Chromaticity`` is lifted to Y = 1 first.
        target_white: Destination white, same forms as *source_white*.

    Returns:
        Read-only 3x3 matrix M with XYZ_target = M·XYZ_source.
    """
    return _get_cached_bradford_matrix(
        _to_white_tuple(source_white), _to_white_tuple(target_white)
    )


class ChromaticAdaptation:
    """Handles White Point Adaptation (Bradford Method)."""

    @staticmethod
    def calc_transform_matrix(src_white: WhitePointLike, dst_white: WhitePointLike) -> ArrayFloat:
        """Alias of ``white_point_xyz_convert_matrix``."""
        return white_point_xyz_convert_matrix(src_white, dst_white)

    @staticmethod
    def adapt(xyz: Tristimulus, src_white: WhitePointLike, dst_white: WhitePointLike) -> Tristimulus:
        """
        Adapts one XYZ color from the source to the destination white point.

        Args:
            xyz: Input XYZ color, seen under *src_white*.
            src_white: Source white point.
            dst_white: Destination white point.

        Returns:
            The corresponding XYZ color under *dst_white*.
        """
        return transform(white_point_xyz_convert_matrix(src_white, dst_white), xyz)


# =============================================================================
# 5. NAMESPACE FACADE
# =============================================================================

class ColorMath:
    """
    Static namespace bundling the kernel's functions and constants.

    Mirrors the module-level API for callers that prefer a single import::

        from kiln_colorengine import ColorMath
        ColorMath.temperature_from_xy(ColorMath.WHITE_POINT_D65)
    """

    # --- Functions ---
    rgb_to_hsv = staticmethod(rgb_to_hsv)
    hsv_to_rgb = staticmethod(hsv_to_rgb)
    temperature_from_xy = staticmethod(temperature_from_xy)
    xy_from_temperature = staticmethod(xy_from_temperature)
    xy_to_xyz = staticmethod(xy_to_xyz)
    xyz_to_xy = staticmethod(xyz_to_xy)
    vector_to_xy = staticmethod(vector_to_xy)
    vector_to_xyz = staticmethod(vector_to_xyz)
    white_point_xyz_convert_matrix = staticmethod(white_point_xyz_convert_matrix)

    # --- Constants ---
    WHITE_POINT_D50: Final[Chromaticity] = WHITE_POINT_D50
    WHITE_POINT_D65: Final[Chromaticity] = WHITE_POINT_D65
    M_SRGB_TO_XYZ: Final[ArrayFloat] = M_SRGB_TO_XYZ
    M_XYZ_TO_SRGB: Final[ArrayFloat] = M_XYZ_TO_SRGB
    M_XYZ_TO_SRGB_D50: Final[ArrayFloat] = M_XYZ_TO_SRGB_D50
    M_PROPHOTO_TO_XYZ: Final[ArrayFloat] = M_PROPHOTO_TO_XYZ
    M_XYZ_TO_PROPHOTO: Final[ArrayFloat] = M_XYZ_TO_PROPHOTO
    M_BRADFORD: Final[ArrayFloat] = M_BRADFORD
    M_BRADFORD_INV: Final[ArrayFloat] = M_BRADFORD_INV
    ISOTHERM_TABLE = ISOTHERM_TABLE
