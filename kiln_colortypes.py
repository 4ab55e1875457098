# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Module: kiln_colortypes.py — Immutable value types shared by the engines.

Every conversion in Kiln consumes and produces one of these small frozen
records.  They carry no validation: the numeric kernels accept whatever
they are given and let IEEE 754 decide what degenerate inputs become.
Use ``kiln_validation`` when a caller wants a loud failure instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Sequence, TypeAlias

import numpy as np
import numpy.typing as npt

__all__ = [
    "ArrayFloat",
    "RGB",
    "HSV",
    "Chromaticity",
    "Tristimulus",
    "TemperatureTint",
]

ArrayFloat: TypeAlias = npt.NDArray[np.floating]


@dataclass(slots=True, frozen=True)
class RGB:
    """Linear or encoded RGB triplet, nominally in [0, 1]."""
    r: float
    g: float
    b: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.r, self.g, self.b))


@dataclass(slots=True, frozen=True)
class HSV:
    """Hue in degrees, saturation and value in [0, 1]."""
    h: float
    s: float
    v: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.h, self.s, self.v))


@dataclass(slots=True, frozen=True)
class Chromaticity:
    """CIE 1931 (x, y) chromaticity coordinates."""
    x: float
    y: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.x, self.y))


@dataclass(slots=True, frozen=True)
class Tristimulus:
    """CIE 1931 XYZ tristimulus values."""
    X: float
    Y: float
    Z: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.X, self.Y, self.Z))

    def as_vector(self) -> ArrayFloat:
        """Returns a fresh float64 3-vector ``[X, Y, Z]``."""
        return np.array([self.X, self.Y, self.Z], dtype=np.float64)

    @classmethod
    def from_vector(cls, vector: ArrayFloat | Sequence[float]) -> Tristimulus:
        """Reads the first three components of *vector* as X, Y, Z."""
        arr = np.asarray(vector, dtype=np.float64).ravel()
        if arr.shape[0] < 3:
            raise ValueError(f"Expected at least 3 components, got {arr.shape[0]}")
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))


@dataclass(slots=True, frozen=True)
class TemperatureTint:
    """Correlated color temperature (Kelvin) and tint offset from the locus."""
    temperature: float
    tint: float

    def __iter__(self) -> Iterator[float]:
        return iter((self.temperature, self.tint))
