# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import math

import pytest

from kiln_colorengine import xy_to_xyz
from kiln_colortypes import HSV, RGB, Chromaticity, Tristimulus
from kiln_validation import (
    is_finite_result,
    validate_chromaticity,
    validate_rgb,
    validate_temperature,
    validate_tristimulus,
    validate_white_point,
)


def test_validators_return_their_argument():
    rgb = RGB(0.1, 0.2, 0.3)
    xy = Chromaticity(0.3, 0.3)
    xyz = Tristimulus(0.9, 1.0, 1.1)
    assert validate_rgb(rgb) is rgb
    assert validate_chromaticity(xy) is xy
    assert validate_tristimulus(xyz) is xyz
    assert validate_white_point(xy) is xy
    assert validate_white_point(xyz) is xyz
    assert validate_temperature(6500.0) == 6500.0


@pytest.mark.parametrize("rgb", [RGB(1.2, 0.0, 0.0), RGB(0.0, -0.1, 0.0), RGB(math.nan, 0.0, 0.0)])
def test_validate_rgb_rejects(rgb):
    with pytest.raises(ValueError):
        validate_rgb(rgb)


def test_validate_chromaticity_rejects_zero_y():
    with pytest.raises(ValueError, match="zero"):
        validate_chromaticity(Chromaticity(0.3, 0.0))
    with pytest.raises(ValueError):
        validate_chromaticity(Chromaticity(math.inf, 0.3))


def test_validate_tristimulus_rejects_zero_sum():
    with pytest.raises(ValueError):
        validate_tristimulus(Tristimulus(0.0, 0.0, 0.0))
    with pytest.raises(ValueError):
        validate_tristimulus(Tristimulus(1.0, math.nan, 1.0))


@pytest.mark.parametrize("temperature", [0.0, -100.0, math.nan, math.inf])
def test_validate_temperature_rejects(temperature):
    with pytest.raises(ValueError):
        validate_temperature(temperature)


def test_validate_temperature_strict_range():
    assert validate_temperature(1000.0) == 1000.0
    with pytest.raises(ValueError, match="table minimum"):
        validate_temperature(1000.0, strict_range=True)
    assert validate_temperature(2000.0, strict_range=True) == 2000.0


def test_validate_white_point():
    with pytest.raises(ValueError):
        validate_white_point(Tristimulus(0.95, 0.0, 1.09))
    with pytest.raises(TypeError):
        validate_white_point((0.95, 1.0, 1.09))  # type: ignore[arg-type]


def test_is_finite_result():
    assert is_finite_result(HSV(10.0, 0.5, 0.5))
    assert not is_finite_result(xy_to_xyz(Chromaticity(0.3, 0.0)))
