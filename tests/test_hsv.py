# -*- coding: utf-8 -*-
"""
Kiln: Firing the mathematics of white balance
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later
"""

import dataclasses
import math

import numpy as np
import pytest

from kiln_colorengine import hsv_to_rgb, rgb_to_hsv
from kiln_colortypes import HSV, RGB


def assert_rgb_close(actual: RGB, expected: RGB, tol: float = 1e-9) -> None:
    assert actual.r == pytest.approx(expected.r, abs=tol)
    assert actual.g == pytest.approx(expected.g, abs=tol)
    assert actual.b == pytest.approx(expected.b, abs=tol)


def test_achromatic_boundary():
    assert rgb_to_hsv(RGB(0.5, 0.5, 0.5)) == HSV(0.0, 0.0, 0.5)


def test_black_is_achromatic():
    assert rgb_to_hsv(RGB(0.0, 0.0, 0.0)) == HSV(0.0, 0.0, 0.0)


def test_pure_red_to_hsv():
    assert rgb_to_hsv(RGB(1.0, 0.0, 0.0)) == HSV(0.0, 1.0, 1.0)


def test_pure_red_from_hsv():
    assert hsv_to_rgb(HSV(0.0, 1.0, 1.0)) == RGB(1.0, 0.0, 0.0)


@pytest.mark.parametrize(
    "rgb, hue",
    [
        (RGB(0.0, 1.0, 0.0), 120.0),
        (RGB(0.0, 0.0, 1.0), 240.0),
        (RGB(1.0, 1.0, 0.0), 60.0),
        (RGB(0.0, 1.0, 1.0), 180.0),
        (RGB(1.0, 0.0, 1.0), 300.0),
    ],
)
def test_primary_and_secondary_hues(rgb, hue):
    hsv = rgb_to_hsv(rgb)
    assert hsv.h == pytest.approx(hue)
    assert hsv.s == pytest.approx(1.0)
    assert hsv.v == pytest.approx(1.0)


def test_red_sector_with_blue_above_green_wraps_into_range():
    hsv = rgb_to_hsv(RGB(1.0, 0.0, 0.5))
    assert hsv.h == pytest.approx(330.0)
    assert_rgb_close(hsv_to_rgb(hsv), RGB(1.0, 0.0, 0.5))


def test_saturation_and_value():
    hsv = rgb_to_hsv(RGB(0.8, 0.4, 0.2))
    assert hsv.v == pytest.approx(0.8)
    assert hsv.s == pytest.approx(0.75)
    assert hsv.h == pytest.approx(20.0)


def test_zero_saturation_gives_grey():
    assert hsv_to_rgb(HSV(200.0, 0.0, 0.3)) == RGB(0.3, 0.3, 0.3)


def test_inputs_are_clamped():
    # h=400 clamps to 360, which wraps to the red sector.
    assert_rgb_close(hsv_to_rgb(HSV(400.0, 1.0, 1.0)), RGB(1.0, 0.0, 0.0))
    assert_rgb_close(hsv_to_rgb(HSV(-30.0, 2.0, 1.5)), RGB(1.0, 0.0, 0.0))
    assert hsv_to_rgb(HSV(90.0, -1.0, 0.4)) == RGB(0.4, 0.4, 0.4)


@pytest.mark.parametrize(
    "hue, expected",
    [
        (30.0, RGB(1.0, 0.5, 0.0)),
        (90.0, RGB(0.5, 1.0, 0.0)),
        (150.0, RGB(0.0, 1.0, 0.5)),
        (210.0, RGB(0.0, 0.5, 1.0)),
        (270.0, RGB(0.5, 0.0, 1.0)),
        (330.0, RGB(1.0, 0.0, 0.5)),
    ],
)
def test_each_sector(hue, expected):
    assert_rgb_close(hsv_to_rgb(HSV(hue, 1.0, 1.0)), expected)


def test_nan_hue_falls_back_to_black():
    assert hsv_to_rgb(HSV(math.nan, 1.0, 1.0)) == RGB(0.0, 0.0, 0.0)


def test_roundtrip_random_colors():
    rng = np.random.default_rng(20260101)
    for r, g, b in rng.random((500, 3)):
        rgb = RGB(float(r), float(g), float(b))
        hsv = rgb_to_hsv(rgb)
        assert 0.0 <= hsv.h < 360.0 + 1e-9
        assert hsv.s > 0.0
        assert_rgb_close(hsv_to_rgb(hsv), rgb, tol=1e-6)


def test_values_are_immutable():
    hsv = HSV(10.0, 0.5, 0.5)
    with pytest.raises(dataclasses.FrozenInstanceError):
        hsv.h = 20.0  # type: ignore[misc]
