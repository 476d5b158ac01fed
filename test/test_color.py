# test/test_color.py
import itertools

import numpy as np
import pytest

from visuaid.utils.color import (
    delta_e2000, hsv_to_rgb, hsv_to_rgb_array, hue_delta, rgb_to_hsv,
    rgb_to_hsv_array, rgb_to_lab,
)

GRID = np.linspace(0.0, 1.0, 6)


def test_rgb_to_hsv_primaries():
    assert rgb_to_hsv(1, 0, 0) == pytest.approx((0.0, 1.0, 1.0))
    assert rgb_to_hsv(0, 1, 0) == pytest.approx((120.0, 1.0, 1.0))
    assert rgb_to_hsv(0, 0, 1) == pytest.approx((240.0, 1.0, 1.0))
    assert rgb_to_hsv(1, 0, 0.5).h == pytest.approx(330.0)


def test_rgb_to_hsv_black_has_zero_saturation():
    assert rgb_to_hsv(0, 0, 0) == (0.0, 0.0, 0.0)


def test_rgb_to_hsv_clamps_out_of_range_input():
    h, s, v = rgb_to_hsv(1.5, -0.2, 0.5)
    assert 0.0 <= h < 360.0
    assert 0.0 <= s <= 1.0
    assert 0.0 <= v <= 1.0


def test_hsv_roundtrip_over_grid():
    for r, g, b in itertools.product(GRID, repeat=3):
        hsv = rgb_to_hsv(r, g, b)
        assert 0.0 <= hsv.h < 360.0
        back = hsv_to_rgb(*hsv)
        assert back == pytest.approx((r, g, b), abs=1e-9)


def test_vectorised_hsv_matches_scalar():
    pts = np.array(list(itertools.product(GRID, repeat=3)))
    hsv = rgb_to_hsv_array(pts)
    for p, row in zip(pts, hsv):
        assert tuple(row) == pytest.approx(tuple(rgb_to_hsv(*p)), abs=1e-9)
    assert hsv_to_rgb_array(hsv) == pytest.approx(pts, abs=1e-9)


def test_rgb_to_lab_reference_values():
    assert rgb_to_lab(1, 1, 1) == pytest.approx((100.0, 0.0, 0.0), abs=0.05)
    assert rgb_to_lab(0, 0, 0) == pytest.approx((0.0, 0.0, 0.0), abs=1e-9)
    assert rgb_to_lab(1, 0, 0) == pytest.approx((53.24, 80.09, 67.20), abs=0.1)


def test_hue_delta_wraps():
    assert hue_delta(355.0, 5.0) == pytest.approx(10.0)
    assert hue_delta(5.0, 355.0) == pytest.approx(-10.0)
    assert hue_delta(90.0, 270.0) == pytest.approx(180.0)


@pytest.mark.parametrize("lab1, lab2, expected", [
    ((50.0, 2.6772, -79.7751), (50.0, 0.0, -82.7485), 2.0425),
    ((50.0, 0.0, 0.0), (50.0, -1.0, 2.0), 2.3669),
    ((50.0, 2.5, 0.0), (73.0, 25.0, -18.0), 27.1492),
])
def test_delta_e2000_reference_pairs(lab1, lab2, expected):
    assert delta_e2000(lab1, lab2) == pytest.approx(expected, abs=1e-3)


def test_delta_e2000_identity_and_symmetry():
    rng = np.random.default_rng(7)
    labs = [rgb_to_lab(*c) for c in rng.random((25, 3))]
    for a in labs:
        assert delta_e2000(a, a) == 0.0
    for a, b in itertools.combinations(labs, 2):
        assert delta_e2000(a, b) == pytest.approx(delta_e2000(b, a), rel=1e-9, abs=1e-9)


def test_delta_e2000_achromatic_pair_is_lightness_only():
    # Con croma 0 el tono no interviene
    assert delta_e2000((40.0, 0.0, 0.0), (60.0, 0.0, 0.0)) > 0
    assert delta_e2000((50.0, 0.0, 0.0), (50.0, 1e-9, 0.0)) == pytest.approx(0.0, abs=1e-6)


def test_hue_stays_below_360_for_tiny_negative_hue():
    rgb = (1.0, 0.0, 1e-17)
    h_scalar = rgb_to_hsv(*rgb).h
    h_array = rgb_to_hsv_array(np.array([rgb]))[0, 0]
    assert 0.0 <= h_scalar < 360.0
    assert 0.0 <= h_array < 360.0
    assert h_array == pytest.approx(h_scalar)
