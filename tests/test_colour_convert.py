"""Tests for term256.colour_convert — sRGB/XYZ/Lab conversion and CIEDE2000."""

import numpy as np
import pytest

from term256.colour_convert import (
    delta_e2000,
    rgb_to_lab,
    rgb_to_lab_batch,
    rgb_to_xyz,
    xyz_to_lab,
)
from term256.core_types import InvalidInputError


class TestRgbToXyz:
    def test_white_is_exact_d65(self):
        assert rgb_to_xyz(255, 255, 255) == (95.047, 100.0, 108.883)

    def test_black_is_origin(self):
        assert rgb_to_xyz(0, 0, 0) == (0.0, 0.0, 0.0)

    def test_rounded_to_four_decimals(self):
        for rgb in [(12, 200, 99), (1, 2, 3), (250, 128, 7)]:
            for v in rgb_to_xyz(*rgb):
                assert round(v, 4) == pytest.approx(v, abs=1e-12)

    def test_pure_red(self):
        X, Y, Z = rgb_to_xyz(255, 0, 0)
        assert X == pytest.approx(41.2456, abs=1e-4)
        assert Y == pytest.approx(21.2673, abs=1e-4)
        assert Z == pytest.approx(1.9334, abs=1e-4)

    def test_linear_segment_below_threshold(self):
        # 10/255 is below 0.04045, so the decode is linear.
        _, Y, _ = rgb_to_xyz(10, 10, 10)
        expected = (10 / 255.0) / 12.92 * 100.0
        assert Y == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize(
        "rgb", [(256, 0, 0), (0, -1, 0), (0, 0, 1000), (1.5, 0, 0), (True, 0, 0)]
    )
    def test_out_of_range_rejected(self, rgb):
        with pytest.raises(InvalidInputError):
            rgb_to_xyz(*rgb)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            rgb_to_xyz(0, 0, 300)


class TestXyzToLab:
    def test_origin(self):
        assert xyz_to_lab(0.0, 0.0, 0.0) == (0.0, 0.0, 0.0)

    def test_white(self):
        L, a, b = xyz_to_lab(95.047, 100.0, 108.883)
        assert L == pytest.approx(100.0, abs=1e-9)
        assert a == pytest.approx(0.0, abs=1e-9)
        assert b == pytest.approx(0.0, abs=1e-9)

    def test_srgb_primaries(self):
        assert rgb_to_lab(255, 0, 0) == pytest.approx((53.2408, 80.0925, 67.2032), abs=0.05)
        assert rgb_to_lab(0, 255, 0) == pytest.approx((87.7347, -86.1827, 83.1793), abs=0.05)
        assert rgb_to_lab(0, 0, 255) == pytest.approx((32.2970, 79.1875, -107.8602), abs=0.05)

    def test_greys_are_neutral(self):
        for v in (8, 95, 128, 238):
            _, a, b = rgb_to_lab(v, v, v)
            assert abs(a) < 0.01
            assert abs(b) < 0.01


class TestRgbToLabBatch:
    def test_matches_scalar_path(self):
        rows = [(0, 0, 0), (255, 255, 255), (255, 0, 0), (10, 20, 30), (95, 135, 175)]
        lab = rgb_to_lab_batch(np.array(rows, dtype=np.uint8))
        assert lab.shape == (5, 3)
        for row, expected in zip(lab, rows):
            assert tuple(row) == pytest.approx(rgb_to_lab(*expected), abs=1e-9)

    def test_preserves_leading_shape(self):
        img = np.zeros((2, 3, 3), dtype=np.uint8)
        assert rgb_to_lab_batch(img).shape == (2, 3, 3)

    def test_rejects_non_uint8(self):
        with pytest.raises(InvalidInputError):
            rgb_to_lab_batch(np.zeros((4, 3), dtype=np.float32))


# Sharma, Wu & Dalal (2005) supplementary test data.
SHARMA_PAIRS = [
    ((50.0000, 2.6772, -79.7751), (50.0000, 0.0000, -82.7485), 2.0425),
    ((50.0000, 3.1571, -77.2803), (50.0000, 0.0000, -82.7485), 2.8615),
    ((50.0000, 2.8361, -74.0200), (50.0000, 0.0000, -82.7485), 3.4412),
    ((50.0000, 0.0000, 0.0000), (50.0000, -1.0000, 2.0000), 2.3669),
    ((50.0000, -1.0000, 2.0000), (50.0000, 0.0000, 0.0000), 2.3669),
    ((50.0000, 2.5000, 0.0000), (73.0000, 25.0000, -18.0000), 27.1492),
    ((50.0000, 2.5000, 0.0000), (61.0000, -5.0000, 29.0000), 22.8977),
    ((50.0000, 2.5000, 0.0000), (56.0000, -27.0000, -3.0000), 31.9030),
    ((50.0000, 2.5000, 0.0000), (58.0000, 24.0000, 15.0000), 19.4535),
    ((60.2574, -34.0099, 36.2677), (60.4626, -34.1751, 39.4387), 1.2644),
    ((22.7233, 20.0904, -46.6940), (23.0331, 14.9730, -42.5619), 2.0373),
]


class TestDeltaE2000:
    @pytest.mark.parametrize("lab1,lab2,expected", SHARMA_PAIRS)
    def test_published_pairs(self, lab1, lab2, expected):
        assert delta_e2000(lab1, lab2) == pytest.approx(expected, abs=1e-4)

    @pytest.mark.parametrize(
        "lab", [(0.0, 0.0, 0.0), (50.0, 2.5, 0.0), (100.0, -80.0, 90.0), (35.0, 0.0, -60.0)]
    )
    def test_identity_is_zero(self, lab):
        assert delta_e2000(lab, lab) == 0.0

    @pytest.mark.parametrize(
        "lab1,lab2",
        [
            ((53.24, 80.09, 67.20), (87.73, -86.18, 83.18)),
            ((20.0, 10.0, -30.0), (25.0, -5.0, 12.0)),
            ((70.0, 40.0, 40.0), (68.0, 45.0, 30.0)),
        ],
    )
    def test_symmetric_for_generic_pairs(self, lab1, lab2):
        assert abs(delta_e2000(lab1, lab2) - delta_e2000(lab2, lab1)) < 1e-9

    def test_non_negative(self):
        assert delta_e2000((10.0, 1.0, 1.0), (90.0, -1.0, -1.0)) > 0.0

    def test_lightness_only_difference(self):
        # Neutral pair: only the lightness term contributes.
        d = delta_e2000((50.0, 0.0, 0.0), (60.0, 0.0, 0.0))
        L_dev2 = (55.0 - 50.0) ** 2
        S_l = 1.0 + 0.015 * L_dev2 / (20.0 + L_dev2) ** 0.5
        assert d == pytest.approx(10.0 / S_l, abs=1e-12)
