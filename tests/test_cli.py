"""Tests for the term256_map command line."""

import numpy as np
import pytest

import term256_map
from term256.core_types import InvalidInputError
from term256.image_io import load_image_rgba, save_image_rgba


class TestParseColour:
    def test_hex(self):
        assert term256_map.parse_colour(["#ff8000"]) == (255, 128, 0)
        assert term256_map.parse_colour(["f80"]) == (255, 136, 0)

    def test_decimal(self):
        assert term256_map.parse_colour(["1", "2", "3"]) == (1, 2, 3)

    @pytest.mark.parametrize(
        "tokens", [["1", "2"], ["1", "2", "x"], ["1", "2", "300"], ["#ggg000"]]
    )
    def test_rejected(self, tokens):
        with pytest.raises(InvalidInputError):
            term256_map.parse_colour(tokens)


class TestMatchCommand:
    def test_single_strategy(self, capsys):
        term256_map.main(["match", "255", "0", "0", "--strategy", "euclidean", "--plain"])
        out = capsys.readouterr().out
        assert "#ff0000" in out
        assert "euclidean" in out
        assert " 196 " in out
        assert "\033[" not in out

    def test_all_strategies_with_swatches(self, capsys):
        term256_map.main(["match", "#808080"])
        out = capsys.readouterr().out
        for name in ("analytic", "euclidean", "perceptual"):
            assert name in out
        assert "\033[48;5;244m" in out
        assert "\033[48;2;128;128;128m" in out

    def test_exact_grey_flag(self, capsys):
        term256_map.main(
            ["match", "255", "255", "255", "--strategy", "analytic", "--plain", "--exact-grey"]
        )
        assert " 231 " in capsys.readouterr().out

    def test_invalid_channel_exits_2(self, capsys):
        with pytest.raises(SystemExit) as exc:
            term256_map.main(["match", "300", "0", "0"])
        assert exc.value.code == 2
        assert "[error]" in capsys.readouterr().err


class TestGridCommand:
    def test_line_count(self, capsys):
        term256_map.main(["grid", "--strategy", "analytic"])
        lines = capsys.readouterr().out.splitlines()
        swatch_lines = [ln for ln in lines if ln.startswith("\033[48;5;")]
        # 16^3 cube samples at 128 per line, plus the grey sweep.
        assert len(swatch_lines) == 16**3 // 128 + 1

    def test_truecolour(self, capsys):
        term256_map.main(["grid", "--truecolour"])
        out = capsys.readouterr().out
        assert "\033[48;2;240;240;240m" in out
        assert "\033[48;5;" not in out


class TestImageCommand:
    def test_writes_default_output(self, tmp_path, capsys):
        rgb = np.array([[[255, 0, 0], [10, 10, 10]]], dtype=np.uint8)
        alpha = np.array([[255, 255]], dtype=np.uint8)
        src = save_image_rgba(tmp_path / "in.png", rgb, alpha)

        term256_map.main(["image", str(src), "--strategy", "euclidean", "--workers", "1"])

        out_path = tmp_path / "in_256.png"
        assert out_path.exists()
        rgb2, alpha2 = load_image_rgba(out_path)
        assert rgb2[0, 0].tolist() == [255, 0, 0]
        assert rgb2[0, 1].tolist() == [8, 8, 8]
        assert np.array_equal(alpha2, alpha)
        assert "Saved" in capsys.readouterr().out

    def test_missing_file_exits_2(self, tmp_path):
        with pytest.raises(SystemExit) as exc:
            term256_map.main(["image", str(tmp_path / "nope.png")])
        assert exc.value.code == 2

    def test_unreadable_image_exits_2(self, tmp_path, capsys):
        bogus = tmp_path / "x.png"
        bogus.write_text("plain text, not a PNG")
        with pytest.raises(SystemExit) as exc:
            term256_map.main(["image", str(bogus), "--strategy", "euclidean"])
        assert exc.value.code == 2
        assert "[error]" in capsys.readouterr().err

    def test_reports_palette_entries_used(self, tmp_path, capsys):
        rgb = np.array([[[255, 0, 0], [255, 0, 0], [0, 0, 0]]], dtype=np.uint8)
        alpha = np.array([[255, 255, 0]], dtype=np.uint8)
        src = save_image_rgba(tmp_path / "two.png", rgb, alpha)
        term256_map.main(["image", str(src), "--strategy", "euclidean", "--workers", "1"])
        assert "Palette entries: 1" in capsys.readouterr().out
