"""Tests for the batch renderer command line."""

import pytest
from PIL import Image

from mandelzoom.cli import main, parse_complex, parse_pair


class TestParsePair:
    def test_pairs(self):
        assert parse_pair("", ",", int) is None
        assert parse_pair("10,", ",", int) is None
        assert parse_pair(",10", ",", int) is None
        assert parse_pair("10,20", ",", int) == (10, 20)
        assert parse_pair("10,20xy", ",", int) is None
        assert parse_pair("0.5x", ",", float) is None
        assert parse_pair("0.5x1.5", "x", float) == (0.5, 1.5)

    def test_dimensions(self):
        assert parse_pair("1000x750", "x", int) == (1000, 750)
        assert parse_pair("1000X750", "x", int) is None
        assert parse_pair("10.5x750", "x", int) is None

    def test_splits_on_first_separator(self):
        assert parse_pair("1,2,3", ",", int) is None

    def test_rejects_whitespace_and_underscores(self):
        assert parse_pair(" 10,20", ",", int) is None
        assert parse_pair("10, 20", ",", int) is None
        assert parse_pair("10,20\n", ",", int) is None
        assert parse_pair("1_0x2_0", "x", int) is None
        assert parse_complex("1_000.5,0") is None


class TestParseComplex:
    def test_valid(self):
        assert parse_complex("1.25,-0.0625") == complex(1.25, -0.0625)
        assert parse_complex("-1.20,0.35") == complex(-1.20, 0.35)

    def test_invalid(self):
        assert parse_complex(",-0.0625") is None
        assert parse_complex("1.25") is None


class TestMain:
    def test_wrong_argument_count(self, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["mandelzoom-render", "out.png"])
        assert excinfo.value.code == 1

        err = capsys.readouterr().err
        assert "Usage:" in err
        assert "Example:" in err

    def test_renders_grayscale_image(self, tmp_path):
        output = tmp_path / "mandel.png"
        main(["mandelzoom-render", str(output), "40x30", "-1.20,0.35", "-1,0.20"])

        with Image.open(output) as image:
            assert image.mode == "L"
            assert image.size == (40, 30)

    def test_bad_dimensions(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(tmp_path / "m.png"), "40by30", "-1.20,0.35", "-1,0.20"])
        assert "image dimensions" in str(excinfo.value.code)
        assert not (tmp_path / "m.png").exists()

    def test_zero_dimensions(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(tmp_path / "m.png"), "0x30", "-1.20,0.35", "-1,0.20"])
        assert "positive" in str(excinfo.value.code)

    def test_bad_corner(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(tmp_path / "m.png"), "40x30", "-1.20;0.35", "-1,0.20"])
        assert "upper left" in str(excinfo.value.code)

        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(tmp_path / "m.png"), "40x30", "-1.20,0.35", "-1,"])
        assert "lower right" in str(excinfo.value.code)

    def test_inverted_corners(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(tmp_path / "m.png"), "40x30", "-1,0.20", "-1.20,0.35"])
        assert excinfo.value.code
        assert not (tmp_path / "m.png").exists()

    def test_unwritable_output(self, tmp_path):
        output = tmp_path / "missing" / "mandel.png"
        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(output), "8x6", "-1.20,0.35", "-1,0.20"])
        assert "error writing image file" in str(excinfo.value.code)

    @pytest.mark.parametrize("upper_left, lower_right", [
        ("-inf,1", "1,0"),
        ("-1,inf", "1,0"),
        ("-1,1", "nan,0"),
    ])
    def test_non_finite_corners(self, tmp_path, upper_left, lower_right):
        output = tmp_path / "m.png"
        with pytest.raises(SystemExit) as excinfo:
            main(["prog", str(output), "8x6", upper_left, lower_right])
        assert "finite" in str(excinfo.value.code)
        assert not output.exists()
