"""Tests for color extraction and the HSL-based gradient derivation."""

import pytest

from lyricard.core.color_extractor import (
    FALLBACK_GRADIENT,
    ColorExtractionError,
    extract_colors,
    generate_background_gradient,
    generate_color_variations,
    get_text_color,
    gradient_class_name,
    hsl_to_rgb,
    rgb_to_hsl,
)
from lyricard.core.models import ExtractedColors


def _close(a, b, tol=1):
    return all(abs(x - y) <= tol for x, y in zip(a, b))


class TestHsl:
    def test_primaries(self):
        assert rgb_to_hsl(255, 0, 0) == pytest.approx((0, 100, 50))
        assert rgb_to_hsl(0, 0, 255) == pytest.approx((240, 100, 50))

    def test_gray_has_no_saturation(self):
        h, s, l = rgb_to_hsl(128, 128, 128)

        assert (h, s) == (0, 0)
        assert l == pytest.approx(50.196, abs=0.01)

    def test_hsl_to_rgb(self):
        assert hsl_to_rgb(0, 100, 50) == (255, 0, 0)
        assert hsl_to_rgb(120, 100, 50) == (0, 255, 0)
        assert hsl_to_rgb(240, 100, 50) == (0, 0, 255)

    def test_zero_saturation_is_gray(self):
        assert hsl_to_rgb(200, 0, 50) == (128, 128, 128)

    @pytest.mark.parametrize("rgb", [(49, 46, 129), (200, 120, 30), (12, 250, 99)])
    def test_round_trip_is_close(self, rgb):
        assert _close(hsl_to_rgb(*rgb_to_hsl(*rgb)), rgb)

    @pytest.mark.parametrize("hsl", [(0, 0, 0), (0, 0, 100), (0, 100, 50)])
    def test_hsl_round_trip_extremes(self, hsl):
        assert rgb_to_hsl(*hsl_to_rgb(*hsl)) == pytest.approx(hsl)


class TestVariations:
    def test_red(self):
        v = generate_color_variations((255, 0, 0))

        assert v.darker == (153, 0, 0)
        assert v.lighter == (246, 85, 85)
        assert v.complementary == (0, 255, 255)

    def test_lightness_clamped(self):
        v = generate_color_variations((255, 255, 255))

        assert v.lighter == (217, 217, 217)

    def test_gradient_uses_dominant_as_via(self):
        colors = ExtractedColors(dominant=(255, 0, 0), palette=((255, 0, 0),))
        g = generate_background_gradient(colors)

        assert g.via == (255, 0, 0)
        assert g.from_color == (153, 0, 0)
        assert g.to == (246, 85, 85)
        assert "qlineargradient" in g.style
        assert "stop:0.5 rgb(255, 0, 0)" in g.style
        assert g.style == (
            "background: qlineargradient(x1:0, y1:0, x2:1, y2:1, "
            "stop:0 rgb(153, 0, 0), stop:0.5 rgb(255, 0, 0), stop:1 rgb(246, 85, 85));"
        )

    def test_fallback_gradient(self):
        assert FALLBACK_GRADIENT.from_color == (30, 27, 75)
        assert FALLBACK_GRADIENT.via == (49, 46, 129)
        assert FALLBACK_GRADIENT.to == (55, 48, 163)


class TestClassification:
    def test_dark_red(self):
        pc = gradient_class_name(ExtractedColors(dominant=(128, 0, 0), palette=()))

        assert pc.name == "red"
        assert pc.shades == ("900", "800", "700")

    def test_mid_blue(self):
        pc = gradient_class_name(ExtractedColors(dominant=(0, 128, 255), palette=()))

        assert pc.name == "blue"
        assert pc.classes() == "from-blue-700 via-blue-600 to-blue-500"

    def test_text_color(self):
        assert get_text_color((255, 255, 255)) == "black"
        assert get_text_color((0, 0, 0)) == "white"
        assert get_text_color((128, 128, 128)) == "black"
        assert get_text_color((49, 46, 129)) == "white"

    def test_text_color_at_exact_half_luminance_is_white(self):
        assert get_text_color((127.5, 127.5, 127.5)) == "white"


class TestExtractColors:
    def test_dominant_is_most_populated(self, make_png):
        data = make_png(color=(255, 0, 0), size=(32, 32), stripe=((0, 0, 255), 4))
        colors = extract_colors(data)

        assert _close(colors.dominant, (255, 0, 0), tol=8)
        assert colors.palette[0] == colors.dominant
        assert len(colors.palette) <= 5

    def test_empty_bytes(self):
        with pytest.raises(ColorExtractionError):
            extract_colors(b"")

    def test_undecodable_bytes(self):
        with pytest.raises(ColorExtractionError):
            extract_colors(b"definitely not an image")

    def test_oversized_image_is_an_extraction_error(self, oversized_png):
        with pytest.raises(ColorExtractionError):
            extract_colors(oversized_png)
