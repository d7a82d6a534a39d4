# core/color_extractor.py
from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Literal

from PIL import Image, UnidentifiedImageError

from lyricard.core.models import RGB, BackgroundGradient, ColorVariations, ExtractedColors

logger = logging.getLogger(__name__)

HSL = tuple[float, float, float]

# Hue band edges [0,30,60,120,180,240,300,360)
_HUE_BANDS = (
    (0, 30, "red"),
    (30, 60, "orange"),
    (60, 120, "green"),
    (120, 180, "emerald"),
    (180, 240, "blue"),
    (240, 300, "purple"),
    (300, 360, "pink"),
)


class ColorExtractionError(Exception):
    """The source image could not be decoded or quantized."""


def rgb_to_hsl(r: float, g: float, b: float) -> HSL:
    """RGB 0-255 -> (h 0-360, s 0-100, l 0-100)."""
    r, g, b = r / 255, g / 255, b / 255
    mx = max(r, g, b)
    mn = min(r, g, b)
    l = (mx + mn) / 2

    if mx == mn:
        return 0.0, 0.0, l * 100

    d = mx - mn
    s = d / (2 - mx - mn) if l > 0.5 else d / (mx + mn)

    if mx == r:
        h = (g - b) / d + (6 if g < b else 0)
    elif mx == g:
        h = (b - r) / d + 2
    else:
        h = (r - g) / d + 4
    h /= 6

    return h * 360, s * 100, l * 100


def _hue_to_rgb(p: float, q: float, t: float) -> float:
    if t < 0:
        t += 1
    if t > 1:
        t -= 1
    if t < 1 / 6:
        return p + (q - p) * 6 * t
    if t < 1 / 2:
        return q
    if t < 2 / 3:
        return p + (q - p) * (2 / 3 - t) * 6
    return p


def hsl_to_rgb(h: float, s: float, l: float) -> RGB:
    """(h 0-360, s 0-100, l 0-100) -> RGB 0-255, rounded."""
    h, s, l = h / 360, s / 100, l / 100

    if s == 0:
        v = round(l * 255)
        return v, v, v

    q = l * (1 + s) if l < 0.5 else l + s - l * s
    p = 2 * l - q

    r = _hue_to_rgb(p, q, h + 1 / 3)
    g = _hue_to_rgb(p, q, h)
    b = _hue_to_rgb(p, q, h - 1 / 3)
    return round(r * 255), round(g * 255), round(b * 255)


def generate_color_variations(rgb: RGB) -> ColorVariations:
    h, s, l = rgb_to_hsl(*rgb)
    return ColorVariations(
        darker=hsl_to_rgb(h, min(s + 10, 100), max(l - 20, 10)),
        lighter=hsl_to_rgb(h, max(s - 10, 0), min(l + 15, 85)),
        complementary=hsl_to_rgb((h + 180) % 360, s, l),
    )


def _rgb_css(rgb: RGB) -> str:
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"


def _gradient_style(from_color: RGB, via: RGB, to: RGB) -> str:
    # 135deg: top-left -> bottom-right
    return (
        "background: qlineargradient(x1:0, y1:0, x2:1, y2:1, "
        f"stop:0 {_rgb_css(from_color)}, stop:0.5 {_rgb_css(via)}, stop:1 {_rgb_css(to)});"
    )


def make_gradient(from_color: RGB, via: RGB, to: RGB) -> BackgroundGradient:
    return BackgroundGradient(from_color=from_color, via=via, to=to, style=_gradient_style(from_color, via, to))


def generate_background_gradient(colors: ExtractedColors) -> BackgroundGradient:
    dominant = tuple(int(c) for c in colors.dominant)
    variations = generate_color_variations(dominant)
    return make_gradient(variations.darker, dominant, variations.lighter)


# Used whenever a cover is missing or cannot be decoded.
FALLBACK_GRADIENT = make_gradient((30, 27, 75), (49, 46, 129), (55, 48, 163))


@dataclass(frozen=True)
class PaletteClass:
    name: str                          # hue band, e.g. "purple"
    shades: tuple[str, str, str]       # base, mid tone, highlight

    def classes(self) -> str:
        base, mid, hi = self.shades
        return f"from-{self.name}-{base} via-{self.name}-{mid} to-{self.name}-{hi}"


def gradient_class_name(colors: ExtractedColors) -> PaletteClass:
    """Coarse named palette for the dominant color."""
    h, _s, l = rgb_to_hsl(*colors.dominant)

    name = "purple"
    for lo, hi, band in _HUE_BANDS:
        if lo <= h < hi:
            name = band
            break

    if l < 30:
        shades = ("900", "800", "700")
    elif l < 50:
        shades = ("800", "700", "600")
    elif l < 70:
        shades = ("700", "600", "500")
    else:
        shades = ("600", "500", "400")

    return PaletteClass(name=name, shades=shades)


def get_text_color(rgb: RGB) -> Literal["white", "black"]:
    r, g, b = rgb
    luminance = (0.299 * r + 0.587 * g + 0.114 * b) / 255
    return "black" if luminance > 0.5 else "white"


def extract_colors(image_bytes: bytes, palette_size: int = 5, max_side: int = 256) -> ExtractedColors:
    """
    Dominant color + palette via Pillow median-cut quantization.

    The palette is ordered by pixel population; the dominant color is its
    first entry.
    """
    if not image_bytes:
        raise ColorExtractionError("empty image data")

    try:
        with Image.open(io.BytesIO(image_bytes)) as src:
            img = src.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as e:
        raise ColorExtractionError(f"Failed to load image: {e}") from e

    img.thumbnail((max_side, max_side))
    quantized = img.quantize(colors=max(1, int(palette_size)), method=Image.Quantize.MEDIANCUT)

    raw_palette = quantized.getpalette() or []
    counts = sorted(quantized.getcolors() or [], key=lambda item: (-item[0], item[1]))

    palette: list[RGB] = []
    for _count, idx in counts:
        rgb = tuple(raw_palette[idx * 3: idx * 3 + 3])
        if len(rgb) == 3:
            palette.append(rgb)

    if not palette:
        raise ColorExtractionError("quantizer returned no colors")

    logger.debug("Extracted %d palette colors, dominant=%s", len(palette), palette[0])
    return ExtractedColors(dominant=palette[0], palette=tuple(palette))
