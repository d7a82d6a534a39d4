# core/card_compositor.py
"""
Lyric card compositor.

Renders selected lyric lines, song metadata and an optional cover thumbnail
onto a fixed-width, auto-height QImage, then encodes it as PNG.

Everything here is a pure function of its inputs: no clock, no randomness and
no I/O while drawing, so the same content rendered at the same scale gives
byte-identical PNG output.

Qt needs a QGuiApplication (or QApplication) instance before fonts can be
measured or drawn.
"""
from __future__ import annotations

import logging
import os
import re
import tempfile
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence, Tuple

from PySide6.QtCore import QBuffer, QByteArray, QIODevice, QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QFont, QFontMetricsF, QImage, QPainter, QPainterPath

from lyricard.core.color_extractor import get_text_color
from lyricard.core.models import BackgroundGradient, LyricLine

logger = logging.getLogger(__name__)

Measure = Callable[[str], float]

# (a) Latin letters/digits/apostrophes, (b) whitespace runs, (c) any single char.
# Rule (c) makes CJK (no inter-word spaces) break per character.
_TOKEN_RE = re.compile(r"[A-Za-z0-9'\u00C0-\u00D6\u00D8-\u00F6\u00F8-\u024F]+|\s+|.", re.DOTALL)
_UNSAFE_FILENAME_RE = re.compile(r'[\\/:*?"<>|\x00-\x1f]+')

MIN_SCALE = 1.0
MAX_SCALE = 3.0


class CardExportError(Exception):
    """Rendering, encoding or writing the card failed."""


@dataclass(frozen=True)
class CardConfig:
    width: int = 400
    padding: int = 32
    corner_radius: float = 16.0

    avatar_size: int = 56
    avatar_radius: float = 8.0
    header_text_gap: int = 14
    header_height: int = 120
    footer_height: int = 64
    footer_offset: int = 24

    font_family: str = ""
    title_font_size: int = 20
    subtitle_font_size: int = 13
    lyric_font_size: int = 18
    line_height_ratio: float = 1.3
    block_gap: int = 24
    text_align: str = "center"       # "center" | "left"
    text_color: str = "auto"         # "auto" | "white" | "black"

    # Translation layout is configured separately from the primary text.
    show_translation: bool = False
    translation_font_size: int = 14
    translation_line_height_ratio: float = 1.3
    translation_wrap_width: Optional[int] = None   # None -> content width
    translation_gap: int = 4

    min_height: int = 500
    max_height: int = 1600

    watermark: str = "Music Player"
    watermark_font_size: int = 12
    filename_suffix: str = "-card.png"

    @property
    def content_width(self) -> int:
        return self.width - 2 * self.padding


@dataclass(frozen=True)
class CardContent:
    lines: Tuple[LyricLine, ...]
    title: str
    subtitle: str
    gradient: BackgroundGradient
    avatar: Optional[bytes] = None


@dataclass(frozen=True)
class CardBlock:
    lines: Tuple[str, ...]
    translation_lines: Tuple[str, ...]
    y: float
    height: float


@dataclass(frozen=True)
class CardLayout:
    width: int
    height: int
    content_height: float       # before clamping
    blocks: Tuple[CardBlock, ...]


# ---------------------------------------------------------------------------
# Text wrapping
# ---------------------------------------------------------------------------

def tokenize(text: str) -> List[str]:
    return _TOKEN_RE.findall(text or "")


def wrap_text(text: str, max_width: float, measure: Measure) -> List[str]:
    """
    Greedy token wrap.

    A token is admitted while `current + token` fits, or while the line is
    still empty (so a single oversized token still gets its own line).
    """
    lines: List[str] = []
    current = ""

    for token in tokenize(text):
        candidate = current + token
        if not current or measure(candidate) <= max_width:
            current = candidate
            continue

        committed = current.rstrip()
        if committed:
            lines.append(committed)
        current = token.lstrip()

    tail = current.rstrip()
    if tail:
        lines.append(tail)
    return lines


# ---------------------------------------------------------------------------
# Fonts / measurement
# ---------------------------------------------------------------------------

def _font(config: CardConfig, pixel_size: int, bold: bool = False) -> QFont:
    font = QFont(config.font_family) if config.font_family else QFont()
    font.setPixelSize(max(1, int(pixel_size)))
    font.setBold(bold)
    font.setHintingPreference(QFont.HintingPreference.PreferNoHinting)
    return font


def qt_measure(font: QFont) -> Measure:
    fm = QFontMetricsF(font)
    return fm.horizontalAdvance


def resolve_scale_factor(device_pixel_ratio: Optional[float]) -> float:
    try:
        ratio = float(device_pixel_ratio or 1.0)
    except (TypeError, ValueError):
        ratio = 1.0
    return max(MIN_SCALE, min(MAX_SCALE, ratio))


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------

def compute_card_layout(
    content: CardContent,
    config: CardConfig,
    measure_lyric: Measure,
    measure_translation: Optional[Measure] = None,
    viewport_height: Optional[float] = None,
) -> CardLayout:
    """Pre-measurement pass: wrap every block and derive the card height."""
    lyric_lh = config.lyric_font_size * config.line_height_ratio
    trans_lh = config.translation_font_size * config.translation_line_height_ratio
    trans_width = config.translation_wrap_width or config.content_width
    measure_translation = measure_translation or measure_lyric

    blocks: List[CardBlock] = []
    y = float(config.header_height)

    for i, line in enumerate(content.lines):
        wrapped = tuple(wrap_text(line.text, config.content_width, measure_lyric))
        height = len(wrapped) * lyric_lh

        wrapped_tr: Tuple[str, ...] = ()
        if config.show_translation and line.translation:
            wrapped_tr = tuple(wrap_text(line.translation, trans_width, measure_translation))
            if wrapped_tr:
                height += config.translation_gap + len(wrapped_tr) * trans_lh

        blocks.append(CardBlock(lines=wrapped, translation_lines=wrapped_tr, y=y, height=height))
        y += height
        if i < len(content.lines) - 1:
            y += config.block_gap

    content_height = y + config.footer_height

    upper = float(config.max_height)
    if viewport_height is not None and viewport_height > 0:
        upper = min(upper, float(viewport_height))
    lower = min(float(config.min_height), upper)
    height = int(round(max(lower, min(content_height, upper))))

    return CardLayout(width=config.width, height=height, content_height=content_height, blocks=tuple(blocks))


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------

def _rounded_path(rect: QRectF, radius: float) -> QPainterPath:
    path = QPainterPath()
    if radius > 0:
        path.addRoundedRect(rect, radius, radius)
    else:
        path.addRect(rect)
    return path


def _text_color(config: CardConfig, gradient: BackgroundGradient) -> QColor:
    choice = config.text_color
    if choice == "auto":
        choice = get_text_color(gradient.via)
    return QColor(17, 17, 17) if choice == "black" else QColor(255, 255, 255)


def _with_alpha(color: QColor, alpha: float) -> QColor:
    c = QColor(color)
    c.setAlphaF(alpha)
    return c


def _baseline(top: float, line_height: float, fm: QFontMetricsF) -> float:
    return top + (line_height - (fm.ascent() + fm.descent())) / 2 + fm.ascent()


def _draw_avatar(painter: QPainter, avatar: bytes, config: CardConfig) -> bool:
    image = QImage.fromData(avatar)
    if image.isNull() or image.width() <= 0 or image.height() <= 0:
        logger.warning("Cover image could not be decoded; drawing card without it")
        return False

    box = float(config.avatar_size)
    x = y = float(config.padding)
    scale = max(box / image.width(), box / image.height())
    dw = image.width() * scale
    dh = image.height() * scale

    painter.save()
    painter.setClipPath(_rounded_path(QRectF(x, y, box, box), config.avatar_radius), Qt.ClipOperation.IntersectClip)
    painter.drawImage(QRectF(x + (box - dw) / 2, y + (box - dh) / 2, dw, dh), image)
    painter.restore()
    return True


def _draw_lines(
    painter: QPainter,
    lines: Sequence[str],
    top: float,
    line_height: float,
    font: QFont,
    color: QColor,
    config: CardConfig,
) -> float:
    fm = QFontMetricsF(font)
    painter.setFont(font)
    painter.setPen(color)
    for text in lines:
        if config.text_align == "left":
            x = float(config.padding)
        else:
            x = config.padding + (config.content_width - fm.horizontalAdvance(text)) / 2
        painter.drawText(QPointF(x, _baseline(top, line_height, fm)), text)
        top += line_height
    return top


def render_card(
    content: CardContent,
    config: CardConfig = CardConfig(),
    scale: float = 1.0,
    viewport_height: Optional[float] = None,
) -> QImage:
    """(content, config, scale) -> bitmap."""
    scale = resolve_scale_factor(scale)

    lyric_font = _font(config, config.lyric_font_size)
    trans_font = _font(config, config.translation_font_size)
    layout = compute_card_layout(
        content,
        config,
        qt_measure(lyric_font),
        qt_measure(trans_font),
        viewport_height=viewport_height,
    )

    image = QImage(
        int(round(layout.width * scale)),
        int(round(layout.height * scale)),
        QImage.Format.Format_ARGB32_Premultiplied,
    )
    if image.isNull():
        raise CardExportError(f"Cannot allocate {layout.width}x{layout.height}@{scale} surface")
    image.fill(Qt.GlobalColor.transparent)

    painter = QPainter(image)
    try:
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.setRenderHint(QPainter.RenderHint.TextAntialiasing)
        painter.setRenderHint(QPainter.RenderHint.SmoothPixmapTransform)
        painter.scale(scale, scale)

        # Fill and clip share one path so their edges line up exactly.
        card_path = _rounded_path(QRectF(0, 0, layout.width, layout.height), config.corner_radius)
        painter.fillPath(card_path, QColor(*content.gradient.via))
        painter.setClipPath(card_path)

        if content.avatar:
            _draw_avatar(painter, content.avatar, config)

        text_color = _text_color(config, content.gradient)
        text_x = float(config.padding + config.avatar_size + config.header_text_gap)
        text_width = config.width - text_x - config.padding

        title_font = _font(config, config.title_font_size, bold=True)
        title_fm = QFontMetricsF(title_font)
        painter.setFont(title_font)
        painter.setPen(text_color)
        painter.drawText(
            QPointF(text_x, config.padding + title_fm.ascent()),
            title_fm.elidedText(content.title or "", Qt.TextElideMode.ElideRight, text_width),
        )

        sub_font = _font(config, config.subtitle_font_size)
        sub_fm = QFontMetricsF(sub_font)
        painter.setFont(sub_font)
        painter.setPen(_with_alpha(text_color, 0.8))
        painter.drawText(
            QPointF(text_x, config.padding + title_fm.height() + 6 + sub_fm.ascent()),
            sub_fm.elidedText(content.subtitle or "", Qt.TextElideMode.ElideRight, text_width),
        )

        lyric_lh = config.lyric_font_size * config.line_height_ratio
        trans_lh = config.translation_font_size * config.translation_line_height_ratio
        for block in layout.blocks:
            y = _draw_lines(painter, block.lines, block.y, lyric_lh, lyric_font, text_color, config)
            if block.translation_lines:
                _draw_lines(
                    painter,
                    block.translation_lines,
                    y + config.translation_gap,
                    trans_lh,
                    trans_font,
                    _with_alpha(text_color, 0.7),
                    config,
                )

        wm_font = _font(config, config.watermark_font_size)
        wm_fm = QFontMetricsF(wm_font)
        painter.setFont(wm_font)
        painter.setPen(_with_alpha(text_color, 0.6))
        painter.drawText(
            QPointF((layout.width - wm_fm.horizontalAdvance(config.watermark)) / 2, layout.height - config.footer_offset),
            config.watermark,
        )
    finally:
        painter.end()

    return image


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def encode_png(image: QImage) -> bytes:
    data = QByteArray()
    buf = QBuffer(data)
    buf.open(QIODevice.OpenModeFlag.WriteOnly)
    try:
        ok = image.save(buf, "PNG")
    finally:
        buf.close()
    if not ok:
        raise CardExportError("PNG encoding failed")
    return bytes(data.data())


def sanitize_filename(title: Optional[str]) -> str:
    s = _UNSAFE_FILENAME_RE.sub("_", (title or "").strip())
    return s.strip(" ._")


def card_filename(title: Optional[str], config: CardConfig = CardConfig()) -> str:
    return (sanitize_filename(title) or "lyrics") + config.filename_suffix


def write_card(png: bytes, directory: str, filename: str) -> str:
    """
    Atomically write the PNG into `directory`.

    The bytes go to a temp file first, so a failure never leaves a partial
    card behind.
    """
    target = os.path.join(directory, filename)
    tmp_path = None
    try:
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".card-", suffix=".tmp", dir=directory)
        with os.fdopen(fd, "wb") as f:
            f.write(png)
        os.replace(tmp_path, target)
        tmp_path = None
    except OSError as e:
        logger.error("Failed to write card %s: %s", target, e)
        raise CardExportError(f"Cannot write {target}: {e}") from e
    finally:
        if tmp_path and os.path.exists(tmp_path):
            os.remove(tmp_path)

    logger.info("Lyric card saved to %s", target)
    return target


def render_card_png(
    content: CardContent,
    config: CardConfig = CardConfig(),
    scale: float = 1.0,
    viewport_height: Optional[float] = None,
) -> bytes:
    try:
        return encode_png(render_card(content, config, scale=scale, viewport_height=viewport_height))
    except CardExportError:
        raise
    except Exception as e:
        logger.exception("Card rendering failed")
        raise CardExportError(str(e)) from e
