from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from PIL import Image, ImageDraw, ImageFont, UnidentifiedImageError

from .constants import CANVAS_SIZE
from .layout import DrawInstruction, FontTier, RenderPlan

logger = logging.getLogger(__name__)

HAN_FONT_FILE = "BIZ-UDGothicR.ttc"
LATIN_FONT_FILE = "VCR_OSD_MONO_1.001.ttf"
PLUS_ICON_FILE = "plus.png"
MINUS_ICON_FILE = "minus.png"
ASSET_FILES = (HAN_FONT_FILE, LATIN_FONT_FILE, PLUS_ICON_FILE, MINUS_ICON_FILE)

HAN_FONT_SIZES: dict[FontTier, int] = {
    "large": 40,
    "medium": 36,
    "small": 32,
    "pico": 28,
}
LATIN_FONT_SIZES: dict[FontTier, int] = {
    "large": 29,
    "small": 24,
}

SHADOW_OFFSET = 4
SHADOW_COLOR = (0, 0, 0, 255)
TEXT_COLOR = (255, 255, 255, 255)


class AssetUnavailable(RuntimeError):
    """A font or icon shipped with the deployment could not be loaded."""


@dataclass(frozen=True, slots=True)
class FontSet:
    han: Mapping[FontTier, ImageFont.FreeTypeFont]
    latin: Mapping[FontTier, ImageFont.FreeTypeFont]

    def font_for(self, instruction: DrawInstruction) -> ImageFont.FreeTypeFont:
        fonts = self.latin if instruction.script == "latin" else self.han
        font = fonts.get(instruction.font_tier)
        if font is None:
            raise AssetUnavailable(
                f"no {instruction.script} font loaded for tier {instruction.font_tier!r}"
            )
        return font


@dataclass(frozen=True, slots=True)
class Assets:
    fonts: FontSet
    plus: Image.Image
    minus: Image.Image

    def base_for(self, amount: int) -> Image.Image:
        return self.minus if amount < 0 else self.plus


def _load_sizes(path: Path, sizes: Mapping[FontTier, int]) -> dict[FontTier, ImageFont.FreeTypeFont]:
    try:
        return {tier: ImageFont.truetype(str(path), size=size) for tier, size in sizes.items()}
    except OSError as e:
        raise AssetUnavailable(f"cannot load font {path}: {e}") from e


def load_font_set(han_path: Path, latin_path: Path) -> FontSet:
    return FontSet(
        han=_load_sizes(han_path, HAN_FONT_SIZES),
        latin=_load_sizes(latin_path, LATIN_FONT_SIZES),
    )


def load_icon(path: Path) -> Image.Image:
    try:
        with Image.open(path) as img:
            return img.convert("RGBA")
    except (OSError, UnidentifiedImageError) as e:
        raise AssetUnavailable(f"cannot load icon {path}: {e}") from e


def load_assets(assets_dir: Path) -> Assets:
    logger.debug("[composer] loading assets from %s", assets_dir)
    return Assets(
        fonts=load_font_set(assets_dir / HAN_FONT_FILE, assets_dir / LATIN_FONT_FILE),
        plus=load_icon(assets_dir / PLUS_ICON_FILE),
        minus=load_icon(assets_dir / MINUS_ICON_FILE),
    )


class Composer:
    """
    Draw a RenderPlan on top of a base icon and encode the result as WebP.

    Plan coordinates are text baselines, so every draw is anchored at the
    left baseline.
    """

    def __init__(
        self,
        fonts: FontSet,
        *,
        canvas_size: tuple[int, int] = CANVAS_SIZE,
        shadow_offset: int = SHADOW_OFFSET,
    ) -> None:
        self._fonts = fonts
        self._canvas_size = canvas_size
        self._shadow_offset = shadow_offset

    def draw_shadowed_text(
        self, draw: ImageDraw.ImageDraw, instruction: DrawInstruction
    ) -> None:
        font = self._fonts.font_for(instruction)
        offset = self._shadow_offset
        draw.text(
            (instruction.x + offset, instruction.y + offset),
            instruction.text,
            font=font,
            fill=SHADOW_COLOR,
            anchor="ls",
        )
        draw.text(
            (instruction.x, instruction.y),
            instruction.text,
            font=font,
            fill=TEXT_COLOR,
            anchor="ls",
        )

    def compose(self, plan: RenderPlan, base_image: Image.Image) -> Image.Image:
        canvas = Image.new("RGBA", self._canvas_size, (0, 0, 0, 0))
        base = base_image if base_image.mode == "RGBA" else base_image.convert("RGBA")
        canvas.paste(base, (0, 0), base)
        draw = ImageDraw.Draw(canvas)
        for instruction in plan:
            self.draw_shadowed_text(draw, instruction)
        return canvas

    def render(self, plan: RenderPlan, base_image: Image.Image) -> bytes:
        canvas = self.compose(plan, base_image)
        buf = io.BytesIO()
        canvas.save(buf, format="WEBP", lossless=True)
        data = buf.getvalue()
        logger.debug("[composer] encoded %d bytes for %d draws", len(data), len(plan))
        return data
