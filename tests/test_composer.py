import io

import pytest
from PIL import Image, ImageFont

from socialcredit.composer import (
    HAN_FONT_SIZES,
    LATIN_FONT_SIZES,
    SHADOW_COLOR,
    TEXT_COLOR,
    AssetUnavailable,
    Assets,
    Composer,
    FontSet,
    load_assets,
    load_icon,
)
from socialcredit.layout import DrawInstruction, RenderPlan
from socialcredit.stickers import plan_amount, render_amount


class RecordingDraw:
    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def text(self, xy, text, font=None, fill=None, anchor=None) -> None:
        self.calls.append((xy, text, font, fill, anchor))


def _default_fonts() -> FontSet:
    return FontSet(
        han={tier: ImageFont.load_default(size=size) for tier, size in HAN_FONT_SIZES.items()},
        latin={tier: ImageFont.load_default(size=size) for tier, size in LATIN_FONT_SIZES.items()},
    )


def test_shadow_is_drawn_before_text() -> None:
    han_font = object()
    latin_font = object()
    composer = Composer(FontSet(han={"pico": han_font}, latin={"small": latin_font}))
    draw = RecordingDraw()
    composer.draw_shadowed_text(draw, DrawInstruction("+一", "pico", 160, 110))
    composer.draw_shadowed_text(
        draw, DrawInstruction("+1 Social Credit", "small", 160, 75, script="latin")
    )
    assert draw.calls == [
        ((164, 114), "+一", han_font, SHADOW_COLOR, "ls"),
        ((160, 110), "+一", han_font, TEXT_COLOR, "ls"),
        ((164, 79), "+1 Social Credit", latin_font, SHADOW_COLOR, "ls"),
        ((160, 75), "+1 Social Credit", latin_font, TEXT_COLOR, "ls"),
    ]


def test_missing_font_tier_is_asset_error() -> None:
    fonts = FontSet(han={}, latin={})
    with pytest.raises(AssetUnavailable):
        fonts.font_for(DrawInstruction("+1", "medium", 160, 140))


def test_render_produces_webp_sticker() -> None:
    base = Image.new("RGBA", (174, 174), (200, 30, 30, 255))
    plan = plan_amount(12_345)
    assert plan is not None
    data = Composer(_default_fonts()).render(plan, base)
    assert data[:4] == b"RIFF"
    assert data[8:12] == b"WEBP"
    with Image.open(io.BytesIO(data)) as img:
        assert img.size == (512, 174)
        assert img.convert("RGBA").getpixel((5, 5)) == (200, 30, 30, 255)
        assert img.convert("RGBA").getpixel((500, 5))[3] == 0


def test_render_accepts_rgb_base() -> None:
    base = Image.new("RGB", (100, 100), (0, 0, 255))
    data = Composer(_default_fonts()).render(RenderPlan(instructions=()), base)
    with Image.open(io.BytesIO(data)) as img:
        assert img.convert("RGBA").getpixel((50, 50)) == (0, 0, 255, 255)


def test_render_amount_picks_base_by_sign() -> None:
    plus = Image.new("RGBA", (10, 10), (0, 255, 0, 255))
    minus = Image.new("RGBA", (10, 10), (255, 0, 0, 255))
    assets = Assets(fonts=_default_fonts(), plus=plus, minus=minus)
    assert assets.base_for(5) is plus
    assert assets.base_for(-5) is minus

    data = render_amount(-5, assets)
    assert data is not None
    with Image.open(io.BytesIO(data)) as img:
        assert img.convert("RGBA").getpixel((2, 2)) == (255, 0, 0, 255)
    assert render_amount(0, assets) is None


def test_load_assets_missing_files(tmp_path) -> None:
    with pytest.raises(AssetUnavailable):
        load_assets(tmp_path)


def test_load_icon_rejects_garbage(tmp_path) -> None:
    path = tmp_path / "plus.png"
    path.write_bytes(b"not an image")
    with pytest.raises(AssetUnavailable):
        load_icon(path)


def test_load_icon_converts_to_rgba(tmp_path) -> None:
    path = tmp_path / "plus.png"
    Image.new("RGB", (4, 4), (1, 2, 3)).save(path)
    icon = load_icon(path)
    assert icon.mode == "RGBA"
    assert icon.size == (4, 4)
