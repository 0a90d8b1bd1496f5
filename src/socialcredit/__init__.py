from __future__ import annotations

from .layout import DrawInstruction, RenderPlan, plan_layout
from .numerals import format_han, format_latin
from .stickers import parse_amount, plan_amount, render_amount

__all__ = [
    "DrawInstruction",
    "RenderPlan",
    "format_han",
    "format_latin",
    "parse_amount",
    "plan_amount",
    "plan_layout",
    "render_amount",
]
