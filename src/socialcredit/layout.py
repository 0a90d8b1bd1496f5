from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from .numerals import DIGITS, TWO_MARK_FOR_THOUSANDS, ZERO_MARK

FontTier = Literal["large", "medium", "small", "pico"]
Script = Literal["han", "latin"]

HAN_SUFFIX = "社会信用"
LATIN_SUFFIX_SHORT = "Soc. Credit"
LATIN_SUFFIX_FULL = "Social Credit"

TEXT_X = 160
HAN_SINGLE_Y = 140
HAN_SINGLE_PICO_Y = 135
HAN_FIRST_LINE_Y = 110
HAN_SECOND_LINE_Y = 145
LATIN_LARGE_Y = 80
LATIN_SMALL_Y = 75
PICO_SINGLE_COMP = 10

_SINGLE_LINE_TIERS: dict[int, FontTier] = {5: "medium", 6: "small"}
_UNBREAKABLE = frozenset((*DIGITS, ZERO_MARK, TWO_MARK_FOR_THOUSANDS))


@dataclass(frozen=True, slots=True)
class DrawInstruction:
    text: str
    font_tier: FontTier
    x: int
    y: int
    script: Script = "han"


@dataclass(frozen=True, slots=True)
class RenderPlan:
    instructions: tuple[DrawInstruction, ...]

    def __iter__(self):
        return iter(self.instructions)

    def __len__(self) -> int:
        return len(self.instructions)


def split_position(chinese_number: str, suffix: str) -> int:
    split = (len(chinese_number) + len(suffix)) // 2
    if chinese_number[split] not in _UNBREAKABLE:
        split += 1  # don't break periods
    return split


def _han(text: str, tier: FontTier, y: int) -> DrawInstruction:
    return DrawInstruction(text=text, font_tier=tier, x=TEXT_X, y=y, script="han")


def plan_han(chinese_number: str, suffix: str) -> tuple[list[DrawInstruction], int]:
    """
    Lay out the Chinese number and return the instructions together with the
    vertical compensation the Latin line has to apply.
    """
    length = len(chinese_number)
    if length <= 4:
        return [_han(chinese_number + suffix, "large", HAN_SINGLE_Y)], 0
    if length in _SINGLE_LINE_TIERS:
        tier = _SINGLE_LINE_TIERS[length]
        return [_han(chinese_number + suffix, tier, HAN_SINGLE_Y)], 0
    if length == 7:
        line = _han(chinese_number + suffix, "pico", HAN_SINGLE_PICO_Y)
        return [line], PICO_SINGLE_COMP
    if length <= 11:
        return [
            _han(chinese_number, "pico", HAN_FIRST_LINE_Y),
            _han(suffix, "pico", HAN_SECOND_LINE_Y),
        ], 0

    split = split_position(chinese_number, suffix)
    return [
        _han(chinese_number[:split], "pico", HAN_FIRST_LINE_Y),
        _han(chinese_number[split:] + suffix, "pico", HAN_SECOND_LINE_Y),
    ], 0


def plan_latin(latin_number: str, comp: int) -> DrawInstruction:
    length = len(latin_number)
    suffix = LATIN_SUFFIX_SHORT if length > 7 else LATIN_SUFFIX_FULL
    if length > 4:
        tier: FontTier = "small"
        y = LATIN_SMALL_Y
    else:
        tier = "large"
        y = LATIN_LARGE_Y
    return DrawInstruction(
        text=f"{latin_number} {suffix}",
        font_tier=tier,
        x=TEXT_X,
        y=y + comp,
        script="latin",
    )


def plan_layout(
    latin_number: str, chinese_number: str, suffix: str = HAN_SUFFIX
) -> RenderPlan:
    han_lines, comp = plan_han(chinese_number, suffix)
    return RenderPlan(instructions=(*han_lines, plan_latin(latin_number, comp)))
