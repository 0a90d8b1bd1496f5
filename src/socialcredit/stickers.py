from __future__ import annotations

import logging
import re

from .composer import Assets, Composer
from .layout import HAN_SUFFIX, RenderPlan, plan_layout
from .numerals import format_han, format_latin

logger = logging.getLogger(__name__)

_AMOUNT_RE = re.compile(r"[+-]?[0-9]+")


class MalformedAmount(ValueError):
    pass


def parse_amount(text: str) -> int:
    """
    Parse inline query text as a signed base-10 integer.

    Only ASCII digits with an optional sign are accepted; `int()` alone would
    also let through underscores and non-ASCII digits.
    """
    candidate = (text or "").strip()
    if not _AMOUNT_RE.fullmatch(candidate):
        raise MalformedAmount(f"not an integer amount: {text!r}")
    return int(candidate)


def sign_mark(amount: int) -> str:
    return "-" if amount < 0 else "+"


def plan_amount(amount: int, suffix: str = HAN_SUFFIX) -> RenderPlan | None:
    magnitude = abs(amount)
    chinese = format_han(magnitude)
    latin = format_latin(magnitude)
    if chinese is None or latin is None:
        logger.debug("[stickers] unsupported amount %d", amount)
        return None
    sign = sign_mark(amount)
    return plan_layout(sign + latin, sign + chinese, suffix)


def render_amount(
    amount: int, assets: Assets, composer: Composer | None = None
) -> bytes | None:
    plan = plan_amount(amount)
    if plan is None:
        return None
    if composer is None:
        composer = Composer(assets.fonts)
    return composer.render(plan, assets.base_for(amount))
