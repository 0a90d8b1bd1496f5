from __future__ import annotations

DIGITS: tuple[str, ...] = ("一", "二", "三", "四", "五", "六", "七", "八", "九")
EXPONENTS: tuple[str, ...] = ("十", "百", "千")
ZERO_MARK = "零"
MYRIAD_MARK = "万"
TWO_MARK_FOR_THOUSANDS = "两"

MYRIAD = 10_000
MAX_MAGNITUDE = 99_999_999

_LATIN_SCALES: tuple[tuple[int, str], ...] = (
    (1, ""),
    (1_000, "k"),
    (1_000_000, "m"),
)


def is_supported(magnitude: int) -> bool:
    return 0 < magnitude <= MAX_MAGNITUDE


def trailing_zeros(magnitude: int) -> int:
    count = 0
    while magnitude > 0 and magnitude % 10 == 0:
        magnitude //= 10
        count += 1
    return count


def format_latin(magnitude: int) -> str | None:
    """
    Abbreviate by trailing zeros, not by size: 1000 -> "1k", 1234 -> "1234",
    12300 -> "12300".
    """
    if not is_supported(magnitude):
        return None
    tier = trailing_zeros(magnitude) // 3
    if tier >= len(_LATIN_SCALES):
        return None
    divisor, suffix = _LATIN_SCALES[tier]
    return f"{magnitude // divisor}{suffix}"


def needs_zero_mark(tokens: list[str]) -> bool:
    # tokens are collected units-first, so the last one is the leading glyph
    return bool(tokens) and tokens[-1] != ZERO_MARK


def digit_glyph(digit: int, exp: int) -> str:
    if exp == 3 and digit == 2:
        return TWO_MARK_FOR_THOUSANDS
    return DIGITS[digit - 1]


def exponent_glyph(exp: int) -> str:
    return EXPONENTS[exp - 1] if exp else ""


def _format_section(magnitude: int) -> str:
    tokens: list[str] = []
    exp = 0
    while magnitude > 0:
        magnitude, digit = divmod(magnitude, 10)
        if digit == 0:
            if needs_zero_mark(tokens):
                tokens.append(ZERO_MARK)
        else:
            tokens.append(digit_glyph(digit, exp) + exponent_glyph(exp))
        exp += 1
    return "".join(reversed(tokens))


def format_han(magnitude: int) -> str | None:
    if not is_supported(magnitude):
        return None
    if magnitude >= MYRIAD:
        upper, lower = divmod(magnitude, MYRIAD)
        upper_text = format_han(upper)
        if upper_text is None:
            return None
        lower_text = format_han(lower) if lower else ""
        if lower_text is None:
            return None
        return f"{upper_text}{MYRIAD_MARK}{lower_text}"
    return _format_section(magnitude)
