import pytest

from socialcredit.numerals import (
    DIGITS,
    EXPONENTS,
    MAX_MAGNITUDE,
    MYRIAD_MARK,
    TWO_MARK_FOR_THOUSANDS,
    ZERO_MARK,
    digit_glyph,
    format_han,
    format_latin,
    needs_zero_mark,
    trailing_zeros,
)

_DIGIT_VALUES = {glyph: i + 1 for i, glyph in enumerate(DIGITS)}
_DIGIT_VALUES[TWO_MARK_FOR_THOUSANDS] = 2
_EXPONENT_VALUES = {glyph: 10 ** (i + 1) for i, glyph in enumerate(EXPONENTS)}


def _decode_section(text: str) -> int:
    total = 0
    pending = 0
    for ch in text:
        if ch in _DIGIT_VALUES:
            pending = _DIGIT_VALUES[ch]
        elif ch in _EXPONENT_VALUES:
            assert pending, f"exponent without digit in {text!r}"
            total += pending * _EXPONENT_VALUES[ch]
            pending = 0
        elif ch != ZERO_MARK:
            raise AssertionError(f"unexpected glyph {ch!r} in {text!r}")
    return total + pending


def decode_han(text: str) -> int:
    if MYRIAD_MARK in text:
        upper, lower = text.split(MYRIAD_MARK)
        return _decode_section(upper) * 10_000 + _decode_section(lower)
    return _decode_section(text)


def _sample_magnitudes() -> list[int]:
    values = set(range(1, 20_001))
    values.update(range(1, MAX_MAGNITUDE + 1, 7_919))
    values.update(
        [
            99_999_999,
            10_000_000,
            10_050_000,
            10_000_056,
            20_000_000,
            12_345_678,
            90_909_090,
        ]
    )
    return sorted(values)


def test_format_han_round_trips_through_reference_decoder() -> None:
    for magnitude in _sample_magnitudes():
        text = format_han(magnitude)
        assert text is not None, magnitude
        assert decode_han(text) == magnitude, (magnitude, text)


@pytest.mark.parametrize("magnitude", [0, 100_000_000, 123_456_789])
def test_out_of_range_has_no_representation(magnitude: int) -> None:
    assert format_han(magnitude) is None
    assert format_latin(magnitude) is None


@pytest.mark.parametrize(
    ("magnitude", "expected"),
    [
        (1, "一"),
        (10, "一十"),
        (100, "一百"),
        (2, "二"),
        (20, "二十"),
        (200, "二百"),
        (2000, "两千"),
        (2222, "两千二百二十二"),
        (1002, "一千零二"),
        (1010, "一千零一十"),
        (10_000, "一万"),
        (10_001, "一万一"),
        (12_000, "一万两千"),
        (120_000, "一十二万"),
        (10_050_000, "一千零五万"),
        (10_000_056, "一千万五十六"),
        (20_000_000, "两千万"),
        (99_999_999, "九千九百九十九万九千九百九十九"),
    ],
)
def test_format_han_examples(magnitude: int, expected: str) -> None:
    assert format_han(magnitude) == expected


def test_two_mark_only_in_thousands_position() -> None:
    text = format_han(2000)
    assert text is not None
    assert text.index(TWO_MARK_FOR_THOUSANDS) == text.index(EXPONENTS[2]) - 1
    assert DIGITS[1] not in text


def test_myriad_parts_compose() -> None:
    assert format_han(10_000) == format_han(1) + MYRIAD_MARK
    assert format_han(10_001) == format_han(1) + MYRIAD_MARK + format_han(1)


def test_zero_runs_collapse_to_one_mark() -> None:
    text = format_han(1002)
    assert text is not None
    assert text.count(ZERO_MARK) == 1


def test_lower_part_does_not_start_with_zero_mark() -> None:
    text = format_han(10_005)
    assert text == "一万五"


def test_zero_guard() -> None:
    assert needs_zero_mark([]) is False
    assert needs_zero_mark(["二"]) is True
    assert needs_zero_mark(["二", ZERO_MARK]) is False


def test_digit_guard() -> None:
    assert digit_glyph(2, 3) == TWO_MARK_FOR_THOUSANDS
    assert digit_glyph(2, 2) == "二"
    assert digit_glyph(2, 0) == "二"
    assert digit_glyph(3, 3) == "三"


def test_trailing_zeros() -> None:
    assert trailing_zeros(1) == 0
    assert trailing_zeros(10) == 1
    assert trailing_zeros(12_300) == 2
    assert trailing_zeros(5_000_000) == 6


@pytest.mark.parametrize(
    ("magnitude", "expected"),
    [
        (1, "1"),
        (1000, "1k"),
        (1234, "1234"),
        (12_300, "12300"),
        (10_000, "10k"),
        (100_000, "100k"),
        (1_500_000, "1500k"),
        (2_000_000, "2m"),
        (10_000_000, "10m"),
        (12_345_600, "12345600"),
        (99_999_999, "99999999"),
    ],
)
def test_format_latin_examples(magnitude: int, expected: str) -> None:
    assert format_latin(magnitude) == expected
