"""
Number formatting for display.

Values are rendered as fixed-precision strings wrapped in colour tags of
the form ``{red-fg}...{/}``. Gains are red and losses green, following
the mainland China market convention.
"""

import re
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Optional, Union

import click

Number = Union[Decimal, float, int]


class Color(Enum):
    """Display colour for a value."""
    GAIN = "red"
    NEUTRAL = "grey"
    LOSS = "green"


# click has no "grey"
_CLICK_COLORS = {
    "grey": "bright_black",
}

_TAG_PATTERN = re.compile(r"\{(\w+)-fg\}(.*?)\{/\}")

MISSING = "--"


def round_value(value: Number, precision: int = 2) -> Decimal:
    """Round half-up to a fixed number of decimals; negative zero becomes zero."""
    exponent = Decimal(1).scaleb(-precision)
    rounded = Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP)
    if rounded == 0:
        rounded = abs(rounded)
    return rounded


def classify(value: Number) -> Color:
    """Colour of a value: positive is a gain, negative a loss."""
    if value > 0:
        return Color.GAIN
    if value == 0:
        return Color.NEUTRAL
    return Color.LOSS


def pad(text: str, length: int, pad_char: str = "", align: str = "left") -> str:
    """
    Pad text to length.

    "left" alignment (and anything unrecognised) pads at the start,
    "right" pads at the end. An empty pad_char disables padding.
    """
    missing = length - len(text)
    if not pad_char or missing <= 0:
        return text
    filler = (pad_char * missing)[:missing]
    if align == "right":
        return text + filler
    return filler + text


def format_number(
    value: Optional[Number],
    precision: int = 2,
    percent: bool = False,
    align: str = "left",
    pad_char: str = "",
    pad_length: int = 4,
    with_sign: bool = False,
    tags: bool = True,
) -> str:
    """
    Format a number for display.

    Args:
        value: Value to render; None renders as "--"
        precision: Decimal places
        percent: Append a percent sign
        align: "left" pads at the start, "right" at the end
        pad_char: Padding character(s); empty means no padding
        pad_length: Minimum width after padding
        with_sign: Prefix non-negative values with "+"
        tags: Wrap the result in a colour tag

    Returns:
        Formatted string, e.g. ``"{red-fg}+5.50%{/}"``

    Example:
        >>> format_number(-2, with_sign=True)
        '{green-fg}-2.00{/}'
    """
    if value is None:
        text = pad(MISSING, pad_length, pad_char, align)
        color = Color.NEUTRAL
    else:
        rounded = round_value(value, precision)
        color = classify(rounded)
        text = f"{rounded:f}"
        if with_sign and rounded >= 0:
            text = "+" + text
        if percent:
            text += "%"
        text = pad(text, pad_length, pad_char, align)

    if not tags:
        return text
    return f"{{{color.value}-fg}}{text}{{/}}"


def strip_tags(text: str) -> str:
    """Remove colour tags, keeping the wrapped text."""
    return _TAG_PATTERN.sub(lambda m: m.group(2), text)


def render_tags(text: str) -> str:
    """Convert colour tags to ANSI escapes for terminal output."""

    def _style(match: re.Match) -> str:
        color = match.group(1)
        return click.style(match.group(2), fg=_CLICK_COLORS.get(color, color))

    return _TAG_PATTERN.sub(_style, text)
