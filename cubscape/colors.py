"""Colour components from scene files and packed RGBA pixel values."""

from .errors import ErrorCode, ParseError

_DIGITS = frozenset("0123456789")
_MASK32 = 0xFFFFFFFF


def count_separators(text, separator):
    """Count occurrences of ``separator`` in ``text`` (None counts as empty)."""
    if not text:
        return 0
    return text.count(separator)


def parse_component(text):
    """Parse one colour channel: a decimal 0..255 optionally surrounded by spaces."""
    if not text:
        raise ParseError(ErrorCode.COLOR)
    body = text.lstrip(" ")
    if not body:
        raise ParseError(ErrorCode.COLOR)
    digits, _, rest = body.partition(" ")
    if not set(digits) <= _DIGITS or rest.strip(" "):
        raise ParseError(ErrorCode.COLOR)
    value = int(digits)
    if value > 255:
        raise ParseError(ErrorCode.COLOR)
    return value


def _trunc_div(numerator, denominator):
    quotient = abs(numerator) // abs(denominator)
    return quotient if (numerator >= 0) == (denominator > 0) else -quotient


def _pack(r, g, b):
    return ((r << 24) | (g << 16) | (b << 8) | 0xFF) & _MASK32


def shade(rgb, lum):
    """Pack an (r, g, b) triple scaled by ``lum`` percent into opaque RGBA."""
    r, g, b = (_trunc_div(channel * lum, 100) for channel in rgb)
    return _pack(r, g, b)


def darken(color, factor):
    """Scale the RGB channels of a packed RGBA colour, forcing full opacity."""
    r = int(((color >> 24) & 0xFF) * factor)
    g = int(((color >> 16) & 0xFF) * factor)
    b = int(((color >> 8) & 0xFF) * factor)
    return _pack(r, g, b)