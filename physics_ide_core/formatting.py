"""
Scalar and text formatting for generated source.

Every helper here degrades silently: malformed input yields a fixed default literal
instead of an exception, so a bad field can never abort generation.
"""

import math
import re
from typing import Any, Optional


DEFAULT_COLOR = 'color.white'

_HEX_COLOR = re.compile(r'#([0-9a-fA-F]{2})([0-9a-fA-F]{2})([0-9a-fA-F]{2})')
_EXPONENT = re.compile(r'e([+-])0*(\d)')

# Order matters: backslash first so later substitutions are not escaped twice
_ESCAPES = (
    ('\\', '\\\\'),
    ('"', '\\"'),
    ('\n', '\\n'),
    ('\r', '\\r'),
    ('\t', '\\t'),
)

# Colours without a runtime symbol are spelled out as RGB triples
NAMED_COLORS = {
    'red': 'color.red',
    'orange': 'color.orange',
    'yellow': 'color.yellow',
    'green': 'color.green',
    'blue': 'color.blue',
    'purple': 'vector(0.5, 0, 0.5)',
    'white': 'color.white',
    'black': 'vector(0, 0, 0)',
    'gray': 'color.gray(0.5)',
    'brown': 'vector(0.6, 0.3, 0.1)',
    'cyan': 'color.cyan',
    'magenta': 'color.magenta',
}


def escape_literal(text: Any) -> str:
    """Escape text for embedding between double quotes in the target language."""
    result = '' if text is None else str(text)
    for raw, escaped in _ESCAPES:
        result = result.replace(raw, escaped)
    return result


def quote_literal(text: Any) -> str:
    """Escape and wrap text in double quotes."""
    return f'"{escape_literal(text)}"'


def hex_color_to_literal(hex_color: Any) -> str:
    """Convert ``#rrggbb`` into a ``vector(r, g, b)`` literal with two decimals.

    Anything that is not exactly a 7-character hex colour yields ``color.white``.
    """
    if not isinstance(hex_color, str):
        return DEFAULT_COLOR
    match = _HEX_COLOR.fullmatch(hex_color)
    if not match:
        return DEFAULT_COLOR
    r, g, b = (int(component, 16) / 255 for component in match.groups())
    return f'vector({r:.2f}, {g:.2f}, {b:.2f})'


def named_color_to_literal(name: Any) -> Optional[str]:
    """Map a palette name to its literal; ``None`` means fall through to the hex value."""
    if not isinstance(name, str):
        return None
    return NAMED_COLORS.get(name.strip().lower())


def color_field_to_literal(value: Any) -> str:
    """Render a colour field that holds a hex string, a palette name, or raw code."""
    if not isinstance(value, str) or not value.strip():
        return DEFAULT_COLOR
    value = value.strip()
    if value.startswith('#'):
        return hex_color_to_literal(value)
    return named_color_to_literal(value) or value


def format_number(value: Any) -> str:
    """Render a number the way the editor displays it (``100`` not ``100.0``)."""
    if isinstance(value, bool):
        raise TypeError("bool is not a number")
    if isinstance(value, int):
        return str(value)

    number = float(value)
    if math.isnan(number) or math.isinf(number):
        raise ValueError(f"Cannot render non-finite number: {value!r}")
    if number.is_integer() and abs(number) < 1e21:
        return str(int(number))
    return _EXPONENT.sub(r'e\1\2', repr(number))


def number_or_default(value: Any, default: Any) -> str:
    """Format a numeric field, substituting ``default`` when it is not a number."""
    try:
        if isinstance(value, str):
            value = float(value.strip())
        return format_number(value)
    except (TypeError, ValueError):
        return format_number(default)
