"""
Unit tests for scalar and text formatting.
"""

import ast
import pytest
from hypothesis import given, strategies as st
from physics_ide_core.formatting import (
    DEFAULT_COLOR, escape_literal, quote_literal, hex_color_to_literal, named_color_to_literal,
    color_field_to_literal, format_number, number_or_default
)


# Null bytes cannot appear in source text at all; surrogates cannot be encoded
literal_text = st.text(alphabet=st.characters(exclude_characters='\x00', exclude_categories=('Cs',)))


class TestEscapeLiteral:
    """Test cases for escape_literal."""

    def test_escapes_each_special_character(self):
        """Test backslash, quote, newline, carriage return and tab."""
        assert escape_literal('a\\b') == 'a\\\\b'
        assert escape_literal('say "hi"') == 'say \\"hi\\"'
        assert escape_literal('one\ntwo') == 'one\\ntwo'
        assert escape_literal('one\rtwo') == 'one\\rtwo'
        assert escape_literal('one\ttwo') == 'one\\ttwo'

    def test_backslash_is_not_escaped_twice(self):
        """Test that escapes introduced for quotes are not escaped again."""
        assert escape_literal('\\"') == '\\\\\\"'

    def test_none_is_empty(self):
        assert escape_literal(None) == ''

    def test_quote_literal_wraps(self):
        assert quote_literal('x') == '"x"'


class TestHexColorToLiteral:
    """Test cases for hex colour conversion."""

    def test_pure_red(self):
        """Test that #ff0000 maps to full red and no green or blue."""
        assert hex_color_to_literal('#ff0000') == 'vector(1.00, 0.00, 0.00)'

    def test_mixed_case_and_rounding(self):
        assert hex_color_to_literal('#FF8000') == 'vector(1.00, 0.50, 0.00)'

    @pytest.mark.parametrize('value', [
        'not-a-color', '#fff', '#gg0000', 'ff0000', '', None, 42, '#ff00001',
        ' #ff0000 ', '#ff0000\n',
    ])
    def test_malformed_input_falls_back_to_white(self, value):
        """Test that malformed colours never raise."""
        assert hex_color_to_literal(value) == DEFAULT_COLOR


class TestNamedColors:
    """Test cases for the named palette."""

    def test_runtime_symbols(self):
        assert named_color_to_literal('red') == 'color.red'
        assert named_color_to_literal('Cyan') == 'color.cyan'

    def test_colours_without_symbol_use_triples(self):
        assert named_color_to_literal('purple') == 'vector(0.5, 0, 0.5)'
        assert named_color_to_literal('black') == 'vector(0, 0, 0)'
        assert named_color_to_literal('brown') == 'vector(0.6, 0.3, 0.1)'

    def test_custom_falls_through(self):
        assert named_color_to_literal('custom') is None
        assert named_color_to_literal(None) is None

    def test_color_field_accepts_hex_name_or_code(self):
        assert color_field_to_literal('#000000') == 'vector(0.00, 0.00, 0.00)'
        assert color_field_to_literal('green') == 'color.green'
        assert color_field_to_literal('c_ball') == 'c_ball'
        assert color_field_to_literal('') == DEFAULT_COLOR


class TestFormatNumber:
    """Test cases for number rendering."""

    def test_integral_floats_drop_the_fraction(self):
        assert format_number(100.0) == '100'
        assert format_number(-3.0) == '-3'

    def test_fractions_and_exponents(self):
        assert format_number(0.5) == '0.5'
        assert format_number(0.004) == '0.004'
        assert format_number(1e-7) == '1e-7'

    def test_rejects_bool_and_non_finite(self):
        with pytest.raises(TypeError):
            format_number(True)
        with pytest.raises(ValueError):
            format_number(float('nan'))

    def test_number_or_default(self):
        assert number_or_default('0.01', 1) == '0.01'
        assert number_or_default(' 18 ', 1) == '18'
        assert number_or_default('abc', 5) == '5'
        assert number_or_default(None, 0.01) == '0.01'
        assert number_or_default(float('inf'), 2) == '2'


# Property-based tests
@given(literal_text)
def test_escaping_round_trip_property(text):
    """Property test: the emitted literal evaluates back to the original text."""
    assert ast.literal_eval(quote_literal(text)) == text


@given(st.integers(0, 255), st.integers(0, 255), st.integers(0, 255))
def test_hex_color_components_property(r, g, b):
    """Property test: each component is the byte divided by 255, to two decimals."""
    literal = hex_color_to_literal(f'#{r:02x}{g:02x}{b:02x}')

    assert literal.startswith('vector(') and literal.endswith(')')
    components = [float(part) for part in literal[len('vector('):-1].split(', ')]
    for component, byte in zip(components, (r, g, b)):
        assert abs(component - byte / 255) <= 0.005 + 1e-9


@given(st.floats(allow_nan=False, allow_infinity=False))
def test_format_number_round_trips_property(value):
    """Property test: the rendered number parses back to the same value."""
    assert float(format_number(value)) == value
