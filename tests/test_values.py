# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""Tests for the value model and coercions."""

from datetime import datetime

import pytest

from genro_formtree.values import (
    NULL,
    BoolValue,
    DateTimeValue,
    FloatValue,
    IntValue,
    ListValue,
    StringValue,
    as_bool,
    as_datetime,
    as_float,
    as_int,
    as_list,
    as_string,
    for_kind,
    from_python,
    is_blank,
    to_json,
    to_python,
)


class TestCoercion:
    """Tests for the as_* readers."""

    def test_as_int_from_text(self):
        """Test integer text is read with surrounding spaces."""
        assert as_int(StringValue(' 42 ')) == 42

    def test_as_int_rejects_garbage(self):
        """Test non-numeric text reads as None."""
        assert as_int(StringValue('4x')) is None

    def test_as_int_from_whole_float(self):
        """Test a float without fractional part reads as int."""
        assert as_int(FloatValue(3.0)) == 3
        assert as_int(FloatValue(3.5)) is None

    def test_as_float_rejects_non_finite(self):
        """Test nan and inf are not floats for a form."""
        assert as_float(StringValue('nan')) is None
        assert as_float(StringValue('inf')) is None
        assert as_float(StringValue('2.5')) == 2.5

    def test_as_bool_words(self):
        """Test boolean words in any case."""
        assert as_bool(StringValue('Yes')) is True
        assert as_bool(StringValue('off')) is False
        assert as_bool(StringValue('maybe')) is None
        assert as_bool(IntValue(1)) is True

    def test_as_datetime_human_text(self):
        """Test dateutil reads human spellings."""
        assert as_datetime(StringValue('1 Mar 2025')) == datetime(2025, 3, 1)

    def test_as_datetime_garbage(self):
        """Test unreadable text gives None."""
        assert as_datetime(StringValue('not a date')) is None
        assert as_datetime(NULL) is None

    def test_as_string_of_list(self):
        """Test lists have no text form."""
        assert as_string(ListValue((StringValue('a'),))) is None
        assert as_string(NULL) == ''
        assert as_string(BoolValue(True)) == 'true'

    def test_as_list(self):
        """Test null reads as an empty list."""
        assert as_list(NULL) == ()
        assert as_list(StringValue('a')) is None


class TestBlank:
    """Tests for is_blank."""

    def test_blank_values(self):
        """Test null, whitespace and empty lists are blank."""
        assert is_blank(NULL)
        assert is_blank(StringValue('   '))
        assert is_blank(ListValue())

    def test_non_blank_values(self):
        """Test zero and false are content."""
        assert not is_blank(IntValue(0))
        assert not is_blank(BoolValue(False))


class TestForKind:
    """Tests for tagging raw input by leaf kind."""

    def test_int_text(self):
        """Test integer text is tagged as IntValue."""
        assert for_kind('int', '12') == IntValue(12)

    def test_int_in_flight(self):
        """Test text that does not coerce yet stays a string."""
        assert for_kind('int', '1-') == StringValue('1-')

    def test_blank_numeric_is_null(self):
        """Test blank input on typed kinds is null."""
        assert for_kind('float', '  ') is NULL
        assert for_kind('boolean', '') is NULL

    def test_text_stays_text(self):
        """Test text kinds keep the raw string, blank included."""
        assert for_kind('text', '') == StringValue('')
        assert for_kind('email', 'a@b') == StringValue('a@b')

    def test_datetime_iso(self):
        """Test ISO input is tagged as a datetime."""
        assert for_kind('datetime', '2025-03-01T10:30') == DateTimeValue(
            datetime(2025, 3, 1, 10, 30)
        )

    def test_datetime_in_flight(self):
        """Test non-ISO input stays raw while typing."""
        assert for_kind('datetime', 'tomorrow') == StringValue('tomorrow')


class TestConversion:
    """Tests for Python and JSON conversion."""

    def test_from_python(self):
        """Test wrapping plain objects."""
        assert from_python(None) is NULL
        assert from_python(True) == BoolValue(True)
        assert from_python(3) == IntValue(3)
        assert from_python([1, 'a']) == ListValue((IntValue(1), StringValue('a')))

    def test_from_python_passes_values_through(self):
        """Test an existing Value is returned as is."""
        value = StringValue('x')
        assert from_python(value) is value

    def test_from_python_unknown_type(self):
        """Test objects with no Value counterpart are rejected."""
        with pytest.raises(TypeError, match="Cannot convert"):
            from_python(object())

    def test_to_python(self):
        """Test unwrapping values."""
        assert to_python(NULL) is None
        assert to_python(ListValue((IntValue(1),))) == [1]

    def test_to_json_datetime(self):
        """Test datetimes render as ISO strings."""
        moment = datetime(2025, 3, 1, 10, 30)
        assert to_json(DateTimeValue(moment)) == '2025-03-01T10:30:00'
