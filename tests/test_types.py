"""
PRGM Type System Test Suite
===========================

Tests for DataType construction and the combination rules.
"""

import pytest

from prgm_sdk.frontend.types import (
    DataType,
    TypeKind,
    TYPE_INT,
    TYPE_FLOAT,
    TYPE_BOOL,
    TYPE_STRING,
    TYPE_ERROR,
    type_from_name,
    make_array_type,
    arithmetic_result,
    is_assignable,
)


class TestDataType:
    """Tests for type construction and display."""

    def test_names(self):
        assert type_from_name("Int") == TYPE_INT
        assert type_from_name("Float") == TYPE_FLOAT
        with pytest.raises(ValueError):
            type_from_name("Bool")

    def test_array(self):
        arr = make_array_type(TYPE_INT, 5)
        assert arr.is_array
        assert not arr.is_scalar
        assert arr.element == TYPE_INT
        assert str(arr) == "[Int; 5]"

    def test_invalid_arrays(self):
        with pytest.raises(ValueError):
            make_array_type(TYPE_INT, 0)
        with pytest.raises(ValueError):
            make_array_type(TYPE_STRING, 3)
        with pytest.raises(ValueError):
            DataType(TypeKind.INT, size=3)

    def test_categories(self):
        assert TYPE_INT.is_numeric and TYPE_FLOAT.is_numeric
        assert not TYPE_BOOL.is_numeric
        assert TYPE_ERROR.is_error
        assert str(TYPE_STRING) == "String"


class TestTypeRules:
    """Tests for arithmetic results and assignability."""

    def test_arithmetic_result(self):
        assert arithmetic_result(TYPE_INT, TYPE_INT) == TYPE_INT
        assert arithmetic_result(TYPE_INT, TYPE_FLOAT) == TYPE_FLOAT
        assert arithmetic_result(TYPE_FLOAT, TYPE_INT) == TYPE_FLOAT

    def test_assignable(self):
        assert is_assignable(TYPE_INT, TYPE_INT)
        assert is_assignable(TYPE_FLOAT, TYPE_INT)
        assert not is_assignable(TYPE_FLOAT, TYPE_INT, allow_int_to_float=False)
        assert not is_assignable(TYPE_INT, TYPE_FLOAT)
        assert not is_assignable(TYPE_INT, TYPE_STRING)

    def test_error_placeholder_assignable(self):
        assert is_assignable(TYPE_INT, TYPE_ERROR)
        assert is_assignable(TYPE_ERROR, TYPE_STRING)
