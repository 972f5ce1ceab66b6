"""
PRGM Type System
================

This module implements the static type system used by the semantic
analyzer. It defines the data types a PRGM expression can have and the
rules for combining and assigning them.

Supported Types
---------------
- Int: 32-bit signed integer
- Float: 32-bit floating point
- Bool: result of comparisons and logical operators (not declarable)
- String: string literals, only legal as an output argument
- Array: fixed-size array of Int or Float
- Error: placeholder for an expression that already produced a
  diagnostic; it is compatible with everything so one defect is
  reported once

Type Representation
-------------------
Types are represented as DataType objects:
- kind: The TypeKind classification
- element: For arrays, the element DataType
- size: For arrays, the element count (0 = not array)

Examples:
- Int            : DataType(INT)
- [Float; 10]    : DataType(ARRAY, element=DataType(FLOAT), size=10)
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


# =============================================================================
# Type Kind Enumeration
# =============================================================================

class TypeKind(Enum):
    """Fundamental PRGM type kinds."""
    INT = auto()
    FLOAT = auto()
    BOOL = auto()
    STRING = auto()
    ARRAY = auto()
    ERROR = auto()

    def __str__(self) -> str:
        return self.name.capitalize()


# =============================================================================
# Type Representation
# =============================================================================

@dataclass(frozen=True)
class DataType:
    """
    Represents a PRGM type.

    Attributes:
        kind: The type kind
        element: Element type for arrays (None otherwise)
        size: Element count for arrays (0 = not array)
    """
    kind: TypeKind
    element: Optional["DataType"] = None
    size: int = 0

    def __post_init__(self):
        """Validate type consistency."""
        if self.kind == TypeKind.ARRAY:
            if self.element is None or not self.element.is_numeric:
                raise ValueError("array element type must be Int or Float")
            if self.size <= 0:
                raise ValueError("array size must be positive")
        elif self.element is not None or self.size:
            raise ValueError(f"{self.kind} type cannot have element or size")

    @property
    def is_array(self) -> bool:
        return self.kind == TypeKind.ARRAY

    @property
    def is_numeric(self) -> bool:
        """Return True for Int and Float."""
        return self.kind in (TypeKind.INT, TypeKind.FLOAT)

    @property
    def is_scalar(self) -> bool:
        """Return True for anything that is not an array."""
        return self.kind != TypeKind.ARRAY

    @property
    def is_error(self) -> bool:
        return self.kind == TypeKind.ERROR

    def __str__(self) -> str:
        """Return the type as written in source."""
        if self.kind == TypeKind.ARRAY:
            return f"[{self.element}; {self.size}]"
        return str(self.kind)


# =============================================================================
# Common Type Constants
# =============================================================================

TYPE_INT = DataType(TypeKind.INT)
TYPE_FLOAT = DataType(TypeKind.FLOAT)
TYPE_BOOL = DataType(TypeKind.BOOL)
TYPE_STRING = DataType(TypeKind.STRING)
TYPE_ERROR = DataType(TypeKind.ERROR)


# =============================================================================
# Type Construction Helpers
# =============================================================================

SCALAR_TYPE_NAMES: dict[str, DataType] = {
    "Int": TYPE_INT,
    "Float": TYPE_FLOAT,
}


def type_from_name(name: str) -> DataType:
    """
    Convert a declared scalar type name to a DataType.

    Raises:
        ValueError: If the name is not 'Int' or 'Float'
    """
    try:
        return SCALAR_TYPE_NAMES[name]
    except KeyError:
        raise ValueError(f"unknown type name: {name}") from None


def make_array_type(element: DataType, size: int) -> DataType:
    """Create an array type of size elements."""
    return DataType(TypeKind.ARRAY, element=element, size=size)


# =============================================================================
# Type Combination Rules
# =============================================================================

def arithmetic_result(left: DataType, right: DataType) -> DataType:
    """
    Result type of + - * / on two numeric operands.

    Float wins: any Float operand makes the result Float. Callers must
    check is_numeric on both operands first.
    """
    if left.kind == TypeKind.FLOAT or right.kind == TypeKind.FLOAT:
        return TYPE_FLOAT
    return TYPE_INT


def is_assignable(target: DataType, value: DataType, allow_int_to_float: bool = True) -> bool:
    """
    Check whether a value of one type may be stored in a target.

    Identical types are always assignable. Int widens to Float when
    allow_int_to_float is set. The error placeholder is assignable
    both ways.
    """
    if target.is_error or value.is_error:
        return True
    if target == value:
        return True
    if allow_int_to_float and target == TYPE_FLOAT and value == TYPE_INT:
        return True
    return False
