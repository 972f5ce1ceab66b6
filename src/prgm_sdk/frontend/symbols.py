"""
Scoped Symbol Table
===================

Symbol table used by the semantic analyzer. Each analysis run owns one
table; it is never shared between runs.

Scopes
------
The table is a stack of frames. Frame 0 holds the program's
declarations; a `for` loop pushes a frame for its body and pops it on
exit, so a loop variable disappears once the loop has been analyzed.
Lookup searches from the innermost frame outward.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional
import difflib

from prgm_sdk.errors import SourceLocation
from prgm_sdk.frontend.errors import DuplicateDeclarationError
from prgm_sdk.frontend.types import DataType


class SymbolKind(Enum):
    """What a name denotes."""
    VARIABLE = auto()
    CONSTANT = auto()


@dataclass
class Symbol:
    """
    One entry of the symbol table.

    Attributes:
        name: Identifier
        kind: Variable or constant
        data_type: Declared type
        scope_depth: Index of the frame holding the entry (0 = program)
        location: Where the name was declared
        value: Folded value for constants, None otherwise
    """
    name: str
    kind: SymbolKind
    data_type: DataType
    scope_depth: int = 0
    location: Optional[SourceLocation] = None
    value: Optional[int | float] = None

    @property
    def mutable(self) -> bool:
        """Constants may never be assigned or read into."""
        return self.kind != SymbolKind.CONSTANT

    @property
    def is_array(self) -> bool:
        return self.data_type.is_array


class SymbolTable:
    """
    Stack of scope frames mapping names to Symbols.

    Example:
        table = SymbolTable()
        table.declare("x", SymbolKind.VARIABLE, TYPE_INT, location)
        table.push_scope()
        table.declare("i", SymbolKind.VARIABLE, TYPE_INT, location)
        table.pop_scope()   # 'i' is gone, 'x' remains
    """

    def __init__(self):
        self._frames: list[dict[str, Symbol]] = [{}]

    @property
    def depth(self) -> int:
        """Index of the innermost frame."""
        return len(self._frames) - 1

    def push_scope(self) -> None:
        self._frames.append({})

    def pop_scope(self) -> None:
        """Discard the innermost frame. The program frame is never popped."""
        if len(self._frames) == 1:
            raise RuntimeError("cannot pop the program scope")
        self._frames.pop()

    def declare(
        self,
        name: str,
        kind: SymbolKind,
        data_type: DataType,
        location: Optional[SourceLocation] = None,
        value: Optional[int | float] = None,
        source_line: Optional[str] = None,
    ) -> Symbol:
        """
        Add a symbol to the innermost frame.

        Raises:
            DuplicateDeclarationError: If the name is already visible
        """
        existing = self.lookup(name)
        if existing is not None:
            raise DuplicateDeclarationError(
                name,
                location=location,
                original_location=existing.location,
                source_line=source_line,
            )

        symbol = Symbol(
            name=name,
            kind=kind,
            data_type=data_type,
            scope_depth=self.depth,
            location=location,
            value=value,
        )
        self._frames[-1][name] = symbol
        return symbol

    def lookup(self, name: str) -> Optional[Symbol]:
        """Find the innermost visible symbol with this name."""
        for frame in reversed(self._frames):
            if name in frame:
                return frame[name]
        return None

    def __contains__(self, name: str) -> bool:
        return self.lookup(name) is not None

    def visible_names(self) -> list[str]:
        """All names visible from the innermost frame."""
        names = []
        for frame in self._frames:
            names.extend(frame)
        return names

    def similar_names(self, name: str, limit: int = 3) -> list[str]:
        """Suggest visible names close to an unknown one."""
        return difflib.get_close_matches(name, self.visible_names(), n=limit)
