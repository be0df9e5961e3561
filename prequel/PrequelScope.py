"""
Prequel Scope - Tracks the variables declared in the current batch.

SQL variables live until the end of the batch they are declared in, so there
is a single flat scope that the checker clears at every batch boundary.
Names compare case-insensitively and iteration follows declaration order.
"""

from dataclasses import dataclass
from typing import Iterator, Optional

from prequel.PrequelTypes import UNKNOWN_LENGTH, SqlTypeInfo


@dataclass
class Variable:
    """A declared variable, table variable or procedure parameter."""

    name: str
    type_info: Optional[SqlTypeInfo]  # None for table variables
    line: int
    referenced: bool = False

    @property
    def length(self) -> int:
        if self.type_info is None:
            return UNKNOWN_LENGTH
        return self.type_info.length


def normalize_name(name: str) -> str:
    # one-to-one case mapping only, so 'ß' never matches 'SS'
    return "".join(c if len(c.upper()) != 1 else c.upper() for c in name)


class VariableScope:
    """
    Case-insensitive, insertion-ordered mapping of variable name to Variable.

    Redeclaring a name replaces the previous Variable but keeps its original
    position in the iteration order.
    """

    def __init__(self):
        self.variables: dict[str, Variable] = {}

    def declare(
        self, name: str, type_info: Optional[SqlTypeInfo], line: int
    ) -> Variable:
        """Add a variable, overwriting any earlier declaration of the same name."""
        variable = Variable(name=name, type_info=type_info, line=line)
        self.variables[normalize_name(name)] = variable
        return variable

    def lookup(self, name: str) -> Optional[Variable]:
        return self.variables.get(normalize_name(name))

    def mark_referenced(self, name: str) -> bool:
        """
        Flag a variable as used. Unknown names are ignored.
        Returns True if the variable exists.
        """
        variable = self.lookup(name)
        if variable is None:
            return False
        variable.referenced = True
        return True

    def clear(self) -> None:
        self.variables.clear()

    def unreferenced(self) -> list[Variable]:
        """Variables never referenced, in declaration order."""
        return [v for v in self.variables.values() if not v.referenced]

    def __contains__(self, name: str) -> bool:
        return normalize_name(name) in self.variables

    def __len__(self) -> int:
        return len(self.variables)

    def __iter__(self) -> Iterator[Variable]:
        return iter(self.variables.values())
