"""
Prequel Syntax Tree - The node types handed to the checker by a SQL parser.

Every node is an immutable dataclass carrying the 1-based line it starts on.
A script is a sequence of batches; constructs the checker has no rule for
(SELECT, IF, BEGIN...END, EXEC, binary expressions, ...) are represented by
`Fragment`, which only carries its children so variable references inside
them are still visited.
"""

from dataclasses import dataclass
from enum import IntFlag
from typing import Optional, Union

from prequel.PrequelTypes import SqlTypeInfo


class SetOptions(IntFlag):
    """Session options that can be switched with SET <option> ON|OFF."""

    QUOTED_IDENTIFIER = 1 << 0
    CONCAT_NULL_YIELDS_NULL = 1 << 1
    CURSOR_CLOSE_ON_COMMIT = 1 << 2
    ARITHABORT = 1 << 3
    ARITHIGNORE = 1 << 4
    FMTONLY = 1 << 5
    NOCOUNT = 1 << 6
    NOEXEC = 1 << 7
    NUMERIC_ROUNDABORT = 1 << 8
    PARSEONLY = 1 << 9
    ANSI_DEFAULTS = 1 << 10
    ANSI_NULL_DFLT_OFF = 1 << 11
    ANSI_NULL_DFLT_ON = 1 << 12
    ANSI_NULLS = 1 << 13
    ANSI_PADDING = 1 << 14
    ANSI_WARNINGS = 1 << 15
    FORCEPLAN = 1 << 16
    SHOWPLAN_ALL = 1 << 17
    SHOWPLAN_TEXT = 1 << 18
    IMPLICIT_TRANSACTIONS = 1 << 19
    REMOTE_PROC_TRANSACTIONS = 1 << 20
    XACT_ABORT = 1 << 21


# --- Expressions ---


@dataclass(frozen=True)
class StringLiteral:
    line: int
    value: str
    # N'...' literals are nvarchar, plain ones varchar
    national: bool = False


@dataclass(frozen=True)
class VariableReference:
    line: int
    name: str


@dataclass(frozen=True)
class Fragment:
    """Any construct without a dedicated node; only its children matter."""

    line: int
    kind: str = ""
    children: tuple["SqlNode", ...] = ()


Expression = Union[StringLiteral, VariableReference, Fragment]


# --- Declarations ---


@dataclass(frozen=True)
class VariableDeclaration:
    """DECLARE @name type [= value]"""

    line: int
    name: str
    data_type: Optional[SqlTypeInfo] = None
    value: Optional[Expression] = None


@dataclass(frozen=True)
class TableVariableDeclaration:
    """DECLARE @name TABLE (...); children hold column defaults and constraints."""

    line: int
    name: str
    children: tuple["SqlNode", ...] = ()


@dataclass(frozen=True)
class ProcedureParameter:
    line: int
    name: str
    data_type: Optional[SqlTypeInfo] = None
    default: Optional[Expression] = None


# --- Statements ---


@dataclass(frozen=True)
class SetVariable:
    """SET @name = expression"""

    line: int
    name: str
    expression: Expression


@dataclass(frozen=True)
class SetOptionStatement:
    """SET <options> ON|OFF"""

    line: int
    options: SetOptions
    is_on: bool


@dataclass(frozen=True)
class ExecuteParameter:
    """One argument of an EXEC call; `variable` is set for `@param = value`."""

    line: int
    value: Optional[Expression] = None
    variable: Optional[VariableReference] = None


@dataclass(frozen=True)
class ProcedureDefinition:
    """CREATE PROCEDURE [schema.]name params AS body"""

    line: int
    name: str
    parameters: tuple[ProcedureParameter, ...] = ()
    body: tuple["SqlNode", ...] = ()

    @property
    def base_name(self) -> str:
        """The unqualified procedure name without quoting."""
        return unquote_identifier(self.name.split(".")[-1])


@dataclass(frozen=True)
class Batch:
    line: int
    statements: tuple["SqlNode", ...] = ()


@dataclass(frozen=True)
class Script:
    batches: tuple[Batch, ...] = ()


SqlNode = Union[
    Script,
    Batch,
    ProcedureDefinition,
    ProcedureParameter,
    VariableDeclaration,
    TableVariableDeclaration,
    SetVariable,
    SetOptionStatement,
    ExecuteParameter,
    VariableReference,
    StringLiteral,
    Fragment,
]


def unquote_identifier(identifier: str) -> str:
    """Strip [brackets] or "double quotes" from an identifier."""
    identifier = identifier.strip()
    if len(identifier) >= 2 and (
        (identifier[0] == "[" and identifier[-1] == "]")
        or (identifier[0] == '"' and identifier[-1] == '"')
    ):
        return identifier[1:-1]
    return identifier
