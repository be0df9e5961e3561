"""
Prequel Warnings - The diagnostics produced by the checker.

Each kind of warning has a fixed number, severity level and message
template. Callers choose how much to see with filter_warnings().
"""

from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Iterable


class WarningLevel(IntEnum):
    """How severe a warning is; lower is more severe."""

    SYNTAX = 0  # only parse errors, reported by the parser
    CRITICAL = 1
    SERIOUS = 2
    MINOR = 3
    MAX = 3


DEFAULT_WARNING_LEVEL = WarningLevel.SERIOUS


@dataclass(frozen=True)
class WarningInfo:
    number: int
    level: WarningLevel
    description: str


class WarningKind(Enum):
    UNDECLARED_VARIABLE_USED = WarningInfo(
        1, WarningLevel.CRITICAL, "Undeclared variable used"
    )
    UNUSED_VARIABLE_DECLARED = WarningInfo(
        2, WarningLevel.MINOR, "Unused variable declared"
    )
    STRING_TRUNCATED = WarningInfo(3, WarningLevel.SERIOUS, "String truncated")
    PROCEDURE_WITH_SP_PREFIX = WarningInfo(
        4, WarningLevel.SERIOUS, "Procedure name uses the sp_ prefix"
    )
    PROCEDURE_WITHOUT_NOCOUNT = WarningInfo(
        5, WarningLevel.MINOR, "Procedure does not SET NOCOUNT ON"
    )

    @property
    def number(self) -> int:
        return self.value.number

    @property
    def level(self) -> WarningLevel:
        return self.value.level


@dataclass(frozen=True)
class SqlWarning:
    """A single problem found in a script."""

    line: int
    kind: WarningKind
    message: str
    level: WarningLevel

    def __str__(self) -> str:
        return f"(line {self.line}) Warning {self.kind.number}: {self.message}"

    @classmethod
    def create(cls, kind: WarningKind, line: int, message: str) -> "SqlWarning":
        return cls(line, kind, message, kind.level)

    @classmethod
    def undeclared_variable_used(cls, line: int, name: str) -> "SqlWarning":
        return cls.create(
            WarningKind.UNDECLARED_VARIABLE_USED,
            line,
            f"Variable {name} used before being declared",
        )

    @classmethod
    def unused_variable_declared(cls, line: int, name: str) -> "SqlWarning":
        return cls.create(
            WarningKind.UNUSED_VARIABLE_DECLARED,
            line,
            f"Variable {name} declared but never used",
        )

    @classmethod
    def string_truncated(
        cls, line: int, name: str, target_length: int, source_length: int
    ) -> "SqlWarning":
        return cls.create(
            WarningKind.STRING_TRUNCATED,
            line,
            f"Variable {name} has length {target_length} and is assigned a value "
            f"with length up to {source_length}, which might be truncated",
        )

    @classmethod
    def procedure_with_sp_prefix(cls, line: int, procedure: str) -> "SqlWarning":
        return cls.create(
            WarningKind.PROCEDURE_WITH_SP_PREFIX,
            line,
            f"Procedure {procedure} starts with sp_. The server looks for "
            f"procedures with this prefix in master first, which is slower "
            f"and can pick up a system procedure of the same name",
        )

    @classmethod
    def procedure_without_nocount(cls, line: int, procedure: str) -> "SqlWarning":
        return cls.create(
            WarningKind.PROCEDURE_WITHOUT_NOCOUNT,
            line,
            f"Procedure {procedure} does not SET NOCOUNT ON. Row count messages "
            f"are sent for every statement, which adds network traffic",
        )


def filter_warnings(warnings: Iterable[SqlWarning], level: int) -> list[SqlWarning]:
    """Keep the warnings at or above the given severity, preserving order."""
    return [w for w in warnings if w.level <= level]
