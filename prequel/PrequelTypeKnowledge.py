"""
Prequel Type Knowledge - Static knowledge about the SQL type system.

Three read-only tables are built once at import time:
- which conversions between two types are safe, lossy or length sensitive
- the precedence of each type in mixed-type expressions
- the value range of the integer types

Nothing here is mutated after import, so the tables are safe to share
between checker instances.
"""

from dataclasses import dataclass
from enum import IntFlag
from typing import Optional

from prequel.PrequelTypes import SqlDataType


class TypeConversionResult(IntFlag):
    """What happens when a value of one type is assigned to another."""

    # Converted implicitly and safely
    IMPLICIT_SAFE = 0
    # Converted implicitly but data could be mangled in the process
    IMPLICIT_LOSSY = 1
    # Only explicit conversions allowed
    EXPLICIT = 2
    # Converted implicitly, lossy depending on the declared lengths
    CHECK_LENGTH = 4
    # Unicode to code page string conversion
    NARROWING = 8
    # Cannot be converted at all
    NOT_ALLOWED = 16
    # Numeric converted to a string; the printed width must fit the target
    CHECK_CONVERTED_LENGTH = 32
    # Converted to a smaller numeric type, could overflow
    NUMERIC_OVERFLOW = 64
    # Nothing is known about this pair; treat it as fine
    NOT_IMPLEMENTED = 1 << 16


@dataclass(frozen=True)
class NumericTraits:
    """Range of an integer type."""

    min: int
    max: int
    # If A.size_class >= B.size_class, B can be assigned to A without overflow
    size_class: int


# --- Conversion Table ---
# Encodes the server's data type conversion chart for the pairs covered so far.

Conversion = tuple[SqlDataType, SqlDataType]

_T = SqlDataType
_R = TypeConversionResult


def _create_conversion_table() -> dict[Conversion, TypeConversionResult]:
    conversions: dict[Conversion, TypeConversionResult] = {}

    def add(source: SqlDataType, target: SqlDataType, result: TypeConversionResult):
        conversions[(source, target)] = result

    # From char
    add(_T.CHAR, _T.CHAR, _R.CHECK_LENGTH)
    add(_T.CHAR, _T.VARCHAR, _R.CHECK_LENGTH)
    add(_T.CHAR, _T.NCHAR, _R.CHECK_LENGTH)
    add(_T.CHAR, _T.NVARCHAR, _R.CHECK_LENGTH)

    # From nchar
    add(_T.NCHAR, _T.CHAR, _R.CHECK_LENGTH | _R.NARROWING)
    add(_T.NCHAR, _T.VARCHAR, _R.CHECK_LENGTH | _R.NARROWING)
    add(_T.NCHAR, _T.NCHAR, _R.CHECK_LENGTH)
    add(_T.NCHAR, _T.NVARCHAR, _R.CHECK_LENGTH)

    add(_T.NCHAR, _T.INT, _R.IMPLICIT_LOSSY)

    # From varchar
    add(_T.VARCHAR, _T.VARCHAR, _R.CHECK_LENGTH)
    add(_T.VARCHAR, _T.CHAR, _R.CHECK_LENGTH)
    add(_T.VARCHAR, _T.NCHAR, _R.CHECK_LENGTH)
    add(_T.VARCHAR, _T.NVARCHAR, _R.CHECK_LENGTH)

    # From nvarchar
    add(_T.NVARCHAR, _T.CHAR, _R.CHECK_LENGTH | _R.NARROWING)
    add(_T.NVARCHAR, _T.VARCHAR, _R.CHECK_LENGTH | _R.NARROWING)
    add(_T.NVARCHAR, _T.NCHAR, _R.CHECK_LENGTH)
    add(_T.NVARCHAR, _T.NVARCHAR, _R.CHECK_LENGTH)

    # From int
    add(_T.INT, _T.CHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.INT, _T.VARCHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.INT, _T.NCHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.INT, _T.NVARCHAR, _R.CHECK_CONVERTED_LENGTH)

    add(_T.INT, _T.TINYINT, _R.NUMERIC_OVERFLOW)
    add(_T.INT, _T.SMALLINT, _R.NUMERIC_OVERFLOW)

    # From smallint
    add(_T.SMALLINT, _T.CHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.SMALLINT, _T.VARCHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.SMALLINT, _T.NCHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.SMALLINT, _T.NVARCHAR, _R.CHECK_CONVERTED_LENGTH)

    # From bigint
    add(_T.BIGINT, _T.CHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.BIGINT, _T.VARCHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.BIGINT, _T.NCHAR, _R.CHECK_CONVERTED_LENGTH)
    add(_T.BIGINT, _T.NVARCHAR, _R.CHECK_CONVERTED_LENGTH)

    return conversions


# --- Precedence Table ---
# Smaller rank = higher precedence. Types missing here (numeric, xml,
# user-defined, ...) fall back to rank 0.

PRECEDENCE: dict[SqlDataType, int] = {
    # 1 == user defined
    _T.SQL_VARIANT: 2,
    # 3 == xml, not ranked yet
    _T.DATETIMEOFFSET: 4,
    _T.DATETIME2: 5,
    _T.DATETIME: 6,
    _T.SMALLDATETIME: 7,
    _T.DATE: 8,
    _T.TIME: 9,
    _T.FLOAT: 10,
    _T.REAL: 11,
    _T.DECIMAL: 12,
    _T.MONEY: 13,
    _T.SMALLMONEY: 14,
    _T.BIGINT: 15,
    _T.INT: 16,
    _T.SMALLINT: 17,
    _T.TINYINT: 18,
    _T.BIT: 19,
    _T.NTEXT: 20,
    _T.TEXT: 21,
    _T.IMAGE: 22,
    _T.TIMESTAMP: 23,
    _T.UNIQUEIDENTIFIER: 24,
    _T.NVARCHAR: 25,
    _T.NCHAR: 26,
    _T.VARCHAR: 27,
    _T.CHAR: 28,
    _T.VARBINARY: 29,
    _T.BINARY: 30,
}

# --- Numeric Limits ---

NUMERIC_LIMITS: dict[SqlDataType, NumericTraits] = {
    _T.TINYINT: NumericTraits(0, 255, size_class=1),
    _T.SMALLINT: NumericTraits(-(2**15), 2**15 - 1, size_class=2),
    _T.INT: NumericTraits(-(2**31), 2**31 - 1, size_class=4),
    _T.BIGINT: NumericTraits(-(2**63), 2**63 - 1, size_class=8),
}

CONVERSIONS = _create_conversion_table()


def get_conversion_result(
    source: SqlDataType, target: SqlDataType
) -> TypeConversionResult:
    """
    Look up what converting `source` to `target` does.
    Pairs missing from the table are NOT_IMPLEMENTED, which callers treat as safe.
    """
    return CONVERSIONS.get((source, target), TypeConversionResult.NOT_IMPLEMENTED)


def precedence_of(data_type: Optional[SqlDataType]) -> int:
    return PRECEDENCE.get(data_type, 0)


def is_higher_precedence(t1: Optional[SqlDataType], t2: Optional[SqlDataType]) -> bool:
    """True if t1 wins over t2 when both meet in one expression."""
    return precedence_of(t1) < precedence_of(t2)


def dominant_type(t1: SqlDataType, t2: SqlDataType) -> SqlDataType:
    """The result type of an expression mixing t1 and t2 (t1 on a tie)."""
    if is_higher_precedence(t2, t1):
        return t2
    return t1


def get_numeric_traits(data_type: SqlDataType) -> Optional[NumericTraits]:
    return NUMERIC_LIMITS.get(data_type)
