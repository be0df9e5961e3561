"""
Prequel Types - SQL data types and declared type information.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

# Declared length could not be determined (MAX, omitted, or not a string type)
UNKNOWN_LENGTH = -1


class SqlDataType(Enum):
    """Built-in scalar data types of the SQL dialect."""

    BIGINT = "bigint"
    INT = "int"
    SMALLINT = "smallint"
    TINYINT = "tinyint"
    BIT = "bit"
    DECIMAL = "decimal"
    NUMERIC = "numeric"
    MONEY = "money"
    SMALLMONEY = "smallmoney"
    FLOAT = "float"
    REAL = "real"
    DATETIMEOFFSET = "datetimeoffset"
    DATETIME2 = "datetime2"
    DATETIME = "datetime"
    SMALLDATETIME = "smalldatetime"
    DATE = "date"
    TIME = "time"
    CHAR = "char"
    VARCHAR = "varchar"
    TEXT = "text"
    NCHAR = "nchar"
    NVARCHAR = "nvarchar"
    NTEXT = "ntext"
    BINARY = "binary"
    VARBINARY = "varbinary"
    IMAGE = "image"
    TIMESTAMP = "timestamp"
    UNIQUEIDENTIFIER = "uniqueidentifier"
    SQL_VARIANT = "sql_variant"
    XML = "xml"
    CURSOR = "cursor"
    TABLE = "table"


STRING_TYPES = {
    SqlDataType.CHAR,
    SqlDataType.VARCHAR,
    SqlDataType.NCHAR,
    SqlDataType.NVARCHAR,
}

# Types whose single parameter is a length in characters or bytes
LENGTH_BEARING_TYPES = STRING_TYPES | {SqlDataType.BINARY, SqlDataType.VARBINARY}

SYNONYMS = {
    "integer": SqlDataType.INT,
    "dec": SqlDataType.DECIMAL,
    "character": SqlDataType.CHAR,
    "rowversion": SqlDataType.TIMESTAMP,
}


def lookup_data_type(name: str) -> Optional[SqlDataType]:
    """
    Resolve a type name (any case) to a built-in type.
    Returns None for user-defined or alias types.
    """
    key = name.lower()
    if key in SYNONYMS:
        return SYNONYMS[key]
    try:
        return SqlDataType(key)
    except ValueError:
        return None


@dataclass(frozen=True)
class SqlTypeInfo:
    """The declared type of a variable or parameter."""

    name: str
    data_type: Optional[SqlDataType] = None
    length: int = UNKNOWN_LENGTH

    @property
    def has_known_length(self) -> bool:
        return self.length != UNKNOWN_LENGTH

    @property
    def is_string(self) -> bool:
        return self.data_type in STRING_TYPES

    def __str__(self) -> str:
        if self.has_known_length:
            return f"{self.name}({self.length})"
        return self.name

    @classmethod
    def of(cls, data_type: SqlDataType, length: int = UNKNOWN_LENGTH) -> "SqlTypeInfo":
        """Build type info for a built-in type without going through the parser."""
        if data_type not in LENGTH_BEARING_TYPES:
            length = UNKNOWN_LENGTH
        return cls(data_type.value, data_type, length)
