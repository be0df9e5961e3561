"""
Prequel Type Names - Parses the textual form of a declared data type.

The grammar covers what appears after a variable or parameter name in a
declaration: a (possibly bracket-quoted) type name and an optional
parenthesised parameter list, e.g. `varchar(20)`, `NVARCHAR(MAX)`,
`decimal(18, 2)` or `[int]`.
"""

import tatsu
from tatsu.exceptions import FailedParse

from prequel.PrequelErrors import TypeNameError
from prequel.PrequelTypes import (
    LENGTH_BEARING_TYPES,
    UNKNOWN_LENGTH,
    SqlDataType,
    SqlTypeInfo,
    lookup_data_type,
)

GRAMMAR = r"""
@@grammar :: SqlTypeName
@@ignorecase :: True

start = @:type_name $ ;

type_name = name:identifier [ '(' params:parameters ')' ] ;

parameters = ','.{ parameter }+ ;

parameter = max_length | integer ;

max_length = 'max' ;

integer = /\d+/ ;

identifier = quoted_identifier | bare_identifier ;

quoted_identifier = '[' @:/[^\]]+/ ']' ;

bare_identifier = /[A-Za-z_][A-Za-z0-9_]*/ ;
"""

# sysname is a built-in alias the server defines as nvarchar(128)
SYSNAME = SqlTypeInfo("nvarchar", SqlDataType.NVARCHAR, 128)


class TypeNameSemantics:
    """Tatsu semantic actions that build a SqlTypeInfo from the parse."""

    def integer(self, ast):
        return int(ast)

    def max_length(self, ast):
        return UNKNOWN_LENGTH

    def type_name(self, ast):
        name = str(ast.get("name")).strip()
        params = ast.get("params") or []

        if name.lower() == "sysname" and not params:
            return SYSNAME

        data_type = lookup_data_type(name)
        length = UNKNOWN_LENGTH
        if data_type in LENGTH_BEARING_TYPES and params:
            length = params[0]

        canonical = data_type.value if data_type is not None else name
        return SqlTypeInfo(canonical, data_type, length)


_model = tatsu.compile(GRAMMAR)


def parse_type_name(text: str) -> SqlTypeInfo:
    """
    Parse a data type such as 'varchar(20)' into a SqlTypeInfo.
    Raises TypeNameError if the text is not a valid type.
    """
    if not text.strip():
        raise TypeNameError(f"Invalid data type '{text}'")
    try:
        return _model.parse(text, semantics=TypeNameSemantics())
    except FailedParse as e:
        raise TypeNameError(f"Invalid data type '{text}'") from e
