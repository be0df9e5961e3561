"""
Prequel Semantic Checker - Walks a parsed SQL script and reports risky code.

Checks performed:
- strings assigned to variables too short to hold them
- variables used without being declared in the batch
- variables declared but never used
- procedures named with the reserved sp_ prefix
- procedures that never SET NOCOUNT ON

The walk is a single pre-order pass. Whenever something cannot be worked out
(unknown length, missing type, unknown conversion) the check is skipped rather
than risking a false warning.
"""

import logging
from typing import Iterable, Optional

from prequel.PrequelScope import VariableScope
from prequel.PrequelSettings import Settings
from prequel.PrequelSyntaxTree import (
    Batch,
    ExecuteParameter,
    Expression,
    Fragment,
    ProcedureDefinition,
    ProcedureParameter,
    Script,
    SetOptions,
    SetOptionStatement,
    SetVariable,
    SqlNode,
    StringLiteral,
    TableVariableDeclaration,
    VariableDeclaration,
    VariableReference,
)
from prequel.PrequelTypeKnowledge import TypeConversionResult, get_conversion_result
from prequel.PrequelTypes import UNKNOWN_LENGTH, SqlDataType
from prequel.PrequelWarnings import SqlWarning, filter_warnings

logger = logging.getLogger(__name__)

RESERVED_PROCEDURE_PREFIX = "sp_"


class PrequelSemanticChecker:
    """
    Checks one script. Holds per-run state, so use a fresh instance per script.
    """

    def __init__(self):
        self.scope = VariableScope()
        self.warnings: list[SqlWarning] = []
        # Name bound on the left of `@param = value` in the EXEC argument being walked
        self.execute_parameter_variable: Optional[str] = None
        # Set once SET NOCOUNT ON is seen in the procedure being walked
        self.no_count_set: bool = False

        self._handlers = {
            Script: self._visit_script,
            Batch: self._visit_batch,
            ProcedureDefinition: self._visit_procedure,
            ProcedureParameter: self._visit_procedure_parameter,
            VariableDeclaration: self._visit_variable_declaration,
            TableVariableDeclaration: self._visit_table_variable_declaration,
            SetVariable: self._visit_set_variable,
            SetOptionStatement: self._visit_set_option,
            ExecuteParameter: self._visit_execute_parameter,
            VariableReference: self._visit_variable_reference,
            StringLiteral: self._visit_string_literal,
            Fragment: self._visit_fragment,
        }

    def check(self, node: SqlNode) -> list[SqlWarning]:
        """Walk a script (or a single batch) and return the warnings found."""
        self.visit(node)
        return self.warnings

    def filter_warnings(self, level: int) -> None:
        """Drop the warnings the user doesn't want to see."""
        self.warnings = filter_warnings(self.warnings, level)

    # --- Warning Reporting ---

    def report(self, warning: SqlWarning) -> None:
        logger.debug("%s", warning)
        self.warnings.append(warning)

    # --- Dispatch ---

    def visit(self, node: SqlNode) -> None:
        handler = self._handlers.get(type(node))
        if handler is None:
            raise TypeError(f"Not a syntax tree node: {type(node).__name__}")
        handler(node)

    def visit_all(self, nodes: Iterable[Optional[SqlNode]]) -> None:
        for node in nodes:
            if node is not None:
                self.visit(node)

    # --- Batches and Procedures ---

    def _visit_script(self, node: Script) -> None:
        self.visit_all(node.batches)

    def _visit_batch(self, node: Batch) -> None:
        # local variables never outlive their batch
        self.scope.clear()
        logger.debug("Entering batch at line %d", node.line)

        self.visit_all(node.statements)

        for variable in self.scope.unreferenced():
            self.report(SqlWarning.unused_variable_declared(variable.line, variable.name))
        logger.debug("Leaving batch at line %d", node.line)

    def _visit_procedure(self, node: ProcedureDefinition) -> None:
        procedure = node.base_name
        logger.debug("Entering procedure %s at line %d", procedure, node.line)

        if procedure.lower().startswith(RESERVED_PROCEDURE_PREFIX):
            self.report(SqlWarning.procedure_with_sp_prefix(node.line, procedure))

        self.no_count_set = False
        self.visit_all(node.parameters)
        self.visit_all(node.body)

        if not self.no_count_set:
            self.report(SqlWarning.procedure_without_nocount(node.line, procedure))
        logger.debug("Leaving procedure %s at line %d", procedure, node.line)

    def _visit_set_option(self, node: SetOptionStatement) -> None:
        if node.is_on and SetOptions.NOCOUNT in node.options:
            self.no_count_set = True

    # --- Declarations ---

    def _visit_procedure_parameter(self, node: ProcedureParameter) -> None:
        self.scope.declare(node.name, node.data_type, node.line)
        if node.default is not None:
            self.visit(node.default)

    def _visit_variable_declaration(self, node: VariableDeclaration) -> None:
        self.scope.declare(node.name, node.data_type, node.line)
        if node.value is not None:
            self.visit(node.value)
        self.check_assignment(node.name, node.value)

    def _visit_table_variable_declaration(self, node: TableVariableDeclaration) -> None:
        self.scope.declare(node.name, None, node.line)
        self.visit_all(node.children)

    # --- Statements and Expressions ---

    def _visit_set_variable(self, node: SetVariable) -> None:
        # assigning is not using, so the target is not marked referenced
        if node.name not in self.scope:
            self.report(SqlWarning.undeclared_variable_used(node.line, node.name))

        self.visit(node.expression)
        self.check_assignment(node.name, node.expression)

    def _visit_execute_parameter(self, node: ExecuteParameter) -> None:
        if node.variable is not None:
            self.execute_parameter_variable = node.variable.name
        try:
            if node.variable is not None:
                self.visit(node.variable)
            if node.value is not None:
                self.visit(node.value)
        finally:
            self.execute_parameter_variable = None

    def _visit_variable_reference(self, node: VariableReference) -> None:
        target = self.execute_parameter_variable
        if target is not None and target.upper() == node.name.upper():
            # in "exec foo @param = value" @param belongs to foo's signature
            return

        if not self.scope.mark_referenced(node.name):
            self.report(SqlWarning.undeclared_variable_used(node.line, node.name))

    def _visit_string_literal(self, node: StringLiteral) -> None:
        pass

    def _visit_fragment(self, node: Fragment) -> None:
        self.visit_all(node.children)

    # --- Truncation ---

    def check_assignment(self, variable_name: str, value: Optional[Expression]) -> None:
        """Warn if `value` may not fit into the declared length of the variable."""
        if value is None:
            return

        source_type, source_length = self.expression_type(value)
        if source_length == UNKNOWN_LENGTH:
            return  # can't work out the source length

        target = self.scope.lookup(variable_name)
        if target is None or target.type_info is None:
            return  # no declaration or no scalar type
        if not target.type_info.has_known_length:
            return

        if not is_length_sensitive(source_type, target.type_info.data_type):
            return

        if target.length < source_length:
            self.report(
                SqlWarning.string_truncated(
                    value.line, variable_name, target.length, source_length
                )
            )

    def expression_type(self, value: Expression) -> tuple[Optional[SqlDataType], int]:
        """
        The type and maximum length of an expression, as far as can be told.
        Returns (None, UNKNOWN_LENGTH) when nothing is known.
        """
        if isinstance(value, StringLiteral):
            data_type = SqlDataType.NVARCHAR if value.national else SqlDataType.VARCHAR
            return data_type, len(value.value)

        if isinstance(value, VariableReference):
            variable = self.scope.lookup(value.name)
            if variable is not None and variable.type_info is not None:
                return variable.type_info.data_type, variable.length

        return None, UNKNOWN_LENGTH


def is_length_sensitive(
    source: Optional[SqlDataType], target: Optional[SqlDataType]
) -> bool:
    """
    Whether a conversion can lose data depending on the declared lengths.
    Unknown types and pairs missing from the conversion table count as sensitive
    so that the lengths alone decide.
    """
    if source is None or target is None:
        return True
    result = get_conversion_result(source, target)
    if result == TypeConversionResult.NOT_IMPLEMENTED:
        return True
    return bool(result & TypeConversionResult.CHECK_LENGTH)


def check_script(script: SqlNode, settings: Optional[Settings] = None) -> list[SqlWarning]:
    """Check a script with a fresh checker and keep the warnings the settings allow."""
    settings = settings or Settings()
    checker = PrequelSemanticChecker()
    checker.check(script)
    checker.filter_warnings(settings.warning_level)
    return checker.warnings
