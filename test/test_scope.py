# test_scope.py

from prequel.PrequelScope import Variable, VariableScope
from prequel.PrequelTypes import UNKNOWN_LENGTH, SqlDataType, SqlTypeInfo

VARCHAR_10 = SqlTypeInfo.of(SqlDataType.VARCHAR, 10)
INT = SqlTypeInfo.of(SqlDataType.INT)


def test_variable_defaults():
    v = Variable(name="@x", type_info=INT, line=3)

    assert v.name == "@x"
    assert v.type_info is INT
    assert v.line == 3
    assert v.referenced is False
    assert v.length == UNKNOWN_LENGTH


def test_variable_length_comes_from_type():
    v = Variable(name="@s", type_info=VARCHAR_10, line=1)
    assert v.length == 10


def test_table_variable_has_unknown_length():
    v = Variable(name="@t", type_info=None, line=1)
    assert v.length == UNKNOWN_LENGTH


def test_scope_initial_state(scope):
    assert len(scope) == 0
    assert scope.unreferenced() == []


def test_declare_and_lookup(scope):
    declared = scope.declare("@x", VARCHAR_10, 4)

    assert scope.lookup("@x") is declared
    assert declared.line == 4
    assert "@x" in scope


def test_lookup_is_case_insensitive(scope):
    declared = scope.declare("@CustomerName", VARCHAR_10, 1)

    assert scope.lookup("@customername") is declared
    assert scope.lookup("@CUSTOMERNAME") is declared
    assert "@customerNAME" in scope


def test_lookup_nonexistent_returns_none(scope):
    assert scope.lookup("@does_not_exist") is None


def test_redeclaration_overwrites_and_resets_referenced(scope):
    scope.declare("@x", INT, 1)
    scope.mark_referenced("@x")

    second = scope.declare("@X", VARCHAR_10, 5)

    assert scope.lookup("@x") is second
    assert second.referenced is False
    assert second.type_info is VARCHAR_10
    assert len(scope) == 1


def test_redeclaration_keeps_original_position(scope):
    scope.declare("@a", INT, 1)
    scope.declare("@b", INT, 2)
    scope.declare("@a", INT, 3)

    assert [v.name for v in scope] == ["@a", "@b"]
    assert scope.lookup("@a").line == 3


def test_mark_referenced(scope):
    scope.declare("@x", INT, 1)

    assert scope.mark_referenced("@X") is True
    assert scope.lookup("@x").referenced is True


def test_mark_referenced_unknown_is_a_no_op(scope):
    assert scope.mark_referenced("@missing") is False
    assert len(scope) == 0


def test_referenced_flag_stays_set(scope):
    scope.declare("@x", INT, 1)
    scope.mark_referenced("@x")
    scope.mark_referenced("@x")

    assert scope.lookup("@x").referenced is True
    assert scope.unreferenced() == []


def test_unreferenced_in_declaration_order(scope):
    for line, name in enumerate(["@c", "@a", "@d", "@b"], start=1):
        scope.declare(name, INT, line)
    scope.mark_referenced("@a")

    assert [v.name for v in scope.unreferenced()] == ["@c", "@d", "@b"]


def test_clear_removes_everything(scope):
    scope.declare("@x", INT, 1)
    scope.declare("@t", None, 2)

    scope.clear()

    assert len(scope) == 0
    assert scope.lookup("@x") is None
    assert scope.unreferenced() == []


def test_names_fold_one_character_at_a_time(scope):
    scope.declare("@straße", VARCHAR_10, 1)

    assert "@STRAßE" in scope
    assert "@STRASSE" not in scope
    assert scope.lookup("@strasse") is None
