# test_warnings.py

import pytest

from prequel.PrequelErrors import InvalidWarningLevelError
from prequel.PrequelSettings import WARN_LEVEL_ENV, Settings, parse_warning_level
from prequel.PrequelWarnings import (
    DEFAULT_WARNING_LEVEL,
    SqlWarning,
    WarningKind,
    WarningLevel,
    filter_warnings,
)


def sample_warnings():
    return [
        SqlWarning.unused_variable_declared(1, "@a"),
        SqlWarning.undeclared_variable_used(2, "@b"),
        SqlWarning.string_truncated(3, "@c", 5, 11),
        SqlWarning.procedure_without_nocount(4, "Foo"),
        SqlWarning.procedure_with_sp_prefix(5, "sp_Bar"),
    ]


# ---------- warning records ----------


def test_factory_sets_kind_and_level():
    w = SqlWarning.undeclared_variable_used(7, "@y")

    assert w.kind == WarningKind.UNDECLARED_VARIABLE_USED
    assert w.level == WarningLevel.CRITICAL
    assert w.line == 7


@pytest.mark.parametrize(
    "kind, level",
    [
        (WarningKind.UNDECLARED_VARIABLE_USED, WarningLevel.CRITICAL),
        (WarningKind.STRING_TRUNCATED, WarningLevel.SERIOUS),
        (WarningKind.PROCEDURE_WITH_SP_PREFIX, WarningLevel.SERIOUS),
        (WarningKind.UNUSED_VARIABLE_DECLARED, WarningLevel.MINOR),
        (WarningKind.PROCEDURE_WITHOUT_NOCOUNT, WarningLevel.MINOR),
    ],
)
def test_kind_levels(kind, level):
    assert kind.level == level


def test_kind_numbers_are_unique():
    numbers = [kind.number for kind in WarningKind]
    assert len(numbers) == len(set(numbers))


def test_warning_string_form():
    w = SqlWarning.string_truncated(3, "@c", 5, 11)

    assert str(w).startswith("(line 3) Warning 3: ")
    assert "@c" in str(w)


def test_warnings_are_immutable():
    w = SqlWarning.unused_variable_declared(1, "@a")

    with pytest.raises(AttributeError):
        w.line = 2


# ---------- filtering ----------


def test_filter_all_keeps_everything_in_order():
    warnings = sample_warnings()

    assert filter_warnings(warnings, WarningLevel.MAX) == warnings


def test_filter_syntax_only_drops_everything():
    assert filter_warnings(sample_warnings(), WarningLevel.SYNTAX) == []


def test_filter_keeps_original_order():
    warnings = sample_warnings()

    kept = filter_warnings(warnings, WarningLevel.SERIOUS)

    assert [w.line for w in kept] == [2, 3, 5]
    assert all(w.level <= WarningLevel.SERIOUS for w in kept)


def test_filter_accepts_plain_ints():
    assert [w.line for w in filter_warnings(sample_warnings(), 1)] == [2]


def test_filter_does_not_modify_input():
    warnings = sample_warnings()
    filter_warnings(warnings, WarningLevel.CRITICAL)

    assert len(warnings) == 5


# ---------- settings ----------


@pytest.mark.parametrize(
    "text, level",
    [
        ("0", WarningLevel.SYNTAX),
        ("1", WarningLevel.CRITICAL),
        ("2", WarningLevel.SERIOUS),
        ("3", WarningLevel.MINOR),
        (" 3 ", WarningLevel.MINOR),
    ],
)
def test_parse_warning_level(text, level):
    assert parse_warning_level(text) == level


@pytest.mark.parametrize("text", ["4", "-1", "abc", "", "2.5"])
def test_parse_warning_level_rejects_bad_values(text):
    with pytest.raises(InvalidWarningLevelError, match="Invalid Warning Level"):
        parse_warning_level(text)


def test_default_settings():
    assert Settings().warning_level == DEFAULT_WARNING_LEVEL == WarningLevel.SERIOUS


def test_settings_from_env():
    settings = Settings.from_env({WARN_LEVEL_ENV: "3"})

    assert settings.warning_level == WarningLevel.MINOR


def test_settings_from_env_without_variable():
    assert Settings.from_env({}) == Settings()


def test_settings_from_env_reads_os_environ(monkeypatch):
    monkeypatch.setenv(WARN_LEVEL_ENV, "1")

    assert Settings.from_env().warning_level == WarningLevel.CRITICAL


def test_settings_from_env_rejects_bad_level():
    with pytest.raises(InvalidWarningLevelError):
        Settings.from_env({WARN_LEVEL_ENV: "9"})
