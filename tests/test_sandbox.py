from __future__ import annotations

import pytest
from foxcfg.errors import ScriptEvaluationError
from foxcfg.sandbox import BOOTSTRAP_SOURCE, PreferenceSandbox, build_program


def test_build_program_orders_bootstrap_local_remote() -> None:
    program = build_program("pref('a', 1);", "pref('a', 2);")

    assert program.startswith(BOOTSTRAP_SOURCE)
    assert program.index("pref('a', 1);") < program.index("pref('a', 2);")


def test_pref_and_default_pref_populate_separate_layers() -> None:
    sandbox = PreferenceSandbox("defaultPref('a.default', 'd'); pref('a.user', 'u');")

    snapshot = sandbox.snapshot()
    assert snapshot.user == {"a.user": "u"}
    assert snapshot.defaults == {"a.default": "d"}


def test_lookup_reports_kind_and_engine_conversions() -> None:
    sandbox = PreferenceSandbox(
        "pref('s', 'hello'); pref('n', 30); pref('b', false); pref('z', null);"
    )

    text = sandbox.lookup("s")
    assert (text.kind, text.text, text.number, text.truthy) == ("string", "hello", None, True)

    number = sandbox.lookup("n")
    assert (number.kind, number.text, number.number, number.truthy) == ("number", "30", 30, True)

    boolean = sandbox.lookup("b")
    assert (boolean.kind, boolean.text, boolean.number, boolean.truthy) == (
        "boolean",
        "false",
        0,
        False,
    )

    null = sandbox.lookup("z")
    assert null.kind == "null"
    assert null.text == "null"


def test_lookup_of_missing_key_is_undefined() -> None:
    value = PreferenceSandbox("").lookup("missing")

    assert value.is_undefined
    assert value.text is None
    assert value.number is None
    assert value.truthy is None


def test_lock_pref_removes_user_value_and_sets_default() -> None:
    sandbox = PreferenceSandbox("pref('k', 'user'); lockPref('k', 'locked');")

    snapshot = sandbox.snapshot()
    assert snapshot.user == {}
    assert snapshot.defaults == {"k": "locked"}


def test_unlock_pref_changes_nothing() -> None:
    sandbox = PreferenceSandbox("lockPref('k', 1); pref('u', 2); unlockPref('k'); unlockPref('u');")

    snapshot = sandbox.snapshot()
    assert snapshot.user == {"u": 2}
    assert snapshot.defaults == {"k": 1}


def test_inherited_object_members_are_not_preferences() -> None:
    sandbox = PreferenceSandbox("")

    assert sandbox.lookup("toString").is_undefined
    assert sandbox.lookup("__proto__").is_undefined
    assert sandbox.lookup("hasOwnProperty").is_undefined


def test_lookup_key_is_passed_as_data() -> None:
    sandbox = PreferenceSandbox("pref(\"it's.quoted\", 'ok'); pref('a\\\\b', 'slash');")

    assert sandbox.lookup("it's.quoted").text == "ok"
    assert sandbox.lookup("a\\b").text == "slash"
    assert sandbox.lookup("') + pref('x', 1) + ('").is_undefined
    assert sandbox.lookup("x").is_undefined


def test_getenv_reads_process_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FOXCFG_TEST_SITE", "branch-office")
    monkeypatch.delenv("FOXCFG_TEST_UNSET", raising=False)

    sandbox = PreferenceSandbox(
        "pref('site', getenv('FOXCFG_TEST_SITE'));"
        "pref('unset', getenv('FOXCFG_TEST_UNSET'));"
        "if (getenv('FOXCFG_TEST_SITE') == 'branch-office') { pref('proxy', 'branch'); }"
    )

    assert sandbox.lookup("site").text == "branch-office"
    assert sandbox.lookup("unset").kind == "string"
    assert sandbox.lookup("unset").text == ""
    assert sandbox.lookup("proxy").text == "branch"


def test_components_placeholder_is_inert() -> None:
    sandbox = PreferenceSandbox(
        "var cc = Components.classes; var ci = Components.interfaces;"
        "pref('utils.kind', typeof Components.utils);"
    )

    assert sandbox.lookup("utils.kind").text == "object"


def test_snapshot_skips_non_scalar_values() -> None:
    sandbox = PreferenceSandbox("pref('obj', {a: 1}); pref('fn', function () {}); pref('ok', 1.5);")

    assert sandbox.snapshot().user == {"ok": 1.5}
    assert sandbox.lookup("obj").kind == "object"
    assert sandbox.lookup("fn").kind == "function"


@pytest.mark.parametrize(
    "script",
    [
        "pref('broken', ;",
        "throw new Error('boom');",
        "notAPrimitive('x', 1);",
    ],
)
def test_failing_program_raises_script_evaluation_error(script: str) -> None:
    with pytest.raises(ScriptEvaluationError):
        PreferenceSandbox(script)


def test_failing_remote_script_also_fails_construction() -> None:
    with pytest.raises(ScriptEvaluationError):
        PreferenceSandbox("pref('a', 1);", "}")


def test_script_ending_in_line_comment_does_not_swallow_next_script() -> None:
    sandbox = PreferenceSandbox("pref('a', 1); // trailing comment", "pref('b', 2);")

    assert sandbox.lookup("a").number == 1
    assert sandbox.lookup("b").number == 2


def test_snapshot_keeps_proto_named_preference() -> None:
    sandbox = PreferenceSandbox("pref('__proto__', 'x'); defaultPref('constructor', 1);")

    assert sandbox.lookup("__proto__").text == "x"
    snapshot = sandbox.snapshot()
    assert snapshot.user == {"__proto__": "x"}
    assert snapshot.defaults == {"constructor": 1}
