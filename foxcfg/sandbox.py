"""Embedded JavaScript sandbox implementing the autoconfig preference calls."""

from __future__ import annotations

import logging
import os

import dukpy
from pydantic import ValidationError

from foxcfg.errors import ScriptEvaluationError
from foxcfg.models import PreferenceSnapshot, SandboxValue

_LOG = logging.getLogger(__name__)

# Mirrors the call vocabulary of Mozilla's prefcalls.js. The maps have no
# prototype so inherited names such as `toString` never resolve.
BOOTSTRAP_SOURCE = """
var __foxcfgUserPrefs = Object.create(null);
var __foxcfgDefaultPrefs = Object.create(null);
function pref(key, value) {
  __foxcfgUserPrefs[key] = value;
}
function defaultPref(key, value) {
  __foxcfgDefaultPrefs[key] = value;
}
function lockPref(key, value) {
  delete __foxcfgUserPrefs[key];
  __foxcfgDefaultPrefs[key] = value;
}
function clearPref(key) {
  delete __foxcfgUserPrefs[key];
}
function unlockPref(key) {
}
function getPref(key) {
  if (key in __foxcfgUserPrefs)
    return __foxcfgUserPrefs[key];
  if (key in __foxcfgDefaultPrefs)
    return __foxcfgDefaultPrefs[key];
  return undefined;
}
function getenv(name) {
  return call_python('getenv', String(name));
}
var Components = {
  classes: {},
  interfaces: {},
  utils: {}
};
function __foxcfgDescribe(value) {
  var kind = value === null ? 'null' : typeof value;
  if (kind === 'undefined')
    return {kind: kind};
  if (kind !== 'string' && kind !== 'number' && kind !== 'boolean' &&
      kind !== 'null' && kind !== 'function')
    kind = 'object';
  var number = Number(value);
  return {
    kind: kind,
    text: String(value),
    number: isFinite(number) ? number : null,
    truthy: Boolean(value)
  };
}
function __foxcfgCopyScalars(source) {
  var copy = Object.create(null);
  for (var key in source) {
    var value = source[key];
    var kind = typeof value;
    if (value === null || kind === 'string' || kind === 'boolean' ||
        (kind === 'number' && isFinite(value)))
      copy[key] = value;
  }
  return copy;
}
function __foxcfgSnapshot() {
  return {
    user: __foxcfgCopyScalars(__foxcfgUserPrefs),
    defaults: __foxcfgCopyScalars(__foxcfgDefaultPrefs)
  };
}
"""

_LOOKUP_SOURCE = "__foxcfgDescribe(getPref(dukpy.key))"
_SNAPSHOT_SOURCE = "__foxcfgSnapshot()"


def getenv(name: str) -> str:
    """Environment accessor exported to scripts; unset variables read as ``""``."""
    return os.environ.get(name, "")


def build_program(local: str, remote: str) -> str:
    """Concatenate bootstrap, local and remote text into one program."""
    # Trailing `null` keeps the completion value JSON-encodable.
    return "\n".join((BOOTSTRAP_SOURCE, local, remote, "null;"))


class PreferenceSandbox:
    """A Duktape interpreter holding the user and default preference maps.

    The combined program runs exactly once, in the constructor. Instances are
    not safe for concurrent entry; callers sharing one across threads must
    serialize access.
    """

    def __init__(self, local: str = "", remote: str = "") -> None:
        self._interpreter = dukpy.JSInterpreter()
        self._interpreter.export_function("getenv", getenv)
        self._run(build_program(local, remote))
        _LOG.debug(
            "evaluated autoconfig program (local=%d chars, remote=%d chars)",
            len(local),
            len(remote),
        )

    def lookup(self, key: str) -> SandboxValue:
        """Run `getPref(key)` with `key` passed as data, not source text."""
        payload = self._run(_LOOKUP_SOURCE, key=key)
        try:
            return SandboxValue.model_validate(payload)
        except ValidationError as exc:
            raise ScriptEvaluationError(f"unexpected getPref result for {key}: {exc}") from exc

    def snapshot(self) -> PreferenceSnapshot:
        payload = self._run(_SNAPSHOT_SOURCE)
        try:
            return PreferenceSnapshot.model_validate(payload)
        except ValidationError as exc:
            raise ScriptEvaluationError(f"unexpected preference snapshot: {exc}") from exc

    def _run(self, source: str, **variables: object) -> object:
        try:
            return self._interpreter.evaljs(source, **variables)
        except dukpy.JSRuntimeError as exc:
            raise ScriptEvaluationError(f"autoconfig script failed: {exc}") from exc
