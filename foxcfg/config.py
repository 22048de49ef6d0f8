"""Typed access to preferences produced by autoconfig scripts."""

from __future__ import annotations

import logging
import math
import threading
from typing import Protocol

from foxcfg.diagnostics import Diagnostics
from foxcfg.errors import TypeCoercionError, UnknownPreferenceError
from foxcfg.loader import ScriptLoader, StaticScriptLoader
from foxcfg.models import PreferenceSnapshot, SandboxValue
from foxcfg.sandbox import PreferenceSandbox

_LOG = logging.getLogger(__name__)

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1


class ScriptSourceLoader(Protocol):
    def load_local_script(self) -> str: ...

    def load_remote_script(self) -> str: ...


class AutoConfig:
    """Preference values from the local and failover autoconfig scripts.

    Construction loads both scripts and evaluates them once; it raises
    `ScriptEvaluationError` if the program fails. Lookups afterwards are
    in-memory and serialized on a per-instance lock. An explicit
    `diagnostics` sink replaces the loader's own sink.
    """

    def __init__(
        self,
        loader: ScriptSourceLoader | None = None,
        *,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        if diagnostics is None:
            diagnostics = getattr(loader, "diagnostics", None)
        if diagnostics is None:
            diagnostics = Diagnostics()
        self.diagnostics = diagnostics
        if loader is None:
            loader = ScriptLoader(diagnostics=diagnostics)
        elif isinstance(loader, ScriptLoader):
            # Resolution steps and lookup failures share one trail.
            loader.diagnostics = diagnostics

        local = loader.load_local_script()
        remote = loader.load_remote_script()
        self._lock = threading.Lock()
        self._sandbox = PreferenceSandbox(local, remote)

    @classmethod
    def from_text(
        cls, local: str = "", remote: str = "", *, diagnostics: Diagnostics | None = None
    ) -> AutoConfig:
        """Build a config from script text already in memory."""
        return cls(StaticScriptLoader(local, remote), diagnostics=diagnostics)

    def get_value(self, key: str) -> SandboxValue:
        """Return the tagged `getPref` result, failing on unknown keys."""
        return self._resolve(key, "value")

    def get_string(self, key: str) -> str:
        value = self._resolve(key, "string")
        return value.text or ""

    def get_integer(self, key: str) -> int:
        value = self._resolve(key, "integer")
        if value.number is None:
            raise self._coercion_error(key, value, "integer")
        integer = math.trunc(float(value.number))
        if not INT64_MIN <= integer <= INT64_MAX:
            raise self._coercion_error(key, value, "integer")
        return integer

    def get_boolean(self, key: str) -> bool:
        value = self._resolve(key, "boolean")
        if value.truthy is None:
            raise self._coercion_error(key, value, "boolean")
        return value.truthy

    def preferences(self) -> PreferenceSnapshot:
        """Copy both preference maps for reporting."""
        with self._lock:
            return self._sandbox.snapshot()

    def _resolve(self, key: str, expected: str) -> SandboxValue:
        with self._lock:
            value = self._sandbox.lookup(key)
        if value.is_undefined:
            self.diagnostics.record(f"Unknown {expected} pref {key}")
            raise UnknownPreferenceError(key)
        return value

    def _coercion_error(self, key: str, value: SandboxValue, expected: str) -> TypeCoercionError:
        raw = value.text if value.text is not None else value.kind
        self.diagnostics.record(f"Failed to convert {raw} to {expected} for {key}")
        _LOG.debug("pref %s of kind %s is not a valid %s", key, value.kind, expected)
        return TypeCoercionError(key, raw, expected)
