"""Exception hierarchy for autoconfig evaluation and typed lookups."""

from __future__ import annotations


class AutoConfigError(Exception):
    """Base class for all foxcfg errors."""


class ScriptEvaluationError(AutoConfigError):
    """Raised when the combined autoconfig program fails to parse or run."""


class PreferenceError(AutoConfigError, LookupError):
    """Base class for recoverable per-key lookup failures."""

    def __init__(self, key: str, message: str) -> None:
        super().__init__(message)
        self.key = key

    def __str__(self) -> str:
        return str(self.args[0])


class UnknownPreferenceError(PreferenceError, KeyError):
    """Raised when a key is set in neither the user nor the default map."""

    def __init__(self, key: str) -> None:
        super().__init__(key, f"unknown pref: {key}")


class TypeCoercionError(PreferenceError, ValueError):
    """Raised when a resolved value cannot be coerced to the requested type."""

    def __init__(self, key: str, raw_value: str, expected: str) -> None:
        super().__init__(
            key, f"failed to convert {raw_value!r} to {expected} for {key}"
        )
        self.raw_value = raw_value
        self.expected = expected
