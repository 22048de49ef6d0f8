"""Typed preference access for Firefox autoconfig scripts."""

from foxcfg.config import AutoConfig
from foxcfg.diagnostics import Diagnostics
from foxcfg.errors import (
    AutoConfigError,
    PreferenceError,
    ScriptEvaluationError,
    TypeCoercionError,
    UnknownPreferenceError,
)
from foxcfg.loader import ScriptLoader

__version__ = "0.1.0"

__all__ = [
    "AutoConfig",
    "AutoConfigError",
    "Diagnostics",
    "PreferenceError",
    "ScriptEvaluationError",
    "ScriptLoader",
    "TypeCoercionError",
    "UnknownPreferenceError",
    "__version__",
]
