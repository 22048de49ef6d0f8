"""Shared models for autoconfig sources and sandbox values."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, StrictBool, StrictFloat, StrictInt, StrictStr

ScriptOrigin = Literal["local", "failover"]
ValueKind = Literal[
    "string", "number", "boolean", "undefined", "null", "object", "function"
]
PrefLayer = Literal["user", "default"]


class ScriptSource(BaseModel):
    """One autoconfig script as handed to the sandbox."""

    origin: ScriptOrigin
    path: Path | None = None
    text: str = ""

    @property
    def found(self) -> bool:
        return self.path is not None


class SandboxValue(BaseModel):
    """Tagged result of a `getPref` call.

    `text`, `number` and `truthy` hold the engine's own `String(v)`,
    `Number(v)` and `Boolean(v)` conversions. `number` is None when the
    engine's conversion is not finite. All three are None for `undefined`.
    """

    kind: ValueKind
    text: StrictStr | None = None
    number: StrictInt | StrictFloat | None = None
    truthy: StrictBool | None = None

    @property
    def is_undefined(self) -> bool:
        return self.kind == "undefined"


class PreferenceEntry(BaseModel):
    """Resolved preference as shown in reports."""

    key: str
    layer: PrefLayer
    value: StrictBool | StrictInt | StrictFloat | StrictStr | None
    shadowed_default: bool = False


class PreferenceSnapshot(BaseModel):
    """Copy of both preference maps taken for reporting."""

    user: dict[str, StrictBool | StrictInt | StrictFloat | StrictStr | None] = Field(
        default_factory=dict
    )
    defaults: dict[str, StrictBool | StrictInt | StrictFloat | StrictStr | None] = Field(
        default_factory=dict
    )

    def resolved(self) -> list[PreferenceEntry]:
        """Return every visible key with user entries taking precedence."""
        entries: list[PreferenceEntry] = []
        for key in sorted(set(self.user) | set(self.defaults)):
            if key in self.user:
                entries.append(
                    PreferenceEntry(
                        key=key,
                        layer="user",
                        value=self.user[key],
                        shadowed_default=key in self.defaults,
                    )
                )
                continue
            entries.append(PreferenceEntry(key=key, layer="default", value=self.defaults[key]))
        return entries
