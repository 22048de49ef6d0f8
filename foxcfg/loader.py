"""Read the local and failover autoconfig scripts as text."""

from __future__ import annotations

from pathlib import Path

from foxcfg.diagnostics import Diagnostics
from foxcfg.locate import find_failover_jsc, find_local_config, get_running_app_path
from foxcfg.models import ScriptOrigin, ScriptSource


class ScriptLoader:
    """Locate and read autoconfig scripts without ever failing.

    Explicit `local_path`/`failover_path` skip discovery. Otherwise the local
    script is searched next to `app_path` (defaulting to the parent process
    executable) and the failover script in `profile_dir` or the discovered
    Firefox profiles. Missing or unreadable files yield empty text.
    """

    def __init__(
        self,
        *,
        local_path: Path | None = None,
        failover_path: Path | None = None,
        app_path: Path | None = None,
        profile_dir: Path | None = None,
        search_dirs: list[Path] | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.local_path = local_path
        self.failover_path = failover_path
        self.app_path = app_path
        self.profile_dir = profile_dir
        self.search_dirs = search_dirs
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()

    def load_local_script(self) -> str:
        return self.load_local_source().text

    def load_remote_script(self) -> str:
        return self.load_remote_source().text

    def load_local_source(self) -> ScriptSource:
        path = self.local_path
        if path is None:
            app_path = self.app_path or get_running_app_path(self.diagnostics)
            path = find_local_config(app_path, self.diagnostics)
        if path is None:
            self.diagnostics.record("Failed to get path to local config file.")
            return ScriptSource(origin="local")
        return _read_source("local", path, self.diagnostics)

    def load_remote_source(self) -> ScriptSource:
        path = self.failover_path
        if path is None:
            path = find_failover_jsc(
                self.diagnostics, profile_dir=self.profile_dir, search_dirs=self.search_dirs
            )
        if path is None:
            self.diagnostics.record("Failed to get path to failover.jsc")
            return ScriptSource(origin="failover")
        return _read_source("failover", path, self.diagnostics)


class StaticScriptLoader:
    """Loader over in-memory script text."""

    def __init__(self, local: str = "", remote: str = "") -> None:
        self.local = local
        self.remote = remote

    def load_local_script(self) -> str:
        return self.local

    def load_remote_script(self) -> str:
        return self.remote


def _read_source(origin: ScriptOrigin, path: Path, diagnostics: Diagnostics) -> ScriptSource:
    label = "local config file" if origin == "local" else "failover.jsc"
    try:
        raw = path.read_bytes()
    except OSError:
        diagnostics.record(f"Failed to read {label} from {path}")
        return ScriptSource(origin=origin)
    diagnostics.record(f"Read {len(raw)} bytes of {label} from {path}")
    return ScriptSource(origin=origin, path=path, text=raw.decode("utf-8", errors="replace"))
