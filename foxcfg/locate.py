"""Locate the autoconfig script files on disk."""

from __future__ import annotations

import os
from pathlib import Path

from foxcfg.diagnostics import Diagnostics
from foxcfg.profiles import discover_profiles, get_profile_search_dirs, iter_profile_dirs

FAILOVER_FILE_NAME = "failover.jsc"
LOCAL_CONFIG_PATTERN = "*.cfg"


def get_running_app_path(diagnostics: Diagnostics, *, pid: int | None = None) -> Path | None:
    """Return the executable of the process that launched us.

    The parent process is the application whose directory holds the local
    `.cfg` file. Only `/proc` based lookup is supported.
    """
    target_pid = os.getppid() if pid is None else pid
    exe_link = Path("/proc") / str(target_pid) / "exe"
    try:
        path = Path(os.readlink(exe_link))
    except OSError:
        diagnostics.record("Failed to get the path of the application")
        return None
    diagnostics.record(f"Got application path is {path}")
    return path


def first_matched_file(directory: Path, pattern: str, diagnostics: Diagnostics) -> Path | None:
    """Return the first regular file matching `pattern`, in sorted order."""
    display_pattern = str(directory / pattern)
    try:
        possible_files = sorted(path for path in directory.glob(pattern) if path.is_file())
    except OSError:
        diagnostics.record(f"Failed to get files from pattern {display_pattern}")
        return None
    if not possible_files:
        diagnostics.record(f"No match for the pattern {display_pattern}")
        return None
    diagnostics.record(f"First matched is {possible_files[0]}")
    return possible_files[0]


def find_local_config(app_path: Path | None, diagnostics: Diagnostics) -> Path | None:
    """Return the `.cfg` file sitting next to the application, if any."""
    if app_path is None:
        diagnostics.record("Failed to get local config path.")
        return None
    # TODO: read general.config.filename from the application's default prefs
    # instead of taking the first *.cfg file.
    return first_matched_file(app_path.parent, LOCAL_CONFIG_PATTERN, diagnostics)


def find_failover_jsc(
    diagnostics: Diagnostics,
    *,
    profile_dir: Path | None = None,
    search_dirs: list[Path] | None = None,
) -> Path | None:
    """Return the profile's `failover.jsc`.

    With an explicit `profile_dir` only that profile is checked. Otherwise the
    profile selected from `profiles.ini` is tried first, then any `*.default`
    profile, then any profile directory under the Firefox data roots.
    """
    if profile_dir is not None:
        return _profile_failover(profile_dir, diagnostics)

    roots = search_dirs if search_dirs is not None else get_profile_search_dirs()
    report = discover_profiles(roots)
    selected = report.selected_profile
    if selected is not None:
        diagnostics.record(f"Selected profile {selected.profile_id} at {selected.path}")
        path = _profile_failover(selected.path, diagnostics)
        if path is not None:
            return path

    for pattern in ("*.default", "*"):
        for base_dir in roots:
            for candidate_dir in iter_profile_dirs(base_dir, pattern):
                path = _profile_failover(candidate_dir, diagnostics)
                if path is not None:
                    return path
        diagnostics.record(f"No {FAILOVER_FILE_NAME} in profiles matching {pattern}")
    return None


def _profile_failover(profile_dir: Path, diagnostics: Diagnostics) -> Path | None:
    candidate = profile_dir / FAILOVER_FILE_NAME
    if not candidate.is_file():
        return None
    diagnostics.record(f"First matched is {candidate}")
    return candidate
