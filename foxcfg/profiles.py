"""Firefox profile discovery for locating profile-resident autoconfig files."""

from __future__ import annotations

import configparser
import os
import sys
from pathlib import Path

from pydantic import BaseModel, Field

_DEFAULT_SUFFIXES = (".default-release", ".default")


class FirefoxProfile(BaseModel):
    """Profile entry parsed from `profiles.ini`."""

    profile_id: str
    name: str
    path: Path
    is_relative: bool
    default_flag: bool
    selected: bool = False


class ProfileDiscoveryReport(BaseModel):
    """Result of looking for `profiles.ini` under the platform roots."""

    searched_dirs: list[Path] = Field(default_factory=list)
    base_dir: Path | None = None
    profiles_ini: Path | None = None
    profiles: list[FirefoxProfile] = Field(default_factory=list)
    selected_profile_id: str | None = None

    @property
    def selected_profile(self) -> FirefoxProfile | None:
        return next((profile for profile in self.profiles if profile.selected), None)


def get_profile_search_dirs(
    *,
    home: Path | None = None,
    xdg_config_home: Path | None = None,
    appdata: Path | None = None,
    platform: str | None = None,
) -> list[Path]:
    """Return Firefox data roots in lookup order for the current platform."""
    resolved_home = (home or Path.home()).expanduser()
    current_platform = platform or sys.platform

    candidates: list[Path] = []
    if current_platform.startswith("win"):
        if appdata is None:
            appdata_env = os.environ.get("APPDATA")
            if appdata_env:
                appdata = Path(appdata_env)
        if appdata is not None:
            candidates.append(appdata / "Mozilla" / "Firefox")
        candidates.append(resolved_home / "AppData" / "Roaming" / "Mozilla" / "Firefox")
    elif current_platform == "darwin":
        candidates.append(resolved_home / "Library" / "Application Support" / "Firefox")
    else:
        if xdg_config_home is None:
            xdg_env = os.environ.get("XDG_CONFIG_HOME")
            if xdg_env:
                xdg_config_home = Path(xdg_env).expanduser()
        if xdg_config_home is not None:
            candidates.append(xdg_config_home / "mozilla" / "firefox")
        candidates.append(resolved_home / ".config" / "mozilla" / "firefox")
        candidates.append(resolved_home / ".mozilla" / "firefox")

    deduped: list[Path] = []
    seen: set[Path] = set()
    for candidate in candidates:
        normalized = candidate.expanduser()
        if normalized not in seen:
            deduped.append(normalized)
            seen.add(normalized)
    return deduped


def discover_profiles(search_dirs: list[Path]) -> ProfileDiscoveryReport:
    """Parse the first `profiles.ini` found and mark the preferred profile."""
    report = ProfileDiscoveryReport(searched_dirs=search_dirs)

    for base_dir in search_dirs:
        ini_path = base_dir / "profiles.ini"
        if ini_path.is_file():
            report.base_dir = base_dir
            report.profiles_ini = ini_path
            break
    if report.profiles_ini is None or report.base_dir is None:
        return report

    report.profiles = _parse_profiles_ini(base_dir=report.base_dir, profiles_ini=report.profiles_ini)
    if not report.profiles:
        return report

    selected = min(report.profiles, key=_profile_sort_key)
    selected.selected = True
    report.selected_profile_id = selected.profile_id
    return report


def iter_profile_dirs(base_dir: Path, pattern: str = "*") -> list[Path]:
    """Glob profile directories under a Firefox data root.

    Windows and macOS keep profiles under `Profiles/`; Linux keeps them
    directly under the data root. Both layouts are searched.
    """
    matches: list[Path] = []
    for parent in (base_dir / "Profiles", base_dir):
        if not parent.is_dir():
            continue
        matches.extend(path for path in sorted(parent.glob(pattern)) if path.is_dir())
    return matches


def _parse_profiles_ini(*, base_dir: Path, profiles_ini: Path) -> list[FirefoxProfile]:
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(profiles_ini, encoding="utf-8")
    except configparser.Error:
        return []

    profiles: list[FirefoxProfile] = []
    for section in parser.sections():
        if not section.startswith("Profile"):
            continue

        path_value = parser.get(section, "Path", fallback="").strip()
        if not path_value:
            continue

        is_relative = parser.get(section, "IsRelative", fallback="1").strip() == "1"
        raw_path = Path(path_value)
        profiles.append(
            FirefoxProfile(
                profile_id=section,
                name=parser.get(section, "Name", fallback=section),
                path=(base_dir / raw_path) if is_relative else raw_path.expanduser(),
                is_relative=is_relative,
                default_flag=parser.get(section, "Default", fallback="0").strip() == "1",
            )
        )
    return profiles


def _profile_sort_key(profile: FirefoxProfile) -> tuple[int, int, str]:
    suffix_rank = next(
        (
            index
            for index, suffix in enumerate(_DEFAULT_SUFFIXES)
            if profile.path.name.endswith(suffix)
        ),
        len(_DEFAULT_SUFFIXES),
    )
    return (-int(profile.default_flag), suffix_rank, str(profile.path))
