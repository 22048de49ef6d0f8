"""Per-instance diagnostic trail for script resolution and lookups."""

from __future__ import annotations

import logging
from collections.abc import Iterator

_LOG = logging.getLogger(__name__)


class Diagnostics:
    """Append-only list of human-readable resolution messages.

    Entries are observational only. Each entry is mirrored to the module
    logger at DEBUG level.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []

    def record(self, message: str) -> None:
        self._entries.append(message)
        _LOG.debug("%s", message)

    @property
    def entries(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
