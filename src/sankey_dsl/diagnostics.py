"""Diagnostics channel: messages about the input, surfaced to the user.

Nothing here is fatal: invalid lines and settings are recorded as issues,
skipped and calculated flows as informational entries.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from sankey_dsl.types import Level

logger = logging.getLogger(__name__)


@dataclass
class Diagnostic:
    text: str
    message: str
    level: Level = Level.ISSUE
    row: int | None = None

    def __str__(self) -> str:
        if self.text:
            return f'{self.level.value}: {self.message}: "{self.text}"'
        return f"{self.level.value}: {self.message}"

    def to_dict(self) -> dict[str, object]:
        return {"text": self.text, "message": self.message, "level": self.level.value, "row": self.row}


@dataclass
class Diagnostics:
    entries: list[Diagnostic] = field(default_factory=list)
    _seen_keys: set[str] = field(default_factory=set, repr=False)

    def issue(self, text: str, message: str, row: int | None = None) -> Diagnostic:
        entry = Diagnostic(text=text, message=message, level=Level.ISSUE, row=row)
        self.entries.append(entry)
        logger.warning("%s", entry)
        return entry

    def info(self, message: str, text: str = "", row: int | None = None) -> Diagnostic:
        entry = Diagnostic(text=text, message=message, level=Level.INFO, row=row)
        self.entries.append(entry)
        logger.debug("%s", entry)
        return entry

    def info_once(self, key: str, message: str) -> Diagnostic | None:
        """Record ``message`` only the first time ``key`` is seen."""
        if key in self._seen_keys:
            return None
        self._seen_keys.add(key)
        return self.info(message)

    @property
    def issues(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.level is Level.ISSUE]

    @property
    def infos(self) -> list[Diagnostic]:
        return [d for d in self.entries if d.level is Level.INFO]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)
