from __future__ import annotations

from dataclasses import dataclass, field
from typing import FrozenSet

from .constants import DEFAULT_BATCH_WORKERS
from .enums import ErrorCode


@dataclass(frozen=True)
class CalculationSettings:
    """Tenant-level calculation switches, read once from the settings module."""

    promoted_warnings: FrozenSet[ErrorCode] = field(default_factory=frozenset)
    allow_negative_vacation: bool = False
    batch_workers: int = DEFAULT_BATCH_WORKERS

    @classmethod
    def from_settings(cls, settings) -> "CalculationSettings":
        raw = getattr(settings, "PROMOTED_WARNINGS", ()) or ()
        return cls(
            promoted_warnings=frozenset(ErrorCode(str(code).strip()) for code in raw if str(code).strip()),
            allow_negative_vacation=bool(getattr(settings, "ALLOW_NEGATIVE_VACATION", False)),
            batch_workers=max(int(getattr(settings, "BATCH_WORKERS", DEFAULT_BATCH_WORKERS)), 1),
        )
