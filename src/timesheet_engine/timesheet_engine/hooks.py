"""Named extension points run after daily and monthly aggregation.

A hook receives the freshly computed record and returns either a replacement
record or None to keep it. Hooks run in registration order; exceptions raised
by a hook propagate to the caller.
"""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Generic, Optional, TypeVar

from .core.exceptions import ValidationError
from .daily.model import DailyValue
from .monthly.model import MonthlyValue

logger = logging.getLogger(__name__)

T = TypeVar("T")


class HookChain(Generic[T]):
    def __init__(self):
        self._hooks: Dict[str, Callable[[T], Optional[T]]] = {}
        self._lock = threading.Lock()

    def register(self, name: str, fn: Callable[[T], Optional[T]]) -> None:
        if not name or not name.strip():
            raise ValidationError("hook name must not be empty")
        with self._lock:
            if name in self._hooks:
                raise ValidationError(f"hook {name!r} is already registered")
            self._hooks[name] = fn

    def unregister(self, name: str) -> bool:
        with self._lock:
            return self._hooks.pop(name, None) is not None

    def names(self):
        with self._lock:
            return tuple(self._hooks)

    def run(self, record: T) -> T:
        with self._lock:
            hooks = list(self._hooks.items())
        for name, fn in hooks:
            replaced = fn(record)
            if replaced is not None:
                logger.debug("Hook %s replaced %s", name, type(record).__name__)
                record = replaced
        return record


class HookRegistry:
    def __init__(self):
        self.after_daily: HookChain[DailyValue] = HookChain()
        self.after_monthly: HookChain[MonthlyValue] = HookChain()
