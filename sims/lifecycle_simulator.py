"""
Title: App Lifecycle Simulator
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Simulates the platform app-lifecycle source. Tests and the CLI call
set_state() to move the app between active, inactive and background, and every
subscriber is notified of each change.

Scope and Limitations:
- Repeated set_state() calls with the current state are not re-announced.
- No terminated state is modeled; termination ends the process.

Dependencies:
- Python 3.10+
"""

import itertools
from typing import Callable

from platform_services import LifecycleSource, LifecycleState


class LifecycleSimulator(LifecycleSource):
    def __init__(self, initial: LifecycleState = LifecycleState.ACTIVE):
        self._state = initial
        self._subscribers: dict[int, Callable[[LifecycleState], None]] = {}
        self._ids = itertools.count(1)

    @property
    def state(self) -> LifecycleState:
        return self._state

    def subscribe(self, callback: Callable[[LifecycleState], None]) -> int:
        handle = next(self._ids)
        self._subscribers[handle] = callback
        return handle

    def unsubscribe(self, handle: int) -> None:
        self._subscribers.pop(handle, None)

    def set_state(self, new_state: LifecycleState) -> bool:
        if new_state == self._state:
            return False
        self._state = new_state
        for cb in list(self._subscribers.values()):
            cb(new_state)
        return True
