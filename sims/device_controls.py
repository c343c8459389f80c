"""
Title: Device Control Simulators (Orientation Lock, Back Button)
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Simulates the two presentation-level platform hooks the guard uses: locking
screen orientation and intercepting the hardware back button.

Dependencies:
- Python 3.10+
"""

from typing import Callable

from platform_services import BackHandler, OrientationLock


class OrientationLockSimulator(OrientationLock):
    def __init__(self):
        self.locked_to: str | None = None
        self.lock_calls = 0

    def lock(self, orientation: str) -> None:
        self.lock_calls += 1
        self.locked_to = orientation


class BackButtonSimulator(BackHandler):
    def __init__(self):
        self._predicates: list[Callable[[], bool]] = []
        self.dismissed = 0

    def intercept(self, should_swallow: Callable[[], bool]) -> int:
        self._predicates.append(should_swallow)
        return len(self._predicates) - 1

    def press(self) -> bool:
        # Returns True when the press was swallowed; otherwise the screen is dismissed.
        if any(p() for p in self._predicates):
            return True
        self.dismissed += 1
        return False
