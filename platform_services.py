"""
Title: Platform Service Interfaces
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Declares the boundary between the guard controller and the device platform:
secret storage, sound playback, vibration, accelerometer, app lifecycle,
orientation locking and hardware-back interception. The controller only talks
to these interfaces; concrete implementations live in secret_store.py and in
the sims/ package.

Scope and Limitations:
- Callbacks registered through subscribe() may be invoked from any thread.
- Interfaces describe calls only; none of them carry guard logic.

Dependencies:
- Python 3.10+
- enum (standard library)
"""

from enum import Enum
from typing import Any, Callable, Sequence


class LifecycleState(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BACKGROUND = "background"


class SecretStore:
    """Persists a single secret string."""

    def set(self, value: str) -> None:
        raise NotImplementedError

    def get(self) -> str | None:
        """Return the stored secret, or None when nothing was ever stored."""
        raise NotImplementedError


class SoundPlayer:
    def load(self, resource: str) -> Any:
        raise NotImplementedError

    def set_volume(self, handle: Any, volume: float) -> None:
        raise NotImplementedError

    def play(self, handle: Any, loop: bool = True) -> None:
        raise NotImplementedError

    def stop(self, handle: Any) -> None:
        raise NotImplementedError

    def unload(self, handle: Any) -> None:
        raise NotImplementedError


class Vibrator:
    def vibrate(self, pattern_ms: Sequence[int], repeat: bool) -> None:
        raise NotImplementedError

    def cancel(self) -> None:
        raise NotImplementedError


class MotionSensor:
    def subscribe(self, callback: Callable[[float, float, float], None]) -> Any:
        raise NotImplementedError

    def set_sample_interval(self, interval_ms: int) -> None:
        raise NotImplementedError

    def unsubscribe(self, handle: Any) -> None:
        raise NotImplementedError


class LifecycleSource:
    def subscribe(self, callback: Callable[[LifecycleState], None]) -> Any:
        raise NotImplementedError


class OrientationLock:
    def lock(self, orientation: str) -> None:
        raise NotImplementedError


class BackHandler:
    def intercept(self, should_swallow: Callable[[], bool]) -> Any:
        raise NotImplementedError
