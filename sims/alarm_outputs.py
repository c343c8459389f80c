"""
Title: Alarm Output Simulators (Sound Player, Vibrator)
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Simulated sound and vibration channels for the alarm actuator. Both record
every call so tests can assert on what the actuator commanded, and both
support fault injection to exercise the degraded and retry paths.

Scope and Limitations:
- No audio is produced; playback is a state flag.
- Vibration patterns are recorded, not timed.

Dependencies:
- Python 3.10+
"""

import itertools
from typing import Sequence

from platform_services import SoundPlayer, Vibrator


class SimulatedSoundPlayer(SoundPlayer):
    def __init__(self, fail_on: Sequence[str] = ()):
        # fail_on: operation names ("load", "set_volume", "play", "stop", "unload") that raise.
        self.fail_on = set(fail_on)
        self.calls: list[tuple] = []
        self.loaded: dict[int, str] = {}
        self.playing: set[int] = set()
        self.volume: dict[int, float] = {}
        self._ids = itertools.count(1)

    def _check(self, op: str) -> None:
        if op in self.fail_on:
            raise RuntimeError(f"simulated sound {op} failure")

    def load(self, resource: str) -> int:
        self.calls.append(("load", resource))
        self._check("load")
        handle = next(self._ids)
        self.loaded[handle] = resource
        return handle

    def set_volume(self, handle: int, volume: float) -> None:
        self.calls.append(("set_volume", handle, volume))
        self._check("set_volume")
        self.volume[handle] = float(volume)

    def play(self, handle: int, loop: bool = True) -> None:
        self.calls.append(("play", handle, loop))
        self._check("play")
        self.playing.add(handle)

    def stop(self, handle: int) -> None:
        self.calls.append(("stop", handle))
        self._check("stop")
        self.playing.discard(handle)

    def unload(self, handle: int) -> None:
        self.calls.append(("unload", handle))
        self._check("unload")
        self.playing.discard(handle)
        self.loaded.pop(handle, None)

    @property
    def is_playing(self) -> bool:
        return bool(self.playing)


class SimulatedVibrator(Vibrator):
    def __init__(self, fail_on: Sequence[str] = ()):
        # fail_on: operation names ("vibrate", "cancel") that raise.
        self.fail_on = set(fail_on)
        self.calls: list[tuple] = []
        self.vibrating = False
        self.pattern: tuple[int, ...] = ()

    def vibrate(self, pattern_ms: Sequence[int], repeat: bool) -> None:
        self.calls.append(("vibrate", tuple(pattern_ms), bool(repeat)))
        if "vibrate" in self.fail_on:
            raise RuntimeError("simulated vibrate failure")
        self.pattern = tuple(pattern_ms)
        self.vibrating = True

    def cancel(self) -> None:
        self.calls.append(("cancel",))
        if "cancel" in self.fail_on:
            raise RuntimeError("simulated vibrator busy")
        self.vibrating = False
