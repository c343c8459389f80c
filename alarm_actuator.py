"""
Title: Alarm Actuator (Looped Sound + Repeating Vibration)
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Drives the two alarm outputs as a single start/stop actuator. Starting the
alarm plays the alarm sound on loop at full volume and starts a repeating
vibration pattern; stopping it silences both.

Scope and Limitations:
- Sound failures (load, volume, play, stop) are treated as ActuatorFault:
  logged and absorbed. Vibration is always commanded regardless, because the
  alarm must still be noticeable when audio is unavailable.
- Vibration failures are not absorbed; they propagate to the caller. A failed
  cancel leaves the actuator active so the next stop() retries it.
- No automatic retry of failed sound operations.
- start() and stop() are idempotent with respect to the active flag.

Dependencies:
- Python 3.10+
- logging (standard library)
- platform_services.py
- guard_errors.py
"""

import logging
from typing import Any, Callable, Sequence

from guard_errors import ActuatorFault
from platform_services import SoundPlayer, Vibrator

logger = logging.getLogger(__name__)


class AlarmActuator:
    def __init__(
        self,
        sound: SoundPlayer | None,
        vibrator: Vibrator,
        resource: str,
        volume: float = 1.0,
        vibration_pattern_ms: Sequence[int] = (500, 500, 500),
        on_fault: Callable[[ActuatorFault], None] | None = None,
    ):
        self._sound = sound
        self._vibrator = vibrator
        self._resource = resource
        self._volume = float(volume)
        self._pattern = tuple(int(d) for d in vibration_pattern_ms)
        self._on_fault = on_fault

        self._handle: Any = None
        self._active = False
        self._sound_playing = False
        self._faults: list[ActuatorFault] = []

    @property
    def active(self) -> bool:
        return self._active

    @property
    def sound_playing(self) -> bool:
        return self._sound_playing

    @property
    def faults(self) -> list[ActuatorFault]:
        return list(self._faults)

    def start(self) -> None:
        if self._active:
            return
        self._active = True

        self._start_sound()

        # Vibration fires even if the sound channel failed above.
        self._vibrator.vibrate(self._pattern, repeat=True)
        logger.info("Alarm actuator started (sound=%s)", self._sound_playing)

    def stop(self) -> None:
        if not self._active:
            return

        if self._sound_playing and self._handle is not None:
            try:
                self._sound.stop(self._handle)
            except Exception as e:
                self._fault("stop", e)
        self._sound_playing = False

        # Stays active until vibration is cancelled, so a failed cancel is retried by the next stop().
        self._vibrator.cancel()
        self._active = False
        logger.info("Alarm actuator stopped")

    def close(self) -> None:
        # Release the loaded sound resource; safe to call more than once.
        if self._handle is None or self._sound is None:
            return
        handle, self._handle = self._handle, None
        try:
            self._sound.unload(handle)
        except Exception as e:
            self._fault("unload", e)

    def _start_sound(self) -> None:
        if self._sound is None:
            self._fault("load", RuntimeError("no sound player available"))
            return

        try:
            if self._handle is None:
                self._handle = self._sound.load(self._resource)
            self._sound.set_volume(self._handle, self._volume)
            self._sound.play(self._handle, loop=True)
            self._sound_playing = True
        except Exception as e:
            self._sound_playing = False
            self._fault("play", e)

    def _fault(self, operation: str, cause: Exception) -> None:
        fault = ActuatorFault(f"sound {operation} failed: {cause}")
        fault.__cause__ = cause
        self._faults.append(fault)
        logger.warning("Actuator fault ignored: %s", fault)
        if self._on_fault is not None:
            self._on_fault(fault)
