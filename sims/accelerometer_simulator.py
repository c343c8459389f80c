"""
Title: Accelerometer Simulator
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Provides a simulated 3-axis accelerometer implementing the MotionSensor
interface. While at least one subscriber is registered it produces samples
around the rest vector with small random noise; a reading can be forced to
inject handling or theft motion. Samples are produced either step-wise
(emit / step) or from a background sampling thread.

Scope and Limitations:
- Noise is uniform and bounded; no gravity rotation or bias drift is modeled.
- Forced readings are delivered verbatim (including NaN / inf) for
  fault-injection testing.
- Callbacks run on the emitting thread (caller of emit(), or the sampler
  thread), mirroring a platform sensor callback path.

Dependencies:
- Python 3.10+
- random (standard library)
- threading (standard library)
"""

import itertools
import random
import threading
from typing import Callable

from platform_services import MotionSensor

SampleCallback = Callable[[float, float, float], None]


class AccelerometerSimulator(MotionSensor):
    def __init__(
        self,
        rest: tuple[float, float, float] = (0.0, 0.0, 1.0),
        noise_g: float = 0.02,
        rng: random.Random | None = None,
    ):
        self.rest = tuple(float(v) for v in rest)
        self.noise_g = float(noise_g)
        self.rng = rng or random.Random()

        self._subscribers: dict[int, SampleCallback] = {}
        self._ids = itertools.count(1)
        self._interval_ms = 100
        self._forced: tuple[float, float, float] | None = None
        self._lock = threading.Lock()

        self._stop_evt = threading.Event()
        self._thread: threading.Thread | None = None

    # MotionSensor interface

    def subscribe(self, callback: SampleCallback) -> int:
        with self._lock:
            handle = next(self._ids)
            self._subscribers[handle] = callback
            return handle

    def set_sample_interval(self, interval_ms: int) -> None:
        self._interval_ms = max(1, int(interval_ms))

    def unsubscribe(self, handle: int) -> None:
        with self._lock:
            self._subscribers.pop(handle, None)

    # Simulation controls

    @property
    def sample_interval_ms(self) -> int:
        return self._interval_ms

    @property
    def subscriber_count(self) -> int:
        with self._lock:
            return len(self._subscribers)

    def force_reading(self, x: float, y: float, z: float) -> None:
        # Hold a fixed reading until release() is called.
        self._forced = (float(x), float(y), float(z))

    def release(self) -> None:
        self._forced = None

    def read(self) -> tuple[float, float, float]:
        if self._forced is not None:
            return self._forced
        n = self.noise_g
        rx, ry, rz = self.rest
        return (
            rx + self.rng.uniform(-n, n),
            ry + self.rng.uniform(-n, n),
            rz + self.rng.uniform(-n, n),
        )

    def emit(self, x: float | None = None, y: float | None = None, z: float | None = None) -> int:
        # Deliver one sample to every subscriber; returns how many received it.
        if x is None or y is None or z is None:
            x, y, z = self.read()

        with self._lock:
            callbacks = list(self._subscribers.values())

        for cb in callbacks:
            cb(x, y, z)
        return len(callbacks)

    def step(self, n: int = 1) -> None:
        for _ in range(max(1, int(n))):
            self.emit()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, name="accelerometer", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop_evt.set()
        self._thread.join(timeout=1.0)
        self._thread = None

    def _run(self) -> None:
        while not self._stop_evt.wait(self._interval_ms / 1000.0):
            self.emit()
