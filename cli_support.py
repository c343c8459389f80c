"""
Title: CLI Support Utilities and Control Loop
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.1

Purpose:
Provides the control loop that drives GuardController.update() either
step-wise (tests, CLI "step") or from a background thread, plus the simulated
device bundle the CLI and main entry point wire into the controller.

Scope and Limitations:
- ControlLoop timing is approximate; countdown accuracy comes from the
  controller's clock-based timers, not from the loop period.
- An exception raised by one tick is logged and the loop keeps running.

Dependencies:
- Python 3.10+
- threading (standard library)
- logging (standard library)
- guard_controller.py
- sims/
"""

import logging
import random
import threading
import time
from dataclasses import dataclass, field
from typing import Callable, Optional

from guard_controller import GuardController
from sims.accelerometer_simulator import AccelerometerSimulator
from sims.alarm_outputs import SimulatedSoundPlayer, SimulatedVibrator
from sims.device_controls import BackButtonSimulator, OrientationLockSimulator
from sims.lifecycle_simulator import LifecycleSimulator

logger = logging.getLogger(__name__)


@dataclass
class SimulatedDevice:
    accelerometer: AccelerometerSimulator = field(default_factory=AccelerometerSimulator)
    lifecycle: LifecycleSimulator = field(default_factory=LifecycleSimulator)
    sound: SimulatedSoundPlayer = field(default_factory=SimulatedSoundPlayer)
    vibrator: SimulatedVibrator = field(default_factory=SimulatedVibrator)
    orientation: OrientationLockSimulator = field(default_factory=OrientationLockSimulator)
    back_button: BackButtonSimulator = field(default_factory=BackButtonSimulator)

    @classmethod
    def seeded(cls, seed: int) -> "SimulatedDevice":
        return cls(accelerometer=AccelerometerSimulator(rng=random.Random(seed)))


class ControlLoop:
    def __init__(self,
                 controller: GuardController,
                 period_s: float = 0.1,
                 on_tick: Optional[Callable] = None,):
        self._controller = controller
        self._period_s = float(period_s)
        self._on_tick = on_tick
        self._running = False
        self._stop_evt = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def period_s(self) -> float:
        return self._period_s

    @property
    def running(self) -> bool:
        return self._running

    def set_period(self, period_s: float) -> None:
        self._period_s = max(0.01, float(period_s))

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._stop_evt.clear()
        self._thread = threading.Thread(target=self._run, name="guard-loop", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if not self._running:
            return
        self._stop_evt.set()
        if self._thread is not None:
            self._thread.join(timeout=1.0)
        self._running = False
        self._thread = None

    def step(self, n: int = 1) -> None:
        for _ in range(max(1, int(n))):
            self._tick()

    def _tick(self) -> None:
        self._controller.update()
        if self._on_tick:
            self._on_tick(self._controller)

    def _run(self) -> None:
        while not self._stop_evt.is_set():
            try:
                self._tick()
            except Exception:
                logger.exception("Unhandled exception in control loop")
            time.sleep(self._period_s)
