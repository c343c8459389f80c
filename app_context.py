"""
Title: Application Context Container
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Aggregates the guard controller, its configuration, the simulated device and
the control loop into a single container so the entry points can wire and
shut down the application in one place.

Scope and Limitations:
- Acts purely as a dependency container; contains no guard logic.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- threading (standard library)
"""

from dataclasses import dataclass
from threading import Event
from typing import Callable

from cli_support import ControlLoop, SimulatedDevice
from guard_configuration import GuardConfiguration
from guard_controller import GuardController


@dataclass
class AppContext:
    controller: GuardController
    config: GuardConfiguration
    clock: Callable[[], float]
    shutdown_event: Event

    device: SimulatedDevice
    loop: ControlLoop

    def shutdown(self) -> None:
        self.shutdown_event.set()
        self.loop.stop()
        self.device.accelerometer.stop()
        self.controller.shutdown()
