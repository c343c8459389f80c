# test_simulators.py
#
# Unit tests for the simulated platform services and the control loop.

import random
import time

from cli_support import ControlLoop, SimulatedDevice
from guard_harness import make_guard
from platform_services import LifecycleState
from sims.accelerometer_simulator import AccelerometerSimulator
from sims.device_controls import BackButtonSimulator, OrientationLockSimulator
from sims.lifecycle_simulator import LifecycleSimulator


# -----------------------------
# Accelerometer
# -----------------------------

def test_accelerometer_noise_stays_near_rest():
    accel = AccelerometerSimulator(noise_g=0.02, rng=random.Random(7))

    for _ in range(100):
        x, y, z = accel.read()
        assert abs(x) <= 0.02
        assert abs(y) <= 0.02
        assert abs(z - 1.0) <= 0.02


def test_accelerometer_forced_reading_and_release():
    accel = AccelerometerSimulator(rng=random.Random(1))
    accel.force_reading(0.5, 0.0, 1.0)
    assert accel.read() == (0.5, 0.0, 1.0)

    accel.release()
    assert accel.read() != (0.5, 0.0, 1.0)


def test_accelerometer_delivers_only_to_current_subscribers():
    accel = AccelerometerSimulator()
    received = []
    handle = accel.subscribe(lambda x, y, z: received.append((x, y, z)))

    assert accel.emit(0.1, 0.2, 0.9) == 1
    accel.unsubscribe(handle)
    assert accel.emit(0.1, 0.2, 0.9) == 0

    assert received == [(0.1, 0.2, 0.9)]


def test_accelerometer_sample_interval():
    accel = AccelerometerSimulator()
    accel.set_sample_interval(500)
    assert accel.sample_interval_ms == 500


def test_accelerometer_background_sampler_starts_and_stops():
    accel = AccelerometerSimulator()
    accel.set_sample_interval(5)
    received = []
    accel.subscribe(lambda x, y, z: received.append(z))

    accel.start()
    deadline = time.monotonic() + 2.0
    while not received and time.monotonic() < deadline:
        time.sleep(0.01)
    accel.stop()

    assert received


# -----------------------------
# Lifecycle, orientation, back button
# -----------------------------

def test_lifecycle_notifies_only_on_change():
    life = LifecycleSimulator()
    seen = []
    life.subscribe(seen.append)

    assert life.set_state(LifecycleState.ACTIVE) is False
    assert life.set_state(LifecycleState.BACKGROUND) is True
    assert life.set_state(LifecycleState.ACTIVE) is True

    assert seen == [LifecycleState.BACKGROUND, LifecycleState.ACTIVE]


def test_orientation_lock_records_calls():
    lock = OrientationLockSimulator()
    lock.lock("portrait")
    assert lock.locked_to == "portrait"
    assert lock.lock_calls == 1


def test_back_button_swallows_while_predicate_true():
    back = BackButtonSimulator()
    swallow = [False]
    back.intercept(lambda: swallow[0])

    assert back.press() is False
    swallow[0] = True
    assert back.press() is True
    assert back.dismissed == 1


def test_seeded_device_is_reproducible():
    a = SimulatedDevice.seeded(42)
    b = SimulatedDevice.seeded(42)
    assert [a.accelerometer.read() for _ in range(5)] == [b.accelerometer.read() for _ in range(5)]


# -----------------------------
# ControlLoop
# -----------------------------

def test_control_loop_step_updates_and_reports():
    controller, clock, device = make_guard(password="abcd")
    ticks = []
    loop = ControlLoop(controller, period_s=0.1, on_tick=ticks.append)

    controller.arm()
    clock.set(3.0)
    loop.step(2)

    assert controller.remaining_s == 7
    assert ticks == [controller, controller]


def test_control_loop_period_has_floor():
    controller, clock, device = make_guard()
    loop = ControlLoop(controller)
    loop.set_period(0.0)
    assert loop.period_s == 0.01


def test_control_loop_survives_tick_exception():
    controller, clock, device = make_guard()
    calls = []

    def on_tick(c):
        calls.append(c)
        raise RuntimeError("display failed")

    loop = ControlLoop(controller, period_s=0.01, on_tick=on_tick)
    loop.start()
    deadline = time.monotonic() + 2.0
    while len(calls) < 3 and time.monotonic() < deadline:
        time.sleep(0.01)
    loop.stop()

    assert len(calls) >= 3
    assert loop.running is False
