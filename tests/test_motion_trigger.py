"""
Title: Motion Trigger Unit Tests
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Verifies that acceleration samples within the rest threshold never trigger
the alarm, that a single sample beyond it on any axis does, and that the alarm
actuator starts exactly once no matter how many violating samples are queued.

Dependencies:
- Python 3.10+
- pytest
"""

import pytest

from guard_states import GuardState
from guard_harness import arm_to_monitoring, make_guard, run_until
from motion_policy import MotionSample


@pytest.fixture
def monitoring_guard():
    controller, clock, device = make_guard(password="abcd")
    arm_to_monitoring(controller, clock)
    assert controller.state == GuardState.MONITORING
    return controller, clock, device


@pytest.mark.parametrize(
    "xyz",
    [
        (0.0, 0.0, 1.0),
        (0.15, 0.0, 1.0),
        (-0.15, 0.0, 1.0),
        (0.0, 0.15, 1.0),
        (0.0, -0.15, 1.0),
        (0.0, 0.0, 1.15),
        (0.0, 0.0, 0.86),
        (0.1, -0.1, 1.1),
    ],
)
def test_in_bounds_samples_do_not_trigger(monitoring_guard, xyz):
    controller, clock, device = monitoring_guard

    for _ in range(20):
        device.accelerometer.emit(*xyz)
        clock.advance(0.5)
        controller.update()

    assert controller.state == GuardState.MONITORING
    assert controller.actuator.start_calls == 0
    assert device.vibrator.vibrating is False


def test_rest_noise_does_not_trigger(monitoring_guard):
    controller, clock, device = monitoring_guard

    device.accelerometer.step(200)
    controller.update()

    assert controller.state == GuardState.MONITORING


@pytest.mark.parametrize(
    "xyz",
    [
        (0.16, 0.0, 1.0),
        (-0.3, 0.0, 1.0),
        (0.0, 0.2, 1.0),
        (0.0, -0.151, 1.0),
        (0.0, 0.0, 1.2),
        (0.0, 0.0, 0.8),
        (0.0, 0.0, 0.0),
    ],
)
def test_single_violating_sample_triggers(monitoring_guard, xyz):
    controller, clock, device = monitoring_guard

    device.accelerometer.emit(*xyz)
    controller.update()

    assert controller.state == GuardState.TRIGGERED
    assert controller.trigger_reason == "motion"
    assert controller.actuator.start_calls == 1
    assert device.sound.is_playing is True
    assert device.vibrator.calls == [("vibrate", (500, 500, 500), True)]


def test_multiple_violating_samples_start_actuator_once(monitoring_guard):
    controller, clock, device = monitoring_guard

    # All three are queued before the controller gets to cancel the subscription.
    device.accelerometer.emit(0.5, 0.0, 1.0)
    device.accelerometer.emit(0.0, 0.9, 1.0)
    device.accelerometer.emit(0.0, 0.0, 2.0)
    controller.update()

    assert controller.state == GuardState.TRIGGERED
    assert controller.actuator.start_calls == 1
    assert [c[0] for c in device.sound.calls].count("play") == 1
    assert [c[0] for c in device.vibrator.calls].count("vibrate") == 1


def test_trigger_cancels_motion_subscription(monitoring_guard):
    controller, clock, device = monitoring_guard

    device.accelerometer.emit(0.5, 0.0, 1.0)
    controller.update()

    assert controller.motion_subscribed is False
    assert device.accelerometer.subscriber_count == 0
    assert device.accelerometer.emit(0.5, 0.0, 1.0) == 0


def test_samples_ignored_while_triggered(monitoring_guard):
    controller, clock, device = monitoring_guard
    device.accelerometer.emit(0.5, 0.0, 1.0)
    controller.update()

    controller.handle_motion_sample(MotionSample(1.0, 1.0, 1.0))
    controller.handle_motion_sample(MotionSample(1.0, 1.0, 1.0), controller.generation)

    assert controller.actuator.start_calls == 1


def test_motion_before_monitoring_is_ignored():
    controller, clock, device = make_guard(password="abcd")
    controller.arm()

    run_until(controller, clock, 11.5)
    assert controller.state == GuardState.SETTLING

    controller.handle_motion_sample(MotionSample(2.0, 2.0, 2.0))
    assert controller.state == GuardState.SETTLING
    assert controller.actuator.start_calls == 0


def test_stale_generation_sample_is_dropped(monitoring_guard):
    controller, clock, device = monitoring_guard

    controller.post_motion_sample(MotionSample(0.9, 0.0, 1.0), generation=controller.generation - 1)
    controller.update()

    assert controller.state == GuardState.MONITORING


@pytest.mark.parametrize(
    "xyz",
    [
        (float("nan"), 0.0, 1.0),
        (0.0, float("inf"), 1.0),
        (0.0, 0.0, float("-inf")),
    ],
)
def test_non_finite_samples_are_dropped(monitoring_guard, xyz):
    controller, clock, device = monitoring_guard

    device.accelerometer.emit(*xyz)
    controller.update()

    assert controller.state == GuardState.MONITORING
    assert controller.actuator.start_calls == 0


def test_held_reading_triggers_on_next_sample(monitoring_guard):
    controller, clock, device = monitoring_guard

    device.accelerometer.force_reading(0.0, 0.0, 0.5)
    device.accelerometer.step()
    controller.update()

    assert controller.state == GuardState.TRIGGERED
