# test_policy_and_timers.py
#
# Unit tests for the pure building blocks used by the controller.
# Scope:
# - motion_policy: MotionSample, exceeds_threshold, is_finite_sample
# - timer_queue: TimerQueue ordering and cancellation
# - guard_configuration: derived timing and validation

import dataclasses

import pytest

from guard_configuration import GuardConfiguration
from motion_policy import MotionSample, axis_deviations, exceeds_threshold, is_finite_sample
from timer_queue import TimerQueue


class FakeClock:
    def __init__(self, start: float = 0.0):
        self.t = float(start)

    def __call__(self) -> float:
        return self.t


# -----------------------------
# motion_policy
# -----------------------------

def test_motion_sample_is_frozen_dataclass():
    assert dataclasses.is_dataclass(MotionSample)
    assert getattr(MotionSample, "__dataclass_params__").frozen is True


def test_axis_deviations_relative_to_rest():
    assert axis_deviations(MotionSample(0.1, -0.2, 0.5), (0.0, 0.0, 1.0)) == pytest.approx((0.1, 0.2, 0.5))


def test_threshold_is_strict():
    assert exceeds_threshold(MotionSample(0.15, 0.0, 1.0)) is False
    assert exceeds_threshold(MotionSample(0.1501, 0.0, 1.0)) is True


def test_threshold_respects_custom_rest_vector():
    # Device standing on its edge: gravity on +y.
    assert exceeds_threshold(MotionSample(0.0, 1.0, 0.0), rest=(0.0, 1.0, 0.0)) is False
    assert exceeds_threshold(MotionSample(0.0, 1.0, 0.0)) is True


def test_non_finite_samples_never_exceed():
    sample = MotionSample(float("nan"), 5.0, 1.0)
    assert is_finite_sample(sample) is False
    assert exceeds_threshold(sample) is False


# -----------------------------
# timer_queue
# -----------------------------

def test_timers_fire_in_due_order():
    clock = FakeClock()
    q = TimerQueue(clock)
    q.schedule(2.0, "b", 0, lambda t: None)
    q.schedule(1.0, "a", 0, lambda t: None)
    q.schedule(2.0, "c", 0, lambda t: None)

    assert q.pop_due(0.5) is None
    assert q.pop_due(1.0).name == "a"
    names = []
    while True:
        timer = q.pop_due(5.0)
        if timer is None:
            break
        names.append(timer.name)
    assert names == ["b", "c"]


def test_schedule_from_explicit_base():
    clock = FakeClock(10.0)
    q = TimerQueue(clock)
    timer = q.schedule(1.0, "tick", 3, lambda t: None, base_s=4.0)

    assert timer.due_s == 5.0
    assert timer.generation == 3


def test_cancel_all_clears_pending():
    q = TimerQueue(FakeClock())
    q.schedule(1.0, "a", 0, lambda t: None)
    q.schedule(2.0, "b", 0, lambda t: None)

    assert q.cancel_all() == 2
    assert len(q) == 0
    assert q.pending() == []


# -----------------------------
# guard_configuration
# -----------------------------

def test_default_arming_delay_is_twelve_seconds():
    assert GuardConfiguration().compute_arming_delay_s() == 12.0


def test_configuration_is_frozen():
    cfg = GuardConfiguration()
    with pytest.raises(dataclasses.FrozenInstanceError):
        cfg.grace_period_s = 3


@pytest.mark.parametrize(
    "overrides",
    [
        {"grace_period_s": 0},
        {"tick_interval_s": 0.0},
        {"motion_threshold_g": 0.0},
        {"rest_vector_g": (0.0, 1.0)},
        {"sample_interval_ms": 0},
        {"alarm_volume": 1.5},
        {"vibration_pattern_ms": ()},
    ],
)
def test_invalid_configuration_rejected(overrides):
    with pytest.raises(ValueError):
        GuardConfiguration(**overrides).validate()


def test_default_configuration_validates():
    GuardConfiguration().validate()
