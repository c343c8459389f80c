"""
Title: Tripwire Guard State Machine (Guard Controller)
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.4

Purpose:
Implements the arming / monitoring / alarm state machine of the tripwire guard.
Arming starts a grace countdown; when it elapses and a short settle window has
passed, the controller subscribes to the accelerometer. A single acceleration
sample outside the rest threshold, or the app leaving the foreground while
armed, triggers the alarm (looped sound + repeating vibration). Only the
correct password, checked against the secret store, silences it.

Scope and Limitations:
- Exactly one controller instance is expected per process.
- All transitions run under one re-entrant lock. Platform callbacks (motion
  samples, lifecycle changes) are only queued by the callback; update() drains
  the queue and fires due timers on the caller's thread.
- Every timer, motion subscription and lifecycle change is tagged with the
  arming generation it was created under; callbacks from an older generation
  are dropped.
- Monitoring cannot be cancelled directly. The only way out of MONITORING is
  through TRIGGERED and a successful disarm.
- State is memory-only; only the password persists (via the secret store).
"""

# Change Log:
#
# 1.4 (2026-10-16)
#   - Lifecycle changes are tagged with the generation they were posted under;
#     a change queued before an arm no longer triggers the new session.
#   - Optional set-on-launch password mode (restore_password_on_launch=False).
#
# 1.3 (2026-10-16)
#   - Lifecycle loss now triggers from COUNTDOWN as well as SETTLING/MONITORING.
#   - Motion samples with non-finite components are dropped instead of
#     being compared against the threshold.
#
# 1.2 (2026-10-16)
#   - Replaced the "countdown finished / monitoring enabled" flag pair with the
#     explicit SETTLING state.
#   - Added arming generation tagging for timers and motion subscriptions.
#
# 1.1 (2026-10-16)
#   - Moved platform callbacks behind a mailbox drained by update().
#
# 1.0 (2026-10-16)
#   - Initial countdown, motion trigger and password disarm implementation.

import logging
import queue
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable

from alarm_actuator import AlarmActuator
from guard_configuration import GuardConfiguration
from guard_errors import AuthMismatch, SecretUnavailable, ValidationError
from guard_states import ARMED_STATES, BACK_SUPPRESSED_STATES, GuardState
from motion_policy import MotionSample, exceeds_threshold, is_finite_sample
from platform_services import (
    BackHandler,
    LifecycleSource,
    LifecycleState,
    MotionSensor,
    OrientationLock,
    SecretStore,
)
from timer_queue import ScheduledTimer, TimerQueue

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuardStatus:
    state: GuardState
    remaining_s: int
    countdown_started_at: float | None
    password_set: bool
    actuator_active: bool
    motion_subscribed: bool
    generation: int
    pending_timers: int
    trigger_reason: str | None


@dataclass(frozen=True)
class _GuardEvent:
    kind: str  # "motion" | "lifecycle"
    generation: int | None
    payload: Any


class GuardController:
    def __init__(
        self,
        config: GuardConfiguration,
        secret_store: SecretStore,
        actuator: AlarmActuator,
        clock: Callable[[], float] = time.monotonic,
        motion_sensor: MotionSensor | None = None,
        lifecycle_source: LifecycleSource | None = None,
        orientation_lock: OrientationLock | None = None,
        back_handler: BackHandler | None = None,
    ):
        self._config = config
        self._secret_store = secret_store
        self._actuator = actuator
        self._clock = clock
        self._motion_sensor = motion_sensor
        self._orientation_lock = orientation_lock

        self._lock = threading.RLock()
        self._mailbox: "queue.Queue[_GuardEvent]" = queue.Queue()
        self._timers = TimerQueue(clock)

        self._state = GuardState.IDLE
        self._state_entered_at = self._clock()

        # Countdown bookkeeping
        self._remaining_s: int = int(config.grace_period_s)
        self._countdown_started_at: float | None = None

        # Bumped on every arm, trigger and disarm; stale callbacks compare against it.
        self._generation: int = 0

        # Motion subscription handle; its callback carries the generation it was created under.
        self._motion_handle: Any = None

        self._trigger_reason: str | None = None
        self._password_set = self._read_password_set()

        self._lifecycle_handle = None
        if lifecycle_source is not None:
            self._lifecycle_handle = lifecycle_source.subscribe(self.post_lifecycle_change)

        self._back_handle = None
        if back_handler is not None:
            self._back_handle = back_handler.intercept(self.should_swallow_back)

    # -------------------------
    # Properties / small helpers
    # -------------------------

    @property
    def config(self) -> GuardConfiguration:
        return self._config

    @property
    def state(self) -> GuardState:
        return self._state

    @property
    def state_entered_at(self) -> float:
        return self._state_entered_at

    @property
    def remaining_s(self) -> int:
        return self._remaining_s

    @property
    def countdown_started_at(self) -> float | None:
        return self._countdown_started_at

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def password_set(self) -> bool:
        return self._password_set

    @property
    def motion_subscribed(self) -> bool:
        return self._motion_handle is not None

    @property
    def pending_timer_count(self) -> int:
        return len(self._timers)

    @property
    def trigger_reason(self) -> str | None:
        return self._trigger_reason

    @property
    def actuator(self) -> AlarmActuator:
        return self._actuator

    def log(self, msg: str) -> None:
        logger.info(msg)

    def enter_state(self, new_state: GuardState) -> None:
        if new_state != self._state:
            self.log(f"State: {self._state.name} -> {new_state.name}")
        self._state = new_state
        self._state_entered_at = self._clock()

    def is_armed(self) -> bool:
        return self._state in ARMED_STATES

    def should_swallow_back(self) -> bool:
        # Read at dispatch time; the back handler holds only this bound method.
        return self._state in BACK_SUPPRESSED_STATES

    def status(self) -> GuardStatus:
        with self._lock:
            return GuardStatus(
                state=self._state,
                remaining_s=self._remaining_s,
                countdown_started_at=self._countdown_started_at,
                password_set=self._password_set,
                actuator_active=self._actuator.active,
                motion_subscribed=self.motion_subscribed,
                generation=self._generation,
                pending_timers=len(self._timers),
                trigger_reason=self._trigger_reason,
            )

    def _read_password_set(self) -> bool:
        if not self._config.restore_password_on_launch:
            # The password is entered again on every launch and overwrites the stored one.
            return False
        try:
            return bool(self._secret_store.get())
        except Exception as e:
            logger.warning("Secret store unreadable at start-up, treating password as unset: %s", e)
            return False

    # -------------------------
    # User commands
    # -------------------------

    def set_secret(self, first: str, second: str) -> None:
        with self._lock:
            if self._state != GuardState.IDLE:
                raise ValidationError("Password can only be set while the guard is idle.")

            if self._password_set:
                raise ValidationError("Password already set.")

            if len(first) < self._config.min_secret_length:
                raise ValidationError(
                    f"Password must be at least {self._config.min_secret_length} characters."
                )

            if first != second:
                raise ValidationError("Passwords do not match.")

            # SecretStoreError propagates; the flag stays False on failure.
            self._secret_store.set(first)
            self._password_set = True
            self.log("Password saved")

    def arm(self) -> bool:
        with self._lock:
            if not self._password_set:
                self.log("Arm rejected: password not set")
                return False

            if self._state not in (GuardState.IDLE, GuardState.COUNTDOWN):
                self.log(f"Arm rejected: state={self._state.name}")
                return False

            restarting = self._state == GuardState.COUNTDOWN

            # New arming session: any tick still queued from a previous arm is dropped here
            # and would be ignored as stale if it fired anyway.
            self._generation += 1
            self._timers.cancel_all()

            now = self._clock()
            self._remaining_s = int(self._config.grace_period_s)
            self._countdown_started_at = now
            self._trigger_reason = None

            self.enter_state(GuardState.COUNTDOWN)
            self._timers.schedule(
                self._config.tick_interval_s,
                "countdown_tick",
                self._generation,
                self._on_countdown_tick,
            )

            if restarting:
                self.log(f"Countdown restarted at {self._remaining_s}s")
            else:
                self.log(f"Armed: countdown {self._remaining_s}s")
            return True

    def disarm(self, candidate: str) -> bool:
        with self._lock:
            if self._state != GuardState.TRIGGERED:
                self.log(f"Disarm rejected: state={self._state.name}")
                return False

            try:
                stored = self._secret_store.get()
            except SecretUnavailable:
                self.log("Disarm failed: password store unavailable")
                raise
            except Exception as e:
                self.log("Disarm failed: password store unavailable")
                raise SecretUnavailable() from e

            if not stored:
                self.log("Disarm failed: password not set")
                raise SecretUnavailable()

            if candidate != stored:
                self.log("Disarm failed: wrong password")
                raise AuthMismatch()

            self._actuator.stop()
            self._timers.cancel_all()
            self._unsubscribe_motion()

            self._generation += 1
            self._remaining_s = int(self._config.grace_period_s)
            self._countdown_started_at = None

            self.enter_state(GuardState.IDLE)
            self.log("Alarm stopped: correct password entered")
            return True

    # -------------------------
    # Platform callbacks (any thread)
    # -------------------------

    def post_motion_sample(self, sample: MotionSample, generation: int | None = None) -> None:
        self._mailbox.put(_GuardEvent("motion", generation, sample))

    def post_lifecycle_change(self, new_state: LifecycleState) -> None:
        # Tagged with the generation current when the change happened, not when it is handled.
        self._mailbox.put(_GuardEvent("lifecycle", self._generation, new_state))

    # -------------------------
    # Core update loop
    # -------------------------

    def update(self) -> None:
        # Drains queued platform events, then fires every timer that is due.
        with self._lock:
            self._drain_mailbox()

            now = self._clock()
            while True:
                timer = self._timers.pop_due(now)
                if timer is None:
                    break
                timer.callback(timer)

    def _drain_mailbox(self) -> None:
        while True:
            try:
                event = self._mailbox.get_nowait()
            except queue.Empty:
                return

            if event.kind == "motion":
                self.handle_motion_sample(event.payload, event.generation)
            elif event.kind == "lifecycle":
                self.handle_lifecycle_change(event.payload, event.generation)

    def handle_motion_sample(self, sample: MotionSample, generation: int | None = None) -> None:
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug("Dropping motion sample from stale generation %s", generation)
                return

            if self._state != GuardState.MONITORING:
                return

            if not is_finite_sample(sample):
                logger.warning("Dropping non-finite motion sample: %s", sample)
                return

            if exceeds_threshold(
                sample,
                rest=self._config.rest_vector_g,
                threshold=self._config.motion_threshold_g,
            ):
                self.log(f"Motion detected x:{sample.x:.3f} y:{sample.y:.3f} z:{sample.z:.3f}")
                self._trigger("motion")

    def handle_lifecycle_change(self, new_state: LifecycleState, generation: int | None = None) -> None:
        with self._lock:
            if generation is not None and generation != self._generation:
                logger.debug("Dropping lifecycle change from stale generation %s", generation)
                return

            if new_state == LifecycleState.ACTIVE:
                return

            if self._state in ARMED_STATES:
                self.log(f"App left foreground ({new_state.value}) while {self._state.name}")
                self._trigger(f"lifecycle:{new_state.value}")

    # -------------------------
    # Timers
    # -------------------------

    def _on_countdown_tick(self, timer: ScheduledTimer) -> None:
        if timer.generation != self._generation or self._state != GuardState.COUNTDOWN:
            logger.debug("Ignoring stale countdown tick (generation %s)", timer.generation)
            return

        self._remaining_s = max(0, self._remaining_s - 1)

        if self._remaining_s > 0:
            self._timers.schedule(
                self._config.tick_interval_s,
                "countdown_tick",
                self._generation,
                self._on_countdown_tick,
                base_s=timer.due_s,
            )
            return

        # Countdown reached zero: wait out the settle window before subscribing.
        self.enter_state(GuardState.SETTLING)
        self._lock_orientation()
        self._timers.schedule(
            self._config.settle_delay_s,
            "monitor_start",
            self._generation,
            self._on_settle_elapsed,
            base_s=timer.due_s,
        )

    def _on_settle_elapsed(self, timer: ScheduledTimer) -> None:
        if timer.generation != self._generation or self._state != GuardState.SETTLING:
            logger.debug("Ignoring stale monitor start (generation %s)", timer.generation)
            return

        self._subscribe_motion()
        self.enter_state(GuardState.MONITORING)

    # -------------------------
    # Side effects
    # -------------------------

    def _trigger(self, reason: str) -> None:
        if self._state == GuardState.TRIGGERED:
            return

        self._generation += 1
        self._timers.cancel_all()
        self._trigger_reason = reason

        self.enter_state(GuardState.TRIGGERED)
        self._unsubscribe_motion()
        self._actuator.start()
        self._lock_orientation()
        self.log(f"ALARM TRIGGERED ({reason})")

    def _subscribe_motion(self) -> None:
        if self._motion_sensor is None:
            self.log("No motion sensor wired; monitoring lifecycle only")
            return

        generation = self._generation

        def _on_sample(x: float, y: float, z: float) -> None:
            self.post_motion_sample(MotionSample(x, y, z), generation)

        self._motion_sensor.set_sample_interval(self._config.sample_interval_ms)
        self._motion_handle = self._motion_sensor.subscribe(_on_sample)

    def _unsubscribe_motion(self) -> None:
        if self._motion_handle is None or self._motion_sensor is None:
            return

        handle, self._motion_handle = self._motion_handle, None
        self._motion_sensor.unsubscribe(handle)

    def _lock_orientation(self) -> None:
        if self._orientation_lock is None:
            return
        try:
            self._orientation_lock.lock("portrait")
        except Exception as e:
            logger.warning("Orientation lock failed: %s", e)

    def shutdown(self) -> None:
        with self._lock:
            self._timers.cancel_all()
            self._unsubscribe_motion()
            self._actuator.close()
