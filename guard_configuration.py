"""
Title: Tripwire Guard Configuration Model (GuardConfiguration)
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Defines an immutable data model holding the fixed timing, motion-threshold
and alarm characteristics of the guard. The controller derives its countdown
cadence, settle window and motion policy from this configuration.

Scope and Limitations:
- Values are fixed in code; there is no user-facing way to change them.
- The rest vector assumes gravity aligned with the +z axis (device lying flat).
- Configuration values are static and immutable once instantiated.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class GuardConfiguration:
    # Immutable guard timing and policy configuration.
    name: str = "tripwire"
    grace_period_s: int = 10
    tick_interval_s: float = 1.0
    settle_delay_s: float = 2.0

    motion_threshold_g: float = 0.15
    rest_vector_g: tuple[float, float, float] = (0.0, 0.0, 1.0)
    sample_interval_ms: int = 500

    min_secret_length: int = 4
    secret_key: str = "userPassword"
    keyring_service: str = "tripwire"
    # False: start every launch with no password set, so the user enters a new one.
    restore_password_on_launch: bool = True

    alarm_sound_resource: str = "assets/emergency_alarm_high_pitched.mp3"
    alarm_volume: float = 1.0
    vibration_pattern_ms: tuple[int, ...] = (500, 500, 500)

    def compute_arming_delay_s(self) -> float:
        # Time from an accepted arm request until motion monitoring starts.
        # Pure calculation, no side effects.
        return self.grace_period_s * self.tick_interval_s + self.settle_delay_s

    def validate(self) -> None:
        if self.grace_period_s < 1:
            raise ValueError(f"grace_period_s must be >= 1 (got {self.grace_period_s})")
        if self.tick_interval_s <= 0 or self.settle_delay_s < 0:
            raise ValueError("tick_interval_s must be > 0 and settle_delay_s >= 0")
        if self.motion_threshold_g <= 0:
            raise ValueError(f"motion_threshold_g must be > 0 (got {self.motion_threshold_g})")
        if len(self.rest_vector_g) != 3:
            raise ValueError("rest_vector_g must have exactly three axes")
        if self.sample_interval_ms <= 0:
            raise ValueError(f"sample_interval_ms must be > 0 (got {self.sample_interval_ms})")
        if self.min_secret_length < 1:
            raise ValueError("min_secret_length must be >= 1")
        if not 0.0 <= self.alarm_volume <= 1.0:
            raise ValueError(f"alarm_volume must be within 0.0-1.0 (got {self.alarm_volume})")
        if not self.vibration_pattern_ms or any(d < 0 for d in self.vibration_pattern_ms):
            raise ValueError("vibration_pattern_ms must be a non-empty list of durations")
