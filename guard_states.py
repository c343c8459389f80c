"""
Title: Tripwire Guard State Definitions (GuardState Enum)
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Defines the authoritative set of guard states used by the tripwire guard
controller. These states represent the idle, arming, monitoring and alarm
phases of the guard and are used by the controller state machine to enforce
a single, explicit source of truth for what the device is currently doing.

Scope and Limitations:
- This enumeration defines logical states only; countdown progress and the
  arming generation live on the controller.
- SETTLING is the pending sub-state of COUNTDOWN (remaining == 0, deferred
  monitor start outstanding). It is treated as COUNTDOWN by every armed check.
- No hierarchy beyond the ARMED_STATES grouping is modeled.

Dependencies:
- Python 3.10+
- enum (standard library)
"""

from enum import Enum, auto


class GuardState(Enum):
    IDLE = auto()
    COUNTDOWN = auto()
    SETTLING = auto()
    MONITORING = auto()
    TRIGGERED = auto()


# States in which a loss of foreground counts as tampering.
ARMED_STATES = frozenset({GuardState.COUNTDOWN, GuardState.SETTLING, GuardState.MONITORING})

# States in which a system "go back" request is swallowed.
BACK_SUPPRESSED_STATES = ARMED_STATES | {GuardState.TRIGGERED}
