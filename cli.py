#!/usr/bin/env python3
"""
Title: Tripwire Guard Interactive Shell
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.1

Purpose:
Interactive command shell over the guard controller and the simulated device.
Lets a user set the password, arm, inject motion and lifecycle changes, press
the back button and disarm, while the StateAnnunciator prints every state
change and the countdown.

Scope and Limitations:
- Passwords are typed in clear on the command line; this is a simulation shell.
- All guard decisions are made by GuardController; the shell only forwards
  commands and prints results.

Dependencies:
- Python 3.10+
- app_context.py
- guard_controller.py
- guard_errors.py
"""

import logging
from typing import Callable

from app_context import AppContext
from guard_controller import GuardController
from guard_errors import GuardError
from guard_states import GuardState
from platform_services import LifecycleState

logger = logging.getLogger(__name__)

DEFAULT_SHAKE_G = (0.6, 0.2, 1.0)


class StateAnnunciator:
    # Prints the guard state whenever it changes (and, optionally, the countdown).
    def __init__(self, show_countdown: bool = False):
        self._last_state: GuardState | None = None
        self._last_remaining: int | None = None
        self._show_countdown = show_countdown

    def __call__(self, controller: GuardController) -> None:
        state = controller.state
        if state != self._last_state:
            print(f"STATE: {state.name}")
            self._last_state = state
            self._last_remaining = None

        if self._show_countdown and state == GuardState.COUNTDOWN:
            remaining = controller.remaining_s
            if remaining != self._last_remaining:
                print(f"{remaining} seconds remaining")
                self._last_remaining = remaining


def _print_status(ctx: AppContext) -> None:
    st = ctx.controller.status()
    print("\n=== STATUS ===")
    print(f"State: {st.state.name}")
    print(f"PasswordSet: {st.password_set}")
    print(f"RemainingS: {st.remaining_s}  CountdownStartedAt: {st.countdown_started_at}")
    print(f"MotionSubscribed: {st.motion_subscribed}  PendingTimers: {st.pending_timers}")
    print(f"ActuatorActive: {st.actuator_active}  SoundPlaying: {ctx.controller.actuator.sound_playing}")
    print(f"Vibrating: {ctx.device.vibrator.vibrating}")
    print(f"TriggerReason: {st.trigger_reason}")
    print(f"Generation: {st.generation}")
    print(f"Lifecycle: {ctx.device.lifecycle.state.value}")
    print(f"OrientationLockedTo: {ctx.device.orientation.locked_to}")
    print("=============\n")


def _print_help() -> None:
    print(
        """
Commands
  help                         Print help
  q                            Quit

Loop control
  run [period_s]               Start background update loop
  stop                         Stop background loop
  step [n]                     Run n update ticks (default 1)
  period <seconds>             Set background period (min 0.01)

Guard
  setpw <password> <confirm>   Set the password (once, at least 4 characters)
  arm                          Start the 10 s countdown
  disarm <password>            Silence a triggered alarm

Device inputs
  shake [x y z]                Deliver one acceleration sample (default 0.6 0.2 1.0)
  hold <x> <y> <z>             Hold a fixed accelerometer reading
  still                        Release a held reading (back to rest noise)
  life active|inactive|background
                               Change the app lifecycle state
  back                         Press the hardware back button

Diagnostics
  state                        Print guard state name
  status                       Print full status block
"""
    )


def _parse_xyz(parts: list[str]) -> tuple[float, float, float]:
    if len(parts) != 3:
        raise ValueError("expected three values: x y z")
    x, y, z = (float(p) for p in parts)
    return x, y, z


def run_command(ctx: AppContext, cmd: str) -> bool:
    # Executes one shell command. Returns False when the shell should exit.
    parts = cmd.split()
    if not parts:
        return True

    op = parts[0].lower()
    controller = ctx.controller
    device = ctx.device

    if op in ("q", "quit", "exit"):
        return False

    if op in ("help", "?"):
        _print_help()
        return True

    if op == "run":
        if len(parts) >= 2:
            ctx.loop.set_period(float(parts[1]))
        ctx.loop.start()
        print(f"Loop running @ {ctx.loop.period_s:.3f}s")
        return True

    if op == "stop":
        ctx.loop.stop()
        print("Loop stopped")
        return True

    if op == "period":
        if len(parts) != 2:
            print("Usage: period <seconds>")
            return True
        ctx.loop.set_period(float(parts[1]))
        print(f"Loop period set to {ctx.loop.period_s:.3f}s")
        return True

    if op == "step":
        n = int(parts[1]) if len(parts) >= 2 else 1
        ctx.loop.step(n)
        print(f"Stepped {n} ticks")
        return True

    if op == "setpw":
        if len(parts) != 3:
            print("Usage: setpw <password> <confirm>")
            return True
        try:
            controller.set_secret(parts[1], parts[2])
        except GuardError as e:
            print(f"Error: {e}")
            return True
        print("Success: Password saved.")
        return True

    if op == "arm":
        accepted = controller.arm()
        print(f"Arm accepted: {accepted}")
        return True

    if op == "disarm":
        if len(parts) != 2:
            print("Usage: disarm <password>")
            return True
        try:
            stopped = controller.disarm(parts[1])
        except GuardError as e:
            print(f"Error: {e}")
            return True
        if stopped:
            print("Alarm Stopped: Correct password entered.")
        else:
            print(f"Nothing to disarm: state={controller.state.name}")
        return True

    if op == "shake":
        try:
            xyz = _parse_xyz(parts[1:]) if len(parts) > 1 else DEFAULT_SHAKE_G
        except ValueError as e:
            print(f"Invalid sample: {e}")
            return True
        delivered = device.accelerometer.emit(*xyz)
        print(f"Sample {xyz} delivered to {delivered} subscriber(s)")
        return True

    if op == "hold":
        try:
            xyz = _parse_xyz(parts[1:])
        except ValueError as e:
            print(f"Invalid sample: {e}")
            return True
        device.accelerometer.force_reading(*xyz)
        print(f"Accelerometer held at {xyz}")
        return True

    if op == "still":
        device.accelerometer.release()
        print("Accelerometer at rest")
        return True

    if op == "life":
        if len(parts) != 2:
            print("Usage: life active|inactive|background")
            return True
        try:
            new_state = LifecycleState(parts[1].lower())
        except ValueError:
            print("Usage: life active|inactive|background")
            return True
        device.lifecycle.set_state(new_state)
        print(f"Lifecycle set to {new_state.value}")
        return True

    if op == "back":
        swallowed = device.back_button.press()
        print("Back press swallowed" if swallowed else "Back press dismissed the screen")
        return True

    if op == "state":
        print(controller.state.name)
        return True

    if op == "status":
        _print_status(ctx)
        return True

    print("Unknown command. Type 'help'.")
    return True


def command_loop(ctx: AppContext, read_line: Callable[[str], str] = input) -> None:
    _print_help()
    while not ctx.shutdown_event.is_set():
        try:
            cmd = read_line("> ").strip()
        except (EOFError, KeyboardInterrupt):
            print()
            break

        try:
            keep_going = run_command(ctx, cmd)
        except ValueError as e:
            print(f"Invalid input: {e}")
            continue
        except Exception as e:
            # Device failure surfaced by a command; the shell keeps running.
            logger.exception("Command failed: %s", cmd)
            print(f"Error: {e}")
            continue

        if not keep_going:
            break
