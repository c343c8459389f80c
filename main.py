#!/usr/bin/env python3
import argparse
import logging
import signal
import time
from threading import Event

from alarm_actuator import AlarmActuator
from app_context import AppContext
from cli import StateAnnunciator, command_loop
from cli_support import ControlLoop, SimulatedDevice
from guard_configuration import GuardConfiguration
from guard_controller import GuardController
from platform_services import SecretStore
from secret_store import InMemorySecretStore, KeyringSecretStore


def setup_logging(level: int = logging.INFO):
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def setup_signal_handlers(ctx: AppContext):
    def _handle_shutdown(signum, frame):
        logging.info("Shutdown signal received (%s)", signum)
        ctx.shutdown()

    signal.signal(signal.SIGINT, _handle_shutdown)
    signal.signal(signal.SIGTERM, _handle_shutdown)


def initialize(
    secret_store: SecretStore | None = None,
    clock=time.monotonic,
    device: SimulatedDevice | None = None,
    period_s: float = 0.1,
    annunciate: bool = True,
    password_each_launch: bool = False,
) -> AppContext:
    logging.info("Initializing application")

    config = GuardConfiguration(restore_password_on_launch=not password_each_launch)
    config.validate()

    arming_delay_s = config.compute_arming_delay_s()
    if arming_delay_s <= config.settle_delay_s:
        raise ValueError(f"arming delay {arming_delay_s:.1f}s leaves no grace period")

    if secret_store is None:
        secret_store = KeyringSecretStore(service=config.keyring_service, key=config.secret_key)

    device = device or SimulatedDevice()

    actuator = AlarmActuator(
        sound=device.sound,
        vibrator=device.vibrator,
        resource=config.alarm_sound_resource,
        volume=config.alarm_volume,
        vibration_pattern_ms=config.vibration_pattern_ms,
    )

    controller = GuardController(
        config=config,
        secret_store=secret_store,
        actuator=actuator,
        clock=clock,
        motion_sensor=device.accelerometer,
        lifecycle_source=device.lifecycle,
        orientation_lock=device.orientation,
        back_handler=device.back_button,
    )

    on_tick = StateAnnunciator(show_countdown=True) if annunciate else None
    loop = ControlLoop(controller, period_s=period_s, on_tick=on_tick)

    return AppContext(
        controller=controller,
        config=config,
        clock=clock,
        shutdown_event=Event(),
        device=device,
        loop=loop,
    )


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Tripwire anti-theft guard (simulated device)")
    parser.add_argument("--memory-store", action="store_true", help="Keep the password in memory instead of the OS keyring")
    parser.add_argument("--period", type=float, default=0.1, help="Control loop period in seconds")
    parser.add_argument("--no-sampling", action="store_true", help="Do not run the background accelerometer sampler")
    parser.add_argument("--password-each-launch", action="store_true", help="Ask for a new password on every launch instead of reusing the stored one")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.INFO)

    store = InMemorySecretStore() if args.memory_store else None
    ctx = initialize(
        secret_store=store,
        period_s=args.period,
        password_each_launch=args.password_each_launch,
    )
    setup_signal_handlers(ctx)

    ctx.loop.start()
    if not args.no_sampling:
        ctx.device.accelerometer.start()

    command_loop(ctx)

    ctx.shutdown()
    logging.info("Main loop terminated")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
