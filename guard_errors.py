"""
Title: Tripwire Guard Error Taxonomy
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Defines the exceptions raised by guard operations. Every error is terminal to
the user action that caused it only: none of them change guard state and none
of them silence a triggered alarm.

Dependencies:
- Python 3.10+
"""


class GuardError(Exception):
    """Base class for all guard errors surfaced to the user."""


class ValidationError(GuardError):
    """Password rejected at set time (too short, mismatch, already set)."""


class SecretUnavailable(GuardError):
    """No stored password could be read; the alarm keeps sounding."""

    def __init__(self, message: str = "Password not set."):
        super().__init__(message)


class AuthMismatch(GuardError):
    """Candidate password did not match. Retries are unlimited."""

    def __init__(self, message: str = "Wrong password. Try again."):
        super().__init__(message)


class ActuatorFault(GuardError):
    """Sound channel failure. Logged by the actuator, never propagated."""


class SecretStoreError(GuardError):
    """The secret store rejected a write; no password was saved."""
