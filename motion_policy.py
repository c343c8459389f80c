"""
Title: Motion Threshold Policy
Date Created: 2026-10-16
Last Modified: 2026-10-16
Version: 1.0

Purpose:
Defines the acceleration sample model and the pure threshold test that decides
whether a single sample counts as theft motion while the guard is monitoring.

Scope and Limitations:
- Edge-triggered: a single exceeding sample is enough, there is no averaging,
  debounce or hysteresis.
- Each axis is compared independently against the rest vector; the bound is
  strict (a deviation equal to the threshold does not trigger).
- Non-finite samples are classified separately and never count as motion.

Dependencies:
- Python 3.10+
- dataclasses (standard library)
- math (standard library)
"""

import math
from dataclasses import dataclass
from typing import Sequence


@dataclass(frozen=True)
class MotionSample:
    x: float  # g
    y: float  # g
    z: float  # g, ~1.0 when lying flat at rest


def is_finite_sample(sample: MotionSample) -> bool:
    return all(math.isfinite(float(v)) for v in (sample.x, sample.y, sample.z))


def axis_deviations(sample: MotionSample, rest: Sequence[float]) -> tuple[float, float, float]:
    rx, ry, rz = rest
    return (
        abs(float(sample.x) - rx),
        abs(float(sample.y) - ry),
        abs(float(sample.z) - rz),
    )


def exceeds_threshold(
    sample: MotionSample,
    rest: Sequence[float] = (0.0, 0.0, 1.0),
    threshold: float = 0.15,
) -> bool:
    # True when any axis deviates from the rest vector by more than threshold.
    if not is_finite_sample(sample):
        return False
    return any(d > threshold for d in axis_deviations(sample, rest))
