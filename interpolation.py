"""Scalar interpolation kernels and easing curves used by the animators."""
from __future__ import annotations

import math


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def lerp(a: float, b: float, t: float) -> float:
    # Written as a + delta so that a == b returns a exactly for every t.
    return a + (b - a) * t


def smoothstep(t: float) -> float:
    return t * t * (3 - 2 * t)


# ─── Cubic Hermite basis ───────────────────────────────────────────────


def h00(t: float) -> float:
    return 2 * t * t * t - 3 * t * t + 1


def h10(t: float) -> float:
    return t * t * t - 2 * t * t + t


def h01(t: float) -> float:
    return -2 * t * t * t + 3 * t * t


def h11(t: float) -> float:
    return t * t * t - t * t


def hermite(p0: float, p1: float, m0: float, m1: float, t: float) -> float:
    """Cubic Hermite curve from p0 to p1 with end tangents m0, m1 (segment-local units).

    Uses h00 = 1 - h01, so a flat span (p0 == p1, zero tangents) stays at p0 exactly.
    """
    return p0 + h01(t) * (p1 - p0) + h10(t) * m0 + h11(t) * m1


def catmull_rom(p0: float, p1: float, p2: float, p3: float, t: float) -> float:
    """Catmull-Rom spline interpolation at parameter t in [0, 1]."""
    t2 = t * t
    t3 = t2 * t
    return 0.5 * (
        (2 * p1)
        + (-p0 + p2) * t
        + (2 * p0 - 5 * p1 + 4 * p2 - p3) * t2
        + (-p0 + 3 * p1 - 3 * p2 + p3) * t3
    )


def log_lerp(a: float, b: float, t: float) -> float:
    """Blend in log space: equal steps in t give equal zoom ratios.

    Non-positive endpoints have no logarithm; those blend linearly instead.
    """
    if a <= 0 or b <= 0:
        return lerp(a, b, t)
    if t <= 0:
        return a
    if t >= 1:
        return b
    log_a = math.log(a)
    log_b = math.log(b)
    return math.exp(log_a + (log_b - log_a) * t)


# ─── Easing ────────────────────────────────────────────────────────────


def linear(t: float) -> float:
    return t
