"""
Decaying bounded value: the primitive every dimension is built from.

A value is a fixed base plus a transient delta. The delta decays toward zero
with an exponential half-life; the base moves only through explicit shifts.
The effective value is always clamped to the value's bounds.

Example:
    value = DecayingValue(0.2).with_bounds(0.0, 1.0).with_decay_half_life(timedelta(hours=12))
    value.add_delta(0.4)
    value.apply_decay(timedelta(hours=12))
    value.effective()  # 0.4
"""

import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional, Tuple

# Deltas smaller than this are floored to exactly zero after decay
DECAY_EPSILON = 1e-6

DEFAULT_BOUNDS = (-1.0, 1.0)
DEFAULT_HALF_LIFE = timedelta(days=1)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def decay_factor(elapsed: timedelta, half_life: Optional[timedelta]) -> float:
    """
    Fraction of a delta that survives `elapsed` time.

    Returns 1.0 for non-positive elapsed time or a missing half-life. Very
    large ratios underflow to 0.0 rather than raising.
    """
    if half_life is None or elapsed <= timedelta(0):
        return 1.0
    return 0.5 ** (elapsed / half_life)


@dataclass
class DecayingValue:
    """A base, a decaying delta, clamp bounds and a half-life."""
    base: float
    delta: float = 0.0
    lo: float = DEFAULT_BOUNDS[0]
    hi: float = DEFAULT_BOUNDS[1]
    half_life: Optional[timedelta] = DEFAULT_HALF_LIFE
    epsilon: float = field(default=DECAY_EPSILON, repr=False)

    def __post_init__(self):
        if self.lo > self.hi:
            raise ValueError(f"Invalid bounds: lo={self.lo} > hi={self.hi}")
        if self.half_life is not None and self.half_life <= timedelta(0):
            raise ValueError(f"half_life must be positive, got {self.half_life}")
        self.base = self._clamp_base(float(self.base))
        self.delta = self._clamp_delta(float(self.delta))

    @classmethod
    def new(cls, base: float) -> "DecayingValue":
        return cls(base=base)

    # Builder-style configuration

    def with_bounds(self, lo: float, hi: float) -> "DecayingValue":
        if lo > hi:
            raise ValueError(f"Invalid bounds: lo={lo} > hi={hi}")
        self.lo = lo
        self.hi = hi
        self.base = clamp(self.base, lo, hi)
        self.delta = self._clamp_delta(self.delta)
        return self

    def with_decay_half_life(self, half_life: Optional[timedelta]) -> "DecayingValue":
        if half_life is not None and half_life <= timedelta(0):
            raise ValueError(f"half_life must be positive, got {half_life}")
        self.half_life = half_life
        return self

    @property
    def bounds(self) -> Tuple[float, float]:
        return (self.lo, self.hi)

    # Mutation

    def add_delta(self, amount: float) -> None:
        self.delta = self._clamp_delta(self.delta + amount)

    def set_delta(self, value: float) -> None:
        self.delta = self._clamp_delta(value)

    def set_base(self, value: float) -> None:
        self.base = self._clamp_base(value)

    def shift_base(self, amount: float) -> None:
        """Permanent shift of the baseline, clamped to bounds."""
        self.base = self._clamp_base(self.base + amount)

    def reset_delta(self) -> None:
        self.delta = 0.0

    def apply_decay(self, elapsed: timedelta) -> None:
        """Decay the delta by `elapsed`; idempotent for zero elapsed time."""
        if self.delta == 0.0:
            return
        self.delta *= decay_factor(elapsed, self.half_life)
        if abs(self.delta) < self.epsilon:
            self.delta = 0.0

    # Queries

    def effective(self) -> float:
        return clamp(self.base + self.delta, self.lo, self.hi)

    def copy(self) -> "DecayingValue":
        return DecayingValue(
            base=self.base,
            delta=self.delta,
            lo=self.lo,
            hi=self.hi,
            half_life=self.half_life,
            epsilon=self.epsilon,
        )

    def _clamp_base(self, value: float) -> float:
        if math.isnan(value):
            raise ValueError("base must not be NaN")
        return clamp(value, self.lo, self.hi)

    def _clamp_delta(self, value: float) -> float:
        if math.isnan(value):
            raise ValueError("delta must not be NaN")
        span = self.hi - self.lo
        return clamp(value, -span, span)
