from __future__ import annotations

from dataclasses import InitVar, dataclass, field
from functools import lru_cache
from typing import Dict, Optional, Protocol, Sequence, Tuple, Union

from ..config import SolverConfig


class EasingFunction(Protocol):
    def __call__(self, x: float) -> float:
        ...


def linear(u: float) -> float:
    if u <= 0.0:
        return 0.0
    if u >= 1.0:
        return 1.0
    return u


def _clamp01(v: float) -> float:
    # NaN falls through both comparisons unchanged
    if v < 0.0:
        return 0.0
    if v > 1.0:
        return 1.0
    return v


# Polynomial form of the Bezier with endpoints fixed at 0 and 1:
# B(t) = ((a*t + b)*t + c)*t
def _a(a1: float, a2: float) -> float:
    return 1.0 - 3.0 * a2 + 3.0 * a1


def _b(a1: float, a2: float) -> float:
    return 3.0 * a2 - 6.0 * a1


def _c(a1: float) -> float:
    return 3.0 * a1


def cubic_x(t: float, a1: float, a2: float) -> float:
    """Evaluate one coordinate of the timing curve at parameter t.

    a1 and a2 are that coordinate of the two control points; the same
    polynomial serves for x (a1=p1.x, a2=p2.x) and y (a1=p1.y, a2=p2.y).
    """
    return ((_a(a1, a2) * t + _b(a1, a2)) * t + _c(a1)) * t


def cubic_slope(t: float, a1: float, a2: float) -> float:
    """Derivative of cubic_x with respect to t."""
    return 3.0 * _a(a1, a2) * t * t + 2.0 * _b(a1, a2) * t + _c(a1)


@dataclass(frozen=True)
class ControlPoint:
    x: float
    y: float

    @classmethod
    def clamped(cls, x: float, y: float) -> "ControlPoint":
        """Convert both coordinates to float once and clamp them to [0,1]."""
        return cls(_clamp01(float(x)), _clamp01(float(y)))


PointLike = Union[ControlPoint, Sequence[float]]


def _as_point(p: PointLike) -> ControlPoint:
    if isinstance(p, ControlPoint):
        return ControlPoint.clamped(p.x, p.y)
    x, y = p
    return ControlPoint.clamped(x, y)


@dataclass(frozen=True)
class CurveSolver:
    """CSS cubic-bezier() timing function.

    The curve runs from (0,0) to (1,1) through control points p1 and p2.
    Coordinates outside [0,1] are clamped when the solver is built. A table
    of x(t) samples is precomputed so each query starts from a close guess
    for t, which is then refined with Newton-Raphson, or with bisection
    where the curve is too flat for Newton to be stable.

    Instances never change after construction and can be shared between
    threads.
    """

    p1: PointLike
    p2: PointLike
    config: InitVar[Optional[SolverConfig]] = None

    sample_table: Tuple[float, ...] = field(init=False, repr=False, compare=False)
    _step: float = field(init=False, repr=False, compare=False)
    _newton_iterations: int = field(init=False, repr=False, compare=False)
    _newton_min_slope: float = field(init=False, repr=False, compare=False)
    _subdivision_precision: float = field(init=False, repr=False, compare=False)
    _subdivision_max_iterations: int = field(init=False, repr=False, compare=False)

    def __post_init__(self, config: Optional[SolverConfig]) -> None:
        cfg = config or SolverConfig()
        p1 = _as_point(self.p1)
        p2 = _as_point(self.p2)
        last = cfg.sample_table_size - 1
        table = tuple(cubic_x(k / last, p1.x, p2.x) for k in range(last + 1))

        object.__setattr__(self, "p1", p1)
        object.__setattr__(self, "p2", p2)
        object.__setattr__(self, "sample_table", table)
        object.__setattr__(self, "_step", cfg.sample_step)
        object.__setattr__(self, "_newton_iterations", cfg.newton_iterations)
        object.__setattr__(self, "_newton_min_slope", cfg.newton_min_slope)
        object.__setattr__(self, "_subdivision_precision", cfg.subdivision_precision)
        object.__setattr__(self, "_subdivision_max_iterations", cfg.subdivision_max_iterations)

    @classmethod
    def from_points(
        cls, p1: PointLike, p2: PointLike, config: Optional[SolverConfig] = None
    ) -> "CurveSolver":
        return cls(p1, p2, config)

    def x_at(self, t: float) -> float:
        return cubic_x(t, self.p1.x, self.p2.x)

    def y_at(self, t: float) -> float:
        return cubic_x(t, self.p1.y, self.p2.y)

    def y(self, x: float) -> float:
        """Return the eased value for progress x in [0,1].

        x outside [0,1] is not rejected; the result is then unspecified.
        """
        if x == 0.0:
            return 0.0
        if x == 1.0:
            return 1.0
        return self.y_at(self.t_for_x(x))

    def __call__(self, x: float) -> float:
        return self.y(x)

    def t_for_x(self, x: float) -> float:
        table = self.sample_table
        last_sample = len(table) - 1

        i = 1
        while i != last_sample and table[i] <= x:
            i += 1
        i -= 1
        interval_start = i / last_sample

        dist = (x - table[i]) / (table[i + 1] - table[i])
        guess = interval_start + dist * self._step

        initial_slope = cubic_slope(guess, self.p1.x, self.p2.x)
        if initial_slope >= self._newton_min_slope:
            return self._newton_raphson(x, guess)
        if initial_slope == 0.0:
            return guess
        return self._binary_subdivide(x, interval_start, interval_start + 1.0)

    def _newton_raphson(self, x: float, guess: float) -> float:
        x1, x2 = self.p1.x, self.p2.x
        t = guess
        for _ in range(self._newton_iterations):
            slope = cubic_slope(t, x1, x2)
            if slope == 0.0:
                break
            t -= (cubic_x(t, x1, x2) - x) / slope
        return t

    def _binary_subdivide(self, x: float, a: float, b: float) -> float:
        x1, x2 = self.p1.x, self.p2.x
        t = a
        for _ in range(self._subdivision_max_iterations):
            t = a + (b - a) / 2.0
            residual = cubic_x(t, x1, x2) - x
            if residual > 0.0:
                b = t
            else:
                a = t
            if abs(residual) < self._subdivision_precision:
                break
        return t


def cubic_bezier(x1: float, y1: float, x2: float, y2: float) -> CurveSolver:
    return CurveSolver((x1, y1), (x2, y2))


# CSS <easing-function> keywords
PRESETS: Dict[str, Tuple[float, float, float, float]] = {
    "ease": (0.25, 0.1, 0.25, 1.0),
    "ease-in": (0.42, 0.0, 1.0, 1.0),
    "ease-out": (0.0, 0.0, 0.58, 1.0),
    "ease-in-out": (0.42, 0.0, 0.58, 1.0),
}


@lru_cache(maxsize=None)
def preset(name: str) -> CurveSolver:
    try:
        x1, y1, x2, y2 = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown easing preset {name!r}; expected one of {sorted(PRESETS)}") from None
    return cubic_bezier(x1, y1, x2, y2)


def ease(fn: EasingFunction, start: float, end: float, progress: float) -> float:
    """Interpolate from start to end, shaping progress with fn.

    progress is clamped to [0,1] before fn sees it.
    """
    return start + (end - start) * fn(_clamp01(progress))
