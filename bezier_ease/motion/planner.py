from __future__ import annotations

import logging
from typing import List, Optional, Tuple

from ..config import SolverConfig
from .easing import PRESETS, CurveSolver, EasingFunction, ease, linear, preset
from .models import Ease, Timeline

log = logging.getLogger(__name__)


def easing_for(e: Ease, config: Optional[SolverConfig] = None) -> EasingFunction:
    if e.type == "linear":
        return linear
    elif e.type == "cubic-bezier":
        x1, y1, x2, y2 = e.p  # type: ignore
        return CurveSolver((x1, y1), (x2, y2), config)
    elif config is None:
        return preset(e.type)
    else:
        x1, y1, x2, y2 = PRESETS[e.type]
        return CurveSolver((x1, y1), (x2, y2), config)


def value_at(timeline: Timeline, t: float, config: Optional[SolverConfig] = None) -> float:
    """Value of the timeline at time t (seconds).

    Holds the first value before the first keyframe and the last value after
    the last one. Between keyframes the arrival keyframe's curve is used.
    """
    kfs = timeline.keyframes
    if t <= kfs[0].t:
        return kfs[0].value
    if t >= kfs[-1].t:
        return kfs[-1].value
    idx = 0
    while t > kfs[idx + 1].t:
        idx += 1
    k0 = kfs[idx]
    k1 = kfs[idx + 1]
    fn = easing_for(k1.ease, config)
    return ease(fn, k0.value, k1.value, (t - k0.t) / (k1.t - k0.t))


def sample_timeline(
    timeline: Timeline,
    dt: float = 0.01,
    max_samples: Optional[int] = None,
    config: Optional[SolverConfig] = None,
) -> Tuple[List[float], List[float]]:
    """Sample the timeline into time and value arrays.

    - dt: sampling interval in seconds (default 10ms)
    - max_samples: refuse to produce more samples than this
    Returns (times, values)
    """
    if dt <= 0:
        raise ValueError("dt must be positive")
    kfs = timeline.keyframes
    total_t = kfs[-1].t
    count = int(total_t / dt + 1e-9) + 1
    # one extra sample when the grid stops short of the last keyframe
    final_len = count + (1 if min((count - 1) * dt, total_t) < total_t else 0)
    if max_samples is not None and final_len > max_samples:
        raise ValueError(f"Sampling {total_t}s every {dt}s exceeds {max_samples} samples")

    # easing stored on arrival keyframe; build each curve once
    fns = [easing_for(k.ease, config) for k in kfs]

    times: List[float] = []
    values: List[float] = []
    seg_start_idx = 0
    for i in range(count):
        t = min(i * dt, total_t)
        # Find current segment
        while seg_start_idx < len(kfs) - 2 and t > kfs[seg_start_idx + 1].t:
            seg_start_idx += 1
        k0 = kfs[seg_start_idx]
        k1 = kfs[seg_start_idx + 1]
        u = (t - k0.t) / (k1.t - k0.t)
        times.append(t)
        values.append(ease(fns[seg_start_idx + 1], k0.value, k1.value, u))

    # Ensure last sample is exactly last keyframe
    if times[-1] < total_t:
        times.append(total_t)
        values.append(kfs[-1].value)
    else:
        values[-1] = kfs[-1].value

    log.debug(f"Sampled {len(times)} points over {total_t}s")
    return times, values
