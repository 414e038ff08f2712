from __future__ import annotations

import logging
from typing import Annotated, List, Optional

from fastapi import FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from ..config import AppConfig, load_config
from ..motion.easing import PRESETS, CurveSolver
from ..motion.models import Ease, Timeline
from ..motion.planner import easing_for, sample_timeline

log = logging.getLogger(__name__)


app = FastAPI(title="Bezier Ease API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


Progress = Annotated[float, Field(ge=0.0, le=1.0)]


class EvaluateRequest(BaseModel):
    ease: Ease = Field(default_factory=Ease)
    x: List[Progress] = Field(..., min_length=1, description="Progress values in [0,1]")


# Singleton getter
_config: Optional[AppConfig] = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


@app.get("/api/presets")
def api_presets_list():
    return {name: list(p) for name, p in PRESETS.items()}


@app.get("/api/presets/{name}/sample")
def api_preset_sample(name: str, n: int = Query(11, ge=2)):
    cfg = get_config()
    if name not in PRESETS:
        log.warning(f"Unknown preset requested: {name}")
        raise HTTPException(404, detail="Preset not found")
    if n > cfg.max_samples:
        raise HTTPException(422, detail=f"n exceeds {cfg.max_samples}")
    x1, y1, x2, y2 = PRESETS[name]
    curve = CurveSolver((x1, y1), (x2, y2), cfg.solver)
    xs = [i / (n - 1) for i in range(n)]
    return {"x": xs, "y": [curve.y(x) for x in xs]}


@app.post("/api/evaluate")
def api_evaluate(req: EvaluateRequest):
    cfg = get_config()
    fn = easing_for(req.ease, cfg.solver)
    log.info(f"Evaluating {req.ease.type} at {len(req.x)} points")
    return {"y": [fn(x) for x in req.x]}


@app.post("/api/sample")
def api_sample(timeline: Timeline, dt: Optional[float] = Query(None, gt=0)):
    """Sample a keyframe timeline at a fixed interval.

    Behavior:
    - dt defaults to the configured sampling interval.
    - Requests that would produce more than the configured maximum number of
      samples are rejected with 422.
    """
    cfg = get_config()
    step = cfg.sample_dt if dt is None else dt
    try:
        times, values = sample_timeline(timeline, dt=step, max_samples=cfg.max_samples, config=cfg.solver)
    except ValueError as e:
        log.warning(f"Rejected sample request: {e}")
        raise HTTPException(422, detail=str(e))
    log.info(f"Sampled timeline of {timeline.duration}s into {len(times)} points")
    return {"times": times, "values": values}
