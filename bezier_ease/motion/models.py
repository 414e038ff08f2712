from __future__ import annotations

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, model_validator


EaseType = Literal["linear", "ease", "ease-in", "ease-out", "ease-in-out", "cubic-bezier"]


class Ease(BaseModel):
    type: EaseType = "linear"
    p: Optional[list[float]] = Field(default=None, description="Bezier control points [x1,y1,x2,y2]")

    @model_validator(mode="after")
    def validate_bezier(self):
        if self.type == "cubic-bezier":
            if not self.p or len(self.p) != 4:
                raise ValueError("cubic-bezier requires p=[x1,y1,x2,y2]")
        return self


class Keyframe(BaseModel):
    t: float = Field(..., ge=0.0, description="Time in seconds")
    value: float = Field(..., description="Target value reached at time t")
    ease: Ease = Field(default_factory=Ease, description="Curve used to arrive at this keyframe")


class Timeline(BaseModel):
    keyframes: List[Keyframe]

    @model_validator(mode="after")
    def validate_keyframes(self):
        if not self.keyframes or len(self.keyframes) < 2:
            raise ValueError("At least two keyframes required")
        # sort and ensure increasing time
        self.keyframes.sort(key=lambda k: k.t)
        last_t = -1.0
        for k in self.keyframes:
            if k.t <= last_t:
                raise ValueError("Keyframe times must be strictly increasing")
            last_t = k.t
        return self

    @property
    def duration(self) -> float:
        return self.keyframes[-1].t
