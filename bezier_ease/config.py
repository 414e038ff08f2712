from __future__ import annotations

import os
from dataclasses import dataclass, field


@dataclass
class SolverConfig:
    # Reference values for CSS cubic-bezier(); changing them changes output
    sample_table_size: int = 11
    newton_iterations: int = 4
    newton_min_slope: float = 0.001
    subdivision_precision: float = 1e-7
    subdivision_max_iterations: int = 10

    @property
    def sample_step(self) -> float:
        return 1.0 / (self.sample_table_size - 1)


@dataclass
class AppConfig:
    solver: SolverConfig = field(default_factory=SolverConfig)

    # Timeline sampling
    sample_dt: float = 0.01            # 10 ms
    max_samples: int = 100_000         # per request


def load_config() -> AppConfig:
    cfg = AppConfig()
    # Allow simple env overrides
    cfg.sample_dt = float(os.getenv("EASE_SAMPLE_DT", cfg.sample_dt))
    cfg.max_samples = int(os.getenv("EASE_MAX_SAMPLES", cfg.max_samples))
    cfg.solver.newton_iterations = int(os.getenv("EASE_NEWTON_ITERATIONS", cfg.solver.newton_iterations))
    cfg.solver.newton_min_slope = float(os.getenv("EASE_NEWTON_MIN_SLOPE", cfg.solver.newton_min_slope))
    cfg.solver.subdivision_precision = float(
        os.getenv("EASE_SUBDIVISION_PRECISION", cfg.solver.subdivision_precision)
    )
    cfg.solver.subdivision_max_iterations = int(
        os.getenv("EASE_SUBDIVISION_MAX_ITERATIONS", cfg.solver.subdivision_max_iterations)
    )
    return cfg
