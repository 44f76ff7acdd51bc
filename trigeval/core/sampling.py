# trigeval/core/sampling.py

"""
Samples a parametric curve (an x and a y expression) for one animation frame.

This is the point stream a renderer consumes: ``t`` sweeps evenly over
``[0, 2*pi*turns]``. ``evaluate`` only ever returns finite floats (failures
and non-finite values become 0), so every sample is finite and kept.
"""

import json
import logging
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Union

import numpy as np
import pandas as pd
from numpy.typing import NDArray

from .evaluator import ExpressionEvaluator, get_default_evaluator

logger = logging.getLogger(__name__)

DEFAULT_STEPS = 2000
MAX_STEPS = 8000
DEFAULT_TURNS = 4.0


@dataclass
class CurveSamples:
    """Samples of one curve; all arrays share the same length."""
    index: NDArray[np.int64]
    t: NDArray[np.float64]
    x: NDArray[np.float64]
    y: NDArray[np.float64]
    hue: NDArray[np.float64]
    time: float = 0.0

    def __len__(self) -> int:
        return int(self.index.shape[0])

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame({
            "index": self.index,
            "t": self.t,
            "x": self.x,
            "y": self.y,
            "hue": self.hue,
        })

    def bounds(self) -> Dict[str, float]:
        """Bounding box of the samples (all zeros when empty)."""
        if len(self) == 0:
            return {"x_min": 0.0, "x_max": 0.0, "y_min": 0.0, "y_max": 0.0}
        return {
            "x_min": float(self.x.min()),
            "x_max": float(self.x.max()),
            "y_min": float(self.y.min()),
            "y_max": float(self.y.max()),
        }


def sample_curve(
    x_expression: str,
    y_expression: str,
    time: float = 0.0,
    steps: int = DEFAULT_STEPS,
    turns: float = DEFAULT_TURNS,
    max_steps: int = MAX_STEPS,
    variables: Optional[Dict[str, float]] = None,
    evaluator: Optional[ExpressionEvaluator] = None,
) -> CurveSamples:
    """
    Evaluates both expressions at ``steps + 1`` evenly spaced values of ``t``.

    Args:
        x_expression: Formula for the x coordinate.
        y_expression: Formula for the y coordinate.
        time: Animation time passed to both formulas as ``time``.
        steps: Number of intervals; clamped to ``max_steps``.
        turns: Span of ``t`` in full turns (the default sweeps 8*pi).
        max_steps: Upper bound on ``steps``.
        variables: Extra named variables available to both formulas.
        evaluator: Evaluator to use; defaults to the shared instance.

    Returns:
        CurveSamples with one finite point per value of ``t``.
    """
    if steps <= 0:
        raise ValueError("steps must be positive")
    evaluator = evaluator or get_default_evaluator()
    if steps > max_steps:
        logger.info(f"Clamping steps from {steps} to {max_steps}.")
        steps = max_steps

    t_values = np.linspace(0.0, 2 * math.pi * turns, steps + 1)
    context: Dict[str, float] = dict(variables or {})
    context["time"] = time

    xs = np.empty(steps + 1, dtype=np.float64)
    ys = np.empty(steps + 1, dtype=np.float64)
    for i, t in enumerate(t_values):
        context["t"] = float(t)
        xs[i] = evaluator.evaluate(x_expression, context)
        ys[i] = evaluator.evaluate(y_expression, context)

    index = np.arange(steps + 1, dtype=np.int64)
    return CurveSamples(
        index=index,
        t=t_values,
        x=xs,
        y=ys,
        hue=index / steps,
        time=time,
    )


def save_samples(samples: CurveSamples, output_path: Union[str, Path]) -> Path:
    """
    Saves samples as CSV, JSON (records) or NPZ, chosen by file extension.

    Raises:
        ValueError: If the extension is not supported.
    """
    fpath = Path(output_path).resolve()
    ext = fpath.suffix.lower()
    logger.info(f"Saving {len(samples)} samples to: {fpath} (format: {ext})")

    fpath.parent.mkdir(parents=True, exist_ok=True)
    if ext == ".csv":
        samples.to_dataframe().to_csv(fpath, index=False)
    elif ext == ".json":
        payload = {"time": samples.time, "points": samples.to_dataframe().to_dict(orient="records")}
        with open(fpath, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
    elif ext == ".npz":
        np.savez(fpath, index=samples.index, t=samples.t, x=samples.x, y=samples.y,
                 hue=samples.hue, time=np.array(samples.time))
    else:
        raise ValueError(f"Unsupported output format '{ext}'. Use .csv, .json or .npz.")
    return fpath
