"""Per-tick completion scoring."""

from race_progress.scoring.evaluator import (
    Evaluation,
    ProgressEvaluator,
    coerce_point,
    partial_fraction,
)

__all__ = ["Evaluation", "ProgressEvaluator", "coerce_point", "partial_fraction"]
