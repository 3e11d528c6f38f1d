# Evaluation module
"""
评估模块

包含指标计算和评估器类
"""

from maskscore.evaluation.metrics import (
    compute_f1_score,
    compute_f1_matrix,
    match_masks,
    optimal_f1_score,
    MatchResult,
)
from maskscore.evaluation.evaluator import (
    Evaluator,
    create_evaluator,
    evaluate_single_image,
    score_row,
    score_rows,
    score,
)

__all__ = [
    "compute_f1_score",
    "compute_f1_matrix",
    "match_masks",
    "optimal_f1_score",
    "MatchResult",
    "Evaluator",
    "create_evaluator",
    "evaluate_single_image",
    "score_row",
    "score_rows",
    "score",
]
