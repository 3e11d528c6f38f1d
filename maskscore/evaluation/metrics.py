# -*- coding: utf-8 -*-
"""
评估指标模块

包含实例 mask 的匹配评分函数：
- compute_f1_score(): 两个 mask 之间的 F1 (precision / recall 调和平均)
- compute_f1_matrix(): 预测 × 真值的 F1 矩阵，预测数不足时补零行
- match_masks(): 基于匈牙利算法的最优匹配
- optimal_f1_score(): 带多余预测惩罚的单图得分
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..exceptions import ShapeMismatchError
from ..matching.hungarian import hungarian_minimize


def compute_f1_score(pred_mask: np.ndarray, gt_mask: np.ndarray) -> float:
    """
    计算预测 mask 与真值 mask 的 F1 分数

    F1 = 2 * P * R / (P + R)

    分母为 0 时 precision / recall 记为 0，因此两个空 mask 的 F1 为 0。

    Args:
        pred_mask: 预测 mask (H, W)
        gt_mask: 真值 mask (H, W)

    Returns:
        f1: 0-1 之间的分数
    """
    pred_mask = np.asarray(pred_mask, dtype=bool)
    gt_mask = np.asarray(gt_mask, dtype=bool)

    if pred_mask.shape != gt_mask.shape:
        raise ShapeMismatchError(
            f"pred_mask and gt_mask must have the same shape, "
            f"got {pred_mask.shape} and {gt_mask.shape}."
        )

    tp = int(np.count_nonzero(pred_mask & gt_mask))
    fp = int(np.count_nonzero(pred_mask & ~gt_mask))
    fn = int(np.count_nonzero(~pred_mask & gt_mask))

    precision = tp / (tp + fp) if (tp + fp) > 0 else 0.0
    recall = tp / (tp + fn) if (tp + fn) > 0 else 0.0

    if precision + recall > 0:
        return 2.0 * precision * recall / (precision + recall)
    return 0.0


def compute_f1_matrix(
    pred_masks: Sequence[np.ndarray],
    gt_masks: Sequence[np.ndarray],
) -> np.ndarray:
    """
    计算 F1 矩阵

    行为预测，列为真值。预测数少于真值数时补零行成为方阵，
    保证每个真值都参与匹配，未匹配的真值记 0 分。

    Returns:
        matrix: (max(|pred|, |gt|), |gt|)
    """
    num_pred = len(pred_masks)
    num_gt = len(gt_masks)

    matrix = np.zeros((max(num_pred, num_gt), num_gt), dtype=np.float64)
    for i, pred in enumerate(pred_masks):
        for j, gt in enumerate(gt_masks):
            matrix[i, j] = compute_f1_score(pred, gt)

    return matrix


@dataclass(frozen=True)
class MatchResult:
    """
    最优匹配结果

    pairs 中 pred_index 为 None 表示真值匹配到了补零行（没有对应预测）。
    """
    pairs: List[Tuple[Optional[int], int]]
    scores: List[float]

    @property
    def mean_score(self) -> float:
        if not self.scores:
            return 0.0
        return float(np.mean(self.scores))


def match_masks(
    pred_masks: Sequence[np.ndarray],
    gt_masks: Sequence[np.ndarray],
) -> MatchResult:
    """对 -F1 矩阵求最小代价分配，得到 F1 总和最大的匹配"""
    if len(pred_masks) == 0 or len(gt_masks) == 0:
        return MatchResult(pairs=[], scores=[])

    f1 = compute_f1_matrix(pred_masks, gt_masks)
    row_ind, col_ind = hungarian_minimize(-f1)

    pairs = []
    scores = []
    for r, c in zip(row_ind, col_ind):
        pred_index = int(r) if r < len(pred_masks) else None
        pairs.append((pred_index, int(c)))
        scores.append(float(f1[r, c]))

    return MatchResult(pairs=pairs, scores=scores)


def optimal_f1_score(
    pred_masks: Sequence[np.ndarray],
    gt_masks: Sequence[np.ndarray],
) -> float:
    """
    单张图的最优匹配 F1

    score = mean(matched F1) * |gt| / max(|pred|, |gt|)

    多余预测不会出现在匹配中，但会通过惩罚项降低得分。
    """
    num_pred = len(pred_masks)
    num_gt = len(gt_masks)

    if num_pred == 0 and num_gt == 0:
        return 1.0
    if num_pred == 0 or num_gt == 0:
        return 0.0

    result = match_masks(pred_masks, gt_masks)
    excess_predictions_penalty = num_gt / max(num_pred, num_gt)
    return result.mean_score * excess_predictions_penalty
