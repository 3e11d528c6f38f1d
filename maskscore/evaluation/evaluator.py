# -*- coding: utf-8 -*-
"""
评估器模块

提供数据集级别的评分接口：
- evaluate_single_image(): 单张图的最优匹配 F1
- score_row() / score_rows(): 逐行评分，支持多进程
- score(): 所有行的平均分
- Evaluator: 按配置评分并输出 metrics.csv / per_row_scores.csv
"""

import csv
import logging
from concurrent.futures import ProcessPoolExecutor
from functools import partial
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import numpy as np
from tqdm import tqdm

from ..data.dataset import AUTHENTIC_LABEL, ScoreRow
from ..data.rle import decode_annotation, parse_shape, split_annotation
from ..exceptions import MalformedInputError, RowCountMismatchError
from .metrics import optimal_f1_score

logger = logging.getLogger(__name__)


def _check_mask_count(annotation: str, max_masks_per_image: Optional[int], what: str):
    if max_masks_per_image is None:
        return
    count = len(split_annotation(annotation))
    if count > max_masks_per_image:
        raise MalformedInputError(
            f"{what} has {count} masks, more than the allowed {max_masks_per_image}."
        )


def evaluate_single_image(
    label_rles: str,
    prediction_rles: str,
    shape: Union[str, Sequence[int]],
    max_masks_per_image: Optional[int] = None,
) -> float:
    """
    单张图评分

    Args:
        label_rles: 真值 annotation，';' 连接的 RLE
        prediction_rles: 预测 annotation
        shape: "[height, width]"
        max_masks_per_image: 每个 annotation 允许的最大 mask 数

    Returns:
        最优匹配 F1 (0-1)
    """
    height, width = parse_shape(shape)

    _check_mask_count(label_rles, max_masks_per_image, "Solution")
    _check_mask_count(prediction_rles, max_masks_per_image, "Submission")

    label_masks = decode_annotation(label_rles, height, width)
    pred_masks = decode_annotation(prediction_rles, height, width)

    return optimal_f1_score(pred_masks, label_masks)


def score_row(
    solution_row: ScoreRow,
    submission_row: ScoreRow,
    max_masks_per_image: Optional[int] = None,
) -> float:
    """
    单行评分

    任一 annotation 为 "authentic" 时按类别标签比较：完全一致得 1，否则得 0。
    shape 始终取自 solution。
    """
    label = solution_row.annotation
    pred = submission_row.annotation

    if label == AUTHENTIC_LABEL or pred == AUTHENTIC_LABEL:
        return 1.0 if label == pred else 0.0

    return evaluate_single_image(label, pred, solution_row.shape, max_masks_per_image)


def score_rows(
    solution: Sequence[ScoreRow],
    submission: Sequence[ScoreRow],
    num_workers: int = 0,
    max_masks_per_image: Optional[int] = None,
    show_progress: bool = False,
) -> List[float]:
    """
    逐行评分

    Args:
        solution: 真值行
        submission: 预测行，与 solution 按位置对齐
        num_workers: 进程数，<= 1 时在当前进程中计算
        max_masks_per_image: 每个 annotation 允许的最大 mask 数
        show_progress: 是否显示 tqdm 进度条

    Returns:
        每行得分，顺序与输入一致
    """
    if len(solution) != len(submission):
        raise RowCountMismatchError(
            f"Solution and submission must have the same number of rows, "
            f"got {len(solution)} and {len(submission)}."
        )
    if not solution:
        raise MalformedInputError("Solution and submission must contain at least one row.")

    fn = partial(score_row, max_masks_per_image=max_masks_per_image)
    total = len(solution)

    if num_workers <= 1:
        results = (fn(sol, sub) for sol, sub in zip(solution, submission))
        return list(tqdm(results, total=total, desc="Scoring", disable=not show_progress))

    chunksize = max(1, total // (num_workers * 4))
    with ProcessPoolExecutor(max_workers=num_workers) as ex:
        results = ex.map(fn, solution, submission, chunksize=chunksize)
        return list(tqdm(results, total=total, desc="Scoring", disable=not show_progress))


def score(
    solution: Sequence[ScoreRow],
    submission: Sequence[ScoreRow],
    num_workers: int = 0,
    max_masks_per_image: Optional[int] = None,
    show_progress: bool = False,
) -> float:
    """
    数据集平均分

    Returns:
        所有行得分的算术平均
    """
    scores = score_rows(
        solution,
        submission,
        num_workers=num_workers,
        max_masks_per_image=max_masks_per_image,
        show_progress=show_progress,
    )
    return float(np.mean(scores))


class Evaluator:
    """
    统一评估器

    输出:
    - metrics.csv (score, num_rows, num_authentic, num_perfect)
    - per_row_scores.csv
    """

    def __init__(
        self,
        output_dir: str = "results/scoring",
        num_workers: int = 0,
        max_masks_per_image: Optional[int] = None,
        show_progress: bool = False,
        save_per_row: bool = True,
    ):
        """
        Args:
            output_dir: 输出目录
            num_workers: 评分进程数
            max_masks_per_image: 每个 annotation 允许的最大 mask 数
            show_progress: 是否显示进度条
            save_per_row: 是否保存逐行得分
        """
        self.output_dir = Path(output_dir)
        self.num_workers = num_workers
        self.max_masks_per_image = max_masks_per_image
        self.show_progress = show_progress
        self.save_per_row = save_per_row

        self.output_dir.mkdir(parents=True, exist_ok=True)

    def evaluate(
        self,
        solution: Sequence[ScoreRow],
        submission: Sequence[ScoreRow],
    ) -> Dict[str, Any]:
        """
        评分并保存结果

        Returns:
            评估结果字典
        """
        logger.info(f"Scoring {len(submission)} rows against {len(solution)} solution rows...")

        row_scores = score_rows(
            solution,
            submission,
            num_workers=self.num_workers,
            max_masks_per_image=self.max_masks_per_image,
            show_progress=self.show_progress,
        )

        for row, value in zip(solution, row_scores):
            logger.debug(f"Row {row.row_id}: {value:.6f}")

        metrics = {
            'score': float(np.mean(row_scores)),
            'num_rows': len(row_scores),
            'num_authentic': sum(1 for row in solution if row.is_authentic),
            'num_perfect': sum(1 for value in row_scores if value == 1.0),
            'row_ids': [row.row_id for row in solution],
            'row_scores': row_scores,
        }

        logger.info(f"Score: {metrics['score']:.6f}")
        logger.info(f"Perfect rows: {metrics['num_perfect']}/{metrics['num_rows']}")

        self._save_metrics_csv(metrics)
        if self.save_per_row:
            self._save_per_row_csv(metrics)

        logger.info(f"Evaluation complete. Results saved to {self.output_dir}")

        return metrics

    def _save_metrics_csv(self, metrics: Dict[str, Any]):
        """保存 metrics.csv"""
        csv_path = self.output_dir / "metrics.csv"

        with open(csv_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['metric', 'value'])
            writer.writerow(['score', f"{metrics['score']:.6f}"])
            writer.writerow(['num_rows', metrics['num_rows']])
            writer.writerow(['num_authentic', metrics['num_authentic']])
            writer.writerow(['num_perfect', metrics['num_perfect']])

        logger.info(f"Metrics saved to {csv_path}")

    def _save_per_row_csv(self, metrics: Dict[str, Any]):
        """保存逐行得分"""
        csv_path = self.output_dir / "per_row_scores.csv"

        with open(csv_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['row_id', 'score'])
            for row_id, value in zip(metrics['row_ids'], metrics['row_scores']):
                writer.writerow([row_id, f"{value:.6f}"])

        logger.info(f"Per-row scores saved to {csv_path}")


def create_evaluator(
    config: Any,
    output_dir: Optional[str] = None,
) -> Evaluator:
    """
    从配置创建评估器

    Args:
        config: ScoringConfig
        output_dir: 输出目录，默认为 results_dir / name

    Returns:
        Evaluator 实例
    """
    if output_dir is None:
        output_dir = str(Path(config.output.results_dir) / config.name)

    return Evaluator(
        output_dir=output_dir,
        num_workers=config.evaluation.num_workers,
        max_masks_per_image=config.evaluation.max_masks_per_image,
        show_progress=config.evaluation.show_progress,
        save_per_row=config.output.save_per_row,
    )
