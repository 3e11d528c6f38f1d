# -*- coding: utf-8 -*-
"""
评分数据行

ScoreRow 是 solution / submission 中的一行：(row_id, annotation, shape)。
annotation 为 "authentic" 或 ';' 连接的 RLE；shape 为 "[height, width]"。
"""

import csv
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from ..exceptions import MalformedInputError

logger = logging.getLogger(__name__)

AUTHENTIC_LABEL = "authentic"


@dataclass(frozen=True)
class ScoreRow:
    """单行评分记录"""
    row_id: str
    annotation: str
    shape: str

    @property
    def is_authentic(self) -> bool:
        return self.annotation == AUTHENTIC_LABEL


def load_score_rows(
    csv_path: Union[str, Path],
    id_column: str = "row_id",
    annotation_column: str = "annotation",
    shape_column: str = "shape",
) -> List[ScoreRow]:
    """
    从 CSV 读取评分行

    submission 文件通常没有 shape 列，此时 shape 置为空字符串，
    评分时统一使用 solution 的 shape。

    Args:
        csv_path: CSV 文件路径（需要表头）
        id_column: 行 ID 列名
        annotation_column: annotation 列名
        shape_column: shape 列名

    Returns:
        ScoreRow 列表，顺序与文件一致
    """
    csv_path = Path(csv_path)
    rows = []

    with open(csv_path, 'r', newline='', encoding='utf-8') as f:
        reader = csv.DictReader(f)
        fieldnames = reader.fieldnames or []

        for column in (id_column, annotation_column):
            if column not in fieldnames:
                raise MalformedInputError(
                    f"Missing required column '{column}' in {csv_path.name}"
                )

        has_shape = shape_column in fieldnames
        for record in reader:
            rows.append(ScoreRow(
                row_id=record[id_column],
                annotation=record[annotation_column] or "",
                shape=record[shape_column] if has_shape else "",
            ))

    logger.info(f"Loaded {len(rows)} rows from {csv_path}")
    return rows
