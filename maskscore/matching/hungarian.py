# -*- coding: utf-8 -*-
"""
匈牙利算法 (Kuhn-Munkres)

基于行/列势函数的 O(n^3) 实现，求解矩形代价矩阵的最小代价匹配。
要求 rows <= cols，否则先转置再还原结果。
"""

from typing import Tuple

import numpy as np

from ..exceptions import MalformedInputError


def _solve(cost: np.ndarray) -> np.ndarray:
    """
    求解 rows <= cols 的情形

    Args:
        cost: 代价矩阵 (n, m)，n <= m

    Returns:
        col_for_row: 每一行匹配到的列 (n,)
    """
    n, m = cost.shape

    # 1-based：u/v 为行/列势，p[j] 为列 j 匹配的行，way[j] 为增广路径上的前驱列
    u = np.zeros(n + 1)
    v = np.zeros(m + 1)
    p = np.zeros(m + 1, dtype=np.int64)
    way = np.zeros(m + 1, dtype=np.int64)

    for i in range(1, n + 1):
        p[0] = i
        j0 = 0
        minv = np.full(m + 1, np.inf)
        used = np.zeros(m + 1, dtype=bool)

        while True:
            used[j0] = True
            i0 = p[j0]

            free = np.flatnonzero(~used[1:]) + 1
            cur = cost[i0 - 1, free - 1] - u[i0] - v[free]
            improved = cur < minv[free]
            minv[free[improved]] = cur[improved]
            way[free[improved]] = j0

            # argmin 取第一个最小值，决定平局时的列顺序
            k = int(np.argmin(minv[free]))
            j1 = int(free[k])
            delta = minv[j1]

            u[p[used]] += delta
            v[used] -= delta
            minv[free] -= delta

            j0 = j1
            if p[j0] == 0:
                break

        # 沿增广路径翻转匹配
        while True:
            j1 = way[j0]
            p[j0] = p[j1]
            j0 = j1
            if j0 == 0:
                break

    col_for_row = np.zeros(n, dtype=np.int64)
    for j in range(1, m + 1):
        if p[j] != 0:
            col_for_row[p[j] - 1] = j - 1
    return col_for_row


def hungarian_minimize(cost: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    最小代价分配

    Args:
        cost: 代价矩阵 (R, C)，元素须为有限实数

    Returns:
        row_ind: 被分配的行索引 (min(R, C),)，升序
        col_ind: 对应的列索引
    """
    cost = np.asarray(cost, dtype=np.float64)
    if cost.ndim != 2:
        raise MalformedInputError(f"Cost matrix must be 2-D, got {cost.ndim} dimensions.")

    rows, cols = cost.shape
    if rows == 0 or cols == 0:
        return np.zeros(0, dtype=np.int64), np.zeros(0, dtype=np.int64)

    if rows <= cols:
        col_ind = _solve(cost)
        return np.arange(rows, dtype=np.int64), col_ind

    # 转置后行变为原矩阵的列
    row_for_col = _solve(cost.T)
    order = np.argsort(row_for_col)
    return row_for_col[order], np.arange(cols, dtype=np.int64)[order]
