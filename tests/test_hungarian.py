# -*- coding: utf-8 -*-
"""
匈牙利算法测试

已知矩阵验证 + 小矩阵穷举对照
"""

import itertools

import pytest
import numpy as np
from pathlib import Path
from hypothesis import given, strategies as st, settings

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from maskscore.matching.hungarian import hungarian_minimize
from maskscore.exceptions import MalformedInputError


def brute_force_min_cost(cost: np.ndarray) -> float:
    """穷举所有分配，返回最小总代价"""
    rows, cols = cost.shape
    if rows <= cols:
        return min(
            sum(cost[i, perm[i]] for i in range(rows))
            for perm in itertools.permutations(range(cols), rows)
        )
    return min(
        sum(cost[perm[j], j] for j in range(cols))
        for perm in itertools.permutations(range(rows), cols)
    )


def assert_valid_assignment(cost, row_ind, col_ind):
    rows, cols = cost.shape
    assert len(row_ind) == len(col_ind) == min(rows, cols)
    assert len(set(row_ind.tolist())) == len(row_ind)
    assert len(set(col_ind.tolist())) == len(col_ind)
    assert all(0 <= r < rows for r in row_ind)
    assert all(0 <= c < cols for c in col_ind)


@pytest.mark.unit
class TestHungarianKnownValues:
    """已知最优解的矩阵"""

    def test_square(self):
        cost = np.array([
            [4, 1, 3],
            [2, 0, 5],
            [3, 2, 2],
        ])
        row_ind, col_ind = hungarian_minimize(cost)

        np.testing.assert_array_equal(row_ind, [0, 1, 2])
        np.testing.assert_array_equal(col_ind, [1, 0, 2])
        assert cost[row_ind, col_ind].sum() == 5

    def test_more_columns_than_rows(self):
        cost = np.array([
            [1, 2, 3],
            [2, 4, 6],
        ])
        row_ind, col_ind = hungarian_minimize(cost)

        np.testing.assert_array_equal(row_ind, [0, 1])
        np.testing.assert_array_equal(col_ind, [1, 0])

    def test_more_rows_than_columns(self):
        """行多于列时转置求解并还原索引"""
        cost = np.array([
            [1, 2],
            [2, 4],
            [3, 6],
        ])
        row_ind, col_ind = hungarian_minimize(cost)

        np.testing.assert_array_equal(row_ind, [0, 1])
        np.testing.assert_array_equal(col_ind, [1, 0])
        assert cost[row_ind, col_ind].sum() == 4

    def test_single_cell(self):
        row_ind, col_ind = hungarian_minimize(np.array([[-0.5]]))
        np.testing.assert_array_equal(row_ind, [0])
        np.testing.assert_array_equal(col_ind, [0])

    def test_negated_similarity(self):
        """-F1 代价矩阵应选出 F1 总和最大的匹配"""
        f1 = np.array([
            [0.9, 0.8],
            [0.85, 0.1],
        ])
        row_ind, col_ind = hungarian_minimize(-f1)
        # 0->1, 1->0: 1.65 优于 0->0, 1->1: 1.0
        np.testing.assert_array_equal(col_ind, [1, 0])

    def test_all_ties(self):
        cost = np.zeros((4, 4))
        row_ind, col_ind = hungarian_minimize(cost)
        assert_valid_assignment(cost, row_ind, col_ind)

    def test_empty_matrix(self):
        row_ind, col_ind = hungarian_minimize(np.zeros((0, 3)))
        assert len(row_ind) == 0
        assert len(col_ind) == 0

    def test_input_not_modified(self):
        cost = np.array([[4.0, 1.0], [2.0, 0.0]])
        original = cost.copy()
        hungarian_minimize(cost)
        np.testing.assert_array_equal(cost, original)

    def test_non_2d_rejected(self):
        with pytest.raises(MalformedInputError):
            hungarian_minimize(np.array([1.0, 2.0]))


@pytest.mark.property
class TestHungarianOptimality:
    """与穷举结果对照"""

    @given(
        rows=st.integers(min_value=1, max_value=6),
        cols=st.integers(min_value=1, max_value=6),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
    )
    @settings(max_examples=100, deadline=None)
    def test_matches_brute_force(self, rows, cols, seed):
        rng = np.random.default_rng(seed)
        cost = rng.uniform(-1.0, 1.0, size=(rows, cols))

        row_ind, col_ind = hungarian_minimize(cost)

        assert_valid_assignment(cost, row_ind, col_ind)
        assert cost[row_ind, col_ind].sum() == pytest.approx(brute_force_min_cost(cost), abs=1e-9)

    @given(
        n=st.integers(min_value=1, max_value=6),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
    )
    @settings(max_examples=50, deadline=None)
    def test_integer_costs_with_ties(self, n, seed):
        """取值很少的整数矩阵会出现大量平局"""
        rng = np.random.default_rng(seed)
        cost = rng.integers(0, 3, size=(n, n)).astype(float)

        row_ind, col_ind = hungarian_minimize(cost)

        assert_valid_assignment(cost, row_ind, col_ind)
        assert cost[row_ind, col_ind].sum() == pytest.approx(brute_force_min_cost(cost))

    @given(
        rows=st.integers(min_value=1, max_value=5),
        cols=st.integers(min_value=1, max_value=5),
        seed=st.integers(min_value=0, max_value=2**32 - 1),
    )
    @settings(max_examples=50, deadline=None)
    def test_transpose_gives_same_cost(self, rows, cols, seed):
        rng = np.random.default_rng(seed)
        cost = rng.uniform(0.0, 1.0, size=(rows, cols))

        r1, c1 = hungarian_minimize(cost)
        r2, c2 = hungarian_minimize(cost.T)

        assert cost[r1, c1].sum() == pytest.approx(cost.T[r2, c2].sum(), abs=1e-9)


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
