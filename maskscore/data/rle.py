# -*- coding: utf-8 -*-
"""
RLE 编解码模块

mask 按列优先 (Fortran) 顺序展平，index = row + col * height。
线上格式为 JSON 整数数组 [start, length, start, length, ...]，start 从 1 开始；
同一张图的多个 mask 用 ';' 连接。

- rle_encode(): 单个 mask 编码为整数列表
- rle_encode_masks(): 多个 mask 编码为 annotation 字符串
- rle_decode(): 解码并校验 RLE
- parse_shape(): 解析 [height, width]
"""

import json
import numbers
import operator
from typing import List, Sequence, Tuple, Union

import numpy as np

from ..exceptions import (
    BoundsViolationError,
    MalformedInputError,
    OrderingViolationError,
    OverlapViolationError,
)

MASK_DELIMITER = ";"


def rle_encode(mask: np.ndarray, fg_val: bool = True) -> List[int]:
    """
    将单个二值 mask 编码为 RLE

    Args:
        mask: 二维数组 (H, W)
        fg_val: 视为前景的值

    Returns:
        [start, length, ...]，start 从 1 开始
    """
    mask = np.asarray(mask)
    if mask.ndim != 2:
        raise MalformedInputError(f"Mask must be 2-D, got {mask.ndim} dimensions.")

    # 列优先展平，两端补 0 以便找到所有游程边界
    flat = (mask == fg_val).flatten(order="F").astype(np.int8)
    padded = np.concatenate([[0], flat, [0]])
    runs = np.flatnonzero(padded[1:] != padded[:-1]) + 1
    runs[1::2] -= runs[::2]
    return [int(x) for x in runs]


def rle_encode_masks(masks: Sequence[np.ndarray], fg_val: bool = True) -> str:
    """将多个 mask 编码为 ';' 分隔的 JSON 字符串"""
    return MASK_DELIMITER.join(json.dumps(rle_encode(m, fg_val)) for m in masks)


def _parse_int_array(value: Union[str, Sequence[int]], what: str) -> List[int]:
    """解析 JSON 整数数组，拒绝浮点数与布尔值"""
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError as e:
            raise MalformedInputError(f"{what} must be valid JSON array of ints.") from e

    if isinstance(value, np.ndarray):
        value = value.tolist()

    if not isinstance(value, (list, tuple)):
        raise MalformedInputError(f"{what} must be valid JSON array of ints.")

    for x in value:
        if isinstance(x, (bool, np.bool_)) or not isinstance(x, numbers.Integral):
            raise MalformedInputError(f"{what} must be valid JSON array of ints.")

    # 转为 Python int，后续校验不会发生定长整数溢出
    return [operator.index(x) for x in value]


def parse_shape(shape: Union[str, Sequence[int]]) -> Tuple[int, int]:
    """
    解析 shape 字段

    Args:
        shape: JSON 字符串 "[height, width]" 或二元序列

    Returns:
        (height, width)
    """
    values = _parse_int_array(shape, "Shape")
    if len(values) != 2:
        raise MalformedInputError("Shape must have exactly 2 integers: [height, width].")
    return values[0], values[1]


def rle_decode(
    mask_rle: Union[str, Sequence[int]],
    height: int,
    width: int,
) -> np.ndarray:
    """
    将 RLE 解码为二值 mask

    所有校验（顺序、重叠、越界）都在分配 mask 之前完成。

    Args:
        mask_rle: JSON 字符串或整数序列
        height: mask 高度
        width: mask 宽度

    Returns:
        mask: bool 数组 (height, width)

    Raises:
        MalformedInputError: JSON 非法、长度为奇数、尺寸非正或游程长度为负
        OrderingViolationError: start 不是非递减
        OverlapViolationError: 游程重叠
        BoundsViolationError: 游程越界
    """
    if height <= 0 or width <= 0:
        raise MalformedInputError(
            f"Height and width must be positive, got: [{height}, {width}]."
        )

    values = _parse_int_array(mask_rle, "RLE")
    if len(values) % 2 != 0:
        raise MalformedInputError("One or more rows has an odd number of values.")

    # 校验在 Python int 上进行，接近 2**63 的值不会回绕绕过越界检查
    starts = [s - 1 for s in values[0::2]]
    lengths = values[1::2]

    if any(b < a for a, b in zip(starts, starts[1:])):
        raise OrderingViolationError("Submitted values must be in ascending order.")

    if any(length < 0 for length in lengths):
        raise MalformedInputError("Run lengths must be non-negative.")

    ends = [s + length for s, length in zip(starts, lengths)]
    if any(end > start for end, start in zip(ends, starts[1:])):
        raise OverlapViolationError("Pixels must not be overlapping.")

    total = height * width
    if any(s < 0 for s in starts) or any(end > total for end in ends):
        raise BoundsViolationError("RLE indices are out of bounds for the provided shape.")

    flat = np.zeros(total, dtype=bool)
    for lo, hi in zip(starts, ends):
        flat[lo:hi] = True

    return flat.reshape((height, width), order="F")


def split_annotation(annotation: str) -> List[str]:
    """按 ';' 切分 annotation，忽略空段"""
    return [s for s in annotation.split(MASK_DELIMITER) if s.strip()]


def decode_annotation(annotation: str, height: int, width: int) -> List[np.ndarray]:
    """解码一张图的全部 mask"""
    return [rle_decode(s, height, width) for s in split_annotation(annotation)]
