# -*- coding: utf-8 -*-
"""
实例 mask 评分

RLE 编解码、mask F1、匈牙利最优匹配与数据集级评分
"""

from .exceptions import (
    ParticipantVisibleError,
    MalformedInputError,
    OrderingViolationError,
    OverlapViolationError,
    BoundsViolationError,
    ShapeMismatchError,
    RowCountMismatchError,
)
from .data import ScoreRow, rle_encode, rle_encode_masks, rle_decode
from .evaluation import optimal_f1_score, score

__version__ = "0.1.0"

__all__ = [
    'ParticipantVisibleError',
    'MalformedInputError',
    'OrderingViolationError',
    'OverlapViolationError',
    'BoundsViolationError',
    'ShapeMismatchError',
    'RowCountMismatchError',
    'ScoreRow',
    'rle_encode',
    'rle_encode_masks',
    'rle_decode',
    'optimal_f1_score',
    'score',
]
