# -*- coding: utf-8 -*-
"""数据模块"""

from .rle import (
    MASK_DELIMITER,
    rle_encode,
    rle_encode_masks,
    rle_decode,
    parse_shape,
    split_annotation,
    decode_annotation,
)

from .dataset import (
    AUTHENTIC_LABEL,
    ScoreRow,
    load_score_rows,
)

__all__ = [
    # rle
    'MASK_DELIMITER',
    'rle_encode',
    'rle_encode_masks',
    'rle_decode',
    'parse_shape',
    'split_annotation',
    'decode_annotation',
    # dataset
    'AUTHENTIC_LABEL',
    'ScoreRow',
    'load_score_rows',
]
