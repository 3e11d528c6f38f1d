# -*- coding: utf-8 -*-
"""
评分异常定义

所有校验错误都继承自 ParticipantVisibleError，错误信息可以直接展示给提交者。
任何错误都不会被转换为默认分数。
"""


class ParticipantVisibleError(ValueError):
    """可展示给提交者的校验错误基类"""


class MalformedInputError(ParticipantVisibleError):
    """JSON 无法解析、shape 维度错误或尺寸非正"""


class OrderingViolationError(ParticipantVisibleError):
    """RLE 起点不是非递减的"""


class OverlapViolationError(ParticipantVisibleError):
    """RLE 游程相互重叠"""


class BoundsViolationError(ParticipantVisibleError):
    """RLE 游程超出 mask 范围"""


class ShapeMismatchError(ParticipantVisibleError):
    """比较的两个 mask 尺寸不一致"""


class RowCountMismatchError(ParticipantVisibleError):
    """solution 与 submission 行数不一致"""
