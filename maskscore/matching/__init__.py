# -*- coding: utf-8 -*-
"""匹配模块"""

from .hungarian import hungarian_minimize

__all__ = [
    'hungarian_minimize',
]
