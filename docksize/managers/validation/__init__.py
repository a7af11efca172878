"""镜像体积校验相关功能模块

该子包包含上一版本镜像的查找和体积比较。
"""

from .resolver import find_previous_by_registry, predict_previous_tag
from .size import ValidationOutcome, failed_variants, is_size_increase_allowed, validate_variants

__all__ = [
    "find_previous_by_registry",
    "predict_previous_tag",
    "ValidationOutcome",
    "failed_variants",
    "is_size_increase_allowed",
    "validate_variants",
]
