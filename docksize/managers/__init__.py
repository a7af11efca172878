"""镜像体积校验管理器模块

该模块包含仓库访问、配置和校验相关的管理器类。
"""

from .config_manager import ConfigError, ConfigManager
from .validation_manager import ValidationManager

__all__ = [
    "ConfigError",
    "ConfigManager",
    "ValidationManager",
]
