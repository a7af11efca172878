"""Docker镜像体积校验工具包"""

import sys

# 导入loguru并配置logger
from loguru import logger

LOG_FORMAT = "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>"

# 移除默认处理器
logger.remove()
# 普通信息输出到标准输出
logger.add(
    sink=lambda msg: print(msg, end=""),
    format=LOG_FORMAT,
    colorize=True,
    level="INFO",
    filter=lambda record: record["level"].no < logger.level("WARNING").no,
)
# 警告和错误输出到标准错误
logger.add(
    sink=lambda msg: print(msg, end="", file=sys.stderr),
    format=LOG_FORMAT,
    colorize=True,
    level="WARNING",
)

# 导入其他模块
from .managers.validation_manager import (
    ValidationManager,
    get_prev_docker_image_id,
    print_image_size_trend,
    validate_image_size,
)
from .cli import app, main

__version__ = "0.1.0"

__all__ = [
    "logger",
    "ValidationManager",
    "get_prev_docker_image_id",
    "print_image_size_trend",
    "validate_image_size",
]
