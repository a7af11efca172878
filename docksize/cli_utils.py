"""CLI工具模块，包含CLI命令行接口的辅助函数"""

import sys
from functools import wraps
from typing import Any, Callable, Optional, TypeVar, cast

from loguru import logger

from .managers.config_manager import ConfigError, ConfigManager
from .managers.registry.base import AuthError, RegistryError, RegistryLookupError
from .managers.validation_manager import ValidationManager

F = TypeVar("F", bound=Callable[..., Any])


def get_config_manager(
    config_file: Optional[str] = None,
    registry: Optional[str] = None,
    username: Optional[str] = None,
    token: Optional[str] = None,
    threshold: Optional[float] = None,
) -> ConfigManager:
    """
    加载配置并使用命令行参数覆盖

    Args:
        config_file: 配置文件路径
        registry: 仓库REST API地址
        username: 仓库用户名
        token: 访问令牌
        threshold: 允许的最大增长百分比

    Returns:
        ConfigManager: 配置管理器实例

    Raises:
        ConfigError: 配置验证失败时抛出
    """
    config_manager = ConfigManager(config_file)
    config_manager.load_config()
    config_manager.update_config(
        {
            "registry": {"url": registry, "username": username, "token": token},
            "validation": {"threshold": threshold},
        }
    )
    return config_manager


def get_validation_manager(config_manager: ConfigManager) -> ValidationManager:
    """
    根据配置创建校验管理器

    Args:
        config_manager: 配置管理器实例

    Returns:
        ValidationManager: 校验管理器实例
    """
    config = config_manager.get_config()
    credentials = config_manager.get_credentials()
    if credentials is None:
        logger.info("未提供访问令牌，将匿名访问仓库")
    return ValidationManager(
        config["registry"]["url"],
        credentials,
        page_size=config["validation"]["page_size"],
        trend_page_size=config["validation"]["trend_page_size"],
    )


def handle_registry_errors(func: F) -> F:
    """
    将配置和仓库错误转换为错误日志和退出码1的装饰器

    Args:
        func: 被装饰的函数

    Returns:
        Callable: 装饰后的函数
    """

    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except ConfigError as e:
            logger.error(f"错误：{str(e)}")
            sys.exit(1)
        except AuthError as e:
            logger.error(f"认证失败: {e}")
            logger.error("请检查用户名和访问令牌是否正确")
            sys.exit(1)
        except RegistryLookupError as e:
            logger.error(f"查询仓库失败: {e}")
            logger.error("请检查镜像名称和仓库地址是否正确")
            sys.exit(1)
        except RegistryError as e:
            logger.error(f"错误：{str(e)}")
            sys.exit(1)
        except ValueError as e:
            logger.error(f"参数错误: {e}")
            sys.exit(1)

    return cast(F, wrapper)
