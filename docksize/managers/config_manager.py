"""配置管理器类"""

import json
import os
from typing import Any, Dict, Mapping, Optional, Type, Union, cast

from dotenv import find_dotenv, load_dotenv
from loguru import logger

from ..constants import (
    DEFAULT_CONFIG,
    DEFAULT_CONFIG_FILE,
    ENV_PASSWORD,
    ENV_PASSWORD_TEMPLATE,
    ENV_REGISTRY,
    ENV_THRESHOLD,
    ENV_USERNAME,
    ERROR_MESSAGES,
    DefaultConfig,
    default_config_copy,
)
from .registry.base import RegistryCredentials


class ConfigError(Exception):
    """配置错误"""

    pass


ValidationStructure = Dict[str, Union[Type[Any], "ValidationStructure"]]


def generate_validation_structure(config_template: Mapping[str, Any]) -> ValidationStructure:
    """
    从配置模板生成验证结构

    Args:
        config_template: 配置模板

    Returns:
        ValidationStructure: 验证结构
    """
    validation_structure: ValidationStructure = {}

    for key, value in config_template.items():
        if isinstance(value, dict):
            validation_structure[key] = generate_validation_structure(value)
        elif isinstance(value, float):
            # 整数阈值同样合法
            validation_structure[key] = (int, float)  # type: ignore[assignment]
        elif value is None:
            validation_structure[key] = str
        else:
            validation_structure[key] = type(value)

    return validation_structure


def recursive_update(current: Dict[str, Any], updates: Mapping[str, Any]) -> None:
    """递归更新配置"""
    for key, value in updates.items():
        if key in current and isinstance(value, dict) and isinstance(current[key], dict):
            recursive_update(current[key], value)
        else:
            current[key] = value


def get_password_from_env(username: Optional[str]) -> Optional[str]:
    """
    从环境变量获取访问令牌，优先使用用户专属变量

    Args:
        username: 用户名

    Returns:
        Optional[str]: 访问令牌，未找到时返回None
    """
    if username:
        env_var_name = ENV_PASSWORD_TEMPLATE.format(username.upper())
        password = os.environ.get(env_var_name)
        if password:
            logger.info(f"已从环境变量 {env_var_name} 获取访问令牌")
            return password

    password = os.environ.get(ENV_PASSWORD)
    if password:
        logger.info(f"已从环境变量 {ENV_PASSWORD} 获取访问令牌")
    return password


class ConfigManager:
    """配置管理器类，合并默认配置、配置文件和环境变量"""

    config_file: str
    config: DefaultConfig
    REQUIRED_CONFIG_FIELDS: ValidationStructure

    def __init__(self, config_file: Optional[str] = None, use_dotenv: bool = True) -> None:
        """
        初始化配置管理器

        Args:
            config_file: 配置文件路径，默认为当前目录下的docksize.json
            use_dotenv: 是否加载当前目录下的.env文件
        """
        self.config_file = config_file or os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
        self.config = default_config_copy()
        self.use_dotenv = use_dotenv

        # 初始化验证结构
        self.REQUIRED_CONFIG_FIELDS = generate_validation_structure(DEFAULT_CONFIG)

    def load_config(self) -> DefaultConfig:
        """
        加载配置，优先级: 环境变量 > 配置文件 > 默认值

        Returns:
            DefaultConfig: 加载的配置

        Raises:
            ConfigError: 配置加载失败时抛出
        """
        if self.use_dotenv:
            load_dotenv(find_dotenv(usecwd=True))

        if os.path.exists(self.config_file):
            try:
                with open(self.config_file, "r", encoding="utf-8") as f:
                    file_config = json.load(f)
            except (OSError, ValueError) as e:
                raise ConfigError(f"读取配置文件失败: {self.config_file}: {e}")
            if not isinstance(file_config, dict):
                raise ConfigError(ERROR_MESSAGES["config_validation"].format("配置文件必须是JSON对象"))
            recursive_update(cast(Dict[str, Any], self.config), file_config)
            logger.debug(f"已加载配置文件: {self.config_file}")
            self.validate_config()

        self._apply_env()
        self.validate_config()
        return self.config

    def update_config(self, config_updates: Mapping[str, Any]) -> DefaultConfig:
        """
        更新配置，值为None的项会被忽略

        Args:
            config_updates: 要更新的配置项

        Returns:
            DefaultConfig: 更新后的配置

        Raises:
            ConfigError: 配置验证失败时抛出
        """
        recursive_update(cast(Dict[str, Any], self.config), _drop_none(config_updates))
        self.validate_config()
        return self.config

    def validate_config(self) -> None:
        """
        验证配置的完整性和正确性

        Raises:
            ConfigError: 配置验证失败时抛出
        """
        try:
            self._validate_config_structure(cast(Dict[str, Any], self.config), self.REQUIRED_CONFIG_FIELDS)
        except ConfigError as e:
            raise ConfigError(ERROR_MESSAGES["config_validation"].format(str(e)))

        if self.config["validation"]["page_size"] <= 0:
            raise ConfigError(ERROR_MESSAGES["config_validation"].format("page_size必须大于0"))
        if self.config["validation"]["trend_page_size"] <= 0:
            raise ConfigError(ERROR_MESSAGES["config_validation"].format("trend_page_size必须大于0"))

    def _validate_config_structure(self, config: Dict[str, Any], required: ValidationStructure) -> None:
        """
        递归验证配置结构

        Args:
            config: 要验证的配置
            required: 必需的配置结构

        Raises:
            ConfigError: 配置结构验证失败时抛出
        """
        for key, value_type in required.items():
            if key not in config:
                raise ConfigError(f"缺少必需的配置项: {key}")

            if isinstance(value_type, dict):
                if not isinstance(config[key], dict):
                    raise ConfigError(f"配置项类型错误: {key} 应为字典")
                self._validate_config_structure(config[key], value_type)
            elif isinstance(config[key], bool) or not isinstance(config[key], value_type):
                expected = value_type.__name__ if isinstance(value_type, type) else "数字"
                raise ConfigError(f"配置项类型错误: {key} 应为 {expected}")

    def _apply_env(self) -> None:
        """使用环境变量覆盖配置"""
        registry = self.config["registry"]

        registry_url = os.environ.get(ENV_REGISTRY)
        if registry_url:
            registry["url"] = registry_url

        username = os.environ.get(ENV_USERNAME)
        if username:
            registry["username"] = username

        password = get_password_from_env(registry["username"])
        if password:
            registry["token"] = password

        threshold = os.environ.get(ENV_THRESHOLD)
        if threshold:
            try:
                self.config["validation"]["threshold"] = float(threshold)
            except ValueError:
                raise ConfigError(f"环境变量 {ENV_THRESHOLD} 不是有效的数字: {threshold}")

    def get_credentials(self) -> Optional[RegistryCredentials]:
        """
        获取仓库凭据

        Returns:
            Optional[RegistryCredentials]: 没有访问令牌时返回None
        """
        registry = self.config["registry"]
        if not registry["token"]:
            return None
        return RegistryCredentials(registry["username"], registry["token"])

    def get_config(self) -> DefaultConfig:
        """
        获取当前配置

        Returns:
            DefaultConfig: 当前配置
        """
        return self.config


def _drop_none(updates: Mapping[str, Any]) -> Dict[str, Any]:
    result: Dict[str, Any] = {}
    for key, value in updates.items():
        if isinstance(value, Mapping):
            result[key] = _drop_none(value)
        elif value is not None:
            result[key] = value
    return result
