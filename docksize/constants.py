"""常量配置模块"""

from typing import List, Tuple, TypedDict


# 仓库相关
class RegistryConfig(TypedDict):
    url: str
    username: str
    token: str


class ValidationConfig(TypedDict):
    threshold: float
    page_size: int
    trend_page_size: int
    target_os: str


class DefaultConfig(TypedDict):
    registry: RegistryConfig
    validation: ValidationConfig


DEFAULT_REGISTRY_URL: str = "https://hub.docker.com/v2"
DEFAULT_CONFIG_FILE: str = "docksize.json"

DEFAULT_CONFIG: DefaultConfig = {
    "registry": {
        "url": DEFAULT_REGISTRY_URL,
        "username": "",
        "token": "",  # Docker Hub访问令牌，也可以是密码
    },
    "validation": {
        "threshold": 5.0,  # 允许的最大增长百分比
        "page_size": 50,  # 查找上一版本时获取的标签数量
        "trend_page_size": 400,  # 打印体积趋势时获取的标签数量
        "target_os": "linux",
    },
}


# REST API路径
class RegistryPaths(TypedDict):
    tag: str
    tags: str
    login: str


REGISTRY_PATHS: RegistryPaths = {
    "tag": "{uri}/repositories/{repository}/tags/{tag}",
    "tags": "{uri}/repositories/{repository}/tags",
    "login": "{uri}/users/login",
}

# 环境变量
ENV_REGISTRY: str = "DOCKSIZE_REGISTRY"
ENV_THRESHOLD: str = "DOCKSIZE_THRESHOLD"
ENV_USERNAME: str = "DOCKER_USERNAME"
ENV_PASSWORD: str = "DOCKER_PASSWORD"
ENV_PASSWORD_TEMPLATE: str = "DOCKER_PASSWORD_{}"

# TeamCity统计值的键前缀
STATISTICS_KEY_PREFIX: str = "SIZE-"

# 需要在TeamCity服务消息中转义的字符
TEAMCITY_ESCAPES: List[Tuple[str, str]] = [
    ("|", "||"),
    ("'", "|'"),
    ("\n", "|n"),
    ("\r", "|r"),
    ("[", "|["),
    ("]", "|]"),
]


# 错误消息
class ErrorMessages(TypedDict):
    lookup_failed: str
    token_failed: str
    token_unauthorized: str
    token_missing: str
    username_missing: str
    transport_failed: str
    config_validation: str


ERROR_MESSAGES: ErrorMessages = {
    "lookup_failed": "无法从Docker仓库获取仓库信息: {}",
    "token_failed": "无法获取Docker Hub会话令牌，状态码: {}",
    "token_unauthorized": "无法生成会话令牌 - 提供的凭据不正确\n {}",
    "token_missing": "Docker Hub登录响应中缺少token字段",
    "username_missing": "提供了访问令牌但缺少用户名",
    "transport_failed": "请求Docker仓库失败: {}",
    "config_validation": "配置验证失败: {}",
}


def default_config_copy() -> DefaultConfig:
    """
    返回默认配置的深拷贝

    Returns:
        DefaultConfig: 可以安全修改的默认配置
    """
    return {
        "registry": dict(DEFAULT_CONFIG["registry"]),  # type: ignore[typeddict-item]
        "validation": dict(DEFAULT_CONFIG["validation"]),  # type: ignore[typeddict-item]
    }
