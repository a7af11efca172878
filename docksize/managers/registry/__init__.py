"""Docker镜像仓库访问相关功能模块

该子包包含仓库REST API客户端、数据类型和解析工具。
"""

from .base import (
    AuthError,
    ImageReference,
    ImageVariant,
    RegistryCredentials,
    RegistryError,
    RegistryLookupError,
    RegistryTagsPage,
    RepositoryTagInfo,
    SessionToken,
    TransportError,
)
from .client import RegistryClient
from .utils import decode_tag, decode_tags_page, parse_image_reference

__all__ = [
    "AuthError",
    "ImageReference",
    "ImageVariant",
    "RegistryCredentials",
    "RegistryError",
    "RegistryLookupError",
    "RegistryTagsPage",
    "RepositoryTagInfo",
    "SessionToken",
    "TransportError",
    "RegistryClient",
    "decode_tag",
    "decode_tags_page",
    "parse_image_reference",
]
