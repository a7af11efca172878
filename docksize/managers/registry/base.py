"""镜像仓库基础类型定义"""

from dataclasses import dataclass, replace
from typing import Any, Iterable, List, Optional, Tuple, TypedDict


class RegistryError(Exception):
    """镜像仓库错误"""
    pass


class AuthError(RegistryError):
    """凭据错误，无法换取会话令牌"""
    pass


class TransportError(RegistryError):
    """请求失败或响应为空"""
    pass


class RegistryLookupError(RegistryError):
    """查询标签信息失败"""

    def __init__(self, message: str, response: Any = None) -> None:
        super().__init__(message)
        # 保留原始响应便于排查
        self.response = response


class ImagePayload(TypedDict, total=False):
    """Docker Hub返回的单个镜像信息"""
    architecture: str
    os: str
    os_version: Optional[str]
    size: int
    digest: str


class TagPayload(TypedDict, total=False):
    """Docker Hub返回的标签信息"""
    name: str
    full_size: int
    tag_last_pushed: Optional[str]
    images: List[ImagePayload]


class TagsPagePayload(TypedDict, total=False):
    """Docker Hub返回的标签列表"""
    count: int
    next: Optional[str]
    results: List[TagPayload]


@dataclass(frozen=True)
class ImageReference:
    """镜像引用，格式为 "仓库名:标签" """

    repository: str
    tag: str = ""

    def __post_init__(self) -> None:
        if not self.repository:
            raise ValueError("镜像仓库名不能为空")

    @classmethod
    def parse(cls, image: str) -> "ImageReference":
        from .utils import parse_image_reference

        return parse_image_reference(image)

    def __str__(self) -> str:
        return f"{self.repository}:{self.tag}" if self.tag else self.repository


@dataclass(frozen=True)
class ImageVariant:
    """同一标签下某个操作系统/架构的镜像"""

    os: str
    architecture: str
    size: int
    os_version: Optional[str] = None
    digest: Optional[str] = None

    def describe(self) -> str:
        parts = [self.os, self.os_version or "", self.architecture]
        return "-".join(parts)


@dataclass(frozen=True)
class RepositoryTagInfo:
    """单个标签的元数据"""

    name: str
    tag_last_pushed: Optional[str]
    variants: Tuple[ImageVariant, ...] = ()
    full_size: int = 0

    def with_variants(self, variants: Iterable[ImageVariant]) -> "RepositoryTagInfo":
        """返回替换了镜像列表的新对象，不修改原对象"""
        return replace(self, variants=tuple(variants))


@dataclass(frozen=True)
class RegistryTagsPage:
    """仓库标签列表的一页"""

    results: Tuple[RepositoryTagInfo, ...] = ()
    count: Optional[int] = None
    next: Optional[str] = None


@dataclass(frozen=True)
class SessionToken:
    """Docker Hub会话令牌"""

    value: str

    def __repr__(self) -> str:
        return "SessionToken(value=***)"


@dataclass(frozen=True)
class RegistryCredentials:
    """用于换取会话令牌的用户名和访问令牌"""

    username: str
    token: str

    def __repr__(self) -> str:
        return f"RegistryCredentials(username={self.username!r}, token=***)"
