"""镜像仓库工具函数"""

from typing import Any, Dict, Optional

from .base import (
    ImagePayload,
    ImageReference,
    ImageVariant,
    RegistryTagsPage,
    RepositoryTagInfo,
    TagPayload,
    TagsPagePayload,
)


def parse_image_reference(image_name: str) -> ImageReference:
    """
    解析镜像名称，分离仓库名和标签

    以最后一个冒号分割，没有冒号时标签为空字符串，表示查询全部标签。
    不校验字符集，非法名称会在查询仓库时报错。

    Args:
        image_name: 镜像名称，格式为 "仓库名:标签" 或 "仓库名"

    Returns:
        ImageReference: 镜像引用
    """
    if ":" in image_name:
        repository, tag = image_name.rsplit(":", 1)
    else:
        repository = image_name
        tag = ""
    return ImageReference(repository, tag)


def _as_str(value: Any) -> Optional[str]:
    # 不同版本的接口可能返回数字或字符串
    if value is None:
        return None
    return str(value)


def _as_int(value: Any) -> int:
    if value is None or value == "":
        return 0
    try:
        if isinstance(value, str):
            return int(float(value))
        return int(value)
    except (TypeError, ValueError):
        # 无法识别的大小按0处理
        return 0


def decode_image(payload: ImagePayload) -> ImageVariant:
    """
    解析单个镜像信息，忽略未知字段

    Args:
        payload: 接口返回的镜像字典

    Returns:
        ImageVariant: 镜像信息
    """
    return ImageVariant(
        os=_as_str(payload.get("os")) or "",
        architecture=_as_str(payload.get("architecture")) or "",
        size=_as_int(payload.get("size")),
        os_version=_as_str(payload.get("os_version")),
        digest=_as_str(payload.get("digest")),
    )


def decode_tag(payload: TagPayload) -> RepositoryTagInfo:
    """
    解析标签信息，忽略未知字段

    Args:
        payload: 接口返回的标签字典

    Returns:
        RepositoryTagInfo: 标签信息
    """
    images = payload.get("images") or []
    return RepositoryTagInfo(
        name=_as_str(payload.get("name")) or "",
        tag_last_pushed=_as_str(payload.get("tag_last_pushed")),
        variants=tuple(decode_image(image) for image in images if isinstance(image, dict)),
        full_size=_as_int(payload.get("full_size")),
    )


def decode_tags_page(payload: TagsPagePayload) -> RegistryTagsPage:
    """
    解析标签列表

    Args:
        payload: 接口返回的标签列表字典

    Returns:
        RegistryTagsPage: 标签列表
    """
    results = payload.get("results") or []
    count = payload.get("count")
    return RegistryTagsPage(
        results=tuple(decode_tag(result) for result in results if isinstance(result, dict)),
        count=_as_int(count) if count is not None else None,
        next=_as_str(payload.get("next")),
    )


def bearer_headers(token: Optional[str]) -> Dict[str, str]:
    """生成请求头，有令牌时附带Authorization"""
    headers = {"Accept": "application/json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers
