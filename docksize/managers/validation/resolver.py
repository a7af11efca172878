"""上一版本镜像的查找"""

from typing import Optional

from loguru import logger

from ...constants import DEFAULT_CONFIG
from ...time_utils import parse_timestamp
from ..registry.base import ImageReference, RepositoryTagInfo
from ..registry.client import RegistryClient


def _tag_suffix(tag: str) -> Optional[str]:
    # 去掉标签中的版本号，例如 2022.04.2-windowsservercore -> windowsservercore
    parts = tag.split("-", 1)
    if len(parts) < 2:
        return None
    return parts[1]


def find_previous_by_registry(
    client: RegistryClient,
    current: ImageReference,
    target_os: str = DEFAULT_CONFIG["validation"]["target_os"],
    os_version: Optional[str] = None,
    page_size: int = DEFAULT_CONFIG["validation"]["page_size"],
) -> Optional[RepositoryTagInfo]:
    """
    从仓库中查找上一次推送的镜像

    同一标签可能对应多个操作系统的镜像，大小各不相同，因此需要按目标系统过滤。

    Args:
        client: 仓库客户端
        current: 当前镜像
        target_os: 目标操作系统
        os_version: 操作系统版本，主要用于Windows镜像
        page_size: 获取的标签数量

    Returns:
        Optional[RepositoryTagInfo]: 过滤后的上一版本标签信息，未找到时返回None
    """
    registry_info = client.list_tags(current.repository, page_size)
    suffix = _tag_suffix(current.tag)

    candidates = []
    for result in registry_info.results:
        if result.name == current.tag:
            continue
        if suffix is None:
            logger.info(f"镜像标签不符合预期格式，将被过滤: {result.name}")
            continue
        if suffix in result.name:
            candidates.append(result)

    if not candidates:
        logger.info(f"未在仓库中找到 {current} 的上一版本")
        return None

    previous = max(candidates, key=lambda result: parse_timestamp(result.tag_last_pushed))

    # 按目标操作系统过滤
    variants = [variant for variant in previous.variants if variant.os == target_os]
    if variants and os_version:
        matching_version = [variant for variant in variants if variant.os_version == os_version]
        if matching_version:
            variants = matching_version
        else:
            # 系统版本不一致时难以排查，记录下来
            logger.warning(
                f"{current} - 找到上一版本 {previous.name}，但系统版本不同 - "
                f"{os_version} 与 {variants[0].os_version}"
            )

    return previous.with_variants(variants)


def predict_previous_tag(current: ImageReference) -> Optional[ImageReference]:
    """
    根据当前标签推算上一版本的标签，假设标签格式没有变化

    警告：依赖于标签格式 "<年>.<月>.<构建号>-<系统>"，例如 2022.04.2-windowsservercore。
    构建号减一后不补零。

    Args:
        current: 当前镜像

    Returns:
        Optional[ImageReference]: 推算出的上一版本，格式不符时返回None
    """
    tag_elements = current.tag.split(".")
    if len(tag_elements) < 2:
        logger.warning(f"无法自动推算上一版本标签 - 不符合标签格式: {current}")
        return None

    # 支持两种格式: 2022.04-OS 和 2022.04.2-OS，只有后者可以推算
    if len(tag_elements) < 3:
        logger.warning(f"只支持推算小版本的上一版本: {current}")
        return None

    build_number = tag_elements[2].split("-")[0]
    try:
        previous_build_number = int(build_number) - 1
    except ValueError:
        logger.warning(f"无法自动推算上一版本标签 - 构建号不是数字: {current}")
        return None

    original_part = f"{tag_elements[0]}.{tag_elements[1]}.{build_number}-"
    previous_part = f"{tag_elements[0]}.{tag_elements[1]}.{previous_build_number}-"

    # 例如 "2022.04.2-" -> "2022.04.1-"
    return ImageReference(current.repository, current.tag.replace(original_part, previous_part, 1))
