"""镜像体积校验"""

from dataclasses import dataclass
from typing import List, Optional

from loguru import logger

from ...constants import DEFAULT_CONFIG
from ...formatters.report import report_image_size, report_variant_comparison
from ...utils import get_percentage_increase
from ..registry.base import ImageReference, ImageVariant
from ..registry.client import RegistryClient
from .resolver import find_previous_by_registry


@dataclass(frozen=True)
class ValidationOutcome:
    """单个镜像的校验结果，无法比较时previous和percentage_change为None"""

    variant: ImageVariant
    previous: Optional[ImageVariant] = None
    previous_tag: Optional[str] = None
    percentage_change: Optional[float] = None
    passed: bool = True


def is_size_increase_allowed(percentage_change: float, threshold: float) -> bool:
    """增长百分比严格大于阈值时校验失败"""
    return not percentage_change > threshold


def validate_variants(
    client: RegistryClient,
    current: ImageReference,
    threshold: float,
    page_size: int = DEFAULT_CONFIG["validation"]["page_size"],
) -> List[ValidationOutcome]:
    """
    校验镜像体积

    1. 从仓库获取镜像信息，同一标签可能对应多个镜像（系统、系统版本、架构），全部获取。
    2. 以TeamCity服务消息输出每个镜像的大小。
    3. 根据推送时间从仓库查找上一版本镜像。
    4. 逐个比较镜像大小。

    Args:
        client: 仓库客户端
        current: 当前镜像
        threshold: 允许的最大增长百分比
        page_size: 查找上一版本时获取的标签数量

    Returns:
        List[ValidationOutcome]: 每个镜像的校验结果
    """
    image_name = str(current)
    outcomes: List[ValidationOutcome] = []

    tag_info = client.get_tag(current)
    for variant in tag_info.variants:
        report_image_size(image_name, variant)

        previous_info = find_previous_by_registry(
            client, current, variant.os, variant.os_version, page_size=page_size
        )
        if previous_info is None or len(previous_info.variants) != 1:
            logger.warning(f"无法确定 {image_name}-{variant.os} 的上一版本镜像")
            outcomes.append(ValidationOutcome(variant))
            continue

        # 过滤条件足够严格，只会剩下一个镜像
        previous = previous_info.variants[0]
        if previous.size <= 0:
            logger.warning(f"上一版本镜像 {previous_info.name} 大小为0，无法比较: {image_name}-{variant.os}")
            outcomes.append(ValidationOutcome(variant, previous, previous_info.name))
            continue

        percentage_change = get_percentage_increase(variant.size, previous.size)
        report_variant_comparison(
            image_name, variant, previous, previous_info.name, percentage_change, threshold
        )

        passed = is_size_increase_allowed(percentage_change, threshold)
        if passed:
            logger.success(f"校验通过: {image_name}-{variant.os}")
        outcomes.append(
            ValidationOutcome(variant, previous, previous_info.name, percentage_change, passed)
        )

    return outcomes


def failed_variants(outcomes: List[ValidationOutcome]) -> List[ImageVariant]:
    """返回未通过校验的镜像"""
    return [outcome.variant for outcome in outcomes if not outcome.passed]
