"""校验结果输出模块"""

from typing import Iterable, List, Union

from loguru import logger

from ..constants import STATISTICS_KEY_PREFIX, TEAMCITY_ESCAPES
from ..managers.registry.base import ImageVariant, RepositoryTagInfo
from ..time_utils import parse_timestamp
from ..utils import convert_size_to_mb, round_off_decimal


def normalize_image_id(image: str) -> str:
    """返回用于TeamCity统计的镜像ID，去掉仓库地址和版本号

    例如 "some-registry.example.io/teamcity-agent:2022.10-windowsservercore-1809"
    -> "teamcity-agent-windowsservercore-1809"，不同版本的同一镜像可以互相比较。

    Args:
        image: 镜像全名

    Returns:
        str: 统计ID
    """
    # 1. 去掉仓库地址
    name_and_tag = image.rsplit("/", 1)[-1]
    if ":" not in name_and_tag:
        return name_and_tag

    # 2. 去掉标签中的版本号
    name, tag = name_and_tag.split(":", 1)
    tag_elements = tag.split("-", 1)
    if len(tag_elements) < 2:
        return f"{name}-{tag}"
    return f"{name}-{tag_elements[1]}"


def escape_service_message_value(value: str) -> str:
    """按TeamCity服务消息规则转义"""
    for char, replacement in TEAMCITY_ESCAPES:
        value = value.replace(char, replacement)
    return value


def format_statistic(key: str, value: Union[int, float]) -> str:
    """生成TeamCity统计值服务消息"""
    return (
        f"##teamcity[buildStatisticValue key='{escape_service_message_value(key)}' "
        f"value='{escape_service_message_value(str(value))}']"
    )


def report_statistic(key: str, value: Union[int, float]) -> None:
    """输出TeamCity统计值到标准输出"""
    print(format_statistic(key, value), flush=True)


def report_image_size(image: str, variant: ImageVariant) -> None:
    """输出镜像大小统计值"""
    report_statistic(f"{STATISTICS_KEY_PREFIX}{normalize_image_id(image)}", variant.size)


def report_variant_comparison(
    image: str,
    variant: ImageVariant,
    previous: ImageVariant,
    previous_tag: str,
    percentage_change: float,
    threshold: float,
) -> None:
    """
    输出单个镜像与上一版本的比较结果

    Args:
        image: 当前镜像全名
        variant: 当前镜像
        previous: 上一版本镜像
        previous_tag: 上一版本的标签
        percentage_change: 百分比变化
        threshold: 允许的最大增长百分比
    """
    logger.info(
        f"{image}-{variant.describe()}: "
        f"\n\t - 当前大小: {variant.size} ({convert_size_to_mb(variant.size)} MB, {image})"
        f"\n\t - 上一版本大小: {previous.size} ({convert_size_to_mb(previous.size)} MB, {previous_tag})"
        f"\n\t - 百分比变化: {round_off_decimal(percentage_change)}% (最大允许 {threshold}%)"
    )


def report_failed_variants(image: str, failed: List[ImageVariant], threshold: float) -> None:
    """汇总输出未通过校验的镜像"""
    if not failed:
        logger.success(f"{image} 的所有镜像均通过体积校验")
        return

    logger.error(f"{image} 有 {len(failed)} 个镜像体积增长超过 {threshold}%:")
    for variant in failed:
        logger.error(f"  - {variant.describe()} ({variant.size} 字节)")


def format_trend_line(repository: str, tag_info: RepositoryTagInfo) -> str:
    """生成趋势报告中的一行: 仓库,标签,推送时间,大小"""
    return f"{repository},{tag_info.name},{tag_info.tag_last_pushed or ''},{tag_info.full_size}"


def sort_by_push_time(results: Iterable[RepositoryTagInfo]) -> List[RepositoryTagInfo]:
    """按推送时间升序排列"""
    return sorted(results, key=lambda result: parse_timestamp(result.tag_last_pushed))


def print_trend(repository: str, results: Iterable[RepositoryTagInfo]) -> None:
    """按推送时间输出镜像体积趋势"""
    for tag_info in sort_by_push_time(results):
        print(format_trend_line(repository, tag_info))
