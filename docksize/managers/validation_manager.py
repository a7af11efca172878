"""镜像体积校验管理器 - 门面模式实现"""

from typing import List, Optional, Union

from loguru import logger

from ..constants import DEFAULT_CONFIG, DEFAULT_REGISTRY_URL
from ..formatters.report import print_trend, report_failed_variants
from .registry.base import ImageReference, ImageVariant, RegistryCredentials
from .registry.client import RegistryClient
from .registry.utils import parse_image_reference
from .validation.resolver import find_previous_by_registry, predict_previous_tag
from .validation.size import ValidationOutcome, failed_variants, validate_variants


class ValidationManager:
    """镜像体积校验管理器类，持有仓库客户端"""

    def __init__(
        self,
        registry_uri: str = DEFAULT_REGISTRY_URL,
        credentials: Optional[RegistryCredentials] = None,
        client: Optional[RegistryClient] = None,
        page_size: int = DEFAULT_CONFIG["validation"]["page_size"],
        trend_page_size: int = DEFAULT_CONFIG["validation"]["trend_page_size"],
    ) -> None:
        """
        初始化校验管理器

        Args:
            registry_uri: 仓库REST API地址
            credentials: 仓库凭据，可选
            client: 仓库客户端，默认根据registry_uri和credentials创建
            page_size: 查找上一版本时获取的标签数量
            trend_page_size: 打印体积趋势时获取的标签数量
        """
        self.client = client or RegistryClient(registry_uri, credentials)
        self.page_size = page_size
        self.trend_page_size = trend_page_size

    def close(self) -> None:
        """释放仓库客户端持有的连接"""
        self.client.close()

    def __enter__(self) -> "ValidationManager":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def validate(self, image_fqdn: str, threshold: float) -> List[ValidationOutcome]:
        """
        校验镜像体积并返回每个镜像的结果

        Args:
            image_fqdn: 镜像全名
            threshold: 允许的最大增长百分比

        Returns:
            List[ValidationOutcome]: 每个镜像的校验结果

        Raises:
            RegistryError: 访问仓库失败时抛出
        """
        current = parse_image_reference(image_fqdn)
        logger.info(f"开始校验镜像体积: {current} (最大允许增长 {threshold}%)")
        return validate_variants(self.client, current, threshold, page_size=self.page_size)

    def validate_image_size(self, image_fqdn: str, threshold: float) -> List[ImageVariant]:
        """
        校验镜像体积

        Args:
            image_fqdn: 镜像全名
            threshold: 允许的最大增长百分比

        Returns:
            List[ImageVariant]: 未通过校验的镜像
        """
        failed = failed_variants(self.validate(image_fqdn, threshold))
        report_failed_variants(image_fqdn, failed, threshold)
        return failed

    def print_image_size_trend(self, image_fqdn: str) -> None:
        """
        获取仓库中的镜像，按推送时间排序并输出体积趋势

        Args:
            image_fqdn: 镜像全名
        """
        image = parse_image_reference(image_fqdn)
        page = self.client.list_tags(image.repository, self.trend_page_size)
        if not page.results:
            logger.warning(f"未找到 {image_fqdn} 的镜像")
            return
        print_trend(image.repository, page.results)

    def find_previous_image(
        self, image_fqdn: str, target_os: str = DEFAULT_CONFIG["validation"]["target_os"],
        os_version: Optional[str] = None,
    ) -> Optional[ImageReference]:
        """
        从仓库中查找上一版本镜像

        Args:
            image_fqdn: 镜像全名
            target_os: 目标操作系统
            os_version: 操作系统版本

        Returns:
            Optional[ImageReference]: 上一版本镜像，未找到时返回None
        """
        current = parse_image_reference(image_fqdn)
        previous = find_previous_by_registry(
            self.client, current, target_os, os_version, page_size=self.page_size
        )
        if previous is None or not previous.variants:
            return None
        return ImageReference(current.repository, previous.name)


def validate_image_size(
    original_image_fqdn: str,
    registry_uri: str,
    threshold: float,
    credentials: Optional[RegistryCredentials] = None,
) -> List[ImageVariant]:
    """
    校验镜像体积，返回增长超过阈值的镜像

    Args:
        original_image_fqdn: 镜像全名
        registry_uri: 仓库REST API地址
        threshold: 允许的最大增长百分比
        credentials: 仓库凭据，可选

    Returns:
        List[ImageVariant]: 未通过校验的镜像
    """
    with ValidationManager(registry_uri, credentials) as manager:
        return manager.validate_image_size(original_image_fqdn, threshold)


def print_image_size_trend(
    image_fqdn: str,
    registry_uri: str,
    credentials: Optional[RegistryCredentials] = None,
) -> None:
    """按推送时间输出仓库中镜像的体积趋势"""
    with ValidationManager(registry_uri, credentials) as manager:
        manager.print_image_size_trend(image_fqdn)


def get_prev_docker_image_id(image: Union[str, ImageReference]) -> Optional[ImageReference]:
    """根据标签格式推算上一版本镜像，格式为 "<年>.<月>.<构建号>-<系统>" """
    if isinstance(image, str):
        image = parse_image_reference(image)
    return predict_previous_tag(image)
