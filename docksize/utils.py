"""工具函数模块"""


def get_percentage_increase(current: int, previous: int) -> float:
    """
    计算当前值相对于之前值的百分比变化

    Args:
        current: 当前镜像大小（字节）
        previous: 之前镜像大小（字节）

    Returns:
        float: 百分比变化，正数表示增长

    Raises:
        ZeroDivisionError: previous为0时抛出
    """
    return (current - previous) / previous * 100


def round_off_decimal(value: float, digits: int = 2) -> float:
    """保留两位小数"""
    return round(value, digits)


def convert_size_to_mb(size_bytes: int) -> float:
    """
    将字节转换为MB

    Args:
        size_bytes: 字节数

    Returns:
        float: 转换后的MB值
    """
    return round(size_bytes / (1024 * 1024), 2)
