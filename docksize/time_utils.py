"""时间工具函数模块"""

import re
from datetime import datetime, timezone
from typing import Optional

# 小数秒部分，Docker Hub返回的位数不固定
_FRACTION_PATTERN = re.compile(r"\.(\d+)")

# 没有推送时间的标签排在最前面
MIN_TIMESTAMP = datetime.min.replace(tzinfo=timezone.utc)


def parse_timestamp(value: Optional[str]) -> datetime:
    """
    解析ISO-8601格式的时间戳，例如 2022-04-12T10:11:12.123456Z

    Args:
        value: 时间戳字符串

    Returns:
        datetime: 带时区的时间，缺失或无法解析时返回最小时间
    """
    if not value:
        return MIN_TIMESTAMP

    normalized = value.strip().replace("Z", "+00:00")
    # fromisoformat只接受3位或6位小数
    normalized = _FRACTION_PATTERN.sub(
        lambda m: "." + m.group(1)[:6].ljust(6, "0"), normalized, count=1
    )
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return MIN_TIMESTAMP

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
