"""
占位符替换引擎 - 用数据记录替换文本中的占位符

规则：
1. 替换规则由目录生成，与目录保持同步
2. 每个占位符的所有出现均被替换；缺失字段替换为空字符串
3. 单遍字面替换：替换值中即使含有其他占位符也不再展开
4. 未登记的占位符原样保留

测试要点：
- test_replace_all_occurrences: 同一占位符多次出现
- test_missing_field_empty: 缺失字段替换为空
- test_unknown_token_passthrough: 未知占位符保留
- test_single_pass: 替换值不递归展开
"""

from __future__ import annotations

import re
from collections.abc import Mapping

from ..models import PlaceholderData
from .catalog import PLACEHOLDER_CATALOG

# 占位符 → 字段名
REPLACE_RULES: dict[str, str] = {p.key: p.field_name for p in PLACEHOLDER_CATALOG}

_PATTERN = re.compile(
    "|".join(re.escape(key) for key in sorted(REPLACE_RULES, key=len, reverse=True))
)


def _lookup(data: PlaceholderData | Mapping[str, str | None] | None, field_name: str) -> str:
    if data is None:
        return ""
    if isinstance(data, PlaceholderData):
        return data.get(field_name)
    value = data.get(field_name)
    return "" if value is None else str(value)


def replace_placeholders(
    text: str,
    data: PlaceholderData | Mapping[str, str | None] | None,
) -> str:
    """替换文本中的全部已登记占位符"""
    if not text:
        return text
    return _PATTERN.sub(lambda m: _lookup(data, REPLACE_RULES[m.group(0)]), text)
