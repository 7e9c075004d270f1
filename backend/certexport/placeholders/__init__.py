"""
占位符模块 - 目录与替换引擎

子模块：
- catalog: 占位符目录、分类分组、识别、示例数据
- substitution: 文本替换
"""

from .catalog import (
    PLACEHOLDER_CATALOG,
    contains_placeholders,
    extract_placeholders,
    find_unknown_tokens,
    get_placeholder,
    get_placeholders_by_category,
    get_sample_placeholder_data,
)
from .substitution import REPLACE_RULES, replace_placeholders

__all__ = [
    "PLACEHOLDER_CATALOG",
    "REPLACE_RULES",
    "get_placeholder",
    "get_placeholders_by_category",
    "extract_placeholders",
    "contains_placeholders",
    "find_unknown_tokens",
    "get_sample_placeholder_data",
    "replace_placeholders",
]
