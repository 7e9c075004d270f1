"""
占位符目录 - 证书设计器可引用的全部占位符

职责：
1. 定义固定有序的占位符目录（唯一真源）
2. 按分类分组、文本中占位符识别
3. 生成预览用示例数据

测试要点：
- test_catalog_partition: 分类分组覆盖全部目录且互不重叠
- test_extract_substring_match: 子串包含即命中
- test_sample_data_complete: 示例数据覆盖全部字段
"""

from __future__ import annotations

import re

from ..models import PlaceholderCategory, PlaceholderData, PlaceholderDefinition

_R = PlaceholderCategory.RECIPIENT
_E = PlaceholderCategory.EVENT
_C = PlaceholderCategory.CERTIFICATE
_X = PlaceholderCategory.CUSTOM

PLACEHOLDER_CATALOG: tuple[PlaceholderDefinition, ...] = (
    # 获奖人
    PlaceholderDefinition(
        key="{recipient_name}", label="Recipient Name", category=_R,
        description="Full name of the certificate recipient", sample_value="John Doe",
    ),
    PlaceholderDefinition(
        key="{recipient_email}", label="Recipient Email", category=_R,
        description="Email address of the recipient", sample_value="john.doe@example.com",
    ),
    PlaceholderDefinition(
        key="{recipient_organization}", label="Organization", category=_R,
        description="Recipient's organization or affiliation", sample_value="Acme Corporation",
    ),
    # 活动
    PlaceholderDefinition(
        key="{event_name}", label="Event Name", category=_E,
        description="Name of the event", sample_value="Tech Innovation Summit 2024",
    ),
    PlaceholderDefinition(
        key="{event_date}", label="Event Date", category=_E,
        description="Date or date range of the event", sample_value="January 15-17, 2024",
    ),
    PlaceholderDefinition(
        key="{event_location}", label="Event Location", category=_E,
        description="Venue or city of the event", sample_value="San Francisco, CA",
    ),
    # 证书
    PlaceholderDefinition(
        key="{certificate_id}", label="Certificate ID", category=_C,
        description="Unique certificate identifier", sample_value="CERT-2024-001234",
    ),
    PlaceholderDefinition(
        key="{certificate_type}", label="Certificate Type", category=_C,
        description="Type of certificate (Participation, Merit, ...)", sample_value="Participation",
    ),
    PlaceholderDefinition(
        key="{issue_date}", label="Issue Date", category=_C,
        description="Date the certificate was issued", sample_value="January 20, 2024",
    ),
    PlaceholderDefinition(
        key="{issuer_name}", label="Issuer Name", category=_C,
        description="Name of the person or body issuing the certificate",
        sample_value="Dr. Jane Smith",
    ),
    PlaceholderDefinition(
        key="{qr_code}", label="QR Code", category=_C,
        description="Verification QR code", sample_value="[QR Code]",
    ),
    PlaceholderDefinition(
        key="{verification_url}", label="Verification URL", category=_C,
        description="Public URL for verifying the certificate",
        sample_value="https://example.com/verify/CERT-2024-001234",
    ),
    # 自定义
    PlaceholderDefinition(
        key="{score}", label="Score", category=_X,
        description="Score achieved (judging)", sample_value="95",
    ),
    PlaceholderDefinition(
        key="{rank}", label="Rank", category=_X,
        description="Rank or placement", sample_value="1st Place",
    ),
    PlaceholderDefinition(
        key="{custom_field_1}", label="Custom Field 1", category=_X,
        description="Free-form custom field", sample_value="Custom Value 1",
    ),
    PlaceholderDefinition(
        key="{custom_field_2}", label="Custom Field 2", category=_X,
        description="Free-form custom field", sample_value="Custom Value 2",
    ),
)

_BY_KEY: dict[str, PlaceholderDefinition] = {p.key: p for p in PLACEHOLDER_CATALOG}

# 花括号形式的任意标记（用于找出未登记的占位符）
_TOKEN_RE = re.compile(r"\{[A-Za-z0-9_]+\}")


def get_placeholder(key: str) -> PlaceholderDefinition | None:
    """按字面占位符查找目录条目"""
    return _BY_KEY.get(key)


def get_placeholders_by_category() -> dict[PlaceholderCategory, list[PlaceholderDefinition]]:
    """按分类分组（组内保持目录顺序）"""
    grouped: dict[PlaceholderCategory, list[PlaceholderDefinition]] = {
        category: [] for category in PlaceholderCategory
    }
    for placeholder in PLACEHOLDER_CATALOG:
        grouped[placeholder.category].append(placeholder)
    return grouped


def extract_placeholders(text: str) -> list[PlaceholderDefinition]:
    """返回文本中出现的目录条目（子串包含判定）"""
    if not text:
        return []
    return [p for p in PLACEHOLDER_CATALOG if p.key in text]


def contains_placeholders(text: str) -> bool:
    """文本是否包含任一目录占位符"""
    return len(extract_placeholders(text)) > 0


def find_unknown_tokens(text: str) -> list[str]:
    """找出文本中未登记的花括号标记（去重，保持出现顺序）"""
    unknown: list[str] = []
    for token in _TOKEN_RE.findall(text or ""):
        if token not in _BY_KEY and token not in unknown:
            unknown.append(token)
    return unknown


def get_sample_placeholder_data() -> PlaceholderData:
    """生成预览用示例数据"""
    return PlaceholderData(**{p.field_name: p.sample_value for p in PLACEHOLDER_CATALOG})
