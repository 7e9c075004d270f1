"""
占位符模型 - 占位符目录条目与替换数据

对应证书设计器中可引用的 {xxx} 字段
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PlaceholderCategory(str, Enum):
    """占位符分类"""
    RECIPIENT = "recipient"
    EVENT = "event"
    CERTIFICATE = "certificate"
    CUSTOM = "custom"


class PlaceholderDefinition(BaseModel):
    """占位符目录条目（进程启动时定义，不可变）"""
    key: str = Field(..., description="字面占位符，含花括号，如 {recipient_name}")
    label: str
    category: PlaceholderCategory
    description: str = ""
    sample_value: str = Field("", description="预览模式下使用的示例值")

    model_config = ConfigDict(frozen=True)

    @property
    def field_name(self) -> str:
        """去掉花括号后的字段名"""
        return self.key.strip("{}")


class PlaceholderData(BaseModel):
    """占位符替换数据（字段名 → 替换值，全部可选）"""
    recipient_name: str | None = None
    recipient_email: str | None = None
    recipient_organization: str | None = None
    event_name: str | None = None
    event_date: str | None = None
    event_location: str | None = None
    certificate_id: str | None = None
    certificate_type: str | None = None
    issue_date: str | None = None
    issuer_name: str | None = None
    qr_code: str | None = None
    verification_url: str | None = None
    score: str | None = None
    rank: str | None = None
    custom_field_1: str | None = None
    custom_field_2: str | None = None

    # 未知字段保留但不参与替换
    model_config = ConfigDict(extra="allow")

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> PlaceholderData:
        """从普通字典构建（值统一转为字符串）"""
        return cls(**{k: (None if v is None else str(v)) for k, v in mapping.items()})

    def get(self, field_name: str) -> str:
        """获取字段值，缺失或None返回空字符串"""
        value = getattr(self, field_name, None)
        return "" if value is None else str(value)

    def as_dict(self) -> dict[str, str]:
        """导出为非空字段字典"""
        return {k: str(v) for k, v in self.model_dump().items() if v is not None}
