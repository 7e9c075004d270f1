"""
模板预设加载器 - 读取 templates/presets.yaml

职责：
- 解析YAML并提供类型安全访问
- 按id/分类查询证书模板预设
- 缓存加载结果（避免重复解析）

使用方式：
    registry = TemplateLoader.load()
    preset = registry.get_template_by_id("classic")
    document = preset.to_document()
"""

from __future__ import annotations

import copy
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from ..interfaces import TemplateError
from ..models import Document

PRESETS_PATH = Path(__file__).resolve().parent.parent / "templates" / "presets.yaml"

TemplateCategory = Literal["formal", "modern", "minimal", "creative"]


class TemplateDimensions(BaseModel):
    """画布尺寸（像素）"""
    width: float
    height: float


class TemplatePreset(BaseModel):
    """证书模板预设"""
    id: str
    name: str
    description: str = ""
    thumbnail: str = ""
    category: TemplateCategory
    dimensions: TemplateDimensions
    canvas: dict[str, Any] = Field(default_factory=dict)

    def to_document(self) -> Document:
        """生成新的画布文档（每次调用分配新的节点id）"""
        try:
            return Document.from_canvas_json(
                copy.deepcopy(self.canvas),
                width=self.dimensions.width,
                height=self.dimensions.height,
            )
        except ValidationError as e:
            raise TemplateError(f"模板画布无效: {self.id}") from e


class TemplateRegistry(BaseModel):
    """模板预设集合"""
    schema_version: str = "1.0"
    templates: list[TemplatePreset] = Field(default_factory=list)

    def get_template_by_id(self, template_id: str) -> TemplatePreset | None:
        """按id获取模板"""
        for preset in self.templates:
            if preset.id == template_id:
                return preset
        return None

    def get_templates_by_category(self, category: str) -> list[TemplatePreset]:
        """按分类获取模板"""
        return [t for t in self.templates if t.category == category]

    def ids(self) -> list[str]:
        return [t.id for t in self.templates]


class TemplateLoader:
    """模板加载器（单例模式+缓存）"""

    _instance: TemplateLoader | None = None

    def __new__(cls) -> TemplateLoader:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @classmethod
    @lru_cache(maxsize=4)
    def load(cls, presets_path: str | Path = PRESETS_PATH) -> TemplateRegistry:
        """加载并缓存模板预设"""
        path = Path(presets_path)
        if not path.exists():
            raise FileNotFoundError(f"模板预设文件不存在: {path}")

        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        try:
            return TemplateRegistry(**data)
        except ValidationError as e:
            raise TemplateError(f"模板预设解析失败: {path}") from e

    @classmethod
    def reload(cls, presets_path: str | Path = PRESETS_PATH) -> TemplateRegistry:
        """强制重新加载（清除缓存）"""
        cls.load.cache_clear()
        return cls.load(presets_path)


# 便捷函数
def load_templates(presets_path: str | Path | None = None) -> TemplateRegistry:
    """加载模板预设（未指定路径时优先使用配置中的路径）"""
    if presets_path is None:
        from .runtime_config import get_config

        presets_path = get_config().storage.templates_path or PRESETS_PATH
    return TemplateLoader.load(presets_path)
