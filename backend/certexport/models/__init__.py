"""
数据模型层 - 定义系统核心数据结构

所有模块通过这些模型交互，实现解耦：
- PlaceholderDefinition/PlaceholderData: 占位符目录条目与替换数据
- Document: 画布文档（文本/图片/图形节点的标签联合）
- CertificateExportOptions: 单次导出的纸张/方向/质量/出血选项
"""

from .document import (
    Document,
    ImageNode,
    Node,
    ShapeNode,
    TextNode,
)
from .export_options import (
    CertificateExportOptions,
    ExportFileType,
    ExportQuality,
    Orientation,
    PaperFormat,
    PaperSize,
    QualitySettings,
)
from .placeholder import PlaceholderCategory, PlaceholderData, PlaceholderDefinition

__all__ = [
    "PlaceholderCategory",
    "PlaceholderDefinition",
    "PlaceholderData",
    "Document",
    "Node",
    "TextNode",
    "ImageNode",
    "ShapeNode",
    "CertificateExportOptions",
    "ExportFileType",
    "ExportQuality",
    "Orientation",
    "PaperFormat",
    "PaperSize",
    "QualitySettings",
]
