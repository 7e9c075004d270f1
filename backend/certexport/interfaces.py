"""
模块接口契约 - 定义各模块的抽象接口

设计原则：
1. 模块间通过接口通信，不直接依赖具体实现
2. 每个接口定义清晰的输入输出类型
3. 便于单元测试和mock替换（如二维码加载器可替换为离线实现）

使用方式：
    from certexport.interfaces import IImageLoader

    class OfflineLoader(IImageLoader):
        async def load(self, url: str) -> Image.Image:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from PIL import Image

    from .models import Document


# ============================================================================
# 渲染与组装接口
# ============================================================================

class IRasterizer(ABC):
    """栅格化器接口 - 画布文档转位图"""

    @abstractmethod
    def render(self, document: Document, scale: float = 1.0) -> Image.Image:
        """
        将文档渲染为位图

        Args:
            document: 画布文档
            scale: 输出倍率（画布像素 × scale）

        Returns:
            渲染结果（PIL图像）

        Raises:
            RenderError: 渲染失败
        """
        ...

    @abstractmethod
    def to_png_bytes(
        self, document: Document, scale: float = 1.0, image_quality: float = 1.0
    ) -> bytes:
        """渲染并编码为PNG"""
        ...


class IPDFAssembler(ABC):
    """PDF组装器接口 - 位图嵌入带出血的页面"""

    @abstractmethod
    def assemble(
        self,
        image: Image.Image,
        page_size_mm: tuple[float, float],
        image_box_mm: tuple[float, float, float, float],
        bleed_mm: float = 0.0,
        crop_marks: list[tuple[float, float, float, float]] | None = None,
    ) -> bytes:
        """
        组装单页PDF

        Args:
            image: 位图
            page_size_mm: 页面总尺寸 (宽, 高)
            image_box_mm: 图像放置区域 (x, y, 宽, 高)，左上角坐标系
            bleed_mm: 出血量
            crop_marks: 裁切线段 (x1, y1, x2, y2)，毫米，左上角坐标系；
                None 时按出血量自行计算，空列表不绘制

        Returns:
            PDF字节流
        """
        ...


# ============================================================================
# 外部资源接口
# ============================================================================

class IImageLoader(ABC):
    """图片加载器接口 - 按URL异步加载图片"""

    @abstractmethod
    async def load(self, url: str) -> Image.Image:
        """
        加载图片

        Raises:
            QRCodeError: 网络或解码失败
        """
        ...


class ICaptureElement(Protocol):
    """可截图元素协议（画布直接栅格化不可用时的兜底路径）"""

    def capture(self, scale: float, background_color: str = "#ffffff") -> Image.Image:
        """按倍率截图"""
        ...


# ============================================================================
# 异常定义
# ============================================================================

class CertExportError(Exception):
    """基础异常"""
    pass


class RenderError(CertExportError):
    """渲染错误"""
    pass


class ExportError(CertExportError):
    """导出错误"""
    pass


class QRCodeError(CertExportError):
    """二维码加载错误"""
    pass


class TemplateError(CertExportError):
    """模板错误"""
    pass


class ExportInProgressError(CertExportError):
    """同一文档已有导出在进行中"""
    pass
