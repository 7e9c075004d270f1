"""
证书导出器 - 画布文档导出为PDF/PNG

职责：
1. 画布直接栅格化 → 带出血/裁切线的PDF
2. 画布直接栅格化 → PNG
3. 兜底路径：元素截图 → PDF（不支持出血/裁切线）

测试要点：
- test_export_pdf_page_size_with_bleed: A4横向+3mm出血 → 303×216mm
- test_export_png_scale: 输出像素 = 画布 × 质量倍率
- test_export_element_no_bleed: 兜底路径忽略出血
"""

from __future__ import annotations

import logging
from pathlib import Path

from PIL import Image

from ..config import get_config
from ..interfaces import ICaptureElement, IPDFAssembler, IRasterizer
from ..models import CertificateExportOptions, Document, ExportQuality
from .pdf_engine import PDFAssembler
from .rasterizer import CanvasRasterizer, parse_color
from .tables import get_content_size_mm, get_page_geometry, get_quality_settings

logger = logging.getLogger(__name__)


def export_canvas_to_pdf(
    document: Document,
    options: CertificateExportOptions,
    rasterizer: IRasterizer | None = None,
    assembler: IPDFAssembler | None = None,
) -> bytes:
    """画布导出PDF"""
    rasterizer = rasterizer or CanvasRasterizer()
    assembler = assembler or PDFAssembler()

    # 1. 质量与纸张
    settings = get_quality_settings(options.quality)
    bleed = options.effective_bleed_mm
    geometry = get_page_geometry(
        options.format,
        options.orientation,
        bleed,
        get_config().export.crop_mark_length_mm,
    )

    # 2. 栅格化
    image = rasterizer.render(document, settings.scale)
    logger.info(
        f"画布栅格化完成: {image.width}x{image.height}px "
        f"quality={options.quality.value} dpi={settings.dpi}"
    )

    # 3. 组装页面（图像位于出血边距内，裁切线取自页面几何）
    return assembler.assemble(
        image,
        geometry.page_size,
        geometry.image_box,
        geometry.bleed,
        crop_marks=geometry.crop_marks,
    )


def export_canvas_to_png(
    document: Document,
    quality: ExportQuality | str = ExportQuality.HIGH,
    rasterizer: IRasterizer | None = None,
) -> bytes:
    """画布导出PNG"""
    rasterizer = rasterizer or CanvasRasterizer()
    settings = get_quality_settings(quality)
    return rasterizer.to_png_bytes(document, settings.scale, settings.image_quality)


def export_element_to_pdf(
    element: ICaptureElement,
    options: CertificateExportOptions,
    assembler: IPDFAssembler | None = None,
) -> bytes:
    """元素截图导出PDF（兜底路径，无出血/裁切线）"""
    assembler = assembler or PDFAssembler()
    if options.include_bleed:
        logger.warning("元素截图导出不支持出血与裁切线，已忽略")

    settings = get_quality_settings(options.quality)
    content = get_content_size_mm(options.format, options.orientation)
    image = element.capture(settings.scale, background_color="#ffffff")
    return assembler.assemble(
        image,
        (content.width, content.height),
        (0.0, 0.0, content.width, content.height),
        bleed_mm=0.0,
        crop_marks=[],
    )


class ImageFileElement(ICaptureElement):
    """预渲染图片元素（屏幕截图/已渲染画面）"""

    def __init__(self, source: str | Path | Image.Image):
        self.source = source

    def capture(self, scale: float, background_color: str = "#ffffff") -> Image.Image:
        """按倍率截图，透明区域以背景色铺底"""
        image = self.source if isinstance(self.source, Image.Image) else Image.open(self.source)
        image = image.convert("RGBA")
        size = (max(1, round(image.width * scale)), max(1, round(image.height * scale)))
        if size != image.size:
            image = image.resize(size, Image.Resampling.LANCZOS)

        background = parse_color(background_color) or (255, 255, 255, 255)
        flattened = Image.new("RGBA", size, background)
        flattened.alpha_composite(image)
        return flattened.convert("RGB")
