"""
导出参数表与页面几何

职责：
1. 质量档位表（倍率/编码质量/DPI）
2. 纸张尺寸表（毫米，横向基准）
3. 页面几何：内容尺寸、出血后总尺寸、图像放置区域、裁切线
4. 毫米→像素换算

测试要点：
- test_pixel_dimensions_a4_300dpi: A4横向@300DPI = 3508x2480
- test_page_geometry_bleed: 3mm出血 → 303x216，图像放置于(3,3)
- test_crop_marks: 四角L形裁切线
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType

from ..models import ExportQuality, Orientation, PaperFormat, PaperSize, QualitySettings

logger = logging.getLogger(__name__)

MM_PER_INCH = 25.4
DEFAULT_CROP_MARK_MM = 5.0

QUALITY_SETTINGS: MappingProxyType[ExportQuality, QualitySettings] = MappingProxyType({
    ExportQuality.STANDARD: QualitySettings(scale=1, image_quality=0.8, dpi=72),
    ExportQuality.HIGH: QualitySettings(scale=2, image_quality=0.92, dpi=150),
    ExportQuality.PRINT: QualitySettings(scale=3, image_quality=1.0, dpi=200),
    ExportQuality.PRINT_300DPI: QualitySettings(scale=4.17, image_quality=1.0, dpi=300),
})

PAPER_SIZES_MM: MappingProxyType[PaperFormat, PaperSize] = MappingProxyType({
    PaperFormat.A4: PaperSize(width=297, height=210),
    PaperFormat.LETTER: PaperSize(width=279.4, height=215.9),
    PaperFormat.A3: PaperSize(width=420, height=297),
    PaperFormat.A5: PaperSize(width=210, height=148),
    PaperFormat.CUSTOM: PaperSize(width=297, height=210),  # 同A4
})

# (x1, y1, x2, y2)，毫米，左上角坐标系
Segment = tuple[float, float, float, float]


@dataclass(frozen=True)
class PageGeometry:
    """单页几何（毫米）"""
    content_width: float
    content_height: float
    bleed: float
    crop_marks: list[Segment] = field(default_factory=list)

    @property
    def total_width(self) -> float:
        return self.content_width + 2 * self.bleed

    @property
    def total_height(self) -> float:
        return self.content_height + 2 * self.bleed

    @property
    def page_size(self) -> tuple[float, float]:
        return (self.total_width, self.total_height)

    @property
    def image_box(self) -> tuple[float, float, float, float]:
        """图像放置区域 (x, y, 宽, 高)"""
        return (self.bleed, self.bleed, self.content_width, self.content_height)


def get_quality_settings(quality: ExportQuality | str) -> QualitySettings:
    return QUALITY_SETTINGS[ExportQuality(quality)]


def get_paper_size(paper_format: PaperFormat | str) -> PaperSize:
    paper_format = PaperFormat(paper_format)
    if paper_format == PaperFormat.CUSTOM:
        logger.warning("Custom 纸张暂无自定义尺寸输入，按A4尺寸导出")
    return PAPER_SIZES_MM[paper_format]


def get_content_size_mm(
    paper_format: PaperFormat | str,
    orientation: Orientation | str,
) -> PaperSize:
    """内容区尺寸（纵向交换宽高）"""
    return get_paper_size(paper_format).oriented(Orientation(orientation))


def get_pixel_dimensions(
    paper_format: PaperFormat | str,
    orientation: Orientation | str,
    dpi: float,
) -> tuple[int, int]:
    """纸张尺寸换算为像素 (宽, 高)"""
    size = get_content_size_mm(paper_format, orientation)
    return (
        math.floor(size.width / MM_PER_INCH * dpi + 0.5),
        math.floor(size.height / MM_PER_INCH * dpi + 0.5),
    )


def crop_mark_segments(
    total_width: float,
    total_height: float,
    bleed: float,
    mark_length: float = DEFAULT_CROP_MARK_MM,
) -> list[Segment]:
    """
    四角L形裁切线

    每个角两段：从裁切角点沿裁切线向外（出血区方向）延伸。
    线段完整落在页面内，实际长度为 min(mark_length, bleed)：
    出血不小于 mark_length 时为完整 mark_length，否则到页面边缘为止。
    """
    if bleed <= 0:
        return []

    length = min(mark_length, bleed)
    left, top = bleed, bleed
    right, bottom = total_width - bleed, total_height - bleed

    segments: list[Segment] = []
    for cx, cy, dx, dy in (
        (left, top, -1, -1),
        (right, top, 1, -1),
        (left, bottom, -1, 1),
        (right, bottom, 1, 1),
    ):
        segments.append((cx, cy, cx + dx * length, cy))  # 水平
        segments.append((cx, cy, cx, cy + dy * length))  # 垂直
    return segments


def get_page_geometry(
    paper_format: PaperFormat | str,
    orientation: Orientation | str,
    bleed: float = 0.0,
    mark_length: float = DEFAULT_CROP_MARK_MM,
) -> PageGeometry:
    """计算页面几何"""
    content = get_content_size_mm(paper_format, orientation)
    total_width = content.width + 2 * bleed
    total_height = content.height + 2 * bleed
    return PageGeometry(
        content_width=content.width,
        content_height=content.height,
        bleed=bleed,
        crop_marks=crop_mark_segments(total_width, total_height, bleed, mark_length),
    )
