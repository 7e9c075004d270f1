"""
PDF组装引擎 - 位图嵌入印刷页面

职责：
1. 按总尺寸（含出血）创建单页PDF
2. 将位图放置在内容区（出血边距内）
3. 有出血时绘制四角裁切线

依赖：
- reportlab: PDF生成
- Pillow: 位图传递

测试要点：
- test_assemble_page_size: 页面尺寸 = 内容 + 2×出血
- test_assemble_without_bleed: 无出血不绘制裁切线
"""

from __future__ import annotations

import io

from PIL import Image
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas as pdf_canvas

from ..config import get_config
from ..interfaces import ExportError, IPDFAssembler
from .tables import Segment, crop_mark_segments


class PDFAssembler(IPDFAssembler):
    """PDF组装器实现"""

    def __init__(
        self,
        crop_mark_length_mm: float | None = None,
        crop_mark_line_width_mm: float | None = None,
    ):
        config = get_config()
        self.crop_mark_length = crop_mark_length_mm or config.export.crop_mark_length_mm
        self.crop_mark_line_width = crop_mark_line_width_mm or config.export.crop_mark_line_width_mm

    def assemble(
        self,
        image: Image.Image,
        page_size_mm: tuple[float, float],
        image_box_mm: tuple[float, float, float, float],
        bleed_mm: float = 0.0,
        crop_marks: list[Segment] | None = None,
    ) -> bytes:
        """组装单页PDF并返回字节流"""
        page_w, page_h = page_size_mm
        x, y, w, h = image_box_mm

        buffer = io.BytesIO()
        try:
            pdf = pdf_canvas.Canvas(buffer, pagesize=(page_w * mm, page_h * mm))

            # reportlab 原点在左下角
            pdf.drawImage(
                ImageReader(image.convert("RGB")),
                x * mm,
                (page_h - y - h) * mm,
                width=w * mm,
                height=h * mm,
            )

            if crop_marks is None:
                crop_marks = crop_mark_segments(page_w, page_h, bleed_mm, self.crop_mark_length)
            if crop_marks:
                self._draw_crop_marks(pdf, page_h, crop_marks)

            pdf.showPage()
            pdf.save()
        except (OSError, ValueError) as e:
            raise ExportError(f"PDF组装失败: {e}") from e

        return buffer.getvalue()

    def _draw_crop_marks(
        self, pdf: pdf_canvas.Canvas, page_h: float, crop_marks: list[Segment]
    ) -> None:
        """绘制四角裁切线"""
        pdf.setStrokeColorRGB(0, 0, 0)
        pdf.setLineWidth(self.crop_mark_line_width * mm)
        for x1, y1, x2, y2 in crop_marks:
            pdf.line(x1 * mm, (page_h - y1) * mm, x2 * mm, (page_h - y2) * mm)
