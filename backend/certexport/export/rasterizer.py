"""
画布栅格化器 - 画布文档渲染为位图

职责：
1. 按倍率渲染背景/图形/图片/文本节点
2. 处理节点原点、缩放、旋转、不透明度
3. 编码为PNG（或JPEG，按编码质量）

依赖：
- Pillow: 绘制与编码

测试要点：
- test_render_size_follows_scale: 输出尺寸 = 画布尺寸 × 倍率
- test_render_text_node: 文本节点绘制
- test_qr_placeholder_drawn_when_unloaded: 未加载的二维码占位图绘制为灰框
- test_invalid_color_raises: 颜色非法时抛出RenderError
"""

from __future__ import annotations

import base64
import io
import logging
from functools import lru_cache

from PIL import Image, ImageColor, ImageDraw, ImageFont

from ..interfaces import IRasterizer, RenderError
from ..models import Document, ImageNode, ShapeNode, TextNode

logger = logging.getLogger(__name__)

LINE_HEIGHT = 1.16
PLACEHOLDER_FILL = (229, 231, 235, 255)
PLACEHOLDER_OUTLINE = (156, 163, 175, 255)

RGBA = tuple[int, int, int, int]


def parse_color(value: str | None) -> RGBA | None:
    """解析颜色，transparent/None 返回 None"""
    if value is None:
        return None
    value = value.strip()
    if not value or value.lower() in ("transparent", "none"):
        return None
    rgb = ImageColor.getcolor(value, "RGBA")
    return rgb  # type: ignore[return-value]


@lru_cache(maxsize=64)
def load_font(family: str, size: int, bold: bool = False, italic: bool = False) -> ImageFont.ImageFont:
    """按字体族加载字体，找不到时使用Pillow内置字体"""
    base = family.replace(" ", "")
    suffix = ("-Bold" if bold else "") + ("-Italic" if italic else "")
    candidates = [
        f"{base}{suffix}.ttf",
        f"{base}.ttf",
        f"{base.lower()}.ttf",
        f"DejaVuSans{'-Bold' if bold else ''}.ttf",
    ]
    for name in candidates:
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    logger.debug(f"字体未找到，使用内置字体: {family}")
    return ImageFont.load_default(size=size)


class CanvasRasterizer(IRasterizer):
    """基于Pillow的画布栅格化器"""

    def render(self, document: Document, scale: float = 1.0) -> Image.Image:
        """将文档渲染为位图（RGBA）"""
        if scale <= 0:
            raise RenderError(f"渲染倍率必须为正数: {scale}")

        width = max(1, round(document.width * scale))
        height = max(1, round(document.height * scale))

        try:
            background = parse_color(document.background) or (255, 255, 255, 0)
            canvas = Image.new("RGBA", (width, height), background)

            for node in document.objects:
                if isinstance(node, ShapeNode):
                    self._draw_shape(canvas, node, scale)
                elif isinstance(node, ImageNode):
                    self._draw_image(canvas, node, scale)
                elif isinstance(node, TextNode):
                    self._draw_text(canvas, node, scale)
                else:
                    raise RenderError(f"未知节点类型: {type(node).__name__}")
        except RenderError:
            raise
        except (OSError, ValueError) as e:
            raise RenderError(f"画布渲染失败: {e}") from e

        return canvas

    def to_png_bytes(
        self, document: Document, scale: float = 1.0, image_quality: float = 1.0
    ) -> bytes:
        """渲染并编码为PNG（无损，image_quality不影响输出）"""
        return self.to_image_bytes(document, scale, image_quality, image_format="PNG")

    def to_image_bytes(
        self,
        document: Document,
        scale: float = 1.0,
        image_quality: float = 1.0,
        image_format: str = "PNG",
    ) -> bytes:
        """渲染并编码（JPEG按image_quality压缩）"""
        image = self.render(document, scale)
        buffer = io.BytesIO()
        if image_format.upper() in ("JPEG", "JPG"):
            image.convert("RGB").save(
                buffer, format="JPEG", quality=max(1, min(95, round(image_quality * 95)))
            )
        else:
            image.save(buffer, format="PNG")
        return buffer.getvalue()

    # === 节点绘制 ===

    def _draw_shape(self, canvas: Image.Image, node: ShapeNode, scale: float) -> None:
        sx = node.scale_x * scale
        sy = node.scale_y * scale
        stroke = parse_color(node.stroke)
        fill = parse_color(node.fill)
        stroke_px = max(1, round(node.stroke_width * scale)) if stroke else 0

        if node.type == "line":
            dx = (node.x2 - node.x1) * sx
            dy = (node.y2 - node.y1) * sy
            pad = stroke_px
            layer = Image.new(
                "RGBA", (max(1, round(abs(dx)) + 2 * pad), max(1, round(abs(dy)) + 2 * pad)), (0, 0, 0, 0)
            )
            start = (pad + (0 if dx >= 0 else abs(dx)), pad + (0 if dy >= 0 else abs(dy)))
            end = (start[0] + dx, start[1] + dy)
            ImageDraw.Draw(layer).line([start, end], fill=stroke or (0, 0, 0, 255), width=max(1, stroke_px))
            x, y = self._origin(node, abs(dx), abs(dy), scale)
            self._composite(canvas, layer, x - pad, y - pad, node.angle, node.opacity)
            return

        if node.type == "circle":
            radius = node.radius or 0.0
            w = 2 * radius * sx
            h = 2 * radius * sy
        else:
            w = (node.width or 0.0) * sx
            h = (node.height or 0.0) * sy

        if w < 1 or h < 1:
            return

        layer = Image.new("RGBA", (round(w), round(h)), (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        box = [0, 0, layer.width - 1, layer.height - 1]
        if node.type == "circle":
            draw.ellipse(box, fill=fill, outline=stroke, width=stroke_px)
        else:
            draw.rectangle(box, fill=fill, outline=stroke, width=stroke_px)

        x, y = self._origin(node, w, h, scale)
        self._composite(canvas, layer, x, y, node.angle, node.opacity)

    def _draw_image(self, canvas: Image.Image, node: ImageNode, scale: float) -> None:
        source = node.image if node.image is not None else self._decode_src(node.src)

        natural_w = node.width or (source.width if source is not None else 0)
        natural_h = node.height or (source.height if source is not None else 0)
        w = natural_w * node.scale_x * scale
        h = natural_h * node.scale_y * scale
        if w < 1 or h < 1:
            return

        size = (round(w), round(h))
        if source is None:
            if not node.is_qr_placeholder:
                logger.debug(f"图片未加载，跳过: {node.id}")
                return
            layer = Image.new("RGBA", size, PLACEHOLDER_FILL)
            draw = ImageDraw.Draw(layer)
            draw.rectangle([0, 0, size[0] - 1, size[1] - 1], outline=PLACEHOLDER_OUTLINE, width=max(1, round(scale)))
            draw.line([(0, 0), (size[0] - 1, size[1] - 1)], fill=PLACEHOLDER_OUTLINE, width=max(1, round(scale)))
            draw.line([(0, size[1] - 1), (size[0] - 1, 0)], fill=PLACEHOLDER_OUTLINE, width=max(1, round(scale)))
        else:
            layer = source.convert("RGBA").resize(size, Image.Resampling.LANCZOS)

        x, y = self._origin(node, w, h, scale)
        self._composite(canvas, layer, x, y, node.angle, node.opacity)

    def _draw_text(self, canvas: Image.Image, node: TextNode, scale: float) -> None:
        if not node.text:
            return

        font_px = max(1, round(node.font_size * node.scale_y * scale))
        font = load_font(
            node.font_family,
            font_px,
            bold=node.font_weight in ("bold", "700", "800", "900"),
            italic=node.font_style == "italic",
        )
        measure = ImageDraw.Draw(Image.new("RGBA", (1, 1)))

        def text_width(s: str) -> float:
            left, _, right, _ = measure.textbbox((0, 0), s, font=font)
            return right - left

        box_w = node.width * node.scale_x * scale if node.width else None
        lines = self._layout_lines(node, text_width, box_w)
        line_h = font_px * LINE_HEIGHT
        if box_w is None:
            box_w = max((text_width(line) for line in lines), default=0)
        box_h = line_h * len(lines)
        if box_w < 1 or box_h < 1:
            return

        layer = Image.new("RGBA", (round(box_w), round(box_h)), (0, 0, 0, 0))
        draw = ImageDraw.Draw(layer)
        fill = parse_color(node.fill) or (0, 0, 0, 255)
        for i, line in enumerate(lines):
            lw = text_width(line)
            if node.text_align == "center":
                lx = (box_w - lw) / 2
            elif node.text_align == "right":
                lx = box_w - lw
            else:
                lx = 0
            draw.text((lx, i * line_h), line, font=font, fill=fill)

        x, y = self._origin(node, box_w, box_h, scale)
        self._composite(canvas, layer, x, y, node.angle, node.opacity)

    # === 工具方法 ===

    @staticmethod
    def _layout_lines(node: TextNode, text_width, box_w: float | None) -> list[str]:
        """按换行符拆分；textbox 按宽度自动折行"""
        paragraphs = node.text.split("\n")
        if node.type != "textbox" or not box_w:
            return paragraphs

        lines: list[str] = []
        for paragraph in paragraphs:
            words = paragraph.split(" ")
            current = ""
            for word in words:
                candidate = f"{current} {word}" if current else word
                if current and text_width(candidate) > box_w:
                    lines.append(current)
                    current = word
                else:
                    current = candidate
            lines.append(current)
        return lines

    @staticmethod
    def _origin(node, w: float, h: float, scale: float) -> tuple[float, float]:
        """按 originX/originY 计算左上角位置"""
        x = node.left * scale
        y = node.top * scale
        if node.origin_x == "center":
            x -= w / 2
        elif node.origin_x == "right":
            x -= w
        if node.origin_y == "center":
            y -= h / 2
        elif node.origin_y == "bottom":
            y -= h
        return x, y

    @staticmethod
    def _composite(
        canvas: Image.Image,
        layer: Image.Image,
        x: float,
        y: float,
        angle: float = 0.0,
        opacity: float = 1.0,
    ) -> None:
        """将节点图层按中心旋转后贴到画布"""
        if opacity < 1.0:
            alpha = layer.getchannel("A").point(lambda a: round(a * max(0.0, opacity)))
            layer.putalpha(alpha)
        if angle:
            cx = x + layer.width / 2
            cy = y + layer.height / 2
            layer = layer.rotate(-angle, expand=True, resample=Image.Resampling.BICUBIC)
            x = cx - layer.width / 2
            y = cy - layer.height / 2
        canvas.paste(layer, (round(x), round(y)), layer)

    @staticmethod
    def _decode_src(src: str | None) -> Image.Image | None:
        """解码 data: URL 形式的图片源；远程URL需先由加载器加载"""
        if not src or not src.startswith("data:"):
            return None
        _, _, payload = src.partition(",")
        return Image.open(io.BytesIO(base64.b64decode(payload)))
