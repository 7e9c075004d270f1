"""
导出选项模型 - 纸张/方向/质量/出血

每次导出调用时构造，不持久化
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BLEED_MM = 3.0


class PaperFormat(str, Enum):
    """纸张规格"""
    A4 = "A4"
    LETTER = "Letter"
    A3 = "A3"
    A5 = "A5"
    CUSTOM = "Custom"  # 暂按A4处理


class Orientation(str, Enum):
    """纸张方向"""
    LANDSCAPE = "landscape"
    PORTRAIT = "portrait"


class ExportQuality(str, Enum):
    """导出质量档位"""
    STANDARD = "standard"
    HIGH = "high"
    PRINT = "print"
    PRINT_300DPI = "print-300dpi"


class ExportFileType(str, Enum):
    """导出文件类型"""
    PDF = "pdf"
    PNG = "png"
    BOTH = "both"


class QualitySettings(BaseModel):
    """质量档位参数"""
    scale: float = Field(..., description="画布像素→输出像素倍率(dpi/72)")
    image_quality: float = Field(..., ge=0.0, le=1.0, description="图像编码质量")
    dpi: int

    model_config = ConfigDict(frozen=True)


class PaperSize(BaseModel):
    """纸张尺寸（毫米，横向基准）"""
    width: float
    height: float

    model_config = ConfigDict(frozen=True)

    def oriented(self, orientation: Orientation) -> PaperSize:
        """按方向返回尺寸（纵向交换宽高）"""
        if orientation == Orientation.PORTRAIT:
            return PaperSize(width=self.height, height=self.width)
        return self


class CertificateExportOptions(BaseModel):
    """证书导出选项"""
    format: PaperFormat = PaperFormat.A4
    orientation: Orientation = Orientation.LANDSCAPE
    quality: ExportQuality = ExportQuality.HIGH
    filename: str | None = None
    include_bleed: bool = False
    bleed_mm: float | None = Field(None, ge=0.0)
    file_type: ExportFileType = ExportFileType.PDF

    @property
    def effective_bleed_mm(self) -> float:
        """实际出血量：未请求出血为0，请求但未指定为3mm"""
        if not self.include_bleed:
            return 0.0
        return self.bleed_mm if self.bleed_mm is not None else DEFAULT_BLEED_MM
