"""
导出模块 - 栅格化/PDF组装/二维码/快照/落盘

子模块：
- tables: 质量档位、纸张尺寸、页面几何
- rasterizer: 画布栅格化（Pillow）
- pdf_engine: PDF组装（reportlab）
- qr: 二维码链接与占位图替换
- snapshot: 原文保存与还原
- exporter: PDF/PNG导出、元素截图兜底
- download: 文件名规范化与落盘
"""

from .download import (
    download_certificate_pdf,
    download_certificate_png,
    normalize_filename,
    save_export,
)
from .exporter import (
    ImageFileElement,
    export_canvas_to_pdf,
    export_canvas_to_png,
    export_element_to_pdf,
)
from .pdf_engine import PDFAssembler
from .qr import (
    HttpImageLoader,
    build_verification_url,
    generate_qr_code_url,
    replace_qr_placeholders,
)
from .rasterizer import CanvasRasterizer
from .snapshot import (
    DocumentSnapshot,
    TextSnapshot,
    prepare_canvas_for_export,
    restore_document_snapshot,
    restore_original_text,
    store_original_text,
    take_document_snapshot,
)
from .tables import (
    PAPER_SIZES_MM,
    QUALITY_SETTINGS,
    PageGeometry,
    crop_mark_segments,
    get_content_size_mm,
    get_page_geometry,
    get_pixel_dimensions,
    get_quality_settings,
)

__all__ = [
    "QUALITY_SETTINGS",
    "PAPER_SIZES_MM",
    "PageGeometry",
    "get_quality_settings",
    "get_content_size_mm",
    "get_page_geometry",
    "get_pixel_dimensions",
    "crop_mark_segments",
    "CanvasRasterizer",
    "PDFAssembler",
    "HttpImageLoader",
    "build_verification_url",
    "generate_qr_code_url",
    "replace_qr_placeholders",
    "TextSnapshot",
    "DocumentSnapshot",
    "prepare_canvas_for_export",
    "store_original_text",
    "restore_original_text",
    "take_document_snapshot",
    "restore_document_snapshot",
    "ImageFileElement",
    "export_canvas_to_pdf",
    "export_canvas_to_png",
    "export_element_to_pdf",
    "normalize_filename",
    "save_export",
    "download_certificate_pdf",
    "download_certificate_png",
]
