"""
导出编排器 - 证书生成与下载的完整流程

流程（严格串行）：
SNAPSHOT → SUBSTITUTE → QR_REPLACE → EXPORT → RESTORE

职责：
1. 同一文档导出互斥
2. 替换占位符、替换二维码、导出落盘
3. 无论成功失败，始终还原文档（文本与节点序列）
4. 按文件类型分派 PDF/PNG/两者

测试要点：
- test_generate_restores_on_success: 成功后文档还原
- test_generate_restores_on_failure: 导出异常时文档仍还原
- test_qr_skipped_without_certificate_id: 无证书编号不替换二维码
- test_export_with_options_both: 同时输出PDF与PNG
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from enum import Enum
from pathlib import Path

from ..config import get_config
from ..export import (
    download_certificate_pdf,
    download_certificate_png,
    prepare_canvas_for_export,
    replace_qr_placeholders,
    restore_document_snapshot,
    take_document_snapshot,
)
from ..interfaces import IImageLoader
from ..models import (
    CertificateExportOptions,
    Document,
    ExportFileType,
    PlaceholderData,
)
from .guard import export_guard

logger = logging.getLogger(__name__)


class ExportStage(str, Enum):
    """导出阶段"""
    SNAPSHOT = "SNAPSHOT"
    SUBSTITUTE = "SUBSTITUTE"
    QR_REPLACE = "QR_REPLACE"
    EXPORT = "EXPORT"
    RESTORE = "RESTORE"


def default_export_options(**overrides) -> CertificateExportOptions:
    """按运行期配置生成默认导出选项"""
    defaults = get_config().export
    values = {
        "format": defaults.format,
        "orientation": defaults.orientation,
        "quality": defaults.quality,
        "bleed_mm": defaults.bleed_mm,
    }
    values.update(overrides)
    return CertificateExportOptions(**values)


def _as_placeholder_data(
    data: PlaceholderData | Mapping[str, str | None] | None,
) -> PlaceholderData | None:
    if data is None or isinstance(data, PlaceholderData):
        return data
    return PlaceholderData.from_mapping(data)


@asynccontextmanager
async def prepared_document(
    document: Document,
    data: PlaceholderData | None,
    loader: IImageLoader | None = None,
) -> AsyncIterator[Document]:
    """
    占用文档并写入数据，退出时始终还原

    data 为 None 时不做替换，仅占用与还原。
    """
    with export_guard.hold(document):
        logger.info(f"[{document.id}] 开始阶段: {ExportStage.SNAPSHOT.value}")
        snapshot = take_document_snapshot(document)
        try:
            if data is not None:
                logger.info(f"[{document.id}] 开始阶段: {ExportStage.SUBSTITUTE.value}")
                prepare_canvas_for_export(document, data)

                if data.certificate_id:
                    logger.info(f"[{document.id}] 开始阶段: {ExportStage.QR_REPLACE.value}")
                    await replace_qr_placeholders(document, data.certificate_id, loader)

            yield document
        finally:
            logger.info(f"[{document.id}] 开始阶段: {ExportStage.RESTORE.value}")
            restore_document_snapshot(document, snapshot)


async def generate_and_download_certificate(
    document: Document,
    data: PlaceholderData | Mapping[str, str | None],
    filename: str | None = None,
    options: CertificateExportOptions | None = None,
    *,
    loader: IImageLoader | None = None,
    output_dir: Path | None = None,
) -> Path:
    """生成证书并导出PDF，返回文件路径"""
    options = options or default_export_options()
    if filename:
        options = options.model_copy(update={"filename": filename})

    async with prepared_document(document, _as_placeholder_data(data), loader):
        logger.info(f"[{document.id}] 开始阶段: {ExportStage.EXPORT.value}")
        return download_certificate_pdf(document, options, output_dir)


def _base_filename(options: CertificateExportOptions) -> str:
    """去掉已有的 .pdf/.png 后缀"""
    name = options.filename or get_config().export.default_filename
    for ext in (".pdf", ".png"):
        if name.lower().endswith(ext):
            return name[: -len(ext)]
    return name


async def export_with_options(
    document: Document,
    options: CertificateExportOptions,
    data: PlaceholderData | Mapping[str, str | None] | None = None,
    *,
    loader: IImageLoader | None = None,
    output_dir: Path | None = None,
) -> list[Path]:
    """按文件类型导出 PDF/PNG/两者，返回生成的文件路径"""
    base = _base_filename(options)
    outputs: list[Path] = []

    async with prepared_document(document, _as_placeholder_data(data), loader):
        logger.info(f"[{document.id}] 开始阶段: {ExportStage.EXPORT.value} ({options.file_type.value})")

        if options.file_type in (ExportFileType.PDF, ExportFileType.BOTH):
            pdf_options = options.model_copy(update={"filename": f"{base}.pdf"})
            outputs.append(download_certificate_pdf(document, pdf_options, output_dir))

        if options.file_type in (ExportFileType.PNG, ExportFileType.BOTH):
            outputs.append(
                download_certificate_png(document, options.quality, f"{base}.png", output_dir)
            )

    return outputs
