"""
导出文件落盘 - 生成PDF/PNG并保存到导出目录

职责：
1. 文件名扩展名规范化（缺失时补 .pdf/.png）
2. 先写临时文件再原子替换，临时文件始终释放
3. 返回最终文件路径

测试要点：
- test_normalize_filename: 扩展名补齐/大小写
- test_download_pdf_writes_file: 写入PDF
- test_temp_file_released_on_failure: 写入失败不残留临时文件
"""

from __future__ import annotations

import logging
import os
import tempfile
from pathlib import Path

from ..config import get_config
from ..interfaces import ExportError
from ..models import CertificateExportOptions, Document, ExportQuality
from .exporter import export_canvas_to_pdf, export_canvas_to_png

logger = logging.getLogger(__name__)


def normalize_filename(filename: str | None, extension: str) -> str:
    """补齐扩展名（不区分大小写判断）"""
    name = (filename or "").strip() or get_config().export.default_filename
    ext = extension if extension.startswith(".") else f".{extension}"
    if not name.lower().endswith(ext.lower()):
        name += ext
    return name


def save_export(data: bytes, filename: str, output_dir: Path | None = None) -> Path:
    """保存导出结果（临时文件 + 原子替换）"""
    target_dir = Path(output_dir) if output_dir else get_config().storage.output_dir
    target_dir.mkdir(parents=True, exist_ok=True)
    target = target_dir / Path(filename).name

    fd, tmp_name = tempfile.mkstemp(dir=target_dir, prefix=".export-", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp_path, target)
    except OSError as e:
        raise ExportError(f"导出文件写入失败: {target}") from e
    finally:
        if tmp_path.exists():
            tmp_path.unlink()

    logger.info(f"导出完成: {target} ({len(data)} bytes)")
    return target


def download_certificate_pdf(
    document: Document,
    options: CertificateExportOptions,
    output_dir: Path | None = None,
) -> Path:
    """导出PDF并保存"""
    data = export_canvas_to_pdf(document, options)
    return save_export(data, normalize_filename(options.filename, ".pdf"), output_dir)


def download_certificate_png(
    document: Document,
    quality: ExportQuality | str = ExportQuality.HIGH,
    filename: str | None = None,
    output_dir: Path | None = None,
) -> Path:
    """导出PNG并保存"""
    data = export_canvas_to_png(document, quality)
    return save_export(data, normalize_filename(filename, ".png"), output_dir)
