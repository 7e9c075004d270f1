"""
流水线模块 - 证书导出编排

子模块：
- guard: 同一文档导出互斥
- orchestrator: 快照→替换→二维码→导出→还原
- certificate_id: 证书编号生成
"""

from .certificate_id import generate_certificate_id
from .guard import ExportGuard, export_guard
from .orchestrator import (
    ExportStage,
    default_export_options,
    export_with_options,
    generate_and_download_certificate,
    prepared_document,
)

__all__ = [
    "ExportGuard",
    "export_guard",
    "ExportStage",
    "default_export_options",
    "prepared_document",
    "generate_and_download_certificate",
    "export_with_options",
    "generate_certificate_id",
]
