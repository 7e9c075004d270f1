"""
导出互斥 - 同一文档同一时间只允许一个导出

导出会原地修改文档文本，同一文档的并发导出会相互覆盖；
不同文档之间互不影响。
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from ..interfaces import ExportInProgressError
from ..models import Document

logger = logging.getLogger(__name__)


class ExportGuard:
    """按文档id记录进行中的导出"""

    def __init__(self) -> None:
        self._in_flight: set[str] = set()

    def is_exporting(self, document: Document) -> bool:
        return document.id in self._in_flight

    @contextmanager
    def hold(self, document: Document) -> Iterator[None]:
        """占用文档，退出时释放"""
        if document.id in self._in_flight:
            logger.warning(f"文档导出进行中，拒绝重复导出: {document.id}")
            raise ExportInProgressError(f"文档正在导出: {document.id}")
        self._in_flight.add(document.id)
        try:
            yield
        finally:
            self._in_flight.discard(document.id)


# 全局互斥实例
export_guard = ExportGuard()
