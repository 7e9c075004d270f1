"""
文档快照 - 导出前保存原文，导出后还原

职责：
1. 按节点id保存全部文本节点的原始文本
2. 按节点id还原（缺失节点跳过并告警，新增节点不受影响）
3. 文档级快照：额外保存节点序列，用于撤销二维码替换

测试要点：
- test_round_trip_restore: 保存→替换→还原后文本不变
- test_restore_skips_missing_node: 快照后被删除的节点不影响其他节点
- test_document_snapshot_reverts_qr: 文档快照还原节点序列
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..models import Document, PlaceholderData, TextNode
from ..placeholders import replace_placeholders

logger = logging.getLogger(__name__)

# 节点id → 原始文本
TextSnapshot = dict[str, str]


@dataclass
class DocumentSnapshot:
    """文档快照（文本 + 节点序列）"""
    text: TextSnapshot = field(default_factory=dict)
    nodes: list[Any] = field(default_factory=list)


def prepare_canvas_for_export(document: Document, data: PlaceholderData) -> None:
    """替换全部文本节点中的占位符并触发重绘"""
    for node in document.text_nodes():
        node.text = replace_placeholders(node.text, data)
    document.render_all()


def store_original_text(document: Document) -> TextSnapshot:
    """保存全部文本节点的原始文本"""
    return {node.id: node.text for node in document.text_nodes()}


def restore_original_text(document: Document, snapshot: TextSnapshot) -> int:
    """按节点id还原文本，返回还原的节点数"""
    restored = 0
    for node_id, text in snapshot.items():
        node = document.find(node_id)
        if not isinstance(node, TextNode):
            logger.warning(f"还原跳过，节点不存在: {node_id}")
            continue
        node.text = text
        restored += 1
    document.render_all()
    return restored


def take_document_snapshot(document: Document) -> DocumentSnapshot:
    """保存文本与节点序列"""
    return DocumentSnapshot(
        text=store_original_text(document),
        nodes=document.get_objects(),
    )


def restore_document_snapshot(document: Document, snapshot: DocumentSnapshot) -> None:
    """还原节点序列与文本"""
    document.replace_objects(snapshot.nodes)
    restore_original_text(document, snapshot.text)
