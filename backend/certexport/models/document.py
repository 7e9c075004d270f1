"""
画布文档模型 - 证书设计画布的节点结构

节点按类型做标签联合（type字段区分）：
- TextNode: 文本节点（text/textbox/i-text），承载占位符
- ImageNode: 图片节点，is_qr_placeholder 标记二维码占位图
- ShapeNode: 图形节点（rect/line/circle），仅参与渲染

JSON 字段兼容画布库的驼峰命名（fontSize/scaleX/isQrPlaceholder 等）。
每个节点在创建/加载时分配稳定 id，快照与还原以 id 为键。
"""

from __future__ import annotations

import logging
import uuid
from typing import Annotated, Any, Literal, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, model_validator
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

# A4横向 @72DPI
DEFAULT_CANVAS_WIDTH = 842
DEFAULT_CANVAS_HEIGHT = 595


def _new_id() -> str:
    return uuid.uuid4().hex


class _NodeBase(BaseModel):
    """节点公共字段（位置/缩放/旋转）"""
    id: str = Field(default_factory=_new_id)
    left: float = 0.0
    top: float = 0.0
    width: float | None = None
    height: float | None = None
    angle: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0
    origin_x: Literal["left", "center", "right"] = "left"
    origin_y: Literal["top", "center", "bottom"] = "top"
    opacity: float = 1.0

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class TextNode(_NodeBase):
    """文本节点"""
    type: Literal["text", "textbox", "i-text"] = "textbox"
    text: str = ""
    font_size: float = 16.0
    font_family: str = "Arial"
    font_weight: str = "normal"
    font_style: str = "normal"
    fill: str | None = "#000000"
    text_align: Literal["left", "center", "right", "justify"] = "left"


class ImageNode(_NodeBase):
    """图片节点"""
    type: Literal["image"] = "image"
    src: str | None = None
    is_qr_placeholder: bool = False

    # 已解码的 PIL 图像（运行期，不序列化）
    image: Any = Field(default=None, exclude=True, repr=False)


class ShapeNode(_NodeBase):
    """图形节点"""
    type: Literal["rect", "line", "circle"] = "rect"
    fill: str | None = None
    stroke: str | None = None
    stroke_width: float = 1.0
    radius: float | None = None
    x1: float = 0.0
    y1: float = 0.0
    x2: float = 0.0
    y2: float = 0.0


Node = Annotated[Union[TextNode, ImageNode, ShapeNode], Field(discriminator="type")]

NodeT = TypeVar("NodeT", TextNode, ImageNode, ShapeNode)


class Document(BaseModel):
    """画布文档（有序节点集合）"""
    id: str = Field(default_factory=_new_id)
    width: float = DEFAULT_CANVAS_WIDTH
    height: float = DEFAULT_CANVAS_HEIGHT
    background: str | None = "#ffffff"
    objects: list[Node] = Field(default_factory=list)

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    _revision: int = PrivateAttr(default=0)

    @model_validator(mode="after")
    def _ensure_unique_ids(self) -> Document:
        """重复的节点id重新分配（复制的画布对象会带着相同id）"""
        seen: set[str] = set()
        for node in self.objects:
            if node.id in seen:
                old_id = node.id
                node.id = _new_id()
                logger.warning(f"节点id重复，已重新分配: {old_id} -> {node.id}")
            seen.add(node.id)
        return self

    @classmethod
    def from_canvas_json(
        cls,
        data: dict[str, Any],
        width: float | None = None,
        height: float | None = None,
    ) -> Document:
        """从画布库导出的JSON构建文档"""
        payload = dict(data)
        if width is not None:
            payload["width"] = width
        if height is not None:
            payload["height"] = height
        return cls.model_validate(payload)

    def to_canvas_json(self) -> dict[str, Any]:
        """导出为画布JSON（驼峰命名）"""
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})

    # === 节点访问 ===

    def get_objects(self, kind: type[NodeT] | None = None) -> list[Any]:
        """枚举节点（可按类型过滤），返回列表副本"""
        if kind is None:
            return list(self.objects)
        return [node for node in self.objects if isinstance(node, kind)]

    def text_nodes(self) -> list[TextNode]:
        return self.get_objects(TextNode)

    def image_nodes(self) -> list[ImageNode]:
        return self.get_objects(ImageNode)

    def find(self, node_id: str) -> TextNode | ImageNode | ShapeNode | None:
        """按id查找节点"""
        for node in self.objects:
            if node.id == node_id:
                return node
        return None

    def index_of(self, node: TextNode | ImageNode | ShapeNode) -> int:
        """节点在枚举顺序中的位置，不存在返回-1"""
        for i, candidate in enumerate(self.objects):
            if candidate.id == node.id:
                return i
        return -1

    # === 节点变更 ===

    def add(self, node: TextNode | ImageNode | ShapeNode) -> None:
        self._claim_id(node)
        self.objects.append(node)

    def insert(self, index: int, node: TextNode | ImageNode | ShapeNode) -> None:
        self._claim_id(node)
        self.objects.insert(index, node)

    def _claim_id(self, node: TextNode | ImageNode | ShapeNode) -> None:
        """新加入的节点与已有节点id冲突时重新分配"""
        if self.find(node.id) is not None:
            old_id = node.id
            node.id = _new_id()
            logger.warning(f"节点id重复，已重新分配: {old_id} -> {node.id}")

    def remove(self, node: TextNode | ImageNode | ShapeNode) -> bool:
        """移除节点，返回是否移除成功"""
        index = self.index_of(node)
        if index < 0:
            return False
        del self.objects[index]
        return True

    def replace_objects(self, nodes: list[Any]) -> None:
        """整体替换节点序列（快照还原用）"""
        self.objects = list(nodes)

    # === 重绘 ===

    def render_all(self) -> None:
        """触发重绘（递增渲染版本号）"""
        self._revision += 1
        logger.debug(f"文档重绘: {self.id} revision={self._revision}")

    @property
    def revision(self) -> int:
        return self._revision
