"""
数据模型单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_models.py -v
"""

import pytest
from pydantic import ValidationError

from certexport.models import (
    CertificateExportOptions,
    Document,
    ImageNode,
    Orientation,
    PaperSize,
    PlaceholderData,
    ShapeNode,
    TextNode,
)


class TestPlaceholderData:
    """占位符数据测试"""

    def test_missing_field_is_empty(self):
        """测试缺失字段返回空字符串"""
        data = PlaceholderData(recipient_name="Ann")
        assert data.get("recipient_name") == "Ann"
        assert data.get("event_name") == ""
        assert data.get("not_a_field") == ""

    def test_from_mapping_stringifies(self):
        """测试从字典构建"""
        data = PlaceholderData.from_mapping({"score": 95, "rank": None, "extra_key": "x"})
        assert data.score == "95"
        assert data.get("rank") == ""
        assert data.as_dict() == {"score": "95", "extra_key": "x"}


class TestExportOptions:
    """导出选项测试"""

    def test_no_bleed_by_default(self):
        """测试默认无出血"""
        assert CertificateExportOptions().effective_bleed_mm == 0.0

    def test_bleed_defaults_to_3mm(self):
        """测试请求出血未指定时为3mm"""
        options = CertificateExportOptions(include_bleed=True)
        assert options.effective_bleed_mm == 3.0

    def test_bleed_explicit(self):
        """测试显式出血量（含0）"""
        assert CertificateExportOptions(include_bleed=True, bleed_mm=5).effective_bleed_mm == 5
        assert CertificateExportOptions(include_bleed=True, bleed_mm=0).effective_bleed_mm == 0

    def test_quality_value_parsing(self):
        """测试质量档位字符串解析"""
        options = CertificateExportOptions(quality="print-300dpi", format="Letter")
        assert options.quality.value == "print-300dpi"
        assert options.format.value == "Letter"

    def test_paper_size_oriented(self):
        """测试纵向交换宽高"""
        size = PaperSize(width=297, height=210)
        assert size.oriented(Orientation.PORTRAIT) == PaperSize(width=210, height=297)
        assert size.oriented(Orientation.LANDSCAPE) == size


class TestDocument:
    """画布文档测试"""

    def test_from_canvas_json_camel_case(self):
        """测试驼峰字段与节点类型区分"""
        doc = Document.from_canvas_json({
            "version": "6.0.0",
            "objects": [
                {"type": "textbox", "text": "{recipient_name}", "fontSize": 48, "originX": "center"},
                {"type": "image", "left": 10, "isQrPlaceholder": True, "scaleX": 2},
                {"type": "rect", "width": 5, "height": 5, "strokeWidth": 3},
            ],
        }, width=842, height=595)

        text, image, rect = doc.objects
        assert isinstance(text, TextNode) and text.font_size == 48
        assert text.origin_x == "center"
        assert isinstance(image, ImageNode) and image.is_qr_placeholder
        assert image.scale_x == 2
        assert isinstance(rect, ShapeNode) and rect.stroke_width == 3
        assert doc.width == 842

    def test_unknown_node_type_rejected(self):
        """测试未知节点类型校验失败"""
        with pytest.raises(ValidationError):
            Document.from_canvas_json({"objects": [{"type": "group"}]})

    def test_nodes_have_unique_ids(self, sample_document: Document):
        """测试节点id唯一"""
        ids = [node.id for node in sample_document.objects]
        assert len(set(ids)) == len(ids)

    def test_duplicate_ids_reassigned(self):
        """测试画布JSON中重复id重新分配，首个保留"""
        doc = Document.from_canvas_json({
            "objects": [
                {"type": "textbox", "id": "n1", "text": "a"},
                {"type": "rect", "id": "n1"},
                {"type": "textbox", "id": "n2", "text": "b"},
            ],
        })
        ids = [node.id for node in doc.objects]
        assert ids[0] == "n1" and ids[2] == "n2"
        assert len(set(ids)) == 3

    def test_get_objects_by_kind(self, sample_document: Document):
        """测试按类型枚举"""
        assert len(sample_document.text_nodes()) == 3
        assert len(sample_document.image_nodes()) == 1
        assert len(sample_document.get_objects()) == 5

    def test_remove_and_insert(self, sample_document: Document):
        """测试删除与原位插入"""
        image = sample_document.image_nodes()[0]
        index = sample_document.index_of(image)

        assert sample_document.remove(image)
        assert sample_document.index_of(image) == -1
        assert not sample_document.remove(image)

        sample_document.insert(index, image)
        assert sample_document.objects[index] is image
        assert sample_document.find(image.id) is image

    def test_render_all_bumps_revision(self, sample_document: Document):
        """测试重绘计数"""
        before = sample_document.revision
        sample_document.render_all()
        assert sample_document.revision == before + 1

    def test_to_canvas_json_uses_aliases(self, sample_document: Document):
        """测试导出驼峰字段且不含运行期图像"""
        data = sample_document.to_canvas_json()
        image = data["objects"][3]
        assert image["isQrPlaceholder"] is True
        assert "image" not in image
        assert "fontSize" in data["objects"][1]
