"""
配置加载单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_config.py -v
"""

import logging

import pytest

from certexport.config import (
    RuntimeConfig,
    TemplateLoader,
    configure_logging,
    get_config,
    load_templates,
    reload_config,
)
from certexport.export import build_verification_url
from certexport.interfaces import TemplateError
from certexport.models import ExportQuality, ImageNode, PaperFormat


class TestRuntimeConfig:
    """运行期配置测试"""

    def test_defaults(self, runtime_config: RuntimeConfig):
        """测试默认值"""
        assert runtime_config.export.format == PaperFormat.A4
        assert runtime_config.export.quality == ExportQuality.HIGH
        assert runtime_config.export.bleed_mm == 3
        assert runtime_config.export.crop_mark_length_mm == 5
        assert runtime_config.qr.preview_size == 150
        assert runtime_config.qr.replace_size == 300
        assert runtime_config.qr.service_url.startswith("https://api.qrserver.com/")

    def test_from_yaml(self, temp_dir):
        """测试YAML加载（含 default 写法与相对路径）"""
        config_file = temp_dir / "certexport.yaml"
        config_file.write_text(
            "certificate_export:\n"
            "  export:\n"
            "    quality: {default: print}\n"
            "    bleed_mm: 5\n"
            "  qr:\n"
            "    verify_base_url: https://verify.example.org\n"
            "  storage:\n"
            "    output_dir: out\n",
            encoding="utf-8",
        )

        config = RuntimeConfig.from_yaml(config_file)

        assert config.export.quality == ExportQuality.PRINT
        assert config.export.bleed_mm == 5
        assert config.qr.verify_base_url == "https://verify.example.org"
        assert config.storage.output_dir == (temp_dir / "out").resolve()

    def test_missing_yaml_uses_defaults(self, temp_dir):
        """测试配置文件不存在"""
        config = RuntimeConfig.from_yaml(temp_dir / "missing.yaml")
        assert config.export.default_filename == "certificate"

    def test_env_override(self, monkeypatch):
        """测试环境变量覆盖"""
        monkeypatch.setenv("CERTEXPORT_QR__REPLACE_SIZE", "500")
        monkeypatch.setenv("CERTEXPORT_EXPORT__QUALITY", "standard")
        config = RuntimeConfig()
        assert config.qr.replace_size == 500
        assert config.export.quality == ExportQuality.STANDARD

    def test_env_overrides_yaml(self, temp_dir, monkeypatch):
        """测试加载YAML时环境变量仍然优先，其余键保留YAML值"""
        config_file = temp_dir / "certexport.yaml"
        config_file.write_text(
            "certificate_export:\n"
            "  export:\n"
            "    bleed_mm: 5\n"
            "  qr:\n"
            "    replace_size: 300\n",
            encoding="utf-8",
        )
        monkeypatch.setenv("CERTEXPORT_QR__REPLACE_SIZE", "500")
        monkeypatch.setenv("CERTEXPORT_QR__VERIFY_BASE_URL", "https://prod.example")

        config = RuntimeConfig.from_yaml(config_file)

        assert config.qr.replace_size == 500
        assert config.qr.verify_base_url == "https://prod.example"
        assert config.qr.preview_size == 150
        assert config.export.bleed_mm == 5

    def test_env_overrides_through_reload(self, temp_dir, monkeypatch):
        """测试全局配置重新加载后环境变量生效"""
        config_file = temp_dir / "certexport.yaml"
        config_file.write_text("certificate_export:\n  qr:\n    preview_size: 120\n", encoding="utf-8")
        monkeypatch.setenv("CERTEXPORT_QR__VERIFY_BASE_URL", "https://prod.example")

        try:
            config = reload_config(config_file)
            assert config is get_config()
            assert config.qr.preview_size == 120
            assert build_verification_url("A1") == "https://prod.example/verify/A1"
        finally:
            monkeypatch.delenv("CERTEXPORT_QR__VERIFY_BASE_URL")
            reload_config()

    def test_ensure_dirs(self, temp_dir):
        """测试创建导出目录"""
        config = RuntimeConfig()
        config.storage.output_dir = temp_dir / "a" / "b"
        config.ensure_dirs()
        assert config.storage.output_dir.is_dir()


class TestLogging:
    """日志配置测试"""

    def test_configure_logging_level(self):
        """测试日志级别"""
        config = RuntimeConfig()
        config.logging.log_level = "debug"
        logger = configure_logging(config)
        assert logger.name == "certexport"
        assert logger.level == logging.DEBUG
        assert logger.handlers

    def test_configure_logging_file(self, temp_dir):
        """测试写入日志文件（重复初始化不重复添加）"""
        config = RuntimeConfig()
        config.logging.log_to_file = True
        config.logging.log_file = temp_dir / "logs" / "run.log"

        logger = configure_logging(config)
        configure_logging(config)
        file_handlers = [h for h in logger.handlers if isinstance(h, logging.FileHandler)]
        try:
            assert len(file_handlers) == 1
            assert config.logging.log_file.exists()
        finally:
            for handler in file_handlers:
                logger.removeHandler(handler)
                handler.close()


class TestTemplateLoader:
    """模板预设加载测试"""

    def test_load_presets(self):
        """测试加载内置模板"""
        registry = load_templates()
        assert registry.ids() == ["classic", "modern", "minimal", "elegant", "corporate"]
        assert registry.get_template_by_id("nope") is None

    def test_singleton_and_cache(self):
        """测试单例与缓存"""
        assert TemplateLoader() is TemplateLoader()
        assert TemplateLoader.load() is TemplateLoader.load()

    def test_category_filter(self):
        """测试按分类筛选"""
        registry = load_templates()
        assert [t.id for t in registry.get_templates_by_category("formal")] == ["classic", "elegant"]
        assert [t.id for t in registry.get_templates_by_category("modern")] == ["modern", "corporate"]
        assert registry.get_templates_by_category("creative") == []

    def test_to_document_fresh_ids(self):
        """测试每次生成新文档与新节点id"""
        preset = load_templates().get_template_by_id("classic")
        first = preset.to_document()
        second = preset.to_document()

        assert (first.width, first.height) == (842, 595)
        assert first.id != second.id
        assert {n.id for n in first.objects}.isdisjoint({n.id for n in second.objects})
        assert any(isinstance(n, ImageNode) and n.is_qr_placeholder for n in first.objects)

    @pytest.mark.parametrize("template_id", ["classic", "modern", "minimal", "elegant", "corporate"])
    def test_every_preset_builds(self, template_id):
        """测试每个模板均可生成文档且含占位符与二维码占位图"""
        document = load_templates().get_template_by_id(template_id).to_document()
        assert any("{recipient_name}" in n.text for n in document.text_nodes())
        assert [n for n in document.image_nodes() if n.is_qr_placeholder]

    def test_invalid_preset_file(self, temp_dir):
        """测试模板文件格式错误"""
        bad = temp_dir / "bad.yaml"
        bad.write_text("templates:\n  - id: x\n", encoding="utf-8")
        with pytest.raises(TemplateError):
            TemplateLoader.load(bad)

    def test_missing_preset_file(self, temp_dir):
        """测试模板文件不存在"""
        with pytest.raises(FileNotFoundError):
            TemplateLoader.load(temp_dir / "none.yaml")
