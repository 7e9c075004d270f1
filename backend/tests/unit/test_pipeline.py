"""
导出编排单元测试

每个模块完成后必须运行：pytest backend/tests/unit/test_pipeline.py -v
"""

import re

import pytest

from certexport.interfaces import ExportError, ExportInProgressError
from certexport.models import CertificateExportOptions, Document, PlaceholderData
from certexport.pipeline import (
    default_export_options,
    export_guard,
    export_with_options,
    generate_and_download_certificate,
    generate_certificate_id,
)


def _snapshot_state(document: Document):
    return [(node.id, getattr(node, "text", None)) for node in document.objects]


class TestGenerateAndDownload:
    """证书生成与下载测试"""

    @pytest.mark.asyncio
    async def test_generate_restores_on_success(
        self, sample_document, sample_data, fake_loader, export_options, temp_dir
    ):
        """测试成功导出后文档还原"""
        before = _snapshot_state(sample_document)

        path = await generate_and_download_certificate(
            sample_document, sample_data, "ann.pdf", export_options,
            loader=fake_loader, output_dir=temp_dir,
        )

        assert path == temp_dir / "ann.pdf"
        assert path.read_bytes().startswith(b"%PDF")
        assert _snapshot_state(sample_document) == before
        assert sample_document.image_nodes()[0].is_qr_placeholder
        assert len(fake_loader.urls) == 1
        assert not export_guard.is_exporting(sample_document)

    @pytest.mark.asyncio
    async def test_generate_restores_on_failure(
        self, sample_document, sample_data, fake_loader, export_options, temp_dir, monkeypatch
    ):
        """测试导出异常时文档仍还原"""
        seen = {}

        def failing_download(document, options, output_dir=None):
            seen["texts"] = [node.text for node in document.text_nodes()]
            raise ExportError("磁盘已满")

        monkeypatch.setattr(
            "certexport.pipeline.orchestrator.download_certificate_pdf", failing_download
        )
        before = _snapshot_state(sample_document)

        with pytest.raises(ExportError):
            await generate_and_download_certificate(
                sample_document, sample_data, options=export_options,
                loader=fake_loader, output_dir=temp_dir,
            )

        assert "Ann Lee" in seen["texts"]
        assert _snapshot_state(sample_document) == before
        assert not export_guard.is_exporting(sample_document)

    @pytest.mark.asyncio
    async def test_generate_accepts_mapping(self, sample_document, fake_loader, export_options, temp_dir):
        """测试字典形式的数据"""
        path = await generate_and_download_certificate(
            sample_document, {"recipient_name": "Bo"}, options=export_options,
            loader=fake_loader, output_dir=temp_dir,
        )
        assert path.name == "certificate.pdf"

    @pytest.mark.asyncio
    async def test_qr_skipped_without_certificate_id(
        self, sample_document, fake_loader, export_options, temp_dir
    ):
        """测试无证书编号不替换二维码"""
        await generate_and_download_certificate(
            sample_document, PlaceholderData(recipient_name="Ann"), options=export_options,
            loader=fake_loader, output_dir=temp_dir,
        )
        assert fake_loader.urls == []

    @pytest.mark.asyncio
    async def test_concurrent_export_rejected(
        self, sample_document, sample_data, fake_loader, export_options, temp_dir
    ):
        """测试同一文档导出中拒绝再次导出"""
        with export_guard.hold(sample_document):
            with pytest.raises(ExportInProgressError):
                await generate_and_download_certificate(
                    sample_document, sample_data, options=export_options,
                    loader=fake_loader, output_dir=temp_dir,
                )
        assert fake_loader.urls == []

    @pytest.mark.asyncio
    async def test_other_document_not_blocked(self, sample_document, fake_loader, export_options, temp_dir):
        """测试不同文档互不影响"""
        other = Document(width=100, height=80)
        with export_guard.hold(other):
            path = await generate_and_download_certificate(
                sample_document, {}, options=export_options,
                loader=fake_loader, output_dir=temp_dir,
            )
        assert path.exists()


class TestExportWithOptions:
    """按选项导出测试"""

    @pytest.mark.asyncio
    async def test_export_with_options_both(self, sample_document, sample_data, fake_loader, temp_dir):
        """测试同时输出PDF与PNG"""
        options = CertificateExportOptions(quality="standard", file_type="both", filename="award.pdf")

        paths = await export_with_options(
            sample_document, options, sample_data, loader=fake_loader, output_dir=temp_dir,
        )

        assert [p.name for p in paths] == ["award.pdf", "award.png"]
        assert all(p.exists() for p in paths)
        assert len(fake_loader.urls) == 1

    @pytest.mark.asyncio
    async def test_export_png_only(self, sample_document, temp_dir):
        """测试仅PNG，无数据时不替换"""
        options = CertificateExportOptions(quality="standard", file_type="png")
        before = _snapshot_state(sample_document)

        paths = await export_with_options(sample_document, options, output_dir=temp_dir)

        assert [p.name for p in paths] == ["certificate.png"]
        assert _snapshot_state(sample_document) == before


class TestHelpers:
    """辅助函数测试"""

    def test_default_export_options(self):
        """测试默认选项来自配置"""
        options = default_export_options(quality="print")
        assert options.format.value == "A4"
        assert options.orientation.value == "landscape"
        assert options.quality.value == "print"
        assert options.bleed_mm == 3

    def test_certificate_id_format(self):
        """测试证书编号格式"""
        cert_id = generate_certificate_id()
        assert re.fullmatch(r"CERT-[0-9A-Z]+-[0-9A-F]{32}", cert_id)

    def test_certificate_id_timestamp(self):
        """测试时间戳部分为base36"""
        assert generate_certificate_id(36 ** 2).startswith("CERT-100-")
        assert generate_certificate_id(1) != generate_certificate_id(1)
