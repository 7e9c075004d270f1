"""
pytest 配置与公共 fixtures

使用方式：
    def test_something(sample_document, sample_data):
        prepare_canvas_for_export(sample_document, sample_data)
"""

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Generator

import pytest
from PIL import Image

from certexport.config import RuntimeConfig
from certexport.interfaces import IImageLoader, QRCodeError
from certexport.models import (
    CertificateExportOptions,
    Document,
    ImageNode,
    PlaceholderData,
    ShapeNode,
    TextNode,
)


# ============================================================================
# 配置 Fixtures
# ============================================================================

@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """运行期配置"""
    return RuntimeConfig()


# ============================================================================
# 数据模型 Fixtures
# ============================================================================

@pytest.fixture
def sample_data() -> PlaceholderData:
    """示例替换数据"""
    return PlaceholderData(
        recipient_name="Ann Lee",
        event_name="PyCon 2026",
        certificate_id="CERT-123",
        certificate_type="Excellence",
        issue_date="2026-10-19",
    )


@pytest.fixture
def sample_document() -> Document:
    """示例画布文档（背景/文本/二维码占位图）"""
    return Document(
        width=400,
        height=300,
        background="#ffffff",
        objects=[
            ShapeNode(type="rect", left=10, top=10, width=380, height=280, stroke="#b8860b"),
            TextNode(text="Certificate of {certificate_type}", left=200, top=30, width=300,
                     origin_x="center", text_align="center", font_size=24),
            TextNode(text="{recipient_name}", left=200, top=100, width=300,
                     origin_x="center", text_align="center", font_size=32),
            ImageNode(left=300, top=200, width=60, height=60, scale_x=0.5, scale_y=0.5,
                      angle=15, is_qr_placeholder=True),
            TextNode(text="ID: {certificate_id} / {unknown_field}", left=20, top=260, width=300),
        ],
    )


@pytest.fixture
def export_options() -> CertificateExportOptions:
    """示例导出选项（低倍率，加快测试）"""
    return CertificateExportOptions(quality="standard")


# ============================================================================
# 二维码加载 Fixtures
# ============================================================================

class FakeImageLoader(IImageLoader):
    """离线图片加载器（按调用序号模拟失败）"""

    def __init__(self, fail_calls: set[int] | None = None, size: int = 300):
        self.fail_calls = fail_calls or set()
        self.size = size
        self.urls: list[str] = []

    async def load(self, url: str) -> Image.Image:
        index = len(self.urls)
        self.urls.append(url)
        if index in self.fail_calls:
            raise QRCodeError(f"模拟加载失败: {url}")
        return Image.new("RGB", (self.size, self.size), (0, 0, 0))


@pytest.fixture
def fake_loader() -> FakeImageLoader:
    return FakeImageLoader()


@pytest.fixture
def loader_factory() -> type[FakeImageLoader]:
    """按需构造离线加载器（可指定失败序号）"""
    return FakeImageLoader


# ============================================================================
# 文件 Fixtures
# ============================================================================

@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """临时目录"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
