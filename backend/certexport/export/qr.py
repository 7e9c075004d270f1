"""
二维码处理 - 验证链接生成与二维码占位图替换

职责：
1. 生成证书验证链接及二维码图片服务URL（纯函数）
2. 异步加载二维码图片（httpx）
3. 替换文档中的二维码占位图节点（并发加载，逐节点失败隔离）

依赖：
- httpx: 异步HTTP
- Pillow: 图片解码

测试要点：
- test_qr_url_deterministic: 相同输入URL恒定
- test_replace_keeps_geometry: 新节点继承位置/缩放/旋转
- test_replace_partial_failure: 单个节点加载失败不影响其他节点
"""

from __future__ import annotations

import asyncio
import io
import logging
from urllib.parse import quote

import httpx
from PIL import Image, UnidentifiedImageError

from ..config import get_config
from ..interfaces import IImageLoader, QRCodeError
from ..models import Document, ImageNode

logger = logging.getLogger(__name__)

# 与浏览器 encodeURIComponent 一致的保留字符
_URI_COMPONENT_SAFE = "-_.!~*'()"


def build_verification_url(certificate_id: str, base_verify_url: str | None = None) -> str:
    """证书验证链接 {base}/verify/{id}"""
    base = base_verify_url if base_verify_url is not None else get_config().qr.verify_base_url
    return f"{base.rstrip('/')}/verify/{certificate_id}"


def generate_qr_code_url(
    certificate_id: str,
    size: int = 150,
    base_verify_url: str | None = None,
) -> str:
    """生成二维码图片服务URL（size×size PNG）"""
    service_url = get_config().qr.service_url
    verify_url = build_verification_url(certificate_id, base_verify_url)
    data = quote(verify_url, safe=_URI_COMPONENT_SAFE)
    return f"{service_url}?size={size}x{size}&data={data}"


class HttpImageLoader(IImageLoader):
    """基于httpx的图片加载器"""

    def __init__(self, timeout: float | None = None, client: httpx.AsyncClient | None = None):
        self.timeout = timeout if timeout is not None else get_config().qr.fetch_timeout_sec
        self._client = client

    async def load(self, url: str) -> Image.Image:
        """下载并解码图片"""
        try:
            if self._client is not None:
                response = await self._client.get(url, follow_redirects=True)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.get(url, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise QRCodeError(f"图片下载失败: {url}: {e}") from e

        try:
            image = Image.open(io.BytesIO(response.content))
            image.load()
        except (UnidentifiedImageError, OSError) as e:
            raise QRCodeError(f"图片解码失败: {url}") from e
        return image


async def _load_isolated(
    loader: IImageLoader, node: ImageNode, url: str
) -> Image.Image | None:
    """加载单个二维码，失败记录日志并返回None"""
    try:
        return await loader.load(url)
    except Exception as e:
        logger.warning(f"二维码加载失败，保留占位图: node={node.id} error={e}")
        return None


async def replace_qr_placeholders(
    document: Document,
    certificate_id: str,
    loader: IImageLoader | None = None,
    size: int | None = None,
) -> int:
    """
    替换文档中的二维码占位图

    所有占位节点并发加载，加载完成后按文档顺序原位替换；
    单个节点失败仅记录日志，该节点保留占位图。

    Returns:
        成功替换的节点数
    """
    placeholders = [node for node in document.image_nodes() if node.is_qr_placeholder]
    if not placeholders:
        return 0

    loader = loader or HttpImageLoader()
    size = size or get_config().qr.replace_size
    url = generate_qr_code_url(certificate_id, size)

    images = await asyncio.gather(
        *(_load_isolated(loader, node, url) for node in placeholders)
    )

    replaced = 0
    for old, image in zip(placeholders, images):
        if image is None:
            continue
        index = document.index_of(old)
        if index < 0:
            continue
        new_node = ImageNode(
            left=old.left,
            top=old.top,
            scale_x=old.scale_x,
            scale_y=old.scale_y,
            angle=old.angle,
            origin_x=old.origin_x,
            origin_y=old.origin_y,
            width=image.width,
            height=image.height,
            src=url,
            image=image,
        )
        document.remove(old)
        document.insert(index, new_node)
        replaced += 1

    document.render_all()
    logger.info(f"二维码替换完成: {replaced}/{len(placeholders)} certificate_id={certificate_id}")
    return replaced
