"""
证书编号生成 - CERT-{毫秒时间戳base36}-{32位随机hex}（大写）
"""

from __future__ import annotations

import secrets
import time

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_certificate_id(timestamp_ms: int | None = None) -> str:
    """生成证书编号"""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    random_part = secrets.token_hex(16)
    return f"CERT-{_to_base36(timestamp_ms)}-{random_part}".upper()
