"""
日志配置 - 按运行期配置初始化 logging

各模块统一使用 logging.getLogger(__name__)，此处只负责根记录器的级别与输出
"""

from __future__ import annotations

import logging

from .runtime_config import RuntimeConfig, get_config

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: RuntimeConfig | None = None) -> logging.Logger:
    """初始化 certexport 记录器，返回该记录器"""
    config = config or get_config()
    logger = logging.getLogger("certexport")
    logger.setLevel(config.logging.log_level.upper())

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    if config.logging.log_to_file:
        log_file = config.logging.log_file
        log_file.parent.mkdir(parents=True, exist_ok=True)
        if not any(
            isinstance(h, logging.FileHandler) and h.baseFilename == str(log_file.resolve())
            for h in logger.handlers
        ):
            file_handler = logging.FileHandler(log_file, encoding="utf-8")
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)

    return logger
