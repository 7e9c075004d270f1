"""
运行期配置 - 读取 config/certexport.yaml

职责：
- 加载导出默认值/二维码服务/存储路径/日志等运行参数
- 提供环境变量覆盖机制（CERTEXPORT_ 前缀，嵌套用 __）
- 类型安全的配置访问
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from ..models import ExportQuality, Orientation, PaperFormat

DEFAULT_CONFIG_PATH = Path("config/certexport.yaml")


class ExportDefaultsConfig(BaseModel):
    """导出默认值"""

    format: PaperFormat = PaperFormat.A4
    orientation: Orientation = Orientation.LANDSCAPE
    quality: ExportQuality = ExportQuality.HIGH
    bleed_mm: float = 3.0
    crop_mark_length_mm: float = 5.0
    crop_mark_line_width_mm: float = 0.25
    default_filename: str = "certificate"


class QRConfig(BaseModel):
    """二维码服务配置"""

    service_url: str = "https://api.qrserver.com/v1/create-qr-code/"
    verify_base_url: str = "http://localhost:3000"
    preview_size: int = 150
    replace_size: int = 300
    fetch_timeout_sec: float = 10.0


class StorageConfig(BaseModel):
    """存储配置"""

    output_dir: Path = Path("storage/exports")
    templates_path: Path | None = None


class LoggingConfig(BaseModel):
    """日志配置"""

    log_level: str = "INFO"
    log_to_file: bool = False
    log_file: Path = Path("storage/logs/certexport.log")


class RuntimeConfig(BaseSettings):
    """运行期配置（支持环境变量覆盖）"""

    export: ExportDefaultsConfig = Field(default_factory=ExportDefaultsConfig)
    qr: QRConfig = Field(default_factory=QRConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {
        "env_prefix": "CERTEXPORT_",
        "env_nested_delimiter": "__",
        "arbitrary_types_allowed": True,
    }

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """环境变量优先于初始化参数（YAML内容以初始化参数传入，按键深度合并）"""
        return env_settings, init_settings, dotenv_settings, file_secret_settings

    @classmethod
    def from_yaml(cls, yaml_path: str | Path) -> RuntimeConfig:
        """从YAML文件加载配置"""
        path = Path(yaml_path)
        if not path.exists():
            return cls()

        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        options = data.get("certificate_export", {})

        # 以普通字典传入，环境变量可逐键覆盖
        config = cls(
            export=cls._extract(options, "export"),
            qr=cls._extract(options, "qr"),
            storage=cls._extract(options, "storage"),
            logging=cls._extract(options, "logging"),
        )

        config._resolve_paths(base_dir=path.parent)
        return config

    @staticmethod
    def _extract(data: dict[str, Any], key: str) -> dict[str, Any]:
        """提取并展平配置（支持 {default: x} 写法）"""
        section = data.get(key, {}) or {}
        result = {}
        for k, v in section.items():
            if isinstance(v, dict) and "default" in v:
                result[k] = v["default"]
            elif not isinstance(v, dict):
                result[k] = v
        return result

    def _resolve_paths(self, base_dir: Path) -> None:
        """解析相对路径配置为绝对路径（基于配置文件所在目录）"""
        if not self.storage.output_dir.is_absolute():
            self.storage.output_dir = (base_dir / self.storage.output_dir).resolve()
        templates_path = self.storage.templates_path
        if templates_path and not templates_path.is_absolute():
            self.storage.templates_path = (base_dir / templates_path).resolve()

    def ensure_dirs(self) -> None:
        """确保导出目录存在"""
        self.storage.output_dir.mkdir(parents=True, exist_ok=True)


# 全局配置实例
_config: RuntimeConfig | None = None


def get_config() -> RuntimeConfig:
    """获取全局配置（惰性加载）"""
    global _config
    if _config is None:
        _config = RuntimeConfig.from_yaml(DEFAULT_CONFIG_PATH)
    return _config


def reload_config(yaml_path: str | Path | None = None) -> RuntimeConfig:
    """重新加载配置"""
    global _config
    path = yaml_path or DEFAULT_CONFIG_PATH
    _config = RuntimeConfig.from_yaml(path)
    return _config
