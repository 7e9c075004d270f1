"""
配置层 - 运行期配置、日志与模板预设

职责：
- 加载 config/certexport.yaml（运行期参数，支持环境变量覆盖）
- 初始化日志
- 加载证书模板预设（templates/presets.yaml）
"""

from .logging_setup import configure_logging
from .runtime_config import RuntimeConfig, get_config, reload_config
from .template_loader import TemplateLoader, TemplatePreset, TemplateRegistry, load_templates

__all__ = [
    "RuntimeConfig",
    "get_config",
    "reload_config",
    "configure_logging",
    "TemplateLoader",
    "TemplatePreset",
    "TemplateRegistry",
    "load_templates",
]
