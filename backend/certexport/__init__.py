"""
证书导出系统 - 后端核心模块

模块结构：
- config/        运行期配置、日志与证书模板预设加载
- models/        数据模型定义（占位符/画布文档/导出选项）
- placeholders/  占位符目录与文本替换引擎
- export/        栅格化、PDF组装、二维码替换、快照还原
- pipeline/      导出编排（快照→替换→二维码→下载→还原）
"""

__version__ = "0.1.0"
