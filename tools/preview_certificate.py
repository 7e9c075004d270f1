import argparse
import asyncio
from pathlib import Path

from certexport.config import configure_logging, load_templates
from certexport.models import CertificateExportOptions
from certexport.pipeline import export_with_options, generate_certificate_id
from certexport.placeholders import find_unknown_tokens, get_sample_placeholder_data


def main() -> int:
    parser = argparse.ArgumentParser(
        description="Render a certificate template preset with sample data."
    )
    parser.add_argument(
        "--template",
        default="classic",
        help="模板预设id（默认：classic）",
    )
    parser.add_argument(
        "--file-type",
        choices=["pdf", "png", "both"],
        default="pdf",
        help="输出类型（默认：pdf）",
    )
    parser.add_argument(
        "--quality",
        choices=["standard", "high", "print", "print-300dpi"],
        default="high",
        help="导出质量（默认：high）",
    )
    parser.add_argument(
        "--bleed",
        action="store_true",
        help="添加3mm出血与裁切线",
    )
    parser.add_argument(
        "--out-dir",
        default="storage/exports",
        help="输出目录（默认：storage/exports）",
    )
    parser.add_argument(
        "--no-qr",
        action="store_true",
        help="不生成证书编号，保留二维码占位图（离线预览）",
    )
    args = parser.parse_args()

    configure_logging()

    registry = load_templates()
    preset = registry.get_template_by_id(args.template)
    if preset is None:
        print(f"未找到模板: {args.template}（可选：{', '.join(registry.ids())}）")
        return 1

    document = preset.to_document()
    unknown = sorted({t for node in document.text_nodes() for t in find_unknown_tokens(node.text)})
    if unknown:
        print(f"未登记占位符（将原样保留）: {', '.join(unknown)}")

    data = get_sample_placeholder_data()
    data.certificate_id = None if args.no_qr else generate_certificate_id()

    options = CertificateExportOptions(
        quality=args.quality,
        file_type=args.file_type,
        include_bleed=args.bleed,
        filename=f"{preset.id}-preview",
    )
    paths = asyncio.run(
        export_with_options(document, options, data, output_dir=Path(args.out_dir))
    )
    for path in paths:
        print(f"输出: {path}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
