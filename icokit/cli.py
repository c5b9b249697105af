"""Командная строка: сборка иконки из PNG-файлов, просмотр каталога, извлечение изображений."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Optional, Sequence

from icokit import config
from icokit.exceptions import IconError
from icokit.logs import log_error, log_info, setup_logging
from icokit.models.icon import Icon
from icokit.services import ico_codec
from icokit.services.icon_service import IconService


def _kinds(value: str):
    try:
        return config.parse_kinds(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from exc


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="icokit", description="Read and write Windows .ico files.")
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build an icon from every *.png in a directory.")
    build.add_argument("source", type=Path, help="Directory with PNG images.")
    build.add_argument("-o", "--output", type=Path, default=Path("icon.ico"), help="Output .ico path.")
    build.add_argument(
        "--formats",
        type=_kinds,
        default=config.DEFAULT_FORMATS,
        help="Comma separated variant kinds per image: png, bmp (default: %(default)s).",
    )

    info = sub.add_parser("info", help="Print the directory table of an icon.")
    info.add_argument("file", type=Path)

    extract = sub.add_parser("extract", help="Write every image of an icon as PNG.")
    extract.add_argument("file", type=Path)
    extract.add_argument("-o", "--output", type=Path, default=Path("."), help="Output directory.")
    return parser


def cmd_build(args: argparse.Namespace, service: IconService) -> int:
    if not args.source.is_dir():
        raise FileNotFoundError(f"Каталог не найден: {args.source}")

    icon = Icon()
    for path in sorted(args.source.glob("*.png")):
        image = service.import_image(path)
        icon.images.extend(service.build_variants(image, args.formats))

    service.save_icon(icon, args.output)
    print(f"Wrote {len(icon.images)} icon images to '{args.output}'.")
    return 0


def cmd_info(args: argparse.Namespace, service: IconService) -> int:
    icon_file = service.load_icon(args.file)
    print(f"{icon_file.path}: {len(icon_file.entries)} images, {icon_file.size_bytes} bytes")
    print(f"{'#':>3}  {'kind':<4}  {'size':>9}  {'bpp':>3}  {'bytes':>8}  {'offset':>8}")
    for index, (entry, variant) in enumerate(zip(icon_file.entries, icon_file.icon.images)):
        dims = f"{entry.actual_width}x{entry.actual_height}"
        print(f"{index:>3}  {variant.kind:<4}  {dims:>9}  {entry.bits_per_pixel:>3}  {entry.size:>8}  {entry.offset:>8}")

    problems = ico_codec.validate_layout(icon_file.entries, icon_file.size_bytes or 0)
    if problems:
        for problem in problems:
            print(f"layout: {problem}")
    else:
        print("layout: ok")
    return 0


def cmd_extract(args: argparse.Namespace, service: IconService) -> int:
    icon_file = service.load_icon(args.file)
    args.output.mkdir(parents=True, exist_ok=True)
    for index, variant in enumerate(icon_file.icon.images):
        target = args.output / f"{icon_file.path.stem}_{index}_{variant.width}x{variant.height}_{variant.kind}.png"
        service.preview(variant).save(target, format="PNG")
        print(f"Wrote {target}")
    return 0


COMMANDS = {
    "build": cmd_build,
    "info": cmd_info,
    "extract": cmd_extract,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging()
    service = IconService()
    try:
        code = COMMANDS[args.command](args, service)
    except (IconError, OSError, ValueError) as exc:
        log_error(f"{args.command} failed: {exc}")
        print(f"error: {exc}", file=sys.stderr)
        return 1
    log_info(f"{args.command} finished")
    return code


if __name__ == "__main__":
    sys.exit(main())
