"""Command-line entry points: trm2obj, trm2stl and trt2png."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

from .errors import ConsistencyError, ParseError
from .obj_export import DEFAULT_OBJECT_NAME, ConvertOptions, prepare_mesh, summarize, write_outputs
from .palette import read_palette
from .records import decode_text, parse_position_text
from .stl_export import write_stl
from .texture import convert_texture, meta_path_for


EXIT_OK = 0
EXIT_USAGE = 1
EXIT_PARSE_ERROR = 11
EXIT_IO_ERROR = 12
EXIT_CONSISTENCY_ERROR = 13


def normalize_texture_dir(text: str | None) -> str:
    if not text:
        return ""
    if not text.endswith("/"):
        return text + "/"
    return text


def require_file(path: Path | None, label: str) -> bool:
    if path is None or not path.is_file():
        print(f"Invalid {label} path.", file=sys.stderr)
        return False
    return True


def require_output(path: Path | None, label: str) -> bool:
    if path is None:
        print(f"Invalid {label} output path.", file=sys.stderr)
        return False
    return True


def emit_summary(summary: dict[str, object], summary_json: Path | None) -> None:
    out_json = json.dumps(summary, indent=2)
    print(out_json)
    if summary_json:
        summary_json.parent.mkdir(parents=True, exist_ok=True)
        summary_json.write_text(out_json, encoding="utf-8")


def build_trm2obj_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert dig .TRM object meshes into .OBJ/.MTL files.")
    parser.add_argument("-i", "--input", type=Path, help="Path to the input .TRM file.")
    parser.add_argument("-o", "--obj", type=Path, help="Path to the output .OBJ file.")
    parser.add_argument("-m", "--mtl", type=Path, help="Path to the output .MTL file.")
    parser.add_argument("-p", "--palette", type=Path, help="Path to the level's .PAL palette file.")
    parser.add_argument("-t", "--texture-dir", default="", help="Directory holding the object textures as .PNG files.")
    parser.add_argument("--object-name", default=DEFAULT_OBJECT_NAME)
    parser.add_argument("--summary-json", type=Path, default=None, help="Optional path for JSON summary output.")
    return parser


def trm2obj_main(argv: list[str] | None = None) -> int:
    args = build_trm2obj_parser().parse_args(argv)

    if not require_file(args.input, "input"):
        return EXIT_USAGE
    if not require_output(args.obj, ".OBJ") or not require_output(args.mtl, ".MTL"):
        return EXIT_USAGE
    if not require_file(args.palette, "palette"):
        return EXIT_USAGE

    options = ConvertOptions(
        texture_dir=normalize_texture_dir(args.texture_dir),
        object_name=args.object_name,
    )

    try:
        text = decode_text(args.input.read_bytes())
        palette = read_palette(args.palette)
        records, mesh = prepare_mesh(text, palette, options)
    except OSError as exc:
        print(f"I/O error reading input: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR
    except ParseError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_PARSE_ERROR
    except ConsistencyError as exc:
        print(f"Internal consistency failure: {exc}", file=sys.stderr)
        return EXIT_CONSISTENCY_ERROR

    try:
        for out in (args.obj, args.mtl):
            out.parent.mkdir(parents=True, exist_ok=True)
        with args.mtl.open("w", encoding="utf-8", newline="\n") as mtl, args.obj.open(
            "w", encoding="utf-8", newline="\n"
        ) as obj:
            write_outputs(mesh, obj, mtl, args.mtl.name, options)
    except OSError as exc:
        print(f"Failed to open the output file: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR

    summary = {
        "input": str(args.input.resolve()),
        "obj": str(args.obj.resolve()),
        "mtl": str(args.mtl.resolve()),
        **summarize(text, records, mesh).__dict__,
    }
    emit_summary(summary, args.summary_json)
    return EXIT_OK


def build_trm2stl_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert dig .TRM room meshes into ASCII .STL files.")
    parser.add_argument("-i", "--input", type=Path, help="Path to the input .TRM file.")
    parser.add_argument("-o", "--output", type=Path, help="Path to the output .STL file.")
    parser.add_argument("--solid-name", default="room")
    return parser


def trm2stl_main(argv: list[str] | None = None) -> int:
    args = build_trm2stl_parser().parse_args(argv)

    if not require_file(args.input, "input"):
        return EXIT_USAGE
    if args.output is None:
        print("Invalid output path.", file=sys.stderr)
        return EXIT_USAGE

    try:
        records = parse_position_text(decode_text(args.input.read_bytes()))
    except OSError as exc:
        print(f"I/O error reading input: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR
    except ParseError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_PARSE_ERROR

    try:
        args.output.parent.mkdir(parents=True, exist_ok=True)
        with args.output.open("w", encoding="utf-8", newline="\n") as f:
            triangles = write_stl(f, records, solid_name=args.solid_name)
    except OSError as exc:
        print(f"Failed to open the output file: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR

    print(f"Wrote {triangles} triangles from {len(records)} polygons to {args.output}")
    return EXIT_OK


def build_trt2png_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Convert dig .TRT texture atlases into .PNG images.")
    parser.add_argument("-i", "--input", type=Path, help="Path to the input .TRT file (with its .mta sidecar).")
    parser.add_argument("-o", "--output", type=Path, help="Path to the output .PNG file.")
    parser.add_argument("-p", "--palette", type=Path, help="Path to the palette .PAL file.")
    parser.add_argument("--opaque", action="store_true", help="Keep palette index 0 opaque instead of transparent.")
    return parser


def trt2png_main(argv: list[str] | None = None) -> int:
    args = build_trt2png_parser().parse_args(argv)

    if args.input is None or not args.input.is_file() or not meta_path_for(args.input).is_file():
        print("No valid input file given.", file=sys.stderr)
        return EXIT_USAGE
    if args.palette is None or not args.palette.is_file():
        print("No valid palette file given.", file=sys.stderr)
        return EXIT_USAGE
    if args.output is None:
        print("No valid output file given.", file=sys.stderr)
        return EXIT_USAGE

    try:
        width, height = convert_texture(args.input, args.palette, args.output, transparent_zero=not args.opaque)
    except OSError as exc:
        print(f"I/O error: {exc}", file=sys.stderr)
        return EXIT_IO_ERROR
    except ParseError as exc:
        print(str(exc), file=sys.stderr)
        return EXIT_PARSE_ERROR

    print(f"Wrote {width}x{height} image to {args.output}")
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(trm2obj_main())
