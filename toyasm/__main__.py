#!/usr/bin/env python3
"""
Toy Assembler - Command Line Interface

Usage:
    python3 -m toyasm asm programs/sum.asm
    python3 -m toyasm asm programs/sum.asm -o sum.o --format legacy -v
    python3 -m toyasm disasm out/sum.o
    python3 -m toyasm verify out/sum.o programs/sum_expected.txt
"""

import argparse
import os
import sys
from pathlib import Path

from . import __version__
from .assembler import Assembler
from .config import AsmConfig, DEFAULT_CONFIG_NAME, load_config
from .disassembler import Disassembler
from .errors import AssemblerError, ConfigError
from .objfile import ObjectFormat, read_object
from .verify import verify_file


def _resolve_config(args) -> AsmConfig:
    if args.config:
        return load_config(args.config)
    if Path(DEFAULT_CONFIG_NAME).exists():
        return load_config(DEFAULT_CONFIG_NAME)
    return AsmConfig()


def _object_format(args, config: AsmConfig) -> ObjectFormat:
    if args.format:
        return ObjectFormat.from_name(args.format)
    return config.object_format


def cmd_asm(args, config: AsmConfig) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    verbose = args.verbose or config.verbose
    fmt = _object_format(args, config)

    # Default outputs: <output_dir>/<stem>.o and <output_dir>/<stem>.txt
    if args.output:
        output_path = args.output
        text_path = args.text_dump
    else:
        os.makedirs(config.output_dir, exist_ok=True)
        output_path = os.path.join(config.output_dir, f"{input_path.stem}.o")
        text_path = args.text_dump
        if text_path is None and config.write_text_dump:
            text_path = os.path.join(config.output_dir, f"{input_path.stem}.txt")

    asm = Assembler(verbose=verbose)
    asm.assemble_file(str(input_path), output_path, fmt)

    if text_path:
        asm.write_text_dump(text_path)
        if verbose:
            print(f"Text dump written to: {text_path}")

    if args.listing:
        print("\n" + asm.get_listing())

    print(f"Assembly successful: {len(asm.instructions)} instructions -> {output_path}")
    return 0


def cmd_disasm(args, config: AsmConfig) -> int:
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {args.input}", file=sys.stderr)
        return 1

    dis = Disassembler(verbose=args.verbose or config.verbose)
    dis.disassemble_file(str(input_path), _object_format(args, config))
    print(dis.get_listing())
    return 0


def cmd_verify(args, config: AsmConfig) -> int:
    for path in (args.object, args.expected):
        if not Path(path).exists():
            print(f"Error: Input file not found: {path}", file=sys.stderr)
            return 1

    words = read_object(args.object, _object_format(args, config))
    report = verify_file(words, args.expected)
    print(report.summary())
    return 0 if report.all_match else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="toyasm",
        description="Toy machine assembler and disassembler",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s asm programs/sum.asm
  %(prog)s asm programs/sum.asm -o sum.o --format legacy
  %(prog)s disasm out/sum.o
  %(prog)s verify out/sum.o programs/sum_expected.txt
        """,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "-c",
        "--config",
        type=str,
        help=f"YAML configuration file (default: ./{DEFAULT_CONFIG_NAME} if present)",
    )
    common.add_argument(
        "-f",
        "--format",
        choices=[f.value for f in ObjectFormat],
        help="Object file format (overrides config)",
    )
    common.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose output",
    )

    sub = parser.add_subparsers(dest="command", required=True)

    p_asm = sub.add_parser("asm", parents=[common], help="Assemble a source file")
    p_asm.add_argument("input", type=str, help="Input assembly file (.asm)")
    p_asm.add_argument(
        "-o",
        "--output",
        type=str,
        help="Output object file. Defaults to <output_dir>/<name>.o",
    )
    p_asm.add_argument(
        "-t",
        "--text-dump",
        type=str,
        help="Write a grouped-binary text dump to this path",
    )
    p_asm.add_argument(
        "-l",
        "--listing",
        action="store_true",
        help="Print assembly listing",
    )
    p_asm.set_defaults(func=cmd_asm)

    p_dis = sub.add_parser("disasm", parents=[common], help="Disassemble an object file")
    p_dis.add_argument("input", type=str, help="Input object file")
    p_dis.set_defaults(func=cmd_disasm)

    p_ver = sub.add_parser(
        "verify", parents=[common], help="Compare an object file with expected words"
    )
    p_ver.add_argument("object", type=str, help="Object file to check")
    p_ver.add_argument("expected", type=str, help="Expected-output text file")
    p_ver.set_defaults(func=cmd_verify)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    try:
        config = _resolve_config(args)
        return args.func(args, config)
    except (AssemblerError, ConfigError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
