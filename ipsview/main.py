# ipsview/main.py
import argparse
import logging
import sys

from rich.console import Console

from ipsview.logger import setup_ipsview_logger
from ipsview.config import IpsViewConfig, OUTPUT_FORMATS
from ipsview.errors import FormatError, IpsViewConfigError
from ipsview.crash_report import decode_file, build_sections
from ipsview.renderers import render, tree_to_text

EPILOG = """
Examples:
  %(prog)s crash.ips
  %(prog)s crash.ips > crash.txt
  %(prog)s --format html -o crash.html crash.ips
  %(prog)s --format tree crash.ips
"""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ipsview",
        description="Convert an Apple crash report (.ips) to a readable format.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=EPILOG,
    )
    parser.add_argument("input", nargs="?", help="Path to the .ips file")
    parser.add_argument("--format", "-f", dest="output_format", choices=OUTPUT_FORMATS, default=None,
                        help="Output format (default: from config, normally 'text').")
    parser.add_argument("--output", "-o", default=None,
                        help="Write the result to this file instead of standard output.")
    parser.add_argument("--keep-uuid-hyphens", action="store_true",
                        help="Print binary image UUIDs with their hyphens.")
    parser.add_argument("--expand-all", action="store_true",
                        help="Expand every branch in tree output.")
    parser.add_argument("--config", default=None,
                        help="Optional path to an alternate config file (otherwise uses ~/.ipsview/config.json).")
    parser.add_argument("--log-level", default=None, choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Set the logging level for ipsview.")
    parser.add_argument("--quiet", action="store_true",
                        help="Minimize console output (overrides log-level to WARNING).")
    return parser


def write_output(result, fmt: str, output_path: str = None) -> None:
    if fmt == "tree":
        if output_path:
            result = tree_to_text(result)
        else:
            Console().print(result)
            return

    if output_path:
        with open(output_path, "w", encoding="utf-8") as f:
            f.write(result)
    else:
        sys.stdout.write(result)


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.input:
        parser.print_help(sys.stderr)
        return 1

    # 1) Load configuration
    try:
        cfg = IpsViewConfig.load(args.config)
    except IpsViewConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    # 2) Configure logging
    level_name = args.log_level or str(cfg.get("log_level", "INFO"))
    log_level = logging._nameToLevel.get(level_name.upper(), logging.INFO)
    if args.quiet:
        log_level = logging.WARNING
    logger = setup_ipsview_logger(
        log_level,
        log_to_file=cfg.get("log_to_file", False),
        log_file=cfg.get("log_file"),
    )

    fmt = args.output_format or cfg.get("output_format", "text")
    # Only the text format follows Apple's hyphen-less UUIDs
    compact_uuids = fmt == "text" and cfg.get("compact_uuids", True) and not args.keep_uuid_hyphens

    # 3) Read and decode
    try:
        metadata, report = decode_file(args.input)
    except (OSError, UnicodeDecodeError) as e:
        reason = e.strerror if isinstance(e, OSError) and e.strerror else str(e)
        print(f"Error: Cannot read file '{args.input}': {reason}", file=sys.stderr)
        return 1
    except FormatError as e:
        logger.debug(f"Decode failed in phase '{e.phase}'")
        print(f"Error: Failed to parse IPS file: {e}", file=sys.stderr)
        return 1

    # 4) Build and render
    sections = build_sections(report, metadata)
    options = {"compact_uuids": compact_uuids}
    if fmt == "html":
        options["standalone"] = True
        options["title"] = f"{report.proc_name or 'Crash Report'}"
    elif fmt == "tree":
        options["expand_all"] = args.expand_all
        options["title"] = f"{report.proc_name or 'Crash Report'}"

    result = render(sections, fmt, **options)

    try:
        write_output(result, fmt, args.output)
    except OSError as e:
        print(f"Error: Cannot write file '{args.output}': {e.strerror or e}", file=sys.stderr)
        return 1

    if args.output:
        logger.info(f"Wrote {fmt} report to {args.output}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
