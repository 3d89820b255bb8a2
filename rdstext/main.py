#!/usr/bin/env python3
"""
rdstext: RDS RadioText from playout "now playing" metadata

Reads the artist/title record a playout tool writes, normalizes and fits it
into the RadioText budget, and writes RT, RT+ and the localized prefix.
"""

import argparse
import csv
import sys
from pathlib import Path
from typing import List, Optional

from rdstext.filesystem.file_ops import (
    OutputNames, read_raw_record, read_records, write_outputs, write_text_atomic
)
from rdstext.models.schemas import DelimiterKey, OutputBundle
from rdstext.pipeline.orchestrator import RdsTextPipeline
from rdstext.utils.config_loader import get_config_template, load_config, to_normalization_config
from rdstext.utils.exceptions import ConfigurationError, RdsTextError
from rdstext.utils.logging_config import log_processing_progress, setup_logging

DEFAULT_CONFIG_NAME = "rdstext.yaml"


def parse_arguments(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="rdstext",
        description="Build RDS RadioText, RT+ and prefix strings from playout metadata",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s nowplaying.txt                     # Convert and write rt/rtplus/prefix files
  %(prog)s nowplaying.txt --print             # Print the three strings instead
  %(prog)s --text "Queen␟Bohemian Rhapsody"   # Convert a literal record
  %(prog)s records.txt --batch -o out.csv     # One record per line, CSV output
  %(prog)s --init-config rdstext.yaml         # Write a config template
        """
    )

    parser.add_argument(
        "input",
        nargs="?",
        type=Path,
        help="Playout file holding the current record (default: io.input_file)"
    )

    parser.add_argument(
        "--text",
        type=str,
        help="Process this raw record instead of reading a file"
    )

    parser.add_argument(
        "--batch",
        action="store_true",
        help="Treat INPUT as one record per line and write a CSV report"
    )

    parser.add_argument(
        "--output", "-o",
        type=Path,
        help="CSV report path for --batch (default: stdout)"
    )

    parser.add_argument(
        "--output-dir",
        type=Path,
        help="Directory for the rt/rtplus/prefix files (default: io.output_dir)"
    )

    parser.add_argument(
        "--print",
        dest="print_only",
        action="store_true",
        help="Print the outputs instead of writing files"
    )

    parser.add_argument(
        "--ascii-safe",
        action="store_true",
        default=None,
        help="Restrict all outputs to printable ASCII"
    )

    parser.add_argument(
        "--transliterate",
        action="store_true",
        default=None,
        help="Transliterate Cyrillic/Greek and keep Latin scripts only"
    )

    parser.add_argument(
        "--language",
        type=str,
        help="Prefix language code (default: prefix.language)"
    )

    parser.add_argument(
        "--delimiter",
        type=str,
        help="Delimiter: 'unit', 'tab' or a custom string of 1-5 characters"
    )

    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to config file (default: ./{DEFAULT_CONFIG_NAME} if present)"
    )

    parser.add_argument(
        "--init-config",
        type=Path,
        metavar="PATH",
        help="Write a configuration template to PATH and exit"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )

    return parser.parse_args(argv)


def apply_arguments(config: dict, args: argparse.Namespace) -> dict:
    """Overlay command line switches on the loaded configuration."""
    text = config['text']
    if args.ascii_safe:
        text['ascii_safe'] = True
    if args.transliterate:
        text['transliterate'] = True
    if args.delimiter:
        key = args.delimiter.lower()
        if key in (DelimiterKey.UNIT.value, DelimiterKey.TAB.value):
            text['delimiter_key'] = key
        else:
            text['delimiter_key'] = DelimiterKey.CUSTOM.value
            text['delimiter_custom'] = args.delimiter
    if args.language:
        config['prefix']['language'] = args.language
    return config


def print_bundle(bundle: OutputBundle) -> None:
    print(f"Prefix: {bundle.prefix}")
    print(f"RT:     {bundle.rt}")
    print(f"RT+:    {bundle.rt_plus}")


def run_batch(pipeline: RdsTextPipeline, input_path: Path, output: Optional[Path], max_workers: int, logger) -> int:
    records = read_records(input_path)
    logger.info(f"Processing {len(records)} records with {max_workers} workers")
    results = pipeline.process_many(records, max_workers=max_workers)

    rows = []
    for index, result in enumerate(results, 1):
        rows.append([result.raw, result.bundle.prefix, result.bundle.rt, result.bundle.rt_plus])
        log_processing_progress(index, len(results), logger)

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        with open(output, 'w', newline='', encoding='utf-8') as f:
            writer = csv.writer(f)
            writer.writerow(['raw', 'prefix', 'rt', 'rtplus'])
            writer.writerows(rows)
        logger.info(f"Wrote batch report: {output}")
    else:
        writer = csv.writer(sys.stdout)
        writer.writerow(['raw', 'prefix', 'rt', 'rtplus'])
        writer.writerows(rows)

    empty = sum(1 for result in results if result.bundle.is_empty)
    logger.info(f"Batch complete: {len(results) - empty} broadcastable, {empty} empty")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    try:
        args = parse_arguments(argv)

        if args.init_config:
            write_text_atomic(args.init_config, get_config_template())
            print(f"Configuration template written to: {args.init_config}")
            return 0

        config_path = args.config
        if config_path is None and Path(DEFAULT_CONFIG_NAME).exists():
            config_path = Path(DEFAULT_CONFIG_NAME)
        config = apply_arguments(load_config(config_path), args)

        log_level = "DEBUG" if args.verbose else config['logging']['level']
        log_file = Path(config['logging']['file']).expanduser() if config['logging']['file'] else None
        logger = setup_logging(log_level, log_file, fmt=config['logging']['format'])

        normalization = to_normalization_config(config)
        pipeline = RdsTextPipeline(normalization, prefix_language=config['prefix']['language'])

        input_path = args.input or Path(config['io']['input_file'])

        if args.batch:
            if args.text is not None:
                raise ConfigurationError("--batch cannot be combined with --text")
            return run_batch(
                pipeline, input_path, args.output, config['concurrency']['max_workers'], logger
            )

        raw = args.text if args.text is not None else read_raw_record(input_path, normalization.delimiter)
        result = pipeline.process_detailed(raw)
        bundle = result.bundle

        if args.print_only or (args.text is not None and args.output_dir is None):
            print_bundle(bundle)
            return 0

        output_dir = args.output_dir or Path(config['io']['output_dir'])
        names = OutputNames(
            rt=config['io']['rt_file'],
            rt_plus=config['io']['rtplus_file'],
            prefix=config['io']['prefix_file'],
        )
        written = write_outputs(bundle, output_dir, names)
        logger.info(f"RT: {bundle.rt!r}")
        logger.debug(f"Wrote {', '.join(str(path) for path in written.values())}")
        return 0

    except KeyboardInterrupt:
        print("\nOperation cancelled by user.")
        return 1
    except RdsTextError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        try:
            error_msg = str(e)
        except (UnicodeDecodeError, UnicodeEncodeError):
            error_msg = repr(e).encode('utf-8', errors='replace').decode('utf-8')

        print(f"Unexpected error: {error_msg}", file=sys.stderr)
        return 2


if __name__ == "__main__":
    sys.exit(main())
