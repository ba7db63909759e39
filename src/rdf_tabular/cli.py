#!/usr/bin/env python3
"""
RDF to CSV

Convert N-Triples / N-Quads files into a single semicolon-separated file
with one row (subject;predicate;object) per statement.

Usage:
    # Convert one file to stdout
    rdf-to-csv -i data/dump.nt

    # Merge a directory of N-Quads files into one CSV
    rdf-to-csv -i data/quads/ -f nq -o data/processed/statements.csv

    # Read from stdin
    zcat dump.nt.gz | rdf-to-csv > statements.csv
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import orjson

from .core.converter import ConversionConfig, RdfTabularConverter, gather_input_files
from .core.errors import InputNotFoundError, RdfTabularError
from .core.tabular_encoder import DEFAULT_DELIMITER, DEFAULT_QUOTECHAR, TabularSink

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_NO_INPUT = 2


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='rdf-to-csv',
        description="Convert N-Triples / N-Quads files into one delimited file"
    )
    parser.add_argument(
        '--input', '-i',
        type=Path,
        help='Input file or directory (default: stdin)'
    )
    parser.add_argument(
        '--output-file', '-o',
        type=Path,
        help='Output file (default: stdout)'
    )
    parser.add_argument(
        '--input-format', '-f',
        default='nt',
        help='Input format: nt (N-Triples) or nq (N-Quads)'
    )
    parser.add_argument(
        '--naive',
        action='store_true',
        help='Legacy space splitting (garbles literals containing spaces)'
    )
    parser.add_argument(
        '--allow-trailing-comments',
        action='store_true',
        help="Accept '# comment' after a statement's terminating '.'"
    )
    parser.add_argument(
        '--delimiter',
        default=DEFAULT_DELIMITER,
        help=f'Field delimiter (default: {DEFAULT_DELIMITER!r})'
    )
    parser.add_argument(
        '--quote-char',
        default=DEFAULT_QUOTECHAR,
        help=f'Quote character (default: {DEFAULT_QUOTECHAR!r})'
    )
    parser.add_argument(
        '--progress',
        action='store_true',
        help='Show a progress bar per input file'
    )
    parser.add_argument(
        '--stats',
        type=Path,
        help='Write conversion statistics as JSON to this file'
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument(
        '--verbose', '-v',
        action='store_true',
        help='Debug logging'
    )
    verbosity.add_argument(
        '--quiet', '-q',
        action='store_true',
        help='Only log warnings and errors'
    )
    return parser


def configure_logging(verbose: bool = False, quiet: bool = False):
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING

    # stdout carries the CSV output
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(levelname)s - %(message)s',
        stream=sys.stderr,
    )


def write_stats(path: Path, stats: dict):
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        f.write(orjson.dumps(stats, option=orjson.OPT_INDENT_2))


def main(argv: Optional[list[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    configure_logging(args.verbose, args.quiet)

    config = ConversionConfig(
        input_format=args.input_format,
        naive=args.naive,
        allow_trailing_comments=args.allow_trailing_comments,
        delimiter=args.delimiter,
        quotechar=args.quote_char,
        show_progress=args.progress,
    )

    try:
        converter = RdfTabularConverter(config)
        input_files = gather_input_files(args.input) if args.input else None

        with TabularSink.open(args.output_file, converter.create_encoder()) as sink:
            if input_files is not None:
                logger.info(f"Converting {len(input_files)} file(s)")
                converter.convert_and_merge(input_files, sink)
            else:
                converter.convert_stream(sys.stdin.buffer, sink)

        stats = converter.get_stats()
        logger.info(f"Stats: {stats}")
        if args.stats:
            write_stats(args.stats, stats)

    except InputNotFoundError as e:
        logger.error(str(e))
        return EXIT_NO_INPUT
    except (RdfTabularError, OSError) as e:
        logger.error(f"Execution failed: {e}")
        return EXIT_FAILED

    return EXIT_OK


if __name__ == '__main__':
    sys.exit(main())
