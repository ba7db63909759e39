"""
RDF to Tabular Converter

Drives the pipeline: Line Source -> Statement Parser -> Tabular Encoder.
Several input files are merged, in order, into one output.

Processing stops at the first malformed line or undecodable input; rows
written before the failure remain in the output.
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Iterable, Optional, Union

from tqdm import tqdm

from .errors import InputNotFoundError, ScanError
from .line_source import LineSource
from .statement_parser import Dialect, StatementParser
from .tabular_encoder import DEFAULT_DELIMITER, DEFAULT_QUOTECHAR, TabularEncoder, TabularSink

logger = logging.getLogger(__name__)


@dataclass
class ConversionConfig:
    """Settings for one conversion run."""
    input_format: str = Dialect.NTRIPLES.value  # "nt" or "nq"
    naive: bool = False  # legacy space splitting
    allow_trailing_comments: bool = False  # '# ...' after the terminator
    delimiter: str = DEFAULT_DELIMITER
    quotechar: str = DEFAULT_QUOTECHAR
    show_progress: bool = False


def gather_input_files(input_path: Union[str, Path],
                       diagnostics: Optional[logging.Logger] = None) -> list[Path]:
    """
    Resolve an input path into the files to convert.

    A directory is walked recursively; entries are visited in sorted order
    so the output is deterministic. Unreadable directories are skipped.

    Raises:
        InputNotFoundError: If the path does not exist or holds no files.
    """
    log = diagnostics or logger
    path = Path(input_path)
    if not path.exists():
        raise InputNotFoundError(f"Input not found: {path}")

    if not path.is_dir():
        return [path]

    def on_error(error: OSError):
        log.warning(f"Skipping unreadable path {error.filename}: {error.strerror}")

    input_files = []
    for dirpath, dirnames, filenames in os.walk(path, onerror=on_error):
        dirnames.sort()
        for filename in sorted(filenames):
            input_files.append(Path(dirpath) / filename)

    if not input_files:
        raise InputNotFoundError(f"No input files found in {path}")
    return input_files


class RdfTabularConverter:
    """Converts N-Triples / N-Quads input into delimited rows."""

    def __init__(self, config: Optional[ConversionConfig] = None,
                 diagnostics: Optional[logging.Logger] = None):
        """
        Initialize converter.

        Args:
            config: Conversion settings; defaults to N-Triples,
                    quote-aware scanning.
            diagnostics: Logger receiving progress and warnings. Defaults
                         to this module's logger.

        Raises:
            ConfigurationError: For an unknown input format.
        """
        self.config = config or ConversionConfig()
        self.log = diagnostics or logger
        self.dialect = Dialect.from_name(self.config.input_format)
        self.parser = StatementParser(
            self.dialect,
            naive=self.config.naive,
            allow_trailing_comments=self.config.allow_trailing_comments,
            diagnostics=self.log,
        )
        self.stats = {
            'files_converted': 0,
            'lines_read': 0,
            'lines_skipped': 0,
            'statements_written': 0,
        }

        if self.config.naive:
            self.log.warning("Naive splitting enabled: terms containing spaces "
                             "will be split incorrectly")

    def create_encoder(self) -> TabularEncoder:
        """Encoder configured with this run's delimiter and quote character."""
        return TabularEncoder(delimiter=self.config.delimiter,
                              quotechar=self.config.quotechar)

    def convert_and_merge(self, input_files: Iterable[Union[str, Path]], sink: TabularSink):
        """
        Convert each input file in turn, appending all rows to `sink`.

        Raises:
            InputNotFoundError: If an input file vanished.
            ScanError, EncodingError, CorruptInputError: On the first
                malformed line or unreadable input.
        """
        for input_file in input_files:
            self.log.info(f"Converting file {input_file}.")
            try:
                source = LineSource.open(input_file, diagnostics=self.log)
            except FileNotFoundError as e:
                raise InputNotFoundError(f"Input not found: {input_file}") from e

            with source:
                self.convert(source, sink)

        self.log.info(f"Wrote {self.stats['statements_written']:,} rows from "
                      f"{self.stats['files_converted']:,} file(s)")

    def convert_stream(self, stream: BinaryIO, sink: TabularSink,
                       source_name: str = '<stdin>'):
        """Convert a binary stream the caller keeps ownership of (e.g. stdin)."""
        with LineSource(stream, source_name=source_name, owns_stream=False,
                        diagnostics=self.log) as source:
            self.convert(source, sink)

    def convert(self, source: LineSource, sink: TabularSink):
        """Stream every statement of `source` into `sink`."""
        skipped_before = self.parser.lines_skipped
        progress = tqdm(desc=f"Converting {Path(source.source_name).name}",
                        unit="lines", dynamic_ncols=True, miniters=10000,
                        disable=not self.config.show_progress)
        try:
            with progress:
                while True:
                    statement = self.parser.read_next(source)
                    progress.update(source.line_number - progress.n)
                    if statement is None:
                        break
                    sink.write(statement.fields())
                    self.stats['statements_written'] += 1
        except ScanError as e:
            if e.source is None:
                e.source = source.source_name
            raise
        finally:
            self.stats['lines_read'] += source.line_number
            self.stats['lines_skipped'] += self.parser.lines_skipped - skipped_before

        self.stats['files_converted'] += 1
        self.log.debug(f"Read {source.line_number:,} lines from {source.source_name}")

    def get_stats(self) -> dict:
        """Get conversion statistics."""
        return self.stats.copy()
