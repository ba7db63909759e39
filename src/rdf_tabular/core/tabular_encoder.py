"""
Tabular Encoder

Renders statements as delimited records. The default dialect matches the
"north european Excel" CSV flavour: semicolon-separated, double-quoted only
where needed, LF line endings, no header row.

Example:
    <urn:a>;<urn:b>;"a;b"
"""

import csv
import io
import logging
import sys
from pathlib import Path
from typing import Iterable, Optional, TextIO, Union

from .errors import ConfigurationError, SinkError

logger = logging.getLogger(__name__)

DEFAULT_DELIMITER = ';'
DEFAULT_QUOTECHAR = '"'
DEFAULT_LINETERMINATOR = '\n'


class TabularEncoder:
    """Encodes rows of text fields as delimited records."""

    def __init__(self, delimiter: str = DEFAULT_DELIMITER,
                 quotechar: str = DEFAULT_QUOTECHAR,
                 lineterminator: str = DEFAULT_LINETERMINATOR):
        for name, value in (('delimiter', delimiter), ('quote character', quotechar)):
            if len(value) != 1 or value in '\r\n':
                raise ConfigurationError(f"Invalid {name}: {value!r}")
        if delimiter == quotechar:
            raise ConfigurationError("Delimiter and quote character must differ")

        self.delimiter = delimiter
        self.quotechar = quotechar
        self.lineterminator = lineterminator
        self._format = dict(
            delimiter=delimiter,
            quotechar=quotechar,
            lineterminator=lineterminator,
            quoting=csv.QUOTE_MINIMAL,
            doublequote=True,
        )
        self._buffer = io.StringIO()
        self._writer = csv.writer(self._buffer, **self._format)

    def encode(self, fields: Iterable[str]) -> str:
        """
        Encode one record, terminator included.

        A field is quoted only if it contains the delimiter, the quote
        character or a line break; embedded quote characters are doubled.
        """
        self._buffer.seek(0)
        self._buffer.truncate()
        self._writer.writerow(fields)
        return self._buffer.getvalue()

    def decode(self, record: str) -> list[str]:
        """Split an encoded record back into its fields."""
        reader = csv.reader(io.StringIO(record, newline=''), **self._format)
        return next(reader, [])


class TabularSink:
    """
    Exclusively owned output for encoded records.

    Use as a context manager: the stream is flushed (and closed, unless it
    is stdout) on every exit path. Write, flush and close failures raise
    SinkError.
    """

    def __init__(self, stream: TextIO, encoder: Optional[TabularEncoder] = None,
                 name: str = '<stdout>', owns_stream: bool = True):
        self.stream = stream
        self.encoder = encoder or TabularEncoder()
        self.name = name
        self.owns_stream = owns_stream
        self.rows_written = 0
        self.closed = False

    @classmethod
    def open(cls, path: Optional[Union[str, Path]] = None,
             encoder: Optional[TabularEncoder] = None) -> 'TabularSink':
        """Open a file sink, creating parent directories; stdout if `path` is None."""
        if path is None:
            return cls(sys.stdout, encoder, owns_stream=False)

        path = Path(path)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            stream = open(path, 'w', encoding='utf-8', newline='')
        except OSError as e:
            raise SinkError(f"Could not open output file {path}: {e}") from e
        return cls(stream, encoder, name=str(path))

    def write(self, fields: Iterable[str]):
        """Encode and write one record."""
        if self.closed:
            raise SinkError(f"Output {self.name} is already closed")
        try:
            self.stream.write(self.encoder.encode(fields))
        except OSError as e:
            raise SinkError(f"Could not write to {self.name}: {e}") from e
        self.rows_written += 1

    def close(self):
        """Flush and release the output. Safe to call more than once."""
        if self.closed:
            return
        self.closed = True
        try:
            self.stream.flush()
            if self.owns_stream:
                self.stream.close()
        except OSError as e:
            raise SinkError(f"Could not flush/close {self.name}: {e}") from e

    def __enter__(self) -> 'TabularSink':
        return self

    def __exit__(self, exc_type, exc, tb):
        if exc_type is None:
            self.close()
            return
        # Keep the original error; still report a failing close
        try:
            self.close()
        except SinkError as e:
            logger.error(f"{e} (while handling {exc_type.__name__})")
