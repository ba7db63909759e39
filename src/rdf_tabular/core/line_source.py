"""
Line Source

Reads logical lines from a byte stream (plain or gzipped file, or stdin),
decoding each one strictly as UTF-8.
"""

import gzip
import logging
import zlib
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Union

from .errors import CorruptInputError, EncodingError

logger = logging.getLogger(__name__)


class LineSource:
    """Lazy, finite sequence of decoded lines from one input."""

    def __init__(self, stream: BinaryIO, source_name: str = '<stdin>',
                 owns_stream: bool = True,
                 diagnostics: Optional[logging.Logger] = None):
        """
        Args:
            stream: Binary stream to read from.
            source_name: Name used in diagnostics.
            owns_stream: Whether close() closes `stream`. Pass False for
                         stdin.
            diagnostics: Logger for close failures. Defaults to this
                         module's logger.
        """
        self.stream = stream
        self.source_name = source_name
        self.owns_stream = owns_stream
        self.log = diagnostics or logger
        self.line_number = 0
        self.exhausted = False

    @classmethod
    def open(cls, path: Union[str, Path],
             diagnostics: Optional[logging.Logger] = None) -> 'LineSource':
        """Open a file, transparently decompressing *.gz files."""
        path = Path(path)
        if path.suffix == '.gz':
            stream = gzip.open(path, 'rb')
        else:
            stream = open(path, 'rb')
        return cls(stream, source_name=str(path), diagnostics=diagnostics)

    def next_line(self) -> Optional[str]:
        """
        Return the next line without its line break, or None at the end.

        Raises:
            EncodingError: If the line is not valid UTF-8.
            CorruptInputError: If compressed input is truncated or damaged.

            The source is exhausted after either error.
        """
        if self.exhausted:
            return None

        try:
            raw = self.stream.readline()
        except (EOFError, zlib.error, gzip.BadGzipFile) as e:
            self.exhausted = True
            raise CorruptInputError(
                f"corrupt compressed input: {e}",
                source=self.source_name,
                line_number=self.line_number + 1,
            ) from e

        if not raw:
            self.exhausted = True
            return None

        self.line_number += 1
        try:
            line = raw.decode('utf-8')
        except UnicodeDecodeError as e:
            self.exhausted = True
            raise EncodingError(
                f"invalid UTF-8 at byte {e.start}: {raw[e.start:e.end]!r}",
                source=self.source_name,
                line_number=self.line_number,
            ) from e

        return line.rstrip('\r\n')

    def __iter__(self) -> Iterator[str]:
        while True:
            line = self.next_line()
            if line is None:
                return
            yield line

    def close(self):
        """Close the underlying stream; failures are logged and ignored."""
        self.exhausted = True
        if not self.owns_stream:
            return
        try:
            self.stream.close()
        except OSError as e:
            self.log.error(f"Could not close reader for {self.source_name}: {e}")

    def __enter__(self) -> 'LineSource':
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
