"""
Statement Parser

Turns N-Triples / N-Quads lines into (subject, predicate, object) statements.

N-Triples format:
    subject predicate object .

N-Quads format:
    subject predicate object [graph] .

The graph term of N-Quads is recognized but never returned.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional

from .errors import ConfigurationError, ScanError
from .line_source import LineSource
from .term_scanner import COMMENT, naive_split, scan

logger = logging.getLogger(__name__)


class Dialect(Enum):
    """Line-oriented RDF serialization of the input."""
    NTRIPLES = "nt"
    NQUADS = "nq"

    @property
    def term_count(self) -> int:
        """Terms per statement, counting the optional N-Quads graph."""
        return 4 if self is Dialect.NQUADS else 3

    @classmethod
    def from_name(cls, name: str) -> 'Dialect':
        """Look up a dialect by its format name ("nt" or "nq")."""
        try:
            return cls(name)
        except ValueError:
            known = ', '.join(d.value for d in cls)
            raise ConfigurationError(
                f"Unknown input format: {name!r} (expected one of: {known})"
            ) from None


@dataclass(frozen=True)
class Statement:
    """One RDF statement; terms are kept exactly as written in the source."""
    subject: str
    predicate: str
    object: str

    def fields(self) -> list[str]:
        """Terms in output column order."""
        return [self.subject, self.predicate, self.object]


def is_skippable(line: str) -> bool:
    """True for blank lines and comment lines."""
    stripped = line.strip()
    return not stripped or stripped.startswith(COMMENT)


class StatementParser:
    """Parses statement lines of one fixed dialect."""

    def __init__(self, dialect: Dialect = Dialect.NTRIPLES, naive: bool = False,
                 allow_trailing_comments: bool = False,
                 diagnostics: Optional[logging.Logger] = None):
        """
        Initialize parser.

        Args:
            dialect: Input dialect; fixed for the lifetime of the parser.
            naive: Use the legacy space-splitting instead of the
                   quote-aware scanner.
            allow_trailing_comments: Accept `# comment` after a statement's
                                     terminator.
            diagnostics: Logger for skipped lines. Defaults to this
                         module's logger.
        """
        self.dialect = dialect
        self.naive = naive
        self.allow_trailing_comments = allow_trailing_comments
        self.log = diagnostics or logger
        self.lines_skipped = 0

    def parse(self, line: str, line_number: Optional[int] = None) -> Optional[Statement]:
        """
        Parse a single statement line.

        Returns:
            Statement, or None if the line is blank or a comment.

        Raises:
            ScanError: If the line is malformed. The error carries
                       `line_number` when one is given.
        """
        if is_skippable(line):
            return None

        try:
            if self.naive:
                spans = naive_split(line, self.dialect.term_count)
            else:
                spans = scan(line, self.dialect.term_count,
                             allow_comment=self.allow_trailing_comments)
        except ScanError as e:
            e.line_number = line_number
            raise

        subject, predicate, obj = (line[start:end] for start, end in spans[:3])
        return Statement(subject=subject, predicate=predicate, object=obj)

    def read_next(self, source: LineSource) -> Optional[Statement]:
        """
        Pull lines from `source` until one holds a statement.

        Returns:
            The next Statement, or None once the source is exhausted.
        """
        while True:
            line = source.next_line()
            if line is None:
                return None

            statement = self.parse(line, source.line_number)
            if statement is not None:
                return statement
            self.lines_skipped += 1
            self.log.debug(f"Skipping line {source.line_number} of {source.source_name}")

    def statements(self, source: LineSource) -> Iterator[Statement]:
        """Iterate over all statements of `source`."""
        while True:
            statement = self.read_next(source)
            if statement is None:
                return
            yield statement
