"""
Term Scanner

Splits one N-Triples / N-Quads statement line into its top-level terms
without a full grammar parser. Only term boundaries are determined; escape
sequences are left untouched.

Statement line format:
    subject predicate object [graph] .

Example:
    <http://example.org/s> <http://example.org/p> "a literal with spaces"@en .

Two strategies are provided:
- scan(): quote-aware, never splits inside an IRI reference or a literal.
- naive_split(): the legacy first/second/last-space split, kept for
  byte-for-byte parity with older output. It garbles any term that contains
  a space.
"""

import regex as re
from typing import List, Tuple

from .errors import ScanError, ScanErrorKind

WHITESPACE = ' \t'
TERMINATOR = '.'
ESCAPE = '\\'
COMMENT = '#'

# Language tag following a literal, e.g. "colour"@en-GB
LANGUAGE_TAG_PATTERN = re.compile(r'[a-zA-Z]+(?:-[a-zA-Z0-9]+)*')

Span = Tuple[int, int]

_ORDINALS = ('subject', 'predicate', 'object', 'graph')


def _skip_whitespace(line: str, pos: int) -> int:
    while pos < len(line) and line[pos] in WHITESPACE:
        pos += 1
    return pos


def _find_unescaped(line: str, pos: int, closer: str) -> int:
    """Index of the first `closer` at or after `pos` not preceded by an escape, or -1."""
    while pos < len(line):
        char = line[pos]
        if char == ESCAPE:
            pos += 2
            continue
        if char == closer:
            return pos
        pos += 1
    return -1


def _scan_iri(line: str, start: int) -> int:
    end = _find_unescaped(line, start + 1, '>')
    if end == -1:
        raise ScanError(ScanErrorKind.UNTERMINATED_IRI,
                        f"no closing '>' for IRI {line[start:start + 40]!r}",
                        column=start)
    return end + 1


def _scan_blank_node(line: str, start: int) -> int:
    if not line.startswith('_:', start):
        raise ScanError(ScanErrorKind.MALFORMED_LINE,
                        "blank node label must start with '_:'", column=start)

    # A '.' ends the label only when it is the statement terminator
    pos = start + 2
    while pos < len(line):
        char = line[pos]
        if char in WHITESPACE:
            break
        if char == TERMINATOR and (pos + 1 == len(line) or line[pos + 1] in WHITESPACE):
            break
        pos += 1

    if pos == start + 2:
        raise ScanError(ScanErrorKind.MALFORMED_LINE, "empty blank node label",
                        column=start)
    return pos


def _scan_literal(line: str, start: int) -> int:
    end = _find_unescaped(line, start + 1, '"')
    if end == -1:
        raise ScanError(ScanErrorKind.UNTERMINATED_LITERAL,
                        f"no closing quote for literal {line[start:start + 40]!r}",
                        column=start)
    pos = end + 1

    if line.startswith('^^', pos):
        if not line.startswith('<', pos + 2):
            raise ScanError(ScanErrorKind.MALFORMED_LINE,
                            "datatype after '^^' must be an IRI reference",
                            column=pos)
        return _scan_iri(line, pos + 2)

    if line.startswith('@', pos):
        match = LANGUAGE_TAG_PATTERN.match(line, pos + 1)
        if match is None:
            raise ScanError(ScanErrorKind.MALFORMED_LINE,
                            "invalid language tag after '@'", column=pos)
        return match.end()

    return pos


def _scan_term(line: str, start: int, index: int) -> int:
    """Return the end offset (exclusive) of the term starting at `start`."""
    char = line[start]

    if char == '<':
        return _scan_iri(line, start)
    if char == '_':
        return _scan_blank_node(line, start)
    if char == '"':
        if index == 3:
            raise ScanError(ScanErrorKind.MALFORMED_LINE,
                            "graph label must be an IRI or a blank node",
                            column=start)
        return _scan_literal(line, start)

    raise ScanError(ScanErrorKind.MALFORMED_LINE,
                    f"unexpected {char!r} at start of {_ORDINALS[index]}",
                    column=start)


def _expect_terminator(line: str, pos: int, after: str, allow_comment: bool) -> None:
    if pos >= len(line):
        raise ScanError(ScanErrorKind.MISSING_TERMINATOR,
                        f"line ends after {after} without '.'", column=pos)
    if line[pos] != TERMINATOR:
        raise ScanError(ScanErrorKind.MISSING_TERMINATOR,
                        f"expected '.' after {after}, found {line[pos]!r}",
                        column=pos)

    pos = _skip_whitespace(line, pos + 1)
    if pos < len(line) and not (allow_comment and line[pos] == COMMENT):
        raise ScanError(ScanErrorKind.MALFORMED_LINE,
                        f"unexpected {line[pos:pos + 20]!r} after terminator",
                        column=pos)


def scan(line: str, term_count: int, allow_comment: bool = False) -> List[Span]:
    """
    Locate the top-level terms of a statement line.

    Args:
        line: One statement line, without its line break.
        term_count: 3 for N-Triples, 4 for N-Quads. The fourth (graph)
                    term is optional.
        allow_comment: Accept a `# comment` after the terminator.

    Returns:
        (start, end) character offsets, one per term found. Always three
        spans for N-Triples; three or four for N-Quads.

    Raises:
        ScanError: If the line is not a well-formed statement.
    """
    if term_count not in (3, 4):
        raise ValueError(f"term_count must be 3 or 4, not {term_count}")

    spans: List[Span] = []
    pos = _skip_whitespace(line, 0)

    for index in range(term_count):
        is_graph = index == 3

        if pos >= len(line):
            if is_graph:
                break
            raise ScanError(ScanErrorKind.TOO_FEW_TERMS,
                            f"expected at least 3 terms, found {index}",
                            column=pos)

        if line[pos] == TERMINATOR:
            if is_graph:
                # No named graph
                break
            raise ScanError(ScanErrorKind.MALFORMED_LINE,
                            f"terminator found where {_ORDINALS[index]} expected",
                            column=pos)

        end = _scan_term(line, pos, index)
        if end < len(line) and line[end] not in WHITESPACE and line[end] != TERMINATOR:
            raise ScanError(ScanErrorKind.MALFORMED_LINE,
                            f"unexpected {line[end]!r} after {_ORDINALS[index]}",
                            column=end)

        spans.append((pos, end))
        pos = _skip_whitespace(line, end)

    _expect_terminator(line, pos, _ORDINALS[len(spans) - 1], allow_comment)
    return spans


def naive_split(line: str, term_count: int) -> List[Span]:
    """
    Legacy splitting on the first, second and last space.

    N-Triples: the object runs from the second space to the last '.',
    backed over any spaces. N-Quads: the object runs from the second space
    to the second-to-last space. The line is not trimmed first.

    Raises:
        ScanError: MALFORMED_LINE where the legacy split has no valid
                   positions to cut at.
    """
    first = line.find(' ')
    second = line.find(' ', first + 1) if first != -1 else -1
    if second == -1:
        raise ScanError(ScanErrorKind.MALFORMED_LINE,
                        "fewer than two spaces in line")

    if term_count == 3:
        object_end = line.rfind(TERMINATOR)
        while object_end > 0 and line[object_end - 1] == ' ':
            object_end -= 1
    else:
        last = line.rfind(' ')
        object_end = line.rfind(' ', 0, last)

    if object_end < second + 1:
        raise ScanError(ScanErrorKind.MALFORMED_LINE,
                        "no object between the second space and the line end")

    return [(0, first), (first + 1, second), (second + 1, object_end)]
