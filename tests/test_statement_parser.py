"""
Tests for dialect selection and statement parsing.
"""

import dataclasses
import io
import logging

import pytest

from rdf_tabular.core.errors import ConfigurationError, ScanError, ScanErrorKind
from rdf_tabular.core.line_source import LineSource
from rdf_tabular.core.statement_parser import Dialect, Statement, StatementParser


def source_of(text: str) -> LineSource:
    return LineSource(io.BytesIO(text.encode('utf-8')), source_name='test.nt')


class TestDialect:
    def test_from_name(self):
        assert Dialect.from_name('nt') is Dialect.NTRIPLES
        assert Dialect.from_name('nq') is Dialect.NQUADS

    def test_term_count(self):
        assert Dialect.NTRIPLES.term_count == 3
        assert Dialect.NQUADS.term_count == 4

    @pytest.mark.parametrize('name', ['ttl', 'NT', ''])
    def test_unknown_format(self, name):
        with pytest.raises(ConfigurationError, match='Unknown input format'):
            Dialect.from_name(name)


class TestParse:
    """StatementParser.parse on single lines."""

    def test_ntriples_statement(self):
        parser = StatementParser(Dialect.NTRIPLES)
        statement = parser.parse('<urn:a> <urn:b> <urn:c> .')
        assert statement == Statement('<urn:a>', '<urn:b>', '<urn:c>')

    def test_nquads_graph_is_dropped(self):
        parser = StatementParser(Dialect.NQUADS)
        statement = parser.parse('<urn:a> <urn:b> "hi" <urn:g> .')
        assert statement.fields() == ['<urn:a>', '<urn:b>', '"hi"']

    def test_nquads_without_graph(self):
        parser = StatementParser(Dialect.NQUADS)
        statement = parser.parse('<urn:a> <urn:b> "a b" .')
        assert statement.object == '"a b"'

    @pytest.mark.parametrize('line', ['', '   \t', '# comment', '   # indented comment'])
    def test_blank_and_comment_lines(self, line):
        assert StatementParser().parse(line) is None

    def test_error_carries_line_number(self):
        with pytest.raises(ScanError) as exc_info:
            StatementParser().parse('<urn:a> <urn:b>', line_number=7)
        error = exc_info.value
        assert error.kind is ScanErrorKind.TOO_FEW_TERMS
        assert error.line_number == 7
        assert str(error).startswith('line 7: too few terms')

    def test_trailing_comments_opt_in(self):
        line = '<a> <b> <c> . # from dump 3'
        with pytest.raises(ScanError):
            StatementParser().parse(line)

        parser = StatementParser(allow_trailing_comments=True)
        assert parser.parse(line) == Statement('<a>', '<b>', '<c>')

    def test_naive_mode(self):
        parser = StatementParser(Dialect.NQUADS, naive=True)
        statement = parser.parse('<http://s> <http://p> "a b" .')
        assert statement.object == '"a'

    def test_statement_is_immutable(self):
        statement = Statement('<s>', '<p>', '<o>')
        with pytest.raises(dataclasses.FrozenInstanceError):
            statement.subject = '<x>'


class TestReadNext:
    """Pulling statements from a line source."""

    def test_skips_blank_and_comment_lines(self):
        source = source_of("# header\n\n<a> <b> <c> .\n")
        parser = StatementParser()

        statement = parser.read_next(source)
        assert statement == Statement('<a>', '<b>', '<c>')
        assert source.line_number == 3

        assert parser.read_next(source) is None
        assert parser.read_next(source) is None
        assert parser.lines_skipped == 2

    def test_skipped_lines_logged_to_given_logger(self, caplog):
        diagnostics = logging.getLogger('tests.parser')
        parser = StatementParser(diagnostics=diagnostics)

        with caplog.at_level(logging.DEBUG, logger='tests.parser'):
            list(parser.statements(source_of("# header\n<a> <b> <c> .\n")))

        assert [r.getMessage() for r in caplog.records if r.name == 'tests.parser'] == [
            'Skipping line 1 of test.nt',
        ]

    def test_statements_in_order(self):
        source = source_of("<a> <b> <c> .\n<d> <e> \"f g\" .\n")
        statements = list(StatementParser().statements(source))
        assert [s.object for s in statements] == ['<c>', '"f g"']

    def test_error_reports_source_line(self):
        source = source_of("<a> <b> <c> .\n# ok\n<urn:a> <urn:b>\n<x> <y> <z> .\n")
        parser = StatementParser()
        parser.read_next(source)

        with pytest.raises(ScanError) as exc_info:
            parser.read_next(source)
        assert exc_info.value.line_number == 3
