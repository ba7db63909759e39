"""
Tests for record encoding and the output sink.
"""

import io

import pytest

from rdf_tabular.core.errors import ConfigurationError, SinkError
from rdf_tabular.core.tabular_encoder import TabularEncoder, TabularSink


class BrokenStream:
    """Text stream failing on the named operations."""

    def __init__(self, *failing):
        self.failing = set(failing)
        self.written = []

    def write(self, text):
        if 'write' in self.failing:
            raise OSError("No space left on device")
        self.written.append(text)

    def flush(self):
        if 'flush' in self.failing:
            raise OSError("No space left on device")

    def close(self):
        if 'close' in self.failing:
            raise OSError("Bad file descriptor")


class TestEncode:
    def test_plain_fields(self):
        encoder = TabularEncoder()
        assert encoder.encode(['<urn:a>', '<urn:b>', '<urn:c>']) == '<urn:a>;<urn:b>;<urn:c>\n'

    def test_field_with_delimiter_is_quoted(self):
        encoder = TabularEncoder()
        assert encoder.encode(['a;b', 'x', 'y']) == '"a;b";x;y\n'

    def test_quote_character_is_doubled(self):
        encoder = TabularEncoder()
        assert encoder.encode(['<s>', '<p>', '"hi"']) == '<s>;<p>;"""hi"""\n'

    def test_field_with_newline_is_quoted(self):
        encoder = TabularEncoder()
        assert encoder.encode(['a\nb', 'c', 'd']) == '"a\nb";c;d\n'

    def test_rdf_escapes_pass_through(self):
        encoder = TabularEncoder()
        assert encoder.encode([r'<http://x/\u00E9>', '<p>', '_:b0']) == '<http://x/\\u00E9>;<p>;_:b0\n'

    def test_custom_delimiter(self):
        encoder = TabularEncoder(delimiter=',')
        assert encoder.encode(['a;b', 'c,d', 'e']) == 'a;b,"c,d",e\n'

    def test_consecutive_records_are_independent(self):
        encoder = TabularEncoder()
        encoder.encode(['a;b', 'c', 'd'])
        assert encoder.encode(['e', 'f', 'g']) == 'e;f;g\n'

    @pytest.mark.parametrize('fields', [
        ['<http://s>', '<http://p>', '"a;b"'],
        ['_:b0', '<p>', '"say ""hi"""@en'],
        ['<s>', '<p>', '"line one\nline two"'],
        ['', '<p>', '";"'],
    ])
    def test_decode_recovers_fields(self, fields):
        encoder = TabularEncoder()
        assert encoder.decode(encoder.encode(fields)) == fields

    @pytest.mark.parametrize('kwargs', [
        {'delimiter': ''},
        {'delimiter': ';;'},
        {'delimiter': '\n'},
        {'quotechar': "''"},
        {'delimiter': '"'},
    ])
    def test_invalid_settings(self, kwargs):
        with pytest.raises(ConfigurationError):
            TabularEncoder(**kwargs)


class TestTabularSink:
    def test_writes_records(self):
        stream = io.StringIO()
        with TabularSink(stream, owns_stream=False) as sink:
            sink.write(['<a>', '<b>', '<c>'])
            sink.write(['<d>', '<e>', '"f;g"'])
        assert stream.getvalue() == '<a>;<b>;<c>\n<d>;<e>;"""f;g"""\n'
        assert sink.rows_written == 2
        assert not stream.closed

    def test_open_creates_parent_directories(self, tmp_path):
        path = tmp_path / 'out' / 'nested' / 'statements.csv'
        with TabularSink.open(path) as sink:
            sink.write(['<a>', '<b>', '<c>'])
        assert sink.stream.closed
        assert path.read_text(encoding='utf-8') == '<a>;<b>;<c>\n'

    def test_open_without_path_uses_stdout(self, capsys):
        with TabularSink.open() as sink:
            sink.write(['<a>', '<b>', '<c>'])
        assert capsys.readouterr().out == '<a>;<b>;<c>\n'

    def test_open_unwritable_path(self, tmp_path):
        blocker = tmp_path / 'blocker'
        blocker.write_text('not a directory')
        with pytest.raises(SinkError, match='Could not open output file'):
            TabularSink.open(blocker / 'statements.csv')

    def test_write_failure(self):
        sink = TabularSink(BrokenStream('write'))
        with pytest.raises(SinkError, match='Could not write'):
            sink.write(['<a>', '<b>', '<c>'])
        assert sink.rows_written == 0

    def test_flush_failure_on_exit_is_fatal(self):
        with pytest.raises(SinkError, match='Could not flush/close'):
            with TabularSink(BrokenStream('flush')) as sink:
                sink.write(['<a>', '<b>', '<c>'])

    def test_close_failure_does_not_mask_original_error(self, caplog):
        with pytest.raises(KeyError):
            with TabularSink(BrokenStream('close'), name='out.csv'):
                raise KeyError('boom')
        assert 'Could not flush/close out.csv' in caplog.text

    def test_write_after_close(self):
        sink = TabularSink(io.StringIO())
        sink.close()
        sink.close()
        with pytest.raises(SinkError, match='already closed'):
            sink.write(['<a>', '<b>', '<c>'])
