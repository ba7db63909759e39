"""
Core modules for RDF to tabular conversion.

This package contains the pipeline building blocks:
- term_scanner: Quote-aware (and legacy naive) statement tokenizer
- statement_parser: N-Triples / N-Quads statement parsing
- line_source: UTF-8 line reader for plain and gzipped inputs
- tabular_encoder: Delimited record encoding and the output sink
- converter: Pipeline driver merging several inputs into one output
"""

from .converter import ConversionConfig, RdfTabularConverter, gather_input_files
from .errors import (
    ConfigurationError,
    CorruptInputError,
    EncodingError,
    InputNotFoundError,
    RdfTabularError,
    ScanError,
    ScanErrorKind,
    SinkError,
)
from .line_source import LineSource
from .statement_parser import Dialect, Statement, StatementParser
from .tabular_encoder import TabularEncoder, TabularSink

__all__ = [
    'ConversionConfig', 'RdfTabularConverter', 'gather_input_files',
    'ConfigurationError', 'CorruptInputError', 'EncodingError', 'InputNotFoundError', 'RdfTabularError',
    'ScanError', 'ScanErrorKind', 'SinkError',
    'LineSource', 'Dialect', 'Statement', 'StatementParser',
    'TabularEncoder', 'TabularSink',
]
