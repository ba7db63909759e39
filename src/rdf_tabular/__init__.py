"""Convert N-Triples / N-Quads files into semicolon-separated tables."""

__version__ = "0.1.0"
