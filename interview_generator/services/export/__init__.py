"""
Export encoding package.

- encoder.py: table/format/record validation and the five encodings
"""

from .encoder import ExportEncoder, EncodedExport, CONTENT_TYPES, DEFAULT_FORMAT

__all__ = [
    'ExportEncoder',
    'EncodedExport',
    'CONTENT_TYPES',
    'DEFAULT_FORMAT',
]
