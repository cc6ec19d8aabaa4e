"""
Domain package for layoutbench.

Exports the record model and its generator. Keep this package free of
database access.
"""

from layoutbench.domain.generator import make_record
from layoutbench.domain.models import COLUMNS, DOCUMENT_COLUMN, Record

__all__ = [
    "COLUMNS",
    "DOCUMENT_COLUMN",
    "Record",
    "make_record",
]
