"""
OpenAPI Scoper - Carve self-contained, per-controller documents out of an OpenAPI specification.

This package provides pure functions for scoping a specification to one group (tag)
and for listing its groups, plus file, serving and CLI interfaces built on them.
"""

from .core import (
    OpenAPIScoperError,
    SchemaReferenceResolver,
    filter_document,
    list_groups,
)
from .scoper import OpenAPIScoper
from .endpoints import ScopedDocumentEndpoints

__version__ = "1.0.0"
__author__ = "OpenAPI Scoper Contributors"
__email__ = "support@example.com"

__all__ = [
    'OpenAPIScoper',
    'OpenAPIScoperError',
    'SchemaReferenceResolver',
    'ScopedDocumentEndpoints',
    'filter_document',
    'list_groups',
    '__version__',
]
