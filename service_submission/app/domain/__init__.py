"""
Domain package for the Submission client.

Defines the document wire schema and the product-group catalog.
"""

from .schema import (
    Document,
    DocumentCreateRequest,
    DocumentDescription,
    DocumentFormat,
    DocumentType,
    Product,
    ProductGroup,
    ProductionType,
)

__all__ = [
    "Document",
    "DocumentCreateRequest",
    "DocumentDescription",
    "DocumentFormat",
    "DocumentType",
    "Product",
    "ProductGroup",
    "ProductionType",
]
