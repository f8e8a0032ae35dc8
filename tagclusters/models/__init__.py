"""Database models."""
from tagclusters.models.document import Document
from tagclusters.models.triple import RdfTriple

__all__ = [
    "Document",
    "RdfTriple",
]
