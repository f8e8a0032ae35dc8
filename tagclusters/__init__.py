"""Tag-cluster classification and idempotent batched migrations for RDF triples."""

__version__ = "0.1.0"
