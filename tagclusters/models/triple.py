"""RDF triple model."""
from sqlalchemy import Column, Index, Integer, Text

from tagclusters.core.database import Base


class RdfTriple(Base):
    """Extracted fact with free-form tags and its derived cluster assignment."""

    __tablename__ = "rdf_triples"

    id = Column(Integer, primary_key=True)
    triple_tags = Column(Text)  # JSON list of tag strings
    top_cluster_ids = Column(Text)  # JSON list of cluster ids, added by migration

    __table_args__ = (Index("idx_top_cluster_ids", "top_cluster_ids"),)
