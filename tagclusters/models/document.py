"""Document model."""
from sqlalchemy import Column, Integer, String, Text

from tagclusters.core.database import Base


class Document(Base):
    """Source document whose text lives in a file relative to the working directory."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True)
    doc_id = Column(String(255), nullable=False)
    file_path = Column(String(1000), nullable=False)
    full_text = Column(Text)  # added by migration
