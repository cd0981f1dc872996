from sqlalchemy import JSON, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from guildhall.database import Base


class Document(Base):
    """One schemaless record of the document store.

    ``path`` is the full document path ("servers/<id>",
    "channels/<cid>/messages/<mid>"); ``collection`` is everything before the
    last segment so a whole (sub)collection can be listed with one indexed
    lookup.
    """

    __tablename__ = "documents"

    # Insertion order, used as the tie-breaker when ordering by a field
    id = Column(Integer, primary_key=True, autoincrement=True)
    path = Column(String(500), unique=True, index=True, nullable=False)
    collection = Column(String(400), index=True, nullable=False)
    doc_id = Column(String(200), nullable=False)
    data = Column(JSON, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
