# src/ragindex/models/document.py
"""Document data model."""

from pydantic import BaseModel, ConfigDict


class Document(BaseModel):
    """Raw content handed over by a content loader."""

    model_config = ConfigDict(frozen=True)

    source_id: str
    raw_text: str
