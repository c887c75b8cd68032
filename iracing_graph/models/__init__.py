"""Pydantic models for iRacing records.

Each entity moves through three shapes:
- Ingestion: the raw upstream record, strictly typed, unknown fields ignored
- Creation: the subset of fields written to the graph
- Persisted: the creation fields plus ``id`` and audit timestamps
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class IngestionModel(BaseModel):
    """Base for raw upstream records."""
    model_config = ConfigDict(strict=True, extra="ignore")


class IngestionTag(BaseModel):
    """Base for tag objects nested in upstream records.

    Not strict: strict models only accept instances for nested fields,
    and upstream tags always arrive as plain dicts.
    """
    model_config = ConfigDict(extra="ignore")


class Persisted(BaseModel):
    """Fields every stored node carries."""
    id: int = Field(description="Upstream identifier")
    created_at: Optional[datetime] = Field(None, description="When the node was created")
    updated_at: Optional[datetime] = Field(None, description="When the node was last written")


class PropertyDTO(BaseModel):
    """A shared property attached to an entity."""
    type: str = Field(description="Attribute name, e.g. rain_enabled")
    name: str = Field(description="Display name, e.g. Rain Enabled")
