"""
Domain models for layoutbench.

Defines the synthetic record stored under both layouts: as a single `jsonb`
document in column `j`, and as one typed column per field. The column order
below is the order used by every typed-column statement and projection.
"""
from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, Optional, Tuple

from pydantic import BaseModel, Field

# Typed columns, in select/insert order.
COLUMNS: Tuple[str, ...] = (
    "id",
    "name",
    "status",
    "last_updated_at",
    "last_modified_at",
    "num",
    "num2",
    "updated_at",
    "created_at",
    "jumbled_at",
    "secret_code",
    "entries",
)

DOCUMENT_COLUMN = "j"


class Record(BaseModel):
    """
    Representation of a single row in the seed and scratch tables.

    Required fields default to zero values so a narrow read can build a
    Record from the selected columns alone. Timestamps are naive UTC, matching
    `timestamp without time zone`.
    """

    id: int = Field(0, description="Natural key; basis of every derived value.")
    name: str = Field("", description="'MyName:<id>'.")
    status: str = Field("", description="'MyStatus:<id>'.")
    last_updated_at: Optional[datetime] = Field(None)
    last_modified_at: Optional[datetime] = Field(None)
    num: Optional[int] = Field(None, description="id + 7.")
    num2: Optional[int] = Field(None, description="id + 7.")
    updated_at: Optional[datetime] = Field(None)
    created_at: Optional[datetime] = Field(None)
    jumbled_at: Optional[datetime] = Field(None)
    secret_code: str = Field("", description="'MyCode:<id>'.")
    entries: int = Field(0, description="id + 10.")

    model_config = {
        "frozen": True,
        "populate_by_name": True,
        "arbitrary_types_allowed": False,
    }

    def to_document(self) -> Dict[str, Any]:
        """Render the record as the JSON object stored in the document column."""
        return self.model_dump(mode="json")

    def column_values(self) -> Tuple[Any, ...]:
        """Field values in `COLUMNS` order, for typed-column inserts."""
        return tuple(getattr(self, column) for column in COLUMNS)


__all__ = ["COLUMNS", "DOCUMENT_COLUMN", "Record"]
