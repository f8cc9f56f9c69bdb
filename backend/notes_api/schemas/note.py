"""
Notes API: Note Request/Response Schemas
========================================

What:  Pydantic models for the notes resource.
How:   NoteCreate is the parse-and-validate boundary for POST /notes: a value
       either becomes a well-formed NoteCreate (title trimmed, non-empty) or
       is rejected before any connection is leased. NoteRead and NoteCreated
       shape the JSON the API returns.
"""

from datetime import datetime

from pydantic import BaseModel, Field, StrictStr, field_validator


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteCreate(BaseModel):
    """
    Validated command to create a note.

    Rules:
        - title must be a string (no coercion from numbers, lists, null)
        - leading/trailing whitespace is stripped; inner whitespace is kept
        - the stripped title must be non-empty
    """
    title: StrictStr = Field(description="Note title; stored trimmed")

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("title is required")
        return stripped


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteRead(BaseModel):
    """
    What:  A stored note as returned by GET /notes.
    """
    id: int = Field(description="Server-assigned identity")
    title: str = Field(description="Trimmed note title")
    created_at: datetime = Field(description="Insertion time (ISO 8601)")

    model_config = {"from_attributes": True}


class NoteCreated(BaseModel):
    """
    What:  Result of POST /notes.

    created_at is not included: the insert is not followed by a read-back,
    the timestamp shows up in later listings.
    """
    id: int = Field(description="Newly assigned identity")
    title: str = Field(description="The title as persisted (trimmed)")
