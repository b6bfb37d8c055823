"""
Notes API - Pydantic Request/Response Schemas
==============================================

What:  The JSON contract of the HTTP API.
How:   FastAPI validates request bodies against NoteIn and serializes
       NoteOut / HealthResponse / ErrorResponse on the way out.

Wire format for a note:
    {"Id": "<uuid>", "Title": "...", "Text": "..."}

Request bodies:
    - "Title"/"Text" (or lowercase "title"/"text") are read
    - a missing field or JSON null becomes ""
    - anything else, including a client-sent "Id", is ignored
    - a non-string Title/Text is rejected (400)
"""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from notes_api.models.note import Note


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class NoteIn(BaseModel):
    """Body of POST /notes and PUT /notes/{id}."""

    title: Optional[str] = Field(
        default="",
        validation_alias=AliasChoices("Title", "title"),
        description="Note title (free-form)",
    )
    text: Optional[str] = Field(
        default="",
        validation_alias=AliasChoices("Text", "text"),
        description="Note body (free-form)",
    )

    model_config = ConfigDict(extra="ignore")

    @field_validator("title", "text")
    @classmethod
    def null_as_empty(cls, v: Optional[str]) -> str:
        return v if v is not None else ""


# ══════════════════════════════════════════════════════════════════════════
# Response Models
# ══════════════════════════════════════════════════════════════════════════


class NoteOut(BaseModel):
    """A stored note as returned by the API."""

    id: str = Field(alias="Id", description="Unique note identifier (UUID)")
    title: str = Field(alias="Title", description="Note title")
    text: str = Field(alias="Text", description="Note body")

    # populate_by_name: built from Note attributes (id/title/text), dumped as Id/Title/Text
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    @classmethod
    def from_note(cls, note: Note) -> "NoteOut":
        return cls.model_validate(note)


class HealthResponse(BaseModel):
    """Body of GET /api/health."""

    ok: bool = Field(default=True, description="Always true while the process serves requests")


class ErrorResponse(BaseModel):
    """
    Standardized error body for all API errors.

    Fields:
        error: Machine-readable error code (e.g. "validation_error", "not_found")
        message: Human-readable description
        details: Optional extra context (e.g. which field failed validation)
        request_id: Correlation ID for tracing this error in server logs
    """

    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")
